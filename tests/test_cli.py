"""Tests for the command line interface helpers."""
from __future__ import annotations

from pathlib import Path

import pytest

from channel_guide import cli
from channel_guide.config import load_config
from channel_guide.themes import CUSTOM_THEMES


def test_help_lists_all_themes(capsys: pytest.CaptureFixture[str]) -> None:
    """The --theme help text should reflect the packaged theme catalog."""

    with pytest.raises(SystemExit):
        cli.parse_args(["--help"])

    help_text = capsys.readouterr().out
    for theme_name in sorted(CUSTOM_THEMES):
        assert theme_name in help_text


def test_list_themes_short_circuits_main(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """--list-themes should print the catalog without instantiating the app."""

    def _unexpected_app(*args, **kwargs):  # pragma: no cover - only used when failing
        raise AssertionError("ChannelGuideApp should not be constructed when listing themes")

    monkeypatch.setattr(cli, "ChannelGuideApp", _unexpected_app)

    cli.main(["--list-themes"])

    captured = capsys.readouterr().out.strip().splitlines()
    assert captured == sorted(CUSTOM_THEMES)


def test_init_config_writes_overrides(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """--init-config should persist CLI overrides and exit without the TUI."""

    def _unexpected_app(*args, **kwargs):  # pragma: no cover - sanity check
        raise AssertionError("ChannelGuideApp should not start when writing config")

    monkeypatch.setattr(cli.locale, "setlocale", lambda *args: "C")
    monkeypatch.setattr(cli, "ChannelGuideApp", _unexpected_app)
    config_path = tmp_path / "config.yaml"

    cli.main(
        [
            "--config",
            str(config_path),
            "--log-file",
            str(tmp_path / "guide.log"),
            "--api-url",
            "https://example.com/all.json",
            "--theme",
            "guide-day",
            "--init-config",
        ]
    )

    assert capsys.readouterr().out.strip() == f"Configuration written to {config_path}"
    loaded = load_config(config_path)
    assert loaded.api_url == "https://example.com/all.json"
    assert loaded.theme == "guide-day"


def test_main_launches_app_with_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    created: list[object] = []

    class DummyApp:
        def __init__(self, config, *, config_path) -> None:
            self.config = config
            self.config_path = config_path
            self.ran = False
            created.append(self)

        def run(self) -> None:
            self.ran = True

    monkeypatch.setattr(cli, "ChannelGuideApp", DummyApp)
    monkeypatch.setattr(cli.locale, "setlocale", lambda *args: "C")
    config_path = tmp_path / "config.yaml"

    cli.main(
        [
            "--config",
            str(config_path),
            "--log-file",
            str(tmp_path / "guide.log"),
            "--api-url",
            "http://localhost/all.json",
        ]
    )

    assert len(created) == 1
    app = created[0]
    assert app.ran is True
    assert app.config_path == config_path
    assert app.config.api_url == "http://localhost/all.json"
