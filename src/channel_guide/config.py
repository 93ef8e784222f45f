"""Configuration management for the channel guide."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .logging_utils import get_logger

CONFIG_PATH = Path.home() / ".config" / "channel_guide" / "config.yaml"
STORAGE_PATH = Path.home() / ".local" / "share" / "channel_guide" / "storage.json"
DEFAULT_API_URL = "https://contenthub-api.eco.astro.com.my/channel/all.json"
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_SEARCH_DEBOUNCE = 0.2

log = get_logger(__name__)


@dataclass(slots=True)
class AppConfig:
    """Top level application configuration."""

    api_url: str = DEFAULT_API_URL
    storage_path: Path = field(default_factory=lambda: STORAGE_PATH)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    search_debounce: float = DEFAULT_SEARCH_DEBOUNCE
    theme: Optional[str] = None


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _clean_scalar(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return value


def _parse_config(raw: str) -> dict[str, object]:
    """Parse JSON or flat ``key: value`` YAML into a dictionary."""

    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        pass
    else:
        return data if isinstance(data, dict) else {}

    result: dict[str, object] = {}
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, separator, value = stripped.partition(":")
        if not separator:
            log.warning("Ignoring malformed configuration line: %s", stripped)
            continue
        result[key.strip()] = _clean_scalar(value)
    return result


def _parse_seconds(value: object, *, name: str, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        log.warning("Ignoring invalid %s value %r", name, value)
        return default
    if seconds < 0:
        log.warning("Ignoring negative %s value %r", name, value)
        return default
    return seconds


def _dump_config(config: AppConfig) -> str:
    lines = [
        "api_url: " + config.api_url,
        "storage_path: " + str(config.storage_path),
        f"request_timeout: {config.request_timeout:g}",
        f"search_debounce: {config.search_debounce:g}",
    ]
    if config.theme:
        lines.append("theme: " + config.theme)
    lines.append("")
    return "\n".join(lines)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from *path* or return the defaults."""

    config_path = path or CONFIG_PATH
    if not config_path.exists():
        log.info("Configuration file missing at %s; using defaults", config_path)
        return AppConfig()
    log.debug("Loading configuration from %s", config_path)
    data = _parse_config(config_path.read_text(encoding="utf8"))

    config = AppConfig()
    api_url = data.get("api_url")
    if isinstance(api_url, str) and api_url.strip():
        candidate = api_url.strip()
        if candidate.startswith(("http://", "https://")):
            config.api_url = candidate
        else:
            log.warning("Ignoring api_url without http(s) scheme: %s", candidate)
    storage = data.get("storage_path")
    if isinstance(storage, str) and storage.strip():
        config.storage_path = Path(storage.strip()).expanduser()
    config.request_timeout = _parse_seconds(
        data.get("request_timeout"), name="request_timeout", default=DEFAULT_REQUEST_TIMEOUT
    )
    config.search_debounce = _parse_seconds(
        data.get("search_debounce"), name="search_debounce", default=DEFAULT_SEARCH_DEBOUNCE
    )
    theme = data.get("theme")
    if isinstance(theme, str) and theme.strip():
        config.theme = theme.strip()
    log.info("Loaded configuration from %s (api_url=%s)", config_path, config.api_url)
    return config


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    """Persist *config* to disk at *path*."""

    config_path = path or CONFIG_PATH
    _ensure_parent(config_path)
    config_path.write_text(_dump_config(config), encoding="utf8")
    log.info("Configuration saved to %s", config_path)


__all__ = [
    "AppConfig",
    "CONFIG_PATH",
    "DEFAULT_API_URL",
    "STORAGE_PATH",
    "load_config",
    "save_config",
]
