"""Command line entry point for the channel guide."""
from __future__ import annotations

import argparse
import locale
from pathlib import Path
from typing import Iterable

from . import __version__
from .app import ChannelGuideApp
from .config import CONFIG_PATH, load_config, save_config
from .logging_utils import configure_logging, get_logger
from .themes import CUSTOM_THEMES

log = get_logger(__name__)


def _sorted_theme_names() -> list[str]:
    """Return the bundled theme catalog in a consistent order."""

    return sorted(CUSTOM_THEMES)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse TV channels and their schedules")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="Path to configuration file (default: %(default)s)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Fetch channels from this URL instead of the configured endpoint",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override CHANNEL_GUIDE_LOG_LEVEL for this invocation",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help=(
            "Write logs to this file instead of the default or"
            " CHANNEL_GUIDE_LOG_FILE"
        ),
    )
    theme_names = ", ".join(_sorted_theme_names())
    parser.add_argument(
        "--theme",
        default=None,
        help=f"Application theme ({theme_names})",
    )
    parser.add_argument(
        "--list-themes",
        action="store_true",
        help="List available themes and exit.",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a configuration file with the current settings and exit.",
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    if args.list_themes:
        for theme_name in _sorted_theme_names():
            print(theme_name)
        return
    configure_logging(
        level=args.log_level,
        log_file=str(args.log_file) if args.log_file is not None else None,
    )
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        log.warning("Unable to apply the user's locale; sorting uses code point order")
    log.info("CLI invoked with config=%s", args.config)
    config = load_config(args.config)
    if args.api_url:
        config.api_url = args.api_url
    if args.theme:
        config.theme = args.theme
    if args.init_config:
        save_config(config, args.config)
        print(f"Configuration written to {args.config}")
        return
    app = ChannelGuideApp(config, config_path=args.config)
    log.info("Launching Textual application")
    try:
        app.run()
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received; exiting application")
        if app.is_running:
            app.exit()
        raise SystemExit(130) from None


if __name__ == "__main__":  # pragma: no cover
    main()
