"""Logging helpers for :mod:`channel_guide`."""

from __future__ import annotations

import logging
import os
import threading
import weakref
from collections import deque
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .log_viewer import LogViewer

__all__ = [
    "configure_logging",
    "get_log_file_path",
    "get_logger",
    "register_log_viewer",
]

_LOGGER_NAME = "channel_guide"
_ENV_LEVEL = "CHANNEL_GUIDE_LOG_LEVEL"
_ENV_FILE = "CHANNEL_GUIDE_LOG_FILE"
_DEFAULT_LOG_PATH = Path.home() / ".cache" / "channel_guide.log"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _create_formatter() -> logging.Formatter:
    return logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)


def _coerce_level(value: str) -> int:
    """Return a logging level derived from *value*."""

    normalized = value.strip().upper()
    if normalized.isdigit():
        level = int(normalized)
        if 0 <= level <= logging.CRITICAL:
            return level
    return getattr(logging, normalized, logging.INFO)


class _UILogHandler(logging.Handler):
    """Keep recent records and relay them to the in-app log viewer."""

    def __init__(self, *, capacity: int = 200) -> None:
        super().__init__()
        self._buffer: deque[str] = deque(maxlen=capacity)
        self._viewer: Optional[weakref.ReferenceType["LogViewer"]] = None
        self._lock = threading.RLock()

    @property
    def buffered(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._buffer)

    def set_viewer(self, viewer: Optional["LogViewer"]) -> None:
        with self._lock:
            self._viewer = weakref.ref(viewer) if viewer is not None else None
            messages = list(self._buffer)
        if viewer is not None:
            viewer.replace_messages(messages)

    def emit(self, record: logging.LogRecord) -> None:
        message = self.format(record)
        with self._lock:
            self._buffer.append(message)
            viewer_ref = self._viewer
        if viewer_ref is None:
            return
        viewer = viewer_ref()
        if viewer is None:
            return
        try:
            app = viewer.app
        except Exception:  # pragma: no cover - viewer detached from its app
            return
        try:
            app.call_from_thread(viewer.append_message, message)
        except RuntimeError:
            # Already on the app thread.
            viewer.append_message(message)
        except Exception:  # pragma: no cover - UI shutting down
            self.handleError(record)


def _configure_file_logging(
    logger: logging.Logger,
    formatter: logging.Formatter,
    level: int,
    destination: Optional[str],
) -> None:
    """Attach, replace or drop the file handler based on ``destination``."""

    existing: Optional[logging.Handler] = getattr(configure_logging, "_file_handler", None)
    if existing is not None:
        logger.removeHandler(existing)
        existing.close()
        configure_logging._file_handler = None  # type: ignore[attr-defined]

    if not destination:
        configure_logging._log_path = None  # type: ignore[attr-defined]
        return

    log_path = Path(destination).expanduser()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf8")
    except OSError:
        logger.warning("Failed to set up file logging at %s", log_path)
        configure_logging._log_path = None  # type: ignore[attr-defined]
        return

    file_handler.setFormatter(formatter)
    file_handler.setLevel(level)
    logger.addHandler(file_handler)
    configure_logging._file_handler = file_handler  # type: ignore[attr-defined]
    configure_logging._log_path = log_path  # type: ignore[attr-defined]
    logger.debug("File logging enabled at %s", log_path)


def configure_logging(
    *,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger on first use and apply overrides.

    The first call installs a stream handler, the in-app buffer handler and
    (unless disabled with an empty destination) a file handler. Later calls
    only adjust the level and, when given, the log file destination.
    """

    logger = logging.getLogger(_LOGGER_NAME)
    configured = getattr(configure_logging, "_configured", False)
    env_level = os.getenv(_ENV_LEVEL)
    env_file = os.getenv(_ENV_FILE)

    if level is not None:
        log_level = _coerce_level(level)
    elif env_level is not None:
        log_level = _coerce_level(env_level)
    elif configured:
        log_level = getattr(configure_logging, "_level", logging.INFO)
    else:
        log_level = logging.INFO

    formatter = _create_formatter()
    if not configured:
        logger.propagate = False

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
        configure_logging._stream_handler = stream_handler  # type: ignore[attr-defined]

        ui_handler = _UILogHandler()
        ui_handler.setFormatter(formatter)
        logger.addHandler(ui_handler)
        configure_logging._ui_handler = ui_handler  # type: ignore[attr-defined]

        if log_file is not None:
            destination: Optional[str] = log_file
        elif env_file is not None:
            destination = env_file
        else:
            destination = str(_DEFAULT_LOG_PATH)
        _configure_file_logging(logger, formatter, log_level, destination)
        configure_logging._configured = True  # type: ignore[attr-defined]
    elif log_file is not None:
        _configure_file_logging(logger, formatter, log_level, log_file)

    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        handler.setLevel(log_level)
    configure_logging._level = log_level  # type: ignore[attr-defined]
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger below the package logger."""

    base = configure_logging()
    if not name or name == base.name:
        return base
    if name.startswith(base.name + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{base.name}.{name}")


def get_log_file_path() -> Optional[Path]:
    """Return the active log file, if file logging is enabled."""

    return getattr(configure_logging, "_log_path", None)


def register_log_viewer(viewer: Optional["LogViewer"]) -> None:
    """Attach *viewer* to the in-app log handler.

    While a viewer is attached the stream handler is detached so log lines do
    not bleed through the terminal UI.
    """

    logger = configure_logging()
    handler: Optional[_UILogHandler] = getattr(configure_logging, "_ui_handler", None)
    if handler is None:
        logger.warning("UI log handler is not available")
        return
    stream_handler: Optional[logging.Handler] = getattr(
        configure_logging, "_stream_handler", None
    )
    if stream_handler is not None:
        if viewer is not None:
            logger.removeHandler(stream_handler)
        elif stream_handler not in logger.handlers:
            logger.addHandler(stream_handler)
    handler.set_viewer(viewer)
