"""Textual widget displaying the application log."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Optional, Tuple

from textual.widgets import Static

from .logging_utils import register_log_viewer


class LogViewer(Static):
    """Scrolling log pane backed by a rolling buffer of formatted lines."""

    def __init__(
        self,
        *,
        max_lines: int = 500,
        id: Optional[str] = None,
    ) -> None:
        super().__init__("", id=id, markup=False)
        self._messages: Deque[str] = deque(maxlen=max_lines)

    def on_mount(self) -> None:  # pragma: no cover - requires UI integration
        self._refresh_view()
        register_log_viewer(self)

    def on_unmount(self) -> None:  # pragma: no cover - UI teardown
        register_log_viewer(None)

    @property
    def lines(self) -> Tuple[str, ...]:
        """Return the currently buffered log lines."""

        return tuple(self._messages)

    def append_message(self, message: str) -> None:
        self._messages.append(message)
        self._refresh_view()

    def replace_messages(self, messages: Iterable[str]) -> None:
        self._messages.clear()
        self._messages.extend(messages)
        self._refresh_view()

    def _render_messages(self) -> str:
        if not self._messages:
            return "No log messages yet."
        return "\n".join(self._messages)

    def _refresh_view(self) -> None:
        self.update(self._render_messages())
        if self.is_mounted:
            self.call_after_refresh(self.scroll_end, animate=False)
