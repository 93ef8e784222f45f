"""Textual application presenting the channel guide."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

try:
    from textual import events, on
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual.reactive import reactive
    from textual.timer import Timer
    from textual.widgets import (
        Button,
        Checkbox,
        Footer,
        Header,
        Input,
        Label,
        ListItem,
        ListView,
        LoadingIndicator,
        Select,
        Static,
        TabPane,
        TabbedContent,
    )
except ModuleNotFoundError as exc:  # pragma: no cover - dependency guard
    raise ModuleNotFoundError(
        "The 'textual' package is required to run channel_guide. "
        "Install dependencies with 'pip install -e .[test]' or 'pip install channel-guide'."
    ) from exc

from rich.markup import escape

from .config import AppConfig, CONFIG_PATH
from .favorites import FavoritesStore, LocalStorage
from .guide import ALL, ChannelGuide
from .log_viewer import LogViewer
from .logging_utils import get_logger
from .models import Channel
from .themes import CUSTOM_THEMES, DEFAULT_THEME_NAME

log = get_logger(__name__)

FAVORITE_MARK = "♥"
NOT_FAVORITE_MARK = "♡"


def channel_label(channel: Channel, *, favorite: bool) -> str:
    """Return the list row markup for ``channel``."""

    mark = f"[#E6007D]{FAVORITE_MARK}[/]" if favorite else " "
    return f"{mark} CH{escape(channel.stb_number)}  {escape(channel.title)}"


def render_channel_card(channel: Optional[Channel], *, favorite: bool = False) -> str:
    """Return the detail card markup for ``channel``."""

    if channel is None:
        return "Select a channel to view its schedule."
    lines = [
        f"CH{escape(channel.stb_number)}",
        f"[b]{escape(channel.title)}[/b]",
    ]
    details = [value for value in (channel.category, channel.language) if value]
    if channel.has_tag("HD"):
        details.append("HD")
    if details:
        lines.append(escape(" • ".join(details)))
    if channel.image_url:
        lines.append(f"Logo: {escape(channel.image_url)}")
    lines.append(f"{FAVORITE_MARK} Favorite" if favorite else f"{NOT_FAVORITE_MARK} Not a favorite")
    lines.append("")

    current = channel.current_program
    if current is not None:
        lines.append(f"On Now   {escape(current.title)}")
    else:
        lines.append("No current program information available")
    upcoming = channel.upcoming()
    if upcoming:
        for program in upcoming:
            lines.append(f"[dim]{escape(program.display_time())}  {escape(program.title)}[/dim]")
    else:
        lines.append("No upcoming program information")
    return "\n".join(lines)


class ChannelListItem(ListItem):
    """Render a channel row in the guide list."""

    def __init__(self, channel: Channel, *, favorite: bool = False) -> None:
        self.channel = channel
        self._favorite = favorite
        self._label = Label(channel_label(channel, favorite=favorite), markup=True)
        super().__init__(self._label)

    @property
    def favorite(self) -> bool:
        return self._favorite

    def set_favorite(self, favorite: bool) -> None:
        if favorite == self._favorite:
            return
        self._favorite = favorite
        self._label.update(channel_label(self.channel, favorite=favorite))


class ChannelCard(Static):
    """Detail card for the highlighted channel."""

    channel: reactive[Optional[Channel]] = reactive(None)
    favorite: reactive[bool] = reactive(False)

    def on_mount(self) -> None:
        self._refresh_card()

    def watch_channel(self, _: Optional[Channel]) -> None:
        self._refresh_card()

    def watch_favorite(self, _: bool) -> None:
        self._refresh_card()

    def _refresh_card(self) -> None:
        self.update(render_channel_card(self.channel, favorite=self.favorite))


class SearchInput(Input):
    """Search field that hands arrow navigation to the channel list."""

    def on_key(self, event: events.Key) -> None:  # pragma: no cover - UI callback
        if event.key in ("down", "up"):
            app = self.app
            if isinstance(app, ChannelGuideApp):
                event.stop()
                app.call_after_refresh(app._focus_channel_list)


class StatusBar(Static):
    """A simple status bar widget."""

    status: reactive[str] = reactive("Ready")

    def watch_status(self, status: str) -> None:
        self.update(status)


# Inline stylesheet so the application can boot without external CSS files.
DEFAULT_CSS = """
#main-tabs {
    height: 1fr;
}

TabPane {
    padding: 0;
}

#guide-pane,
#logs-pane {
    layout: vertical;
    height: 1fr;
    padding: 1;
}

#loading {
    height: 1fr;
    color: $accent;
}

#filters {
    height: auto;
    margin-top: 1;
}

#filters Select {
    width: 1fr;
}

#filters Checkbox,
#filters Button {
    width: auto;
}

#browser {
    layout: horizontal;
    height: 1fr;
    margin-top: 1;
}

#channel-list {
    width: 2fr;
    min-width: 36;
    height: 1fr;
}

#channel-sidebar {
    layout: vertical;
    width: 3fr;
    min-width: 36;
}

#channel-card {
    border: heavy $surface;
    padding: 1;
    height: 1fr;
    overflow-y: auto;
}

#log-viewer {
    border: heavy $surface;
    padding: 0 1;
    height: 1fr;
    overflow-y: auto;
}

StatusBar {
    padding: 0 1;
}
"""


class ChannelGuideApp(App[None]):
    """Main Textual application."""

    CSS = DEFAULT_CSS
    TITLE = "Channel Guide"
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("q", "quit", "Quit"),
        Binding("f1", "switch_tab('guide')", "Guide"),
        Binding("f2", "switch_tab('logs')", "Logs"),
        Binding("/", "focus_search", "Search"),
        Binding("escape", "clear_search", "Clear search"),
        Binding("f", "toggle_favorite", "Favorite"),
        Binding("o", "cycle_sort", "Sort"),
        Binding("h", "toggle_hd", "HD only"),
        Binding("v", "toggle_favorites_only", "Favorites only"),
    ]

    def __init__(
        self,
        config: AppConfig,
        *,
        config_path: Optional[Path] = None,
        theme: Optional[str] = None,
        guide: Optional[ChannelGuide] = None,
    ) -> None:
        super().__init__()
        self._register_custom_themes()
        self._apply_requested_theme(theme or config.theme)
        self._config = config
        self._config_path = config_path or CONFIG_PATH
        if guide is None:
            favorites = FavoritesStore.load(LocalStorage(config.storage_path))
            guide = ChannelGuide(
                favorites,
                api_url=config.api_url,
                timeout=config.request_timeout,
            )
        self.guide = guide
        self._search_delay = max(0.0, config.search_debounce)
        self._search_timer: Optional[Timer] = None
        self._pending_search: Optional[str] = None
        self._status_bar: Optional[StatusBar] = None
        log.info(
            "ChannelGuideApp initialized; api_url=%s config path=%s",
            self.guide.api_url,
            self._config_path,
        )

    def _register_custom_themes(self) -> None:
        for theme in CUSTOM_THEMES.values():
            self.register_theme(theme)

    def _apply_requested_theme(self, requested: Optional[str]) -> None:
        preferred = requested or DEFAULT_THEME_NAME
        if self.get_theme(preferred) is None:
            log.warning(
                "Requested theme '%s' is unavailable; falling back to %s",
                requested,
                DEFAULT_THEME_NAME,
            )
            preferred = DEFAULT_THEME_NAME
        log.debug("Applying theme %s", preferred)
        self.theme = preferred

    def compose(self) -> ComposeResult:
        yield Header()
        with TabbedContent(id="main-tabs"):
            with TabPane("Guide", id="guide-tab"):
                yield LoadingIndicator(id="loading")
                with Vertical(id="guide-pane"):
                    yield SearchInput(placeholder="Search by name or number", id="search")
                    with Horizontal(id="filters"):
                        yield Select(
                            [(ALL, ALL)],
                            value=ALL,
                            allow_blank=False,
                            prompt="Category",
                            id="category",
                        )
                        yield Select(
                            [(ALL, ALL)],
                            value=ALL,
                            allow_blank=False,
                            prompt="Language",
                            id="language",
                        )
                        yield Checkbox("HD Only", id="hd-only")
                        yield Checkbox("Favorites only", id="favorites-only")
                        yield Button(self._sort_button_label(), id="sort")
                    with Horizontal(id="browser"):
                        yield ListView(id="channel-list")
                        with Vertical(id="channel-sidebar"):
                            yield ChannelCard(id="channel-card")
                            yield Button("Favorite", id="channel-favorite", variant="primary")
            with TabPane("Logs", id="logs-tab"):
                with Vertical(id="logs-pane"):
                    yield LogViewer(id="log-viewer")
        yield StatusBar(id="status")
        yield Footer()

    def on_mount(self) -> None:
        log.debug("Application mounted")
        self._status_bar = self._query_optional_widget(StatusBar)
        self._show_loading(True)
        self._set_status("Loading channels…")
        self.run_worker(self._load_channels(), name="channel-load", exclusive=True)

    async def _load_channels(self) -> None:
        try:
            await self.guide.load()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.exception("Unexpected error while loading channels")
            self.guide.load_error = str(exc) or type(exc).__name__
        await self._handle_channels_loaded()

    async def _handle_channels_loaded(self) -> None:
        self._show_loading(self.guide.loading)
        self._update_facet_options()
        await self._render_channels()
        search = self._query_optional_widget("#search", Input)
        if search is not None:
            search.focus()

    def _query_optional_widget(
        self, query: object, widget_type: Optional[type[Any]] = None
    ) -> Optional[Any]:
        """Return the first matching widget if it exists."""

        try:
            if widget_type is None:
                return self.query_one(query)  # type: ignore[arg-type]
            return self.query_one(query, widget_type)  # type: ignore[arg-type]
        except Exception:
            return None

    def _set_status(self, message: str) -> None:
        log.debug("Status update: %s", message)
        status_bar = self._status_bar or self._query_optional_widget(StatusBar)
        if status_bar is None:
            return
        self._status_bar = status_bar
        status_bar.status = message

    def _show_loading(self, loading: bool) -> None:
        indicator = self._query_optional_widget("#loading", LoadingIndicator)
        pane = self._query_optional_widget("#guide-pane", Vertical)
        if indicator is not None:
            indicator.display = loading
        if pane is not None:
            pane.display = not loading

    def _sort_button_label(self) -> str:
        return f"Sort: {self.guide.state.sort_order.label}"

    def _update_facet_options(self) -> None:
        for selector_id, options, current in (
            ("#category", self.guide.category_options(), self.guide.state.category_filter),
            ("#language", self.guide.language_options(), self.guide.state.language_filter),
        ):
            select = self._query_optional_widget(selector_id, Select)
            if select is None:
                continue
            select.set_options([(option, option) for option in options])
            select.value = current if current in options else ALL

    def _focus_channel_list(self) -> None:
        list_view = self._query_optional_widget("#channel-list", ListView)
        if list_view is None:
            return
        if list_view.children and list_view.index is None:
            list_view.index = 0
        list_view.focus()

    async def _render_channels(self) -> None:
        list_view = self._query_optional_widget("#channel-list", ListView)
        if list_view is None:
            return
        view = self.guide.view
        await list_view.clear()
        if not view:
            await list_view.append(ListItem(Label("No channels available")))
            self._show_channel(None)
        else:
            await list_view.extend(
                ChannelListItem(channel, favorite=self.guide.is_favorite(channel.id))
                for channel in view
            )
            list_view.index = 0
            self._show_channel(view[0])
        self._set_status(f"Showing {len(view)} of {len(self.guide.channels)} channel(s)")

    def _show_channel(self, channel: Optional[Channel]) -> None:
        card = self._query_optional_widget("#channel-card", ChannelCard)
        if card is None:
            return
        card.channel = channel
        card.favorite = channel is not None and self.guide.is_favorite(channel.id)

    def _selected_channel(self) -> Optional[Channel]:
        list_view = self._query_optional_widget("#channel-list", ListView)
        if list_view is None:
            return None
        item = list_view.highlighted_child
        if isinstance(item, ChannelListItem):
            return item.channel
        return None

    async def _apply_search(self, term: str) -> None:
        self._pending_search = None
        if term == self.guide.state.search_term:
            return
        log.debug("Applying search term %r", term)
        self.guide.set_search_term(term)
        await self._render_channels()

    async def _apply_pending_search(self) -> None:
        self._search_timer = None
        if self._pending_search is not None:
            await self._apply_search(self._pending_search)

    async def _schedule_search(self, term: str) -> None:
        if self._search_timer is not None:
            self._search_timer.stop()
            self._search_timer = None
        if self._search_delay <= 0:
            await self._apply_search(term)
            return
        self._pending_search = term
        self._search_timer = self.set_timer(self._search_delay, self._apply_pending_search)

    def action_switch_tab(self, tab: str) -> None:
        tabbed = self._query_optional_widget("#main-tabs", TabbedContent)
        if tabbed is not None:
            tabbed.active = f"{tab}-tab"

    def action_focus_search(self) -> None:
        search = self._query_optional_widget("#search", Input)
        if search is not None:
            search.focus()

    async def action_clear_search(self) -> None:
        search = self._query_optional_widget("#search", Input)
        if search is not None and search.value:
            search.value = ""
        await self._apply_search("")

    async def action_cycle_sort(self) -> None:
        order = self.guide.cycle_sort()
        button = self._query_optional_widget("#sort", Button)
        if button is not None:
            button.label = self._sort_button_label()
        await self._render_channels()
        log.info("Sorting channels: %s", order.label)

    async def action_toggle_hd(self) -> None:
        checkbox = self._query_optional_widget("#hd-only", Checkbox)
        if checkbox is not None:
            checkbox.toggle()
        else:
            await self._set_hd_only(not self.guide.state.hd_only)

    async def action_toggle_favorites_only(self) -> None:
        checkbox = self._query_optional_widget("#favorites-only", Checkbox)
        if checkbox is not None:
            checkbox.toggle()
        else:
            await self._set_favorites_only(not self.guide.state.show_favorites_only)

    async def action_toggle_favorite(self) -> None:
        channel = self._selected_channel()
        if channel is None:
            self._set_status("No channel selected")
            return
        added = self.guide.toggle_favorite(channel.id)
        verb = "Added" if added else "Removed"
        preposition = "to" if added else "from"
        if self.guide.state.show_favorites_only:
            await self._render_channels()
        else:
            list_view = self._query_optional_widget("#channel-list", ListView)
            item = list_view.highlighted_child if list_view is not None else None
            if isinstance(item, ChannelListItem):
                item.set_favorite(added)
            self._show_channel(channel)
        self._set_status(f"{verb} {channel.title} {preposition} favorites")

    async def _set_hd_only(self, enabled: bool) -> None:
        if enabled == self.guide.state.hd_only:
            return
        self.guide.set_hd_only(enabled)
        await self._render_channels()

    async def _set_favorites_only(self, enabled: bool) -> None:
        if enabled == self.guide.state.show_favorites_only:
            return
        self.guide.set_favorites_only(enabled)
        await self._render_channels()

    @on(Input.Changed, "#search")
    async def _on_search_changed(self, event: Input.Changed) -> None:
        await self._schedule_search(event.value)

    @on(Select.Changed, "#category")
    async def _on_category_changed(self, event: Select.Changed) -> None:
        value = event.value if isinstance(event.value, str) else ALL
        if value == self.guide.state.category_filter:
            return
        self.guide.set_category(value)
        await self._render_channels()

    @on(Select.Changed, "#language")
    async def _on_language_changed(self, event: Select.Changed) -> None:
        value = event.value if isinstance(event.value, str) else ALL
        if value == self.guide.state.language_filter:
            return
        self.guide.set_language(value)
        await self._render_channels()

    @on(Checkbox.Changed, "#hd-only")
    async def _on_hd_changed(self, event: Checkbox.Changed) -> None:
        await self._set_hd_only(event.value)

    @on(Checkbox.Changed, "#favorites-only")
    async def _on_favorites_only_changed(self, event: Checkbox.Changed) -> None:
        await self._set_favorites_only(event.value)

    @on(Button.Pressed, "#sort")
    async def _on_sort_pressed(self, _: Button.Pressed) -> None:
        await self.action_cycle_sort()

    @on(Button.Pressed, "#channel-favorite")
    async def _on_favorite_pressed(self, _: Button.Pressed) -> None:
        await self.action_toggle_favorite()

    @on(ListView.Highlighted, "#channel-list")
    def _on_channel_highlighted(self, event: ListView.Highlighted) -> None:
        item = event.item
        self._show_channel(item.channel if isinstance(item, ChannelListItem) else None)


__all__ = ["ChannelGuideApp", "channel_label", "render_channel_card"]
