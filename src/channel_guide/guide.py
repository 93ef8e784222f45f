"""Channel guide engine: loading, filtering, sorting and favorites."""
from __future__ import annotations

import locale
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from .api import ChannelLoadError, fetch_channels
from .config import DEFAULT_API_URL, DEFAULT_REQUEST_TIMEOUT
from .favorites import FavoritesStore
from .logging_utils import get_logger
from .models import Channel, ChannelId

log = get_logger(__name__)

ALL = "All"
HD_TAG = "HD"

ChannelFetcher = Callable[..., Awaitable[List[Channel]]]


class SortOrder(str, Enum):
    """Title ordering applied after filtering."""

    NONE = "none"
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def next(self) -> "SortOrder":
        """Return the following order in the none → ascending → descending cycle."""

        cycle = (SortOrder.NONE, SortOrder.ASCENDING, SortOrder.DESCENDING)
        return cycle[(cycle.index(self) + 1) % len(cycle)]

    @property
    def label(self) -> str:
        return {
            SortOrder.NONE: "Unsorted",
            SortOrder.ASCENDING: "A–Z",
            SortOrder.DESCENDING: "Z–A",
        }[self]


@dataclass(slots=True)
class FilterState:
    """User-selected criteria narrowing the displayed channel list."""

    search_term: str = ""
    category_filter: str = ALL
    language_filter: str = ALL
    hd_only: bool = False
    show_favorites_only: bool = False
    sort_order: SortOrder = SortOrder.NONE


def _title_key(channel: Channel) -> str:
    return locale.strxfrm(channel.title.casefold())


def matches_search(channel: Channel, term: str) -> bool:
    """Case-insensitive title match or exact channel number substring match."""

    if not term:
        return True
    return term.casefold() in channel.title.casefold() or term in channel.stb_number


def derive_view(
    channels: Sequence[Channel],
    state: FilterState,
    favorites: Iterable[ChannelId] | FavoritesStore = (),
) -> List[Channel]:
    """Return the channels to display for ``state``.

    The predicates are independent conjunctions. The HD filter matches the
    ``"HD"`` capability tag only; channel titles are not inspected.
    """

    favorite_ids = favorites if isinstance(favorites, FavoritesStore) else set(favorites)
    result = list(channels)
    if state.category_filter != ALL:
        result = [c for c in result if c.category == state.category_filter]
    if state.language_filter != ALL:
        result = [c for c in result if c.language == state.language_filter]
    if state.hd_only:
        result = [c for c in result if c.has_tag(HD_TAG)]
    if state.search_term:
        result = [c for c in result if matches_search(c, state.search_term)]
    if state.show_favorites_only:
        result = [c for c in result if c.id in favorite_ids]

    if state.sort_order is SortOrder.ASCENDING:
        result.sort(key=_title_key)
    elif state.sort_order is SortOrder.DESCENDING:
        result.sort(key=_title_key, reverse=True)
    return result


def _facet_options(values: Iterable[str]) -> list[str]:
    distinct = {value for value in values if value and value != ALL}
    return [ALL, *sorted(distinct, key=locale.strxfrm)]


class ChannelGuide:
    """Owns the raw channel list, filter state and favorites.

    Every mutating method recomputes :attr:`view` from scratch through
    :func:`derive_view`.
    """

    def __init__(
        self,
        favorites: FavoritesStore,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        fetcher: Optional[ChannelFetcher] = None,
    ) -> None:
        self.favorites = favorites
        self.api_url = api_url
        self.timeout = timeout
        self._fetcher: ChannelFetcher = fetcher or fetch_channels
        self.state = FilterState()
        self.channels: tuple[Channel, ...] = ()
        self.view: List[Channel] = []
        self.loading = False
        self.load_error: Optional[str] = None

    async def load(self) -> List[Channel]:
        """Fetch the channel directory once.

        Failures are logged and leave the guide empty with :attr:`load_error`
        set; nothing is retried.
        """

        self.loading = True
        self.load_error = None
        try:
            channels = await self._fetcher(self.api_url, timeout=self.timeout)
        except ChannelLoadError as exc:
            log.error("Error fetching channels: %s", exc)
            self.load_error = str(exc)
            self.channels = ()
            self.view = []
        else:
            self.channels = tuple(channels)
            self.view = list(self.channels)
            self.refresh()
            log.info("Channel guide loaded with %d channel(s)", len(self.channels))
        finally:
            self.loading = False
        return self.view

    def refresh(self) -> List[Channel]:
        self.view = derive_view(self.channels, self.state, self.favorites)
        log.debug("Derived view has %d of %d channel(s)", len(self.view), len(self.channels))
        return self.view

    def set_search_term(self, term: str) -> List[Channel]:
        self.state.search_term = term
        return self.refresh()

    def set_category(self, category: str) -> List[Channel]:
        self.state.category_filter = category or ALL
        return self.refresh()

    def set_language(self, language: str) -> List[Channel]:
        self.state.language_filter = language or ALL
        return self.refresh()

    def set_hd_only(self, enabled: bool) -> List[Channel]:
        self.state.hd_only = enabled
        return self.refresh()

    def set_favorites_only(self, enabled: bool) -> List[Channel]:
        self.state.show_favorites_only = enabled
        return self.refresh()

    def set_sort_order(self, order: SortOrder) -> List[Channel]:
        self.state.sort_order = order
        return self.refresh()

    def cycle_sort(self) -> SortOrder:
        """Advance the sort order one step and return the new order."""

        self.set_sort_order(self.state.sort_order.next())
        log.debug("Sort order is now %s", self.state.sort_order.value)
        return self.state.sort_order

    def toggle_favorite(self, channel_id: ChannelId) -> bool:
        added = self.favorites.toggle(channel_id)
        self.refresh()
        return added

    def is_favorite(self, channel_id: ChannelId) -> bool:
        return channel_id in self.favorites

    def category_options(self) -> list[str]:
        return _facet_options(channel.category for channel in self.channels)

    def language_options(self) -> list[str]:
        return _facet_options(channel.language for channel in self.channels)


__all__ = [
    "ALL",
    "ChannelGuide",
    "FilterState",
    "SortOrder",
    "derive_view",
    "matches_search",
]
