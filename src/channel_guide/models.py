"""Channel and programme records parsed from the channel directory API."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union

from .logging_utils import get_logger

log = get_logger(__name__)

ChannelId = Union[str, int]

UPCOMING_LIMIT = 2


def parse_timestamp(value: object) -> Optional[datetime]:
    """Return ``value`` as a :class:`datetime` or ``None`` if unparseable.

    Accepts ISO 8601 strings (including ``2024-10-19 08:00:00.0`` as served by
    the directory API) and epoch milliseconds.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    # Older interpreters reject single-digit fractions such as ".0".
    head, dot, fraction = text.partition(".")
    if dot and fraction.isdigit():
        try:
            return datetime.fromisoformat(head)
        except ValueError:
            return None
    return None


@dataclass(frozen=True, slots=True)
class Program:
    """A scheduled broadcast item."""

    title: str
    datetime: Union[str, int, float] = ""

    @property
    def starts_at(self) -> Optional[datetime]:
        return parse_timestamp(self.datetime)

    def display_time(self) -> str:
        """Return the start time in the local time format."""

        start = self.starts_at
        if start is None:
            return str(self.datetime)
        if start.tzinfo is not None:
            start = start.astimezone()
        return start.strftime("%X")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Program":
        raw_time = payload.get("datetime")
        return cls(
            title=str(payload.get("title") or ""),
            datetime=raw_time if isinstance(raw_time, (str, int, float)) else "",
        )


@dataclass(frozen=True, slots=True)
class Channel:
    """A channel entry as received from the directory API."""

    id: ChannelId
    title: str
    stb_number: str = ""
    image_url: str = ""
    category: str = ""
    language: str = ""
    filters: frozenset[str] = field(default_factory=frozenset)
    current_schedule: tuple[Program, ...] = ()

    @property
    def current_program(self) -> Optional[Program]:
        """Return the programme on now, if the schedule has one."""

        return self.current_schedule[0] if self.current_schedule else None

    def upcoming(self, limit: int = UPCOMING_LIMIT) -> tuple[Program, ...]:
        """Return up to *limit* programmes following the one on now."""

        return self.current_schedule[1 : 1 + max(0, limit)]

    def has_tag(self, tag: str) -> bool:
        return tag in self.filters

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Channel":
        """Build a channel from one entry of the API ``response`` array."""

        channel_id = payload.get("id")
        title = payload.get("title")
        if isinstance(channel_id, bool) or not isinstance(channel_id, (str, int)):
            raise ValueError(f"Channel entry has no usable id: {channel_id!r}")
        if not isinstance(title, str) or not title:
            raise ValueError(f"Channel {channel_id!r} has no title")
        raw_filters = payload.get("filters") or ()
        if isinstance(raw_filters, str):
            raw_filters = (raw_filters,)
        schedule_raw = payload.get("currentSchedule") or ()
        schedule = tuple(
            Program.from_payload(entry)
            for entry in schedule_raw
            if isinstance(entry, Mapping)
        )
        stb_number = payload.get("stbNumber")
        return cls(
            id=channel_id,
            title=title,
            stb_number=str(stb_number) if stb_number is not None else "",
            image_url=str(payload.get("imageUrl") or ""),
            category=str(payload.get("category") or ""),
            language=str(payload.get("language") or ""),
            filters=frozenset(str(tag) for tag in raw_filters if tag is not None),
            current_schedule=schedule,
        )


def parse_channels(entries: Iterable[object]) -> List[Channel]:
    """Parse API entries, skipping those that are not usable channels."""

    channels: List[Channel] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            log.warning("Skipping channel entry %d: expected an object", index)
            continue
        try:
            channels.append(Channel.from_payload(entry))
        except (TypeError, ValueError) as exc:
            log.warning("Skipping channel entry %d: %s", index, exc)
    log.info("Parsed %d channel(s)", len(channels))
    return channels


__all__ = [
    "Channel",
    "ChannelId",
    "Program",
    "parse_channels",
    "parse_timestamp",
]
