"""Favorite channel persistence."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .config import STORAGE_PATH
from .logging_utils import get_logger
from .models import ChannelId

log = get_logger(__name__)

FAVORITES_KEY = "favorites"


class LocalStorage:
    """String key-value store persisted as a single JSON object file."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path or STORAGE_PATH

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            log.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring storage file %s: expected a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf8")
        log.debug("Stored key %s in %s", key, self.path)


def _decode_favorites(raw: Optional[str]) -> set[ChannelId]:
    if raw is None:
        return set()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("Stored favorites are not valid JSON; starting with none")
        return set()
    if not isinstance(data, list):
        log.warning("Stored favorites are not a list; starting with none")
        return set()
    ids: set[ChannelId] = set()
    for entry in data:
        if isinstance(entry, bool) or not isinstance(entry, (str, int)):
            log.warning("Dropping invalid favorite id %r", entry)
            continue
        ids.add(entry)
    return ids


def _sort_key(value: ChannelId) -> tuple[int, int, str]:
    # Numeric ids first, in numeric order.
    if isinstance(value, str):
        return (1, 0, value)
    return (0, value, "")


def _encode_favorites(ids: Iterable[ChannelId]) -> str:
    return json.dumps(sorted(ids, key=_sort_key))


class FavoritesStore:
    """The set of favorite channel ids, rewritten in full on every change."""

    def __init__(self, storage: LocalStorage, ids: Iterable[ChannelId] = ()) -> None:
        self._storage = storage
        self._ids: set[ChannelId] = set(ids)

    @classmethod
    def load(cls, storage: LocalStorage) -> "FavoritesStore":
        """Read the persisted favorites once; missing or bad data is empty."""

        ids = _decode_favorites(storage.get(FAVORITES_KEY))
        log.info("Loaded %d favorite(s) from %s", len(ids), storage.path)
        return cls(storage, ids)

    @property
    def ids(self) -> frozenset[ChannelId]:
        return frozenset(self._ids)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self._ids

    def __iter__(self) -> Iterator[ChannelId]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def toggle(self, channel_id: ChannelId) -> bool:
        """Flip membership of *channel_id* and persist; return the new state."""

        if channel_id in self._ids:
            self._ids.remove(channel_id)
            added = False
        else:
            self._ids.add(channel_id)
            added = True
        self._persist()
        log.info(
            "%s favorite %s (%d total)",
            "Added" if added else "Removed",
            channel_id,
            len(self._ids),
        )
        return added

    def _persist(self) -> None:
        self._storage.set(FAVORITES_KEY, _encode_favorites(self._ids))


__all__ = ["FAVORITES_KEY", "FavoritesStore", "LocalStorage"]
