"""Time-boxed response cache keyed by request identity."""

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

DEFAULT_FRESHNESS = timedelta(minutes=5)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def make_cache_key(url: str, params: Mapping[str, object] | None = None) -> str:
    """Derive a deterministic cache key from a URL and its query params."""
    if not params:
        return url
    # Keys go on the wire as strings, so mixed key types must sort as strings.
    serialized = json.dumps(
        {str(name): value for name, value in params.items()},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return f"{url}{serialized}"


@dataclass
class _CacheEntry:
    payload: object
    stored_at: datetime


@dataclass
class ResponseCache:
    """In-memory cache of decoded response payloads.

    Entries are checked for freshness when read; stale entries stay in place
    until the same key is stored again or the cache is cleared.
    """

    _entries: dict[str, _CacheEntry]
    clock: Callable[[], datetime]

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._entries = {}
        self.clock = clock

    def get_fresh(
        self, key: str, freshness: timedelta = DEFAULT_FRESHNESS
    ) -> tuple[bool, object]:
        """Return ``(hit, payload)`` for an entry younger than ``freshness``."""
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        if self.clock() - entry.stored_at >= freshness:
            return False, None
        return True, entry.payload

    def store(self, key: str, payload: object) -> None:
        """Store a payload under a key, replacing any previous entry."""
        self._entries[key] = _CacheEntry(payload=payload, stored_at=self.clock())

    def discard(self, key: str) -> None:
        """Remove a single entry if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
