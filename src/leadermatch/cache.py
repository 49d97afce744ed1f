"""In-memory result cache with per-entry TTL.

Fronts expensive recomputation: match lists, network graphs, calendar reads.
Expiry is checked lazily when a key is read; nothing sweeps in the background
and the entry count is unbounded, so cleanup relies on TTLs and on reads.

Concurrent misses on the same key may both run the fetcher; the last write
wins.  Fetchers are expected to be idempotent.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from src.leadermatch.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheEntry(BaseModel):
    value: Any
    expires_at: float
    created_at: float


class CacheStats(BaseModel):
    size: int = 0
    keys: list[str] = Field(default_factory=list)


class ResultCache:
    """Key/value store whose entries expire ``ttl`` seconds after being set."""

    def __init__(
        self,
        default_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = settings.default_cache_ttl if default_ttl is None else default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def _lookup(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if self._clock() > entry.expires_at:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return _MISSING
        return entry.value

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        now = self._clock()
        self._entries[key] = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + (self.default_ttl if ttl is None else ttl),
        )

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> CacheStats:
        return CacheStats(size=len(self._entries), keys=list(self._entries))

    def get_or_set(
        self, key: str, fetcher: Callable[[], T], ttl: float | None = None,
    ) -> T:
        cached = self._lookup(key)
        if cached is not _MISSING:
            return cached
        value = fetcher()
        self.set(key, value, ttl)
        return value


# ---------------------------------------------------------------------------
# Key scheme: "{domain}:{userId}[:{extra...}]"
# ---------------------------------------------------------------------------

class CacheKeys:
    FILTER_OPTIONS = "filter_options"
    QUESTIONNAIRE_SECTIONS = "questionnaire_sections"

    @staticmethod
    def user_profile(user_id: str) -> str:
        return f"user_profile:{user_id}"

    @staticmethod
    def matches(user_id: str) -> str:
        return f"matches:{user_id}"

    @staticmethod
    def network(user_id: str) -> str:
        return f"network:{user_id}"

    @staticmethod
    def calendar_events(
        user_id: str, platform: str, time_min: str, time_max: str,
    ) -> str:
        return f"calendar_events:{user_id}:{platform}:{time_min}:{time_max}"

    @staticmethod
    def calendar_freebusy(user_id: str, time_min: str, time_max: str) -> str:
        return f"calendar_freebusy:{user_id}:{time_min}:{time_max}"


cache = ResultCache()


def invalidate_user_cache(user_id: str, store: ResultCache | None = None) -> None:
    """Drop the per-user profile, matches and network entries."""
    store = store or cache
    removed = sum(
        store.delete(key) for key in (
            CacheKeys.user_profile(user_id),
            CacheKeys.matches(user_id),
            CacheKeys.network(user_id),
        )
    )
    logger.debug("Invalidated %d cache entries for %s", removed, user_id)
