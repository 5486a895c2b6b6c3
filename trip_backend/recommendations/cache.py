from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable

from .config import DEFAULT_RECOMMENDATION_CONFIG

logger = logging.getLogger(__name__)

_DEFAULT_TTL = DEFAULT_RECOMMENDATION_CONFIG.cache_ttl_seconds


class ResultCache:
    """In-memory key/value store with per-entry expiry.

    Expired entries are dropped lazily by ``get`` and in bulk by
    ``sweep_expired``. Values are returned as stored, never copied.
    """

    def __init__(
        self,
        default_ttl: float = _DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    def _discard(self, key: str, entry: dict[str, Any]) -> None:
        # Another thread may have stored a fresh entry since ``entry`` was read.
        if self._entries.get(key) is entry:
            self._entries.pop(key, None)

    def set(
        self,
        key: str,
        value: Any,
        ttl: float | None = None,
        now: float | None = None,
    ) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = {"value": value, "expires_at": self._now(now) + ttl}

    def get(self, key: str, now: float | None = None) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        if self._now(now) > entry["expires_at"]:
            self._discard(key, entry)
            self._misses += 1
            return None
        self._hits += 1
        return entry["value"]

    def invalidate_all(self) -> int:
        removed = len(self._entries)
        self._entries.clear()
        if removed:
            logger.info("Recommendation cache invalidated (%d entries)", removed)
        return removed

    def sweep_expired(self, now: float | None = None) -> int:
        current = self._now(now)
        expired = [(k, e) for k, e in list(self._entries.items()) if e["expires_at"] < current]
        for key, entry in expired:
            self._discard(key, entry)
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        return len(expired)

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


async def run_periodic_sweep(
    cache: ResultCache,
    interval: float = DEFAULT_RECOMMENDATION_CONFIG.sweep_interval_seconds,
) -> None:
    """Sweep expired entries every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        cache.sweep_expired()
