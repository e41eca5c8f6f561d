"""Per-profile history of greetings already served.

Backed by ``cachetools.LRUCache`` so the number of remembered profiles is
bounded: the least-recently-greeted profile is evicted first.  Each profile
keeps its most recent greetings, newest first.

State is process-local and lost on restart.
"""

from __future__ import annotations

from cachetools import LRUCache
import structlog

logger = structlog.get_logger(logger_name=__name__)


def profile_key(name: str, age: int | None) -> str:
    """Return the history key for a child, e.g. ``"zosia|6"`` or ``"ola|X"``."""
    return f"{name.strip().lower()}|{age if age is not None else 'X'}"


class GreetingHistory:
    """Bounded greeting memory.

    Parameters
    ----------
    max_profiles:
        Maximum number of profiles remembered before LRU eviction.
    max_entries:
        Greetings kept per profile.
    """

    def __init__(self, max_profiles: int = 1000, max_entries: int = 20) -> None:
        self._max_entries = max(1, max_entries)
        self._cache: LRUCache[str, list[str]] = LRUCache(maxsize=max(1, max_profiles))

    def get(self, key: str) -> list[str]:
        """Return the greetings served to *key*, newest first (a copy)."""
        return list(self._cache.get(key) or [])

    def remember(self, key: str, text: str) -> None:
        """Record *text* as the newest greeting for *key*."""
        entries = [text, *(self._cache.get(key) or [])][: self._max_entries]
        self._cache[key] = entries
        logger.debug("greeting_remembered", key=key, entries=len(entries))

    def __len__(self) -> int:
        return len(self._cache)
