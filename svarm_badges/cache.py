"""
cache.py — Memo tables for resolved colors and icon definitions.

Entries are keyed by the input string and hold either the resolved value or
NOT_FOUND, so a failed lookup is neither retried nor re-warned until the cache
is cleared. There is no expiry: clear both caches whenever the active theme
changes.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _NotFound:
    """Cached miss."""

    _instance: Optional["_NotFound"] = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


class ResolutionCache(Generic[T]):
    """
    A named, lock-guarded dict with hit/miss counters.

    `get` returns None when the key has never been stored; a stored miss comes
    back as NOT_FOUND.
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._entries: Dict[str, Union[T, _NotFound]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Union[T, _NotFound]]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
        if value is not None:
            logger.debug(f"{self.name} hit: {key!r}")
        return value

    def put(self, key: str, value: Union[T, _NotFound]) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.info(f"{self.name} cleared ({size} entries)")

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
