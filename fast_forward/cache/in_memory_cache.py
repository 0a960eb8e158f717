#!/usr/bin/python
# -*- coding: utf-8 -*-
import threading
from typing import Any, Dict

from .interface import Cache


class InMemoryCache(Cache):
    """
    Thread-safe in-memory cache backed by a dict.

    Entries live as long as the instance and are never evicted.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._cache.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._cache

    def delete(self, key: str) -> bool:
        """
        Remove a specific entry from the cache.

        Returns:
            True if the entry was removed, False if not found
        """
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        with self._lock:
            return {
                "backend": "memory",
                "size": len(self._cache),
                "keys": list(self._cache.keys()),
            }
