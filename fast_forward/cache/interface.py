#!/usr/bin/env python3
"""
Cache Interface - Contract for fast_forward cache backends

The proxy only ever calls get/set/has/delete/clear, synchronously. Backends
do not need to subclass Cache; any object with those five methods is
accepted (see fast_forward.utils.is_cache).
"""

from abc import ABC, abstractmethod
from typing import Any


class Cache(ABC):
    """
    Abstract base class for cache backends.

    None is a legitimate stored value: after ``set(key, None)``, ``has(key)``
    is True and ``get(key)`` returns None.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value from the cache.

        Args:
            key: Cache key
            default: Returned when the key is absent

        Returns:
            Cached value, or default if not found
        """

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Store a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
        """

    @abstractmethod
    def has(self, key: str) -> bool:
        """Return True if the key exists in the cache."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete a key from the cache.

        Returns:
            True if the entry was deleted, False if it didn't exist
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries from the cache."""
