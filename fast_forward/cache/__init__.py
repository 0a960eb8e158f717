"""
FastForward Cache Backends

- Cache            - Abstract contract (get/set/has/delete/clear)
- InMemoryCache    - Process-local dict, the default backend
- FileSystemCache  - One JSON file per entry under <cache_dir>/<namespace>

Usage:
    from fast_forward import fast_forward, FileSystemCache

    api = fast_forward(ApiClient(), FileSystemCache(namespace="api"))
"""

from .filesystem_cache import FileSystemCache
from .in_memory_cache import InMemoryCache
from .interface import Cache

__all__ = [
    "Cache",
    "FileSystemCache",
    "InMemoryCache",
]
