#!/usr/bin/python
# -*- coding: utf-8 -*-
__author__ = "bibow"

__all__ = [
    "proxy",
    "utils",
    "types",
    "json_handler",
    "cache",
    "fast_forward",
    "FastForwardProxy",
    "FastForwardOptions",
    "CacheMode",
    "KeyComponents",
    "KeyTransformer",
    "AsyncResult",
    "Cache",
    "InMemoryCache",
    "FileSystemCache",
    "CanonicalJSONHandler",
    "generate_cache_key",
    "parse_cache_mode",
    "resolve_cache_mode",
    "get_cache_mode_from_env",
    "NO_KEY",
]

from .cache import Cache, FileSystemCache, InMemoryCache
from .json_handler import CanonicalJSONHandler
from .proxy import FastForwardProxy, fast_forward
from .types import (
    AsyncResult,
    CacheMode,
    FastForwardOptions,
    KeyComponents,
    KeyTransformer,
)
from .utils import (
    NO_KEY,
    generate_cache_key,
    get_cache_mode_from_env,
    parse_cache_mode,
    resolve_cache_mode,
)
