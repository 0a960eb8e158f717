#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
FastForward Proxy - Transparent method call caching

Wraps an object so that every method read from it returns a caching
wrapper. Non-callable composite attributes are wrapped recursively with the
same backend, mode and key transformer; everything else passes through.

Usage:
    from fast_forward import CacheMode, FileSystemCache, fast_forward

    api = fast_forward(ApiClient(), {"cache": FileSystemCache(), "mode": CacheMode.ON})
    api.fetch_user("42")   # executes and stores
    api.fetch_user("42")   # served from the cache
"""

__author__ = "bibow"

import functools
import inspect
import logging
import os
from typing import Any, Callable, Optional

from .cache import InMemoryCache
from .types import AsyncResult, CacheMode, FastForwardOptions, KeyTransformer
from .utils import (
    NO_KEY,
    generate_cache_key,
    get_cache_mode_from_env,
    is_cache,
    is_fast_forward_options,
    is_object,
    parse_cache_mode,
    resolve_cache_mode,
)

logger = logging.getLogger("fast_forward.proxy")


async def _resolved(value: Any) -> Any:
    return value


async def _store_when_resolved(cache: Any, cache_key: str, awaitable: Any) -> Any:
    # Exceptions propagate before set(), so failures are never cached
    value = await awaitable
    cache.set(cache_key, AsyncResult(value))
    return value


def _cached_method(
    name: str,
    method: Callable,
    cache: Any,
    mode: CacheMode,
    key_transformer: Optional[KeyTransformer],
) -> Callable:
    """Build the caching replacement for ``method``."""

    @functools.wraps(method, updated=())
    def wrapper(*args, **kwargs):
        if mode is CacheMode.OFF:
            return method(*args, **kwargs)

        cache_key = generate_cache_key(name, args, key_transformer, kwargs)
        if cache_key is NO_KEY:
            return method(*args, **kwargs)

        if mode in (CacheMode.ON, CacheMode.READ_ONLY) and cache.has(cache_key):
            logger.debug("Cache hit: %s", cache_key)
            cached_result = cache.get(cache_key)
            if isinstance(cached_result, AsyncResult):
                # Fresh awaitable on every hit
                return _resolved(cached_result.value)
            return cached_result

        if mode is CacheMode.READ_ONLY:
            logger.debug("Cache miss in READ_ONLY mode: %s", cache_key)
            if inspect.iscoroutinefunction(method):
                return _resolved(None)
            return None

        result = method(*args, **kwargs)

        if inspect.isawaitable(result):
            return _store_when_resolved(cache, cache_key, result)

        cache.set(cache_key, result)
        return result

    return wrapper


class FastForwardProxy:
    """
    Caching proxy around a target object.

    Reads are intercepted; writes, deletes and the container protocol are
    forwarded to the target unchanged. So are comparisons, hashing, str(),
    context managers, iterator steps, os.fspath() and the / operator, which
    lets a wrapped dict, lock or path value behave like the value itself.
    """

    __slots__ = ("_ff_target", "_ff_cache", "_ff_mode", "_ff_key")

    def __init__(
        self,
        target: Any,
        cache: Any,
        mode: CacheMode,
        key_transformer: Optional[KeyTransformer] = None,
    ) -> None:
        object.__setattr__(self, "_ff_target", target)
        object.__setattr__(self, "_ff_cache", cache)
        object.__setattr__(self, "_ff_mode", resolve_cache_mode(mode))
        object.__setattr__(self, "_ff_key", key_transformer)

    def _ff_intercept(self, name: str, value: Any) -> Any:
        cache = object.__getattribute__(self, "_ff_cache")
        mode = object.__getattribute__(self, "_ff_mode")
        key_transformer = object.__getattribute__(self, "_ff_key")

        if not callable(value):
            if is_object(value):
                return FastForwardProxy(value, cache, mode, key_transformer)
            return value

        return _cached_method(name, value, cache, mode, key_transformer)

    def __getattr__(self, name: str) -> Any:
        target = object.__getattribute__(self, "_ff_target")
        return self._ff_intercept(name, getattr(target, name))

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(object.__getattribute__(self, "_ff_target"), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(object.__getattribute__(self, "_ff_target"), name)

    def __getitem__(self, item: Any) -> Any:
        target = object.__getattribute__(self, "_ff_target")
        return self._ff_intercept(str(item), target[item])

    def __setitem__(self, item: Any, value: Any) -> None:
        object.__getattribute__(self, "_ff_target")[item] = value

    def __delitem__(self, item: Any) -> None:
        del object.__getattribute__(self, "_ff_target")[item]

    def __contains__(self, item: Any) -> bool:
        return item in object.__getattribute__(self, "_ff_target")

    def __len__(self) -> int:
        return len(object.__getattribute__(self, "_ff_target"))

    def __bool__(self) -> bool:
        return bool(object.__getattribute__(self, "_ff_target"))

    def __iter__(self):
        return iter(object.__getattribute__(self, "_ff_target"))

    def __dir__(self):
        return dir(object.__getattribute__(self, "_ff_target"))

    def __repr__(self) -> str:
        target = object.__getattribute__(self, "_ff_target")
        mode = object.__getattribute__(self, "_ff_mode")
        return f"FastForwardProxy({target!r}, mode={mode})"

    # Special methods are looked up on the type, so __getattr__ never sees
    # them; forward the common protocols explicitly.

    def __str__(self) -> str:
        return str(object.__getattribute__(self, "_ff_target"))

    def __format__(self, format_spec: str) -> str:
        return format(object.__getattribute__(self, "_ff_target"), format_spec)

    def __eq__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") == _unwrap(other)

    def __ne__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") != _unwrap(other)

    def __lt__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") < _unwrap(other)

    def __le__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") <= _unwrap(other)

    def __gt__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") > _unwrap(other)

    def __ge__(self, other: Any) -> bool:
        return object.__getattribute__(self, "_ff_target") >= _unwrap(other)

    def __hash__(self) -> int:
        return hash(object.__getattribute__(self, "_ff_target"))

    def __enter__(self):
        return object.__getattribute__(self, "_ff_target").__enter__()

    def __exit__(self, exc_type, exc_value, traceback):
        return object.__getattribute__(self, "_ff_target").__exit__(
            exc_type, exc_value, traceback
        )

    def __aenter__(self):
        return object.__getattribute__(self, "_ff_target").__aenter__()

    def __aexit__(self, exc_type, exc_value, traceback):
        return object.__getattribute__(self, "_ff_target").__aexit__(
            exc_type, exc_value, traceback
        )

    def __next__(self):
        return next(object.__getattribute__(self, "_ff_target"))

    def __aiter__(self):
        return object.__getattribute__(self, "_ff_target").__aiter__()

    def __anext__(self):
        return object.__getattribute__(self, "_ff_target").__anext__()

    def __fspath__(self):
        return os.fspath(object.__getattribute__(self, "_ff_target"))

    def __truediv__(self, other: Any) -> Any:
        return object.__getattribute__(self, "_ff_target") / _unwrap(other)

    def __rtruediv__(self, other: Any) -> Any:
        return _unwrap(other) / object.__getattribute__(self, "_ff_target")


def _unwrap(value: Any) -> Any:
    if isinstance(value, FastForwardProxy):
        return object.__getattribute__(value, "_ff_target")
    return value


def fast_forward(
    target: Any,
    options: Any = None,
    *,
    cache: Any = None,
    mode: Any = None,
    key: Optional[KeyTransformer] = None,
) -> Any:
    """
    Wrap an object in a proxy that caches method call results.

    Args:
        target: The object to wrap
        options: A cache backend, a FastForwardOptions, or a mapping with
            'cache', 'mode' and 'key' entries. Invalid options are ignored.
        cache: Cache backend, overrides options (default: new InMemoryCache)
        mode: CacheMode or its name, overrides options and FASTFORWARD_MODE
        key: Key transformer, overrides options

    Returns:
        A FastForwardProxy around target

    The mode is resolved once, here: explicit mode first, then the
    FASTFORWARD_MODE environment variable, then CacheMode.ON. Changing the
    environment afterwards does not affect the returned proxy.
    """
    backend = None
    explicit_mode = None
    key_transformer = None

    if options is not None:
        if is_cache(options):
            backend = options
        elif is_fast_forward_options(options):
            fields = vars(options) if isinstance(options, FastForwardOptions) else options
            backend = fields.get("cache")
            explicit_mode = fields.get("mode")
            key_transformer = fields.get("key")
        else:
            logger.warning("Ignoring invalid fast_forward options: %r", options)

    if cache is not None:
        if is_cache(cache):
            backend = cache
        else:
            logger.warning("Ignoring invalid cache backend: %r", cache)

    if mode is not None:
        if parse_cache_mode(mode) is not None:
            explicit_mode = mode
        else:
            logger.warning("Ignoring invalid cache mode: %r", mode)

    if key is not None:
        if callable(key):
            key_transformer = key
        else:
            logger.warning("Ignoring non-callable key transformer: %r", key)

    resolved_mode = resolve_cache_mode(explicit_mode, get_cache_mode_from_env())
    if backend is None:
        backend = InMemoryCache()

    logger.debug(
        "Wrapping %s with %s in %s mode",
        type(target).__name__,
        type(backend).__name__,
        resolved_mode,
    )
    return FastForwardProxy(target, backend, resolved_mode, key_transformer)
