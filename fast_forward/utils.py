#!/usr/bin/python
# -*- coding: utf-8 -*-
__author__ = "bibow"

import logging
import os
from collections.abc import AsyncIterator, Iterable, Iterator
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from .json_handler import CanonicalJSONHandler
from .types import CacheMode, FastForwardOptions, KeyTransformer

logger = logging.getLogger("fast_forward.utils")

MODE_ENV_VAR = "FASTFORWARD_MODE"

# Returned by generate_cache_key when a call cannot be cached
NO_KEY = None

_SCALAR_TYPES = (
    str,
    bytes,
    bytearray,
    int,
    float,
    complex,
    bool,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    Enum,
    UUID,
    PurePath,
)
_ARRAY_TYPES = (list, tuple, set, frozenset, range, memoryview)
_ITERATOR_TYPES = (Iterator, AsyncIterator)

_CACHE_METHODS = ("get", "set", "has", "delete", "clear")


def generate_cache_key(
    method_name: str,
    args: Sequence[Any],
    key_transformer: Optional[KeyTransformer] = None,
    kwargs: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """
    Generate a cache key from a method name and its arguments.

    Keys do not depend on the order dict keys were inserted in. Positional-only
    calls serialize as a JSON array (``add:[2,3]``); calls with keyword
    arguments serialize as ``{"args": [...], "kwargs": {...}}``.

    Args:
        method_name: Name of the method being called
        args: Positional arguments passed to the method
        key_transformer: Optional function returning KeyComponents. It is called
            as ``(method, args)``, or ``(method, args, kwargs)`` when the call
            has keyword arguments
        kwargs: Keyword arguments passed to the method

    Returns:
        Cache key string, or NO_KEY when the arguments cannot be serialized
    """
    try:
        method = method_name
        call_args = list(args)
        call_kwargs = kwargs or None

        if key_transformer:
            if call_kwargs:
                transformed = key_transformer(method, call_args, call_kwargs)
            else:
                transformed = key_transformer(method, call_args)
            components = _key_components(transformed)
            if components is None:
                logger.warning(
                    "Key transformer returned %s for %s, expected KeyComponents; "
                    "call is not cached",
                    type(transformed).__name__,
                    method_name,
                )
                return NO_KEY
            method, call_args, call_kwargs = components

        if call_kwargs:
            serialized = CanonicalJSONHandler.canonical_dumps(
                {"args": call_args, "kwargs": call_kwargs}
            )
        else:
            serialized = CanonicalJSONHandler.canonical_dumps(call_args)
        return f"{method}:{serialized}"
    except Exception as exc:
        logger.debug("Unable to generate cache key for %s: %s", method_name, exc)
        return NO_KEY


def _key_components(
    transformed: Any,
) -> Optional[Tuple[str, List[Any], Optional[Dict[str, Any]]]]:
    """
    Normalize a key transformer result.

    Accepts KeyComponents, a (method, args[, kwargs]) tuple or a mapping with
    'method', 'args' and optional 'kwargs' entries.
    """
    if isinstance(transformed, Mapping):
        if "method" not in transformed or "args" not in transformed:
            return None
        method = transformed["method"]
        args = transformed["args"]
        kwargs = transformed.get("kwargs")
    elif isinstance(transformed, tuple) and len(transformed) in (2, 3):
        method, args = transformed[0], transformed[1]
        kwargs = transformed[2] if len(transformed) == 3 else None
    else:
        return None

    if isinstance(args, (str, bytes)) or not isinstance(args, Iterable):
        return None
    return method, list(args), kwargs or None


def is_object(value: Any) -> bool:
    """
    Return True for composite values that should be wrapped recursively.

    None, scalars (numbers, strings, bytes, dates, enums, UUIDs, paths),
    array-likes (list, tuple, set, ...) and iterators are not objects.
    """
    if value is None:
        return False
    return not isinstance(value, _SCALAR_TYPES + _ARRAY_TYPES + _ITERATOR_TYPES)


def is_cache(value: Any) -> bool:
    """Return True if value implements get/set/has/delete/clear."""
    if value is None or isinstance(value, (type,) + _SCALAR_TYPES + _ARRAY_TYPES):
        return False
    return all(callable(getattr(value, name, None)) for name in _CACHE_METHODS)


def is_fast_forward_options(value: Any) -> bool:
    """
    Return True if value is a valid FastForwardOptions or options mapping.

    Every field that is set must be valid: ``cache`` a backend, ``mode`` a
    CacheMode or one of its names, ``key`` a callable.
    """
    if isinstance(value, FastForwardOptions):
        fields = {"cache": value.cache, "mode": value.mode, "key": value.key}
    elif isinstance(value, Mapping):
        if not set(value).issubset({"cache", "mode", "key"}):
            return False
        fields = value
    else:
        return False

    cache = fields.get("cache")
    mode = fields.get("mode")
    key = fields.get("key")
    return (
        (cache is None or is_cache(cache))
        and (mode is None or parse_cache_mode(mode) is not None)
        and (key is None or callable(key))
    )


def parse_cache_mode(value: Any) -> Optional[CacheMode]:
    """
    Parse a string value into a CacheMode.

    Args:
        value: Mode name, case-insensitive, surrounding whitespace ignored

    Returns:
        The matching CacheMode, or None if value is empty or invalid
    """
    if isinstance(value, CacheMode):
        return value
    if not isinstance(value, str) or value.strip() == "":
        return None

    try:
        return CacheMode(value.strip().upper())
    except ValueError:
        return None


def get_cache_mode_from_env(
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[CacheMode]:
    """Read the cache mode from FASTFORWARD_MODE, if one is set."""
    if environ is None:
        environ = os.environ
    return parse_cache_mode(environ.get(MODE_ENV_VAR))


def resolve_cache_mode(explicit_mode: Any = None, env_signal: Any = None) -> CacheMode:
    """
    Resolve the effective cache mode.

    Priority: explicit mode, then the environment signal, then CacheMode.ON.
    Unparseable values at either level are ignored.
    """
    mode = parse_cache_mode(explicit_mode)
    if mode is not None:
        return mode

    mode = parse_cache_mode(env_signal)
    if mode is not None:
        return mode

    return CacheMode.ON
