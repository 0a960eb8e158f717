#!/usr/bin/python
# -*- coding: utf-8 -*-
__author__ = "bibow"

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence


class CacheMode(str, Enum):
    """
    Cache operation modes.

    ON          - read from cache if available, otherwise compute and store
    OFF         - never read, never store
    UPDATE_ONLY - always compute and store, never read
    READ_ONLY   - only read; a miss returns None without computing
    """

    ON = "ON"
    OFF = "OFF"
    UPDATE_ONLY = "UPDATE_ONLY"
    READ_ONLY = "READ_ONLY"

    # Aliases
    NORMAL = "ON"
    DISABLED = "OFF"
    FORCE_REFRESH = "UPDATE_ONLY"

    def __str__(self) -> str:
        return self.value


class KeyComponents(NamedTuple):
    """Method name and arguments used to build a cache key."""

    method: str
    args: Sequence[Any]
    kwargs: Optional[Dict[str, Any]] = None


KeyTransformer = Callable[..., KeyComponents]


class AsyncResult:
    """
    Cached entry holding the resolved value of an awaitable.

    Keeps "this call returned an awaitable" apart from a plain cached value,
    so a cache hit can hand the caller a fresh awaitable again.
    """

    __slots__ = ("value",)

    MARKER = "__ff_async_result__"

    def __init__(self, value: Any) -> None:
        self.value = value

    def to_record(self) -> Dict[str, Any]:
        return {self.MARKER: True, "value": self.value}

    @classmethod
    def is_record(cls, data: Any) -> bool:
        # NOTE: a user payload of exactly this shape is read back as a tagged entry.
        return (
            isinstance(data, dict)
            and len(data) == 2
            and data.get(cls.MARKER) is True
            and "value" in data
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, AsyncResult):
            return NotImplemented
        return self.value == other.value

    def __repr__(self) -> str:
        return f"AsyncResult({self.value!r})"


@dataclass
class FastForwardOptions:
    """
    Options for fast_forward().

    Args:
        cache: Backend implementing get/set/has/delete/clear
        mode: CacheMode (or its name) overriding FASTFORWARD_MODE
        key: Key transformer applied before key generation
    """

    cache: Any = None
    mode: Any = None
    key: Optional[KeyTransformer] = None
