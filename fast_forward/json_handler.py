#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Canonical JSON Handler

orjson-based serialization for the two places fast_forward needs JSON:
- cache keys: compact, keys sorted recursively, strict about types
- file cache records: indented, lenient about custom objects
"""

__author__ = "bibow"

from decimal import Decimal
from typing import Any, Dict, Optional, Set, Union

import orjson

from .types import AsyncResult

CANONICAL_OPTIONS = orjson.OPT_SORT_KEYS
RECORD_OPTIONS = orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z


class CanonicalJSONHandler:
    """
    JSON operations with a fixed, order-independent output.

    Features:
    - Sorted keys so {"a": 1, "b": 2} and {"b": 2, "a": 1} serialize identically
    - Native orjson handling of datetime, Enum, UUID and dataclasses
    - Tuples and sets tagged so they never serialize like lists
    - Self-referential structures raise instead of looping

    Tagged containers are {"__tuple__": [...]} and {"__set__": [...]}; a dict
    argument of exactly that shape produces the same key.
    """

    TUPLE_TAG = "__tuple__"
    SET_TAG = "__set__"

    @staticmethod
    def _canonical_handler(obj: Any) -> Any:
        """Serialization handler for types orjson does not cover natively."""
        if isinstance(obj, Decimal):
            return float(obj)
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

    @staticmethod
    def _sort_key(item: Any) -> bytes:
        return orjson.dumps(
            item, default=CanonicalJSONHandler._canonical_handler, option=CANONICAL_OPTIONS
        )

    @staticmethod
    def _canonicalize(obj: Any, _path: Optional[Set[int]] = None) -> Any:
        """
        Rewrite containers orjson would flatten to lists.

        Tuples (namedtuples included) become {"__tuple__": [...]}, sets become
        {"__set__": [...]} with items in serialized order.

        Raises:
            ValueError: obj contains itself
        """
        if not isinstance(obj, (dict, list, tuple, set, frozenset)):
            return obj

        _path = _path if _path is not None else set()
        if id(obj) in _path:
            raise ValueError("Circular reference detected")
        _path.add(id(obj))

        canonicalize = CanonicalJSONHandler._canonicalize
        try:
            if isinstance(obj, dict):
                return {key: canonicalize(value, _path) for key, value in obj.items()}
            elif isinstance(obj, list):
                return [canonicalize(item, _path) for item in obj]
            elif isinstance(obj, tuple):
                return {
                    CanonicalJSONHandler.TUPLE_TAG: [
                        canonicalize(item, _path) for item in obj
                    ]
                }
            return {
                CanonicalJSONHandler.SET_TAG: sorted(
                    (canonicalize(item, _path) for item in obj),
                    key=CanonicalJSONHandler._sort_key,
                )
            }
        finally:
            _path.discard(id(obj))

    @staticmethod
    def _record_handler(obj: Any) -> Any:
        """Serialization handler for cached values, falls back to public attributes."""
        if isinstance(obj, AsyncResult):
            return obj.to_record()
        elif isinstance(obj, Decimal):
            return float(obj)
        elif isinstance(obj, (set, frozenset)):
            return list(obj)
        elif hasattr(obj, "_asdict"):
            return obj._asdict()
        elif hasattr(obj, "__dict__"):
            return {
                key: value
                for key, value in vars(obj).items()
                if not key.startswith("_")  # Skip private attributes
            }
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

    @staticmethod
    def canonical_dumps(obj: Any) -> str:
        """
        Serialize obj to a compact JSON string with recursively sorted keys.

        Raises:
            ValueError: obj is self-referential
            TypeError: obj has non-string dict keys or contains a value with
                no JSON representation
        """
        return orjson.dumps(
            CanonicalJSONHandler._canonicalize(obj),
            default=CanonicalJSONHandler._canonical_handler,
            option=CANONICAL_OPTIONS,
        ).decode("utf-8")

    @staticmethod
    def dumps_record(record: Dict[str, Any]) -> bytes:
        """Serialize a file cache record as indented JSON bytes."""
        return orjson.dumps(
            record,
            default=CanonicalJSONHandler._record_handler,
            option=RECORD_OPTIONS,
        )

    @staticmethod
    def loads_record(data: Union[str, bytes]) -> Dict[str, Any]:
        """
        Parse a file cache record.

        Returns:
            The record dict, with a tagged async value rehydrated to AsyncResult

        Raises:
            ValueError: data is not JSON or not a record object
        """
        record = orjson.loads(data)
        if not isinstance(record, dict) or "key" not in record or "value" not in record:
            raise ValueError("Not a cache record")

        if AsyncResult.is_record(record["value"]):
            record["value"] = AsyncResult(record["value"]["value"])
        return record
