#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Tests for cache key generation, mode resolution and type guards.
"""

import logging
from collections import namedtuple
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import pytest

from fast_forward import (
    NO_KEY,
    CacheMode,
    FastForwardOptions,
    FileSystemCache,
    InMemoryCache,
    KeyComponents,
    generate_cache_key,
    get_cache_mode_from_env,
    parse_cache_mode,
    resolve_cache_mode,
)
from fast_forward.utils import (
    is_cache,
    is_fast_forward_options,
    is_object,
)


class TestGenerateCacheKey:
    def test_positional_key_format(self):
        assert generate_cache_key("add", (2, 3)) == "add:[2,3]"
        assert generate_cache_key("ping", ()) == "ping:[]"

    def test_same_arguments_same_key(self):
        args = [{"id": 1, "tags": ["x", "y"]}, "text"]
        assert generate_cache_key("method", args) == generate_cache_key("method", args)

    def test_dict_key_order_does_not_matter(self):
        first = generate_cache_key("m", [{"a": 1, "b": {"c": 2, "d": 3}}])
        second = generate_cache_key("m", [{"b": {"d": 3, "c": 2}, "a": 1}])
        assert first == second
        assert first == 'm:[{"a":1,"b":{"c":2,"d":3}}]'

    def test_list_order_matters(self):
        assert generate_cache_key("m", [[1, 2]]) != generate_cache_key("m", [[2, 1]])

    def test_distinct_falsy_values(self):
        keys = {
            generate_cache_key("m", []),
            generate_cache_key("m", [None]),
            generate_cache_key("m", [""]),
            generate_cache_key("m", [0]),
            generate_cache_key("m", [False]),
        }
        assert len(keys) == 5

    def test_int_and_float_are_distinct(self):
        assert generate_cache_key("m", [1]) != generate_cache_key("m", [1.0])

    def test_method_name_is_part_of_key(self):
        assert generate_cache_key("a", [1]) != generate_cache_key("b", [1])

    def test_keyword_arguments(self):
        key = generate_cache_key("m", (1,), kwargs={"z": 2, "y": 3})
        assert key == 'm:{"args":[1],"kwargs":{"y":3,"z":2}}'
        assert key == generate_cache_key("m", [1], kwargs={"y": 3, "z": 2})

    def test_keyword_and_positional_forms_do_not_collide(self):
        positional = generate_cache_key("m", [{"args": [1], "kwargs": {"y": 3}}])
        keyword = generate_cache_key("m", [1], kwargs={"y": 3})
        assert positional != keyword

    def test_empty_kwargs_use_positional_form(self):
        assert generate_cache_key("m", [1], kwargs={}) == "m:[1]"

    def test_circular_reference_returns_no_key(self):
        data = {"name": "loop"}
        data["self"] = data
        assert generate_cache_key("m", [data]) is NO_KEY

    def test_unsupported_type_returns_no_key(self):
        assert generate_cache_key("m", [object()]) is NO_KEY
        assert generate_cache_key("m", [lambda: None]) is NO_KEY

    def test_non_string_dict_keys_return_no_key(self):
        assert generate_cache_key("m", [{1: "one"}]) is NO_KEY

    def test_extra_types(self):
        Point = namedtuple("Point", "x y")
        moment = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

        assert generate_cache_key("m", [Point(1, 2)]) == 'm:[{"__tuple__":[1,2]}]'
        assert generate_cache_key("m", [{3, 1, 2}]) == 'm:[{"__set__":[1,2,3]}]'
        assert generate_cache_key("m", [Decimal("1.5")]) == "m:[1.5]"
        assert generate_cache_key("m", [CacheMode.ON]) == 'm:["ON"]'
        assert "2024-01-01T12:00:00" in generate_cache_key("m", [moment])

    def test_list_tuple_and_set_arguments_are_distinct(self):
        keys = {
            generate_cache_key("m", [[1, 2]]),
            generate_cache_key("m", [(1, 2)]),
            generate_cache_key("m", [{1, 2}]),
            generate_cache_key("m", [frozenset({1, 2})]),
        }
        # set and frozenset compare equal, so they share a key
        assert len(keys) == 3

    def test_set_order_does_not_matter(self):
        assert generate_cache_key("m", [{"b", "a", "c"}]) == generate_cache_key(
            "m", [{"c", "a", "b"}]
        )

    def test_namedtuple_keys_like_equal_tuple(self):
        Point = namedtuple("Point", "x y")
        assert generate_cache_key("m", [Point(1, 2)]) == generate_cache_key("m", [(1, 2)])

    def test_nested_tuples_are_tagged(self):
        key = generate_cache_key("m", [{"range": (1, 5)}], kwargs={"ids": [(1,), [1]]})
        assert key == (
            'm:{"args":[{"range":{"__tuple__":[1,5]}}],'
            '"kwargs":{"ids":[{"__tuple__":[1]},[1]]}}'
        )

    def test_repeated_argument_is_not_a_cycle(self):
        shared = {"a": 1}
        assert generate_cache_key("m", [shared, shared]) == 'm:[{"a":1},{"a":1}]'

    def test_key_transformer_replaces_components(self):
        def transformer(method, args):
            return KeyComponents(method=f"api_{method}", args=args[:1])

        key = generate_cache_key("fetch_user", ["123", 1700000000], transformer)
        assert key == 'api_fetch_user:["123"]'

    def test_key_transformer_collapses_volatile_arguments(self):
        def ignore_timestamp(method, args):
            return KeyComponents(method, [args[0], None])

        first = generate_cache_key("fetch_user", ["456", 1000], ignore_timestamp)
        second = generate_cache_key("fetch_user", ["456", 6000], ignore_timestamp)
        assert first == second

    def test_key_transformer_receives_kwargs(self):
        seen = {}

        def transformer(method, args, kwargs=None):
            seen["kwargs"] = kwargs
            return KeyComponents(method, args, {"page": kwargs["page"]})

        key = generate_cache_key("search", ["q"], transformer, {"page": 2, "trace": "abc"})
        assert seen["kwargs"] == {"page": 2, "trace": "abc"}
        assert key == 'search:{"args":["q"],"kwargs":{"page":2}}'

    def test_raising_key_transformer_returns_no_key(self):
        def broken(method, args):
            raise RuntimeError("boom")

        assert generate_cache_key("m", [1], broken) is NO_KEY

    def test_key_transformer_may_return_plain_tuple(self):
        def transformer(method, args):
            return (method, args[:1])

        assert generate_cache_key("fetch", ["a", 1], transformer) == 'fetch:["a"]'

    def test_key_transformer_may_return_mapping(self):
        def transformer(method, args, kwargs=None):
            return {"method": method, "args": args, "kwargs": {"page": kwargs["page"]}}

        key = generate_cache_key("search", ["q"], transformer, {"page": 1, "trace": "x"})
        assert key == 'search:{"args":["q"],"kwargs":{"page":1}}'

    @pytest.mark.parametrize(
        "result", ["fetch:a", None, {"method": "m"}, ("m",), ("m", "abc")]
    )
    def test_unusable_key_transformer_result_logs_warning(self, result, caplog):
        def transformer(method, args):
            return result

        with caplog.at_level(logging.WARNING, logger="fast_forward.utils"):
            assert generate_cache_key("m", [1], transformer) is NO_KEY
        assert "expected KeyComponents" in caplog.text


class TestModeResolution:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("ON", CacheMode.ON),
            ("off", CacheMode.OFF),
            ("Update_Only", CacheMode.UPDATE_ONLY),
            ("  read_only  ", CacheMode.READ_ONLY),
            (CacheMode.READ_ONLY, CacheMode.READ_ONLY),
        ],
    )
    def test_parse_valid_modes(self, value, expected):
        assert parse_cache_mode(value) is expected

    @pytest.mark.parametrize("value", [None, "", "   ", "INVALID", "NORMAL", 1])
    def test_parse_invalid_modes(self, value):
        assert parse_cache_mode(value) is None

    def test_aliases(self):
        assert CacheMode.NORMAL is CacheMode.ON
        assert CacheMode.DISABLED is CacheMode.OFF
        assert CacheMode.FORCE_REFRESH is CacheMode.UPDATE_ONLY
        assert len(list(CacheMode)) == 4

    def test_explicit_mode_wins(self):
        assert resolve_cache_mode(CacheMode.OFF, "READ_ONLY") is CacheMode.OFF
        assert resolve_cache_mode("update_only", "READ_ONLY") is CacheMode.UPDATE_ONLY

    def test_env_signal_used_without_explicit_mode(self):
        assert resolve_cache_mode(None, "read_only") is CacheMode.READ_ONLY

    def test_invalid_values_fall_back_to_on(self):
        assert resolve_cache_mode() is CacheMode.ON
        assert resolve_cache_mode("bogus", "") is CacheMode.ON
        assert resolve_cache_mode(None, "bogus") is CacheMode.ON

    def test_mode_from_env(self, monkeypatch):
        monkeypatch.setenv("FASTFORWARD_MODE", "off")
        assert get_cache_mode_from_env() is CacheMode.OFF

        monkeypatch.setenv("FASTFORWARD_MODE", "")
        assert get_cache_mode_from_env() is None

        monkeypatch.delenv("FASTFORWARD_MODE")
        assert get_cache_mode_from_env() is None

    def test_mode_from_explicit_environ(self):
        assert get_cache_mode_from_env({"FASTFORWARD_MODE": "READ_ONLY"}) is CacheMode.READ_ONLY
        assert get_cache_mode_from_env({}) is None


class TestTypeGuards:
    @pytest.mark.parametrize(
        "value", [{"a": 1}, SimpleNamespace(a=1), InMemoryCache()]
    )
    def test_is_object_true(self, value):
        assert is_object(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            None,
            1,
            1.5,
            True,
            "text",
            b"bytes",
            [1],
            (1,),
            {1},
            Decimal("1"),
            CacheMode.ON,
            uuid4(),
            Path("/tmp"),
            iter([1]),
            (n for n in range(2)),
        ],
    )
    def test_is_object_false(self, value):
        assert is_object(value) is False

    def test_is_cache(self, tmp_path):
        assert is_cache(InMemoryCache()) is True
        assert is_cache(FileSystemCache(cache_dir=tmp_path)) is True
        assert is_cache(InMemoryCache) is False
        assert is_cache({"get": 1}) is False
        assert is_cache({}) is False
        assert is_cache(None) is False

    def test_is_cache_accepts_duck_typed_backend(self):
        backend = SimpleNamespace(
            get=lambda key, default=None: None,
            set=lambda key, value: None,
            has=lambda key: False,
            delete=lambda key: False,
            clear=lambda: None,
        )
        assert is_cache(backend) is True

    def test_is_fast_forward_options(self):
        assert is_fast_forward_options({}) is True
        assert is_fast_forward_options({"cache": InMemoryCache()}) is True
        assert is_fast_forward_options({"mode": "read_only"}) is True
        assert is_fast_forward_options({"key": lambda m, a: KeyComponents(m, a)}) is True
        assert is_fast_forward_options(FastForwardOptions(mode=CacheMode.OFF)) is True

    def test_is_fast_forward_options_rejects_invalid(self):
        assert is_fast_forward_options(None) is False
        assert is_fast_forward_options("ON") is False
        assert is_fast_forward_options({"cache": "not a cache"}) is False
        assert is_fast_forward_options({"mode": "SOMETIMES"}) is False
        assert is_fast_forward_options({"key": "not callable"}) is False
        assert is_fast_forward_options({"unknown": 1}) is False
