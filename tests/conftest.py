#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Test configuration and fixtures for fast_forward tests.
"""

import logging
import os
import sys

import pytest

# Add the package root to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from fast_forward import FileSystemCache, InMemoryCache  # noqa: E402
from fast_forward.utils import MODE_ENV_VAR  # noqa: E402

# Configure logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)


@pytest.fixture(autouse=True)
def clean_mode_env(monkeypatch):
    """Keep a FASTFORWARD_MODE from the shell out of the tests."""
    monkeypatch.delenv(MODE_ENV_VAR, raising=False)


@pytest.fixture
def memory_cache():
    return InMemoryCache()


@pytest.fixture
def fs_cache(tmp_path):
    return FileSystemCache(cache_dir=tmp_path / "cache", namespace="test")


class CallCounter:
    """Target object that counts how often each method runs."""

    def __init__(self):
        self.calls = {}
        self.counter = 0
        self.label = "counter"
        self.tags = ["a", "b"]
        self.settings = {"retries": 3}

    def _hit(self, name):
        self.calls[name] = self.calls.get(name, 0) + 1

    def add(self, a, b):
        self._hit("add")
        return a + b

    def get_count(self):
        self._hit("get_count")
        value = self.counter
        self.counter += 1
        return value

    def describe(self, payload, **options):
        self._hit("describe")
        return {"payload": payload, "options": options}

    def nothing(self):
        self._hit("nothing")
        return None

    async def fetch(self, item_id):
        self._hit("fetch")
        return {"id": item_id, "count": self.calls["fetch"]}

    async def fail(self, message):
        self._hit("fail")
        raise ValueError(message)


@pytest.fixture
def target():
    return CallCounter()
