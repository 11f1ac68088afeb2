"""Shared fixtures for MUSTER tests."""

from datetime import datetime

import pytest

from muster.contexts.state import MemoryStorage, Store

NOW = datetime(2026, 10, 18, 9, 30, 0)


@pytest.fixture(autouse=True)
def no_event_log(monkeypatch):
    """Keep Tier 2 event logging off unless a test opts in."""
    monkeypatch.delenv("PIPELINE_EVENTS_FILE", raising=False)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    """Store seeded on an empty in-memory medium."""
    return Store(storage)


@pytest.fixture
def empty_store(storage):
    """Store with no applicants or events."""
    store = Store(storage)

    def clear(state):
        state["applicants"] = []
        state["events"] = []

    store.set_state(clear)
    return store
