"""Pytest fixtures shared across all tests."""

from __future__ import annotations

import pytest

from history_state.core.config import ENV_CAPACITY, ENV_MODE
from history_state.core.history import HistoryStore


@pytest.fixture
def store() -> HistoryStore:
    """Store holding 0 with the default capacity of 20."""
    return HistoryStore(0, capacity=20)


@pytest.fixture
def small_store() -> HistoryStore:
    """Store with a tiny capacity so trimming is easy to observe."""
    return HistoryStore(0, capacity=3)


@pytest.fixture
def clean_env(monkeypatch) -> None:
    """Make sure HISTORY_STATE_* variables from the host do not leak in."""
    monkeypatch.delenv(ENV_CAPACITY, raising=False)
    monkeypatch.delenv(ENV_MODE, raising=False)
