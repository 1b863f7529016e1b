"""Bounded undo/redo history for a single value."""

from history_state.core.config import HistoryConfig, load_config
from history_state.core.history import HistoryStore
from history_state.core.locking import SynchronizedHistoryStore
from history_state.core.models import (
    HistoryMode,
    HistoryState,
    InvalidOperation,
    Redo,
    Reset,
    SetValue,
    Undo,
)
from history_state.core.transition import DEFAULT_CAPACITY, transition

__all__ = [
    "DEFAULT_CAPACITY",
    "HistoryConfig",
    "HistoryMode",
    "HistoryState",
    "HistoryStore",
    "InvalidOperation",
    "Redo",
    "Reset",
    "SetValue",
    "SynchronizedHistoryStore",
    "Undo",
    "load_config",
    "transition",
]
