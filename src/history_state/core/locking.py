"""SynchronizedHistoryStore: a HistoryStore that several threads may drive."""

from __future__ import annotations

import threading
from typing import Any

from history_state.core.history import HistoryStore
from history_state.core.models import Command, HistoryMode, HistoryState, T
from history_state.core.transition import DEFAULT_CAPACITY


class SynchronizedHistoryStore(HistoryStore[T]):
    """Serializes commands with a re-entrant lock.

    Each command (including the evaluation of a lazy updater and the listener
    callbacks) runs to completion before the next one starts. Listeners may
    read the store or issue further commands from the same thread.

    Readers are not locked: a HistoryState is immutable and replacing the
    reference is atomic, so any read sees one complete committed state.
    """

    def __init__(
        self,
        initial: T,
        capacity: int = DEFAULT_CAPACITY,
        mode: HistoryMode | str = HistoryMode.COMPATIBLE,
    ) -> None:
        super().__init__(initial, capacity=capacity, mode=mode)
        self._lock = threading.RLock()

    def dispatch(self, command: Command) -> HistoryState[T]:
        with self._lock:
            return super().dispatch(command)

    def snapshot(self) -> dict[str, Any]:
        """Return present/can_undo/can_redo taken from a single committed state."""
        state = self._state
        return {"present": state.present, "can_undo": state.can_undo, "can_redo": state.can_redo}
