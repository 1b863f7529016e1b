"""HistoryBinding: expose a HistoryStore to Qt through signals and slots.

Widgets connect to the signals to refresh themselves (e.g. enable the
Undo/Redo toolbar actions from ``history_changed``) and call the slots from
their own handlers.
"""

from __future__ import annotations

import logging
from typing import Any

from PySide6.QtCore import QObject, Signal, Slot

from history_state.core.history import HistoryStore
from history_state.core.models import HistoryState, InvalidOperation

_log = logging.getLogger(__name__)


class HistoryBinding(QObject):
    """Mediates between UI actions and a HistoryStore."""

    # Emitted with the new present value after any change
    present_changed = Signal(object)

    # Undo/redo availability changed (update toolbar buttons)
    history_changed = Signal(bool, bool)  # can_undo, can_redo

    # An undo/redo was requested with nothing to undo/redo
    operation_rejected = Signal(str)  # error message

    def __init__(self, store: HistoryStore, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._store = store
        self._unsubscribe = store.subscribe(self._on_store_changed)

    @property
    def store(self) -> HistoryStore:
        return self._store

    @property
    def present(self) -> Any:
        return self._store.present

    @property
    def can_undo(self) -> bool:
        return self._store.can_undo

    @property
    def can_redo(self) -> bool:
        return self._store.can_redo

    @Slot(object)
    @Slot(object, bool)
    def set_value(self, value: Any, undoable: bool = True) -> None:
        self._store.set(value, undoable)

    @Slot()
    def undo(self) -> None:
        self._guarded(self._store.undo)

    @Slot()
    def redo(self) -> None:
        self._guarded(self._store.redo)

    @Slot()
    def reset(self) -> None:
        self._store.reset()

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()

    def _guarded(self, op) -> None:
        # Exceptions must not escape into the Qt event loop.
        try:
            op()
        except InvalidOperation as exc:
            _log.debug("History operation rejected: %s", exc)
            self.operation_rejected.emit(str(exc))

    def _on_store_changed(self, new: HistoryState, old: HistoryState) -> None:
        self.present_changed.emit(new.present)
        if (new.can_undo, new.can_redo) != (old.can_undo, old.can_redo):
            self.history_changed.emit(new.can_undo, new.can_redo)
