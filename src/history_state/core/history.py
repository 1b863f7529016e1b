"""HistoryStore: bounded undo/redo value holder."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic

from history_state.core.models import (
    Command,
    HistoryMode,
    HistoryState,
    InvalidOperation,
    Redo,
    Reset,
    SetValue,
    T,
    Undo,
)
from history_state.core.transition import DEFAULT_CAPACITY, check_capacity, transition

_log = logging.getLogger(__name__)

Listener = Callable[[HistoryState, HistoryState], None]


class HistoryStore(Generic[T]):
    """Owns the current ``HistoryState`` and applies commands to it.

    Usage::

        store = HistoryStore(0, capacity=20)
        store.set(1)
        store.set(lambda prev: prev + 1)
        store.undo()
        store.present  # 1
    """

    def __init__(
        self,
        initial: T,
        capacity: int = DEFAULT_CAPACITY,
        mode: HistoryMode | str = HistoryMode.COMPATIBLE,
    ) -> None:
        self._capacity = check_capacity(capacity)
        self._mode = HistoryMode.parse(mode)
        self._baseline: HistoryState[T] = HistoryState.initial(initial)
        self._state: HistoryState[T] = self._baseline
        self._listeners: list[Listener] = []

    @classmethod
    def from_config(cls, initial: T, config: Any) -> "HistoryStore[T]":
        """Build a store from a ``HistoryConfig`` (capacity and mode)."""
        return cls(initial, capacity=config.capacity, mode=config.mode)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @property
    def state(self) -> HistoryState[T]:
        return self._state

    @property
    def present(self) -> T:
        return self._state.present

    @property
    def initial(self) -> T:
        """The value supplied at construction; ``reset`` always returns to it."""
        return self._baseline.present

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def mode(self) -> HistoryMode:
        return self._mode

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    @property
    def undo_count(self) -> int:
        """Number of values currently available to undo."""
        return len(self._state.past)

    @property
    def redo_count(self) -> int:
        """Number of values currently available to redo."""
        return len(self._state.future)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> HistoryState[T]:
        """Apply *command* and commit the resulting state."""
        old = self._state
        try:
            new = transition(
                old,
                command,
                capacity=self._capacity,
                baseline=self._baseline,
                mode=self._mode,
            )
        except InvalidOperation as exc:
            _log.info("Rejected %s: %s", type(command).__name__, exc)
            raise
        self._commit(old, new, command)
        return new

    def set(self, value: Any, undoable: bool = True) -> HistoryState[T]:
        """Write a new present value (or ``(present) -> value`` updater).

        With ``undoable=False`` only the present changes; past and future are
        left untouched.
        """
        return self.dispatch(SetValue(value, undoable))

    def undo(self) -> HistoryState[T]:
        """Step back one value. Raises ``InvalidOperation`` if past is empty."""
        return self.dispatch(Undo())

    def redo(self) -> HistoryState[T]:
        """Step forward one value. Raises ``InvalidOperation`` if future is empty."""
        return self.dispatch(Redo())

    def reset(self) -> HistoryState[T]:
        """Return to the construction value with empty past and future."""
        return self.dispatch(Reset())

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(new_state, old_state)`` after each change.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, old: HistoryState[T], new: HistoryState[T], command: Command) -> None:
        self._state = new
        if new is old:
            return
        _log.debug(
            "%s -> present=%r past=%d future=%d",
            type(command).__name__,
            new.present,
            len(new.past),
            len(new.future),
        )
        for listener in list(self._listeners):
            try:
                listener(new, old)
            except Exception as exc:
                _log.exception("History listener %r failed: %s", listener, exc)
            if self._state is not new:
                # A listener committed a newer state; its own commit notified everyone.
                break

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(present={self.present!r}, "
            f"undo={self.undo_count}, redo={self.redo_count}, capacity={self._capacity})"
        )
