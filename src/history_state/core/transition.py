"""Pure transition function for the history state machine.

``transition`` never mutates its input: every command yields a new
``HistoryState``. A command that fails raises before anything is built, so the
caller's current state is untouched.
"""

from __future__ import annotations

from typing import Any

from history_state.core.models import (
    Command,
    HistoryMode,
    HistoryState,
    InvalidOperation,
    Redo,
    Reset,
    SetValue,
    Undo,
)

DEFAULT_CAPACITY = 20


def check_capacity(capacity: Any) -> int:
    """Return *capacity* if it is a positive int, else raise ValueError."""
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
    return capacity


def resolve_value(value: Any, present: Any) -> Any:
    """Evaluate a lazy update against *present*; literals are returned as-is."""
    return value(present) if callable(value) else value


def _bounded(seq: tuple, capacity: int) -> tuple:
    # Keep the newest *capacity* entries (drop from the front).
    return seq[-capacity:] if len(seq) > capacity else seq


def transition(
    state: HistoryState,
    command: Command,
    *,
    capacity: int = DEFAULT_CAPACITY,
    baseline: HistoryState | None = None,
    mode: HistoryMode = HistoryMode.COMPATIBLE,
) -> HistoryState:
    """Apply *command* to *state* and return the resulting state.

    Args:
        state: Current snapshot.
        command: One of ``SetValue``, ``Undo``, ``Redo``, ``Reset``.
        capacity: Maximum length of ``past`` after the transition.
        baseline: State returned by ``Reset``. Required for ``Reset``.
        mode: ``COMPATIBLE`` keeps ``future`` on undoable writes,
              ``STRICT`` clears it.

    Raises:
        InvalidOperation: ``Undo`` with an empty past or ``Redo`` with an
            empty future.
        TypeError: *command* is not a known command.
        ValueError: *capacity* is not a positive integer, or ``Reset`` was
            requested without a baseline.
    """
    check_capacity(capacity)

    if isinstance(command, SetValue):
        new_present = resolve_value(command.value, state.present)
        if not command.undoable:
            return state.evolve(present=new_present)
        future = () if mode is HistoryMode.STRICT else state.future
        return state.evolve(
            past=_bounded(state.past + (state.present,), capacity),
            present=new_present,
            future=future,
        )

    if isinstance(command, Undo):
        if not state.past:
            raise InvalidOperation("Undo not allowed", command=command, state=state)
        return HistoryState(
            past=state.past[:-1],
            present=state.past[-1],
            future=state.future + (state.present,),
        )

    if isinstance(command, Redo):
        if not state.future:
            raise InvalidOperation("Redo not allowed", command=command, state=state)
        return HistoryState(
            past=_bounded(state.past + (state.present,), capacity),
            present=state.future[-1],
            future=state.future[:-1],
        )

    if isinstance(command, Reset):
        if baseline is None:
            raise ValueError("Reset requires a baseline state")
        return baseline

    raise TypeError(f"Unknown history command: {command!r}")
