"""Core data model: history snapshots, commands and errors.

All other modules import from here. Keep this module free of side-effects and
Qt imports so it can be used in tests and CLI contexts without a display.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class HistoryMode(str, Enum):
    """How an undoable write treats values that were undone away."""

    COMPATIBLE = "compatible"  # future is kept as-is
    STRICT = "strict"  # future is cleared on every undoable write

    @classmethod
    def parse(cls, raw: "HistoryMode | str") -> "HistoryMode":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown history mode {raw!r} (expected one of: {choices})") from None


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HistoryState(Generic[T]):
    """Immutable snapshot of a history: past, present and future."""

    present: T
    past: tuple = ()  # oldest first; the undo target is past[-1]
    future: tuple = ()  # oldest-undone first; the redo target is future[-1]

    @classmethod
    def initial(cls, value: T) -> "HistoryState[T]":
        return cls(present=value)

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def evolve(self, **changes: Any) -> "HistoryState[T]":
        """Return a copy with *changes* applied; sequences are stored as tuples."""
        for key in ("past", "future"):
            if key in changes:
                changes[key] = tuple(changes[key])
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {"past": list(self.past), "present": self.present, "future": list(self.future)}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SetValue:
    """Write a new present value.

    ``value`` may be a literal or a callable ``(present) -> new value``; the
    callable is resolved against the present at the moment the command is
    applied. To store a callable as a value, wrap it: ``lambda _: fn``.
    """

    value: Any
    undoable: bool = True


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Command = Union[SetValue, Undo, Redo, Reset]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class InvalidOperation(RuntimeError):
    """Raised when undo/redo is requested with nothing to undo/redo.

    The store is left exactly as it was before the call.
    """

    def __init__(self, message: str, command: Any = None, state: Any = None) -> None:
        super().__init__(message)
        self.command = command
        self.state = state
