"""Entry point: python -m history_state

Drive a HistoryStore from stdin, one command per line::

    set 3          undoable write (value parsed as YAML: 3, "a", [1, 2] ...)
    silent 9       write that is not recorded in history
    undo / redo / reset / show / quit
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO, Any

import yaml

from history_state.core.config import load_config
from history_state.core.history import HistoryStore
from history_state.core.models import HistoryMode, HistoryState, InvalidOperation

HELP_TEXT = "commands: set VALUE | silent VALUE | undo | redo | reset | show | help | quit"


def _parse_value(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def format_state(state: HistoryState) -> str:
    return f"present={state.present!r} past={list(state.past)!r} future={list(state.future)!r}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="history_state",
        description="Interactive undo/redo history. Reads commands from stdin.",
    )
    parser.add_argument("--initial", default="null", help="Initial value, parsed as YAML (default: null)")
    parser.add_argument("--capacity", type=int, default=None, help="Maximum undo depth")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in HistoryMode],
        default=None,
        help="compatible: writes keep redo values; strict: writes discard them",
    )
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument(
        "--strict-errors",
        action="store_true",
        help="Exit with code 1 if any undo/redo was rejected",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(store: HistoryStore, lines, out: IO[str], err: IO[str]) -> int:
    """Execute commands from *lines*; return the number of rejected operations."""
    errors = 0
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        verb, _, arg = line.partition(" ")
        verb = verb.lower()

        if verb in ("quit", "exit"):
            break
        if verb == "help":
            print(HELP_TEXT, file=out)
            continue
        if verb == "show":
            print(format_state(store.state), file=out)
            continue

        try:
            if verb == "set":
                store.set(_parse_value(arg))
            elif verb == "silent":
                store.set(_parse_value(arg), undoable=False)
            elif verb == "undo":
                store.undo()
            elif verb == "redo":
                store.redo()
            elif verb == "reset":
                store.reset()
            else:
                print(f"error: unknown command {verb!r} ({HELP_TEXT})", file=err)
                errors += 1
                continue
        except InvalidOperation as exc:
            print(f"error: {exc}", file=err)
            errors += 1
            continue
        print(format_state(store.state), file=out)
    return errors


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"[history_state] Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)
    if args.capacity is not None:
        config.capacity = args.capacity
    if args.mode is not None:
        config.mode = HistoryMode.parse(args.mode)

    try:
        store = HistoryStore.from_config(_parse_value(args.initial), config)
    except ValueError as exc:
        print(f"[history_state] {exc}", file=sys.stderr)
        sys.exit(2)

    errors = run(store, sys.stdin, sys.stdout, sys.stderr)
    if errors and args.strict_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
