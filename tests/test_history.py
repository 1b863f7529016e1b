"""Tests for HistoryStore (undo/redo/reset/silent writes)."""

from __future__ import annotations

import logging

import pytest

from history_state.core.config import HistoryConfig
from history_state.core.history import HistoryStore
from history_state.core.models import HistoryMode, HistoryState, InvalidOperation, SetValue


class TestHistoryStore:
    def test_fresh_store(self, store):
        assert store.present == 0
        assert store.initial == 0
        assert store.capacity == 20
        assert store.mode is HistoryMode.COMPATIBLE
        assert not store.can_undo
        assert not store.can_redo

    def test_set_enables_undo(self, store):
        store.set(1)
        assert store.present == 1
        assert store.can_undo
        assert not store.can_redo

    def test_undo_on_fresh_store_raises(self, store):
        with pytest.raises(InvalidOperation):
            store.undo()

    def test_redo_on_fresh_store_raises(self, store):
        with pytest.raises(InvalidOperation):
            store.redo()

    def test_failed_undo_leaves_state_unchanged(self, store):
        store.set(1, undoable=False)
        before = store.state
        with pytest.raises(InvalidOperation):
            store.undo()
        assert store.state is before

    def test_failed_redo_leaves_state_unchanged(self, store):
        store.set(1)
        before = store.state
        with pytest.raises(InvalidOperation):
            store.redo()
        assert store.state is before

    def test_undo_redo_round_trip(self, store):
        for value in (1, 2, 3):
            store.set(value)
        before = store.present
        store.undo()
        store.redo()
        assert store.present == before

    def test_scenario(self, store):
        store.set(1)
        store.set(2)
        store.set(3)
        assert store.present == 3
        assert store.state.past == (0, 1, 2)

        store.undo()
        assert store.present == 2
        assert store.state.past == (0, 1)
        assert store.state.future == (3,)

        store.undo()
        assert store.present == 1
        assert store.state.past == (0,)
        assert store.state.future == (3, 2)

        store.redo()
        assert store.present == 2
        assert store.state.future == (3,)

        past, future = store.state.past, store.state.future
        store.set(9, undoable=False)
        assert store.present == 9
        assert store.state.past == past
        assert store.state.future == future

        store.reset()
        assert store.present == 0
        assert store.state.past == ()
        assert store.state.future == ()

    def test_lazy_set_uses_current_present(self, store):
        store.set(5)
        store.set(lambda prev: prev + 1)
        assert store.present == 6
        store.set(lambda prev: prev + 1)
        assert store.present == 7

    def test_max_depth_respected(self, small_store):
        for i in range(1, 15):
            small_store.set(i)
            assert small_store.undo_count <= 3
        assert small_store.state.past == (11, 12, 13)

    def test_reset_after_deep_history(self, small_store):
        for i in range(1, 10):
            small_store.set(i)
        small_store.undo()
        state = small_store.reset()
        assert state == HistoryState.initial(0)
        assert small_store.present == 0
        assert not small_store.can_undo
        assert not small_store.can_redo

    def test_reset_returns_to_construction_value_not_oldest_past(self, small_store):
        for i in range(1, 10):
            small_store.set(i)
        assert small_store.state.past[0] != 0
        small_store.reset()
        assert small_store.present == 0

    def test_compatible_set_keeps_redo(self, store):
        store.set(1)
        store.set(2)
        store.undo()
        store.set(5)
        assert store.can_redo
        store.redo()
        assert store.present == 2
        assert store.state.past == (0, 1, 5)

    def test_strict_set_clears_redo(self):
        store = HistoryStore(0, mode="strict")
        store.set(1)
        store.undo()
        assert store.can_redo
        store.set(2)
        assert not store.can_redo

    def test_counts(self, store):
        store.set(1)
        store.set(2)
        store.undo()
        assert store.undo_count == 1
        assert store.redo_count == 1

    def test_dispatch_accepts_commands(self, store):
        state = store.dispatch(SetValue(4))
        assert state is store.state
        assert store.present == 4

    def test_previous_state_is_not_changed_by_later_commands(self, store):
        store.set(1)
        held = store.state
        store.set(2)
        store.undo()
        store.undo()
        assert held.present == 1
        assert held.past == (0,)

    @pytest.mark.parametrize("bad", [0, -3, 1.5])
    def test_invalid_capacity(self, bad):
        with pytest.raises(ValueError):
            HistoryStore(0, capacity=bad)

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="Unknown history mode"):
            HistoryStore(0, mode="branching")

    def test_from_config(self):
        store = HistoryStore.from_config("a", HistoryConfig(capacity=2, mode=HistoryMode.STRICT))
        assert store.capacity == 2
        assert store.mode is HistoryMode.STRICT
        assert store.present == "a"

    def test_rejected_undo_is_logged(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="history_state.core.history"):
            with pytest.raises(InvalidOperation):
                store.undo()
        assert "Undo not allowed" in caplog.text


class TestListeners:
    def test_listener_receives_new_and_old(self, store):
        calls = []
        store.subscribe(lambda new, old: calls.append((old.present, new.present)))
        store.set(1)
        store.undo()
        assert calls == [(0, 1), (1, 0)]

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda new, old: calls.append(new.present))
        store.set(1)
        unsubscribe()
        unsubscribe()
        store.set(2)
        assert calls == [1]

    def test_rejected_command_does_not_notify(self, store):
        calls = []
        store.subscribe(lambda new, old: calls.append(new))
        with pytest.raises(InvalidOperation):
            store.redo()
        assert calls == []

    def test_reset_on_fresh_store_does_not_notify(self, store):
        calls = []
        store.subscribe(lambda new, old: calls.append(new))
        store.reset()
        assert calls == []

    def test_failing_listener_is_logged_and_others_still_run(self, store, caplog):
        calls = []

        def broken(new, old):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(lambda new, old: calls.append(new.present))
        with caplog.at_level(logging.ERROR, logger="history_state.core.history"):
            store.set(1)
        assert calls == [1]
        assert store.present == 1
        assert "boom" in caplog.text

    def test_listener_issuing_command_does_not_send_stale_state(self, store):
        seen_before, seen_after = [], []

        store.subscribe(lambda new, old: seen_before.append(new.present))

        def clamp(new, old):
            if new.present > 10:
                store.set(10, undoable=False)

        store.subscribe(clamp)
        store.subscribe(lambda new, old: seen_after.append(new.present))

        store.set(50)
        assert store.present == 10
        assert seen_before == [50, 10]
        assert seen_after == [10]
