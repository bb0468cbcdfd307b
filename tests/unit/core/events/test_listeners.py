"""Tests for ListenerRegistry and Listener."""

from __future__ import annotations

import dataclasses

import pytest

from plugbus.core.events.listeners import Listener, ListenerRegistry


def identity(d):
    return d


# ============================================================================
# REGISTRATION TESTS
# ============================================================================


class TestRegister:
    """Tests for ListenerRegistry.register()."""

    def test_register_adds_listener(self):
        """Test that a registered listener is returned by query."""
        registry = ListenerRegistry()
        registry.register("x", identity)

        listeners = registry.query("x")
        assert len(listeners) == 1
        assert listeners[0].mask == "x"
        assert listeners[0].callback is identity
        assert listeners[0].priority == 0

    def test_ids_are_unique_and_increasing(self):
        """Test that each listener gets a fresh id."""
        registry = ListenerRegistry()
        for _ in range(5):
            registry.register("x", identity)

        ids = [l.id for l in registry.query("x", sort=False)]
        assert ids == [0, 1, 2, 3, 4]

    def test_ids_not_reused_after_dispose(self):
        """Test that disposing does not free an id for reuse."""
        registry = ListenerRegistry()
        dispose = registry.register("x", identity)
        dispose()
        registry.register("x", identity)

        assert registry.query("x")[0].id == 1

    def test_len_counts_all_masks(self):
        """Test that len() counts listeners of every event."""
        registry = ListenerRegistry()
        registry.register("a", identity)
        registry.register("b", identity)
        assert len(registry) == 2

    def test_listener_is_frozen(self):
        """Test that listeners cannot be mutated."""
        listener = Listener(id=0, mask="x", callback=identity)
        with pytest.raises(dataclasses.FrozenInstanceError):
            listener.priority = 5  # type: ignore[misc]


class TestDisposer:
    """Tests for the disposer returned by register()."""

    def test_disposer_removes_listener(self):
        """Test that the disposer removes exactly its listener."""
        registry = ListenerRegistry()
        dispose = registry.register("x", identity)
        registry.register("x", identity)

        assert dispose() == 1
        assert len(registry.query("x")) == 1

    def test_disposer_is_idempotent(self):
        """Test that a second dispose call removes nothing."""
        registry = ListenerRegistry()
        dispose = registry.register("x", identity)

        assert dispose() == 1
        assert dispose() == 0
        assert dispose() == 0

    def test_disposer_after_remove_matching(self):
        """Test that disposing an already removed listener returns 0."""
        registry = ListenerRegistry()
        dispose = registry.register("x", identity)
        registry.remove_matching("x")

        assert dispose() == 0


# ============================================================================
# ONCE TESTS
# ============================================================================


class TestRegisterOnce:
    """Tests for ListenerRegistry.register_once()."""

    def test_once_removes_itself_after_first_call(self):
        """Test that the once listener is gone after being called."""
        registry = ListenerRegistry()
        registry.register_once("x", lambda d: d + 1)

        listener = registry.query("x")[0]
        assert listener.callback(1) == 2
        assert registry.has("x") is False

    def test_once_wrapper_passes_data_through_after_firing(self):
        """Test that a stale reference to the wrapper returns the input."""
        calls = []

        def callback(d):
            calls.append(d)
            return d * 10

        registry = ListenerRegistry()
        registry.register_once("x", callback)
        wrapper = registry.query("x")[0].callback

        assert wrapper(2) == 20
        assert wrapper(3) == 3
        assert calls == [2]

    def test_once_disposer_before_firing(self):
        """Test that the once disposer removes the listener like a normal one."""
        registry = ListenerRegistry()
        dispose = registry.register_once("x", identity)

        assert dispose() == 1
        assert dispose() == 0

    def test_once_failing_callback_stays_registered(self):
        """Test that a raising callback does not consume the once listener."""

        def boom(d):
            raise RuntimeError("boom")

        registry = ListenerRegistry()
        registry.register_once("x", boom)

        with pytest.raises(RuntimeError):
            registry.query("x")[0].callback(1)
        assert registry.has("x") is True

    def test_once_failing_callback_fires_on_retry(self):
        """Test that a once listener can succeed after a failed call."""
        attempts = []

        def flaky(d):
            attempts.append(d)
            if len(attempts) == 1:
                raise RuntimeError("first call fails")
            return d + 1

        registry = ListenerRegistry()
        registry.register_once("x", flaky)
        wrapper = registry.query("x")[0].callback

        with pytest.raises(RuntimeError):
            wrapper(1)
        assert wrapper(2) == 3
        assert registry.has("x") is False

    def test_once_reentrant_call_passes_through(self):
        """Test that calling the wrapper from inside its callback skips it."""
        calls = []
        wrappers = []

        def callback(d):
            calls.append(d)
            # Nested call while the first one is still running
            assert wrappers[0](d + 100) == d + 100
            return d

        registry = ListenerRegistry()
        registry.register_once("x", callback)
        wrappers.append(registry.query("x")[0].callback)

        assert wrappers[0](1) == 1
        assert calls == [1]
        assert registry.has("x") is False

    def test_once_keeps_priority(self):
        """Test that once listeners honour priority."""
        registry = ListenerRegistry()
        registry.register("x", identity, priority=1)
        registry.register_once("x", identity, priority=5)

        assert [l.priority for l in registry.query("x")] == [5, 1]


# ============================================================================
# QUERY TESTS
# ============================================================================


class TestQuery:
    """Tests for ListenerRegistry.query() and has()."""

    def test_query_exact_match_only(self):
        """Test that masks are compared by exact equality."""
        registry = ListenerRegistry()
        registry.register("user.created", identity)
        registry.register("user.*", identity)
        registry.register("user", identity)

        assert [l.mask for l in registry.query("user.created")] == ["user.created"]
        assert registry.query("user.deleted") == []

    def test_query_sorted_by_descending_priority(self):
        """Test that query orders by descending priority."""
        registry = ListenerRegistry()
        registry.register("x", identity, priority=0)
        registry.register("x", identity, priority=10)
        registry.register("x", identity, priority=-5)
        registry.register("x", identity, priority=3)

        assert [l.priority for l in registry.query("x")] == [10, 3, 0, -5]

    def test_query_stable_on_ties(self):
        """Test that equal priorities keep registration order."""
        registry = ListenerRegistry()
        for priority in (1, 0, 1, 0, 1):
            registry.register("x", identity, priority=priority)

        listeners = registry.query("x")
        assert [(l.priority, l.id) for l in listeners] == [
            (1, 0),
            (1, 2),
            (1, 4),
            (0, 1),
            (0, 3),
        ]

    def test_query_unsorted_keeps_insertion_order(self):
        """Test that sort=False returns registration order."""
        registry = ListenerRegistry()
        registry.register("x", identity, priority=0)
        registry.register("x", identity, priority=10)

        assert [l.priority for l in registry.query("x", sort=False)] == [0, 10]

    def test_query_returns_snapshot(self):
        """Test that later mutations do not affect a returned list."""
        registry = ListenerRegistry()
        dispose = registry.register("x", identity)
        snapshot = registry.query("x")

        dispose()
        registry.register("x", identity)

        assert len(snapshot) == 1
        assert snapshot[0].id == 0

    def test_has(self):
        """Test has() for registered and unknown events."""
        registry = ListenerRegistry()
        registry.register("x", identity)

        assert registry.has("x") is True
        assert registry.has("y") is False


class TestRemoveMatching:
    """Tests for ListenerRegistry.remove_matching()."""

    def test_removes_all_listeners_for_event(self):
        """Test that every listener of the event is removed."""
        registry = ListenerRegistry()
        registry.register("x", identity)
        registry.register("x", identity, priority=3)
        registry.register("y", identity)

        assert registry.remove_matching("x") == 2
        assert registry.has("x") is False
        assert registry.has("y") is True

    def test_remove_unknown_event(self):
        """Test that removing an unknown event removes nothing."""
        registry = ListenerRegistry()
        registry.register("x", identity)

        assert registry.remove_matching("y") == 0
        assert len(registry) == 1
