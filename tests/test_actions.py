"""
Tests for Action, ActionMeta and Outcome.
"""
import dataclasses

import pytest

from actionpack.core.actions import (
    Action,
    ActionMeta,
    Lifecycle,
    Outcome,
    async_action,
)
from actionpack.errors import ConfigurationError


class TestActionMeta:
    """Test the structured meta record."""

    def test_defaults(self):
        meta = ActionMeta()

        assert meta.lifecycle is None
        assert meta.transaction is None
        assert meta.extra == {}

    def test_known_lifecycle_string_coerced(self):
        """Wire strings become Lifecycle members."""
        assert ActionMeta(lifecycle="success").lifecycle is Lifecycle.SUCCESS

    def test_unknown_lifecycle_kept(self):
        """Unknown stages survive for forward compatibility."""
        assert ActionMeta(lifecycle="progress").lifecycle == "progress"

    def test_non_callable_hook_rejected(self):
        """Hook slots are validated once, at construction."""
        with pytest.raises(ConfigurationError, match="on_success") as exc_info:
            ActionMeta(on_success="print")

        assert exc_info.value.key == "on_success"

    def test_advance_keeps_hooks_and_extra(self):
        hook = lambda *args: None
        meta = ActionMeta(on_finish=hook, extra={"page": 2})

        advanced = meta.advance(Lifecycle.FAILURE, "t-1", start_payload="q")

        assert advanced.lifecycle is Lifecycle.FAILURE
        assert advanced.transaction == "t-1"
        assert advanced.start_payload == "q"
        assert advanced.on_finish is hook
        assert advanced.extra == {"page": 2}
        assert meta.lifecycle is None

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            ActionMeta().transaction = "x"


class TestActionSerialization:
    """Test the wire shape of actions."""

    def test_start_to_dict(self):
        action = Action(
            "LOAD",
            meta=ActionMeta(lifecycle=Lifecycle.START, transaction="t-1", extra={"a": 1}),
        )

        assert action.to_dict() == {
            "type": "LOAD",
            "payload": None,
            "error": False,
            "meta": {"a": 1, "lifecycle": "start", "transaction": "t-1"},
        }

    def test_failure_to_dict_includes_start_payload(self):
        action = Action(
            "LOAD",
            payload="boom",
            error=True,
            meta=ActionMeta(lifecycle=Lifecycle.FAILURE, transaction="t-1", start_payload=3),
        )

        assert action.to_dict()["meta"] == {
            "lifecycle": "failure",
            "transaction": "t-1",
            "start_payload": 3,
        }

    def test_hooks_and_promise_not_serialized(self):
        action = async_action("LOAD", object(), on_start=lambda *a: None)

        data = action.to_dict()

        assert "promise" not in data
        assert data["meta"] == {}

    def test_from_dict_synthetic_action(self):
        """Outside code can build lifecycle actions from plain data."""
        action = Action.from_dict({
            "type": "LOAD",
            "payload": {"id": 1},
            "meta": {"lifecycle": "success", "transaction": "abc", "start_payload": None, "trace": "x"},
        })

        assert action.lifecycle is Lifecycle.SUCCESS
        assert action.transaction == "abc"
        assert action.is_lifecycle
        assert action.meta.extra == {"trace": "x"}
        assert action.error is False

    def test_plain_action_not_lifecycle(self):
        assert not Action("PING").is_lifecycle

    def test_action_type_required(self):
        with pytest.raises(ConfigurationError):
            Action("")
        with pytest.raises(ConfigurationError):
            Action(None)

    def test_mapping_meta_converted(self):
        """A plain dict meta is routed through ActionMeta.from_dict."""
        hook = lambda *args: None
        action = Action("LOAD", meta={"source": "x", "on_finish": hook})

        assert isinstance(action.meta, ActionMeta)
        assert action.meta.extra == {"source": "x"}
        assert action.meta.on_finish is hook
        assert not action.is_lifecycle

    def test_none_meta_defaults(self):
        assert Action("LOAD", meta=None).meta == ActionMeta()

    def test_invalid_meta_rejected(self):
        with pytest.raises(ConfigurationError, match="ActionMeta or a mapping") as exc_info:
            Action("LOAD", meta=42)

        assert exc_info.value.key == "meta"
        assert exc_info.value.action_type == "LOAD"


class TestAsyncAction:
    """Test the async_action factory."""

    def test_builds_originating_action(self):
        promise = object()
        on_start = lambda payload, get_state: None

        action = async_action("LOAD", promise, payload=1, meta={"k": "v"}, on_start=on_start)

        assert action.promise is promise
        assert action.payload == 1
        assert action.meta.extra == {"k": "v"}
        assert action.meta.on_start is on_start
        assert not action.is_lifecycle

    def test_unknown_hook_rejected(self):
        with pytest.raises(ConfigurationError, match="on_done"):
            async_action("LOAD", object(), on_done=lambda *a: None)


class TestOutcome:
    """Test Outcome shapes."""

    def test_success_shape(self):
        assert Outcome(payload=1).to_dict() == {"payload": 1}

    def test_failure_shape(self):
        assert Outcome(payload="e", error=True).to_dict() == {"error": True, "payload": "e"}
