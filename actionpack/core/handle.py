"""
Pure lifecycle dispatcher for reducers.

Routes a lifecycle-tagged action to handler functions from a small table:

    def reducer(state, action):
        if action.type == "LOAD_USER":
            return handle(state, action, {
                "start": lambda s, a: {**s, "loading": True},
                "success": lambda s, a: {**s, "user": a.payload},
                "finish": lambda s, a: {**s, "loading": False},
            })
        return state
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from .actions import Lifecycle
from ..config import Strictness
from ..errors import ConfigurationError, UsageError
from ..validation import validate_handler_keys

Handler = Callable[[Any, Any], Any]
HandlerTable = Mapping[str, Optional[Handler]]

HANDLER_KEYS = ("start", "success", "failure", "finish", "always")

# Stage -> ordered handler slots applied before "always"
_STAGE_SLOTS = {
    Lifecycle.START: ("start",),
    Lifecycle.SUCCESS: ("success", "finish"),
    Lifecycle.FAILURE: ("failure", "finish"),
}


def _action_type(action: Any) -> Any:
    return getattr(action, "type", None)


def verify_handlers(handlers: HandlerTable, action: Any) -> None:
    """
    Check every key of ``handlers`` is a known handler name.

    Raises:
        ConfigurationError: naming the first unknown key and the action type
    """
    result = validate_handler_keys(handlers, HANDLER_KEYS)
    if not result.is_valid:
        bad = result.errors[0].value
        raise ConfigurationError(
            f"The handler for action {_action_type(action)} had a {bad} property defined, "
            f"but this is not a valid handler key. Valid keys are: {', '.join(HANDLER_KEYS)}",
            action_type=_action_type(action),
            key=bad,
        )


def apply_handler(state: Any, fn: Optional[Handler], action: Any, name: str) -> Any:
    """Apply one handler slot; an unset slot leaves state unchanged."""
    if fn is None:
        return state
    if not callable(fn):
        raise ConfigurationError(
            f"The {name} handler for action {_action_type(action)} is expected to be "
            f"a function, but found {type(fn).__name__} instead.",
            action_type=_action_type(action),
            key=name,
        )
    result = fn(state, action)
    if result is None:
        raise ConfigurationError(
            f"The {name} handler for action {_action_type(action)} is expected to "
            f"return a new state object, but returned None.",
            action_type=_action_type(action),
            key=name,
        )
    return result


def handle(
    state: Any,
    action: Any,
    handlers: HandlerTable,
    strictness: Strictness = Strictness.VALIDATE,
) -> Any:
    """
    Apply the handlers relevant to ``action``'s lifecycle stage.

    START runs ``start``; SUCCESS runs ``success`` then ``finish``; FAILURE
    runs ``failure`` then ``finish``; an unknown stage runs nothing. ``always``
    runs last in every case.

    Raises:
        UsageError: the action carries no lifecycle marker
        ConfigurationError: bad handler key (VALIDATE only), non-callable
            handler, or handler returning None
    """
    if strictness == Strictness.VALIDATE:
        verify_handlers(handlers, action)

    meta = getattr(action, "meta", None)
    lifecycle = getattr(meta, "lifecycle", None)
    if lifecycle is None:
        raise UsageError(
            f"handle() was used on the action {_action_type(action)}, but it doesn't "
            f"appear to be an action dispatched by the lifecycle middleware.",
            action_type=_action_type(action),
        )

    for name in _STAGE_SLOTS.get(lifecycle, ()):
        state = apply_handler(state, handlers.get(name), action, name)
    return apply_handler(state, handlers.get("always"), action, "always")


class LifecycleDispatcher:
    """
    handle() with a strictness chosen once, at construction time.

    Example:
        >>> dispatcher = LifecycleDispatcher(Strictness.FAST)
        >>> state = dispatcher(state, action, {"success": on_success})
    """

    def __init__(self, strictness: Strictness = Strictness.VALIDATE):
        self.strictness = Strictness(strictness)

    def handle(self, state: Any, action: Any, handlers: HandlerTable) -> Any:
        return handle(state, action, handlers, self.strictness)

    __call__ = handle

    def __repr__(self) -> str:
        return f"LifecycleDispatcher(strictness={self.strictness.value!r})"
