"""
Action types for the lifecycle middleware.

All state changes are represented as actions. An originating action may carry
a pending computation in ``promise``; the middleware expands it into derived
actions tagged with a lifecycle stage and a transaction id.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..errors import ConfigurationError
from ..validation import validate_action_type


class Lifecycle(str, Enum):
    """Stage of an asynchronous operation."""
    START = "start"
    SUCCESS = "success"
    FAILURE = "failure"


HOOK_NAMES = ("on_start", "on_success", "on_failure", "on_finish")

# Keys with a fixed meaning in the serialized meta mapping
_META_KEYS = ("lifecycle", "transaction", "start_payload")

Hook = Callable[..., Any]


@dataclass(frozen=True)
class ActionMeta:
    """
    Metadata carried by an action.

    Caller-supplied data lives in ``extra`` and hooks in the ``on_*`` slots;
    both are copied unchanged onto every derived action. The middleware only
    sets ``lifecycle``, ``transaction`` and ``start_payload``.

    Attributes:
        lifecycle: Stage marker (a Lifecycle, or an unrecognised string)
        transaction: Id shared by all actions of one operation
        start_payload: Payload of the originating action (terminal stages only)
        on_start: Called with (payload, get_state) after START
        on_success: Called with (data, get_state) after SUCCESS
        on_failure: Called with (error, get_state) after FAILURE
        on_finish: Called with (succeeded, get_state) after either terminal stage
        extra: Caller-supplied metadata
    """
    lifecycle: Optional[Union[Lifecycle, str]] = None
    transaction: Optional[str] = None
    start_payload: Any = None
    on_start: Optional[Hook] = None
    on_success: Optional[Hook] = None
    on_failure: Optional[Hook] = None
    on_finish: Optional[Hook] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in HOOK_NAMES:
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise ConfigurationError(
                    f"The {name} hook must be callable, "
                    f"but found {type(hook).__name__} instead.",
                    key=name,
                )
        if isinstance(self.lifecycle, str) and not isinstance(self.lifecycle, Lifecycle):
            try:
                object.__setattr__(self, "lifecycle", Lifecycle(self.lifecycle))
            except ValueError:
                pass  # unknown stages are kept as-is

    def advance(
        self,
        lifecycle: Lifecycle,
        transaction: str,
        **changes: Any,
    ) -> "ActionMeta":
        """Copy with a new stage and transaction id."""
        return replace(self, lifecycle=lifecycle, transaction=transaction, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the wire shape. Hooks are not serialized."""
        data = dict(self.extra)
        if self.lifecycle is not None:
            data["lifecycle"] = getattr(self.lifecycle, "value", self.lifecycle)
        if self.transaction is not None:
            data["transaction"] = self.transaction
        if self.lifecycle in (Lifecycle.SUCCESS, Lifecycle.FAILURE):
            data["start_payload"] = self.start_payload
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ActionMeta":
        """Build meta from a mapping, routing known keys to their fields."""
        data = dict(data or {})
        hooks = {name: data.pop(name) for name in HOOK_NAMES if name in data}
        known = {key: data.pop(key) for key in _META_KEYS if key in data}
        return cls(extra=data, **known, **hooks)


@dataclass(frozen=True)
class Action:
    """
    Immutable action.

    Attributes:
        type: Caller-chosen discriminator, stable across one operation
        payload: START: original payload; SUCCESS: result; FAILURE: error
        meta: Metadata (an ActionMeta; a mapping is converted with ActionMeta.from_dict)
        error: True only on FAILURE actions
        promise: Pending computation, only on the originating action
    """
    type: str
    payload: Any = None
    meta: Union[ActionMeta, Mapping[str, Any]] = field(default_factory=ActionMeta)
    error: bool = False
    promise: Any = None

    def __post_init__(self):
        validate_action_type(self.type).raise_if_invalid("Action")
        if self.meta is None:
            object.__setattr__(self, "meta", ActionMeta())
        elif isinstance(self.meta, Mapping):
            object.__setattr__(self, "meta", ActionMeta.from_dict(self.meta))
        elif not isinstance(self.meta, ActionMeta):
            raise ConfigurationError(
                f"The meta of action {self.type} must be an ActionMeta or a mapping, "
                f"but found {type(self.meta).__name__} instead.",
                action_type=self.type,
                key="meta",
            )

    @property
    def lifecycle(self) -> Optional[Union[Lifecycle, str]]:
        return self.meta.lifecycle

    @property
    def transaction(self) -> Optional[str]:
        return self.meta.transaction

    @property
    def is_lifecycle(self) -> bool:
        """True for actions produced by the lifecycle middleware."""
        return self.meta.lifecycle is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging/persistence. The promise is dropped."""
        return {
            "type": self.type,
            "payload": self.payload,
            "error": self.error,
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Action":
        """Deserialize from dictionary."""
        return cls(
            type=data["type"],
            payload=data.get("payload"),
            meta=ActionMeta.from_dict(data.get("meta")),
            error=bool(data.get("error", False)),
            promise=data.get("promise"),
        )


@dataclass(frozen=True)
class Outcome:
    """Settled result returned to whoever awaits an async dispatch."""
    payload: Any = None
    error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        if self.error:
            return {"error": True, "payload": self.payload}
        return {"payload": self.payload}


# Action factory functions

def async_action(
    action_type: str,
    promise: Any,
    payload: Any = None,
    meta: Optional[Mapping[str, Any]] = None,
    **hooks: Hook,
) -> Action:
    """
    Create an originating action for a pending computation.

    Example:
        >>> async_action("LOAD_USER", fetch_user(1), payload={"id": 1},
        ...              on_success=lambda user, get_state: print(user))
    """
    unknown = set(hooks) - set(HOOK_NAMES)
    if unknown:
        raise ConfigurationError(
            f"Unknown hook(s) {sorted(unknown)} for action {action_type}. "
            f"Valid hooks are: {', '.join(HOOK_NAMES)}",
            action_type=action_type,
            key=sorted(unknown)[0],
        )
    return Action(
        type=action_type,
        payload=payload,
        meta=ActionMeta(extra=dict(meta or {}), **hooks),
        promise=promise,
    )
