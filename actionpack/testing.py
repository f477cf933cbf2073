"""
Helpers for testing reducers and async actions.

- make_lifecycle_action: build a START/SUCCESS/FAILURE action without a store
- Deferred: a thenable settled by hand, for deterministic middleware tests
- ActionRecorder: middleware that records every action it sees
"""
from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Tuple, Union

from .core.actions import Action, Lifecycle
from .transaction import new_transaction_id

_UNSET = object()


def make_lifecycle_action(
    action: Action,
    lifecycle: Union[Lifecycle, str],
    payload: Any = _UNSET,
    transaction: Optional[str] = None,
) -> Action:
    """
    Build the action the lifecycle middleware would dispatch at ``lifecycle``.

    Args:
        action: The originating action (its payload becomes start_payload)
        lifecycle: Stage to simulate
        payload: Result/error for terminal stages (default: the original payload)
        transaction: Transaction id (default: a fresh one)

    Example:
        >>> action = async_action("LOAD", None, payload={"id": 1})
        >>> success = make_lifecycle_action(action, Lifecycle.SUCCESS, {"name": "Ann"})
        >>> reducer(state, success)
    """
    transaction = transaction or new_transaction_id()
    stage = Lifecycle(lifecycle)
    if stage == Lifecycle.START:
        return Action(
            type=action.type,
            payload=action.payload,
            meta=action.meta.advance(stage, transaction),
        )
    return Action(
        type=action.type,
        payload=action.payload if payload is _UNSET else payload,
        error=stage == Lifecycle.FAILURE,
        meta=action.meta.advance(stage, transaction, start_payload=action.payload),
    )


class _Settled:
    """Handle returned by Deferred.then()."""

    def __init__(self):
        self._done = False
        self._value: Any = None
        self._error: Optional[BaseException] = None

    def done(self) -> bool:
        return self._done

    def result(self) -> Any:
        if not self._done:
            raise RuntimeError("Deferred has not settled yet")
        if self._error is not None:
            raise self._error
        return self._value


class Deferred:
    """
    A thenable settled explicitly by the test.

    Continuations registered with then() run synchronously inside
    resolve()/reject(), or immediately if already settled.

    Example:
        >>> deferred = Deferred()
        >>> handle = store.dispatch(async_action("LOAD", deferred))
        >>> deferred.resolve({"id": 1})
        >>> handle.result()
        Outcome(payload={'id': 1}, error=False)
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state: Optional[Tuple[bool, Any]] = None
        self._callbacks: List[Tuple[Callable, Callable, _Settled]] = []

    @property
    def settled(self) -> bool:
        return self._state is not None

    def then(self, on_fulfilled: Callable[[Any], Any], on_rejected: Callable[[Any], Any]) -> _Settled:
        handle = _Settled()
        with self._lock:
            if self._state is None:
                self._callbacks.append((on_fulfilled, on_rejected, handle))
                return handle
        self._run(on_fulfilled, on_rejected, handle)
        return handle

    def resolve(self, value: Any = None) -> None:
        self._settle(True, value)

    def reject(self, error: Any) -> None:
        self._settle(False, error)

    def _settle(self, ok: bool, value: Any) -> None:
        with self._lock:
            if self._state is not None:
                raise RuntimeError("Deferred already settled")
            self._state = (ok, value)
            callbacks, self._callbacks = self._callbacks, []
        for on_fulfilled, on_rejected, handle in callbacks:
            self._run(on_fulfilled, on_rejected, handle)

    def _run(self, on_fulfilled: Callable, on_rejected: Callable, handle: _Settled) -> None:
        ok, value = self._state
        try:
            handle._value = on_fulfilled(value) if ok else on_rejected(value)
        except Exception as e:
            handle._error = e
        handle._done = True


class ActionRecorder:
    """
    Middleware that records every action passing through it.

    Place it after the lifecycle middleware to see derived actions only,
    or before it to also see originating actions.
    """

    def __init__(self):
        self.actions: List[Any] = []
        self._lock = threading.Lock()

    def __call__(self, store: Any):
        def wrap(next_dispatch):
            def dispatch(action):
                with self._lock:
                    self.actions.append(action)
                return next_dispatch(action)
            return dispatch
        return wrap

    def of_type(self, action_type: str) -> List[Any]:
        with self._lock:
            return [a for a in self.actions if getattr(a, "type", None) == action_type]

    def stages(self) -> List[Any]:
        """Lifecycle markers of the recorded actions, in order."""
        with self._lock:
            return [getattr(a.meta, "lifecycle", None) for a in self.actions if hasattr(a, "meta")]

    def clear(self) -> None:
        with self._lock:
            self.actions.clear()
