"""
Action-dispatch store with middleware support.

The store is the single writer for all state mutations.
All writes go through dispatch(), all reads through get_state()/get_snapshot().

This prevents race conditions by:
- Applying one action to completion before the next (re-entrant lock)
- Routing every action through the same middleware chain
- Providing deep-copied snapshots for readers on other threads
"""
from __future__ import annotations

import copy
import logging
import threading
from collections import deque
from functools import reduce
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional

from .actions import Action
from ..errors import ConfigurationError
from ..logging_config import log_fields

logger = logging.getLogger(__name__)

INIT_ACTION_TYPE = "@@actionpack/INIT"

Reducer = Callable[[Any, Any], Any]
Dispatch = Callable[[Any], Any]
Middleware = Callable[[Any], Callable[[Dispatch], Dispatch]]
Subscriber = Callable[[Any, Any], None]


class MiddlewareAPI:
    """What a middleware sees of the store."""

    def __init__(self, store: "Store"):
        self._store = store

    def dispatch(self, action: Any) -> Any:
        """Dispatch through the full middleware chain."""
        return self._store.dispatch(action)

    def get_state(self) -> Any:
        return self._store.get_state()


class Store:
    """
    Central state container.

    - dispatch(action) runs the middleware chain, then the reducer
    - get_state() returns current state, get_snapshot() a deep copy
    - subscribe(callback) notifies after every applied action

    Features:
    - Thread-safe
    - Middleware chain (see apply_middleware)
    - Action log for replay/debugging
    - Subscriber notifications

    Example:
        >>> store = Store(reducer, middleware=[lifecycle_middleware])
        >>> store.dispatch(Action("INCREMENT"))
        >>> store.get_state()
    """

    def __init__(
        self,
        reducer: Reducer,
        initial_state: Any = None,
        middleware: Iterable[Middleware] = (),
        max_action_log: int = 1000,
    ):
        """
        Initialize the store.

        Args:
            reducer: ``(state, action) -> new_state``
            initial_state: Starting state (reducers see it with the INIT action)
            middleware: Middleware factories, outermost first
            max_action_log: Max actions to keep in log (for replay)
        """
        self._reducer = reducer
        self._state = initial_state
        self._lock = threading.RLock()
        self._action_log: Deque[Any] = deque(maxlen=max_action_log)
        self._subscribers: List[Subscriber] = []
        self._dispatch: Dispatch = self._base_dispatch

        self._base_dispatch(Action(INIT_ACTION_TYPE))
        middleware = list(middleware)
        if middleware:
            apply_middleware(self, *middleware)

    def dispatch(self, action: Any) -> Any:
        """
        Dispatch an action.

        Returns whatever the middleware chain returns; the base dispatch
        returns the action itself. Reducer errors propagate to the caller.
        """
        return self._dispatch(action)

    def _base_dispatch(self, action: Any) -> Any:
        """Apply one action to state (end of the middleware chain)."""
        if action is None:
            raise ConfigurationError(
                "Cannot dispatch None without middleware that handles it"
            )

        with self._lock:
            self._state = self._reducer(self._state, action)
            self._action_log.append(action)
            state = self._state
            subscribers = list(self._subscribers)

        for sub in subscribers:
            try:
                sub(state, action)
            except Exception as e:
                logger.warning(f"Subscriber error: {e}")

        logger.debug(
            "Applied action",
            extra=log_fields(
                subsystem="store",
                action_type=getattr(action, "type", None),
                lifecycle=getattr(getattr(action, "meta", None), "lifecycle", None),
                transaction=getattr(getattr(action, "meta", None), "transaction", None),
            ),
        )
        return action

    def get_state(self) -> Any:
        """Current state. Treat it as read-only."""
        with self._lock:
            return self._state

    def get_snapshot(self) -> Any:
        """
        Get a read-only copy of current state.

        The returned object is a deep copy - safe to use without locks.
        """
        with self._lock:
            return copy.deepcopy(self._state)

    def get_action_log(self, n: Optional[int] = None) -> List[Any]:
        """Get recent actions from log."""
        with self._lock:
            actions = list(self._action_log)
            if n is not None:
                actions = actions[-n:]
            return actions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Subscribe to state changes.

        Args:
            callback: Called with (new_state, action) after each action

        Returns:
            Unsubscribe function
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def replace_reducer(self, reducer: Reducer) -> None:
        """Swap the reducer and let it initialise any new state."""
        with self._lock:
            self._reducer = reducer
        self._base_dispatch(Action(INIT_ACTION_TYPE))


def apply_middleware(store: Store, *middleware: Middleware) -> Store:
    """
    Install middleware around the store's base dispatch.

    The first middleware is outermost: it sees each action first.
    """
    api = MiddlewareAPI(store)
    chain = [factory(api) for factory in middleware]
    store._dispatch = reduce(
        lambda next_dispatch, wrap: wrap(next_dispatch),
        reversed(chain),
        store._base_dispatch,
    )
    return store


def combine_reducers(reducers: Mapping[str, Reducer]) -> Reducer:
    """
    Combine namespace reducers into one reducer over a dict.

    Each reducer receives only its own slice (None before it has one) and
    must return a value for it.
    """
    reducers = dict(reducers)

    def combined(state: Optional[Dict[str, Any]], action: Any) -> Dict[str, Any]:
        state = state or {}
        changed = False
        next_state = {}
        for namespace, reducer in reducers.items():
            previous = state.get(namespace)
            next_state[namespace] = reducer(previous, action)
            changed = changed or next_state[namespace] is not previous
        # Slices from outside the reducer set are kept unchanged
        for namespace, value in state.items():
            if namespace not in next_state:
                next_state[namespace] = value
        if not changed and len(next_state) == len(state):
            return state
        return next_state

    return combined


class InjectableStore(Store):
    """
    Store whose reducers are registered per namespace after creation.

    Example:
        >>> store = InjectableStore(middleware=[lifecycle_middleware])
        >>> store.inject("users", users_reducer)
    """

    def __init__(
        self,
        initial_state: Optional[Dict[str, Any]] = None,
        middleware: Iterable[Middleware] = (),
        max_action_log: int = 1000,
    ):
        self._reducers: Dict[str, Reducer] = {}
        super().__init__(
            combine_reducers(self._reducers),
            initial_state=initial_state,
            middleware=middleware,
            max_action_log=max_action_log,
        )

    @property
    def namespaces(self) -> List[str]:
        return list(self._reducers)

    def inject(self, namespace: str, reducer: Reducer) -> None:
        """
        Register a reducer for ``namespace``.

        Raises:
            ConfigurationError: the namespace already has a reducer
        """
        with self._lock:
            if namespace in self._reducers:
                raise ConfigurationError(
                    f"Attempting to register a reducer for namespace "
                    f"'{namespace}' more than once.",
                    key=namespace,
                )
            self._reducers[namespace] = reducer
            logger.info(f"Injected reducer for namespace '{namespace}'")
            self.replace_reducer(combine_reducers(self._reducers))
