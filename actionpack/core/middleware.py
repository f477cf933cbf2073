"""
Lifecycle middleware.

Turns one action carrying a pending computation into:
1. START, dispatched synchronously before dispatch() returns
2. SUCCESS or FAILURE, dispatched once the computation settles

All three share a transaction id. Other actions pass through untouched.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from .actions import Action, Lifecycle, Outcome
from ..hooks import invoke_hook
from ..logging_config import log_fields
from ..thenable import AwaitableThenable, Thenable, adopt
from ..transaction import TransactionIdFactory, new_transaction_id

logger = logging.getLogger(__name__)

Dispatch = Callable[[Any], Any]


class LifecycleMiddleware:
    """
    Middleware factory: ``middleware(store)(next)(action) -> result``.

    ``store`` must provide ``dispatch(action)`` (re-entering the full chain)
    and ``get_state()``.

    Example:
        >>> store = Store(reducer, middleware=[LifecycleMiddleware()])
        >>> handle = store.dispatch(async_action("LOAD", executor.submit(load)))
        >>> handle.result()
        Outcome(payload=..., error=False)
    """

    def __init__(self, transaction_ids: TransactionIdFactory = new_transaction_id):
        self.transaction_ids = transaction_ids

    def __call__(self, store: Any) -> Callable[[Dispatch], Dispatch]:
        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def dispatch(action: Any) -> Any:
                # Allows conditional action creators to return None
                if action is None:
                    return None

                pending = adopt(getattr(action, "promise", None))
                if pending is not None:
                    return self.track(store, action, pending)

                return next_dispatch(action)
            return dispatch
        return wrap

    def track(self, store: Any, action: Action, pending: Thenable) -> Any:
        """Dispatch START now and the terminal action when ``pending`` settles."""
        dispatch = store.dispatch
        get_state = store.get_state
        action_type = action.type
        start_payload = action.payload
        meta = action.meta
        transaction = self.transaction_ids()
        started = time.perf_counter()

        try:
            dispatch(Action(
                type=action_type,
                payload=start_payload,
                meta=meta.advance(Lifecycle.START, transaction),
            ))
        except Exception:
            # The computation must not run if START never reached the store
            if isinstance(pending, AwaitableThenable):
                pending.discard()
            raise
        logger.debug(
            "Async action started",
            extra=log_fields(
                subsystem="lifecycle",
                action_type=action_type,
                lifecycle=Lifecycle.START,
                transaction=transaction,
            ),
        )
        invoke_hook(
            meta.on_start, start_payload, get_state,
            name="on_start", action_type=action_type, transaction=transaction,
        )

        def settled(lifecycle: Lifecycle) -> None:
            logger.debug(
                "Async action settled",
                extra=log_fields(
                    subsystem="lifecycle",
                    action_type=action_type,
                    lifecycle=lifecycle,
                    transaction=transaction,
                    latency_ms=(time.perf_counter() - started) * 1000,
                ),
            )

        def success(data: Any) -> Outcome:
            dispatch(Action(
                type=action_type,
                payload=data,
                meta=meta.advance(Lifecycle.SUCCESS, transaction, start_payload=start_payload),
            ))
            settled(Lifecycle.SUCCESS)
            invoke_hook(
                meta.on_success, data, get_state,
                name="on_success", action_type=action_type, transaction=transaction,
            )
            invoke_hook(
                meta.on_finish, True, get_state,
                name="on_finish", action_type=action_type, transaction=transaction,
            )
            return Outcome(payload=data)

        def failure(error: Any) -> Outcome:
            dispatch(Action(
                type=action_type,
                payload=error,
                error=True,
                meta=meta.advance(Lifecycle.FAILURE, transaction, start_payload=start_payload),
            ))
            settled(Lifecycle.FAILURE)
            invoke_hook(
                meta.on_failure, error, get_state,
                name="on_failure", action_type=action_type, transaction=transaction,
            )
            invoke_hook(
                meta.on_finish, False, get_state,
                name="on_finish", action_type=action_type, transaction=transaction,
            )
            return Outcome(payload=error, error=True)

        return pending.then(success, failure)


lifecycle_middleware = LifecycleMiddleware()


def create_lifecycle_middleware(
    transaction_ids: Optional[TransactionIdFactory] = None,
) -> LifecycleMiddleware:
    """Build the middleware, optionally with a custom transaction id generator."""
    return LifecycleMiddleware(transaction_ids or new_transaction_id)
