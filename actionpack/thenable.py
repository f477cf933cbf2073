"""
Pending computations the lifecycle middleware can track.

A "thenable" is anything with ``then(on_fulfilled, on_rejected)`` that calls
exactly one of the two callbacks once it settles, and returns a handle for
whatever that callback returns. adopt() turns the pending values Python
code actually produces into one:

- asyncio awaitables (coroutines, Tasks, Futures) on the running loop
- concurrent.futures.Future from thread/process pools
- objects that already expose a callable ``then``
"""
from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
from typing import Any, Callable, Optional, Protocol

from .errors import UsageError

logger = logging.getLogger(__name__)

Continuation = Callable[[Any], Any]


class Thenable(Protocol):
    def then(self, on_fulfilled: Continuation, on_rejected: Continuation) -> Any:
        ...


def adopt(obj: Any) -> Optional[Thenable]:
    """
    Wrap ``obj`` as a thenable, or return None if it is not pending.

    Awaitables are only checked against the running loop here; they are
    scheduled when continuations are registered with then().

    Raises:
        UsageError: ``obj`` is an awaitable but no event loop is running
    """
    if obj is None:
        return None
    if isinstance(obj, concurrent.futures.Future):
        return FutureThenable(obj)
    if callable(getattr(obj, "then", None)):
        return obj
    if inspect.isawaitable(obj):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(obj):
                obj.close()
            raise UsageError(
                "Dispatching an awaitable requires a running event loop; "
                "dispatch from inside a coroutine or pass a concurrent.futures.Future."
            ) from None
        return AwaitableThenable(obj)
    return None


def _settle(future: Any, handle: Any, on_fulfilled: Continuation, on_rejected: Continuation) -> None:
    """Run the matching continuation for a finished future and resolve ``handle``."""
    if future.cancelled():
        error = (
            asyncio.CancelledError()
            if isinstance(future, asyncio.Future)
            else concurrent.futures.CancelledError()
        )
    else:
        error = future.exception()

    try:
        if error is not None:
            outcome = on_rejected(error)
        else:
            outcome = on_fulfilled(future.result())
    except Exception as e:
        if not handle.done():
            handle.set_exception(e)
        else:
            logger.error(f"Continuation raised after handle was settled: {e}")
        return

    if not handle.done():
        handle.set_result(outcome)


class FutureThenable:
    """Thenable over a concurrent.futures.Future."""

    def __init__(self, future: concurrent.futures.Future):
        self.future = future

    def then(self, on_fulfilled: Continuation, on_rejected: Continuation) -> concurrent.futures.Future:
        """
        Register continuations. If the future is already done they run now,
        in the calling thread; otherwise in the thread that completes it.
        """
        handle: concurrent.futures.Future = concurrent.futures.Future()
        self.future.add_done_callback(
            lambda fut: _settle(fut, handle, on_fulfilled, on_rejected)
        )
        return handle


class AwaitableThenable:
    """Thenable over an asyncio awaitable, bound to the running loop."""

    def __init__(self, awaitable: Any):
        self.awaitable = awaitable
        self.future: Optional[asyncio.Future] = None

    def then(self, on_fulfilled: Continuation, on_rejected: Continuation) -> asyncio.Future:
        """Schedule the awaitable and register continuations; they run as loop callbacks, never inline."""
        if self.future is None:
            self.future = asyncio.ensure_future(self.awaitable)
        handle = self.future.get_loop().create_future()
        self.future.add_done_callback(
            lambda fut: _settle(fut, handle, on_fulfilled, on_rejected)
        )
        return handle

    def discard(self) -> None:
        """Drop an awaitable that was never scheduled. Caller-owned Tasks/Futures are left alone."""
        if self.future is None and inspect.iscoroutine(self.awaitable):
            self.awaitable.close()
