"""
Transaction identifiers.

Every originating async action gets one id, shared by its START and its
terminal action. The middleware takes the generator as a plain callable so
tests can substitute a deterministic one.
"""
from __future__ import annotations

import itertools
import threading
import uuid
from typing import Callable

TransactionIdFactory = Callable[[], str]


def new_transaction_id() -> str:
    """Random, collision-resistant transaction id."""
    return str(uuid.uuid4())


class SequentialTransactionIds:
    """
    Deterministic id generator for tests and replays.

    Example:
        >>> ids = SequentialTransactionIds("load")
        >>> ids(), ids()
        ('load-1', 'load-2')
    """

    def __init__(self, prefix: str = "txn", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            return f"{self.prefix}-{next(self._counter)}"
