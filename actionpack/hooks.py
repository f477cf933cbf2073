"""
Isolated invocation of caller-supplied side-effect hooks.

Hooks (on_start, on_success, on_failure, on_finish) are instrumentation.
A broken hook must never break the dispatch flow or the hooks after it.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .logging_config import log_fields

logger = logging.getLogger(__name__)


def invoke_hook(
    hook: Optional[Callable[..., Any]],
    *args: Any,
    name: str = "hook",
    action_type: Optional[str] = None,
    transaction: Optional[str] = None,
) -> bool:
    """
    Call ``hook(*args)`` if it is set, logging and discarding any exception.

    Returns:
        True if the hook ran without raising, False if it was unset or failed
    """
    if hook is None:
        return False
    try:
        hook(*args)
    except Exception:
        logger.error(
            f"{name} hook raised for action {action_type}",
            exc_info=True,
            extra=log_fields(
                subsystem="hooks",
                action_type=action_type,
                transaction=transaction,
            ),
        )
        return False
    return True
