"""
actionpack: one dispatched action per asynchronous operation.

The lifecycle middleware expands an action carrying a pending computation
into START and then SUCCESS or FAILURE; reducers consume those with handle().
"""
from .config import PackConfig, Strictness
from .core import (
    HANDLER_KEYS,
    Action,
    ActionMeta,
    InjectableStore,
    Lifecycle,
    LifecycleDispatcher,
    LifecycleMiddleware,
    Outcome,
    Store,
    apply_middleware,
    async_action,
    combine_reducers,
    create_lifecycle_middleware,
    handle,
    lifecycle_middleware,
)
from .errors import ActionPackError, ConfigurationError, UsageError

__version__ = "0.3.0"

__all__ = [
    "PackConfig",
    "Strictness",
    "HANDLER_KEYS",
    "Action",
    "ActionMeta",
    "InjectableStore",
    "Lifecycle",
    "LifecycleDispatcher",
    "LifecycleMiddleware",
    "Outcome",
    "Store",
    "apply_middleware",
    "async_action",
    "combine_reducers",
    "create_lifecycle_middleware",
    "handle",
    "lifecycle_middleware",
    "ActionPackError",
    "ConfigurationError",
    "UsageError",
]
