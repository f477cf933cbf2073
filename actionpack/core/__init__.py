# Actions, lifecycle middleware, lifecycle dispatcher and store
from .actions import Action, ActionMeta, Lifecycle, Outcome, async_action
from .handle import HANDLER_KEYS, LifecycleDispatcher, handle
from .middleware import LifecycleMiddleware, create_lifecycle_middleware, lifecycle_middleware
from .store import InjectableStore, Store, apply_middleware, combine_reducers

__all__ = [
    "Action",
    "ActionMeta",
    "Lifecycle",
    "Outcome",
    "async_action",
    "HANDLER_KEYS",
    "LifecycleDispatcher",
    "handle",
    "LifecycleMiddleware",
    "create_lifecycle_middleware",
    "lifecycle_middleware",
    "InjectableStore",
    "Store",
    "apply_middleware",
    "combine_reducers",
]
