"""
Performance benchmarks for actionpack.

Compares handle() under VALIDATE and FAST strictness, and measures the cost
of a full START/SUCCESS round trip through the store.

Run standalone: python benchmarks/benchmark_handle.py
"""
import statistics
import time
from typing import Tuple

from actionpack.config import Strictness
from actionpack.core.actions import Action, ActionMeta, Lifecycle, async_action
from actionpack.core.handle import handle
from actionpack.core.middleware import LifecycleMiddleware
from actionpack.core.store import Store
from actionpack.testing import Deferred
from actionpack.transaction import SequentialTransactionIds

HANDLERS = {
    "start": lambda s, a: {**s, "loading": True},
    "success": lambda s, a: {**s, "data": a.payload},
    "finish": lambda s, a: {**s, "loading": False},
    "always": lambda s, a: s,
}


def reducer(state, action):
    if state is None:
        state = {"loading": False, "data": None}
    if action.type == "LOAD":
        return handle(state, action, HANDLERS)
    return state


def benchmark(fn, iterations: int = 1000) -> Tuple[float, float, float]:
    """
    Benchmark a function.

    Returns:
        (mean_ms, min_ms, max_ms)
    """
    times = []

    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        elapsed = (time.perf_counter() - start) * 1000
        times.append(elapsed)

    return (
        statistics.mean(times),
        min(times),
        max(times),
    )


def benchmark_handle(strictness: Strictness) -> float:
    """Benchmark handle() on a SUCCESS action."""
    state = {"loading": True, "data": None}
    action = Action(
        "LOAD",
        payload={"id": 1},
        meta=ActionMeta(lifecycle=Lifecycle.SUCCESS, transaction="bench"),
    )

    def run():
        handle(state, action, HANDLERS, strictness)

    mean, min_t, max_t = benchmark(run, iterations=20000)
    print(f"handle ({strictness.value}):")
    print(f"  Mean: {mean:.4f}ms  Min: {min_t:.4f}ms  Max: {max_t:.4f}ms")
    return mean


def benchmark_round_trip() -> float:
    """Benchmark dispatching an async action and settling it."""
    store = Store(reducer, middleware=[LifecycleMiddleware(SequentialTransactionIds())])

    def run():
        deferred = Deferred()
        store.dispatch(async_action("LOAD", deferred))
        deferred.resolve({"id": 1})

    mean, min_t, max_t = benchmark(run, iterations=5000)
    print("Store round trip (START + SUCCESS):")
    print(f"  Mean: {mean:.4f}ms  Min: {min_t:.4f}ms  Max: {max_t:.4f}ms")
    return mean


def run_all_benchmarks():
    """Run all benchmarks."""
    print("=" * 60)
    print("actionpack Performance Benchmarks")
    print("=" * 60)
    print()

    results = {}

    results["handle_validate"] = benchmark_handle(Strictness.VALIDATE)
    print()

    results["handle_fast"] = benchmark_handle(Strictness.FAST)
    print()

    results["round_trip"] = benchmark_round_trip()

    print()
    print("=" * 60)
    print("Summary:")
    print(f"  Validation overhead: {results['handle_validate'] / results['handle_fast']:.2f}x")
    print(f"  Round trips/sec: {1000 / results['round_trip']:.0f}")
    print("=" * 60)

    return results


if __name__ == "__main__":
    run_all_benchmarks()
