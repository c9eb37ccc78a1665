"""Small helpers shared by the session model and the CLI."""

import time
from typing import Callable, Tuple, TypeVar


T = TypeVar('T')


def count_time(func: Callable[[], T]) -> Tuple[int, T]:
    """Run func() and return (elapsed microseconds, result)."""
    started = time.perf_counter_ns()
    result = func()
    return (time.perf_counter_ns() - started) // 1000, result
