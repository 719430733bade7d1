"""Estimating the running time, in seconds, of a function averaged over n runs."""

from __future__ import annotations

import time
from typing import Callable


def _average(f: Callable[[], object], n: int, clock: Callable[[], float]) -> float:
    if n <= 0:
        raise ValueError("n must be positive")
    start = clock()
    for _ in range(n):
        f()
    return (clock() - start) / n


def ftimer_gettod(f: Callable[[], object], n: int = 10) -> float:
    """Average seconds per run of f over n runs, timed by the wall clock."""
    return _average(f, n, time.time)


def ftimer_interval(f: Callable[[], object], n: int = 10) -> float:
    """Average seconds per run of f over n runs, timed by a monotonic interval timer."""
    return _average(f, n, time.monotonic)