# src/canonsmiles/core/utils/benchmarking.py

import time
import logging
from functools import wraps
from typing import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class Timer:
    """Context manager for timing code blocks."""

    name: str
    start_time: float = field(default=0.0)
    end_time: float = field(default=0.0)

    def __enter__(self) -> "Timer":
        """Start timing when entering context."""
        self.start_time = time.perf_counter()
        self.end_time = 0.0
        return self

    def __exit__(self, *args) -> None:
        """Stop timing when exiting context."""
        self.end_time = time.perf_counter()
        logger.debug("%s took %.4f s", self.name, self.elapsed())

    def elapsed(self) -> float:
        """Get elapsed time in seconds."""
        if self.end_time == 0.0:
            return time.perf_counter() - self.start_time
        return self.end_time - self.start_time


def benchmark(func: Callable) -> Callable:
    """Decorator to benchmark a function."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        with Timer(func.__qualname__):
            return func(*args, **kwargs)

    return wrapper
