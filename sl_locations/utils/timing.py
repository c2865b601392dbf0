"""Timing utilities for load and index build steps."""
import time
from functools import wraps
from typing import Any, Callable, Dict
from sl_locations.utils.logging import log_structured


def time_function(func: Callable) -> Callable:
    """Decorator logging how long a function took, with its module."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        log_structured(
            "info",
            f"Function {func.__name__} executed",
            function=func.__name__,
            module=func.__module__,
            elapsed_seconds=time.perf_counter() - start,
        )
        return result
    return wrapper


class Timer:
    """
    Context manager timing a block and logging it with extra fields.

    Fields known up front are passed to the constructor; counts produced
    inside the block are attached with :meth:`add`. The log line is written
    on exit, also when the block raises, with ``succeeded`` set accordingly.

    Usage:
        with Timer("build_search_index", records=len(records)) as timer:
            index = build_search_index(records)
            timer.add(index_keys=len(index))
    """

    def __init__(self, operation: str, **fields: Any):
        """
        Initialize timer.

        Args:
            operation: Name of the operation being timed
            **fields: Structured fields logged with the elapsed time
        """
        self.operation = operation
        self.fields: Dict[str, Any] = dict(fields)
        self.start = None
        self.elapsed = None

    def add(self, **fields: Any):
        """Attach fields to the log line written on exit."""
        self.fields.update(fields)

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        log_structured(
            "info" if exc_type is None else "warning",
            f"Operation {self.operation} completed",
            operation=self.operation,
            elapsed_seconds=self.elapsed,
            succeeded=exc_type is None,
            **self.fields
        )
        return False
