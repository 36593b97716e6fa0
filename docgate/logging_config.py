"""Logging and observability utilities: structured logging, latency tracking and query outcome counters."""

import asyncio
import logging
import threading
import time
from functools import wraps
from typing import Callable, Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def log_latency(operation_name: str):
    def decorator(func: Callable):
        logger = logging.getLogger(func.__module__)

        def _log(start: float, error: Optional[Exception] = None):
            latency_ms = (time.perf_counter() - start) * 1000
            if error is None:
                logger.info(f"{operation_name} | latency_ms={latency_ms:.2f} | status=success")
            else:
                logger.error(f"{operation_name} | latency_ms={latency_ms:.2f} | status=error | error={error}")

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log(start, e)
                raise
            _log(start)
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log(start, e)
                raise
            _log(start)
            return result

        return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

    return decorator


class QueryMetrics:
    def __init__(self):
        self._lock = threading.Lock()
        self.total_queries = 0
        self.answered = 0
        self.refused = 0
        self.failed = 0
        self.total_latency_ms = 0.0

    def record(self, outcome: str, latency_ms: float):
        with self._lock:
            self.total_queries += 1
            self.total_latency_ms += latency_ms
            if outcome == "answered":
                self.answered += 1
            elif outcome == "refused":
                self.refused += 1
            else:
                self.failed += 1

    def get_stats(self) -> dict:
        with self._lock:
            avg_latency = self.total_latency_ms / self.total_queries if self.total_queries > 0 else 0
            return {
                "total": self.total_queries,
                "answered": self.answered,
                "refused": self.refused,
                "failed": self.failed,
                "avg_latency_ms": round(avg_latency, 2),
            }
