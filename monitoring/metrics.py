"""
Core metrics and monitoring decorators for the routing service.

This module defines Prometheus metrics and decorators for tracking:
- Request counts per endpoint
- Routed messages per task category
- Error rates
- External API latency (LLM provider)
"""

import time
import functools
import logging
from typing import Callable
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status']
)

# Routing metrics
ROUTED_REQUESTS = Counter(
    'routed_requests_total',
    'Messages routed to a backend model, by task category',
    ['category']
)

# Error metrics
ERROR_COUNT = Counter(
    'error_total',
    'Total number of errors',
    ['type', 'location']  # type: e.g., 'http', 'provider'; location: specific component
)

# External API metrics
LLM_REQUEST_TIME = Histogram(
    'llm_request_duration_seconds',
    'Time spent waiting for LLM API',
    ['model'],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, float("inf")]
)


class observe_latency:
    """
    Context manager that records the elapsed time of a block into a labelled Histogram.

    Example:
        with observe_latency(LLM_REQUEST_TIME, model="qwen/qwen3-14b:free"):
            await client.chat.completions.create(...)
    """

    def __init__(self, metric: Histogram, **labels):
        self.metric = metric
        self.labels = labels
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc, tb):
        duration = time.time() - self.start_time
        self.metric.labels(**self.labels).observe(duration)
        logger.debug(
            f"Observed {duration:.2f} seconds for {self.labels}",
            extra={'duration': duration}
        )
        return False


def track_errors(error_type: str, location: str) -> Callable:
    """
    A decorator factory that counts errors raised by an async endpoint or coroutine.

    Args:
        error_type (str): Type of error (e.g., 'http', 'provider')
        location (str): Where the error occurred

    Returns:
        Callable: The decorated coroutine function

    Example:
        @track_errors('http', 'prompt')
        async def handle_prompt(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                ERROR_COUNT.labels(
                    type=error_type,
                    location=location
                ).inc()

                logger.error(
                    f"Error in {location} ({error_type}): {str(e)}",
                    extra={
                        'error_type': error_type,
                        'location': location,
                    },
                    exc_info=True
                )
                raise  # Re-raise the exception after tracking
        return wrapper
    return decorator
