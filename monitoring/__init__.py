"""
Monitoring package initializer.

This package exposes Prometheus metrics and helpers for tracking routing volume,
provider latency and error rates.
"""

from .metrics import (
    REQUEST_COUNT,
    ROUTED_REQUESTS,
    ERROR_COUNT,
    LLM_REQUEST_TIME,
    observe_latency,
    track_errors,
)

__all__ = [
    'REQUEST_COUNT',
    'ROUTED_REQUESTS',
    'ERROR_COUNT',
    'LLM_REQUEST_TIME',
    'observe_latency',
    'track_errors',
]
