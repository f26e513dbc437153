"""Attempt rate limiting adapters.

This package provides a small abstraction layer so the auth flow can start with
an in-memory limiter and later migrate to Redis or another shared store without
changing the service layer.
"""

from app.adapters.rate_limit.base import (
    AbstractAttemptLimiter,
    LimitScope,
    RateLimitEntry,
    RateLimitOptions,
)
from app.adapters.rate_limit.in_memory import InMemoryAttemptLimiter

__all__ = [
    "AbstractAttemptLimiter",
    "InMemoryAttemptLimiter",
    "LimitScope",
    "RateLimitEntry",
    "RateLimitOptions",
]
