"""Auth attempt limiter wiring for the HTTP layer.

Design goals:
- No hidden globals: the limiter is built by the app factory, stored on
  ``app.state`` and closed when the app shuts down.
- Swap-friendly: routes and services only see AbstractAttemptLimiter.
- Keys never reach the logs in clear text (IPs and emails are PII).
"""

from __future__ import annotations

import hashlib
import logging
from typing import Callable

from fastapi import Request

from app.adapters.rate_limit.base import AbstractAttemptLimiter, RateLimitOptions
from app.adapters.rate_limit.in_memory import InMemoryAttemptLimiter
from app.core.config import AuthRateLimitSettings

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_IP = "unknown"


def build_rate_limit_options(rate_limit_settings: AuthRateLimitSettings) -> RateLimitOptions:
    """Translate settings into limiter options (raises ValueError if invalid)."""

    return RateLimitOptions(
        window_ms=rate_limit_settings.window_ms,
        max_attempts=rate_limit_settings.max_attempts,
        block_duration_ms=rate_limit_settings.block_duration_ms,
    )


def build_auth_rate_limiter(
    rate_limit_settings: AuthRateLimitSettings,
    *,
    clock: Callable[[], int] | None = None,
    auto_cleanup: bool = True,
) -> InMemoryAttemptLimiter:
    """Create the process-wide auth limiter.

    Args:
        rate_limit_settings: Window/threshold configuration.
        clock: Optional millisecond clock (tests).
        auto_cleanup: Start the background sweep.

    Returns:
        InMemoryAttemptLimiter: A limiter the caller must close on shutdown.
    """

    options = build_rate_limit_options(rate_limit_settings)
    kwargs = {"clock": clock} if clock is not None else {}
    limiter = InMemoryAttemptLimiter(options, auto_cleanup=auto_cleanup, **kwargs)

    logger.info(
        "rate_limit.configured",
        extra={
            "enabled": rate_limit_settings.enabled,
            "window_ms": options.window_ms,
            "max_attempts": options.max_attempts,
            "block_ms": options.block_duration_ms,
            "sweep_interval_ms": options.cleanup_interval_ms,
        },
    )
    return limiter


def get_auth_rate_limiter(request: Request) -> AbstractAttemptLimiter:
    """FastAPI dependency returning the limiter owned by the running app."""

    return request.app.state.auth_rate_limiter


def hash_limiter_key(key: str) -> str:
    """Hash a limiter key for logging without exposing it."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def resolve_client_ip(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Best-effort client IP used as the IP-scope limiter key.

    Args:
        request: Incoming request.
        trust_forwarded_for: Take the first X-Forwarded-For hop (only safe
            behind a proxy that overwrites the header).

    Returns:
        str: Client IP, or "unknown" when it cannot be determined.
    """

    if trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT_IP
