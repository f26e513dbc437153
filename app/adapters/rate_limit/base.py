"""Attempt rate limiter interfaces.

The auth service depends on this abstraction (not the concrete implementation)
so the in-memory store can later be swapped for a shared backend (e.g., Redis)
without touching the sign-in flow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LimitScope(str, Enum):
    """Namespace a limiter key belongs to. Scopes never share state."""

    IP = "ip"
    USER = "user"


@dataclass(frozen=True)
class RateLimitOptions:
    """Immutable limiter configuration.

    Attributes:
        window_ms: Length of the counting window in milliseconds.
        max_attempts: Attempts allowed in a window before the key is limited.
        block_duration_ms: Lockout applied from the attempt that reaches
            ``max_attempts``. Defaults to ``window_ms`` when omitted.

    Raises:
        ValueError: If any value is not a positive integer.
    """

    window_ms: int
    max_attempts: int
    block_duration_ms: int | None = None

    def __post_init__(self) -> None:
        if self.block_duration_ms is None:
            object.__setattr__(self, "block_duration_ms", self.window_ms)
        for name in ("window_ms", "max_attempts", "block_duration_ms"):
            value = getattr(self, name)
            # bool is an int subclass
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be an integer >= 1, got {value!r}")

    @property
    def cleanup_interval_ms(self) -> int:
        """Sweep interval: one window, capped at a minute."""
        return min(self.window_ms, 60_000)


@dataclass
class RateLimitEntry:
    """Attempt counter for a single key.

    Attributes:
        count: Attempts recorded in the current window.
        reset_at: Epoch milliseconds after which the entry is stale.
    """

    count: int
    reset_at: int

    def is_expired(self, now: int) -> bool:
        return now > self.reset_at


class AbstractAttemptLimiter(ABC):
    """Interface for per-key attempt limiters with separate IP/user scopes."""

    @abstractmethod
    def is_limited(self, scope: LimitScope, key: str) -> bool:
        """Return whether ``key`` is currently blocked in ``scope``."""
        raise NotImplementedError

    @abstractmethod
    def increment(self, scope: LimitScope, key: str) -> None:
        """Record one attempt for ``key`` in ``scope``."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, scope: LimitScope, key: str) -> None:
        """Forget every attempt recorded for ``key`` in ``scope``."""
        raise NotImplementedError

    @abstractmethod
    def get_time_remaining(self, scope: LimitScope, key: str) -> int:
        """Milliseconds until ``key`` is no longer limited (0 if not limited)."""
        raise NotImplementedError

    def close(self) -> None:
        """Release background resources. No-op by default."""

    def is_ip_limited(self, ip: str) -> bool:
        return self.is_limited(LimitScope.IP, ip)

    def is_user_limited(self, user_id: str) -> bool:
        return self.is_limited(LimitScope.USER, user_id)

    def increment_ip(self, ip: str) -> None:
        self.increment(LimitScope.IP, ip)

    def increment_user(self, user_id: str) -> None:
        self.increment(LimitScope.USER, user_id)

    def reset_ip(self, ip: str) -> None:
        self.reset(LimitScope.IP, ip)

    def reset_user(self, user_id: str) -> None:
        self.reset(LimitScope.USER, user_id)

    def get_ip_time_remaining(self, ip: str) -> int:
        return self.get_time_remaining(LimitScope.IP, ip)

    def get_user_time_remaining(self, user_id: str) -> int:
        return self.get_time_remaining(LimitScope.USER, user_id)
