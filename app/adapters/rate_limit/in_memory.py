"""In-memory attempt limiter with escalating lockout.

Notes:
- Per-process only: running multiple workers gives each worker its own counters.
- Thread-safe: uses a lock around shared state.
- Stale entries are dropped lazily on read and by a background sweep; the sweep
  only bounds memory, reads are correct without it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractAttemptLimiter,
    LimitScope,
    RateLimitEntry,
    RateLimitOptions,
)

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class InMemoryAttemptLimiter(AbstractAttemptLimiter):
    """Counts attempts per key inside a window and locks keys out past a limit.

    Each scope (IP and user) has its own store. An entry starts with
    ``reset_at = now + window_ms``; the attempt that brings the count to
    ``max_attempts`` (and every attempt after it) moves ``reset_at`` to
    ``now + block_duration_ms``.

    Important:
        Construct one instance per configuration and share it. Separate
        instances keep independent, inconsistent views of the same keys.
    """

    def __init__(
        self,
        options: RateLimitOptions,
        *,
        clock: Callable[[], int] = _wall_clock_ms,
        auto_cleanup: bool = True,
    ) -> None:
        """Initialize the limiter.

        Args:
            options: Window, threshold and block duration.
            clock: Time source returning UNIX time in milliseconds.
            auto_cleanup: Start the background sweep immediately.
        """
        self._options = options
        self._clock = clock
        self._lock = threading.RLock()
        self._stores: dict[LimitScope, dict[str, RateLimitEntry]] = {
            scope: {} for scope in LimitScope
        }
        self._stop_event = threading.Event()
        self._sweeper: threading.Thread | None = None

        if auto_cleanup:
            self.start()

    def __enter__(self) -> "InMemoryAttemptLimiter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def options(self) -> RateLimitOptions:
        return self._options

    def is_limited(self, scope: LimitScope, key: str) -> bool:
        now = self._clock()
        with self._lock:
            store = self._stores[scope]
            entry = store.get(key)
            if entry is None:
                return False
            if entry.is_expired(now):
                del store[key]
                return False
            return entry.count >= self._options.max_attempts

    def increment(self, scope: LimitScope, key: str) -> None:
        now = self._clock()
        with self._lock:
            store = self._stores[scope]
            entry = store.get(key)

            if entry is None or entry.is_expired(now):
                store[key] = RateLimitEntry(count=1, reset_at=now + self._options.window_ms)
                return

            if entry.count + 1 >= self._options.max_attempts:
                entry.reset_at = now + self._options.block_duration_ms
                if entry.count + 1 == self._options.max_attempts:
                    logger.info(
                        "rate_limit.lockout_started",
                        extra={
                            "scope": scope.value,
                            "max_attempts": self._options.max_attempts,
                            "block_ms": self._options.block_duration_ms,
                        },
                    )

            entry.count += 1

    def reset(self, scope: LimitScope, key: str) -> None:
        with self._lock:
            self._stores[scope].pop(key, None)

    def get_time_remaining(self, scope: LimitScope, key: str) -> int:
        # Read-only: never drops the entry, unlike is_limited.
        now = self._clock()
        with self._lock:
            entry = self._stores[scope].get(key)
            if entry is None or entry.count < self._options.max_attempts:
                return 0
            return max(0, entry.reset_at - now)

    def cleanup(self) -> int:
        """Remove expired entries from every store.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        removed = 0
        with self._lock:
            for store in self._stores.values():
                expired_keys = [k for k, entry in store.items() if entry.is_expired(now)]
                for key in expired_keys:
                    del store[key]
                removed += len(expired_keys)

        if removed:
            logger.debug("rate_limit.sweep", extra={"removed": removed})
        return removed

    def entry_count(self, scope: LimitScope) -> int:
        """Number of stored entries for ``scope``, expired ones included."""
        with self._lock:
            return len(self._stores[scope])

    def snapshot(self, scope: LimitScope, key: str) -> RateLimitEntry | None:
        """Copy of the stored entry for ``key`` without expiring it."""
        with self._lock:
            entry = self._stores[scope].get(key)
            return replace(entry) if entry is not None else None

    def start(self) -> None:
        """Start the background sweep thread if it is not running."""
        with self._lock:
            if self._sweeper is not None and self._sweeper.is_alive():
                return
            self._stop_event.clear()
            self._sweeper = threading.Thread(
                target=self._run_sweeper,
                name="rate-limit-sweeper",
                daemon=True,
            )
            self._sweeper.start()

    def close(self) -> None:
        """Stop the background sweep and wait for it to exit."""
        self._stop_event.set()
        sweeper = self._sweeper
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join()
        self._sweeper = None

    @property
    def is_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def _run_sweeper(self) -> None:
        interval_s = self._options.cleanup_interval_ms / 1000
        while not self._stop_event.wait(interval_s):
            try:
                self.cleanup()
            except Exception:
                logger.exception("rate_limit.sweep_failed")
