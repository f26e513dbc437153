"""Authentication flows gated by the attempt limiter.

Every flow follows the same contract with the limiter:
- check ``is_*_limited`` before doing any work and reject with a
  "too many attempts" error carrying the time remaining;
- ``increment_*`` on every failed attempt;
- ``reset_*`` on every successful attempt.

Sign-in is tracked per IP and per account (email); sign-up and password reset
only per IP since there is no account to attribute them to yet. IP keys are
namespaced by action, so one flow never fills or clears another flow's counter.
"""

from __future__ import annotations

import logging

from app.adapters.rate_limit.base import AbstractAttemptLimiter, LimitScope
from app.adapters.users.base import AbstractUserRepository, UserRecord
from app.core.errors import AuthenticationAppError, ConflictAppError, RateLimitedAppError
from app.core.rate_limit import hash_limiter_key

logger = logging.getLogger(__name__)

SIGN_IN = "sign_in"
SIGN_UP = "sign_up"
PASSWORD_RESET = "password_reset"


def ip_limit_key(action: str, client_ip: str) -> str:
    """IP-scope limiter key for one auth action."""
    return f"{action}:{client_ip}"


class AuthService:
    """Sign-in, sign-up and password reset for wardrobe accounts."""

    def __init__(
        self,
        users: AbstractUserRepository,
        limiter: AbstractAttemptLimiter,
        *,
        enabled: bool = True,
    ) -> None:
        """Initialize the service.

        Args:
            users: Account storage.
            limiter: Shared attempt limiter (IP and user scopes).
            enabled: When False the limiter is neither consulted nor updated.
        """
        self._users = users
        self._limiter = limiter
        self._enabled = enabled

    def sign_in(self, *, email: str, password: str, client_ip: str) -> UserRecord:
        """Authenticate an account.

        Raises:
            RateLimitedAppError: The IP or the account is locked out.
            AuthenticationAppError: Unknown email or wrong password.
        """
        keys = ((LimitScope.IP, ip_limit_key(SIGN_IN, client_ip)), (LimitScope.USER, email))
        self._ensure_allowed(
            action=SIGN_IN,
            checks=keys,
            message="Too many login attempts. Please try again later.",
        )

        user = self._users.get_by_email(email)
        if user is None or not self._users.verify_password(user, password):
            self._record_failure(
                action=SIGN_IN,
                keys=keys,
                reason="unknown_user" if user is None else "wrong_password",
            )
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="Invalid email or password",
            )

        self._record_success(*keys)
        logger.info("auth.sign_in.succeeded", extra={"user_id": user.id})
        return user

    def sign_up(self, *, name: str, email: str, password: str, client_ip: str) -> UserRecord:
        """Register a new account.

        Raises:
            RateLimitedAppError: The IP is locked out.
            ConflictAppError: The email is already registered.
        """
        keys = ((LimitScope.IP, ip_limit_key(SIGN_UP, client_ip)),)
        self._ensure_allowed(
            action=SIGN_UP,
            checks=keys,
            message="Too many registration attempts. Please try again later.",
        )

        try:
            user = self._users.create(name=name, email=email, password=password)
        except ConflictAppError:
            self._record_failure(
                action=SIGN_UP,
                keys=keys,
                reason="email_already_registered",
            )
            raise

        self._record_success(*keys)
        logger.info("auth.sign_up.succeeded", extra={"user_id": user.id})
        return user

    def request_password_reset(self, *, email: str, client_ip: str) -> bool:
        """Accept a password reset request.

        Every request counts against the IP so the endpoint can't be used to
        probe which emails are registered at speed. The caller gets the same
        response either way.

        Returns:
            bool: Whether the email belongs to an account (internal use only).

        Raises:
            RateLimitedAppError: The IP is locked out.
        """
        ip_key = ip_limit_key(PASSWORD_RESET, client_ip)
        self._ensure_allowed(
            action=PASSWORD_RESET,
            checks=((LimitScope.IP, ip_key),),
            message="Too many password reset requests. Please try again later.",
        )
        if self._enabled:
            self._limiter.increment_ip(ip_key)

        known = self._users.get_by_email(email) is not None
        logger.info("auth.password_reset.requested", extra={"known_account": known})
        return known

    def _ensure_allowed(
        self,
        *,
        action: str,
        checks: tuple[tuple[LimitScope, str], ...],
        message: str,
    ) -> None:
        if not self._enabled:
            return

        limited_scopes: list[LimitScope] = []
        retry_after_ms = 0
        for scope, key in checks:
            if self._limiter.is_limited(scope, key):
                limited_scopes.append(scope)
                retry_after_ms = max(
                    retry_after_ms, self._limiter.get_time_remaining(scope, key)
                )

        if not limited_scopes:
            return

        logger.warning(
            "rate_limit.blocked",
            extra={
                "action": action,
                "scopes": [scope.value for scope in limited_scopes],
                "key_hashes": [hash_limiter_key(key) for _, key in checks],
                "retry_after_ms": retry_after_ms,
            },
        )
        raise RateLimitedAppError(
            code="too_many_attempts",
            message=message,
            details={
                "scope": ",".join(scope.value for scope in limited_scopes),
                "retry_after_ms": retry_after_ms,
            },
            retry_after_ms=retry_after_ms,
        )

    def _record_failure(
        self,
        *,
        action: str,
        keys: tuple[tuple[LimitScope, str], ...],
        reason: str,
    ) -> None:
        if self._enabled:
            for scope, key in keys:
                self._limiter.increment(scope, key)

        logger.warning(
            f"auth.{action}.failed",
            extra={
                "reason": reason,
                "key_hashes": [hash_limiter_key(key) for _, key in keys],
            },
        )

    def _record_success(self, *keys: tuple[LimitScope, str]) -> None:
        if not self._enabled:
            return
        for scope, key in keys:
            self._limiter.reset(scope, key)
