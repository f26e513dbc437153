"""In-memory user repository (mock backend).

Notes:
- Per-process only and lost on restart.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
import threading
import uuid
from datetime import datetime, timezone

from app.adapters.users.base import AbstractUserRepository, UserRecord
from app.core.errors import ConflictAppError

logger = logging.getLogger(__name__)

_HASH_ALGORITHM = "pbkdf2_sha256"
_HASH_ITERATIONS = 120_000


def hash_password(password: str, *, iterations: int = _HASH_ITERATIONS) -> str:
    """Hash a password as ``pbkdf2_sha256$<iterations>$<salt>$<digest>``."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), iterations
    )
    return f"{_HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def check_password(password: str, encoded: str) -> bool:
    """Constant-time comparison of ``password`` against an encoded hash."""
    try:
        algorithm, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    if algorithm != _HASH_ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), int(iterations)
    )
    return hmac.compare_digest(digest.hex(), expected)


class InMemoryUserRepository(AbstractUserRepository):
    """Dictionary-backed account store keyed by normalized email."""

    def __init__(self, *, hash_iterations: int = _HASH_ITERATIONS) -> None:
        self._hash_iterations = hash_iterations
        self._lock = threading.RLock()
        self._users_by_email: dict[str, UserRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._users_by_email)

    def get_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            return self._users_by_email.get(email.lower())

    def create(self, *, name: str, email: str, password: str) -> UserRecord:
        key = email.lower()
        password_hash = hash_password(password, iterations=self._hash_iterations)

        with self._lock:
            if key in self._users_by_email:
                raise ConflictAppError(
                    code="email_already_registered",
                    message="An account with this email already exists",
                )
            user = UserRecord(
                id=str(uuid.uuid4()),
                email=key,
                name=name,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._users_by_email[key] = user

        logger.info("users.created", extra={"user_id": user.id})
        return user

    def verify_password(self, user: UserRecord, password: str) -> bool:
        return check_password(password, user.password_hash)
