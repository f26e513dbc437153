"""User repository interface.

The auth service only needs lookup, creation and password checks, so the
mocked store can be replaced by the hosted database client later.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """Stored account.

    Attributes:
        id: Opaque account identifier.
        email: Normalized (lower-case) email, unique per account.
        name: Display name.
        password_hash: Encoded salted hash, never the plain password.
        created_at: Creation time (UTC).
    """

    id: str
    email: str
    name: str
    password_hash: str
    created_at: datetime


class AbstractUserRepository(ABC):
    """Interface for account storage."""

    @abstractmethod
    def get_by_email(self, email: str) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    def create(self, *, name: str, email: str, password: str) -> UserRecord:
        """Create an account.

        Raises:
            ConflictAppError: If the email is already registered.
        """
        raise NotImplementedError

    @abstractmethod
    def verify_password(self, user: UserRecord, password: str) -> bool:
        raise NotImplementedError
