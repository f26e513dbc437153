"""Unit tests for the in-memory user repository."""

import pytest

from app.adapters.users.in_memory import InMemoryUserRepository, check_password, hash_password
from app.core.errors import ConflictAppError


@pytest.fixture
def repo() -> InMemoryUserRepository:
    return InMemoryUserRepository(hash_iterations=1_000)


def test_create_and_lookup_is_case_insensitive(repo: InMemoryUserRepository) -> None:
    user = repo.create(name="Ada", email="Ada@Example.com", password="Secret!123")

    assert user.email == "ada@example.com"
    assert repo.get_by_email("ADA@example.com") == user
    assert len(repo) == 1


def test_password_is_not_stored_in_clear(repo: InMemoryUserRepository) -> None:
    user = repo.create(name="Ada", email="ada@example.com", password="Secret!123")

    assert "Secret!123" not in user.password_hash
    assert repo.verify_password(user, "Secret!123") is True
    assert repo.verify_password(user, "Secret!124") is False


def test_duplicate_email_conflicts(repo: InMemoryUserRepository) -> None:
    repo.create(name="Ada", email="ada@example.com", password="Secret!123")

    with pytest.raises(ConflictAppError) as exc_info:
        repo.create(name="Other", email="ADA@example.com", password="Secret!123")
    assert exc_info.value.code == "email_already_registered"


def test_same_password_gets_different_salts() -> None:
    assert hash_password("Secret!123", iterations=1_000) != hash_password(
        "Secret!123", iterations=1_000
    )


@pytest.mark.parametrize("encoded", ["", "garbage", "md5$1$salt$digest"])
def test_check_password_rejects_malformed_hashes(encoded: str) -> None:
    assert check_password("Secret!123", encoded) is False
