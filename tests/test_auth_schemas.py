"""Validation rules for auth request schemas."""

import pytest
from pydantic import ValidationError

from app.schemas.auth import LoginRequest, PasswordResetRequest, RegisterRequest


class TestLoginRequest:
    def test_normalizes_email(self) -> None:
        req = LoginRequest(email="  Ada@Example.com ", password="whatever1")
        assert req.email == "ada@example.com"

    @pytest.mark.parametrize("email", ["ada", "ada@", "@example.com", "a b@example.com"])
    def test_rejects_invalid_email(self, email: str) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email=email, password="whatever1")

    def test_rejects_long_email(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email=f"{'a' * 60}@example.com", password="whatever1")

    @pytest.mark.parametrize("password", ["short", "x" * 65])
    def test_password_length(self, password: str) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="ada@example.com", password=password)


class TestRegisterRequest:
    def _build(self, **overrides) -> RegisterRequest:
        data = {
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "password": "Secret!123",
            "confirm_password": "Secret!123",
        }
        data.update(overrides)
        return RegisterRequest(**data)

    def test_valid(self) -> None:
        req = self._build(name="  Mary-Jane   O'Neil ")
        assert req.name == "Mary-Jane O'Neil"

    @pytest.mark.parametrize("name", ["A", "R2D2", "x" * 51, "<b></b>"])
    def test_rejects_bad_names(self, name: str) -> None:
        with pytest.raises(ValidationError):
            self._build(name=name)

    @pytest.mark.parametrize(
        "password",
        [
            "alllowercase1!",  # no upper
            "ALLUPPERCASE1!",  # no lower
            "NoDigits!!",  # no digit
            "NoSpecial123",  # no special
            "Has Space1!",  # char outside allowed set
        ],
    )
    def test_rejects_weak_passwords(self, password: str) -> None:
        with pytest.raises(ValidationError):
            self._build(password=password, confirm_password=password)

    def test_rejects_mismatched_confirmation(self) -> None:
        with pytest.raises(ValidationError, match="Passwords don't match"):
            self._build(confirm_password="Secret!124")


def test_password_reset_normalizes_email() -> None:
    assert PasswordResetRequest(email=" ADA@example.com").email == "ada@example.com"
