from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from app.adapters.users.base import UserRecord
from app.core.rate_limit import resolve_client_ip
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordResetRequest,
    PasswordResetResponse,
    RegisterRequest,
    UserOut,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(request: Request) -> AuthService:
    """FastAPI dependency returning the auth service built by the app factory."""
    return request.app.state.auth_service


def get_client_ip(request: Request) -> str:
    """FastAPI dependency resolving the IP-scope limiter key."""
    return resolve_client_ip(
        request,
        trust_forwarded_for=request.app.state.settings.rate_limit.trust_forwarded_for,
    )


def _to_user_out(user: UserRecord) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client_ip: str = Depends(get_client_ip),
) -> AuthResponse:
    """Sign in with email and password.

    Failed attempts count against both the client IP and the account. Once
    either is locked out the endpoint answers 429 with ``Retry-After`` until
    the lockout expires.

    Raises:
        AuthenticationAppError: 401 on wrong credentials.
        RateLimitedAppError: 429 when locked out.
    """
    user = auth_service.sign_in(
        email=payload.email,
        password=payload.password,
        client_ip=client_ip,
    )
    return AuthResponse(user=_to_user_out(user), message="Signed in")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client_ip: str = Depends(get_client_ip),
) -> AuthResponse:
    """Create an account.

    Raises:
        ConflictAppError: 409 when the email is taken.
        RateLimitedAppError: 429 when the client IP is locked out.
    """
    user = auth_service.sign_up(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        client_ip=client_ip,
    )
    return AuthResponse(user=_to_user_out(user), message="Account created")


@router.post(
    "/password-reset",
    response_model=PasswordResetResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_password_reset(
    payload: PasswordResetRequest,
    auth_service: AuthService = Depends(get_auth_service),
    client_ip: str = Depends(get_client_ip),
) -> PasswordResetResponse:
    """Request a password reset email. Same answer for known and unknown emails."""
    auth_service.request_password_reset(email=payload.email, client_ip=client_ip)
    return PasswordResetResponse()
