"""Application factory for the FastAPI app.

Centralizes app construction (middleware, handlers, routers) and owns the
lifecycle of process-wide resources: the auth attempt limiter is created on
startup and its background sweep is stopped on shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from app.adapters.rate_limit.base import AbstractAttemptLimiter
from app.adapters.users.base import AbstractUserRepository
from app.adapters.users.in_memory import InMemoryUserRepository
from app.api.routes import auth_router, health_router
from app.core.config import Settings, settings as default_settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import build_request_id_middleware
from app.core.rate_limit import build_auth_rate_limiter
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)


def build_user_repository(app_settings: Settings) -> InMemoryUserRepository:
    """Create the mocked user store, seeded with the demo account if enabled."""

    users = InMemoryUserRepository()
    if app_settings.app.mock_auth_enabled:
        users.create(
            name=app_settings.app.demo_user_name,
            email=app_settings.app.demo_user_email,
            password=app_settings.app.demo_user_password,
        )
    return users


def create_app(
    app_settings: Settings | None = None,
    *,
    limiter_factory: Callable[[], AbstractAttemptLimiter] | None = None,
    users: AbstractUserRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the global settings.
        limiter_factory: Override how the limiter is built (tests inject a
            fake clock here).
        users: Override the user store.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log, debug=cfg.app.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        limiter = (
            limiter_factory()
            if limiter_factory is not None
            else build_auth_rate_limiter(cfg.rate_limit)
        )
        app.state.auth_rate_limiter = limiter
        app.state.auth_service = AuthService(
            users if users is not None else build_user_repository(cfg),
            limiter,
            enabled=cfg.rate_limit.enabled,
        )
        logger.info("app.started", extra={"app_env": cfg.app_env})
        try:
            yield
        finally:
            limiter.close()
            logger.info("app.stopped")

    app = FastAPI(
        title="Wardrobe Auth API",
        description=(
            "Sign-in, sign-up and password reset for the wardrobe app. "
            "Failed attempts are throttled per client IP and per account, "
            "with an escalating lockout once the attempt limit is reached."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg

    app.middleware("http")(build_request_id_middleware(cfg.log.request_id_header))

    setup_exception_handlers(app)

    app.include_router(auth_router, prefix="/v1")
    app.include_router(health_router)

    return app
