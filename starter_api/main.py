"""
Main application entry point - FastAPI app factory and instance.
Run with: uvicorn starter_api.main:app --reload
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from starter_api.core.config import Settings, settings
from starter_api.core.logging import configure_logging
from starter_api.core.security import PasswordHasher, TokenIssuer
from starter_api.middleware import register_exception_handlers, register_middleware
from starter_api.oauth.google import build_google_client
from starter_api.routers import auth, google_auth, health, users
from starter_api.services.oauth_state import OAuthStateStore

logger = logging.getLogger("starter.main")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    This is the composition root: the password hasher, token issuer and
    Google client are constructed here, once, and stored on app.state for
    the dependencies in starter_api.deps.

    Raises:
        ConfigurationError: SECRET_KEY missing or a placeholder, or Google
                            login enabled without client credentials
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    # Fail closed: these raise before the app can serve a single request
    token_issuer = TokenIssuer(
        secret_key=app_settings.SECRET_KEY,
        algorithm=app_settings.ALGORITHM,
        expire_minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )
    google_client = build_google_client(app_settings)

    app = FastAPI(
        title=app_settings.APP_NAME,
        debug=app_settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = app_settings
    app.state.password_hasher = PasswordHasher(rounds=app_settings.BCRYPT_ROUNDS)
    app.state.token_issuer = token_issuer
    app.state.google_client = google_client
    app.state.oauth_states = OAuthStateStore()
    app.state.started_at = time.monotonic()

    # ---------------------------------------------------------------------------
    # MIDDLEWARE
    # ---------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_middleware(app)
    register_exception_handlers(app)

    # ---------------------------------------------------------------------------
    # ROUTERS
    # ---------------------------------------------------------------------------
    # health.router: /, /health
    # auth.router: {prefix}/auth/register, {prefix}/auth/login, {prefix}/auth/me
    # google_auth.router: {prefix}/auth/google, {prefix}/auth/google/callback
    # users.router: {prefix}/users CRUD
    app.include_router(health.router)
    app.include_router(auth.router, prefix=app_settings.API_PREFIX)
    app.include_router(google_auth.router, prefix=app_settings.API_PREFIX)
    app.include_router(users.router, prefix=app_settings.API_PREFIX)

    logger.info(
        "%s started (environment=%s, google_oauth=%s)",
        app_settings.APP_NAME,
        app_settings.ENVIRONMENT,
        "enabled" if google_client else "disabled",
    )
    return app


app = create_app()
