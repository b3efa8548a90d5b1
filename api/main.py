"""
FastAPI Main Application
========================

FastAPI application factory with middleware, routes, and lifespan management.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware.error_handler import error_handler_middleware
from api.routes import auth, health
from config import Settings, get_settings
from core.authenticator import Authenticator
from core.passwords import create_password_hasher
from core.tokens import create_jwt_service
from core.user_store import RedisUserStore, UserStore, create_user_store


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level and format to the root logger."""
    logging.basicConfig(level=settings.log_level, format=settings.log_format)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for startup and shutdown.

    Startup: reports the configuration the services were built with.
    Shutdown: closes the Redis connection pool, if any, and clears state.
    """
    settings: Settings = app.state.settings
    user_store: UserStore = app.state.user_store

    logger.info("Starting Membaza Users API")
    logger.info(f"User store backend: {user_store.backend_name}")
    logger.info(f"Auth endpoints under '{settings.api_base_path or '/'}'")

    yield  # Application runs here

    logger.info("Shutting down Membaza Users API")
    if isinstance(user_store, RedisUserStore):
        user_store.redis_client.close()
    app.state.authenticator = None
    app.state.user_store = None


def create_app(
    settings: Optional[Settings] = None,
    user_store: Optional[UserStore] = None,
) -> FastAPI:
    """
    Build the application and the services it depends on.

    Args:
        settings: Application settings (uses the cached settings if None)
        user_store: Pre-built user store (built from settings if None)

    Returns:
        FastAPI: The configured application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Membaza Users API",
        description="""
        Authentication endpoints of the Membaza user service.

        ## Authentication
        POST credentials to `/login` to obtain a token, POST the token to
        `/refresh` for a new one before it expires.
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json"
    )

    user_store = user_store or create_user_store(settings)
    app.state.settings = settings
    app.state.user_store = user_store
    app.state.authenticator = Authenticator(
        user_store=user_store,
        password_hasher=create_password_hasher(settings),
        jwt_service=create_jwt_service(settings),
    )

    # =========================================================================
    # Middleware Setup (order matters - last added = outermost)
    # =========================================================================

    # Global error handling middleware, wrapped by CORS so error responses
    # carry the CORS headers too
    app.middleware("http")(error_handler_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Router Registration
    # =========================================================================

    app.include_router(
        auth.router,
        prefix=settings.api_base_path,
        tags=["auth"]
    )

    app.include_router(
        health.router,
        tags=["health"]
    )

    return app


app = create_app()
