"""
Dependency Injection Functions
==============================

FastAPI dependency providers for the services built during application
startup.
"""

from fastapi import HTTPException, Request, status

from config import Settings
from core.authenticator import Authenticator
from core.user_store import UserStore


def _from_state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized. Service is starting up."
        )
    return service


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return _from_state(request, "settings")


def get_authenticator(request: Request) -> Authenticator:
    """
    Dependency to get the authenticator from app state.

    The authenticator and its collaborators are built once in the lifespan
    handler, so every request shares the same hasher, token service and
    store client.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    return _from_state(request, "authenticator")


def get_user_store(request: Request) -> UserStore:
    """Dependency to get the user store from app state."""
    return _from_state(request, "user_store")
