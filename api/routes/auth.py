"""
Authentication Endpoints
========================

Login, token refresh and logout.

Handlers are plain functions so FastAPI runs the blocking bcrypt and store
calls in its threadpool. Errors raised by the authenticator are rendered by
the error handling middleware.
"""

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import get_authenticator
from api.models.requests import LoginRequest
from api.models.responses import ErrorResponse
from core.authenticator import Authenticator
from models import JwtToken

router = APIRouter()


@router.post(
    "/login",
    response_model=JwtToken,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
        403: {"model": ErrorResponse, "description": "Account not confirmed or disabled"},
    },
)
def login(
    credentials: LoginRequest,
    authenticator: Authenticator = Depends(get_authenticator)
) -> JwtToken:
    """
    Exchange an email and password for a login token.

    An unknown email and a wrong password give the same 401 response.
    """
    return authenticator.login(credentials.email, credentials.password)


@router.post(
    "/refresh",
    response_model=JwtToken,
    responses={
        401: {"model": ErrorResponse, "description": "Token invalid or expired"},
        403: {"model": ErrorResponse, "description": "Account not confirmed or disabled"},
        404: {"model": ErrorResponse, "description": "User no longer exists"},
    },
)
def refresh(
    current_token: JwtToken,
    authenticator: Authenticator = Depends(get_authenticator)
) -> JwtToken:
    """Exchange a valid token for a fresh one for the same user."""
    return authenticator.refresh(current_token)


@router.post("/logout", status_code=status.HTTP_200_OK, response_class=Response)
def logout() -> Response:
    """
    Log out.

    The request body is ignored and the response is always an empty 200:
    tokens are not revoked and stay valid until they expire. Nothing is
    looked up, so this also answers while the application is shutting down.
    """
    return Response(status_code=status.HTTP_200_OK)
