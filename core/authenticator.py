"""
Authentication Handler
======================

Turns a login (email + password) or an existing token into a fresh login
token, composing the user store, the password hasher and the token service.

Every check raises a typed error from exceptions.py; nothing is retried or
recovered here.
"""

import logging
from typing import Optional

from core.passwords import PasswordHasher
from core.tokens import JwtService
from core.user_store import UserStore
from exceptions import (
    InvalidCredentialsError,
    UserDisabledError,
    UserNotConfirmedError,
    UserNotFoundError,
)
from models import JwtToken, User


logger = logging.getLogger(__name__)


class Authenticator:
    """Login, refresh and logout over injected collaborators."""

    def __init__(
        self,
        user_store: UserStore,
        password_hasher: PasswordHasher,
        jwt_service: JwtService,
    ):
        if user_store is None or password_hasher is None or jwt_service is None:
            raise ValueError("Authenticator requires a user store, a password hasher and a token service")
        self.user_store = user_store
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service

    def login(self, email: str, password: str) -> JwtToken:
        """
        Exchange credentials for a new token.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            UserNotConfirmedError: Account not confirmed
            UserDisabledError: Account disabled
        """
        user = self.authenticate_credentials(email, password)
        logger.info(f"User '{user.id}' logged in")
        return self.jwt_service.issue(user.id)

    def refresh(self, token: JwtToken) -> JwtToken:
        """
        Exchange a valid token for a new one for the same user.

        Raises:
            InvalidTokenError: Token malformed, badly signed or expired
            UserNotFoundError: Token subject no longer exists
            UserNotConfirmedError: Account not confirmed
            UserDisabledError: Account disabled
        """
        user = self.authenticate_token(token)
        logger.debug(f"Refreshed token for user '{user.id}'")
        return self.jwt_service.issue(user.id)

    def logout(self, token: Optional[JwtToken] = None) -> None:
        """
        Do nothing.

        Tokens are not revoked server-side; they stay valid until they expire.
        """
        return None

    def authenticate_credentials(self, email: str, password: str) -> User:
        user = self.user_store.find_by_email(email)
        if user is None:
            self.password_hasher.dummy_verify()
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentialsError()

        if not self.password_hasher.matches(password, user.password_hash):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentialsError()

        assert_user_status(user)
        return user

    def authenticate_token(self, token: JwtToken) -> User:
        user_id = self.jwt_service.validate(token).subject
        user = self.user_store.find_by_id(user_id)

        if user is None:
            logger.warning(f"Token presented for removed user '{user_id}'")
            raise UserNotFoundError(user_id)

        assert_user_status(user)
        return user


def assert_user_status(user: User) -> None:
    """
    Account-status gate.

    Confirmation is checked before the enabled flag; only the first failing
    condition is reported.
    """
    if not user.confirmed:
        logger.info(f"User '{user.id}' rejected: not confirmed")
        raise UserNotConfirmedError(user.id)

    if not user.enabled:
        logger.info(f"User '{user.id}' rejected: disabled")
        raise UserDisabledError(user.id)
