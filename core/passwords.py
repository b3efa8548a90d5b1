"""
Password Hashing
================

bcrypt password hashing through passlib's CryptContext.

The algorithm is a library choice, not something implemented here. The
context is configured once with the cost factor from settings and then
shared, since CryptContext is safe to use from several threads.
"""

import logging
from typing import Optional

from passlib.context import CryptContext

from config import Settings, get_settings


logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    One-way salted password hashing.

    Exposes hash(plaintext) -> digest and matches(plaintext, digest) -> bool.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a plaintext password into a bcrypt digest."""
        if not password:
            raise ValueError("Password must not be empty")
        return self._context.hash(password)

    def matches(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a stored digest.

        A digest that is empty or not a recognised bcrypt hash never matches.
        """
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            logger.warning("Stored password digest is not a recognised hash")
            return False

    def dummy_verify(self) -> None:
        """Spend the time of one verification without checking anything."""
        self._context.dummy_verify()


def create_password_hasher(settings: Optional[Settings] = None) -> PasswordHasher:
    """
    Factory for the configured password hasher.

    Args:
        settings: Application settings (uses the cached settings if None)

    Returns:
        PasswordHasher: Hasher using the configured bcrypt cost factor
    """
    settings = settings or get_settings()
    return PasswordHasher(rounds=settings.bcrypt_rounds)
