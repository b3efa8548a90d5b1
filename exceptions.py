"""
Custom Exceptions for the Membaza Users API
===========================================

This module defines a hierarchy of custom exceptions that:

1. **Categorize Errors**: Different exception types for different problems
2. **Carry Context**: Include relevant information for debugging
3. **Support APIs**: Map cleanly to HTTP status codes

Exception Hierarchy:
    MembazaError (base)
    ├── AuthenticationError
    │   ├── InvalidCredentialsError
    │   ├── InvalidTokenError
    │   ├── UserNotFoundError
    │   ├── UserNotConfirmedError
    │   └── UserDisabledError
    ├── UserAlreadyExistsError
    ├── StorageError
    └── ConfigurationError
"""

from typing import Optional


class MembazaError(Exception):
    """
    Base exception for all Membaza errors.

    All custom exceptions inherit from this, allowing code to catch
    every application error with a single except clause:

        try:
            authenticator.login(email, password)
        except MembazaError as e:
            logger.error(f"Login error: {e}")

    Attributes:
        message: Human-readable error description
        details: Additional context (dict for API responses)
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """
        Convert to dictionary for API responses.

        Returns a structured error that can be easily serialized to JSON.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# Authentication Errors
# =============================================================================

class AuthenticationError(MembazaError):
    """Base class for errors that deny a login or refresh."""
    pass


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when the email is unknown or the password does not match.

    Both causes produce the exact same message and no details, so a caller
    cannot tell which of the two factors was wrong.
    """

    MESSAGE = "Invalid username or password."

    def __init__(self):
        super().__init__(message=self.MESSAGE)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed, badly signed, expired or has no subject."""

    def __init__(self, reason: str = "Token is invalid or expired."):
        super().__init__(message=reason)


class UserNotFoundError(AuthenticationError):
    """Raised when a token's subject no longer has a backing user record."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User '{user_id}' no longer exists.",
            details={"user_id": user_id}
        )


class UserNotConfirmedError(AuthenticationError):
    """Raised when the account has not completed its confirmation step."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User '{user_id}' has not been confirmed.",
            details={"user_id": user_id}
        )


class UserDisabledError(AuthenticationError):
    """Raised when the account has been administratively disabled."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User '{user_id}' is disabled.",
            details={"user_id": user_id}
        )


# =============================================================================
# Storage Errors
# =============================================================================

class UserAlreadyExistsError(MembazaError):
    """Raised when saving a user whose id or email is already taken."""

    def __init__(self, field: str, value: str):
        super().__init__(
            message=f"A user with {field} '{value}' already exists.",
            details={"field": field, "value": value}
        )


class StorageError(MembazaError):
    """Raised when the user store backend cannot be reached."""

    def __init__(self, backend: str, original_error: str):
        super().__init__(
            message=f"User store '{backend}' is unavailable: {original_error}",
            details={
                "backend": backend,
                "original_error": original_error
            }
        )


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(MembazaError):
    """Raised when there's a configuration problem."""

    def __init__(self, setting_name: str, issue: str):
        super().__init__(
            message=f"Configuration error for '{setting_name}': {issue}",
            details={
                "setting_name": setting_name,
                "issue": issue
            }
        )
