"""
Domain Models for the Membaza Users API
=======================================

Core data structures shared by the user store, the token service and the
HTTP layer. These models are "pure": they have no dependencies on external
services, databases or frameworks beyond Pydantic.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """
    A stored user record.

    Created and mutated by account management; the authentication code only
    reads it. The email uniquely identifies at most one record.

    Attributes:
        id: Unique user identifier (token subject)
        email: Unique email address, matched exactly on login
        password_hash: One-way salted digest of the password
        confirmed: Account completed its out-of-band verification step
        enabled: Account is administratively active
    """
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="Unique user identifier")
    email: str = Field(..., min_length=1, description="Unique email address")
    password_hash: str = Field(..., description="Password digest")
    confirmed: bool = Field(default=False, description="Confirmation step completed")
    enabled: bool = Field(default=True, description="Account is not suspended")

    def __repr__(self) -> str:
        return (
            f"User(id={self.id!r}, email={self.email!r}, "
            f"confirmed={self.confirmed}, enabled={self.enabled})"
        )


class JwtToken(BaseModel):
    """
    Wire form of a login token.

    The value is an opaque compact JWS; clients send it back unchanged to
    refresh or log out.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9.eyJzdWIiOiJ1MSJ9.sig"
            }
        }
    )

    token: str = Field(..., description="Signed login token")


class TokenClaims(BaseModel):
    """Validated claims extracted from a login token."""

    subject: str = Field(..., description="User id the token was issued for")
    issued_at: Optional[datetime] = Field(default=None, description="'iat' claim")
    expires_at: datetime = Field(..., description="'exp' claim")
    issuer: Optional[str] = Field(default=None, description="'iss' claim")
