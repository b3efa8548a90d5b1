"""
API Request Models
==================

Pydantic models for API request validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "a@x.com",
                "password": "correct horse battery staple"
            }
        }
    )

    email: str = Field(
        ...,
        description="Email address of the account, matched exactly",
        min_length=1
    )
    password: str = Field(
        ...,
        description="Plaintext password",
    )

    def __repr__(self) -> str:
        return f"LoginRequest(email={self.email!r}, password='***')"

    __str__ = __repr__
