"""
API Response Models
===================

Pydantic models for API responses.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every error produced by the error handling middleware."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "InvalidCredentialsError",
                "message": "Invalid username or password.",
                "details": {}
            }
        }
    )

    error_type: str = Field(..., description="Exception class name")
    message: str = Field(..., description="Human-readable error description")
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context about the error"
    )
