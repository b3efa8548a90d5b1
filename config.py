"""
Configuration Management for the Membaza Users API
==================================================

This module handles all application configuration using the Settings pattern
with Pydantic. This approach provides:

1. **Environment Variable Support**: Easy deployment configuration
2. **Validation**: Catches configuration errors at startup
3. **Defaults**: Sensible defaults for development

Settings are loaded once through a cached function, but tests can still build
independent instances with get_settings_for_testing().
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")
SUPPORTED_STORE_BACKENDS = ("memory", "redis")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with MEMBAZA_ to avoid conflicts.
    Example: MEMBAZA_JWT_SECRET_KEY=change-me

    Priority order (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values defined here
    """

    model_config = SettingsConfigDict(
        env_prefix="MEMBAZA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =================================================================
    # Token Configuration
    # =================================================================
    jwt_secret_key: str = Field(
        default="dev-secret-change-me",
        description="""
        Secret used to sign login tokens (HMAC).

        The default is only suitable for local development. Every instance
        behind the same base path must share the same secret, otherwise a
        token issued by one node fails validation on another.
        """
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Signing algorithm for login tokens: HS256, HS384 or HS512"
    )

    jwt_access_token_expire_minutes: int = Field(
        default=30,
        gt=0,
        description="Lifetime of a login token in minutes"
    )

    jwt_issuer: str = Field(
        default="membaza-users",
        description="Value of the 'iss' claim, checked on validation"
    )

    # =================================================================
    # Password Hashing
    # =================================================================
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="""
        bcrypt cost factor (log2 of the number of rounds).

        Each increment doubles the time needed to hash or verify a password.
        Tests lower this to 4.
        """
    )

    # =================================================================
    # User Store
    # =================================================================
    user_store_backend: str = Field(
        default="memory",
        description="Where user documents live: 'memory' or 'redis'"
    )

    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    redis_db: int = Field(default=0, description="Redis database number")
    redis_password: Optional[str] = Field(default=None, description="Redis password")
    redis_key_prefix: str = Field(
        default="membaza",
        description="Prefix for every key written by the user store"
    )

    # =================================================================
    # API Configuration
    # =================================================================
    api_host: str = Field(default="127.0.0.1", description="Bind address for 'serve'")
    api_port: int = Field(default=8000, description="Bind port for 'serve'")

    api_debug: bool = Field(
        default=False,
        description="Expose unexpected error details in 500 responses"
    )

    api_base_path: str = Field(
        default="/users",
        description="Path prefix of the login, refresh and logout endpoints"
    )

    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    cors_allow_credentials: bool = Field(default=False)

    # =================================================================
    # Logging Configuration
    # =================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Python logging format string"
    )

    @field_validator("jwt_secret_key")
    @classmethod
    def _secret_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("jwt_secret_key must not be empty")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in SUPPORTED_JWT_ALGORITHMS:
            raise ValueError(
                f"Unsupported JWT algorithm '{value}'. "
                f"Supported: {', '.join(SUPPORTED_JWT_ALGORITHMS)}"
            )
        return normalized

    @field_validator("user_store_backend")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in SUPPORTED_STORE_BACKENDS:
            raise ValueError(
                f"Unsupported user store backend '{value}'. "
                f"Supported: {', '.join(SUPPORTED_STORE_BACKENDS)}"
            )
        return normalized

    @field_validator("api_base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        stripped = value.strip().rstrip("/")
        if not stripped:
            return ""
        if not stripped.startswith("/"):
            stripped = "/" + stripped
        return stripped

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached singleton).

    For testing, you can clear the cache:
        get_settings.cache_clear()

    Returns:
        Settings: Application settings instance
    """
    return Settings()


def get_settings_for_testing(**overrides) -> Settings:
    """
    Create a Settings instance with custom values for testing.

    Example:
        settings = get_settings_for_testing(bcrypt_rounds=4)

    Args:
        **overrides: Setting values to override

    Returns:
        Settings: New Settings instance with overrides applied
    """
    return Settings(**overrides)
