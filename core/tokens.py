"""
Token Service
=============

JWT issuance and validation for login tokens, using python-jose.

Tokens carry the user id as their subject plus issue time, expiry, issuer and
a random token id. Signing and claim checks are delegated to jose; this module
only decides which claims go in and turns every jose failure into
InvalidTokenError.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from config import Settings, get_settings
from exceptions import InvalidTokenError
from models import JwtToken, TokenClaims


logger = logging.getLogger(__name__)


class JwtService:
    """
    Issues and validates signed login tokens.

    Stateless apart from its configuration; one instance is shared by all
    requests.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(minutes=30),
        issuer: Optional[str] = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self.issuer = issuer

    def issue(self, subject: str, expires_delta: Optional[timedelta] = None) -> JwtToken:
        """
        Create a new signed token for a subject.

        Args:
            subject: The user id to embed as 'sub'
            expires_delta: Optional custom lifetime (defaults to the configured one)

        Returns:
            JwtToken: The signed token
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)

        claims: Dict[str, Any] = {
            "sub": subject,
            "iat": now,
            "exp": expire,
            "jti": uuid.uuid4().hex,
        }
        if self.issuer:
            claims["iss"] = self.issuer

        encoded = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return JwtToken(token=encoded)

    def validate(self, token: JwtToken) -> TokenClaims:
        """
        Verify a token's signature and claims.

        Args:
            token: The token presented by the client

        Returns:
            TokenClaims: The validated claims

        Raises:
            InvalidTokenError: If the token is malformed, badly signed,
                expired, from another issuer or has no subject
        """
        try:
            payload = jwt.decode(
                token.token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise InvalidTokenError("Token has expired.")
        except JWTError as e:
            logger.info(f"Rejected invalid token: {e}")
            raise InvalidTokenError()

        subject = payload.get("sub")
        if not subject:
            raise InvalidTokenError()

        issued_at = payload.get("iat")
        return TokenClaims(
            subject=subject,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc) if issued_at else None,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            issuer=payload.get("iss"),
        )


def create_jwt_service(settings: Optional[Settings] = None) -> JwtService:
    """
    Factory for the configured token service.

    Args:
        settings: Application settings (uses the cached settings if None)

    Returns:
        JwtService: Token service using the configured secret and lifetime
    """
    settings = settings or get_settings()
    return JwtService(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        issuer=settings.jwt_issuer or None,
    )
