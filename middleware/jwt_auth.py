"""
JWT Authentication Module

Verifies the session tokens the MumbleTasks web client sends as
`Authorization: Bearer <token>`.

JWT Claims Contract:
- user_id: string (required) - Stable user identifier
- email: string (optional) - User email
- preferred_language: string (optional) - 'en' or 'no'
- iss: string (required) - Issuer, must match JWT_ISSUER
- aud: string (required) - Audience, must match JWT_AUDIENCE
- iat: number (required) - Issued-at timestamp
- exp: number (required) - Expiration timestamp

Security:
- Uses HMAC-SHA256 (HS256) symmetric signing
- Never logs full JWT tokens
"""

import os
import logging
from typing import Optional
from dataclasses import dataclass

import jwt
from jwt.exceptions import (
    InvalidTokenError,
    ExpiredSignatureError,
    InvalidIssuerError,
    InvalidAudienceError,
)

logger = logging.getLogger(__name__)

# Clock skew tolerance in seconds (for exp validation)
CLOCK_SKEW_LEEWAY = 30

MIN_SECRET_LENGTH = 32


@dataclass
class JWTClaims:
    """
    Validated claims extracted from a session JWT.

    Attributes:
        user_id: Stable user identifier
        issued_at: Unix timestamp when the token was issued
        expires_at: Unix timestamp when the token expires
        email: Optional user email
        preferred_language: Optional preferred UI/output language
    """
    user_id: str
    issued_at: int
    expires_at: int
    email: str | None = None
    preferred_language: str | None = None


class JWTVerificationError(Exception):
    """
    Raised when JWT verification fails.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for logging
    """
    def __init__(self, message: str, code: str = "JWT_INVALID"):
        self.message = message
        self.code = code
        super().__init__(message)


def get_jwt_config() -> tuple[str, str, str]:
    """
    Get JWT configuration from environment variables.

    Returns:
        Tuple of (secret, issuer, audience)

    Raises:
        JWTVerificationError: If the secret is missing or too short
    """
    secret = os.getenv("JWT_SECRET")
    issuer = os.getenv("JWT_ISSUER", "mumbletasks-web")
    audience = os.getenv("JWT_AUDIENCE", "mumbletasks-api")

    if not secret:
        logger.error("JWT_SECRET not configured")
        raise JWTVerificationError(
            "JWT verification not configured",
            code="JWT_NOT_CONFIGURED"
        )

    if len(secret) < MIN_SECRET_LENGTH:
        logger.error(f"JWT_SECRET is too short (min {MIN_SECRET_LENGTH} chars)")
        raise JWTVerificationError(
            "JWT verification misconfigured",
            code="JWT_MISCONFIGURED"
        )

    return secret, issuer, audience


def verify_jwt(token: str) -> JWTClaims:
    """
    Verify a session JWT and extract claims.

    Checks signature, issuer, audience, expiry (with clock skew leeway) and
    the presence of user_id.

    Args:
        token: The JWT string (without 'Bearer ' prefix)

    Returns:
        JWTClaims with the validated user identity

    Raises:
        JWTVerificationError: On any validation failure
    """
    secret, issuer, audience = get_jwt_config()

    logger.debug(f"Verifying JWT (first 8 chars): {token[:8]}...")

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=issuer,
            audience=audience,
            leeway=CLOCK_SKEW_LEEWAY,
            options={
                "require": ["exp", "iat", "iss", "aud"],
            }
        )
    except ExpiredSignatureError:
        logger.warning("JWT has expired")
        raise JWTVerificationError("Token has expired", code="JWT_EXPIRED")

    except InvalidIssuerError:
        logger.warning(f"JWT has invalid issuer (expected: {issuer})")
        raise JWTVerificationError("Invalid token issuer", code="JWT_INVALID_ISSUER")

    except InvalidAudienceError:
        logger.warning(f"JWT has invalid audience (expected: {audience})")
        raise JWTVerificationError("Invalid token audience", code="JWT_INVALID_AUDIENCE")

    except InvalidTokenError as e:
        logger.warning(f"JWT verification failed: {type(e).__name__}")
        raise JWTVerificationError("Invalid token", code="JWT_INVALID")

    user_id = payload.get("user_id")
    if not user_id:
        logger.warning("JWT missing user_id claim")
        raise JWTVerificationError(
            "Missing required claim: user_id",
            code="JWT_MISSING_USER"
        )

    preferred_language = payload.get("preferred_language")
    if preferred_language not in (None, "en", "no"):
        logger.warning(f"Ignoring unsupported preferred_language claim: {preferred_language}")
        preferred_language = None

    logger.info(f"JWT verified successfully for user={str(user_id)[:8]}...")

    return JWTClaims(
        user_id=str(user_id),
        email=payload.get("email"),
        preferred_language=preferred_language,
        issued_at=payload.get("iat", 0),
        expires_at=payload.get("exp", 0),
    )


def extract_bearer_token(authorization_header: Optional[str]) -> Optional[str]:
    """
    Extract the token from an Authorization header.

    Args:
        authorization_header: The full Authorization header value

    Returns:
        The token string, or None if header is missing/malformed
    """
    if not authorization_header:
        return None

    if not authorization_header.startswith("Bearer "):
        return None

    token = authorization_header[7:]

    if not token or not token.strip():
        return None

    return token.strip()


def is_jwt_auth_configured() -> bool:
    """Return True if JWT_SECRET is set and long enough."""
    secret = os.getenv("JWT_SECRET")
    return secret is not None and len(secret) >= MIN_SECRET_LENGTH
