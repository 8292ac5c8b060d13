"""
Authentication Context Utilities

Resolves the caller identity for each request.

The resolution follows a priority chain:
1. Authorization: Bearer <JWT> (verified with JWT_SECRET)
2. When ALLOW_ANONYMOUS_AUTH=true and no bearer token is sent:
   X-User-ID header, then MOCK_USER_ID, then "anonymous"
3. Otherwise the request is rejected with 401
"""

import os
import uuid
import logging
from fastapi import HTTPException, Request
from middleware.jwt_auth import (
    JWTVerificationError,
    extract_bearer_token,
    verify_jwt,
)
from models.request_context import RequestContext

logger = logging.getLogger(__name__)

ANONYMOUS_USER_ID = "anonymous"


def is_anonymous_auth_allowed() -> bool:
    """Return True when ALLOW_ANONYMOUS_AUTH is enabled for local development."""
    return os.getenv("ALLOW_ANONYMOUS_AUTH", "false").strip().lower() in ("1", "true", "yes")


def get_auth_context(request: Request) -> RequestContext:
    """
    Resolve the authenticated caller for a request.

    Used as a FastAPI dependency by every route that touches user data or
    the model provider.

    Args:
        request: FastAPI Request object

    Returns:
        RequestContext with user_id and a fresh request_id

    Raises:
        HTTPException: 401 if no valid credentials are presented
    """
    request_id = str(uuid.uuid4())
    token = extract_bearer_token(request.headers.get("Authorization"))

    if token:
        try:
            claims = verify_jwt(token)
        except JWTVerificationError as e:
            logger.warning(
                f"Authentication failed: request_id={request_id}, code={e.code}"
            )
            raise HTTPException(status_code=401, detail=e.message)

        logger.info(
            f"Context extracted: request_id={request_id}, "
            f"user_id={claims.user_id[:8]}..., auth_method=jwt"
        )
        return RequestContext(
            user_id=claims.user_id,
            request_id=request_id,
            email=claims.email,
            preferred_language=claims.preferred_language,
            auth_method="jwt",
        )

    if is_anonymous_auth_allowed():
        user_id = _extract_fallback_user_id(request)
        logger.info(
            f"Context extracted: request_id={request_id}, "
            f"user_id={user_id}, auth_method=anonymous"
        )
        return RequestContext(
            user_id=user_id,
            request_id=request_id,
            auth_method="anonymous",
        )

    logger.warning(f"Missing bearer token: request_id={request_id}")
    raise HTTPException(status_code=401, detail="Authorization required")


def _extract_fallback_user_id(request: Request) -> str:
    """
    Pick a development user id.

    Priority:
    1. X-User-ID header
    2. MOCK_USER_ID environment variable
    3. "anonymous"
    """
    user_id = request.headers.get("X-User-ID")
    if user_id and user_id.strip():
        logger.debug(f"User ID from header: {user_id}")
        return user_id.strip()

    user_id = os.getenv("MOCK_USER_ID")
    if user_id:
        logger.debug(f"User ID from environment: {user_id}")
        return user_id

    return ANONYMOUS_USER_ID
