"""Tests for JWT authentication middleware.

Tests the JWT verification module and the get_auth_context dependency.
"""
import os
import time
import pytest
import jwt as pyjwt
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from models.content_models import ContentResult


def generate_test_jwt(
    user_id: str = None,
    issuer: str = None,
    audience: str = None,
    exp_offset: int = 300,
    secret: str = None,
    **extra_claims,
) -> str:
    """Generate a test JWT with configurable claims."""
    now = int(time.time())
    payload = {
        "user_id": user_id or "user-123",
        "iss": issuer or "mumbletasks-web",
        "aud": audience or "mumbletasks-api",
        "iat": now,
        "exp": now + exp_offset,
        **extra_claims,
    }
    secret = secret or os.environ["JWT_SECRET"]
    return pyjwt.encode(payload, secret, algorithm="HS256")


class TestJWTVerification:
    """Tests for the JWT verification module."""

    def test_valid_jwt_extracts_claims(self):
        """Valid JWT should extract user_id and optional claims."""
        from middleware.jwt_auth import verify_jwt

        token = generate_test_jwt(
            user_id="user-xyz",
            email="kari@example.com",
            preferred_language="no",
        )

        claims = verify_jwt(token)

        assert claims.user_id == "user-xyz"
        assert claims.email == "kari@example.com"
        assert claims.preferred_language == "no"
        assert claims.expires_at > claims.issued_at

    def test_optional_claims_default_to_none(self):
        from middleware.jwt_auth import verify_jwt

        claims = verify_jwt(generate_test_jwt())

        assert claims.email is None
        assert claims.preferred_language is None

    def test_unsupported_language_claim_is_dropped(self):
        from middleware.jwt_auth import verify_jwt

        claims = verify_jwt(generate_test_jwt(preferred_language="fr"))

        assert claims.preferred_language is None

    def test_expired_jwt_raises_error(self):
        """Expired JWT should raise JWTVerificationError."""
        from middleware.jwt_auth import verify_jwt, JWTVerificationError

        token = generate_test_jwt(exp_offset=-60)  # Expired 60 seconds ago

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_jwt(token)

        assert exc_info.value.code == "JWT_EXPIRED"

    def test_clock_skew_is_tolerated(self):
        """A token expired within the leeway is still accepted."""
        from middleware.jwt_auth import verify_jwt

        claims = verify_jwt(generate_test_jwt(exp_offset=-10))

        assert claims.user_id == "user-123"

    def test_wrong_issuer_raises_error(self):
        from middleware.jwt_auth import verify_jwt, JWTVerificationError

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_jwt(generate_test_jwt(issuer="wrong-issuer"))

        assert exc_info.value.code == "JWT_INVALID_ISSUER"

    def test_wrong_audience_raises_error(self):
        from middleware.jwt_auth import verify_jwt, JWTVerificationError

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_jwt(generate_test_jwt(audience="wrong-audience"))

        assert exc_info.value.code == "JWT_INVALID_AUDIENCE"

    def test_wrong_secret_raises_error(self):
        from middleware.jwt_auth import verify_jwt, JWTVerificationError

        token = generate_test_jwt(secret="completely-different-secret-that-is-long-enough")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_jwt(token)

        assert exc_info.value.code == "JWT_INVALID"

    def test_missing_user_id_raises_error(self):
        """JWT without user_id should raise JWTVerificationError."""
        from middleware.jwt_auth import verify_jwt, JWTVerificationError

        now = int(time.time())
        payload = {
            "iss": "mumbletasks-web",
            "aud": "mumbletasks-api",
            "iat": now,
            "exp": now + 300,
        }
        token = pyjwt.encode(payload, os.environ["JWT_SECRET"], algorithm="HS256")

        with pytest.raises(JWTVerificationError) as exc_info:
            verify_jwt(token)

        assert exc_info.value.code == "JWT_MISSING_USER"

    def test_missing_secret_is_not_configured(self):
        from middleware.jwt_auth import verify_jwt, is_jwt_auth_configured, JWTVerificationError

        with patch.dict(os.environ, {"JWT_SECRET": ""}):
            assert is_jwt_auth_configured() is False
            with pytest.raises(JWTVerificationError) as exc_info:
                verify_jwt("anything")

        assert exc_info.value.code == "JWT_NOT_CONFIGURED"

    def test_short_secret_is_misconfigured(self):
        from middleware.jwt_auth import verify_jwt, is_jwt_auth_configured, JWTVerificationError

        with patch.dict(os.environ, {"JWT_SECRET": "too-short"}):
            assert is_jwt_auth_configured() is False
            with pytest.raises(JWTVerificationError) as exc_info:
                verify_jwt("anything")

        assert exc_info.value.code == "JWT_MISCONFIGURED"


class TestAuthContext:
    """Tests for the get_auth_context dependency, exercised through /content/generate."""

    @pytest.fixture
    def content_service(self):
        service = MagicMock()
        service.generate_content = AsyncMock(
            return_value=ContentResult(content="Done", type="tasks", language="en")
        )
        return service

    @pytest.fixture
    def client(self, content_service):
        """Create test client with the content service overridden."""
        from main import app
        from routers.content import get_content_service

        app.dependency_overrides[get_content_service] = lambda: content_service
        yield TestClient(app)
        app.dependency_overrides.clear()

    def post_generate(self, client, headers=None):
        return client.post(
            "/content/generate",
            headers=headers or {},
            json={"text": "Buy milk.", "preferences": {"type": "tasks"}},
        )

    def test_jwt_auth_works(self, client, content_service):
        token = generate_test_jwt(user_id="jwt-user")

        response = self.post_generate(client, {"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["content"] == "Done"
        content_service.generate_content.assert_awaited_once()

    def test_no_auth_returns_401_when_anonymous_disabled(self, client, content_service):
        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "false"}):
            response = self.post_generate(client, {"X-User-ID": "someone"})

        assert response.status_code == 401
        assert "Authorization required" in response.json()["detail"]
        content_service.generate_content.assert_not_called()

    def test_anonymous_auth_works_when_enabled(self, client):
        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "true"}):
            response = self.post_generate(client, {"X-User-ID": "dev-user"})

        assert response.status_code == 200

    def test_invalid_jwt_returns_401_even_when_anonymous_enabled(self, client):
        """A bad token is never downgraded to anonymous access."""
        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "true"}):
            response = self.post_generate(client, {"Authorization": "Bearer invalid-token"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_expired_jwt_returns_401(self, client):
        token = generate_test_jwt(exp_offset=-120)

        response = self.post_generate(client, {"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"


class TestFallbackUserId:
    """Tests for the development user id chain."""

    def make_request(self, headers):
        request = MagicMock()
        request.headers = headers
        return request

    def test_header_then_env_then_anonymous(self):
        from utils.context_utils import get_auth_context

        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "true", "MOCK_USER_ID": "env-user"}):
            assert get_auth_context(self.make_request({"X-User-ID": "header-user"})).user_id == "header-user"
            assert get_auth_context(self.make_request({})).user_id == "env-user"

        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "true", "MOCK_USER_ID": ""}):
            context = get_auth_context(self.make_request({}))

        assert context.user_id == "anonymous"
        assert context.auth_method == "anonymous"

    def test_jwt_takes_precedence_over_headers(self):
        from utils.context_utils import get_auth_context

        token = generate_test_jwt(user_id="jwt-user")
        headers = {"Authorization": f"Bearer {token}", "X-User-ID": "header-user"}

        with patch.dict(os.environ, {"ALLOW_ANONYMOUS_AUTH": "true"}):
            context = get_auth_context(self.make_request(headers))

        assert context.user_id == "jwt-user"
        assert context.auth_method == "jwt"

    def test_each_request_gets_a_new_request_id(self):
        from utils.context_utils import get_auth_context

        token = generate_test_jwt()
        request = self.make_request({"Authorization": f"Bearer {token}"})

        assert get_auth_context(request).request_id != get_auth_context(request).request_id


class TestBearerTokenExtraction:
    """Tests for bearer token extraction."""

    def test_extracts_token_from_valid_header(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Bearer abc123xyz") == "abc123xyz"

    def test_returns_none_for_missing_header(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token(None) is None

    def test_returns_none_for_non_bearer(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Basic abc123") is None
        assert extract_bearer_token("Digest xyz") is None

    def test_returns_none_for_empty_token(self):
        from middleware.jwt_auth import extract_bearer_token

        assert extract_bearer_token("Bearer ") is None
        assert extract_bearer_token("Bearer") is None
