"""
Unit tests for JWTAuthenticator.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest

from service_matcher.app.auth import AuthClaims, JWTAuthenticator
from shared.errors import UnauthorizedError
from shared.test_helpers import TEST_JWT_SECRET, MockTokenGenerator


def _b64(data: dict) -> str:
    raw = json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestJWTAuthenticator:
    """Test cases for JWTAuthenticator."""

    @pytest.fixture
    def authenticator(self):
        return JWTAuthenticator(TEST_JWT_SECRET)

    @pytest.fixture
    def tokens(self):
        return MockTokenGenerator()

    def test_valid_bearer_token(self, authenticator, tokens):
        token = tokens.generate_token(subject="user-42")

        claims = authenticator.authenticate(f"Bearer {token}")

        assert isinstance(claims, AuthClaims)
        assert claims.authenticated is True
        assert claims.subject == "user-42"
        assert claims.issued_at is not None
        assert claims.issued_at.tzinfo == timezone.utc
        assert claims.claims["name"] == "John Doe"

    def test_token_without_bearer_prefix_is_accepted(self, authenticator, tokens):
        claims = authenticator.authenticate(tokens.generate_token())

        assert claims.authenticated is True

    @pytest.mark.parametrize("algorithm", ["HS256", "HS384", "HS512"])
    def test_hmac_algorithms_are_accepted(self, authenticator, tokens, algorithm):
        token = tokens.generate_token(algorithm=algorithm)

        assert authenticator.authenticate(f"Bearer {token}").authenticated is True

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header(self, authenticator, header):
        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(header)

        assert exc_info.value.message == "missing authorization header"
        assert exc_info.value.status_code == 401

    @pytest.mark.parametrize("header", [
        "Bearer ",
        "Bearer not-a-jwt",
        "Bearer a.b.c",
        "Basic dXNlcjpwYXNz",
    ])
    def test_malformed_token(self, authenticator, header):
        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(header)

        assert exc_info.value.message == "invalid token"

    def test_wrong_secret(self, authenticator, tokens):
        token = tokens.generate_token(secret="another-secret-that-is-long-enough-for-hs256")

        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.message == "invalid token"

    def test_unsigned_token_is_rejected(self, authenticator):
        token = ".".join([
            _b64({"alg": "none", "typ": "JWT"}),
            _b64({"sub": "intruder", "authenticated": True}),
            "",
        ])

        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.message == "invalid token"

    def test_expired_token_is_rejected(self, authenticator, tokens):
        expired = int((datetime.now(timezone.utc) - timedelta(hours=1)).timestamp())
        token = tokens.generate_token(exp=expired)

        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.message == "invalid token"

    @pytest.mark.parametrize("authenticated", [False, None, "true", 1])
    def test_authenticated_claim_must_be_true(self, authenticator, tokens, authenticated):
        token = tokens.generate_token(authenticated=authenticated)

        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.message == "unauthorized"

    @pytest.mark.parametrize("issued_at", [10**20, -10**20, 253402300800])
    def test_unrepresentable_issued_at_is_dropped(self, authenticator, tokens, issued_at):
        token = tokens.generate_token(subject="user-42", iat=issued_at)

        claims = authenticator.authenticate(f"Bearer {token}")

        assert claims.authenticated is True
        assert claims.subject == "user-42"
        assert claims.issued_at is None

    def test_unconfigured_secret_rejects_everything(self, tokens):
        authenticator = JWTAuthenticator("")

        with pytest.raises(UnauthorizedError) as exc_info:
            authenticator.authenticate(f"Bearer {tokens.generate_token()}")

        assert exc_info.value.message == "invalid token"
