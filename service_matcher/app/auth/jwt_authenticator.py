"""
Bearer token authentication for the Matcher service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from shared.errors import UnauthorizedError
from shared.logging import get_logger

BEARER_PREFIX = "Bearer "
HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


@dataclass(frozen=True)
class AuthClaims:
    """Claims of a verified token, scoped to a single request."""

    authenticated: bool
    subject: Optional[str] = None
    issued_at: Optional[datetime] = None
    claims: Dict[str, Any] = field(default_factory=dict)


class JWTAuthenticator:
    """Verifies HMAC-signed JWTs against a shared secret."""

    def __init__(self, secret_key: str) -> None:
        self.secret_key = secret_key
        self.logger = get_logger("matcher.auth")

    def authenticate(self, authorization: Optional[str]) -> AuthClaims:
        """Authenticate an ``Authorization`` header value.

        The ``Bearer `` prefix is optional; without it the whole header value
        is treated as the token.
        """
        if not authorization:
            raise UnauthorizedError("missing authorization header")

        token = authorization
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]
        token = token.strip()

        claims = self._decode(token)

        if claims.get("authenticated") is not True:
            self.logger.warning("Token lacks authenticated claim", subject=claims.get("sub"))
            raise UnauthorizedError("unauthorized")

        subject = claims.get("sub")
        return AuthClaims(
            authenticated=True,
            subject=subject if isinstance(subject, str) else None,
            issued_at=self._issued_at(claims),
            claims=claims,
        )

    def _decode(self, token: str) -> Dict[str, Any]:
        if not token or not self.secret_key:
            raise UnauthorizedError("invalid token")
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=HMAC_ALGORITHMS,
                options={"verify_aud": False},
            )
        except JWTError as e:
            self.logger.warning("Token verification failed", error=str(e))
            raise UnauthorizedError("invalid token")

    @staticmethod
    def _issued_at(claims: Dict[str, Any]) -> Optional[datetime]:
        iat = claims.get("iat")
        if isinstance(iat, bool) or not isinstance(iat, (int, float)):
            return None
        try:
            return datetime.fromtimestamp(iat, tz=timezone.utc)
        except (OverflowError, ValueError, OSError):
            return None
