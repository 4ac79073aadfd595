"""
Authentication utilities for the Matcher service.
"""

from .jwt_authenticator import AuthClaims, JWTAuthenticator

__all__ = ["AuthClaims", "JWTAuthenticator"]
