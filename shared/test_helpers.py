"""
Test helper functions and factory methods for the Matcher gateway.
"""

import json
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone

import httpx
import jwt

TEST_JWT_SECRET = "secret-token-api-key-for-matcher-tests-0123456789abcdef"
TEST_API_KEY = "driver-service-api-key"
TEST_DRIVER_SERVICE_URL = "http://driver-service:8081"

SCENARIO_LATITUDE = 40.94289771
SCENARIO_LONGITUDE = 28.0390297
SCENARIO_RADIUS = 500000


class TestDataFactory:
    """Factory for creating test data."""

    __test__ = False

    @staticmethod
    def create_driver_payload(driver_id: str = "abc",
                              coordinates: Optional[List[float]] = None,
                              distance: float = 120.5) -> Dict[str, Any]:
        """Driver service response body."""
        return {
            "id": driver_id,
            "location": {
                "type": "Point",
                "coordinates": coordinates if coordinates is not None else [28.03, 40.94],
            },
            "distance": distance,
        }

    @staticmethod
    def create_search_params(latitude: Any = SCENARIO_LATITUDE,
                             longitude: Any = SCENARIO_LONGITUDE,
                             radius: Any = SCENARIO_RADIUS) -> Dict[str, Any]:
        """Query parameters for a matcher search."""
        return {"latitude": latitude, "longitude": longitude, "radius": radius}


class MockTokenGenerator:
    """Generate JWT tokens for testing."""

    def __init__(self, secret: str = TEST_JWT_SECRET):
        self.secret = secret

    def generate_token(self,
                       authenticated: Any = True,
                       subject: str = "1234567890",
                       algorithm: str = "HS256",
                       secret: Optional[str] = None,
                       **extra_claims) -> str:
        """Generate a signed token carrying the ``authenticated`` claim."""
        payload = {
            "sub": subject,
            "name": "John Doe",
            "iat": int(datetime.now(timezone.utc).timestamp()),
        }
        if authenticated is not None:
            payload["authenticated"] = authenticated
        payload.update(extra_claims)

        return jwt.encode(payload, secret or self.secret, algorithm=algorithm)

    def authorization_header(self, **kwargs) -> Dict[str, str]:
        """``Authorization: Bearer <token>`` header dict."""
        return {"Authorization": f"Bearer {self.generate_token(**kwargs)}"}


def create_driver_response(status_code: int = 200,
                           payload: Any = None,
                           content: Optional[bytes] = None,
                           url: str = f"{TEST_DRIVER_SERVICE_URL}/driver/api/v1/search") -> httpx.Response:
    """Build an httpx response as returned by the driver service."""
    if content is None:
        body = payload if payload is not None else TestDataFactory.create_driver_payload()
        content = json.dumps(body).encode()
    return httpx.Response(
        status_code=status_code,
        content=content,
        headers={"Content-Type": "application/json"},
        request=httpx.Request("GET", url),
    )


class ManualClock:
    """Controllable monotonic clock for circuit breaker tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# Global instances for easy access
test_data_factory = TestDataFactory()
mock_token_generator = MockTokenGenerator()
