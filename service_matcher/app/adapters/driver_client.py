"""
Driver service client for the Matcher service.
"""

import asyncio
from typing import Optional

import httpx

from shared.circuit_breaker import CircuitBreaker, CircuitBreakerOpenException
from shared.errors import (
    BreakerOpenError,
    InternalError,
    NotFoundError,
    UpstreamUnavailableError,
)
from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..models import DriverRecord, SearchRequest

SEARCH_PATH = "/driver/api/v1/search"


class DriverAPIClient:
    """Client for the driver location service.

    Every search goes through the circuit breaker exactly once. A 404 is a
    healthy "no match" answer and does not count against the breaker.
    """

    def __init__(self,
                 base_url: str,
                 api_key: str,
                 circuit_breaker: Optional[CircuitBreaker] = None,
                 timeout: float = 5.0,
                 client: Optional[httpx.AsyncClient] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.metrics = metrics
        self.logger = get_logger("matcher.driver_client")
        self.circuit_breaker = circuit_breaker or CircuitBreaker(
            failure_threshold=3,
            success_threshold=1,
            recovery_timeout=5.0,
            excluded_exceptions=(NotFoundError,),
            name="driver_service",
        )
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def search_driver(self, request: SearchRequest) -> DriverRecord:
        """Find the nearest driver for a validated search."""
        params = {
            "latitude": request.latitude,
            "longitude": request.longitude,
            "radius": request.radius,
        }

        try:
            driver = await self.circuit_breaker.call(self._search, params)
        except CircuitBreakerOpenException as e:
            self._record("breaker_open")
            self.logger.warning("Driver service call rejected by circuit breaker", state=e.state.value)
            raise BreakerOpenError(details={"breaker_state": e.state.value})
        except NotFoundError:
            self._record("not_found")
            raise
        except (UpstreamUnavailableError, InternalError):
            self._record("error")
            raise
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            self._record("timeout")
            self.logger.error("Driver service timed out", timeout=self.timeout, error_type=type(e).__name__)
            raise UpstreamUnavailableError(details={"reason": "timeout"})
        except httpx.HTTPError as e:
            self._record("transport_error")
            self.logger.error("Driver service HTTP error", error=str(e))
            raise UpstreamUnavailableError(details={"reason": "transport", "error": str(e)})

        self._record("success")
        return driver

    async def _search(self, params: dict) -> DriverRecord:
        response = await asyncio.wait_for(
            self._client.get(
                f"{self.base_url}{SEARCH_PATH}",
                params=params,
                headers={"Authorization": self.api_key},
            ),
            timeout=self.timeout,
        )

        if response.status_code == 404:
            raise NotFoundError(details={"upstream_status": 404})
        if not response.is_success:
            self.logger.error("Driver service error", status_code=response.status_code)
            raise UpstreamUnavailableError(status=response.status_code)

        try:
            return DriverRecord.model_validate(response.json())
        except ValueError as e:
            # Covers both malformed JSON and schema violations
            self.logger.error("Failed to decode driver service response", error=str(e))
            raise InternalError("decode failure", details={"upstream_status": response.status_code})

    def _record(self, outcome: str):
        if self.metrics is not None:
            self.metrics.record_upstream_call(outcome)
