"""
Nearest-driver matching.
"""

from typing import Any, Callable

from shared.errors import DomainError
from shared.logging import get_logger
from ..adapters.driver_client import DriverAPIClient
from ..models import DriverRecord, SearchRequest
from ..validation import validate_search_request


class MatcherOrchestrator:
    """Validates a search and hands it to the driver service.

    One attempt per call: no retries, no caching.
    """

    def __init__(self,
                 driver_client: DriverAPIClient,
                 validator: Callable[[Any, Any, Any], SearchRequest] = validate_search_request):
        self.driver_client = driver_client
        self.validator = validator
        self.logger = get_logger("matcher.orchestrator")

    async def find_nearest_driver(self, latitude: Any, longitude: Any, radius: Any) -> DriverRecord:
        """Find the driver closest to the given point within ``radius`` meters.

        Raises:
            DomainError: validation failures before any network call, or the
                driver client's error for the single upstream attempt.
        """
        try:
            request = self.validator(latitude, longitude, radius)
        except DomainError as e:
            self._log_failure(e, latitude, longitude, radius)
            raise

        self.logger.info(
            "Finding nearest driver",
            latitude=request.latitude,
            longitude=request.longitude,
            radius=request.radius,
        )

        try:
            return await self.driver_client.search_driver(request)
        except DomainError as e:
            self._log_failure(e, request.latitude, request.longitude, request.radius)
            raise

    def _log_failure(self, error: DomainError, latitude: Any, longitude: Any, radius: Any):
        self.logger.warning(
            "Nearest driver search failed",
            code=error.code,
            reason=error.message,
            latitude=latitude,
            longitude=longitude,
            radius=radius,
            upstream_status=error.details.get("upstream_status"),
        )
