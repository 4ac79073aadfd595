"""
Matcher service: authenticated nearest-driver search in front of the driver service.
"""

from typing import Any, Dict, Optional, Tuple

import httpx
from fastapi import Depends, Query, Request

from shared.base_service import BaseService
from shared.circuit_breaker import CircuitBreaker
from shared.config import MatcherConfig, get_config
from shared.errors import BreakerOpenError, DomainError, ErrorResponse, NotFoundError
from shared.logging import set_user_context
from .adapters.driver_client import DriverAPIClient
from .auth import AuthClaims, JWTAuthenticator
from .domain import MatcherOrchestrator
from .models import DriverRecord

SEARCH_ROUTE = "/matcher/api/v1/search"


class MatcherService(BaseService):
    """Matcher service implementation.

    ``driver_client`` replaces the configured driver client outright;
    ``http_client`` keeps the configured one but sends its requests through
    the given httpx client.
    """

    def __init__(self, config: Optional[MatcherConfig] = None,
                 driver_client: Optional[DriverAPIClient] = None,
                 http_client: Optional[httpx.AsyncClient] = None):
        super().__init__("matcher", config or get_config())

        if driver_client is None:
            breaker = CircuitBreaker(
                failure_threshold=self.config.breaker_failure_threshold,
                success_threshold=self.config.breaker_success_threshold,
                recovery_timeout=self.config.breaker_recovery_timeout,
                excluded_exceptions=(NotFoundError,),
                name="driver_service",
                on_state_change=self.metrics.record_breaker_state,
            )
            driver_client = DriverAPIClient(
                self.config.driver_service_url,
                self.config.driver_service_api_key,
                circuit_breaker=breaker,
                timeout=self.config.upstream_timeout,
                client=http_client,
                metrics=self.metrics,
            )
        self.driver_client = driver_client
        self.orchestrator = MatcherOrchestrator(self.driver_client)
        self.authenticator = JWTAuthenticator(self.config.jwt_secret_key)

        if not self.config.jwt_secret_key:
            self.logger.warning("No JWT secret configured; every search will be rejected")

        self._setup_matcher_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.matcher_service = self

    async def authenticate_request(self, request: Request) -> AuthClaims:
        """FastAPI dependency guarding matcher routes."""
        claims = self.authenticator.authenticate(request.headers.get("Authorization"))
        set_user_context(user_id=claims.subject)
        return claims

    def _setup_matcher_routes(self):
        """Set up matcher-specific routes."""

        @self.app.get(
            SEARCH_ROUTE,
            response_model=DriverRecord,
            tags=["Matcher"],
            summary="Search for a driver",
            responses={
                400: {"model": ErrorResponse, "description": "Invalid input"},
                401: {"model": ErrorResponse, "description": "Unauthorized"},
                404: {"model": ErrorResponse, "description": "Driver not found"},
                500: {"model": ErrorResponse, "description": "Internal server error"},
                503: {"model": ErrorResponse, "description": "Driver service degraded"},
            },
        )
        async def search_driver(
            latitude: Optional[str] = Query(None, description="Latitude"),
            longitude: Optional[str] = Query(None, description="Longitude"),
            radius: Optional[str] = Query(None, description="Search radius in meters"),
            claims: AuthClaims = Depends(self.authenticate_request),
        ) -> DriverRecord:
            """Find the nearest driver around a GeoJSON point."""
            return await self.orchestrator.find_nearest_driver(latitude, longitude, radius)

    def _render_error(self, exc: DomainError) -> Tuple[int, ErrorResponse]:
        if isinstance(exc, BreakerOpenError) and self.config.breaker_open_status == 404:
            # Logs and metrics still see BREAKER_OPEN; callers see a plain miss
            return 404, NotFoundError().to_response()
        return exc.status_code, exc.to_response()

    async def _check_dependencies(self) -> Dict[str, Any]:
        return {"driver_service": self.driver_client.circuit_breaker.get_state()}

    async def _on_shutdown(self):
        await self.driver_client.close()
        await super()._on_shutdown()


def create_app(config: Optional[MatcherConfig] = None):
    """Create FastAPI application."""
    service = MatcherService(config)
    return service.app


def main():
    service = MatcherService()
    service.run()


if __name__ == "__main__":
    main()
