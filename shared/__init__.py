"""
Shared utilities for the Matcher gateway.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Domain error types and responses
- circuit_breaker: Resilient external call protection
- base_service: FastAPI service scaffolding

Do not import from service_* packages into shared/.
"""
