"""
Matcher Service package.

The matcher fronts nearest-driver searches, enforcing:
- Authentication: HMAC-signed bearer tokens with an ``authenticated`` claim
- Validation: coordinate and radius checks before any network call
- Circuit-breaking: fail fast while the driver service is unhealthy

Structure:
- app.main: FastAPI app, routes, and service wiring.
- app.auth: Bearer token authenticator.
- app.validation: Search input validation.
- app.adapters: HTTP client for the driver service.
- app.domain: Orchestration of validation and the upstream call.
"""
