"""
Adapters package for the Matcher Service.

Contains the HTTP client for the driver location service. The adapter
encapsulates:

- Base URL, request shape and API key header
- The circuit breaker guarding the driver service
- Error handling that maps upstream outcomes to shared domain errors
"""

from .driver_client import DriverAPIClient

__all__ = [
    "DriverAPIClient",
]
