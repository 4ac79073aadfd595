"""
Validation of inbound nearest-driver searches.
"""

import math
from typing import Any, Dict, List, Optional

from shared.errors import ValidationError
from ..models import SearchRequest

LATITUDE_BOUNDS = (-90.0, 90.0)
LONGITUDE_BOUNDS = (-180.0, 180.0)


def _plain_number_text(value: str) -> Optional[str]:
    # float() and int() also accept digit underscores and non-ASCII digits
    value = value.strip()
    if "_" in value or not value.isascii():
        return None
    return value


def _parse_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = _plain_number_text(value)
        if value is None:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        text = _plain_number_text(value)
        if text is None:
            return None
        try:
            number = int(text)
        except ValueError:
            return None
    else:
        return None
    return number if number > 0 else None


def _check_coordinate(value: Any, bounds) -> Optional[float]:
    number = _parse_float(value)
    if number is None or not bounds[0] <= number <= bounds[1]:
        return None
    return number


def validate_search_request(latitude: Any, longitude: Any, radius: Any) -> SearchRequest:
    """Validate raw search inputs and build a ``SearchRequest``.

    Inputs may be numbers or query-string text. Each field is checked on its
    own; the first failure (latitude, then longitude, then radius) becomes the
    error message and every failure is listed in the error details.

    Raises:
        ValidationError: if any field is missing, malformed or out of range.
    """
    lat = _check_coordinate(latitude, LATITUDE_BOUNDS)
    lon = _check_coordinate(longitude, LONGITUDE_BOUNDS)
    rad = _parse_positive_int(radius)

    failures: List[str] = []
    if lat is None:
        failures.append("latitude out of range")
    if lon is None:
        failures.append("longitude out of range")
    if rad is None:
        failures.append("radius must be positive")

    if failures:
        details: Dict[str, Any] = {
            "failures": failures,
            "latitude": latitude,
            "longitude": longitude,
            "radius": radius,
        }
        raise ValidationError(failures[0], details=details)

    return SearchRequest(latitude=lat, longitude=lon, radius=rad)
