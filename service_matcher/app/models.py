"""
Data models for the Matcher service.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    """A validated nearest-driver search. Only built by the request validator."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")
    radius: int = Field(..., gt=0, description="Search radius in meters")


class GeoPoint(BaseModel):
    """GeoJSON point; coordinates are ``[longitude, latitude]``."""

    type: Literal["Point"]
    coordinates: List[float] = Field(..., min_length=2, max_length=2)


class DriverRecord(BaseModel):
    """Driver returned by the driver service, with distance from the search point."""

    id: str
    location: GeoPoint
    distance: float = Field(..., ge=0, description="Distance from the search point in meters")
