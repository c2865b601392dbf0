"""Offline lookup, search and validation of Sierra Leone administrative locations."""
from sl_locations.core.exceptions import (
    FormatError,
    LocationError,
    NotInitializedError,
    RateLimitError,
    UnsafeInputError,
    ValidationError,
)
from sl_locations.core.models import FlatRecord, LocationType, SearchOptions
from sl_locations.core.service import LocationService

__all__ = [
    "FlatRecord",
    "FormatError",
    "LocationError",
    "LocationService",
    "LocationType",
    "NotInitializedError",
    "RateLimitError",
    "SearchOptions",
    "UnsafeInputError",
    "ValidationError",
]

__version__ = "1.0.0"
