"""
Shared building blocks used by every other package:
- GeoPoint / Position value types and haversine distance
- the error taxonomy (ErrorKind + one exception per kind)
- Result, the tagged success/failure value returned by HTTP clients
- environment settings loaded from .env

No business logic.
"""
from .errors import (
    ErrorKind,
    LiveMapError,
    LocationUnavailable,
    RouteUnavailable,
    ValidationError,
    PersistenceUnavailable,
    SearchUnavailable,
)
from .geo import GeoPoint, Position, haversine_m
from .result import Result

__all__ = [
    "ErrorKind",
    "LiveMapError",
    "LocationUnavailable",
    "RouteUnavailable",
    "ValidationError",
    "PersistenceUnavailable",
    "SearchUnavailable",
    "GeoPoint",
    "Position",
    "haversine_m",
    "Result",
]
