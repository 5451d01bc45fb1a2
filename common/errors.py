"""
Purpose: Error taxonomy shared by the tracker, the refresh loop and the HTTP clients.
What it does:
- ErrorKind names every failure the app can surface to the UI
- one exception class per kind, all deriving from LiveMapError

Network and platform failures are converted to these at the boundary where the
call happens. Nothing above that boundary catches requests/OS exceptions.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    LOCATION_UNAVAILABLE = "LocationUnavailable"
    ROUTE_UNAVAILABLE = "RouteUnavailable"
    VALIDATION_ERROR = "ValidationError"
    PERSISTENCE_UNAVAILABLE = "PersistenceUnavailable"
    SEARCH_UNAVAILABLE = "SearchUnavailable"


class LiveMapError(Exception):
    """
    Base class for every surfaced error.

    Subclasses pin `kind`; callers branch on it instead of on the class when
    they only need to pick a user-facing message.
    """

    kind: ErrorKind

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None):
        self.message = message or self.kind.value
        self.cause = cause
        super().__init__(self.message)

    def to_error_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class LocationUnavailable(LiveMapError):
    """Permission denied, or the location source has no fix."""
    kind = ErrorKind.LOCATION_UNAVAILABLE


class RouteUnavailable(LiveMapError):
    """Routing upstream failed or answered without a usable path/duration."""
    kind = ErrorKind.ROUTE_UNAVAILABLE


class ValidationError(LiveMapError):
    """A polygon with fewer than 3 vertices (rejected locally or by the store)."""
    kind = ErrorKind.VALIDATION_ERROR


class PersistenceUnavailable(LiveMapError):
    kind = ErrorKind.PERSISTENCE_UNAVAILABLE


class SearchUnavailable(LiveMapError):
    kind = ErrorKind.SEARCH_UNAVAILABLE
