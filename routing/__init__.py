#Marks routing as a package.
#Re-exports the public API (DirectionsClient, Route, should_refresh, eta_minutes)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .directions_client import DirectionsClient, parse_directions
from .eta_service import eta_minutes
from .models import Route
from .proximity import should_refresh
from .route_service import DirectionsRouteProvider, RouteProvider

__all__ = [
    "DirectionsClient",
    "DirectionsRouteProvider",
    "Route",
    "RouteProvider",
    "eta_minutes",
    "parse_directions",
    "should_refresh",
]
