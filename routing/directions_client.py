#Purpose: The routing proxy "adapter/client".
#Sole responsibility: talk to the backend /api/getRoute endpoint via HTTP and
#return a normalized Route.
#Encapsulates proxy/ORS specific details:
#coordinate formatting ([lat, lon] on the way in, GeoJSON [lon, lat] on the way out)
#URL construction
#timeouts and error handling
#parsing the GeoJSON FeatureCollection into our Route
#It should not contain refresh rules; that is navigation/refresh_loop.py.

import logging
from typing import Any, Dict, List, Optional

import requests

from common import settings
from common.errors import RouteUnavailable
from common.geo import GeoPoint
from .models import Route

logger = logging.getLogger(__name__)


class DirectionsClient:
    """
    Routing proxy client

    Sole responsibility:
    - POST start/end to the backend, which holds the ORS API key
    - Convert the GeoJSON response (lon,lat) -> internal GeoPoint (lat, lon)
    - Raise RouteUnavailable for every failure
    """
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url or settings.api_base_url()
        self.timeout = timeout if timeout is not None else settings.http_timeout_s()
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("API base URL not set. Please set API_BASE_URL in the .env file.")

    def format_coordinates(self, point: GeoPoint) -> List[float]:
        """The proxy takes [lat, lon] and swaps to lon,lat for ORS itself."""
        return point.to_pair()

    def compute_route(self, start: GeoPoint, end: GeoPoint) -> Route:
        """
        Calls the /api/getRoute endpoint and returns the first route.

        Raises:
            RouteUnavailable: transport error, non-2xx status, or a body
            without the expected features/geometry/summary fields.
        """
        url = f"{self.base_url.rstrip('/')}/api/getRoute"
        try:
            response = self.session.post(
                url,
                json={
                    "start": self.format_coordinates(start),
                    "end": self.format_coordinates(end),
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            logger.warning("route request failed: %s", exc)
            raise RouteUnavailable(f"routing request failed: {exc}", cause=exc) from exc
        except ValueError as exc:
            logger.warning("route response is not JSON: %s", exc)
            raise RouteUnavailable("routing response is not JSON", cause=exc) from exc

        return parse_directions(data)


def parse_directions(data: Dict[str, Any]) -> Route:
    """
    Normalize an ORS directions FeatureCollection:

        features[0].geometry.coordinates  -> [[lon, lat], ...]
        features[0].properties.summary.duration -> seconds
    """
    try:
        feature = data["features"][0]
        coordinates = feature["geometry"]["coordinates"]
        duration = feature["properties"]["summary"]["duration"]
        path = [GeoPoint(lat=float(lat), lon=float(lon)) for lon, lat, *_ in coordinates]
        return Route.new(path, float(duration))
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning("malformed routing response: %r", exc)
        raise RouteUnavailable(f"malformed routing response: {exc!r}", cause=exc) from exc
