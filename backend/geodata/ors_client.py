#Purpose: OpenRouteService directions adapter for the routing proxy.
#Sole responsibility: build the ORS URL (lon,lat order), call it and return the raw GeoJSON.
#Route interpretation happens in the client (routing/directions_client.py).

import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class ORSError(Exception):
    """Raised when the directions upstream cannot be reached or refuses the request."""
    pass


def format_coordinate(lat: float, lng: float) -> str:
    """Internal [lat, lng] -> ORS 'lng,lat'"""
    return f"{lng},{lat}"


def fetch_directions(start, end) -> dict:
    url = f"{settings.ORS_BASE_URL.rstrip('/')}/v2/directions/{settings.ORS_PROFILE}"
    try:
        response = requests.get(
            url,
            params={
                "api_key": settings.ORS_API_KEY,
                "start": format_coordinate(*start),
                "end": format_coordinate(*end),
            },
            timeout=settings.ORS_TIMEOUT_S,
        )
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Error fetching route: %s", exc)
        raise ORSError(str(exc)) from exc
