#Purpose: Place search ("geocoding") client.
#Sole responsibility: turn a free-text query into candidate destinations via a
#Nominatim-compatible /search endpoint.
#Failures come back as Result.failure(SearchUnavailable); never raises.

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from common import settings
from common.errors import SearchUnavailable
from common.geo import GeoPoint
from common.result import Result

logger = logging.getLogger(__name__)

# Nominatim's usage policy asks for an identifying User-Agent
USER_AGENT = "livemap/0.1"


@dataclass(frozen=True)
class Place:
    name: str
    point: GeoPoint


class PlaceSearchClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None, limit: int = 10):
        self.base_url = base_url or settings.search_base_url()
        self.timeout = timeout if timeout is not None else settings.http_timeout_s()
        self.session = session or requests.Session()
        self.limit = limit

    def search(self, query: str) -> Result[List[Place]]:
        """
        Candidates for `query`, best match first. A blank query returns an
        empty list without touching the network.
        """
        query = (query or "").strip()
        if not query:
            return Result.success([])

        try:
            response = self.session.get(
                f"{self.base_url.rstrip('/')}/search",
                params={"format": "json", "q": query, "limit": self.limit},
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
            response.raise_for_status()
            rows = response.json()
        except requests.RequestException as exc:
            logger.warning("place search failed: %s", exc)
            return Result.failure(SearchUnavailable(f"search failed: {exc}", cause=exc))
        except ValueError as exc:
            return Result.failure(SearchUnavailable("search response is not JSON", cause=exc))

        places: List[Place] = []
        for row in rows if isinstance(rows, list) else []:
            try:
                places.append(Place(
                    name=str(row.get("display_name") or row.get("name") or ""),
                    point=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
                ))
            except (KeyError, TypeError, ValueError, AttributeError):
                # skip unusable candidates, keep the rest
                logger.debug("skipping malformed search row: %r", row)
        return Result.success(places)
