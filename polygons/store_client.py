#Purpose: The polygon persistence "adapter/client".
#Sole responsibility: talk to /api/polygons via HTTP and return Result values.
#POST {coordinates: [[lat, lon], ...]} -> 201 {message, polygon}
#GET                                    -> [{id, coordinates}, ...]
#400 from the store means the shape was rejected (ValidationError);
#everything else that goes wrong is PersistenceUnavailable.
#It never raises for network problems so the capture flow cannot crash.

import logging
from typing import List, Optional, Sequence

import requests

from common import settings
from common.errors import PersistenceUnavailable, ValidationError
from common.geo import GeoPoint
from common.result import Result
from .models import Polygon

logger = logging.getLogger(__name__)


class PolygonStoreClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url or settings.api_base_url()
        self.timeout = timeout if timeout is not None else settings.http_timeout_s()
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("API base URL not set. Please set API_BASE_URL in the .env file.")

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/polygons"

    def save(self, vertices: Sequence[GeoPoint]) -> Result[Polygon]:
        """
        Persist one polygon. No local validation: the store decides, and a
        rejection comes back as ValidationError.
        """
        payload = {"coordinates": [vertex.to_pair() for vertex in vertices]}
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("polygon save failed: %s", exc)
            return Result.failure(PersistenceUnavailable(f"polygon save failed: {exc}", cause=exc))

        if response.status_code == 400:
            return Result.failure(ValidationError(_error_message(response, "polygon rejected by store")))

        try:
            response.raise_for_status()
            body = response.json()
            record = body.get("polygon", body)
            return Result.success(Polygon.from_record(record))
        except requests.RequestException as exc:
            logger.warning("polygon save failed: %s", exc)
            return Result.failure(PersistenceUnavailable(f"polygon save failed: {exc}", cause=exc))
        except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as exc:
            logger.warning("malformed polygon save response: %r", exc)
            return Result.failure(PersistenceUnavailable(f"malformed save response: {exc!r}", cause=exc))

    def load_all(self) -> Result[List[Polygon]]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            records = response.json()
        except requests.RequestException as exc:
            logger.warning("polygon load failed: %s", exc)
            return Result.failure(PersistenceUnavailable(f"polygon load failed: {exc}", cause=exc))
        except ValueError as exc:
            return Result.failure(PersistenceUnavailable("polygon list is not JSON", cause=exc))

        try:
            return Result.success([Polygon.from_record(record) for record in records])
        except (KeyError, TypeError, AttributeError, ValueError, ValidationError) as exc:
            logger.warning("malformed polygon list: %r", exc)
            return Result.failure(PersistenceUnavailable(f"malformed polygon list: {exc!r}", cause=exc))


def _error_message(response, default: str) -> str:
    try:
        return response.json().get("error") or default
    except (ValueError, AttributeError):
        return default
