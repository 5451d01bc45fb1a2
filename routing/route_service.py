#Purpose: Route requests for the navigation loop.
#The loop only sees `request_route(start, end) -> Future[Route]` so the
#at-most-one-in-flight and stale-response rules do not depend on whether the
#adapter answers immediately (DirectionsClient) or later (a slow upstream).

from concurrent.futures import Future
from typing import Protocol

from common.errors import RouteUnavailable
from common.geo import GeoPoint
from .directions_client import DirectionsClient
from .models import Route


class RouteProvider(Protocol):
    def request_route(self, start: GeoPoint, end: GeoPoint) -> "Future[Route]": ...


class DirectionsRouteProvider:
    """
    Adapts the blocking DirectionsClient to RouteProvider.
    The returned future is already resolved when this returns.
    """
    def __init__(self, client: DirectionsClient):
        self.client = client

    def request_route(self, start: GeoPoint, end: GeoPoint) -> "Future[Route]":
        future: Future = Future()
        try:
            future.set_result(self.client.compute_route(start, end))
        except RouteUnavailable as exc:
            future.set_exception(exc)
        return future
