"""
Purpose: One map session, wiring everything the screen needs.
What it does:
- starts/stops position tracking
- loads the polygon layer once on open
- search -> choose -> RouteRefreshLoop destination
- exposes a PolygonCapture whose commits go to the polygon layer

Exposes plain state (position, route, eta, polygons, errors) for whatever
renders the map. Rendering itself is not done here.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from common.errors import LiveMapError
from common.geo import Position
from polygons.capture import PolygonCapture
from polygons.layer import PolygonLayer
from polygons.models import Polygon
from routing.models import Route
from routing.route_service import RouteProvider
from search.geocoder import Place, PlaceSearchClient
from .policy import NavigationPolicy
from .position_tracker import PositionTracker, SubscriptionHandle
from .refresh_loop import RouteRefreshLoop
from .scheduling import Scheduler

logger = logging.getLogger(__name__)


class MapSession:
    def __init__(
        self,
        tracker: PositionTracker,
        route_provider: RouteProvider,
        polygon_layer: PolygonLayer,
        search_client: PlaceSearchClient,
        scheduler: Scheduler,
        policy: Optional[NavigationPolicy] = None,
    ):
        self.tracker = tracker
        self.polygon_layer = polygon_layer
        self.search_client = search_client
        self.scheduler = scheduler

        self.errors: List[LiveMapError] = []
        self.search_results: List[Place] = []
        self.destination: Optional[Place] = None

        self.loop = RouteRefreshLoop(
            tracker,
            route_provider,
            scheduler,
            policy=policy,
            on_error=self._record_error,
        )
        self.polygon_layer.on_error = self._record_error
        self.capture = PolygonCapture(on_commit=self.polygon_layer.commit)

        self._subscription: Optional[SubscriptionHandle] = None

    # --- State for rendering ---

    @property
    def position(self) -> Optional[Position]:
        return self.tracker.latest

    @property
    def route(self) -> Optional[Route]:
        return self.loop.route

    @property
    def eta_minutes(self) -> Optional[int]:
        return self.loop.eta_minutes

    @property
    def polygons(self) -> List[Polygon]:
        return self.polygon_layer.polygons()

    # --- Lifecycle ---

    def open(self) -> None:
        self.start_tracking()
        if not self.polygon_layer.loaded:
            self.polygon_layer.load()

    def start_tracking(self) -> None:
        """(Re)start the tracker. Safe to call again after LocationUnavailable."""
        if self._subscription is not None and self._subscription.active:
            return
        self._subscription = self.tracker.start(self._on_position, self._record_error)

    def close(self) -> None:
        try:
            self.loop.close()
        finally:
            if self._subscription is not None:
                subscription, self._subscription = self._subscription, None
                self.tracker.stop(subscription)

    def __enter__(self) -> MapSession:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- Search and navigation ---

    def search(self, query: str) -> List[Place]:
        result = self.search_client.search(query)
        if not result.ok:
            self._record_error(result.error)
            return self.search_results
        self.search_results = result.value
        return self.search_results

    def choose(self, place: Place) -> None:
        self.search_results = []
        self.destination = place
        self.loop.select_destination(place.point)

    def reset(self) -> None:
        self.destination = None
        self.loop.clear_destination()

    def _on_position(self, position: Position) -> None:
        logger.debug("position %s", position.point)
        self.loop.on_position(position)

    def _record_error(self, error: LiveMapError) -> None:
        self.errors.append(error)
