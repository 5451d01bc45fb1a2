"""
Purpose: Live navigation control loop (the "glue" between tracker, gate and router).
What it does:
Owns route/ETA state for one destination. A recurring timer re-reads the
tracker; when the user moved past the policy threshold since the last
successful route, a new route is requested and replaces the old one wholesale.

States: IDLE -> TRACKING(destination) -> IDLE, with "request in flight" as a
sub-state of TRACKING. Only one request may be outstanding; a tick that fires
meanwhile is skipped. Responses for a destination that has since been replaced
or cleared are dropped.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from common.errors import RouteUnavailable
from common.geo import GeoPoint, Position
from routing.models import Route
from routing.proximity import should_refresh
from routing.route_service import RouteProvider
from .policy import NavigationPolicy, default_navigation_policy
from .position_tracker import PositionTracker
from .scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class NavigationState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"


@dataclass(frozen=True)
class RouteRequest:
    start: GeoPoint
    destination: GeoPoint
    generation: int


class RouteRefreshLoop:
    """
    Keeps the route to `destination` fresh while the user moves.

    `on_route` receives every applied Route; `on_error` every RouteUnavailable.
    Neither callback is needed for the loop to work, the current state is also
    readable from `route`, `eta_minutes` and `last_error`.
    """
    def __init__(
        self,
        tracker: PositionTracker,
        route_provider: RouteProvider,
        scheduler: Scheduler,
        policy: Optional[NavigationPolicy] = None,
        on_route: Optional[Callable[[Route], None]] = None,
        on_error: Optional[Callable[[RouteUnavailable], None]] = None,
    ):
        self.policy = policy or default_navigation_policy()
        self.policy.validate()
        self.tracker = tracker
        self.route_provider = route_provider
        self.scheduler = scheduler
        self.on_route = on_route
        self.on_error = on_error

        self.state = NavigationState.IDLE
        self.destination: Optional[GeoPoint] = None
        self.route: Optional[Route] = None
        self.last_evaluated: Optional[GeoPoint] = None
        self.last_error: Optional[RouteUnavailable] = None
        self.requests_issued = 0

        self._generation = 0
        self._in_flight: Optional[RouteRequest] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def eta_minutes(self) -> Optional[int]:
        return self.route.eta_minutes if self.route is not None else None

    @property
    def request_in_flight(self) -> bool:
        return self._in_flight is not None

    # --- Transitions ---

    def select_destination(self, destination: GeoPoint) -> None:
        """
        IDLE/TRACKING -> TRACKING(destination).
        Fetches a route right away, without consulting the movement gate.
        """
        self._generation += 1
        self.state = NavigationState.TRACKING
        self.destination = destination
        # a route or request for the previous destination is no longer valid
        self.route = None
        self.last_evaluated = None
        self.last_error = None
        self._in_flight = None

        if self._timer is None:
            self._timer = self.scheduler.call_every(self.policy.refresh_interval_s, self.tick)

        current = self._current_point()
        if current is None:
            logger.info("no position yet; first route request waits for the first fix")
            return
        self._request(current)

    def on_position(self, position: Position) -> None:
        """
        Tracker update hook. Only used to issue the initial request when the
        destination was chosen before any fix arrived; later refreshes stay
        on the timer.
        """
        if self.state is not NavigationState.TRACKING:
            return
        if self.last_evaluated is not None or self._in_flight is not None:
            return
        if self.route is not None or self.last_error is not None:
            return
        self._request(position.point)

    def clear_destination(self) -> None:
        """TRACKING -> IDLE. Cancels the timer and forgets the route."""
        if self._timer is not None:
            timer, self._timer = self._timer, None
            timer.cancel()

        self._generation += 1
        self.state = NavigationState.IDLE
        self.destination = None
        self.route = None
        self.last_evaluated = None
        self._in_flight = None

    close = clear_destination

    def tick(self) -> None:
        """Timer callback: maybe request a new route."""
        if self.state is not NavigationState.TRACKING:
            return
        if self._in_flight is not None:
            logger.debug("tick skipped: route request still in flight")
            return

        current = self._current_point()
        if current is None:
            return
        if not should_refresh(self.last_evaluated, current, self.policy.refresh_threshold_m):
            return
        self._request(current)

    # --- Request lifecycle ---

    def _current_point(self) -> Optional[GeoPoint]:
        position = self.tracker.latest
        return position.point if position is not None else None

    def _request(self, start: GeoPoint) -> None:
        request = RouteRequest(start=start, destination=self.destination, generation=self._generation)
        self._in_flight = request
        self.requests_issued += 1
        logger.debug("requesting route %s -> %s", start, request.destination)

        try:
            future = self.route_provider.request_route(start, request.destination)
        except Exception as exc:
            self._in_flight = None
            self._fail(_as_route_unavailable(exc))
            return

        # runs immediately when the provider already resolved the future
        future.add_done_callback(lambda done: self._on_route_done(request, done))

    def _on_route_done(self, request: RouteRequest, future: Future) -> None:
        if self._in_flight is request:
            self._in_flight = None

        if request.generation != self._generation:
            logger.debug("dropping route response for a replaced destination")
            return
        if future.cancelled():
            return

        exc = future.exception()
        if exc is not None:
            self._fail(_as_route_unavailable(exc))
            return

        self.route = future.result()
        self.last_evaluated = request.start
        self.last_error = None
        logger.info("route refreshed: %d points, eta %s min", len(self.route.path), self.route.eta_minutes)
        if self.on_route is not None:
            self.on_route(self.route)

    def _fail(self, error: RouteUnavailable) -> None:
        # keep the previous route; the next tick is the only retry
        self.last_error = error
        logger.warning("route refresh failed: %s", error)
        if self.on_error is not None:
            self.on_error(error)


def _as_route_unavailable(exc: BaseException) -> RouteUnavailable:
    if isinstance(exc, RouteUnavailable):
        return exc
    return RouteUnavailable(f"routing failed: {exc}", cause=exc)
