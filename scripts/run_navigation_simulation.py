import logging
import math
import os
from concurrent.futures import Future

from common.geo import GeoPoint, haversine_m
from navigation.location_sources import TraceLocationSource
from navigation.policy import navigation_policy_from_env
from navigation.position_tracker import PositionTracker
from navigation.refresh_loop import RouteRefreshLoop
from navigation.scheduling import ManualClock, Scheduler
from routing.directions_client import DirectionsClient
from routing.models import Route
from routing.route_service import DirectionsRouteProvider


class StraightLineRouteProvider:
    """
    Offline stand-in for the routing proxy: a two-point route at a constant speed.
    Used when API_BASE_URL is not configured.
    """
    def __init__(self, speed_mps=8.0):
        self.speed_mps = speed_mps
        self.calls = 0

    def request_route(self, start, end):
        self.calls += 1
        future = Future()
        future.set_result(Route.new([start, end], haversine_m(start, end) / self.speed_mps))
        return future


def run_simulation(trace_file="mock_trace.csv", destination=(28.6400, 77.2300)):
    print("=== STARTING NAVIGATION REPLAY ===")

    scheduler = Scheduler(ManualClock())
    source = TraceLocationSource.from_csv(trace_file, scheduler)
    tracker = PositionTracker(source)
    policy = navigation_policy_from_env()

    if os.getenv("API_BASE_URL"):
        provider = DirectionsRouteProvider(DirectionsClient())
        print(f"Routing through {os.getenv('API_BASE_URL')}")
    else:
        provider = StraightLineRouteProvider()
        print("API_BASE_URL not set, using straight-line routes")

    refreshes = []

    def on_route(route):
        refreshes.append((scheduler.now(), route))
        print(f"[t={scheduler.now():6.1f}s] route refreshed -> ETA {route.eta_minutes} min")

    def on_error(error):
        print(f"[t={scheduler.now():6.1f}s] {error.kind.value}: {error.message}")

    loop = RouteRefreshLoop(tracker, provider, scheduler, policy=policy, on_route=on_route, on_error=on_error)
    duration = float(source.trace["t"].max())
    ticks = math.floor(duration / policy.refresh_interval_s)

    with tracker.tracking(on_update=loop.on_position, on_error=on_error):
        # first fix arrives at t=0, then the destination is chosen
        scheduler.run(until=0.0)
        loop.select_destination(GeoPoint(*destination))
        scheduler.run(until=duration)
        loop.clear_destination()

    print("\n=== REPLAY COMPLETE ===")
    print(f"Trace length: {duration:.0f}s, timer ticks: {ticks}")
    print(f"Route requests: {loop.requests_issued} (threshold {policy.refresh_threshold_m:.0f} m)")
    print(f"Requests avoided by the movement gate: {max(0, ticks + 1 - loop.requests_issued)}")
    return refreshes


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING"))
    run_simulation()
