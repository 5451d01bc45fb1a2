import pytest

from common.errors import RouteUnavailable
from common.geo import GeoPoint
from navigation.policy import NavigationPolicy
from navigation.refresh_loop import NavigationState, RouteRefreshLoop

DESTINATION = GeoPoint(0.05, 0.05)
OTHER_DESTINATION = GeoPoint(-0.05, -0.05)


@pytest.fixture
def start_tracking(tracker):
    errors = []
    tracker.start(lambda position: None, errors.append)
    return errors


def make_loop(tracker, provider, scheduler, policy, **kwargs):
    return RouteRefreshLoop(tracker, provider, scheduler, policy=policy, **kwargs)


def test_selecting_destination_fetches_immediately(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)

    loop.select_destination(DESTINATION)

    assert loop.state is NavigationState.TRACKING
    assert len(route_provider.requests) == 1
    start, end, _ = route_provider.requests[0]
    assert (start, end) == (GeoPoint(0, 0), DESTINATION)
    assert loop.route is not None
    assert loop.eta_minutes == 3  # 125 s upstream duration
    assert loop.last_evaluated == GeoPoint(0, 0)


def test_initial_fetch_ignores_gate_when_reselecting(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)

    loop.select_destination(DESTINATION)
    loop.select_destination(OTHER_DESTINATION)  # same position, still fetched

    assert len(route_provider.requests) == 2
    assert route_provider.requests[1][1] == OTHER_DESTINATION


def test_stationary_ticks_make_no_requests(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)

    # GPS jitter of ~11 m between ticks
    location_source.emit(0, 0.0001, t=5)
    scheduler.run(until=60)

    assert len(route_provider.requests) == 1
    assert loop.last_evaluated == GeoPoint(0, 0)


def test_moving_past_threshold_refreshes_on_next_tick(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    routes = []
    loop = make_loop(tracker, route_provider, scheduler, policy, on_route=routes.append)
    loop.select_destination(DESTINATION)

    location_source.emit(0, 0.0005, t=5)  # ~55 m east
    scheduler.run(until=9)
    assert len(route_provider.requests) == 1

    scheduler.run(until=10)
    assert len(route_provider.requests) == 2
    assert route_provider.requests[1][0] == GeoPoint(0, 0.0005)
    assert loop.last_evaluated == GeoPoint(0, 0.0005)
    assert len(routes) == 2
    assert loop.route is routes[-1]


def test_failed_refresh_keeps_previous_route(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    errors = []
    loop = make_loop(tracker, route_provider, scheduler, policy, on_error=errors.append)
    loop.select_destination(DESTINATION)
    good_route = loop.route

    route_provider.fail_with = RouteUnavailable("upstream 500")
    location_source.emit(0, 0.001, t=5)
    scheduler.run(until=10)

    assert loop.route is good_route
    assert loop.state is NavigationState.TRACKING
    assert loop.last_evaluated == GeoPoint(0, 0)
    assert [e.message for e in errors] == ["upstream 500"]
    assert loop.last_error is errors[0]

    # no retry until the next tick, which retries because the gate still says "moved"
    assert len(route_provider.requests) == 2
    route_provider.fail_with = None
    scheduler.run(until=20)
    assert len(route_provider.requests) == 3
    assert loop.route is not good_route
    assert loop.last_error is None


def test_unexpected_upstream_exception_is_surfaced_as_route_unavailable(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    errors = []
    loop = make_loop(tracker, route_provider, scheduler, policy, on_error=errors.append)
    route_provider.fail_with = KeyError("features")

    loop.select_destination(DESTINATION)

    assert isinstance(errors[0], RouteUnavailable)
    assert loop.route is None
    assert loop.state is NavigationState.TRACKING


def test_only_one_request_in_flight(tracker, location_source, slow_route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, slow_route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)

    location_source.emit(0, 0.01, t=5)  # far enough to justify a refresh
    scheduler.run(until=25)  # two ticks while the first response is outstanding

    assert len(slow_route_provider.requests) == 1
    assert loop.request_in_flight

    slow_route_provider.resolve(0)
    assert not loop.request_in_flight
    assert loop.last_evaluated == GeoPoint(0, 0)

    scheduler.run(until=30)
    assert len(slow_route_provider.requests) == 2


def test_response_for_replaced_destination_is_dropped(tracker, location_source, slow_route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, slow_route_provider, scheduler, policy)

    loop.select_destination(DESTINATION)
    loop.select_destination(OTHER_DESTINATION)
    assert len(slow_route_provider.requests) == 2

    slow_route_provider.resolve(0)  # late answer for the old destination
    assert loop.route is None
    assert loop.request_in_flight

    slow_route_provider.resolve(1, duration_s=600)
    assert loop.route.end == OTHER_DESTINATION
    assert loop.eta_minutes == 10


def test_response_after_clear_is_dropped(tracker, location_source, slow_route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, slow_route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)

    loop.clear_destination()
    slow_route_provider.resolve(0)

    assert loop.state is NavigationState.IDLE
    assert loop.route is None
    assert loop.last_evaluated is None


def test_clear_cancels_timer(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)
    assert scheduler.pending() == 1

    loop.clear_destination()
    location_source.emit(1, 1, t=1)
    scheduler.run(until=100)

    assert scheduler.pending() == 0
    assert len(route_provider.requests) == 1
    assert loop.destination is None
    assert loop.eta_minutes is None


def test_timer_is_not_duplicated_by_reselecting(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)

    loop.select_destination(DESTINATION)
    loop.select_destination(OTHER_DESTINATION)

    assert scheduler.pending() == 1


def test_no_position_defers_first_request_to_tick(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    loop = make_loop(tracker, route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)
    assert route_provider.requests == []

    location_source.emit(0, 0, t=3)
    scheduler.run(until=10)

    assert len(route_provider.requests) == 1
    assert loop.route is not None


def test_idle_tick_does_nothing(tracker, location_source, route_provider, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    loop = make_loop(tracker, route_provider, scheduler, policy)

    loop.tick()

    assert route_provider.requests == []
    assert loop.state is NavigationState.IDLE


def test_threshold_comes_from_policy(tracker, location_source, route_provider, scheduler, start_tracking):
    location_source.emit(0, 0, t=0)
    policy = NavigationPolicy(refresh_threshold_m=5.0, refresh_interval_s=1.0)
    loop = make_loop(tracker, route_provider, scheduler, policy)
    loop.select_destination(DESTINATION)

    location_source.emit(0, 0.0001, t=0.5)  # ~11 m, above a 5 m threshold
    scheduler.run(until=1)

    assert len(route_provider.requests) == 2


def test_invalid_policy_is_rejected(tracker, route_provider, scheduler):
    with pytest.raises(ValueError):
        RouteRefreshLoop(tracker, route_provider, scheduler, policy=NavigationPolicy(refresh_interval_s=0))


class RaisingRouteProvider:
    """Fails inside request_route itself instead of through the future."""

    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    def request_route(self, start, end):
        self.calls += 1
        raise self.exc


def test_provider_raising_synchronously_does_not_wedge_the_loop(tracker, location_source, scheduler, policy, start_tracking):
    location_source.emit(0, 0, t=0)
    provider = RaisingRouteProvider(ConnectionError("connection refused"))
    errors = []
    loop = make_loop(tracker, provider, scheduler, policy, on_error=errors.append)

    loop.select_destination(DESTINATION)

    assert not loop.request_in_flight
    assert isinstance(errors[0], RouteUnavailable)
    assert isinstance(errors[0].cause, ConnectionError)
    assert loop.state is NavigationState.TRACKING

    scheduler.run(until=30)
    assert provider.calls == 4
    assert len(errors) == 4
    assert not loop.request_in_flight


def test_first_fix_after_selection_fetches_without_waiting_for_tick(tracker, location_source, route_provider, scheduler, policy):
    loop = make_loop(tracker, route_provider, scheduler, policy)
    tracker.start(loop.on_position, lambda error: None)

    loop.select_destination(DESTINATION)
    assert route_provider.requests == []

    location_source.emit(0, 0, t=3)
    assert len(route_provider.requests) == 1
    assert loop.last_evaluated == GeoPoint(0, 0)

    # later fixes leave refreshing to the timer
    location_source.emit(0.01, 0.01, t=4)
    assert len(route_provider.requests) == 1
    scheduler.run(until=10)
    assert len(route_provider.requests) == 2


def test_position_updates_are_ignored_when_idle(tracker, location_source, route_provider, scheduler, policy):
    loop = make_loop(tracker, route_provider, scheduler, policy)
    tracker.start(loop.on_position, lambda error: None)

    location_source.emit(0, 0, t=0)

    assert route_provider.requests == []
