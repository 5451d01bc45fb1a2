from concurrent.futures import Future

import pytest
import requests

from common.geo import GeoPoint, Position
from navigation.policy import NavigationPolicy
from navigation.position_tracker import PositionTracker
from navigation.scheduling import ManualClock, Scheduler
from routing.models import Route


class FakeLocationSource:
    """Push-based source the test drives by hand."""

    def __init__(self):
        self.watches = {}
        self.cleared = []
        self.deny = False
        self._next_id = 0

    def watch(self, on_fix, on_error):
        if self.deny:
            raise PermissionError("User denied Geolocation")
        self._next_id += 1
        self.watches[self._next_id] = (on_fix, on_error)
        return self._next_id

    def clear_watch(self, watch_id):
        self.cleared.append(watch_id)
        self.watches.pop(watch_id, None)

    def emit(self, lat, lon, t=0.0, accuracy=None):
        for on_fix, _ in list(self.watches.values()):
            on_fix(Position(point=GeoPoint(lat, lon), timestamp=t, accuracy_m=accuracy))

    def fail(self, exc):
        for _, on_error in list(self.watches.values()):
            on_error(exc)


class FakeRouteProvider:
    """
    Records every request. With auto=True futures resolve immediately,
    otherwise the test resolves them (a slow upstream).
    """

    def __init__(self, auto=True, duration_s=125.0):
        self.auto = auto
        self.duration_s = duration_s
        self.fail_with = None
        self.requests = []

    def request_route(self, start, end):
        future = Future()
        self.requests.append((start, end, future))
        if self.auto:
            if self.fail_with is not None:
                future.set_exception(self.fail_with)
            else:
                future.set_result(Route.new([start, end], self.duration_s))
        return future

    def resolve(self, index, duration_s=None):
        start, end, future = self.requests[index]
        future.set_result(Route.new([start, end], self.duration_s if duration_s is None else duration_s))

    def fail(self, index, error):
        self.requests[index][2].set_exception(error)


class FakeResponse:
    NO_JSON = object()

    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data

    def json(self):
        if self._json is FakeResponse.NO_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stands in for requests.Session; queue responses or exceptions per call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def location_source():
    return FakeLocationSource()


@pytest.fixture
def tracker(location_source):
    return PositionTracker(location_source)


@pytest.fixture
def route_provider():
    return FakeRouteProvider()


@pytest.fixture
def slow_route_provider():
    return FakeRouteProvider(auto=False)


@pytest.fixture
def policy():
    return NavigationPolicy(refresh_threshold_m=50.0, refresh_interval_s=10.0)
