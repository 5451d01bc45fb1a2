import pytest
import requests

from common.errors import ErrorKind
from common.geo import GeoPoint
from conftest import FakeResponse, FakeSession
from search.geocoder import PlaceSearchClient


def test_search_returns_places():
    session = FakeSession(FakeResponse(200, [
        {"display_name": "India Gate, New Delhi", "lat": "28.6129", "lon": "77.2295"},
        {"display_name": "broken", "lat": "north"},
        {"display_name": "Connaught Place", "lat": "28.6315", "lon": "77.2167"},
    ]))
    client = PlaceSearchClient(base_url="https://geo.test", session=session)

    result = client.search("  india gate ")

    method, url, kwargs = session.calls[0]
    assert url == "https://geo.test/search"
    assert kwargs["params"]["q"] == "india gate"
    assert kwargs["params"]["format"] == "json"
    assert [p.name for p in result.value] == ["India Gate, New Delhi", "Connaught Place"]
    assert result.value[0].point == GeoPoint(28.6129, 77.2295)


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_query_skips_network(query):
    session = FakeSession()
    result = PlaceSearchClient(base_url="https://geo.test", session=session).search(query)

    assert result.ok and result.value == []
    assert session.calls == []


@pytest.mark.parametrize("outcome", [
    requests.ConnectionError("dns failure"),
    FakeResponse(503, None),
    FakeResponse(200, FakeResponse.NO_JSON),
])
def test_search_failures_are_search_unavailable(outcome):
    client = PlaceSearchClient(base_url="https://geo.test", session=FakeSession(outcome))

    result = client.search("delhi")

    assert result.error.kind is ErrorKind.SEARCH_UNAVAILABLE
