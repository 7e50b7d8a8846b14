"""Tests for the viewport collector: modes, caching and failure outcomes."""

from unittest.mock import MagicMock

import pytest

from mapcanvas.collectors.boundary.countries import CountryBoundaryStore
from mapcanvas.collectors.osm.api_client import OverpassAPIClient, QueryTooLargeError, RateLimitedError
from mapcanvas.collectors.osm.cache import BBoxCache
from mapcanvas.collectors.osm.collector import MapDataCollector
from mapcanvas.collectors.osm.query import MODE_COUNTRIES, MODE_OVERPASS, MODE_WORLD
from mapcanvas.geometry.bbox import BoundingBox
from mapcanvas.models import FetchOutcome

from conftest import square_relation


CITY = BoundingBox(0.0, 0.0, 0.01, 0.01)


@pytest.fixture()
def api_client(city_response) -> MagicMock:
    client = MagicMock(spec=OverpassAPIClient)
    client.query.return_value = city_response
    return client


@pytest.fixture()
def collector(map_config, api_client, country_dataset) -> MapDataCollector:
    return MapDataCollector(
        map_config,
        api_client=api_client,
        cache=BBoxCache(),
        country_store=CountryBoundaryStore(country_dataset),
    )


class TestOverpassMode:
    def test_city_fetch(self, collector, api_client) -> None:
        result = collector.fetch(CITY, zoom=14)

        assert result.outcome == FetchOutcome.OK
        assert result.ok
        assert result.mode == MODE_OVERPASS
        data = result.data
        assert [r.type for r in data.roads] == ["primary"]
        assert len(data.buildings) == 1
        assert {w.kind for w in data.water} == {"river", "water"}
        assert [p.kind for p in data.parks] == ["park"]
        assert [l.name for l in data.labels] == ["Centre"]
        api_client.query.assert_called_once()

    def test_second_fetch_is_cached(self, collector, api_client) -> None:
        first = collector.fetch(CITY, zoom=14)
        second = collector.fetch(CITY, zoom=14)

        assert second.outcome == FetchOutcome.CACHED
        assert second.data == first.data
        assert api_client.query.call_count == 1

    def test_cache_not_used_below_min_zoom(self, collector, api_client) -> None:
        collector.fetch(CITY, zoom=9.5)
        result = collector.fetch(CITY, zoom=9.5)
        assert result.outcome == FetchOutcome.OK
        assert api_client.query.call_count == 2

    def test_empty_result_not_cached(self, collector, api_client) -> None:
        api_client.query.return_value = {"elements": []}
        collector.fetch(CITY, zoom=14)
        assert CITY.cache_key() not in collector.cache

    @pytest.mark.parametrize("error,outcome", [
        (RateLimitedError("slow down", 429), FetchOutcome.RATE_LIMITED),
        (QueryTooLargeError("too big", 400), FetchOutcome.QUERY_TOO_LARGE),
    ])
    def test_provider_failures_become_outcomes(self, collector, api_client, error, outcome) -> None:
        api_client.query.side_effect = error
        result = collector.fetch(CITY, zoom=14)

        assert result.outcome == outcome
        assert result.data is None
        assert not result.ok
        assert result.outcome.is_failure


class TestOtherModes:
    def test_low_zoom_uses_store(self, collector, api_client) -> None:
        result = collector.fetch(BoundingBox(-10.0, -10.0, 20.0, 20.0), zoom=4)

        assert result.mode == MODE_COUNTRIES
        assert [b.name for b in result.data.boundaries] == ["Alpha", "Beta"]
        api_client.query.assert_not_called()

    def test_store_features_not_shared(self, collector) -> None:
        bbox = BoundingBox(-10.0, -10.0, 20.0, 20.0)
        result = collector.fetch(bbox, zoom=4)
        result.data.boundaries[0].name = "Renamed"
        result.data.boundaries[0].rings[0].clear()

        stored = collector.country_store.get()
        assert stored[0].name == "Alpha"
        assert stored[0].rings[0]
        assert collector.fetch(bbox, zoom=4).data.boundaries[0].name == "Alpha"

    def test_missing_store_dataset(self, map_config, api_client, tmp_path) -> None:
        collector = MapDataCollector(
            map_config, api_client=api_client, cache=BBoxCache(),
            country_store=CountryBoundaryStore(str(tmp_path / "none.json")),
        )
        result = collector.fetch(BoundingBox(0, 0, 10, 10), zoom=3)
        assert result.outcome == FetchOutcome.TRANSPORT_ERROR

    def test_world_view(self, collector, api_client) -> None:
        api_client.query.return_value = {"elements": [square_relation(7, "World", 0, 0)]}
        bbox = BoundingBox.from_view(-85, -180, 85, 180)

        result = collector.fetch(bbox, zoom=0.5)

        assert result.mode == MODE_WORLD
        assert [b.name for b in result.data.boundaries] == ["World"]
        assert bbox.cache_key() not in collector.cache

    def test_invalid_bbox(self, collector, api_client) -> None:
        result = collector.fetch(BoundingBox(10, 0, 0, 1), zoom=12)
        assert result.outcome == FetchOutcome.INVALID_BBOX
        api_client.query.assert_not_called()
