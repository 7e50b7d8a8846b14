"""Tests for the write-once bbox cache."""

import json

from mapcanvas.collectors.osm.cache import BBoxCache
from mapcanvas.models import Feature, MapData, Road


def sample_data(road_type: str = "primary") -> MapData:
    return MapData(
        roads=[Road(type=road_type, coordinates=[(0.0, 0.0), (1.0, 1.0)])],
        water=[Feature(kind="water", rings=[[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]])],
    )


class TestMemoryCache:
    def test_miss(self) -> None:
        assert BBoxCache().get("0,0,1,1") is None

    def test_put_then_get(self) -> None:
        cache = BBoxCache()
        assert cache.put("k", sample_data())
        assert "k" in cache
        assert cache.get("k") == sample_data()

    def test_write_once(self) -> None:
        cache = BBoxCache()
        cache.put("k", sample_data("primary"))
        assert not cache.put("k", sample_data("motorway"))
        assert cache.get("k").roads[0].type == "primary"

    def test_entries_are_isolated_copies(self) -> None:
        cache = BBoxCache()
        data = sample_data()
        cache.put("k", data)
        data.roads.clear()
        cache.get("k").roads.clear()
        assert len(cache.get("k").roads) == 1


class TestDiskCache:
    def test_saved_and_reloaded(self, tmp_path) -> None:
        BBoxCache(str(tmp_path)).put("k", sample_data())

        files = list(tmp_path.glob("mapdata_*.json"))
        assert len(files) == 1
        payload = json.loads(files[0].read_text())
        assert payload["bbox"] == "k"

        reloaded = BBoxCache(str(tmp_path)).get("k")
        assert reloaded == sample_data()

    def test_contains_sees_disk_entries(self, tmp_path) -> None:
        BBoxCache(str(tmp_path)).put("k", sample_data())

        fresh = BBoxCache(str(tmp_path))
        assert "k" in fresh
        assert "other" not in fresh
        assert fresh.get("k") == sample_data()

    def test_corrupt_file_is_a_miss(self, tmp_path) -> None:
        cache = BBoxCache(str(tmp_path))
        with open(cache.get_cache_path("k"), "w") as f:
            f.write("{not json")
        assert cache.get("k") is None

    def test_no_cache_dir_means_no_path(self) -> None:
        assert BBoxCache().get_cache_path("k") is None
