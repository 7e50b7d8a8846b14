"""Shared pytest fixtures for the mapcanvas test suite."""

import json
from typing import List, Optional, Tuple

import pytest

from mapcanvas.config import MapConfig


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def map_config(tmp_path) -> MapConfig:
    """Config with no request spacing and no retry delay."""
    cfg = MapConfig()
    cfg.api.min_request_interval = 0.0
    cfg.api.retry_delay = 0.0
    cfg.fetch.cache_dir = None
    cfg.fetch.debounce_s = 0.01
    cfg.boundaries.dataset_path = str(tmp_path / "country-boundaries.json")
    return cfg


# ---------------------------------------------------------------------------
# Overpass payloads
# ---------------------------------------------------------------------------


def geom(*points):
    """(lon, lat) pairs to Overpass {lat, lon} geometry."""
    return [{"lat": lat, "lon": lon} for lon, lat in points]


def square_relation(rel_id: int, name: str, x0: float, y0: float, size: float = 1.0, tags=None) -> dict:
    """Square country relation split into two outer ways."""
    x1, y1 = x0 + size, y0 + size
    return {
        "type": "relation",
        "id": rel_id,
        "tags": tags or {"boundary": "administrative", "admin_level": "2", "name": name},
        "members": [
            {"type": "way", "ref": rel_id * 10, "role": "outer",
             "geometry": geom((x0, y0), (x1, y0), (x1, y1))},
            {"type": "way", "ref": rel_id * 10 + 1, "role": "outer",
             "geometry": geom((x0, y0), (x0, y1), (x1, y1))},
        ],
    }


@pytest.fixture()
def country_dataset(tmp_path) -> str:
    """Country dataset file with two square countries."""
    path = tmp_path / "country-boundaries.json"
    path.write_text(json.dumps({
        "elements": [
            square_relation(1, "Alpha", 0, 0),
            square_relation(2, "Beta", 10, 10),
        ]
    }))
    return str(path)


@pytest.fixture()
def city_response() -> dict:
    """Overpass response for a small city viewport."""
    return {
        "elements": [
            {"type": "way", "id": 1, "tags": {"highway": "primary", "name": "Main St"},
             "geometry": geom((0.0, 0.0), (0.001, 0.0), (0.002, 0.0))},
            {"type": "way", "id": 2, "tags": {"building": "yes"},
             "geometry": geom((0.0, 0.0), (0.0001, 0.0), (0.0001, 0.0001), (0.0, 0.0))},
            {"type": "way", "id": 3, "tags": {"leisure": "park", "name": "Green"},
             "geometry": geom((0.0, 0.0), (0.01, 0.0), (0.01, 0.01), (0.0, 0.0))},
            {"type": "way", "id": 4, "tags": {"waterway": "river"},
             "geometry": geom((0.0, 0.005), (0.01, 0.005))},
            {"type": "node", "id": 5, "lat": 0.005, "lon": 0.005, "tags": {"name": "Centre"}},
            {"type": "relation", "id": 6, "tags": {"natural": "water", "name": "Lake"},
             "members": [
                 {"type": "way", "ref": 60, "role": "outer",
                  "geometry": geom((0, 0), (0.004, 0), (0.004, 0.004))},
                 {"type": "way", "ref": 61, "role": "outer",
                  "geometry": geom((0.004, 0.004), (0, 0.004), (0, 0))},
                 {"type": "way", "ref": 62, "role": "inner",
                  "geometry": geom((0.001, 0.001), (0.002, 0.001), (0.002, 0.002), (0.001, 0.001))},
             ]},
        ]
    }


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class RecordingSurface:
    """DrawingSurface that records calls instead of painting."""

    def __init__(self, width: int = 400, height: int = 300):
        self.width = width
        self.height = height
        self.background: Optional[str] = None
        self.polygons: List[dict] = []
        self.lines: List[dict] = []
        self.texts: List[Tuple[float, float, str]] = []

    def fill_background(self, color: str) -> None:
        self.background = color

    def draw_polygons(self, rings, fill, stroke, width, even_odd=True) -> None:
        self.polygons.append({
            "rings": [list(r) for r in rings], "fill": fill, "stroke": stroke,
            "width": width, "even_odd": even_odd,
        })

    def draw_line(self, points, stroke, width) -> None:
        self.lines.append({"points": list(points), "stroke": stroke, "width": width})

    def draw_text(self, x, y, text, fill) -> None:
        self.texts.append((x, y, text))

    def text_size(self, text: str) -> Tuple[float, float]:
        return 6.0 * len(text), 10.0


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()
