"""
Line simplification for low zoom levels
"""

from typing import List

from shapely.geometry import LineString

from ..models import Point


def tolerance_for_zoom(zoom: float) -> float:
    """Degrees of simplification; coarser when zoomed out"""
    if zoom < 10:
        return 0.001
    if zoom < 13:
        return 0.0001
    return 0.0


def simplify_line(coords: List[Point], tolerance: float) -> List[Point]:
    """Douglas-Peucker simplification of a polyline"""
    if tolerance <= 0 or len(coords) <= 2:
        return list(coords)
    simplified = LineString(coords).simplify(tolerance, preserve_topology=False)
    return [(x, y) for x, y in simplified.coords]
