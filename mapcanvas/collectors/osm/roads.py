"""
Road-specific logic

Handles road parsing and simplification
"""

from typing import List
from .models import OSMWay
from ...models import Road
from ...geometry.simplify import simplify_line, tolerance_for_zoom


class RoadProcessor:
    """Turns highway ways into drawable roads"""

    def parse_roads(self, ways: List[OSMWay], zoom: float) -> List[Road]:
        """
        Parse highway ways into roads

        Args:
            ways: List of OSMWay objects
            zoom: Zoom level, drives simplification tolerance

        Returns:
            List of Road models
        """
        tolerance = tolerance_for_zoom(zoom)
        roads = []
        for way in ways:
            highway_type = way.tags.get("highway")
            if not highway_type:
                continue
            coords = way.get_coordinates()
            if not coords:
                continue
            roads.append(Road(
                type=highway_type,
                coordinates=simplify_line(coords, tolerance)
            ))
        return roads
