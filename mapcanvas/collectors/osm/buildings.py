"""
Building-specific logic
"""

from typing import List
from .models import OSMWay
from ...models import Building


class BuildingProcessor:
    """Processes building footprints from OSM data"""

    @staticmethod
    def parse_buildings(ways: List[OSMWay]) -> List[Building]:
        """Building ways become single-ring footprints"""
        buildings = []
        for way in ways:
            if "building" not in way.tags:
                continue
            coords = way.get_coordinates()
            if coords:
                buildings.append(Building(rings=[coords]))
        return buildings
