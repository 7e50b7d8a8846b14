"""
Overpass query planning

Decides, from the viewport bbox and zoom, what to ask Overpass for:
fewer and coarser features when zoomed out so queries stay fast.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...config import get_config, FetchConfig
from ...geometry.bbox import BoundingBox


MODE_OVERPASS = "overpass"
MODE_COUNTRIES = "countries"  # served from the pre-assembled country store
MODE_WORLD = "world"  # whole world visible: admin_level=2 only

PARK_RELATION_FILTERS = [
    '["natural"="water"]',
    '["leisure"="nature_reserve"]',
    '["boundary"="national_park"]',
    '["boundary"="protected_area"]',
    '["landuse"="wetland"]',
    '["natural"="wetland"]',
    '["natural"="marsh"]',
    '["natural"="swamp"]',
]

PARK_WAY_FILTERS = [
    '["leisure"="park"]',
    '["leisure"="nature_reserve"]',
    '["boundary"="national_park"]',
    '["boundary"="protected_area"]',
    '["landuse"="forest"]',
    '["landuse"="grass"]',
    '["landuse"="meadow"]',
    '["landuse"="wetland"]',
    '["natural"="wood"]',
    '["natural"="wetland"]',
    '["natural"="marsh"]',
    '["natural"="swamp"]',
]


@dataclass
class QueryPlan:
    """What to fetch for one viewport"""
    mode: str
    zoom: float
    bbox: BoundingBox
    way_parts: List[str] = field(default_factory=list)
    relation_parts: List[str] = field(default_factory=list)
    query: Optional[str] = None
    admin_levels: List[str] = field(default_factory=list)


class OverpassQueryBuilder:
    """Builds Overpass QL for a viewport"""

    def __init__(self, timeout: Optional[int] = None, fetch_config: Optional[FetchConfig] = None):
        config = get_config()
        self.timeout = timeout or config.api.overpass_timeout
        self.fetch_config = fetch_config or config.fetch
        self.state_admin_levels = config.boundaries.state_admin_levels

    def build(self, bbox: BoundingBox, zoom: float) -> QueryPlan:
        """
        Plan the query for a bbox at a zoom level

        Args:
            bbox: Normalized viewport bounds
            zoom: Map zoom level

        Returns:
            QueryPlan; ``query`` is None in countries mode
        """
        lat_span, lon_span = bbox.lat_span, bbox.lon_span

        if lon_span >= 360:
            plan = QueryPlan(mode=MODE_WORLD, zoom=zoom, bbox=bbox, admin_levels=["2"])
            plan.query = self.world_boundaries_query()
            return plan

        if zoom < 9 or lon_span > 200 or lat_span > 60:
            return QueryPlan(mode=MODE_COUNTRIES, zoom=zoom, bbox=bbox, admin_levels=["2"])

        plan = QueryPlan(mode=MODE_OVERPASS, zoom=zoom, bbox=bbox)
        too_large = self._too_large_for_boundaries(zoom, lat_span, lon_span)

        for part in bbox.split():
            plan.way_parts.extend(self._way_parts(part.to_overpass(), zoom, lat_span, lon_span, too_large))

        if not too_large and zoom < 11:
            plan.admin_levels = ["2"] if zoom < 6 else list(self.state_admin_levels)

        # Relations are skipped when zoomed out past ~1 degree
        if lat_span <= 1 and lon_span <= 1:
            expanded = bbox.expanded(
                self.fetch_config.relation_expand_factor,
                self.fetch_config.relation_expand_max_deg
            )
            for part in expanded.split():
                plan.relation_parts.extend(
                    f"rel({part.to_overpass()}){tag_filter};" for tag_filter in PARK_RELATION_FILTERS
                )

        plan.query = self._assemble(plan)
        return plan

    def world_boundaries_query(self) -> str:
        return (
            f"[out:json][timeout:{self.timeout}];\n"
            "(\n"
            '  relation["boundary"="administrative"]["admin_level"="2"];\n'
            ");\n"
            "out geom;\n"
        )

    def _way_parts(self, bbox: str, zoom: float, lat_span: float, lon_span: float, too_large: bool) -> List[str]:
        parts = []
        if zoom < 11:
            parts.append(f'way["highway"~"motorway|trunk"]({bbox});')
            parts.append(f'way["waterway"]({bbox});')
            parts.append(f'way["natural"="water"]({bbox});')
        else:
            parts.append(f'way["highway"]({bbox});')
            if zoom >= 13:
                parts.append(f'way["building"]({bbox});')
            parts.append(f'way["waterway"]({bbox});')
            parts.append(f'way["natural"="water"]({bbox});')
            parts.extend(f"way{tag_filter}({bbox});" for tag_filter in PARK_WAY_FILTERS)
            parts.append(f'node["name"]({bbox});')

        # Coastline queries return huge datasets; keep the box small
        if 6 <= zoom < 9 and lat_span < 5 and lon_span < 15:
            parts.append(f'way["natural"="coastline"]({bbox});')
        elif zoom >= 9 and lat_span < 10 and lon_span < 30:
            parts.append(f'way["natural"="coastline"]({bbox});')

        if not too_large:
            if zoom < 6:
                parts.append(f'relation["boundary"="administrative"]["admin_level"="2"]({bbox});')
            elif zoom < 11:
                levels = "|".join(self.state_admin_levels)
                parts.append(f'relation["boundary"="administrative"]["admin_level"~"{levels}"]({bbox});')
        return parts

    @staticmethod
    def _too_large_for_boundaries(zoom: float, lat_span: float, lon_span: float) -> bool:
        if zoom < 6:
            return lat_span > 160 or lon_span > 160
        if zoom < 9:
            return lat_span > 60 or lon_span > 60
        return lat_span > 5 or lon_span > 5

    def _assemble(self, plan: QueryPlan) -> str:
        lines = [f"[out:json][timeout:{self.timeout}];", "("]
        lines.extend(f"  {part}" for part in plan.way_parts)
        lines.append(");")
        lines.append("out geom;")
        if plan.relation_parts:
            # Clip relation member geometry to the visible box
            clip = plan.bbox.split()[0].to_overpass()
            lines.append("(")
            lines.extend(f"  {part}" for part in plan.relation_parts)
            lines.append(");")
            lines.append(f"out geom({clip});")
        return "\n".join(lines) + "\n"
