"""
Map renderer

Paints MapData layer by layer onto a DrawingSurface:
background, boundaries, parks, coastline land, water, roads, buildings,
labels.
"""

from typing import List, Optional, Tuple
from loguru import logger

from .projection import Viewport, split_antimeridian
from .surface import DrawingSurface
from ..config import get_config, RenderConfig
from ..models import Feature, MapData, Ring
from ..collectors.osm.features import BACKGROUND_PARK_TYPES


WATER_LINE_WIDTHS = {"river": 3.0, "canal": 2.0, "stream": 1.5}


class MapRenderer:
    """Renders map data for one viewport"""

    def __init__(self, render_config: Optional[RenderConfig] = None, show_labels: bool = True):
        self.style = render_config or get_config().render
        self.show_labels = show_labels

    def render(self, data: MapData, viewport: Viewport, surface: DrawingSurface) -> None:
        """
        Paint everything in data onto surface

        Args:
            data: Assembled map data
            viewport: Projection for the canvas
            surface: Target drawing surface
        """
        zoom = viewport.zoom
        has_coastlines = any(w.kind == "coastline" for w in data.water)

        surface.fill_background(self.background_color(data, zoom, has_coastlines))

        if zoom < 11 and data.boundaries:
            self._render_boundaries(data.boundaries, viewport, surface)

        background_parks = [p for p in data.parks if p.kind in BACKGROUND_PARK_TYPES]
        foreground_parks = [p for p in data.parks if p.kind not in BACKGROUND_PARK_TYPES]
        for park in background_parks + foreground_parks:
            self._render_park(park, viewport, surface)

        if zoom >= 9 and has_coastlines:
            for coastline in (w for w in data.water if w.kind == "coastline"):
                self._fill_feature(
                    coastline, viewport, surface,
                    fill=self.style.land_color, stroke=self.style.coastline_stroke, width=1
                )

        for water in data.water:
            self._render_water(water, viewport, surface)

        self._render_roads(data, viewport, surface)
        self._render_buildings(data, viewport, surface)

        if self.show_labels:
            drawn = self._render_labels(data, viewport, surface)
            logger.debug(f"Labels drawn: {drawn}/{len(data.labels)}")

    def background_color(self, data: MapData, zoom: float, has_coastlines: bool) -> str:
        """Ocean where land is painted on top, land or white where water is"""
        if zoom < 6:
            return self.style.ocean_color
        if zoom < 9:
            if data.boundaries or has_coastlines:
                return self.style.ocean_color
            return self.style.land_color
        if has_coastlines:
            return self.style.ocean_color
        return self.style.inland_color

    def _render_boundaries(self, boundaries: List[Feature], viewport: Viewport, surface: DrawingSurface):
        # Fill to show land when zoomed out; outline only when closer in
        should_fill = viewport.zoom < 9
        width = 2 if viewport.zoom < 9 else 1
        for boundary in boundaries:
            self._fill_feature(
                boundary, viewport, surface,
                fill=self.style.land_color if should_fill else None,
                stroke=self.style.boundary_stroke,
                width=width
            )

    def _render_park(self, park: Feature, viewport: Viewport, surface: DrawingSurface):
        background = park.kind in BACKGROUND_PARK_TYPES
        self._fill_feature(
            park, viewport, surface,
            fill=self.style.park_fills.get(park.kind, self.style.park_default_fill),
            stroke=self.style.park_background_stroke if background else self.style.park_foreground_stroke,
            width=2 if background else 1
        )

    def _render_water(self, water: Feature, viewport: Viewport, surface: DrawingSurface):
        if water.kind == "coastline":
            # Drawn as land above
            return
        if water.kind in WATER_LINE_WIDTHS:
            for line in water.rings:
                for piece in split_antimeridian(line):
                    surface.draw_line(
                        viewport.project_ring(piece), self.style.water_fill, WATER_LINE_WIDTHS[water.kind]
                    )
            return
        self._fill_feature(
            water, viewport, surface,
            fill=self.style.water_fill, stroke=self.style.water_stroke, width=0.5
        )

    def _render_roads(self, data: MapData, viewport: Viewport, surface: DrawingSurface):
        zoom = viewport.zoom
        multiplier = 2.5 if zoom < 10 else 1.5 if zoom < 12 else 1
        for road in data.roads:
            if road.type in self.style.road_styles:
                color, base_width = self.style.road_styles[road.type]
                width = base_width * multiplier
            elif road.type == "residential":
                color, width = self.style.residential_road
            else:
                color, width = self.style.default_road
            for piece in split_antimeridian(road.coordinates):
                surface.draw_line(viewport.project_ring(piece), color, width)

    def _render_buildings(self, data: MapData, viewport: Viewport, surface: DrawingSurface):
        fills = self.style.building_fills
        for index, building in enumerate(data.buildings):
            rings = [viewport.project_ring(r) for r in building.rings if len(r) >= 3]
            if rings:
                surface.draw_polygons(
                    rings, fill=fills[index % len(fills)], stroke=self.style.building_stroke, width=0.5
                )

    def _render_labels(self, data: MapData, viewport: Viewport, surface: DrawingSurface) -> int:
        """Draw labels, skipping any that would overlap one already drawn"""
        padding = self.style.label_padding_px
        occupied: List[Tuple[float, float, float, float]] = []
        drawn = 0
        for label in data.labels:
            x, y = viewport.project(label.lon, label.lat)
            width, height = surface.text_size(label.name)
            left, top = x - width / 2, y - height / 2
            if left + width < 0 or top + height < 0 or left > surface.width or top > surface.height:
                continue
            overlapping = any(
                left < ox + ow + padding and left + width + padding > ox
                and top < oy + oh + padding and top + height + padding > oy
                for ox, oy, ow, oh in occupied
            )
            if overlapping:
                continue
            surface.draw_text(x, y, label.name, self.style.label_color)
            occupied.append((left, top, width, height))
            drawn += 1
        return drawn

    def _fill_feature(
        self,
        feature: Feature,
        viewport: Viewport,
        surface: DrawingSurface,
        fill: Optional[str],
        stroke: Optional[str],
        width: float
    ):
        """Outer rings and holes go out as one even-odd shape"""
        paths = self._drawable_paths(feature.rings + feature.holes, viewport)
        if paths:
            surface.draw_polygons(paths, fill=fill, stroke=stroke, width=width, even_odd=True)

    @staticmethod
    def _drawable_paths(rings: List[Ring], viewport: Viewport):
        paths = []
        for ring in rings:
            # Degenerate rings cannot be filled
            if len(ring) < 3:
                continue
            for piece in split_antimeridian(ring):
                if len(piece) >= 3:
                    paths.append(viewport.project_ring(piece))
        return paths
