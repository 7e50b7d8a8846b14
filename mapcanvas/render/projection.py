"""
Web Mercator projection for canvas rendering
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import mercantile

from ..geometry.bbox import BoundingBox
from ..models import Point, Ring


TILE_SIZE = 256
EARTH_CIRCUMFERENCE_M = 2 * math.pi * 6378137.0
MAX_MERCATOR_LAT = 85.0511287798


def split_antimeridian(ring: Sequence[Point]) -> List[Ring]:
    """
    Split a ring wherever consecutive longitudes jump by more than 180 degrees

    Only used for drawing; the ring itself is left untouched. Points with a
    NaN coordinate are skipped.
    """
    pieces: List[Ring] = []
    current: Ring = []
    previous = None
    for point in ring:
        if point is None or len(point) != 2 or math.isnan(point[0]) or math.isnan(point[1]):
            continue
        if previous is not None and abs(point[0] - previous[0]) > 180 and current:
            pieces.append(current)
            current = []
        current.append((point[0], point[1]))
        previous = point
    if current:
        pieces.append(current)
    return pieces


@dataclass
class Viewport:
    """Map view: center, zoom and canvas size in pixels"""
    center_lat: float
    center_lon: float
    zoom: float
    width: int
    height: int

    @classmethod
    def from_bbox(cls, bbox: BoundingBox, zoom: float, width: int, height: int) -> "Viewport":
        lat, lon = bbox.center()
        return cls(center_lat=lat, center_lon=lon, zoom=zoom, width=width, height=height)

    @property
    def meters_per_pixel(self) -> float:
        return EARTH_CIRCUMFERENCE_M / (TILE_SIZE * 2 ** self.zoom)

    def _center_xy(self) -> Tuple[float, float]:
        return mercantile.xy(self.center_lon, _clamp_lat(self.center_lat))

    def project(self, lon: float, lat: float) -> Tuple[float, float]:
        """(lon, lat) to canvas pixel (x, y), origin top-left"""
        x, y = mercantile.xy(lon, _clamp_lat(lat))
        cx, cy = self._center_xy()
        mpp = self.meters_per_pixel
        return (
            (x - cx) / mpp + self.width / 2,
            self.height / 2 - (y - cy) / mpp,
        )

    def project_ring(self, ring: Sequence[Point]) -> List[Tuple[float, float]]:
        return [self.project(lon, lat) for lon, lat in ring]

    def bounds(self) -> BoundingBox:
        """Visible area as a normalized bbox"""
        cx, cy = self._center_xy()
        half_w = self.width / 2 * self.meters_per_pixel
        half_h = self.height / 2 * self.meters_per_pixel
        south_west = mercantile.lnglat(cx - half_w, cy - half_h)
        north_east = mercantile.lnglat(cx + half_w, cy + half_h)
        west, east = south_west.lng, north_east.lng
        if half_w * 2 >= EARTH_CIRCUMFERENCE_M:
            east = west + 360
        return BoundingBox.from_view(south_west.lat, west, north_east.lat, east)


def _clamp_lat(lat: float) -> float:
    return max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, lat))
