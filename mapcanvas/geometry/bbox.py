"""
Bounding boxes for viewport queries and cache keys
"""

from dataclasses import dataclass
from typing import List


def _wrap_lon(lon: float) -> float:
    while lon < -180:
        lon += 360
    while lon > 180:
        lon -= 360
    return lon


def _clamp_lat(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


@dataclass(frozen=True)
class BoundingBox:
    """
    Lat/lon window in degrees

    A box with west > east crosses the antimeridian.
    """
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def from_view(cls, south: float, west: float, north: float, east: float) -> "BoundingBox":
        """Clamp latitudes and wrap longitudes from raw map bounds"""
        if east - west >= 360:
            # Zoomed out past one full world copy
            return cls(_clamp_lat(south), -180.0, _clamp_lat(north), 180.0)
        return cls(
            south=_clamp_lat(south),
            west=_wrap_lon(west),
            north=_clamp_lat(north),
            east=_wrap_lon(east),
        )

    @classmethod
    def parse(cls, text: str) -> "BoundingBox":
        """Parse "south,west,north,east" """
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 4:
            raise ValueError(f"Expected 'south,west,north,east', got {text!r}")
        try:
            south, west, north, east = (float(p) for p in parts)
        except ValueError as e:
            raise ValueError(f"Bounding box values must be numbers: {text!r}") from e
        return cls.from_view(south, west, north, east)

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lon_span(self) -> float:
        span = self.east - self.west
        if span < 0:
            span += 360  # crossing the dateline: -170..170 is 340 wide
        return span

    @property
    def crosses_dateline(self) -> bool:
        return self.west > self.east

    @property
    def is_valid(self) -> bool:
        if self.south > self.north:
            return False
        return not (self.crosses_dateline and self.lon_span > 180)

    def split(self) -> List["BoundingBox"]:
        """One box, or two when the box crosses the antimeridian"""
        if not self.crosses_dateline:
            return [self]
        return [
            BoundingBox(self.south, self.west, self.north, 180.0),
            BoundingBox(self.south, -180.0, self.north, self.east),
        ]

    def expanded(self, factor: float, max_degrees: float) -> "BoundingBox":
        """Grow each side by factor * span, capped at max_degrees"""
        lat_pad = min(self.lat_span * factor, max_degrees)
        lon_pad = min(self.lon_span * factor, max_degrees)
        return BoundingBox(
            south=_clamp_lat(self.south - lat_pad),
            west=_wrap_lon(self.west - lon_pad),
            north=_clamp_lat(self.north + lat_pad),
            east=_wrap_lon(self.east + lon_pad),
        )

    def center(self):
        """(lat, lon) of the box center"""
        lon = self.west + self.lon_span / 2
        return (self.south + self.north) / 2, _wrap_lon(lon)

    def to_overpass(self) -> str:
        return f"{self.south},{self.west},{self.north},{self.east}"

    def cache_key(self) -> str:
        return f"{self.south:.6f},{self.west:.6f},{self.north:.6f},{self.east:.6f}"
