"""
Pydantic models for map data returned to renderers and HTTP clients
"""

from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field


Point = Tuple[float, float]  # (longitude, latitude)
Ring = List[Point]


# ============================================================
# Fetch outcomes
# ============================================================

class FetchOutcome(str, Enum):
    """Result status of a viewport fetch"""
    OK = "ok"
    CACHED = "cached"
    RATE_LIMITED = "rate-limited"
    TIMEOUT = "timeout"
    QUERY_TOO_LARGE = "query-too-large"
    TRANSPORT_ERROR = "transport-error"
    STALE = "stale"
    SKIPPED = "skipped"
    INVALID_BBOX = "invalid-bbox"

    @property
    def is_failure(self) -> bool:
        return self in (
            FetchOutcome.RATE_LIMITED,
            FetchOutcome.TIMEOUT,
            FetchOutcome.QUERY_TOO_LARGE,
            FetchOutcome.TRANSPORT_ERROR,
        )


# ============================================================
# Features
# ============================================================

class Feature(BaseModel):
    """
    An assembled area: one or more outer rings plus holes.

    Outer rings and holes are kept side by side so renderers can fill
    them together with an even-odd rule.
    """
    name: Optional[str] = None
    kind: str
    rings: List[Ring] = Field(default_factory=list)
    holes: List[Ring] = Field(default_factory=list)

    def has_geometry(self) -> bool:
        return any(len(ring) > 0 for ring in self.rings)


class Road(BaseModel):
    type: str
    coordinates: Ring  # [[lon, lat], ...]


class Building(BaseModel):
    rings: List[Ring]


class Label(BaseModel):
    lat: float
    lon: float
    name: str


class MapData(BaseModel):
    """Everything needed to paint one viewport"""
    roads: List[Road] = Field(default_factory=list)
    buildings: List[Building] = Field(default_factory=list)
    water: List[Feature] = Field(default_factory=list)
    parks: List[Feature] = Field(default_factory=list)
    labels: List[Label] = Field(default_factory=list)
    boundaries: List[Feature] = Field(default_factory=list)

    def has_data(self) -> bool:
        """True when the result holds something worth caching or drawing"""
        return bool(self.roads or self.parks or self.water or self.boundaries)

    def summary(self) -> str:
        return (
            f"{len(self.roads)} roads, {len(self.buildings)} buildings, "
            f"{len(self.water)} water features, {len(self.parks)} parks, "
            f"{len(self.labels)} labels, {len(self.boundaries)} boundaries"
        )
