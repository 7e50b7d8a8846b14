"""
OSM data models

Data classes for representing OSM nodes, ways and relations
"""

from typing import List, Dict, Optional
from dataclasses import dataclass, field

from ...models import Point


@dataclass
class OSMNode:
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str]


@dataclass
class OSMWay:
    """Represents an OSM way (line or polygon)"""
    id: int
    tags: Dict[str, str]
    geometry: List[Point] = field(default_factory=list)  # (lon, lat) from 'out geom'

    def get_coordinates(self) -> List[Point]:
        """Get coordinates as (lon, lat) list"""
        return list(self.geometry)


@dataclass
class OSMMember:
    """A way member of a relation, with its own geometry"""
    type: str
    ref: Optional[int]
    role: str
    geometry: List[Point] = field(default_factory=list)


@dataclass
class OSMRelation:
    """Represents an OSM relation (boundary or multipolygon)"""
    id: int
    tags: Dict[str, str]
    members: List[OSMMember] = field(default_factory=list)
    geometry: List[Point] = field(default_factory=list)  # rare: flattened relation geometry


@dataclass
class ParsedResponse:
    """Overpass response split by element type"""
    nodes: Dict[int, OSMNode] = field(default_factory=dict)
    ways: List[OSMWay] = field(default_factory=list)
    relations: List[OSMRelation] = field(default_factory=list)

    @property
    def element_count(self) -> int:
        return len(self.nodes) + len(self.ways) + len(self.relations)
