"""
Feature parsing for water, parks and labels

Handles parsing of non-building, non-road OSM features. Relations are
assembled into rings with holes; plain ways are used as they come.
"""

from typing import Dict, List, Optional
from .models import OSMNode, OSMWay, OSMRelation
from ...models import Feature, Label
from ...geometry.multipolygon import assemble_feature, segments_from_members
from ...geometry.rings import DEFAULT_EPSILON


WATER_LINE_TYPES = {"river", "stream", "canal", "ditch", "drain"}

# Large protected areas are painted first as a pale background
BACKGROUND_PARK_TYPES = {"nature_reserve", "national_park", "protected_area"}

PARK_TAG_VALUES = {
    "leisure": {"park", "nature_reserve"},
    "boundary": {"national_park", "protected_area"},
    "landuse": {"forest", "grass", "meadow", "wetland"},
    "natural": {"wood", "wetland", "marsh", "swamp"},
}


def feature_from_relation(
    relation: OSMRelation,
    kind: str,
    epsilon: float = DEFAULT_EPSILON
) -> Optional[Feature]:
    """Assemble a relation's member ways, or fall back to its own geometry"""
    name = relation.tags.get("name")
    feature = assemble_feature(kind, name, segments_from_members(relation.members), epsilon)
    if feature is None and relation.geometry:
        feature = Feature(name=name, kind=kind, rings=[list(relation.geometry)])
    return feature


def feature_from_way(way: OSMWay, kind: str) -> Optional[Feature]:
    """A single way is its own ring"""
    coords = way.get_coordinates()
    if not coords:
        return None
    return Feature(name=way.tags.get("name"), kind=kind, rings=[coords])


def water_type(tags: Dict[str, str]) -> Optional[str]:
    if tags.get("waterway"):
        return tags["waterway"]
    if tags.get("natural") in ("water", "coastline"):
        return tags["natural"]
    return None


def park_type(tags: Dict[str, str]) -> Optional[str]:
    """Park kind, preferring leisure over landuse over natural over boundary"""
    if not any(tags.get(key) in values for key, values in PARK_TAG_VALUES.items()):
        return None
    return tags.get("leisure") or tags.get("landuse") or tags.get("natural") or tags.get("boundary") or "park"


class FeatureProcessor:
    """Processes water, parks and labels"""

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self.epsilon = epsilon

    def parse_water(self, ways: List[OSMWay], relations: List[OSMRelation]) -> List[Feature]:
        """Waterways, lakes and coastlines"""
        water = []
        for way in ways:
            kind = water_type(way.tags)
            if kind:
                feature = feature_from_way(way, kind)
                if feature is not None:
                    water.append(feature)
        for relation in relations:
            kind = water_type(relation.tags)
            if kind:
                feature = feature_from_relation(relation, kind, self.epsilon)
                if feature is not None and feature.has_geometry():
                    water.append(feature)
        return water

    def parse_parks(self, ways: List[OSMWay], relations: List[OSMRelation]) -> List[Feature]:
        """Parks, forests, wetlands and protected areas"""
        parks = []
        for way in ways:
            kind = park_type(way.tags)
            if kind:
                feature = feature_from_way(way, kind)
                if feature is not None:
                    parks.append(feature)
        for relation in relations:
            kind = park_type(relation.tags)
            if kind:
                feature = feature_from_relation(relation, kind, self.epsilon)
                if feature is not None and feature.has_geometry():
                    parks.append(feature)
        return parks

    @staticmethod
    def parse_labels(nodes: Dict[int, OSMNode]) -> List[Label]:
        """Named nodes become labels"""
        return [
            Label(lat=node.lat, lon=node.lon, name=node.tags["name"])
            for node in nodes.values()
            if node.tags.get("name")
        ]
