"""
OSM response parser

Parses Overpass API responses into OSMNode, OSMWay and OSMRelation objects
"""

from typing import Dict, Any, List, Optional
from .models import OSMNode, OSMWay, OSMMember, OSMRelation, ParsedResponse
from ...models import Point


class OSMResponseParser:
    """Parses Overpass API responses"""

    @staticmethod
    def parse_elements(data: Dict[str, Any]) -> ParsedResponse:
        """
        Parse Overpass response into nodes, ways and relations

        Expects the 'out geom' format, where ways and relation members carry
        their geometry as lists of {lat, lon} objects.

        Args:
            data: JSON response from Overpass API

        Returns:
            ParsedResponse with nodes keyed by id
        """
        parsed = ParsedResponse()

        for element in data.get("elements") or []:
            if not isinstance(element, dict):
                continue
            element_type = element.get("type")
            tags = element.get("tags") or {}

            if element_type == "node":
                if element.get("lat") is None or element.get("lon") is None:
                    continue
                parsed.nodes[element["id"]] = OSMNode(
                    id=element["id"],
                    lat=float(element["lat"]),
                    lon=float(element["lon"]),
                    tags=tags
                )
            elif element_type == "way":
                parsed.ways.append(OSMWay(
                    id=element.get("id"),
                    tags=tags,
                    geometry=OSMResponseParser.parse_geometry(element.get("geometry"))
                ))
            elif element_type == "relation":
                members = [
                    OSMMember(
                        type=m.get("type", ""),
                        ref=m.get("ref"),
                        role=m.get("role") or "",
                        geometry=OSMResponseParser.parse_geometry(m.get("geometry"))
                    )
                    for m in element.get("members") or []
                    if isinstance(m, dict)
                ]
                parsed.relations.append(OSMRelation(
                    id=element.get("id"),
                    tags=tags,
                    members=members,
                    geometry=OSMResponseParser.parse_geometry(element.get("geometry"))
                ))

        return parsed

    @staticmethod
    def parse_geometry(geometry: Optional[List[Any]]) -> List[Point]:
        """
        Convert Overpass geometry to (lon, lat) tuples

        Null points and points missing a coordinate are dropped.
        """
        points = []
        for node in geometry or []:
            point = OSMResponseParser._parse_point(node)
            if point is not None:
                points.append(point)
        return points

    @staticmethod
    def _parse_point(node: Any) -> Optional[Point]:
        if isinstance(node, dict):
            # Format: {"lat": ..., "lon": ...}
            lat, lon = node.get("lat"), node.get("lon")
        elif isinstance(node, (list, tuple)) and len(node) >= 2:
            # Format: [lon, lat]
            lon, lat = node[0], node[1]
        else:
            return None
        if lat is None or lon is None:
            return None
        try:
            return (float(lon), float(lat))
        except (TypeError, ValueError):
            return None
