"""
OpenStreetMap data collection module

Modular OSM data collector with separate components for:
- API client: Overpass API communication
- Query: Overpass QL planning by zoom and bbox
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: Response parsing
- Roads, Buildings, Features, Boundaries: per-layer extraction
- Cache: Bbox-keyed caching
- Collector: Main orchestrator class
"""

from .models import OSMNode, OSMWay, OSMMember, OSMRelation
from .collector import MapDataCollector, FetchResult

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMMember",
    "OSMRelation",
    "MapDataCollector",
    "FetchResult",
]
