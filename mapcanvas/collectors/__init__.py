"""
Data collectors for mapcanvas

- MapDataCollector: roads, buildings, water, parks, labels and boundaries from OpenStreetMap
- CountryBoundaryStore: pre-assembled country boundaries
"""

from .osm import MapDataCollector, FetchResult
from .boundary import CountryBoundaryStore

__all__ = [
    "MapDataCollector",
    "FetchResult",
    "CountryBoundaryStore",
]
