"""
Boundary data sources

- CountryBoundaryStore: pre-assembled country boundaries, loaded once
"""

from .countries import (
    CountryBoundaryStore,
    BoundaryDatasetError,
    BoundaryDatasetNotFound,
    default_store,
)

__all__ = [
    "CountryBoundaryStore",
    "BoundaryDatasetError",
    "BoundaryDatasetNotFound",
    "default_store",
]
