"""
Country boundary store

Loads a pre-built Overpass-format dataset of admin_level=2 relations,
assembles the boundaries once, and serves the memoized result to every
caller for the lifetime of the process.
"""

import json
import os
import threading
from typing import List, Optional
from loguru import logger

from ..osm.parser import OSMResponseParser
from ..osm.boundaries import BoundaryProcessor, COUNTRY_LEVEL
from ...config import get_config
from ...models import Feature


class BoundaryDatasetError(RuntimeError):
    """Country boundary dataset could not be loaded"""


class BoundaryDatasetNotFound(BoundaryDatasetError):
    """Country boundary dataset file does not exist"""


class CountryBoundaryStore:
    """
    Load-once store for assembled country boundaries

    Initialization is single-flight: concurrent first callers block on a lock
    and only one of them reads and assembles the dataset. A failed load is
    not memoized, so the next call tries again.
    """

    def __init__(self, dataset_path: str, epsilon: Optional[float] = None):
        self.dataset_path = dataset_path
        self.epsilon = epsilon if epsilon is not None else get_config().boundaries.ring_epsilon_deg
        self._boundaries: Optional[List[Feature]] = None
        self._lock = threading.Lock()
        self.load_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._boundaries is not None

    def get(self) -> List[Feature]:
        """
        Assembled country boundaries

        Raises:
            BoundaryDatasetNotFound: dataset file is missing
            BoundaryDatasetError: dataset could not be decoded
        """
        boundaries = self._boundaries
        if boundaries is None:
            with self._lock:
                if self._boundaries is None:
                    self._boundaries = self._load()
                boundaries = self._boundaries
        return boundaries

    def _load(self) -> List[Feature]:
        logger.info(f"Loading country boundaries from {self.dataset_path}...")
        if not os.path.exists(self.dataset_path):
            logger.error(f"Country boundary dataset not found at {self.dataset_path}")
            raise BoundaryDatasetNotFound(f"Country boundaries data not found: {self.dataset_path}")

        try:
            with open(self.dataset_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read country boundaries: {e}")
            raise BoundaryDatasetError(f"Failed to load boundaries: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
            raise BoundaryDatasetError("Failed to load boundaries: dataset has no 'elements' list")

        parsed = OSMResponseParser.parse_elements(data)
        logger.info(f"Processing {len(parsed.relations)} country boundary relations...")

        processor = BoundaryProcessor(epsilon=self.epsilon, require_boundary_tag=False)
        boundaries = processor.parse_boundaries([], parsed.relations, admin_levels=[COUNTRY_LEVEL])
        self.load_count += 1

        logger.info(f"Loaded and cached {len(boundaries)} country boundaries")
        return boundaries


_default_store: Optional[CountryBoundaryStore] = None
_default_store_lock = threading.Lock()


def default_store() -> CountryBoundaryStore:
    """Process-wide store built from configuration"""
    global _default_store
    if _default_store is None:
        with _default_store_lock:
            if _default_store is None:
                _default_store = CountryBoundaryStore(get_config().boundaries.dataset_path)
    return _default_store
