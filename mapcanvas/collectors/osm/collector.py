"""
Main map data collector

Orchestrates query planning, Overpass access, parsing, feature extraction
and caching for one viewport
"""

from dataclasses import dataclass
from typing import Optional
from loguru import logger

from .api_client import OverpassAPIClient, OverpassError
from .cache import BBoxCache
from .parser import OSMResponseParser
from .query import OverpassQueryBuilder, QueryPlan, MODE_COUNTRIES, MODE_OVERPASS, MODE_WORLD
from .roads import RoadProcessor
from .buildings import BuildingProcessor
from .features import FeatureProcessor
from .boundaries import BoundaryProcessor
from ..boundary.countries import CountryBoundaryStore, BoundaryDatasetError, default_store
from ...config import get_config, MapConfig
from ...geometry.bbox import BoundingBox
from ...models import FetchOutcome, MapData


@dataclass
class FetchResult:
    """Outcome of a viewport fetch; data is None unless it succeeded"""
    outcome: FetchOutcome
    data: Optional[MapData] = None
    bbox_key: Optional[str] = None
    mode: Optional[str] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (FetchOutcome.OK, FetchOutcome.CACHED)


class MapDataCollector:
    """
    Collect map data for a viewport from OpenStreetMap via Overpass API

    Uses one batch query per viewport. Zoomed-out views are served from the
    pre-assembled country boundary store instead of Overpass.

    Provider failures never raise; they come back as a FetchResult with the
    matching outcome so callers can keep showing what they already have.
    """

    def __init__(
        self,
        config: Optional[MapConfig] = None,
        api_client: Optional[OverpassAPIClient] = None,
        cache: Optional[BBoxCache] = None,
        country_store: Optional[CountryBoundaryStore] = None
    ):
        self.config = config or get_config()
        self.api_client = api_client or OverpassAPIClient(self.config.api)
        self.cache = cache if cache is not None else BBoxCache(self.config.fetch.cache_dir)
        self.country_store = country_store
        self.query_builder = OverpassQueryBuilder(self.config.api.overpass_timeout, self.config.fetch)
        self.parser = OSMResponseParser()
        epsilon = self.config.boundaries.ring_epsilon_deg
        self.road_processor = RoadProcessor()
        self.building_processor = BuildingProcessor()
        self.feature_processor = FeatureProcessor(epsilon)
        self.boundary_processor = BoundaryProcessor(epsilon)

    def fetch(self, bbox: BoundingBox, zoom: float) -> FetchResult:
        """
        Fetch and assemble everything drawable in a bbox

        Args:
            bbox: Normalized viewport bounds
            zoom: Map zoom level

        Returns:
            FetchResult with MapData on success
        """
        if not bbox.is_valid:
            logger.warning(f"Invalid bbox (likely world wrap issue): {bbox}")
            return FetchResult(FetchOutcome.INVALID_BBOX, detail=str(bbox))

        plan = self.query_builder.build(bbox, zoom)
        key = bbox.cache_key()

        if plan.mode == MODE_COUNTRIES:
            return self._fetch_countries(key)

        if plan.mode == MODE_OVERPASS and zoom >= self.config.fetch.cache_min_zoom:
            cached = self.cache.get(key)
            if cached is not None and cached.has_data():
                logger.info(f"Using cached data for bbox {key}: {cached.summary()}")
                return FetchResult(FetchOutcome.CACHED, data=cached, bbox_key=key, mode=plan.mode)

        logger.info(f"Fetching map data for bbox {key} at zoom {zoom:.1f} ({plan.mode})")
        try:
            response = self.api_client.query(plan.query)
        except OverpassError as e:
            logger.warning(f"Overpass fetch failed ({e.outcome.value}): {e}")
            return FetchResult(e.outcome, bbox_key=key, mode=plan.mode, detail=str(e))

        data = self.extract(response, plan)
        logger.info(f"Features found: {data.summary()}")

        if plan.mode != MODE_WORLD and data.has_data():
            self.cache.put(key, data)
        return FetchResult(FetchOutcome.OK, data=data, bbox_key=key, mode=plan.mode)

    def extract(self, response: dict, plan: QueryPlan) -> MapData:
        """Turn a raw Overpass response into MapData"""
        parsed = self.parser.parse_elements(response)
        if plan.mode == MODE_WORLD:
            return MapData(boundaries=self.boundary_processor.parse_boundaries(
                parsed.ways, parsed.relations, admin_levels=["2"]
            ))

        return MapData(
            roads=self.road_processor.parse_roads(parsed.ways, plan.zoom),
            buildings=self.building_processor.parse_buildings(parsed.ways),
            water=self.feature_processor.parse_water(parsed.ways, parsed.relations),
            parks=self.feature_processor.parse_parks(parsed.ways, parsed.relations),
            labels=self.feature_processor.parse_labels(parsed.nodes),
            boundaries=self.boundary_processor.parse_boundaries(
                parsed.ways, parsed.relations, admin_levels=plan.admin_levels or None
            ),
        )

    def _fetch_countries(self, key: str) -> FetchResult:
        store = self.country_store or default_store()
        try:
            boundaries = store.get()
        except BoundaryDatasetError as e:
            logger.warning(f"Country boundaries unavailable: {e}")
            return FetchResult(FetchOutcome.TRANSPORT_ERROR, bbox_key=key, mode=MODE_COUNTRIES, detail=str(e))
        logger.info(f"Loaded {len(boundaries)} country boundaries from store")
        return FetchResult(
            FetchOutcome.OK,
            data=MapData(boundaries=[b.model_copy(deep=True) for b in boundaries]),
            bbox_key=key,
            mode=MODE_COUNTRIES
        )
