"""
Administrative boundary logic

Countries (admin_level 2) and states/provinces (4, 5, 6) are assembled from
their relation's outer and inner ways.
"""

from typing import Iterable, List, Optional
from loguru import logger

from .models import OSMWay, OSMRelation
from .features import feature_from_relation, feature_from_way
from ...models import Feature
from ...geometry.rings import DEFAULT_EPSILON


COUNTRY_LEVEL = "2"
STATE_LEVELS = ("4", "5", "6")


def boundary_kind(admin_level: Optional[str]) -> Optional[str]:
    if admin_level == COUNTRY_LEVEL:
        return "country"
    if admin_level in STATE_LEVELS:
        return "state"
    return None


class BoundaryProcessor:
    """Processes boundary=administrative elements"""

    def __init__(self, epsilon: float = DEFAULT_EPSILON, require_boundary_tag: bool = True):
        self.epsilon = epsilon
        # Pre-built datasets may carry admin_level without boundary=administrative
        self.require_boundary_tag = require_boundary_tag

    def parse_boundaries(
        self,
        ways: List[OSMWay],
        relations: List[OSMRelation],
        admin_levels: Optional[Iterable[str]] = None
    ) -> List[Feature]:
        """
        Parse administrative boundaries into Features

        Args:
            ways: Ways from the response (closed boundary ways are rare but valid)
            relations: Relations from the response
            admin_levels: Restrict to these levels; all known levels when None

        Returns:
            List of country/state Features with at least one ring
        """
        wanted = set(admin_levels) if admin_levels is not None else {COUNTRY_LEVEL, *STATE_LEVELS}
        boundaries = []

        for relation in relations:
            kind = self._kind_for(relation.tags, wanted)
            if kind is None:
                continue
            feature = feature_from_relation(relation, kind, self.epsilon)
            if feature is None or not feature.has_geometry():
                logger.debug(f"Boundary relation {relation.id} has no usable geometry")
                continue
            boundaries.append(feature)

        for way in ways:
            kind = self._kind_for(way.tags, wanted)
            if kind is None:
                continue
            feature = feature_from_way(way, kind)
            if feature is not None:
                boundaries.append(feature)

        return boundaries

    def _kind_for(self, tags, wanted) -> Optional[str]:
        if self.require_boundary_tag and tags.get("boundary") != "administrative":
            return None
        level = tags.get("admin_level")
        if level not in wanted:
            return None
        return boundary_kind(level)
