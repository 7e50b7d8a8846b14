"""
Ring assembly

Rebuilds closed polygon rings from the unordered member ways of an OSM
boundary or multipolygon relation by greedily stitching ways whose
endpoints coincide.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence
from loguru import logger

from ..models import Point, Ring


DEFAULT_EPSILON = 1e-4  # degrees, ~11m at the equator


class SegmentRole(str, Enum):
    """Role of a way inside a relation"""
    OUTER = "outer"
    INNER = "inner"
    OTHER = "other"

    @classmethod
    def from_member_role(cls, role) -> "SegmentRole":
        # Untagged members are outer ways in practice
        if role is None or role == "" or role == "outer":
            return cls.OUTER
        if role == "inner":
            return cls.INNER
        return cls.OTHER


@dataclass
class Segment:
    """One way's points, tagged with its role"""
    points: List[Point]
    role: SegmentRole = SegmentRole.OUTER

    @property
    def is_empty(self) -> bool:
        return not self.points


def points_close(a: Point, b: Point, epsilon: float = DEFAULT_EPSILON) -> bool:
    """Both coordinate deltas strictly below epsilon"""
    return abs(a[0] - b[0]) < epsilon and abs(a[1] - b[1]) < epsilon


class RingAssembler:
    """
    Greedy endpoint-stitching of line segments into rings

    Each ring is seeded with the lowest-indexed unused segment and grown at
    both ends. Candidates are scanned in index order and the first match
    wins; after every splice the scan restarts with the new ring ends.
    A ring that can no longer be extended is emitted as-is, closed or not.

    Input segments are never mutated; reversed candidates are copies.
    """

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self.epsilon = epsilon

    def assemble(self, segments: Sequence[Sequence[Point]]) -> List[Ring]:
        """
        Assemble rings from segments that all share one role

        Args:
            segments: Point sequences (or Segment objects) of a single role

        Returns:
            List of rings, in seed order
        """
        ways = [list(self._points_of(s)) for s in segments]
        ways = [w for w in ways if w]
        if not ways:
            return []

        rings: List[Ring] = []
        unused = list(range(len(ways)))

        while unused:
            seed = unused.pop(0)
            ring = list(ways[seed])

            found_connection = True
            while found_connection:
                found_connection = False
                for position, index in enumerate(unused):
                    if self._splice(ring, ways[index]):
                        del unused[position]
                        found_connection = True
                        break

            rings.append(ring)

        logger.debug(f"Assembled {len(ways)} segments into {len(rings)} rings")
        return rings

    def _splice(self, ring: Ring, way: List[Point]) -> bool:
        """Join way onto ring in place if one of its endpoints touches a ring end"""
        ring_start, ring_end = ring[0], ring[-1]
        way_start, way_end = way[0], way[-1]

        if points_close(ring_end, way_start, self.epsilon):
            ring[-1:] = way
        elif points_close(ring_end, way_end, self.epsilon):
            ring[-1:] = way[::-1]
        elif points_close(ring_start, way_end, self.epsilon):
            ring[:0] = way[:-1]
        elif points_close(ring_start, way_start, self.epsilon):
            ring[:0] = way[::-1][:-1]
        else:
            return False
        return True

    @staticmethod
    def _points_of(segment) -> Sequence[Point]:
        if isinstance(segment, Segment):
            return segment.points
        return segment


def assemble_rings(segments: Sequence[Sequence[Point]], epsilon: float = DEFAULT_EPSILON) -> List[Ring]:
    """Assemble rings with a one-off RingAssembler"""
    return RingAssembler(epsilon).assemble(segments)
