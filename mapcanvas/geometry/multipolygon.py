"""
Multipolygon assembly

Member ways become role-tagged segments; outer rings and inner rings are
assembled independently and combined into a Feature.
"""

from typing import Iterable, List, Optional

from ..models import Feature
from .rings import RingAssembler, Segment, SegmentRole, DEFAULT_EPSILON


def _is_point(point) -> bool:
    if not isinstance(point, (list, tuple)) or len(point) != 2:
        return False
    lon, lat = point
    if isinstance(lon, bool) or isinstance(lat, bool):
        return False
    return isinstance(lon, (int, float)) and isinstance(lat, (int, float))


def segments_from_members(members: Iterable) -> List[Segment]:
    """
    Build role-tagged segments from relation members

    Members only need ``role`` and ``geometry`` attributes. Null or
    malformed points are dropped; members left without points are skipped.
    """
    segments = []
    for member in members:
        points = [p for p in member.geometry or [] if _is_point(p)]
        if not points:
            continue
        segments.append(Segment(
            points=[(float(p[0]), float(p[1])) for p in points],
            role=SegmentRole.from_member_role(member.role),
        ))
    return segments


def assemble_feature(
    kind: str,
    name: Optional[str],
    segments: List[Segment],
    epsilon: float = DEFAULT_EPSILON
) -> Optional[Feature]:
    """
    Assemble outer rings and holes into a Feature

    Holes are always assembled, even when there is a single outer way.

    Returns:
        Feature, or None when no outer ring could be built
    """
    assembler = RingAssembler(epsilon)
    outer = assembler.assemble([s for s in segments if s.role == SegmentRole.OUTER])
    if not outer:
        return None
    inner = assembler.assemble([s for s in segments if s.role == SegmentRole.INNER])
    return Feature(name=name, kind=kind, rings=outer, holes=inner)
