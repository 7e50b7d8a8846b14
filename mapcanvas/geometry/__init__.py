"""
Geometry modules for mapcanvas
"""

from .rings import RingAssembler, Segment, SegmentRole, assemble_rings, points_close
from .multipolygon import assemble_feature, segments_from_members
from .bbox import BoundingBox

__all__ = [
    "RingAssembler",
    "Segment",
    "SegmentRole",
    "assemble_rings",
    "points_close",
    "assemble_feature",
    "segments_from_members",
    "BoundingBox",
]
