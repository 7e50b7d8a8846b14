"""
Rendering modules for mapcanvas
"""

from .projection import Viewport, split_antimeridian
from .surface import DrawingSurface, PillowSurface
from .renderer import MapRenderer

__all__ = [
    "Viewport",
    "split_antimeridian",
    "DrawingSurface",
    "PillowSurface",
    "MapRenderer",
]
