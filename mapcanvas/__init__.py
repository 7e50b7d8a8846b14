"""
mapcanvas - OpenStreetMap map rendering with ring assembly for boundaries
"""

__version__ = "1.0.0"
