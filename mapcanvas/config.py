"""
Configuration settings for mapcanvas
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import os


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Overpass API (OSM)
    # Options: overpass-api.de (main), lz4.overpass-api.de, z.overpass-api.de
    overpass_url: str = field(default_factory=lambda: os.environ.get(
        "MAPCANVAS_OVERPASS_URL", "https://overpass-api.de/api/interpreter"
    ))
    overpass_timeout: int = 25  # [timeout:N] inside the query

    # Request settings
    request_timeout: int = 60
    max_retries: int = 3
    retry_delay: float = 5.0
    min_request_interval: float = 2.0

    # User agent for API requests
    user_agent: str = "mapcanvas/1.0"


@dataclass
class FetchConfig:
    """Viewport fetching behaviour"""
    debounce_s: float = 5.0
    rate_limit_cooldown_s: float = 120.0

    # Relation queries use a slightly larger bbox to catch big areas
    relation_expand_factor: float = 0.3
    relation_expand_max_deg: float = 0.5

    # Cached results are only trusted at this zoom or above
    cache_min_zoom: float = 10.0
    cache_dir: Optional[str] = field(default_factory=lambda: os.environ.get("MAPCANVAS_CACHE_DIR"))


@dataclass
class BoundaryConfig:
    """Ring assembly and country boundary dataset"""
    # ~11m at the equator
    ring_epsilon_deg: float = 1e-4
    dataset_path: str = field(default_factory=lambda: os.environ.get(
        "MAPCANVAS_BOUNDARIES_PATH", "country-boundaries.json"
    ))
    state_admin_levels: List[str] = field(default_factory=lambda: ["4", "5", "6"])


@dataclass
class RenderConfig:
    """Canvas colours and sizes"""
    ocean_color: str = "#70b8ff"
    land_color: str = "#f0ead6"
    inland_color: str = "#ffffff"
    boundary_stroke: str = "#999999"
    coastline_stroke: str = "#a0a0a0"
    water_fill: str = "#70b8ff"
    water_stroke: str = "#5a9fd6"
    building_stroke: str = "#c0c0c0"
    building_fills: List[str] = field(default_factory=lambda: [
        "#e8e8e8", "#f0f0f0", "#e0e0e0", "#ececec", "#d8d8d8"
    ])
    label_color: str = "#000000"
    label_padding_px: int = 5

    # Stroke colour and base width by highway type
    road_styles: Dict[str, tuple] = field(default_factory=lambda: {
        "motorway": ("#e892a2", 4.0),
        "trunk": ("#f9b29c", 3.0),
        "primary": ("#fcd6a4", 3.0),
        "secondary": ("#f7fabf", 2.5),
    })
    residential_road: tuple = ("#ffffff", 2.0)
    default_road: tuple = ("#d4d4d4", 1.5)

    # Fill colour by park/natural type
    park_fills: Dict[str, str] = field(default_factory=lambda: {
        "forest": "#8dc87f",
        "wood": "#8dc87f",
        "wetland": "#8fbc8f",
        "marsh": "#8fbc8f",
        "swamp": "#8fbc8f",
        "meadow": "#c8e6a0",
        "nature_reserve": "#e8f5e3",
        "national_park": "#e8f5e3",
        "protected_area": "#e8f5e3",
        "grass": "#b8e6a1",
    })
    park_default_fill: str = "#9cd68d"
    park_background_stroke: str = "#a8d5a0"
    park_foreground_stroke: str = "#6b9e5c"


@dataclass
class MapConfig:
    """Top-level configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    boundaries: BoundaryConfig = field(default_factory=BoundaryConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    # Default canvas size for CLI rendering
    canvas_width: int = 1024
    canvas_height: int = 768


# Global config instance
config = MapConfig()


def get_config() -> MapConfig:
    """Get global configuration"""
    return config


def validate_config(config: MapConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not hasattr(config, 'api') or config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.overpass_url:
            errors.append("api.overpass_url is required but not set")
        if config.api.max_retries < 1:
            errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
        if config.api.overpass_timeout <= 0:
            errors.append(f"api.overpass_timeout must be positive, got {config.api.overpass_timeout}")

    if not hasattr(config, 'fetch') or config.fetch is None:
        errors.append("fetch configuration is required but not set")
    else:
        if config.fetch.debounce_s < 0:
            errors.append(f"fetch.debounce_s must not be negative, got {config.fetch.debounce_s}")
        if config.fetch.relation_expand_max_deg < 0:
            errors.append(
                f"fetch.relation_expand_max_deg must not be negative, got {config.fetch.relation_expand_max_deg}"
            )

    if not hasattr(config, 'boundaries') or config.boundaries is None:
        errors.append("boundaries configuration is required but not set")
    else:
        if config.boundaries.ring_epsilon_deg <= 0:
            errors.append(
                f"boundaries.ring_epsilon_deg must be positive, got {config.boundaries.ring_epsilon_deg}"
            )
        if not config.boundaries.dataset_path:
            errors.append("boundaries.dataset_path is required but not set")

    if config.canvas_width <= 0 or config.canvas_height <= 0:
        errors.append(f"canvas size must be positive, got {config.canvas_width}x{config.canvas_height}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
