"""Tests for configuration defaults, environment overrides and validation."""

import os
from unittest.mock import patch

import pytest

from mapcanvas.config import APIConfig, BoundaryConfig, FetchConfig, MapConfig, get_config, validate_config


class TestDefaults:
    def test_ring_epsilon(self) -> None:
        assert BoundaryConfig().ring_epsilon_deg == 1e-4

    def test_fetch_timing(self) -> None:
        cfg = FetchConfig()
        assert cfg.debounce_s == 5.0
        assert cfg.rate_limit_cooldown_s == 120.0

    def test_global_instance(self) -> None:
        assert get_config() is get_config()
        validate_config(get_config())


class TestEnvironment:
    def test_overrides(self) -> None:
        env = {
            "MAPCANVAS_OVERPASS_URL": "http://localhost:12345/api/interpreter",
            "MAPCANVAS_CACHE_DIR": "/tmp/mapcanvas-cache",
            "MAPCANVAS_BOUNDARIES_PATH": "/data/countries.json",
        }
        with patch.dict(os.environ, env, clear=False):
            assert APIConfig().overpass_url == "http://localhost:12345/api/interpreter"
            assert FetchConfig().cache_dir == "/tmp/mapcanvas-cache"
            assert BoundaryConfig().dataset_path == "/data/countries.json"


class TestValidation:
    def test_all_errors_reported(self) -> None:
        cfg = MapConfig()
        cfg.api.overpass_url = ""
        cfg.api.max_retries = 0
        cfg.boundaries.ring_epsilon_deg = 0

        with pytest.raises(ValueError) as exc_info:
            validate_config(cfg)

        message = str(exc_info.value)
        assert "api.overpass_url" in message
        assert "api.max_retries" in message
        assert "boundaries.ring_epsilon_deg" in message

    def test_canvas_size(self) -> None:
        cfg = MapConfig(canvas_width=0)
        with pytest.raises(ValueError, match="canvas size"):
            validate_config(cfg)
