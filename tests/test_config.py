"""Tests for render configuration and logging setup."""

import json
import logging
from pathlib import Path

import pytest


class TestRenderConfig:
    """Tests for RenderConfig defaults and validation."""

    def test_defaults(self):
        """Test the default frame size, grid and pool settings."""
        from tiletrace.config import RenderConfig

        config = RenderConfig()
        assert (config.width, config.height) == (500, 500)
        assert (config.tile_grid_columns, config.tile_grid_rows) == (5, 5)
        assert config.worker_count is None
        assert config.samples_per_pixel == 1
        assert config.arch == "cpu"
        config.validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -3},
            {"tile_grid_columns": 0},
            {"tile_grid_rows": 1.5},
            {"samples_per_pixel": 0},
            {"worker_count": 0},
            {"arch": "tpu"},
            {"log_level": "LOUD"},
        ],
    )
    def test_invalid_values(self, overrides):
        """Test that out-of-range values are rejected."""
        from tiletrace.config import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**overrides).validate()

    def test_explicit_worker_count(self):
        """Test that an explicit worker count is used as-is."""
        from tiletrace.config import RenderConfig

        assert RenderConfig(worker_count=3).resolved_worker_count() == 3

    def test_worker_count_from_cpu_count(self, monkeypatch):
        """Test that the pool size follows the CPU count."""
        from tiletrace import config as config_module

        monkeypatch.setattr(config_module.os, "cpu_count", lambda: 12)
        assert config_module.RenderConfig().resolved_worker_count() == 12

    def test_worker_count_fallback(self, monkeypatch):
        """Test the fallback when the CPU count is unknown."""
        from tiletrace import config as config_module

        monkeypatch.setattr(config_module.os, "cpu_count", lambda: None)
        assert config_module.RenderConfig().resolved_worker_count() == 2

    def test_dict_roundtrip(self):
        """Test to_dict and from_dict."""
        from tiletrace.config import RenderConfig

        config = RenderConfig(width=64, samples_per_pixel=4, worker_count=2)
        assert RenderConfig.from_dict(config.to_dict()) == config

    def test_from_dict_rejects_unknown_keys(self):
        """Test that typos in config keys are reported."""
        from tiletrace.config import RenderConfig

        with pytest.raises(ValueError, match="tile_columns"):
            RenderConfig.from_dict({"tile_columns": 3})


class TestConfigFiles:
    """Tests for load_config and save_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        """Test that a missing config file is not an error."""
        from tiletrace.config import RenderConfig, load_config

        assert load_config(tmp_path / "missing.json") == RenderConfig()

    def test_save_and_load(self, tmp_path: Path):
        """Test that a saved config loads back equal."""
        from tiletrace.config import RenderConfig, load_config, save_config

        path = tmp_path / "config.json"
        config = RenderConfig(width=320, height=200, tile_grid_columns=4, arch="vulkan")
        save_config(config, path)

        assert json.loads(path.read_text())["width"] == 320
        assert load_config(path) == config

    def test_partial_file_keeps_defaults(self, tmp_path: Path):
        """Test that omitted keys keep their default values."""
        from tiletrace.config import load_config

        path = tmp_path / "config.json"
        path.write_text(json.dumps({"samples_per_pixel": 4}))

        config = load_config(path)
        assert config.samples_per_pixel == 4
        assert config.width == 500

    def test_invalid_json(self, tmp_path: Path):
        """Test that malformed JSON raises ValueError."""
        from tiletrace.config import load_config

        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_config(path)

    def test_non_object_json(self, tmp_path: Path):
        """Test that a JSON list is rejected."""
        from tiletrace.config import load_config

        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(path)


class TestLogging:
    """Tests for setup_logging."""

    def test_returns_package_logger_at_level(self):
        """Test that the package logger gets the requested level."""
        from tiletrace.utils.logger import setup_logging

        logger = setup_logging("debug")
        assert logger.name == "tiletrace"
        assert logger.level == logging.DEBUG

        setup_logging(logging.WARNING)
        assert logger.level == logging.WARNING
