"""Render configuration.

Policy knobs of the renderer (frame size, tile grid, worker pool size,
samples per pixel, Taichi backend) live in one dataclass that can be loaded
from and saved to JSON.

Example config.json:

    {
        "width": 500,
        "height": 500,
        "tile_grid_columns": 5,
        "tile_grid_rows": 5,
        "worker_count": null,
        "samples_per_pixel": 4,
        "arch": "cpu",
        "log_level": "INFO"
    }
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Worker count used when the hardware parallelism cannot be determined
FALLBACK_WORKER_COUNT = 2

SUPPORTED_ARCHS = ("cpu", "gpu", "cuda", "vulkan", "metal", "opengl")


@dataclass
class RenderConfig:
    """Configuration for a rendering session.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        tile_grid_columns: Number of tile columns per frame.
        tile_grid_rows: Number of tile rows per frame.
        worker_count: Size of the worker pool. None sizes it to the number
            of CPUs.
        samples_per_pixel: Samples averaged per pixel; above 1 enables
            jittered anti-aliasing.
        arch: Taichi backend name used by the workers.
        log_level: Logging level name.
    """

    width: int = 500
    height: int = 500
    tile_grid_columns: int = 5
    tile_grid_rows: int = 5
    worker_count: int | None = None
    samples_per_pixel: int = 1
    arch: str = "cpu"
    log_level: str = "INFO"

    def validate(self) -> None:
        """Check every value.

        Raises:
            ValueError: If any value is out of range.
        """
        for name in ("width", "height", "tile_grid_columns", "tile_grid_rows", "samples_per_pixel"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

        if self.worker_count is not None and (
            not isinstance(self.worker_count, int) or self.worker_count < 1
        ):
            raise ValueError(
                f"worker_count must be a positive integer or None, got {self.worker_count!r}"
            )

        if self.arch not in SUPPORTED_ARCHS:
            raise ValueError(f"Unknown arch {self.arch!r}, expected one of {SUPPORTED_ARCHS}")

        if not isinstance(self.log_level, str) or not isinstance(
            logging.getLevelName(self.log_level.upper()), int
        ):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    def resolved_worker_count(self) -> int:
        """Return the worker pool size, falling back to the CPU count or 2."""
        if self.worker_count is not None:
            return self.worker_count
        return os.cpu_count() or FALLBACK_WORKER_COUNT

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RenderConfig:
        """Build a validated config from a dictionary.

        Raises:
            ValueError: If the dictionary holds unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

        config = cls(**data)
        config.validate()
        return config


def load_config(path: str | os.PathLike[str]) -> RenderConfig:
    """Load a configuration file.

    A missing file yields the defaults.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid values.
    """
    config_path = Path(path)
    if not config_path.is_file():
        logger.info("No config file at %s, using defaults", config_path)
        return RenderConfig()

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must hold a JSON object")

    config = RenderConfig.from_dict(data)
    logger.info("Loaded configuration from %s", config_path)
    return config


def save_config(config: RenderConfig, path: str | os.PathLike[str]) -> None:
    """Write a configuration file as indented JSON."""
    with Path(path).open("w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=4)
