#!/usr/bin/env python3
"""Render the sphere scene to a PNG file.

The frame is cut into tiles and rendered by a pool of worker processes, each
holding its own copy of the scene. The PNG is written once every tile of the
frame has come back.

Usage:
    python examples/render_spheres.py [options]

Options:
    --config PATH       JSON render configuration (default: none)
    --scene PATH        JSON scene description (default: built-in spheres)
    --width WIDTH       Image width in pixels
    --height HEIGHT     Image height in pixels
    --columns N         Tile grid columns
    --rows N            Tile grid rows
    --workers N         Worker processes (default: one per CPU)
    --samples N         Samples per pixel; above 1 enables anti-aliasing
    --arch ARCH         Taichi backend used by the workers
    --inline            Render in this process instead of worker processes
    --output OUTPUT     Output file path (default: spheres.png)
    --log-level LEVEL   Logging level

Example:
    python examples/render_spheres.py --width 800 --height 800 --samples 4
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from tiletrace.config import RenderConfig, load_config
from tiletrace.core.coordinator import RenderCoordinator
from tiletrace.preview.export import PngPresenter
from tiletrace.scene.default import create_default_scene
from tiletrace.scene.scene import Scene
from tiletrace.utils.logger import setup_logging
from tiletrace.workers.process import ProcessTransport
from tiletrace.workers.transport import InlineTransport, WorkerTransport

logger = logging.getLogger("tiletrace.examples.render_spheres")

# Command-line option -> RenderConfig field
OVERRIDES = {
    "width": "width",
    "height": "height",
    "columns": "tile_grid_columns",
    "rows": "tile_grid_rows",
    "workers": "worker_count",
    "samples": "samples_per_pixel",
    "arch": "arch",
    "log_level": "log_level",
}


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the sphere scene to a PNG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, help="JSON render configuration")
    parser.add_argument("--scene", type=Path, help="JSON scene description")
    parser.add_argument("--width", type=int, help="Image width in pixels")
    parser.add_argument("--height", type=int, help="Image height in pixels")
    parser.add_argument("--columns", type=int, help="Tile grid columns")
    parser.add_argument("--rows", type=int, help="Tile grid rows")
    parser.add_argument("--workers", type=int, help="Worker processes (default: one per CPU)")
    parser.add_argument("--samples", type=int, help="Samples per pixel")
    parser.add_argument("--arch", type=str, help="Taichi backend (cpu, gpu, vulkan, ...)")
    parser.add_argument(
        "--inline",
        action="store_true",
        help="Render in this process instead of worker processes",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="spheres.png",
        help="Output file path (default: spheres.png)",
    )
    parser.add_argument("--log-level", type=str, help="Logging level (default: INFO)")
    return parser.parse_args()


def build_config(args: argparse.Namespace) -> RenderConfig:
    """Load the config file, if any, and apply command-line overrides."""
    config = load_config(args.config) if args.config else RenderConfig()
    data = config.to_dict()
    for option, field_name in OVERRIDES.items():
        value = getattr(args, option)
        if value is not None:
            data[field_name] = value
    return RenderConfig.from_dict(data)


def load_scene(path: Path | None, config: RenderConfig) -> Scene:
    """Load a scene description, or build the default scene at the configured size."""
    if path is None:
        return create_default_scene(config.width, config.height)

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    # The configured frame size wins over the one stored in the file
    data["width"], data["height"] = config.width, config.height
    return Scene.from_dict(data)


def create_transport(config: RenderConfig, inline: bool) -> WorkerTransport:
    if inline:
        ti.init(arch=getattr(ti, config.arch), default_fp=ti.f64)
        return InlineTransport(1, samples_per_pixel=config.samples_per_pixel)

    return ProcessTransport(
        config.resolved_worker_count(),
        arch=config.arch,
        samples_per_pixel=config.samples_per_pixel,
        log_level=config.log_level,
    )


def render_spheres(config: RenderConfig, scene: Scene, output_path: str, inline: bool) -> Path:
    """Render one frame of the scene and save it as PNG.

    Returns:
        Path to the saved image file.
    """
    output_file = Path(output_path)
    presenter = PngPresenter(scene.width, scene.height, output_file)

    start_time = time.time()
    with create_transport(config, inline) as transport:
        coordinator = RenderCoordinator(
            scene,
            transport,
            presenter,
            columns=config.tile_grid_columns,
            rows=config.tile_grid_rows,
        )
        coordinator.render()
        coordinator.wait()

    logger.info("Rendered %r in %.2fs", scene, time.time() - start_time)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    try:
        config = build_config(args)
        setup_logging(config.log_level)
        scene = load_scene(args.scene, config)
        output_file = render_spheres(config, scene, args.output, args.inline)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Saved to: {output_file.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
