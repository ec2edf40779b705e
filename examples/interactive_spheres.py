#!/usr/bin/env python3
"""Interactive sphere renderer with keyboard camera controls.

This script opens a preview window and renders the sphere scene tile by tile
on a pool of worker processes. Every camera move starts a new render pass;
tiles still in flight from the previous pass are discarded when they arrive.

Usage:
    python examples/interactive_spheres.py [--workers N] [--samples N]

Controls:
    - w / s: move forward / back
    - W / S (shift): move only the eye forward / back (zoom)
    - a / d or Left / Right arrows: move left / right
    - Up / Down arrows: move up / down
    - Escape: quit
"""

from __future__ import annotations

import argparse
import platform
import sys

import taichi as ti

from tiletrace.config import RenderConfig, load_config
from tiletrace.core.coordinator import RenderCoordinator
from tiletrace.preview.interactive import WindowPresenter
from tiletrace.scene.default import create_default_scene
from tiletrace.utils.logger import setup_logging
from tiletrace.workers.process import ProcessTransport


def initialize_taichi() -> str:
    """Initialize Taichi for the window with the best available backend.

    On macOS, prefers Metal. Taichi falls back to CPU by itself if the
    requested GPU backend is unavailable.

    Returns:
        Name of the requested backend.
    """
    if platform.system() == "Darwin":
        ti.init(arch=ti.metal)
        return "Metal (GPU)"

    ti.init(arch=ti.gpu)
    return "GPU"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive tiled sphere renderer.")
    parser.add_argument("--config", type=str, help="JSON render configuration")
    parser.add_argument("--workers", type=int, help="Worker processes (default: one per CPU)")
    parser.add_argument("--samples", type=int, help="Samples per pixel")
    return parser.parse_args()


def main() -> int:
    """Main entry point for the interactive sphere renderer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args()
    config = load_config(args.config) if args.config else RenderConfig()
    if args.workers is not None:
        config.worker_count = args.workers
    if args.samples is not None:
        config.samples_per_pixel = args.samples
    config.validate()
    setup_logging(config.log_level)

    if not WindowPresenter.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    scene = create_default_scene(config.width, config.height)
    presenter = WindowPresenter(config.width, config.height)

    print(f"Starting {config.resolved_worker_count()} workers...")
    print("  - w/a/s/d and arrow keys move the camera, shift+w/s zooms")
    print("  - Escape or close the window to exit")

    with ProcessTransport(
        config.resolved_worker_count(),
        arch=config.arch,
        samples_per_pixel=config.samples_per_pixel,
        log_level=config.log_level,
    ) as transport:
        coordinator = RenderCoordinator(
            scene,
            transport,
            presenter,
            columns=config.tile_grid_columns,
            rows=config.tile_grid_rows,
        )
        try:
            presenter.run(coordinator)
        except KeyboardInterrupt:
            print("\nInterrupted by user.")
        finally:
            presenter.close()
            print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
