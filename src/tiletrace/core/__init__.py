"""Core rendering module.

Components:
    vector: Python-side Vector3 and Color value types
    ray: Taichi vector type and ray helpers used inside kernels
    tile: Tiles, tile results and frame partitioning
    renderer: TileRenderer, the per-worker Taichi tile kernel
    coordinator: RenderCoordinator, the generation-tagged render loop
"""

from .ray import EPSILON, ray_at, unit, vec3
from .tile import Tile, TileResult, partition_frame
from .vector import BACKGROUND, BLACK, BLUE, GREEN, RED, Color, Vector3, clamp

# Note: renderer and coordinator are NOT imported here to avoid circular imports.
# Import directly from tiletrace.core.renderer or tiletrace.core.coordinator.

__all__ = [
    "Vector3",
    "Color",
    "clamp",
    "BLACK",
    "RED",
    "GREEN",
    "BLUE",
    "BACKGROUND",
    "vec3",
    "ray_at",
    "unit",
    "EPSILON",
    "Tile",
    "TileResult",
    "partition_frame",
]
