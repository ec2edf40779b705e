"""Tile renderer: shades the pixels of one tile against a scene snapshot.

Each worker owns one TileRenderer. The renderer holds a private copy of the
scene decoded from the latest broadcast snapshot and renders tiles on demand.
Per-pixel work runs in a Taichi kernel parallelized over the pixels of the
tile:

1. Cast a primary ray from the eye through the pixel's film point
2. Find the nearest sphere hit (t >= EPSILON, first-declared wins ties)
3. On a hit, sum the contributions of all lights (with shadow rays) and
   shade the sphere color by the clamped sum; on a miss use the background
4. Average N samples per pixel, jittered within the pixel when N > 1

The kernel accumulates float64 colors; the result is clamped to [0, 255],
truncated to bytes and returned as row-major RGBA.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from tiletrace.scene.default import create_default_scene
    >>> from tiletrace.core.tile import Tile
    >>> scene = create_default_scene(100, 100)
    >>> renderer = TileRenderer()
    >>> renderer.load(scene.serialize())
    >>> pixels = renderer.render(Tile(0, 0, 20, 20, generation=1))
    >>> len(pixels)
    1600
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti

from tiletrace.camera.planar import camera_eye, cast_ray
from tiletrace.core.ray import ray_at, row_vec3, vec3
from tiletrace.core.tile import Tile
from tiletrace.core.vector import BACKGROUND
from tiletrace.lights.point import illuminate
from tiletrace.scene.intersection import nearest_sphere
from tiletrace.scene.scene import Scene

logger = logging.getLogger(__name__)

# Miss color as plain floats, read as compile-time constants by the kernel
BACKGROUND_RED, BACKGROUND_GREEN, BACKGROUND_BLUE = BACKGROUND.as_tuple()


# =============================================================================
# Kernel
# =============================================================================


@ti.func
def _trace(
    camera: ti.template(),
    spheres: ti.template(),
    num_spheres: ti.i32,
    lights: ti.template(),
    num_lights: ti.i32,
    u: ti.f64,
    v: ti.f64,
) -> vec3:
    """Shade the primary ray through film point (u, v)."""
    eye = camera_eye(camera)
    direction = cast_ray(camera, u, v)

    color = vec3(BACKGROUND_RED, BACKGROUND_GREEN, BACKGROUND_BLUE)
    index, t = nearest_sphere(spheres, num_spheres, eye, direction)

    if index >= 0:
        point = ray_at(eye, direction, t)
        normal = point - row_vec3(spheres, index, 0)

        power = ti.cast(0.0, ti.f64)
        for k in range(num_lights):
            power += illuminate(lights, k, spheres, num_spheres, point, normal)

        factor = ti.min(ti.max(power, 0.0), 1.0)
        color = row_vec3(spheres, index, 4) * factor

    return color


@ti.kernel
def _render_tile_kernel(
    accum: ti.types.ndarray(dtype=ti.f64, ndim=3),
    camera: ti.types.ndarray(dtype=ti.f64, ndim=1),
    spheres: ti.types.ndarray(dtype=ti.f64, ndim=2),
    num_spheres: ti.i32,
    lights: ti.types.ndarray(dtype=ti.f64, ndim=2),
    num_lights: ti.i32,
    tile_x: ti.i32,
    tile_y: ti.i32,
    frame_width: ti.i32,
    frame_height: ti.i32,
    samples: ti.i32,
    jitter: ti.i32,
):
    for i, j in ti.ndrange(accum.shape[0], accum.shape[1]):
        x = ti.cast(tile_x + j, ti.f64)
        y = ti.cast(tile_y + i, ti.f64)
        weight = 1.0 / ti.cast(samples, ti.f64)

        color = vec3(0.0, 0.0, 0.0)
        for _s in range(samples):
            dx = ti.cast(0.0, ti.f64)
            dy = ti.cast(0.0, ti.f64)
            if jitter != 0:
                dx = ti.random(ti.f64)
                dy = ti.random(ti.f64)

            u = (x + dx) / ti.cast(frame_width, ti.f64)
            v = (y + dy) / ti.cast(frame_height, ti.f64)
            color += _trace(camera, spheres, num_spheres, lights, num_lights, u, v) * weight

        for c in ti.static(range(3)):
            accum[i, j, c] = color[c]


def _padded(rows: npt.NDArray[np.float64], columns: int) -> npt.NDArray[np.float64]:
    """Return a contiguous array with at least one row.

    Empty sphere or light lists are passed to the kernel as a single zero
    row together with a count of 0.
    """
    if rows.shape[0] == 0:
        return np.zeros((1, columns), dtype=np.float64)
    return np.ascontiguousarray(rows, dtype=np.float64)


def to_rgba_bytes(accum: npt.NDArray[np.float64]) -> bytes:
    """Clamp, truncate and pack an (h, w, 3) float color array as RGBA bytes."""
    height, width, _ = accum.shape
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = np.clip(accum, 0.0, 255.0).astype(np.uint8)
    rgba[..., 3] = 255
    return rgba.tobytes()


# =============================================================================
# Renderer
# =============================================================================


class TileRenderer:
    """Renders tiles against a private scene copy.

    The renderer must be loaded with a snapshot before rendering. Loading a
    new snapshot replaces the scene for all subsequent tiles; tiles already
    rendered are unaffected.

    Attributes:
        samples_per_pixel: Samples averaged per pixel. Values above 1 enable
            random jitter within the pixel (anti-aliasing).
    """

    def __init__(self, samples_per_pixel: int = 1) -> None:
        """Initialize the renderer.

        Args:
            samples_per_pixel: Samples per pixel, at least 1.

        Raises:
            ValueError: If samples_per_pixel is less than 1.
        """
        if samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {samples_per_pixel}")
        self.samples_per_pixel = samples_per_pixel
        self._scene: Scene | None = None
        self._camera: npt.NDArray[np.float64] | None = None
        self._spheres: npt.NDArray[np.float64] | None = None
        self._lights: npt.NDArray[np.float64] | None = None

    @property
    def scene(self) -> Scene | None:
        """The scene copy tiles are currently rendered against."""
        return self._scene

    def load(self, snapshot: bytes) -> Scene:
        """Replace the scene with one decoded from a snapshot.

        Raises:
            MalformedSceneData: If the snapshot cannot be decoded. The
                previously loaded scene is kept in that case.
        """
        scene = Scene.deserialize(snapshot)
        camera, spheres, lights = scene.to_arrays()

        self._scene = scene
        self._camera = np.ascontiguousarray(camera)
        self._spheres = _padded(spheres, 7)
        self._lights = _padded(lights, 4)
        logger.debug("Loaded %r", scene)
        return scene

    def render_colors(self, tile: Tile) -> npt.NDArray[np.float64]:
        """Render a tile to an unclamped (height, width, 3) float64 color array.

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        if self._scene is None:
            raise RuntimeError("No scene loaded. Call load() with a snapshot first.")

        scene = self._scene
        accum = np.zeros((tile.height, tile.width, 3), dtype=np.float64)
        if tile.pixel_count == 0:
            return accum

        _render_tile_kernel(
            accum,
            self._camera,
            self._spheres,
            len(scene.spheres),
            self._lights,
            len(scene.lights),
            tile.x,
            tile.y,
            scene.width,
            scene.height,
            self.samples_per_pixel,
            1 if self.samples_per_pixel > 1 else 0,
        )
        return accum

    def render(self, tile: Tile) -> bytes:
        """Render a tile to row-major RGBA bytes of length 4 * width * height.

        Raises:
            RuntimeError: If no scene has been loaded.
        """
        return to_rgba_bytes(self.render_colors(tile))

    def __repr__(self) -> str:
        return f"TileRenderer(samples_per_pixel={self.samples_per_pixel}, scene={self._scene!r})"
