"""Planar film camera for primary ray generation.

The camera is an eye point looking through a rectangular film that lies in a
plane of constant z. Normalized screen coordinates map onto the film:

- u = 0: left edge, u = 1: right edge
- v = 0: top edge, v = 1: bottom edge (v is flipped so that increasing v
  moves down the image, matching pixel row order)

Camera movement is a small set of one-unit translations. Most of them move
the eye and the film together so the projection plane tracks the eye; the two
"eye" variants move only the eye, which changes the field of view.

Example:
    >>> from tiletrace.core.vector import Vector3
    >>> camera = Camera(Vector3(3.0, 3.0, 0.0), Film(Vector3(0.0, 0.0, 3.0), 6.0, 6.0))
    >>> camera.cast(0.5, 0.5)
    Vector3(x=0.0, y=0.0, z=1.0)
"""

from dataclasses import dataclass

import taichi as ti

from tiletrace.core.ray import unit, vec3
from tiletrace.core.vector import Vector3

# Distance covered by a single movement command, in world units
STEP = 1.0


@dataclass
class Film:
    """Projection surface in world space.

    Attributes:
        origin: Lower-left reference corner of the film.
        width: Extent of the film along x.
        height: Extent of the film along y.
    """

    origin: Vector3
    width: float
    height: float

    def project(self, u: float, v: float) -> Vector3:
        """Map normalized film offsets to a world-space point on the film."""
        return Vector3(
            self.origin.x + self.width * u,
            self.origin.y + self.height - self.height * v,
            self.origin.z,
        )


@dataclass
class Camera:
    """Eye point plus film.

    Attributes:
        eye: Position all primary rays start from.
        film: The projection surface rays pass through.
    """

    eye: Vector3
    film: Film

    def cast(self, u: float, v: float) -> Vector3:
        """Return the unit direction from the eye through film point (u, v).

        The eye must not lie on the film; a zero-length direction cannot be
        normalized.
        """
        return (self.film.project(u, v) - self.eye).unit()

    def translate(self, delta: Vector3, *, move_film: bool = True) -> None:
        """Move the eye by delta, and the film with it unless move_film is False."""
        self.eye = self.eye + delta
        if move_film:
            self.film.origin = self.film.origin + delta

    def move_left(self) -> None:
        self.translate(Vector3(-STEP, 0.0, 0.0))

    def move_right(self) -> None:
        self.translate(Vector3(STEP, 0.0, 0.0))

    def move_up(self) -> None:
        self.translate(Vector3(0.0, STEP, 0.0))

    def move_down(self) -> None:
        self.translate(Vector3(0.0, -STEP, 0.0))

    def move_forward(self) -> None:
        self.translate(Vector3(0.0, 0.0, STEP))

    def move_back(self) -> None:
        self.translate(Vector3(0.0, 0.0, -STEP))

    def move_eye_forward(self) -> None:
        self.translate(Vector3(0.0, 0.0, STEP), move_film=False)

    def move_eye_back(self) -> None:
        self.translate(Vector3(0.0, 0.0, -STEP), move_film=False)

    def to_values(self) -> tuple[float, ...]:
        """Flatten to (eye xyz, film origin xyz, film width, film height)."""
        return (
            *self.eye.as_tuple(),
            *self.film.origin.as_tuple(),
            self.film.width,
            self.film.height,
        )

    @classmethod
    def from_values(cls, values) -> "Camera":
        """Rebuild a camera from the 8 values produced by to_values()."""
        ex, ey, ez, ox, oy, oz, width, height = (float(v) for v in values)
        return cls(Vector3(ex, ey, ez), Film(Vector3(ox, oy, oz), width, height))


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def camera_eye(camera: ti.template()) -> vec3:
    """Read the eye position from a flattened camera array."""
    return vec3(camera[0], camera[1], camera[2])


@ti.func
def cast_ray(camera: ti.template(), u: ti.f64, v: ti.f64) -> vec3:
    """Kernel version of Camera.cast on a flattened camera array.

    Args:
        camera: 1D float64 array laid out as Camera.to_values().
        u: Horizontal film offset in [0, 1].
        v: Vertical film offset in [0, 1], 0 at the top.

    Returns:
        Unit direction from the eye through the projected film point.
    """
    point = vec3(
        camera[3] + camera[6] * u,
        camera[4] + camera[7] - camera[7] * v,
        camera[5],
    )
    return unit(point - camera_eye(camera))
