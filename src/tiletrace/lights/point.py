"""Point lights with hard shadows.

A point light contributes power to a surface point with inverse-square
falloff and a Lambertian cosine term:

    contribution = power * cos(theta) / (4 * pi * distance^2)

If a shadow ray from the point toward the light hits any sphere at
t >= EPSILON, the point is in shadow and the light contributes exactly 0.
There is no partial shadowing and no check that the occluder lies between the
point and the light.

The cosine is not clamped: a light behind the surface gives a
negative contribution. The sum over all lights is clamped once when the
surface color is shaded (Color.shade), so lights can cancel each other.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from tiletrace.core.ray import EPSILON, row_vec3, unit, vec3
from tiletrace.core.vector import Vector3
from tiletrace.geometry.sphere import Sphere, intersect_sphere


@dataclass(frozen=True)
class Light:
    """An isotropic point light.

    Attributes:
        origin: Position of the light.
        power: Radiant intensity, strictly positive.
    """

    origin: Vector3
    power: float

    def __post_init__(self) -> None:
        if not self.power > 0.0:
            raise ValueError(f"Light power must be positive, got {self.power}")

    def illuminate(self, point: Vector3, normal: Vector3, spheres: Sequence[Sphere]) -> float:
        """Compute the power this light delivers to a surface point.

        Args:
            point: The surface point being shaded.
            normal: Surface normal at the point; need not be unit length.
            spheres: Every sphere in the scene, tested as occluders.

        Returns:
            0.0 when the point is in shadow, otherwise the (possibly
            negative) Lambertian contribution.
        """
        ray = self.origin - point
        direction = ray.unit()

        if is_occluded(point, direction, spheres):
            return 0.0

        cosine = normal.dot(direction) / normal.length()
        return self.power * cosine / (4.0 * math.pi * ray.dot(ray))

    def to_values(self) -> tuple[float, ...]:
        """Flatten to (x, y, z, power)."""
        return (*self.origin.as_tuple(), self.power)

    @classmethod
    def from_values(cls, values) -> "Light":
        """Rebuild a light from the 4 values produced by to_values()."""
        x, y, z, power = (float(v) for v in values)
        return cls(Vector3(x, y, z), power)


def is_occluded(point: Vector3, direction: Vector3, spheres: Sequence[Sphere]) -> bool:
    """Return True if any sphere has a root t >= EPSILON along the shadow ray."""
    for sphere in spheres:
        if any(t >= EPSILON for t in sphere.intersect(point, direction)):
            return True
    return False


# =============================================================================
# Kernel-side shadow testing and illumination
# =============================================================================


@ti.func
def occluded(spheres: ti.template(), num_spheres: ti.i32, point: vec3, direction: vec3) -> ti.i32:
    """Kernel version of is_occluded over a (n, 7) sphere array."""
    blocked = 0
    for i in range(num_spheres):
        if blocked == 0:
            count, t0, t1 = intersect_sphere(point, direction, row_vec3(spheres, i, 0), spheres[i, 3])
            if count > 0 and (t0 >= EPSILON or t1 >= EPSILON):
                blocked = 1
    return blocked


@ti.func
def illuminate(
    lights: ti.template(),
    index: ti.i32,
    spheres: ti.template(),
    num_spheres: ti.i32,
    point: vec3,
    normal: vec3,
) -> ti.f64:
    """Kernel version of Light.illuminate for row `index` of a (m, 4) light array."""
    ray = row_vec3(lights, index, 0) - point
    direction = unit(ray)

    contribution = ti.cast(0.0, ti.f64)
    if occluded(spheres, num_spheres, point, direction) == 0:
        cosine = normal.dot(direction) / ti.sqrt(normal.dot(normal))
        contribution = lights[index, 3] * cosine / (4.0 * tm.pi * ray.dot(ray))
    return contribution
