"""Sphere primitive and ray-sphere intersection.

The intersection solves |origin + t * direction - center|^2 = radius^2 for a
unit direction, using the half-b form:

    oc = origin - center
    b = dot(direction, oc)
    discriminant = b^2 - (dot(oc, oc) - radius^2)

Roots are always reported in ascending order, so the first root is the near
intersection. The same computation exists as a Python method for scene
descriptions and as a Taichi function for the tile kernel.

Example:
    >>> from tiletrace.core.vector import Vector3, RED
    >>> sphere = Sphere(Vector3(0.0, 0.0, 0.0), 1.0, RED)
    >>> sphere.intersect(Vector3(0.0, 0.0, -5.0), Vector3(0.0, 0.0, 1.0))
    [4.0, 6.0]
"""

import math
from dataclasses import dataclass

import taichi as ti

from tiletrace.core.ray import vec3
from tiletrace.core.vector import Color, Vector3


@dataclass(frozen=True)
class Sphere:
    """A colored sphere.

    Attributes:
        center: Center of the sphere in world space.
        radius: Radius, strictly positive.
        color: Base surface color before shading.
    """

    center: Vector3
    radius: float
    color: Color

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")

    def intersect(self, origin: Vector3, direction: Vector3) -> list[float]:
        """Intersect the line origin + t * direction with the sphere.

        Args:
            origin: Start of the ray.
            direction: Unit direction. Roots are only true distances when
                the direction has length 1.

        Returns:
            An empty list on a miss, [t] for a tangent ray, or [t0, t1]
            with t0 < t1. Roots behind the origin are included; callers
            filter them.
        """
        oc = origin - self.center
        b = direction.dot(oc)
        discriminant = b * b - (oc.dot(oc) - self.radius * self.radius)

        if discriminant < 0.0:
            return []
        if discriminant == 0.0:
            return [-b]

        root = math.sqrt(discriminant)
        return [-b - root, -b + root]

    def normal_at(self, point: Vector3) -> Vector3:
        """Outward (unnormalized) surface normal at a point on the sphere."""
        return point - self.center

    def to_values(self) -> tuple[float, ...]:
        """Flatten to (cx, cy, cz, radius, r, g, b)."""
        return (
            *self.center.as_tuple(),
            self.radius,
            *self.color.as_tuple(),
        )

    @classmethod
    def from_values(cls, values) -> "Sphere":
        """Rebuild a sphere from the 7 values produced by to_values()."""
        cx, cy, cz, radius, red, green, blue = (float(v) for v in values)
        return cls(Vector3(cx, cy, cz), radius, Color(red, green, blue))


@ti.func
def intersect_sphere(origin: vec3, direction: vec3, center: vec3, radius: ti.f64):
    """Kernel version of Sphere.intersect.

    Args:
        origin: Start of the ray.
        direction: Unit ray direction.
        center: Sphere center.
        radius: Sphere radius.

    Returns:
        A tuple (count, t0, t1) where count is 0, 1 or 2. For count == 1
        both roots hold the tangent root; t0 <= t1 always.
    """
    oc = origin - center
    b = direction.dot(oc)
    discriminant = b * b - (oc.dot(oc) - radius * radius)

    count = 0
    t0 = ti.cast(0.0, ti.f64)
    t1 = ti.cast(0.0, ti.f64)

    if discriminant == 0.0:
        count = 1
        t0 = -b
        t1 = -b
    elif discriminant > 0.0:
        root = ti.sqrt(discriminant)
        count = 2
        t0 = -b - root
        t1 = -b + root

    return count, t0, t1
