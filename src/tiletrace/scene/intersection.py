"""Scene-level nearest-hit queries.

Primary rays are tested against every sphere (brute force, no acceleration
structure). A root counts only if t >= EPSILON; among all valid roots the
smallest wins. Spheres are scanned in declaration order with a strict
less-than comparison, so when two spheres share the nearest t the one
declared first is kept.

Both a Python version (for scene probing) and a kernel version (for tile
rendering) are provided and follow the same policy.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import taichi as ti

from tiletrace.core.ray import EPSILON, T_MAX, row_vec3, vec3
from tiletrace.core.vector import Vector3
from tiletrace.geometry.sphere import Sphere, intersect_sphere


@dataclass(frozen=True)
class Hit:
    """Result of a nearest-hit query.

    Attributes:
        sphere: The sphere that was hit.
        index: Position of that sphere in the scene's sphere sequence.
        t: Ray parameter of the hit.
        point: World-space hit point.
    """

    sphere: Sphere
    index: int
    t: float
    point: Vector3


def nearest_hit(spheres: Sequence[Sphere], origin: Vector3, direction: Vector3) -> Hit | None:
    """Find the nearest sphere hit along a ray.

    Args:
        spheres: Spheres in declaration order.
        origin: Start of the ray.
        direction: Unit ray direction.

    Returns:
        The nearest Hit, or None if no sphere has a root t >= EPSILON.
    """
    best_index = -1
    best_t = T_MAX

    for index, sphere in enumerate(spheres):
        for t in sphere.intersect(origin, direction):
            if t >= EPSILON and t < best_t:
                best_index = index
                best_t = t
                break

    if best_index < 0:
        return None

    return Hit(
        sphere=spheres[best_index],
        index=best_index,
        t=best_t,
        point=origin + direction * best_t,
    )


@ti.func
def nearest_sphere(spheres: ti.template(), num_spheres: ti.i32, origin: vec3, direction: vec3):
    """Kernel version of nearest_hit over a (n, 7) sphere array.

    Returns:
        A tuple (index, t). index is -1 when nothing was hit.
    """
    best_index = -1
    best_t = ti.cast(T_MAX, ti.f64)

    for i in range(num_spheres):
        count, t0, t1 = intersect_sphere(origin, direction, row_vec3(spheres, i, 0), spheres[i, 3])
        if count > 0:
            if t0 >= EPSILON and t0 < best_t:
                best_index = i
                best_t = t0
            elif t1 >= EPSILON and t1 < best_t:
                best_index = i
                best_t = t1

    return best_index, best_t
