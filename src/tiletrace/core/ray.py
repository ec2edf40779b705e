"""Kernel-side vector type and ray helpers.

The tile kernel runs in float64 so that its results agree with the
pure-Python shading path in ``tiletrace.core.vector``. Scene data reaches the
kernel as flat numpy arrays; the helpers here read those arrays back into
``vec3`` values inside ``@ti.func`` code.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> @ti.kernel
    ... def depth() -> ti.f64:
    ...     return ray_at(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), 2.0).z
"""

import taichi as ti

# Double-precision 3-vector used throughout the kernels
vec3 = ti.types.vector(3, ti.f64)

# Roots closer than this are self-intersections or lie behind the ray origin
EPSILON = 1e-10

# Ray parameter used as "no hit yet" when scanning for the nearest root
T_MAX = 1e300


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f64) -> vec3:
    """Compute the point origin + t * direction."""
    return origin + t * direction


@ti.func
def unit(v: vec3) -> vec3:
    """Normalize a vector. Zero-length input is a caller error."""
    return v / ti.sqrt(v.dot(v))


@ti.func
def row_vec3(data: ti.template(), row: ti.i32, column: ti.i32) -> vec3:
    """Read three consecutive columns of a 2D array row as a vec3."""
    return vec3(data[row, column], data[row, column + 1], data[row, column + 2])
