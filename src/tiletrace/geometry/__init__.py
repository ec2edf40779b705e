"""Geometry module.

Components:
    sphere: Sphere primitive with Python and Taichi ray-sphere intersection
"""

from .sphere import Sphere, intersect_sphere

__all__ = ["Sphere", "intersect_sphere"]
