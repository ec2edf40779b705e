"""Camera module.

The camera is an eye point plus a film rectangle parallel to the XY plane.
Film coordinates (u, v) in [0, 1] run left to right and top to bottom.
"""

from .planar import STEP, Camera, Film, camera_eye, cast_ray

__all__ = ["Camera", "Film", "STEP", "camera_eye", "cast_ray"]
