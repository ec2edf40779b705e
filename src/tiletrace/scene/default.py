"""Default demo scene: three colored spheres in front of a planar film.

Scene layout (world units, y up, camera looking along +z):

    eye:    (3, 3, 0)
    film:   origin (0, 0, 3), 6 x 6
    red:    center (5, 3, 5),  radius 2
    green:  center (0, 5, 10), radius 2
    blue:   center (3, 0, 15), radius 2

Two point lights sit above and to the sides of the spheres so every sphere
shows a lit side and a shadowed side.
"""

from __future__ import annotations

from tiletrace.camera.planar import Camera, Film
from tiletrace.core.vector import BLUE, GREEN, RED, Vector3
from tiletrace.geometry.sphere import Sphere
from tiletrace.lights.point import Light
from tiletrace.scene.scene import Scene

DEFAULT_EYE = (3.0, 3.0, 0.0)
DEFAULT_FILM_ORIGIN = (0.0, 0.0, 3.0)
DEFAULT_FILM_SIZE = 6.0


def create_default_camera() -> Camera:
    """Create the demo camera."""
    return Camera(
        eye=Vector3(*DEFAULT_EYE),
        film=Film(Vector3(*DEFAULT_FILM_ORIGIN), DEFAULT_FILM_SIZE, DEFAULT_FILM_SIZE),
    )


def create_default_spheres() -> list[Sphere]:
    """Create the red, green and blue demo spheres, nearest first."""
    return [
        Sphere(Vector3(5.0, 3.0, 5.0), 2.0, RED),
        Sphere(Vector3(0.0, 5.0, 10.0), 2.0, GREEN),
        Sphere(Vector3(3.0, 0.0, 15.0), 2.0, BLUE),
    ]


def create_default_lights() -> list[Light]:
    """Create the demo lights."""
    return [
        Light(Vector3(-5.0, 10.0, -5.0), 4000.0),
        Light(Vector3(12.0, 8.0, 2.0), 2000.0),
    ]


def create_default_scene(width: int = 500, height: int = 500) -> Scene:
    """Create the demo scene for a frame of the given size.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.

    Returns:
        A new Scene with its own camera, safe to mutate.
    """
    return Scene(
        camera=create_default_camera(),
        spheres=create_default_spheres(),
        lights=create_default_lights(),
        width=width,
        height=height,
    )
