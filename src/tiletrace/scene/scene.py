"""Scene container: camera, spheres, lights and target frame size.

The Scene is owned by the render coordinator. Only the camera changes during
a session, through apply_command(); spheres and lights are fixed once the
scene is built. Workers never see the live Scene: they receive a snapshot
from serialize() and rebuild their own copy with Scene.deserialize().

Example:
    >>> from tiletrace.scene.default import create_default_scene
    >>> scene = create_default_scene(200, 200)
    >>> scene.apply_command("ArrowLeft")
    True
    >>> scene.apply_command("q")
    False
    >>> copy = Scene.deserialize(scene.serialize())
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import numpy as np
import numpy.typing as npt

from tiletrace.camera.planar import Camera, Film
from tiletrace.core.vector import BACKGROUND, Color, Vector3
from tiletrace.geometry.sphere import Sphere
from tiletrace.lights.point import Light
from tiletrace.scene.commands import Command, resolve_command
from tiletrace.scene.intersection import nearest_hit
from tiletrace.scene.serialization import deserialize_scene, serialize_scene

logger = logging.getLogger(__name__)


class Scene:
    """Everything needed to render one frame.

    Attributes:
        camera: The (mutable) camera.
        spheres: Spheres in declaration order; earlier spheres win ties.
        lights: Point lights.
        width: Target frame width in pixels.
        height: Target frame height in pixels.
    """

    def __init__(
        self,
        camera: Camera,
        spheres: Iterable[Sphere],
        lights: Iterable[Light],
        width: int,
        height: int,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Frame size must be positive, got {width}x{height}")
        self.camera = camera
        self.spheres: tuple[Sphere, ...] = tuple(spheres)
        self.lights: tuple[Light, ...] = tuple(lights)
        self.width = int(width)
        self.height = int(height)

    # =========================================================================
    # Camera Commands
    # =========================================================================

    def apply_command(self, identifier: object) -> bool:
        """Apply a camera movement.

        Args:
            identifier: A Command, a command name, or a bound key identifier
                (see tiletrace.scene.commands.KEY_BINDINGS).

        Returns:
            True if the camera moved and the frame needs re-rendering,
            False if the identifier was not recognized.
        """
        command = resolve_command(identifier)
        if command is None:
            logger.debug("Ignoring unrecognized input %r", identifier)
            return False

        camera = self.camera
        actions = {
            Command.MOVE_LEFT: camera.move_left,
            Command.MOVE_RIGHT: camera.move_right,
            Command.MOVE_UP: camera.move_up,
            Command.MOVE_DOWN: camera.move_down,
            Command.MOVE_FORWARD: camera.move_forward,
            Command.MOVE_BACK: camera.move_back,
            Command.MOVE_EYE_FORWARD: camera.move_eye_forward,
            Command.MOVE_EYE_BACK: camera.move_eye_back,
        }
        actions[command]()
        logger.debug("Applied %s, eye now at %s", command.value, camera.eye)
        return True

    # =========================================================================
    # Shading (pure Python path)
    # =========================================================================

    def color_at(self, u: float, v: float) -> Color:
        """Shade the primary ray through normalized film point (u, v).

        This follows exactly the policy of the tile kernel and is used to
        trace single rays without launching a kernel.
        """
        eye = self.camera.eye
        direction = self.camera.cast(u, v)

        hit = nearest_hit(self.spheres, eye, direction)
        if hit is None:
            return BACKGROUND

        normal = hit.sphere.normal_at(hit.point)
        power = sum(light.illuminate(hit.point, normal, self.spheres) for light in self.lights)
        return hit.sphere.color.shade(power)

    def pixel_color(self, x: float, y: float) -> Color:
        """Shade the primary ray through frame pixel (x, y)."""
        return self.color_at(x / self.width, y / self.height)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def serialize(self) -> bytes:
        """Return an independent binary snapshot of the scene."""
        return serialize_scene(self)

    @classmethod
    def deserialize(cls, data: bytes) -> Scene:
        """Rebuild a scene from serialize() output.

        Raises:
            MalformedSceneData: If the snapshot cannot be decoded.
        """
        return deserialize_scene(data)

    def to_arrays(
        self,
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """Flatten the scene into the float64 arrays consumed by the tile kernel.

        Returns:
            Tuple (camera, spheres, lights) of shapes (8,), (n, 7), (m, 4).
        """
        camera = np.array(self.camera.to_values(), dtype=np.float64)
        spheres = np.array([s.to_values() for s in self.spheres], dtype=np.float64)
        lights = np.array([light.to_values() for light in self.lights], dtype=np.float64)
        return camera, spheres.reshape(-1, 7), lights.reshape(-1, 4)

    # =========================================================================
    # Scene Descriptions
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON scene files)."""
        film = self.camera.film
        return {
            "width": self.width,
            "height": self.height,
            "camera": {
                "eye": list(self.camera.eye.as_tuple()),
                "film": {
                    "origin": list(film.origin.as_tuple()),
                    "width": film.width,
                    "height": film.height,
                },
            },
            "spheres": [
                {
                    "center": list(s.center.as_tuple()),
                    "radius": s.radius,
                    "color": list(s.color.as_tuple()),
                }
                for s in self.spheres
            ],
            "lights": [
                {"origin": list(light.origin.as_tuple()), "power": light.power}
                for light in self.lights
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scene:
        """Load a scene from a dictionary produced by to_dict().

        Raises:
            ValueError: If a required key is missing or a value is invalid.
        """
        try:
            camera_data = data["camera"]
            film_data = camera_data["film"]
            camera = Camera(
                eye=Vector3.from_sequence(camera_data["eye"]),
                film=Film(
                    origin=Vector3.from_sequence(film_data["origin"]),
                    width=float(film_data["width"]),
                    height=float(film_data["height"]),
                ),
            )
            spheres = [
                Sphere(
                    center=Vector3.from_sequence(item["center"]),
                    radius=float(item["radius"]),
                    color=Color(*(float(c) for c in item["color"])),
                )
                for item in data.get("spheres", [])
            ]
            lights = [
                Light(origin=Vector3.from_sequence(item["origin"]), power=float(item["power"]))
                for item in data.get("lights", [])
            ]
            return cls(camera, spheres, lights, int(data["width"]), int(data["height"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid scene description: {exc!r}") from exc

    def __repr__(self) -> str:
        return (
            f"Scene({self.width}x{self.height}, spheres={len(self.spheres)}, "
            f"lights={len(self.lights)}, eye={self.camera.eye})"
        )
