"""Binary scene snapshots for broadcasting to workers.

Layout (all little-endian):

    header: 4 x uint32   width, height, sphere_count, light_count
    body:   float64[]    camera (8 values)
                         sphere_count blocks of 7 values
                         (center x, y, z, radius, red, green, blue)
                         light_count blocks of 4 values
                         (origin x, y, z, power)

A snapshot is plain bytes with no references into the live scene, so a
worker's copy cannot observe later camera moves. Floats are stored verbatim,
making the round trip bit-exact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from tiletrace.camera.planar import Camera
from tiletrace.geometry.sphere import Sphere
from tiletrace.lights.point import Light

if TYPE_CHECKING:
    from tiletrace.scene.scene import Scene

HEADER_DTYPE = np.dtype("<u4")
VALUE_DTYPE = np.dtype("<f8")
HEADER_SIZE = 4 * HEADER_DTYPE.itemsize

CAMERA_VALUES = 8
SPHERE_VALUES = 7
LIGHT_VALUES = 4


class MalformedSceneData(ValueError):
    """Raised when a snapshot cannot be decoded into a complete scene."""


def serialize_scene(scene: Scene) -> bytes:
    """Flatten a scene into a snapshot.

    Args:
        scene: The live scene.

    Returns:
        Snapshot bytes in the layout described in the module docstring.
    """
    header = np.array(
        [scene.width, scene.height, len(scene.spheres), len(scene.lights)],
        dtype=HEADER_DTYPE,
    )

    values: list[float] = list(scene.camera.to_values())
    for sphere in scene.spheres:
        values.extend(sphere.to_values())
    for light in scene.lights:
        values.extend(light.to_values())

    body = np.array(values, dtype=VALUE_DTYPE)
    return header.tobytes() + body.tobytes()


def decode_snapshot(
    data: bytes,
) -> tuple[int, int, npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Split a snapshot into its header and float blocks.

    Args:
        data: Snapshot bytes.

    Returns:
        Tuple (width, height, camera, spheres, lights) where camera has
        shape (8,), spheres (n, 7) and lights (m, 4), all native float64
        arrays that do not share memory with data.

    Raises:
        MalformedSceneData: If the buffer is truncated, has trailing bytes,
            declares an empty frame, or holds non-finite values.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise MalformedSceneData(f"Snapshot must be bytes, got {type(data).__name__}")

    buffer = bytes(data)
    if len(buffer) < HEADER_SIZE:
        raise MalformedSceneData(
            f"Snapshot too short for header: {len(buffer)} < {HEADER_SIZE} bytes"
        )

    width, height, sphere_count, light_count = (
        int(v) for v in np.frombuffer(buffer, dtype=HEADER_DTYPE, count=4)
    )
    if width == 0 or height == 0:
        raise MalformedSceneData(f"Snapshot frame size must be non-zero, got {width}x{height}")

    value_count = CAMERA_VALUES + SPHERE_VALUES * sphere_count + LIGHT_VALUES * light_count
    expected = HEADER_SIZE + value_count * VALUE_DTYPE.itemsize
    if len(buffer) != expected:
        raise MalformedSceneData(
            f"Snapshot declares {sphere_count} spheres and {light_count} lights "
            f"({expected} bytes) but holds {len(buffer)} bytes"
        )

    body = np.frombuffer(buffer, dtype=VALUE_DTYPE, offset=HEADER_SIZE).astype(np.float64)
    if not np.all(np.isfinite(body)):
        raise MalformedSceneData("Snapshot contains non-finite values")

    sphere_end = CAMERA_VALUES + SPHERE_VALUES * sphere_count
    camera = body[:CAMERA_VALUES]
    spheres = body[CAMERA_VALUES:sphere_end].reshape(sphere_count, SPHERE_VALUES)
    lights = body[sphere_end:].reshape(light_count, LIGHT_VALUES)
    return width, height, camera, spheres, lights


def deserialize_scene(data: bytes) -> Scene:
    """Rebuild an independent Scene from a snapshot.

    Raises:
        MalformedSceneData: If the snapshot is malformed or describes an
            invalid sphere or light.
    """
    # Imported here to break the scene <-> serialization import cycle
    from tiletrace.scene.scene import Scene

    width, height, camera, spheres, lights = decode_snapshot(data)

    try:
        return Scene(
            camera=Camera.from_values(camera),
            spheres=[Sphere.from_values(row) for row in spheres],
            lights=[Light.from_values(row) for row in lights],
            width=width,
            height=height,
        )
    except ValueError as exc:
        raise MalformedSceneData(f"Snapshot describes an invalid scene: {exc}") from exc
