"""Tests for binary scene snapshots."""

import struct

import numpy as np
import pytest


def _scene_with(spheres=(), lights=(), width=32, height=24):
    from tiletrace.camera.planar import Camera, Film
    from tiletrace.core.vector import Vector3
    from tiletrace.scene.scene import Scene

    camera = Camera(Vector3(0.1, 0.2, 0.3), Film(Vector3(-1.0, -1.0, 1.0), 2.0, 2.0))
    return Scene(camera, spheres, lights, width, height)


class TestSnapshotLayout:
    """Tests for the wire format."""

    def test_header_and_length(self):
        """Test the little-endian uint32 header and the float64 body size."""
        from tiletrace.scene.default import create_default_scene

        snapshot = create_default_scene(640, 480).serialize()

        assert struct.unpack("<4I", snapshot[:16]) == (640, 480, 3, 2)
        assert len(snapshot) == 16 + 8 * (8 + 3 * 7 + 2 * 4)

    def test_body_order(self):
        """Test that camera, spheres and lights follow each other in order."""
        from tiletrace.scene.default import create_default_scene

        scene = create_default_scene()
        body = struct.unpack("<37d", scene.serialize()[16:])

        assert body[:8] == scene.camera.to_values()
        assert body[8:15] == scene.spheres[0].to_values()
        assert body[29:33] == scene.lights[0].to_values()

    def test_snapshot_is_bytes(self):
        """Test that a snapshot is an immutable bytes object."""
        from tiletrace.scene.default import create_default_scene

        assert isinstance(create_default_scene().serialize(), bytes)


class TestRoundTrip:
    """Tests for deserialize(serialize(scene))."""

    def test_bit_exact_roundtrip(self):
        """Test that awkward floats survive the round trip bit for bit."""
        from tiletrace.core.vector import Color, Vector3
        from tiletrace.geometry.sphere import Sphere
        from tiletrace.lights.point import Light
        from tiletrace.scene.scene import Scene

        spheres = [
            Sphere(Vector3(0.1, -1e-300, 1e300), 5e-324, Color(1 / 3, 2 / 3, 254.99999999999997)),
            Sphere(Vector3(-0.0, 3.141592653589793, 2.718281828459045), 7.0, Color(0, 0, 0)),
        ]
        lights = [Light(Vector3(1e-10, 2e10, -3.5), 1 / 7)]
        scene = _scene_with(spheres, lights)

        copy = Scene.deserialize(scene.serialize())

        assert copy.camera == scene.camera
        assert copy.spheres == scene.spheres
        assert copy.lights == scene.lights
        assert (copy.width, copy.height) == (scene.width, scene.height)
        for before, restored in zip(scene.spheres, copy.spheres):
            for a, b in zip(before.to_values(), restored.to_values()):
                assert struct.pack("<d", a) == struct.pack("<d", b)
        assert struct.pack("<d", copy.spheres[1].center.x) == struct.pack("<d", -0.0)

    def test_roundtrip_without_spheres_or_lights(self):
        """Test an empty scene."""
        from tiletrace.scene.scene import Scene

        scene = _scene_with()
        copy = Scene.deserialize(scene.serialize())
        assert copy.spheres == ()
        assert copy.lights == ()

    def test_copy_is_independent(self):
        """Test that moving the live camera does not affect a deserialized copy."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.scene import Scene

        scene = create_default_scene()
        snapshot = scene.serialize()
        copy = Scene.deserialize(snapshot)

        scene.apply_command("w")
        assert copy.camera.eye.z == 0.0
        assert Scene.deserialize(snapshot).camera.eye.z == 0.0


class TestMalformedSnapshots:
    """Tests for MalformedSceneData."""

    def test_is_a_value_error(self):
        from tiletrace.scene.serialization import MalformedSceneData

        assert issubclass(MalformedSceneData, ValueError)

    @pytest.mark.parametrize("size", [0, 4, 15])
    def test_short_header(self, size):
        """Test that buffers shorter than the header are rejected."""
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        with pytest.raises(MalformedSceneData):
            Scene.deserialize(b"\x00" * size)

    def test_truncated_body(self):
        """Test that a snapshot missing its last value is rejected."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = create_default_scene().serialize()
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(snapshot[:-8])

    def test_trailing_bytes(self):
        """Test that extra bytes after the last light are rejected."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = create_default_scene().serialize()
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(snapshot + b"\x00" * 8)

    def test_counts_disagree_with_body(self):
        """Test that a header claiming more spheres than present is rejected."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = bytearray(create_default_scene().serialize())
        snapshot[8:12] = struct.pack("<I", 4)
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(bytes(snapshot))

    def test_zero_frame_size(self):
        """Test that a zero width is rejected."""
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = bytearray(_scene_with().serialize())
        snapshot[0:4] = struct.pack("<I", 0)
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(bytes(snapshot))

    def test_non_finite_value(self):
        """Test that NaN values are rejected."""
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = bytearray(_scene_with().serialize())
        snapshot[16:24] = struct.pack("<d", float("nan"))
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(bytes(snapshot))

    def test_invalid_sphere_radius(self):
        """Test that a sphere with non-positive radius is rejected, not built."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        snapshot = bytearray(create_default_scene().serialize())
        radius_offset = 16 + 8 * (8 + 3)
        snapshot[radius_offset : radius_offset + 8] = struct.pack("<d", -2.0)
        with pytest.raises(MalformedSceneData):
            Scene.deserialize(bytes(snapshot))

    def test_non_bytes_input(self):
        """Test that non-buffer input is rejected."""
        from tiletrace.scene.scene import Scene
        from tiletrace.scene.serialization import MalformedSceneData

        with pytest.raises(MalformedSceneData):
            Scene.deserialize("not a snapshot")  # type: ignore[arg-type]


class TestDecodeSnapshot:
    """Tests for the array-level decoder."""

    def test_arrays_match_to_arrays(self):
        """Test that decoded arrays equal Scene.to_arrays()."""
        from tiletrace.scene.default import create_default_scene
        from tiletrace.scene.serialization import decode_snapshot

        scene = create_default_scene(20, 10)
        width, height, camera, spheres, lights = decode_snapshot(scene.serialize())
        expected = scene.to_arrays()

        assert (width, height) == (20, 10)
        np.testing.assert_array_equal(camera, expected[0])
        np.testing.assert_array_equal(spheres, expected[1])
        np.testing.assert_array_equal(lights, expected[2])
