"""Unit tests for Vector3 and Color value types."""

import math

import pytest


class TestVector3:
    """Tests for Vector3 arithmetic."""

    def test_add_and_subtract(self):
        """Test component-wise addition and subtraction."""
        from tiletrace.core.vector import Vector3

        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(4.0, 5.0, 6.0)
        assert a + b == Vector3(5.0, 7.0, 9.0)
        assert b - a == Vector3(3.0, 3.0, 3.0)

    def test_scale_both_sides(self):
        """Test scalar multiplication from the left and the right."""
        from tiletrace.core.vector import Vector3

        v = Vector3(1.0, -2.0, 0.5)
        assert v * 2.0 == Vector3(2.0, -4.0, 1.0)
        assert 2.0 * v == Vector3(2.0, -4.0, 1.0)
        assert -v == Vector3(-1.0, 2.0, -0.5)

    def test_dot_and_length(self):
        """Test dot product and Euclidean length."""
        from tiletrace.core.vector import Vector3

        v = Vector3(3.0, 4.0, 12.0)
        assert v.dot(Vector3(1.0, 0.0, 0.0)) == 3.0
        assert v.length() == pytest.approx(13.0)

    def test_unit_has_length_one(self):
        """Test that unit() normalizes the vector."""
        from tiletrace.core.vector import Vector3

        u = Vector3(2.0, 0.0, 5.0).unit()
        assert u.length() == pytest.approx(1.0)
        assert u.x == pytest.approx(2.0 / math.sqrt(29.0))

    def test_unit_of_zero_vector_raises(self):
        """Test that normalizing the zero vector is an error."""
        from tiletrace.core.vector import Vector3

        with pytest.raises(ZeroDivisionError):
            Vector3(0.0, 0.0, 0.0).unit()

    def test_from_sequence(self):
        """Test building a vector from a list and rejecting wrong lengths."""
        from tiletrace.core.vector import Vector3

        assert Vector3.from_sequence([1, 2, 3]) == Vector3(1.0, 2.0, 3.0)
        with pytest.raises(ValueError):
            Vector3.from_sequence([1, 2])

    def test_vectors_are_immutable(self):
        """Test that Vector3 is frozen."""
        from dataclasses import FrozenInstanceError

        from tiletrace.core.vector import Vector3

        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(FrozenInstanceError):
            v.x = 5.0  # type: ignore[misc]


class TestColor:
    """Tests for Color shading and byte conversion."""

    def test_shade_scales_channels(self):
        """Test that shade multiplies every channel by the factor."""
        from tiletrace.core.vector import Color

        shaded = Color(200.0, 100.0, 50.0).shade(0.5)
        assert shaded == Color(100.0, 50.0, 25.0)

    def test_shade_clamps_factor(self):
        """Test that factors outside [0, 1] are clamped."""
        from tiletrace.core.vector import BLACK, RED

        assert RED.shade(-3.0) == BLACK
        assert RED.shade(7.5) == RED

    def test_to_bytes_truncates_and_is_opaque(self):
        """Test that channels are truncated and alpha is 255."""
        from tiletrace.core.vector import Color

        assert Color(127.9, 0.4, 255.0).to_bytes() == bytes((127, 0, 255, 255))

    def test_to_bytes_clamps_out_of_range(self):
        """Test that channels outside [0, 255] are clamped."""
        from tiletrace.core.vector import Color

        assert Color(300.0, -5.0, 10.0).to_bytes() == bytes((255, 0, 10, 255))

    def test_constants(self):
        """Test the named color constants."""
        from tiletrace.core.vector import BACKGROUND, BLUE, GREEN, RED

        assert RED.as_tuple() == (255.0, 0.0, 0.0)
        assert GREEN.as_tuple() == (0.0, 255.0, 0.0)
        assert BLUE.as_tuple() == (0.0, 0.0, 255.0)
        assert BACKGROUND.to_bytes() == bytes((180, 180, 180, 255))


class TestClamp:
    """Tests for the clamp helper."""

    @pytest.mark.parametrize(
        "value,expected",
        [(-1.0, 0.0), (0.0, 0.0), (0.25, 0.25), (1.0, 1.0), (2.0, 1.0)],
    )
    def test_clamp(self, value, expected):
        from tiletrace.core.vector import clamp

        assert clamp(value, 0.0, 1.0) == expected
