"""Vector and color value types for the Python side of the renderer.

These are plain immutable values used to describe scenes, to build the
serialized snapshot handed to workers, and to shade single rays outside the
tile kernel. The kernel itself works on flat float64 arrays (see
``tiletrace.core.ray``).

Example:
    >>> from tiletrace.core.vector import Vector3, RED
    >>> direction = (Vector3(5.0, 3.0, 5.0) - Vector3(3.0, 3.0, 0.0)).unit()
    >>> RED.shade(0.5)
    Color(red=127.5, green=0.0, blue=0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into the closed range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


@dataclass(frozen=True)
class Vector3:
    """A 3-component real vector.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    x: float
    y: float
    z: float

    def length(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unit(self) -> Vector3:
        """Return the vector scaled to unit length.

        The zero vector has no direction; dividing by its length raises
        ZeroDivisionError.
        """
        length = self.length()
        return Vector3(self.x / length, self.y / length, self.z / length)

    def add(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> Vector3:
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_sequence(cls, values) -> Vector3:
        """Build a vector from any 3-item sequence of numbers.

        Raises:
            ValueError: If the sequence does not hold exactly three items.
        """
        items = list(values)
        if len(items) != 3:
            raise ValueError(f"Expected 3 components, got {len(items)}")
        return cls(float(items[0]), float(items[1]), float(items[2]))

    def __add__(self, other: Vector3) -> Vector3:
        return self.add(other)

    def __sub__(self, other: Vector3) -> Vector3:
        return self.subtract(other)

    def __mul__(self, factor: float) -> Vector3:
        return self.scale(factor)

    __rmul__ = __mul__

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)


@dataclass(frozen=True)
class Color:
    """An opaque RGB color with channels in [0, 255].

    Channels stay real-valued so that shading and sample accumulation do not
    lose precision; they are only truncated to bytes on output.

    Attributes:
        red: Red channel.
        green: Green channel.
        blue: Blue channel.
    """

    red: float
    green: float
    blue: float

    @property
    def alpha(self) -> int:
        """Alpha is always fully opaque."""
        return 255

    def shade(self, factor: float) -> Color:
        """Scale every channel by factor clamped to [0, 1].

        Args:
            factor: Summed light power reaching the surface. Values below 0
                (light behind the surface) give black, values above 1 give
                the unshaded color.

        Returns:
            A new shaded Color.
        """
        f = clamp(factor, 0.0, 1.0)
        return Color(self.red * f, self.green * f, self.blue * f)

    def to_bytes(self) -> bytes:
        """Return the RGBA bytes of the color, truncating each channel."""
        return bytes(
            (
                int(clamp(self.red, 0.0, 255.0)),
                int(clamp(self.green, 0.0, 255.0)),
                int(clamp(self.blue, 0.0, 255.0)),
                self.alpha,
            )
        )

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)


BLACK = Color(0.0, 0.0, 0.0)
RED = Color(255.0, 0.0, 0.0)
GREEN = Color(0.0, 255.0, 0.0)
BLUE = Color(0.0, 0.0, 255.0)

# Emitted for primary rays that miss every sphere.
BACKGROUND = Color(180.0, 180.0, 180.0)
