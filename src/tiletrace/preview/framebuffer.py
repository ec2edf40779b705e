"""In-memory frame buffer presenter.

The coordinator hands every finished tile to a presenter with
draw_tile(tile, pixels) and calls present() once per completed frame.
FrameBuffer implements both on a numpy RGBA array; the PNG and window
presenters build on it.

Example:
    >>> buffer = FrameBuffer(100, 100)
    >>> buffer.draw_tile(Tile(0, 0, 10, 10, generation=1), pixels)
    >>> buffer.present()
    >>> buffer.to_image().size
    (100, 100)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from tiletrace.core.tile import Tile


class FrameBuffer:
    """RGBA frame surface that tiles are drawn into.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        pixels: Array of shape (height, width, 4), dtype uint8. Row 0 is the
            top of the frame.
        frames_presented: Number of present() calls so far.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Frame size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: npt.NDArray[np.uint8] = np.zeros((height, width, 4), dtype=np.uint8)
        self.frames_presented = 0

    def draw_tile(self, tile: Tile, pixels: bytes) -> None:
        """Copy a tile's RGBA bytes into the frame at the tile's position.

        Raises:
            ValueError: If the buffer length does not match the tile size or
                the tile lies outside the frame.
        """
        if len(pixels) != tile.byte_size:
            raise ValueError(
                f"Expected {tile.byte_size} bytes for a {tile.width}x{tile.height} tile, "
                f"got {len(pixels)}"
            )
        if tile.x < 0 or tile.y < 0 or tile.x + tile.width > self.width or (
            tile.y + tile.height > self.height
        ):
            raise ValueError(f"{tile} lies outside the {self.width}x{self.height} frame")

        region = np.frombuffer(pixels, dtype=np.uint8).reshape(tile.height, tile.width, 4)
        self.pixels[tile.y : tile.y + tile.height, tile.x : tile.x + tile.width] = region

    def present(self) -> None:
        """Mark the current frame as complete."""
        self.frames_presented += 1

    def to_image(self) -> PILImage.Image:
        """Return a copy of the frame as a Pillow RGBA image."""
        return PILImage.fromarray(self.pixels.copy())
