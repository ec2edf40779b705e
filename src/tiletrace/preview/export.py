"""Image export for rendered frames.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from tiletrace.preview.export import PngPresenter
    >>> presenter = PngPresenter(500, 500, "spheres.png")
    >>> coordinator = RenderCoordinator(scene, transport, presenter)
    >>> coordinator.render()
    >>> coordinator.wait()  # spheres.png is written when the frame completes
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from tiletrace.preview.framebuffer import FrameBuffer

logger = logging.getLogger(__name__)


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | os.PathLike[str]) -> None:
    """Save an RGBA or RGB uint8 array as a PNG file.

    Args:
        pixels: Array of shape (height, width, 4) or (height, width, 3).
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array has the wrong shape or dtype.
    """
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected shape (height, width, 3|4), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {pixels.dtype}")

    PILImage.fromarray(np.ascontiguousarray(pixels)).save(filepath, format="PNG")


class PngPresenter(FrameBuffer):
    """Frame buffer that writes each completed frame to a PNG file.

    The same path is overwritten on every frame.
    """

    def __init__(self, width: int, height: int, path: str | os.PathLike[str]) -> None:
        super().__init__(width, height)
        self.path = Path(path)

    def present(self) -> None:
        super().present()
        save_png(self.pixels, self.path)
        logger.info("Saved frame %d to %s", self.frames_presented, self.path)
