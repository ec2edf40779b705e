"""Interactive preview window using Taichi GGUI.

WindowPresenter shows the frame buffer in a ti.ui.Window and turns key
presses into camera commands for the coordinator. Tiles appear as they
arrive, so a re-render after a camera move is visible while in progress.

Controls:
    - w / s: move camera forward / back
    - W / S (shift): move only the eye forward / back (changes field of view)
    - a / d or Left / Right arrows: move camera left / right
    - Up / Down arrows: move camera up / down
    - Escape: close the window

Example:
    >>> presenter = WindowPresenter(500, 500)
    >>> coordinator = RenderCoordinator(scene, transport, presenter)
    >>> presenter.run(coordinator)  # blocks until the window is closed
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti

from tiletrace.core.tile import Tile
from tiletrace.preview.framebuffer import FrameBuffer

if TYPE_CHECKING:
    from tiletrace.core.coordinator import RenderCoordinator

logger = logging.getLogger(__name__)

# GGUI key names that differ from the key identifiers used by KEY_BINDINGS
GGUI_KEY_MAP = {
    "Left": "ArrowLeft",
    "Right": "ArrowRight",
    "Up": "ArrowUp",
    "Down": "ArrowDown",
}

# Seconds to wait for a tile result per window frame
POLL_TIMEOUT = 0.005


def translate_key(key: str, shift: bool = False) -> str:
    """Translate a GGUI key name into a key identifier.

    Arrow keys get their "Arrow" names; letters are upper-cased while shift
    is held.

    Example:
        >>> translate_key("Left")
        'ArrowLeft'
        >>> translate_key("w", shift=True)
        'W'
    """
    if key in GGUI_KEY_MAP:
        return GGUI_KEY_MAP[key]
    if shift and len(key) == 1:
        return key.upper()
    return key


class WindowPresenter(FrameBuffer):
    """Frame buffer shown in a Taichi GGUI window.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field with the RGB image shown on the canvas,
            created on first use.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "tiletrace - Interactive Preview",
    ) -> None:
        super().__init__(width, height)
        self._title = title
        self._window: ti.ui.Window | None = None
        self._canvas: ti.ui.Canvas | None = None
        self.display_image: ti.MatrixField | None = None
        self._dirty = True

    def _initialize_window(self) -> None:
        if self._window is not None:
            return

        self._window = ti.ui.Window(name=self._title, res=(self.width, self.height), vsync=True)
        self._canvas = self._window.get_canvas()
        # Shape is (width, height) for the Taichi field
        self.display_image = ti.Vector.field(3, dtype=ti.f32, shape=(self.width, self.height))

    @property
    def window(self) -> ti.ui.Window:
        """Get the Taichi GGUI window, initializing if needed."""
        self._initialize_window()
        assert self._window is not None
        return self._window

    def draw_tile(self, tile: Tile, pixels: bytes) -> None:
        super().draw_tile(tile, pixels)
        self._dirty = True

    def present(self) -> None:
        super().present()
        self._dirty = True

    def _upload(self) -> None:
        assert self.display_image is not None
        rgb = self.pixels[..., :3].astype(np.float32) / 255.0
        # NumPy rows run top-down; Taichi has origin at bottom-left
        image = np.ascontiguousarray(np.transpose(np.flipud(rgb), (1, 0, 2)))
        self.display_image.from_numpy(image)
        self._dirty = False

    def show_frame(self) -> None:
        """Display the current frame buffer contents."""
        window = self.window
        if self._dirty:
            self._upload()
        assert self._canvas is not None
        self._canvas.set_image(self.display_image)
        window.show()

    def key_events(self) -> list[str]:
        """Return the key identifiers pressed since the last call."""
        window = self.window
        keys = []
        for event in window.get_events(ti.ui.PRESS):
            if event.key == ti.ui.ESCAPE:
                window.running = False
                continue
            keys.append(translate_key(event.key, window.is_pressed(ti.ui.SHIFT)))
        return keys

    def run(self, coordinator: RenderCoordinator) -> None:
        """Run the window event loop until the window is closed.

        Starts a render pass, then on each window frame forwards key presses
        to the coordinator, draws whatever tiles have arrived and shows the
        frame.
        """
        self._initialize_window()
        coordinator.render()

        while self.window.running:
            for key in self.key_events():
                coordinator.handle_command(key)

            while coordinator.poll(POLL_TIMEOUT):
                pass

            self.show_frame()

    def close(self) -> None:
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering."""
        if os.name == "nt":
            return True
        if os.uname().sysname == "Darwin":
            return not (os.environ.get("SSH_CONNECTION") and not os.environ.get("DISPLAY"))
        return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))
