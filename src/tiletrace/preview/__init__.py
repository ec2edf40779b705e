"""Preview module for output and visualization.

Components:
    framebuffer: In-memory RGBA presenter
    export: PNG export and the PNG presenter
    interactive: Taichi GGUI window presenter with keyboard camera control
"""

from .export import PngPresenter, save_png
from .framebuffer import FrameBuffer
from .interactive import WindowPresenter, translate_key

__all__ = ["FrameBuffer", "PngPresenter", "save_png", "WindowPresenter", "translate_key"]
