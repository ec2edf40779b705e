"""Tests for the preview module.

This module tests the presenters that receive finished tiles:
- FrameBuffer tile placement and validation
- PNG export and the PNG presenter
- GGUI key translation for the interactive window

Note: Tests avoid opening actual windows. The window presenter is only
exercised through its key translation and frame-buffer behavior.
"""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image as PILImage


def _tile(x, y, width, height, generation=1):
    from tiletrace.core.tile import Tile

    return Tile(x, y, width, height, generation)


def _solid(tile, rgba):
    return bytes(rgba) * tile.pixel_count


class TestFrameBuffer:
    """Tests for FrameBuffer.draw_tile and present."""

    def test_starts_empty(self):
        """Test the initial surface and frame count."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(8, 6)
        assert buffer.pixels.shape == (6, 8, 4)
        assert buffer.pixels.dtype == np.uint8
        assert not buffer.pixels.any()
        assert buffer.frames_presented == 0

    def test_invalid_size(self):
        """Test that non-positive sizes are rejected."""
        from tiletrace.preview.framebuffer import FrameBuffer

        with pytest.raises(ValueError):
            FrameBuffer(0, 5)

    def test_tile_lands_at_its_offset(self):
        """Test that a tile is copied to (tile.x, tile.y) and nowhere else."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(10, 8)
        tile = _tile(3, 2, 4, 5)
        buffer.draw_tile(tile, _solid(tile, (1, 2, 3, 255)))

        assert np.all(buffer.pixels[2:7, 3:7] == (1, 2, 3, 255))
        mask = np.ones((8, 10), dtype=bool)
        mask[2:7, 3:7] = False
        assert not buffer.pixels[mask].any()

    def test_tile_pixels_are_row_major(self):
        """Test that byte order is row by row within the tile."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(4, 4)
        tile = _tile(1, 1, 2, 2)
        pixels = bytes([10, 0, 0, 255, 20, 0, 0, 255, 30, 0, 0, 255, 40, 0, 0, 255])
        buffer.draw_tile(tile, pixels)

        assert buffer.pixels[1, 1, 0] == 10
        assert buffer.pixels[1, 2, 0] == 20
        assert buffer.pixels[2, 1, 0] == 30
        assert buffer.pixels[2, 2, 0] == 40

    def test_wrong_buffer_size(self):
        """Test that a pixel buffer of the wrong length is rejected."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(4, 4)
        with pytest.raises(ValueError):
            buffer.draw_tile(_tile(0, 0, 2, 2), bytes(15))

    def test_tile_outside_frame(self):
        """Test that a tile overhanging the frame is rejected."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(4, 4)
        tile = _tile(3, 0, 2, 2)
        with pytest.raises(ValueError):
            buffer.draw_tile(tile, bytes(tile.byte_size))

    def test_present_counts_frames(self):
        """Test that present() increments the frame counter."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(2, 2)
        buffer.present()
        buffer.present()
        assert buffer.frames_presented == 2

    def test_to_image(self):
        """Test conversion to a Pillow RGBA image."""
        from tiletrace.preview.framebuffer import FrameBuffer

        buffer = FrameBuffer(5, 3)
        tile = _tile(0, 0, 5, 3)
        buffer.draw_tile(tile, _solid(tile, (180, 180, 180, 255)))

        image = buffer.to_image()
        assert image.mode == "RGBA"
        assert image.size == (5, 3)
        assert image.getpixel((4, 2)) == (180, 180, 180, 255)


class TestPngExport:
    """Tests for save_png and PngPresenter."""

    def test_save_png_rgba(self, tmp_path: Path):
        """Test that an RGBA array round-trips through a PNG file."""
        from tiletrace.preview.export import save_png

        pixels = np.zeros((4, 6, 4), dtype=np.uint8)
        pixels[..., 0] = 200
        pixels[..., 3] = 255
        path = tmp_path / "frame.png"
        save_png(pixels, path)

        with PILImage.open(path) as image:
            assert image.size == (6, 4)
            np.testing.assert_array_equal(np.asarray(image), pixels)

    def test_save_png_rejects_bad_arrays(self, tmp_path: Path):
        """Test that wrong shapes or dtypes are rejected."""
        from tiletrace.preview.export import save_png

        with pytest.raises(ValueError):
            save_png(np.zeros((4, 4), dtype=np.uint8), tmp_path / "a.png")
        with pytest.raises(ValueError):
            save_png(np.zeros((4, 4, 4), dtype=np.float32), tmp_path / "b.png")

    def test_png_presenter_writes_on_present(self, tmp_path: Path):
        """Test that the PNG is written only when the frame completes."""
        from tiletrace.preview.export import PngPresenter

        path = tmp_path / "out.png"
        presenter = PngPresenter(3, 2, path)
        tile = _tile(0, 0, 3, 2)
        presenter.draw_tile(tile, _solid(tile, (0, 0, 255, 255)))
        assert not path.exists()

        presenter.present()
        with PILImage.open(path) as image:
            assert image.getpixel((0, 0)) == (0, 0, 255, 255)

    def test_rendered_frame_to_png(self, tmp_path: Path):
        """Test a full coordinator frame saved through PngPresenter."""
        from tiletrace.core.coordinator import RenderCoordinator
        from tiletrace.preview.export import PngPresenter
        from tiletrace.scene.default import create_default_scene
        from tiletrace.workers.transport import InlineTransport

        path = tmp_path / "spheres.png"
        presenter = PngPresenter(20, 20, path)
        coordinator = RenderCoordinator(
            create_default_scene(20, 20), InlineTransport(2), presenter, columns=2, rows=2
        )
        coordinator.render()
        coordinator.wait()

        with PILImage.open(path) as image:
            assert image.size == (20, 20)
            assert image.getpixel((0, 0)) == (180, 180, 180, 255)


class TestWindowKeys:
    """Tests for GGUI key translation."""

    @pytest.mark.parametrize(
        "key,shift,expected",
        [
            ("Left", False, "ArrowLeft"),
            ("Right", False, "ArrowRight"),
            ("Up", False, "ArrowUp"),
            ("Down", True, "ArrowDown"),
            ("w", False, "w"),
            ("w", True, "W"),
            ("s", True, "S"),
            ("Shift", True, "Shift"),
        ],
    )
    def test_translate_key(self, key, shift, expected):
        from tiletrace.preview.interactive import translate_key

        assert translate_key(key, shift) == expected

    def test_translated_keys_resolve_to_commands(self):
        """Test that translated arrow and shifted keys hit the key bindings."""
        from tiletrace.preview.interactive import translate_key
        from tiletrace.scene.commands import Command, resolve_command

        assert resolve_command(translate_key("Left")) is Command.MOVE_LEFT
        assert resolve_command(translate_key("w", shift=True)) is Command.MOVE_EYE_FORWARD

    def test_window_presenter_is_a_frame_buffer(self):
        """Test that drawing works without opening the window."""
        from tiletrace.preview.interactive import WindowPresenter

        presenter = WindowPresenter(4, 4)
        tile = _tile(0, 0, 2, 2)
        presenter.draw_tile(tile, _solid(tile, (9, 9, 9, 255)))
        presenter.present()

        assert presenter.pixels[1, 1, 0] == 9
        assert presenter.frames_presented == 1
