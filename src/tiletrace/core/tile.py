"""Tiles: the unit of rendering work.

A frame is cut into a grid of rectangular tiles. Each tile carries the
generation of the render pass that created it, so the coordinator can tell
results of the current pass from late results of a superseded one.

Example:
    >>> tiles = partition_frame(500, 500, columns=5, rows=5, generation=1)
    >>> len(tiles), tiles[0]
    (25, Tile(x=0, y=0, width=100, height=100, generation=1))
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tile:
    """A rectangular region of the frame belonging to one render pass.

    Attributes:
        x: Left column of the tile in frame pixels.
        y: Top row of the tile in frame pixels.
        width: Tile width in pixels.
        height: Tile height in pixels.
        generation: Render pass the tile belongs to.
    """

    x: int
    y: int
    width: int
    height: int
    generation: int

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def byte_size(self) -> int:
        """Size of the tile's RGBA pixel buffer."""
        return 4 * self.pixel_count


@dataclass(frozen=True)
class TileResult:
    """Rendered pixels of a tile, as returned by a worker.

    Attributes:
        worker_id: The worker that rendered the tile.
        tile: The tile, including its generation.
        pixels: Row-major RGBA bytes, tile-local, 4 * width * height long.
    """

    worker_id: int
    tile: Tile
    pixels: bytes


def _edges(size: int, parts: int) -> list[int]:
    return [k * size // parts for k in range(parts + 1)]


def partition_frame(width: int, height: int, columns: int, rows: int, generation: int) -> list[Tile]:
    """Cut a frame into a columns x rows grid of tiles.

    Tile boundaries sit at k * size // parts, so tiles differ in size by at
    most one pixel and together cover every pixel exactly once. Tiles that
    would be empty (more grid cells than pixels) are left out.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        columns: Number of tile columns.
        rows: Number of tile rows.
        generation: Render pass the tiles belong to.

    Returns:
        Tiles in row-major order, top-left first.

    Raises:
        ValueError: If any size or grid dimension is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Frame size must be positive, got {width}x{height}")
    if columns <= 0 or rows <= 0:
        raise ValueError(f"Tile grid must be positive, got {columns}x{rows}")

    xs = _edges(width, columns)
    ys = _edges(height, rows)

    tiles = []
    for top, bottom in zip(ys, ys[1:]):
        for left, right in zip(xs, xs[1:]):
            if right > left and bottom > top:
                tiles.append(Tile(left, top, right - left, bottom - top, generation))
    return tiles
