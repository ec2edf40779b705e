"""Render coordinator: drives tiled, generation-tagged render passes.

A render pass (a "generation") works like this:

1. Bump the generation counter and broadcast a scene snapshot to every worker
2. Partition the frame into tiles tagged with the new generation
3. Hand one tile to each worker and keep the rest on a backlog
4. For every result of the current generation: draw it, then give the same
   worker the next backlog tile
5. When the last tile of the generation arrives, present the frame

Results whose generation is older than the current one are dropped without
touching the presenter or the pending count, so starting a new pass while a
previous one is in flight never mixes two scenes in one frame.

Example:
    >>> from tiletrace.core.coordinator import RenderCoordinator
    >>> from tiletrace.preview.framebuffer import FrameBuffer
    >>> from tiletrace.scene.default import create_default_scene
    >>> from tiletrace.workers.transport import InlineTransport
    >>>
    >>> scene = create_default_scene(100, 100)
    >>> presenter = FrameBuffer(100, 100)
    >>> coordinator = RenderCoordinator(scene, InlineTransport(2), presenter)
    >>> coordinator.render()
    >>> coordinator.wait()
    >>> presenter.frames_presented
    1
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from tiletrace.core.tile import Tile, TileResult, partition_frame

if TYPE_CHECKING:
    from tiletrace.preview.framebuffer import FrameBuffer
    from tiletrace.scene.scene import Scene
    from tiletrace.workers.transport import WorkerTransport

logger = logging.getLogger(__name__)

FrameCallback = Callable[[int], None]


class RenderCoordinator:
    """Owns the scene, the generation counter and the tile backlog.

    Attributes:
        scene: The authoritative scene. Commands mutate it in place.
        transport: Channel to the workers.
        presenter: Receives finished tiles and completed frames.
        columns: Tile grid columns.
        rows: Tile grid rows.
        generation: Current render pass, 0 before the first render().
        pending: Tiles of the current generation not yet received.
    """

    def __init__(
        self,
        scene: Scene,
        transport: WorkerTransport,
        presenter: FrameBuffer,
        *,
        columns: int = 5,
        rows: int = 5,
    ) -> None:
        if columns < 1 or rows < 1:
            raise ValueError(f"Tile grid must be positive, got {columns}x{rows}")
        if (presenter.width, presenter.height) != (scene.width, scene.height):
            raise ValueError(
                f"Presenter size {presenter.width}x{presenter.height} does not match "
                f"scene size {scene.width}x{scene.height}"
            )

        self.scene = scene
        self.transport = transport
        self.presenter = presenter
        self.columns = columns
        self.rows = rows

        self.generation = 0
        self.pending = 0
        self._backlog: list[Tile] = []
        self._complete = False
        self._frame_callbacks: list[FrameCallback] = []

    @property
    def complete(self) -> bool:
        """True once every tile of the current generation has been drawn."""
        return self._complete

    @property
    def backlog_size(self) -> int:
        return len(self._backlog)

    def add_frame_callback(self, callback: FrameCallback) -> None:
        """Register a function called with the generation of each completed frame."""
        self._frame_callbacks.append(callback)

    def render(self) -> int:
        """Start a new render pass.

        Any tiles still outstanding from the previous pass become stale.

        Returns:
            The new generation.
        """
        self.generation += 1
        generation = self.generation

        self.transport.broadcast(self.scene.serialize())

        tiles = partition_frame(
            self.scene.width, self.scene.height, self.columns, self.rows, generation
        )
        # Reversed so pop() hands tiles out in row-major order
        self._backlog = tiles[::-1]
        self.pending = len(tiles)
        self._complete = False

        logger.info(
            "Generation %d started: %d tiles on %d workers",
            generation,
            len(tiles),
            self.transport.worker_count,
        )

        for worker_id in range(self.transport.worker_count):
            if not self._dispatch_next(worker_id):
                break
        return generation

    def _dispatch_next(self, worker_id: int) -> bool:
        if not self._backlog:
            return False
        tile = self._backlog.pop()
        logger.debug(
            "Dispatching tile (%d, %d) of generation %d to worker %d",
            tile.x,
            tile.y,
            tile.generation,
            worker_id,
        )
        self.transport.dispatch(worker_id, tile)
        return True

    def on_result(self, result: TileResult) -> bool:
        """Handle a tile result coming back from a worker.

        Returns:
            True if the result belonged to the current generation and was
            drawn, False if it was stale and dropped.
        """
        tile = result.tile
        if tile.generation != self.generation:
            logger.debug(
                "Dropping stale tile (%d, %d) of generation %d (current %d)",
                tile.x,
                tile.y,
                tile.generation,
                self.generation,
            )
            return False

        self.presenter.draw_tile(tile, result.pixels)
        self.pending -= 1
        self._dispatch_next(result.worker_id)

        if self.pending == 0:
            self._finish_frame()
        return True

    def _finish_frame(self) -> None:
        self.presenter.present()
        self._complete = True
        logger.info("Generation %d complete", self.generation)
        for callback in self._frame_callbacks:
            callback(self.generation)

    def handle_command(self, identifier: object) -> bool:
        """Apply a camera command and re-render if it was recognised.

        Args:
            identifier: A Command or key identifier such as "w" or "ArrowLeft".

        Returns:
            True if the command was applied and a new pass started.
        """
        if not self.scene.apply_command(identifier):
            logger.debug("Ignoring unknown command %r", identifier)
            return False
        self.render()
        return True

    def poll(self, timeout: float | None = 0) -> bool:
        """Process at most one available result.

        Args:
            timeout: Seconds to wait for a result. 0 returns immediately,
                None blocks.

        Returns:
            True if a current-generation result was drawn.
        """
        result = self.transport.receive(timeout)
        if result is None:
            return False
        return self.on_result(result)

    def wait(self) -> None:
        """Block until the current generation is complete.

        Raises:
            RuntimeError: If render() has not been called.
        """
        if self.generation == 0:
            raise RuntimeError("Nothing to wait for. Call render() first.")

        while not self._complete:
            result = self.transport.receive(None)
            if result is None:
                # A transport that returns nothing while blocking has no
                # work left; the frame can never complete.
                raise RuntimeError(
                    f"Transport ran out of results with {self.pending} tiles pending"
                )
            self.on_result(result)

    def __repr__(self) -> str:
        return (
            f"RenderCoordinator(generation={self.generation}, pending={self.pending}, "
            f"grid={self.columns}x{self.rows})"
        )
