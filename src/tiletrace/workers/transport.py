"""Message transport between the render coordinator and its workers.

The coordinator only talks to workers through a WorkerTransport:

- broadcast(snapshot): send the latest scene snapshot to every worker
- dispatch(worker_id, tile): ask one worker to render one tile
- receive(timeout): get back the next TileResult, if any

Messages to a given worker are handled in the order they were sent, so a
tile dispatched before a broadcast is rendered against the older scene. A
snapshot that cannot be decoded is logged and the worker keeps its previous
scene.
Nothing is shared between the coordinator and the workers except messages.

InlineTransport keeps these semantics inside the calling process: each
"worker" is a TileRenderer with its own scene copy and inbox, and tiles are
rendered lazily when results are received. It is used for tests and for
single-process rendering.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from tiletrace.core.renderer import TileRenderer
from tiletrace.core.tile import Tile, TileResult
from tiletrace.scene.serialization import MalformedSceneData

logger = logging.getLogger(__name__)

# Inbox message kinds
SCENE_MESSAGE = "scene"
TILE_MESSAGE = "tile"


class WorkerTransport:
    """Interface of a coordinator-to-worker message channel.

    Subclasses implement the message passing; the base class only provides
    the context-manager protocol and worker id validation.
    """

    def __init__(self, worker_count: int) -> None:
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")
        self.worker_count = worker_count

    def start(self) -> None:
        """Bring the workers up. Called once before any message is sent."""

    def broadcast(self, snapshot: bytes) -> None:
        """Send a scene snapshot to every worker."""
        raise NotImplementedError

    def dispatch(self, worker_id: int, tile: Tile) -> None:
        """Send a tile to one worker."""
        raise NotImplementedError

    def receive(self, timeout: float | None = None) -> TileResult | None:
        """Return the next tile result.

        Args:
            timeout: Seconds to wait. None blocks until a result arrives,
                0 polls.

        Returns:
            A TileResult, or None if nothing arrived in time.
        """
        raise NotImplementedError

    def close(self) -> None:
        """Stop the workers and release resources."""

    def _check_worker(self, worker_id: int) -> None:
        if not 0 <= worker_id < self.worker_count:
            raise ValueError(f"Invalid worker_id {worker_id} (pool of {self.worker_count})")

    def __enter__(self) -> WorkerTransport:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class InlineTransport(WorkerTransport):
    """In-process transport with per-worker inboxes and private scene copies.

    Tiles are rendered when receive() is called, one per call, visiting
    workers round-robin. This keeps the coordinator's dispatch/collect loop
    identical to the multi-process case while staying deterministic.
    """

    def __init__(self, worker_count: int = 1, *, samples_per_pixel: int = 1) -> None:
        super().__init__(worker_count)
        self._renderers = [TileRenderer(samples_per_pixel) for _ in range(worker_count)]
        self._inboxes: list[deque[tuple[str, Any]]] = [deque() for _ in range(worker_count)]
        self._next_worker = 0

    def broadcast(self, snapshot: bytes) -> None:
        for inbox in self._inboxes:
            inbox.append((SCENE_MESSAGE, snapshot))

    def dispatch(self, worker_id: int, tile: Tile) -> None:
        self._check_worker(worker_id)
        self._inboxes[worker_id].append((TILE_MESSAGE, tile))

    def pending_messages(self, worker_id: int) -> int:
        """Number of messages waiting in a worker's inbox."""
        self._check_worker(worker_id)
        return len(self._inboxes[worker_id])

    def receive(self, timeout: float | None = None) -> TileResult | None:
        # Work is done synchronously, so the timeout never needs to elapse.
        for _ in range(self.worker_count):
            worker_id = self._next_worker
            self._next_worker = (self._next_worker + 1) % self.worker_count

            result = self._process_until_tile(worker_id)
            if result is not None:
                return result
        return None

    def _process_until_tile(self, worker_id: int) -> TileResult | None:
        inbox = self._inboxes[worker_id]
        renderer = self._renderers[worker_id]

        while inbox:
            kind, payload = inbox.popleft()
            if kind == SCENE_MESSAGE:
                try:
                    renderer.load(payload)
                except MalformedSceneData:
                    logger.exception("Worker %d keeping its previous scene", worker_id)
            else:
                pixels = renderer.render(payload)
                return TileResult(worker_id=worker_id, tile=payload, pixels=pixels)
        return None

    def close(self) -> None:
        for inbox in self._inboxes:
            inbox.clear()
