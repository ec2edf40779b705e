"""Multi-process worker pool.

Every worker is a separate process started with the "spawn" method, so it
initializes its own Taichi runtime and holds its own scene copy. Each worker
reads from a private inbox queue; all workers write results to one shared
outbox queue read by the coordinator.

Worker loop:
    ("scene", snapshot) -> decode and replace the local scene
    ("tile", tile)      -> render, put TileResult on the outbox
    None                -> exit

Example:
    >>> from tiletrace.workers.process import ProcessTransport
    >>> with ProcessTransport(worker_count=4) as transport:
    ...     transport.broadcast(scene.serialize())
    ...     transport.dispatch(0, tile)
    ...     result = transport.receive()
"""

from __future__ import annotations

import logging
import multiprocessing as mp
import queue
from typing import Any

from tiletrace.core.tile import Tile, TileResult
from tiletrace.workers.transport import SCENE_MESSAGE, TILE_MESSAGE, WorkerTransport

logger = logging.getLogger(__name__)

# Seconds to wait for a worker to exit before terminating it
SHUTDOWN_TIMEOUT = 5.0


def worker_main(
    worker_id: int,
    inbox: Any,
    outbox: Any,
    arch: str = "cpu",
    samples_per_pixel: int = 1,
    log_level: str = "WARNING",
) -> None:
    """Entry point of a worker process.

    Args:
        worker_id: Id reported back with every result.
        inbox: Queue of messages for this worker.
        outbox: Queue shared by all workers for results.
        arch: Taichi backend name.
        samples_per_pixel: Samples per pixel used by the renderer.
        log_level: Logging level for the worker process.
    """
    import taichi as ti

    from tiletrace.core.renderer import TileRenderer
    from tiletrace.scene.serialization import MalformedSceneData
    from tiletrace.utils.logger import setup_logging

    setup_logging(log_level)
    ti.init(arch=getattr(ti, arch), default_fp=ti.f64, random_seed=worker_id)

    renderer = TileRenderer(samples_per_pixel)
    logger.info("Worker %d started (arch=%s)", worker_id, arch)

    while True:
        message = inbox.get()
        if message is None:
            break

        kind, payload = message
        if kind == SCENE_MESSAGE:
            try:
                renderer.load(payload)
            except MalformedSceneData:
                logger.exception("Worker %d keeping its previous scene", worker_id)
        elif kind == TILE_MESSAGE:
            pixels = renderer.render(payload)
            outbox.put(TileResult(worker_id=worker_id, tile=payload, pixels=pixels))
        else:
            logger.warning("Worker %d ignoring unknown message kind %r", worker_id, kind)

    logger.info("Worker %d stopped", worker_id)


class ProcessTransport(WorkerTransport):
    """Worker pool of spawned processes connected by queues.

    Attributes:
        worker_count: Number of worker processes.
        arch: Taichi backend used inside the workers.
        samples_per_pixel: Samples per pixel used by each worker.
    """

    def __init__(
        self,
        worker_count: int,
        *,
        arch: str = "cpu",
        samples_per_pixel: int = 1,
        log_level: str = "WARNING",
    ) -> None:
        super().__init__(worker_count)
        self.arch = arch
        self.samples_per_pixel = samples_per_pixel
        self.log_level = log_level

        self._context = mp.get_context("spawn")
        self._inboxes: list[Any] = []
        self._outbox: Any = None
        self._processes: list[Any] = []

    @property
    def started(self) -> bool:
        return bool(self._processes)

    def start(self) -> None:
        """Spawn the worker processes.

        Raises:
            RuntimeError: If the pool is already running.
        """
        if self.started:
            raise RuntimeError("Worker pool already started")

        self._outbox = self._context.Queue()
        for worker_id in range(self.worker_count):
            inbox = self._context.Queue()
            process = self._context.Process(
                target=worker_main,
                args=(
                    worker_id,
                    inbox,
                    self._outbox,
                    self.arch,
                    self.samples_per_pixel,
                    self.log_level,
                ),
                name=f"tiletrace-worker-{worker_id}",
                daemon=True,
            )
            process.start()
            self._inboxes.append(inbox)
            self._processes.append(process)

        logger.info("Started %d worker processes", self.worker_count)

    def _require_started(self) -> None:
        if not self.started:
            raise RuntimeError("Worker pool not started. Call start() first.")

    def broadcast(self, snapshot: bytes) -> None:
        self._require_started()
        for inbox in self._inboxes:
            inbox.put((SCENE_MESSAGE, snapshot))

    def dispatch(self, worker_id: int, tile: Tile) -> None:
        self._require_started()
        self._check_worker(worker_id)
        self._inboxes[worker_id].put((TILE_MESSAGE, tile))

    def receive(self, timeout: float | None = None) -> TileResult | None:
        self._require_started()
        try:
            if timeout is not None and timeout <= 0:
                return self._outbox.get_nowait()
            return self._outbox.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        """Ask every worker to exit, then join (or terminate) the processes."""
        if not self.started:
            return

        for inbox in self._inboxes:
            inbox.put(None)

        for process in self._processes:
            process.join(SHUTDOWN_TIMEOUT)
            if process.is_alive():
                logger.warning("Worker %s did not exit, terminating", process.name)
                process.terminate()
                process.join()

        for inbox in self._inboxes:
            inbox.close()
        self._outbox.close()

        self._inboxes = []
        self._processes = []
        self._outbox = None
        logger.info("Worker pool stopped")
