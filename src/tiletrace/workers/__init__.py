"""Worker transports.

Components:
    transport: WorkerTransport interface and the in-process InlineTransport
    process: ProcessTransport, a pool of spawned worker processes
"""

from .process import ProcessTransport
from .transport import InlineTransport, WorkerTransport

__all__ = ["WorkerTransport", "InlineTransport", "ProcessTransport"]
