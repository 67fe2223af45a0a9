"""
Transport interface used by the particle exchange.

A transport registers descriptors as releasable datatype handles and moves
buffers between ranks with blocking point-to-point calls. Messages between
one (source, destination, tag) triple arrive in send order.
"""

from abc import ABC, abstractmethod
from collections import defaultdict, deque
from typing import Any, Callable, Optional

import numpy as np

from ..errors import TransportError
from ..logging_config import get_logger
from .datatypes import Descriptor

logger = get_logger(__name__)


class DatatypeHandle:
    """
    A descriptor registered with a transport.

    Must be released with ``free()`` (or by leaving its ``with`` block).
    Freeing twice is harmless; transferring with a freed handle is an error.
    """

    def __init__(self, descriptor: Descriptor, native: Any = None,
                 release: Optional[Callable[[Any], None]] = None):
        self.descriptor = descriptor
        self.native = native            # Transport-specific type object, e.g. MPI.Datatype
        self._release = release
        self._freed = False

    @property
    def freed(self) -> bool:
        return self._freed

    def check(self) -> None:
        if self._freed:
            raise TransportError("datatype handle used after it was freed")

    def free(self) -> None:
        if self._freed:
            return
        if self._release is not None:
            self._release(self.native)
        self._freed = True
        logger.debug("Released datatype with %d blocks", len(self.descriptor))

    def __enter__(self) -> "DatatypeHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.free()


class Transport(ABC):
    """Blocking point-to-point transport over a fixed group of ranks."""

    @property
    @abstractmethod
    def rank(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def register_datatype(self, descriptor: Descriptor) -> DatatypeHandle:
        raise NotImplementedError

    @abstractmethod
    def send(self, buffer: np.ndarray, datatype: DatatypeHandle, dest: int, tag: int = 0) -> None:
        raise NotImplementedError

    @abstractmethod
    def recv(self, buffer: np.ndarray, datatype: DatatypeHandle, source: int, tag: int = 0) -> None:
        raise NotImplementedError

    def check_rank(self, rank: int) -> None:
        if not 0 <= rank < self.size:
            raise TransportError(f"rank {rank} outside process group of size {self.size}")


class LoopbackTransport(Transport):
    """
    Single-rank transport that keeps messages in memory.

    Sends pack the described bytes of the buffer and receives scatter them
    into the destination buffer, so padding is never copied, as with MPI.
    """

    def __init__(self):
        self._queues = defaultdict(deque)
        self._registered = 0

    @property
    def rank(self) -> int:
        return 0

    @property
    def size(self) -> int:
        return 1

    @property
    def pending(self) -> int:
        """Messages sent but not yet received."""
        return sum(len(q) for q in self._queues.values())

    @property
    def registered(self) -> int:
        """Datatype handles registered and not yet freed."""
        return self._registered

    def register_datatype(self, descriptor: Descriptor) -> DatatypeHandle:
        self._registered += 1
        logger.debug("Registered loopback datatype: %s", descriptor)
        return DatatypeHandle(descriptor, release=self._release)

    def _release(self, native) -> None:
        self._registered -= 1

    def send(self, buffer: np.ndarray, datatype: DatatypeHandle, dest: int, tag: int = 0) -> None:
        datatype.check()
        self.check_rank(dest)
        self._queues[(self.rank, dest, tag)].append(datatype.descriptor.pack(buffer))

    def recv(self, buffer: np.ndarray, datatype: DatatypeHandle, source: int, tag: int = 0) -> None:
        datatype.check()
        self.check_rank(source)
        queue = self._queues.get((source, self.rank, tag))
        if not queue:
            # A blocking receive here would never be matched
            raise TransportError(f"no message from rank {source} with tag {tag}")
        datatype.descriptor.unpack(queue.popleft(), buffer)
