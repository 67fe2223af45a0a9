"""
MPI transport built on mpi4py.

The record descriptor becomes an ``MPI.Datatype.Create_struct`` resized to the
record extent, so one record is sent as a single unit of that type.
"""

import numpy as np
from mpi4py import MPI

from ..errors import DescriptorBuildError, TransportError
from ..logging_config import get_logger
from .base import DatatypeHandle, Transport
from .datatypes import Descriptor, ElementKind, build_descriptor

logger = get_logger(__name__)

_MPI_TYPE_NAMES = {
    ElementKind.FLOAT64: "DOUBLE",
    ElementKind.UINT32: "UNSIGNED",
    ElementKind.UINT64: "UNSIGNED_LONG_LONG",
    ElementKind.BOOL: "C_BOOL",
}


def mpi_element_type(kind: ElementKind) -> MPI.Datatype:
    """Predefined MPI type of an element kind."""
    mpi_type = getattr(MPI, _MPI_TYPE_NAMES[kind], MPI.DATATYPE_NULL)
    if mpi_type == MPI.DATATYPE_NULL:
        raise DescriptorBuildError(f"MPI has no datatype for {kind.value}")
    if mpi_type.Get_size() != kind.itemsize:
        raise DescriptorBuildError(
            f"MPI_{_MPI_TYPE_NAMES[kind]} is {mpi_type.Get_size()} bytes, record uses {kind.itemsize}")
    return mpi_type


def commit_descriptor(descriptor: Descriptor) -> MPI.Datatype:
    """Create and commit the MPI struct type of a descriptor."""
    struct = MPI.Datatype.Create_struct(
        [block.count for block in descriptor.blocks],
        [block.offset for block in descriptor.blocks],
        [mpi_element_type(block.kind) for block in descriptor.blocks],
    )
    # Extent must match the record size for counts above one
    datatype = struct.Create_resized(0, descriptor.extent)
    struct.Free()
    datatype.Commit()
    return datatype


def register_mpi_particle_type(record) -> MPI.Datatype:
    """Committed MPI datatype of a record; release with deregister_mpi_particle_type."""
    return commit_descriptor(build_descriptor(record))


def deregister_mpi_particle_type(datatype: MPI.Datatype) -> None:
    datatype.Free()


class MPITransport(Transport):
    """Blocking Send/Recv over an MPI communicator (COMM_WORLD by default)."""

    def __init__(self, comm=None):
        self.comm = comm if comm is not None else MPI.COMM_WORLD

    @property
    def rank(self) -> int:
        return self.comm.Get_rank()

    @property
    def size(self) -> int:
        return self.comm.Get_size()

    def register_datatype(self, descriptor: Descriptor) -> DatatypeHandle:
        datatype = commit_descriptor(descriptor)
        logger.debug("Committed MPI datatype on rank %d: %s", self.rank, descriptor)
        return DatatypeHandle(descriptor, datatype, deregister_mpi_particle_type)

    def send(self, buffer: np.ndarray, datatype: DatatypeHandle, dest: int, tag: int = 0) -> None:
        datatype.check()
        self.check_rank(dest)
        try:
            self.comm.Send([buffer.view(np.uint8), len(buffer), datatype.native], dest=dest, tag=tag)
        except MPI.Exception as exc:
            raise TransportError(f"send to rank {dest} failed: {exc}") from exc

    def recv(self, buffer: np.ndarray, datatype: DatatypeHandle, source: int, tag: int = 0) -> None:
        datatype.check()
        self.check_rank(source)
        try:
            self.comm.Recv([buffer.view(np.uint8), len(buffer), datatype.native], source=source, tag=tag)
        except MPI.Exception as exc:
            raise TransportError(f"receive from rank {source} failed: {exc}") from exc
