"""
Point-to-point exchange of one particle record.

Each end builds its own descriptor from its own record, registers it with
the transport, performs a single blocking transfer and releases the handle.
"""

from typing import Type, TypeVar

from ..logging_config import get_logger
from ..records import Record
from .base import Transport
from .datatypes import build_descriptor

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


def send_particle(transport: Transport, record: Record, dest: int, tag: int = 0) -> None:
    """Send ``record`` to rank ``dest`` as one unit of its descriptor type."""
    with transport.register_datatype(build_descriptor(record)) as datatype:
        transport.send(record.buffer, datatype, dest, tag)
    logger.debug("Sent particle %d from rank %d to rank %d (tag %d)",
                 record.id, transport.rank, dest, tag)


def recv_particle(transport: Transport, record_type: Type[RecordT], source: int, tag: int = 0) -> RecordT:
    """Receive one record of ``record_type`` from rank ``source``."""
    received = record_type()
    with transport.register_datatype(build_descriptor(received)) as datatype:
        transport.recv(received.buffer, datatype, source, tag)
    logger.debug("Received particle %d on rank %d from rank %d (tag %d)",
                 received.id, transport.rank, source, tag)
    return received
