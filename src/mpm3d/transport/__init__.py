"""
Transport of particle records between ranks.

- datatypes: descriptors derived from a record's memory layout
- base: transport interface, datatype handles and the in-process loopback
- mpi: mpi4py transport (import ``mpm3d.transport.mpi`` explicitly)
- exchange: send / receive of one particle record
"""

from .base import DatatypeHandle, LoopbackTransport, Transport
from .config import ExchangeConfig
from .datatypes import Block, Descriptor, ElementKind, build_descriptor
from .exchange import recv_particle, send_particle

__all__ = [
    "Block",
    "DatatypeHandle",
    "Descriptor",
    "ElementKind",
    "ExchangeConfig",
    "LoopbackTransport",
    "Transport",
    "build_descriptor",
    "recv_particle",
    "send_particle",
]
