"""
mpm3d: particle state records and their exchange for a two-phase material point method solver.

Particles move between ranks and to and from storage as fixed-layout records.
The records' memory layout yields the transport descriptor, and materials are
rebound by id when a particle is rebuilt from a record.

Sub-packages:
- records: record layouts (single-phase and two-phase)
- transport: descriptors, datatype handles, loopback and MPI transports, exchange
- materials: material models and the id-keyed registry
- particles: live particles and the particle <-> record codec
- io: HDF5 storage of record sequences
- cloud: taichi fields mirroring a record layout (requires taichi)
"""

from .errors import (
    InvalidRecordError,
    CapacityExceededError,
    DescriptorBuildError,
    MaterialNotFoundError,
    MPMError,
    StateVariableMismatchError,
    TransportError,
)
from .logging_config import configure_logging, get_logger
from .materials import MaterialRegistry, create_material, find_material
from .particles import Particle, ParticlePhase, TwoPhaseParticle
from .records import ParticleRecord, TwoPhaseParticleRecord
from .transport import (
    LoopbackTransport,
    build_descriptor,
    recv_particle,
    send_particle,
)

__version__ = "0.1.0"

__all__ = [
    "CapacityExceededError",
    "DescriptorBuildError",
    "InvalidRecordError",
    "LoopbackTransport",
    "MPMError",
    "MaterialNotFoundError",
    "MaterialRegistry",
    "Particle",
    "ParticlePhase",
    "ParticleRecord",
    "StateVariableMismatchError",
    "TransportError",
    "TwoPhaseParticle",
    "TwoPhaseParticleRecord",
    "build_descriptor",
    "configure_logging",
    "create_material",
    "find_material",
    "get_logger",
    "recv_particle",
    "send_particle",
]
