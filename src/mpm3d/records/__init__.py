"""
Fixed-layout particle records used for MPI transfer and HDF5 storage.

- ParticleRecord: single-phase particle state
- TwoPhaseParticleRecord: solid state followed by the pore liquid section
"""

from .types import (
    NLIQUID_STATE_VARS_CAPACITY,
    NSTATE_VARS_CAPACITY,
    UNASSIGNED_CELL,
    Record,
    stack_records,
    unstack_records,
)
from .particle import PARTICLE_DTYPE, STRAIN_FIELDS, STRESS_FIELDS, ParticleRecord
from .twophase import TWOPHASE_PARTICLE_DTYPE, TwoPhaseParticleRecord

__all__ = [
    "NLIQUID_STATE_VARS_CAPACITY",
    "NSTATE_VARS_CAPACITY",
    "PARTICLE_DTYPE",
    "ParticleRecord",
    "Record",
    "STRAIN_FIELDS",
    "STRESS_FIELDS",
    "TWOPHASE_PARTICLE_DTYPE",
    "TwoPhaseParticleRecord",
    "UNASSIGNED_CELL",
    "stack_records",
    "unstack_records",
]
