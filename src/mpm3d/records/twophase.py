"""
Two-phase (solid skeleton + pore liquid) particle record.

Extends the single-phase layout: every solid field keeps its offset and the
liquid section follows the solid state variables.
"""

import numpy as np

from .particle import PARTICLE_FIELDS, ParticleRecord
from .types import (
    NLIQUID_STATE_VARS_CAPACITY,
    REAL,
    UNSIGNED,
    make_record_dtype,
    vector_fields,
)

#=====================================
# Field Definitions
#=====================================
LIQUID_FIELDS = [
    ("liquid_mass", REAL),
    *vector_fields("liquid_velocity"),
    ("porosity", REAL),            # Pore volume fraction [0, 1]
    ("liquid_saturation", REAL),   # Fraction of pores filled with liquid [0, 1]
    ("liquid_material_id", UNSIGNED),
    ("nliquid_state_vars", UNSIGNED),
    ("liquid_svars", REAL, (NLIQUID_STATE_VARS_CAPACITY,)),
]

TWOPHASE_PARTICLE_DTYPE = make_record_dtype(PARTICLE_FIELDS + LIQUID_FIELDS)


class TwoPhaseParticleRecord(ParticleRecord):
    """Fixed-layout state of a two-phase particle."""

    dtype = TWOPHASE_PARTICLE_DTYPE
    __slots__ = ()

    def liquid_state_variables(self) -> np.ndarray:
        """The active liquid state variables, ``liquid_svars[:nliquid_state_vars]``."""
        return self.liquid_svars[:self.nliquid_state_vars].copy()
