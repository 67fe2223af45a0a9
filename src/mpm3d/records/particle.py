"""
Single-phase particle record.

Field order is the storage and transport contract: ids first, then every
float from mass to epsilon_v as one contiguous run, then status, cell,
material binding and the fixed-capacity state variable array.
"""

from .types import (
    INDEX,
    NSTATE_VARS_CAPACITY,
    REAL,
    UNSIGNED,
    Record,
    make_record_dtype,
    vector_fields,
)

#=====================================
# Field Definitions
#=====================================
PARTICLE_FIELDS = [
    ("id", INDEX),                 # Particle id
    ("mass", REAL),
    ("volume", REAL),
    ("pressure", REAL),
    *vector_fields("coord"),
    *vector_fields("displacement"),
    *vector_fields("nsize"),       # Natural (shape function support) size
    *vector_fields("velocity"),
    # Voigt order: xx, yy, zz, xy, yz, xz
    *vector_fields("stress", ("xx", "yy", "zz")),
    *vector_fields("tau", ("xy", "yz", "xz")),
    *vector_fields("strain", ("xx", "yy", "zz")),
    *vector_fields("gamma", ("xy", "yz", "xz")),
    ("epsilon_v", REAL),           # Volumetric strain at the cell centroid
    ("status", bool),
    ("cell_id", INDEX),            # UNASSIGNED_CELL until the particle is located
    ("material_id", UNSIGNED),
    ("nstate_vars", UNSIGNED),
    ("svars", REAL, (NSTATE_VARS_CAPACITY,)),
]

STRESS_FIELDS = ("stress_xx", "stress_yy", "stress_zz", "tau_xy", "tau_yz", "tau_xz")
STRAIN_FIELDS = ("strain_xx", "strain_yy", "strain_zz", "gamma_xy", "gamma_yz", "gamma_xz")

PARTICLE_DTYPE = make_record_dtype(PARTICLE_FIELDS)


class ParticleRecord(Record):
    """Fixed-layout state of a single-phase particle."""

    dtype = PARTICLE_DTYPE
    __slots__ = ()
