"""Shared fixtures: materials and the reference two-phase particle record."""

from __future__ import annotations

import pytest

from mpm3d.materials import MaterialRegistry, create_material
from mpm3d.records import TwoPhaseParticleRecord

SOLID_PROPERTIES = {
    "density": 1000.0,
    "youngs_modulus": 1.0e7,
    "poisson_ratio": 0.3,
    "porosity": 0.3,
    "k_x": 0.001,
    "k_y": 0.001,
    "k_z": 0.001,
}

LIQUID_PROPERTIES = {
    "density": 1000.0,
    "bulk_modulus": 2.0e9,
    "dynamic_viscosity": 8.90e-4,
}

MOHR_COULOMB_PROPERTIES = {
    "density": 2000.0,
    "youngs_modulus": 5.0e7,
    "poisson_ratio": 0.25,
    "friction": 30.0,
    "dilation": 5.0,
    "cohesion": 1000.0,
}

COORDINATES = (1.0, 2.0, 3.0)
DISPLACEMENT = (0.01, 0.02, 0.03)
NATURAL_SIZE = (0.25, 0.5, 0.75)
VELOCITY = (1.5, 2.5, 3.5)
STRESS = (11.5, -12.5, 13.5, 14.5, -15.5, 16.5)
STRAIN = (0.115, -0.125, 0.135, 0.145, -0.155, 0.165)
LIQUID_VELOCITY = (5.5, 2.1, 4.2)


@pytest.fixture
def solid_material():
    return create_material("LinearElastic3D", 1, SOLID_PROPERTIES)


@pytest.fixture
def liquid_material():
    return create_material("Newtonian3D", 2, LIQUID_PROPERTIES)


@pytest.fixture
def materials(solid_material, liquid_material):
    """Plain list, as a simulation would hold them."""
    return [solid_material, liquid_material]


@pytest.fixture
def registry(materials):
    return MaterialRegistry(materials)


def make_twophase_record() -> TwoPhaseParticleRecord:
    """Two-phase record filled field by field, state variable arrays zero-filled."""
    record = TwoPhaseParticleRecord()
    record.id = 13
    record.mass = 501.5
    record.pressure = 125.75
    record.coord_x, record.coord_y, record.coord_z = COORDINATES
    record.displacement_x, record.displacement_y, record.displacement_z = DISPLACEMENT
    record.nsize_x, record.nsize_y, record.nsize_z = NATURAL_SIZE
    record.velocity_x, record.velocity_y, record.velocity_z = VELOCITY
    (record.stress_xx, record.stress_yy, record.stress_zz,
     record.tau_xy, record.tau_yz, record.tau_xz) = STRESS
    (record.strain_xx, record.strain_yy, record.strain_zz,
     record.gamma_xy, record.gamma_yz, record.gamma_xz) = STRAIN
    record.epsilon_v = sum(STRAIN[:3])
    record.status = True
    record.cell_id = 1
    record.volume = 2.0
    record.material_id = 1
    record.nstate_vars = 0
    record.liquid_mass = 100.1
    record.liquid_velocity_x, record.liquid_velocity_y, record.liquid_velocity_z = LIQUID_VELOCITY
    record.porosity = 0.33
    record.liquid_saturation = 1.0
    record.liquid_material_id = 2
    record.nliquid_state_vars = 1
    record.liquid_svars[0] = 0.0
    return record


@pytest.fixture
def twophase_record() -> TwoPhaseParticleRecord:
    return make_twophase_record()
