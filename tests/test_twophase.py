"""Tests for two-phase particle reconstruction, including a transfer through the loopback transport."""

from __future__ import annotations

import numpy as np
import pytest

from mpm3d.errors import InvalidRecordError, MaterialNotFoundError
from mpm3d.materials import MaterialRegistry, create_material
from mpm3d.particles import Particle, ParticlePhase, TwoPhaseParticle
from mpm3d.records import TwoPhaseParticleRecord
from mpm3d.transport import LoopbackTransport, recv_particle, send_particle
from tests.conftest import (
    COORDINATES,
    DISPLACEMENT,
    LIQUID_PROPERTIES,
    LIQUID_VELOCITY,
    NATURAL_SIZE,
    SOLID_PROPERTIES,
    STRAIN,
    STRESS,
    VELOCITY,
)


def snapshot(particle: TwoPhaseParticle) -> dict:
    """Observable state of a particle, for before/after comparisons."""
    return {
        "id": particle.id,
        "mass": particle.mass,
        "volume": particle.volume,
        "mass_density": particle.mass_density,
        "pressure": particle.pressure,
        "coordinates": tuple(particle.coordinates),
        "displacement": tuple(particle.displacement),
        "natural_size": tuple(particle.natural_size),
        "velocity": tuple(particle.velocity),
        "stress": tuple(particle.stress),
        "strain": tuple(particle.strain),
        "epsilon_v": particle.volumetric_strain_centroid,
        "status": particle.status,
        "cell_id": particle.cell_id,
        "solid": particle.material_id(ParticlePhase.SOLID),
        "liquid": particle.material_id(ParticlePhase.LIQUID),
        "svars": particle.state_variables(ParticlePhase.SOLID),
        "liquid_svars": particle.state_variables(ParticlePhase.LIQUID),
        "liquid_mass": particle.liquid_mass,
        "liquid_velocity": tuple(particle.liquid_velocity),
        "porosity": particle.porosity,
        "liquid_saturation": particle.liquid_saturation,
    }


@pytest.fixture
def particle(solid_material, liquid_material) -> TwoPhaseParticle:
    """The particle described by the reference record, built through the assign API."""
    particle = TwoPhaseParticle(13, COORDINATES)
    particle.assign_material(solid_material, ParticlePhase.SOLID)
    particle.assign_material(liquid_material, ParticlePhase.LIQUID)
    particle.assign_volume(2.0)
    particle.assign_mass(501.5)
    particle.assign_pressure(125.75)
    particle.assign_displacement(DISPLACEMENT)
    particle.assign_natural_size(NATURAL_SIZE)
    particle.assign_velocity(VELOCITY)
    particle.assign_stress(STRESS)
    particle.assign_strain(STRAIN)
    particle.assign_volumetric_strain_centroid(sum(STRAIN[:3]))
    particle.assign_cell_id(1)
    particle.assign_liquid_mass(100.1)
    particle.assign_liquid_velocity(LIQUID_VELOCITY)
    particle.assign_porosity(0.33)
    particle.assign_liquid_saturation(1.0)
    return particle


class TestReferenceParticle:
    """Encode, transfer over a single rank, decode."""

    def test_reconstruct_from_record(self, twophase_record, materials):
        particle = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert particle.initialise_particle(twophase_record, materials)

        assert particle.id == 13
        assert particle.mass == 501.5
        assert particle.volume == 2.0
        assert particle.mass_density == 250.75
        assert particle.pressure == 125.75
        np.testing.assert_array_equal(particle.coordinates, COORDINATES)
        np.testing.assert_array_equal(particle.displacement, DISPLACEMENT)
        np.testing.assert_array_equal(particle.natural_size, NATURAL_SIZE)
        np.testing.assert_array_equal(particle.velocity, VELOCITY)
        np.testing.assert_array_equal(particle.stress, STRESS)
        np.testing.assert_array_equal(particle.strain, STRAIN)
        assert particle.volumetric_strain_centroid == sum(STRAIN[:3])
        assert particle.status is True
        assert particle.cell_id == 1

        assert particle.material_id(ParticlePhase.SOLID) == 1
        assert particle.material_id(ParticlePhase.LIQUID) == 2
        assert particle.state_variables(ParticlePhase.SOLID) == {}
        assert particle.state_variables(ParticlePhase.LIQUID) == {"pressure": 0.0}

        assert particle.liquid_mass == 100.1
        np.testing.assert_array_equal(particle.liquid_velocity, LIQUID_VELOCITY)
        assert particle.porosity == 0.33
        assert particle.liquid_saturation == 1.0
        assert particle.is_twophase

    def test_encode_matches_reference_record(self, particle, twophase_record):
        record = particle.to_record()
        assert isinstance(record, TwoPhaseParticleRecord)
        for name in TwoPhaseParticleRecord.fields():
            np.testing.assert_array_equal(
                getattr(record, name), getattr(twophase_record, name), err_msg=name)

    def test_encode_transfer_decode(self, particle, materials):
        transport = LoopbackTransport()
        send_particle(transport, particle.to_record(), dest=0)
        received = recv_particle(transport, TwoPhaseParticleRecord, source=0)

        rebuilt = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert rebuilt.initialise_particle(received, materials)
        assert snapshot(rebuilt) == snapshot(particle)
        assert rebuilt.mass_density == 250.75
        assert rebuilt.material(ParticlePhase.SOLID) is particle.material(ParticlePhase.SOLID)
        assert rebuilt.material(ParticlePhase.LIQUID) is particle.material(ParticlePhase.LIQUID)

    def test_registry_lookup(self, twophase_record, registry):
        particle = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert particle.initialise_particle(twophase_record, registry)
        assert particle.material(ParticlePhase.LIQUID) is registry[2]

    def test_one_shot_iterator(self, twophase_record, solid_material, liquid_material):
        """Both phases resolve from a generator, whatever order it yields the materials in."""
        particle = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        materials = (m for m in [liquid_material, solid_material])
        assert particle.initialise_particle(twophase_record, materials)
        assert particle.material(ParticlePhase.SOLID) is solid_material
        assert particle.material(ParticlePhase.LIQUID) is liquid_material


class TestFailedReconstruction:
    """A record that cannot be bound leaves the particle as it was."""

    @pytest.mark.parametrize("field, phase", [
        ("material_id", "solid"),
        ("liquid_material_id", "liquid"),
    ])
    def test_unknown_material(self, particle, twophase_record, materials, field, phase):
        setattr(twophase_record, field, 99)
        before = snapshot(particle)

        assert not particle.initialise_particle(twophase_record, materials)
        assert snapshot(particle) == before

        with pytest.raises(MaterialNotFoundError) as excinfo:
            particle.from_record(twophase_record, materials)
        assert excinfo.value.material_id == 99
        assert excinfo.value.phase == phase

    def test_empty_materials(self, twophase_record):
        assert not TwoPhaseParticle(0, [0.0, 0.0, 0.0]).initialise_particle(twophase_record, [])

    def test_liquid_state_variable_mismatch(self, particle, twophase_record, materials):
        twophase_record.nliquid_state_vars = 3
        before = snapshot(particle)
        assert not particle.initialise_particle(twophase_record, materials)
        assert snapshot(particle) == before

    @pytest.mark.parametrize("field, value", [
        ("mass", -5.0),
        ("volume", -2.0),
        ("volume", 0.0),
        ("volume", float("nan")),
        ("liquid_mass", -0.1),
        ("porosity", 1.5),
        ("liquid_saturation", -0.25),
    ])
    def test_out_of_range_value(self, particle, twophase_record, materials, field, value):
        setattr(twophase_record, field, value)
        before = snapshot(particle)

        assert not particle.initialise_particle(twophase_record, materials)
        assert snapshot(particle) == before

        with pytest.raises(InvalidRecordError) as excinfo:
            particle.from_record(twophase_record, materials)
        assert excinfo.value.particle_id == 13

    def test_every_field_out_of_range(self, twophase_record, materials):
        twophase_record.mass = -5.0
        twophase_record.volume = -2.0
        twophase_record.porosity = 1.5
        twophase_record.liquid_saturation = -0.25
        particle = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert not particle.initialise_particle(twophase_record, materials)
        assert particle.id == 0
        assert particle.mass == 0.0

    def test_count_beyond_capacity(self, twophase_record, materials):
        twophase_record.nliquid_state_vars = 6
        assert not TwoPhaseParticle(0, [0.0, 0.0, 0.0]).initialise_particle(twophase_record, materials)


class TestReconstructionProperties:

    def test_idempotent(self, twophase_record, materials):
        particle = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert particle.initialise_particle(twophase_record, materials)
        first = snapshot(particle)
        assert particle.initialise_particle(twophase_record, materials)
        assert snapshot(particle) == first

    def test_record_not_modified(self, twophase_record, materials):
        original = twophase_record.buffer.tobytes()
        TwoPhaseParticle(0, [0.0, 0.0, 0.0]).initialise_particle(twophase_record, materials)
        assert twophase_record.buffer.tobytes() == original

    def test_phases_are_independent(self):
        """Solid and liquid bind to different materials even when the models coincide."""
        solid = create_material("LinearElastic3D", 4, SOLID_PROPERTIES)
        liquid = create_material("Newtonian3D", 7, LIQUID_PROPERTIES)
        other = create_material("Newtonian3D", 8, dict(LIQUID_PROPERTIES, density=1200.0))
        registry = MaterialRegistry([solid, liquid, other])

        particle = TwoPhaseParticle(1, [0.0, 0.0, 0.0])
        particle.assign_material(solid, ParticlePhase.SOLID)
        particle.assign_material(other, ParticlePhase.LIQUID)
        particle.assign_porosity(0.4)
        particle.assign_liquid_saturation(0.75)
        particle.assign_liquid_mass(12.5)

        rebuilt = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert rebuilt.initialise_particle(particle.to_record(), registry)
        assert rebuilt.material(ParticlePhase.SOLID) is solid
        assert rebuilt.material(ParticlePhase.LIQUID) is other
        assert rebuilt.porosity == 0.4
        assert rebuilt.liquid_saturation == 0.75
        assert rebuilt.liquid_mass == 12.5

    def test_liquid_state_variable_values(self, particle, materials):
        particle.assign_state_variable("pressure", -3.25, ParticlePhase.LIQUID)
        rebuilt = TwoPhaseParticle(0, [0.0, 0.0, 0.0])
        assert rebuilt.initialise_particle(particle.to_record(), materials)
        assert rebuilt.state_variable("pressure", ParticlePhase.LIQUID) == -3.25

    def test_single_phase_record(self, particle, solid_material, materials):
        """A single-phase record rebuilds a two-phase particle with no liquid binding."""
        single = Particle(5, [1.0, 1.0, 1.0])
        single.assign_material(solid_material)
        single.assign_volume(1.0)
        single.assign_mass(10.0)

        assert particle.initialise_particle(single.to_record(), materials)
        assert particle.id == 5
        assert not particle.is_twophase
        assert particle.material(ParticlePhase.LIQUID) is None
        assert particle.liquid_mass == 0.0
        assert particle.porosity == 0.0


class TestTwoPhaseParticle:

    def test_missing_liquid_material(self, solid_material):
        particle = TwoPhaseParticle(1, [0.0, 0.0, 0.0])
        particle.assign_material(solid_material)
        with pytest.raises(ValueError, match="no liquid material"):
            particle.to_record()

    @pytest.mark.parametrize("method, value", [
        ("assign_liquid_mass", -0.1),
        ("assign_porosity", 1.5),
        ("assign_liquid_saturation", -0.5),
        ("assign_liquid_velocity", [1.0]),
    ])
    def test_invalid_assignment(self, method, value):
        with pytest.raises(ValueError):
            getattr(TwoPhaseParticle(1, [0.0, 0.0, 0.0]), method)(value)

    def test_compute_mass(self, solid_material, liquid_material):
        particle = TwoPhaseParticle(1, [0.0, 0.0, 0.0])
        particle.assign_material(solid_material, ParticlePhase.SOLID)
        particle.assign_material(liquid_material, ParticlePhase.LIQUID)
        particle.assign_volume(2.0)
        particle.assign_porosity(0.25)
        particle.assign_liquid_saturation(0.5)
        particle.compute_mass()
        assert particle.mass == pytest.approx(1500.0)
        assert particle.liquid_mass == pytest.approx(250.0)
