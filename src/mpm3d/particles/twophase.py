"""
Two-phase material point: solid skeleton plus pore liquid.

The liquid phase has its own material binding and state variables, stored
after the solid section in a TwoPhaseParticleRecord.
"""

import numpy as np

from ..errors import InvalidRecordError
from ..materials import find_material
from ..records import ParticleRecord, TwoPhaseParticleRecord
from .particle import AXES, Materials, Particle
from .types import ParticlePhase
from .utils import pack_state_variables, padded, unpack_state_variables


class TwoPhaseParticle(Particle):
    """Particle carrying coupled solid and liquid state."""

    record_type = TwoPhaseParticleRecord

    def initialise(self):
        super().initialise()
        self._liquid_mass = 0.0
        self._liquid_velocity = np.zeros(self.dim)
        self._porosity = 0.0
        self._liquid_saturation = 1.0
        self._state_variables[ParticlePhase.LIQUID] = {}

    @property
    def is_twophase(self) -> bool:
        """True when a liquid material is bound."""
        return ParticlePhase.LIQUID in self._materials

    @property
    def liquid_mass(self) -> float:
        return self._liquid_mass

    @property
    def liquid_velocity(self) -> np.ndarray:
        return self._liquid_velocity.copy()

    @property
    def porosity(self) -> float:
        return self._porosity

    @property
    def liquid_saturation(self) -> float:
        return self._liquid_saturation

    def assign_liquid_mass(self, liquid_mass: float):
        if liquid_mass < 0:
            raise ValueError(f"Liquid mass must be non-negative, got {liquid_mass}")
        self._liquid_mass = float(liquid_mass)

    def assign_liquid_velocity(self, velocity):
        self._liquid_velocity = self._vector(velocity, "Liquid velocity")

    def assign_porosity(self, porosity: float):
        if not 0 <= porosity <= 1:
            raise ValueError(f"Porosity must be between 0 and 1, got {porosity}")
        self._porosity = float(porosity)

    def assign_liquid_saturation(self, saturation: float):
        if not 0 <= saturation <= 1:
            raise ValueError(f"Liquid saturation must be between 0 and 1, got {saturation}")
        self._liquid_saturation = float(saturation)

    def compute_mass(self):
        """Solid mass from the skeleton fraction, liquid mass from the saturated pore fraction."""
        solid = self._require_material(ParticlePhase.SOLID)
        liquid = self._require_material(ParticlePhase.LIQUID)
        self.assign_mass(self._volume * (1.0 - self._porosity) * solid.density)
        self.assign_liquid_mass(
            self._volume * self._porosity * self._liquid_saturation * liquid.density)

    def _write(self, record: TwoPhaseParticleRecord):
        super()._write(record)
        liquid = self._require_material(ParticlePhase.LIQUID)

        record.liquid_mass = self._liquid_mass
        for axis, value in zip(AXES, padded(self._liquid_velocity)):
            setattr(record, f"liquid_velocity_{axis}", value)
        record.porosity = self._porosity
        record.liquid_saturation = self._liquid_saturation
        record.liquid_material_id = liquid.id
        record.nliquid_state_vars = pack_state_variables(
            record.liquid_svars, liquid.state_variables(),
            self._state_variables[ParticlePhase.LIQUID], ParticlePhase.LIQUID.label)

    @staticmethod
    def has_liquid_section(record: ParticleRecord) -> bool:
        return "liquid_material_id" in record.dtype.names

    def _resolve(self, record: ParticleRecord, materials: Materials) -> dict:
        bindings = super()._resolve(record, materials)
        if self.has_liquid_section(record):
            if not record.liquid_mass >= 0:
                raise InvalidRecordError(record.id, "liquid mass", record.liquid_mass)
            for name in ("porosity", "liquid_saturation"):
                value = getattr(record, name)
                if not 0 <= value <= 1:
                    raise InvalidRecordError(record.id, name.replace("_", " "), value)
            phase = ParticlePhase.LIQUID
            liquid = find_material(materials, record.liquid_material_id, phase.label)
            bindings[phase] = (liquid, unpack_state_variables(
                record.liquid_svars, record.nliquid_state_vars, liquid.state_variables(), phase.label))
        return bindings

    def _read(self, record: ParticleRecord, bindings: dict):
        super()._read(record, bindings)
        if not self.has_liquid_section(record):
            # Single-phase record: the particle stays solid only
            self._liquid_mass = 0.0
            self._liquid_velocity = np.zeros(self.dim)
            self._porosity = 0.0
            self._liquid_saturation = 1.0
            self._state_variables[ParticlePhase.LIQUID] = {}
            return

        self._liquid_mass = record.liquid_mass
        self._liquid_velocity = np.array(
            [record.liquid_velocity_x, record.liquid_velocity_y, record.liquid_velocity_z])[:self.dim]
        self._porosity = record.porosity
        self._liquid_saturation = record.liquid_saturation
