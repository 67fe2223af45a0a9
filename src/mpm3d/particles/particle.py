"""
Single-phase material point.

The particle is the long-lived, behaviour-bearing representation: it owns its
kinematic and stress state and holds references to shared material objects.
``to_record`` flattens it into a ParticleRecord for transfer or storage and
``initialise_particle`` rebuilds it from one, rebinding materials by id.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Optional, Union

import numpy as np

from ..errors import (
    CapacityExceededError,
    InvalidRecordError,
    MaterialNotFoundError,
    StateVariableMismatchError,
)
from ..logging_config import get_logger
from ..materials import Material, find_material
from ..records import STRAIN_FIELDS, STRESS_FIELDS, UNASSIGNED_CELL, ParticleRecord
from .types import ParticlePhase
from .utils import pack_state_variables, padded, unpack_state_variables

logger = get_logger(__name__)

Materials = Union[Mapping[int, Material], Iterable[Material]]

AXES = ("x", "y", "z")


class Particle:
    """A material point of dimension 1, 2 or 3 bound to a solid material."""

    record_type = ParticleRecord

    def __init__(self, id: int, coordinates, status: bool = True):
        coordinates = np.asarray(coordinates, dtype=float).reshape(-1)
        if not 1 <= coordinates.shape[0] <= 3:
            raise ValueError(f"Particle dimension must be 1, 2 or 3, got {coordinates.shape[0]}")
        self.dim = coordinates.shape[0]
        self._id = int(id)
        self._coordinates = coordinates.copy()
        self._status = bool(status)
        self.initialise()

    def initialise(self):
        """Reset every field except id, coordinates and status."""
        self._displacement = np.zeros(self.dim)
        self._natural_size = np.zeros(self.dim)
        self._velocity = np.zeros(self.dim)
        self._stress = np.zeros(6)
        self._strain = np.zeros(6)
        self._volumetric_strain_centroid = 0.0
        self._mass = 0.0
        self._volume = np.inf        # Unknown until the particle is located in a cell
        self._mass_density = 0.0
        self._pressure = 0.0
        self._cell_id = UNASSIGNED_CELL
        self._materials: Dict[ParticlePhase, Material] = {}
        self._state_variables: Dict[ParticlePhase, Dict[str, float]] = {ParticlePhase.SOLID: {}}

    # ---------------------------------------------------------------
    # Accessors
    # ---------------------------------------------------------------
    @property
    def id(self) -> int:
        return self._id

    @property
    def status(self) -> bool:
        return self._status

    @property
    def coordinates(self) -> np.ndarray:
        return self._coordinates.copy()

    @property
    def displacement(self) -> np.ndarray:
        return self._displacement.copy()

    @property
    def natural_size(self) -> np.ndarray:
        return self._natural_size.copy()

    @property
    def velocity(self) -> np.ndarray:
        return self._velocity.copy()

    @property
    def stress(self) -> np.ndarray:
        """Voigt order: xx, yy, zz, xy, yz, xz."""
        return self._stress.copy()

    @property
    def strain(self) -> np.ndarray:
        """Voigt order: xx, yy, zz, xy, yz, xz (engineering shear strains)."""
        return self._strain.copy()

    @property
    def volumetric_strain_centroid(self) -> float:
        return self._volumetric_strain_centroid

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def mass_density(self) -> float:
        return self._mass_density

    @property
    def pressure(self) -> float:
        return self._pressure

    @property
    def cell_id(self) -> int:
        return self._cell_id

    def has_cell(self) -> bool:
        """True once the particle has been located in a cell."""
        return self._cell_id != UNASSIGNED_CELL

    def material(self, phase: ParticlePhase = ParticlePhase.SOLID) -> Optional[Material]:
        return self._materials.get(phase)

    def material_id(self, phase: ParticlePhase = ParticlePhase.SOLID) -> Optional[int]:
        material = self._materials.get(phase)
        return None if material is None else material.id

    def state_variables(self, phase: ParticlePhase = ParticlePhase.SOLID) -> Dict[str, float]:
        return dict(self._state_variables.get(phase, {}))

    def state_variable(self, name: str, phase: ParticlePhase = ParticlePhase.SOLID) -> float:
        return self._state_variables[phase][name]

    # ---------------------------------------------------------------
    # Assignment
    # ---------------------------------------------------------------
    def _vector(self, values, name: str) -> np.ndarray:
        values = np.asarray(values, dtype=float).reshape(-1)
        if values.shape[0] != self.dim:
            raise ValueError(f"{name} needs {self.dim} components, got {values.shape[0]}")
        return values.copy()

    def _voigt(self, values, name: str) -> np.ndarray:
        values = np.asarray(values, dtype=float).reshape(-1)
        if values.shape[0] != 6:
            raise ValueError(f"{name} needs 6 Voigt components, got {values.shape[0]}")
        return values.copy()

    def assign_status(self, status: bool):
        self._status = bool(status)

    def assign_coordinates(self, coordinates):
        self._coordinates = self._vector(coordinates, "Coordinates")

    def assign_displacement(self, displacement):
        self._displacement = self._vector(displacement, "Displacement")

    def assign_natural_size(self, natural_size):
        self._natural_size = self._vector(natural_size, "Natural size")

    def assign_velocity(self, velocity):
        self._velocity = self._vector(velocity, "Velocity")

    def assign_stress(self, stress):
        self._stress = self._voigt(stress, "Stress")

    def assign_strain(self, strain):
        self._strain = self._voigt(strain, "Strain")

    def assign_volumetric_strain_centroid(self, epsilon_v: float):
        self._volumetric_strain_centroid = float(epsilon_v)

    def assign_pressure(self, pressure: float):
        self._pressure = float(pressure)

    def assign_mass(self, mass: float):
        if mass < 0:
            raise ValueError(f"Mass must be non-negative, got {mass}")
        self._mass = float(mass)
        self._update_mass_density()

    def assign_volume(self, volume: float):
        if volume <= 0:
            raise ValueError(f"Volume must be positive, got {volume}")
        self._volume = float(volume)
        self._update_mass_density()

    def _update_mass_density(self):
        if np.isfinite(self._volume):
            self._mass_density = self._mass / self._volume

    def assign_cell_id(self, cell_id: int):
        if cell_id < 0 or cell_id > UNASSIGNED_CELL:
            raise ValueError(f"Invalid cell id {cell_id}")
        self._cell_id = int(cell_id)

    def remove_cell(self):
        self._cell_id = UNASSIGNED_CELL

    def assign_material(self, material: Material, phase: ParticlePhase = ParticlePhase.SOLID):
        """Bind a material and reset the phase's state variables to the material's initial values."""
        if material is None:
            raise ValueError("Cannot assign a null material")
        self._materials[phase] = material
        self._state_variables[phase] = material.initialise_state_variables()

    def assign_state_variable(self, name: str, value: float, phase: ParticlePhase = ParticlePhase.SOLID):
        if name not in self._state_variables.get(phase, {}):
            raise KeyError(f"{phase.label} material defines no state variable '{name}'")
        self._state_variables[phase][name] = float(value)

    def compute_mass(self):
        """Mass from volume and solid density."""
        material = self._require_material(ParticlePhase.SOLID)
        self.assign_mass(self._volume * material.density)

    def _require_material(self, phase: ParticlePhase) -> Material:
        material = self._materials.get(phase)
        if material is None:
            raise ValueError(f"Particle {self._id} has no {phase.label} material")
        return material

    # ---------------------------------------------------------------
    # Particle -> record
    # ---------------------------------------------------------------
    def to_record(self) -> ParticleRecord:
        """
        Flatten the particle into a record of ``record_type``.

        Components beyond the particle dimension are written as zero. State
        variable slots beyond the active count are left as allocated.

        Raises:
            ValueError: No solid material is bound
            CapacityExceededError: The material defines more state variables than the record holds
        """
        record = self.record_type()
        self._write(record)
        return record

    def _write(self, record: ParticleRecord):
        material = self._require_material(ParticlePhase.SOLID)

        record.id = self._id
        record.mass = self._mass
        record.volume = self._volume
        record.pressure = self._pressure

        for prefix, vector in (("coord", self._coordinates),
                               ("displacement", self._displacement),
                               ("nsize", self._natural_size),
                               ("velocity", self._velocity)):
            for axis, value in zip(AXES, padded(vector)):
                setattr(record, f"{prefix}_{axis}", value)

        for name, value in zip(STRESS_FIELDS, self._stress):
            setattr(record, name, value)
        for name, value in zip(STRAIN_FIELDS, self._strain):
            setattr(record, name, value)
        record.epsilon_v = self._volumetric_strain_centroid

        record.status = self._status
        record.cell_id = self._cell_id
        record.material_id = material.id
        record.nstate_vars = pack_state_variables(
            record.svars, material.state_variables(),
            self._state_variables[ParticlePhase.SOLID], ParticlePhase.SOLID.label)

    # ---------------------------------------------------------------
    # Record -> particle
    # ---------------------------------------------------------------
    def initialise_particle(self, record: ParticleRecord, materials: Materials) -> bool:
        """
        Rebuild the particle from a record, binding materials by id.

        Returns False, leaving the particle unchanged, when a material id is
        missing from ``materials``, the record's state variables do not fit
        the bound material, or a field holds a value no particle may have.
        """
        try:
            self.from_record(record, materials)
        except (MaterialNotFoundError, StateVariableMismatchError, CapacityExceededError,
                InvalidRecordError) as exc:
            logger.warning("Particle %d not reconstructed: %s", record.id, exc)
            return False
        return True

    def from_record(self, record: ParticleRecord, materials: Materials):
        """Raising variant of ``initialise_particle``."""
        if not isinstance(materials, Mapping):
            # Solid and liquid lookups each scan the collection
            materials = list(materials)
        bindings = self._resolve(record, materials)
        self._read(record, bindings)

    @staticmethod
    def _check_record(record: ParticleRecord):
        # Written as negated comparisons so that NaN is rejected too
        if not record.mass >= 0:
            raise InvalidRecordError(record.id, "mass", record.mass)
        if not record.volume > 0:
            raise InvalidRecordError(record.id, "volume", record.volume)

    def _resolve(self, record: ParticleRecord, materials: Materials) -> dict:
        """Validate the record, look up every material and decode state variables before anything is modified."""
        self._check_record(record)
        phase = ParticlePhase.SOLID
        material = find_material(materials, record.material_id, phase.label)
        svars = unpack_state_variables(
            record.svars, record.nstate_vars, material.state_variables(), phase.label)
        return {phase: (material, svars)}

    def _read(self, record: ParticleRecord, bindings: dict):
        self._id = record.id
        self._mass = record.mass
        self._volume = record.volume
        self._pressure = record.pressure
        self._mass_density = self._mass / self._volume

        dim = self.dim
        self._coordinates = np.array([record.coord_x, record.coord_y, record.coord_z])[:dim]
        self._displacement = np.array(
            [record.displacement_x, record.displacement_y, record.displacement_z])[:dim]
        self._natural_size = np.array([record.nsize_x, record.nsize_y, record.nsize_z])[:dim]
        self._velocity = np.array([record.velocity_x, record.velocity_y, record.velocity_z])[:dim]

        self._stress = np.array([getattr(record, name) for name in STRESS_FIELDS])
        self._strain = np.array([getattr(record, name) for name in STRAIN_FIELDS])
        self._volumetric_strain_centroid = record.epsilon_v

        self._status = record.status
        self._cell_id = record.cell_id

        self._materials = {phase: material for phase, (material, _) in bindings.items()}
        self._state_variables = {phase: svars for phase, (_, svars) in bindings.items()}

    def __repr__(self):
        return f"{type(self).__name__}(id={self._id}, dim={self.dim}, cell_id={self._cell_id})"
