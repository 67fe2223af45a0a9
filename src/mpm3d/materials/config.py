'''
Material parameter settings
'''
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, Mapping


class MaterialConfig(ABC):
    """Base class for material parameters."""

    @abstractmethod
    def get_model_name(self) -> str:
        pass

    @abstractmethod
    def validate(self):
        pass

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "MaterialConfig":
        """Build from a property mapping, ignoring keys the model does not use."""
        known = {f.name for f in fields(cls)}
        kwargs = {key: value for key, value in properties.items() if key in known}
        try:
            return cls(**kwargs)
        except TypeError as exc:
            raise ValueError(f"Incomplete properties for {cls.__name__}: {exc}") from exc


@dataclass
class LinearElasticConfig(MaterialConfig):
    """Isotropic linear elastic skeleton."""
    density: float
    youngs_modulus: float
    poisson_ratio: float

    # Two-phase skeleton properties
    porosity: float = 0.0
    k_x: float = 0.0        # Permeability
    k_y: float = 0.0
    k_z: float = 0.0

    def get_model_name(self) -> str:
        return "LinearElastic3D"

    def validate(self):
        if self.density <= 0:
            raise ValueError("Density must be positive")
        if self.youngs_modulus <= 0:
            raise ValueError("Young's modulus must be positive")
        if not (-1.0 < self.poisson_ratio < 0.5):
            raise ValueError("Poisson ratio must be in (-1, 0.5)")
        if not (0 <= self.porosity <= 1):
            raise ValueError("Porosity must be between 0 and 1")
        if min(self.k_x, self.k_y, self.k_z) < 0:
            raise ValueError("Permeability must be non-negative")


@dataclass
class NewtonianConfig(MaterialConfig):
    """Compressible Newtonian fluid."""
    density: float
    bulk_modulus: float
    dynamic_viscosity: float

    def get_model_name(self) -> str:
        return "Newtonian3D"

    def validate(self):
        if self.density <= 0:
            raise ValueError("Density must be positive")
        if self.bulk_modulus <= 0:
            raise ValueError("Bulk modulus must be positive")
        if self.dynamic_viscosity < 0:
            raise ValueError("Dynamic viscosity must be non-negative")


@dataclass
class MohrCoulombConfig(MaterialConfig):
    """Mohr-Coulomb soil with linear softening between peak and residual values."""
    density: float
    youngs_modulus: float
    poisson_ratio: float
    friction: float            # Peak friction angle (degrees)
    dilation: float            # Peak dilation angle (degrees)
    cohesion: float
    residual_friction: float = 0.0
    residual_dilation: float = 0.0
    residual_cohesion: float = 0.0
    peak_pdstrain: float = 0.0
    residual_pdstrain: float = 0.0
    tension_cutoff: float = 0.0
    softening: bool = False

    def get_model_name(self) -> str:
        return "MohrCoulomb3D"

    def validate(self):
        if self.density <= 0:
            raise ValueError("Density must be positive")
        if self.youngs_modulus <= 0:
            raise ValueError("Young's modulus must be positive")
        if not (-1.0 < self.poisson_ratio < 0.5):
            raise ValueError("Poisson ratio must be in (-1, 0.5)")
        if not (0 <= self.friction < 90) or not (0 <= self.residual_friction < 90):
            raise ValueError("Friction angles must be in [0, 90) degrees")
        if self.dilation < 0 or self.dilation > self.friction:
            raise ValueError("Dilation angle must be between 0 and the friction angle")
        if self.cohesion < 0 or self.residual_cohesion < 0:
            raise ValueError("Cohesion must be non-negative")
        if self.softening and self.residual_pdstrain < self.peak_pdstrain:
            raise ValueError("Residual plastic deviatoric strain must not precede the peak")
