"""
Material objects shared by every particle bound to them.

Particles hold references to these objects, never copies; records carry only
the numeric id, which is resolved back to the live object on reconstruction.
Constitutive updates are not part of this package.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Mapping, Type, Union

from .config import LinearElasticConfig, MaterialConfig, MohrCoulombConfig, NewtonianConfig


class Material(ABC):
    """A material model with a stable numeric id."""

    config_class: ClassVar[Type[MaterialConfig]]

    def __init__(self, material_id: int, properties: Union[Mapping[str, Any], MaterialConfig]):
        if material_id < 0:
            raise ValueError(f"Material id must be non-negative, got {material_id}")
        if isinstance(properties, MaterialConfig):
            config = properties
        else:
            config = self.config_class.from_properties(properties)
        config.validate()

        self.id = int(material_id)
        self.config = config

    @property
    def name(self) -> str:
        return self.config.get_model_name()

    @property
    def density(self) -> float:
        return self.config.density

    @abstractmethod
    def initialise_state_variables(self) -> Dict[str, float]:
        """Initial values of the history variables a particle carries for this material."""

    def state_variables(self) -> List[str]:
        """Names of the state variables, in record order."""
        return list(self.initialise_state_variables())

    def __repr__(self):
        return f"{type(self).__name__}(id={self.id})"


class LinearElastic3D(Material):
    config_class = LinearElasticConfig

    @property
    def shear_modulus(self) -> float:
        return self.config.youngs_modulus / (2.0 * (1.0 + self.config.poisson_ratio))

    @property
    def bulk_modulus(self) -> float:
        return self.config.youngs_modulus / (3.0 * (1.0 - 2.0 * self.config.poisson_ratio))

    def initialise_state_variables(self) -> Dict[str, float]:
        return {}


class Newtonian3D(Material):
    config_class = NewtonianConfig

    def initialise_state_variables(self) -> Dict[str, float]:
        return {"pressure": 0.0}


class MohrCoulomb3D(Material):
    config_class = MohrCoulombConfig

    def initialise_state_variables(self) -> Dict[str, float]:
        return {
            "phi": self.config.friction,
            "psi": self.config.dilation,
            "cohesion": self.config.cohesion,
            "epsilon": 0.0,     # Equivalent plastic strain
            "rho": 0.0,         # Stress invariants
            "theta": 0.0,
            "pdstrain": 0.0,    # Plastic deviatoric strain
        }
