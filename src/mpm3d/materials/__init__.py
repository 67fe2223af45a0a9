"""
Material models and the id-keyed registry used to rebind reconstructed particles.

- LinearElastic3D: isotropic elastic skeleton, no state variables
- Newtonian3D: compressible viscous fluid, carries pressure
- MohrCoulomb3D: frictional soil with softening history variables
"""

from .config import LinearElasticConfig, MaterialConfig, MohrCoulombConfig, NewtonianConfig
from .material import LinearElastic3D, Material, MohrCoulomb3D, Newtonian3D
from .registry import MATERIAL_MODELS, MaterialRegistry, create_material, find_material

__all__ = [
    "LinearElastic3D",
    "LinearElasticConfig",
    "MATERIAL_MODELS",
    "Material",
    "MaterialConfig",
    "MaterialRegistry",
    "MohrCoulomb3D",
    "MohrCoulombConfig",
    "Newtonian3D",
    "NewtonianConfig",
    "create_material",
    "find_material",
]
