"""
Material construction by model name and lookup by numeric id.
"""

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Type, Union

from ..errors import MaterialNotFoundError
from ..logging_config import get_logger
from .material import LinearElastic3D, Material, MohrCoulomb3D, Newtonian3D

logger = get_logger(__name__)

MATERIAL_MODELS: Dict[str, Type[Material]] = {
    "LinearElastic3D": LinearElastic3D,
    "Newtonian3D": Newtonian3D,
    "MohrCoulomb3D": MohrCoulomb3D,
}


def create_material(name: str, material_id: int, properties: Mapping[str, Any]) -> Material:
    """Construct a registered material model, e.g. ``create_material("Newtonian3D", 2, props)``."""
    model = MATERIAL_MODELS.get(name)
    if model is None:
        raise ValueError(
            f"Unknown material model: {name}. Available: {', '.join(sorted(MATERIAL_MODELS))}")
    return model(material_id, properties)


class MaterialRegistry(Mapping):
    """Materials keyed by id. Adding a second material with the same id is an error."""

    def __init__(self, materials: Iterable[Material] = ()):
        self._materials: Dict[int, Material] = {}
        for material in materials:
            self.add(material)

    def add(self, material: Material) -> "MaterialRegistry":
        if material.id in self._materials:
            raise ValueError(f"Duplicate material id {material.id}")
        self._materials[material.id] = material
        return self

    def __getitem__(self, material_id: int) -> Material:
        return self._materials[material_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def find(self, material_id: int, phase: str = "solid") -> Material:
        return find_material(self, material_id, phase)


def find_material(materials: Union[Mapping[int, Material], Iterable[Material]],
                  material_id: int, phase: str = "solid") -> Material:
    """
    Resolve a material id against a mapping or sequence of materials.

    Args:
        materials: MaterialRegistry, any id -> material mapping, or an iterable of materials
        material_id: Exact id to look up
        phase: Phase name used in the error when the id is missing

    Returns:
        The live material object with that id

    Raises:
        MaterialNotFoundError: No material has that id
    """
    if isinstance(materials, Mapping):
        material = materials.get(material_id)
    else:
        material = next((m for m in materials if m.id == material_id), None)
    if material is None:
        logger.debug("No %s material with id %d", phase, material_id)
        raise MaterialNotFoundError(material_id, phase)
    return material
