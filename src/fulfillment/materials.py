"""Packing material catalog.

A static list of shipping materials operators choose from at the packing
station. Every type except a plain envelope protects its contents, which is
what fragile items require.
"""

from dataclasses import dataclass, replace
from enum import Enum
from threading import Lock

from fulfillment.errors import MaterialUnavailable, NotFound, UnsuitableMaterial


class MaterialType(Enum):
    BOX = "box"
    ENVELOPE = "envelope"
    BUBBLE_WRAP = "bubbleWrap"
    PADDED_ENVELOPE = "paddedEnvelope"


@dataclass(frozen=True)
class PackingMaterial:
    id: str
    name: str
    type: MaterialType
    size: str | None = None
    available: bool = True

    @property
    def protective(self) -> bool:
        return self.type != MaterialType.ENVELOPE


_STANDARD_MATERIALS = (
    PackingMaterial("BOX-001", "Small Box (20x15x10cm)", MaterialType.BOX, "Small"),
    PackingMaterial("BOX-002", "Medium Box (30x20x15cm)", MaterialType.BOX, "Medium"),
    PackingMaterial("BOX-003", "Large Box (40x30x20cm)", MaterialType.BOX, "Large"),
    PackingMaterial("ENV-001", "Standard Envelope", MaterialType.ENVELOPE),
    PackingMaterial("ENV-002", "Padded Envelope", MaterialType.PADDED_ENVELOPE),
    PackingMaterial("BUBBLE-001", "Bubble Wrap Roll", MaterialType.BUBBLE_WRAP),
)

_lock = Lock()
_catalog: dict[str, PackingMaterial] = {}


def reset_catalog() -> None:
    """Restore the standard catalog with every material available."""
    with _lock:
        _catalog.clear()
        _catalog.update({material.id: material for material in _STANDARD_MATERIALS})


def list_materials() -> list[PackingMaterial]:
    with _lock:
        return list(_catalog.values())


def get_material(material_id: str) -> PackingMaterial:
    with _lock:
        material = _catalog.get(material_id)
    if material is None:
        raise NotFound(f"Packing material {material_id} not found", material_id=material_id)
    return material


def set_availability(material_id: str, available: bool) -> PackingMaterial:
    """Mark a material as in or out of stock at the packing station."""
    material = get_material(material_id)
    with _lock:
        _catalog[material_id] = replace(material, available=available)
        return _catalog[material_id]


def select_material_for(item, material_id: str) -> PackingMaterial:
    """Return the material if it may be used to pack ``item``."""
    material = get_material(material_id)
    if not material.available:
        raise MaterialUnavailable(f"Packing material {material_id} is out of stock", material_id=material_id)
    if item.is_fragile and not material.protective:
        raise UnsuitableMaterial(
            f"Fragile item {item.id} cannot be packed in {material.name}",
            material_id=material_id,
            item_id=str(item.id),
        )
    return material


reset_catalog()
