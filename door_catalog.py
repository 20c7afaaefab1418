from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple


DOOR_MODELS: Tuple[str, ...] = (
    "Andalucia 4lt",
    "Andalucia 6lt",
    "Andalucia 8lt",
    "Andalucia 9lt Prairie",
    "Andalucia 1W3H",
    "Miranda 4lt",
    "Miranda 6lt",
    "Miranda 7lt Diamond",
    "Miranda 9lt Prairie",
    "Santa Fe",
    "Highlands",
    "Palermo 3lt",
    "Palermo 6lt",
    "Ventura",
    "Portland",
    "Tacoma",
    "Meridian 4lt",
    "Meridian 9lt",
    "Ridgeland",
    "Savannah 1lt",
    "Savannah Full View",
)

HANDLESET_OPTIONS: Tuple[str, ...] = (
    "Emtek Black Square: Active Only",
    "Emtek Black Square: Active & Inactive",
    "Emtek Nickel Square: Active Only",
    "Emtek Nickel Square: Active & Inactive",
    "Emtek Black Scroll: Active Only",
    "Emtek Black Scroll: Active & Inactive",
    "Emtek Nickel Scroll: Active Only",
    "Emtek Nickel Scroll: Active & Inactive",
    "No Handleset",
)

OTHER_PLEASE_SPECIFY = "Other (Please Specify)"
MULTIPOINT_LOCK = "GU Multipoint Lock System (Upcharge Applies)"

# Case-sensitive; only this model family offers a dentil shelf.
DENTIL_SHELF_MODEL_PREFIX = "Palermo"


class DentilShelf(str, Enum):
    APPLIED = "applied"
    LOOSE = "loose"
    NONE = "none"

    @property
    def label(self) -> str:
        return _DENTIL_SHELF_LABELS[self]


_DENTIL_SHELF_LABELS: Dict[DentilShelf, str] = {
    DentilShelf.APPLIED: "Applied",
    DentilShelf.LOOSE: "Loose",
    DentilShelf.NONE: "No Shelf",
}

DENTIL_SHELF_OPTIONS: Tuple[str, ...] = tuple(d.value for d in DentilShelf)


def dentil_shelf_label(value: str) -> str:
    """
    Display label for a stored dentil shelf value ("applied" -> "Applied").

    Unknown values are returned unchanged so stale or hand-typed data still renders.
    """
    try:
        return DentilShelf(value).label
    except ValueError:
        return value


# Line-item field -> OptionCatalog attribute holding its choices.
FLAT_OPTION_FIELDS: Mapping[str, str] = {
    "glass": "glass_options",
    "jamb": "jamb_sizes",
    "hinge": "hinge_finishes",
    "sill": "sill_finishes",
    "handle_prep": "handle_preps",
    "swing": "swings",
}


@dataclass(frozen=True)
class OptionCatalog:
    models: Tuple[str, ...] = DOOR_MODELS
    # key: model name as written in the reference file -> sizes in first-seen order (read-only)
    sizes_by_model: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    glass_options: Tuple[str, ...] = ()
    jamb_sizes: Tuple[str, ...] = ()
    hinge_finishes: Tuple[str, ...] = ()
    sill_finishes: Tuple[str, ...] = ()
    handle_preps: Tuple[str, ...] = ()
    swings: Tuple[str, ...] = ()

    def sizes_for(self, model: str) -> Tuple[str, ...]:
        return tuple(self.sizes_by_model.get(model, ()))

    def options_for(self, field_name: str) -> Tuple[str, ...]:
        attr = FLAT_OPTION_FIELDS.get(field_name)
        if attr is None:
            raise KeyError(f"No catalog-wide option list for field {field_name!r}")
        return tuple(getattr(self, attr))

    @property
    def is_empty(self) -> bool:
        if self.sizes_by_model:
            return False
        return not any(getattr(self, attr) for attr in FLAT_OPTION_FIELDS.values())


def empty_catalog() -> OptionCatalog:
    """
    The catalog used when the reference data could not be loaded.

    Models are still the fixed list; every derived list is empty, so each selector
    past the model picker offers zero options.
    """
    return OptionCatalog()
