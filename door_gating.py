from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from door_catalog import (
    DENTIL_SHELF_MODEL_PREFIX,
    DENTIL_SHELF_OPTIONS,
    FLAT_OPTION_FIELDS,
    HANDLESET_OPTIONS,
    MULTIPOINT_LOCK,
    OTHER_PLEASE_SPECIFY,
    OptionCatalog,
)
from order_draft import DoorLineItem


class ItemStage(str, Enum):
    BARE = "BARE"
    MODEL_CHOSEN = "MODEL_CHOSEN"
    CONFIGURED = "CONFIGURED"


# Fields unlocked once both model and size are chosen, in form order.
ADVANCED_FIELDS: Tuple[str, ...] = ("glass", "jamb", "hinge", "sill", "handle_prep", "swing", "notes")

FREE_TEXT_FIELDS: FrozenSet[str] = frozenset({"notes", "custom_jamb_spec", "custom_handle_spec"})

# Render order for a door section; overlays sit right after the field that triggers them.
FORM_FIELD_ORDER: Tuple[str, ...] = (
    "model",
    "size",
    "glass",
    "jamb",
    "custom_jamb_spec",
    "hinge",
    "sill",
    "handle_prep",
    "handleset_option",
    "custom_handle_spec",
    "swing",
    "notes",
    "dentil_shelf",
)

FIELD_LABELS: Dict[str, str] = {
    "model": "Model",
    "size": "Size",
    "glass": "Glass Options",
    "jamb": "Jamb Size",
    "custom_jamb_spec": "Custom Jamb Size",
    "hinge": "Hinge Finish",
    "sill": "Sill Finish",
    "handle_prep": "Handle Prep",
    "handleset_option": "Handleset Options",
    "custom_handle_spec": "Custom Handle Prep",
    "swing": "Door Swing",
    "notes": "Notes",
    "dentil_shelf": "Dentil Shelf",
}


def item_stage(item: DoorLineItem) -> ItemStage:
    if not item.model:
        return ItemStage.BARE
    if not item.size:
        return ItemStage.MODEL_CHOSEN
    return ItemStage.CONFIGURED


def visible_fields(item: DoorLineItem, catalog: OptionCatalog) -> FrozenSet[str]:
    """
    Fields that are active for a line item, derived from its current values.

    Nothing is cached: call again after every field change.

    Stage rules:
    - always `model`
    - model chosen -> `size` (choices come from the catalog for that model)
    - model + size chosen -> glass, jamb, hinge, sill, handle_prep, swing, notes
    Overlays, checked on current values regardless of stage:
    - handle_prep is the multipoint lock -> handleset_option
    - handle_prep is "Other (Please Specify)" -> custom_handle_spec
    - jamb is "Other (Please Specify)" -> custom_jamb_spec
    - model starts with "Palermo" -> dentil_shelf
    """
    _ = catalog  # no current rule depends on catalog contents
    active = {"model"}

    stage = item_stage(item)
    if stage in (ItemStage.MODEL_CHOSEN, ItemStage.CONFIGURED):
        active.add("size")
    if stage == ItemStage.CONFIGURED:
        active.update(ADVANCED_FIELDS)

    if item.handle_prep == MULTIPOINT_LOCK:
        active.add("handleset_option")
    if item.handle_prep == OTHER_PLEASE_SPECIFY:
        active.add("custom_handle_spec")
    if item.jamb == OTHER_PLEASE_SPECIFY:
        active.add("custom_jamb_spec")
    if item.model.startswith(DENTIL_SHELF_MODEL_PREFIX):
        active.add("dentil_shelf")

    return frozenset(active)


def ordered_visible_fields(item: DoorLineItem, catalog: OptionCatalog) -> Tuple[str, ...]:
    active = visible_fields(item, catalog)
    return tuple(f for f in FORM_FIELD_ORDER if f in active)


def field_choices(item: DoorLineItem, field_name: str, catalog: OptionCatalog) -> Optional[Tuple[str, ...]]:
    """
    Choices offered by a select field, or None for free-text fields.

    Visibility is not checked here; pair with `visible_fields`.
    """
    if field_name in FREE_TEXT_FIELDS:
        return None
    if field_name == "model":
        return tuple(catalog.models)
    if field_name == "size":
        return catalog.sizes_for(item.model)
    if field_name == "handleset_option":
        return HANDLESET_OPTIONS
    if field_name == "dentil_shelf":
        return DENTIL_SHELF_OPTIONS
    if field_name in FLAT_OPTION_FIELDS:
        return catalog.options_for(field_name)
    raise ValueError(f"Unknown line item field: {field_name!r}")


def required_fields(item: DoorLineItem, catalog: OptionCatalog) -> FrozenSet[str]:
    return visible_fields(item, catalog) - {"notes"}


def missing_fields(item: DoorLineItem, catalog: OptionCatalog) -> Tuple[str, ...]:
    """
    Required fields still blank, in form order.

    Informational only: submission is never blocked on line items.
    """
    required = required_fields(item, catalog)
    return tuple(f for f in FORM_FIELD_ORDER if f in required and getattr(item, f) == "")


def is_item_complete(item: DoorLineItem, catalog: OptionCatalog) -> bool:
    # A bare item is never complete even though only `model` is visible.
    return item_stage(item) == ItemStage.CONFIGURED and not missing_fields(item, catalog)
