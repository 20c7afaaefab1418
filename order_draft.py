from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    company: str = ""
    street_address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    po_number: str = ""
    email: str = ""


CUSTOMER_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(CustomerInfo))

CUSTOMER_FIELD_LABELS: Dict[str, str] = {
    "name": "Name",
    "company": "Company",
    "street_address": "Street Address",
    "city": "City",
    "state": "State",
    "zip_code": "ZIP Code",
    "po_number": "PO Number",
    "email": "Email",
}


@dataclass(frozen=True)
class DoorLineItem:
    id: int
    model: str = ""
    size: str = ""
    glass: str = ""
    jamb: str = ""
    hinge: str = ""
    sill: str = ""
    handle_prep: str = ""
    swing: str = ""
    notes: str = ""
    # Overlay fields: only meaningful while their gating condition holds (see door_gating).
    handleset_option: str = ""
    dentil_shelf: str = ""
    custom_jamb_spec: str = ""
    custom_handle_spec: str = ""


LINE_ITEM_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(DoorLineItem) if f.name != "id")


@dataclass(frozen=True)
class OrderDraft:
    customer: CustomerInfo = field(default_factory=CustomerInfo)
    items: Tuple[DoorLineItem, ...] = ()
    # Monotonic id source; never reused, even if removal is added later.
    next_item_id: int = 1

    def item(self, item_id: int) -> DoorLineItem:
        for it in self.items:
            if it.id == item_id:
                return it
        raise KeyError(f"No door line item with id {item_id}")


def new_order_draft() -> OrderDraft:
    return OrderDraft()


def start_order_draft() -> OrderDraft:
    """
    Draft the order form opens with: blank customer info and one blank door (id 1).
    """
    return add_item(new_order_draft())


def add_item(draft: OrderDraft) -> OrderDraft:
    item = DoorLineItem(id=draft.next_item_id)
    return replace(draft, items=draft.items + (item,), next_item_id=draft.next_item_id + 1)


def set_item_field(draft: OrderDraft, item_id: int, field_name: str, value: str) -> OrderDraft:
    """
    Set one field on one line item and return the new draft.

    No dependent field is cleared: changing `model` keeps a size (or finish) that may not
    belong to the new model.
    """
    if field_name not in LINE_ITEM_FIELDS:
        raise ValueError(f"Unknown line item field: {field_name!r}")
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string (got {type(value).__name__})")

    found = False
    items: List[DoorLineItem] = []
    for it in draft.items:
        if it.id == item_id:
            items.append(replace(it, **{field_name: value}))
            found = True
        else:
            items.append(it)
    if not found:
        raise KeyError(f"No door line item with id {item_id}")
    return replace(draft, items=tuple(items))


def set_customer_field(draft: OrderDraft, field_name: str, value: str) -> OrderDraft:
    if field_name not in CUSTOMER_FIELDS:
        raise ValueError(f"Unknown customer field: {field_name!r}")
    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string (got {type(value).__name__})")
    return replace(draft, customer=replace(draft.customer, **{field_name: value}))


def is_customer_info_complete(customer: CustomerInfo) -> bool:
    # Raw non-emptiness: whitespace-only values count as filled.
    return all(isinstance(getattr(customer, f), str) and getattr(customer, f) != "" for f in CUSTOMER_FIELDS)


def missing_customer_fields(customer: CustomerInfo) -> Tuple[str, ...]:
    return tuple(f for f in CUSTOMER_FIELDS if getattr(customer, f) == "")


def can_open_door_configuration(draft: OrderDraft) -> bool:
    return is_customer_info_complete(draft.customer)


def is_ready_to_submit(draft: OrderDraft) -> bool:
    """
    Submission gate.

    Only customer info is checked; line items may still be blank.
    """
    return is_customer_info_complete(draft.customer)


def order_payload(draft: OrderDraft, *, catalog_source: Optional[str] = None) -> Dict[str, object]:
    """
    JSON-ready view of the order handed to the submission sink.

    Customer and items are passed through unchanged.
    """
    payload: Dict[str, object] = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "customer": asdict(draft.customer),
        "items": [asdict(it) for it in draft.items],
    }
    if catalog_source:
        payload["catalog_source"] = catalog_source
    return payload
