from __future__ import annotations

import json
import unittest

from order_draft import (
    CUSTOMER_FIELDS,
    CustomerInfo,
    DoorLineItem,
    OrderDraft,
    add_item,
    can_open_door_configuration,
    is_customer_info_complete,
    is_ready_to_submit,
    missing_customer_fields,
    new_order_draft,
    order_payload,
    set_customer_field,
    set_item_field,
    start_order_draft,
)


def _complete_customer() -> CustomerInfo:
    return CustomerInfo(
        name="Dana Reyes",
        company="Reyes Millwork",
        street_address="1200 Harbor Way",
        city="Tacoma",
        state="WA",
        zip_code="98402",
        po_number="PO-4471",
        email="dana@example.com",
    )


class TestLineItems(unittest.TestCase):
    def test_add_item_assigns_sequential_ids(self) -> None:
        draft = new_order_draft()
        for _ in range(5):
            draft = add_item(draft)
        self.assertEqual([it.id for it in draft.items], [1, 2, 3, 4, 5])
        self.assertEqual(draft.next_item_id, 6)

    def test_new_items_are_blank(self) -> None:
        item = add_item(new_order_draft()).items[0]
        self.assertEqual(item, DoorLineItem(id=1))
        self.assertEqual(item.model, "")
        self.assertEqual(item.dentil_shelf, "")

    def test_start_order_draft_has_one_door(self) -> None:
        draft = start_order_draft()
        self.assertEqual([it.id for it in draft.items], [1])
        self.assertEqual(add_item(draft).items[-1].id, 2)

    def test_transitions_return_new_drafts(self) -> None:
        draft = start_order_draft()
        updated = set_item_field(draft, 1, "model", "Ventura")
        self.assertIsNot(draft, updated)
        self.assertEqual(draft.items[0].model, "")
        self.assertEqual(updated.items[0].model, "Ventura")

    def test_set_item_field_targets_one_item(self) -> None:
        draft = add_item(add_item(new_order_draft()))
        draft = set_item_field(draft, 2, "glass", "Frosted")
        self.assertEqual(draft.item(1).glass, "")
        self.assertEqual(draft.item(2).glass, "Frosted")

    def test_changing_model_keeps_stale_size(self) -> None:
        draft = start_order_draft()
        draft = set_item_field(draft, 1, "model", "Palermo 3lt")
        draft = set_item_field(draft, 1, "size", "30x80")
        draft = set_item_field(draft, 1, "dentil_shelf", "loose")
        draft = set_item_field(draft, 1, "model", "Ventura")
        item = draft.item(1)
        self.assertEqual(item.model, "Ventura")
        self.assertEqual(item.size, "30x80")
        self.assertEqual(item.dentil_shelf, "loose")

    def test_overlay_values_are_per_item(self) -> None:
        draft = add_item(start_order_draft())
        draft = set_item_field(draft, 1, "custom_jamb_spec", "5-1/4 in")
        self.assertEqual(draft.item(1).custom_jamb_spec, "5-1/4 in")
        self.assertEqual(draft.item(2).custom_jamb_spec, "")

    def test_unknown_item_or_field_raises(self) -> None:
        draft = start_order_draft()
        with self.assertRaises(KeyError):
            set_item_field(draft, 9, "model", "Ventura")
        with self.assertRaises(ValueError):
            set_item_field(draft, 1, "id", "3")
        with self.assertRaises(ValueError):
            set_item_field(draft, 1, "color", "Red")
        with self.assertRaises(KeyError):
            draft.item(9)


class TestCustomerGate(unittest.TestCase):
    def test_complete_customer_info(self) -> None:
        self.assertTrue(is_customer_info_complete(_complete_customer()))
        self.assertEqual(len(CUSTOMER_FIELDS), 8)

    def test_any_single_empty_field_fails(self) -> None:
        for field_name in CUSTOMER_FIELDS:
            draft = OrderDraft(customer=_complete_customer())
            draft = set_customer_field(draft, field_name, "")
            self.assertFalse(is_customer_info_complete(draft.customer), field_name)
            self.assertEqual(missing_customer_fields(draft.customer), (field_name,))
            self.assertFalse(can_open_door_configuration(draft))

    def test_whitespace_counts_as_filled(self) -> None:
        draft = OrderDraft(customer=_complete_customer())
        draft = set_customer_field(draft, "state", " ")
        self.assertTrue(is_customer_info_complete(draft.customer))

    def test_blank_customer_is_incomplete(self) -> None:
        self.assertFalse(is_customer_info_complete(CustomerInfo()))
        self.assertEqual(missing_customer_fields(CustomerInfo()), CUSTOMER_FIELDS)

    def test_set_customer_field_rejects_unknown_field(self) -> None:
        with self.assertRaises(ValueError):
            set_customer_field(new_order_draft(), "phone", "555-0100")

    def test_submit_gate_ignores_blank_line_items(self) -> None:
        draft = add_item(OrderDraft(customer=_complete_customer()))
        self.assertTrue(is_ready_to_submit(draft))
        self.assertFalse(is_ready_to_submit(start_order_draft()))


class TestOrderPayload(unittest.TestCase):
    def test_payload_passes_customer_and_items_through(self) -> None:
        draft = add_item(OrderDraft(customer=_complete_customer()))
        draft = set_item_field(draft, 1, "model", "Ventura")
        payload = order_payload(draft, catalog_source="doors.csv")
        self.assertEqual(payload["customer"]["po_number"], "PO-4471")
        self.assertEqual(payload["items"][0]["id"], 1)
        self.assertEqual(payload["items"][0]["model"], "Ventura")
        self.assertEqual(payload["items"][0]["size"], "")
        self.assertEqual(payload["catalog_source"], "doors.csv")
        self.assertIn("generated_at", payload)
        json.dumps(payload)


if __name__ == "__main__":
    unittest.main()
