from __future__ import annotations

import unittest
from datetime import date

from door_catalog import MULTIPOINT_LOCK
from order_draft import CustomerInfo, OrderDraft, add_item, set_item_field, start_order_draft
from order_pdf import make_order_pdf_bytes, order_pdf_artifact
from reference_data import build_option_catalog, filter_reference_rows
from sample_reference_data import sample_reference_rows


def _catalog():
    return build_option_catalog(filter_reference_rows(sample_reference_rows()))


def _customer() -> CustomerInfo:
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


class TestOrderPdf(unittest.TestCase):
    def _count_pdf_pages(self, pdf: bytes) -> int:
        page = pdf.count(b"/Type /Page")
        pages_tree = pdf.count(b"/Type /Pages")
        return max(0, page - pages_tree)

    def test_artifact_lists_visible_fields_only(self) -> None:
        draft = OrderDraft(customer=_customer())
        draft = add_item(draft)
        draft = set_item_field(draft, 1, "model", "Palermo 3lt")
        draft = set_item_field(draft, 1, "size", "30x80")
        draft = set_item_field(draft, 1, "handle_prep", MULTIPOINT_LOCK)
        draft = set_item_field(draft, 1, "dentil_shelf", "applied")
        artifact = order_pdf_artifact(draft, _catalog(), order_date=date(2026, 3, 2))

        door = artifact.doors[0]
        labels = [label for label, _ in door.rows]
        self.assertEqual(labels[0], "Model")
        self.assertIn("Handleset Options", labels)
        self.assertNotIn("Custom Handle Prep", labels)
        self.assertIn(("Dentil Shelf", "Applied"), door.rows)
        self.assertTrue(door.incomplete)

    def test_bare_door_only_shows_model(self) -> None:
        artifact = order_pdf_artifact(start_order_draft(), _catalog())
        self.assertEqual([label for label, _ in artifact.doors[0].rows], ["Model"])

    def test_make_order_pdf_bytes_returns_pdf(self) -> None:
        draft = set_item_field(add_item(OrderDraft(customer=_customer())), 1, "model", "Ventura")
        pdf = make_order_pdf_bytes(
            order_pdf_artifact(draft, _catalog(), order_date=date(2026, 3, 2), catalog_source="doors.csv")
        )
        self.assertTrue(pdf.startswith(b"%PDF"))
        self.assertIn(b"PO-4471", pdf)
        self.assertIn(b"Door 1", pdf)
        self.assertIn(b"Catalog: doors.csv", pdf)
        self.assertEqual(self._count_pdf_pages(pdf), 1)

    def test_many_doors_flow_onto_continuation_pages(self) -> None:
        draft = OrderDraft(customer=_customer())
        for i in range(12):
            draft = add_item(draft)
            draft = set_item_field(draft, i + 1, "model", "Ventura")
            draft = set_item_field(draft, i + 1, "size", "36x80")
        pdf = make_order_pdf_bytes(order_pdf_artifact(draft, _catalog()))
        self.assertGreaterEqual(self._count_pdf_pages(pdf), 2)
        # ReportLab escapes parentheses inside PDF string literals.
        self.assertIn(b"DOORS \\(CONTINUED\\)", pdf)
        self.assertIn(b"Door 12", pdf)


if __name__ == "__main__":
    unittest.main()
