from __future__ import annotations

"""
Smoke test for the order form (local, offline).

This script simulates a sales rep filling in the form by applying one transition at a
time to an in-memory OrderDraft, then:
- checks the field gating after each step
- submits through the logging sink
- writes JSON / CSV / PDF exports

It writes to `out/smoke_test_order/` and exits non-zero if anything breaks.

Usage:
  python3 scripts/smoke_test_order.py
  python3 scripts/smoke_test_order.py --out-dir out/smoke_test_order
"""

import argparse
import json
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List

# Allow running as `python3 scripts/smoke_test_order.py` (module imports live at repo root).
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app_settings import configure_logging
from door_catalog import MULTIPOINT_LOCK, OptionCatalog
from door_gating import visible_fields
from order_draft import (
    OrderDraft,
    add_item,
    is_ready_to_submit,
    order_payload,
    set_customer_field,
    set_item_field,
    start_order_draft,
)
from order_pdf import make_order_pdf_bytes, order_pdf_artifact
from order_submission import LoggingSubmissionSink, order_items_csv, submit_order
from reference_data import build_option_catalog, filter_reference_rows
from sample_reference_data import sample_reference_rows


@dataclass(frozen=True)
class Step:
    label: str
    apply: Callable[[OrderDraft], OrderDraft]


def _customer_steps() -> List[Step]:
    values = {
        "name": "Dana Reyes",
        "company": "Reyes Millwork",
        "street_address": "1200 Harbor Way",
        "city": "Tacoma",
        "state": "WA",
        "zip_code": "98402",
        "po_number": "PO-4471",
        "email": "dana@example.com",
    }
    return [
        Step(label=f"customer.{k}", apply=(lambda d, k=k, v=v: set_customer_field(d, k, v)))
        for k, v in values.items()
    ]


def _door_steps() -> List[Step]:
    return [
        Step("door1.model", lambda d: set_item_field(d, 1, "model", "Palermo 3lt")),
        Step("door1.size", lambda d: set_item_field(d, 1, "size", "32x80")),
        Step("door1.handle_prep", lambda d: set_item_field(d, 1, "handle_prep", MULTIPOINT_LOCK)),
        Step("door1.handleset", lambda d: set_item_field(d, 1, "handleset_option", "No Handleset")),
        Step("door1.dentil", lambda d: set_item_field(d, 1, "dentil_shelf", "applied")),
        Step("add door", add_item),
        Step("door2.model", lambda d: set_item_field(d, 2, "model", "Ventura")),
    ]


def _check(draft: OrderDraft, catalog: OptionCatalog) -> None:
    door1 = draft.items[0]
    active = visible_fields(door1, catalog)
    if door1.model and "size" not in active:
        raise AssertionError("size should be active once a model is chosen")
    if door1.handle_prep == MULTIPOINT_LOCK and "handleset_option" not in active:
        raise AssertionError("handleset_option should be active for the multipoint lock")


def main() -> int:
    parser = argparse.ArgumentParser(description="Offline smoke test for the door order form.")
    parser.add_argument("--out-dir", default=str(_ROOT / "out" / "smoke_test_order"))
    args = parser.parse_args()
    configure_logging("INFO")

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    catalog = build_option_catalog(filter_reference_rows(sample_reference_rows()))
    draft = start_order_draft()
    try:
        for step in _customer_steps() + _door_steps():
            draft = step.apply(draft)
            _check(draft, catalog)
            print(f"ok  {step.label}")

        if not is_ready_to_submit(draft):
            raise AssertionError("draft should be ready to submit")
        result = submit_order(draft, LoggingSubmissionSink(), catalog_source="sample_reference_data")
        if not result.ok:
            raise AssertionError(f"submission failed: {result.message}")

        (out_dir / "door_order.json").write_text(
            json.dumps(order_payload(draft, catalog_source="sample_reference_data"), indent=2), encoding="utf-8"
        )
        (out_dir / "door_order_items.csv").write_text(order_items_csv(draft), encoding="utf-8")
        pdf = make_order_pdf_bytes(order_pdf_artifact(draft, catalog, catalog_source="sample_reference_data"))
        if not pdf.startswith(b"%PDF"):
            raise AssertionError("PDF output does not look like a PDF")
        (out_dir / "door_order.pdf").write_bytes(pdf)
    except Exception:
        traceback.print_exc()
        return 1

    print(f"Wrote exports to {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
