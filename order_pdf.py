from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from door_catalog import OptionCatalog, dentil_shelf_label
from door_gating import FIELD_LABELS, missing_fields, ordered_visible_fields
from order_draft import CustomerInfo, OrderDraft


@dataclass(frozen=True)
class OrderPdfDoor:
    door_id: int
    # (label, value) rows in form order; blank values render as "-"
    rows: Tuple[Tuple[str, str], ...]
    incomplete: bool = False


@dataclass(frozen=True)
class OrderPdfArtifact:
    order_date: date
    customer: CustomerInfo
    doors: Tuple[OrderPdfDoor, ...]
    catalog_source: Optional[str] = None


def order_pdf_artifact(
    draft: OrderDraft,
    catalog: OptionCatalog,
    *,
    order_date: Optional[date] = None,
    catalog_source: Optional[str] = None,
) -> OrderPdfArtifact:
    """
    Snapshot a draft for printing: each door lists only its currently visible fields.
    """
    doors = []
    for it in draft.items:
        rows = []
        for f in ordered_visible_fields(it, catalog):
            value = getattr(it, f)
            if f == "dentil_shelf" and value:
                value = dentil_shelf_label(value)
            rows.append((FIELD_LABELS[f], value))
        doors.append(OrderPdfDoor(door_id=it.id, rows=tuple(rows), incomplete=bool(missing_fields(it, catalog))))
    return OrderPdfArtifact(
        order_date=order_date or date.today(),
        customer=draft.customer,
        doors=tuple(doors),
        catalog_source=catalog_source,
    )


def make_order_pdf_bytes(artifact: OrderPdfArtifact) -> bytes:
    """
    Render the order sheet.

    Layout:
    - Page 1 header: PO number + date, customer / ship-to block.
    - One block per door with its configured fields; blocks flow onto continuation pages.
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    # Uncompressed so tests can find text markers in the bytes.
    c.setPageCompression(0)
    w, h = letter

    margin = 0.6 * inch
    x0 = margin
    y_top = h - margin
    pad = 0.15 * inch
    cust = artifact.customer

    header_h = 1.0 * inch
    _rect(c, x0, y_top - header_h, w - 2 * margin, header_h)
    c.setFont("Helvetica-Bold", 13)
    c.drawString(x0 + pad, y_top - 0.40 * inch, "Door Order")
    c.setFont("Helvetica", 9)
    c.drawString(x0 + pad, y_top - 0.62 * inch, f"Date: {artifact.order_date.isoformat()}")

    c.setFont("Helvetica-Bold", 11)
    c.drawRightString(w - margin - pad, y_top - 0.40 * inch, f"PO {cust.po_number or '-'}")
    c.setFont("Helvetica", 9)
    c.drawRightString(w - margin - pad, y_top - 0.62 * inch, f"Doors: {len(artifact.doors)}")

    y = y_top - header_h - 0.25 * inch
    block_h = 1.25 * inch
    col_w = (w - 2 * margin - 0.15 * inch) / 2.0
    _rect(c, x0, y - block_h, col_w, block_h)
    _rect(c, x0 + col_w + 0.15 * inch, y - block_h, col_w, block_h)

    c.setFont("Helvetica-Bold", 9)
    c.drawString(x0 + pad, y - 0.25 * inch, "CUSTOMER")
    c.drawString(x0 + col_w + 0.15 * inch + pad, y - 0.25 * inch, "SHIP TO")

    text_w = col_w - 2 * pad
    c.setFont("Helvetica", 9)
    left_lines = (cust.name, cust.company, cust.email)
    right_lines = (cust.street_address, f"{cust.city}, {cust.state} {cust.zip_code}".strip(" ,"))
    line_y = y - 0.48 * inch
    for text in left_lines:
        _draw_truncated(c, x0 + pad, line_y, text or "-", max_width=text_w)
        line_y -= 0.2 * inch
    line_y = y - 0.48 * inch
    for text in right_lines:
        _draw_truncated(c, x0 + col_w + 0.15 * inch + pad, line_y, text or "-", max_width=text_w)
        line_y -= 0.2 * inch

    y = y - block_h - 0.3 * inch
    bottom_y = margin + 0.45 * inch
    row_h = 0.2 * inch
    label_w = 1.6 * inch

    for door in artifact.doors:
        needed = 0.35 * inch + max(1, len(door.rows)) * row_h + 0.15 * inch
        if y - needed < bottom_y:
            _footer(c, artifact, margin)
            c.showPage()
            y = y_top
            c.setFont("Helvetica-Bold", 10)
            c.drawString(x0, y - 0.05 * inch, "DOORS (CONTINUED)")
            y -= 0.35 * inch

        _rect(c, x0, y - needed, w - 2 * margin, needed)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(x0 + pad, y - 0.25 * inch, f"Door {door.door_id}")
        if door.incomplete:
            c.setFont("Helvetica", 8)
            c.setFillColor(colors.grey)
            c.drawRightString(w - margin - pad, y - 0.25 * inch, "Incomplete")
            c.setFillColor(colors.black)

        row_y = y - 0.5 * inch
        for label, value in door.rows:
            c.setFont("Helvetica-Bold", 8)
            _draw_truncated(c, x0 + pad, row_y, label, max_width=label_w - pad)
            c.setFont("Helvetica", 8)
            _draw_truncated(c, x0 + label_w, row_y, value or "-", max_width=w - 2 * margin - label_w - pad)
            row_y -= row_h
        y -= needed + 0.15 * inch

    _footer(c, artifact, margin)
    c.showPage()
    c.save()
    return buf.getvalue()


def _footer(c: canvas.Canvas, artifact: OrderPdfArtifact, margin: float) -> None:
    if not artifact.catalog_source:
        return
    c.setFont("Helvetica", 7)
    c.setFillColor(colors.grey)
    _draw_truncated(c, margin, margin, f"Catalog: {artifact.catalog_source}", max_width=letter[0] - 2 * margin)
    c.setFillColor(colors.black)


def _rect(c: canvas.Canvas, x: float, y: float, w: float, h: float) -> None:
    c.rect(x, y, w, h, stroke=1, fill=0)


def _draw_truncated(c: canvas.Canvas, x: float, y: float, text: str, *, max_width: float) -> None:
    """
    Draw text truncated with an ASCII ellipsis so it stays inside a box.
    """
    t = (text or "").strip()
    if not t or max_width <= 0:
        return
    if c.stringWidth(t) <= max_width:
        c.drawString(x, y, t)
        return
    ell = "..."
    lo = 0
    hi = len(t)
    best = ""
    while lo <= hi:
        mid = (lo + hi) // 2
        cand = (t[:mid].rstrip() + ell) if mid < len(t) else t
        if c.stringWidth(cand) <= max_width:
            best = cand
            lo = mid + 1
        else:
            hi = mid - 1
    if best:
        c.drawString(x, y, best)
