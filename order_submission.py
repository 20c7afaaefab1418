from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from app_settings import Settings
from door_catalog import dentil_shelf_label
from order_draft import OrderDraft, order_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionResult:
    ok: bool
    status_code: int = 0
    message: str = ""


class LoggingSubmissionSink:
    """
    Default sink: records the order in the log and reports success.
    """

    def send(self, payload: Dict[str, object]) -> SubmissionResult:
        logger.info("Submit order: %s", json.dumps(payload, sort_keys=True))
        return SubmissionResult(ok=True, message="Order logged (no ORDER_EXPORT_URL configured).")


class HttpSubmissionSink:
    def __init__(self, url: str, *, timeout_s: float = 5.0, client: Optional[httpx.Client] = None) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._client = client

    def send(self, payload: Dict[str, object]) -> SubmissionResult:
        """
        POST the order as JSON. One attempt; failures are reported, not raised.
        """
        try:
            if self._client is not None:
                resp = self._client.post(self.url, json=payload, timeout=self.timeout_s)
            else:
                resp = httpx.post(self.url, json=payload, timeout=self.timeout_s)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Order POST to %s failed: %s", self.url, exc)
            return SubmissionResult(ok=False, status_code=0, message=str(exc))

        snippet = resp.text[:1200]
        if 200 <= resp.status_code < 300:
            logger.info("Order POST to %s succeeded (HTTP %d)", self.url, resp.status_code)
            return SubmissionResult(ok=True, status_code=resp.status_code, message=snippet)
        logger.warning("Order POST to %s returned HTTP %d", self.url, resp.status_code)
        return SubmissionResult(ok=False, status_code=resp.status_code, message=snippet)


def sink_from_settings(settings: Settings):
    if settings.order_export_url:
        return HttpSubmissionSink(settings.order_export_url, timeout_s=settings.order_export_timeout_s)
    return LoggingSubmissionSink()


def submit_order(draft: OrderDraft, sink, *, catalog_source: Optional[str] = None) -> SubmissionResult:
    """
    Hand the customer info and line items to the sink as they are.

    Line items are not validated here.
    """
    payload = order_payload(draft, catalog_source=catalog_source)
    return sink.send(payload)


_CSV_COLUMNS = (
    ("Door", "id"),
    ("Model", "model"),
    ("Size", "size"),
    ("Glass", "glass"),
    ("Jamb", "jamb"),
    ("Custom Jamb", "custom_jamb_spec"),
    ("Hinge Finish", "hinge"),
    ("Sill Finish", "sill"),
    ("Handle Prep", "handle_prep"),
    ("Handleset", "handleset_option"),
    ("Custom Handle Prep", "custom_handle_spec"),
    ("Swing", "swing"),
    ("Dentil Shelf", "dentil_shelf"),
    ("Notes", "notes"),
)


def order_items_csv(draft: OrderDraft) -> str:
    buf = io.StringIO()
    w = csv.writer(buf)
    w.writerow(["PO Number"] + [label for label, _ in _CSV_COLUMNS])
    for it in draft.items:
        row = []
        for _, attr in _CSV_COLUMNS:
            value = getattr(it, attr)
            if attr == "dentil_shelf" and value:
                value = dentil_shelf_label(value)
            row.append(value)
        w.writerow([draft.customer.po_number] + row)
    return buf.getvalue()
