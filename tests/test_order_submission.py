from __future__ import annotations

import csv
import io
import json
import unittest
from unittest import mock

import httpx

from app_settings import Settings
from order_draft import CustomerInfo, OrderDraft, add_item, set_item_field
from order_submission import (
    HttpSubmissionSink,
    LoggingSubmissionSink,
    order_items_csv,
    sink_from_settings,
    submit_order,
)

_URL = "https://orders.example.com/api/doors"


def _draft() -> OrderDraft:
    customer = CustomerInfo(
        name="Dana Reyes",
        company="Reyes Millwork",
        street_address="1200 Harbor Way",
        city="Tacoma",
        state="WA",
        zip_code="98402",
        po_number="PO-4471",
        email="dana@example.com",
    )
    draft = add_item(add_item(OrderDraft(customer=customer)))
    draft = set_item_field(draft, 1, "model", "Palermo 3lt")
    draft = set_item_field(draft, 1, "dentil_shelf", "none")
    return draft


class _FakeClient:
    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, *, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _response(status: int, text: str = "") -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("POST", _URL))


class TestSubmitOrder(unittest.TestCase):
    def test_logging_sink_records_payload_and_succeeds(self) -> None:
        with self.assertLogs("order_submission", level="INFO") as logs:
            result = submit_order(_draft(), LoggingSubmissionSink())
        self.assertTrue(result.ok)
        self.assertIn("PO-4471", "\n".join(logs.output))

    def test_incomplete_items_are_submitted_unchanged(self) -> None:
        client = _FakeClient(response=_response(201, "created"))
        result = submit_order(_draft(), HttpSubmissionSink(_URL, client=client), catalog_source="doors.csv")
        self.assertTrue(result.ok)
        self.assertEqual(result.status_code, 201)
        sent = client.calls[0]["json"]
        self.assertEqual([it["id"] for it in sent["items"]], [1, 2])
        self.assertEqual(sent["items"][1]["model"], "")
        self.assertEqual(sent["catalog_source"], "doors.csv")
        json.dumps(sent)

    def test_http_sink_uses_configured_timeout(self) -> None:
        client = _FakeClient(response=_response(200))
        HttpSubmissionSink(_URL, timeout_s=2.5, client=client).send({"items": []})
        self.assertEqual(client.calls[0]["url"], _URL)
        self.assertEqual(client.calls[0]["timeout"], 2.5)

    def test_non_2xx_response_is_reported_not_raised(self) -> None:
        client = _FakeClient(response=_response(502, "x" * 5000))
        with self.assertLogs("order_submission", level="WARNING"):
            result = HttpSubmissionSink(_URL, client=client).send({"items": []})
        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 502)
        self.assertEqual(len(result.message), 1200)

    def test_transport_error_is_reported_not_raised(self) -> None:
        client = _FakeClient(error=httpx.ConnectError("connection refused"))
        with self.assertLogs("order_submission", level="WARNING"):
            result = HttpSubmissionSink(_URL, client=client).send({"items": []})
        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 0)
        self.assertIn("connection refused", result.message)

    def test_malformed_url_is_reported_not_raised(self) -> None:
        with self.assertLogs("order_submission", level="WARNING"):
            result = HttpSubmissionSink("http://[::1/orders").send({"items": []})
        self.assertFalse(result.ok)
        self.assertEqual(result.status_code, 0)

    def test_module_level_post_without_client(self) -> None:
        with mock.patch("order_submission.httpx.post", return_value=_response(200, "ok")) as post:
            result = HttpSubmissionSink(_URL).send({"items": []})
        post.assert_called_once()
        self.assertEqual(post.call_args.kwargs["timeout"], 5.0)
        self.assertTrue(result.ok)


class TestSinkFromSettings(unittest.TestCase):
    def test_no_export_url_logs_orders(self) -> None:
        self.assertIsInstance(sink_from_settings(Settings()), LoggingSubmissionSink)

    def test_export_url_posts_orders(self) -> None:
        sink = sink_from_settings(Settings(order_export_url=_URL, order_export_timeout_s=7.0))
        self.assertIsInstance(sink, HttpSubmissionSink)
        self.assertEqual(sink.url, _URL)
        self.assertEqual(sink.timeout_s, 7.0)


class TestOrderItemsCsv(unittest.TestCase):
    def test_one_row_per_door_with_po_number(self) -> None:
        rows = list(csv.reader(io.StringIO(order_items_csv(_draft()))))
        header, body = rows[0], rows[1:]
        self.assertEqual(header[:3], ["PO Number", "Door", "Model"])
        self.assertEqual(len(body), 2)
        self.assertEqual(body[0][0], "PO-4471")
        self.assertEqual(body[0][2], "Palermo 3lt")
        self.assertEqual(body[0][header.index("Dentil Shelf")], "No Shelf")
        self.assertEqual(body[1][header.index("Dentil Shelf")], "")


if __name__ == "__main__":
    unittest.main()
