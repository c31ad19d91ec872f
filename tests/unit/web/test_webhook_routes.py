#!/usr/bin/env python3
"""
Unit tests for the webhook endpoints.
"""

import json
import time
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from core.config_loader import AppConfig
from core.hubspot import TokenSet, TokenStore
from web.backend.app import app
from web.backend.services.webhook_service import compute_hubspot_signature

HUBSPOT_URL = "/api/webhooks/hubspot/deals"
HEADERS = {"X-Portal-Id": "123", "X-TrackerRMS-API-Key": "key-1"}


class TestHubSpotDealWebhook(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app, raise_server_exceptions=False)

    def test_single_event(self):
        event = {"subscriptionType": "deal.creation", "objectId": 42}
        response = self.client.post(HUBSPOT_URL, json=event)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})

    def test_event_list(self):
        events = [
            {"subscriptionType": "deal.propertyChange", "objectId": 1, "propertyName": "amount"},
            {"subscriptionType": "deal.deletion", "objectId": 2},
        ]
        with self.assertLogs("web.backend.services.webhook_service", level="INFO") as logs:
            response = self.client.post(HUBSPOT_URL, json=events)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(any("Deal deleted: deal_id=2" in line for line in logs.output))

    def test_invalid_json(self):
        response = self.client.post(HUBSPOT_URL, content=b"{not json", headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Webhook body is not valid JSON")


class TestHubSpotWebhookSignatureInProduction(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app, raise_server_exceptions=False)
        config = AppConfig(server={"environment": "production"}, hubspot={"client_secret": "shh"})
        patcher = patch("web.backend.routers.webhooks.get_config", return_value=config)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_unsigned_request_rejected(self):
        response = self.client.post(HUBSPOT_URL, json={"objectId": 1})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["type"], "InvalidWebhookSignatureException")

    def test_signed_request_accepted(self):
        body = json.dumps({"subscriptionType": "deal.creation", "objectId": 1})
        timestamp = str(int(time.time() * 1000))
        signature = compute_hubspot_signature(
            "POST", f"http://testserver{HUBSPOT_URL}", body, timestamp, "shh"
        )

        response = self.client.post(HUBSPOT_URL, content=body.encode("utf-8"), headers={
            "Content-Type": "application/json",
            "X-HubSpot-Signature-v3": signature,
            "X-HubSpot-Request-Timestamp": timestamp,
        })

        self.assertEqual(response.status_code, 200)


class TestTrackerRMSWebhooks(unittest.TestCase):

    def setUp(self):
        app.state.token_store = TokenStore()
        app.state.token_store.store(TokenSet("access", "refresh", time.time() + 3600, "123"))
        self.client = TestClient(app, raise_server_exceptions=False)

    def test_missing_headers(self):
        response = self.client.post("/api/webhooks/trackerrms/jobs", json={"event": "job.created", "data": {}})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Missing portal ID or TrackerRMS API key")

    def test_unknown_portal(self):
        response = self.client.post(
            "/api/webhooks/trackerrms/placements",
            json={"event": "placement.created", "data": {"id": "p-1"}},
            headers={**HEADERS, "X-Portal-Id": "999"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"], "Portal not authenticated")

    def test_event_name_required(self):
        response = self.client.post("/api/webhooks/trackerrms/jobs", json={"data": {}}, headers=HEADERS)
        self.assertEqual(response.status_code, 422)

    @patch("web.backend.routers.webhooks.WebhookService")
    def test_job_event_dispatched(self, mock_webhook_service):
        data = {"id": "j-1", "title": "Engineer"}

        response = self.client.post(
            "/api/webhooks/trackerrms/jobs", json={"event": "job.updated", "data": data}, headers=HEADERS
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True})
        mock_webhook_service.return_value.handle_trackerrms_job_event.assert_called_once_with("job.updated", data)

    @patch("web.backend.routers.webhooks.WebhookService")
    def test_placement_event_failure(self, mock_webhook_service):
        mock_webhook_service.return_value.handle_trackerrms_placement_event.side_effect = RuntimeError("boom")

        response = self.client.post(
            "/api/webhooks/trackerrms/placements",
            json={"event": "placement.updated", "data": {"id": "p-1"}},
            headers=HEADERS
        )

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Webhook processing failed")


if __name__ == '__main__':
    unittest.main()
