#!/usr/bin/env python3
"""
Unit tests for the dashboard endpoints.
"""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from core.exceptions import TrackerRMSError
from web.backend.app import app
from web.backend.dependencies import get_trackerrms_client

PLACEMENTS = [
    {"id": "p-1", "jobId": "j-1", "serviceLine": "IT", "revenue": 6000, "margin": 1200,
     "startDate": "2024-01-11T00:00:00Z"},
    {"id": "p-2", "jobId": "j-2", "serviceLine": "Finance", "revenue": 4000, "margin": 800,
     "startDate": "2024-02-01T00:00:00Z"},
]
JOBS = [
    {"id": "j-1", "createdAt": "2024-01-01T00:00:00Z"},
    {"id": "j-2", "createdAt": "2024-01-22T00:00:00Z"},
    {"id": "j-3", "createdAt": "2024-01-25T00:00:00Z"},
    {"id": "j-4", "createdAt": "2024-01-26T00:00:00Z"},
]


class TestDashboardRoutes(unittest.TestCase):

    def setUp(self):
        self.trackerrms = MagicMock()
        self.trackerrms.get_placements.return_value = PLACEMENTS
        self.trackerrms.get_jobs.return_value = JOBS
        self.trackerrms.get_job.side_effect = lambda job_id: next(j for j in JOBS if j["id"] == job_id)
        app.dependency_overrides[get_trackerrms_client] = lambda: self.trackerrms
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_requires_trackerrms_key(self):
        app.dependency_overrides.clear()

        response = self.client.get("/api/dashboards/attribution")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["error"],
            "TrackerRMS API key required in X-TrackerRMS-API-Key header"
        )

    def test_attribution(self):
        response = self.client.get("/api/dashboards/attribution")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["summary"]["totalRevenue"], 10000)
        self.assertEqual(body["data"]["chartData"]["labels"], ["IT", "Finance"])

    def test_velocity_fetches_jobs(self):
        data = self.client.get("/api/dashboards/velocity").json()["data"]

        self.assertEqual(self.trackerrms.get_job.call_count, 2)
        self.assertEqual(data["summary"]["overallAverageVelocity"], 80)
        self.assertEqual([point["month"] for point in data["trend"]], ["2024-01", "2024-02"])

    def test_velocity_skips_missing_job(self):
        self.trackerrms.get_job.side_effect = TrackerRMSError("not found", 404)

        response = self.client.get("/api/dashboards/velocity")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["summary"]["overallAverageVelocity"], 0)

    def test_roi(self):
        data = self.client.get("/api/dashboards/roi").json()["data"]
        self.assertEqual(data["summary"]["totalRevenue"], 10000)
        self.assertEqual(data["summary"]["averageROIScore"], 40)

    def test_executive(self):
        data = self.client.get("/api/dashboards/executive").json()["data"]

        self.assertEqual(data["overview"]["totalJobs"], 4)
        self.assertEqual(data["overview"]["totalPlacements"], 2)
        self.assertEqual(data["overview"]["fillRate"], 50)
        self.assertEqual(data["placementVelocity"]["summary"]["overallAverageVelocity"], 80)
        self.trackerrms.get_job.assert_not_called()


if __name__ == '__main__':
    unittest.main()
