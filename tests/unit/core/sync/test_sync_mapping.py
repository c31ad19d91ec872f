#!/usr/bin/env python3
"""
Unit tests for TrackerRMS -> HubSpot deal property mapping.
"""

import unittest

from core.scoring.models import PlacementScores, ScoreResult
from core.sync.mapping import (
    map_job_status_to_deal_stage,
    map_job_to_deal_properties,
    map_placement_to_deal_properties,
    map_scores_to_deal_properties,
)


class TestDealStageMapping(unittest.TestCase):

    def test_known_statuses(self):
        self.assertEqual(map_job_status_to_deal_stage("open"), "appointmentscheduled")
        self.assertEqual(map_job_status_to_deal_stage("Filled"), "closedwon")
        self.assertEqual(map_job_status_to_deal_stage("CANCELLED"), "closedlost")

    def test_unknown_or_missing_status(self):
        self.assertEqual(map_job_status_to_deal_stage("on hold"), "appointmentscheduled")
        self.assertEqual(map_job_status_to_deal_stage(None), "appointmentscheduled")


class TestJobMapping(unittest.TestCase):

    def test_full_job(self):
        job = {
            "id": "j-1", "title": "Senior Engineer", "estimatedRevenue": 25000,
            "status": "interviewing", "targetDate": "2024-03-01", "serviceLine": "IT",
        }
        self.assertEqual(map_job_to_deal_properties(job), {
            "dealname": "Senior Engineer",
            "amount": 25000,
            "dealstage": "presentationscheduled",
            "closedate": "2024-03-01",
            "trackerrms_job_id": "j-1",
            "trackerrms_service_line": "IT",
        })

    def test_fallbacks(self):
        properties = map_job_to_deal_properties({"id": "j-2", "name": "Nurse", "category": "Healthcare"})
        self.assertEqual(properties["dealname"], "Nurse")
        self.assertEqual(properties["amount"], 0)
        self.assertIsNone(properties["closedate"])
        self.assertEqual(properties["trackerrms_service_line"], "Healthcare")


class TestPlacementMapping(unittest.TestCase):

    def test_full_placement(self):
        placement = {
            "id": "p-1", "candidateName": "Ada", "jobId": "j-1", "serviceLine": "IT",
            "revenue": 12000, "margin": 3000, "startDate": "2024-02-01",
        }
        properties = map_placement_to_deal_properties(placement)
        self.assertEqual(properties["dealname"], "Placement: Ada")
        self.assertEqual(properties["amount"], 12000)
        self.assertEqual(properties["dealstage"], "closedwon")
        self.assertEqual(properties["closedate"], "2024-02-01")
        self.assertEqual(properties["trackerrms_placement_id"], "p-1")
        self.assertEqual(properties["trackerrms_margin"], 3000)
        self.assertEqual(properties["trackerrms_placement_date"], "2024-02-01")

    def test_amount_from_bill_rate_and_hours(self):
        properties = map_placement_to_deal_properties({"id": "p-2", "billRate": 50, "hours": 40})
        self.assertEqual(properties["amount"], 2000)
        self.assertEqual(properties["trackerrms_revenue"], 0)

    def test_close_date_falls_back_to_created_at(self):
        properties = map_placement_to_deal_properties({"id": "p-3", "createdAt": "2024-01-05"})
        self.assertEqual(properties["closedate"], "2024-01-05")
        self.assertEqual(properties["amount"], 0)
        self.assertIsNone(properties["trackerrms_placement_date"])

    def test_score_properties(self):
        scores = PlacementScores(velocity=ScoreResult(80), roi=ScoreResult(40), overall=56)
        self.assertEqual(map_scores_to_deal_properties(scores), {
            "trackerrms_velocity_score": 80,
            "trackerrms_roi_score": 40,
        })


if __name__ == '__main__':
    unittest.main()
