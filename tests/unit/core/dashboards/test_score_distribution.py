#!/usr/bin/env python3
"""
Unit tests for the tier histogram and job enrichment helpers.
"""

import unittest

from core.dashboards import DISTRIBUTION_BUCKETS, calculate_score_distribution, enrich_placements_with_jobs


class TestScoreDistribution(unittest.TestCase):

    def test_empty_input_has_all_buckets_at_zero(self):
        self.assertEqual(calculate_score_distribution([]), {
            "excellent (90-100)": 0,
            "good (75-89)": 0,
            "average (50-74)": 0,
            "below_average (25-49)": 0,
            "poor (0-24)": 0,
        })

    def test_counts_per_tier(self):
        self.assertEqual(calculate_score_distribution([100, 95, 80, 60, 30, 10]), {
            "excellent (90-100)": 2,
            "good (75-89)": 1,
            "average (50-74)": 1,
            "below_average (25-49)": 1,
            "poor (0-24)": 1,
        })

    def test_boundaries(self):
        distribution = calculate_score_distribution([90, 89, 75, 74, 50, 49, 25, 24])
        self.assertEqual(list(distribution.values()), [1, 2, 2, 2, 1])

    def test_buckets_in_tier_order(self):
        self.assertEqual(
            list(calculate_score_distribution([]).keys()),
            list(DISTRIBUTION_BUCKETS.values())
        )


class TestEnrichPlacementsWithJobs(unittest.TestCase):

    def setUp(self):
        self.jobs = [
            {"id": "j-1", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": "j-2", "createdAt": "2024-02-01T00:00:00Z"},
        ]

    def test_attaches_matching_job(self):
        placements = [{"id": "p-1", "jobId": "j-2"}]
        enriched = enrich_placements_with_jobs(placements, self.jobs)
        self.assertEqual(enriched[0]["job"], self.jobs[1])
        self.assertNotIn("job", placements[0])

    def test_unknown_or_missing_job_left_unchanged(self):
        placements = [{"id": "p-1", "jobId": "j-9"}, {"id": "p-2"}]
        enriched = enrich_placements_with_jobs(placements, self.jobs)
        self.assertEqual(enriched, placements)
        self.assertIsNot(enriched[0], placements[0])

    def test_preserves_order(self):
        placements = [{"id": "p-2", "jobId": "j-2"}, {"id": "p-1", "jobId": "j-1"}]
        enriched = enrich_placements_with_jobs(placements, self.jobs)
        self.assertEqual([p["id"] for p in enriched], ["p-2", "p-1"])


if __name__ == '__main__':
    unittest.main()
