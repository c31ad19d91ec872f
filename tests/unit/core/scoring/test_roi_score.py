#!/usr/bin/env python3
"""
Unit tests for the ROI score.
"""

import unittest

from core.scoring import ScoreOutcome, calculate_roi_score, roi_score_result


class TestRoiScoreWithoutCostData(unittest.TestCase):
    """No attributed cost: margin percentage doubled, capped at 100."""

    def test_twenty_percent_margin_scores_40(self):
        self.assertEqual(calculate_roi_score({"revenue": 10000, "margin": 2000}), 40)

    def test_fifty_percent_margin_or_more_scores_100(self):
        self.assertEqual(calculate_roi_score({"revenue": 10000, "margin": 5000}), 100)
        self.assertEqual(calculate_roi_score({"revenue": 10000, "margin": 8000}), 100)

    def test_zero_revenue_scores_zero(self):
        self.assertEqual(calculate_roi_score({"revenue": 0, "margin": 500}), 0)

    def test_empty_placement_defaults_amounts_to_zero(self):
        result = roi_score_result({})
        self.assertEqual(result.value, 0)
        self.assertEqual(result.outcome, ScoreOutcome.COMPUTED)

    def test_negative_margin_is_floored_at_zero(self):
        self.assertEqual(calculate_roi_score({"revenue": 1000, "margin": -200}), 0)

    def test_empty_attribution_uses_margin_proxy(self):
        placement = {"revenue": 10000, "margin": 2000}
        self.assertEqual(calculate_roi_score(placement, {}), 40)
        self.assertEqual(calculate_roi_score(placement, {"marketingCost": 0, "salesCost": 0}), 40)

    def test_halves_round_up(self):
        # 1/16 = 6.25% margin -> 12.5 -> 13
        self.assertEqual(calculate_roi_score({"revenue": 16, "margin": 1}), 13)


class TestRoiScoreWithCostData(unittest.TestCase):
    """Attributed cost: one point per 5% ROI, within 0-100."""

    def test_400_percent_roi_scores_80(self):
        attribution = {"marketingCost": 1000, "salesCost": 1000}
        self.assertEqual(calculate_roi_score({"revenue": 10000, "margin": 2000}, attribution), 80)

    def test_500_percent_roi_caps_at_100(self):
        attribution = {"marketingCost": 2000}
        self.assertEqual(calculate_roi_score({"revenue": 12000}, attribution), 100)
        self.assertEqual(calculate_roi_score({"revenue": 50000}, attribution), 100)

    def test_negative_roi_is_floored_at_zero(self):
        attribution = {"salesCost": 1000}
        self.assertEqual(calculate_roi_score({"revenue": 500}, attribution), 0)

    def test_single_cost_component(self):
        # (3000 - 1000) / 1000 = 200% -> 40
        self.assertEqual(calculate_roi_score({"revenue": 3000}, {"marketingCost": 1000}), 40)

    def test_halves_round_up(self):
        # (9 - 8) / 8 = 12.5% -> 2.5 -> 3
        self.assertEqual(calculate_roi_score({"revenue": 9}, {"salesCost": 8}), 3)


class TestRoiScoreInvalidInput(unittest.TestCase):

    def test_missing_placement_scores_zero(self):
        self.assertEqual(calculate_roi_score(None), 0)
        self.assertEqual(roi_score_result(None).outcome, ScoreOutcome.DEFAULTED)

    def test_non_numeric_revenue_scores_zero_and_is_defaulted(self):
        with self.assertLogs("core.scoring.roi", level="ERROR"):
            result = roi_score_result({"revenue": "lots", "margin": 100})
        self.assertEqual(result.value, 0)
        self.assertEqual(result.outcome, ScoreOutcome.DEFAULTED)

    def test_non_numeric_cost_scores_zero(self):
        with self.assertLogs("core.scoring.roi", level="ERROR"):
            result = roi_score_result({"revenue": 1000}, {"marketingCost": "n/a"})
        self.assertEqual(result.value, 0)
        self.assertFalse(result.is_computed)

    def test_unexpected_fault_is_contained(self):
        with self.assertLogs("core.scoring.roi", level="ERROR"):
            result = roi_score_result(42)
        self.assertEqual(result.value, 0)
        self.assertEqual(result.outcome, ScoreOutcome.FAILED)

    def test_repeated_calls_are_identical(self):
        placement = {"revenue": 7000, "margin": 1400}
        attribution = {"marketingCost": 500, "salesCost": 250}
        self.assertEqual(
            roi_score_result(placement, attribution),
            roi_score_result(placement, attribution)
        )


if __name__ == '__main__':
    unittest.main()
