"""Dashboard aggregation over scored placements."""

from core.dashboards.distribution import calculate_score_distribution, DISTRIBUTION_BUCKETS
from core.dashboards.enrichment import enrich_placements_with_jobs
from core.dashboards.service import DashboardService

__all__ = [
    'DashboardService',
    'DISTRIBUTION_BUCKETS',
    'calculate_score_distribution',
    'enrich_placements_with_jobs',
]
