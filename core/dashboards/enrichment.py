#!/usr/bin/env python3
"""
Embed job records into placements before velocity scoring.
"""

from typing import Any, Dict, Iterable, List


def index_jobs_by_id(jobs: Iterable[Dict[str, Any]]) -> Dict[Any, Dict[str, Any]]:
    return {job["id"]: job for job in jobs if job.get("id") is not None}


def enrich_placements_with_jobs(
    placements: Iterable[Dict[str, Any]],
    jobs: Iterable[Dict[str, Any]]
) -> List[Dict[str, Any]]:
    """
    Attach each placement's job (matched on jobId) under 'job'.

    Returns copies; placements whose job is unknown are copied unchanged.
    """
    jobs_by_id = index_jobs_by_id(jobs)
    enriched = []
    for placement in placements:
        job = jobs_by_id.get(placement.get("jobId"))
        enriched.append({**placement, "job": job} if job is not None else dict(placement))
    return enriched
