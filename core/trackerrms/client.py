"""TrackerRMS API client with connection reuse and retry logic."""

import logging
from typing import Optional, Dict, Any, List

import requests

from core.config_loader import TrackerRMSConfig
from core.exceptions import TrackerRMSError
from core.http_retry import api_retry

logger = logging.getLogger(__name__)


class TrackerRMSClient:
    """
    Client for the TrackerRMS REST API.

    Responsibilities:
    - Own a requests.Session carrying the caller's API key
    - Fetch jobs, placements, candidates, service lines and revenue
    - Retry transient failures, surface the rest as TrackerRMSError

    One client is built per API key; there is no shared instance.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.trackerrms.com/v1",
        request_timeout_seconds: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.request_timeout_seconds = request_timeout_seconds

        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    @classmethod
    def from_config(cls, config: TrackerRMSConfig, api_key: Optional[str] = None) -> "TrackerRMSClient":
        """Build a client for api_key, defaulting to the configured key."""
        key = api_key or config.api_key
        if not key:
            raise TrackerRMSError("TrackerRMS API key is not configured")
        return cls(
            api_key=key,
            base_url=config.base_url,
            request_timeout_seconds=config.request_timeout_seconds
        )

    @api_retry()
    def _get_with_retry(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.session.get(
            f"{self.base_url}{path}",
            params=params or None,
            timeout=self.request_timeout_seconds
        )
        response.raise_for_status()
        return response.json()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None, what: str = "") -> Any:
        try:
            return self._get_with_retry(path, params)
        except requests.RequestException as e:
            response = getattr(e, 'response', None)
            status_code = response.status_code if response is not None else None
            logger.error(f"Failed to fetch {what or path} from TrackerRMS: {e}")
            raise TrackerRMSError(f"Failed to fetch {what or path}: {e}", status_code) from e

    def get_jobs(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Get all jobs matching optional filters."""
        jobs = self._get("/jobs", params, what="jobs")
        logger.info(f"Fetched {len(jobs)} jobs from TrackerRMS")
        return jobs

    def get_job(self, job_id: str) -> Dict[str, Any]:
        return self._get(f"/jobs/{job_id}", what=f"job {job_id}")

    def get_placements(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Get all placements matching optional filters."""
        placements = self._get("/placements", params, what="placements")
        logger.info(f"Fetched {len(placements)} placements from TrackerRMS")
        return placements

    def get_placement(self, placement_id: str) -> Dict[str, Any]:
        return self._get(f"/placements/{placement_id}", what=f"placement {placement_id}")

    def get_placements_by_job(self, job_id: str) -> List[Dict[str, Any]]:
        return self._get(f"/jobs/{job_id}/placements", what=f"placements for job {job_id}")

    def get_candidates_by_job(self, job_id: str) -> List[Dict[str, Any]]:
        return self._get(f"/jobs/{job_id}/candidates", what=f"candidates for job {job_id}")

    def get_service_lines(self) -> List[Dict[str, Any]]:
        return self._get("/service-lines", what="service lines")

    def get_placement_revenue(self, placement_id: str) -> Dict[str, Any]:
        """Revenue data ({totalRevenue, margin, ...}) for a placement."""
        return self._get(f"/placements/{placement_id}/revenue", what=f"revenue for placement {placement_id}")

    def close(self) -> None:
        self.session.close()
