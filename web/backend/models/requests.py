#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class SyncFilterRequest(BaseModel):
    """Optional TrackerRMS list filters for a jobs or placements sync."""
    model_config = ConfigDict(extra="allow")

    status: Optional[str] = Field(None, description="Record status, e.g. open or active")
    serviceLine: Optional[str] = Field(None, description="Restrict to one service line")

    def to_params(self) -> Dict[str, Any]:
        """Query parameters for the TrackerRMS list call, unset filters dropped."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class TrackerRMSWebhookPayload(BaseModel):
    """TrackerRMS webhook body: an event name and the record it concerns."""
    event: str = Field(..., description="e.g. job.created, placement.revenue_updated")
    data: Dict[str, Any] = Field(default_factory=dict)
