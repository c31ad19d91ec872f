#!/usr/bin/env python3
"""
Response models for API endpoints.

Field names are the JSON keys HubSpot and the dashboard front end read,
hence the camelCase.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class HealthResponse(BaseModel):
    """Service health."""
    status: str
    timestamp: str
    version: str


class ConnectionStatusResponse(BaseModel):
    """Whether the caller has a connected HubSpot portal."""
    connected: bool
    portalId: Optional[str] = None


class LogoutResponse(BaseModel):
    success: bool
    message: str


class SyncResultModel(BaseModel):
    """Outcome of one sync run."""
    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    errors: int = Field(ge=0)
    items: List[Dict[str, Any]] = Field(default_factory=list)


class SyncResponse(BaseModel):
    """Response after a jobs, placements or revenue sync."""
    success: bool
    results: SyncResultModel


class FullSyncResponse(BaseModel):
    """Response after a full sync, keyed by stage (jobs, placements, revenue)."""
    success: bool
    results: Dict[str, SyncResultModel]


class SyncStatusResponse(BaseModel):
    connected: bool
    portalId: str
    lastSync: Optional[str] = None


class DashboardResponse(BaseModel):
    """Envelope for dashboard payloads."""
    success: bool
    data: Dict[str, Any]


class WebhookAckResponse(BaseModel):
    success: bool
