"""TrackerRMS staffing system client."""

from core.trackerrms.client import TrackerRMSClient

__all__ = ['TrackerRMSClient']
