#!/usr/bin/env python3
"""
Exceptions shared by the integration layer.

The scoring and dashboard engines never raise these for malformed domain
data; they are raised by the collaborators (config, API clients, OAuth)
and by record normalization, where the scorer catches them.
"""

from typing import Optional


class IntegrationError(Exception):
    """Base exception for integration errors."""
    pass


class ConfigurationError(IntegrationError):
    """Raised when required configuration is missing."""
    pass


class InvalidRecordError(IntegrationError):
    """Raised when a staffing record carries a field of the wrong type."""
    pass


class AuthenticationError(IntegrationError):
    """Raised when a portal has no usable HubSpot tokens."""
    pass


class UpstreamError(IntegrationError):
    """Raised when a remote API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TrackerRMSError(UpstreamError):
    """Raised when a TrackerRMS API call fails."""
    pass


class HubSpotError(UpstreamError):
    """Raised when a HubSpot API call fails."""
    pass
