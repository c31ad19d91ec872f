#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse

from core.exceptions import AuthenticationError, ConfigurationError, IntegrationError, UpstreamError

logger = logging.getLogger(__name__)

AUTH_URL = "/oauth/authorize"


class ServiceException(Exception):
    """Base exception for service layer errors."""
    status_code = 500


class NotAuthenticatedException(ServiceException):
    """Raised when the request has no connected HubSpot portal."""
    status_code = 401


class MissingApiKeyException(ServiceException):
    """Raised when the X-TrackerRMS-API-Key header is absent."""
    status_code = 400


class InvalidOAuthStateException(ServiceException):
    """Raised when the OAuth callback state does not match the issued one."""
    status_code = 400


class MissingAuthorizationCodeException(ServiceException):
    """Raised when the OAuth callback carries no code."""
    status_code = 400


class InvalidWebhookSignatureException(ServiceException):
    """Raised when a HubSpot webhook signature does not verify."""
    status_code = 401


def _error_content(exc: Exception, error: str) -> dict:
    return {
        "success": False,
        "error": error,
        "type": exc.__class__.__name__
    }


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Authentication failures also carry the URL that starts the OAuth flow.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    logger.warning(f"Service error in {request.url.path}: {exc}")

    content = _error_content(exc, str(exc))
    if isinstance(exc, NotAuthenticatedException):
        content["authUrl"] = AUTH_URL

    return JSONResponse(status_code=exc.status_code, content=content)


async def integration_exception_handler(
    request: Request,
    exc: IntegrationError
) -> JSONResponse:
    """
    Handle errors raised by the core integration layer.

    Missing tokens map to 401, failed TrackerRMS/HubSpot calls to 502 and
    everything else (configuration, malformed records) to 500.

    Args:
        request: The FastAPI request.
        exc: The integration error.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    content = _error_content(exc, str(exc))

    if isinstance(exc, AuthenticationError):
        status_code = 401
        content["authUrl"] = AUTH_URL
        logger.warning(f"Authentication required for {request.url.path}: {exc}")
    elif isinstance(exc, UpstreamError):
        status_code = 502
        logger.error(f"Upstream error in {request.url.path}: {exc}")
    elif isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error in {request.url.path}: {exc}")
    else:
        logger.error(f"Integration error in {request.url.path}: {exc}", exc_info=True)

    return JSONResponse(status_code=status_code, content=content)


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Unknown routes come through here as a 404 and get a message naming
    the method and path.
    """
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": "Not Found",
                "message": f"Route {request.method} {request.url.path} not found",
                "type": "HTTPException"
            }
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
