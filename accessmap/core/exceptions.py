"""
Custom exceptions for the accessibility mapping service.
Upstream, transport and location failures each map to one error code so the
fetch layer can record them as display state.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Upstream data source errors
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"

    # Network errors
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"

    # Location errors
    INVALID_LOCATION = "INVALID_LOCATION"
    GEOLOCATION_DENIED = "GEOLOCATION_DENIED"


class AccessMapException(Exception):
    """Base exception for the accessibility mapping service."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class RateLimitError(AccessMapException):
    """Raised when the upstream data source throttles us (HTTP 429)."""

    def __init__(self, service_name: str = "overpass"):
        super().__init__(
            message="Rate limit exceeded. Please wait a moment before searching again.",
            error_code=ErrorCode.RATE_LIMIT_EXCEEDED,
            details={"service_name": service_name},
            status_code=429
        )


class UpstreamError(AccessMapException):
    """Raised when the upstream data source answers with a non-success response."""

    def __init__(self, status: int, service_name: str = "overpass", message: Optional[str] = None):
        super().__init__(
            message=message or f"HTTP error! status: {status}",
            error_code=ErrorCode.UPSTREAM_ERROR,
            details={"status": status, "service_name": service_name},
            status_code=502
        )
        self.status = status


class TransportError(AccessMapException):
    """Raised when the request never produced an HTTP response."""

    def __init__(
        self,
        message: str = "Network error while contacting the data source",
        details: Optional[Dict[str, Any]] = None,
        error_code: ErrorCode = ErrorCode.TRANSPORT_ERROR,
        status_code: int = 503
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            status_code=status_code
        )


class RequestTimeoutError(TransportError):
    """Raised when the transport layer gives up waiting for a response."""

    def __init__(self, timeout_seconds: float, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Request timed out after {timeout_seconds:g} seconds",
            details=details or {"timeout_seconds": timeout_seconds},
            error_code=ErrorCode.REQUEST_TIMEOUT,
            status_code=504
        )


class InvalidLocationError(AccessMapException):
    """Raised when a location cannot be resolved to usable coordinates."""

    def __init__(
        self,
        message: str = "Location not found. Please try a different search term.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_LOCATION,
            details=details,
            status_code=404
        )


class GeolocationDeniedError(AccessMapException):
    """Raised when the user's precise position is refused or unavailable."""

    def __init__(self, reason: str = "Geolocation permission denied"):
        super().__init__(
            message=reason,
            error_code=ErrorCode.GEOLOCATION_DENIED,
            details={"reason": reason},
            status_code=403
        )
