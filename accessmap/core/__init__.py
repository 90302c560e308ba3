"""
Core building blocks: exception taxonomy, logging setup, error handlers and
the service container.
"""

from .exceptions import (
    ErrorCode,
    AccessMapException,
    RateLimitError,
    UpstreamError,
    TransportError,
    RequestTimeoutError,
    InvalidLocationError,
    GeolocationDeniedError,
)

__all__ = [
    "ErrorCode",
    "AccessMapException",
    "RateLimitError",
    "UpstreamError",
    "TransportError",
    "RequestTimeoutError",
    "InvalidLocationError",
    "GeolocationDeniedError",
]
