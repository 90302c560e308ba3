"""
Configuration package for the accessibility mapping service.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    OverpassSettings,
    NominatimSettings,
    GeolocationSettings,
    FetchSettings,
    REFETCH_EPSILON_DEG,
    MAX_DEGREE_DELTA,
    NAMED_PLACE_BUFFER_DEG,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "OverpassSettings",
    "NominatimSettings",
    "GeolocationSettings",
    "FetchSettings",
    "REFETCH_EPSILON_DEG",
    "MAX_DEGREE_DELTA",
    "NAMED_PLACE_BUFFER_DEG",
    "settings",
    "get_settings",
    "reload_settings",
]
