"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for the accessibility mapping service.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from enum import Enum


# Requested centers closer than this (in degrees, ~100m) to the last fetch are not refetched
REFETCH_EPSILON_DEG = 0.001

# Latitude/longitude deltas above this are treated as degenerate and clamped
MAX_DEGREE_DELTA = 90.0

# Buffer used around a geocoded point when no bounding box is reported
NAMED_PLACE_BUFFER_DEG = 0.01

DEFAULT_USER_AGENT = "AccessMap/1.0 (accessibility mapping)"


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OverpassSettings(BaseSettings):
    """Overpass API (OpenStreetMap query endpoint) configuration"""

    api_url: str = Field(default="https://overpass-api.de/api/interpreter")
    min_request_interval_seconds: float = Field(default=2.0, ge=0.0, le=60.0)
    query_timeout_seconds: int = Field(default=25, ge=1, le=180)
    request_timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    model_config = {"env_prefix": "OVERPASS_"}


class NominatimSettings(BaseSettings):
    """Nominatim geocoding configuration"""

    base_url: str = Field(default="https://nominatim.openstreetmap.org")
    min_request_interval_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    reverse_zoom: int = Field(default=10, ge=0, le=18)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    model_config = {"env_prefix": "NOMINATIM_"}


class GeolocationSettings(BaseSettings):
    """User location detection configuration"""

    ip_lookup_url: str = Field(default="https://ipapi.co/json/")
    ip_lookup_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    enable_high_accuracy: bool = Field(default=True)
    timeout_seconds: float = Field(default=10.0, ge=0.1, le=120.0)
    maximum_age_seconds: int = Field(default=300, ge=0)
    # Country-level center used when every other lookup fails
    default_latitude: float = Field(default=22.9734, ge=-90.0, le=90.0)
    default_longitude: float = Field(default=78.6569, ge=-180.0, le=180.0)
    default_name: str = Field(default="India")

    model_config = {"env_prefix": "GEOLOCATION_"}


class FetchSettings(BaseSettings):
    """Place fetching and bounding box configuration"""

    default_radius_km: float = Field(default=5.0, gt=0.0, le=100.0)
    refetch_epsilon_deg: float = Field(default=REFETCH_EPSILON_DEG, ge=0.0, le=1.0)
    max_degree_delta: float = Field(default=MAX_DEGREE_DELTA, gt=0.0, le=180.0)
    named_place_buffer_deg: float = Field(default=NAMED_PLACE_BUFFER_DEG, gt=0.0, le=1.0)
    # Per-session coordinators kept before the least recently used is evicted
    max_sessions: int = Field(default=1000, ge=1)

    model_config = {"env_prefix": "FETCH_"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="AccessMap")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json")

    # Nested Settings
    overpass: OverpassSettings = Field(default_factory=OverpassSettings)
    nominatim: NominatimSettings = Field(default_factory=NominatimSettings)
    geolocation: GeolocationSettings = Field(default_factory=GeolocationSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator('log_format', mode='before')
    @classmethod
    def validate_log_format(cls, v):
        """Only json and text log formats are supported"""
        if isinstance(v, str) and v.lower() in ("json", "text"):
            return v.lower()
        raise ValueError("log_format must be 'json' or 'text'")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
