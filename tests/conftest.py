"""Shared fixtures: settings with throttling disabled."""

import pytest

from accessmap.config.settings import (
    FetchSettings,
    GeolocationSettings,
    NominatimSettings,
    OverpassSettings,
    Settings,
)


@pytest.fixture
def overpass_settings():
    return OverpassSettings(min_request_interval_seconds=0.0)


@pytest.fixture
def nominatim_settings():
    return NominatimSettings(min_request_interval_seconds=0.0)


@pytest.fixture
def test_settings():
    return Settings(
        overpass=OverpassSettings(min_request_interval_seconds=0.0),
        nominatim=NominatimSettings(min_request_interval_seconds=0.0),
        geolocation=GeolocationSettings(timeout_seconds=1.0),
        fetch=FetchSettings(),
        log_format="text",
    )
