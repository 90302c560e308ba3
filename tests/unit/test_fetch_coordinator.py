"""
Unit tests for fetch coordination: skip rules, in-flight guard and error state
"""
import asyncio

import pytest

from accessmap.config.settings import FetchSettings
from accessmap.core.exceptions import (
    ErrorCode,
    InvalidLocationError,
    TransportError,
    UpstreamError,
)
from accessmap.models.place import (
    AccessibilityAttribute,
    DEFAULT_QUERY_ATTRIBUTES,
    Place,
)
from accessmap.services.fetch_coordinator import FetchCoordinator

A = AccessibilityAttribute


def _place(pid, *attributes, name="Place"):
    return Place(
        id=pid, name=name, lat=1.0, lng=2.0, summary="",
        accessibility_type=tuple(attributes) or (A.WHEELCHAIR,),
    )


class FakeAggregator:
    def __init__(self, results=None, error=None, gate=None):
        self.results = results if results is not None else [_place("node_1")]
        self.error = error
        self.gate = gate
        self.calls = []

    async def aggregate(self, bounds, requested_attributes=()):
        self.calls.append((bounds, frozenset(requested_attributes)))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.results)


class FakeGeocoder:
    def __init__(self, result=None):
        self.result = result
        self.queries = []

    async def search(self, query):
        self.queries.append(query)
        if self.result is None:
            raise InvalidLocationError(details={"query": query})
        return self.result


@pytest.mark.asyncio
async def test_first_request_fetches_and_publishes():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    assert await coordinator.request_fetch(28.61, 77.20, 5.0) is True

    state = coordinator.state
    assert [p.id for p in state.current_places] == ["node_1"]
    assert state.last_fetch_center == (28.61, 77.20)
    assert state.is_loading is False
    assert state.last_error is None


@pytest.mark.asyncio
async def test_repeat_request_at_same_center_is_skipped():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    await coordinator.request_fetch(28.61, 77.20, 5.0)
    assert await coordinator.request_fetch(28.61, 77.20, 5.0) is False
    assert len(aggregator.calls) == 1


@pytest.mark.asyncio
async def test_map_jitter_within_epsilon_is_skipped():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    await coordinator.request_fetch(28.6100, 77.2000)
    await coordinator.request_fetch(28.6105, 77.1996)
    assert len(aggregator.calls) == 1

    await coordinator.request_fetch(28.6200, 77.2000)
    assert len(aggregator.calls) == 2


@pytest.mark.asyncio
async def test_epsilon_is_configurable():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator, config=FetchSettings(refetch_epsilon_deg=0.1))

    await coordinator.request_fetch(10.0, 10.0)
    await coordinator.request_fetch(10.05, 10.05)
    assert len(aggregator.calls) == 1


@pytest.mark.asyncio
async def test_force_refresh_bypasses_location_check():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    await coordinator.request_fetch(28.61, 77.20)
    assert await coordinator.request_fetch(28.61, 77.20, force_refresh=True) is True
    assert len(aggregator.calls) == 2


@pytest.mark.asyncio
async def test_concurrent_requests_run_one_aggregation():
    gate = asyncio.Event()
    aggregator = FakeAggregator(gate=gate)
    coordinator = FetchCoordinator(aggregator)

    first = asyncio.create_task(coordinator.request_fetch(28.61, 77.20))
    await asyncio.sleep(0)
    assert coordinator.state.is_loading is True

    # a different, forced request is still dropped while one is in flight
    assert await coordinator.request_fetch(40.0, -3.0, force_refresh=True) is False

    gate.set()
    assert await first is True
    assert len(aggregator.calls) == 1
    assert coordinator.state.is_loading is False


@pytest.mark.asyncio
async def test_failure_keeps_previous_places():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)
    await coordinator.request_fetch(28.61, 77.20)
    before = coordinator.state.current_places

    aggregator.error = UpstreamError(500)
    assert await coordinator.request_fetch(30.0, 78.0) is True

    state = coordinator.state
    assert state.current_places == before
    assert state.last_error == ErrorCode.UPSTREAM_ERROR
    assert state.last_error_message == "HTTP error! status: 500"
    assert state.last_fetch_center == (28.61, 77.20)
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_next_fetch_clears_error_and_replaces_places():
    aggregator = FakeAggregator(error=TransportError())
    coordinator = FetchCoordinator(aggregator)
    await coordinator.request_fetch(1.0, 1.0)
    assert coordinator.state.last_error == ErrorCode.TRANSPORT_ERROR

    aggregator.error = None
    aggregator.results = [_place("way_2"), _place("way_3", name="Other")]
    await coordinator.request_fetch(1.0, 1.0)

    assert coordinator.state.last_error is None
    assert [p.id for p in coordinator.state.current_places] == ["way_2", "way_3"]


@pytest.mark.asyncio
async def test_invalid_radius_is_recorded_not_raised():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    await coordinator.request_fetch(1.0, 1.0, radius_km=0)

    assert coordinator.state.last_error == ErrorCode.INVALID_LOCATION
    assert aggregator.calls == []
    assert coordinator.state.is_loading is False


@pytest.mark.asyncio
async def test_default_attributes_used_without_active_filters():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    await coordinator.request_fetch(1.0, 1.0)
    assert aggregator.calls[0][1] == DEFAULT_QUERY_ATTRIBUTES


@pytest.mark.asyncio
async def test_active_filters_drive_the_query():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)
    coordinator.set_filters({A.ELEVATOR, A.BRAILLE})

    await coordinator.request_fetch(1.0, 1.0)
    assert aggregator.calls[0][1] == frozenset({A.ELEVATOR, A.BRAILLE})


@pytest.mark.asyncio
async def test_visible_places_apply_every_active_filter():
    aggregator = FakeAggregator(results=[
        _place("node_1", A.WHEELCHAIR),
        _place("node_2", A.WHEELCHAIR, A.TOILET, name="Toilet"),
    ])
    coordinator = FetchCoordinator(aggregator)
    await coordinator.request_fetch(1.0, 1.0)

    assert len(coordinator.visible_places()) == 2
    coordinator.set_filters({A.WHEELCHAIR, A.TOILET})
    assert [p.id for p in coordinator.visible_places()] == ["node_2"]


@pytest.mark.asyncio
async def test_search_area_fetches_geocoded_bounds():
    aggregator = FakeAggregator()
    geocoder = FakeGeocoder({"lat": "28.6", "lon": "77.2", "boundingbox": ["28.4", "28.8", "77.0", "77.4"]})
    coordinator = FetchCoordinator(aggregator, geocoder=geocoder)

    assert await coordinator.search_area("Delhi") is True

    bounds = aggregator.calls[0][0]
    assert (bounds.south, bounds.north, bounds.west, bounds.east) == (28.4, 28.8, 77.0, 77.4)
    assert coordinator.state.last_fetch_center == pytest.approx((28.6, 77.2))
    assert geocoder.queries == ["Delhi"]


@pytest.mark.asyncio
async def test_search_area_not_found_records_invalid_location():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator, geocoder=FakeGeocoder(None))
    await coordinator.request_fetch(1.0, 1.0)

    await coordinator.search_area("Atlantis")

    assert coordinator.state.last_error == ErrorCode.INVALID_LOCATION
    assert "different search term" in coordinator.state.last_error_message
    assert len(coordinator.state.current_places) == 1
    assert len(aggregator.calls) == 1


@pytest.mark.asyncio
async def test_area_summary_uses_filter_area():
    aggregator = FakeAggregator(results=[
        _place("node_1", A.WHEELCHAIR, name="Central Park"),
        _place("node_2", A.ELEVATOR, name="City Mall"),
    ])
    coordinator = FetchCoordinator(aggregator)
    await coordinator.request_fetch(1.0, 1.0)

    assert coordinator.area_summary() is None
    coordinator.set_filters(area="park")
    summary = coordinator.area_summary()
    assert (summary.total, summary.wheelchair, summary.elevator) == (1, 1, 0)


@pytest.mark.asyncio
async def test_skipped_search_keeps_previous_error():
    aggregator = FakeAggregator()
    geocoder = FakeGeocoder({"lat": "28.6", "lon": "77.2", "boundingbox": ["28.4", "28.8", "77.0", "77.4"]})
    coordinator = FetchCoordinator(aggregator, geocoder=geocoder)
    await coordinator.request_fetch(28.6, 77.2)
    aggregator.error = UpstreamError(500)
    await coordinator.request_fetch(28.6, 77.2, force_refresh=True)
    assert coordinator.state.last_error == ErrorCode.UPSTREAM_ERROR
    aggregator.error = None

    assert await coordinator.search_area("Delhi", force_refresh=False) is False

    assert coordinator.state.last_error == ErrorCode.UPSTREAM_ERROR
    assert coordinator.state.last_error_message == "HTTP error! status: 500"
    assert coordinator.state.is_loading is False
    assert len(aggregator.calls) == 2


@pytest.mark.asyncio
async def test_search_blocks_other_fetches_while_geocoding():
    gate = asyncio.Event()

    class SlowGeocoder(FakeGeocoder):
        async def search(self, query):
            await gate.wait()
            return await super().search(query)

    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(
        aggregator, geocoder=SlowGeocoder({"lat": "10.0", "lon": "20.0"})
    )

    search = asyncio.create_task(coordinator.search_area("Somewhere"))
    await asyncio.sleep(0)
    assert await coordinator.request_fetch(1.0, 1.0) is False

    gate.set()
    assert await search is True
    assert len(aggregator.calls) == 1


@pytest.mark.asyncio
async def test_viewport_fetch_uses_corners_and_records_center():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    assert await coordinator.request_viewport_fetch(28.5, 77.1, 28.7, 77.3) is True

    bounds = aggregator.calls[0][0]
    assert (bounds.south, bounds.west, bounds.north, bounds.east) == (28.5, 77.1, 28.7, 77.3)
    assert coordinator.state.last_fetch_center == pytest.approx((28.6, 77.2))


@pytest.mark.asyncio
async def test_viewport_fetch_after_nearby_center_is_skipped():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)
    await coordinator.request_fetch(28.6, 77.2)

    assert await coordinator.request_viewport_fetch(28.5, 77.1, 28.7, 77.3) is False
    assert await coordinator.request_viewport_fetch(28.5, 77.1, 28.7, 77.3, force_refresh=True) is True
    assert len(aggregator.calls) == 2


@pytest.mark.asyncio
async def test_inverted_viewport_records_invalid_location():
    aggregator = FakeAggregator()
    coordinator = FetchCoordinator(aggregator)

    assert await coordinator.request_viewport_fetch(28.7, 77.1, 28.5, 77.3) is False

    assert coordinator.state.last_error == ErrorCode.INVALID_LOCATION
    assert coordinator.state.is_loading is False
    assert aggregator.calls == []
