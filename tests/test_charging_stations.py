"""Tests for the charging station refresh and the places adapter."""

from __future__ import annotations

import pytest

from fakes import FakePlaces, FakeStore
from http_fakes import FakeResponse, FakeSession
from ridelink.adapters.places import GooglePlacesAdapter
from ridelink.adapters.places.google_places_adapter import FIELD_MASK
from ridelink.config import PlacesConfig
from ridelink.domain.errors import ConfigurationError, ProviderError, ValidationError
from ridelink.domain.models import GeoPoint
from ridelink.services.charging_stations import (
    ChargingStationService,
    extract_city,
    extract_network,
    format_opening_hours,
    is_open_all_day,
    normalize_place,
)

ALWAYS_OPEN = {"periods": [{"open": {"day": 0, "hour": 0, "minute": 0}}]}

WEEKDAY_HOURS = {
    "periods": [
        {"open": {"day": 1, "hour": 7, "minute": 0}, "close": {"day": 1, "hour": 22, "minute": 30}},
        {"open": {"day": 2, "hour": 7, "minute": 0}, "close": {"day": 2, "hour": 22, "minute": 30}},
    ]
}

PLACE = {
    "id": "ChIJ-station-1",
    "displayName": {"text": "Shell Recharge Kigali Heights"},
    "formattedAddress": "KG 7 Ave, Kigali, Rwanda",
    "location": {"latitude": -1.9536, "longitude": 30.0927},
    "rating": 4.5,
    "userRatingCount": 12,
    "internationalPhoneNumber": "+250 788 000 000",
    "websiteUri": "https://example.com/station",
    "regularOpeningHours": ALWAYS_OPEN,
    "evChargeOptions": {
        "connectorCount": 4,
        "connectorAggregation": [
            {"type": "EV_CONNECTOR_TYPE_CCS_COMBO_2", "maxChargeRateKw": 50,
             "availabilityCount": 1, "outOfServiceCount": 1},
            {"type": "EV_CONNECTOR_TYPE_TYPE_2", "maxChargeRateKw": 22,
             "availabilityCount": 2},
        ],
    },
}


class TestNormalization:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Tesla Supercharger Nairobi", "Tesla"),
            ("shell recharge - Remera", "Shell Recharge"),
            ("Kigali Green Charge", "Independent"),
            (None, "Independent"),
        ],
    )
    def test_extract_network(self, name, expected):
        assert extract_network(name) == expected

    def test_extract_city(self):
        assert extract_city("KG 7 Ave, Kigali, Rwanda") == "Kigali"
        assert extract_city("Kigali") == ""
        assert extract_city(None) == ""

    def test_opening_hours(self):
        assert format_opening_hours(WEEKDAY_HOURS) == {
            "monday": "07:00-22:30",
            "tuesday": "07:00-22:30",
        }
        assert format_opening_hours(ALWAYS_OPEN) == {"sunday": "24 hours"}
        assert format_opening_hours(None) is None

    def test_all_day_detection(self):
        assert is_open_all_day(ALWAYS_OPEN)
        assert is_open_all_day(
            {"periods": [{"open": {"hour": 0, "minute": 0}, "close": {"hour": 23, "minute": 59}}]}
        )
        assert not is_open_all_day(WEEKDAY_HOURS)
        assert not is_open_all_day({})

    def test_normalize_place(self):
        station = normalize_place(PLACE)

        assert station.google_place_id == "ChIJ-station-1"
        assert station.network == "Shell Recharge"
        assert station.city == "Kigali"
        assert station.is_24_hours
        assert station.max_power_kw == 50.0
        assert station.total_ports == 4
        assert station.available_ports == 3

        row = station.to_row("2024-06-10T07:00:00+00:00")
        assert row["location"] == "POINT(30.0927 -1.9536)"
        assert row["source"] == "google_places"
        assert row["connector_types"][0] == {
            "type": "EV_CONNECTOR_TYPE_CCS_COMBO_2",
            "count": 2,
            "available": 1,
            "max_charge_rate_kw": 50.0,
        }

    def test_sparse_place(self):
        station = normalize_place({"id": "p-2"})
        assert station.name == "Unknown Station"
        assert station.connectors == ()
        assert station.max_power_kw == 0.0


class TestChargingStationService:
    @pytest.mark.asyncio
    async def test_ev_search_upserts_each_station(self):
        places = FakePlaces(places=[PLACE, {**PLACE, "id": "ChIJ-station-2"}])
        store = FakeStore()
        service = ChargingStationService(places=places, store=store, config=PlacesConfig())

        result = await service.fetch_stations(-1.95, 30.09)

        center, radius, types = places.calls[0]
        assert center == GeoPoint(-1.95, 30.09)
        assert radius == 10_000.0
        assert types == ("electric_vehicle_charging_station",)
        assert [row["google_place_id"] for row in store.upserts] == [
            "ChIJ-station-1",
            "ChIJ-station-2",
        ]
        assert result.to_dict()["count"] == 2
        assert result.raw_count == 2
        assert result.to_dict()["success"] is True

    @pytest.mark.asyncio
    async def test_failed_upsert_is_skipped(self):
        places = FakePlaces(places=[PLACE, {**PLACE, "id": "ChIJ-station-2"}])
        store = FakeStore(fail_upsert_for={"ChIJ-station-1"})
        service = ChargingStationService(places=places, store=store, config=PlacesConfig())

        result = await service.fetch_stations(-1.95, 30.09, radius=2500)

        assert places.calls[0][1] == 2500
        assert result.count == 1
        assert result.raw_count == 2

    @pytest.mark.asyncio
    async def test_battery_swap_search_stores_nothing(self):
        places = FakePlaces(places=[{"id": "gas-1"}])
        store = FakeStore()
        service = ChargingStationService(places=places, store=store, config=PlacesConfig())

        result = await service.fetch_stations(-1.95, 30.09, station_type="battery_swap")

        assert places.calls[0][2] == ("gas_station",)
        assert store.upserts == []
        assert result.count == 0
        assert result.raw_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("lat", "lng"), [(None, 30.0), (-1.9, None)])
    async def test_missing_coordinates(self, lat, lng):
        service = ChargingStationService(
            places=FakePlaces(), store=FakeStore(), config=PlacesConfig()
        )
        with pytest.raises(ValidationError):
            await service.fetch_stations(lat, lng)


class TestGooglePlacesAdapter:
    @pytest.mark.asyncio
    async def test_search_nearby_request_shape(self):
        session = FakeSession([FakeResponse(200, {"places": [PLACE]})])
        adapter = GooglePlacesAdapter(
            PlacesConfig(api_key="places-key"), session_factory=lambda: session
        )

        places = await adapter.search_nearby(
            GeoPoint(-1.95, 30.09), 5000, ("electric_vehicle_charging_station",)
        )

        assert places == [PLACE]
        method, url, kwargs = session.requests[0]
        assert (method, url) == ("POST", "https://places.googleapis.com/v1/places:searchNearby")
        assert kwargs["headers"]["X-Goog-Api-Key"] == "places-key"
        assert kwargs["headers"]["X-Goog-FieldMask"] == FIELD_MASK
        assert kwargs["json"] == {
            "includedTypes": ["electric_vehicle_charging_station"],
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": -1.95, "longitude": 30.09},
                    "radius": 5000,
                }
            },
            "maxResultCount": 20,
            "rankPreference": "DISTANCE",
        }

    @pytest.mark.asyncio
    async def test_empty_response(self):
        session = FakeSession([FakeResponse(200, {})])
        adapter = GooglePlacesAdapter(
            PlacesConfig(api_key="places-key"), session_factory=lambda: session
        )
        assert await adapter.search_nearby(GeoPoint(0, 0), 100, ("gas_station",)) == []

    @pytest.mark.asyncio
    async def test_error_status(self):
        session = FakeSession([FakeResponse(403, {"error": {"status": "PERMISSION_DENIED"}})])
        adapter = GooglePlacesAdapter(
            PlacesConfig(api_key="places-key"), session_factory=lambda: session
        )
        with pytest.raises(ProviderError) as exc_info:
            await adapter.search_nearby(GeoPoint(0, 0), 100, ("gas_station",))
        assert exc_info.value.status == 403
        assert str(exc_info.value).startswith("Google Places API error:")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        adapter = GooglePlacesAdapter(PlacesConfig(), session_factory=FakeSession)
        with pytest.raises(ConfigurationError):
            await adapter.search_nearby(GeoPoint(0, 0), 100, ("gas_station",))
