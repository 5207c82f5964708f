"""HTTP-level tests: routing, status mapping, error envelope and CORS."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from fakes import FakeGenerator, FakePlaces, FakeStore, FakeTranscriber
from ridelink.adapters.geocoding import GazetteerResolver
from ridelink.api import create_app
from ridelink.container import Container
from ridelink.domain.errors import ProviderError, StoreError
from ridelink.domain.models import AuthenticatedUser
from ridelink.ports.asr import SpeechTranscriberPort
from ridelink.ports.inference import TextGenerationPort
from ridelink.ports.places import PlacesSearchPort
from ridelink.ports.store import AuthPort, PaymentStorePort, StationStorePort, TripStorePort
from ridelink.services import GeoResolver

TRIP_REPLY = json.dumps(
    {
        "origin": "Kigali",
        "destination": "Huye",
        "departureTime": "2024-06-11T08:00:00",
        "seats": 2,
        "vehiclePreference": "Cab",
        "confidence": 88,
        "suggestions": ["Book early"],
    }
)


@pytest.fixture
def fakes():
    return {
        "generator": FakeGenerator(reply=TRIP_REPLY),
        "transcriber": FakeTranscriber(transcript="Kigali to Huye"),
        "store": FakeStore(
            matches=[{"trip_id": "t-1", "distance_m": 150.0}],
            transaction={"id": "txn-1", "status": "completed"},
            users={"rider-jwt": AuthenticatedUser(id="user-rider")},
        ),
        "places": FakePlaces(places=[{"id": "ChIJ-1", "displayName": {"text": "EV Hub"}}]),
    }


@pytest.fixture
def client(config, fakes):
    container = Container.create_default(config)
    container.register(TextGenerationPort, lambda: fakes["generator"])
    container.register(SpeechTranscriberPort, lambda: fakes["transcriber"])
    container.register(GeoResolver, lambda: GeoResolver(strategies=(GazetteerResolver(),)))
    for port in (TripStorePort, PaymentStorePort, AuthPort, StationStorePort):
        container.register(port, lambda: fakes["store"])
    container.register(PlacesSearchPort, lambda: fakes["places"])
    return TestClient(create_app(config, container))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestParseTripRequest:
    def test_text_request(self, client):
        response = client.post(
            "/parse-trip-request",
            json={"input": "Kigali to Huye tomorrow morning, 2 seats", "inputType": "text"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["origin"] == "Kigali"
        assert body["destination"] == "Huye"
        assert body["seats"] == 2
        assert body["vehiclePreference"] == "Cab"
        assert body["originCoordinates"] == {"lat": -1.9441, "lng": 30.0619}
        assert body["destinationCoordinates"] == {"lat": -2.5969, "lng": 29.7389}

    def test_voice_request(self, client, fakes):
        response = client.post(
            "/parse-trip-request",
            json={"inputType": "voice", "audioData": "UklGRg=="},
        )
        assert response.status_code == 200
        assert fakes["transcriber"].calls == ["UklGRg=="]

    def test_user_location_reaches_prompt(self, client, fakes):
        client.post(
            "/parse-trip-request",
            json={"input": "to Huye", "userLocation": {"latitude": -1.95, "longitude": 30.06}},
        )
        prompt = fakes["generator"].calls[0][0][0]["text"]
        assert "User's current location: -1.95, 30.06" in prompt

    def test_missing_input_is_400(self, client, fakes):
        response = client.post("/parse-trip-request", json={"inputType": "text"})
        assert response.status_code == 400
        assert response.json() == {"error": "Input or audioData is required"}
        assert fakes["generator"].calls == []
        assert fakes["transcriber"].calls == []

    def test_unparseable_reply_is_500(self, client, fakes):
        fakes["generator"].reply = "Sorry, I can't do that"
        response = client.post("/parse-trip-request", json={"input": "hello"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Failed to parse AI response: Sorry")

    def test_provider_failure_is_500(self, client, fakes):
        fakes["generator"].error = ProviderError(
            "Inference provider returned HTTP 503", provider="gemini", status=503
        )
        response = client.post("/parse-trip-request", json={"input": "Kigali to Huye"})

        assert response.status_code == 500
        assert response.json() == {"error": "Inference provider returned HTTP 503"}

    def test_untranscribable_audio_is_500(self, client, fakes):
        fakes["transcriber"].transcript = ""
        response = client.post(
            "/parse-trip-request",
            json={"inputType": "voice", "audioData": "UklGRg=="},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Audio could not be transcribed"}
        assert fakes["generator"].calls == []

    def test_get_is_405(self, client):
        response = client.get("/parse-trip-request")
        assert response.status_code == 405
        assert "error" in response.json()

    def test_malformed_body_is_400(self, client):
        response = client.post("/parse-trip-request", json={"inputType": "fax"})
        assert response.status_code == 400
        assert "inputType" in response.json()["error"]


class TestTripMatching:
    def test_returns_store_rows(self, client, fakes):
        response = client.post(
            "/trip-matching",
            json={
                "origin_lat": -1.9441,
                "origin_lng": 30.0619,
                "dest_lat": -2.5969,
                "dest_lng": 29.7389,
                "time_window_start": "2024-06-11T06:00:00",
                "time_window_end": "2024-06-11T12:00:00",
            },
            headers={"Authorization": "Bearer rider-jwt"},
        )

        assert response.status_code == 200
        assert response.json() == {"matches": [{"trip_id": "t-1", "distance_m": 150.0}]}
        query, token = fakes["store"].match_queries[0]
        assert token == "rider-jwt"
        assert query.radius_meters == 1000

    def test_inverted_window_is_an_empty_result(self, client):
        response = client.post(
            "/trip-matching",
            json={
                "origin_lat": -1.9441,
                "origin_lng": 30.0619,
                "time_window_start": "2024-06-11T12:00:00",
                "time_window_end": "2024-06-11T06:00:00",
            },
        )
        assert response.status_code == 200
        assert response.json() == {"matches": []}

    def test_store_rows_are_returned_unchanged(self, client, fakes):
        fakes["store"].matches = ["trip-uuid-1", "trip-uuid-2"]
        response = client.post("/trip-matching", json={"origin_lat": -1.9441, "origin_lng": 30.0619})

        assert response.status_code == 200
        assert response.json() == {"matches": ["trip-uuid-1", "trip-uuid-2"]}

    def test_missing_origin_is_400(self, client):
        response = client.post("/trip-matching", json={"dest_lat": -2.5, "dest_lng": 29.7})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing location data"}

    def test_store_failure_is_400(self, client, fakes):
        fakes["store"].fail_with = StoreError("permission denied", operation="find_matching_trips")
        response = client.post("/trip-matching", json={"origin_lat": 0, "origin_lng": 0})
        assert response.status_code == 400
        assert response.json() == {"error": "permission denied"}


class TestPaymentProcessing:
    def test_transfer(self, client, fakes):
        response = client.post(
            "/payment-processing",
            json={"amount": 1500, "recipient_id": "user-driver"},
            headers={"Authorization": "Bearer rider-jwt"},
        )

        assert response.status_code == 200
        assert response.json() == {"transaction": {"id": "txn-1", "status": "completed"}}
        transfer, _ = fakes["store"].transfers[0]
        assert transfer.from_user == "user-rider"
        assert transfer.currency == "RWF"

    def test_missing_token_is_400_unauthorized(self, client, fakes):
        response = client.post(
            "/payment-processing", json={"amount": 1500, "recipient_id": "user-driver"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Unauthorized"}
        assert fakes["store"].transfers == []

    def test_missing_amount_is_400(self, client):
        response = client.post(
            "/payment-processing",
            json={"recipient_id": "user-driver"},
            headers={"Authorization": "Bearer rider-jwt"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Missing payment details"}


class TestChargingStations:
    def test_refresh(self, client, fakes):
        response = client.post(
            "/fetch-charging-stations", json={"latitude": -1.95, "longitude": 30.09}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 1
        assert body["raw_count"] == 1
        assert fakes["store"].upserts[0]["google_place_id"] == "ChIJ-1"

    def test_missing_coordinates_is_400(self, client):
        response = client.post("/fetch-charging-stations", json={"latitude": -1.95})
        assert response.status_code == 400


class TestCors:
    def test_trip_parsing_preflight_echoes_allowed_origin(self, client):
        response = client.options(
            "/parse-trip-request", headers={"Origin": "https://app.ridelink.app"}
        )

        assert response.status_code == 200
        assert response.text == "ok"
        assert response.headers["access-control-allow-origin"] == "https://app.ridelink.app"
        assert response.headers["access-control-allow-credentials"] == "true"
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_trip_parsing_unknown_origin_gets_first_allowed(self, client):
        response = client.options(
            "/parse-trip-request", headers={"Origin": "https://evil.example"}
        )
        assert response.headers["access-control-allow-origin"] == "https://ridelink.app"

    def test_default_policy_is_wildcard(self, client):
        response = client.options("/trip-matching", headers={"Origin": "https://evil.example"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]

    def test_error_responses_carry_cors_headers(self, client):
        response = client.post(
            "/parse-trip-request", json={}, headers={"Origin": "http://localhost:3000"}
        )
        assert response.status_code == 400
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
