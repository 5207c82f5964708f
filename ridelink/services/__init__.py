"""Services layer - Application orchestration.

This module contains the application services that orchestrate
the flow of data through adapters to fulfill use cases.

Available services:
- TripRequestService: rider input to TripDraft (transcription + interpretation)
- TripInterpreter: prompt-driven structured extraction with geocoding
- GeoResolver: ordered place-name resolution chain
- MatchEngine: spatial-temporal trip matching through the store
- PaymentRelay: validated pass-through to the atomic payment procedure
- ChargingStationService: nearby EV charging station refresh
"""

from .charging_stations import ChargingStationService
from .geo_resolver import GeoResolver
from .match_engine import MatchEngine
from .payment_relay import PaymentRelay
from .trip_interpreter import TripInterpreter
from .trip_request import TripRequestService

__all__ = [
    "TripRequestService",
    "TripInterpreter",
    "GeoResolver",
    "MatchEngine",
    "PaymentRelay",
    "ChargingStationService",
]
