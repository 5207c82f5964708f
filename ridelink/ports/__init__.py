"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
adapters. They enable dependency injection and make the system testable.

This module follows the Hexagonal Architecture pattern:
- Input ports: How the application is driven (services)
- Output ports: How the application drives external systems (adapters)
"""

from .asr import SpeechTranscriberPort
from .geocoding import GeoResolverStrategy
from .inference import TextGenerationPort
from .places import PlacesSearchPort
from .store import AuthPort, PaymentStorePort, StationStorePort, TripStorePort

__all__ = [
    # Inference
    "TextGenerationPort",
    "SpeechTranscriberPort",
    # Geocoding
    "GeoResolverStrategy",
    # Store
    "TripStorePort",
    "PaymentStorePort",
    "AuthPort",
    "StationStorePort",
    # Places
    "PlacesSearchPort",
]
