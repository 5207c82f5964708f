"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    AuthError,
    ConfigurationError,
    InterpretationError,
    ProviderError,
    RideLinkError,
    StoreError,
    ValidationError,
)
from .models import (
    AuthenticatedUser,
    ChargingStation,
    Connector,
    GeoPoint,
    GeoResolution,
    MatchCandidate,
    MatchQuery,
    MoneyTransfer,
    ResolutionStatus,
    StationFetchResult,
    TimeWindow,
    TransactionRecord,
    TripDraft,
    VehiclePreference,
)

__all__ = [
    # Models
    "GeoPoint",
    "GeoResolution",
    "ResolutionStatus",
    "VehiclePreference",
    "TripDraft",
    "TimeWindow",
    "MatchQuery",
    "MatchCandidate",
    "MoneyTransfer",
    "TransactionRecord",
    "AuthenticatedUser",
    "Connector",
    "ChargingStation",
    "StationFetchResult",
    # Errors
    "RideLinkError",
    "ValidationError",
    "AuthError",
    "ProviderError",
    "InterpretationError",
    "StoreError",
    "ConfigurationError",
]
