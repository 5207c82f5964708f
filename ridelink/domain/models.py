"""Immutable domain models for the RideLink trip core.

All models are frozen dataclasses with slots. Records whose shape is owned
by the store (match candidates, transaction records) are kept as plain
mappings and never interpreted here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Mapping, Optional

# Store-owned records, passed through untouched.
MatchCandidate = Mapping[str, Any]
TransactionRecord = Any


class VehiclePreference(Enum):
    """Vehicle type a rider may ask for."""

    MotoTaxi = "MotoTaxi"
    Cab = "Cab"
    Liffan = "Liffan"
    Truck = "Truck"
    Rent = "Rent"
    Other = "Other"

    @classmethod
    def parse(cls, value: Any) -> Optional[VehiclePreference]:
        """Map a free-form label to a preference.

        "Moto Taxi", "moto_taxi" and "mototaxi" all map to MotoTaxi.
        Null-like values give None, unknown labels give Other.
        """
        if value is None:
            return None
        key = re.sub(r"[\s_\-]+", "", str(value)).lower()
        if key in ("", "null", "none"):
            return None
        for member in cls:
            if member.value.lower() == key:
                return member
        return cls.Other


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS-84 coordinates in degrees. Only presence is checked."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


class ResolutionStatus(Enum):
    """Outcome of a single place-name resolution."""

    FOUND = auto()
    NOT_FOUND = auto()
    FAILED = auto()


@dataclass(frozen=True, slots=True)
class GeoResolution:
    """Tri-state result of resolving a place name.

    Attributes:
        status: FOUND, NOT_FOUND or FAILED
        point: Coordinates when status is FOUND
        source: Name of the strategy that produced the result
        reason: Failure description when status is FAILED
    """

    status: ResolutionStatus
    point: Optional[GeoPoint] = None
    source: str = ""
    reason: Optional[str] = None

    @classmethod
    def found(cls, point: GeoPoint, source: str) -> GeoResolution:
        return cls(ResolutionStatus.FOUND, point=point, source=source)

    @classmethod
    def not_found(cls, source: str = "") -> GeoResolution:
        return cls(ResolutionStatus.NOT_FOUND, source=source)

    @classmethod
    def failed(cls, reason: str, source: str = "") -> GeoResolution:
        return cls(ResolutionStatus.FAILED, source=source, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is ResolutionStatus.FOUND and self.point is not None

    def point_or_none(self) -> Optional[GeoPoint]:
        return self.point if self.is_found else None


@dataclass(frozen=True, slots=True)
class TripDraft:
    """Structured trip request interpreted from free text or voice.

    Coordinates are attached after interpretation and may stay absent when
    a place name cannot be resolved. Absence is a degraded-confidence
    signal for the caller, not an error.

    Attributes:
        origin: Origin place name as understood by the model
        destination: Destination place name
        departure_time: ISO-8601 local civil time, no offset
        seats: Requested seats, at least 1
        vehicle_preference: Requested vehicle type, if any
        confidence: Model confidence in [0, 100]
        suggestions: Up to three hints for the rider
        origin_coordinates: Resolved origin, if any
        destination_coordinates: Resolved destination, if any
    """

    origin: str
    destination: str
    departure_time: str
    seats: int = 1
    vehicle_preference: Optional[VehiclePreference] = None
    confidence: int = 0
    suggestions: tuple[str, ...] = field(default_factory=tuple)
    origin_coordinates: Optional[GeoPoint] = None
    destination_coordinates: Optional[GeoPoint] = None

    def with_coordinates(
        self,
        origin: Optional[GeoPoint] = None,
        destination: Optional[GeoPoint] = None,
    ) -> TripDraft:
        """Return a copy with whichever coordinates were resolved."""
        return replace(
            self,
            origin_coordinates=origin or self.origin_coordinates,
            destination_coordinates=destination or self.destination_coordinates,
        )

    def needs_confirmation(self, threshold: int) -> bool:
        """Check whether the rider should confirm before persisting."""
        return self.confidence < threshold

    @property
    def is_fully_resolved(self) -> bool:
        return (
            self.origin_coordinates is not None
            and self.destination_coordinates is not None
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire form used by the mobile client (camelCase keys)."""
        payload: dict[str, Any] = {
            "origin": self.origin,
            "destination": self.destination,
            "departureTime": self.departure_time,
            "seats": self.seats,
            "vehiclePreference": (
                self.vehicle_preference.value if self.vehicle_preference else None
            ),
            "confidence": self.confidence,
            "suggestions": list(self.suggestions),
        }
        if self.origin_coordinates is not None:
            payload["originCoordinates"] = self.origin_coordinates.to_dict()
        if self.destination_coordinates is not None:
            payload["destinationCoordinates"] = self.destination_coordinates.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Departure window, bounds as ISO-8601 strings.

    start <= end is the caller's responsibility; an inverted window simply
    matches nothing in the store.
    """

    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def is_inverted(self) -> bool:
        if not self.start or not self.end:
            return False
        try:
            return datetime.fromisoformat(self.start) > datetime.fromisoformat(
                self.end
            )
        except (TypeError, ValueError):
            return False


@dataclass(frozen=True, slots=True)
class MatchQuery:
    """Spatial-temporal query sent to the trip store."""

    origin: GeoPoint
    destination: Optional[GeoPoint]
    window: TimeWindow
    radius_meters: int

    def to_rpc_params(self) -> dict[str, Any]:
        return {
            "start_lat": self.origin.lat,
            "start_lng": self.origin.lng,
            "end_lat": self.destination.lat if self.destination else None,
            "end_lng": self.destination.lng if self.destination else None,
            "window_start": self.window.start,
            "window_end": self.window.end,
            "radius_meters": self.radius_meters,
        }


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Caller identity as reported by the store's auth service."""

    id: str
    email: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MoneyTransfer:
    """A balance movement between two ledger accounts.

    Constructed per request and handed whole to the store's atomic
    procedure.
    """

    from_user: str
    to_user: str
    amount: Decimal
    currency: str
    method: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_rpc_params(self) -> dict[str, Any]:
        return {
            "p_from_user": self.from_user,
            "p_to_user": self.to_user,
            # JSON has no decimal type; keep integers integral.
            "p_amount": (
                int(self.amount)
                if self.amount == self.amount.to_integral_value()
                else float(self.amount)
            ),
            "p_currency": self.currency,
            "p_method": self.method,
            "p_metadata": dict(self.metadata),
        }


@dataclass(frozen=True, slots=True)
class Connector:
    """Aggregated connector availability at a charging station."""

    type: str
    count: int
    available: int
    max_charge_rate_kw: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "count": self.count,
            "available": self.available,
            "max_charge_rate_kw": self.max_charge_rate_kw,
        }


@dataclass(frozen=True, slots=True)
class ChargingStation:
    """EV charging station normalized from a places search result."""

    google_place_id: str
    name: str
    network: str
    address: str
    city: str
    latitude: Optional[float]
    longitude: Optional[float]
    country: str = "RWA"
    average_rating: float = 0.0
    total_ratings: int = 0
    phone_number: Optional[str] = None
    website: Optional[str] = None
    operating_hours: Optional[Mapping[str, str]] = None
    is_24_hours: bool = False
    connectors: tuple[Connector, ...] = field(default_factory=tuple)

    @property
    def max_power_kw(self) -> float:
        return max([0.0, *(c.max_charge_rate_kw for c in self.connectors)])

    @property
    def total_ports(self) -> int:
        return sum(c.count for c in self.connectors)

    @property
    def available_ports(self) -> int:
        return sum(c.available for c in self.connectors)

    def to_row(self, observed_at: str) -> dict[str, Any]:
        """Row for the ev_charging_stations upsert."""
        return {
            "name": self.name,
            "network": self.network,
            "address": self.address,
            "city": self.city,
            "country": self.country,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "location": f"POINT({self.longitude} {self.latitude})",
            "google_place_id": self.google_place_id,
            "source": "google_places",
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "phone_number": self.phone_number,
            "website": self.website,
            "operating_hours": (
                dict(self.operating_hours) if self.operating_hours else None
            ),
            "is_24_hours": self.is_24_hours,
            "connector_types": [c.to_dict() for c in self.connectors],
            "max_power_kw": self.max_power_kw,
            "total_ports": self.total_ports,
            "available_ports": self.available_ports,
            "last_availability_update": observed_at,
            "verified": True,
            "verified_at": observed_at,
            "is_operational": True,
        }


@dataclass(frozen=True, slots=True)
class StationFetchResult:
    """Outcome of a nearby charging-station refresh."""

    stations: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)
    raw_count: int = 0

    @property
    def count(self) -> int:
        return len(self.stations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "stations": [dict(s) for s in self.stations],
            "count": self.count,
            "raw_count": self.raw_count,
        }
