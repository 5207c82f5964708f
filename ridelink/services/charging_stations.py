"""Charging station service - refresh stations near a point.

Searches nearby places, normalizes EV charging results and upserts them
into the store keyed by Google place id. A failed upsert skips that
station and is logged; the refresh itself still succeeds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..config import PlacesConfig, get_config
from ..domain.errors import StoreError, ValidationError
from ..domain.models import ChargingStation, Connector, GeoPoint, StationFetchResult
from ..ports.places import PlacesSearchPort
from ..ports.store import StationStorePort

KNOWN_NETWORKS = (
    "ChargePoint",
    "Tesla",
    "EVgo",
    "Electrify America",
    "Blink",
    "Shell Recharge",
    "BP Pulse",
    "Ionity",
    "Ampersand",
)

WEEKDAYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

STATION_TYPES = {
    "ev_charging": ("electric_vehicle_charging_station",),
    # No battery-swap place type exists; gas stations are curated by hand.
    "battery_swap": ("gas_station",),
}


def extract_network(display_name: Optional[str]) -> str:
    if not display_name:
        return "Independent"
    lowered = display_name.lower()
    for network in KNOWN_NETWORKS:
        if network.lower() in lowered:
            return network
    return "Independent"


def extract_city(address: Optional[str]) -> str:
    """Second-to-last comma-separated part of a formatted address."""
    if not address:
        return ""
    parts = [part.strip() for part in address.split(",")]
    return parts[-2] if len(parts) >= 2 else ""


def _clock(point: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not point:
        return None
    return f"{int(point.get('hour') or 0):02d}:{int(point.get('minute') or 0):02d}"


def format_opening_hours(hours: Optional[Mapping[str, Any]]) -> Optional[dict[str, str]]:
    """Map Places opening periods to ``{weekday: "HH:MM-HH:MM"}``."""
    if not hours or not hours.get("periods"):
        return None
    formatted: dict[str, str] = {}
    for period in hours["periods"]:
        day = WEEKDAYS[int((period.get("open") or {}).get("day") or 0) % 7]
        opens = _clock(period.get("open"))
        closes = _clock(period.get("close"))
        formatted[day] = f"{opens}-{closes}" if opens and closes else "24 hours"
    return formatted


def is_open_all_day(hours: Optional[Mapping[str, Any]]) -> bool:
    if not hours or not hours.get("periods"):
        return False
    for period in hours["periods"]:
        opens, closes = period.get("open"), period.get("close")
        if not opens or not closes:
            return True
        if (
            opens.get("hour", 0) == 0
            and opens.get("minute", 0) == 0
            and closes.get("hour") == 23
            and closes.get("minute") == 59
        ):
            return True
    return False


def normalize_place(place: Mapping[str, Any]) -> ChargingStation:
    """Build a ChargingStation from a field-masked Places record."""
    display_name = (place.get("displayName") or {}).get("text")
    location = place.get("location") or {}
    aggregation = (place.get("evChargeOptions") or {}).get("connectorAggregation") or []

    connectors = tuple(
        Connector(
            type=str(c.get("type") or ""),
            count=int(c.get("availabilityCount") or 0)
            + int(c.get("outOfServiceCount") or 0),
            available=int(c.get("availabilityCount") or 0),
            max_charge_rate_kw=float(c.get("maxChargeRateKw") or 0),
        )
        for c in aggregation
    )

    return ChargingStation(
        google_place_id=str(place.get("id") or ""),
        name=display_name or "Unknown Station",
        network=extract_network(display_name),
        address=place.get("formattedAddress") or "",
        city=extract_city(place.get("formattedAddress")),
        latitude=location.get("latitude"),
        longitude=location.get("longitude"),
        average_rating=float(place.get("rating") or 0),
        total_ratings=int(place.get("userRatingCount") or 0),
        phone_number=place.get("internationalPhoneNumber"),
        website=place.get("websiteUri"),
        operating_hours=format_opening_hours(place.get("regularOpeningHours")),
        is_24_hours=is_open_all_day(place.get("regularOpeningHours")),
        connectors=connectors,
    )


@dataclass
class ChargingStationService:
    """Refresh EV charging stations around a point.

    Attributes:
        places: Nearby place search
        store: Station persistence
        config: Places defaults (search radius)
    """

    places: PlacesSearchPort
    store: StationStorePort
    config: PlacesConfig = field(default_factory=lambda: get_config().places)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def fetch_stations(
        self,
        latitude: Optional[float],
        longitude: Optional[float],
        radius: Optional[float] = None,
        station_type: str = "ev_charging",
    ) -> StationFetchResult:
        """Search, normalize and upsert stations.

        Raises:
            ValidationError: If latitude or longitude is missing.
            ProviderError: If the places search fails.
        """
        if latitude is None or longitude is None:
            raise ValidationError(
                "latitude and longitude are required", field_name="latitude"
            )

        included_types = STATION_TYPES.get(station_type, STATION_TYPES["battery_swap"])
        places = await self.places.search_nearby(
            GeoPoint(lat=latitude, lng=longitude),
            radius or self.config.default_radius_meters,
            included_types,
        )

        stored: list[Mapping[str, Any]] = []
        if station_type == "ev_charging":
            observed_at = datetime.now(timezone.utc).isoformat()
            for place in places:
                station = normalize_place(place)
                try:
                    row = await self.store.upsert_charging_station(
                        station.to_row(observed_at)
                    )
                except StoreError as e:
                    self._logger.error(
                        "Database upsert error",
                        extra={"place_id": station.google_place_id, "error": str(e)},
                    )
                    continue
                if row is not None:
                    stored.append(row)

        self._logger.info(
            "Charging stations refreshed",
            extra={"raw_count": len(places), "stored": len(stored)},
        )
        return StationFetchResult(stations=tuple(stored), raw_count=len(places))
