"""Request bodies for the HTTP endpoints.

Field names follow the mobile client's wire format. Everything the
services validate themselves is optional here, so a missing field
produces the service's own error message.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import GeoPoint, TimeWindow


class UserLocation(BaseModel):
    latitude: float
    longitude: float

    def to_point(self) -> GeoPoint:
        return GeoPoint(lat=self.latitude, lng=self.longitude)


class TripParseRequest(BaseModel):
    """Body of POST /parse-trip-request."""

    model_config = ConfigDict(populate_by_name=True)

    input: Optional[str] = None
    input_type: Literal["text", "voice"] = Field(default="text", alias="inputType")
    audio_data: Optional[str] = Field(default=None, alias="audioData")
    user_location: Optional[UserLocation] = Field(default=None, alias="userLocation")


class TripMatchRequest(BaseModel):
    """Body of POST /trip-matching."""

    origin_lat: Optional[float] = None
    origin_lng: Optional[float] = None
    dest_lat: Optional[float] = None
    dest_lng: Optional[float] = None
    time_window_start: Optional[str] = None
    time_window_end: Optional[str] = None

    def origin(self) -> Optional[GeoPoint]:
        if self.origin_lat is None or self.origin_lng is None:
            return None
        return GeoPoint(lat=self.origin_lat, lng=self.origin_lng)

    def destination(self) -> Optional[GeoPoint]:
        if self.dest_lat is None or self.dest_lng is None:
            return None
        return GeoPoint(lat=self.dest_lat, lng=self.dest_lng)

    def window(self) -> TimeWindow:
        return TimeWindow(start=self.time_window_start, end=self.time_window_end)


class PaymentRequest(BaseModel):
    """Body of POST /payment-processing."""

    amount: Optional[Any] = None
    currency: Optional[str] = None
    recipient_id: Optional[str] = None
    method: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class ChargingStationRequest(BaseModel):
    """Body of POST /fetch-charging-stations."""

    model_config = ConfigDict(populate_by_name=True)

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[float] = None
    station_type: Literal["battery_swap", "ev_charging"] = Field(
        default="ev_charging", alias="stationType"
    )
