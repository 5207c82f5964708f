"""Trip interpreter - free text to a structured TripDraft.

The provider call sits behind TextGenerationPort; prompt construction and
reply parsing are plain functions so they can be tested with captured
replies.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

from ..config import InferenceConfig, get_config
from ..domain.errors import InterpretationError
from ..domain.models import GeoPoint, TripDraft, VehiclePreference
from ..ports.inference import TextGenerationPort
from .geo_resolver import GeoResolver

SNIPPET_LENGTH = 100
MAX_SUGGESTIONS = 3

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.IGNORECASE)

PROMPT_TEMPLATE = """
You are a trip scheduling assistant for a ride-sharing app in Sub-Saharan Africa (Rwanda, Kenya, Uganda, Tanzania, Burundi).

Current context:
- Today's date: {today}
- Current time: {current_time}
{location_line}
Parse the following trip request and extract structured information.

User input: "{user_input}"

Instructions:
1. Extract origin and destination city/location names
2. Infer departure time from context:
   - "tomorrow" = next day at 08:00
   - "morning" = today/tomorrow at 08:00
   - "afternoon" = today/tomorrow at 14:00
   - "evening" = today/tomorrow at 18:00
   - "now" or "immediately" = current time
   - Specific times like "3pm" or "15:00" = that time today (or tomorrow if already past)
3. Extract number of seats (default to 1 if not mentioned)
4. Extract vehicle preference if mentioned (Moto Taxi, Cab, Liffan, Truck, Rent, Other)
5. Provide confidence score (0-100) based on clarity of the request
6. Generate 2-3 helpful suggestions for the trip

Respond with ONLY valid JSON in this exact format (no markdown, no code blocks):
{{
  "origin": "city/location name",
  "destination": "city/location name",
  "departureTime": "YYYY-MM-DDTHH:mm:ss",
  "seats": number,
  "vehiclePreference": "vehicle type or null",
  "confidence": number (0-100),
  "suggestions": ["suggestion 1", "suggestion 2", "suggestion 3"]
}}
"""


def build_trip_prompt(
    text: str,
    now: datetime,
    user_location: Optional[GeoPoint] = None,
) -> str:
    """Render the parsing prompt for one request."""
    location_line = (
        f"- User's current location: {user_location.lat}, {user_location.lng}\n"
        if user_location is not None
        else ""
    )
    return PROMPT_TEMPLATE.format(
        today=now.strftime("%Y-%m-%d"),
        current_time=now.strftime("%H:%M"),
        location_line=location_line,
        user_input=text,
    )


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers the model sometimes wraps replies in."""
    return _FENCE_RE.sub("", text).strip()


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _coerce_seats(value: Any, snippet: str) -> int:
    if value is None:
        return 1
    seats = _as_int(value)
    if seats is None:
        raise InterpretationError(
            f"Invalid seat count in AI response: {snippet}", snippet=snippet
        )
    return max(1, seats)


def _coerce_confidence(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        score = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return min(100, max(0, score))


def _coerce_suggestions(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    items = [_as_text(item) for item in value]
    return tuple(item for item in items if item)[:MAX_SUGGESTIONS]


def parse_trip_draft(raw_text: str) -> TripDraft:
    """Parse a model reply into a TripDraft without coordinates.

    Seats below 1 become 1, confidence is clamped to [0, 100] and only
    the first three suggestions are kept.

    Raises:
        InterpretationError: If the reply is not a JSON object, or the
            seat count is not an integer. The message carries the first
            characters of the cleaned reply.
    """
    cleaned = strip_code_fences(raw_text)
    snippet = cleaned[:SNIPPET_LENGTH]

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InterpretationError(
            f"Failed to parse AI response: {snippet}", snippet=snippet, cause=e
        )
    if not isinstance(payload, Mapping):
        raise InterpretationError(
            f"Failed to parse AI response: {snippet}", snippet=snippet
        )

    return TripDraft(
        origin=_as_text(payload.get("origin")),
        destination=_as_text(payload.get("destination")),
        departure_time=_as_text(payload.get("departureTime")),
        seats=_coerce_seats(payload.get("seats"), snippet),
        vehicle_preference=VehiclePreference.parse(payload.get("vehiclePreference")),
        confidence=_coerce_confidence(payload.get("confidence")),
        suggestions=_coerce_suggestions(payload.get("suggestions")),
    )


@dataclass
class TripInterpreter:
    """Turn free text into a geocoded TripDraft.

    Attributes:
        generator: Language-model client
        geo_resolver: Place-name resolver chain
        config: Inference sampling parameters
        timezone: Civil timezone used when no "now" is supplied
    """

    generator: TextGenerationPort
    geo_resolver: GeoResolver
    config: InferenceConfig = field(default_factory=lambda: get_config().inference)
    timezone: str = field(default_factory=lambda: get_config().timezone)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _generation_config(self) -> dict[str, Any]:
        return {
            "temperature": self.config.parse_temperature,
            "topP": self.config.parse_top_p,
            "topK": self.config.parse_top_k,
            "maxOutputTokens": self.config.parse_max_output_tokens,
        }

    async def interpret(
        self,
        text: str,
        user_location: Optional[GeoPoint] = None,
        now: Optional[datetime] = None,
    ) -> TripDraft:
        """Interpret a trip request.

        Args:
            text: Rider's request in plain text.
            user_location: Device location, if shared.
            now: Reference time for relative phrases (naive local time or
                aware). Defaults to the current time in the configured zone.

        Returns:
            TripDraft with coordinates attached where resolution succeeded.

        Raises:
            ProviderError: If the inference call fails.
            InterpretationError: If the reply cannot be parsed.
        """
        now = now or datetime.now(ZoneInfo(self.timezone))
        prompt = build_trip_prompt(text, now, user_location)

        self._logger.info(
            "Interpreting trip request",
            extra={"text_length": len(text), "has_location": user_location is not None},
        )
        reply = await self.generator.generate([{"text": prompt}], self._generation_config())

        try:
            draft = parse_trip_draft(reply)
        except InterpretationError as e:
            self._logger.error(
                "Failed to parse AI response", extra={"snippet": e.snippet}
            )
            raise

        origin, destination = await asyncio.gather(
            self._resolve(draft.origin),
            self._resolve(draft.destination),
        )
        draft = draft.with_coordinates(origin=origin, destination=destination)

        self._logger.info(
            "Trip interpreted",
            extra={
                "confidence": draft.confidence,
                "seats": draft.seats,
                "resolved": draft.is_fully_resolved,
            },
        )
        return draft

    async def _resolve(self, place_name: str) -> Optional[GeoPoint]:
        if not place_name:
            return None
        point = await self.geo_resolver.resolve_point(place_name)
        if point is None:
            self._logger.debug("Coordinates left absent", extra={"place": place_name})
        return point
