"""Google Places nearby-search adapter.

Uses the Places API (New) ``places:searchNearby`` endpoint. The response
is limited with an ``X-Goog-FieldMask`` header to the fields the charging
station normalizer reads.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

import aiohttp

from ...config import PlacesConfig, get_config
from ...domain.errors import ConfigurationError, ProviderError
from ...domain.models import GeoPoint
from ..http import new_session, read_error_body

FIELD_MASK = ",".join(
    [
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.location",
        "places.types",
        "places.rating",
        "places.userRatingCount",
        "places.internationalPhoneNumber",
        "places.websiteUri",
        "places.regularOpeningHours",
        "places.evChargeOptions",
    ]
)


@dataclass
class GooglePlacesAdapter:
    """Nearby place search through Google Places.

    Attributes:
        config: Places configuration (key, endpoint, result cap)
        session_factory: Builds the aiohttp session; override in tests
    """

    config: PlacesConfig = field(default_factory=lambda: get_config().places)
    session_factory: Optional[Callable[[], Any]] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _session(self) -> Any:
        if self.session_factory is not None:
            return self.session_factory()
        return new_session(self.config.timeout_seconds)

    async def search_nearby(
        self,
        center: GeoPoint,
        radius_meters: float,
        included_types: Sequence[str],
    ) -> Sequence[Mapping[str, Any]]:
        if not self.config.api_key:
            raise ConfigurationError(
                "Places API key not configured", setting_name="RL_PLACES_API_KEY"
            )

        body = {
            "includedTypes": list(included_types),
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": center.lat, "longitude": center.lng},
                    "radius": radius_meters,
                }
            },
            "maxResultCount": self.config.max_results,
            "rankPreference": "DISTANCE",
        }
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.config.api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        try:
            async with self._session() as session:
                async with session.post(
                    f"{self.config.base_url}/places:searchNearby",
                    headers=headers,
                    json=body,
                ) as response:
                    if not 200 <= response.status < 300:
                        error_body = await read_error_body(response)
                        self._logger.error(
                            "Google Places API error",
                            extra={
                                "status": response.status,
                                "upstream_error": error_body,
                            },
                        )
                        raise ProviderError(
                            f"Google Places API error: {error_body}",
                            provider="google_places",
                            status=response.status,
                            body=error_body,
                        )
                    payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderError(
                "Places provider unreachable", provider="google_places", cause=e
            )

        places = (payload or {}).get("places") or []
        self._logger.info(
            "Places search complete",
            extra={"results": len(places), "types": list(included_types)},
        )
        return places
