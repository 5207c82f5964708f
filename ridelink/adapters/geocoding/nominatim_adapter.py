"""Nominatim geocoder adapter.

Second-tier resolver: OpenStreetMap Nominatim through geopy, running on
geopy's aiohttp adapter so lookups do not block the event loop.

- One geolocator per call, closed when the call ends
- Raw (non-normalized) place name, a single result
- Every failure is logged and reported as FAILED, never raised
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import aiohttp
from geopy.adapters import AioHTTPAdapter
from geopy.exc import GeocoderTimedOut, GeocoderUnavailable, GeopyError
from geopy.geocoders import Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.models import GeoPoint, GeoResolution


@dataclass
class NominatimGeocoderAdapter:
    """Nominatim-backed resolver strategy.

    Attributes:
        config: Geocoding configuration
        geolocator_factory: Builds the geolocator; override in tests
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    geolocator_factory: Optional[Callable[[], Any]] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "nominatim"

    def _build_geolocator(self) -> Any:
        if self.geolocator_factory is not None:
            return self.geolocator_factory()

        self._logger.debug(
            "Initializing Nominatim geocoder",
            extra={
                "user_agent": self.config.user_agent,
                "timeout": self.config.timeout_seconds,
            },
        )
        return Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
            domain=self.config.domain,
            scheme=self.config.scheme,
            adapter_factory=AioHTTPAdapter,
        )

    async def resolve(self, place_name: str) -> GeoResolution:
        """Geocode a place name.

        Args:
            place_name: The place name, passed to Nominatim unchanged.

        Returns:
            FOUND with the top result's coordinates, NOT_FOUND when
            Nominatim has no result, FAILED on any error.
        """
        if not place_name or not place_name.strip():
            return GeoResolution.not_found(self.name)

        try:
            async with self._build_geolocator() as geolocator:
                location = await geolocator.geocode(place_name, exactly_one=True)

            if location is None:
                self._logger.debug(
                    "Geocode returned no result",
                    extra={"query": place_name},
                )
                return GeoResolution.not_found(self.name)

            point = GeoPoint(
                lat=float(location.latitude),
                lng=float(location.longitude),
            )
            self._logger.debug(
                "Geocode success",
                extra={"query": place_name, "lat": point.lat, "lng": point.lng},
            )
            return GeoResolution.found(point, self.name)

        except (GeocoderTimedOut, GeocoderUnavailable, asyncio.TimeoutError) as e:
            self._logger.warning(
                "Geocode service error",
                extra={"query": place_name, "error": str(e)},
            )
            return GeoResolution.failed(str(e), self.name)
        except (GeopyError, aiohttp.ClientError, TypeError, ValueError) as e:
            self._logger.warning(
                "Geocode failed",
                extra={"query": place_name, "error": str(e)},
            )
            return GeoResolution.failed(str(e), self.name)
        except Exception as e:
            self._logger.error(
                "Geocode unexpected error",
                extra={"query": place_name, "error": str(e)},
            )
            return GeoResolution.failed(str(e), self.name)
