"""Geocoding port - Abstraction for place-name resolution strategies.

A resolver strategy turns a free-text place name into coordinates. The
GeoResolver service tries strategies in order and stops at the first hit,
so each strategy only has to report its own outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoResolution


class GeoResolverStrategy(Protocol):
    """Port for one tier of place-name resolution.

    Implementations:
    - adapters/geocoding/gazetteer.py (GazetteerResolver) - offline, authoritative
    - adapters/geocoding/nominatim_adapter.py (NominatimGeocoderAdapter) - network

    Strategies should not raise: network and parsing problems are reported
    as a FAILED resolution.
    """

    @property
    def name(self) -> str:
        """Return the strategy name used in logs and results."""
        ...

    async def resolve(self, place_name: str) -> GeoResolution:
        """Resolve a place name.

        Args:
            place_name: Place name as written by the rider (e.g. "Kigali").

        Returns:
            GeoResolution with FOUND, NOT_FOUND or FAILED status.
        """
        ...
