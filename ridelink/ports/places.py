"""Places port - Abstraction for nearby place search."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence

if TYPE_CHECKING:
    from ..domain.models import GeoPoint


class PlacesSearchPort(Protocol):
    """Port for a nearby place search.

    Implementation: adapters/places/google_places_adapter.py
    """

    async def search_nearby(
        self,
        center: GeoPoint,
        radius_meters: float,
        included_types: Sequence[str],
    ) -> Sequence[Mapping[str, Any]]:
        """Return raw place records around ``center``, nearest first.

        Raises:
            ProviderError: If the search call does not succeed.
        """
        ...
