"""Geo resolver service - ordered chain of resolution strategies.

Strategies are tried in order and the first FOUND result wins. The chain
never raises: geocoding is best-effort and a missing coordinate must not
abort trip interpretation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..domain.models import GeoPoint, GeoResolution, ResolutionStatus
from ..ports.geocoding import GeoResolverStrategy


@dataclass
class GeoResolver:
    """Resolve place names through a strategy chain.

    Typical chain: GazetteerResolver, then NominatimGeocoderAdapter.

    Attributes:
        strategies: Resolvers in precedence order
    """

    strategies: Sequence[GeoResolverStrategy]

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def resolve(self, place_name: str) -> GeoResolution:
        """Resolve a place name.

        Returns:
            The first FOUND result. Otherwise FAILED if any tier failed,
            else NOT_FOUND.
        """
        if not place_name or not place_name.strip():
            return GeoResolution.not_found()

        last_failure: Optional[GeoResolution] = None
        for strategy in self.strategies:
            try:
                result = await strategy.resolve(place_name)
            except Exception as e:
                self._logger.warning(
                    "Resolver strategy raised, continuing",
                    extra={"strategy": strategy.name, "error": str(e)},
                )
                result = GeoResolution.failed(str(e), strategy.name)

            if result.is_found:
                self._logger.debug(
                    "Place resolved",
                    extra={"place": place_name, "source": result.source},
                )
                return result
            if result.status is ResolutionStatus.FAILED:
                last_failure = result

        self._logger.info(
            "Place not resolved",
            extra={
                "place": place_name,
                "failed": last_failure is not None,
            },
        )
        return last_failure or GeoResolution.not_found()

    async def resolve_point(self, place_name: str) -> Optional[GeoPoint]:
        """Resolve a place name to coordinates, or None."""
        return (await self.resolve(place_name)).point_or_none()
