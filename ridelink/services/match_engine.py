"""Match engine - find stored trips compatible with a request.

The spatial and temporal filter runs inside the store; this service
validates the request, attaches the configured proximity tolerance and
returns the store's rows unchanged. Ordering is the store's contract
(distance ascending).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import MatchingConfig, get_config
from ..domain.errors import ValidationError
from ..domain.models import GeoPoint, MatchCandidate, MatchQuery, TimeWindow
from ..ports.store import TripStorePort


@dataclass
class MatchEngine:
    """Client-side contract of the trip matching query.

    Attributes:
        store: Trip store exposing the match procedure
        config: Matching configuration (proximity radius in metres)
    """

    store: TripStorePort
    config: MatchingConfig = field(default_factory=lambda: get_config().matching)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def find_matches(
        self,
        origin: Optional[GeoPoint],
        destination: Optional[GeoPoint],
        window: TimeWindow,
        access_token: Optional[str] = None,
    ) -> list[MatchCandidate]:
        """Find candidate trips.

        Raises:
            ValidationError: If the origin is missing.
            StoreError: If the store call fails.
        """
        if origin is None:
            raise ValidationError("Missing location data", field_name="origin")

        query = MatchQuery(
            origin=origin,
            destination=destination,
            window=window,
            radius_meters=self.config.radius_meters,
        )
        if window.is_inverted:
            self._logger.info(
                "Inverted time window, store will return no rows",
                extra={"start": window.start, "end": window.end},
            )

        matches = await self.store.find_matching_trips(query, access_token)
        self._logger.info(
            "Match query complete",
            extra={
                "matches": len(matches),
                "radius_meters": query.radius_meters,
                "has_destination": destination is not None,
            },
        )
        return list(matches)
