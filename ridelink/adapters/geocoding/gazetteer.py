"""Curated gazetteer of regional localities.

City-level coordinates for the places riders mention most. This tier is
authoritative and never touches the network. Historical names are kept as
aliases with the same coordinates as the current name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from ...domain.models import GeoPoint, GeoResolution

KNOWN_LOCATIONS: Mapping[str, GeoPoint] = {
    "kigali": GeoPoint(-1.9441, 30.0619),
    "huye": GeoPoint(-2.5969, 29.7389),
    "musanze": GeoPoint(-1.4992, 29.635),
    "rubavu": GeoPoint(-1.6775, 29.26),
    "nyagatare": GeoPoint(-1.2986, 30.3275),
    "muhanga": GeoPoint(-2.0839, 29.7528),
    "ruhango": GeoPoint(-2.2167, 29.7833),
    "nairobi": GeoPoint(-1.2921, 36.8219),
    "mombasa": GeoPoint(-4.0435, 39.6682),
    "kampala": GeoPoint(0.3476, 32.5825),
    "dar es salaam": GeoPoint(-6.7924, 39.2083),
    "bujumbura": GeoPoint(-3.3614, 29.3599),
    "gisenyi": GeoPoint(-1.7028, 29.2567),
    "butare": GeoPoint(-2.5969, 29.7389),  # Huye
    "cyangugu": GeoPoint(-2.4847, 28.9075),
    "rwamagana": GeoPoint(-1.9494, 30.4347),
    "kayonza": GeoPoint(-1.8608, 30.6567),
    "byumba": GeoPoint(-1.5764, 30.0672),
    "gitarama": GeoPoint(-2.0747, 29.7567),  # Muhanga, former name
}


def normalize_place_name(place_name: str) -> str:
    return place_name.strip().lower()


@dataclass
class GazetteerResolver:
    """First-tier resolver backed by a fixed mapping.

    Attributes:
        locations: Normalized place name -> coordinates
    """

    locations: Mapping[str, GeoPoint] = field(default_factory=lambda: KNOWN_LOCATIONS)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def name(self) -> str:
        return "gazetteer"

    def lookup(self, place_name: str) -> GeoResolution:
        """Synchronous lookup; the async ``resolve`` delegates here."""
        point = self.locations.get(normalize_place_name(place_name))
        if point is None:
            return GeoResolution.not_found(self.name)
        self._logger.debug("Gazetteer hit", extra={"place": place_name})
        return GeoResolution.found(point, self.name)

    async def resolve(self, place_name: str) -> GeoResolution:
        return self.lookup(place_name)
