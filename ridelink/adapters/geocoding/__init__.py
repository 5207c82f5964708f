"""Geocoding adapters - Implementations of GeoResolverStrategy.

Available implementations:
- GazetteerResolver: curated offline gazetteer (first tier)
- NominatimGeocoderAdapter: OpenStreetMap Nominatim geocoding (second tier)
"""

from .gazetteer import KNOWN_LOCATIONS, GazetteerResolver
from .nominatim_adapter import NominatimGeocoderAdapter

__all__ = ["GazetteerResolver", "NominatimGeocoderAdapter", "KNOWN_LOCATIONS"]
