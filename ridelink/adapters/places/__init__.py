"""Places adapters - Implementations of PlacesSearchPort.

Available implementations:
- GooglePlacesAdapter: Places API (New) nearby search
"""

from .google_places_adapter import GooglePlacesAdapter

__all__ = ["GooglePlacesAdapter"]
