"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Language and multimodal inference (Gemini)
- Geocoding (curated gazetteer, Nominatim)
- The persistent store (Supabase)
- Places search (Google Places)
"""
