"""
Geocoding: place strings -> coordinates, cached and rate limited.
"""

from ancestry_atlas.geocoding.service import GeocodingService

__all__ = ["GeocodingService"]
