"""
Core building blocks shared across the pipeline.
"""

from ancestry_atlas.core.exceptions import AtlasError, GeocodingError, ImportFailedError

__all__ = [
    "AtlasError",
    "GeocodingError",
    "ImportFailedError",
]
