from ancestry_atlas.places.normalizer import PLACEHOLDER, fallback_query, normalize_place

__all__ = ["PLACEHOLDER", "fallback_query", "normalize_place"]
