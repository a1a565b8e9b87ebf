"""
Ancestry Atlas: GEDCOM ingestion, place geocoding and family tree building.
"""

__version__ = "0.1.0"
