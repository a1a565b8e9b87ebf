class AtlasError(Exception):
    """Base exception for Ancestry Atlas failures."""


class ImportFailedError(AtlasError):
    """Raised when an import could not run at all (unreadable input, storage failure)."""


class GeocodingError(AtlasError):
    """Raised when a single geocoding lookup fails (network, timeout, bad payload)."""
