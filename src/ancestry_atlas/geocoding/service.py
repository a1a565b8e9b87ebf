"""
service.py

Place string -> Coordinate, through a Nominatim-style search endpoint.

One ``GeocodingService`` instance owns:
- the cache (normalized place -> Coordinate or None), kept for the life of
  the instance; failures are cached too and never retried,
- the rate gate: the earliest instant the next outbound request may start.
  Requests are spaced by at least ``min_interval`` seconds, as the public
  endpoint's usage policy forbids bursts.

Production code keeps one long-lived instance; tests build a fresh one with a
fake session and clock.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional

import requests

from ancestry_atlas.config import get_config
from ancestry_atlas.core.exceptions import GeocodingError
from ancestry_atlas.logging import get_logger
from ancestry_atlas.models import Coordinate
from ancestry_atlas.places.normalizer import fallback_query, normalize_place

log = get_logger(__name__)

DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "AncestryAtlas/1.0 (educational genealogy project)"
DEFAULT_MIN_INTERVAL = 1.1
DEFAULT_TIMEOUT = 10.0

ProgressCallback = Callable[[int, int], None]


class GeocodingService:
    def __init__(
        self,
        session: Optional[Any] = None,
        *,
        endpoint: Optional[str] = None,
        user_agent: Optional[str] = None,
        min_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        config=None,
    ):
        settings = (config if config is not None else get_config()).geocoding or {}

        self.endpoint = endpoint or settings.get("endpoint", DEFAULT_ENDPOINT)
        self.user_agent = user_agent or settings.get("user_agent", DEFAULT_USER_AGENT)
        self.min_interval = float(
            min_interval if min_interval is not None
            else settings.get("min_interval", DEFAULT_MIN_INTERVAL)
        )
        self.timeout = float(
            timeout if timeout is not None else settings.get("timeout", DEFAULT_TIMEOUT)
        )

        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._clock = clock
        self._sleep = sleep

        self._cache: Dict[str, Optional[Coordinate]] = {}
        self._cache_lock = threading.Lock()
        self._key_locks: Dict[str, threading.Lock] = {}

        self._gate_lock = threading.Lock()
        self._next_request_at = 0.0
        self.lookup_count = 0

    # ---------------------------------------------------------
    # Rate gate
    # ---------------------------------------------------------
    def _wait_for_gate(self) -> None:
        """Block until the spacing gate opens, then claim the next slot."""
        with self._gate_lock:
            delay = self._next_request_at - self._clock()
            if delay > 0:
                self._sleep(delay)
            self._next_request_at = self._clock() + self.min_interval
            self.lookup_count += 1

    # ---------------------------------------------------------
    # Outbound lookup
    # ---------------------------------------------------------
    def _lookup(self, query: str) -> Optional[Coordinate]:
        """
        Issue one search request. Returns the first candidate or None.

        Raises GeocodingError on transport failures, HTTP errors and
        payloads that do not carry numeric lat/lon fields.
        """
        self._wait_for_gate()
        log.debug("Geocoding lookup: %r", query)

        try:
            response = self.session.get(
                self.endpoint,
                params={"q": query, "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            candidates = response.json()
        except requests.RequestException as exc:
            raise GeocodingError(f"request failed: {exc}") from exc
        except ValueError as exc:
            raise GeocodingError(f"malformed response: {exc}") from exc

        if not isinstance(candidates, list) or not candidates:
            return None

        first = candidates[0]
        try:
            return Coordinate(lat=float(first["lat"]), lon=float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingError(f"candidate without coordinates: {first!r}") from exc

    def _resolve_uncached(self, normalized: str) -> Optional[Coordinate]:
        try:
            coord = self._lookup(normalized)
            if coord is None:
                simplified = fallback_query(normalized)
                if simplified:
                    log.debug("No match for %r, retrying as %r", normalized, simplified)
                    coord = self._lookup(simplified)
        except GeocodingError as exc:
            log.warning("Geocoding failed for %r: %s", normalized, exc)
            return None

        if coord is None:
            log.info("No geocoding result for %r", normalized)
        return coord

    # ---------------------------------------------------------
    # Public API
    # ---------------------------------------------------------
    def resolve(self, place: Optional[str]) -> Optional[Coordinate]:
        """
        Resolve one place string. Returns None when the place is unusable,
        unknown to the service, or the lookup failed.
        """
        normalized = normalize_place(place)
        if normalized is None:
            return None

        with self._cache_lock:
            if normalized in self._cache:
                return self._cache[normalized]
            key_lock = self._key_locks.setdefault(normalized, threading.Lock())

        with key_lock:
            # Another caller may have finished this key while we waited.
            with self._cache_lock:
                if normalized in self._cache:
                    return self._cache[normalized]

            coord = self._resolve_uncached(normalized)

            with self._cache_lock:
                self._cache[normalized] = coord
                self._key_locks.pop(normalized, None)

        return coord

    def resolve_all(
        self,
        places: Iterable[Optional[str]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> Dict[str, Coordinate]:
        """
        Resolve each distinct place once, sequentially.

        Returns a mapping from the place strings as given to their
        coordinates; places that did not resolve are absent. ``on_progress``
        receives ``(completed, total_unique)`` after every place.
        """
        unique = list(dict.fromkeys(p for p in places if p))
        total = len(unique)
        results: Dict[str, Coordinate] = {}

        for completed, place in enumerate(unique, start=1):
            coord = self.resolve(place)
            if coord is not None:
                results[place] = coord
            if on_progress is not None:
                on_progress(completed, total)

        log.info("Geocoded %d of %d distinct place(s)", len(results), total)
        return results

    def cached(self, place: str) -> bool:
        """True when the normalized form of ``place`` already has a cached outcome."""
        normalized = normalize_place(place)
        with self._cache_lock:
            return normalized in self._cache

    def close(self) -> None:
        if self._owns_session:
            self.session.close()
