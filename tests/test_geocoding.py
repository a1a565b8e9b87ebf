# tests/test_geocoding.py

from __future__ import annotations

import threading

import pytest
import requests

from conftest import FakeResponse, FakeSession, candidate

from ancestry_atlas.geocoding import GeocodingService
from ancestry_atlas.models import Coordinate


def test_resolve_returns_first_candidate(make_geocoder):
    session = FakeSession({
        "Sydney, Australia": [
            {"lat": "-33.8", "lon": "151.2"},
            {"lat": "0", "lon": "0"},
        ]
    })
    geocoder = make_geocoder(session=session)

    assert geocoder.resolve("Sydney, Australia") == Coordinate(-33.8, 151.2)

    call = session.calls[0]
    assert call["params"] == {"q": "Sydney, Australia", "format": "json", "limit": 1}
    assert call["headers"]["User-Agent"]
    assert call["timeout"] == 10.0


def test_query_uses_normalized_place(make_geocoder):
    session = FakeSession({"Colombo, Sri Lanka": candidate(6.9, 79.8)})
    geocoder = make_geocoder(session=session)

    assert geocoder.resolve("Colombo, Ceylon") == Coordinate(6.9, 79.8)
    assert session.queries == ["Colombo, Sri Lanka"]


@pytest.mark.parametrize("place", [None, "", "?", "  ?  "])
def test_unusable_place_makes_no_request(make_geocoder, place):
    session = FakeSession()
    geocoder = make_geocoder(session=session)

    assert geocoder.resolve(place) is None
    assert session.calls == []


def test_fallback_to_last_two_segments(make_geocoder):
    session = FakeSession({"Western Province, Sri Lanka": candidate(6.9, 80.0)})
    geocoder = make_geocoder(session=session)

    coord = geocoder.resolve("Moratuwa, Colombo, Western Prov., Ceylon")

    assert coord == Coordinate(6.9, 80.0)
    assert session.queries == [
        "Moratuwa, Colombo, Western Province, Sri Lanka",
        "Western Province, Sri Lanka",
    ]


def test_no_fallback_for_two_segment_place(make_geocoder):
    session = FakeSession()
    geocoder = make_geocoder(session=session)

    assert geocoder.resolve("Nowhere, Atlantis") is None
    assert session.queries == ["Nowhere, Atlantis"]


@pytest.mark.parametrize(
    "answer",
    [
        requests.ConnectionError("down"),
        requests.Timeout("slow"),
        FakeResponse([], status=503),
        FakeResponse(ValueError("not json")),
        [{"display_name": "no coordinates"}],
        [{"lat": "north", "lon": "1"}],
    ],
)
def test_failures_resolve_to_none_and_are_cached(make_geocoder, answer):
    session = FakeSession({"Kandy, Sri Lanka": answer})
    geocoder = make_geocoder(session=session)

    assert geocoder.resolve("Kandy, Sri Lanka") is None
    assert geocoder.resolve("Kandy, Sri Lanka") is None
    assert len(session.calls) == 1
    assert geocoder.cached("Kandy, Sri Lanka")


def test_cache_is_keyed_by_normalized_text(make_geocoder):
    session = FakeSession({"Kandy, Sri Lanka": candidate(7.3, 80.6)})
    geocoder = make_geocoder(session=session)

    geocoder.resolve("Kandy, Ceylon")
    geocoder.resolve("Kandy, Sri Lanka")
    geocoder.resolve("Kandy, Ceylon - Burial ground")

    assert len(session.calls) == 1


def test_resolve_all_is_cache_idempotent(make_geocoder):
    session = FakeSession({
        "Sydney, Australia": candidate(-33.8, 151.2),
        "Perth, Australia": candidate(-31.9, 115.9),
    })
    geocoder = make_geocoder(session=session)
    places = ["Sydney, Australia", "Perth, Australia", "Atlantis", "Sydney, Australia"]

    first = geocoder.resolve_all(places)
    calls_after_first = len(session.calls)
    second = geocoder.resolve_all(places)

    assert first == second
    assert len(session.calls) == calls_after_first == 3
    assert set(first) == {"Sydney, Australia", "Perth, Australia"}


def test_resolve_all_reports_progress(make_geocoder):
    geocoder = make_geocoder({"A": candidate(1, 1)})
    seen = []

    geocoder.resolve_all(["A", "B", None, "A", "?"], on_progress=lambda done, total: seen.append((done, total)))

    assert seen == [(1, 3), (2, 3), (3, 3)]


def test_requests_are_spaced_by_min_interval(make_geocoder, fake_clock):
    geocoder = make_geocoder()
    start = fake_clock.now

    geocoder.resolve_all(["A", "B", "C"])

    assert geocoder.lookup_count == 3
    assert fake_clock.sleeps == pytest.approx([1.1, 1.1])
    assert fake_clock.now - start == pytest.approx(2.2)


def test_no_sleep_once_interval_has_passed(make_geocoder, fake_clock):
    geocoder = make_geocoder()

    geocoder.resolve("A")
    fake_clock.now += 5
    geocoder.resolve("B")

    assert fake_clock.sleeps == []


def test_settings_come_from_config(fake_clock):
    class Settings:
        geocoding = {
            "endpoint": "https://geo.example/search",
            "user_agent": "TestAgent/0.1",
            "min_interval": 2,
            "timeout": 3,
        }

    session = FakeSession()
    geocoder = GeocodingService(session, clock=fake_clock, sleep=fake_clock.sleep, config=Settings())
    geocoder.resolve("A")
    geocoder.resolve("B")

    assert session.calls[0]["url"] == "https://geo.example/search"
    assert session.calls[0]["headers"]["User-Agent"] == "TestAgent/0.1"
    assert session.calls[0]["timeout"] == 3.0
    assert fake_clock.sleeps == [2.0]


def test_concurrent_callers_share_one_lookup(make_geocoder):
    release = threading.Event()

    class SlowSession(FakeSession):
        def get(self, url, params=None, headers=None, timeout=None):
            release.wait(timeout=5)
            return super().get(url, params=params, headers=headers, timeout=timeout)

    session = SlowSession({"Kandy, Sri Lanka": candidate(7.3, 80.6)})
    geocoder = make_geocoder(session=session)
    results = []

    threads = [
        threading.Thread(target=lambda: results.append(geocoder.resolve("Kandy, Sri Lanka")))
        for _ in range(4)
    ]
    for t in threads:
        t.start()
    release.set()
    for t in threads:
        t.join(timeout=5)

    assert results == [Coordinate(7.3, 80.6)] * 4
    assert len(session.calls) == 1


def test_close_only_closes_own_session(make_geocoder):
    session = FakeSession()
    make_geocoder(session=session).close()
    assert session.closed is False
