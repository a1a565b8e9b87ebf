import sys
from pathlib import Path

import pytest
import requests

# Ensure the project src directory is on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


# ---------------------------------------------------------------------------
# Fake HTTP + clock for the geocoding service
# ---------------------------------------------------------------------------

class FakeResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """
    Answers search requests from a dict keyed by query text.

    Values may be a candidate list, a FakeResponse, or an exception to raise.
    Unknown queries return an empty candidate list.
    """

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        answer = self.answers.get(params["q"], [])
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, FakeResponse):
            return answer
        return FakeResponse(answer)

    @property
    def queries(self):
        return [call["params"]["q"] for call in self.calls]

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def candidate(lat, lon):
    return [{"lat": str(lat), "lon": str(lon), "display_name": "somewhere"}]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_geocoder(fake_clock):
    from ancestry_atlas.geocoding.service import GeocodingService

    def _make(answers=None, **kwargs):
        session = kwargs.pop("session", None) or FakeSession(answers)
        return GeocodingService(
            session,
            clock=fake_clock,
            sleep=fake_clock.sleep,
            **kwargs,
        )

    return _make
