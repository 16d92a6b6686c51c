# tests/conftest.py
"""
Shared Test Fixtures

Sample API payloads, a controllable clock and a factory for mocked HTTP
responses used across the test modules.
"""
import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock  # Mock objects for HTTP responses


class FakeClock:
    """Monotonic clock the tests can move forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def record(buy, sell, currency="USD"):
    return {"base_currency": "UAH", "currency": currency, "rate_buy": buy, "rate_sell": sell}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def usd_payload():
    return {
        "Alpha": [record("38.50", "39.20")],
        "Beta": [record("38.70", "39.10")],
        "Gamma": [record("38.30", "38.90")],
        "timestamp": "2025-03-05T12:00:00.000Z",
    }


@pytest.fixture
def historical_payload():
    return {
        "currency": "USD",
        "period_days": 7,
        "data": [
            {
                "timestamp": "2025-03-03T12:00:00.000Z",
                "rates": {"Alpha": [record("38.6", "39.3")], "Beta": [record("38.8", "39.2")]},
            },
            {
                "timestamp": "2025-03-01T12:00:00.000Z",
                "rates": {"Alpha": [record("38.4", "39.1")], "Beta": None},
            },
            {
                # no fractional seconds: rejected by the strict parser
                "timestamp": "2025-03-02T12:00:00Z",
                "rates": {"Alpha": [record("38.5", "39.2")]},
            },
            {
                "timestamp": "2025-03-02T18:00:00.500Z",
                "rates": {"Alpha": [], "Beta": None},
            },
            {
                "timestamp": "2025-03-02T06:00:00.250Z",
                "rates": {"Beta": [record("38.7", "39.0")]},
            },
        ],
    }


@pytest.fixture
def make_response():
    def _make(payload=None, status_code=200, json_error=None):
        resp = Mock()
        resp.status_code = status_code
        if json_error is not None:
            resp.json.side_effect = json_error
        else:
            resp.json.return_value = payload
        return resp
    return _make
