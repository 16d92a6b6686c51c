# tests/test_current_rates.py
"""
Current Rates Client Tests

Tests caching, authentication, request construction and the mapping of
every failure onto the domain error taxonomy. HTTP is mocked at
``requests.get``; async calls are driven with asyncio.run.
"""
import asyncio

import pytest  # Testing framework for writing and running tests
import requests  # HTTP library (used for mocking exceptions)

from unittest.mock import patch  # Patching requests.get for testing without real API calls

from currex.adapters.providers.current_rates import CurrentRatesClient
from currex.application.best_rates import select_best
from currex.application.stats import StatsTracker
from currex.domain.errors import (
    ConfigurationError,
    DecodeError,
    InvalidRequestError,
    InvalidResponseError,
    RatesClientError,
    TransportError,
)
from currex.shared.cache import RateCache

BASE_URL = "https://rates.example.com"
GET = "currex.adapters.providers.base.requests.get"


def make_client(clock=None, **kwargs):
    cache = RateCache(300, clock=clock) if clock else RateCache(300)
    return CurrentRatesClient(base_url=BASE_URL, credentials="user:pass", timeout=15, cache=cache, **kwargs)


class TestCurrentRatesClientInit:
    def test_missing_base_url(self):
        with patch("currex.adapters.providers.base.settings") as mock_settings:
            mock_settings.api_base_url = ""
            mock_settings.basic_credentials = "user:pass"
            with pytest.raises(ConfigurationError):
                CurrentRatesClient()

    def test_missing_credentials(self):
        with patch("currex.adapters.providers.base.settings") as mock_settings:
            mock_settings.api_base_url = BASE_URL
            mock_settings.basic_credentials = ""
            with pytest.raises(ConfigurationError) as exc_info:
                CurrentRatesClient()
            assert exc_info.value.code == "configuration"

    def test_trailing_slash_dropped(self):
        client = CurrentRatesClient(base_url=BASE_URL + "/", credentials="user:pass")
        assert client.base_url == BASE_URL


class TestFetchCurrentRates:
    @patch(GET)
    def test_end_to_end_with_cache(self, mock_get, usd_payload, make_response, clock):
        mock_get.return_value = make_response(usd_payload)
        client = make_client(clock=clock)

        snapshot = asyncio.run(client.fetch_current_rates("USD"))
        assert len(snapshot) == 3

        best = select_best(snapshot.quotes)
        assert best.best_buy.bank == "Beta"
        assert best.best_buy.buy == 38.70
        assert best.best_sell.bank == "Gamma"
        assert best.best_sell.sell == 38.90

        clock.advance(299)
        again = asyncio.run(client.fetch_current_rates("USD"))
        assert again is snapshot
        assert mock_get.call_count == 1

    @patch(GET)
    def test_refetch_after_ttl(self, mock_get, usd_payload, make_response, clock):
        mock_get.return_value = make_response(usd_payload)
        client = make_client(clock=clock)

        asyncio.run(client.fetch_current_rates("USD"))
        clock.advance(300)
        asyncio.run(client.fetch_current_rates("USD"))
        assert mock_get.call_count == 2

    @patch(GET)
    def test_request_construction(self, mock_get, usd_payload, make_response):
        mock_get.return_value = make_response(usd_payload)
        client = make_client()

        asyncio.run(client.fetch_current_rates("usd"))

        args, kwargs = mock_get.call_args
        assert args[0] == "https://rates.example.com/api/exchange_rates"
        assert kwargs["params"] == {"currency": "USD"}
        assert kwargs["headers"]["Authorization"] == "Basic dXNlcjpwYXNz"
        assert kwargs["headers"]["Cache-Control"] == "no-cache"
        assert kwargs["timeout"] == 15

    @patch(GET)
    def test_currencies_cached_separately(self, mock_get, usd_payload, make_response):
        mock_get.return_value = make_response(usd_payload)
        client = make_client()

        asyncio.run(client.fetch_current_rates("USD"))
        asyncio.run(client.fetch_current_rates("EUR"))
        asyncio.run(client.fetch_current_rates("USD"))
        assert mock_get.call_count == 2

    @patch(GET)
    def test_bad_status(self, mock_get, make_response):
        mock_get.return_value = make_response({}, status_code=503)
        client = make_client()

        with pytest.raises(InvalidResponseError) as exc_info:
            asyncio.run(client.fetch_current_rates("USD"))
        assert exc_info.value.status_code == 503

    @patch(GET)
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")
        client = make_client()

        with pytest.raises(TransportError, match="timeout after 15s"):
            asyncio.run(client.fetch_current_rates("USD"))

    @patch(GET)
    def test_connection_error_wrapped(self, mock_get):
        cause = requests.exceptions.ConnectionError("reset")
        mock_get.side_effect = cause
        client = make_client()

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(client.fetch_current_rates("USD"))
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    @patch(GET)
    def test_invalid_json(self, mock_get, make_response):
        mock_get.return_value = make_response(json_error=ValueError("Expecting value"))
        client = make_client()

        with pytest.raises(DecodeError):
            asyncio.run(client.fetch_current_rates("USD"))

    @patch(GET)
    def test_wrong_shape(self, mock_get, make_response):
        mock_get.return_value = make_response(["not", "an", "object"])
        client = make_client()

        with pytest.raises(DecodeError) as exc_info:
            asyncio.run(client.fetch_current_rates("USD"))
        assert exc_info.value.cause is not None

    @patch(GET)
    def test_failures_not_cached(self, mock_get, usd_payload, make_response):
        mock_get.side_effect = [make_response({}, status_code=500), make_response(usd_payload)]
        client = make_client()

        with pytest.raises(RatesClientError):
            asyncio.run(client.fetch_current_rates("USD"))
        snapshot = asyncio.run(client.fetch_current_rates("USD"))
        assert len(snapshot) == 3

    @patch(GET)
    def test_malformed_base_url(self, mock_get):
        client = CurrentRatesClient(base_url="rates.example.com", credentials="user:pass")

        with pytest.raises(InvalidRequestError):
            asyncio.run(client.fetch_current_rates("USD"))
        mock_get.assert_not_called()

    def test_empty_currency(self):
        client = make_client()
        with pytest.raises(InvalidRequestError):
            asyncio.run(client.fetch_current_rates(""))

    @patch(GET)
    def test_stats_recorded(self, mock_get, usd_payload, make_response):
        mock_get.side_effect = [make_response(usd_payload), make_response({}, status_code=404)]
        stats = StatsTracker()
        client = make_client(stats=stats)

        asyncio.run(client.fetch_current_rates("USD"))
        asyncio.run(client.fetch_current_rates("USD"))
        with pytest.raises(InvalidResponseError):
            asyncio.run(client.fetch_current_rates("EUR"))

        summary = stats.summary()
        assert summary["fetches"] == 2
        assert summary["cache_hits"] == 1
        assert summary["cache_misses"] == 2
        assert summary["errors"] == {"invalid_response": 1}

    @patch(GET)
    def test_concurrent_fetches(self, mock_get, usd_payload, make_response):
        mock_get.return_value = make_response(usd_payload)
        client = make_client()

        async def fetch_both():
            return await asyncio.gather(
                client.fetch_current_rates("USD"),
                client.fetch_current_rates("EUR"),
            )

        usd, eur = asyncio.run(fetch_both())
        assert usd.currency == "USD"
        assert eur.currency == "EUR"
        assert len(client.cache) == 2

