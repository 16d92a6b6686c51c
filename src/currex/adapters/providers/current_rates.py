# src/currex/adapters/providers/current_rates.py
"""
Current Rates Client - Latest Bank Quotes per Currency

This module fetches the current buy/sell quotes of every bank for one
currency from GET /api/exchange_rates. Results are cached per currency for
five minutes (configurable).

Files that USE this module:
- currex.application.rates_service (RatesService fetches and publishes snapshots)
- currex.app (composition root)
- tests.test_current_rates (unit tests)

Files that this module USES:
- currex.adapters.providers.base (BaseRatesClient HTTP plumbing)
- currex.adapters.providers.parser (RateParser)
- currex.shared.cache (RateCache)
- currex.config (default cache TTL)
"""
import logging
from typing import Optional

from currex.adapters.providers.base import BaseRatesClient
from currex.adapters.providers.parser import RateParser
from currex.config import settings
from currex.domain.errors import InvalidRequestError
from currex.domain.models import CurrencySnapshot
from currex.shared.cache import RateCache

log = logging.getLogger(__name__)


class CurrentRatesClient(BaseRatesClient):
    """
    Client for current exchange rates.

    The API returns one array per bank and a response-level timestamp:
    {"PrivatBank": [{"rate_buy": "41.25", "rate_sell": "41.80", ...}], ...,
     "timestamp": "2025-03-05T12:00:00.000Z"}
    """

    name = "current"
    ENDPOINT = "/api/exchange_rates"

    def __init__(
        self,
        base_url: Optional[str] = None,
        credentials: Optional[str] = None,
        timeout: Optional[int] = None,
        cache: Optional[RateCache] = None,
        parser: Optional[RateParser] = None,
        stats=None,
    ):
        """
        Initialize current rates client.

        Args:
            base_url: Optional API root (defaults to settings)
            credentials: Optional 'user:pass' (defaults to settings)
            timeout: Optional HTTP timeout in seconds
            cache: Shared RateCache; a private one with the configured TTL
                is created when omitted
            parser: RateParser (defaults to one using settings.banks)
            stats: Optional StatsTracker

        Raises:
            ConfigurationError: If the base URL or credentials are missing
        """
        super().__init__(base_url=base_url, credentials=credentials, timeout=timeout, stats=stats)
        self.cache = cache if cache is not None else RateCache(settings.current_cache_seconds)
        self.parser = parser or RateParser(banks=settings.banks, stats=stats)

    async def fetch_current_rates(self, currency: str) -> CurrencySnapshot:
        """
        Get current quotes for a currency, from cache when fresh.

        Args:
            currency: Currency code (e.g. 'USD', 'EUR')

        Returns:
            CurrencySnapshot with one quote per reporting bank

        Raises:
            RatesClientError subclasses (see currex.domain.errors)
        """
        currency = (currency or "").strip().upper()
        if not currency:
            raise self._fail(InvalidRequestError("Currency code is required"))

        cached = self._cached(self.cache, currency)
        if cached is not None:
            return cached

        data = await self._get_json(self.ENDPOINT, {"currency": currency})
        try:
            snapshot = self.parser.parse_current(data, currency=currency)
        except (ValueError, TypeError) as e:
            raise self._decode_failed(e) from e

        if not snapshot.quotes:
            log.warning("Rates API returned no bank quotes for %s", currency)
        self._store(self.cache, currency, snapshot)
        return snapshot
