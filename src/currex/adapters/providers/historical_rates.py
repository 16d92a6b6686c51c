# src/currex/adapters/providers/historical_rates.py
"""
Historical Rates Client - Bank Rate Time Series

This module fetches the rates of every bank for one currency over the last
N days from GET /api/exchange_rates_period. Results are cached per
(currency, period) pair for thirty minutes (configurable).

Files that USE this module:
- currex.application.rates_service (RatesService.get_historical_rates)
- currex.app (composition root)
- tests.test_historical_rates (unit tests)

Files that this module USES:
- currex.adapters.providers.base (BaseRatesClient HTTP plumbing)
- currex.adapters.providers.parser (RateParser.parse_historical)
- currex.shared.cache (RateCache)
- currex.shared.validators (period validation)
"""
import logging
from typing import Optional

from currex.adapters.providers.base import BaseRatesClient
from currex.adapters.providers.parser import RateParser
from currex.config import settings
from currex.domain.errors import InvalidRequestError
from currex.domain.models import HistoricalSeries
from currex.shared.cache import RateCache
from currex.shared.validators import validate_period_days

log = logging.getLogger(__name__)


def cache_key(currency: str, period_days: int) -> str:
    return f"{currency}_{period_days}"


class HistoricalRatesClient(BaseRatesClient):
    """Client for historical exchange rates."""

    name = "historical"
    ENDPOINT = "/api/exchange_rates_period"

    def __init__(
        self,
        base_url: Optional[str] = None,
        credentials: Optional[str] = None,
        timeout: Optional[int] = None,
        cache: Optional[RateCache] = None,
        parser: Optional[RateParser] = None,
        stats=None,
    ):
        super().__init__(base_url=base_url, credentials=credentials, timeout=timeout, stats=stats)
        self.cache = cache if cache is not None else RateCache(settings.historical_cache_seconds)
        self.parser = parser or RateParser(banks=settings.banks, stats=stats)

    async def fetch_historical_rates(self, currency: str, period_days: int) -> HistoricalSeries:
        """
        Get the rate series of a currency over the last period_days days.

        Args:
            currency: Currency code (e.g. 'USD')
            period_days: Number of days to look back (positive); the UI
                offers the periods in currex.domain.models.SUPPORTED_PERIODS,
                but any positive day count is accepted

        Returns:
            HistoricalSeries sorted by instant; points without a parseable
            timestamp or without any bank rate are left out

        Raises:
            InvalidRequestError: If currency or period_days is invalid
            RatesClientError subclasses for fetch failures
        """
        currency = (currency or "").strip().upper()
        if not currency:
            raise self._fail(InvalidRequestError("Currency code is required"))
        if not validate_period_days(period_days):
            raise self._fail(InvalidRequestError(f"Invalid period: {period_days!r}"))

        key = cache_key(currency, period_days)
        cached = self._cached(self.cache, key)
        if cached is not None:
            return cached

        data = await self._get_json(self.ENDPOINT, {"currency": currency, "period": period_days})
        try:
            series = self.parser.parse_historical(data)
        except (ValueError, TypeError) as e:
            raise self._decode_failed(e) from e

        log.debug("Historical %s: %d points over %d days", currency, len(series), period_days)
        self._store(self.cache, key, series)
        return series
