# src/currex/application/rates_service.py
"""
Rates Service - Business Logic for Exchange Rate Operations

This module is the entry point the UI layer calls. It fetches current and
historical rates through the clients, computes best rates, and after a full
multi-currency refresh publishes a WidgetSnapshot for the widget process.

Files that USE this module:
- currex.app (composition root builds and runs the service)
- tests.test_rates_service (unit tests)

Files that this module USES:
- currex.adapters.providers.current_rates (CurrentRatesClient)
- currex.adapters.providers.historical_rates (HistoricalRatesClient)
- currex.adapters.persistence.widget_store (WidgetRateStore)
- currex.application.best_rates (select_best)
- currex.domain.models (snapshots and series)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Sequence

from currex.adapters.persistence.widget_store import WidgetRateStore
from currex.adapters.providers.current_rates import CurrentRatesClient
from currex.adapters.providers.historical_rates import HistoricalRatesClient
from currex.application.best_rates import select_best
from currex.domain.models import (
    SUPPORTED_CURRENCIES,
    BankQuote,
    BestRates,
    CurrencySnapshot,
    HistoricalSeries,
    WidgetSnapshot,
)

log = logging.getLogger(__name__)


class RatesService:
    """
    High-level service for fetching rates and feeding the widget.
    """

    def __init__(
        self,
        current_client: CurrentRatesClient,
        historical_client: Optional[HistoricalRatesClient] = None,
        widget_store: Optional[WidgetRateStore] = None,
        currencies: Sequence[str] = SUPPORTED_CURRENCIES,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize rates service.

        Args:
            current_client: Client for current rates
            historical_client: Client for historical rates (optional)
            widget_store: Where refresh_all publishes snapshots (optional)
            currencies: Currencies covered by refresh_all
            now: Clock for the snapshot's last_updated
        """
        self.current_client = current_client
        self.historical_client = historical_client
        self.widget_store = widget_store
        self.currencies = tuple(currencies)
        self._now = now

    async def get_current_rates(self, currency: str) -> CurrencySnapshot:
        return await self.current_client.fetch_current_rates(currency)

    async def get_historical_rates(self, currency: str, period_days: int) -> HistoricalSeries:
        if self.historical_client is None:
            raise RuntimeError("Historical rates client not configured")
        return await self.historical_client.fetch_historical_rates(currency, period_days)

    async def best_rates(self, currency: str) -> BestRates:
        snapshot = await self.get_current_rates(currency)
        return select_best(snapshot.quotes)

    async def refresh_all(self, currencies: Optional[Sequence[str]] = None) -> WidgetSnapshot:
        """
        Fetch every currency concurrently and publish the result.

        All fetches run at once; if any of them fails the error propagates
        and nothing is written, so the widget never sees a partial refresh.

        Args:
            currencies: Currencies to refresh (defaults to self.currencies)

        Returns:
            The WidgetSnapshot that was built (and written, when a store is set)
        """
        codes = tuple(currencies) if currencies is not None else self.currencies
        snapshots = await asyncio.gather(
            *(self.current_client.fetch_current_rates(code) for code in codes)
        )

        best_buy: Dict[str, BankQuote] = {}
        best_sell: Dict[str, BankQuote] = {}
        all_rates: Dict[str, tuple] = {}
        for code, snapshot in zip(codes, snapshots):
            best = select_best(snapshot.quotes)
            if best.best_buy is not None:
                best_buy[snapshot.currency or code] = best.best_buy
            if best.best_sell is not None:
                best_sell[snapshot.currency or code] = best.best_sell
            all_rates[snapshot.currency or code] = snapshot.quotes

        widget_snapshot = WidgetSnapshot(
            best_buy_rates=best_buy,
            best_sell_rates=best_sell,
            all_rates=all_rates,
            last_updated=self._now(),
        )

        if self.widget_store is not None:
            self.widget_store.write(widget_snapshot)
        log.info("Refreshed %d currencies: %s", len(codes), ", ".join(codes))
        return widget_snapshot
