# src/currex/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Bank quotes and per-currency snapshots
- Historical rate series
- Best-rate selections
- The payload shared with the widget process

Files that USE this module:
- currex.adapters.providers.* (parser and clients build snapshots and series)
- currex.adapters.persistence.widget_store (serializes WidgetSnapshot)
- currex.application.* (services select best rates and publish snapshots)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import datetime  # Date/time utilities for timestamps
from typing import Dict, Iterator, Mapping, NamedTuple, Optional, Tuple

# Currencies refreshed by default, and the history periods (days) the UI's
# period picker offers for HistoricalRatesClient.fetch_historical_rates
SUPPORTED_CURRENCIES: Tuple[str, ...] = ("USD", "EUR")
SUPPORTED_PERIODS: Tuple[int, ...] = (1, 3, 7, 30, 90, 180, 360)


@dataclass(frozen=True)
class BankQuote:
    """
    One bank's buy/sell quote for one currency at one instant.

    Attributes:
        bank: Bank name as reported by the server (not a closed set)
        buy: Price the bank pays per unit of foreign currency
        sell: Price the bank charges per unit of foreign currency
        timestamp: Server timestamp (ISO-8601 string)
        currency: Currency code the quote belongs to
    """
    bank: str
    buy: float
    sell: float
    timestamp: str
    currency: str = ""

    @property
    def spread(self) -> float:
        """Bank margin, sell - buy. Negative for malformed data."""
        return self.sell - self.buy


@dataclass(frozen=True)
class CurrencySnapshot:
    """Ordered quotes for one currency from a single fetch, one per bank."""
    currency: str
    quotes: Tuple[BankQuote, ...] = ()
    timestamp: str = ""

    @classmethod
    def from_quotes(cls, currency: str, quotes, timestamp: str = "") -> CurrencySnapshot:
        """
        Build a snapshot keeping at most one quote per bank.

        A later quote for the same bank replaces the earlier one but keeps
        the bank's original position.
        """
        by_bank: Dict[str, BankQuote] = {}
        for quote in quotes:
            by_bank[quote.bank] = quote
        return cls(currency=currency, quotes=tuple(by_bank.values()), timestamp=timestamp)

    @property
    def banks(self) -> Tuple[str, ...]:
        return tuple(q.bank for q in self.quotes)

    def get(self, bank: str) -> Optional[BankQuote]:
        for quote in self.quotes:
            if quote.bank == bank:
                return quote
        return None

    def __iter__(self) -> Iterator[BankQuote]:
        return iter(self.quotes)

    def __len__(self) -> int:
        return len(self.quotes)


class RatePair(NamedTuple):
    """Buy/sell pair of one bank at one historical instant."""
    buy: float
    sell: float


@dataclass(frozen=True)
class HistoricalRatePoint:
    """Rates of every bank that reported at one instant."""
    timestamp: datetime
    bank_rates: Mapping[str, RatePair]

    def buy_rate(self, bank: str) -> float:
        pair = self.bank_rates.get(bank)
        return pair.buy if pair else 0.0

    def sell_rate(self, bank: str) -> float:
        pair = self.bank_rates.get(bank)
        return pair.sell if pair else 0.0


@dataclass(frozen=True)
class HistoricalSeries:
    """
    Time series of bank rates for one currency over a period.

    Points are sorted ascending by timestamp and none of them is empty.
    """
    currency: str
    period_days: int
    points: Tuple[HistoricalRatePoint, ...] = ()

    def available_banks(self) -> set:
        """Banks that appear in at least one point."""
        banks = set()
        for point in self.points:
            banks.update(point.bank_rates.keys())
        return banks

    def date_range(self) -> Optional[Tuple[datetime, datetime]]:
        if not self.points:
            return None
        return self.points[0].timestamp, self.points[-1].timestamp

    def __iter__(self) -> Iterator[HistoricalRatePoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)


class BestRates(NamedTuple):
    """
    Best quotes for one currency.

    best_buy is the highest bank buy price (best for a customer selling
    foreign currency); best_sell is the lowest bank sell price (best for a
    customer buying it).
    """
    best_buy: Optional[BankQuote]
    best_sell: Optional[BankQuote]


@dataclass(frozen=True)
class WidgetSnapshot:
    """
    Payload handed from the main process to the widget process.

    Attributes:
        best_buy_rates: currency -> quote with the highest buy rate
        best_sell_rates: currency -> quote with the lowest sell rate
        all_rates: currency -> every quote of the last fetch (may be empty)
        last_updated: When the main process produced this payload
    """
    best_buy_rates: Mapping[str, BankQuote]
    best_sell_rates: Mapping[str, BankQuote]
    last_updated: datetime
    all_rates: Mapping[str, Tuple[BankQuote, ...]] = field(default_factory=dict)


@dataclass(frozen=True)
class WidgetSettings:
    """Which currency the widget should display."""
    selected_currency: str = "USD"
