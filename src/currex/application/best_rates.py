# src/currex/application/best_rates.py
"""
Best Rates - Pick the Most Favourable Bank Quotes

"Best buy" is the quote with the highest bank buy price: the best deal for
a customer selling foreign currency to a bank. "Best sell" is the quote with
the lowest bank sell price: the best deal for a customer buying it. The UI
labels depend on this mapping, so it must stay as is.

Also provides the value ranges the charts use for their y-axis.

Files that USE this module:
- currex.application.rates_service (best rates per currency for the widget)
- tests.test_best_rates (unit tests)

Files that this module USES:
- currex.domain.models (BankQuote, BestRates, CurrencySnapshot, HistoricalSeries)
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from currex.domain.models import BankQuote, BestRates, CurrencySnapshot, HistoricalSeries

DEFAULT_DOMAIN: Tuple[float, float] = (0.0, 50.0)


def select_best(quotes: Iterable[BankQuote]) -> BestRates:
    """
    Find the best buy and best sell quotes.

    Ties keep the first quote encountered. Empty input gives (None, None).
    """
    best_buy: Optional[BankQuote] = None
    best_sell: Optional[BankQuote] = None
    for quote in quotes:
        if best_buy is None or quote.buy > best_buy.buy:
            best_buy = quote
        if best_sell is None or quote.sell < best_sell.sell:
            best_sell = quote
    return BestRates(best_buy=best_buy, best_sell=best_sell)


def rate_domain(
    values: Iterable[float],
    default: Tuple[float, float] = DEFAULT_DOMAIN,
) -> Tuple[float, float]:
    """
    Padded (min, max) range of the positive values, 1% on each side.

    Zero rates come from unparseable data and are ignored.
    """
    positive = [v for v in values if v > 0]
    if not positive:
        return default
    return min(positive) * 0.99, max(positive) * 1.01


def snapshot_domain(snapshot: CurrencySnapshot) -> Tuple[float, float]:
    """Chart range for current rates: lowest buy to highest sell."""
    if not snapshot.quotes:
        return DEFAULT_DOMAIN
    low, _ = rate_domain(q.buy for q in snapshot.quotes)
    _, high = rate_domain(q.sell for q in snapshot.quotes)
    return low, high


def series_domain(series: HistoricalSeries, banks: Optional[Iterable[str]] = None) -> Tuple[float, float]:
    """
    Chart range for a historical series, limited to the given banks.
    """
    selected = set(banks) if banks is not None else series.available_banks()
    values = []
    for point in series.points:
        for bank in selected:
            pair = point.bank_rates.get(bank)
            if pair is not None:
                values.extend((pair.buy, pair.sell))
    return rate_domain(values)
