# src/currex/adapters/providers/parser.py
"""
Rate Parser - Normalize Rates API Payloads

This module converts raw JSON payloads into domain objects. Rate strings are
parsed as floats and rounded to 3 decimals (half away from zero). A value
that cannot be parsed becomes 0.0 instead of failing the whole response;
every such substitution is logged and counted.

Files that USE this module:
- currex.adapters.providers.current_rates (parse_current)
- currex.adapters.providers.historical_rates (parse_historical)
- tests.test_parser (unit tests)

Files that this module USES:
- currex.adapters.providers.schemas (payload validation)
- currex.domain.models (CurrencySnapshot, HistoricalSeries and friends)
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP  # Precise decimal rounding, half away from zero
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from currex.adapters.providers.schemas import (
    CurrentRatesPayload,
    HistoricalRatesPayload,
    RateRecord,
)
from currex.domain.models import (
    BankQuote,
    CurrencySnapshot,
    HistoricalRatePoint,
    HistoricalSeries,
    RatePair,
)

log = logging.getLogger(__name__)

_SCALE = 1000

# Internet date-time with mandatory fractional seconds and zone designator
_ISO_FRACTIONAL = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.(\d+)(Z|[+-]\d{2}:\d{2})$"
)


def round3(value: float) -> float:
    """
    Round to 3 decimal places, half away from zero.

    The value is scaled by 1000, rounded to the nearest integer and scaled
    back. The tie check runs on the exact binary value of the scaled float,
    so "32.0055" (stored just below the tie) becomes 32.005.
    Non-finite values are returned unchanged.
    """
    scaled_value = value * _SCALE
    if not math.isfinite(scaled_value):
        return value
    scaled = Decimal(scaled_value).to_integral_value(rounding=ROUND_HALF_UP)
    return float(scaled) / _SCALE


def parse_rate(raw: Any) -> Optional[float]:
    """
    Parse a rate string into a float.

    Returns:
        The parsed value, or None when it is not a finite number
    """
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp that must include fractional seconds.

    Accepts 'Z' or a '+HH:MM' offset. Fractions longer than microseconds are
    truncated.

    Returns:
        UTC-aware datetime, or None if the string does not match
    """
    match = _ISO_FRACTIONAL.match(value or "")
    if not match:
        return None
    base, fraction, zone = match.groups()
    fraction = (fraction + "000000")[:6]
    if zone == "Z":
        zone = "+00:00"
    try:
        parsed = datetime.fromisoformat(f"{base}.{fraction}{zone}")
    except ValueError:
        return None
    return parsed.astimezone(timezone.utc)


class RateParser:
    """
    Converts validated payloads into CurrencySnapshot / HistoricalSeries.

    Banks are plain strings. With ``banks`` set, only those banks are read
    and in that order; otherwise banks are discovered from each payload.
    """

    def __init__(self, banks: Optional[Sequence[str]] = None, stats=None):
        """
        Args:
            banks: Optional fixed bank order
            stats: Optional StatsTracker receiving parse fallbacks
        """
        self.banks = list(banks) if banks is not None else None
        self.stats = stats

    def _rate(self, raw: str, bank: str, field: str) -> float:
        value = parse_rate(raw)
        if value is None:
            log.warning("Unparseable %s for %s: %r, using 0.0", field, bank, raw)
            if self.stats is not None:
                self.stats.record_parse_fallback(bank, field)
            return 0.0
        return round3(value)

    def _pair(self, record: RateRecord, bank: str) -> RatePair:
        return RatePair(
            buy=self._rate(record.rate_buy, bank, "rate_buy"),
            sell=self._rate(record.rate_sell, bank, "rate_sell"),
        )

    def parse_current(
        self,
        payload: Union[Mapping[str, Any], CurrentRatesPayload],
        currency: Optional[str] = None,
    ) -> CurrencySnapshot:
        """
        Normalize a current-rates payload.

        Args:
            payload: Decoded JSON body (or an already validated payload)
            currency: Currency requested; defaults to each record's currency

        Returns:
            CurrencySnapshot with the first record of every present bank

        Raises:
            pydantic.ValidationError: If the payload shape is wrong
        """
        if not isinstance(payload, CurrentRatesPayload):
            payload = CurrentRatesPayload.model_validate(payload)

        quotes = []
        for bank, records in payload.bank_records(self.banks).items():
            if not records:
                continue
            record = records[0]
            pair = self._pair(record, bank)
            quotes.append(BankQuote(
                bank=bank,
                buy=pair.buy,
                sell=pair.sell,
                timestamp=payload.timestamp,
                currency=currency or record.currency,
            ))

        snapshot_currency = currency or (quotes[0].currency if quotes else "")
        return CurrencySnapshot.from_quotes(snapshot_currency, quotes, timestamp=payload.timestamp)

    def parse_historical(
        self,
        payload: Union[Mapping[str, Any], HistoricalRatesPayload],
    ) -> HistoricalSeries:
        """
        Normalize a historical-rates payload.

        Instants with an unparseable timestamp or without any bank rate are
        dropped. The result is sorted ascending by instant.

        Raises:
            pydantic.ValidationError: If the payload shape is wrong
        """
        if not isinstance(payload, HistoricalRatesPayload):
            payload = HistoricalRatesPayload.model_validate(payload)

        points = []
        dropped = 0
        for item in payload.data:
            instant = parse_timestamp(item.timestamp)
            if instant is None:
                dropped += 1
                continue

            names = self.banks if self.banks is not None else list(item.rates.keys())
            bank_rates: Dict[str, RatePair] = {}
            for bank in names:
                records = item.rates.get(bank)
                if records:
                    bank_rates[bank] = self._pair(records[0], bank)

            if bank_rates:
                points.append(HistoricalRatePoint(timestamp=instant, bank_rates=bank_rates))

        if dropped:
            log.debug("Dropped %d historical points with unparseable timestamps", dropped)

        points.sort(key=lambda p: p.timestamp)
        return HistoricalSeries(
            currency=payload.currency,
            period_days=payload.period_days,
            points=tuple(points),
        )
