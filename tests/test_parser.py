# tests/test_parser.py
"""
Parser Tests - Unit Tests for Rate Normalization

Tests rounding, tolerant number parsing, strict timestamp parsing and the
normalization of current and historical payloads.
"""
from datetime import datetime, timezone

import pytest  # Testing framework for writing and running tests
from pydantic import ValidationError

from currex.adapters.providers.parser import RateParser, parse_rate, parse_timestamp, round3
from currex.application.stats import StatsTracker
from currex.domain.models import RatePair

from tests.conftest import record


class TestRound3:
    @pytest.mark.parametrize("value", [0.0, 1.0, 38.5, 38.12345, -2.0015, 41.9999, 1e-9, 123456.7891])
    def test_idempotent(self, value):
        assert round3(round3(value)) == round3(value)

    def test_half_away_from_zero(self):
        # exact binary ties: 1062.5 and 38062.5 after scaling
        assert round3(1.0625) == 1.063
        assert round3(-1.0625) == -1.063
        assert round3(38.0625) == 38.063
        assert round3(38.0004) == 38.0

    def test_scaled_binary_value_decides_ties(self):
        # 32.0055 * 1000 lands just below 32005.5
        assert round3(parse_rate("32.0055")) == 32.005

    def test_large_values_rounded(self):
        assert round3(123456789012.3456) == 123456789012.346

    def test_non_finite_unchanged(self):
        assert round3(float("inf")) == float("inf")


class TestParseRate:
    def test_numeric_strings(self):
        assert parse_rate("38.50") == 38.5
        assert parse_rate(" 41 ") == 41.0

    def test_garbage_is_none(self):
        assert parse_rate("n/a") is None
        assert parse_rate("") is None
        assert parse_rate("nan") is None
        assert parse_rate("inf") is None


class TestParseTimestamp:
    def test_fractional_utc(self):
        ts = parse_timestamp("2025-03-05T12:00:00.123Z")
        assert ts == datetime(2025, 3, 5, 12, 0, 0, 123000, tzinfo=timezone.utc)

    def test_offset_converted_to_utc(self):
        ts = parse_timestamp("2025-03-05T14:00:00.5+02:00")
        assert ts == datetime(2025, 3, 5, 12, 0, 0, 500000, tzinfo=timezone.utc)

    def test_long_fraction_truncated(self):
        ts = parse_timestamp("2025-03-05T12:00:00.123456789Z")
        assert ts.microsecond == 123456

    @pytest.mark.parametrize("value", [
        "2025-03-05T12:00:00Z",  # no fraction
        "2025-03-05T12:00:00.000",  # no zone
        "2025-03-05 12:00:00.000Z",
        "2025-13-05T12:00:00.000Z",
        "",
    ])
    def test_rejected(self, value):
        assert parse_timestamp(value) is None


class TestParseCurrent:
    def test_parses_all_banks_in_order(self, usd_payload):
        snapshot = RateParser().parse_current(usd_payload, currency="USD")
        assert snapshot.currency == "USD"
        assert snapshot.banks == ("Alpha", "Beta", "Gamma")
        beta = snapshot.get("Beta")
        assert (beta.buy, beta.sell) == (38.7, 39.1)
        assert beta.timestamp == "2025-03-05T12:00:00.000Z"
        assert beta.currency == "USD"

    def test_bad_number_becomes_zero(self, usd_payload):
        usd_payload["Alpha"] = [record("oops", "39.20")]
        stats = StatsTracker()
        snapshot = RateParser(stats=stats).parse_current(usd_payload, currency="USD")

        alpha = snapshot.get("Alpha")
        assert alpha.buy == 0.0
        assert alpha.sell == 39.2
        assert snapshot.get("Beta").buy == 38.7
        assert stats.summary()["parse_fallbacks"] == {"Alpha.rate_buy": 1}

    def test_first_record_wins_and_empty_banks_skipped(self, usd_payload):
        usd_payload["Alpha"] = [record("38.1", "39.0"), record("99", "99")]
        usd_payload["Delta"] = []
        snapshot = RateParser().parse_current(usd_payload, currency="USD")
        assert snapshot.get("Alpha").buy == 38.1
        assert snapshot.get("Delta") is None

    def test_configured_banks(self, usd_payload):
        snapshot = RateParser(banks=["Gamma", "Alpha", "Missing"]).parse_current(usd_payload, "USD")
        assert snapshot.banks == ("Gamma", "Alpha")

    def test_numbers_accepted(self, usd_payload):
        usd_payload["Alpha"] = [{"currency": "USD", "rate_buy": 38.5004, "rate_sell": 39}]
        snapshot = RateParser().parse_current(usd_payload, "USD")
        assert snapshot.get("Alpha").buy == 38.5
        assert snapshot.get("Alpha").sell == 39.0

    def test_currency_defaults_to_record(self, usd_payload):
        snapshot = RateParser().parse_current(usd_payload)
        assert snapshot.currency == "USD"

    def test_missing_timestamp_is_invalid(self, usd_payload):
        del usd_payload["timestamp"]
        with pytest.raises(ValidationError):
            RateParser().parse_current(usd_payload, "USD")

    def test_malformed_record_is_invalid(self, usd_payload):
        usd_payload["Alpha"] = [{"currency": "USD"}]
        with pytest.raises(ValidationError):
            RateParser().parse_current(usd_payload, "USD")


class TestParseHistorical:
    def test_sorted_and_filtered(self, historical_payload):
        series = RateParser().parse_historical(historical_payload)

        assert series.currency == "USD"
        assert series.period_days == 7
        stamps = [p.timestamp for p in series.points]
        assert stamps == sorted(stamps)
        assert [ts.day for ts in stamps] == [1, 2, 3]
        assert stamps[1].hour == 6

    def test_missing_bank_is_absent_not_zero(self, historical_payload):
        series = RateParser().parse_historical(historical_payload)
        first = series.points[0]
        assert first.bank_rates == {"Alpha": RatePair(38.4, 39.1)}
        assert "Beta" not in first.bank_rates
        assert first.buy_rate("Beta") == 0.0

    def test_available_banks_and_range(self, historical_payload):
        series = RateParser().parse_historical(historical_payload)
        assert series.available_banks() == {"Alpha", "Beta"}
        start, end = series.date_range()
        assert start < end

    def test_empty_data(self):
        series = RateParser().parse_historical({"currency": "EUR", "period_days": 1, "data": []})
        assert len(series) == 0
        assert series.date_range() is None

    def test_missing_data_is_invalid(self):
        with pytest.raises(ValidationError):
            RateParser().parse_historical({"currency": "EUR", "period_days": 1})
