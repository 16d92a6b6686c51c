"""
Provider Adapters - Rates API Clients

This package contains the clients for the bank rates API and the parser
that normalizes its payloads.
"""

from currex.adapters.providers.base import BaseRatesClient
from currex.adapters.providers.current_rates import CurrentRatesClient
from currex.adapters.providers.historical_rates import HistoricalRatesClient
from currex.adapters.providers.parser import RateParser, parse_rate, parse_timestamp, round3

__all__ = [
    "BaseRatesClient",
    "CurrentRatesClient",
    "HistoricalRatesClient",
    "RateParser",
    "parse_rate",
    "parse_timestamp",
    "round3",
]
