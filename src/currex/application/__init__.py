"""
Application Layer - Use Cases

Best-rate selection, the rates service facade and fetch statistics.
"""

from currex.application.best_rates import rate_domain, select_best, series_domain, snapshot_domain
from currex.application.rates_service import RatesService
from currex.application.stats import StatsTracker

__all__ = [
    "select_best",
    "rate_domain",
    "snapshot_domain",
    "series_domain",
    "RatesService",
    "StatsTracker",
]
