# src/currex/app.py
"""
Application Entry Point - Wiring and One-shot Refresh

This module serves as the composition root. It builds the caches, clients,
statistics tracker and widget store exactly once and hands them to the
RatesService. Running it performs one full refresh and publishes the widget
snapshot, which is what the main app does on every refresh trigger.

Files that USE this module:
- currex.__main__ (python -m currex)

Files that this module USES:
- currex.shared.logging_conf (setup_logging for logging configuration)
- currex.config (settings for configuration management)
- currex.adapters.providers.* (rates clients and parser)
- currex.adapters.persistence.* (shared widget store)
- currex.application.* (RatesService, StatsTracker)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import asyncio  # Run the async refresh from a sync entry point
import logging  # Standard library for logging messages and errors
from typing import Optional

from currex.adapters.persistence.blob_store import FileBlobStore  # Shared directory store
from currex.adapters.persistence.widget_store import WidgetRateStore  # Widget handoff
from currex.adapters.providers.current_rates import CurrentRatesClient
from currex.adapters.providers.historical_rates import HistoricalRatesClient
from currex.adapters.providers.parser import RateParser
from currex.application.rates_service import RatesService  # Business logic for exchange rates
from currex.application.stats import StatsTracker  # Fetch statistics
from currex.config import Settings, settings as default_settings
from currex.domain.errors import RatesClientError
from currex.shared.cache import RateCache
from currex.shared.logging_conf import setup_logging  # Configure logging with file rotation


def build_service(settings: Optional[Settings] = None, stats: Optional[StatsTracker] = None) -> RatesService:
    """
    Wire every collaborator of the RatesService.

    Args:
        settings: Settings to use (defaults to the global settings)
        stats: Optional shared StatsTracker

    Returns:
        Ready-to-use RatesService

    Raises:
        ConfigurationError: If the base URL or credentials are missing
    """
    settings = settings or default_settings
    parser = RateParser(banks=settings.banks, stats=stats)

    current_client = CurrentRatesClient(
        base_url=settings.api_base_url,
        credentials=settings.basic_credentials,
        timeout=settings.http_timeout_seconds,
        cache=RateCache(settings.current_cache_seconds),
        parser=parser,
        stats=stats,
    )
    historical_client = HistoricalRatesClient(
        base_url=settings.api_base_url,
        credentials=settings.basic_credentials,
        timeout=settings.http_timeout_seconds,
        cache=RateCache(settings.historical_cache_seconds),
        parser=parser,
        stats=stats,
    )
    widget_store = WidgetRateStore(FileBlobStore(settings.shared_store_dir))

    return RatesService(
        current_client=current_client,
        historical_client=historical_client,
        widget_store=widget_store,
        currencies=settings.currencies,
    )


def main() -> int:
    """
    Refresh every configured currency once and publish the widget snapshot.

    Returns:
        Process exit code: 0 on success, 1 on failure
    """
    settings = default_settings
    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_to_stdout=settings.log_stdout,
    )
    logger = logging.getLogger(__name__)

    stats = StatsTracker()
    try:
        service = build_service(settings, stats=stats)
        snapshot = asyncio.run(service.refresh_all())
    except RatesClientError as e:
        logger.error("Refresh failed (%s): %s", e.code, e)
        return 1
    except RuntimeError as e:
        logger.error("Refresh failed: %s", e)
        return 1
    finally:
        stats.log_summary()

    for currency, quote in snapshot.best_buy_rates.items():
        logger.info("%s best buy: %s %.3f", currency, quote.bank, quote.buy)
    for currency, quote in snapshot.best_sell_rates.items():
        logger.info("%s best sell: %s %.3f", currency, quote.bank, quote.sell)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
