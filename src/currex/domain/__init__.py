"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from currex.domain.models import (
    SUPPORTED_CURRENCIES,
    SUPPORTED_PERIODS,
    BankQuote,
    BestRates,
    CurrencySnapshot,
    HistoricalRatePoint,
    HistoricalSeries,
    RatePair,
    WidgetSettings,
    WidgetSnapshot,
)
from currex.domain.errors import (
    ConfigurationError,
    DecodeError,
    DomainError,
    InvalidRequestError,
    InvalidResponseError,
    RatesClientError,
    TransportError,
)

__all__ = [
    "SUPPORTED_CURRENCIES",
    "SUPPORTED_PERIODS",
    "BankQuote",
    "BestRates",
    "CurrencySnapshot",
    "HistoricalRatePoint",
    "HistoricalSeries",
    "RatePair",
    "WidgetSettings",
    "WidgetSnapshot",
    "DomainError",
    "RatesClientError",
    "ConfigurationError",
    "InvalidRequestError",
    "TransportError",
    "InvalidResponseError",
    "DecodeError",
]
