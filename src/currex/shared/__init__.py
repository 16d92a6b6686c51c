"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- TTL caching
- Logging configuration
"""

from currex.shared.cache import CacheEntry, RateCache
from currex.shared.validators import (
    validate_base_url,
    validate_credentials,
    validate_currency_code,
    validate_period_days,
)

__all__ = [
    "CacheEntry",
    "RateCache",
    "validate_base_url",
    "validate_credentials",
    "validate_currency_code",
    "validate_period_days",
]
