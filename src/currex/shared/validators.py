# src/currex/shared/validators.py
"""
Input Validation Utilities - Configuration and Request Validation

This module provides validation functions for connection settings and
request parameters: base URLs, Basic-auth credentials, currency codes and
history periods.

Files that USE this module:
- currex.config.settings (uses validation functions in Settings field validators)
- currex.adapters.providers.base (validates the base URL before building requests)
- currex.adapters.providers.historical_rates (validates period_days)

Files that this module USES:
- None (pure utility functions)
"""
import re
import urllib.parse


def validate_base_url(url: str) -> bool:
    """
    Validate that a base URL is an absolute http(s) URL.

    Args:
        url: Base URL to validate (e.g., 'https://rates.example.com')

    Returns:
        True if valid, False otherwise
    """
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_credentials(credentials: str) -> bool:
    """
    Validate a 'username:password' credentials string.

    The username must be non-empty; the password may contain colons.
    """
    if not credentials or ":" not in credentials:
        return False
    username, _, _ = credentials.partition(":")
    return bool(username)


def validate_currency_code(code: str) -> bool:
    """
    Validate an ISO-4217 style currency code (three uppercase letters).
    """
    if not code:
        return False
    return bool(re.match(r'^[A-Z]{3}$', code))


def validate_period_days(period_days) -> bool:
    """
    Validate a history period: a positive integer number of days.
    """
    if isinstance(period_days, bool) or not isinstance(period_days, int):
        return False
    return period_days > 0
