# src/currex/adapters/providers/base.py
"""
Base Rates Client - Shared HTTP Plumbing for the Rates API

This module holds what the current and historical clients have in common:
connection configuration, HTTP Basic auth, the cache lookup, the GET itself
and the mapping of every failure onto the domain error taxonomy.

The HTTP call uses ``requests`` and runs in a worker thread, so an awaiting
caller is only suspended at the await point and several fetches can be in
flight at once.

Files that USE this module:
- currex.adapters.providers.current_rates (CurrentRatesClient extends BaseRatesClient)
- currex.adapters.providers.historical_rates (HistoricalRatesClient extends BaseRatesClient)

Files that this module USES:
- currex.config (settings for base URL, credentials and timeout)
- currex.domain.errors (error taxonomy)
- currex.shared.validators (base URL validation)
"""
import asyncio
import base64
import logging
from typing import Any, Dict, Optional

import requests

from currex.config import settings
from currex.domain.errors import (
    ConfigurationError,
    DecodeError,
    InvalidRequestError,
    InvalidResponseError,
    RatesClientError,
    TransportError,
)
from currex.shared.validators import validate_base_url, validate_credentials

log = logging.getLogger(__name__)


class BaseRatesClient:
    """
    Common behaviour of the rates API clients.

    Subclasses own a RateCache and a RateParser and implement one fetch
    operation on top of ``_cached`` / ``_get_json`` / ``_store``.
    """

    name = "rates"

    def __init__(
        self,
        base_url: Optional[str] = None,
        credentials: Optional[str] = None,
        timeout: Optional[int] = None,
        stats=None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. 'https://rates.example.com' (defaults to settings)
            credentials: 'user:pass' for Basic auth (defaults to settings)
            timeout: HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            stats: Optional StatsTracker

        Raises:
            ConfigurationError: If the base URL or credentials are missing
        """
        self.base_url = (base_url or settings.api_base_url or "").rstrip("/")
        credentials = credentials or settings.basic_credentials
        if not self.base_url:
            log.error("%s client: base URL not configured", self.name)
            raise ConfigurationError("Rates API base URL not configured")
        if not credentials or not validate_credentials(credentials):
            log.error("%s client: credentials missing or not in 'user:pass' form", self.name)
            raise ConfigurationError("Rates API credentials not configured")
        self._auth_header = "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        self.timeout = timeout or settings.http_timeout_seconds
        self.stats = stats

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self._auth_header,
            "Accept": "application/json",
            # The cache layer decides freshness; intermediaries must not
            "Cache-Control": "no-cache",
        }

    def _build_url(self, path: str) -> str:
        """
        Join the base URL and an endpoint path.

        Raises:
            InvalidRequestError: If the base URL is not an absolute http(s) URL
        """
        if not validate_base_url(self.base_url):
            raise self._fail(InvalidRequestError(f"Invalid rates API URL: {self.base_url!r}"))
        return f"{self.base_url}{path}"

    def _fail(self, error: RatesClientError) -> RatesClientError:
        """Log and count a failure; returns the error for raising."""
        log.error("%s client failed (%s): %s", self.name, error.code, error)
        if self.stats is not None:
            self.stats.record_error(error)
        return error

    def _cached(self, cache, key: str):
        value = cache.get(key)
        if value is not None:
            log.debug("Using cached %s rates for %s", self.name, key)
            if self.stats is not None:
                self.stats.record_cache_hit(key)
        elif self.stats is not None:
            self.stats.record_cache_miss(key)
        return value

    def _store(self, cache, key: str, value) -> None:
        cache.put(key, value)
        log.info("%s rates for %s updated (ttl=%ss)", self.name.capitalize(), key, int(cache.ttl))

    def _decode_failed(self, exc: Exception) -> DecodeError:
        return self._fail(DecodeError(f"Failed to parse rates API response: {exc}", cause=exc))

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        """
        Perform an authenticated GET and decode its JSON body.

        Args:
            path: Endpoint path starting with '/'
            params: Query parameters

        Returns:
            Decoded JSON value

        Raises:
            InvalidRequestError: If the URL cannot be built
            TransportError: On network failure or timeout
            InvalidResponseError: On a non-2xx status
            DecodeError: If the body is not JSON
        """
        url = self._build_url(path)
        if self.stats is not None:
            self.stats.record_fetch(self.name)

        log.info("Fetching %s rates: %s %s", self.name, path, params)
        try:
            resp = await asyncio.to_thread(
                requests.get,
                url,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as e:
            raise self._fail(InvalidRequestError(f"Invalid rates API URL: {e}", cause=e)) from e
        except requests.exceptions.Timeout as e:
            raise self._fail(TransportError(f"Rates API timeout after {self.timeout}s", cause=e)) from e
        except requests.exceptions.RequestException as e:
            raise self._fail(TransportError(f"Rates API request failed: {e}", cause=e)) from e

        if not 200 <= resp.status_code < 300:
            raise self._fail(InvalidResponseError(
                f"Rates API returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            ))

        try:
            return resp.json()
        except ValueError as e:
            raise self._decode_failed(e) from e
