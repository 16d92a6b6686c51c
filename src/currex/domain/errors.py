# src/currex/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines the exceptions raised by the rates clients. Every fetch
failure derives from RatesClientError and carries a stable ``code`` so the
UI layer can show a distinct diagnostic per failure class.
"""
from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class RatesClientError(DomainError):
    """Base exception for failures while fetching exchange rates."""

    code = "rates_client"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(RatesClientError):
    """Raised when the base URL or credentials are missing at construction."""

    code = "configuration"


class InvalidRequestError(RatesClientError):
    """Raised when the request URL cannot be built from the configuration."""

    code = "invalid_request"


class TransportError(RatesClientError):
    """Raised on network-level failures (DNS, timeout, connection reset)."""

    code = "transport"


class InvalidResponseError(RatesClientError):
    """Raised when the server answers with a status outside 200-299."""

    code = "invalid_response"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(RatesClientError):
    """Raised when the payload does not match the expected JSON shape."""

    code = "decode"
