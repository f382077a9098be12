"""
Tradier Client Errors
=====================

Every failure surfaces to the immediate caller; nothing in this package
recovers locally or substitutes a default value.

    TradierError
    ├── TransportError   non-2xx status or network failure
    │   └── APIKeyError  token missing or rejected (401)
    ├── DecodeError      body is not JSON or not the expected shape
    └── NoDataError      no trading-day record for a requested date
"""

from typing import Optional


class TradierError(Exception):
    """Base exception for Tradier API errors."""
    pass


class TransportError(TradierError):
    """Raised on a non-2xx response or a network failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class APIKeyError(TransportError):
    """Raised when the API token is missing or invalid."""
    pass


class DecodeError(TradierError):
    """Raised when a response body does not match the expected shape."""
    pass


class NoDataError(TradierError):
    """Raised when a price lookup finds no trading-day record."""
    pass
