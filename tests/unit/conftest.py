"""Unit test fixtures (stand-in provider exceptions).

Provides exception objects shaped like the errors provider SDKs and HTTP
clients raise, without importing those SDKs.
"""

from types import SimpleNamespace

import pytest


class ProviderAPIError(Exception):
    """Exception carrying a status attribute, like most provider SDK errors."""

    def __init__(self, message: str, status_code=None, code=None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class HTTPStatusLikeError(Exception):
    """Exception carrying the status on an attached response (httpx style)."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.response = SimpleNamespace(status_code=status_code)


@pytest.fixture
def provider_error():
    """Factory fixture for ProviderAPIError.

    Usage:
        def test_something(provider_error):
            exc = provider_error("Too busy", status_code=429)
    """
    def _create(message: str = "provider error", status_code=None, code=None) -> ProviderAPIError:
        return ProviderAPIError(message, status_code=status_code, code=code)

    return _create


@pytest.fixture
def http_status_error():
    """Factory fixture for HTTPStatusLikeError."""
    def _create(message: str = "Server error", status_code: int = 500) -> HTTPStatusLikeError:
        return HTTPStatusLikeError(message, status_code=status_code)

    return _create


@pytest.fixture
def raised_error():
    """An exception that has been raised, so it carries a traceback."""
    try:
        raise TimeoutError("Read timeout after 60s")
    except TimeoutError as exc:
        return exc
