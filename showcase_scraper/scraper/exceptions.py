"""Custom exceptions for the showcase scraper module."""

from typing import Optional

from showcase_scraper.utils.exceptions import AppException


class ScraperError(AppException):
    """Base exception for scraper-related errors."""
    pass


class NetworkError(ScraperError):
    """A request did not produce a usable 2xx response."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs) -> None:
        context = kwargs.pop("context", {})
        if url:
            context["url"] = url
        self.url = url
        super().__init__(message, context=context, **kwargs)


class RequestTimeoutError(NetworkError):
    """The request exceeded its timeout."""

    def __init__(self, url: str, timeout: float, **kwargs) -> None:
        self.timeout = timeout
        super().__init__(
            f"Request timed out after {timeout:g}s", url=url, code="REQUEST_TIMEOUT", **kwargs
        )


class ConnectionFailedError(NetworkError):
    """The connection could not be established or broke mid-request."""

    def __init__(self, url: str, reason: str, **kwargs) -> None:
        super().__init__(f"Connection failed: {reason}", url=url, code="CONNECTION_FAILED", **kwargs)


class HttpStatusError(NetworkError):
    """The server answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int, **kwargs) -> None:
        self.status_code = status_code
        context = kwargs.pop("context", {})
        context["status_code"] = status_code
        super().__init__(f"HTTP {status_code}", url=url, code="HTTP_STATUS", context=context, **kwargs)


class ExtractionError(ScraperError):
    """Failed to build a record from page markup."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs) -> None:
        context = kwargs.pop("context", {})
        if url:
            context["url"] = url
        super().__init__(message, code="EXTRACTION_ERROR", context=context, **kwargs)


class ExportError(ScraperError):
    """Failed to write results to disk."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs) -> None:
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        super().__init__(message, code="EXPORT_ERROR", context=context, **kwargs)
