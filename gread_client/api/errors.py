"""Error types specific to the GRead REST layer.

Purpose:
- Provide typed exceptions thrown by `GReadApiClient`.
- Expose HTTP-oriented context (status code, raw body) for diagnosis.

Usage:
- Catch `ApiError` for any failure and inspect `status_code` or `details`.
- Catch `HttpStatusError` for non-2xx answers, `EmptyResponseError` when the
  server answered with nothing usable, `DecodeError` when the JSON did not
  match the expected model.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base error for GRead API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional payload from the server (e.g., the response text).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InvalidUrlError(ApiError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url}", details=url)
        self.url = url


class InvalidResponseError(ApiError):
    def __init__(self, message: str = "Invalid response from server", *, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)


class NetworkError(ApiError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Network error calling {url}: {cause}", details=str(cause))
        self.url = url


class HttpStatusError(ApiError):
    def __init__(self, status_code: int, *, details: Optional[Any] = None) -> None:
        super().__init__(f"HTTP Error: {status_code}", status_code=status_code, details=details)


class EmptyResponseError(ApiError):
    def __init__(self, endpoint: str, *, status_code: Optional[int] = None) -> None:
        super().__init__("No data available", status_code=status_code, details=endpoint)
        self.endpoint = endpoint


class DecodeError(ApiError):
    def __init__(self, endpoint: str, cause: BaseException, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"Failed to decode response for {endpoint}: {cause}", status_code=status_code, details=str(cause))
        self.endpoint = endpoint
