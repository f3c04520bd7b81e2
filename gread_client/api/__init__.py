from .client import GReadApiClient, Namespace
from .errors import (
    ApiError,
    DecodeError,
    EmptyResponseError,
    HttpStatusError,
    InvalidResponseError,
    InvalidUrlError,
    NetworkError,
)

__all__ = [
    "GReadApiClient",
    "Namespace",
    "ApiError",
    "DecodeError",
    "EmptyResponseError",
    "HttpStatusError",
    "InvalidResponseError",
    "InvalidUrlError",
    "NetworkError",
]
