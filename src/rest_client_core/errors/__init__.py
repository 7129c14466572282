"""Error taxonomy for the request pipeline."""

from rest_client_core.errors.exceptions import (
    ConfigurationError,
    DeserializationError,
    RequestCancelledError,
    RequestTimeoutError,
    RestClientError,
)

__all__ = [
    "ConfigurationError",
    "DeserializationError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "RestClientError",
]
