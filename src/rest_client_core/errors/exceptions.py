"""Structured exceptions for the request pipeline."""

from typing import Any


class RestClientError(Exception):
    """Base exception for errors raised by the request pipeline."""

    pass


class ConfigurationError(RestClientError, ValueError):
    """Invalid pipeline configuration (duplicate keys, wrong member types, bad timeouts).

    Always raised while building pipelines or attaching them to a request,
    never while a request is in flight.
    """

    pass


class RequestTimeoutError(RestClientError, TimeoutError):
    """The per-request deadline elapsed before the exchange completed."""

    def __init__(self, message: str, timeout: float | None = None):
        super().__init__(message)
        self.timeout = timeout


class RequestCancelledError(RestClientError):
    """The request was aborted by the client-wide cancellation signal."""

    pass


class DeserializationError(RestClientError):
    """A serializer could not decode a response body.

    Attributes:
        content: The raw body text that failed to decode.
        target_type: The type the body was being decoded into.
    """

    def __init__(self, message: str, content: str | None = None, target_type: Any = None):
        super().__init__(message)
        self.content = content
        self.target_type = target_type
