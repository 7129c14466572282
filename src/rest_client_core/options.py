"""Out-of-band request metadata shared by the pipeline stages.

Pipelines travel with each request inside ``httpx.Request.extensions``, which
transports read but never put on the wire. The orchestrator attaches the
authentication and serializer pipelines (and optionally a per-request timeout)
before sending; the pipeline transport writes the selected serializer back under
``SERIALIZER_KEY`` for the orchestrator to read once the call returns.

Example:
    ```python
    request = client.build_request("GET", "https://api.example.com/items")
    attach_pipelines(
        request,
        authentication_pipeline=AuthenticationPipeline(DigestAuthenticator("user", "secret")),
        serializer_pipeline=SerializerPipeline.default(),
        timeout=15.0,
    )
    response = await client.send(request)
    serializer = get_selected_serializer(response.request)
    ```
"""

import math
from typing import TYPE_CHECKING

import httpx

from rest_client_core.errors.exceptions import ConfigurationError

if TYPE_CHECKING:
    from rest_client_core.auth.pipeline import AuthenticationPipeline
    from rest_client_core.serializers.base import Serializer
    from rest_client_core.serializers.pipeline import SerializerPipeline

AUTHENTICATION_PIPELINE_KEY = "rest_client_core.authentication_pipeline"
SERIALIZER_PIPELINE_KEY = "rest_client_core.serializer_pipeline"
SERIALIZER_KEY = "rest_client_core.serializer"
REQUEST_TIMEOUT_KEY = "rest_client_core.request_timeout"

# Applies to requests that carry no explicit timeout
DEFAULT_TIMEOUT: float = 100.0

# Disables the per-request deadline
INFINITE_TIMEOUT: float = math.inf


def validate_timeout(timeout: float) -> float:
    """Return ``timeout`` as a float, rejecting values that cannot be a deadline.

    Raises:
        ConfigurationError: If the value is not a positive number of seconds.
    """
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigurationError(f"Timeout must be a number of seconds, got {timeout!r}")
    if math.isnan(timeout) or timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {timeout!r}")
    return float(timeout)


def attach_pipelines(
    request: httpx.Request,
    *,
    authentication_pipeline: "AuthenticationPipeline | None" = None,
    serializer_pipeline: "SerializerPipeline | None" = None,
    timeout: float | None = None,
) -> httpx.Request:
    """Attach pipeline selections to a request's extensions.

    Args:
        request: Request about to be sent.
        authentication_pipeline: Authenticators tried on a 401 response.
        serializer_pipeline: Serializers matched against the response content type.
        timeout: Per-request deadline in seconds, ``INFINITE_TIMEOUT`` for none,
            or None to fall back to the timeout transport's default.

    Returns:
        The same request, for chaining.
    """
    if authentication_pipeline is not None:
        request.extensions[AUTHENTICATION_PIPELINE_KEY] = authentication_pipeline
    if serializer_pipeline is not None:
        request.extensions[SERIALIZER_PIPELINE_KEY] = serializer_pipeline
    if timeout is not None:
        request.extensions[REQUEST_TIMEOUT_KEY] = validate_timeout(timeout)
    return request


def get_selected_serializer(request: httpx.Request) -> "Serializer | None":
    """Return the serializer chosen for the response to ``request``, if any."""
    return request.extensions.get(SERIALIZER_KEY)
