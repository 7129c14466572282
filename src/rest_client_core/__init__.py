"""REST Client Core - pluggable authentication and serialization for httpx.

This library wraps an httpx transport with two cross-cutting stages:
- A per-request deadline, reported as ``RequestTimeoutError``
- A pipeline stage that re-authenticates once on 401 (Basic, Bearer, Digest)
  and picks a serializer (JSON, XML) from the response content type

Example:
    ```python
    from rest_client_core import RestClient
    from rest_client_core.auth import AuthenticationPipeline, DigestAuthenticator
    from rest_client_core.serializers import SerializerPipeline

    async with RestClient(
        authentication_pipeline=AuthenticationPipeline(DigestAuthenticator.from_env()),
        serializer_pipeline=SerializerPipeline.default(),
    ) as client:
        response = await client.get("https://api.example.com/items", response_type=list[dict])
    ```
"""

from rest_client_core.client import RestClient, WebResponse
from rest_client_core.options import DEFAULT_TIMEOUT, INFINITE_TIMEOUT

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_TIMEOUT",
    "INFINITE_TIMEOUT",
    "RestClient",
    "WebResponse",
    "__version__",
]
