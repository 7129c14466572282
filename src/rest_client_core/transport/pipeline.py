"""Authentication retry and serializer selection.

```python
from rest_client_core.transport.pipeline import PipelineTransport
import httpx

transport = PipelineTransport(wrapped_transport=httpx.AsyncHTTPTransport())

async with httpx.AsyncClient(transport=transport) as client:
    request = client.build_request("GET", "https://api.example.com/private")
    attach_pipelines(
        request,
        authentication_pipeline=AuthenticationPipeline(DigestAuthenticator("user", "secret")),
        serializer_pipeline=SerializerPipeline.default(),
    )
    response = await client.send(request)
    serializer = get_selected_serializer(response.request)
```
"""

import logging

import httpx

from rest_client_core.auth.pipeline import AuthenticationPipeline
from rest_client_core.options import AUTHENTICATION_PIPELINE_KEY, SERIALIZER_KEY, SERIALIZER_PIPELINE_KEY
from rest_client_core.serializers.pipeline import SerializerPipeline

logger = logging.getLogger(__name__)


class PipelineTransport(httpx.AsyncBaseTransport):
    """Applies the pipelines attached to a request's extensions.

    On a 401 response with an authentication pipeline attached, the first
    authenticator whose ``matches`` accepts the response rewrites the request
    and the request is sent exactly once more; the first response is closed.
    The retried response is returned even if it is another 401.

    With a serializer pipeline attached, each ``Content-Type`` header value is
    looked up in header order and the first registered serializer is stored
    under ``SERIALIZER_KEY`` in the request's extensions. A selection left by an
    earlier response is cleared first.

    Args:
        wrapped_transport: The transport to delegate to.
    """

    UNAUTHORIZED = 401

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    async def __aenter__(self):
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        response = await self._wrapped_transport.handle_async_request(request)

        authentication_pipeline = request.extensions.get(AUTHENTICATION_PIPELINE_KEY)
        if response.status_code == self.UNAUTHORIZED and authentication_pipeline is not None:
            response = await self._authenticate(request, response, authentication_pipeline)

        serializer_pipeline = request.extensions.get(SERIALIZER_PIPELINE_KEY)
        if serializer_pipeline is not None:
            self._select_serializer(request, response, serializer_pipeline)

        return response

    async def _authenticate(
        self,
        request: httpx.Request,
        response: httpx.Response,
        authentication_pipeline: AuthenticationPipeline,
    ) -> httpx.Response:
        for authenticator in authentication_pipeline:
            if not authenticator.matches(response):
                continue

            try:
                await authenticator.apply(request, response)
            finally:
                await response.aclose()

            logger.debug(f"Request {request.method} {request.url} returned 401, retrying with {authenticator!r}")
            return await self._wrapped_transport.handle_async_request(request)

        logger.debug(f"Request {request.method} {request.url} returned 401, no authenticator matched")
        return response

    def _select_serializer(
        self,
        request: httpx.Request,
        response: httpx.Response,
        serializer_pipeline: SerializerPipeline,
    ) -> None:
        # Redirect hops share one extensions dict
        request.extensions.pop(SERIALIZER_KEY, None)
        for content_type in response.headers.get_list("Content-Type"):
            serializer = serializer_pipeline.get(content_type)
            if serializer is not None:
                logger.debug(f"Selected {serializer!r} for content type '{content_type}'")
                request.extensions[SERIALIZER_KEY] = serializer
                return
