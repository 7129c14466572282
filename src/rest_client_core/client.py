"""REST client orchestrating the request pipeline.

``RestClient`` builds each request, attaches its authentication and serializer
pipelines, sends it through the transport stack and wraps the outcome in a
``WebResponse``.

Example:
    ```python
    import msgspec

    from rest_client_core import RestClient
    from rest_client_core.auth import AuthenticationPipeline, DigestAuthenticator
    from rest_client_core.serializers import SerializerPipeline


    class Item(msgspec.Struct):
        id: int
        name: str


    async with RestClient(
        authentication_pipeline=AuthenticationPipeline(DigestAuthenticator("user", "secret")),
        serializer_pipeline=SerializerPipeline.default(),
    ) as client:
        response = await client.get("https://api.example.com/items/1", response_type=Item, timeout=10.0)
        print(response.status_code, response.data)
    ```
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from rest_client_core.auth.pipeline import AuthenticationPipeline
from rest_client_core.errors.exceptions import ConfigurationError, RequestCancelledError
from rest_client_core.options import DEFAULT_TIMEOUT, INFINITE_TIMEOUT, attach_pipelines, get_selected_serializer
from rest_client_core.serializers.pipeline import SerializerPipeline
from rest_client_core.transport.factory import TransportLayer, create_transport_stack

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class WebResponse(Generic[T]):
    """Outcome of a request: the raw response fields plus the decoded payload."""

    http_version: str
    status_code: int
    reason_phrase: str
    headers: httpx.Headers
    content: str
    data: T | None = None

    def __str__(self) -> str:
        return self.content


class RestClient:
    """Asynchronous REST client built on the timeout and pipeline transports.

    Args:
        authentication_pipeline: Authenticators tried when a response is 401.
        serializer_pipeline: Serializers used to decode responses and encode
            non-text request bodies.
        interceptors: Extra transport layers placed outside the timeout layer.
        transport: Transport performing the network exchange. Defaults to
            ``httpx.AsyncHTTPTransport()``.
        default_timeout: Deadline for requests sent without an explicit timeout.
        cookies: Initial cookie jar contents.
        follow_redirects: Whether redirects are followed automatically.
        max_redirects: Upper bound on followed redirects.
    """

    def __init__(
        self,
        *,
        authentication_pipeline: AuthenticationPipeline | None = None,
        serializer_pipeline: SerializerPipeline | None = None,
        interceptors: list[TransportLayer] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        default_timeout: float = DEFAULT_TIMEOUT,
        cookies: httpx.Cookies | dict[str, str] | None = None,
        follow_redirects: bool = True,
        max_redirects: int = 20,
    ) -> None:
        self.authentication_pipeline = authentication_pipeline
        self.serializer_pipeline = serializer_pipeline
        self._pending: set[asyncio.Task] = set()
        self._client = httpx.AsyncClient(
            transport=create_transport_stack(
                transport, default_timeout=default_timeout, interceptors=interceptors or ()
            ),
            # Deadlines are enforced per request by TimeoutTransport
            timeout=None,
            cookies=cookies,
            follow_redirects=follow_redirects,
            max_redirects=max_redirects,
        )

    async def __aenter__(self) -> "RestClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel_pending()
        await self._client.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        """Cancel in-flight requests and close the underlying connections."""
        self.cancel_pending()
        await self._client.aclose()

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def cancel_pending(self) -> int:
        """Cancel every in-flight request; each raises ``RequestCancelledError``.

        Returns:
            The number of requests cancelled.
        """
        pending = [task for task in self._pending if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.warning(f"Cancelled {len(pending)} in-flight request(s)")
        return len(pending)

    def _encode_body(self, body: Any, content_type: str) -> str | bytes | None:
        if body is None or isinstance(body, (str, bytes)):
            return body

        serializer = self.serializer_pipeline.get(content_type) if self.serializer_pipeline is not None else None
        if serializer is None:
            raise ConfigurationError(
                f"Cannot send {type(body).__name__} body: no serializer registered for '{content_type}'"
            )
        return serializer.encode(body)

    async def send_request(
        self,
        method: str,
        url: httpx.URL | str,
        *,
        body: Any = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        timeout: float | None = INFINITE_TIMEOUT,
        response_type: type[T] | None = None,
        headers: dict[str, str] | None = None,
    ) -> WebResponse[T]:
        """Send a request through the pipeline.

        Args:
            method: HTTP method.
            url: Target URL.
            body: ``str``/``bytes`` sent as-is, or a value encoded by the
                serializer registered for ``content_type``.
            content_type: ``Content-Type`` of the body.
            timeout: Per-request deadline in seconds, ``INFINITE_TIMEOUT`` for none,
                or None for the client's ``default_timeout``.
            response_type: Type to decode the body into using the serializer
                selected for the response content type. None skips decoding.
            headers: Additional request headers.

        Returns:
            The response envelope; ``data`` is None when no decoding happened.

        Raises:
            RequestTimeoutError: The deadline elapsed.
            RequestCancelledError: ``cancel_pending`` aborted the request.
            DeserializationError: The selected serializer could not decode the body.
            MalformedChallengeError: An authenticator could not answer the challenge.
            ConfigurationError: ``body`` is not text and no serializer is registered
                for ``content_type``.
        """
        content = self._encode_body(body, content_type)
        request_headers = dict(headers or {})
        if content is not None:
            request_headers.setdefault("Content-Type", content_type)

        request = self._client.build_request(method, url, content=content, headers=request_headers)
        attach_pipelines(
            request,
            authentication_pipeline=self.authentication_pipeline,
            serializer_pipeline=self.serializer_pipeline,
            timeout=timeout,
        )

        task = asyncio.ensure_future(self._client.send(request))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        try:
            response = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise RequestCancelledError(f"Request {method} {url} was cancelled") from None

        data = None
        if response_type is not None:
            serializer = get_selected_serializer(response.request)
            if serializer is not None:
                data = serializer.decode(response.text, response_type)
            else:
                logger.debug(f"No serializer matched content type of {method} {url}; data left empty")

        return WebResponse(
            http_version=response.http_version,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            headers=response.headers,
            content=response.text,
            data=data,
        )

    async def get(self, url: httpx.URL | str, **kwargs: Any) -> WebResponse[Any]:
        return await self.send_request("GET", url, **kwargs)

    async def post(self, url: httpx.URL | str, body: Any = None, **kwargs: Any) -> WebResponse[Any]:
        return await self.send_request("POST", url, body=body, **kwargs)

    async def put(self, url: httpx.URL | str, body: Any = None, **kwargs: Any) -> WebResponse[Any]:
        return await self.send_request("PUT", url, body=body, **kwargs)

    async def patch(self, url: httpx.URL | str, body: Any = None, **kwargs: Any) -> WebResponse[Any]:
        return await self.send_request("PATCH", url, body=body, **kwargs)

    async def delete(self, url: httpx.URL | str, body: Any = None, **kwargs: Any) -> WebResponse[Any]:
        return await self.send_request("DELETE", url, body=body, **kwargs)
