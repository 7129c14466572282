"""Per-request deadline enforcement.

```python
from rest_client_core.transport.timeout import TimeoutTransport
import httpx

transport = TimeoutTransport(wrapped_transport=httpx.AsyncHTTPTransport(), default_timeout=30.0)

async with httpx.AsyncClient(transport=transport, timeout=None) as client:
    request = client.build_request("GET", "https://api.example.com/slow")
    attach_pipelines(request, timeout=5.0)
    response = await client.send(request)  # RequestTimeoutError after 5s
```
"""

import asyncio
import logging
import math

import httpx

from rest_client_core.errors.exceptions import RequestTimeoutError
from rest_client_core.options import DEFAULT_TIMEOUT, REQUEST_TIMEOUT_KEY, validate_timeout

logger = logging.getLogger(__name__)


class TimeoutTransport(httpx.AsyncBaseTransport):
    """Bounds each request with its own deadline, independently of httpx's timeouts.

    The request's ``REQUEST_TIMEOUT_KEY`` extension governs; requests without
    one get ``default_timeout``. ``INFINITE_TIMEOUT`` disables the deadline.
    The deadline covers everything downstream, including authentication
    retries and reading the response body.

    A deadline expiry raises ``RequestTimeoutError``. Cancelling the calling
    task still raises ``asyncio.CancelledError``, so the two stay distinguishable.

    Args:
        wrapped_transport: The transport to delegate to.
        default_timeout: Seconds allowed for requests without an explicit timeout.
    """

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        default_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.default_timeout = validate_timeout(default_timeout)

    async def __aenter__(self):
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    def get_timeout(self, request: httpx.Request) -> float | None:
        """Return the deadline in seconds for ``request``, or None when it is infinite."""
        timeout = request.extensions.get(REQUEST_TIMEOUT_KEY)
        if timeout is None:
            timeout = self.default_timeout
        return None if math.isinf(timeout) else timeout

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        timeout = self.get_timeout(request)
        if timeout is None:
            return await self._send(request)

        logger.debug(f"Request {request.method} {request.url} deadline set to {timeout}s")
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                return await self._send(request)
        except TimeoutError as e:
            if not deadline.expired():
                raise
            logger.warning(f"Request {request.method} {request.url} timed out after {timeout}s")
            raise RequestTimeoutError(
                f"Request {request.method} {request.url} timed out after {timeout}s", timeout=timeout
            ) from e

    async def _send(self, request: httpx.Request) -> httpx.Response:
        response = await self._wrapped_transport.handle_async_request(request)
        try:
            await response.aread()
        except BaseException:
            await response.aclose()
            raise
        return response
