"""Testing utilities for code built on the request pipeline.

Example:
    ```python
    from rest_client_core.testing import (
        SequenceTransport,
        create_challenge_response,
        create_mock_response,
    )


    async def test_retries_with_digest():
        transport = SequenceTransport(
            create_challenge_response('Digest realm="api", nonce="abc"'),
            create_mock_response(200),
        )
        ...
        assert transport.call_count == 2
    ```
"""

import asyncio
from collections.abc import Callable

import httpx


def create_mock_response(
    status_code: int = 200,
    *,
    text: str = "",
    content_type: str | list[str] | None = None,
    headers: list[tuple[str, str]] | None = None,
) -> httpx.Response:
    """Build a response; a list ``content_type`` yields one header per entry."""
    header_list = list(headers or [])
    if isinstance(content_type, str):
        header_list.append(("Content-Type", content_type))
    elif content_type is not None:
        header_list.extend(("Content-Type", value) for value in content_type)
    return httpx.Response(status_code, headers=header_list, content=text.encode("utf-8"))


def create_challenge_response(*challenges: str, status_code: int = 401) -> httpx.Response:
    """Build a 401 response carrying one ``WWW-Authenticate`` header per challenge."""
    return create_mock_response(status_code, headers=[("WWW-Authenticate", challenge) for challenge in challenges])


class SequenceTransport(httpx.AsyncBaseTransport):
    """Replays queued responses (or response factories) and records what was sent.

    Each call pops the next entry; the last entry repeats once the queue is
    exhausted. ``sent_headers`` keeps a copy of the headers of every call,
    since the pipeline mutates the request object between attempts.

    Args:
        *responses: ``httpx.Response`` objects or callables taking the request.
        delay: Seconds to sleep before answering each call.
    """

    def __init__(
        self,
        *responses: httpx.Response | Callable[[httpx.Request], httpx.Response],
        delay: float = 0.0,
    ) -> None:
        if not responses:
            responses = (create_mock_response(200),)
        self._responses = list(responses)
        self.delay = delay
        self.requests: list[httpx.Request] = []
        self.sent_headers: list[httpx.Headers] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.sent_headers.append(httpx.Headers(request.headers))

        if self.delay:
            await asyncio.sleep(self.delay)

        entry = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if not isinstance(entry, httpx.Response):
            return entry(request)
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)


__all__ = [
    "SequenceTransport",
    "create_challenge_response",
    "create_mock_response",
]
