"""Tests for the RestClient orchestrator."""

import asyncio

import msgspec
import pytest

from rest_client_core import DEFAULT_TIMEOUT, RestClient, WebResponse
from rest_client_core.auth import AuthenticationPipeline, BasicAuthenticator, DigestAuthenticator
from rest_client_core.errors import (
    ConfigurationError,
    DeserializationError,
    RequestCancelledError,
    RequestTimeoutError,
)
from rest_client_core.serializers import SerializerPipeline
from rest_client_core.testing import SequenceTransport, create_challenge_response, create_mock_response

URL = "https://api.example.com/items/1"


class Item(msgspec.Struct):
    id: int
    name: str


def make_client(transport: SequenceTransport, **kwargs) -> RestClient:
    kwargs.setdefault("serializer_pipeline", SerializerPipeline.default())
    return RestClient(transport=transport, **kwargs)


class TestResponses:
    """Test response envelopes and decoding."""

    @pytest.mark.unit
    async def test_envelope_fields(self):
        """The envelope carries the raw response fields."""
        transport = SequenceTransport(
            create_mock_response(200, text="hello", content_type="text/plain", headers=[("X-Request-Id", "42")])
        )

        async with make_client(transport) as client:
            response = await client.get(URL)

        assert isinstance(response, WebResponse)
        assert response.status_code == 200
        assert response.reason_phrase == "OK"
        assert response.http_version == "HTTP/1.1"
        assert response.headers["X-Request-Id"] == "42"
        assert response.content == "hello"
        assert str(response) == "hello"
        assert response.data is None

    @pytest.mark.unit
    async def test_decodes_json(self):
        """JSON bodies are decoded into the requested type."""
        transport = SequenceTransport(
            create_mock_response(200, text='{"id": 1, "name": "widget"}', content_type="application/json")
        )

        async with make_client(transport) as client:
            response = await client.get(URL, response_type=Item)

        assert response.data == Item(id=1, name="widget")

    @pytest.mark.unit
    async def test_decodes_xml(self):
        """XML bodies are decoded into the requested type."""
        transport = SequenceTransport(
            create_mock_response(200, text="<Item><id>2</id><name>gadget</name></Item>", content_type="text/xml")
        )

        async with make_client(transport) as client:
            response = await client.get(URL, response_type=Item)

        assert response.data == Item(id=2, name="gadget")

    @pytest.mark.unit
    async def test_unmatched_content_type_leaves_data_empty(self):
        """Without a matching serializer the body is kept but not decoded."""
        transport = SequenceTransport(create_mock_response(200, text="id=1", content_type="text/csv"))

        async with make_client(transport) as client:
            response = await client.get(URL, response_type=Item)

        assert response.data is None
        assert response.content == "id=1"

    @pytest.mark.unit
    async def test_error_status_is_returned(self):
        """Non-success statuses are returned, not raised."""
        transport = SequenceTransport(create_mock_response(404, text="missing"))

        async with make_client(transport) as client:
            response = await client.get(URL)

        assert response.status_code == 404
        assert response.content == "missing"

    @pytest.mark.unit
    async def test_deserialization_error_keeps_body(self):
        """A body the selected serializer rejects raises with the content attached."""
        transport = SequenceTransport(create_mock_response(200, text="not json", content_type="application/json"))

        async with make_client(transport) as client:
            with pytest.raises(DeserializationError) as exc_info:
                await client.get(URL, response_type=Item)

        assert exc_info.value.content == "not json"
        assert exc_info.value.target_type is Item

    @pytest.mark.unit
    async def test_redirect_keeps_serializer_selection(self):
        """Redirected requests share the pipelines of the original request."""
        transport = SequenceTransport(
            create_mock_response(302, headers=[("Location", "https://api.example.com/items/2")]),
            create_mock_response(200, text='{"id": 2, "name": "moved"}', content_type="application/json"),
        )

        async with make_client(transport) as client:
            response = await client.get(URL, response_type=Item)

        assert transport.call_count == 2
        assert response.data == Item(id=2, name="moved")

    @pytest.mark.unit
    async def test_redirect_drops_earlier_serializer_selection(self):
        """A final response matching no serializer is not decoded with the redirect's serializer."""
        transport = SequenceTransport(
            create_mock_response(
                302,
                text="{}",
                content_type="application/json",
                headers=[("Location", "https://api.example.com/items/2")],
            ),
            create_mock_response(200, text="hello", content_type="text/plain"),
        )

        async with make_client(transport) as client:
            response = await client.get(URL, response_type=Item)

        assert transport.call_count == 2
        assert response.data is None
        assert response.content == "hello"


class TestRequestBodies:
    """Test body encoding."""

    @pytest.mark.unit
    async def test_text_body_sent_as_is(self):
        """String bodies are sent unchanged with the default content type."""
        transport = SequenceTransport()

        async with make_client(transport) as client:
            await client.post(URL, "plain text")

        assert transport.requests[0].content == b"plain text"
        assert transport.sent_headers[0]["Content-Type"] == "text/plain"

    @pytest.mark.unit
    async def test_object_body_encoded_by_serializer(self):
        """Objects are encoded by the serializer registered for the content type."""
        transport = SequenceTransport()

        async with make_client(transport) as client:
            await client.put(URL, Item(id=3, name="thing"), content_type="application/json")

        assert msgspec.json.decode(transport.requests[0].content) == {"id": 3, "name": "thing"}
        assert transport.sent_headers[0]["Content-Type"] == "application/json"

    @pytest.mark.unit
    async def test_object_body_without_serializer(self):
        """Objects without a serializer for the content type are rejected before sending."""
        transport = SequenceTransport()

        async with make_client(transport) as client:
            with pytest.raises(ConfigurationError):
                await client.post(URL, Item(id=3, name="thing"))

        assert transport.call_count == 0

    @pytest.mark.unit
    async def test_no_body_sets_no_content_type(self):
        """Requests without a body carry no Content-Type."""
        transport = SequenceTransport()

        async with make_client(transport) as client:
            await client.delete(URL)

        assert transport.requests[0].method == "DELETE"
        assert "Content-Type" not in transport.sent_headers[0]


class TestAuthentication:
    """Test authentication through the full stack."""

    @pytest.mark.unit
    async def test_digest_challenge_answered(self):
        """A Digest challenge is answered and the request re-sent once."""
        transport = SequenceTransport(
            create_challenge_response('Digest realm="api", nonce="abc123", qop="auth", opaque="xyz"'),
            create_mock_response(200, text='{"id": 1, "name": "secret"}', content_type="application/json"),
        )
        authenticator = DigestAuthenticator("user", "pass", cnonce_factory=lambda: "0a4f113b")

        async with make_client(transport, authentication_pipeline=AuthenticationPipeline(authenticator)) as client:
            response = await client.get(URL, response_type=Item)

        assert response.status_code == 200
        assert response.data == Item(id=1, name="secret")
        assert transport.call_count == 2
        authorization = transport.sent_headers[1]["Authorization"]
        assert authorization.startswith('Digest username="user", realm="api", nonce="abc123", uri="/items/1"')
        assert 'opaque="xyz"' in authorization
        assert 'nc="00000001"' in authorization

    @pytest.mark.unit
    async def test_unanswered_challenge_returns_401(self):
        """Without a matching authenticator the 401 is the result."""
        transport = SequenceTransport(create_challenge_response('Digest realm="api", nonce="abc"'))

        async with make_client(
            transport, authentication_pipeline=AuthenticationPipeline(BasicAuthenticator("u", "p"))
        ) as client:
            response = await client.get(URL)

        assert response.status_code == 401
        assert transport.call_count == 1


class TestTimeoutsAndCancellation:
    """Test deadlines and client-wide cancellation."""

    @pytest.mark.unit
    async def test_explicit_timeout(self):
        """A request exceeding its timeout raises RequestTimeoutError."""
        async with make_client(SequenceTransport(delay=5)) as client:
            with pytest.raises(RequestTimeoutError):
                await client.get(URL, timeout=0.05)

    @pytest.mark.unit
    async def test_none_timeout_uses_client_default(self):
        """Passing None applies the client's default timeout."""
        async with make_client(SequenceTransport(delay=5), default_timeout=0.05) as client:
            with pytest.raises(RequestTimeoutError):
                await client.get(URL, timeout=None)

    @pytest.mark.unit
    async def test_verbs_default_to_no_deadline(self):
        """Without a timeout argument the client default does not cut requests short."""
        async with make_client(SequenceTransport(delay=0.1), default_timeout=0.01) as client:
            response = await client.get(URL)

        assert response.status_code == 200
        assert DEFAULT_TIMEOUT == 100.0

    @pytest.mark.unit
    async def test_cancel_pending(self):
        """cancel_pending aborts in-flight requests with RequestCancelledError."""
        async with make_client(SequenceTransport(delay=5)) as client:
            tasks = [asyncio.create_task(client.get(URL)) for _ in range(2)]
            await asyncio.sleep(0.01)

            assert client.cancel_pending() == 2

            for task in tasks:
                with pytest.raises(RequestCancelledError):
                    await task

    @pytest.mark.unit
    async def test_cancel_pending_without_requests(self):
        """Nothing to cancel returns zero."""
        async with make_client(SequenceTransport()) as client:
            assert client.cancel_pending() == 0

    @pytest.mark.unit
    async def test_caller_cancellation_propagates(self):
        """Cancelling the calling task raises CancelledError, not RequestCancelledError."""
        async with make_client(SequenceTransport(delay=5)) as client:
            task = asyncio.create_task(client.get(URL))
            await asyncio.sleep(0.01)
            task.cancel()

            with pytest.raises(asyncio.CancelledError):
                await task


class TestCookies:
    """Test cookie handling."""

    @pytest.mark.unit
    async def test_initial_cookies_sent(self):
        """Cookies passed at construction are sent with requests."""
        transport = SequenceTransport()

        async with make_client(transport, cookies={"session": "abc"}) as client:
            await client.get(URL)

        assert transport.sent_headers[0]["Cookie"] == "session=abc"

    @pytest.mark.unit
    async def test_response_cookies_stored(self):
        """Set-Cookie headers populate the client's jar."""
        transport = SequenceTransport(create_mock_response(200, headers=[("Set-Cookie", "token=xyz; Path=/")]))

        async with make_client(transport) as client:
            await client.get(URL)

            assert client.cookies["token"] == "xyz"
