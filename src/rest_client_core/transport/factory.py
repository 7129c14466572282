"""Composition of transport layers into a single call chain."""

from collections.abc import Callable, Iterable

import httpx

from rest_client_core.options import DEFAULT_TIMEOUT
from rest_client_core.transport.pipeline import PipelineTransport
from rest_client_core.transport.timeout import TimeoutTransport

# Builds a layer around the transport it wraps
TransportLayer = Callable[[httpx.AsyncBaseTransport], httpx.AsyncBaseTransport]


def compose_transports(
    base_transport: httpx.AsyncBaseTransport, layers: Iterable[TransportLayer]
) -> httpx.AsyncBaseTransport:
    """Wrap ``base_transport`` in ``layers``, the first layer outermost.

    Example:
        ```python
        transport = compose_transports(
            httpx.AsyncHTTPTransport(),
            [
                lambda inner: TimeoutTransport(wrapped_transport=inner),
                lambda inner: PipelineTransport(wrapped_transport=inner),
            ],
        )
        # TimeoutTransport -> PipelineTransport -> AsyncHTTPTransport
        ```
    """
    transport = base_transport
    for layer in reversed(list(layers)):
        transport = layer(transport)
    return transport


def create_transport_stack(
    base_transport: httpx.AsyncBaseTransport | None = None,
    *,
    default_timeout: float = DEFAULT_TIMEOUT,
    interceptors: Iterable[TransportLayer] = (),
) -> httpx.AsyncBaseTransport:
    """Build the standard chain: interceptors -> timeout -> pipeline -> base transport.

    Args:
        base_transport: Transport performing the network exchange. Defaults to
            ``httpx.AsyncHTTPTransport()``.
        default_timeout: Deadline for requests without an explicit timeout.
        interceptors: Extra layers placed outside the timeout layer, outermost first.

    Returns:
        The outermost transport.
    """
    if base_transport is None:
        base_transport = httpx.AsyncHTTPTransport()

    layers = [
        *interceptors,
        lambda inner: TimeoutTransport(wrapped_transport=inner, default_timeout=default_timeout),
        lambda inner: PipelineTransport(wrapped_transport=inner),
    ]
    return compose_transports(base_transport, layers)
