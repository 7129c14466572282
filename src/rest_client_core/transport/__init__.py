"""Transport layers forming the request pipeline.

Each layer wraps another ``httpx.AsyncBaseTransport`` and delegates
``handle_async_request`` to it. The standard stack is:

    TimeoutTransport -> PipelineTransport -> base transport

Modules:
    timeout: Per-request deadlines, reclassified as RequestTimeoutError
    pipeline: 401 re-authentication and serializer selection
    factory: Composition helpers

Example:
    ```python
    from rest_client_core.transport import create_transport_stack

    transport = create_transport_stack(default_timeout=30.0)

    async with httpx.AsyncClient(transport=transport, timeout=None) as client:
        ...
    ```
"""

from rest_client_core.transport.factory import TransportLayer, compose_transports, create_transport_stack
from rest_client_core.transport.pipeline import PipelineTransport
from rest_client_core.transport.timeout import TimeoutTransport

__all__ = [
    "PipelineTransport",
    "TimeoutTransport",
    "TransportLayer",
    "compose_transports",
    "create_transport_stack",
]
