"""Content serialization for request and response bodies.

A ``SerializerPipeline`` maps response content types to serializers; the
pipeline transport records which one matched so the orchestrator can decode
the body into the caller's type.

Example:
    ```python
    from rest_client_core.serializers import JsonSerializer, SerializerPipeline

    pipeline = SerializerPipeline({"application/json": JsonSerializer()})
    ```
"""

from rest_client_core.serializers.base import Serializer
from rest_client_core.serializers.json_serializer import JsonSerializer
from rest_client_core.serializers.pipeline import SerializerPipeline
from rest_client_core.serializers.xml_serializer import XmlSerializer

__all__ = [
    "JsonSerializer",
    "Serializer",
    "SerializerPipeline",
    "XmlSerializer",
]
