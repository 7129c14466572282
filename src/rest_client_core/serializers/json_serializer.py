"""JSON serialization backed by msgspec."""

from typing import Any, TypeVar

import msgspec

from rest_client_core.errors.exceptions import DeserializationError
from rest_client_core.serializers.base import Serializer

T = TypeVar("T")


class JsonSerializer(Serializer):
    """Maps msgspec Structs, dataclasses and builtin values to and from UTF-8 JSON text.

    Field names are written as declared (or as renamed on the Struct); None
    becomes ``null``.

    Example:
        ```python
        class Item(msgspec.Struct):
            id: int
            name: str

        serializer = JsonSerializer()
        serializer.encode(Item(id=1, name="pen"))  # '{"id":1,"name":"pen"}'
        serializer.decode('{"id":1,"name":"pen"}', Item)  # Item(id=1, name='pen')
        ```
    """

    def encode(self, value: Any) -> str:
        return msgspec.json.encode(value).decode("utf-8")

    def decode(self, data: str, target_type: type[T] = Any) -> T:
        try:
            return msgspec.json.decode(data, type=target_type)
        except msgspec.DecodeError as e:
            raise DeserializationError(
                f"Failed to decode JSON into {getattr(target_type, '__name__', target_type)}: {e}",
                content=data,
                target_type=target_type,
            ) from e
