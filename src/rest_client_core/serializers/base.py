"""Serializer capability."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

T = TypeVar("T")


class Serializer(ABC):
    """Encodes values to text and decodes text back into typed values."""

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Encode ``value`` as a text document."""

    @abstractmethod
    def decode(self, data: str, target_type: type[T] = Any) -> T:
        """Decode ``data`` into an instance of ``target_type``.

        Raises:
            DeserializationError: If ``data`` is malformed or does not fit ``target_type``.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
