"""Content-type keyed serializer registry."""

from collections.abc import Iterable, Iterator, Mapping

from rest_client_core.errors.exceptions import ConfigurationError
from rest_client_core.serializers.base import Serializer
from rest_client_core.serializers.json_serializer import JsonSerializer
from rest_client_core.serializers.xml_serializer import XmlSerializer


class SerializerPipeline:
    """Maps content-type strings to serializers.

    Keys match exactly but case-insensitively: ``application/json`` is found
    under ``Application/JSON``, while ``application/json; charset=utf-8`` is a
    different key. Iterating yields ``(content_type, serializer)`` pairs in
    registration order.

    Args:
        serializers: A mapping or an iterable of ``(content_type, serializer)`` pairs.

    Raises:
        ConfigurationError: If two keys differ only by case, or a value is not a
            Serializer. Nothing is registered in that case.

    Example:
        ```python
        pipeline = SerializerPipeline(
            [
                ("application/json", JsonSerializer()),
                ("application/vnd.acme+xml", XmlSerializer()),
            ]
        )
        pipeline.get("Application/JSON")  # JsonSerializer()
        ```
    """

    def __init__(self, serializers: Mapping[str, Serializer] | Iterable[tuple[str, Serializer]] = ()):
        pairs = serializers.items() if isinstance(serializers, Mapping) else serializers

        registry: dict[str, tuple[str, Serializer]] = {}
        for content_type, serializer in pairs:
            if not isinstance(serializer, Serializer):
                raise ConfigurationError(f"Serializer for '{content_type}' must be a Serializer, got {serializer!r}")

            key = content_type.lower()
            if key in registry:
                raise ConfigurationError(
                    f"Duplicate serializer content type '{content_type}' "
                    f"(already registered as '{registry[key][0]}')"
                )
            registry[key] = (content_type, serializer)

        self._serializers = registry

    @classmethod
    def default(cls) -> "SerializerPipeline":
        """JSON under ``application/json`` and ``text/json``; XML under ``application/xml`` and ``text/xml``."""
        json_serializer = JsonSerializer()
        xml_serializer = XmlSerializer()
        return cls(
            [
                ("application/json", json_serializer),
                ("text/json", json_serializer),
                ("application/xml", xml_serializer),
                ("text/xml", xml_serializer),
            ]
        )

    def get(self, content_type: str) -> Serializer | None:
        """Return the serializer registered under ``content_type``, or None."""
        entry = self._serializers.get(content_type.lower())
        return entry[1] if entry is not None else None

    def __getitem__(self, content_type: str) -> Serializer:
        serializer = self.get(content_type)
        if serializer is None:
            raise KeyError(content_type)
        return serializer

    def __contains__(self, content_type: object) -> bool:
        return isinstance(content_type, str) and content_type.lower() in self._serializers

    def __iter__(self) -> Iterator[tuple[str, Serializer]]:
        return iter(self._serializers.values())

    def __len__(self) -> int:
        return len(self._serializers)

    def __repr__(self) -> str:
        entries = ", ".join(f"{content_type!r}: {serializer!r}" for content_type, serializer in self)
        return f"SerializerPipeline({{{entries}}})"
