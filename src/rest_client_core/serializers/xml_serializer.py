"""XML serialization for msgspec Structs and dataclasses.

Documents follow the element-per-field layout:

- the root element is named after the record type;
- each non-None field becomes a child element named after the field;
- sequences become a wrapper element holding one child per item, named after
  the item type (``string``, ``int``, ``double``, ``boolean``, the record type
  name, or ``item``);
- scalars are written as element text (booleans as ``true``/``false``).

Decoding walks the target type with ``msgspec.inspect`` to rebuild plain
builtins from the element tree, then lets ``msgspec.convert`` coerce the text
values into the declared field types. Comments, processing instructions and
whitespace between elements are ignored.
"""

import dataclasses
import xml.etree.ElementTree as ET
from functools import lru_cache
from typing import Any, TypeVar

import msgspec
from msgspec import inspect as mi

from rest_client_core.errors.exceptions import DeserializationError
from rest_client_core.serializers.base import Serializer

T = TypeVar("T")

RECORD_TYPES = (mi.StructType, mi.DataclassType)
SEQUENCE_TYPES = (mi.ListType, mi.SetType, mi.FrozenSetType, mi.VarTupleType)

SCALAR_ITEM_TAGS: dict[type, str] = {
    bool: "boolean",
    int: "int",
    float: "double",
    str: "string",
}


@lru_cache(maxsize=None)
def _type_info(target_type: Any) -> mi.Type:
    return mi.type_info(target_type)


def _is_record(value: Any) -> bool:
    return isinstance(value, msgspec.Struct) or (dataclasses.is_dataclass(value) and not isinstance(value, type))


def _item_tag(item: Any) -> str:
    if _is_record(item):
        return type(item).__name__
    return SCALAR_ITEM_TAGS.get(type(item), "item")


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    builtin = msgspec.to_builtins(value)
    if isinstance(builtin, bool):
        return "true" if builtin else "false"
    return str(builtin)


def _to_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if _is_record(value):
        for field in _type_info(type(value)).fields:
            field_value = getattr(value, field.name)
            if field_value is not None:
                element.append(_to_element(field.encode_name, field_value))
    elif isinstance(value, dict):
        for key, item in value.items():
            if item is not None:
                element.append(_to_element(str(key), item))
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            if item is not None:
                element.append(_to_element(_item_tag(item), item))
    else:
        element.text = _scalar_text(value)
    return element


def _untyped(element: ET.Element) -> Any:
    if len(element) == 0:
        return element.text or ""
    return {child.tag: _untyped(child) for child in element}


def _from_element(element: ET.Element, info: mi.Type) -> Any:
    if isinstance(info, mi.UnionType):
        candidates = [t for t in info.types if not isinstance(t, mi.NoneType)]
        if len(element) > 0:
            nested = [t for t in candidates if isinstance(t, RECORD_TYPES + SEQUENCE_TYPES + (mi.DictType,))]
            candidates = nested or candidates
        return _from_element(element, candidates[0]) if candidates else None

    if isinstance(info, RECORD_TYPES):
        fields = {field.encode_name: field for field in info.fields}
        result = {}
        for child in element:
            field = fields.get(child.tag)
            if field is not None:
                result[child.tag] = _from_element(child, field.type)
        return result

    if isinstance(info, SEQUENCE_TYPES):
        return [_from_element(child, info.item_type) for child in element]

    if isinstance(info, mi.TupleType):
        return [_from_element(child, item_type) for child, item_type in zip(element, info.item_types)]

    if isinstance(info, mi.DictType):
        return {child.tag: _from_element(child, info.value_type) for child in element}

    if isinstance(info, mi.AnyType):
        return _untyped(element)

    return element.text or ""


class XmlSerializer(Serializer):
    """Maps msgspec Structs and dataclasses to and from XML documents.

    Output carries no XML declaration, no default namespace and no indentation.

    Example:
        ```python
        class Item(msgspec.Struct):
            id: int
            tags: list[str]

        XmlSerializer().encode(Item(id=1, tags=["a"]))
        # '<Item><id>1</id><tags><string>a</string></tags></Item>'
        ```
    """

    def encode(self, value: Any) -> str:
        if not _is_record(value):
            raise TypeError(f"XML documents need a Struct or dataclass root, got {type(value).__name__}")
        return ET.tostring(_to_element(type(value).__name__, value), encoding="unicode")

    def decode(self, data: str, target_type: type[T] = Any) -> T:
        type_name = getattr(target_type, "__name__", str(target_type))

        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise DeserializationError(
                f"Failed to parse XML for {type_name}: {e}", content=data, target_type=target_type
            ) from e

        info = _type_info(target_type)
        if isinstance(info, RECORD_TYPES) and root.tag != info.cls.__name__:
            raise DeserializationError(
                f"Expected root element <{info.cls.__name__}>, got <{root.tag}>",
                content=data,
                target_type=target_type,
            )

        try:
            return msgspec.convert(_from_element(root, info), type=target_type, strict=False)
        except msgspec.ValidationError as e:
            raise DeserializationError(
                f"XML does not match {type_name}: {e}", content=data, target_type=target_type
            ) from e
