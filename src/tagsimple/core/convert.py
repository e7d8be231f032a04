"""Conversion between typed `Value`s and plain Python values.

Typed to plain is total and lossless apart from integer width. Plain to
typed favours a lossy result over raising: shapes it does not recognise
become `Value.empty()`.

Sequences are typed by their first element only. A list starting with
bytes becomes a bytes list and a list starting with text becomes a text
list, whatever follows; callers must keep such lists homogeneous.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from tagsimple.core.dynamic import DynamicKind, EncodedText, TextEncoding, classify, text_encoding
from tagsimple.core.records import TAG_NUMBER_FIELDS, TAG_TEXT_FIELDS
from tagsimple.core.values import (
    INTEGER_RANGES,
    INTEGER_TYPES,
    StringType,
    Text,
    Value,
    ValueMap,
    ValueType,
)

logger = logging.getLogger(__name__)

UINT_MAX = 2**32 - 1

_HINT_FOR_ENCODING = {
    TextEncoding.LATIN1: StringType.LATIN1,
    TextEncoding.UTF16LE: StringType.UTF16LE,
    TextEncoding.UTF16BE: StringType.UTF16BE,
    TextEncoding.UTF16: StringType.UTF16,
}


# typed -> plain


def to_dynamic(value: Value) -> Any:
    kind = value.type
    if kind is ValueType.EMPTY:
        return None
    if kind is ValueType.BOOL:
        return bool(value.data)
    if kind in INTEGER_TYPES:
        return int(value.data)
    if kind is ValueType.TEXT:
        return value.data.content
    if kind is ValueType.BYTES:
        return bytes(value.data)
    if kind is ValueType.TEXT_LIST:
        return [item.content for item in value.data]
    if kind is ValueType.BYTES_LIST:
        return [bytes(item) for item in value.data]
    if kind is ValueType.VALUE_LIST:
        return [to_dynamic(item) for item in value.data]
    if kind is ValueType.VALUE_MAP:
        return value_map_to_dynamic(value.data)
    return None


def value_map_to_dynamic(mapping: ValueMap) -> Dict[str, Any]:
    return {key: to_dynamic(item) for key, item in mapping.items()}


def complex_property_to_dynamic(records: List[ValueMap]) -> List[Dict[str, Any]]:
    return [value_map_to_dynamic(record) for record in records]


def property_map_to_dynamic(properties: Mapping[str, List[Text]]) -> Dict[str, List[str]]:
    return {key: [text.content for text in values] for key, values in properties.items()}


def text_to_optional(text: Text) -> Optional[str]:
    """Empty text reads as a missing field."""

    return text.content if len(text) else None


def uint_to_optional(number: int) -> Optional[int]:
    """Zero reads as a missing field."""

    return number or None


# plain -> typed


def to_text(value: Any) -> Text:
    """Convert a scalar text value, transcoding where the library cannot."""

    encoding = text_encoding(value)
    if isinstance(value, str):
        return Text(value, StringType.UTF8)
    if encoding is TextEncoding.BINARY:
        raw = value.data if isinstance(value, EncodedText) else bytes(value)
        return Text(raw.decode("utf-8", errors="replace"), StringType.UTF8)
    content = value.decode()
    return Text(content, _HINT_FOR_ENCODING.get(encoding, StringType.UTF8))


def to_bytes(value: Any) -> bytes:
    if isinstance(value, EncodedText):
        return value.data
    if text_encoding(value) is TextEncoding.UTF8:
        return value.encode("utf-8")
    return bytes(value)


def to_text_list(value: Any) -> List[Text]:
    """Convert a property value: a list of text, a single text or None."""

    if value is None:
        return []
    if classify(value) is DynamicKind.SEQUENCE:
        return [to_text(item) for item in value]
    return [to_text(value)]


def optional_to_text(value: Any) -> Text:
    """None becomes the empty text the library uses for a missing field."""

    if value is None:
        return Text("")
    return to_text(value)


def optional_to_uint(value: Any) -> int:
    """None becomes 0, the library's missing number."""

    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, received {type(value).__name__}")
    if not 0 <= value <= UINT_MAX:
        raise OverflowError(f"{value} is out of range for an unsigned 32-bit field")
    return value


def key_to_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode("utf-8", errors="replace")
    if isinstance(key, Enum):
        return key.value if isinstance(key.value, str) else key.name
    return str(key)


def to_value(value: Any, shape: Optional[ValueType] = None) -> Value:
    """Convert a plain value.

    `shape` only narrows integers; by default they become signed 64-bit.
    """

    kind = classify(value)
    if kind is DynamicKind.NIL:
        return Value.empty()
    if kind is DynamicKind.BOOL:
        return Value.boolean(value)
    if kind is DynamicKind.INTEGER:
        return _integer_value(value, shape)
    if kind is DynamicKind.BINARY:
        return Value.binary(to_bytes(value))
    if kind is DynamicKind.TEXT:
        return Value.text(to_text(value))
    if kind is DynamicKind.SEQUENCE:
        return _sequence_value(value)
    if kind is DynamicKind.MAPPING:
        return Value.value_map(to_value_map(value))
    logger.debug("Dropping unsupported value of type %s", type(value).__name__)
    return Value.empty()


def to_value_map(mapping: Mapping) -> ValueMap:
    return {key_to_str(key): to_value(item) for key, item in mapping.items()}


def to_complex_property(value: Any) -> List[ValueMap]:
    """Convert a list of mappings; None or an empty list clears the property."""

    if not value:
        return []
    if isinstance(value, Mapping):
        value = [value]
    records: List[ValueMap] = []
    for item in value:
        if not isinstance(item, Mapping):
            raise TypeError(f"complex property entries must be mappings, received {type(item).__name__}")
        records.append(to_value_map(item))
    return records


def _integer_value(number: int, shape: Optional[ValueType]) -> Value:
    if shape in INTEGER_TYPES:
        return Value.integer(number, shape)
    low, high = INTEGER_RANGES[ValueType.INT64]
    if low <= number <= high:
        return Value.int64(number)
    return Value.uint64(number)


def _sequence_value(items: Any) -> Value:
    if not items:
        return Value.empty()
    first = classify(items[0])
    if first is DynamicKind.BINARY:
        return Value.bytes_list(to_bytes(item) for item in items)
    if first is DynamicKind.TEXT:
        return Value.text_list(to_text(item) for item in items)
    return Value.value_list(to_value(item) for item in items)


class Marshaller:
    """Builds caller-facing records from tag-library objects.

    The record constructors are injected so the engine does not look up
    companion types on its own.
    """

    def __init__(
        self,
        tag_factory: Callable[..., Any],
        audio_properties_factory: Callable[..., Any],
    ) -> None:
        self._tag_factory = tag_factory
        self._audio_properties_factory = audio_properties_factory

    def tag_record(self, tag: Any) -> Any:
        values: Dict[str, Any] = {}
        for name in TAG_TEXT_FIELDS:
            values[name] = text_to_optional(getattr(tag, name))
        for name in TAG_NUMBER_FIELDS:
            values[name] = uint_to_optional(getattr(tag, name))
        return self._tag_factory(**values)

    def audio_properties_record(self, info: Any) -> Any:
        return self._audio_properties_factory(
            audio_length=info.length_in_milliseconds,
            bitrate=info.bitrate,
            sample_rate=info.sample_rate,
            channels=info.channels,
        )
