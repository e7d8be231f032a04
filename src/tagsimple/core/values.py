"""Typed value model shared with the tag library.

`Value` is a tagged union mirroring the variant type of the tag library:
booleans, integers of two widths and signedness, text, raw bytes, lists of
those and string-keyed maps. `PropertyMap` and `ComplexPropertyList` are
the two structured projections built on top of it.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple


class StringType(Enum):
    """Encoding hint carried by text values; values are Python codec names."""

    LATIN1 = "latin-1"
    UTF16 = "utf-16"
    UTF16BE = "utf-16-be"
    UTF8 = "utf-8"
    UTF16LE = "utf-16-le"


@dataclass(frozen=True, slots=True)
class Text:
    """A piece of text plus the encoding the library should prefer for it.

    Equality only looks at the content; the hint is advisory.
    """

    content: str
    encoding: StringType = field(default=StringType.UTF8, compare=False)

    def __str__(self) -> str:
        return self.content

    def __len__(self) -> int:
        return len(self.content)

    def to_bytes(self) -> bytes:
        return self.content.encode(self.encoding.value)

    @classmethod
    def from_bytes(cls, data: bytes, encoding: StringType = StringType.UTF8) -> "Text":
        return cls(bytes(data).decode(encoding.value), encoding)


class ValueType(Enum):
    EMPTY = "empty"
    BOOL = "bool"
    INT32 = "int32"
    UINT32 = "uint32"
    INT64 = "int64"
    UINT64 = "uint64"
    TEXT = "text"
    BYTES = "bytes"
    TEXT_LIST = "text_list"
    BYTES_LIST = "bytes_list"
    VALUE_LIST = "value_list"
    VALUE_MAP = "value_map"


INTEGER_TYPES = frozenset({ValueType.INT32, ValueType.UINT32, ValueType.INT64, ValueType.UINT64})

INTEGER_RANGES: Dict[ValueType, Tuple[int, int]] = {
    ValueType.INT32: (-(2**31), 2**31 - 1),
    ValueType.UINT32: (0, 2**32 - 1),
    ValueType.INT64: (-(2**63), 2**63 - 1),
    ValueType.UINT64: (0, 2**64 - 1),
}


@dataclass(frozen=True, slots=True)
class Value:
    """One typed metadata value.

    Build instances with the class constructors (`Value.text`,
    `Value.int64`, ...) rather than directly so that payloads are
    normalized: lists become tuples, text becomes `Text`, maps keep their
    insertion order.
    """

    type: ValueType = ValueType.EMPTY
    data: Any = None

    @classmethod
    def empty(cls) -> "Value":
        return cls()

    @classmethod
    def boolean(cls, flag: bool) -> "Value":
        return cls(ValueType.BOOL, bool(flag))

    @classmethod
    def integer(cls, number: int, value_type: ValueType = ValueType.INT64) -> "Value":
        if value_type not in INTEGER_TYPES:
            raise ValueError(f"{value_type} is not an integer type")
        low, high = INTEGER_RANGES[value_type]
        if not low <= number <= high:
            raise OverflowError(f"{number} does not fit in {value_type.value}")
        return cls(value_type, int(number))

    @classmethod
    def int32(cls, number: int) -> "Value":
        return cls.integer(number, ValueType.INT32)

    @classmethod
    def uint32(cls, number: int) -> "Value":
        return cls.integer(number, ValueType.UINT32)

    @classmethod
    def int64(cls, number: int) -> "Value":
        return cls.integer(number, ValueType.INT64)

    @classmethod
    def uint64(cls, number: int) -> "Value":
        return cls.integer(number, ValueType.UINT64)

    @classmethod
    def text(cls, content: "str | Text", encoding: StringType = StringType.UTF8) -> "Value":
        if not isinstance(content, Text):
            content = Text(content, encoding)
        return cls(ValueType.TEXT, content)

    @classmethod
    def binary(cls, data: bytes) -> "Value":
        return cls(ValueType.BYTES, bytes(data))

    @classmethod
    def text_list(cls, items: Iterable["str | Text"]) -> "Value":
        return cls(ValueType.TEXT_LIST, tuple(item if isinstance(item, Text) else Text(item) for item in items))

    @classmethod
    def bytes_list(cls, items: Iterable[bytes]) -> "Value":
        return cls(ValueType.BYTES_LIST, tuple(bytes(item) for item in items))

    @classmethod
    def value_list(cls, items: Iterable["Value"]) -> "Value":
        return cls(ValueType.VALUE_LIST, tuple(items))

    @classmethod
    def value_map(cls, mapping: Mapping[str, "Value"]) -> "Value":
        return cls(ValueType.VALUE_MAP, dict(mapping))

    @property
    def is_empty(self) -> bool:
        return self.type is ValueType.EMPTY


ValueMap = Dict[str, Value]
ComplexPropertyList = Dict[str, List[ValueMap]]


class PropertyMap(MutableMapping):
    """Simple string-keyed properties, each key holding a list of `Text`.

    Keys are stored upper-cased, the way the tag library names them.
    A key whose list is empty is only dropped by `remove_empty`, so callers
    merging several updates decide when empties are pruned.
    """

    def __init__(self, items: Optional[Mapping[str, Iterable[Any]]] = None) -> None:
        self._entries: Dict[str, List[Text]] = {}
        if items:
            for key, values in items.items():
                self.replace(key, values)

    @staticmethod
    def normalize_key(key: str) -> str:
        return key.upper()

    def __getitem__(self, key: str) -> List[Text]:
        return self._entries[self.normalize_key(key)]

    def __setitem__(self, key: str, values: Iterable[Any]) -> None:
        self.replace(key, values)

    def __delitem__(self, key: str) -> None:
        del self._entries[self.normalize_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PropertyMap({self.to_strings()!r})"

    def replace(self, key: str, values: Iterable[Any]) -> None:
        """Replace every value of `key`."""

        self._entries[self.normalize_key(key)] = [_as_text(value) for value in values]

    def insert(self, key: str, values: Iterable[Any]) -> None:
        """Append values to `key`, creating it when missing."""

        self._entries.setdefault(self.normalize_key(key), []).extend(_as_text(value) for value in values)

    def remove_empty(self) -> None:
        for key in [key for key, values in self._entries.items() if not values]:
            del self._entries[key]

    def to_strings(self) -> Dict[str, List[str]]:
        return {key: [text.content for text in values] for key, values in self._entries.items()}


def _as_text(value: Any) -> Text:
    if isinstance(value, Text):
        return value
    if isinstance(value, str):
        return Text(value)
    raise TypeError(f"property values must be text, received {type(value).__name__}")
