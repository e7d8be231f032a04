"""Classification of plain Python values on the caller side of the bridge."""

from __future__ import annotations

import codecs
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

BINARY_ENCODING_NAMES = frozenset({"binary", "ascii-8bit"})


@dataclass(frozen=True, slots=True)
class EncodedText:
    """Raw text bytes tagged with the encoding they are written in.

    Plain `str` is treated as UTF-8 text and plain `bytes` as opaque binary;
    this wrapper covers everything in between, e.g. UTF-16 text read from a
    legacy source.
    """

    data: bytes
    encoding: str

    def decode(self, errors: str = "strict") -> str:
        return self.data.decode(self.encoding, errors)


class DynamicKind(Enum):
    NIL = "nil"
    BOOL = "bool"
    INTEGER = "integer"
    TEXT = "text"
    BINARY = "binary"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNSUPPORTED = "unsupported"


class TextEncoding(Enum):
    UTF8 = "utf-8"
    BINARY = "binary"
    UTF16LE = "utf-16-le"
    UTF16BE = "utf-16-be"
    UTF16 = "utf-16"
    LATIN1 = "iso8859-1"
    ASCII = "ascii"
    OTHER = "other"


_KNOWN_CODECS = {
    "utf-8": TextEncoding.UTF8,
    "utf-16-le": TextEncoding.UTF16LE,
    "utf-16-be": TextEncoding.UTF16BE,
    "utf-16": TextEncoding.UTF16,
    "iso8859-1": TextEncoding.LATIN1,
    "latin-1": TextEncoding.LATIN1,
    "ascii": TextEncoding.ASCII,
}


def normalize_encoding(name: str) -> TextEncoding:
    """Map an encoding name to the closed set the converters dispatch on."""

    cleaned = name.strip().lower()
    if cleaned in BINARY_ENCODING_NAMES:
        return TextEncoding.BINARY
    try:
        canonical = codecs.lookup(cleaned).name
    except LookupError:
        raise ValueError(f"unknown text encoding {name!r}") from None
    return _KNOWN_CODECS.get(canonical, TextEncoding.OTHER)


def text_encoding(value: Any) -> TextEncoding:
    """Return the encoding tag of a text-like value."""

    if isinstance(value, str):
        return TextEncoding.UTF8
    if isinstance(value, (bytes, bytearray, memoryview)):
        return TextEncoding.BINARY
    if isinstance(value, EncodedText):
        return normalize_encoding(value.encoding)
    raise TypeError(f"expected text, received {type(value).__name__}")


def classify(value: Any) -> DynamicKind:
    if value is None:
        return DynamicKind.NIL
    # bool first: it is also an int
    if isinstance(value, bool):
        return DynamicKind.BOOL
    if isinstance(value, int):
        return DynamicKind.INTEGER
    if isinstance(value, (str, bytes, bytearray, memoryview, EncodedText)):
        if text_encoding(value) is TextEncoding.BINARY:
            return DynamicKind.BINARY
        return DynamicKind.TEXT
    if isinstance(value, (list, tuple)):
        return DynamicKind.SEQUENCE
    if isinstance(value, Mapping):
        return DynamicKind.MAPPING
    return DynamicKind.UNSUPPORTED


def is_text_like(value: Any) -> bool:
    return classify(value) in (DynamicKind.TEXT, DynamicKind.BINARY)
