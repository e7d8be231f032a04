"""Tag backend type definitions.

Kept apart from the mutagen implementation so that callers and tests can
work against the protocols without importing a concrete backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Protocol

from tagsimple.core.values import PropertyMap, Text, ValueMap


class ReadStyle(Enum):
    FAST = "fast"
    AVERAGE = "average"
    ACCURATE = "accurate"

    @classmethod
    def parse(cls, value: Any) -> "ReadStyle":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"read style must be a string, received {type(value).__name__}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise ValueError(f"unknown read style {value!r}, expected one of {choices}") from None


@dataclass(frozen=True, slots=True)
class AudioInfo:
    length_in_milliseconds: int = 0
    bitrate: int = 0
    sample_rate: int = 0
    channels: int = 0


class MetadataTag(Protocol):
    title: Text
    artist: Text
    album: Text
    genre: Text
    comment: Text
    year: int
    track: int


class MetadataFile(Protocol):
    name: str
    file_type: str
    tag_type: str
    supports_complex_properties: bool

    def read_only(self) -> bool: ...

    def tag(self) -> MetadataTag: ...

    def audio_properties(self) -> Optional[AudioInfo]: ...

    def properties(self) -> PropertyMap: ...

    def set_properties(self, properties: PropertyMap) -> PropertyMap: ...

    def complex_property_keys(self) -> List[str]: ...

    def complex_properties(self, key: str) -> List[ValueMap]: ...

    def set_complex_properties(self, key: str, records: List[ValueMap]) -> bool: ...

    def save(self) -> bool: ...
