"""Owner of one parsed tag-library handle."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from tagsimple.backend import MetadataFile, ReadStyle, open_file
from tagsimple.core.convert import (
    Marshaller,
    complex_property_to_dynamic,
    key_to_str,
    property_map_to_dynamic,
)
from tagsimple.core.errors import InvalidHandleError, UnsupportedFeatureError, UnsupportedInputError
from tagsimple.core.projections import merge_complex_properties, merge_properties, merge_tag_properties
from tagsimple.core.records import AudioProperties, AudioTag
from tagsimple.core.stream import StreamAdapter
from tagsimple.core.values import PropertyMap

logger = logging.getLogger(__name__)

Opener = Callable[[Any, bool], Optional[MetadataFile]]


def parse_read_style(value: Any) -> Optional[ReadStyle]:
    """None or False skip audio properties; True reads them at average accuracy."""

    if value is None or value is False:
        return None
    if value is True:
        return ReadStyle.AVERAGE
    return ReadStyle.parse(value)


class FileRef:
    """A path or stream opened with the tag library.

    Streams are wrapped in a `StreamAdapter` and stay owned by the caller:
    `close()` releases the handle and the adapter but never closes the
    stream itself. Once closed, or when the input could not be parsed,
    every operation except `valid`, `close()` and the string forms raises
    `InvalidHandleError`.
    """

    def __init__(
        self,
        file: Any,
        audio_properties: Any = None,
        *,
        marshaller: Optional[Marshaller] = None,
        opener: Optional[Opener] = None,
    ) -> None:
        self.read_style = parse_read_style(audio_properties)
        self._marshaller = marshaller or Marshaller(AudioTag, AudioProperties)
        opener = opener or open_file
        read_audio_properties = self.read_style is not None
        self._stream: Optional[StreamAdapter] = None
        self._file: Optional[MetadataFile] = None

        if StreamAdapter.is_stream(file):
            self._stream = StreamAdapter(file)
            self._file = opener(self._stream, read_audio_properties)
            if self._file is None:
                self._stream.close()
                self._stream = None
        elif isinstance(file, (str, bytes, os.PathLike)):
            path = os.fsdecode(file)
            if path:
                self._file = opener(path, read_audio_properties)
        else:
            raise UnsupportedInputError(f"expects a path or a stream, got {type(file).__name__}")

    def __enter__(self) -> "FileRef":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __str__(self) -> str:
        if self._file is None:
            return "FileRef [valid=false]"
        return f"FileRef [io={self._file.name}]"

    def __repr__(self) -> str:
        if self._file is None:
            return "FileRef [valid=false]"
        return f"FileRef [io={self._file.name!r}, file_type={self._file.file_type}, tag_type={self._file.tag_type}]"

    @property
    def valid(self) -> bool:
        return self._file is not None

    @property
    def read_only(self) -> bool:
        return self._handle().read_only()

    def close(self) -> None:
        self._file = None
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def audio_properties(self) -> Optional[AudioProperties]:
        info = self._handle().audio_properties()
        if info is None:
            return None
        return self._marshaller.audio_properties_record(info)

    def tag(self) -> AudioTag:
        return self._marshaller.tag_record(self._handle().tag())

    def merge_tag_properties(self, updates: Any) -> None:
        """Assign tag fields from a mapping or an `AudioTag`.

        Not atomic: fields before an unknown key stay assigned.
        """

        merge_tag_properties(self._handle().tag(), updates)

    def properties(self) -> Dict[str, List[str]]:
        return property_map_to_dynamic(self._handle().properties())

    def merge_properties(self, updates: Mapping, replace_all: bool = False) -> None:
        handle = self._handle()
        current = PropertyMap() if replace_all else handle.properties()
        handle.set_properties(merge_properties(current, updates, replace_all))

    def complex_property_keys(self) -> List[str]:
        handle = self._handle()
        if not handle.supports_complex_properties:
            return []
        return list(handle.complex_property_keys())

    def complex_property(self, key: Any) -> List[Dict[str, Any]]:
        handle = self._handle()
        if not handle.supports_complex_properties:
            raise UnsupportedFeatureError("complex properties are not available in this tag library")
        return complex_property_to_dynamic(handle.complex_properties(key_to_str(key)))

    def merge_complex_properties(self, updates: Mapping, replace_all: bool = False) -> None:
        handle = self._handle()
        if not handle.supports_complex_properties:
            if updates:
                raise UnsupportedFeatureError("complex properties are not available in this tag library")
            return
        current_keys = handle.complex_property_keys() if replace_all else []
        for key, records in merge_complex_properties(current_keys, updates, replace_all).items():
            handle.set_complex_properties(key, records)

    def save(self) -> bool:
        handle = self._handle()
        if handle.read_only():
            logger.warning("Cannot save read-only file %s", handle.name)
            return False
        return handle.save()

    def _handle(self) -> MetadataFile:
        if self._file is None:
            raise InvalidHandleError("FileRef is closed or invalid")
        return self._file
