"""In-memory stand-in for the mutagen backend used by the facade tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from tagsimple.backend import AudioInfo, PropertyTag
from tagsimple.core.fileref import FileRef
from tagsimple.core.media_file import MediaFile
from tagsimple.core.values import PropertyMap, ValueMap


class FakeMetadataFile:
    supports_complex_properties = True
    file_type = "FakeFile"
    tag_type = "Fake"

    def __init__(
        self,
        name: str,
        properties: Optional[Dict[str, List[str]]] = None,
        complex_properties: Optional[Dict[str, List[ValueMap]]] = None,
        audio: Optional[AudioInfo] = None,
        read_only: bool = False,
    ) -> None:
        self.name = name
        self.read_audio_properties = False
        self.saved = 0
        self.unsupported: List[str] = []
        self._properties = PropertyMap(properties or {})
        self._complex: Dict[str, List[ValueMap]] = dict(complex_properties or {})
        self._audio = audio or AudioInfo(length_in_milliseconds=183_000, bitrate=320, sample_rate=44100, channels=2)
        self._read_only = read_only
        self._tag = PropertyTag(self)

    def read_only(self) -> bool:
        return self._read_only

    def tag(self) -> PropertyTag:
        return self._tag

    def audio_properties(self) -> Optional[AudioInfo]:
        return self._audio if self.read_audio_properties else None

    def properties(self) -> PropertyMap:
        return PropertyMap(self._properties)

    def set_properties(self, properties: PropertyMap) -> PropertyMap:
        accepted = PropertyMap()
        rejected = PropertyMap()
        for key, values in properties.items():
            if key in self.unsupported:
                rejected.replace(key, values)
            else:
                accepted.replace(key, values)
        self._properties = accepted
        return rejected

    def complex_property_keys(self) -> List[str]:
        return [key for key, records in self._complex.items() if records]

    def complex_properties(self, key: str) -> List[ValueMap]:
        return list(self._complex.get(key, []))

    def set_complex_properties(self, key: str, records: List[ValueMap]) -> bool:
        self._complex[key] = list(records)
        return True

    def save(self) -> bool:
        self.saved += 1
        return True


class FakeLibrary:
    """Files registered by name; anything else fails to parse."""

    def __init__(self) -> None:
        self.files: Dict[str, FakeMetadataFile] = {}
        self.opened: List[Any] = []

    def add(self, name: str, **kwargs: Any) -> FakeMetadataFile:
        file = FakeMetadataFile(name, **kwargs)
        self.files[name] = file
        return file

    def open(self, source: Any, read_audio_properties: bool) -> Optional[FakeMetadataFile]:
        self.opened.append(source)
        name = source if isinstance(source, str) else source.name
        file = self.files.get(name)
        if file is not None:
            file.read_audio_properties = read_audio_properties
        return file

    def file_ref(self, name: str, audio_properties: Any = None) -> FileRef:
        return FileRef(name, audio_properties, opener=self.open)

    def media_file(self, name: str, **init: Any) -> MediaFile:
        audio_properties = init.get("audio_properties")
        if audio_properties is None and init.get("everything"):
            audio_properties = "average"
        return MediaFile(self.file_ref(name, audio_properties), **init)


@pytest.fixture
def library() -> FakeLibrary:
    return FakeLibrary()


@pytest.fixture
def song(library: FakeLibrary) -> FakeMetadataFile:
    return library.add(
        "song.mp3",
        properties={
            "TITLE": ["Song"],
            "ARTIST": ["Someone", "Someone Else"],
            "DATE": ["2024-05-01"],
            "TRACKNUMBER": ["3/12"],
            "COMPOSER": ["Writer"],
            "MUSICBRAINZ_ALBUMID": ["abc-123"],
        },
    )
