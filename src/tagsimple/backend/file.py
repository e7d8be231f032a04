"""Metadata file handle backed by mutagen."""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Union

from mutagen import FileType, MutagenError
from mutagen._vorbis import VCommentDict
from mutagen.apev2 import APEv2
from mutagen.flac import FLAC
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Tags

from tagsimple.backend.ape import APEDialect
from tagsimple.backend.dialect import TagDialect
from tagsimple.backend.id3 import ID3Dialect
from tagsimple.backend.mp4 import MP4Dialect
from tagsimple.backend.pictures import PICTURE_KEY, PictureFields
from tagsimple.backend.tag import PropertyTag
from tagsimple.backend.types import AudioInfo
from tagsimple.backend.vorbis import VorbisDialect
from tagsimple.core.stream import StreamAdapter
from tagsimple.core.values import PropertyMap, ValueMap

logger = logging.getLogger(__name__)

Source = Union[str, StreamAdapter]


def dialect_for(tags: Any, audio: Any = None) -> TagDialect:
    if isinstance(tags, VCommentDict) or isinstance(audio, FLAC):
        return VorbisDialect()
    if isinstance(tags, APEv2):
        return APEDialect()
    if isinstance(tags, ID3):
        return ID3Dialect()
    if isinstance(tags, MP4Tags):
        return MP4Dialect()
    return TagDialect()


def audio_info_from_stream(info: Any) -> AudioInfo:
    length = getattr(info, "length", 0) or 0
    bitrate = getattr(info, "bitrate", 0) or 0
    return AudioInfo(
        length_in_milliseconds=int(round(length * 1000)),
        bitrate=int(round(bitrate / 1000)),
        sample_rate=int(getattr(info, "sample_rate", 0) or 0),
        channels=int(getattr(info, "channels", 0) or 0),
    )


class MutagenMetadataFile:
    """A parsed file: mutagen's `FileType`, or a bare APEv2 tag when mutagen
    did not recognise the container."""

    supports_complex_properties = True

    def __init__(
        self,
        source: Source,
        audio: Optional[FileType] = None,
        *,
        standalone_tags: Optional[APEv2] = None,
        read_audio_properties: bool = True,
    ) -> None:
        self._source = source
        self._audio = audio
        self._standalone_tags = standalone_tags
        self._read_audio_properties = read_audio_properties
        self.name = source if isinstance(source, str) else source.name
        self.file_type = type(audio).__name__ if audio is not None else "APEv2"
        if isinstance(source, StreamAdapter):
            self._read_only = source.read_only()
        else:
            self._read_only = not os.access(source, os.W_OK)
        self._tag = PropertyTag(self)

    def __repr__(self) -> str:
        return f"<MutagenMetadataFile {self.file_type} {self.name!r}>"

    @property
    def tags(self) -> Any:
        if self._audio is not None:
            return self._audio.tags
        return self._standalone_tags

    @property
    def tag_type(self) -> str:
        tags = self.tags
        return dialect_for(tags).name if tags is not None else "None"

    def read_only(self) -> bool:
        return self._read_only

    def tag(self) -> PropertyTag:
        return self._tag

    def audio_properties(self) -> Optional[AudioInfo]:
        if not self._read_audio_properties:
            return None
        if self._audio is None:
            return AudioInfo()
        return audio_info_from_stream(self._audio.info)

    def properties(self) -> PropertyMap:
        tags = self.tags
        if tags is None:
            return PropertyMap()
        return dialect_for(tags).read(tags)

    def set_properties(self, properties: PropertyMap) -> PropertyMap:
        tags = self._writable_tags()
        if tags is None:
            unsupported = PropertyMap(properties)
        else:
            unsupported = dialect_for(tags).write(tags, properties)
        if unsupported:
            logger.warning("Unsupported properties for %s: %s", self.name, ", ".join(unsupported))
        return unsupported

    def complex_property_keys(self) -> List[str]:
        if self._pictures():
            return [PICTURE_KEY]
        return []

    def complex_properties(self, key: str) -> List[ValueMap]:
        if key.upper() != PICTURE_KEY:
            return []
        return [picture.to_value_map() for picture in self._pictures()]

    def set_complex_properties(self, key: str, records: List[ValueMap]) -> bool:
        if key.upper() != PICTURE_KEY:
            logger.warning("Complex property %s is not supported for %s", key, self.name)
            return False
        pictures = [picture for picture in map(PictureFields.from_value_map, records) if picture is not None]
        tags = self._writable_tags()
        if not dialect_for(tags, self._audio).set_pictures(self._audio, tags, pictures):
            logger.warning("Pictures are not supported for %s", self.name)
            return False
        return True

    def save(self) -> bool:
        if self._read_only:
            logger.warning("Not saving read-only file %s", self.name)
            return False
        try:
            if self._audio is not None:
                self._audio.save(self._source)
            else:
                self._standalone_tags.save(self._source)
        except MutagenError as exc:
            logger.warning("Failed to save tags for %s: %s", self.name, exc)
            return False
        return True

    def _pictures(self) -> List[PictureFields]:
        tags = self.tags
        if tags is None and self._audio is None:
            return []
        return dialect_for(tags, self._audio).pictures(self._audio, tags)

    def _writable_tags(self) -> Any:
        tags = self.tags
        if tags is None and self._audio is not None:
            try:
                self._audio.add_tags()
            except (MutagenError, NotImplementedError) as exc:
                logger.warning("Cannot add tags to %s: %s", self.name, exc)
                return None
            tags = self._audio.tags
        return tags
