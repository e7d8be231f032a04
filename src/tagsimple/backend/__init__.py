"""Typed tag library built on mutagen.

Importing the package checks the installed mutagen version.
"""

from __future__ import annotations

import logging
from typing import Optional

import mutagen
from mutagen import MutagenError
from mutagen.apev2 import APEv2

from tagsimple.backend.file import MutagenMetadataFile, Source, dialect_for
from tagsimple.backend.pictures import PICTURE_KEY, PictureFields
from tagsimple.backend.tag import PropertyTag
from tagsimple.backend.types import AudioInfo, MetadataFile, MetadataTag, ReadStyle
from tagsimple.backend.version import (
    COMPILED_VERSION,
    LIBRARY_VERSION,
    MAJOR_VERSION,
    MINOR_VERSION,
    PATCH_VERSION,
    check_library_version,
)
from tagsimple.core.stream import StreamAdapter

logger = logging.getLogger(__name__)

check_library_version()


def open_file(source: Source, read_audio_properties: bool = True) -> Optional[MutagenMetadataFile]:
    """Parse a path or stream; returns None when nothing can be read from it."""

    name = source if isinstance(source, str) else source.name
    if isinstance(source, StreamAdapter):
        source.seek(0)
    try:
        audio = mutagen.File(source)
    except MutagenError as exc:
        logger.warning("Failed to read metadata %s: %s", name, exc)
        return None
    if audio is not None:
        return MutagenMetadataFile(source, audio, read_audio_properties=read_audio_properties)

    if isinstance(source, StreamAdapter):
        source.seek(0)
    try:
        tags = APEv2(source)
    except MutagenError:
        logger.warning("Unsupported file format: %s", name)
        return None
    return MutagenMetadataFile(source, standalone_tags=tags, read_audio_properties=read_audio_properties)


__all__ = [
    "AudioInfo",
    "COMPILED_VERSION",
    "LIBRARY_VERSION",
    "MAJOR_VERSION",
    "MINOR_VERSION",
    "MetadataFile",
    "MetadataTag",
    "MutagenMetadataFile",
    "PATCH_VERSION",
    "PICTURE_KEY",
    "PictureFields",
    "PropertyTag",
    "ReadStyle",
    "check_library_version",
    "dialect_for",
    "open_file",
]
