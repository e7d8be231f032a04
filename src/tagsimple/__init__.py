"""Read and write media file metadata through a typed tag library.

`MediaFile` is the dictionary-like facade, `FileRef` the lower-level handle
and `StreamAdapter` lets the tag library work on caller-owned streams.
"""

from __future__ import annotations

__version__ = "0.4.0"

from tagsimple.core.errors import (
    InvalidHandleError,
    TagSimpleError,
    UnknownKeyError,
    UnsupportedFeatureError,
    UnsupportedInputError,
    VersionMismatchError,
)
from tagsimple.core.fileref import FileRef
from tagsimple.core.media_file import MediaFile
from tagsimple.core.records import AudioProperties, AudioTag
from tagsimple.core.stream import StreamAdapter

__all__ = [
    "AudioProperties",
    "AudioTag",
    "FileRef",
    "InvalidHandleError",
    "MediaFile",
    "StreamAdapter",
    "TagSimpleError",
    "UnknownKeyError",
    "UnsupportedFeatureError",
    "UnsupportedInputError",
    "VersionMismatchError",
    "__version__",
]
