"""Read-only records returned for the basic tag and audio properties."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

TAG_TEXT_FIELDS = ("title", "artist", "album", "genre", "comment")
TAG_NUMBER_FIELDS = ("year", "track")


@dataclass(frozen=True, slots=True)
class AudioTag:
    """Normalised subset of tags shared by every format.

    Empty text and zero numbers are reported as None.
    """

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[int] = None
    track: Optional[int] = None
    comment: Optional[str] = None

    @classmethod
    def members(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def read(cls, file: Any) -> Optional["AudioTag"]:
        from tagsimple.core.media_file import MediaFile

        return MediaFile.read(file, properties=False, tag=True).tag

    @classmethod
    def check_value(cls, member: str, value: Any) -> Any:
        if value is None:
            return None
        if member in TAG_NUMBER_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise TypeError(f"{member} must be a non-negative integer")
            return value or None
        if not isinstance(value, str):
            raise TypeError(f"{member} must be a string")
        return value or None

    def to_dict(self) -> Dict[str, Any]:
        """Return the tag values, leaving out missing entries."""

        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True, slots=True)
class AudioProperties:
    """Stream properties of a media file.

    Attributes:
        audio_length: Length of the audio in milliseconds.
        bitrate: Bitrate in kb/s.
        sample_rate: Sample rate in Hz.
        channels: Number of audio channels.
    """

    audio_length: int
    bitrate: int
    sample_rate: int
    channels: int

    @classmethod
    def members(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls))

    @classmethod
    def read(cls, file: Any, audio_properties: Any = "average") -> Optional["AudioProperties"]:
        if not audio_properties:
            raise ValueError("audio_properties must be one of fast, average, accurate")
        from tagsimple.core.media_file import MediaFile

        return MediaFile.read(file, properties=False, tag=False, audio_properties=audio_properties).audio_properties

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
