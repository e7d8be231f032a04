"""Embedded pictures as `PICTURE` complex property records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tagsimple.core.values import Value, ValueMap, ValueType

logger = logging.getLogger(__name__)

PICTURE_KEY = "PICTURE"

PICTURE_TYPES = (
    "Other",
    "File Icon",
    "Other File Icon",
    "Front Cover",
    "Back Cover",
    "Leaflet Page",
    "Media",
    "Lead Artist",
    "Artist",
    "Conductor",
    "Band",
    "Composer",
    "Lyricist",
    "Recording Location",
    "During Recording",
    "During Performance",
    "Movie Screen Capture",
    "Colored Fish",
    "Illustration",
    "Band Logo",
    "Publisher Logo",
)

FRONT_COVER = 3
BACK_COVER = 4


def picture_type_name(code: int) -> str:
    if 0 <= code < len(PICTURE_TYPES):
        return PICTURE_TYPES[code]
    return PICTURE_TYPES[0]


def picture_type_code(name: str) -> int:
    wanted = name.strip().lower()
    for code, label in enumerate(PICTURE_TYPES):
        if label.lower() == wanted:
            return code
    return 0


def guess_mime_type(data: bytes) -> str:
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data.startswith(b"BM"):
        return "image/bmp"
    return ""


@dataclass(slots=True)
class PictureFields:
    """Format-neutral picture, converted to and from `ValueMap` records."""

    data: bytes
    mime_type: str = ""
    description: str = ""
    picture_type: int = FRONT_COVER
    width: Optional[int] = None
    height: Optional[int] = None
    color_depth: Optional[int] = None
    num_colors: Optional[int] = None

    def to_value_map(self) -> ValueMap:
        record: ValueMap = {
            "data": Value.binary(self.data),
            "mimeType": Value.text(self.mime_type),
            "description": Value.text(self.description),
            "pictureType": Value.text(picture_type_name(self.picture_type)),
        }
        for key, number in (
            ("width", self.width),
            ("height", self.height),
            ("colorDepth", self.color_depth),
            ("numColors", self.num_colors),
        ):
            if number is not None:
                record[key] = Value.int32(number)
        return record

    @classmethod
    def from_value_map(cls, record: ValueMap) -> Optional["PictureFields"]:
        """Return None when the record carries no picture data."""

        data = record.get("data")
        if data is None or data.type is not ValueType.BYTES:
            logger.warning("Skipping picture without binary data")
            return None
        mime_type = _text(record.get("mimeType")) or guess_mime_type(data.data)
        picture_type = record.get("pictureType")
        if picture_type is not None and picture_type.type is ValueType.TEXT:
            code = picture_type_code(picture_type.data.content)
        elif picture_type is not None and picture_type.type in (ValueType.INT32, ValueType.INT64, ValueType.UINT32):
            code = int(picture_type.data)
        else:
            code = FRONT_COVER
        return cls(
            data=data.data,
            mime_type=mime_type,
            description=_text(record.get("description")),
            picture_type=code,
            width=_number(record.get("width")),
            height=_number(record.get("height")),
            color_depth=_number(record.get("colorDepth")),
            num_colors=_number(record.get("numColors")),
        )


def _text(value: Optional[Value]) -> str:
    if value is None or value.type is not ValueType.TEXT:
        return ""
    return value.data.content


def _number(value: Optional[Value]) -> Optional[int]:
    if value is None or value.type in (ValueType.EMPTY, ValueType.BOOL):
        return None
    if isinstance(value.data, int):
        return int(value.data)
    return None
