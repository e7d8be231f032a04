"""ID3v2 tags (MP3, AIFF, WAVE and friends)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from mutagen.id3 import APIC, COMM, TXXX, USLT, Encoding, Frames, PictureType

from tagsimple.backend.dialect import TagDialect
from tagsimple.backend.pictures import PictureFields
from tagsimple.core.values import PropertyMap

logger = logging.getLogger(__name__)

TEXT_FRAMES: Dict[str, str] = {
    "TIT1": "CONTENTGROUP",
    "TIT2": "TITLE",
    "TIT3": "SUBTITLE",
    "TPE1": "ARTIST",
    "TPE2": "ALBUMARTIST",
    "TPE3": "CONDUCTOR",
    "TPE4": "REMIXER",
    "TALB": "ALBUM",
    "TCOM": "COMPOSER",
    "TCON": "GENRE",
    "TCOP": "COPYRIGHT",
    "TDRC": "DATE",
    "TDOR": "ORIGINALDATE",
    "TDRL": "RELEASEDATE",
    "TRCK": "TRACKNUMBER",
    "TPOS": "DISCNUMBER",
    "TBPM": "BPM",
    "TENC": "ENCODEDBY",
    "TSSE": "ENCODING",
    "TEXT": "LYRICIST",
    "TSRC": "ISRC",
    "TPUB": "LABEL",
    "TMOO": "MOOD",
    "TMED": "MEDIA",
    "TLAN": "LANGUAGE",
    "TKEY": "INITIALKEY",
    "TCMP": "COMPILATION",
    "TSOA": "ALBUMSORT",
    "TSOP": "ARTISTSORT",
    "TSOT": "TITLESORT",
    "TSO2": "ALBUMARTISTSORT",
    "TSOC": "COMPOSERSORT",
}
PROPERTY_FRAMES = {value: key for key, value in TEXT_FRAMES.items()}

COMMENT_KEY = "COMMENT"
LYRICS_KEY = "LYRICS"
DEFAULT_LANGUAGE = "eng"


class ID3Dialect(TagDialect):
    name = "ID3v2"

    def read(self, tags: Any) -> PropertyMap:
        properties = PropertyMap()
        for frame in tags.values():
            frame_id = frame.FrameID
            if frame_id == "TCON":
                properties.insert("GENRE", list(frame.genres))
            elif frame_id in TEXT_FRAMES:
                properties.insert(TEXT_FRAMES[frame_id], [str(text) for text in frame.text])
            elif frame_id == "TXXX":
                properties.insert(frame.desc or "TXXX", [str(text) for text in frame.text])
            elif frame_id == "COMM":
                properties.insert(_described(COMMENT_KEY, frame.desc), [str(text) for text in frame.text])
            elif frame_id == "USLT":
                properties.insert(_described(LYRICS_KEY, frame.desc), [str(frame.text)])
        return properties

    def write(self, tags: Any, properties: PropertyMap) -> PropertyMap:
        unsupported = PropertyMap()
        for frame_id in (*TEXT_FRAMES, "TXXX", "COMM", "USLT"):
            tags.delall(frame_id)
        for key, values in properties.items():
            texts = [value.content for value in values]
            if key in PROPERTY_FRAMES:
                tags.add(Frames[PROPERTY_FRAMES[key]](encoding=Encoding.UTF8, text=texts))
            elif key == COMMENT_KEY or key.startswith(COMMENT_KEY + ":"):
                tags.add(COMM(encoding=Encoding.UTF8, lang=DEFAULT_LANGUAGE, desc=_description(key), text=texts))
            elif key == LYRICS_KEY or key.startswith(LYRICS_KEY + ":"):
                tags.add(USLT(encoding=Encoding.UTF8, lang=DEFAULT_LANGUAGE, desc=_description(key), text="\n".join(texts)))
            elif key:
                tags.add(TXXX(encoding=Encoding.UTF8, desc=key, text=texts))
            else:
                unsupported.replace(key, values)
        return unsupported

    def pictures(self, audio: Any, tags: Any) -> List[PictureFields]:
        if tags is None:
            return []
        return [
            PictureFields(
                data=bytes(frame.data),
                mime_type=frame.mime,
                description=frame.desc,
                picture_type=int(frame.type),
            )
            for frame in tags.getall("APIC")
        ]

    def set_pictures(self, audio: Any, tags: Any, pictures: List[PictureFields]) -> bool:
        if tags is None:
            return False
        tags.delall("APIC")
        for fields in pictures:
            tags.add(
                APIC(
                    encoding=Encoding.UTF8,
                    mime=fields.mime_type,
                    type=PictureType(fields.picture_type),
                    desc=fields.description,
                    data=fields.data,
                )
            )
        return True


def _described(key: str, description: str) -> str:
    return f"{key}:{description}" if description else key


def _description(key: str) -> str:
    _, _, description = key.partition(":")
    return description
