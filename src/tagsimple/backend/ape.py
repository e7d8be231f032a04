"""APEv2 tags."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from mutagen.apev2 import BINARY, TEXT, APEValue, is_valid_apev2_key

from tagsimple.backend.dialect import TagDialect
from tagsimple.backend.pictures import BACK_COVER, FRONT_COVER, PictureFields, guess_mime_type
from tagsimple.core.values import PropertyMap

logger = logging.getLogger(__name__)

# APE item names that differ from the common property names
APE_TO_PROPERTY: Dict[str, str] = {
    "YEAR": "DATE",
    "TRACK": "TRACKNUMBER",
    "DISC": "DISCNUMBER",
    "ALBUM ARTIST": "ALBUMARTIST",
    "MIXARTIST": "REMIXER",
}
PROPERTY_TO_APE = {value: key for key, value in APE_TO_PROPERTY.items()}

COVER_KEYS = {
    FRONT_COVER: "Cover Art (Front)",
    BACK_COVER: "Cover Art (Back)",
}


class APEDialect(TagDialect):
    name = "APE"

    def read(self, tags: Any) -> PropertyMap:
        properties = PropertyMap()
        for key, value in tags.items():
            if value.kind != TEXT:
                continue
            name = key.upper()
            properties.insert(APE_TO_PROPERTY.get(name, name), list(value))
        return properties

    def write(self, tags: Any, properties: PropertyMap) -> PropertyMap:
        unsupported = PropertyMap()
        for key in [key for key, value in tags.items() if value.kind == TEXT]:
            del tags[key]
        for key, values in properties.items():
            ape_key = PROPERTY_TO_APE.get(key, key)
            if not is_valid_apev2_key(ape_key):
                unsupported.replace(key, values)
                continue
            tags[ape_key] = APEValue("\0".join(value.content for value in values), TEXT)
        return unsupported

    def pictures(self, audio: Any, tags: Any) -> List[PictureFields]:
        if tags is None:
            return []
        pictures: List[PictureFields] = []
        for picture_type, key in COVER_KEYS.items():
            if key not in tags:
                continue
            value = tags[key]
            if value.kind != BINARY:
                continue
            description, _, data = bytes(value).partition(b"\0")
            pictures.append(
                PictureFields(
                    data=data,
                    mime_type=guess_mime_type(data),
                    description=description.decode("utf-8", errors="replace"),
                    picture_type=picture_type,
                )
            )
        return pictures

    def set_pictures(self, audio: Any, tags: Any, pictures: List[PictureFields]) -> bool:
        if tags is None:
            return False
        for key in COVER_KEYS.values():
            if key in tags:
                del tags[key]
        for fields in pictures:
            key = COVER_KEYS[BACK_COVER if fields.picture_type == BACK_COVER else FRONT_COVER]
            if key in tags:
                logger.warning("APE tags hold one picture per cover side, dropping extra %s", key)
                continue
            tags[key] = APEValue(fields.description.encode("utf-8") + b"\0" + fields.data, BINARY)
        return True
