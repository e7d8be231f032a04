"""Vorbis comments (FLAC and the Ogg family)."""

from __future__ import annotations

import base64
import binascii
import logging
import struct
from typing import Any, List

from mutagen import MutagenError
from mutagen._vorbis import is_valid_key
from mutagen.flac import FLAC, Picture

from tagsimple.backend.dialect import TagDialect
from tagsimple.backend.pictures import PictureFields
from tagsimple.core.values import PropertyMap

logger = logging.getLogger(__name__)

PICTURE_BLOCK_KEY = "METADATA_BLOCK_PICTURE"


class VorbisDialect(TagDialect):
    name = "Xiph"

    def read(self, tags: Any) -> PropertyMap:
        properties = PropertyMap()
        for key, value in tags:
            if key.upper() == PICTURE_BLOCK_KEY:
                continue
            properties.insert(key, [value])
        return properties

    def write(self, tags: Any, properties: PropertyMap) -> PropertyMap:
        unsupported = PropertyMap()
        kept = [(key, value) for key, value in tags if key.upper() == PICTURE_BLOCK_KEY]
        del tags[:]
        tags.extend(kept)
        for key, values in properties.items():
            if not key or not is_valid_key(key):
                unsupported.replace(key, values)
                continue
            for value in values:
                tags.append((key, value.content))
        return unsupported

    def pictures(self, audio: Any, tags: Any) -> List[PictureFields]:
        if isinstance(audio, FLAC):
            blocks = list(audio.pictures)
        else:
            blocks = []
            for encoded in _picture_blocks(tags):
                try:
                    blocks.append(Picture(base64.b64decode(encoded)))
                except (binascii.Error, struct.error, ValueError, MutagenError) as exc:
                    logger.warning("Skipping unreadable picture block: %s", exc)
        return [_fields_from_picture(block) for block in blocks]

    def set_pictures(self, audio: Any, tags: Any, pictures: List[PictureFields]) -> bool:
        blocks = [_picture_from_fields(fields) for fields in pictures]
        if isinstance(audio, FLAC):
            audio.clear_pictures()
            for block in blocks:
                audio.add_picture(block)
            return True
        if tags is None:
            return False
        encoded = [base64.b64encode(block.write()).decode("ascii") for block in blocks]
        if encoded:
            tags[PICTURE_BLOCK_KEY] = encoded
        elif PICTURE_BLOCK_KEY in tags:
            del tags[PICTURE_BLOCK_KEY]
        return True


def _picture_blocks(tags: Any) -> List[str]:
    if tags is None:
        return []
    return [value for key, value in tags if key.upper() == PICTURE_BLOCK_KEY]


def _fields_from_picture(block: Picture) -> PictureFields:
    return PictureFields(
        data=bytes(block.data),
        mime_type=block.mime,
        description=block.desc,
        picture_type=int(block.type),
        width=block.width,
        height=block.height,
        color_depth=block.depth,
        num_colors=block.colors,
    )


def _picture_from_fields(fields: PictureFields) -> Picture:
    block = Picture()
    block.data = fields.data
    block.mime = fields.mime_type
    block.desc = fields.description
    block.type = fields.picture_type
    block.width = fields.width or 0
    block.height = fields.height or 0
    block.depth = fields.color_depth or 0
    block.colors = fields.num_colors or 0
    return block
