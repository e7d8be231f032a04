"""iTunes-style MP4 atoms."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from mutagen.mp4 import MP4Cover, MP4FreeForm

from tagsimple.backend.dialect import TagDialect
from tagsimple.backend.pictures import FRONT_COVER, PictureFields
from tagsimple.core.values import PropertyMap, Text

logger = logging.getLogger(__name__)

TEXT_ATOMS: Dict[str, str] = {
    "\xa9nam": "TITLE",
    "\xa9ART": "ARTIST",
    "\xa9alb": "ALBUM",
    "\xa9gen": "GENRE",
    "\xa9day": "DATE",
    "\xa9cmt": "COMMENT",
    "\xa9wrt": "COMPOSER",
    "\xa9grp": "GROUPING",
    "\xa9lyr": "LYRICS",
    "\xa9too": "ENCODEDBY",
    "\xa9wrk": "WORK",
    "\xa9mvn": "MOVEMENTNAME",
    "aART": "ALBUMARTIST",
    "cprt": "COPYRIGHT",
    "desc": "DESCRIPTION",
    "soal": "ALBUMSORT",
    "soar": "ARTISTSORT",
    "sonm": "TITLESORT",
    "soaa": "ALBUMARTISTSORT",
    "soco": "COMPOSERSORT",
}
PROPERTY_ATOMS = {value: key for key, value in TEXT_ATOMS.items()}

PAIR_ATOMS = {"trkn": "TRACKNUMBER", "disk": "DISCNUMBER"}
PROPERTY_PAIR_ATOMS = {value: key for key, value in PAIR_ATOMS.items()}

FREEFORM_PREFIX = "----:com.apple.iTunes:"
COVER_ATOM = "covr"


class MP4Dialect(TagDialect):
    name = "MP4"

    def read(self, tags: Any) -> PropertyMap:
        properties = PropertyMap()
        for atom, values in tags.items():
            if atom in TEXT_ATOMS:
                properties.insert(TEXT_ATOMS[atom], [str(value) for value in values])
            elif atom in PAIR_ATOMS:
                properties.insert(PAIR_ATOMS[atom], [_format_pair(pair) for pair in values])
            elif atom == "tmpo":
                properties.insert("BPM", [str(value) for value in values])
            elif atom == "cpil":
                properties.insert("COMPILATION", ["1" if values else "0"])
            elif atom.startswith(FREEFORM_PREFIX):
                name = atom[len(FREEFORM_PREFIX):]
                properties.insert(name, [bytes(value).decode("utf-8", errors="replace") for value in values])
        return properties

    def write(self, tags: Any, properties: PropertyMap) -> PropertyMap:
        unsupported = PropertyMap()
        handled = [atom for atom in tags.keys() if _is_handled(atom)]
        for atom in handled:
            del tags[atom]
        for key, values in properties.items():
            if key in PROPERTY_ATOMS:
                tags[PROPERTY_ATOMS[key]] = [value.content for value in values]
            elif key in PROPERTY_PAIR_ATOMS:
                pairs = [_parse_pair(value) for value in values]
                if None in pairs:
                    unsupported.replace(key, values)
                    continue
                tags[PROPERTY_PAIR_ATOMS[key]] = pairs
            elif key == "BPM":
                numbers = [value.content.strip() for value in values]
                if not all(number.isdigit() for number in numbers):
                    unsupported.replace(key, values)
                    continue
                tags["tmpo"] = [int(number) for number in numbers]
            elif key == "COMPILATION":
                tags["cpil"] = values[0].content.strip() not in ("", "0")
            elif key:
                tags[FREEFORM_PREFIX + key] = [MP4FreeForm(value.content.encode("utf-8")) for value in values]
            else:
                unsupported.replace(key, values)
        return unsupported

    def pictures(self, audio: Any, tags: Any) -> List[PictureFields]:
        if tags is None:
            return []
        pictures: List[PictureFields] = []
        for cover in tags.get(COVER_ATOM, []):
            mime_type = "image/png" if cover.imageformat == MP4Cover.FORMAT_PNG else "image/jpeg"
            pictures.append(PictureFields(data=bytes(cover), mime_type=mime_type, picture_type=FRONT_COVER))
        return pictures

    def set_pictures(self, audio: Any, tags: Any, pictures: List[PictureFields]) -> bool:
        if tags is None:
            return False
        covers = [
            MP4Cover(
                fields.data,
                imageformat=MP4Cover.FORMAT_PNG if fields.mime_type == "image/png" else MP4Cover.FORMAT_JPEG,
            )
            for fields in pictures
        ]
        if covers:
            tags[COVER_ATOM] = covers
        elif COVER_ATOM in tags:
            del tags[COVER_ATOM]
        return True


def _is_handled(atom: str) -> bool:
    return (
        atom in TEXT_ATOMS
        or atom in PAIR_ATOMS
        or atom in ("tmpo", "cpil")
        or atom.startswith(FREEFORM_PREFIX)
    )


def _format_pair(pair: Tuple[int, int]) -> str:
    number, total = pair
    return f"{number}/{total}" if total else str(number)


def _parse_pair(value: Text) -> Optional[Tuple[int, int]]:
    number, _, total = value.content.partition("/")
    try:
        return int(number), int(total) if total.strip() else 0
    except ValueError:
        return None
