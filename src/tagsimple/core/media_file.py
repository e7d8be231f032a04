"""Dictionary and attribute access over one media file.

| Source               | Attribute access     | Key example | Value type            |
|----------------------|----------------------|-------------|-----------------------|
| `audio_properties`   | read only            | "bitrate"   | int                   |
| `tag`                | read/write           | "title"     | str or int            |
| `properties`         | read/write (dynamic) | "COMPOSER"  | list of str           |
| `complex_properties` | read/write (dynamic) | "PICTURE"   | list of dict          |

Audio properties must be requested when the file is opened; everything else
is fetched lazily while the file is open. Changes are kept in memory until
`save()`. After `close()` whatever was fetched stays readable.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple

from tagsimple.backend import ReadStyle
from tagsimple.core.checks import check_complex_property_value, check_value_types, is_complex_property
from tagsimple.core.errors import TagSimpleError
from tagsimple.core.fileref import FileRef
from tagsimple.core.records import AudioProperties, AudioTag, TAG_NUMBER_FIELDS

logger = logging.getLogger(__name__)

TAG_MEMBERS = AudioTag.members()
AUDIO_MEMBERS = AudioProperties.members()

# property keys consulted for tag fields once the file is closed
TAG_PROPERTY_KEYS = {
    "title": "TITLE",
    "artist": "ARTIST",
    "album": "ALBUM",
    "genre": "GENRE",
    "year": "DATE",
    "track": "TRACKNUMBER",
    "comment": "COMMENT",
}

DYNAMIC_ATTRIBUTE = re.compile(r"^(?P<all>all_)?(?P<key>[a-z][a-z0-9_]*)$")
_LEADING_NUMBER = re.compile(r"\s*(\d+)")

_MISSING = object()


def attribute_to_key(name: str) -> str:
    """`musicbrainz__album_id` -> `MUSICBRAINZ_ALBUMID`."""

    return name.replace("__", "~").replace("_", "").upper().replace("~", "_")


class _ComplexPropertyCache(dict):
    """Fetches a complex property from the file on first lookup."""

    def __init__(self, media_file: "MediaFile") -> None:
        super().__init__()
        self._media_file = media_file

    def __missing__(self, key: str) -> Optional[List[Dict[str, Any]]]:
        if self._media_file.closed:
            return None
        value = self._media_file.file_ref.complex_property(key)
        self[key] = value
        return value


class _TagField:
    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, media_file: Optional["MediaFile"], owner: Optional[type] = None) -> Any:
        if media_file is None:
            return self
        return media_file.tag_value(self.name)

    def __set__(self, media_file: "MediaFile", value: Any) -> None:
        media_file[self.name] = value


class _AudioField:
    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, media_file: Optional["MediaFile"], owner: Optional[type] = None) -> Any:
        if media_file is None:
            return self
        audio_properties = media_file.audio_properties
        return getattr(audio_properties, self.name) if audio_properties is not None else None

    def __set__(self, media_file: "MediaFile", value: Any) -> None:
        raise AttributeError(f"{self.name} is read only")


class MediaFile:
    title = _TagField()
    artist = _TagField()
    album = _TagField()
    genre = _TagField()
    year = _TagField()
    track = _TagField()
    comment = _TagField()

    audio_length = _AudioField()
    bitrate = _AudioField()
    sample_rate = _AudioField()
    channels = _AudioField()

    @classmethod
    def open(cls, file: Any, **init: Any) -> "MediaFile":
        """Open `file`; as a context manager it saves changes on a clean exit and always closes."""

        return cls(file, **init)

    @classmethod
    def read(cls, file: Any, properties: bool = True, tag: bool = True, **init: Any) -> "MediaFile":
        """Fetch the requested data, close the file and return the read-only result."""

        with cls.open(file, properties=properties, tag=tag, **init) as media_file:
            return media_file

    def __init__(
        self,
        file: Any,
        everything: bool = False,
        audio_properties: Any = None,
        **retrieve: Any,
    ) -> None:
        if audio_properties is None and everything:
            audio_properties = ReadStyle.AVERAGE
        self.file_ref = file if isinstance(file, FileRef) else FileRef(file, audio_properties)
        if not self.file_ref.valid:
            raise TagSimpleError(f"could not open {file}")

        self._audio_properties = self.file_ref.audio_properties() if audio_properties else None
        self._mutated: Dict[str, Any] = {}
        self._complex_properties = _ComplexPropertyCache(self)
        self._complex_property_keys: Optional[List[str]] = None
        self._tag: Optional[AudioTag] = None
        self._properties: Optional[Dict[str, List[str]]] = None
        self.retrieve(everything=everything, **retrieve)

    def __enter__(self) -> "MediaFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None and self.modified:
                self.save()
        finally:
            self.close()

    def __repr__(self) -> str:
        return f"<MediaFile closed={self.closed}>"

    def retrieve(
        self,
        everything: bool = False,
        tag: Optional[bool] = None,
        properties: Optional[bool] = None,
        complex_property_keys: Any = None,
    ) -> "MediaFile":
        """Fetch and cache data from the file.

        `complex_property_keys` selects which complex properties are fetched:
        a list fetches those keys, `False` means none, `True` fetches the key
        list only, `"all"` fetches the key list and every property in it,
        `"lazy"` resets the key list to be fetched on demand and `None`
        leaves the current setting alone.
        """

        if tag is None:
            tag = everything
        if properties is None:
            properties = everything
        if complex_property_keys is None and everything:
            complex_property_keys = "all"

        if properties:
            self.properties
        if tag:
            self.tag
        if self._retrieve_complex_property_keys(complex_property_keys):
            for key in self._complex_property_keys or []:
                self._complex_properties[key]
        return self

    @property
    def closed(self) -> bool:
        return not self.file_ref.valid

    @property
    def writable(self) -> bool:
        return not self.closed and not self.file_ref.read_only

    def close(self) -> None:
        """Release the file; fetched data stays readable."""

        try:
            if self._mutated:
                logger.warning("Closing %s with unsaved properties %s", self.file_ref, list(self._mutated))
        finally:
            self.file_ref.close()

    @property
    def audio_properties(self) -> Optional[AudioProperties]:
        return self._audio_properties

    @property
    def tag(self) -> Optional[AudioTag]:
        return self._get_tag(not self.closed)

    @property
    def properties(self) -> Optional[Dict[str, List[str]]]:
        return self._get_properties(not self.closed)

    @property
    def complex_properties(self) -> Dict[str, Any]:
        return self._complex_properties

    @property
    def complex_property_keys(self) -> List[str]:
        return self._get_complex_property_keys(not self.closed)

    def tag_value(self, member: str) -> Any:
        if member in self._mutated:
            return self._mutated[member]
        tag = self.tag
        if tag is not None:
            return getattr(tag, member)
        values = (self.properties or {}).get(TAG_PROPERTY_KEYS[member]) or [None]
        value = values[0]
        if value is not None and member in TAG_NUMBER_FIELDS:
            match = _LEADING_NUMBER.match(value)
            return int(match.group(1)) if match else None
        return value

    # dictionary access

    def __getitem__(self, key: str) -> Any:
        return self.get(key, _MISSING)

    def get(self, key: str, default: Any = None, saved: bool = False) -> Any:
        """First value of a property, or the value of a tag or audio field.

        With `saved` pending modifications are ignored.
        """

        result = self.get_all(key, default, saved=saved)
        if key not in TAG_MEMBERS and key not in AUDIO_MEMBERS and isinstance(result, list):
            return result[0] if result else None
        return result

    def get_all(self, key: str, default: Any = None, saved: bool = False) -> Any:
        return self._fetch_all(key, default, saved, not self.closed)

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"keys must be strings, received {type(key).__name__}")
        if key in TAG_MEMBERS:
            self._write_property(key, AudioTag.check_value(key, value))
        elif key in AUDIO_MEMBERS:
            raise TagSimpleError(f"{key} is a read-only audio property")
        else:
            self._write_string_property(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        self[key] = None

    def pop(self, key: str, default: Any = None) -> Any:
        try:
            value = self[key]
        except KeyError:
            return default
        self[key] = None
        return value

    def keys(self) -> List[str]:
        lazy = not self.closed
        tag = self._get_tag(lazy)
        groups = (
            list(self._mutated),
            list(self._audio_properties.to_dict()) if self._audio_properties else [],
            list(tag.to_dict()) if tag else [],
            list(self._get_properties(lazy) or {}),
            self._get_complex_property_keys(lazy),
        )
        return list(dict.fromkeys(key for group in groups for key in group))

    def includes(self, key: str, saved: bool = False) -> bool:
        if not saved and key in self._mutated:
            return True
        lazy = not self.closed
        if key in TAG_MEMBERS:
            tag = self._get_tag(lazy)
            return tag is not None and key in tag.to_dict()
        if key in AUDIO_MEMBERS:
            return self._audio_properties is not None
        if not isinstance(key, str):
            return False
        return key in self._get_complex_property_keys(lazy) or key in (self._get_properties(lazy) or {})

    def __contains__(self, key: Any) -> bool:
        return self.includes(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def items(self) -> Iterator[Tuple[str, Any]]:
        for key in self.keys():
            value = self.get_all(key)
            if value is not None:
                yield key, value

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.items())

    # dynamic attributes

    def __getattr__(self, name: str) -> Any:
        match = DYNAMIC_ATTRIBUTE.match(name)
        if match is None:
            raise AttributeError(name)
        key = attribute_to_key(match.group("key"))
        if match.group("all"):
            return self.get_all(key)
        return self.get(key)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name == "file_ref" or hasattr(type(self), name):
            object.__setattr__(self, name, value)
            return
        match = DYNAMIC_ATTRIBUTE.match(name)
        if match is None or match.group("all"):
            raise AttributeError(f"cannot set {name}")
        self[attribute_to_key(match.group("key"))] = value

    # modifications

    @property
    def modifications(self) -> Dict[str, Any]:
        return dict(self._mutated)

    @property
    def modified(self) -> bool:
        return bool(self._mutated)

    def clear(self) -> None:
        """Remove every property from the file, dropping pending modifications."""

        self._mutated.clear()
        self.save(replace_all=True)

    def save(self, replace_all: bool = False) -> None:
        """Write pending modifications and reset the caches.

        With `replace_all` the modifications replace every existing property.
        """

        if not self.writable:
            raise OSError("cannot save, file is not writable")
        self._update(replace_all)
        if not self.file_ref.save():
            raise TagSimpleError(f"failed to save {self.file_ref}")
        self.reset()

    def reset(self) -> None:
        self._mutated.clear()
        self._complex_properties.clear()
        self._complex_property_keys = None
        self._tag = None
        self._properties = None

    def _get_tag(self, lazy: bool) -> Optional[AudioTag]:
        if self._tag is None and lazy:
            self._tag = self.file_ref.tag()
        return self._tag

    def _get_properties(self, lazy: bool) -> Optional[Dict[str, List[str]]]:
        if self._properties is None and lazy:
            self._properties = self.file_ref.properties()
        return self._properties

    def _get_complex_property_keys(self, lazy: bool) -> List[str]:
        keys = list(self._complex_properties)
        if lazy:
            if self._complex_property_keys is None:
                self._complex_property_keys = self.file_ref.complex_property_keys()
            keys.extend(self._complex_property_keys)
        elif self._complex_property_keys:
            keys.extend(self._complex_property_keys)
        return list(dict.fromkeys(keys))

    def _retrieve_complex_property_keys(self, keys: Any) -> bool:
        if keys is None:
            return False
        if keys is False:
            self._complex_property_keys = []
            return False
        if isinstance(keys, (list, tuple)):
            self._complex_property_keys = list(keys)
            return True
        if keys == "lazy":
            self._complex_property_keys = None
            return False
        if keys is True or keys == "all":
            self._complex_property_keys = self.file_ref.complex_property_keys()
            return keys == "all"
        raise ValueError(f"invalid complex_property_keys {keys!r}")

    def _fetch_all(self, key: str, default: Any, saved: bool, lazy: bool) -> Any:
        if not saved and key in self._mutated:
            return self._mutated[key]
        if key in TAG_MEMBERS:
            tag = self._get_tag(lazy)
            return _lookup(tag.to_dict() if tag else {}, key, default)
        if key in AUDIO_MEMBERS:
            audio_properties = self._audio_properties
            return _lookup(audio_properties.to_dict() if audio_properties else {}, key, default)
        if not isinstance(key, str):
            raise TypeError(f"keys must be strings, received {type(key).__name__}")
        if key in self._get_complex_property_keys(lazy):
            value = self._complex_properties[key] if lazy else self._complex_properties.get(key)
            if value is not None:
                return value
            return _lookup({}, key, default)
        return _lookup(self._get_properties(lazy) or {}, key, default)

    def _write_string_property(self, key: str, value: Any) -> None:
        if value is None:
            values: List[Any] = []
        elif isinstance(value, (list, tuple)):
            values = [item for item in value if item is not None]
        else:
            values = [value]
        if values:
            if is_complex_property(values):
                check_complex_property_value(key, values)
            else:
                check_value_types(key, values)
        self._write_property(key, values)

    def _write_property(self, key: str, value: Any) -> None:
        if not self.writable:
            raise TagSimpleError("file is closed or read only")
        self._mutated[key] = value

    def _update(self, replace_all: bool) -> None:
        groups: Dict[str, Dict[str, Any]] = {"standard": {}, "complex": {}, "tag": {}}
        complex_keys = self.complex_property_keys
        for key, value in self._mutated.items():
            if key in TAG_MEMBERS:
                groups["tag"][key] = value
            elif is_complex_property(value) or (not value and key in complex_keys):
                groups["complex"][key] = value
            else:
                groups["standard"][key] = value

        if replace_all or groups["standard"]:
            self.file_ref.merge_properties(groups["standard"], replace_all)
        if replace_all or groups["complex"]:
            self.file_ref.merge_complex_properties(groups["complex"], replace_all)
        if groups["tag"]:
            self.file_ref.merge_tag_properties(groups["tag"])


def _lookup(values: Mapping, key: str, default: Any) -> Any:
    if key in values:
        return values[key]
    if default is _MISSING:
        raise KeyError(key)
    return default
