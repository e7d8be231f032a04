"""Basic tag fields as a view over a file's property map."""

from __future__ import annotations

import re
from typing import Any, Optional

from tagsimple.core.values import Text

_LEADING_NUMBER = re.compile(r"\s*(\d+)")


class _TextField:
    def __init__(self, key: str) -> None:
        self.key = key

    def __get__(self, tag: Optional["PropertyTag"], owner: Optional[type] = None) -> Any:
        if tag is None:
            return self
        values = tag.file.properties().get(self.key)
        return Text(values[0].content) if values else Text("")

    def __set__(self, tag: "PropertyTag", value: Text) -> None:
        tag.store(self.key, value.content if len(value) else None)


class _NumberField:
    def __init__(self, key: str) -> None:
        self.key = key

    def __get__(self, tag: Optional["PropertyTag"], owner: Optional[type] = None) -> Any:
        if tag is None:
            return self
        values = tag.file.properties().get(self.key)
        if not values:
            return 0
        match = _LEADING_NUMBER.match(values[0].content)
        return int(match.group(1)) if match else 0

    def __set__(self, tag: "PropertyTag", value: int) -> None:
        tag.store(self.key, str(value) if value else None)


class PropertyTag:
    """The fields shared by every tag format.

    Year is the leading number of DATE and track the leading number of
    TRACKNUMBER. Assigning empty text or 0 removes the property.
    """

    title = _TextField("TITLE")
    artist = _TextField("ARTIST")
    album = _TextField("ALBUM")
    genre = _TextField("GENRE")
    comment = _TextField("COMMENT")
    year = _NumberField("DATE")
    track = _NumberField("TRACKNUMBER")

    def __init__(self, file: Any) -> None:
        self.file = file

    def store(self, key: str, content: Optional[str]) -> None:
        properties = self.file.properties()
        if content is None:
            properties.pop(key, None)
        else:
            properties.replace(key, [Text(content)])
        self.file.set_properties(properties)
