"""Base class for translating one native tag format to property maps."""

from __future__ import annotations

from typing import Any, List

from tagsimple.backend.pictures import PictureFields
from tagsimple.core.values import PropertyMap


class TagDialect:
    """Tag format without property support.

    Reads as empty and hands every written property back as unsupported.
    Subclasses override what their format can store.
    """

    name = "Unknown"

    def read(self, tags: Any) -> PropertyMap:
        return PropertyMap()

    def write(self, tags: Any, properties: PropertyMap) -> PropertyMap:
        """Replace the tag contents; returns the properties that were not stored."""

        return PropertyMap(properties)

    def pictures(self, audio: Any, tags: Any) -> List[PictureFields]:
        return []

    def set_pictures(self, audio: Any, tags: Any, pictures: List[PictureFields]) -> bool:
        return False
