"""Merging caller updates into the property projections."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List

from tagsimple.core.convert import (
    key_to_str,
    optional_to_text,
    optional_to_uint,
    to_complex_property,
    to_text_list,
)
from tagsimple.core.errors import UnknownKeyError
from tagsimple.core.records import TAG_NUMBER_FIELDS, TAG_TEXT_FIELDS
from tagsimple.core.values import ComplexPropertyList, PropertyMap, ValueMap


def merge_properties(current: Mapping[str, Any], updates: Mapping[Any, Any], replace_all: bool = False) -> PropertyMap:
    """Return `current` with every key of `updates` replaced.

    Values of `updates` are converted with `to_text_list`, so `None` or an
    empty list removes the key. With `replace_all` the result starts empty.
    """

    result = PropertyMap() if replace_all else PropertyMap(current)
    for key, values in updates.items():
        result.replace(key_to_str(key), to_text_list(values))
    result.remove_empty()
    return result


def merge_tag_properties(tag: Any, updates: Any) -> Any:
    """Assign `updates` to the fields of a tag object and return it.

    `updates` is a mapping or a record exposing `to_dict()`. Fields are set
    in iteration order; an unknown key raises `UnknownKeyError` without
    undoing the fields already assigned.
    """

    if not isinstance(updates, Mapping):
        to_dict = getattr(updates, "to_dict", None)
        if to_dict is None:
            raise TypeError(f"expected a mapping of tag values, received {type(updates).__name__}")
        updates = to_dict()
    for key, value in updates.items():
        name = key_to_str(key)
        if name in TAG_TEXT_FIELDS:
            setattr(tag, name, optional_to_text(value))
        elif name in TAG_NUMBER_FIELDS:
            setattr(tag, name, optional_to_uint(value))
        else:
            raise UnknownKeyError(f"unknown tag field {name!r}")
    return tag


def merge_complex_properties(
    current_keys: Iterable[str],
    updates: Mapping[Any, Any],
    replace_all: bool = False,
) -> ComplexPropertyList:
    """Return the complex property lists to write.

    With `replace_all` every key in `current_keys` is cleared first. Each
    key of `updates` then replaces that key's whole list.
    """

    result: Dict[str, List[ValueMap]] = {}
    if replace_all:
        for key in current_keys:
            result[key] = []
    for key, records in updates.items():
        result[key_to_str(key)] = to_complex_property(records)
    return result
