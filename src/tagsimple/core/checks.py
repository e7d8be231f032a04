"""Type checks applied to pending modifications before they are saved."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tagsimple.core.dynamic import EncodedText

_VARIANT_SCALARS = (str, bytes, bytearray, EncodedText, int, bool, type(None))


def is_complex_property(value: Any) -> bool:
    """True for a mapping or a non-empty list of mappings."""

    if isinstance(value, Mapping):
        return True
    return isinstance(value, (list, tuple)) and bool(value) and isinstance(value[0], Mapping)


def check_value_types(key: str, value: Any) -> None:
    """Validate a simple property value: a string, a list of strings or None."""

    if value is None or isinstance(value, str):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                raise TypeError(f"values of {key!r} must be strings, received {type(item).__name__}")
        return
    raise TypeError(f"value of {key!r} must be a string or a list of strings, received {type(value).__name__}")


def check_complex_property_value(key: str, value: Any) -> None:
    records = [value] if isinstance(value, Mapping) else value
    for record in records:
        if not isinstance(record, Mapping):
            raise TypeError(f"entries of {key!r} must be mappings, received {type(record).__name__}")
        for name, item in record.items():
            if not isinstance(name, str):
                raise TypeError(f"keys in {key!r} must be strings, received {type(name).__name__}")
            check_variant_value(f"{key}.{name}", item)


def check_variant_value(key: str, value: Any) -> None:
    if isinstance(value, _VARIANT_SCALARS):
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            check_variant_value(key, item)
        return
    if isinstance(value, Mapping):
        for name, item in value.items():
            if not isinstance(name, str):
                raise TypeError(f"keys in {key!r} must be strings, received {type(name).__name__}")
            check_variant_value(f"{key}.{name}", item)
        return
    raise TypeError(f"unsupported value type {type(value).__name__} for {key!r}")
