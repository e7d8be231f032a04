import pytest

from tagsimple.core.checks import (
    check_complex_property_value,
    check_value_types,
    check_variant_value,
    is_complex_property,
)


def test_complex_property_detection():
    assert is_complex_property({"data": b"x"})
    assert is_complex_property([{"data": b"x"}])
    assert not is_complex_property([])
    assert not is_complex_property(["a"])
    assert not is_complex_property(None)


def test_simple_values_must_be_strings():
    check_value_types("TITLE", None)
    check_value_types("TITLE", "x")
    check_value_types("ARTIST", ["a", "b"])
    with pytest.raises(TypeError, match="ARTIST"):
        check_value_types("ARTIST", ["a", 1])
    with pytest.raises(TypeError):
        check_value_types("TITLE", 5)


def test_complex_values_are_checked_recursively():
    check_complex_property_value(
        "PICTURE",
        [{"data": b"\x00", "description": "d", "width": 1, "extra": {"nested": [True, None]}}],
    )
    with pytest.raises(TypeError, match="PICTURE.width"):
        check_complex_property_value("PICTURE", [{"width": 1.5}])
    with pytest.raises(TypeError):
        check_complex_property_value("PICTURE", [{1: "x"}])
    with pytest.raises(TypeError):
        check_complex_property_value("PICTURE", ["not a mapping"])


def test_variant_values():
    check_variant_value("k", [b"a", "b", 3])
    with pytest.raises(TypeError):
        check_variant_value("k", {"a": object()})
