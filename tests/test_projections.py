import pytest

from tagsimple.backend import PropertyTag
from tagsimple.core.dynamic import EncodedText
from tagsimple.core.errors import UnknownKeyError
from tagsimple.core.projections import merge_complex_properties, merge_properties, merge_tag_properties
from tagsimple.core.records import AudioTag
from tagsimple.core.values import PropertyMap, Text, Value


class _Properties:
    """Just enough of a metadata file for `PropertyTag`."""

    def __init__(self, **values):
        self.map = PropertyMap(values)

    def properties(self) -> PropertyMap:
        return PropertyMap(self.map)

    def set_properties(self, properties: PropertyMap) -> PropertyMap:
        self.map = PropertyMap(properties)
        return PropertyMap()


def test_merge_replaces_only_named_keys():
    current = PropertyMap({"TITLE": ["Old"], "ARTIST": ["A"]})

    merged = merge_properties(current, {"title": "New", "GENRE": ["Rock", "Pop"]})

    assert merged.to_strings() == {"TITLE": ["New"], "ARTIST": ["A"], "GENRE": ["Rock", "Pop"]}
    assert current.to_strings() == {"TITLE": ["Old"], "ARTIST": ["A"]}


def test_empty_merge_keeps_current():
    current = PropertyMap({"TITLE": ["Old"], "ARTIST": ["A", "B"]})

    assert merge_properties(current, {}) == current


def test_merge_removes_keys_set_to_nothing():
    current = PropertyMap({"TITLE": ["Old"], "ARTIST": ["A"], "GENRE": ["Jazz"]})

    merged = merge_properties(current, {"ARTIST": None, "GENRE": []})

    assert merged.to_strings() == {"TITLE": ["Old"]}
    assert all(merged[key] for key in merged)


def test_merge_replace_all_starts_empty():
    current = PropertyMap({"TITLE": ["Old"], "ARTIST": ["A"]})

    merged = merge_properties(current, {"ALBUM": "Only"}, replace_all=True)

    assert merged.to_strings() == {"ALBUM": ["Only"]}


def test_tag_merge_assigns_fields():
    file = _Properties(TITLE=["Old"], DATE=["1999"])
    tag = PropertyTag(file)

    merge_tag_properties(tag, {"title": "New", "year": 2024, "track": 7, "comment": None})

    assert file.map.to_strings() == {"TITLE": ["New"], "DATE": ["2024"], "TRACKNUMBER": ["7"]}
    assert tag.title == Text("New")
    assert tag.year == 2024


def test_tag_merge_accepts_records():
    file = _Properties()
    tag = PropertyTag(file)

    merge_tag_properties(tag, AudioTag(artist="Someone", track=2))

    assert file.map.to_strings() == {"ARTIST": ["Someone"], "TRACKNUMBER": ["2"]}


def test_tag_merge_stops_at_unknown_key_without_rollback():
    file = _Properties()
    tag = PropertyTag(file)

    with pytest.raises(UnknownKeyError, match="bogus"):
        merge_tag_properties(tag, {"title": "Kept", "bogus": "x", "artist": "Never"})

    assert file.map.to_strings() == {"TITLE": ["Kept"]}


def test_tag_merge_rejects_bad_values():
    tag = PropertyTag(_Properties())

    with pytest.raises(TypeError):
        merge_tag_properties(tag, {"year": "2024"})
    with pytest.raises(TypeError):
        merge_tag_properties(tag, ["title", "x"])


def test_complex_merge_replaces_whole_lists():
    merged = merge_complex_properties(["PICTURE"], {"PICTURE": [{"data": b"\x01", "pictureType": "Front Cover"}]})

    assert merged == {
        "PICTURE": [{"data": Value.binary(b"\x01"), "pictureType": Value.text("Front Cover")}],
    }


def test_complex_merge_replace_all_clears_existing_keys():
    merged = merge_complex_properties(["PICTURE", "GEOB"], {"GEOB": {"data": b"x"}}, replace_all=True)

    assert merged == {"PICTURE": [], "GEOB": [{"data": Value.binary(b"x")}]}


def test_merge_decodes_encoded_text():
    merged = merge_properties(PropertyMap(), {"TITLE": [EncodedText("café".encode(), "UTF-8")]})

    assert merged.to_strings() == {"TITLE": ["café"]}
