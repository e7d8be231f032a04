import logging

import pytest

from tagsimple.core.errors import TagSimpleError
from tagsimple.core.media_file import MediaFile, attribute_to_key
from tagsimple.core.records import AudioProperties, AudioTag
from tagsimple.core.values import Value

PICTURE = {"data": b"\x89PNG\r\n", "mimeType": "image/png", "description": "cover", "pictureType": "Front Cover"}


@pytest.fixture
def cover(library):
    return library.add(
        "cover.flac",
        properties={"TITLE": ["With Cover"]},
        complex_properties={
            "PICTURE": [
                {
                    "data": Value.binary(PICTURE["data"]),
                    "mimeType": Value.text("image/png"),
                    "description": Value.text("cover"),
                    "pictureType": Value.text("Front Cover"),
                }
            ]
        },
    )


def test_attribute_names_map_to_property_keys():
    assert attribute_to_key("composer") == "COMPOSER"
    assert attribute_to_key("album_artist") == "ALBUMARTIST"
    assert attribute_to_key("musicbrainz__album_id") == "MUSICBRAINZ_ALBUMID"


def test_everything_is_fetched(library, song):
    media_file = library.media_file("song.mp3", everything=True)

    assert media_file.title == "Song"
    assert media_file.artist == "Someone"
    assert media_file.year == 2024
    assert media_file.track == 3
    assert media_file.album is None
    assert media_file.bitrate == 320
    assert media_file.audio_length == 183_000
    assert media_file.audio_properties == AudioProperties(183_000, 320, 44100, 2)
    assert media_file["COMPOSER"] == "Writer"
    assert media_file.get_all("ARTIST") == ["Someone", "Someone Else"]


def test_dynamic_attributes(library, song):
    media_file = library.media_file("song.mp3")

    assert media_file.composer == "Writer"
    assert media_file.musicbrainz__album_id == "abc-123"
    assert media_file.all_artist == ["Someone", "Someone Else"]
    assert media_file.lyricist is None
    with pytest.raises(AttributeError):
        media_file._private


def test_missing_keys(library, song):
    media_file = library.media_file("song.mp3")

    with pytest.raises(KeyError):
        media_file["LYRICIST"]
    assert media_file.get("LYRICIST") is None
    assert media_file.get("LYRICIST", "none") == "none"
    assert "LYRICIST" not in media_file
    assert "COMPOSER" in media_file
    assert "title" in media_file


def test_modifications_are_pending_until_save(library, song):
    media_file = library.media_file("song.mp3")

    media_file.title = "New"
    media_file["GENRE"] = ["Rock", None, "Pop"]
    media_file.composer = None

    assert media_file.modified
    assert media_file.modifications == {"title": "New", "GENRE": ["Rock", "Pop"], "COMPOSER": []}
    assert media_file.get("GENRE") == "Rock"
    assert media_file.get("GENRE", saved=True) is None
    assert media_file.title == "New"
    assert song.properties()["TITLE"][0].content == "Song"

    media_file.save()

    assert song.saved == 1
    assert not media_file.modified
    saved = song.properties().to_strings()
    assert saved["TITLE"] == ["New"]
    assert saved["GENRE"] == ["Rock", "Pop"]
    assert "COMPOSER" not in saved
    assert media_file.title == "New"


def test_values_are_checked_on_assignment(library, song):
    media_file = library.media_file("song.mp3")

    with pytest.raises(TypeError):
        media_file["TITLE"] = 5
    with pytest.raises(TypeError):
        media_file["ARTIST"] = ["ok", 3]
    with pytest.raises(TypeError):
        media_file.year = "2024"
    with pytest.raises(TypeError):
        media_file["PICTURE"] = [{"data": 1.5}]
    with pytest.raises(TagSimpleError):
        media_file["bitrate"] = 128
    with pytest.raises(AttributeError):
        media_file.bitrate = 128
    assert not media_file.modified


def test_empty_tag_values_become_none(library, song):
    media_file = library.media_file("song.mp3")

    media_file.title = ""
    media_file.track = 0

    assert media_file.modifications == {"title": None, "track": None}
    media_file.save()

    assert "TITLE" not in song.properties()
    assert "TRACKNUMBER" not in song.properties()


def test_pop_and_delete(library, song):
    media_file = library.media_file("song.mp3")

    assert media_file.pop("COMPOSER") == "Writer"
    assert media_file.pop("LYRICIST", "default") == "default"
    del media_file["MUSICBRAINZ_ALBUMID"]
    with pytest.raises(KeyError):
        del media_file["LYRICIST"]

    assert media_file.modifications == {"COMPOSER": [], "MUSICBRAINZ_ALBUMID": []}


def test_keys_items_and_to_dict(library, song):
    media_file = library.media_file("song.mp3", everything=True)
    media_file["LYRICIST"] = "Poet"

    keys = media_file.keys()
    assert keys[0] == "LYRICIST"
    assert {"bitrate", "title", "year", "ARTIST", "COMPOSER"} <= set(keys)
    assert "album" not in keys
    assert list(media_file) == keys

    data = media_file.to_dict()
    assert data["LYRICIST"] == ["Poet"]
    assert data["channels"] == 2
    assert data["track"] == 3
    assert data["DATE"] == ["2024-05-01"]


def test_complex_properties_are_fetched_lazily(library, cover):
    media_file = library.media_file("cover.flac")

    assert media_file.complex_properties == {}
    assert media_file.complex_property_keys == ["PICTURE"]
    assert media_file["PICTURE"] == PICTURE
    assert media_file.get_all("PICTURE") == [PICTURE]
    assert media_file.complex_properties == {"PICTURE": [PICTURE]}


def test_retrieve_all_complex_properties(library, cover):
    media_file = library.media_file("cover.flac", complex_property_keys="all")

    assert media_file.complex_properties == {"PICTURE": [PICTURE]}


def test_retrieve_complex_keys_only(library, cover):
    media_file = library.media_file("cover.flac", complex_property_keys=True)
    media_file.close()

    assert media_file.complex_property_keys == ["PICTURE"]
    assert media_file.complex_properties == {}
    assert media_file.get("PICTURE") is None


def test_retrieve_rejects_unknown_selector(library, cover):
    with pytest.raises(ValueError):
        library.media_file("cover.flac", complex_property_keys="some")


def test_complex_properties_are_written(library, song):
    media_file = library.media_file("song.mp3")

    media_file["PICTURE"] = [PICTURE]
    media_file.save()

    assert song.complex_property_keys() == ["PICTURE"]
    assert media_file.get_all("PICTURE") == [PICTURE]


def test_complex_properties_are_removed(library, cover):
    media_file = library.media_file("cover.flac")

    media_file["PICTURE"] = None
    media_file.save()

    assert cover.complex_property_keys() == []
    assert cover.properties().to_strings() == {"TITLE": ["With Cover"]}


def test_clear_removes_everything(library, cover):
    media_file = library.media_file("cover.flac")
    media_file.artist = "Pending"

    media_file.clear()

    assert len(cover.properties()) == 0
    assert cover.complex_property_keys() == []
    assert not media_file.modified


def test_read_keeps_data_after_close(library, song):
    media_file = MediaFile.read(library.file_ref("song.mp3"))

    assert media_file.closed
    assert not media_file.writable
    assert media_file.title == "Song"
    assert media_file["COMPOSER"] == "Writer"
    assert media_file.complex_property_keys == []
    with pytest.raises(TagSimpleError):
        media_file.title = "Late"
    with pytest.raises(OSError):
        media_file.save()


def test_tag_falls_back_to_properties_after_close(library, song):
    media_file = MediaFile.read(library.file_ref("song.mp3"), tag=False)

    assert media_file.tag is None
    assert media_file.title == "Song"
    assert media_file.year == 2024
    assert media_file.track == 3


def test_open_saves_on_clean_exit(library, song):
    with MediaFile.open(library.file_ref("song.mp3")) as media_file:
        media_file.artist = "Changed"

    assert media_file.closed
    assert song.saved == 1
    assert song.properties().to_strings()["ARTIST"] == ["Changed"]


def test_open_discards_changes_on_error(library, song, caplog):
    caplog.set_level(logging.WARNING)

    with pytest.raises(RuntimeError):
        with MediaFile.open(library.file_ref("song.mp3")) as media_file:
            media_file.artist = "Changed"
            raise RuntimeError("boom")

    assert media_file.closed
    assert song.saved == 0
    assert "unsaved" in caplog.text


def test_read_only_files_reject_writes(library):
    library.add("locked.mp3", properties={"TITLE": ["Locked"]}, read_only=True)
    media_file = library.media_file("locked.mp3")

    assert not media_file.writable
    assert media_file.title == "Locked"
    with pytest.raises(TagSimpleError):
        media_file["TITLE"] = "x"
    with pytest.raises(OSError):
        media_file.save()


def test_invalid_files_raise(library):
    with pytest.raises(TagSimpleError, match="could not open"):
        library.media_file("missing.mp3")


def test_record_readers(library, song):
    assert AudioTag.read(library.file_ref("song.mp3")) == AudioTag(
        title="Song", artist="Someone", year=2024, track=3
    )
    assert AudioProperties.read(library.file_ref("song.mp3", "average")).sample_rate == 44100
    with pytest.raises(ValueError):
        AudioProperties.read(library.file_ref("song.mp3"), None)
