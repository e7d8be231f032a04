import logging

import pytest

from tagsimple.backend import LIBRARY_VERSION, MAJOR_VERSION, MINOR_VERSION, PATCH_VERSION, check_library_version
from tagsimple.backend.version import version_string
from tagsimple.core.errors import VersionMismatchError


def test_library_version_parts():
    assert (MAJOR_VERSION, MINOR_VERSION, PATCH_VERSION) == tuple(LIBRARY_VERSION[:3])
    assert MAJOR_VERSION == 1


def test_matching_versions_pass(caplog):
    caplog.set_level(logging.WARNING)

    check_library_version((1, 48, 0), compiled=(1, 47, 0))

    assert caplog.text == ""


def test_major_mismatch_raises():
    with pytest.raises(VersionMismatchError, match="2.0.0"):
        check_library_version((2, 0, 0), compiled=(1, 47, 0))
    with pytest.raises(ImportError):
        check_library_version((0, 9), compiled=(1, 47, 0))


def test_older_minor_warns(caplog):
    caplog.set_level(logging.WARNING)

    check_library_version((1, 40, 2), compiled=(1, 47, 0))

    assert "older than 1.47.0" in caplog.text


def test_version_string():
    assert version_string((1, 47, 0)) == "1.47.0"
