"""
Tests for the directory-backed gallery.
"""

import os

from pinpoint.gallery import DirectoryGallery


def test_saves_into_created_directory(tmp_path):
    gallery = DirectoryGallery(str(tmp_path / "Pictures" / "PinPoint"))

    result = gallery.save_image(b"png bytes", "a.png")

    assert result.is_success
    with open(gallery.path_for("a.png"), "rb") as f:
        assert f.read() == b"png bytes"


def test_skip_if_exists_leaves_file_alone(tmp_path):
    gallery = DirectoryGallery(str(tmp_path))
    gallery.save_image(b"first", "a.png")

    result = gallery.save_image(b"second", "a.png", skip_if_exists=True)

    assert result.is_success
    with open(gallery.path_for("a.png"), "rb") as f:
        assert f.read() == b"first"


def test_overwrites_without_skip(tmp_path):
    gallery = DirectoryGallery(str(tmp_path))
    gallery.save_image(b"first", "a.png")
    gallery.save_image(b"second", "a.png")
    with open(gallery.path_for("a.png"), "rb") as f:
        assert f.read() == b"second"


def test_write_error_is_reported(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_bytes(b"")
    gallery = DirectoryGallery(os.path.join(str(blocker), "sub"))

    result = gallery.save_image(b"data", "a.png")

    assert not result.is_success
    assert result.error_message.startswith("Could not save to gallery")
