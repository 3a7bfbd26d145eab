"""
Tests for the capture and export pipeline.
"""

import os

import numpy as np
import pytest

import pinpoint.exporter as exporter_module
from pinpoint.exporter import ImageExporter
from pinpoint.models import GalleryResult
from pinpoint.orientation import decode_image, encode_png


@pytest.fixture
def output_dir(tmp_path):
    return str(tmp_path / "out")


def files_in(directory):
    return sorted(os.listdir(directory))


def test_save_without_gallery_writes_local_file(output_dir, striped_png, make_surface, make_gallery):
    gallery = make_gallery()
    surface = make_surface(striped_png)
    exporter = ImageExporter(output_dir, gallery=gallery)

    result = exporter.save_image(surface, custom_name="pinned")

    assert result.is_success
    assert result.message == "Image saved successfully"
    assert result.file_path == os.path.join(output_dir, "pinned.png")
    with open(result.file_path, "rb") as f:
        assert f.read() == striped_png
    assert gallery.calls == []
    assert surface.ratios == [2.5]


def test_temporary_file_is_removed(output_dir, striped_png, make_surface):
    ImageExporter(output_dir).save_image(make_surface(striped_png), custom_name="pinned")
    assert files_in(output_dir) == ["pinned.png"]


def test_default_name_is_microsecond_timestamp(output_dir, striped_png, make_surface):
    exporter = ImageExporter(output_dir, clock_ns=lambda: 1_700_000_000_123_456_789)

    result = exporter.save_image(make_surface(striped_png))

    assert os.path.basename(result.file_path) == "1700000000123456.png"


def test_existing_file_is_replaced(output_dir, striped_png, make_surface):
    os.makedirs(output_dir)
    with open(os.path.join(output_dir, "pinned.png"), "wb") as f:
        f.write(b"old contents")

    result = ImageExporter(output_dir).save_image(make_surface(striped_png), custom_name="pinned")

    with open(result.file_path, "rb") as f:
        assert f.read() == striped_png


def test_failed_capture_reports_failure(output_dir, make_surface, make_gallery):
    gallery = make_gallery()
    result = ImageExporter(output_dir, gallery=gallery).save_image(
        make_surface(None), skip_save_to_gallery=False)

    assert not result.is_success
    assert result.message == "Failed to capture image"
    assert result.file_path is None
    assert gallery.calls == []


def test_gallery_receives_final_bytes(output_dir, striped_png, make_surface, make_gallery):
    gallery = make_gallery()
    exporter = ImageExporter(output_dir, gallery=gallery)

    result = exporter.save_image(make_surface(striped_png), skip_save_to_gallery=False,
                                 custom_name="pinned")

    assert result.is_success
    assert gallery.calls == [(striped_png, "pinned.png", False)]


def test_gallery_failure_keeps_local_file(output_dir, striped_png, make_surface, make_gallery):
    gallery = make_gallery(GalleryResult(is_success=False, error_message="Gallery is full"))
    exporter = ImageExporter(output_dir, gallery=gallery)

    result = exporter.save_composite(make_surface(striped_png), persist_to_gallery=True,
                                     custom_name="pinned")

    assert not result.is_success
    assert result.message == "Gallery is full"
    assert result.file_path == os.path.join(output_dir, "pinned.png")
    assert os.path.exists(result.file_path)


def test_gallery_exception_is_reported(output_dir, striped_png, make_surface):
    class BrokenGallery:
        def save_image(self, data, file_name, skip_if_exists=False):
            raise RuntimeError("disk on fire")

    result = ImageExporter(output_dir, gallery=BrokenGallery()).save_composite(
        make_surface(striped_png), persist_to_gallery=True, custom_name="pinned")

    assert not result.is_success
    assert "disk on fire" in result.message
    assert os.path.exists(result.file_path)


def test_missing_gallery_is_reported(output_dir, striped_png, make_surface):
    result = ImageExporter(output_dir).save_composite(make_surface(striped_png),
                                                      persist_to_gallery=True)
    assert not result.is_success
    assert result.file_path is not None


def test_flipped_capture_is_corrected(output_dir, make_surface):
    # Top and bottom rows match, the middle rows do not: detected as flipped
    image = np.zeros((4, 6, 3), dtype=np.uint8)
    image[1] = (255, 0, 0)
    image[2] = (0, 255, 0)
    captured = encode_png(image)

    result = ImageExporter(output_dir).save_image(make_surface(captured), custom_name="pinned")

    with open(result.file_path, "rb") as f:
        saved = decode_image(f.read())
    assert np.array_equal(saved, image[::-1])


def test_failed_flip_keeps_capture(output_dir, make_surface, monkeypatch):
    image = np.zeros((4, 6, 3), dtype=np.uint8)
    image[1] = (255, 0, 0)
    captured = encode_png(image)
    monkeypatch.setattr(exporter_module, "flip_vertically", lambda data: None)

    result = ImageExporter(output_dir).save_image(make_surface(captured), custom_name="pinned")

    assert result.is_success
    with open(result.file_path, "rb") as f:
        assert f.read() == captured


def test_unexpected_error_becomes_failed_result(output_dir, striped_png, make_surface, monkeypatch):
    def explode(reference, candidate):
        raise RuntimeError("boom")

    monkeypatch.setattr(exporter_module, "is_capture_flipped", explode)

    result = ImageExporter(output_dir).save_image(make_surface(striped_png), custom_name="pinned")

    assert not result.is_success
    assert result.message == "Failed to save image"
    assert result.file_path is None
    # Temporary file is cleaned up on the failure path too
    assert files_in(output_dir) == []


def test_snapshot_uses_configured_pixel_ratio(output_dir, striped_png, make_surface):
    surface = make_surface(striped_png)
    ImageExporter(output_dir, pixel_ratio=1.0).save_image(surface)
    assert surface.ratios == [1.0]
