"""
Tests for command line pin parsing and headless export.
"""

import argparse
import http.client
import os

import pytest

from pinpoint.config import PinPointConfig
from pinpoint.headless import export_image, parse_pin
from pinpoint.image_source import ImageSourceLoader
from pinpoint.orientation import decode_image


def read_saved(path):
    with open(path, "rb") as f:
        return decode_image(f.read())


@pytest.fixture
def config(tmp_path):
    return PinPointConfig(output_dir=str(tmp_path / "out"),
                          gallery_dir=str(tmp_path / "gallery"),
                          pixel_ratio=1.0)


def test_parse_pin_with_and_without_label():
    assert parse_pin("10,20") == (10.0, 20.0, "")
    assert parse_pin("1.5,2.5,A, B") == (1.5, 2.5, "A, B")


@pytest.mark.parametrize("text", ["10", "x,y", ""])
def test_parse_pin_rejects_bad_input(text):
    with pytest.raises(ValueError):
        parse_pin(text)


def test_export_writes_composite(config, image_file):
    result = export_image(config, image_file, [(25, 25, "1"), (75, 25, "")], custom_name="out")

    assert result.is_success
    assert result.file_path == os.path.join(config.output_dir, "out.png")
    saved = read_saved(result.file_path)
    assert saved.shape == (50, 100, 3)
    # Default pin style is red, drawn at (75, 25) over the blue half (BGR order)
    assert tuple(saved[25, 75]) == (0, 0, 255)
    assert not os.path.exists(config.gallery_dir)


def test_export_to_gallery(config, image_file):
    config.save_to_gallery = True
    result = export_image(config, image_file, [], custom_name="out")

    assert result.is_success
    assert os.path.exists(os.path.join(config.gallery_dir, "out.png"))


def test_out_of_bounds_pins_are_skipped(config, image_file):
    result = export_image(config, image_file, [(500, 500, "far")], custom_name="out")

    assert result.is_success
    saved = read_saved(result.file_path)
    # Untouched base image, blue on the right (BGR order)
    assert tuple(saved[25, 75]) == (255, 0, 0)


def test_missing_source_fails(config, tmp_path):
    result = export_image(config, str(tmp_path / "missing.png"), [])
    assert not result.is_success
    assert result.file_path is None


def test_truncated_download_fails(config):
    class TruncatedLoader(ImageSourceLoader):
        def read_bytes(self, source):
            raise http.client.IncompleteRead(b"", 512)

    loader = TruncatedLoader(timeout=5.0)
    try:
        result = export_image(config, "https://example.com/a.png", [(1, 1, "")], loader=loader)
    finally:
        loader.shutdown()

    assert not result.is_success
    assert result.file_path is None
    assert not os.path.exists(config.output_dir)


def test_config_from_args_overrides_given_options(tmp_path):
    args = argparse.Namespace(output_dir=str(tmp_path), gallery_dir=None, pixel_ratio=1.5,
                              timeout=None, save_to_gallery=True)

    config = PinPointConfig.from_args(args)

    assert config.output_dir == str(tmp_path)
    assert config.gallery_dir == PinPointConfig().gallery_dir
    assert config.pixel_ratio == 1.5
    assert config.load_timeout == 30.0
    assert config.save_to_gallery


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        PinPointConfig(pixel_ratio=0)
    with pytest.raises(ValueError):
        PinPointConfig.from_args(argparse.Namespace(timeout=-1.0))
