"""
Shared fixtures for the pin point tests.
"""

import numpy as np
import pytest
from PIL import Image

from pinpoint.orientation import encode_png


class FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Collects scheduled callbacks so tests decide when time passes"""

    def __init__(self):
        self.handles = []

    def schedule(self, delay, callback):
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def run_pending(self):
        for handle in self.pending():
            handle.cancelled = True
            handle.callback()


class FakeSurface:
    """Render surface stand-in returning fixed bytes"""

    def __init__(self, data):
        self.data = data
        self.ratios = []

    def snapshot(self, pixel_ratio):
        self.ratios.append(pixel_ratio)
        return self.data


class FakeGallery:
    def __init__(self, result=None):
        from pinpoint.models import GalleryResult
        self.result = result if result is not None else GalleryResult(is_success=True)
        self.calls = []

    def save_image(self, data, file_name, skip_if_exists=False):
        self.calls.append((data, file_name, skip_if_exists))
        return self.result


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def striped_image():
    """8x6 BGR image whose rows are all different, so it is not top/bottom symmetric"""
    image = np.zeros((6, 8, 3), dtype=np.uint8)
    for row in range(6):
        image[row, :, 0] = row * 40
        image[row, :, 1] = 255 - row * 30
        image[row, :, 2] = np.arange(8) * 10
    return image


@pytest.fixture
def striped_png(striped_image):
    return encode_png(striped_image)


@pytest.fixture
def image_file(tmp_path):
    """100x50 RGB PNG on disk, red on the left half, blue on the right"""
    pixels = np.zeros((50, 100, 3), dtype=np.uint8)
    pixels[:, :50] = (255, 0, 0)
    pixels[:, 50:] = (0, 0, 255)
    path = tmp_path / "base.png"
    Image.fromarray(pixels).save(path)
    return str(path)


@pytest.fixture
def make_surface():
    return FakeSurface


@pytest.fixture
def make_gallery():
    return FakeGallery
