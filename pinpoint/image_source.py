"""
Image source loading - dimensions and pixels for local files and URLs.
"""

import io
import logging
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import cv3
import numpy as np
from PIL import Image
from pillow_heif import register_heif_opener  # For HEIC file support

from .constants import DEFAULT_LOAD_TIMEOUT, LogMessages
from .geometry import is_network_source
from .models import ImageDimensions

# Register HEIF opener with Pillow to enable HEIC support
register_heif_opener()

HEIF_EXTENSIONS = ('.heic', '.heif')


class ImageSourceError(Exception):
    """An image source could not be read or decoded"""


class ImageSourceTimeout(ImageSourceError):
    """Resolving an image source took longer than the allowed wait"""


class ImageSourceLoader:
    """
    Resolves image sources (local paths or http(s) URLs).

    Work runs on a thread pool so callers on a UI thread can wait on a
    future instead of blocking. Every resolution is bounded by `timeout`.
    """

    def __init__(self, timeout=DEFAULT_LOAD_TIMEOUT, max_workers=2):
        self.timeout = timeout
        self._workers = ThreadPoolExecutor(max_workers=max_workers,
                                           thread_name_prefix="image-source")
        # Waits on worker futures so async callers get the same bounded wait
        self._waiters = ThreadPoolExecutor(max_workers=max_workers,
                                           thread_name_prefix="image-source-wait")

    def shutdown(self):
        """Stop accepting work; running reads are left to finish"""
        self._workers.shutdown(wait=False, cancel_futures=True)
        self._waiters.shutdown(wait=False, cancel_futures=True)

    def read_bytes(self, source):
        """Read the raw encoded bytes of a source"""
        if is_network_source(source):
            with urllib.request.urlopen(source, timeout=self.timeout) as response:
                return response.read()

        with open(source, "rb") as f:
            return f.read()

    def _read_dimensions(self, source):
        data = self.read_bytes(source)
        # Pillow only parses the header to get the size
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
        return ImageDimensions(width, height)

    def resolve_dimensions(self, source):
        """
        Get the pixel size of an image source, waiting at most `timeout` seconds.

        Args:
            source: Local file path or http(s) URL

        Returns:
            ImageDimensions

        Raises:
            ImageSourceTimeout: If resolution did not finish in time
            ImageSourceError: If the source could not be read or decoded
        """
        future = self._workers.submit(self._read_dimensions, source)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as e:
            future.cancel()
            raise ImageSourceTimeout(
                f"Image loading timed out after {self.timeout:g} seconds") from e
        except Exception as e:
            raise ImageSourceError(f"Could not read image {source}: {e}") from e

    def resolve_dimensions_async(self, source):
        """Start resolve_dimensions in the background and return its Future"""
        return self._waiters.submit(self.resolve_dimensions, source)

    def load_image(self, source):
        """
        Load an image source as an RGB numpy array.

        Raises:
            ImageSourceError: If the image could not be loaded
        """
        is_heic = source.lower().endswith(HEIF_EXTENSIONS)

        if is_network_source(source) or is_heic:
            # URLs and HEIC go through Pillow
            try:
                data = self.read_bytes(source)
                with Image.open(io.BytesIO(data)) as img:
                    return np.array(img.convert('RGB'))
            except Exception as e:
                raise ImageSourceError(f"Could not load image {source}: {e}") from e

        # cv3 loads images in RGB by default
        try:
            image = cv3.imread(source)
        except Exception as e:
            raise ImageSourceError(f"Could not load image {source}: {e}") from e
        if image is None:
            raise ImageSourceError(f"Could not load image {source}")
        return image


class ImageSession:
    """
    One image shown to the user, with its pins.

    Opening a new source bumps a generation counter. Dimension results that
    arrive for an older generation, or after dispose(), are dropped, so a
    slow load can never overwrite the state of a newer image.

    dispatch(fn) moves result handling onto the caller's event loop. It
    defaults to calling fn immediately on the worker thread.
    """

    def __init__(self, loader, store, dispatch=None, on_dimensions=None, on_error=None):
        self.loader = loader
        self.store = store
        self.dispatch = dispatch if dispatch is not None else (lambda fn: fn())
        self.on_dimensions = on_dimensions
        self.on_error = on_error

        self.source = None
        self._generation = 0
        self._disposed = False

    @property
    def generation(self):
        return self._generation

    def is_current(self, generation):
        """Check if results for this generation may still be applied"""
        return not self._disposed and generation == self._generation

    def open(self, source):
        """
        Switch to a new image source.

        Pins and selection are cleared right away; dimensions fall back to
        the placeholder until the background resolution finishes.

        Returns:
            Future of the dimension resolution
        """
        if self._disposed:
            raise RuntimeError("Image session has been disposed")

        self._generation += 1
        generation = self._generation
        self.source = source
        self.store.reset()

        future = self.loader.resolve_dimensions_async(source)
        future.add_done_callback(
            lambda f: self.dispatch(lambda: self._apply_result(generation, source, f)))
        return future

    def _apply_result(self, generation, source, future):
        if not self.is_current(generation):
            logging.debug(f"Discarding dimensions for stale source {source}")
            return

        try:
            dimensions = future.result()
        except ImageSourceError as e:
            logging.error(f"{LogMessages.ERROR_LOADING_IMAGE_DIMENSIONS}{e}")
            if self.on_error is not None:
                self.on_error(source, e)
            return

        self.store.image_dimensions = dimensions
        logging.info(f"Image dimensions for {source}: {dimensions.width:g}x{dimensions.height:g}")
        if self.on_dimensions is not None:
            self.on_dimensions(source, dimensions)

    def dispose(self):
        """End the session; pending results will be ignored"""
        self._disposed = True
