"""
Gallery - where exported images go when the user asks to keep them.
"""

import logging
import os

from .constants import LogMessages
from .models import GalleryResult

DEFAULT_GALLERY_DIR = os.path.join(os.path.expanduser("~"), "Pictures", "PinPoint")


class Gallery:
    """Interface for persisting encoded images somewhere the user can browse"""

    def save_image(self, data, file_name, skip_if_exists=False):
        """
        Store encoded image bytes under file_name.

        Returns:
            GalleryResult
        """
        raise NotImplementedError


class DirectoryGallery(Gallery):
    """Gallery backed by a folder, by default ~/Pictures/PinPoint"""

    def __init__(self, directory=DEFAULT_GALLERY_DIR):
        self.directory = directory

    def path_for(self, file_name):
        return os.path.join(self.directory, file_name)

    def save_image(self, data, file_name, skip_if_exists=False):
        path = self.path_for(file_name)

        if skip_if_exists and os.path.exists(path):
            logging.info(f"Gallery already has {file_name}, skipped")
            return GalleryResult(is_success=True)

        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logging.error(f"{LogMessages.ERROR_GALLERY}{e}")
            return GalleryResult(is_success=False, error_message=f"Could not save to gallery: {e}")

        logging.info(f"Saved {file_name} to gallery {self.directory}")
        return GalleryResult(is_success=True)
