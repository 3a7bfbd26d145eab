"""
ImageExporter - Captures the pinned composition and writes it out as PNG.
"""

import logging
import os
import tempfile
import time

from .constants import (
    DEFAULT_PIXEL_RATIO,
    LogMessages,
    MSG_CAPTURE_FAILED,
    MSG_SAVE_FAILED,
    MSG_SAVE_SUCCEEDED,
)
from .models import GalleryResult, OperationResult
from .orientation import flip_vertically, is_capture_flipped

DEFAULT_OUTPUT_DIR = os.path.join(tempfile.gettempdir(), "pin-point")


class ImageExporter:
    """
    Save pipeline for a render surface.

    Each save runs these steps once, without retries:

    1. Snapshot the surface at pixel_ratio to PNG bytes
    2. Write the bytes to a temporary file next to the output
    3. Compare the capture with the re-read temporary file and undo a
       vertical flip if one is detected
    4. Write the final PNG into output_dir, replacing a file of the same name
    5. Optionally hand the bytes to the gallery
    6. Remove the temporary file, whatever happened

    Failures come back as an OperationResult and are never raised. A failed
    orientation correction is not one of them: the capture is saved as it
    was taken. A failed gallery save still reports the local file path,
    since that file has already been written.
    """

    def __init__(self, output_dir=DEFAULT_OUTPUT_DIR, gallery=None,
                 pixel_ratio=DEFAULT_PIXEL_RATIO, clock_ns=time.time_ns):
        """
        Args:
            output_dir: Directory for exported files (created on demand)
            gallery: Gallery used when persisting is requested (optional)
            pixel_ratio: Oversampling factor for the capture
            clock_ns: Time source in nanoseconds, used for generated file names
        """
        self.output_dir = output_dir
        self.gallery = gallery
        self.pixel_ratio = pixel_ratio
        self.clock_ns = clock_ns

    def file_name_for(self, custom_name=None):
        """<custom_name>.png, or <microseconds since epoch>.png"""
        if custom_name:
            return f"{custom_name}.png"
        return f"{self.clock_ns() // 1000}.png"

    def save_image(self, surface, skip_save_to_gallery=True, custom_name=None):
        """
        Save the composition, by default to output_dir only.

        Args:
            surface: Object with snapshot(pixel_ratio) returning PNG bytes or None
            skip_save_to_gallery: When False the image also goes to the gallery
            custom_name: File name without extension (optional)

        Returns:
            OperationResult
        """
        return self.save_composite(surface, persist_to_gallery=not skip_save_to_gallery,
                                   custom_name=custom_name)

    def save_composite(self, surface, persist_to_gallery=False, custom_name=None):
        """Run the save pipeline, see the class docstring"""
        temp_path = None
        try:
            file_name = self.file_name_for(custom_name)
            os.makedirs(self.output_dir, exist_ok=True)
            final_path = os.path.join(self.output_dir, file_name)

            image_bytes = surface.snapshot(self.pixel_ratio)
            if image_bytes is None:
                logging.error(f"{LogMessages.ERROR_CAPTURING_IMAGE}surface produced no image")
                return OperationResult(is_success=False, message=MSG_CAPTURE_FAILED)

            temp_path = os.path.join(self.output_dir, f"temp_{file_name}")
            with open(temp_path, "wb") as f:
                f.write(image_bytes)

            image_bytes = self._correct_orientation(image_bytes, temp_path)

            with open(final_path, "wb") as f:
                f.write(image_bytes)
            logging.info(f"Image written to {final_path}")

            if persist_to_gallery:
                gallery_result = self._persist_to_gallery(image_bytes, file_name)
                if not gallery_result.is_success:
                    message = gallery_result.error_message or "Failed to save image to gallery"
                    return OperationResult(is_success=False, message=message, file_path=final_path)

            return OperationResult(is_success=True, message=MSG_SAVE_SUCCEEDED, file_path=final_path)
        except Exception:
            logging.exception(LogMessages.ERROR_SAVING_IMAGE)
            return OperationResult(is_success=False, message=MSG_SAVE_FAILED)
        finally:
            if temp_path is not None:
                self._remove_temp_file(temp_path)

    def _correct_orientation(self, image_bytes, temp_path):
        with open(temp_path, "rb") as f:
            saved_bytes = f.read()

        flipped = is_capture_flipped(image_bytes, saved_bytes)
        logging.info(f"{LogMessages.INFO_IMAGE_FLIP_STATE}{flipped}")
        if not flipped:
            return image_bytes

        corrected = flip_vertically(image_bytes)
        if corrected is None:
            logging.warning("Orientation correction failed, saving the capture as taken")
            return image_bytes
        return corrected

    def _persist_to_gallery(self, image_bytes, file_name):
        if self.gallery is None:
            logging.error(f"{LogMessages.ERROR_GALLERY}no gallery configured")
            return GalleryResult(is_success=False, error_message="No gallery configured")

        try:
            return self.gallery.save_image(image_bytes, file_name, skip_if_exists=False)
        except Exception as e:
            logging.exception(LogMessages.ERROR_GALLERY)
            return GalleryResult(is_success=False, error_message=f"Could not save to gallery: {e}")

    def _remove_temp_file(self, temp_path):
        if not os.path.exists(temp_path):
            return
        try:
            os.remove(temp_path)
        except OSError as e:
            logging.warning(f"Could not remove temporary file {temp_path}: {e}")
