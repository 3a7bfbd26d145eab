"""
Orientation - detects and undoes vertically mirrored captures.

Some capture paths hand back the composite upside down. There is no
metadata to tell, so detection compares the top row of a reference image
with the bottom row of the candidate and calls it flipped when most pixels
line up. This is a heuristic:

- An image whose top and bottom rows match (a solid colour, a plain
  border) always reads as flipped. Flipping such an image is harmless.
- An image that is symmetric top to bottom cannot be told apart from its
  mirror.
"""

import logging
import numpy as np
import cv2

from .constants import FLIP_MATCH_THRESHOLD, LogMessages


def decode_image(data):
    """
    Decode encoded image bytes (PNG, JPEG, ...) to a numpy array.

    Channels are kept as stored (BGR/BGRA order, 16-bit preserved).

    Returns:
        numpy array, or None if the bytes do not decode
    """
    if not data:
        return None

    try:
        buffer = np.frombuffer(data, dtype=np.uint8)
        return cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        logging.warning(f"Could not decode image: {e}")
        return None


def encode_png(image):
    """Encode a numpy image (BGR/BGRA/grey) to PNG bytes, or None on failure"""
    try:
        ok, encoded = cv2.imencode(".png", image)
    except cv2.error as e:
        logging.warning(f"Could not encode PNG: {e}")
        return None
    if not ok:
        return None
    return encoded.tobytes()


def is_vertically_flipped(reference, candidate):
    """
    Check if candidate looks like the vertical mirror of reference.

    Every column is sampled: pixel (x, 0) of the reference against pixel
    (x, height - 1) of the candidate, all channels must be equal. More
    than 75% matching columns counts as flipped.

    Args:
        reference: Decoded reference image (numpy array) or None
        candidate: Decoded candidate image (numpy array) or None

    Returns:
        bool: False when either image is missing or their shapes differ
    """
    if reference is None or candidate is None:
        return False

    if reference.shape != candidate.shape:
        return False

    height, width = reference.shape[:2]
    if width == 0 or height == 0:
        return False

    matches = reference[0] == candidate[height - 1]
    if matches.ndim > 1:
        # Multi-channel pixel only matches when every channel does
        matches = matches.all(axis=-1)

    match_count = int(np.count_nonzero(matches))
    return match_count > width * FLIP_MATCH_THRESHOLD


def is_capture_flipped(reference_bytes, candidate_bytes):
    """
    Decode two encoded images and run is_vertically_flipped on them.

    A buffer that fails to decode means "not flipped".
    """
    reference = decode_image(reference_bytes)
    if reference is None:
        logging.warning(f"{LogMessages.ERROR_CHECKING_FLIPPED_IMAGE}reference did not decode")
        return False

    candidate = decode_image(candidate_bytes)
    if candidate is None:
        logging.warning(f"{LogMessages.ERROR_CHECKING_FLIPPED_IMAGE}candidate did not decode")
        return False

    return is_vertically_flipped(reference, candidate)


def flip_vertically(data):
    """
    Mirror an encoded image top to bottom and re-encode it as PNG.

    Decoded buffers only live for the duration of this call and are
    released on both the success and the failure path.

    Args:
        data: Encoded image bytes

    Returns:
        bytes: PNG-encoded flipped image, or None if decoding or encoding failed
    """
    image = decode_image(data)
    if image is None:
        logging.error(f"{LogMessages.ERROR_FLIPPING_IMAGE}could not decode image")
        return None

    try:
        # Flip code 0 = around the x axis (translate to bottom edge, invert y)
        flipped = cv2.flip(image, 0)
    except cv2.error as e:
        logging.error(f"{LogMessages.ERROR_FLIPPING_IMAGE}{e}")
        return None

    encoded = encode_png(flipped)
    if encoded is None:
        logging.error(f"{LogMessages.ERROR_FLIPPING_IMAGE}could not encode result")
    return encoded
