"""
Shared constants for the pin point library.
"""

# Oversampling factor used when capturing the composite for export
DEFAULT_PIXEL_RATIO = 2.5

# Image dimension resolution gives up after this many seconds
DEFAULT_LOAD_TIMEOUT = 30.0

# Quiet period after the last added pin before editing counts as complete
DEFAULT_EDITING_COMPLETE_DELAY = 1.0

# Share of matching edge pixels above which a capture counts as vertically flipped
FLIP_MATCH_THRESHOLD = 0.75

# Background shown around a letterboxed image (grey, same as the canvas fill)
BACKGROUND_COLOR = (64, 64, 64)

MSG_CAPTURE_FAILED = "Failed to capture image"
MSG_SAVE_FAILED = "Failed to save image"
MSG_SAVE_SUCCEEDED = "Image saved successfully"


class LogMessages:
    """Prefixes for log output so failures read the same everywhere"""

    ERROR_BUILDING_IMAGE = "Error: building image: "
    ERROR_CAPTURING_IMAGE = "Error: capturing image: "
    ERROR_FLIPPING_IMAGE = "Error: flipping image: "
    ERROR_SAVING_IMAGE = "Error: saving image: "
    INFO_IMAGE_FLIP_STATE = "Info: image flip state: "
    ERROR_CHECKING_FLIPPED_IMAGE = "Error: checking flipped image: "
    ERROR_LOADING_IMAGE_DIMENSIONS = "Error: loading image dimensions: "
    ERROR_ADDING_PIN = "Error: adding pin: "
    ERROR_GALLERY = "Error: saving to gallery: "
