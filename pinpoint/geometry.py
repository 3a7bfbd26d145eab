"""
Geometry - contain-fit sizing and screen/image coordinate mapping.

Points and sizes are plain (x, y) / (width, height) tuples of floats.
"""


def is_network_source(source):
    """Check if an image source is a network URL rather than a local path"""
    return source.startswith("http")


def compute_display_size(image_width, image_height, container_size):
    """
    Compute the largest size that fits in the container with the image's aspect ratio.

    Args:
        image_width: Original image width in pixels
        image_height: Original image height in pixels
        container_size: (width, height) of the bounding box

    Returns:
        (display_width, display_height) as floats

    Raises:
        ValueError: If any dimension is not positive
    """
    container_width, container_height = container_size
    if image_width <= 0 or image_height <= 0:
        raise ValueError("Image dimensions must be positive")
    if container_width <= 0 or container_height <= 0:
        raise ValueError("Container dimensions must be positive")

    image_aspect = image_width / image_height
    container_aspect = container_width / container_height

    if container_aspect > image_aspect:
        # Container is wider than the image - fit to height
        display_height = float(container_height)
        display_width = display_height * image_aspect
    else:
        # Container is taller than the image - fit to width
        display_width = float(container_width)
        display_height = display_width / image_aspect

    return display_width, display_height


def map_screen_point_to_image_space(screen_point, container_size, display_size,
                                    image_width, image_height):
    """
    Convert a point relative to the container's top-left corner into image coordinates.

    The point is normalised against the container, not the inset image, so
    the letterbox offset is ignored. Results are exact only when the
    container hugs the image (same aspect ratio).

    Args:
        screen_point: (x, y) relative to the container origin
        container_size: (width, height) of the container
        display_size: (width, height) from compute_display_size
        image_width: Original image width
        image_height: Original image height

    Returns:
        (x, y) in image pixel space, or None if the point falls off the image
    """
    screen_x, screen_y = screen_point
    container_width, container_height = container_size
    display_width, display_height = display_size

    img_x = (screen_x / container_width) * display_width
    img_y = (screen_y / container_height) * display_height

    # Bounds are inclusive, a tap on the far edge still lands on the image
    if img_x < 0 or img_x > image_width or img_y < 0 or img_y > image_height:
        return None

    return img_x, img_y


def map_image_point_to_screen(image_point, container_size, display_size):
    """Inverse of map_screen_point_to_image_space (no bounds check)"""
    img_x, img_y = image_point
    container_width, container_height = container_size
    display_width, display_height = display_size

    screen_x = img_x / display_width * container_width
    screen_y = img_y / display_height * container_height
    return screen_x, screen_y


def fit_container_size(image_width, image_height, max_size):
    """
    Size a container so it hugs the image inside a maximum box.

    The host uses this as its aspect-ratio box, which keeps the container
    and the displayed image identical and the tap mapping exact. Small
    images are not enlarged, so mapped taps stay inside the image bounds.
    """
    max_width = min(max_size[0], image_width)
    max_height = min(max_size[1], image_height)
    display_width, display_height = compute_display_size(image_width, image_height,
                                                         (max_width, max_height))
    return max(1, int(round(display_width))), max(1, int(round(display_height)))
