"""
RenderSurface - Composes the base image and its pins into one raster.

The host window shows render(1.0); export captures render(pixel_ratio),
so what gets saved is exactly what is on screen, only sharper.
"""

import logging
import numpy as np
import cv2
import cv3

from .constants import BACKGROUND_COLOR, LogMessages
from .geometry import compute_display_size, map_image_point_to_screen
from .models import PinStyle
from .orientation import encode_png

DEFAULT_PIN_STYLE = PinStyle()
LABEL_FONT = cv2.FONT_HERSHEY_SIMPLEX


def measure_pin(style, scale=1.0):
    """
    Measure the bounding box of a PinStyle marker.

    Returns:
        (width, height, text_width, text_height) in output pixels
    """
    radius = int(round(style.radius * scale))
    text_width = text_height = 0
    if style.label:
        (text_width, text_height), _ = cv2.getTextSize(
            style.label, LABEL_FONT, 0.5 * scale, max(1, int(scale)))
    return max(2 * radius, text_width), max(2 * radius, text_height), text_width, text_height


def draw_pin_style(canvas_image, visual, x, y, scale=1.0):
    """
    Default pin renderer: filled circle with a label, centered on (x, y).

    Visuals that are not a PinStyle are drawn with the default style.
    """
    style = visual if isinstance(visual, PinStyle) else DEFAULT_PIN_STYLE

    # Measure first, then offset by half the size so the marker is centered on the point
    _, _, text_width, text_height = measure_pin(style, scale)
    radius = max(1, int(round(style.radius * scale)))

    cv3.circle(canvas_image, x, y, radius, color=style.color, fill=True)
    if style.label:
        origin = (int(x - text_width / 2), int(y + text_height / 2))
        cv2.putText(canvas_image, style.label, origin, LABEL_FONT, 0.5 * scale,
                    style.label_color, max(1, int(scale)), cv2.LINE_AA)


class RenderSurface:
    """
    Off-screen composition of one image and its pins.

    The container is the box the image is contain-fitted into, in screen
    pixels. Pins store image coordinates and are mapped back to container
    coordinates when drawn, the inverse of how clicks are mapped.
    """

    def __init__(self, container_size=None, pin_renderer=None):
        """
        Args:
            container_size: (width, height) in screen pixels, or None until laid out
            pin_renderer: function(canvas_image, visual, x, y, scale) drawing one
                          pin centered on (x, y); defaults to draw_pin_style
        """
        self.container_size = container_size
        self.pin_renderer = pin_renderer if pin_renderer is not None else draw_pin_style
        self.image = None
        self.pins = ()

    def set_image(self, image):
        """Set the base image (numpy array, RGB, RGBA or greyscale)"""
        if image is not None:
            if image.ndim == 2:
                image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
            elif image.shape[2] == 4:
                image = cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
        self.image = image

    def set_pins(self, pins):
        self.pins = tuple(pins)

    def resize(self, width, height):
        """Update container dimensions"""
        self.container_size = (width, height)

    @property
    def is_mounted(self):
        """Check if there is something to draw"""
        if self.image is None or self.container_size is None:
            return False
        width, height = self.container_size
        return width > 0 and height > 0

    def render(self, scale=1.0):
        """
        Draw the composition.

        Args:
            scale: Oversampling factor applied to the container size

        Returns:
            RGB numpy array of size container_size * scale, or None if not mounted
        """
        if not self.is_mounted:
            return None

        container_width, container_height = self.container_size
        out_width = max(1, int(round(container_width * scale)))
        out_height = max(1, int(round(container_height * scale)))
        canvas_image = np.full((out_height, out_width, 3), BACKGROUND_COLOR, dtype=np.uint8)

        height, width = self.image.shape[:2]
        display_size = compute_display_size(width, height, self.container_size)

        new_width = min(out_width, max(1, int(round(display_size[0] * scale))))
        new_height = min(out_height, max(1, int(round(display_size[1] * scale))))
        display_image = cv3.resize(self.image, new_width, new_height)

        # Center the image in the container
        x_offset = (out_width - new_width) // 2
        y_offset = (out_height - new_height) // 2
        canvas_image[y_offset:y_offset + new_height, x_offset:x_offset + new_width] = display_image

        # Later pins are drawn on top
        for pin in self.pins:
            screen_x, screen_y = map_image_point_to_screen(
                pin.position, self.container_size, display_size)
            self.pin_renderer(canvas_image, pin.visual,
                              int(round(screen_x * scale)), int(round(screen_y * scale)), scale)

        return canvas_image

    def snapshot(self, pixel_ratio=1.0):
        """
        Capture the composition as PNG bytes.

        Returns:
            bytes, or None if the surface is not mounted or encoding failed
        """
        try:
            rgb = self.render(pixel_ratio)
        except (cv2.error, ValueError) as e:
            logging.error(f"{LogMessages.ERROR_CAPTURING_IMAGE}{e}")
            return None

        if rgb is None:
            return None

        return encode_png(cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
