"""
PinStore - Holds the pins placed on the current image and turns clicks into pins.
"""

import logging

from .constants import DEFAULT_EDITING_COMPLETE_DELAY, LogMessages
from .debounce import Debouncer
from .geometry import compute_display_size, map_screen_point_to_image_space
from .models import ImageDimensions, Pin


class PinStore:
    """
    Ordered set of pins for one image session.

    Pins are kept in insertion order, which is also the drawing order (later
    pins on top). Every change replaces the whole tuple and hands it to
    on_pins_updated.

    New pins copy the visual of the selected style. With no style selected,
    clicks are ignored.
    """

    def __init__(self, on_pins_updated=None, initial_pins=(), on_editing_complete=None,
                 editing_complete_delay=DEFAULT_EDITING_COMPLETE_DELAY, scheduler=None):
        """
        Initialize the pin store.

        Args:
            on_pins_updated: Called with the full pin tuple after every change
            initial_pins: Pins to start with
            on_editing_complete: Called once no pin has been added for
                                 editing_complete_delay seconds (optional)
            editing_complete_delay: Quiet period in seconds
            scheduler: Timer scheduler for the editing-complete debounce
        """
        self.on_pins_updated = on_pins_updated
        self._pins = tuple(initial_pins)
        self._selected_style = None
        self._image_dimensions = ImageDimensions.placeholder()

        self._editing_debouncer = None
        if on_editing_complete is not None:
            self._editing_debouncer = Debouncer(editing_complete_delay, on_editing_complete,
                                                scheduler=scheduler)

    @property
    def pins(self):
        return self._pins

    def __len__(self):
        return len(self._pins)

    @property
    def selected_style(self):
        return self._selected_style

    @selected_style.setter
    def selected_style(self, style):
        """Set the template for new pins (a Pin, whose position is ignored, or a bare visual)"""
        self._selected_style = style

    @property
    def image_dimensions(self):
        return self._image_dimensions

    @image_dimensions.setter
    def image_dimensions(self, dimensions):
        self._image_dimensions = dimensions

    def add_pin(self, tap_x, tap_y, container_size):
        """
        Add a pin where the user clicked.

        Args:
            tap_x: X coordinate relative to the container
            tap_y: Y coordinate relative to the container
            container_size: (width, height) of the container that was clicked

        Returns:
            Pin: The new pin, or None if nothing was added
        """
        if self._selected_style is None:
            return None

        dims = self._image_dimensions
        try:
            display_size = compute_display_size(dims.width, dims.height, container_size)
        except ValueError as e:
            logging.warning(f"{LogMessages.ERROR_ADDING_PIN}{e}")
            return None

        position = map_screen_point_to_image_space(
            (tap_x, tap_y), container_size, display_size, dims.width, dims.height)
        if position is None:
            logging.debug(f"Click at ({tap_x}, {tap_y}) is outside the image, ignored")
            return None

        pin = Pin(position=position, visual=self._visual_for_new_pin())
        self._pins = self._pins + (pin,)
        self._notify()

        if self._editing_debouncer is not None:
            self._editing_debouncer.trigger()

        return pin

    def _visual_for_new_pin(self):
        style = self._selected_style
        if isinstance(style, Pin):
            return style.visual
        return style

    def clear(self):
        """Remove all pins"""
        self._pins = ()
        self._notify()

    def set_pins(self, pins):
        """Replace all pins at once"""
        self._pins = tuple(pins)
        self._notify()

    def reset(self):
        """Start over for a new image: no pins, no selection, placeholder dimensions"""
        if self._editing_debouncer is not None:
            self._editing_debouncer.cancel()
        self._selected_style = None
        self._image_dimensions = ImageDimensions.placeholder()
        self.clear()

    def _notify(self):
        if self.on_pins_updated is not None:
            self.on_pins_updated(self._pins)
