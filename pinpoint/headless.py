"""
Headless export - render an image with pins and save it without opening a window.
"""

import logging

from .exporter import ImageExporter
from .gallery import DirectoryGallery
from .geometry import fit_container_size
from .image_source import ImageSourceError, ImageSourceLoader
from .models import OperationResult, PinStyle
from .pin_store import PinStore
from .render_surface import RenderSurface


def parse_pin(text):
    """
    Parse a pin given on the command line as "X,Y" or "X,Y,LABEL".

    Returns:
        (x, y, label) with label "" when absent

    Raises:
        ValueError: If the text is not in that form
    """
    parts = text.split(",", 2)
    if len(parts) < 2:
        raise ValueError(f"Pin must be X,Y or X,Y,LABEL, got {text!r}")
    x, y = float(parts[0]), float(parts[1])
    label = parts[2] if len(parts) == 3 else ""
    return x, y, label


def build_exporter(config):
    """Create the exporter (and gallery) described by a PinPointConfig"""
    return ImageExporter(output_dir=config.output_dir,
                         gallery=DirectoryGallery(config.gallery_dir),
                         pixel_ratio=config.pixel_ratio)


def export_image(config, source, pin_specs, custom_name=None, style=None, loader=None):
    """
    Load an image, place pins at image coordinates and save the composite.

    Args:
        config: PinPointConfig
        source: Local path or URL of the base image
        pin_specs: Iterable of (x, y, label) in original image pixel coordinates
        custom_name: Output file name without extension (optional)
        style: PinStyle used for every pin, labels are taken from pin_specs
        loader: ImageSourceLoader to use (one is created and shut down otherwise)

    Returns:
        OperationResult
    """
    style = style if style is not None else PinStyle()
    owns_loader = loader is None
    if owns_loader:
        loader = ImageSourceLoader(timeout=config.load_timeout)

    try:
        dimensions = loader.resolve_dimensions(source)
        image = loader.load_image(source)
    except ImageSourceError as e:
        logging.error(f"Could not load {source}: {e}")
        return OperationResult(is_success=False, message=str(e))
    finally:
        if owns_loader:
            loader.shutdown()

    container_size = fit_container_size(dimensions.width, dimensions.height,
                                        config.max_canvas_size)
    container_width, container_height = container_size

    store = PinStore()
    store.image_dimensions = dimensions
    for x, y, label in pin_specs:
        if not dimensions.contains(x, y):
            logging.warning(f"Pin ({x:g}, {y:g}) is outside the "
                            f"{dimensions.width:g}x{dimensions.height:g} image, skipped")
            continue
        store.selected_style = PinStyle(color=style.color, label=label, radius=style.radius,
                                        label_color=style.label_color)
        # Place the pin as if the user clicked the matching spot on screen
        store.add_pin(x / dimensions.width * container_width,
                      y / dimensions.height * container_height,
                      container_size)

    surface = RenderSurface(container_size)
    surface.set_image(image)
    surface.set_pins(store.pins)

    exporter = build_exporter(config)
    return exporter.save_image(surface, skip_save_to_gallery=not config.save_to_gallery,
                               custom_name=custom_name)
