"""
Pin point library - pin placement, coordinate mapping and composite export.
"""

from .models import Pin, PinStyle, ImageDimensions, OperationResult, GalleryResult
from .geometry import compute_display_size, map_screen_point_to_image_space
from .pin_store import PinStore
from .image_source import ImageSourceLoader, ImageSession, ImageSourceError, ImageSourceTimeout
from .orientation import is_vertically_flipped, flip_vertically
from .render_surface import RenderSurface
from .gallery import Gallery, DirectoryGallery
from .exporter import ImageExporter
from .config import PinPointConfig

__all__ = [
    'Pin',
    'PinStyle',
    'ImageDimensions',
    'OperationResult',
    'GalleryResult',
    'compute_display_size',
    'map_screen_point_to_image_space',
    'PinStore',
    'ImageSourceLoader',
    'ImageSession',
    'ImageSourceError',
    'ImageSourceTimeout',
    'is_vertically_flipped',
    'flip_vertically',
    'RenderSurface',
    'Gallery',
    'DirectoryGallery',
    'ImageExporter',
    'PinPointConfig',
]
