"""
Configuration - defaults for the pin point tool and their command line overrides.
"""

from dataclasses import dataclass
from typing import Tuple

from .constants import DEFAULT_EDITING_COMPLETE_DELAY, DEFAULT_LOAD_TIMEOUT, DEFAULT_PIXEL_RATIO
from .exporter import DEFAULT_OUTPUT_DIR
from .gallery import DEFAULT_GALLERY_DIR


@dataclass
class PinPointConfig:
    """Settings shared by the GUI and the headless export"""

    output_dir: str = DEFAULT_OUTPUT_DIR
    gallery_dir: str = DEFAULT_GALLERY_DIR
    pixel_ratio: float = DEFAULT_PIXEL_RATIO
    load_timeout: float = DEFAULT_LOAD_TIMEOUT
    editing_complete_delay: float = DEFAULT_EDITING_COMPLETE_DELAY
    max_canvas_size: Tuple[int, int] = (800, 600)
    save_to_gallery: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ValueError for settings that cannot work"""
        if self.pixel_ratio <= 0:
            raise ValueError("Pixel ratio must be positive")
        if self.load_timeout <= 0:
            raise ValueError("Timeout must be positive")

    @classmethod
    def from_args(cls, args):
        """
        Build a config from parsed command line arguments.

        Options left at None keep their defaults.
        """
        config = cls()
        overrides = {
            'output_dir': getattr(args, 'output_dir', None),
            'gallery_dir': getattr(args, 'gallery_dir', None),
            'pixel_ratio': getattr(args, 'pixel_ratio', None),
            'load_timeout': getattr(args, 'timeout', None),
        }
        for name, value in overrides.items():
            if value is not None:
                setattr(config, name, value)

        config.save_to_gallery = bool(getattr(args, 'save_to_gallery', False))
        config.validate()
        return config
