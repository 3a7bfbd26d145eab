"""
Data model - pins, image dimensions and operation results.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Pin:
    """
    A marker placed on an image.

    position is in original image pixel space, not screen space. visual is
    whatever the host chose at placement time (usually a PinStyle); the
    library only hands it to the pin renderer.
    """

    position: Tuple[float, float]
    visual: Any = None

    @property
    def x(self):
        return self.position[0]

    @property
    def y(self):
        return self.position[1]


@dataclass(frozen=True)
class PinStyle:
    """Default pin visual: a filled circle with a centered text label"""

    color: Tuple[int, int, int] = (255, 0, 0)
    label: str = ""
    radius: int = 10
    label_color: Tuple[int, int, int] = (255, 255, 255)


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel size of the original image"""

    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")

    @classmethod
    def placeholder(cls):
        """1:1 stand-in used until the real dimensions are known"""
        return cls(1.0, 1.0)

    def contains(self, x, y):
        """Check if a point lies on the image (edges included)"""
        return 0 <= x <= self.width and 0 <= y <= self.height


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one export attempt"""

    is_success: bool
    message: str
    file_path: Optional[str] = None


@dataclass(frozen=True)
class GalleryResult:
    """Outcome reported by a gallery backend"""

    is_success: bool
    error_message: Optional[str] = None
