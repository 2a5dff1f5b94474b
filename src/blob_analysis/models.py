"""
Value types shared across the pipeline.

Candidate is the output unit of region extraction; CroppedRegion is the
output of region cropping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Candidate:
    """One detected region: integer centroid and enclosed contour area."""

    x: int
    y: int
    area: float

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y, 'area': self.area}


class CroppedRegion:
    """
    Rectangular window into a source image.

    ``pixels`` is either a numpy view sharing the source buffer or an
    independent copy, depending on how the region was created. A view
    reflects later writes to the source, so the source should stay
    unchanged for as long as the crop is in use.

    Can be used as a context manager; leaving the block calls release(),
    which drops the reference to the pixel data.

    Example:
        >>> with crop_around(image, 120, 80, region_size=40) as region:
        ...     region.pixels.shape
        (40, 40, 4)
    """

    def __init__(
        self,
        pixels: np.ndarray,
        start_x: int,
        start_y: int,
        width: int,
        height: int,
        is_view: bool = True
    ):
        self._pixels = pixels
        self.start_x = start_x
        self.start_y = start_y
        self.width = width
        self.height = height
        self.is_view = is_view

    @property
    def pixels(self) -> Optional[np.ndarray]:
        """Pixel data of the window, or None once released."""
        return self._pixels

    @property
    def released(self) -> bool:
        return self._pixels is None

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        """Window as (x, y, width, height)."""
        return (self.start_x, self.start_y, self.width, self.height)

    def contains(self, x: int, y: int) -> bool:
        """Check whether a source-image pixel lies inside this window."""
        return (self.start_x <= x < self.start_x + self.width and
                self.start_y <= y < self.start_y + self.height)

    def release(self) -> None:
        self._pixels = None

    def __enter__(self) -> 'CroppedRegion':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()

    def __repr__(self) -> str:
        state = 'released' if self.released else ('view' if self.is_view else 'copy')
        return (
            f"CroppedRegion(start_x={self.start_x}, start_y={self.start_y}, "
            f"width={self.width}, height={self.height}, {state})"
        )
