"""
Region Cropping Module

Cuts a square window around a point of interest, clamped so that it never
leaves the source image:
1. Centre the window on the point
2. Shift it right/down if it starts before the image
3. Shift it left/up if it ends past the image
4. Shrink it to the image when the image is smaller than the window
"""

import logging
from typing import Tuple, Union

import numpy as np
from PIL import Image

from .exceptions import InvalidArgument
from .models import CroppedRegion
from .preprocessing import as_image_array

logger = logging.getLogger(__name__)

DEFAULT_REGION_SIZE = 40


def compute_crop_window(
    image_width: int,
    image_height: int,
    center_x: int,
    center_y: int,
    region_size: int = DEFAULT_REGION_SIZE
) -> Tuple[int, int, int, int]:
    """
    Calculate a bounds-safe square window around a point.

    The point may lie outside the image and ``region_size`` may exceed the
    image; the result is always a non-empty rectangle inside the image.

    Args:
        image_width: Source image width in pixels (> 0)
        image_height: Source image height in pixels (> 0)
        center_x: Window centre x coordinate
        center_y: Window centre y coordinate
        region_size: Requested side length of the square window

    Returns:
        Window as (start_x, start_y, width, height)

    Raises:
        InvalidArgument: If region_size is not positive

    Example:
        >>> compute_crop_window(640, 480, 5, 470, region_size=40)
        (0, 440, 40, 40)
    """
    if region_size <= 0:
        raise InvalidArgument(
            f"region_size must be > 0, got {region_size}",
            name='region_size',
            value=region_size
        )

    start_x = center_x - region_size // 2
    start_y = center_y - region_size // 2

    if start_x < 0:
        start_x = 0
    if start_y < 0:
        start_y = 0

    if start_x + region_size > image_width:
        start_x = max(0, image_width - region_size)
    if start_y + region_size > image_height:
        start_y = max(0, image_height - region_size)

    width = max(1, min(region_size, image_width - start_x))
    height = max(1, min(region_size, image_height - start_y))

    return start_x, start_y, width, height


def crop_around(
    image: Union[np.ndarray, Image.Image],
    center_x: int,
    center_y: int,
    region_size: int = DEFAULT_REGION_SIZE,
    copy: bool = False
) -> CroppedRegion:
    """
    Crop a square region around (center_x, center_y) with bounds checks.

    By default the returned pixels are a numpy view sharing the source
    buffer: no pixel data is copied, but writes to the source show up in
    the crop. Pass ``copy=True`` for an independent copy. PIL input is
    always converted to a new array first, so its crops never alias the
    PIL image.

    Args:
        image: Source image (PIL Image or numpy array)
        center_x: Window centre x coordinate
        center_y: Window centre y coordinate
        region_size: Requested side length of the square window
        copy: Return a copy instead of a view

    Returns:
        CroppedRegion fully inside the source image

    Raises:
        InvalidImage: If image is None or has zero area
        InvalidArgument: If region_size is not positive

    Example:
        >>> with crop_around(rgba_frame, c.x, c.y, 40) as roi:
        ...     roi.pixels.shape
        (40, 40, 4)
    """
    try:
        image = as_image_array(image)
        image_height, image_width = image.shape[:2]

        start_x, start_y, width, height = compute_crop_window(
            image_width, image_height, center_x, center_y, region_size
        )

        pixels = image[start_y:start_y + height, start_x:start_x + width]
        if copy:
            pixels = pixels.copy()

        logger.debug(
            f"Cropped ({center_x}, {center_y}) size={region_size} -> "
            f"x={start_x}, y={start_y}, {width}x{height}"
        )

        return CroppedRegion(
            pixels=pixels,
            start_x=start_x,
            start_y=start_y,
            width=width,
            height=height,
            is_view=not copy
        )

    except Exception as e:
        logger.error(f"Error cropping region around ({center_x}, {center_y}): {e}")
        raise
