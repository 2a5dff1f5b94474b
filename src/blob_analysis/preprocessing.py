"""
Image Preprocessing Module

Turns a colour image into a binary foreground mask by:
- Converting to grayscale (weighted RGB -> luminance)
- Applying a fixed binary threshold

The mask is the input of region extraction (see region_analysis).
"""

import logging
from typing import Union

import cv2
import numpy as np
from PIL import Image

from .exceptions import InvalidImage

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 0
MAX_THRESHOLD = 255
FOREGROUND = 255


def as_image_array(image: Union[np.ndarray, Image.Image, None]) -> np.ndarray:
    """
    Validate an input image and return it as a numpy array.

    PIL images are converted (and therefore copied); numpy arrays are
    returned unchanged.

    Args:
        image: Input image (PIL Image or numpy array)

    Returns:
        Numpy array of shape (height, width) or (height, width, channels)

    Raises:
        InvalidImage: If image is None, empty or has an unsupported shape
        TypeError: If image type is not supported
    """
    if image is None:
        raise InvalidImage("Image is None")

    if isinstance(image, Image.Image):
        if image.mode not in ('L', 'RGB', 'RGBA'):
            image = image.convert('RGBA')
        image = np.array(image)
    elif not isinstance(image, np.ndarray):
        raise TypeError(f"Image must be PIL Image or numpy array, got {type(image)}")

    if image.ndim not in (2, 3):
        raise InvalidImage(f"Unexpected image shape: {image.shape}", shape=image.shape)

    if image.size == 0:
        raise InvalidImage(f"Image is empty: shape={image.shape}", shape=image.shape)

    return image


def to_grayscale(image: Union[np.ndarray, Image.Image]) -> np.ndarray:
    """
    Reduce an image to a single uint8 luminance channel.

    Colour images are expected in RGB or RGBA channel order. Non-uint8
    input is clipped to 0-255 before conversion; boolean input maps
    True to 255.

    Args:
        image: Input image (PIL Image or numpy array; 1, 3 or 4 channels)

    Returns:
        Grayscale numpy array of shape (height, width), dtype uint8

    Raises:
        InvalidImage: If image is None, empty or has an unsupported channel count
        TypeError: If image type is not supported

    Example:
        >>> rgba = np.zeros((480, 640, 4), dtype=np.uint8)
        >>> to_grayscale(rgba).shape
        (480, 640)
    """
    image = as_image_array(image)

    if image.dtype == np.bool_:
        image = image.astype(np.uint8) * FOREGROUND
    elif image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.ndim == 2:
        return image

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_RGB2GRAY)
    if channels == 4:
        return cv2.cvtColor(np.ascontiguousarray(image), cv2.COLOR_RGBA2GRAY)

    raise InvalidImage(f"Unsupported channel count: {channels}", shape=image.shape)


def binarize(image: Union[np.ndarray, Image.Image], threshold: int) -> np.ndarray:
    """
    Convert an image to a binary foreground mask.

    Pixels whose luminance is strictly greater than ``threshold`` become
    255, all others 0. Thresholds outside 0-255 are clamped into range,
    so anything at or above 255 yields an empty mask.

    Args:
        image: Input image (PIL Image or numpy array, RGB/RGBA or grayscale)
        threshold: Luminance cutoff (0-255)

    Returns:
        uint8 mask with the same height and width as the input

    Raises:
        InvalidImage: If image is None or has zero area
        TypeError: If image type is not supported

    Example:
        >>> mask = binarize(rgba_frame, threshold=200)
        >>> np.unique(mask)
        array([  0, 255], dtype=uint8)
    """
    try:
        gray = to_grayscale(image)

        if threshold < MIN_THRESHOLD or threshold > MAX_THRESHOLD:
            clamped = min(max(threshold, MIN_THRESHOLD), MAX_THRESHOLD)
            logger.warning(f"Threshold {threshold} out of range, clamped to {clamped}")
            threshold = clamped

        _, mask = cv2.threshold(
            np.ascontiguousarray(gray),
            threshold,
            FOREGROUND,
            cv2.THRESH_BINARY
        )

        logger.debug(
            f"Binarized image: shape={mask.shape}, threshold={threshold}, "
            f"foreground={int(np.count_nonzero(mask))}px"
        )

        return mask

    except Exception as e:
        logger.error(f"Error binarizing image: {e}")
        raise


def validate_binary_mask(mask: np.ndarray) -> bool:
    """
    Validate that an array is a well-formed binary mask.

    Args:
        mask: Numpy array to validate

    Returns:
        True if mask is 2D uint8 containing only 0 and 255

    Example:
        >>> validate_binary_mask(binarize(image, 128))
        True
    """
    if not isinstance(mask, np.ndarray):
        return False

    if mask.ndim != 2 or mask.size == 0:
        return False

    if mask.dtype != np.uint8:
        return False

    return bool(np.all((mask == 0) | (mask == FOREGROUND)))
