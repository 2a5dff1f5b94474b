"""
Main Detection Pipeline Module

Orchestrates the complete blob detection workflow:
1. Binarization (grayscale + fixed threshold)
2. Region extraction (external contours, area filter, centroids)
3. Optional cropping of a window around every candidate
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image

from .config import DetectionConfig
from .cropping import DEFAULT_REGION_SIZE, crop_around
from .models import Candidate, CroppedRegion
from .preprocessing import as_image_array, binarize
from .region_analysis import (
    DEFAULT_MIN_AREA,
    extract_candidates,
    get_candidate_summary
)

logger = logging.getLogger(__name__)

ImageInput = Union[np.ndarray, Image.Image]


def detect_candidates(
    image: ImageInput,
    threshold: int,
    min_area: float = DEFAULT_MIN_AREA,
    return_mask: bool = False
) -> Union[List[Candidate], Tuple[List[Candidate], np.ndarray]]:
    """
    Detect candidate blobs: grayscale, threshold, trace contours, centroids.

    Args:
        image: Input image (PIL Image or numpy array, RGB/RGBA or grayscale)
        threshold: Luminance cutoff; brighter pixels are foreground
        min_area: Minimum enclosed contour area in pixels (inclusive)
        return_mask: Also return the intermediate binary mask

    Returns:
        List of candidates, or (candidates, mask) if return_mask is True

    Raises:
        InvalidImage: If image is None or has zero area

    Example:
        >>> candidates = detect_candidates(rgba_frame, threshold=200)
        >>> for c in candidates:
        ...     print(c.x, c.y, c.area)
    """
    mask = binarize(image, threshold)
    candidates = extract_candidates(mask, min_area=min_area)

    if return_mask:
        return candidates, mask

    return candidates


def detect_and_crop(
    image: ImageInput,
    threshold: int,
    min_area: float = DEFAULT_MIN_AREA,
    region_size: int = DEFAULT_REGION_SIZE,
    copy: bool = False
) -> List[Tuple[Candidate, CroppedRegion]]:
    """
    Detect candidates and crop a square window around each one.

    Crops are views into ``image`` unless ``copy`` is True; see
    crop_around() for the ownership rules.

    Args:
        image: Input image (PIL Image or numpy array)
        threshold: Luminance cutoff; brighter pixels are foreground
        min_area: Minimum enclosed contour area in pixels (inclusive)
        region_size: Side length of the crop window
        copy: Return copies instead of views

    Returns:
        List of (candidate, cropped region) pairs in detection order

    Raises:
        InvalidImage: If image is None or has zero area
        InvalidArgument: If region_size is not positive

    Example:
        >>> for candidate, roi in detect_and_crop(rgba_frame, 200):
        ...     with roi:
        ...         analyse(roi.pixels)
    """
    image = as_image_array(image)
    candidates = detect_candidates(image, threshold, min_area=min_area)

    return [
        (candidate, crop_around(image, candidate.x, candidate.y, region_size, copy=copy))
        for candidate in candidates
    ]


def run_detection(
    image: ImageInput,
    config: Optional[DetectionConfig] = None,
    include_crops: bool = False
) -> Dict[str, Any]:
    """
    Run detection with a DetectionConfig and report the outcome.

    Args:
        image: Input image (PIL Image or numpy array)
        config: Detection settings (defaults to DetectionConfig())
        include_crops: Also crop a window around every candidate using
            ``config.region_size`` and ``config.copy_crops``

    Returns:
        Dictionary with keys:
        - 'candidates': List[Dict] (x, y, area of each candidate)
        - 'summary': Dict (see get_candidate_summary)
        - 'threshold_used': int
        - 'min_area_used': float
        - 'processing_time_ms': float
        - 'crops': List[CroppedRegion] (only if include_crops is True)

    Raises:
        InvalidImage: If image is None or has zero area
    """
    if config is None:
        config = DetectionConfig()

    start_time = time.time()

    try:
        if include_crops:
            pairs = detect_and_crop(
                image,
                threshold=config.threshold,
                min_area=config.min_area,
                region_size=config.region_size,
                copy=config.copy_crops
            )
            candidates = [candidate for candidate, _ in pairs]
        else:
            pairs = None
            candidates = detect_candidates(
                image,
                threshold=config.threshold,
                min_area=config.min_area
            )

        summary = get_candidate_summary(candidates)
        processing_time = (time.time() - start_time) * 1000

        logger.info(
            f"Detection complete: count={summary['count']}, "
            f"total_area={summary['total_area']:.1f}, time={processing_time:.1f}ms"
        )

        result = {
            'candidates': [c.to_dict() for c in candidates],
            'summary': summary,
            'threshold_used': config.threshold,
            'min_area_used': config.min_area,
            'processing_time_ms': float(processing_time)
        }

        if pairs is not None:
            result['crops'] = [region for _, region in pairs]

        return result

    except Exception as e:
        logger.error(f"Error during detection: {e}", exc_info=True)
        raise


def batch_detect(
    images: list,
    threshold: int,
    **detection_kwargs
) -> List[List[Candidate]]:
    """
    Perform detection on multiple images in batch.

    Args:
        images: List of images (PIL Images or numpy arrays)
        threshold: Luminance cutoff applied to every image
        **detection_kwargs: Additional arguments for detect_candidates()

    Returns:
        One candidate list per input image, in input order

    Example:
        >>> results = batch_detect([frame1, frame2], threshold=200)
        >>> [len(r) for r in results]
        [3, 1]
    """
    detection_kwargs.pop('return_mask', None)

    results = []

    for image in images:
        results.append(detect_candidates(image, threshold, **detection_kwargs))

    logger.info(f"Batch detection finished for {len(images)} images")

    return results
