"""
Region Analysis Module

Extracts candidate regions from a binary mask:
1. Trace the outer borders of top-level foreground regions
2. Filter by minimum enclosed area (remove noise)
3. Compute the centroid from polygon moments

Also provides summary helpers over the resulting candidate list.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import numpy as np
from PIL import Image

from .contour_tracing import find_external_contours
from .models import Candidate
from .moments import contour_area, contour_moments

logger = logging.getLogger(__name__)

# Below this zeroth moment a region has no usable mass
MIN_MOMENT = 1e-9

DEFAULT_MIN_AREA = 1.0


def extract_candidates(
    mask: Union[np.ndarray, Image.Image],
    min_area: float = DEFAULT_MIN_AREA
) -> List[Candidate]:
    """
    Extract candidate regions (centroid + area) from a binary mask.

    Workflow:
    1. Find external contours (nested regions are ignored)
    2. Discard contours enclosing less than ``min_area``
    3. Discard contours with a vanishing zeroth moment
    4. Truncate the moment centroid to integer pixel coordinates
    5. Discard centroids with negative coordinates

    Every contour is judged on its own; discarding one never affects
    another. A negative ``min_area`` disables area filtering.

    Args:
        mask: Binary mask of shape (height, width) or (height, width, 1),
            or a single-channel PIL image; non-zero pixels are foreground
        min_area: Minimum enclosed contour area in pixels (inclusive)

    Returns:
        Candidates in contour discovery order (row-major by each
        region's first border pixel)

    Raises:
        InvalidImage: If mask is None, empty or has more than one channel
        TypeError: If mask type is not supported

    Example:
        >>> mask = binarize(frame, threshold=200)
        >>> candidates = extract_candidates(mask, min_area=4.0)
        >>> candidates[0]
        Candidate(x=160, y=87, area=42.0)
    """
    try:
        if min_area < 0:
            logger.debug(f"Negative min_area ({min_area}), area filter disabled")

        contours = find_external_contours(mask)

        logger.debug(f"Found {len(contours)} contours in mask")

        candidates = []

        for contour in contours:
            area = contour_area(contour)

            if area < min_area:
                continue

            moments = contour_moments(contour)
            if abs(moments.m00) < MIN_MOMENT:
                logger.debug(f"Skipped zero-mass contour at {contour[0].tolist()}")
                continue

            cx = int(moments.m10 / moments.m00)
            cy = int(moments.m01 / moments.m00)

            if cx < 0 or cy < 0:
                logger.debug(f"Skipped contour with negative centroid ({cx}, {cy})")
                continue

            candidates.append(Candidate(x=cx, y=cy, area=area))

        logger.info(
            f"Extracted {len(candidates)} candidates from {len(contours)} contours "
            f"(min_area={min_area})"
        )

        return candidates

    except Exception as e:
        logger.error(f"Error extracting candidates: {e}")
        raise


def get_largest_candidate(candidates: List[Candidate]) -> Optional[Candidate]:
    """
    Get the candidate with the largest area.

    Args:
        candidates: List of candidates

    Returns:
        Largest candidate or None if the list is empty
    """
    if not candidates:
        return None

    return max(candidates, key=lambda c: c.area)


def calculate_total_candidate_area(candidates: List[Candidate]) -> float:
    """Calculate the total contour area covered by all candidates."""
    return float(sum(c.area for c in candidates))


def get_candidate_summary(candidates: List[Candidate]) -> Dict[str, Any]:
    """
    Generate a summary of all detected candidates.

    Args:
        candidates: List of candidates

    Returns:
        Summary dictionary with statistics

    Example:
        >>> summary = get_candidate_summary(candidates)
        >>> summary
        {
            'count': 2,
            'total_area': 130.0,
            'mean_area': 65.0,
            'largest_area': 81.0
        }
    """
    if not candidates:
        return {
            'count': 0,
            'total_area': 0.0,
            'mean_area': 0.0,
            'largest_area': 0.0
        }

    areas = [c.area for c in candidates]

    summary = {
        'count': len(candidates),
        'total_area': float(sum(areas)),
        'mean_area': float(np.mean(areas)),
        'largest_area': float(max(areas))
    }

    return summary
