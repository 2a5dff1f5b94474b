"""
Blob Analysis Module for Region-of-Interest Detection

This module finds small bright blobs in a still image and cuts a tightly
bounded window around each one. Image acquisition and any downstream use of
the results are left to the caller.

Main components:
- preprocessing: Grayscale reduction and fixed-threshold binarization
- contour_tracing: Border following for external region contours
- moments: Polygon area and centroid moments
- region_analysis: Candidate extraction and summaries
- cropping: Bounds-safe square crops around a point
- detection: Pipeline orchestration
- config: Detection settings (YAML)

Example usage:
    from blob_analysis import detect_candidates, crop_around

    candidates = detect_candidates(rgba_frame, threshold=200)

    for c in candidates:
        with crop_around(rgba_frame, c.x, c.y, 40) as roi:
            print(c.x, c.y, c.area, roi.pixels.shape)
"""

__version__ = "0.1.0"
__author__ = "Blob Analysis Team"

from .config import DetectionConfig, load_config
from .cropping import compute_crop_window, crop_around
from .detection import batch_detect, detect_and_crop, detect_candidates, run_detection
from .exceptions import BlobAnalysisError, InvalidArgument, InvalidImage
from .models import Candidate, CroppedRegion
from .preprocessing import binarize
from .region_analysis import extract_candidates

__all__ = [
    'BlobAnalysisError',
    'Candidate',
    'CroppedRegion',
    'DetectionConfig',
    'InvalidArgument',
    'InvalidImage',
    'batch_detect',
    'binarize',
    'compute_crop_window',
    'crop_around',
    'detect_and_crop',
    'detect_candidates',
    'extract_candidates',
    'load_config',
    'run_detection',
]
