"""
Polygon Moments Module

Area and low-order spatial moments of a closed polygon, computed from its
vertices with Green's theorem (the shoelace formula for the area).
Used to turn traced contours into region area and centroid.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class Moments:
    """Zeroth and first order moments of a polygon."""

    m00: float
    m10: float
    m01: float

    @property
    def centroid(self) -> Tuple[float, float]:
        """Centroid as (x, y). Undefined (division by zero) when m00 is 0."""
        return (self.m10 / self.m00, self.m01 / self.m00)


def _vertex_arrays(contour: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    points = np.asarray(contour, dtype=np.float64).reshape(-1, 2)
    x = points[:, 0]
    y = points[:, 1]
    return x, y, np.roll(x, -1), np.roll(y, -1)


def contour_area(contour: np.ndarray, oriented: bool = False) -> float:
    """
    Calculate the area enclosed by a closed polygon.

    Args:
        contour: Polygon vertices as an (N, 2) array of (x, y)
        oriented: Return the signed area (sign follows vertex order)

    Returns:
        Polygon area in pixel units; 0.0 for fewer than 3 vertices

    Example:
        >>> contour_area(np.array([[0, 0], [0, 4], [4, 4], [4, 0]]))
        16.0
    """
    if len(contour) < 3:
        return 0.0

    x, y, x_next, y_next = _vertex_arrays(contour)
    area = float(np.sum(x * y_next - x_next * y) / 2.0)

    return area if oriented else abs(area)


def contour_moments(contour: np.ndarray) -> Moments:
    """
    Calculate m00, m10 and m01 of a closed polygon.

    Moments are normalised to a positive m00 regardless of the vertex
    order, so m10/m00 and m01/m00 always give the centroid.

    Args:
        contour: Polygon vertices as an (N, 2) array of (x, y)

    Returns:
        Moments of the polygon; all zero for degenerate polygons

    Example:
        >>> m = contour_moments(np.array([[0, 0], [0, 4], [4, 4], [4, 0]]))
        >>> m.centroid
        (2.0, 2.0)
    """
    if len(contour) < 3:
        return Moments(0.0, 0.0, 0.0)

    x, y, x_next, y_next = _vertex_arrays(contour)
    cross = x * y_next - x_next * y

    m00 = float(np.sum(cross) / 2.0)
    m10 = float(np.sum((x + x_next) * cross) / 6.0)
    m01 = float(np.sum((y + y_next) * cross) / 6.0)

    if m00 < 0:
        m00, m10, m01 = -m00, -m10, -m01

    return Moments(m00, m10, m01)
