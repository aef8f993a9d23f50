"""Geometry over ordered point sequences (open or closed polylines).

Every function accepts any sequence of ``(x, y)`` pairs: :class:`Point`
instances, plain tuples or an ``(n, 2)`` numpy array. Results are computed
from the points passed in; nothing is cached between calls.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .logging_utils import apply_debug_logging
from .shapes import Point, Rect

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]
Segment = Tuple[Coordinate, Coordinate]
PointsLike = Union[Sequence[Coordinate], np.ndarray]


def _as_array(points: PointsLike) -> np.ndarray:
    arr = np.asarray(points, dtype=float)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=float)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"expected a sequence of (x, y) pairs, got array of shape {arr.shape}")
    return arr


def _intersection_mask(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Vectorised orientation test between segment arrays of shape ``(..., 2, 2)``.

    ``first`` and ``second`` broadcast against each other. Touching and
    collinear configurations report ``True``.
    """

    a0x, a0y = first[..., 0, 0], first[..., 0, 1]
    a1x, a1y = first[..., 1, 0], first[..., 1, 1]
    b0x, b0y = second[..., 0, 0], second[..., 0, 1]
    b1x, b1y = second[..., 1, 0], second[..., 1, 1]

    dx0 = a1x - a0x
    dy0 = a1y - a0y
    dx1 = b1x - b0x
    dy1 = b1y - b0y

    p0 = dy1 * (b1x - a0x) - dx1 * (b1y - a0y)
    p1 = dy1 * (b1x - a1x) - dx1 * (b1y - a1y)
    p2 = dy0 * (a1x - b0x) - dx0 * (a1y - b0y)
    p3 = dy0 * (a1x - b1x) - dx0 * (a1y - b1y)
    return (p0 * p1 <= 0.0) & (p2 * p3 <= 0.0)


def edges(points: PointsLike, closed: bool = False) -> np.ndarray:
    """Return the consecutive segments of ``points`` as an ``(n, 2, 2)`` array.

    With ``closed=True`` a segment from the last point back to the first is
    appended, unless the sequence already ends where it starts.
    """

    arr = _as_array(points)
    if len(arr) < 2:
        return np.zeros((0, 2, 2), dtype=float)
    segments = np.stack((arr[:-1], arr[1:]), axis=1)
    if closed and len(arr) > 2 and not np.array_equal(arr[0], arr[-1]):
        closing = np.stack((arr[-1], arr[0]))[np.newaxis]
        segments = np.concatenate((segments, closing), axis=0)
    return segments


def length(points: PointsLike) -> float:
    """Sum of the distances between consecutive points (the path length)."""

    arr = _as_array(points)
    if len(arr) < 2:
        return 0.0
    deltas = np.diff(arr, axis=0)
    # fsum keeps the total independent of traversal direction
    return math.fsum(np.hypot(deltas[:, 0], deltas[:, 1]).tolist())


def bounding_box(points: PointsLike) -> Optional[Rect]:
    """Tightest axis-aligned rectangle around ``points``, ``None`` when empty."""

    arr = _as_array(points)
    if not len(arr):
        return None
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return Rect(Point(float(min_x), float(min_y)), float(max_x - min_x), float(max_y - min_y))


def segments_intersect(a: Segment, b: Segment) -> bool:
    """Return ``True`` when segments ``a`` and ``b`` cross or touch."""

    first = np.asarray(a, dtype=float)
    second = np.asarray(b, dtype=float)
    return bool(_intersection_mask(first, second))


def polylines_intersect(a: PointsLike, b: PointsLike) -> bool:
    """Return ``True`` when any segment of ``a`` crosses or touches any segment of ``b``."""

    first = edges(a)
    second = edges(b)
    if not len(first) or not len(second):
        return False
    mask = _intersection_mask(first[:, np.newaxis], second[np.newaxis, :])
    return bool(mask.any())


def _search_rays(point: Coordinate, box: Rect) -> np.ndarray:
    px, py = float(point[0]), float(point[1])
    x0, x1 = box.x_range
    y0, y1 = box.y_range
    return np.array(
        [
            [[px, py], [px, y0]],
            [[px, py], [px, y1]],
            [[px, py], [x1, py]],
            [[px, py], [x0, py]],
        ],
        dtype=float,
    )


def contains(points: PointsLike, point: Coordinate, closed: bool = True) -> bool:
    """Four-ray containment test.

    Rays run from ``point`` to the four sides of the polygon's bounding box
    (up, down, right, left). Each ray must cross the polygon outline an odd
    number of times; a single even count classifies the point as outside.
    Points outside the half-open bounding box are rejected before any ray is
    cast.

    ``closed`` adds the edge from the last point back to the first when the
    ring is not already closed; pass ``False`` to test against the open
    polyline exactly as given.
    """

    arr = _as_array(points)
    box = bounding_box(arr)
    if box is None or not box.contains(point):
        return False

    segments = edges(arr, closed=closed)
    if not len(segments):
        return False

    for ray in _search_rays(point, box):
        hits = int(np.count_nonzero(_intersection_mask(segments, ray)))
        if hits % 2 == 0:
            return False
    return True


apply_debug_logging(globals(), logger=logger, only=("contains", "polylines_intersect"))


__all__ = [
    "bounding_box",
    "contains",
    "edges",
    "length",
    "polylines_intersect",
    "segments_intersect",
]
