"""Randomised placement helpers that drive the spatial index."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import numpy as np
from scipy.stats import qmc

from .config import CANDIDATE_SEQUENCES, PointMapOptions
from .path import Path
from .pointmap import PointMap
from .shapes import Point, Rect

logger = logging.getLogger(__name__)

_BATCH_SIZE = 256
_ATTEMPTS_PER_POINT = 30


def map_range(value: float, from_range: Tuple[float, float], to_range: Tuple[float, float]) -> float:
    """Linearly remap ``value`` from ``from_range`` onto ``to_range``."""

    from_start, from_end = from_range
    to_start, to_end = to_range
    span = from_end - from_start
    if span == 0:
        raise ValueError("from_range must not be empty")
    return to_start + (value - from_start) * (to_end - to_start) / span


def weighted_random(
    rng: np.random.Generator, value_range: Tuple[float, float], towards: float
) -> float:
    """Uniform draw from ``value_range`` that snaps to ``towards`` now and then.

    The snap probability is the distance of ``towards`` from the low end of
    the range, relative to the range width.
    """

    low = min(value_range)
    high = max(value_range)
    width = high - low
    sample = float(rng.random())
    if width == 0:
        return towards
    if sample <= abs(towards - low) / width:
        return towards
    return sample * width + low


def _candidate_batches(
    bounds: Rect, rng: np.random.Generator, sequence: str
) -> Iterator[np.ndarray]:
    low = np.array([bounds.x_range[0], bounds.y_range[0]], dtype=float)
    high = np.array([bounds.x_range[1], bounds.y_range[1]], dtype=float)
    if sequence == "halton":
        engine = qmc.Halton(d=2, scramble=False)
        # random shift modulo 1 keeps the low-discrepancy structure and makes
        # the sequence depend on rng
        shift = rng.random(2)
        while True:
            unit = np.mod(engine.random(_BATCH_SIZE) + shift, 1.0)
            yield qmc.scale(unit, low, high)
    else:
        while True:
            yield rng.uniform(low, high, size=(_BATCH_SIZE, 2))


def scatter(
    bounds: Rect,
    count: int,
    min_distance: float,
    *,
    rng: Optional[np.random.Generator] = None,
    resolution: int = 32,
    sequence: str = "uniform",
    max_attempts: Optional[int] = None,
    options: Optional[PointMapOptions] = None,
) -> PointMap[Point]:
    """Place up to ``count`` points in ``bounds`` no closer than ``min_distance``.

    Candidates are drawn from ``rng`` (``sequence="uniform"``) or a randomly
    shifted Halton sequence (``sequence="halton"``) and kept only when the
    index has no stored point strictly closer than ``min_distance``. Sampling stops
    after ``count`` points or ``max_attempts`` candidates, whichever comes
    first, so dense requests may return fewer points.
    """

    if sequence not in CANDIDATE_SEQUENCES:
        raise ValueError(f"unknown candidate sequence {sequence!r}; expected one of {CANDIDATE_SEQUENCES}")
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    rng = rng if rng is not None else np.random.default_rng()
    index: PointMap[Point] = PointMap(bounds, resolution, options)
    if count == 0 or bounds.area <= 0.0:
        return index

    budget = max_attempts if max_attempts is not None else _ATTEMPTS_PER_POINT * count
    attempts = 0
    for batch in _candidate_batches(bounds, rng, sequence):
        for x, y in batch:
            if attempts >= budget or len(index) >= count:
                break
            attempts += 1
            candidate = Point(float(x), float(y))
            if not bounds.contains(candidate):
                continue
            if min_distance > 0.0 and index.neighbors(candidate, min_distance):
                continue
            index.insert(candidate)
        if attempts >= budget or len(index) >= count:
            break

    logger.info(
        "Scattered %d/%d point(s) after %d candidate(s) (min_distance=%g, sequence=%s)",
        len(index),
        count,
        attempts,
        min_distance,
        sequence,
    )
    return index


def points_inside(path: Path, points: Iterable[Tuple[float, float]]) -> List[Point]:
    """Keep the points that ``path`` contains."""

    return [Point(float(p[0]), float(p[1])) for p in points if path.contains(p)]


__all__ = ["map_range", "points_inside", "scatter", "weighted_random"]
