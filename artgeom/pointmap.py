"""Uniform grid over a bounded domain for radius-limited neighbour lookups."""

from __future__ import annotations

import copy
import logging
import math
import numbers
from typing import Dict, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from .config import PointMapOptions, get_default_options
from .logging_utils import debug_log_call
from .shapes import HasCenter, Rect

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=HasCenter)

GridCell = Tuple[int, int]
CellKey = Union[GridCell, int]


class OutOfBoundsError(ValueError):
    """Raised when a shape's centre lies outside the index bounds."""

    def __init__(self, shape: object, center: Tuple[float, float], bounds: Rect) -> None:
        super().__init__(
            f"center ({center[0]:g}, {center[1]:g}) of {shape!r} is outside of the bounds "
            f"x={bounds.x_range}, y={bounds.y_range}"
        )
        self.shape = shape
        self.center = center
        self.bounds = bounds


def _distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class PointMap(Generic[S]):
    """Bucket shapes by the grid cell of their centre.

    The domain ``bounds`` is divided into ``resolution`` x ``resolution``
    cells. A shape is bucketed once, at insertion, from its ``center``;
    mutating a stored shape afterwards does not move it.

    Two addressing schemes are available through
    :class:`~artgeom.config.PointMapOptions`:

    * ``"grid"`` (default): buckets are keyed by ``(cell_x, cell_y)`` computed
      relative to the bounds origin, and neighbour blocks are derived from
      ``resolution``.
    * ``"legacy"``: the historical flat index
      ``floor(y / (oy + h) * n) * n + floor(x / (ox + w) * n) - 1`` with a
      growable bucket list whose length sets the neighbour row width.
    """

    def __init__(
        self,
        bounds: Rect,
        resolution: int,
        options: Optional[PointMapOptions] = None,
    ) -> None:
        if isinstance(resolution, bool) or not isinstance(resolution, numbers.Integral):
            raise ValueError(f"resolution must be an integer, got {resolution!r}")
        if resolution <= 0:
            raise ValueError(f"resolution must be positive, got {resolution}")

        self.bounds = bounds
        self.resolution = int(resolution)
        self.options = copy.deepcopy(options) if options is not None else get_default_options()
        self._legacy = self.options.indexing == "legacy"
        self._cells: Dict[GridCell, List[S]] = {}
        self._buckets: List[List[S]] = []
        self._size = 0

        logger.debug(
            "Created PointMap bounds=(%g, %g, %g, %g) resolution=%d indexing=%s",
            bounds.position.x,
            bounds.position.y,
            bounds.width,
            bounds.height,
            self.resolution,
            self.options.indexing,
        )

    # -- addressing ---------------------------------------------------------

    def cell_of(self, point: Tuple[float, float]) -> CellKey:
        """Return the bucket key for ``point``.

        A ``(cell_x, cell_y)`` tuple in grid mode, a flat list index in legacy
        mode. Grid cells are clamped to ``[0, resolution - 1]`` only for points
        inside the bounds, so far-away queries land in cells that hold nothing.
        """

        if self._legacy:
            return self._legacy_index(point)
        return self._grid_cell(point)

    def _grid_cell(self, point: Tuple[float, float]) -> GridCell:
        b = self.bounds
        cell_x = self._axis_cell(point[0], b.position.x, b.width)
        cell_y = self._axis_cell(point[1], b.position.y, b.height)
        if b.contains(point):
            last = self.resolution - 1
            cell_x = min(max(cell_x, 0), last)
            cell_y = min(max(cell_y, 0), last)
        return cell_x, cell_y

    def _axis_cell(self, value: float, origin: float, extent: float) -> int:
        if extent <= 0.0:
            return 0
        return math.floor((value - origin) / extent * self.resolution)

    def _legacy_index(self, point: Tuple[float, float]) -> int:
        b = self.bounds
        n = float(self.resolution)
        cell_x = self._legacy_axis(point[0], b.position.x + b.width, n)
        cell_y = self._legacy_axis(point[1], b.position.y + b.height, n)
        # negative indices saturate to the first bucket
        return max(int(cell_y * n + cell_x - 1.0), 0)

    @staticmethod
    def _legacy_axis(value: float, normalizer: float, n: float) -> float:
        if normalizer == 0.0:
            return 0.0
        return float(math.floor((value / normalizer) * n))

    # -- mutation -----------------------------------------------------------

    def insert(self, shape: S) -> None:
        """Store ``shape`` in the bucket of its centre.

        Raises :class:`OutOfBoundsError` when the centre is outside
        ``bounds`` (half-open on the right and bottom edges). In legacy mode a
        ``ValueError`` is raised when the flat index lands past
        ``resolution ** 2``, which happens for bounds lying entirely at
        negative coordinates.
        """

        center = shape.center
        if not self.bounds.contains(center):
            raise OutOfBoundsError(shape, center, self.bounds)

        if self._legacy:
            index = self._legacy_index(center)
            if index >= self.resolution * self.resolution:
                raise ValueError(
                    f"legacy index {index} for center ({center[0]:g}, {center[1]:g}) exceeds "
                    f"{self.resolution}x{self.resolution} cells; use indexing='grid' for these bounds"
                )
            missing = index + 1 - len(self._buckets)
            if missing > 0:
                self._buckets.extend([] for _ in range(missing))
            self._buckets[index].append(shape)
        else:
            self._cells.setdefault(self._grid_cell(center), []).append(shape)
        self._size += 1

    def insert_many(self, shapes: Iterable[S]) -> List[S]:
        """Insert every shape that fits and return the ones that were rejected."""

        rejected: List[S] = []
        for shape in shapes:
            try:
                self.insert(shape)
            except OutOfBoundsError as exc:
                logger.debug("Skipping shape: %s", exc)
                rejected.append(shape)
        if rejected:
            logger.info("Rejected %d out-of-bounds shape(s)", len(rejected))
        return rejected

    # -- queries ------------------------------------------------------------

    @debug_log_call(logger, name="PointMap.neighbors")
    def neighbors(self, shape: HasCenter, max_distance: Optional[float] = None) -> List[S]:
        """Shapes stored around ``shape``'s cell, nearest-first order not guaranteed.

        Without ``max_distance`` every shape in the 3x3 block of cells around
        the query is returned, the query shape itself included when stored.
        With ``max_distance`` only shapes whose centre is strictly closer than
        that are kept.
        """

        center = shape.center
        if not (math.isfinite(center[0]) and math.isfinite(center[1])):
            return []
        if self._legacy:
            candidates = self._legacy_candidates(self._legacy_index(center))
        else:
            candidates = self._grid_candidates(self._grid_cell(center), max_distance)

        if max_distance is None:
            return list(candidates)
        return [other for other in candidates if _distance(other.center, center) < max_distance]

    def _legacy_candidates(self, index: int) -> Iterator[S]:
        count = len(self._buckets)
        step = int(math.sqrt(count))
        over = index - step
        under = index + step
        block = (
            over - 1, over, over + 1,
            index - 1, index, index + 1,
            under - 1, under, under + 1,
        )
        # small step values fold the block onto itself
        for cell in dict.fromkeys(block):
            if 0 <= cell < count:
                yield from self._buckets[cell]

    def _search_reach(self, max_distance: Optional[float]) -> int:
        if max_distance is None or not self.options.widen_search:
            return 1
        cell_extent = min(self.bounds.width, self.bounds.height) / self.resolution
        if cell_extent <= 0.0:
            return 1
        ratio = max_distance / cell_extent
        if not math.isfinite(ratio) or ratio >= self.resolution:
            return self.resolution
        return max(1, math.ceil(ratio))

    def _grid_candidates(self, cell: GridCell, max_distance: Optional[float]) -> Iterator[S]:
        reach = self._search_reach(max_distance)
        cx, cy = cell
        if (2 * reach + 1) ** 2 > len(self._cells):
            for (x, y), bucket in self._cells.items():
                if abs(x - cx) <= reach and abs(y - cy) <= reach:
                    yield from bucket
            return
        for y in range(cy - reach, cy + reach + 1):
            for x in range(cx - reach, cx + reach + 1):
                bucket = self._cells.get((x, y))
                if bucket:
                    yield from bucket

    def points(self) -> List[S]:
        """Every stored shape, bucket by bucket, in insertion order within a bucket."""

        return list(self)

    def __iter__(self) -> Iterator[S]:
        if self._legacy:
            for bucket in self._buckets:
                yield from bucket
            return
        for key in sorted(self._cells, key=lambda k: (k[1], k[0])):
            yield from self._cells[key]

    def __len__(self) -> int:
        return self._size

    @property
    def bucket_count(self) -> int:
        if self._legacy:
            return len(self._buckets)
        return len(self._cells)

    def __repr__(self) -> str:
        return (
            f"PointMap(bounds={self.bounds!r}, resolution={self.resolution}, "
            f"indexing={self.options.indexing!r}, size={self._size})"
        )


__all__ = ["CellKey", "GridCell", "OutOfBoundsError", "PointMap"]
