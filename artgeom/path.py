from __future__ import annotations

import copy
from typing import Iterable, List, Optional, Tuple

from . import polyline
from .shapes import PathStyle, Point, Rect


class Path:
    """Ordered polyline with renderer metadata.

    ``style`` and ``rotation`` are carried for renderers only; geometry is
    always computed from the stored points as they are, on every call.
    """

    def __init__(self, points: Iterable[Tuple[float, float]] = (), style: Optional[PathStyle] = None) -> None:
        self.points: List[Point] = [Point(float(x), float(y)) for x, y in points]
        self.style = style if style is not None else PathStyle()
        self.rotation: Optional[float] = None
        self.rotation_center: Optional[Point] = None

    def add_point(self, point: Tuple[float, float]) -> None:
        self.points.append(Point(float(point[0]), float(point[1])))

    def rotate(self, angle: float, center: Tuple[float, float]) -> "Path":
        """Record a rotation for the renderer; the points are left untouched."""

        self.rotation = float(angle)
        self.rotation_center = Point(float(center[0]), float(center[1]))
        return self

    def length(self) -> float:
        return polyline.length(self.points)

    def bounding_box(self) -> Optional[Rect]:
        return polyline.bounding_box(self.points)

    @property
    def center(self) -> Point:
        box = self.bounding_box()
        if box is None:
            return Point(0.0, 0.0)
        return box.center

    def contains(self, point: Tuple[float, float], closed: bool = True) -> bool:
        return polyline.contains(self.points, point, closed=closed)

    def intersects(self, other: "Path") -> bool:
        return polyline.polylines_intersect(self.points, other.points)

    def copy(self) -> "Path":
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return (
            self.points == other.points
            and self.style == other.style
            and self.rotation == other.rotation
            and self.rotation_center == other.rotation_center
        )

    def __repr__(self) -> str:
        return f"Path(points={len(self.points)}, style={self.style!r}, rotation={self.rotation!r})"


__all__ = ["Path"]
