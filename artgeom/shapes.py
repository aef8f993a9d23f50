"""Primitive shapes shared by the spatial index and the polyline helpers."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Protocol, Tuple


class Point(NamedTuple):
    """Immutable 2D coordinate pair."""

    x: float
    y: float

    @property
    def center(self) -> "Point":
        return self

    def distance_to(self, other: Tuple[float, float]) -> float:
        return math.hypot(self.x - other[0], self.y - other[1])


class HasCenter(Protocol):
    """Anything that can be bucketed by a :class:`~artgeom.pointmap.PointMap`."""

    @property
    def center(self) -> Point: ...


class SplitDirection(enum.Enum):
    HORIZONTALLY = "horizontally"
    VERTICALLY = "vertically"


class FillRule(enum.Enum):
    EVEN_ODD = "evenodd"
    NON_ZERO = "nonzero"


@dataclass
class PathStyle:
    """Stroke and fill attributes carried along for renderers.

    Colours are opaque strings; geometry code never looks at them.
    """

    stroke: Optional[str] = None
    fill: Optional[str] = None
    stroke_weight: Optional[float] = None
    fill_rule: FillRule = FillRule.EVEN_ODD


@dataclass
class Rect:
    """Axis-aligned rectangle anchored at its top-left corner.

    Containment is half-open: the left/top edges belong to the rectangle, the
    right/bottom edges do not, so adjacent rectangles tile without overlap.
    """

    position: Point
    width: float
    height: float
    rotation: Optional[float] = field(default=None, compare=False)
    rotation_center: Optional[Point] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.position = Point(float(self.position[0]), float(self.position[1]))
        self.width = float(self.width)
        self.height = float(self.height)
        if self.width < 0.0 or self.height < 0.0:
            raise ValueError(
                f"rectangle size must be non-negative, got {self.width}x{self.height}"
            )

    @classmethod
    def from_bounds(cls, x: float, y: float, width: float, height: float) -> "Rect":
        return cls(Point(x, y), width, height)

    @property
    def x_range(self) -> Tuple[float, float]:
        return self.position.x, self.position.x + self.width

    @property
    def y_range(self) -> Tuple[float, float]:
        return self.position.y, self.position.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.position.x + self.width / 2.0, self.position.y + self.height / 2.0)

    def contains(self, point: Tuple[float, float]) -> bool:
        x0, x1 = self.x_range
        y0, y1 = self.y_range
        return x0 <= point[0] < x1 and y0 <= point[1] < y1

    def bounding_box(self) -> "Rect":
        return Rect(self.position, self.width, self.height)

    def scale(self, factor: float) -> "Rect":
        """Return a copy scaled by ``factor`` around the rectangle centre."""

        width = self.width * factor
        height = self.height * factor
        x = self.position.x - (width - self.width) / 2.0
        y = self.position.y - (height - self.height) / 2.0
        return Rect(Point(x, y), width, height)

    def rotate(self, angle: float, center: Tuple[float, float]) -> "Rect":
        self.rotation = float(angle)
        self.rotation_center = Point(float(center[0]), float(center[1]))
        return self

    def subdivide(
        self,
        split_point: Tuple[float, float],
        direction: SplitDirection,
        padding: float = 0.0,
    ) -> Tuple["Rect", "Rect"]:
        """Cut the rectangle in two at ``split_point``.

        ``HORIZONTALLY`` cuts along the x axis (left/right halves),
        ``VERTICALLY`` along the y axis (top/bottom halves). ``padding`` is
        removed on both sides of the cut.
        """

        x, y = self.position
        if direction is SplitDirection.HORIZONTALLY:
            left = Rect(self.position, split_point[0] - padding - x, self.height)
            right = Rect(
                Point(split_point[0] + padding, y),
                x + self.width - split_point[0] - padding,
                self.height,
            )
            return left, right
        top = Rect(self.position, self.width, split_point[1] - padding - y)
        bottom = Rect(
            Point(x, split_point[1] + padding),
            self.width,
            y + self.height - split_point[1] - padding,
        )
        return top, bottom


@dataclass
class Circle:
    center: Point
    radius: float

    def __post_init__(self) -> None:
        self.center = Point(float(self.center[0]), float(self.center[1]))
        self.radius = float(self.radius)
        if self.radius < 0.0:
            raise ValueError(f"circle radius must be non-negative, got {self.radius}")

    @property
    def area(self) -> float:
        return math.pi * self.radius * self.radius

    def contains(self, point: Tuple[float, float]) -> bool:
        return self.center.distance_to(point) < self.radius

    def bounding_box(self) -> Rect:
        return Rect(
            Point(self.center.x - self.radius, self.center.y - self.radius),
            2.0 * self.radius,
            2.0 * self.radius,
        )


__all__ = [
    "Circle",
    "FillRule",
    "HasCenter",
    "PathStyle",
    "Point",
    "Rect",
    "SplitDirection",
]
