"""
Geometry primitives for label placement.
Axis-aligned rectangles and prioritized circles in pixel space.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple


class InvalidGeometryError(ValueError):
    """Raised when a size or radius is negative, or zero where it must be positive."""


class Point(NamedTuple):
    x: float
    y: float


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x1 - x2, y1 - y2)


@dataclass(frozen=True)
class Rectangle:
    """An occupied label footprint or exclusion band. Never mutated."""

    min_x: float
    min_y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidGeometryError(
                f"Rectangle dimensions must be >= 0, got {self.width}x{self.height}"
            )

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height

    @property
    def center(self) -> Point:
        return Point(self.min_x + self.width / 2, self.min_y + self.height / 2)

    def translated(self, dx: float, dy: float) -> "Rectangle":
        return Rectangle(self.min_x + dx, self.min_y + dy, self.width, self.height)

    def rotated_about(self, cx: float, cy: float, angle: float) -> "Rectangle":
        """
        Rotate the anchor corner about (cx, cy).

        The result keeps width and height and stays axis-aligned; only its
        position orbits the pivot.
        """
        rel_x = self.min_x - cx
        rel_y = self.min_y - cy
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Rectangle(
            cx + cos_a * rel_x - sin_a * rel_y,
            cy + sin_a * rel_x + cos_a * rel_y,
            self.width,
            self.height,
        )

    def contains_point(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def nearest_point_to(self, x: float, y: float) -> Point:
        """Closest point of the rectangle (edge or interior) to (x, y)."""
        return Point(
            clamp(x, self.min_x, self.max_x), clamp(y, self.min_y, self.max_y)
        )

    def overlaps_rectangle(self, other: "Rectangle", margin: float = 0.0) -> bool:
        """True unless the two are separated along X or Y by more than margin."""
        overlaps_in_x = not (
            self.max_x + margin < other.min_x or self.min_x - margin > other.max_x
        )
        overlaps_in_y = not (
            self.max_y + margin < other.min_y or self.min_y - margin > other.max_y
        )
        return overlaps_in_x and overlaps_in_y

    def overlaps_circle(self, circle: "Circle") -> bool:
        """True if the circle's center is inside, or the circle crosses an edge."""
        if self.contains_point(circle.center_x, circle.center_y):
            return True

        clamped_x = clamp(circle.center_x, self.min_x, self.max_x)
        clamped_y = clamp(circle.center_y, self.min_y, self.max_y)
        return (
            circle.contains_point(self.min_x, clamped_y)
            or circle.contains_point(self.max_x, clamped_y)
            or circle.contains_point(clamped_x, self.min_y)
            or circle.contains_point(clamped_x, self.max_y)
        )


@dataclass(frozen=True)
class Circle:
    """
    An occupied bubble footprint.

    Higher priority draws in front of lower priority. Leader line termini are
    registered as circles with infinite priority (markers); they take up
    space but never occlude.
    """

    center_x: float
    center_y: float
    radius: float
    priority: float = 0.0

    def __post_init__(self):
        if self.radius < 0:
            raise InvalidGeometryError(
                f"Circle radius must be >= 0, got {self.radius}"
            )

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    @property
    def is_marker(self) -> bool:
        return math.isinf(self.priority)

    def contains_point(self, x: float, y: float) -> bool:
        return distance(x, y, self.center_x, self.center_y) <= self.radius

    def occludes(self, other: "Circle") -> bool:
        """Whether this circle renders on top of other."""
        return not self.is_marker and self.priority > other.priority
