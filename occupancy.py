"""
Occupancy registry for a single chart-generation run.
Holds every rectangle and circle that later placements must avoid.
"""

import math
from typing import List, Tuple

from geometry import Circle, Point, Rectangle


class OccupancyRegistry:
    """Append-only collection of occupied rectangles and circles."""

    def __init__(self):
        self._rectangles: List[Rectangle] = []
        self._circles: List[Circle] = []

    @property
    def rectangles(self) -> Tuple[Rectangle, ...]:
        return tuple(self._rectangles)

    @property
    def circles(self) -> Tuple[Circle, ...]:
        return tuple(self._circles)

    def add_rectangle(self, rectangle: Rectangle) -> None:
        self._rectangles.append(rectangle)

    def add_circle(self, circle: Circle) -> None:
        self._circles.append(circle)

    def add_marker(self, point: Point, radius: float) -> Circle:
        """Register a leader line terminus. Markers never occlude anything."""
        marker = Circle(point.x, point.y, radius, math.inf)
        self._circles.append(marker)
        return marker

    def overlaps(self, rectangle: Rectangle, margin: float) -> bool:
        """Check a candidate against everything registered so far."""
        for occupied in self._rectangles:
            if rectangle.overlaps_rectangle(occupied, margin):
                return True
        for occupied in self._circles:
            if rectangle.overlaps_circle(occupied):
                return True
        return False

    def occluders_of(self, circle: Circle) -> List[Circle]:
        """Circles drawn on top of the given one, in priority order."""
        return sorted(
            (other for other in self._circles if other.occludes(circle)),
            key=lambda other: other.priority,
        )

    def __len__(self) -> int:
        return len(self._rectangles) + len(self._circles)
