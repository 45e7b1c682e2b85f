"""
Occlusion and visibility checks for label candidates.
Decides whether a candidate is free and where its leader line can attach.
"""

import math
from typing import Optional

import numpy as np

from config import PLACEMENT_CONFIG
from geometry import Circle, Point, Rectangle
from occupancy import OccupancyRegistry


class OcclusionResolver:
    """Tests candidates against an occupancy registry."""

    def __init__(
        self,
        registry: OccupancyRegistry,
        margin: Optional[float] = None,
        walk_step: Optional[float] = None,
    ):
        self.registry = registry
        self.margin = margin if margin is not None else PLACEMENT_CONFIG["margin"]
        self.walk_step = (
            walk_step if walk_step is not None else PLACEMENT_CONFIG["walk_step"]
        )
        if self.walk_step <= 0:
            raise ValueError(f"Walk step must be positive, got {self.walk_step}")

    def overlaps(self, rectangle: Rectangle) -> bool:
        return self.registry.overlaps(rectangle, self.margin)

    @staticmethod
    def label_anchor(rectangle: Rectangle, bubble: Circle) -> Point:
        """Point of the label nearest the bubble center; the line's label end."""
        return rectangle.nearest_point_to(bubble.center_x, bubble.center_y)

    def _walk_samples(self, bubble: Circle, anchor: Point):
        """Sample points from the bubble center toward anchor, inside the bubble."""
        dx = anchor.x - bubble.center_x
        dy = anchor.y - bubble.center_y
        length = math.hypot(dx, dy)
        if length == 0:
            return None

        count = int(math.floor(bubble.radius / self.walk_step)) + 1
        offsets = np.arange(count, dtype=float) * self.walk_step
        xs = bubble.center_x + (dx / length) * offsets
        ys = bubble.center_y + (dy / length) * offsets
        return xs, ys

    def visibility_along(self, xs: np.ndarray, ys: np.ndarray, bubble: Circle):
        """Boolean mask of samples not covered by any circle drawn above bubble."""
        occluders = self.registry.occluders_of(bubble)
        if not occluders:
            return np.ones(xs.shape, dtype=bool)

        centers_x = np.array([c.center_x for c in occluders])
        centers_y = np.array([c.center_y for c in occluders])
        radii = np.array([c.radius for c in occluders])

        distances = np.hypot(
            xs[:, np.newaxis] - centers_x[np.newaxis, :],
            ys[:, np.newaxis] - centers_y[np.newaxis, :],
        )
        return ~np.any(distances <= radii[np.newaxis, :], axis=1)

    def find_attachment(
        self, rectangle: Rectangle, bubble: Circle
    ) -> Optional[Point]:
        """
        Find where a leader line from rectangle can leave the bubble.

        Walks from the bubble center toward the label's near edge. The result
        is the midpoint of the first stretch of samples that no higher-priority
        circle covers, or None if every sample is covered.
        """
        anchor = self.label_anchor(rectangle, bubble)
        samples = self._walk_samples(bubble, anchor)
        if samples is None:
            return None

        xs, ys = samples
        visible = self.visibility_along(xs, ys, bubble)
        if not visible.any():
            return None

        first = int(np.argmax(visible))
        hidden_after = np.flatnonzero(~visible[first:])
        last = first + int(hidden_after[0]) - 1 if hidden_after.size else len(xs) - 1

        return Point(
            float((xs[first] + xs[last]) / 2), float((ys[first] + ys[last]) / 2)
        )
