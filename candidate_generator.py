"""
Candidate rectangle generation around a bubble.
An angular sweep about the bubble center, repeated at growing radial offsets.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from config import PLACEMENT_CONFIG
from geometry import Circle, InvalidGeometryError, Rectangle


@dataclass(frozen=True)
class Candidate:
    radial_step: int
    angle: float
    rectangle: Rectangle


class CandidateGenerator:
    """Deterministic, bounded sequence of label rectangles for one bubble."""

    def __init__(
        self,
        bubble: Circle,
        width: float,
        height: float,
        margin: Optional[float] = None,
        rotation_increment: Optional[float] = None,
        radial_increment: Optional[float] = None,
        max_radial_steps: Optional[int] = None,
    ):
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(
                f"Label size must be positive, got {width}x{height}"
            )
        if bubble.radius <= 0:
            raise InvalidGeometryError(
                f"Bubble radius must be positive, got {bubble.radius}"
            )

        self.bubble = bubble
        self.width = width
        self.height = height
        self.margin = margin if margin is not None else PLACEMENT_CONFIG["margin"]
        self.rotation_increment = (
            rotation_increment
            if rotation_increment is not None
            else PLACEMENT_CONFIG["rotation_increment"]
        )
        self.radial_increment = (
            radial_increment
            if radial_increment is not None
            else PLACEMENT_CONFIG["radial_increment"]
        )
        self.max_radial_steps = (
            max_radial_steps
            if max_radial_steps is not None
            else PLACEMENT_CONFIG["max_radial_steps"]
        )

        if self.rotation_increment <= 0 or self.radial_increment <= 0:
            raise ValueError("Rotation and radial increments must be positive")

    def rotation_angles(self) -> List[float]:
        """0, increment, 2 * increment, ... up to and including a full turn."""
        steps = int(round(2 * math.pi / self.rotation_increment))
        return [i * self.rotation_increment for i in range(steps + 1)]

    def base_rectangle(self, radial_step: int = 0) -> Rectangle:
        """Unrotated candidate: right of the bubble, vertically centered."""
        min_x = (
            self.bubble.center_x
            + self.bubble.radius
            + 2 * self.margin
            + radial_step * self.radial_increment
        )
        min_y = self.bubble.center_y - self.height / 2
        return Rectangle(min_x, min_y, self.width, self.height)

    def candidate(self, radial_step: int, angle: float) -> Candidate:
        rectangle = self.base_rectangle(radial_step).rotated_about(
            self.bubble.center_x, self.bubble.center_y, angle
        )
        return Candidate(radial_step, angle, rectangle)

    def sweep(
        self, radial_step: int, angles: Optional[Sequence[float]] = None
    ) -> Iterator[Candidate]:
        """One full pass over the angle list at a fixed radial offset."""
        if angles is None:
            angles = self.rotation_angles()
        for angle in angles:
            yield self.candidate(radial_step, angle)

    def radial_steps(self, start_step: int = 0) -> range:
        return range(start_step, self.max_radial_steps)

    def passes(
        self, start_step: int = 0
    ) -> Iterator[Tuple[int, List[Candidate]]]:
        """Sweeps at escalating offsets until the ceiling is reached."""
        angles = self.rotation_angles()
        for radial_step in self.radial_steps(start_step):
            yield radial_step, list(self.sweep(radial_step, angles))

    def __iter__(self) -> Iterator[Candidate]:
        for _, candidates in self.passes():
            yield from candidates
