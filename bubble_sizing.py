"""
Bubble records, magnitude-to-radius mappings and processing order.
Larger bubbles are placed first so that smaller ones dodge them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from config import BUBBLE_SIZE_CONFIG, CATEGORY_CONFIG


class Category(Enum):
    A = "A"
    B = "B"
    C = "C"

    @property
    def display_name(self) -> str:
        return CATEGORY_CONFIG["names"].get(self.value, self.value)

    @property
    def color(self) -> str:
        return CATEGORY_CONFIG["colors"].get(self.value, "gray")


@dataclass(frozen=True)
class BubbleRecord:
    """One data row: label text, data-space position, magnitude and category."""

    label: str
    x_value: float
    y_value: float
    magnitude: float
    category: Category = Category.A


@dataclass(frozen=True)
class SizedBubble:
    """A record with its render radius and its rank in processing order."""

    record: BubbleRecord
    index: int  # position in the input records
    radius: float
    priority: int


class StepSizeMapping:
    """Piecewise step function: magnitude <= thresholds[i] selects sizes[i]."""

    def __init__(
        self,
        thresholds: Optional[Sequence[float]] = None,
        sizes: Optional[Sequence[float]] = None,
    ):
        self.thresholds = list(
            thresholds
            if thresholds is not None
            else BUBBLE_SIZE_CONFIG["step_thresholds"]
        )
        self.sizes = list(
            sizes if sizes is not None else BUBBLE_SIZE_CONFIG["step_sizes"]
        )

        if len(self.sizes) != len(self.thresholds) + 1:
            raise ValueError(
                f"Step mapping needs {len(self.thresholds) + 1} sizes for "
                f"{len(self.thresholds)} thresholds, got {len(self.sizes)}"
            )
        if any(b <= a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError("Step thresholds must be strictly increasing")
        if any(b < a for a, b in zip(self.sizes, self.sizes[1:])):
            raise ValueError("Step sizes must be non-decreasing")
        if any(size <= 0 for size in self.sizes):
            raise ValueError("Step sizes must be positive")

    def radius_for(self, magnitude: float) -> float:
        for threshold, size in zip(self.thresholds, self.sizes):
            if magnitude <= threshold:
                return float(size)
        return float(self.sizes[-1])

    def radii_for(self, magnitudes: Sequence[float]) -> List[float]:
        return [self.radius_for(m) for m in magnitudes]


class LinearSizeMapping:
    """Linear scale between two magnitudes, clamped outside that range."""

    def __init__(
        self,
        min_magnitude: float,
        max_magnitude: float,
        min_radius: Optional[float] = None,
        max_radius: Optional[float] = None,
    ):
        linear_range = BUBBLE_SIZE_CONFIG["linear_range"]
        self.min_magnitude = min_magnitude
        self.max_magnitude = max_magnitude
        self.min_radius = (
            min_radius if min_radius is not None else linear_range["min_radius"]
        )
        self.max_radius = (
            max_radius if max_radius is not None else linear_range["max_radius"]
        )

        if max_magnitude < min_magnitude:
            raise ValueError("max_magnitude must be >= min_magnitude")
        if self.min_radius <= 0 or self.max_radius < self.min_radius:
            raise ValueError("Radius range must be positive and non-decreasing")

    @classmethod
    def fitted_to(cls, magnitudes: Sequence[float], **kwargs) -> "LinearSizeMapping":
        return cls(min(magnitudes), max(magnitudes), **kwargs)

    def radius_for(self, magnitude: float) -> float:
        return self.radii_for([magnitude])[0]

    def radii_for(self, magnitudes: Sequence[float]) -> List[float]:
        values = np.asarray(magnitudes, dtype=float)
        if self.max_magnitude == self.min_magnitude:
            radii = np.full(values.shape, (self.min_radius + self.max_radius) / 2)
        else:
            radii = np.interp(
                values,
                [self.min_magnitude, self.max_magnitude],
                [self.min_radius, self.max_radius],
            )
        return [float(r) for r in radii]


def scale_factor_for_canvas(width: float, height: float) -> float:
    """Bubble sizes are given for the reference canvas; shrink or grow with it."""
    ref_width, ref_height = BUBBLE_SIZE_CONFIG["reference_canvas"]
    return min(width / ref_width, height / ref_height)


def create_size_mapping(kind: Optional[str] = None, magnitudes=None):
    """Build the mapping named in config (or by kind)."""
    kind = kind or BUBBLE_SIZE_CONFIG["mapping"]
    if kind == "step":
        return StepSizeMapping()
    if kind == "linear":
        if not magnitudes:
            raise ValueError("Linear size mapping needs magnitudes to fit to")
        return LinearSizeMapping.fitted_to(magnitudes)
    raise ValueError(f"Unknown size mapping: {kind}")


def processing_order(magnitudes: Sequence[float]) -> List[int]:
    """Indices by descending magnitude; ties keep their input order."""
    return sorted(range(len(magnitudes)), key=lambda i: -magnitudes[i])


def size_bubbles(
    records: Sequence[BubbleRecord], mapping=None, scale_factor: float = 1.0
) -> List[SizedBubble]:
    """
    Compute radius and priority for every record.

    Args:
        records: Bubble records in input order
        mapping: Object with radii_for(magnitudes); step mapping if None
        scale_factor: Multiplier applied to every mapped radius

    Returns:
        SizedBubbles in processing order (priority 0 is placed first)
    """
    if not records:
        return []
    if scale_factor <= 0:
        raise ValueError(f"Scale factor must be positive, got {scale_factor}")

    magnitudes = [record.magnitude for record in records]
    if mapping is None:
        mapping = StepSizeMapping()

    radii = mapping.radii_for(magnitudes)
    order = processing_order(magnitudes)

    return [
        SizedBubble(
            record=records[index],
            index=index,
            radius=radii[index] * scale_factor,
            priority=rank,
        )
        for rank, index in enumerate(order)
    ]
