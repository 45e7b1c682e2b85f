"""
Pixel-space chart frame.
Projects data-space bubble positions onto the canvas and reserves the band
occupied by the category axis.
"""

from typing import List, Optional, Sequence, Tuple

import numpy as np

from bubble_sizing import SizedBubble
from config import CHART_CONFIG
from geometry import Circle, Rectangle


class ChartFrame:
    """Plot area and data-to-pixel projection for one chart."""

    def __init__(
        self,
        width: int = None,
        height: int = None,
        padding: int = None,
        axis_band_height: int = None,
        y_range_padding: float = None,
    ):
        self.width = width or CHART_CONFIG["width"]
        self.height = height or CHART_CONFIG["height"]
        self.padding = padding if padding is not None else CHART_CONFIG["padding"]
        self.axis_band_height = (
            axis_band_height
            if axis_band_height is not None
            else CHART_CONFIG["axis_band_height"]
        )
        self.y_range_padding = (
            y_range_padding
            if y_range_padding is not None
            else CHART_CONFIG["y_range_padding"]
        )

        self.plot_left = self.padding
        self.plot_right = self.width - self.padding
        self.plot_top = self.padding
        self.plot_bottom = self.height - self.padding - self.axis_band_height

        if self.plot_right <= self.plot_left or self.plot_bottom <= self.plot_top:
            raise ValueError(
                f"Canvas {self.width}x{self.height} is too small for padding "
                f"{self.padding} and axis band {self.axis_band_height}"
            )

        self.x_range: Tuple[float, float] = (0.0, 1.0)
        self.y_range: Tuple[float, float] = (0.0, 1.0)

    def fit(self, x_values: Sequence[float], y_values: Sequence[float]) -> None:
        """Set data ranges from the values. The x axis always starts at 0."""
        if len(x_values) == 0:
            return

        xs = np.asarray(x_values, dtype=float)
        ys = np.asarray(y_values, dtype=float)

        x_max = max(float(xs.max()), 0.0)
        x_min = min(float(xs.min()), 0.0)
        x_span = (x_max - x_min) or 1.0
        self.x_range = (x_min, x_max + x_span * self.y_range_padding)

        y_min, y_max = float(ys.min()), float(ys.max())
        y_span = (y_max - y_min) or max(abs(y_max), 1.0)
        self.y_range = (
            y_min - y_span * self.y_range_padding,
            y_max + y_span * self.y_range_padding,
        )

    def project(
        self, x_values: Sequence[float], y_values: Sequence[float]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Data space to pixel space. Pixel y grows downward."""
        px = np.interp(
            np.asarray(x_values, dtype=float),
            self.x_range,
            (self.plot_left, self.plot_right),
        )
        py = np.interp(
            np.asarray(y_values, dtype=float),
            self.y_range,
            (self.plot_bottom, self.plot_top),
        )
        return px, py

    def axis_band(self) -> Rectangle:
        """The category axis band under the plot area; always occupied."""
        return Rectangle(
            self.plot_left,
            self.plot_bottom,
            self.plot_right - self.plot_left,
            self.axis_band_height,
        )

    def plot_area(self) -> Rectangle:
        return Rectangle(
            self.plot_left,
            self.plot_top,
            self.plot_right - self.plot_left,
            self.plot_bottom - self.plot_top,
        )

    def bubble_circles(self, bubbles: Sequence[SizedBubble]) -> List[Circle]:
        """Pixel circles for sized bubbles, keeping their order and priority."""
        if not bubbles:
            return []

        px, py = self.project(
            [b.record.x_value for b in bubbles], [b.record.y_value for b in bubbles]
        )
        return [
            Circle(float(x), float(y), bubble.radius, bubble.priority)
            for bubble, x, y in zip(bubbles, px, py)
        ]

    def gridline_positions(
        self, count: Optional[int] = None
    ) -> Tuple[List[float], List[float]]:
        """Evenly spaced pixel positions for vertical and horizontal gridlines."""
        count = count or CHART_CONFIG["gridlines"]
        xs = np.linspace(self.plot_left, self.plot_right, count + 1)
        ys = np.linspace(self.plot_top, self.plot_bottom, count + 1)
        return [float(x) for x in xs], [float(y) for y in ys]
