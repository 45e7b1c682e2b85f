"""
Bubble Chart Generator
Runs one chart-generation run: sizes bubbles, projects them onto the canvas,
measures labels, places every label and optionally renders a preview.
"""

import json
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from bubble_sizing import (
    BubbleRecord,
    Category,
    SizedBubble,
    create_size_mapping,
    scale_factor_for_canvas,
    size_bubbles,
)
from chart_frame import ChartFrame
from config import CHART_CONFIG, OUTPUT_CONFIG
from geometry import Circle, Rectangle
from label_placer import LabelPlacer, PlacementResult, PlacementRun
from label_renderer import LabelRenderer

MAX_STAGE = 6

StatusCallback = Callable[[int, int, str], None]


@dataclass
class ChartLayout:
    """All geometry produced by one run, aligned by processing position."""

    bubbles: List[SizedBubble] = field(default_factory=list)
    circles: List[Circle] = field(default_factory=list)
    label_sizes: List[Tuple[float, float]] = field(default_factory=list)
    axis_band: Optional[Rectangle] = None
    run: PlacementRun = field(default_factory=PlacementRun)

    def placement_for(self, record_index: int) -> Optional[PlacementResult]:
        """Placement of the record at the given input position."""
        for position, bubble in enumerate(self.bubbles):
            if bubble.index == record_index:
                return self.run.by_index().get(position)
        return None

    def to_dict(self) -> dict:
        results = self.run.by_index()
        labels = []
        for position, bubble in enumerate(self.bubbles):
            entry = results[position].to_dict()
            entry["index"] = bubble.index
            entry["priority"] = bubble.priority
            entry["bubble"] = {
                "x": self.circles[position].center_x,
                "y": self.circles[position].center_y,
                "radius": self.circles[position].radius,
            }
            labels.append(entry)
        return {"labels": labels, "warnings": list(self.run.warnings)}


class BubbleChartGenerator:
    """Creates label layouts (and preview images) for bubble charts."""

    def __init__(
        self,
        width: int = None,
        height: int = None,
        policy: str = None,
        size_mapping: str = None,
        status_callback: Optional[StatusCallback] = None,
        renderer: Optional[LabelRenderer] = None,
        **placer_options,
    ):
        self.width = width or CHART_CONFIG["width"]
        self.height = height or CHART_CONFIG["height"]
        self.size_mapping = size_mapping
        self.status_callback = status_callback

        self.frame = ChartFrame(self.width, self.height)
        self.renderer = renderer or LabelRenderer()
        self.placer = LabelPlacer(policy=policy, **placer_options)

    def _status(self, stage: int, message: str) -> None:
        if OUTPUT_CONFIG["verbose"]:
            print(f"[{stage}/{MAX_STAGE}] {message}")
        if self.status_callback:
            self.status_callback(stage, MAX_STAGE, message)

    def generate(
        self, records: Sequence[BubbleRecord], output_path: Optional[str] = None
    ) -> ChartLayout:
        """
        Lay out labels for the records.

        Args:
            records: Bubble records in input order
            output_path: Save a PNG preview here if given

        Returns:
            ChartLayout with bubbles in processing order and their placements
        """
        self._status(1, f"Preparing {len(records)} records...")
        if not records:
            if OUTPUT_CONFIG["verbose"]:
                print("No records to chart")
            return ChartLayout()

        self._status(2, "Calculating bubble sizes...")
        mapping = create_size_mapping(
            self.size_mapping, [record.magnitude for record in records]
        )
        bubbles = size_bubbles(
            records, mapping, scale_factor_for_canvas(self.width, self.height)
        )

        self._status(3, "Projecting bubbles onto the canvas...")
        self.frame.fit(
            [record.x_value for record in records],
            [record.y_value for record in records],
        )
        circles = self.frame.bubble_circles(bubbles)
        axis_band = self.frame.axis_band()

        self._status(4, "Measuring labels...")
        labels = [bubble.record.label for bubble in bubbles]
        label_sizes = self.renderer.measure_all(labels)

        self._status(5, "Placing data labels...")
        run = self.placer.place_all(
            circles, label_sizes, labels=labels, exclusion_rectangles=[axis_band]
        )

        layout = ChartLayout(
            bubbles=bubbles,
            circles=circles,
            label_sizes=label_sizes,
            axis_band=axis_band,
            run=run,
        )

        if output_path:
            self._status(6, "Rendering preview...")
            colors = [bubble.record.category.color for bubble in bubbles]
            self.renderer.render(self.frame, circles, labels, colors, run, output_path)
            if OUTPUT_CONFIG["verbose"]:
                print(f"Bubble chart saved to: {output_path}")
        else:
            self._status(6, "Done")

        return layout


def records_from_dicts(rows: Sequence[Dict]) -> List[BubbleRecord]:
    """Build records from dicts with label, x, y, magnitude and category."""
    records = []
    for number, row in enumerate(rows, start=1):
        try:
            records.append(
                BubbleRecord(
                    label=str(row["label"]),
                    x_value=float(row["x"]),
                    y_value=float(row["y"]),
                    magnitude=float(row["magnitude"]),
                    category=Category(str(row.get("category", "A"))),
                )
            )
        except KeyError as e:
            raise ValueError(f"Record {number} is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Record {number} is invalid: {e}") from e
    return records


def load_records(filepath: str) -> List[BubbleRecord]:
    """Load records from a JSON file holding a list or a dict with 'records'."""
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "records" in data:
        data = data["records"]
    if not isinstance(data, list):
        raise ValueError(
            "Records file must contain a list or dict with 'records' key"
        )
    return records_from_dicts(data)


def example_records() -> List[BubbleRecord]:
    """Demo dataset: hourly rate, margin and revenue per client."""
    return [
        BubbleRecord("Attentec", 600, 0.20, 150, Category.A),
        BubbleRecord("Umbrella Corporation", 800, 0.11, 300, Category.B),
        BubbleRecord("LexCorp", 1000, 0.06, 900, Category.C),
        BubbleRecord("Aperture Science", 1300, 0.12, 805, Category.B),
        BubbleRecord("Cyberdyne Systems", 550, 0.10, 50, Category.B),
        BubbleRecord("Weyland-Yutani", 807, 0.11, 120, Category.A),
        BubbleRecord("Wayne Enterprises", 780, 0.11, 1000, Category.C),
        BubbleRecord("Soylent", 650, 0.14, 700, Category.A),
        BubbleRecord("Tyrell Corporation", 150, -0.05, 50, Category.A),
    ]
