"""
Label measurement and chart preview rendering.
Measures label boxes for the placer and draws bubbles, labels and leader
lines from the placed geometry.
"""

from typing import Dict, List, Optional, Sequence, Tuple

try:
    from PIL import Image, ImageDraw, ImageFont
    import matplotlib.colors as mcolors

    PIL_AVAILABLE = True
except ImportError:
    PIL_AVAILABLE = False

from chart_frame import ChartFrame
from config import CHART_CONFIG
from geometry import Circle
from label_placer import PlacementRun


def resolve_color(color: str) -> str:
    """Any matplotlib color name or hex code to #rrggbb."""
    try:
        return mcolors.to_hex(color)
    except ValueError:
        print(f"Warning: Unknown color '{color}', using gray")
        return mcolors.to_hex("gray")


class FontManager:
    """Handles font loading and text size calculations."""

    FONT_NAMES = ["arial.ttf", "DejaVuSans.ttf", "calibri.ttf", "times.ttf"]

    def __init__(self):
        self._font_cache = {}

    def get_font(self, font_size: int):
        """Get a font of the specified size with caching."""
        if font_size in self._font_cache:
            return self._font_cache[font_size]

        font = None
        for font_name in self.FONT_NAMES:
            try:
                font = ImageFont.truetype(font_name, font_size)
                break
            except (OSError, IOError):
                continue
        if font is None:
            font = ImageFont.load_default()

        self._font_cache[font_size] = font
        return font


class LabelRenderer:
    """Pixel-space label measurement and preview drawing."""

    def __init__(
        self,
        font_size: int = None,
        label_padding: int = None,
        font_manager: Optional[FontManager] = None,
    ):
        if not PIL_AVAILABLE:
            raise ImportError(
                "PIL (Pillow) is required for label rendering. Install with: pip install Pillow matplotlib"
            )

        self.font_size = font_size or CHART_CONFIG["font_size"]
        self.label_padding = (
            label_padding
            if label_padding is not None
            else CHART_CONFIG["label_padding"]
        )
        self.font_manager = font_manager or FontManager()
        self._measure_draw = ImageDraw.Draw(Image.new("RGB", (1, 1), "white"))

    @property
    def font(self):
        return self.font_manager.get_font(self.font_size)

    def measure(self, text: str) -> Tuple[float, float]:
        """Pixel width and height of a label box, padding included."""
        bbox = self._measure_draw.textbbox((0, 0), text, font=self.font)
        width = bbox[2] - bbox[0] + 2 * self.label_padding
        height = bbox[3] - bbox[1] + 2 * self.label_padding
        return float(width), float(height)

    def measure_all(self, texts: Sequence[str]) -> List[Tuple[float, float]]:
        return [self.measure(text) for text in texts]

    def render(
        self,
        frame: ChartFrame,
        circles: Sequence[Circle],
        labels: Sequence[str],
        colors: Sequence[str],
        run: PlacementRun,
        output_path: str,
    ) -> None:
        """
        Draw the chart and save it as PNG.

        Args:
            frame: Chart frame the circles were projected with
            circles: Bubble circles, indexed like the placement run
            labels: Label text per circle
            colors: Fill color per circle (matplotlib names or hex)
            run: Placement results
            output_path: Path to save the image
        """
        image = Image.new("RGB", (frame.width, frame.height), "white")
        draw = ImageDraw.Draw(image)

        self._draw_grid(draw, frame)
        self._draw_bubbles(draw, circles, colors)
        self._draw_labels(draw, labels, run.by_index())

        image.save(output_path, "PNG", optimize=True)

    def _draw_grid(self, draw: "ImageDraw.ImageDraw", frame: ChartFrame) -> None:
        grid_color = resolve_color("gainsboro")
        xs, ys = frame.gridline_positions()
        for x in xs:
            draw.line([(x, frame.plot_top), (x, frame.plot_bottom)], fill=grid_color)
        for y in ys:
            draw.line([(frame.plot_left, y), (frame.plot_right, y)], fill=grid_color)

        band = frame.axis_band()
        draw.line([(band.min_x, band.min_y), (band.max_x, band.min_y)], fill="black")

    def _draw_bubbles(
        self,
        draw: "ImageDraw.ImageDraw",
        circles: Sequence[Circle],
        colors: Sequence[str],
    ) -> None:
        """Lower priority first so that higher priority bubbles end up on top."""
        order = sorted(range(len(circles)), key=lambda i: circles[i].priority)
        for i in order:
            circle = circles[i]
            bbox = [
                circle.center_x - circle.radius,
                circle.center_y - circle.radius,
                circle.center_x + circle.radius,
                circle.center_y + circle.radius,
            ]
            draw.ellipse(bbox, fill=resolve_color(colors[i]), outline="black")

    def _draw_labels(
        self,
        draw: "ImageDraw.ImageDraw",
        labels: Sequence[str],
        results: Dict,
    ) -> None:
        for index, result in sorted(results.items()):
            rectangle = result.rectangle
            if result.has_leader_line:
                draw.line(
                    [tuple(result.attachment), tuple(result.anchor)],
                    fill="black",
                    width=1,
                )
            # textbbox can start below or right of the origin
            left, top, _, _ = draw.textbbox((0, 0), labels[index], font=self.font)
            draw.text(
                (
                    rectangle.min_x + self.label_padding - left,
                    rectangle.min_y + self.label_padding - top,
                ),
                labels[index],
                fill="black",
                font=self.font,
            )
