"""
Label placement orchestrator.
Places one label per bubble, largest bubble first, so that no label overlaps
another label, a bubble or an exclusion band, attaching a leader line where
the bubble's rim is visible.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from candidate_generator import Candidate, CandidateGenerator
from config import OUTPUT_CONFIG, PLACEMENT_CONFIG
from geometry import Circle, InvalidGeometryError, Point, Rectangle
from occlusion_resolver import OcclusionResolver
from occupancy import OccupancyRegistry


class PlacementState(Enum):
    SEEKING_WITH_ATTACHMENT = "seeking_with_attachment"
    SEEKING_WITHOUT_ATTACHMENT = "seeking_without_attachment"
    PLACED = "placed"


class AttachmentPolicy(Enum):
    # Drop angles whose attachment fails; give up on lines once none are left
    EAGER = "eager"
    # Require a line up to attachment_search_steps, then restart without one
    PERSISTENT = "persistent"
    # Never look for a line
    DISABLED = "disabled"


@dataclass(frozen=True)
class PlacementResult:
    """Final geometry for one label."""

    index: int
    label: str
    rectangle: Rectangle
    attachment: Optional[Point]  # None means no leader line
    anchor: Optional[Point]  # label end of the leader line
    state: PlacementState
    degraded: bool = False
    bound_exceeded: bool = False
    radial_step: int = 0
    angle: float = 0.0

    @property
    def has_leader_line(self) -> bool:
        return self.attachment is not None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "label": self.label,
            "left": self.rectangle.min_x,
            "top": self.rectangle.min_y,
            "width": self.rectangle.width,
            "height": self.rectangle.height,
            "attachment": list(self.attachment) if self.attachment else None,
            "anchor": list(self.anchor) if self.anchor else None,
            "degraded": self.degraded,
            "bound_exceeded": self.bound_exceeded,
        }


@dataclass
class PlacementRun:
    """Results of one chart-generation run, in processing order."""

    results: List[PlacementResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def by_index(self) -> Dict[int, PlacementResult]:
        return {result.index: result for result in self.results}

    @property
    def with_leader_lines(self) -> int:
        return sum(1 for result in self.results if result.has_leader_line)

    @property
    def degraded_count(self) -> int:
        return sum(1 for result in self.results if result.degraded)

    @property
    def bound_exceeded_count(self) -> int:
        return sum(1 for result in self.results if result.bound_exceeded)

    def to_dict(self) -> dict:
        return {
            "labels": [result.to_dict() for result in self.results],
            "warnings": list(self.warnings),
        }


ProgressCallback = Callable[[int, int, PlacementResult], None]


def _debug(message: str) -> None:
    if OUTPUT_CONFIG["debug"]:
        print(message)


def _verbose(message: str) -> None:
    if OUTPUT_CONFIG["verbose"]:
        print(message)


class LabelPlacer:
    """Runs the placement search for every bubble of a chart."""

    def __init__(
        self,
        margin: Optional[float] = None,
        policy=None,
        rotation_increment: Optional[float] = None,
        radial_increment: Optional[float] = None,
        max_radial_steps: Optional[int] = None,
        attachment_search_steps: Optional[int] = None,
        walk_step: Optional[float] = None,
        marker_radius: Optional[float] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        self.margin = margin if margin is not None else PLACEMENT_CONFIG["margin"]
        self.policy = AttachmentPolicy(
            policy if policy is not None else PLACEMENT_CONFIG["attachment_policy"]
        )
        self.rotation_increment = rotation_increment
        self.radial_increment = radial_increment
        self.max_radial_steps = (
            max_radial_steps
            if max_radial_steps is not None
            else PLACEMENT_CONFIG["max_radial_steps"]
        )
        self.attachment_search_steps = (
            attachment_search_steps
            if attachment_search_steps is not None
            else PLACEMENT_CONFIG["attachment_search_steps"]
        )
        self.walk_step = walk_step
        self.marker_radius = (
            marker_radius
            if marker_radius is not None
            else PLACEMENT_CONFIG["marker_radius"]
        )
        self.progress = progress

        self.registry = OccupancyRegistry()
        self.resolver = OcclusionResolver(self.registry, self.margin, walk_step)

    def start_run(self) -> OccupancyRegistry:
        """Discard any previous run's occupancy and begin a new one."""
        self.registry = OccupancyRegistry()
        self.resolver = OcclusionResolver(self.registry, self.margin, self.walk_step)
        return self.registry

    def register_exclusion(self, rectangle: Rectangle) -> None:
        self.registry.add_rectangle(rectangle)

    def register_bubble(self, bubble: Circle) -> None:
        self.registry.add_circle(bubble)

    def place_all(
        self,
        bubbles: Sequence[Circle],
        label_sizes: Sequence[Tuple[float, float]],
        labels: Optional[Sequence[str]] = None,
        exclusion_rectangles: Sequence[Rectangle] = (),
    ) -> PlacementRun:
        """
        Place a label for every bubble.

        Args:
            bubbles: Pixel-space bubble circles; priority is the processing rank
            label_sizes: (width, height) of each bubble's label, same order
            labels: Label texts, used for reporting only
            exclusion_rectangles: Bands that are occupied from the start

        Returns:
            PlacementRun with results in processing order
        """
        if len(label_sizes) != len(bubbles):
            raise ValueError(
                f"Got {len(label_sizes)} label sizes for {len(bubbles)} bubbles"
            )
        if labels is not None and len(labels) != len(bubbles):
            raise ValueError(f"Got {len(labels)} labels for {len(bubbles)} bubbles")

        for bubble, (width, height) in zip(bubbles, label_sizes):
            self._validate(bubble, width, height)

        self.start_run()
        for rectangle in exclusion_rectangles:
            self.register_exclusion(rectangle)
        for bubble in bubbles:
            self.register_bubble(bubble)

        order = sorted(range(len(bubbles)), key=lambda i: bubbles[i].priority)
        run = PlacementRun()

        for done, index in enumerate(order, start=1):
            width, height = label_sizes[index]
            label = labels[index] if labels is not None else str(index)
            result = self.place(bubbles[index], width, height, index=index, label=label)
            run.results.append(result)

            if result.bound_exceeded:
                run.warnings.append(
                    f"Search bound exceeded for label '{label}'; "
                    f"placed at best-effort position "
                    f"({result.rectangle.min_x:.1f}, {result.rectangle.min_y:.1f})"
                )

            if self.progress:
                self.progress(done, len(order), result)

        _verbose(
            f"Placed {len(run.results)} labels "
            f"({run.with_leader_lines} with leader lines, "
            f"{run.degraded_count} without, "
            f"{run.bound_exceeded_count} past the search bound)"
        )
        for warning in run.warnings:
            _verbose(f"Warning: {warning}")

        return run

    def place(
        self,
        bubble: Circle,
        width: float,
        height: float,
        index: int = 0,
        label: str = "",
    ) -> PlacementResult:
        """Find, register and return the placement for a single label."""
        self._validate(bubble, width, height)
        if bubble not in self.registry.circles:
            self.register_bubble(bubble)

        generator = CandidateGenerator(
            bubble,
            width,
            height,
            margin=self.margin,
            rotation_increment=self.rotation_increment,
            radial_increment=self.radial_increment,
            max_radial_steps=self.max_radial_steps,
        )

        _debug(f"Now finding placement for data label {label}...")

        candidate = None
        attachment = None
        last_tried = None
        resume_step = 0

        if self.policy is not AttachmentPolicy.DISABLED:
            candidate, attachment, resume_step, last_tried = (
                self._seek_with_attachment(generator, bubble)
            )

        if candidate is None:
            _debug(f"Seeking placement for {label} without a leader line...")
            candidate, tried = self._seek_without_attachment(generator, resume_step)
            last_tried = tried or last_tried

        bound_exceeded = candidate is None
        if bound_exceeded:
            candidate = last_tried or generator.candidate(0, 0.0)

        result = PlacementResult(
            index=index,
            label=label,
            rectangle=candidate.rectangle,
            attachment=attachment,
            anchor=(
                self.resolver.label_anchor(candidate.rectangle, bubble)
                if attachment is not None
                else None
            ),
            state=PlacementState.PLACED,
            degraded=(
                attachment is None and self.policy is not AttachmentPolicy.DISABLED
            ),
            bound_exceeded=bound_exceeded,
            radial_step=candidate.radial_step,
            angle=candidate.angle,
        )

        self.registry.add_rectangle(result.rectangle)
        if attachment is not None:
            self.registry.add_marker(attachment, self.marker_radius)

        _debug(
            f"Added data label {label} at "
            f"{result.rectangle.min_x:.1f}, {result.rectangle.min_y:.1f}"
        )
        return result

    def _seek_with_attachment(self, generator: CandidateGenerator, bubble: Circle):
        """
        SEEKING_WITH_ATTACHMENT.

        Returns (candidate, attachment, resume_step, last_tried). When no
        candidate is accepted, resume_step is the radial step the label-only
        search starts from.
        """
        if self.policy is AttachmentPolicy.PERSISTENT:
            return self._seek_persistent(generator, bubble)
        return self._seek_eager(generator, bubble)

    def _seek_persistent(self, generator: CandidateGenerator, bubble: Circle):
        last_tried = None
        limit = min(self.attachment_search_steps, generator.max_radial_steps)

        for radial_step in range(limit):
            for candidate in generator.sweep(radial_step):
                last_tried = candidate
                if self.resolver.overlaps(candidate.rectangle):
                    continue
                attachment = self.resolver.find_attachment(
                    candidate.rectangle, bubble
                )
                if attachment is not None:
                    return candidate, attachment, radial_step, last_tried
                _debug("No leader line attachment possible at this angle.")
            _debug("Increasing distance from bubble...")

        _debug("No leader line attachment within the search bound. Giving up on it...")
        return None, None, 0, last_tried

    def _seek_eager(self, generator: CandidateGenerator, bubble: Circle):
        last_tried = None
        angles = generator.rotation_angles()

        for radial_step in generator.radial_steps():
            remaining = []
            for candidate in generator.sweep(radial_step, angles):
                last_tried = candidate
                if self.resolver.overlaps(candidate.rectangle):
                    remaining.append(candidate.angle)
                    continue
                attachment = self.resolver.find_attachment(
                    candidate.rectangle, bubble
                )
                if attachment is not None:
                    return candidate, attachment, radial_step, last_tried
                _debug("No leader line attachment possible at this angle. Continuing...")

            angles = remaining
            if not angles:
                _debug("Impossible to place leader line at any angle. Giving up on it...")
                return None, None, radial_step, last_tried
            _debug("Increasing distance from bubble...")

        return None, None, 0, last_tried

    def _seek_without_attachment(
        self, generator: CandidateGenerator, start_step: int
    ) -> Tuple[Optional[Candidate], Optional[Candidate]]:
        """SEEKING_WITHOUT_ATTACHMENT: first candidate that overlaps nothing."""
        last_tried = None
        for _, candidates in generator.passes(start_step):
            for candidate in candidates:
                last_tried = candidate
                if not self.resolver.overlaps(candidate.rectangle):
                    return candidate, last_tried
        return None, last_tried

    @staticmethod
    def _validate(bubble: Circle, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(
                f"Label size must be positive, got {width}x{height}"
            )
        if bubble.radius <= 0:
            raise InvalidGeometryError(
                f"Bubble radius must be positive, got {bubble.radius}"
            )
