"""
Tests for the label placement orchestrator.
Covers the single-bubble and occlusion scenarios, policy fallbacks, the
search ceiling and the non-overlap guarantees over random layouts.
"""

import json
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from geometry import Circle, InvalidGeometryError, Point, Rectangle
from label_placer import (
    AttachmentPolicy,
    LabelPlacer,
    PlacementRun,
    PlacementState,
)

# Import TestDataLoader from tests directory
tests_dir = os.path.dirname(__file__)
sys.path.append(tests_dir)
from test_data_loader import TestDataLoader

MARGIN = 5


def assert_no_overlaps(run: PlacementRun, bubbles, exclusions=()):
    """Every label clears every other label, every bubble and every band."""
    rectangles = [result.rectangle for result in run.results]
    for i, rect in enumerate(rectangles):
        for other in rectangles[i + 1 :]:
            assert not rect.overlaps_rectangle(
                other, MARGIN
            ), f"Labels overlap: {rect} and {other}"
        for bubble in bubbles:
            assert not rect.overlaps_circle(bubble), f"{rect} overlaps {bubble}"
        for band in exclusions:
            assert not rect.overlaps_rectangle(band, MARGIN), f"{rect} overlaps {band}"


@pytest.mark.unit
class TestSingleBubble:
    """A lone bubble places its label at the base candidate."""

    def test_base_candidate_accepted(self):
        placer = LabelPlacer(margin=MARGIN)
        bubble = Circle(300, 300, 50, 0)

        result = placer.place(bubble, 80, 20, label="Solo")

        assert result.rectangle == Rectangle(360, 290, 80, 20)
        assert result.radial_step == 0
        assert result.angle == 0
        assert result.state is PlacementState.PLACED
        assert not result.degraded
        assert not result.bound_exceeded

    def test_attachment_on_label_side(self):
        placer = LabelPlacer(margin=MARGIN)
        bubble = Circle(300, 300, 50, 0)

        result = placer.place(bubble, 80, 20)

        assert result.has_leader_line
        assert result.attachment.x > bubble.center_x
        assert result.attachment.y == pytest.approx(bubble.center_y)
        assert bubble.contains_point(*result.attachment)
        assert result.anchor == Point(360, 300)

    def test_registry_receives_bubble_label_and_marker(self):
        placer = LabelPlacer(margin=MARGIN)
        bubble = Circle(300, 300, 50, 0)

        result = placer.place(bubble, 80, 20)

        assert placer.registry.rectangles == (result.rectangle,)
        circles = placer.registry.circles
        assert circles[0] == bubble
        assert len(circles) == 2
        assert circles[1].is_marker
        assert circles[1].center == result.attachment

    def test_registered_bubble_not_added_twice(self):
        placer = LabelPlacer(margin=MARGIN)
        bubble = Circle(300, 300, 50, 0)
        placer.register_bubble(bubble)

        placer.place(bubble, 80, 20)

        assert sum(1 for c in placer.registry.circles if not c.is_marker) == 1


@pytest.mark.unit
class TestOcclusionScenario:
    """Two overlapping bubbles; the second is drawn on top."""

    @pytest.mark.parametrize("policy", ["eager", "persistent"])
    def test_back_bubble_never_attaches_under_front_bubble(self, policy):
        back = Circle(300, 300, 50, 0)
        front = Circle(340, 300, 50, 1)
        placer = LabelPlacer(margin=MARGIN, policy=policy)

        run = placer.place_all([back, front], [(60, 20), (60, 20)], ["back", "front"])

        result = run.by_index()[0]
        if result.attachment is not None:
            assert not front.contains_point(*result.attachment)
            assert back.contains_point(*result.attachment)
        assert_no_overlaps(run, [back, front])

    def test_front_bubble_attaches_freely(self):
        back = Circle(300, 300, 50, 0)
        front = Circle(340, 300, 50, 1)
        placer = LabelPlacer(margin=MARGIN)

        run = placer.place_all([back, front], [(60, 20), (60, 20)])

        assert run.by_index()[1].has_leader_line

    def test_fully_covered_bubble_degrades_to_label_only(self):
        hidden = Circle(300, 300, 40, 0)
        cover = Circle(300, 300, 60, 1)
        placer = LabelPlacer(margin=MARGIN, policy="eager")

        run = placer.place_all([hidden, cover], [(50, 16), (50, 16)])

        result = run.by_index()[0]
        assert result.attachment is None
        assert result.anchor is None
        assert result.degraded
        assert not result.bound_exceeded
        assert result.state is PlacementState.PLACED
        assert_no_overlaps(run, [hidden, cover])

    def test_persistent_policy_restarts_without_attachment(self):
        hidden = Circle(300, 300, 40, 0)
        cover = Circle(300, 300, 60, 1)
        placer = LabelPlacer(
            margin=MARGIN, policy="persistent", attachment_search_steps=5
        )

        run = placer.place_all([hidden, cover], [(50, 16), (50, 16)])

        result = run.by_index()[0]
        assert result.attachment is None
        assert result.degraded
        assert_no_overlaps(run, [hidden, cover])


@pytest.mark.unit
class TestFailureSemantics:
    """Invalid geometry fails fast; the search ceiling does not."""

    def test_zero_label_size_rejected(self):
        placer = LabelPlacer()
        with pytest.raises(InvalidGeometryError):
            placer.place(Circle(0, 0, 10), 0, 10)

    def test_zero_radius_rejected(self):
        placer = LabelPlacer()
        with pytest.raises(InvalidGeometryError):
            placer.place(Circle(0, 0, 0), 10, 10)

    def test_place_all_validates_before_placing(self):
        placer = LabelPlacer()
        bubbles = [Circle(0, 0, 10, 0), Circle(100, 0, 10, 1)]

        with pytest.raises(InvalidGeometryError):
            placer.place_all(bubbles, [(10, 10), (10, -1)])

        assert len(placer.registry) == 0

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError):
            LabelPlacer().place_all([Circle(0, 0, 10)], [])

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            LabelPlacer(policy="sometimes")

    def test_search_bound_exceeded_is_reported_not_raised(self):
        blocker = Rectangle(-1000, -1000, 2000, 2000)
        bubble = Circle(0, 0, 20, 0)
        placer = LabelPlacer(margin=MARGIN, max_radial_steps=2)

        run = placer.place_all(
            [bubble], [(40, 10)], ["boxed in"], exclusion_rectangles=[blocker]
        )

        result = run.results[0]
        assert result.bound_exceeded
        assert result.attachment is None
        assert result.state is PlacementState.PLACED
        assert result.radial_step == 1
        assert len(run.warnings) == 1
        assert "boxed in" in run.warnings[0]
        assert result.rectangle in placer.registry.rectangles


@pytest.mark.quality
class TestPlacementProperties:
    """Properties that hold for any input."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_no_label_overlaps_anything(self, seed):
        bubbles, sizes = TestDataLoader.random_bubbles(seed)
        band = TestDataLoader.axis_band()
        placer = LabelPlacer(margin=MARGIN)

        run = placer.place_all(bubbles, sizes, exclusion_rectangles=[band])

        assert len(run.results) == len(bubbles)
        assert not any(result.bound_exceeded for result in run.results)
        assert_no_overlaps(run, bubbles, [band])

    def test_each_label_clears_earlier_markers(self):
        bubbles, sizes = TestDataLoader.random_bubbles(3, count=15)
        placer = LabelPlacer(margin=MARGIN)

        run = placer.place_all(bubbles, sizes)

        for k, result in enumerate(run.results):
            for earlier in run.results[:k]:
                if earlier.attachment is not None:
                    marker = Circle(*earlier.attachment, 2.0)
                    assert not result.rectangle.overlaps_circle(marker)

    def test_processing_follows_priority(self):
        bubbles, sizes = TestDataLoader.random_bubbles(5, count=10)
        shuffled = list(reversed(bubbles))
        shuffled_sizes = list(reversed(sizes))

        run = LabelPlacer().place_all(shuffled, shuffled_sizes)

        priorities = [shuffled[result.index].priority for result in run.results]
        assert priorities == sorted(priorities)

    def test_identical_runs_are_identical(self):
        bubbles, sizes = TestDataLoader.random_bubbles(11)
        band = TestDataLoader.axis_band()

        first = LabelPlacer().place_all(bubbles, sizes, exclusion_rectangles=[band])
        second = LabelPlacer().place_all(bubbles, sizes, exclusion_rectangles=[band])

        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_reusing_placer_starts_fresh_run(self):
        bubbles, sizes = TestDataLoader.random_bubbles(11, count=8)
        placer = LabelPlacer()

        first = placer.place_all(bubbles, sizes)
        second = placer.place_all(bubbles, sizes)

        assert first.to_dict() == second.to_dict()

    def test_disabled_attachment_still_labels_everything(self):
        bubbles, sizes = TestDataLoader.random_bubbles(23)
        band = TestDataLoader.axis_band()
        placer = LabelPlacer(margin=MARGIN, policy=AttachmentPolicy.DISABLED)

        run = placer.place_all(bubbles, sizes, exclusion_rectangles=[band])

        assert len(run.results) == len(bubbles)
        assert all(result.attachment is None for result in run.results)
        assert not any(result.degraded for result in run.results)
        assert_no_overlaps(run, bubbles, [band])

    def test_progress_callback(self):
        bubbles, sizes = TestDataLoader.random_bubbles(2, count=6)
        calls = []

        LabelPlacer(progress=lambda done, total, result: calls.append((done, total))).place_all(
            bubbles, sizes
        )

        assert calls == [(i, 6) for i in range(1, 7)]
