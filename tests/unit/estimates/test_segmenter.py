"""
Tests for MilestoneSegmenter.

Every test checks the two structural laws: segments tile the lifespan and
(unless over-allocated) allocations sum to the project budget.
"""

from datetime import date, timedelta

import pytest

from planline.estimates import MilestoneSegmenter, RecurrenceExpander

from factories import make_milestone, make_project, make_recurring


def assert_tiles(result, start, end):
    """Segments are contiguous and cover [start, end] exactly."""
    segments = result.segments
    assert segments[0].start_date == start
    for previous, current in zip(segments, segments[1:]):
        assert current.start_date == previous.end_date + timedelta(days=1)
    assert segments[-1].end_date == end


@pytest.fixture
def segmenter():
    return MilestoneSegmenter()


class TestBasicSegmentation:
    """Plain milestones."""

    def test_no_milestones_single_trailing_segment(self, segmenter, project):
        result = segmenter.segment(project, [])

        assert len(result.segments) == 1
        trailing = result.trailing_segment
        assert trailing.is_auto_estimate
        assert trailing.start_date == date(2025, 1, 1)
        assert trailing.end_date == date(2025, 1, 7)
        assert trailing.allocated_hours == 40

    def test_single_milestone_split(self, segmenter, project):
        result = segmenter.segment(project, [make_milestone("m_1", date(2025, 1, 2), 10)])

        first, trailing = result.segments
        assert (first.start_date, first.end_date) == (date(2025, 1, 1), date(2025, 1, 2))
        assert first.allocated_hours == 10
        assert first.milestone_id == "m_1"
        assert (trailing.start_date, trailing.end_date) == (date(2025, 1, 3), date(2025, 1, 7))
        assert trailing.allocated_hours == 30
        assert trailing.milestone_id is None
        assert_tiles(result, project.start_date, project.end_date)

    def test_milestones_sorted_by_due_date(self, segmenter, project):
        milestones = [
            make_milestone("m_late", date(2025, 1, 6), 8),
            make_milestone("m_early", date(2025, 1, 2), 6),
        ]
        result = segmenter.segment(project, milestones)

        assert [s.milestone_id for s in result.segments] == ["m_early", "m_late", None]
        assert_tiles(result, project.start_date, project.end_date)

    def test_same_due_date_keeps_input_order(self, segmenter, project):
        milestones = [
            make_milestone("m_b", date(2025, 1, 3), 5),
            make_milestone("m_a", date(2025, 1, 3), 5),
        ]
        result = segmenter.segment(project, milestones)

        first, second, trailing = result.segments
        assert (first.milestone_id, second.milestone_id) == ("m_b", "m_a")
        assert first.end_date == date(2025, 1, 3)
        assert second.is_empty
        assert trailing.allocated_hours == 30
        assert_tiles(result, project.start_date, project.end_date)

    def test_other_projects_milestones_ignored(self, segmenter, project):
        milestones = [make_milestone("m_other", date(2025, 1, 2), 10, project_id="proj_2")]
        result = segmenter.segment(project, milestones)
        assert len(result.segments) == 1
        assert result.trailing_segment.allocated_hours == 40


class TestDefensiveClamping:
    """Invalid data never crashes and never yields negative hours."""

    def test_over_allocation_clamps_trailing_to_zero(self, segmenter, project):
        milestones = [
            make_milestone("m_1", date(2025, 1, 2), 30),
            make_milestone("m_2", date(2025, 1, 6), 20),
        ]
        result = segmenter.segment(project, milestones)

        assert result.trailing_segment.allocated_hours == 0
        assert result.milestone_hours == 50
        assert all(s.allocated_hours >= 0 for s in result.segments)

    def test_due_date_after_project_end_is_clamped(self, segmenter, project):
        result = segmenter.segment(project, [make_milestone("m_1", date(2025, 1, 20), 10)])

        first, trailing = result.segments
        assert first.end_date == date(2025, 1, 7)
        assert trailing.is_empty
        assert_tiles(result, project.start_date, project.end_date)

    def test_due_date_before_project_start_is_empty(self, segmenter, project):
        result = segmenter.segment(project, [make_milestone("m_1", date(2024, 12, 25), 10)])

        first, trailing = result.segments
        assert first.is_empty
        assert trailing.start_date == date(2025, 1, 1)
        assert_tiles(result, project.start_date, project.end_date)


class TestRecurringSegmentation:
    """Recurring templates expanded into segments."""

    def test_weekly_occurrences_bound_segments(self, segmenter):
        project = make_project(end=date(2025, 1, 31), estimated_hours=100)
        milestone = make_recurring("rec_1", 10, type="weekly", interval=1, weekly_day_of_week=3)

        result = segmenter.segment(project, [milestone])

        bounds = [(s.start_date.day, s.end_date.day) for s in result.segments]
        assert bounds == [(1, 1), (2, 8), (9, 15), (16, 22), (23, 29), (30, 31)]
        assert [s.occurrence_number for s in result.milestone_segments] == [1, 2, 3, 4, 5]
        assert result.trailing_segment.allocated_hours == 50
        assert_tiles(result, project.start_date, project.end_date)

    def test_malformed_recurring_milestone_is_skipped(self, segmenter, project):
        milestones = [
            make_recurring("rec_bad", 5, type="weekly", interval=1),
            make_milestone("m_1", date(2025, 1, 2), 10),
        ]
        result = segmenter.segment(project, milestones)

        assert result.skipped_milestone_ids == ["rec_bad"]
        assert [s.milestone_id for s in result.segments] == ["m_1", None]
        assert result.trailing_segment.allocated_hours == 30

    def test_continuous_project_ends_at_horizon(self):
        segmenter = MilestoneSegmenter(RecurrenceExpander(horizon_days=30, max_occurrences=3))
        project = make_project(end=None, continuous=True, estimated_hours=100)
        milestone = make_recurring("rec_1", 10, type="weekly", interval=1, weekly_day_of_week=3)

        result = segmenter.segment(project, [milestone])

        assert result.effective_end == date(2025, 1, 31)
        assert len(result.occurrences) == 3
        assert_tiles(result, project.start_date, date(2025, 1, 31))


class TestBudgetConservation:
    """Allocations sum to the project budget."""

    @pytest.mark.parametrize(
        "milestones",
        [
            [],
            [make_milestone("m_1", date(2025, 1, 2), 10)],
            [make_milestone("m_1", date(2025, 1, 2), 10), make_milestone("m_2", date(2025, 1, 6), 12.5)],
            [make_milestone("m_1", date(2025, 1, 7), 40)],
            [make_milestone("m_1", date(2025, 1, 3), 1 / 3), make_milestone("m_2", date(2025, 1, 3), 2 / 3)],
        ],
    )
    def test_sum_equals_budget(self, segmenter, project, milestones):
        result = segmenter.segment(project, milestones)
        assert result.total_allocated_hours == pytest.approx(project.estimated_hours)
        assert_tiles(result, project.start_date, project.end_date)
