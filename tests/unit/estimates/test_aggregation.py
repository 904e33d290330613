"""
Tests for day/week roll-ups and budget summaries.
"""

from datetime import date

import pytest

from planline.estimates import (
    DayEstimate,
    EstimateSource,
    aggregate_by_date,
    rollup_weeks,
    summarize_budget,
    total_hours,
)
from planline.estimates.aggregation import SUNDAY, week_start_for

from factories import make_milestone, make_project, make_recurring


def estimate(day: date, hours: float, source=EstimateSource.AUTO_ESTIMATE, project_id="proj_1"):
    return DayEstimate(
        date=day,
        project_id=project_id,
        hours=hours,
        source=source,
        is_working_day=source != EstimateSource.NONE,
    )


class TestDailyAggregation:

    def test_aggregate_by_date_groups_projects(self):
        estimates = [
            estimate(date(2025, 1, 1), 4, project_id="a"),
            estimate(date(2025, 1, 1), 2, project_id="b"),
            estimate(date(2025, 1, 2), 3, project_id="a"),
        ]
        grouped = aggregate_by_date(estimates)

        assert len(grouped[date(2025, 1, 1)]) == 2
        assert total_hours(grouped[date(2025, 1, 1)]) == pytest.approx(6)
        assert total_hours(estimates) == pytest.approx(9)


class TestWeeklyRollup:

    def test_week_start_for(self):
        assert week_start_for(date(2025, 1, 1)) == date(2024, 12, 30)
        assert week_start_for(date(2025, 1, 6)) == date(2025, 1, 6)
        assert week_start_for(date(2025, 1, 1), SUNDAY) == date(2024, 12, 29)

    def test_rollup_splits_on_week_boundary(self):
        estimates = [
            estimate(date(2025, 1, 7), 5, EstimateSource.PLANNED_EVENT),
            estimate(date(2025, 1, 1), 8),
            estimate(date(2025, 1, 3), 8),
            estimate(date(2025, 1, 4), 0, EstimateSource.NONE),
            estimate(date(2025, 1, 6), 10, EstimateSource.MILESTONE_ALLOCATION),
        ]
        first, second = rollup_weeks(estimates)

        assert (first.week_start, first.week_end) == (date(2024, 12, 30), date(2025, 1, 5))
        assert first.hours == pytest.approx(16)
        assert first.working_day_count == 2
        assert [e.date.day for e in first.days] == [1, 3, 4]

        assert second.week_start == date(2025, 1, 6)
        assert second.hours == pytest.approx(15)
        assert second.hours_by_source == {
            EstimateSource.MILESTONE_ALLOCATION: pytest.approx(10),
            EstimateSource.PLANNED_EVENT: pytest.approx(5),
        }

    def test_rollup_of_nothing(self):
        assert rollup_weeks([]) == []


class TestBudgetSummary:

    def test_within_budget(self, project):
        summary = summarize_budget(project, [make_milestone("m_1", date(2025, 1, 2), 10)])

        assert summary.milestone_hours == pytest.approx(10)
        assert summary.auto_estimate_hours == pytest.approx(30)
        assert summary.occurrence_count == 1
        assert summary.is_over_allocated is False
        assert summary.over_allocated_hours == 0

    def test_over_allocated(self, project):
        milestones = [
            make_milestone("m_1", date(2025, 1, 2), 30),
            make_milestone("m_2", date(2025, 1, 6), 25),
        ]
        summary = summarize_budget(project, milestones)

        assert summary.is_over_allocated is True
        assert summary.over_allocated_hours == pytest.approx(15)
        assert summary.auto_estimate_hours == 0

    def test_recurring_counts_each_occurrence(self):
        project = make_project(end=date(2025, 1, 31), estimated_hours=100)
        milestone = make_recurring("rec_1", 10, type="weekly", interval=1, weekly_day_of_week=1)  # 4 Mondays
        summary = summarize_budget(project, [milestone])

        assert summary.occurrence_count == 4
        assert summary.milestone_hours == pytest.approx(40)
        assert summary.auto_estimate_hours == pytest.approx(60)

    def test_reports_skipped_templates(self, project):
        summary = summarize_budget(project, [make_recurring("rec_bad", 5, type="monthly", interval=1)])
        assert summary.skipped_milestone_ids == ["rec_bad"]
        assert summary.milestone_hours == 0
