"""
Estimate roll-ups for the rendering and budget layers.

The weeks view is built only from day estimates, never recomputed, so a
week's total is always the sum of the days shown in the days view.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from planline.platform.config import settings as app_settings

from .schemas import DayEstimate, EstimateSource, Milestone, Project
from .segmenter import MilestoneSegmenter

MONDAY = 0
SUNDAY = 6


@dataclass
class WeekSummary:
    """Totals for one calendar week of day estimates."""

    week_start: date
    week_end: date
    hours: float = 0.0
    hours_by_source: Dict[EstimateSource, float] = field(default_factory=dict)
    days: List[DayEstimate] = field(default_factory=list)

    @property
    def working_day_count(self) -> int:
        return sum(1 for estimate in self.days if estimate.is_working_day)


@dataclass
class BudgetSummary:
    """Milestone allocations measured against the project budget."""

    project_id: str
    estimated_hours: float
    milestone_hours: float
    auto_estimate_hours: float
    occurrence_count: int
    skipped_milestone_ids: List[str]
    is_over_allocated: bool

    @property
    def over_allocated_hours(self) -> float:
        return max(0.0, self.milestone_hours - self.estimated_hours)


def aggregate_by_date(estimates: Iterable[DayEstimate]) -> Dict[date, List[DayEstimate]]:
    """Group estimates (possibly from several projects) by date."""
    by_date: Dict[date, List[DayEstimate]] = {}
    for estimate in estimates:
        by_date.setdefault(estimate.date, []).append(estimate)
    return by_date


def total_hours(estimates: Iterable[DayEstimate]) -> float:
    return sum(estimate.hours for estimate in estimates)


def week_start_for(day: date, week_start: int = MONDAY) -> date:
    """First day of the week containing day. week_start uses date.weekday() numbering."""
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def rollup_weeks(estimates: Iterable[DayEstimate], week_start: int = MONDAY) -> List[WeekSummary]:
    """
    Group day estimates into calendar weeks, ordered by week start.

    Args:
        estimates: Day estimates, any order, any number of projects
        week_start: Weekday the week begins on (0 = Monday .. 6 = Sunday)

    Returns:
        One WeekSummary per week that has at least one estimate
    """
    weeks: Dict[date, WeekSummary] = {}
    for estimate in sorted(estimates, key=lambda e: (e.date, e.project_id)):
        start = week_start_for(estimate.date, week_start)
        summary = weeks.get(start)
        if summary is None:
            summary = weeks[start] = WeekSummary(week_start=start, week_end=start + timedelta(days=6))
        summary.days.append(estimate)
        summary.hours += estimate.hours
        summary.hours_by_source[estimate.source] = (
            summary.hours_by_source.get(estimate.source, 0.0) + estimate.hours
        )
    return [weeks[start] for start in sorted(weeks)]


def summarize_budget(
    project: Project,
    milestones: Iterable[Milestone],
    segmenter: Optional[MilestoneSegmenter] = None,
) -> BudgetSummary:
    """
    Compare milestone allocations with the project budget.

    Recurring templates count once per generated occurrence, exactly as
    the segmenter allocates them.
    """
    segmenter = segmenter or MilestoneSegmenter()
    segmentation = segmenter.segment(project, milestones)

    return BudgetSummary(
        project_id=project.id,
        estimated_hours=project.estimated_hours,
        milestone_hours=segmentation.milestone_hours,
        auto_estimate_hours=segmentation.trailing_segment.allocated_hours,
        occurrence_count=len(segmentation.occurrences),
        skipped_milestone_ids=segmentation.skipped_milestone_ids,
        is_over_allocated=segmentation.milestone_hours > project.estimated_hours + app_settings.HOURS_TOLERANCE,
    )
