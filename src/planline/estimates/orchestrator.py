"""
Day Estimate Orchestrator

The single entry point for day estimates. For a project and a date range
it produces exactly one DayEstimate per date, choosing the hours by a
fixed priority:

1. Planned time from calendar events, whenever it is greater than zero
2. Milestone allocation or auto-estimate from the segment covering the date
3. Nothing (source NONE, zero hours)

Both the days view and the weeks view read from this function, so they
always agree.

Usage:
    orchestrator = DayEstimateOrchestrator(cache=EstimateCache())

    estimates = orchestrator.compute_project_day_estimates(
        project, milestones, events, work_settings, holidays,
        DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31)),
    )
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

import structlog

from planline.platform.logging import get_logger

from .allocator import SegmentAllocator
from .cache import EstimateCache, estimate_cache_key
from .calendar import WorkingCalendar
from .planned_time import PlannedTimeResolver
from .schemas import (
    CalendarEvent,
    DateRange,
    DayEstimate,
    EstimateSource,
    Holiday,
    Milestone,
    Project,
    WorkHourSettings,
)
from .segmenter import MilestoneSegmenter

logger = get_logger(__name__)


class DayEstimateOrchestrator:
    """
    Merges planned time, milestone allocations and auto-estimates.

    Holds no state between calls apart from the optional injected cache.
    """

    def __init__(
        self,
        segmenter: Optional[MilestoneSegmenter] = None,
        resolver: Optional[PlannedTimeResolver] = None,
        cache: Optional[EstimateCache] = None,
    ):
        self.segmenter = segmenter or MilestoneSegmenter()
        self.resolver = resolver or PlannedTimeResolver()
        self.cache = cache

    def active_range(self, project: Project, date_range: DateRange) -> Optional[DateRange]:
        """Clip the requested range to the project's lifespan."""
        if project.continuous:
            return date_range.clip(project.start_date, date_range.end)
        return date_range.clip(project.start_date, project.end_date)

    def compute_project_day_estimates(
        self,
        project: Project,
        milestones: Iterable[Milestone],
        events: Iterable[CalendarEvent],
        work_settings: WorkHourSettings,
        holidays: Iterable[Holiday],
        date_range: DateRange,
    ) -> List[DayEstimate]:
        """
        Day estimates for every date of the range inside the project's lifespan.

        Args:
            project: Project to estimate
            milestones: Milestone rows (other projects' rows are ignored)
            events: Calendar events (other projects' events are ignored)
            work_settings: Weekly work-hour configuration
            holidays: Holiday ranges
            date_range: Requested inclusive range

        Returns:
            DayEstimates ordered by date
        """
        milestones = list(milestones)
        events = list(events)
        holidays = list(holidays)

        key = None
        if self.cache is not None:
            key = estimate_cache_key(project, milestones, events, work_settings, holidays, date_range)
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        with structlog.contextvars.bound_contextvars(project_id=project.id):
            estimates = self._compute(project, milestones, events, work_settings, holidays, date_range)

        if self.cache is not None:
            self.cache.put(key, estimates)
        return estimates

    def _compute(
        self,
        project: Project,
        milestones: List[Milestone],
        events: List[CalendarEvent],
        work_settings: WorkHourSettings,
        holidays: List[Holiday],
        date_range: DateRange,
    ) -> List[DayEstimate]:
        clipped = self.active_range(project, date_range)
        if clipped is None:
            return []

        calendar = WorkingCalendar(work_settings, holidays)
        allocator = SegmentAllocator(calendar)
        segmentation = self.segmenter.segment(project, milestones)

        segment_estimates: Dict[date, DayEstimate] = {}
        for segment in segmentation.segments:
            if not segment.overlaps(clipped.start, clipped.end):
                continue
            for estimate in allocator.compute_segment_daily_hours(segment, project):
                segment_estimates[estimate.date] = estimate

        planned = self.resolver.hours_by_date(project.id, events, clipped.start, clipped.end)

        estimates: List[DayEstimate] = []
        for day in clipped.days():
            is_working_day = calendar.is_working_day(day)
            planned_hours = planned.get(day, 0.0)

            if planned_hours > 0:
                estimates.append(
                    DayEstimate(
                        date=day,
                        project_id=project.id,
                        hours=planned_hours,
                        source=EstimateSource.PLANNED_EVENT,
                        is_working_day=is_working_day,
                    )
                )
            elif is_working_day and day in segment_estimates:
                estimates.append(segment_estimates[day])
            else:
                estimates.append(
                    DayEstimate(
                        date=day,
                        project_id=project.id,
                        hours=0.0,
                        source=EstimateSource.NONE,
                        is_working_day=is_working_day,
                    )
                )

        logger.debug(
            "Computed day estimates",
            project_id=project.id,
            start=clipped.start.isoformat(),
            end=clipped.end.isoformat(),
            days=len(estimates),
        )
        return estimates

    def compute_day_estimates(
        self,
        projects: Iterable[Project],
        milestones: Iterable[Milestone],
        events: Iterable[CalendarEvent],
        work_settings: WorkHourSettings,
        holidays: Iterable[Holiday],
        date_range: DateRange,
    ) -> Dict[str, List[DayEstimate]]:
        """Day estimates for several projects, keyed by project id."""
        milestones = list(milestones)
        events = list(events)
        holidays = list(holidays)

        milestones_by_project: Dict[str, List[Milestone]] = {}
        for milestone in milestones:
            milestones_by_project.setdefault(milestone.project_id, []).append(milestone)

        events_by_project: Dict[str, List[CalendarEvent]] = {}
        for event in events:
            if event.project_id is not None:
                events_by_project.setdefault(event.project_id, []).append(event)

        return {
            project.id: self.compute_project_day_estimates(
                project,
                milestones_by_project.get(project.id, []),
                events_by_project.get(project.id, []),
                work_settings,
                holidays,
                date_range,
            )
            for project in projects
        }


def compute_project_day_estimates(
    project: Project,
    milestones: Iterable[Milestone],
    events: Iterable[CalendarEvent],
    work_settings: WorkHourSettings,
    holidays: Iterable[Holiday],
    date_range: DateRange,
) -> List[DayEstimate]:
    """Day estimates for one project using a default, cache-less orchestrator."""
    return DayEstimateOrchestrator().compute_project_day_estimates(
        project, milestones, events, work_settings, holidays, date_range
    )
