"""
Segment Allocator

Spreads a segment's allocated hours evenly over its working days. Days
excluded by the project's auto-estimate weekday mask are not counted.
"""

from dataclasses import replace
from typing import List

from .calendar import WorkingCalendar
from .schemas import DayEstimate, EstimateSource, Project
from .segmenter import Segment


class SegmentAllocator:
    """Per-day milestone and auto-estimate hours for one working calendar."""

    def __init__(self, calendar: WorkingCalendar):
        self.calendar = calendar

    def measure(self, segment: Segment, project: Project) -> Segment:
        """Copy of the segment with its working-day count and daily rate filled in."""
        working_days = self.calendar.count_working_days(
            segment.start_date,
            segment.end_date,
            project.auto_estimate_weekday_mask,
        )
        hours_per_day = segment.allocated_hours / working_days if working_days else 0.0
        return replace(
            segment,
            working_day_count=working_days,
            hours_per_working_day=hours_per_day,
        )

    def compute_segment_daily_hours(self, segment: Segment, project: Project) -> List[DayEstimate]:
        """
        One estimate per working day of the segment.

        Returns an empty list when the segment has no working days; those
        dates fall through to source NONE unless planned time covers them.
        """
        working_days = self.calendar.enumerate_working_days(
            segment.start_date,
            segment.end_date,
            project.auto_estimate_weekday_mask,
        )
        if not working_days:
            return []

        hours_per_day = segment.allocated_hours / len(working_days)
        source = (
            EstimateSource.AUTO_ESTIMATE
            if segment.is_auto_estimate
            else EstimateSource.MILESTONE_ALLOCATION
        )

        return [
            DayEstimate(
                date=day,
                project_id=project.id,
                hours=hours_per_day,
                source=source,
                milestone_id=segment.milestone_id,
                is_working_day=True,
            )
            for day in working_days
        ]
