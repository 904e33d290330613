"""
Planned Time Resolver

Turns calendar events attributed to a project into per-day planned hours.
Each event contributes the overlap between its [start, end] span and the
24-hour window of a date, so an event crossing midnight is split between
the days it touches.
"""

from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List

from .schemas import CalendarEvent

SECONDS_PER_HOUR = 3600.0


def _day_bounds(day: date, reference: datetime):
    """Midnight-to-midnight window for day, in the reference's timezone."""
    day_start = datetime.combine(day, time.min, tzinfo=reference.tzinfo)
    return day_start, day_start + timedelta(days=1)


def event_overlap_hours(event: CalendarEvent, day: date) -> float:
    """Hours of the event that fall on the given day. Never negative."""
    day_start, day_end = _day_bounds(day, event.start_time)
    start = max(event.start_time, day_start)
    end = min(event.end_time, day_end)
    if end <= start:
        return 0.0
    return (end - start).total_seconds() / SECONDS_PER_HOUR


class PlannedTimeResolver:
    """Aggregates planned event hours per project per day."""

    @staticmethod
    def events_for_project(project_id: str, events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
        return [event for event in events if event.project_id == project_id]

    def hours_on_date(self, project_id: str, day: date, events: Iterable[CalendarEvent]) -> float:
        """Sum of the clamped overlaps of the project's events with the day."""
        return sum(
            event_overlap_hours(event, day)
            for event in self.events_for_project(project_id, events)
        )

    def hours_by_date(
        self,
        project_id: str,
        events: Iterable[CalendarEvent],
        start: date,
        end: date,
    ) -> Dict[date, float]:
        """
        Planned hours for every date in [start, end] that has any.

        Walks only the days each event actually touches, using the same
        overlap routine as hours_on_date so both always agree.
        """
        hours: Dict[date, float] = {}
        for event in self.events_for_project(project_id, events):
            if event.end_time <= event.start_time:
                continue

            first_day = max(event.start_time.date(), start)
            # An event ending exactly at midnight does not touch the next day
            last_day = min(event.end_time.date(), end)

            current = first_day
            while current <= last_day:
                overlap = event_overlap_hours(event, current)
                if overlap > 0:
                    hours[current] = hours.get(current, 0.0) + overlap
                current += timedelta(days=1)

        return hours
