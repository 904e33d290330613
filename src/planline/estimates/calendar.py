"""
Working Calendar

Decides whether a date is a working day and enumerates working days in a
range. A working day has a positive summed slot duration in the weekly
work-hour configuration and falls outside every holiday range.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from .schemas import Holiday, WeekdayMask, WorkHourSettings


class WorkingCalendar:
    """
    Working-day lookups for one settings/holidays snapshot.

    Pure and deterministic; safe to share between callers.
    """

    def __init__(
        self,
        settings: WorkHourSettings,
        holidays: Optional[Iterable[Holiday]] = None,
    ):
        self.settings = settings
        self.holidays = sorted(holidays or [], key=lambda h: (h.start_date, h.end_date))

    def is_holiday(self, day: date) -> bool:
        for holiday in self.holidays:
            if holiday.start_date > day:
                break
            if holiday.contains(day):
                return True
        return False

    def working_hours_on(self, day: date) -> float:
        """Configured hours for the day's weekday, or 0 on a holiday."""
        if self.is_holiday(day):
            return 0.0
        return sum(slot.duration for slot in self.settings.weekly_work_hours.slots_for(day))

    def is_working_day(self, day: date) -> bool:
        return self.working_hours_on(day) > 0

    def enumerate_working_days(
        self,
        start: date,
        end: date,
        mask: Optional[WeekdayMask] = None,
    ) -> List[date]:
        """
        Working days in [start, end], ascending. Empty when start > end.

        Args:
            start: First date (inclusive)
            end: Last date (inclusive)
            mask: Optional weekday mask; disabled weekdays are left out

        Returns:
            Ordered list of working dates
        """
        days: List[date] = []
        current = start
        while current <= end:
            if self.is_working_day(current) and (mask is None or mask.allows(current)):
                days.append(current)
            current += timedelta(days=1)
        return days

    def count_working_days(
        self,
        start: date,
        end: date,
        mask: Optional[WeekdayMask] = None,
    ) -> int:
        return len(self.enumerate_working_days(start, end, mask))


def is_working_day(
    day: date,
    settings: WorkHourSettings,
    holidays: Optional[Iterable[Holiday]] = None,
) -> bool:
    """Check a single date against settings and holidays."""
    return WorkingCalendar(settings, holidays).is_working_day(day)


def enumerate_working_days(
    start: date,
    end: date,
    settings: WorkHourSettings,
    holidays: Optional[Iterable[Holiday]] = None,
) -> List[date]:
    """Working days in the inclusive range [start, end]."""
    return WorkingCalendar(settings, holidays).enumerate_working_days(start, end)
