"""
Recurring Milestone Expansion

A recurring milestone is stored as one template row. Its occurrences are
generated on demand with dateutil.rrule:

- daily:   every `interval` days from the search start
- weekly:  every `interval` weeks on `weekly_day_of_week`
- monthly: every `interval` months, either on `monthly_date` (the last day
           of shorter months) or on the n-th `monthly_day_of_week`

The search starts at the project start (or the template's own start date
when that is later). Bounded projects stop at their end date; continuous
projects stop at the generation horizon or the occurrence cap, whichever
comes first.

Usage:
    expander = RecurrenceExpander()

    for due in expander.iter_occurrences(milestone, project):
        ...

    occurrences = expander.expand(milestone, project)
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from itertools import islice
from typing import Iterator, List, Optional

from dateutil.rrule import DAILY, FR, MO, MONTHLY, SA, SU, TH, TU, WE, WEEKLY, rrule

from planline.platform.config import settings as app_settings

from .schemas import Milestone, MonthlyPattern, Project, RecurrenceType, RecurringConfig


# Config weekday numbering is 0 = Sunday .. 6 = Saturday
CONFIG_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)
WEEKDAY_LABELS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
ORDINAL_LABELS = ("1st", "2nd", "3rd", "4th", "5th")

FREQUENCIES = {
    RecurrenceType.DAILY: DAILY,
    RecurrenceType.WEEKLY: WEEKLY,
    RecurrenceType.MONTHLY: MONTHLY,
}


class RecurrenceConfigError(ValueError):
    """A recurring milestone whose pattern cannot be expanded."""

    def __init__(self, milestone_id: Optional[str], errors: List[str]):
        self.milestone_id = milestone_id
        self.errors = errors
        super().__init__(f"Invalid recurrence for milestone {milestone_id}: {'; '.join(errors)}")


@dataclass(frozen=True)
class MilestoneOccurrence:
    """A concrete milestone instance, plain or generated from a template."""

    milestone_id: str
    due_date: date
    time_allocation_hours: float
    occurrence_number: Optional[int] = None  # None for non-recurring milestones

    @property
    def is_recurring(self) -> bool:
        return self.occurrence_number is not None


def recurring_config_errors(config: Optional[RecurringConfig]) -> List[str]:
    """Pattern problems that make a config impossible to expand."""
    if config is None:
        return ["Recurring milestone must have recurrence configuration"]

    errors: List[str] = []

    if config.type == RecurrenceType.WEEKLY and config.weekly_day_of_week is None:
        errors.append("Weekly recurrence must specify day of week (0-6)")

    if config.type == RecurrenceType.MONTHLY:
        if config.monthly_pattern is None:
            errors.append("Monthly recurrence must specify pattern (date or dayOfWeek)")
        elif config.monthly_pattern == MonthlyPattern.DATE:
            if config.monthly_date is None:
                errors.append("Monthly date pattern must specify date (1-31)")
            elif not 1 <= config.monthly_date <= 31:
                errors.append("Monthly date must be between 1 and 31")
        elif config.monthly_pattern == MonthlyPattern.DAY_OF_WEEK:
            if config.monthly_week_of_month is None or config.monthly_day_of_week is None:
                errors.append("Monthly dayOfWeek pattern must specify week of month and day of week")
            elif not 1 <= config.monthly_week_of_month <= 4:
                errors.append("Monthly week of month must be between 1 and 4")

    return errors


class RecurrenceExpander:
    """
    Generates occurrence dates for recurring milestone templates.

    Limits default to the application settings and can be overridden per
    instance.
    """

    def __init__(
        self,
        horizon_days: Optional[int] = None,
        max_occurrences: Optional[int] = None,
        safety_limit: Optional[int] = None,
    ):
        self.horizon_days = horizon_days if horizon_days is not None else app_settings.RECURRENCE_HORIZON_DAYS
        self.max_occurrences = (
            max_occurrences if max_occurrences is not None else app_settings.RECURRENCE_MAX_OCCURRENCES
        )
        self.safety_limit = safety_limit if safety_limit is not None else app_settings.RECURRENCE_SAFETY_LIMIT

    def horizon_end(self, project: Project) -> date:
        """Last date the engine plans for: end date, or the horizon for continuous projects."""
        if project.continuous or project.end_date is None:
            return project.start_date + timedelta(days=self.horizon_days)
        return project.end_date

    def occurrence_limit(self, project: Project) -> int:
        return self.max_occurrences if project.continuous else self.safety_limit

    def build_rule(self, config: RecurringConfig, search_start: date, until: date) -> rrule:
        """Translate a config into an rrule. Raises RecurrenceConfigError."""
        errors = recurring_config_errors(config)
        if errors:
            raise RecurrenceConfigError(None, errors)

        options = {
            "freq": FREQUENCIES[config.type],
            "interval": config.interval,
            "dtstart": datetime.combine(search_start, time.min),
            "until": datetime.combine(until, time.min),
        }

        if config.type == RecurrenceType.WEEKLY:
            options["byweekday"] = CONFIG_WEEKDAYS[config.weekly_day_of_week]
        elif config.type == RecurrenceType.MONTHLY:
            if config.monthly_pattern == MonthlyPattern.DATE and config.monthly_date > 28:
                # Short months fall back to their last day (the 31st becomes Feb 28)
                options["bymonthday"] = list(range(28, config.monthly_date + 1))
                options["bysetpos"] = -1
            elif config.monthly_pattern == MonthlyPattern.DATE:
                options["bymonthday"] = config.monthly_date
            else:
                weekday = CONFIG_WEEKDAYS[config.monthly_day_of_week]
                options["byweekday"] = weekday(config.monthly_week_of_month)

        return rrule(**options)

    def iter_occurrences(self, milestone: Milestone, project: Project) -> Iterator[date]:
        """
        Lazily yield occurrence dates for a recurring template.

        The rule is built eagerly so a malformed config raises here rather
        than on first iteration. Each call returns a fresh iterator.
        """
        search_start = project.start_date
        if milestone.start_date is not None and milestone.start_date > search_start:
            search_start = milestone.start_date

        try:
            rule = self.build_rule(milestone.recurring_config, search_start, self.horizon_end(project))
        except RecurrenceConfigError as e:
            raise RecurrenceConfigError(milestone.id, e.errors) from None

        return (occurrence.date() for occurrence in islice(rule, self.occurrence_limit(project)))

    def expand(self, milestone: Milestone, project: Project) -> List[MilestoneOccurrence]:
        """Concrete instances for a milestone; plain milestones yield themselves."""
        if not milestone.is_recurring:
            return [
                MilestoneOccurrence(
                    milestone_id=milestone.id,
                    due_date=milestone.due_date,
                    time_allocation_hours=milestone.time_allocation_hours,
                )
            ]

        return [
            MilestoneOccurrence(
                milestone_id=milestone.id,
                due_date=due_date,
                time_allocation_hours=milestone.time_allocation_hours,
                occurrence_number=number,
            )
            for number, due_date in enumerate(self.iter_occurrences(milestone, project), start=1)
        ]

    @staticmethod
    def describe(config: RecurringConfig) -> str:
        """Human-readable pattern, e.g. "Every 2 weeks on Monday"."""
        interval = config.interval
        count = "" if interval == 1 else f"{interval} "
        plural = "s" if interval > 1 else ""

        if config.type == RecurrenceType.DAILY:
            return f"Every {count}day{plural}"

        if config.type == RecurrenceType.WEEKLY:
            day = (
                WEEKDAY_LABELS[config.weekly_day_of_week]
                if config.weekly_day_of_week is not None
                else "week"
            )
            return f"Every {count}week{plural} on {day}"

        if config.monthly_pattern == MonthlyPattern.DATE and config.monthly_date:
            return f"Every {count}month{plural} on the {config.monthly_date}{_ordinal_suffix(config.monthly_date)}"
        if (
            config.monthly_pattern == MonthlyPattern.DAY_OF_WEEK
            and config.monthly_week_of_month is not None
            and config.monthly_day_of_week is not None
            and 1 <= config.monthly_week_of_month <= len(ORDINAL_LABELS)
        ):
            week = ORDINAL_LABELS[config.monthly_week_of_month - 1]
            return f"Every {count}month{plural} on the {week} {WEEKDAY_LABELS[config.monthly_day_of_week]}"
        return f"Every {count}month{plural}"


def _ordinal_suffix(number: int) -> str:
    if number % 10 == 1 and number % 100 != 11:
        return "st"
    if number % 10 == 2 and number % 100 != 12:
        return "nd"
    if number % 10 == 3 and number % 100 != 13:
        return "rd"
    return "th"
