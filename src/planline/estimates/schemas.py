"""
Data contracts for the day-estimate engine.

Every record the engine consumes is an immutable snapshot handed over by a
collaborator (persistence, sync, UI). Field names are snake_case in Python
and accept the camelCase keys used on the wire.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class EngineModel(BaseModel):
    """Base for all engine records: frozen, camelCase-aware."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# Enums
# =============================================================================

class EstimateSource(str, Enum):
    """Why a day carries the hours it does."""

    PLANNED_EVENT = "planned-event"
    MILESTONE_ALLOCATION = "milestone-allocation"
    AUTO_ESTIMATE = "auto-estimate"
    NONE = "none"


class RecurrenceType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class MonthlyPattern(str, Enum):
    DATE = "date"
    DAY_OF_WEEK = "dayOfWeek"


# =============================================================================
# Calendar configuration
# =============================================================================

class WorkSlot(EngineModel):
    """A single block of working time inside a weekday."""

    start_time: str = Field(..., description="HH:MM")
    end_time: str = Field(..., description="HH:MM")
    duration: float = Field(0.0, ge=0, description="Duration in hours")


class WeeklyWorkHours(EngineModel):
    """Ordered work slots for each day of the week."""

    monday: List[WorkSlot] = Field(default_factory=list)
    tuesday: List[WorkSlot] = Field(default_factory=list)
    wednesday: List[WorkSlot] = Field(default_factory=list)
    thursday: List[WorkSlot] = Field(default_factory=list)
    friday: List[WorkSlot] = Field(default_factory=list)
    saturday: List[WorkSlot] = Field(default_factory=list)
    sunday: List[WorkSlot] = Field(default_factory=list)

    def slots_for(self, day: date) -> List[WorkSlot]:
        return getattr(self, WEEKDAY_NAMES[day.weekday()])


class WorkHourSettings(EngineModel):
    """User working-calendar configuration."""

    weekly_work_hours: WeeklyWorkHours = Field(default_factory=WeeklyWorkHours)


class Holiday(EngineModel):
    """An inclusive range of non-working dates."""

    id: Optional[str] = None
    title: Optional[str] = None
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class WeekdayMask(EngineModel):
    """Weekdays that take part in estimate distribution."""

    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = True
    sunday: bool = True

    def allows(self, day: date) -> bool:
        return getattr(self, WEEKDAY_NAMES[day.weekday()])


# =============================================================================
# Projects and milestones
# =============================================================================

class Project(EngineModel):
    """A project as seen by the engine. Read-only."""

    id: str
    name: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    continuous: bool = False
    estimated_hours: float = Field(0.0, ge=0)
    auto_estimate_weekday_mask: WeekdayMask = Field(default_factory=WeekdayMask)

    @model_validator(mode="after")
    def _require_end_date(self) -> "Project":
        if not self.continuous and self.end_date is None:
            raise ValueError("end_date is required unless the project is continuous")
        return self


class RecurringConfig(EngineModel):
    """
    Repeat pattern for a recurring milestone template.

    Weekdays are numbered 0 (Sunday) through 6 (Saturday).
    """

    type: RecurrenceType
    interval: int = Field(1, ge=1)
    weekly_day_of_week: Optional[int] = Field(None, ge=0, le=6)
    monthly_pattern: Optional[MonthlyPattern] = None
    monthly_date: Optional[int] = None
    monthly_week_of_month: Optional[int] = None
    monthly_day_of_week: Optional[int] = Field(None, ge=0, le=6)


class Milestone(EngineModel):
    """
    A milestone row. A recurring milestone is a single template row whose
    occurrences are generated at query time.
    """

    id: str
    project_id: str
    due_date: date
    start_date: Optional[date] = None
    name: Optional[str] = None
    time_allocation_hours: float = Field(0.0, ge=0)
    is_recurring: bool = False
    recurring_config: Optional[RecurringConfig] = None


class CalendarEvent(EngineModel):
    """A materialized calendar event. May cross midnight."""

    id: Optional[str] = None
    project_id: Optional[str] = None
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def _require_consistent_timezones(self) -> "CalendarEvent":
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("start_time and end_time must both be timezone-aware or both naive")
        return self


# =============================================================================
# Ranges and output
# =============================================================================

class DateRange(EngineModel):
    """Inclusive date range. Empty when end precedes start."""

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def __len__(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def clip(self, start: date, end: date) -> Optional["DateRange"]:
        """Intersect with [start, end]; None when nothing remains."""
        clipped = DateRange(start=max(self.start, start), end=min(self.end, end))
        if clipped.is_empty:
            return None
        return clipped


class DayEstimate(EngineModel):
    """The single authoritative hour value for a project on a date."""

    date: date
    project_id: str
    hours: float
    source: EstimateSource
    milestone_id: Optional[str] = None
    is_working_day: bool
