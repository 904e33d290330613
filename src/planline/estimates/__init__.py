"""Planline day estimates - per-day hour allocation for project timelines."""

from .aggregation import (
    BudgetSummary,
    WeekSummary,
    aggregate_by_date,
    rollup_weeks,
    summarize_budget,
    total_hours,
)
from .allocator import SegmentAllocator
from .cache import EstimateCache, estimate_cache_key
from .calendar import WorkingCalendar, enumerate_working_days, is_working_day
from .orchestrator import DayEstimateOrchestrator, compute_project_day_estimates
from .planned_time import PlannedTimeResolver, event_overlap_hours
from .recurrence import MilestoneOccurrence, RecurrenceConfigError, RecurrenceExpander
from .schemas import (
    CalendarEvent,
    DateRange,
    DayEstimate,
    EstimateSource,
    Holiday,
    Milestone,
    MonthlyPattern,
    Project,
    RecurrenceType,
    RecurringConfig,
    WeekdayMask,
    WeeklyWorkHours,
    WorkHourSettings,
    WorkSlot,
)
from .segmenter import MilestoneSegmenter, Segment, SegmentationResult
from .validation import AllocationUnit, ValidationResult, normalize_allocation, validate_recurring_config

__all__ = [
    # Entry points
    "DayEstimateOrchestrator",
    "compute_project_day_estimates",
    # Components
    "WorkingCalendar",
    "PlannedTimeResolver",
    "RecurrenceExpander",
    "MilestoneSegmenter",
    "SegmentAllocator",
    "EstimateCache",
    # Data contracts
    "CalendarEvent",
    "DateRange",
    "DayEstimate",
    "EstimateSource",
    "Holiday",
    "Milestone",
    "MonthlyPattern",
    "Project",
    "RecurrenceType",
    "RecurringConfig",
    "WeekdayMask",
    "WeeklyWorkHours",
    "WorkHourSettings",
    "WorkSlot",
    # Engine results
    "MilestoneOccurrence",
    "Segment",
    "SegmentationResult",
    "WeekSummary",
    "BudgetSummary",
    # Helpers
    "aggregate_by_date",
    "enumerate_working_days",
    "estimate_cache_key",
    "event_overlap_hours",
    "is_working_day",
    "rollup_weeks",
    "summarize_budget",
    "total_hours",
    # Validation
    "AllocationUnit",
    "RecurrenceConfigError",
    "ValidationResult",
    "normalize_allocation",
    "validate_recurring_config",
]
