"""
Boundary validation for milestone data.

The engine itself never rejects data; these helpers let the collaborator
that creates and edits milestones report problems before they are saved.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .recurrence import recurring_config_errors
from .schemas import RecurringConfig


class AllocationUnit(str, Enum):
    """Unit a milestone allocation was entered in."""

    HOURS = "hours"
    PERCENT = "percent"


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def validate_recurring_config(
    is_recurring: bool,
    config: Optional[RecurringConfig],
    time_allocation_hours: float,
) -> ValidationResult:
    """
    Validate a recurring milestone template.

    Non-recurring milestones are always valid here. Recurring ones need a
    complete pattern and a positive allocation per occurrence.
    """
    if not is_recurring:
        return ValidationResult(is_valid=True)

    errors = recurring_config_errors(config)
    if time_allocation_hours <= 0:
        errors.append("Recurring milestone must have positive time allocation per occurrence")

    return ValidationResult(is_valid=not errors, errors=errors)


def normalize_allocation(value: float, unit: AllocationUnit, project_budget: float) -> float:
    """
    Convert an allocation to absolute hours.

    Raises:
        ValueError: negative values, or percentages above 100
    """
    unit = AllocationUnit(unit)
    if value < 0:
        raise ValueError(f"Allocation must not be negative: {value}")

    if unit == AllocationUnit.HOURS:
        return float(value)

    if value > 100:
        raise ValueError(f"Percentage allocation must be between 0 and 100: {value}")
    return project_budget * value / 100.0
