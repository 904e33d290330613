"""
Shared fixtures for day-estimate tests.

The reference week: 2025-01-01 is a Wednesday, working days Mon-Fri at 8h.
"""

from datetime import date

import pytest

from planline.estimates import DateRange, Holiday

from factories import make_project, make_settings


@pytest.fixture
def work_settings():
    """Mon-Fri, 8 hours a day."""
    return make_settings()


@pytest.fixture
def project():
    """40h project, Wed 2025-01-01 to Tue 2025-01-07."""
    return make_project()


@pytest.fixture
def first_week():
    return DateRange(start=date(2025, 1, 1), end=date(2025, 1, 7))


@pytest.fixture
def new_year_holiday():
    return Holiday(id="hol_1", title="New Year", start_date=date(2025, 1, 1), end_date=date(2025, 1, 1))
