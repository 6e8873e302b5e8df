"""
Pytest fixtures for liquidity planner tests.
"""

from datetime import date

import pytest

from liquidity.models import Booking


def make_booking(posting_date, amount, account, text="", vendor=None):
    """Build a booking from an ISO date string."""
    return Booking(
        posting_date=date.fromisoformat(posting_date),
        amount=amount,
        account=account,
        text=text,
        vendor=vendor
    )


@pytest.fixture
def now():
    """Reference date of the forecasts (a Sunday; its week starts 2024-11-04)."""
    return date(2024, 11, 10)


@pytest.fixture
def payroll_bookings():
    """
    Two payroll payments of 5000 on the 26th of consecutive months.

    Only the October payment lies inside the trailing 30 days of `now`,
    which annualizes to 12 occurrences: a monthly pattern.
    """
    return [
        make_booking("2024-09-26", 5000.0, 5100, "Gehälter 09/2024", "Lohnbuchhaltung"),
        make_booking("2024-10-26", 5000.0, 5100, "Gehälter 10/2024", "Lohnbuchhaltung"),
    ]


@pytest.fixture
def weekly_supplier_bookings():
    """Four material purchases inside the trailing window: a weekly pattern."""
    return [
        make_booking("2024-10-15", 1200.0, 3400, "Wareneingang LS 1001", "Stahlhandel Nord"),
        make_booking("2024-10-22", 1300.0, 3400, "Wareneingang LS 1002", "Stahlhandel Nord"),
        make_booking("2024-10-29", 1100.0, 3400, "Wareneingang LS 1003", "Stahlhandel Nord"),
        make_booking("2024-11-05", 1400.0, 3400, "Wareneingang LS 1004", "Stahlhandel Nord"),
    ]
