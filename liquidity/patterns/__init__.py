"""
Patterns Module for the Liquidity Planner

Rule-based building blocks: account categorization, recurring payment
detection and threshold alerts.
"""

from .account_categorizer import (
    AccountCategorizer,
    AccountCategory,
    account_range_of
)

from .recurring_detector import (
    RecurringPatternDetector,
    normalize_description
)

from .alerts import (
    AlertGenerator,
    format_eur
)

__all__ = [
    # Account Categorization
    'AccountCategorizer',
    'AccountCategory',
    'account_range_of',
    # Recurring Patterns
    'RecurringPatternDetector',
    'normalize_description',
    # Alerts
    'AlertGenerator',
    'format_eur',
]
