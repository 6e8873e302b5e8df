"""
Account Categorizer - Liquidity Planner

Maps ledger account numbers to cashflow categories using a table of
account ranges. This is the only place that decides whether an account
is revenue or expense; every other component asks the categorizer.

Use cases:
- Direction of historical bookings (inflow vs outflow)
- Category attribution of recurring patterns
- Chart colors for the category breakdown
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import logging

from ..config import (
    CategoryRule,
    DEFAULT_CATEGORY_RULES,
    EXPENSE_ACCOUNT_BOUNDARY,
    FALLBACK_EXPENSE_RULE,
    FALLBACK_REVENUE_RULE,
)
from ..models import CashflowDirection

logger = logging.getLogger(__name__)

NEUTRAL_COLOR = "#9ca3af"

# Keyword fallbacks for category names not present in the table
KEYWORD_COLORS: Tuple[Tuple[str, str], ...] = (
    ("erlös", "#10b981"),
    ("personal", "#ef4444"),
    ("material", "#f59e0b"),
    ("raum", "#8b5cf6"),
    ("energie", "#06b6d4"),
    ("versicherung", "#ec4899"),
)


@dataclass(frozen=True)
class AccountCategory:
    """Result of categorizing a single account."""
    name: str
    direction: CashflowDirection
    color: str


class AccountCategorizer:
    """
    Categorizes account numbers via an ordered range table.

    The first rule whose range contains the account wins. Accounts outside
    every range fall back to a boundary rule: below `expense_boundary` they
    count as generic revenue, at or above it as generic expense.

    Example:
    ```python
    categorizer = AccountCategorizer()

    category = categorizer.categorize(5100)
    print(category.name)       # "Personalkosten"
    print(category.direction)  # CashflowDirection.OUTFLOW
    ```
    """

    def __init__(
        self,
        rules: Optional[Iterable[CategoryRule]] = None,
        expense_boundary: int = EXPENSE_ACCOUNT_BOUNDARY
    ):
        self.rules = tuple(rules) if rules is not None else DEFAULT_CATEGORY_RULES
        self.expense_boundary = expense_boundary
        self._fallback_revenue = _category_from_rule(FALLBACK_REVENUE_RULE)
        self._fallback_expense = _category_from_rule(FALLBACK_EXPENSE_RULE)
        self._colors = {}
        for rule in self.rules:
            self._colors.setdefault(rule.name, rule.color)

        self._validate_rules()

    def _validate_rules(self) -> None:
        """Reject empty ranges and log overlapping ones."""
        for i, rule in enumerate(self.rules):
            if rule.min_account > rule.max_account:
                raise ValueError(f"Empty account range for category '{rule.name}'")
            for earlier in self.rules[:i]:
                if rule.min_account <= earlier.max_account and earlier.min_account <= rule.max_account:
                    logger.debug(
                        f"Account range of '{rule.name}' overlaps '{earlier.name}'; "
                        f"'{earlier.name}' takes precedence"
                    )

    def categorize(self, account: int) -> AccountCategory:
        """Map an account number to its category."""
        for rule in self.rules:
            if rule.matches(account):
                return _category_from_rule(rule)

        if account < self.expense_boundary:
            return self._fallback_revenue
        return self._fallback_expense

    def classify_flow(self, account: int, amount: float) -> Tuple[CashflowDirection, float]:
        """
        Turn a signed booking amount into a direction and a positive amount.

        Positive amounts follow the account's direction; negative amounts
        (refunds, reversals) flow the other way.
        """
        direction = self.categorize(account).direction
        if amount < 0:
            direction = (
                CashflowDirection.INFLOW
                if direction == CashflowDirection.OUTFLOW
                else CashflowDirection.OUTFLOW
            )
        return direction, abs(amount)

    def color_for(self, category_name: str) -> str:
        """Display color of a category name."""
        if category_name in self._colors:
            return self._colors[category_name]
        if category_name == self._fallback_revenue.name:
            return self._fallback_revenue.color

        lowered = category_name.lower()
        for keyword, color in KEYWORD_COLORS:
            if keyword in lowered:
                return color

        return NEUTRAL_COLOR


def account_range_of(account: int) -> Tuple[int, int]:
    """The hundred-block an account belongs to, e.g. 5120 -> (5100, 5199)."""
    base = (account // 100) * 100
    return base, base + 99


def _category_from_rule(rule: CategoryRule) -> AccountCategory:
    return AccountCategory(rule.name, CashflowDirection(rule.direction), rule.color)
