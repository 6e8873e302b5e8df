"""
Insight Narrator

Derives a short, fixed list of qualitative observations from a forecast.
The pipeline is deterministic: the same forecast always yields the same
insights in the same order.
"""

import calendar
import logging
import math
from datetime import date
from typing import List, Optional, Sequence

import numpy as np

from ..config import MAX_INSIGHTS, PAYROLL_CATEGORY
from ..models import (
    CashflowDirection,
    CategoryBreakdownItem,
    Frequency,
    LiquidityKPIs,
    LiquidityWeek,
    RecurringPattern,
)
from ..patterns.alerts import format_eur

logger = logging.getLogger(__name__)


def next_day_of_month(day: int, after: date) -> date:
    """First date on or after `after` falling on `day` (clamped to month length)."""
    candidate = _clamped_date(after.year, after.month, day)
    if candidate >= after:
        return candidate
    if after.month == 12:
        return _clamped_date(after.year + 1, 1, day)
    return _clamped_date(after.year, after.month + 1, day)


def _clamped_date(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up, e.g. 12.5 -> 13."""
    return int(math.floor(value + 0.5))


class InsightNarrator:
    """
    Produces up to `max_insights` observations:

    1. Balance in the week of the next payroll payment
    2. Runway shortage or stability statement
    3. Primary cost driver
    4. Balance trend, first half vs second half of the horizon
    5. Outflow to inflow ratio
    """

    def __init__(
        self,
        payroll_category: str = PAYROLL_CATEGORY,
        max_insights: int = MAX_INSIGHTS
    ):
        self.payroll_category = payroll_category
        self.max_insights = max_insights

    def narrate(
        self,
        weeks: Sequence[LiquidityWeek],
        patterns: Sequence[RecurringPattern],
        kpis: LiquidityKPIs,
        category_breakdown: Sequence[CategoryBreakdownItem],
        now: date
    ) -> List[str]:
        """Generate human-readable insights"""
        candidates = [
            self._payroll_insight(weeks, patterns, now),
            self._runway_insight(kpis, len(weeks)),
            self._cost_driver_insight(category_breakdown),
            self._trend_insight(weeks),
            self._ratio_insight(kpis),
        ]

        insights = [text for text in candidates if text]
        return insights[:self.max_insights]

    def _payroll_insight(
        self,
        weeks: Sequence[LiquidityWeek],
        patterns: Sequence[RecurringPattern],
        now: date
    ) -> Optional[str]:
        payroll = [
            p for p in patterns
            if p.direction == CashflowDirection.OUTFLOW
            and p.category == self.payroll_category
            and p.frequency == Frequency.MONTHLY
        ]
        if not payroll:
            return None

        pay_date = next_day_of_month(payroll[0].typical_day_of_month, now)
        week = next((w for w in weeks if w.contains(pay_date)), None)
        if week is None:
            logger.debug(f"Next payroll date {pay_date} lies outside the forecast horizon")
            return None

        return (
            f"Payroll payment in CW {week.calendar_week} is expected to leave a balance of "
            f"{format_eur(week.closing_balance)}"
        )

    def _runway_insight(self, kpis: LiquidityKPIs, horizon: int) -> str:
        if kpis.has_finite_runway and kpis.runway < horizon:
            return (
                f"Your liquidity buffer lasts {round(kpis.runway, 1)} weeks "
                f"at the current burn rate"
            )
        return f"Your liquidity position is stable over the {horizon}-week horizon"

    def _cost_driver_insight(self, category_breakdown: Sequence[CategoryBreakdownItem]) -> Optional[str]:
        outflows = [c for c in category_breakdown if c.direction == CashflowDirection.OUTFLOW]
        if not outflows:
            return None

        top = max(outflows, key=lambda c: c.total_amount)
        return f"Primary cost driver: {top.name} ({round_half_up(top.percentage)}% of outflows)"

    def _trend_insight(self, weeks: Sequence[LiquidityWeek]) -> Optional[str]:
        split = (len(weeks) + 1) // 2
        first_half = [w.closing_balance for w in weeks[:split]]
        second_half = [w.closing_balance for w in weeks[split:]]
        if not first_half or not second_half:
            return None

        first_avg = float(np.mean(first_half))
        second_avg = float(np.mean(second_half))
        change = round(abs(second_avg - first_avg), 2)

        if first_avg > second_avg:
            return (
                f"Trend: the balance declines in the second half of the horizon - "
                f"average decrease {format_eur(change)}"
            )
        if second_avg > first_avg:
            return (
                f"Trend: the balance improves in the second half of the horizon - "
                f"average increase {format_eur(change)}"
            )
        return None

    def _ratio_insight(self, kpis: LiquidityKPIs) -> str:
        total_in = kpis.total_projected_inflow
        total_out = kpis.total_projected_outflow
        ratio = total_out / total_in * 100 if total_in > 0 else 100.0
        return f"Expense ratio: projected outflows amount to {round_half_up(ratio)}% of expected inflows"
