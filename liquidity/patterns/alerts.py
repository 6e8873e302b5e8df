"""
Liquidity Alerts - Liquidity Planner

Threshold rules applied to projected weeks. Each week is evaluated on its
own and may raise several alerts; alerts are never merged across weeks.

Rules:
- Closing balance above zero but below the threshold: warning
- Closing balance at or below zero: critical
- Net cashflow below the large-drop limit (after the first week): info
"""

from typing import Iterable, List
import logging

from ..config import DEFAULT_THRESHOLD, LARGE_DROP_LIMIT
from ..models import AlertSeverity, LiquidityAlert, LiquidityWeek

logger = logging.getLogger(__name__)


def format_eur(amount: float) -> str:
    """Format an amount as 'EUR 12,345.67'."""
    return f"EUR {amount:,.2f}"


class AlertGenerator:
    """
    Generates liquidity alerts from projected weeks.

    Example:
    ```python
    generator = AlertGenerator(threshold=50000)

    for alert in generator.generate(result.weeks):
        print(f"{alert.icon} {alert.message}")
    ```
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        large_drop_limit: float = LARGE_DROP_LIMIT
    ):
        self.threshold = threshold
        self.large_drop_limit = large_drop_limit

    def generate(self, weeks: Iterable[LiquidityWeek]) -> List[LiquidityAlert]:
        """Evaluate every week against the alert rules."""
        alerts = []

        for week in weeks:
            alerts.extend(self.evaluate_week(week))

        if alerts:
            logger.info(
                f"Raised {len(alerts)} liquidity alert(s), most severe: "
                f"{min(alerts, key=lambda a: a.severity.priority).severity.value}"
            )

        return alerts

    def evaluate_week(self, week: LiquidityWeek) -> List[LiquidityAlert]:
        """Alerts for a single week."""
        alerts = []
        balance = week.closing_balance

        if 0 < balance < self.threshold:
            alerts.append(LiquidityAlert(
                week=week.calendar_week,
                severity=AlertSeverity.WARNING,
                message=f"CW {week.calendar_week}: balance below threshold - {format_eur(balance)} expected",
                projected_balance=balance
            ))
        elif balance <= 0:
            alerts.append(LiquidityAlert(
                week=week.calendar_week,
                severity=AlertSeverity.CRITICAL,
                message=f"CW {week.calendar_week}: critical shortfall - {format_eur(balance)} expected",
                projected_balance=balance
            ))

        if week.week_number > 1 and week.net_cashflow < self.large_drop_limit:
            alerts.append(LiquidityAlert(
                week=week.calendar_week,
                severity=AlertSeverity.INFO,
                message=f"CW {week.calendar_week}: large cashflow drop - {format_eur(abs(week.net_cashflow))} expected",
                projected_balance=balance
            ))

        return alerts
