"""
Category Breakdown Aggregator

Summarizes how much each cashflow category contributes over the whole
forecast horizon.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ..models import CashflowDirection, CategoryBreakdownItem, LiquidityWeek
from ..patterns.account_categorizer import AccountCategorizer


class CategoryBreakdownAggregator:
    """
    Aggregates weekly category contributions.

    Percentages are computed per direction: inflow categories against
    total inflow, outflow categories against total outflow.
    """

    def __init__(self, categorizer: Optional[AccountCategorizer] = None):
        self.categorizer = categorizer or AccountCategorizer()

    def aggregate(self, weeks: Sequence[LiquidityWeek]) -> List[CategoryBreakdownItem]:
        # A category with both inflows and outflows yields one item per direction
        totals: Dict[Tuple[str, CashflowDirection], float] = {}

        for week in weeks:
            for category in week.categories:
                key = (category.name, category.direction)
                totals[key] = totals.get(key, 0.0) + category.amount

        direction_totals = {direction: 0.0 for direction in CashflowDirection}
        for (_, direction), total in totals.items():
            direction_totals[direction] += total

        breakdown = []
        for (name, direction), total in totals.items():
            group_total = direction_totals[direction]
            percentage = total / group_total * 100 if group_total > 0 else 0.0
            weekly_avg = total / len(weeks) if weeks else 0.0

            breakdown.append(CategoryBreakdownItem(
                name=name,
                total_amount=round(total, 2),
                direction=direction,
                weekly_avg=round(weekly_avg, 2),
                color=self.categorizer.color_for(name),
                percentage=round(percentage, 2)
            ))

        breakdown.sort(key=lambda item: item.total_amount, reverse=True)
        return breakdown
