"""
Weekly Liquidity Projector

Rolling weekly cash position forecast built from a booking history.
Projects inflows and outflows from recent averages and detected recurring
patterns, sizes uncertainty bands from historical volatility, and derives
KPIs, alerts and insights.

The projection is a deterministic extrapolation rather than a trained model
so that a controller can audit every projected figure.
"""

import logging
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import (
    DEFAULT_THRESHOLD,
    DEFAULT_WEEKS,
    DetectorSettings,
    ForecastRequest,
    ProjectionSettings,
)
from ..models import (
    Booking,
    CashflowCategory,
    CashflowDirection,
    Frequency,
    LiquidityForecastResult,
    LiquidityKPIs,
    LiquidityWeek,
    RecurringPattern,
)
from ..patterns.account_categorizer import AccountCategorizer
from ..patterns.alerts import AlertGenerator
from ..patterns.recurring_detector import RecurringPatternDetector, normalize_description
from .category_breakdown import CategoryBreakdownAggregator
from .insights import InsightNarrator
from .variance import HistoricalVarianceEstimator

logger = logging.getLogger(__name__)

# Inclusion cadence in weeks per frequency class
PATTERN_CADENCE_WEEKS: Dict[Frequency, int] = {
    Frequency.WEEKLY: 1,
    Frequency.BIWEEKLY: 2,
    Frequency.MONTHLY: 4,
    Frequency.QUARTERLY: 13,
}


def monday_of(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def should_include_pattern(pattern: RecurringPattern, week_index: int) -> bool:
    """Whether a recurring pattern pays out in the given forecast week"""
    cadence = PATTERN_CADENCE_WEEKS.get(pattern.frequency)
    if cadence is None:
        return False
    return week_index % cadence == 0


class LiquidityProjector:
    """
    Weekly liquidity forecasting engine.

    Provides:
    - Week-by-week projection of inflows, outflows and balances
    - Confidence decay and widening uncertainty bands
    - Payroll and rent calendar overlays
    - Burn rate and runway KPIs, alerts and insights

    Example:
    ```python
    projector = LiquidityProjector()

    request = ForecastRequest(start_balance=120000, now=date(2024, 11, 10))
    result = projector.project(bookings, request)
    print(f"Minimum balance: {result.kpis.min_balance}")
    ```
    """

    def __init__(
        self,
        categorizer: Optional[AccountCategorizer] = None,
        detector_settings: Optional[DetectorSettings] = None
    ):
        self.categorizer = categorizer or AccountCategorizer()
        self.detector = RecurringPatternDetector(self.categorizer, detector_settings)
        self.aggregator = CategoryBreakdownAggregator(self.categorizer)

    def project(self, bookings: Sequence[Booking], request: ForecastRequest) -> LiquidityForecastResult:
        """
        Generate the weekly liquidity forecast.

        Args:
            bookings: Historical bookings
            request: Start balance, threshold, horizon and reference date

        Returns:
            LiquidityForecastResult with weeks, KPIs, alerts and insights

        Raises:
            InvalidForecastConfig: If the request fails validation
        """
        request.validate()
        settings = request.settings
        now = request.now

        patterns = self.detector.detect(bookings, now)
        avg_weekly_inflow, avg_weekly_outflow = self._weekly_baseline(bookings, now, settings)
        std_dev = HistoricalVarianceEstimator(self.categorizer, settings.fallback_std_dev).estimate(bookings)

        first_monday = monday_of(now)
        weeks: List[LiquidityWeek] = []

        opening_balance = float(request.start_balance)
        min_balance = opening_balance
        min_balance_week: Optional[int] = None
        total_inflow = 0.0
        total_outflow = 0.0

        for week_index in range(request.weeks):
            week_start = first_monday + timedelta(weeks=week_index)
            week_end = week_start + timedelta(days=6)
            calendar_week = week_start.isocalendar()[1]

            confidence = max(settings.confidence_floor, 1 - week_index * settings.confidence_decay)

            week_inflows = avg_weekly_inflow
            week_outflows = avg_weekly_outflow + self._calendar_overlay(week_start, patterns, settings)

            included = [p for p in patterns if should_include_pattern(p, week_index)]
            for pattern in included:
                amount = pattern.avg_amount * pattern.confidence
                if pattern.direction == CashflowDirection.INFLOW:
                    week_inflows += amount
                else:
                    week_outflows += amount

            week_inflows = round(week_inflows, 2)
            week_outflows = round(week_outflows, 2)

            net_cashflow = week_inflows - week_outflows
            closing_balance = opening_balance + net_cashflow

            half_width = std_dev * (1 + week_index * settings.band_widening)

            weeks.append(LiquidityWeek(
                week_number=week_index + 1,
                calendar_week=calendar_week,
                start_date=week_start,
                end_date=week_end,
                opening_balance=round(opening_balance, 2),
                inflows=week_inflows,
                outflows=week_outflows,
                net_cashflow=round(net_cashflow, 2),
                closing_balance=round(closing_balance, 2),
                confidence=round(confidence, 2),
                lower_bound=round(closing_balance - half_width, 2),
                upper_bound=round(closing_balance + half_width, 2),
                categories=self._week_categories(bookings, week_start, week_end, patterns, included)
            ))

            if closing_balance < min_balance:
                min_balance = closing_balance
                min_balance_week = calendar_week

            total_inflow += week_inflows
            total_outflow += week_outflows
            opening_balance = closing_balance

        burn_rate = round((total_outflow - total_inflow) / request.weeks, 2)
        runway = max(0.0, min_balance / burn_rate) if burn_rate > 0 else math.inf

        kpis = LiquidityKPIs(
            current_balance=request.start_balance,
            min_balance=round(min_balance, 2),
            min_balance_week=min_balance_week,
            burn_rate=burn_rate,
            runway=round(runway, 2) if math.isfinite(runway) else runway,
            avg_weekly_inflow=round(avg_weekly_inflow, 2),
            avg_weekly_outflow=round(avg_weekly_outflow, 2),
            total_projected_inflow=round(total_inflow, 2),
            total_projected_outflow=round(total_outflow, 2)
        )

        alerts = AlertGenerator(request.threshold, settings.large_drop_limit).generate(weeks)
        category_breakdown = self.aggregator.aggregate(weeks)
        insights = InsightNarrator(settings.payroll_category, settings.max_insights).narrate(
            weeks, patterns, kpis, category_breakdown, now
        )

        logger.info(
            f"Projected {request.weeks} weeks from {len(bookings)} bookings: "
            f"{len(patterns)} patterns, min balance {kpis.min_balance}, {len(alerts)} alerts"
        )

        return LiquidityForecastResult(
            generated_at=now,
            start_balance=request.start_balance,
            threshold=request.threshold,
            weeks=weeks,
            alerts=alerts,
            kpis=kpis,
            insights=insights,
            recurring_patterns=patterns,
            category_breakdown=category_breakdown
        )

    def _weekly_baseline(
        self,
        bookings: Sequence[Booking],
        now: date,
        settings: ProjectionSettings
    ) -> Tuple[float, float]:
        """Average weekly inflow and outflow over the trailing window"""
        window_start = now - timedelta(days=settings.recent_window_days)
        inflows = 0.0
        outflows = 0.0

        for booking in bookings:
            if booking.posting_date < window_start:
                continue
            direction, amount = self.categorizer.classify_flow(booking.account, booking.amount)
            if direction == CashflowDirection.INFLOW:
                inflows += amount
            else:
                outflows += amount

        return (
            round(inflows / settings.weeks_per_month, 2),
            round(outflows / settings.weeks_per_month, 2)
        )

    def _calendar_overlay(
        self,
        week_start: date,
        patterns: Sequence[RecurringPattern],
        settings: ProjectionSettings
    ) -> float:
        """Extra outflow for payroll at month end and rent at month start"""
        overlay = 0.0
        windows = (
            (settings.payroll_category, settings.payroll_day_window),
            (settings.rent_category, settings.rent_day_window),
        )

        for category, (first_day, last_day) in windows:
            if not first_day <= week_start.day <= last_day:
                continue
            for pattern in patterns:
                if (
                    pattern.direction == CashflowDirection.OUTFLOW
                    and pattern.category == category
                    and pattern.frequency == Frequency.MONTHLY
                ):
                    overlay += pattern.avg_amount * pattern.confidence * settings.overlay_factor

        return overlay

    def _week_categories(
        self,
        bookings: Sequence[Booking],
        week_start: date,
        week_end: date,
        patterns: Sequence[RecurringPattern],
        included: Sequence[RecurringPattern]
    ) -> List[CashflowCategory]:
        """Category contributions of one week: actual bookings plus projected patterns"""
        categories: Dict[Tuple[str, CashflowDirection], CashflowCategory] = {}

        # Refunds and sales in one category are reported as separate entries per direction
        for booking in bookings:
            if not week_start <= booking.posting_date <= week_end:
                continue

            category = self.categorizer.categorize(booking.account)
            direction, amount = self.categorizer.classify_flow(booking.account, booking.amount)

            key = (category.name, direction)
            entry = categories.get(key)
            if entry is None:
                entry = CashflowCategory(
                    name=category.name,
                    amount=0.0,
                    direction=direction,
                    account_range=(booking.account, booking.account)
                )
                categories[key] = entry
            entry.amount += amount

            description = normalize_description(booking.text)
            match = next(
                (p for p in patterns if p.category == category.name and p.description == description),
                None
            )
            if match is not None:
                entry.is_recurring = True
                entry.confidence = max(entry.confidence, match.confidence)

        for pattern in included:
            key = (pattern.category, pattern.direction)
            entry = categories.get(key)
            if entry is None:
                entry = CashflowCategory(
                    name=pattern.category,
                    amount=0.0,
                    direction=pattern.direction,
                    account_range=pattern.account_range
                )
                categories[key] = entry
            entry.amount += pattern.avg_amount * pattern.confidence
            entry.is_recurring = True
            entry.confidence = max(entry.confidence, pattern.confidence)

        for entry in categories.values():
            entry.amount = round(entry.amount, 2)

        return list(categories.values())


def forecast_liquidity(
    bookings: Sequence[Booking],
    start_balance: float,
    now: date,
    threshold: float = DEFAULT_THRESHOLD,
    weeks: int = DEFAULT_WEEKS
) -> LiquidityForecastResult:
    """Run a forecast with the default account table and settings."""
    request = ForecastRequest(
        start_balance=start_balance,
        now=now,
        threshold=threshold,
        weeks=weeks
    )
    return LiquidityProjector().project(bookings, request)
