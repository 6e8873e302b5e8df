"""
Central configuration for the liquidity forecasting engine.

All tunable constants live here. The engine components receive them as
frozen settings objects so that tests and callers can substitute their own
tables without touching the algorithms.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Tuple

# ---------------------------------------------------------------------------
# Forecast request defaults
# ---------------------------------------------------------------------------

DEFAULT_THRESHOLD: float = 50000.0
DEFAULT_WEEKS: int = 13

# ---------------------------------------------------------------------------
# Account chart (SKR-style ranges)
# ---------------------------------------------------------------------------

# Accounts outside every range are revenue below this number, expense at/above
EXPENSE_ACCOUNT_BOUNDARY: int = 5000

PAYROLL_CATEGORY: str = "Personalkosten"
RENT_CATEGORY: str = "Raumkosten"

# ---------------------------------------------------------------------------
# Pattern detection
# ---------------------------------------------------------------------------

RECENT_WINDOW_DAYS: int = 30
PERIODS_PER_YEAR: int = 12  # trailing window is treated as one month
MIN_OCCURRENCES: int = 2

# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

WEEKS_PER_MONTH: float = 4.3
CONFIDENCE_DECAY_PER_WEEK: float = 0.045
CONFIDENCE_FLOOR: float = 0.4
BAND_WIDENING_PER_WEEK: float = 0.1
FALLBACK_STD_DEV: float = 5000.0
OVERLAY_FACTOR: float = 0.5
PAYROLL_DAY_WINDOW: Tuple[int, int] = (25, 28)
RENT_DAY_WINDOW: Tuple[int, int] = (1, 5)
LARGE_DROP_LIMIT: float = -10000.0
MAX_INSIGHTS: int = 5


class InvalidForecastConfig(ValueError):
    """Raised when a forecast request fails boundary validation."""


@dataclass(frozen=True)
class CategoryRule:
    """One entry of the account category table."""
    name: str
    min_account: int
    max_account: int
    direction: str  # "inflow" or "outflow"
    color: str

    def matches(self, account: int) -> bool:
        return self.min_account <= account <= self.max_account


@dataclass(frozen=True)
class FrequencyBand:
    """Annualized-rate band mapped to a frequency class."""
    frequency: str
    min_rate: float
    max_rate: float  # exclusive; math.inf for open-ended bands
    nominal_rate: float

    def contains(self, rate: float) -> bool:
        return self.min_rate <= rate < self.max_rate


DEFAULT_CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule("Erlöse", 8000, 8999, "inflow", "#10b981"),
    CategoryRule("Personalkosten", 5000, 5999, "outflow", "#ef4444"),
    CategoryRule("Materialkosten", 3000, 3999, "outflow", "#f59e0b"),
    CategoryRule("Raumkosten", 4200, 4299, "outflow", "#8b5cf6"),
    # Shadowed by Raumkosten under first-match lookup; kept for color lookup
    CategoryRule("Energie", 4200, 4249, "outflow", "#06b6d4"),
    CategoryRule("Versicherungen", 4300, 4399, "outflow", "#ec4899"),
    CategoryRule("Abschreibungen", 4800, 4899, "outflow", "#6b7280"),
    CategoryRule("Sonstige Aufwendungen", 6000, 6999, "outflow", "#a855f7"),
    CategoryRule("Steuern", 7000, 7999, "outflow", "#dc2626"),
)

FALLBACK_REVENUE_RULE = CategoryRule("Sonstige Erlöse", 0, EXPENSE_ACCOUNT_BOUNDARY - 1, "inflow", "#34d399")
FALLBACK_EXPENSE_RULE = CategoryRule("Sonstige Aufwendungen", EXPENSE_ACCOUNT_BOUNDARY, 10 ** 9, "outflow", "#9ca3af")

DEFAULT_FREQUENCY_BANDS: Tuple[FrequencyBand, ...] = (
    FrequencyBand("weekly", 40, math.inf, 52),
    FrequencyBand("biweekly", 20, 40, 26),
    FrequencyBand("monthly", 10, 14, 12),
    FrequencyBand("quarterly", 3, 5, 4),
)


@dataclass(frozen=True)
class DetectorSettings:
    """Tunables for recurring pattern detection."""
    bands: Tuple[FrequencyBand, ...] = DEFAULT_FREQUENCY_BANDS
    recent_window_days: int = RECENT_WINDOW_DAYS
    periods_per_year: int = PERIODS_PER_YEAR
    min_occurrences: int = MIN_OCCURRENCES


@dataclass(frozen=True)
class ProjectionSettings:
    """Tunables for the weekly projection, alerts and insights."""
    recent_window_days: int = RECENT_WINDOW_DAYS
    weeks_per_month: float = WEEKS_PER_MONTH
    confidence_decay: float = CONFIDENCE_DECAY_PER_WEEK
    confidence_floor: float = CONFIDENCE_FLOOR
    band_widening: float = BAND_WIDENING_PER_WEEK
    fallback_std_dev: float = FALLBACK_STD_DEV
    overlay_factor: float = OVERLAY_FACTOR
    payroll_category: str = PAYROLL_CATEGORY
    payroll_day_window: Tuple[int, int] = PAYROLL_DAY_WINDOW
    rent_category: str = RENT_CATEGORY
    rent_day_window: Tuple[int, int] = RENT_DAY_WINDOW
    large_drop_limit: float = LARGE_DROP_LIMIT
    max_insights: int = MAX_INSIGHTS


@dataclass(frozen=True)
class ForecastRequest:
    """
    Parameters of a single forecast run.

    `now` is the reference date of the forecast. It is always supplied by the
    caller; the engine never reads a clock.
    """
    start_balance: float
    now: date
    threshold: float = DEFAULT_THRESHOLD
    weeks: int = DEFAULT_WEEKS
    settings: ProjectionSettings = field(default_factory=ProjectionSettings)

    def validate(self) -> "ForecastRequest":
        """Reject invalid configuration before the engine runs."""
        if isinstance(self.start_balance, bool) or not isinstance(self.start_balance, (int, float)):
            raise InvalidForecastConfig("start_balance must be a number")
        if not math.isfinite(self.start_balance):
            raise InvalidForecastConfig("start_balance must be finite")

        if isinstance(self.threshold, bool) or not isinstance(self.threshold, (int, float)):
            raise InvalidForecastConfig("threshold must be a number")
        if not math.isfinite(self.threshold) or self.threshold <= 0:
            raise InvalidForecastConfig(f"threshold must be positive, got {self.threshold}")

        if isinstance(self.weeks, bool) or not isinstance(self.weeks, int):
            raise InvalidForecastConfig("weeks must be an integer")
        if self.weeks <= 0:
            raise InvalidForecastConfig(f"weeks must be positive, got {self.weeks}")

        if isinstance(self.now, datetime) or not isinstance(self.now, date):
            raise InvalidForecastConfig("now must be a date")

        return self
