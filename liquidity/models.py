"""
Liquidity Forecast Data Model

Bookings supplied by the caller and the result structures produced by the
weekly liquidity forecast.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Any, Optional, Tuple


class InvalidBookingError(ValueError):
    """Raised when a booking record cannot be parsed."""


class CashflowDirection(Enum):
    """Direction of a cash movement"""
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class Frequency(Enum):
    """Cadence of a recurring payment"""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class AlertSeverity(Enum):
    """Alert severities with associated display properties."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def priority(self) -> int:
        """Numeric priority (lower = more urgent)."""
        return {
            AlertSeverity.CRITICAL: 1,
            AlertSeverity.WARNING: 2,
            AlertSeverity.INFO: 3
        }[self]

    @property
    def icon(self) -> str:
        """Unicode icon for display."""
        return {
            AlertSeverity.CRITICAL: "🚨",
            AlertSeverity.WARNING: "⚠️",
            AlertSeverity.INFO: "📊"
        }[self]


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise InvalidBookingError(f"Invalid posting_date: {value!r}")


@dataclass(frozen=True)
class Booking:
    """A single dated ledger transaction"""
    posting_date: date
    amount: float
    account: int
    text: str = ""
    vendor: Optional[str] = None
    account_name: str = ""
    document_no: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Booking":
        """Build a booking from a JSON-style record."""
        if not isinstance(data, dict):
            raise InvalidBookingError("Booking must be an object")

        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
            raise InvalidBookingError(f"Invalid amount: {amount!r}")

        account = data.get("account")
        if isinstance(account, bool) or (isinstance(account, float) and not account.is_integer()):
            raise InvalidBookingError(f"Invalid account: {account!r}")
        try:
            account = int(account)
        except (TypeError, ValueError, OverflowError):
            raise InvalidBookingError(f"Invalid account: {account!r}")

        return cls(
            posting_date=_parse_date(data.get("posting_date")),
            amount=float(amount),
            account=account,
            text=str(data.get("text") or ""),
            vendor=str(data["vendor"]) if data.get("vendor") else None,
            account_name=data.get("account_name") or "",
            document_no=data.get("document_no") or ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "posting_date": self.posting_date.isoformat(),
            "amount": self.amount,
            "account": self.account,
            "text": self.text,
            "vendor": self.vendor,
            "account_name": self.account_name,
            "document_no": self.document_no
        }


@dataclass
class CashflowCategory:
    """One category's contribution within a single week"""
    name: str
    amount: float
    direction: CashflowDirection
    is_recurring: bool = False
    confidence: float = 0.0
    account_range: Optional[Tuple[int, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "direction": self.direction.value,
            "is_recurring": self.is_recurring,
            "confidence": self.confidence,
            "account_range": list(self.account_range) if self.account_range else None
        }


@dataclass
class RecurringPattern:
    """A cluster of similar bookings inferred to repeat on a cadence"""
    description: str
    vendor: Optional[str]
    avg_amount: float
    frequency: Frequency
    typical_day_of_month: int
    confidence: float
    occurrences: int
    direction: CashflowDirection
    category: str
    account_range: Tuple[int, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "vendor": self.vendor,
            "avg_amount": self.avg_amount,
            "frequency": self.frequency.value,
            "typical_day_of_month": self.typical_day_of_month,
            "confidence": self.confidence,
            "occurrences": self.occurrences,
            "direction": self.direction.value,
            "category": self.category,
            "account_range": list(self.account_range)
        }


@dataclass
class LiquidityWeek:
    """One projected week"""
    week_number: int
    calendar_week: int
    start_date: date
    end_date: date
    opening_balance: float
    inflows: float
    outflows: float
    net_cashflow: float
    closing_balance: float
    confidence: float
    lower_bound: float
    upper_bound: float
    categories: List[CashflowCategory] = field(default_factory=list)
    is_actual: bool = False

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week_number": self.week_number,
            "calendar_week": self.calendar_week,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "opening_balance": self.opening_balance,
            "inflows": self.inflows,
            "outflows": self.outflows,
            "net_cashflow": self.net_cashflow,
            "closing_balance": self.closing_balance,
            "is_actual": self.is_actual,
            "confidence": self.confidence,
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "categories": [c.to_dict() for c in self.categories]
        }


@dataclass
class LiquidityAlert:
    """Threshold alert raised for a projected week"""
    week: int
    severity: AlertSeverity
    message: str
    projected_balance: float

    @property
    def icon(self) -> str:
        return self.severity.icon

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "severity": self.severity.value,
            "message": self.message,
            "projected_balance": self.projected_balance,
            "icon": self.icon
        }


@dataclass
class CategoryBreakdownItem:
    """A category's contribution across the whole horizon"""
    name: str
    total_amount: float
    direction: CashflowDirection
    weekly_avg: float
    color: str
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "total_amount": self.total_amount,
            "direction": self.direction.value,
            "weekly_avg": self.weekly_avg,
            "color": self.color,
            "percentage": self.percentage
        }


@dataclass
class LiquidityKPIs:
    """Headline figures of a forecast"""
    current_balance: float
    min_balance: float
    min_balance_week: Optional[int]
    burn_rate: float
    runway: float  # weeks; math.inf when no depletion is projected
    avg_weekly_inflow: float
    avg_weekly_outflow: float
    total_projected_inflow: float
    total_projected_outflow: float

    @property
    def has_finite_runway(self) -> bool:
        return math.isfinite(self.runway)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_balance": self.current_balance,
            "min_balance": self.min_balance,
            "min_balance_week": self.min_balance_week,
            "burn_rate": self.burn_rate,
            "runway": self.runway if self.has_finite_runway else None,
            "avg_weekly_inflow": self.avg_weekly_inflow,
            "avg_weekly_outflow": self.avg_weekly_outflow,
            "total_projected_inflow": self.total_projected_inflow,
            "total_projected_outflow": self.total_projected_outflow
        }


@dataclass
class LiquidityForecastResult:
    """Result of a weekly liquidity forecast"""
    generated_at: date
    start_balance: float
    threshold: float
    weeks: List[LiquidityWeek]
    alerts: List[LiquidityAlert]
    kpis: LiquidityKPIs
    insights: List[str]
    recurring_patterns: List[RecurringPattern]
    category_breakdown: List[CategoryBreakdownItem]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generated_at": self.generated_at.isoformat(),
            "start_balance": self.start_balance,
            "threshold": self.threshold,
            "weeks": [w.to_dict() for w in self.weeks],
            "alerts": [a.to_dict() for a in self.alerts],
            "kpis": self.kpis.to_dict(),
            "insights": self.insights,
            "recurring_patterns": [p.to_dict() for p in self.recurring_patterns],
            "category_breakdown": [c.to_dict() for c in self.category_breakdown]
        }
