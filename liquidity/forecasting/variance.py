"""
Historical Variance Estimator

Measures how much weekly net cashflow has fluctuated in the past. The
projector uses this spread to size the confidence band around each
projected closing balance.
"""

import logging
import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from ..config import FALLBACK_STD_DEV
from ..models import Booking, CashflowDirection
from ..patterns.account_categorizer import AccountCategorizer

logger = logging.getLogger(__name__)


class HistoricalVarianceEstimator:
    """
    Population standard deviation of historical weekly net cashflow.

    Bookings are bucketed by ISO calendar week (year and week number) and
    netted with the categorizer's direction convention.
    """

    def __init__(
        self,
        categorizer: Optional[AccountCategorizer] = None,
        fallback_std_dev: float = FALLBACK_STD_DEV
    ):
        self.categorizer = categorizer or AccountCategorizer()
        self.fallback_std_dev = fallback_std_dev

    def weekly_net_cashflows(self, bookings: Sequence[Booking]) -> Dict[Tuple[int, int], float]:
        """Net cashflow per (ISO year, ISO week)"""
        weekly: Dict[Tuple[int, int], float] = {}

        for booking in bookings:
            iso_year, iso_week, _ = booking.posting_date.isocalendar()
            direction, amount = self.categorizer.classify_flow(booking.account, booking.amount)
            signed = amount if direction == CashflowDirection.INFLOW else -amount
            weekly[(iso_year, iso_week)] = weekly.get((iso_year, iso_week), 0.0) + signed

        return weekly

    def estimate(self, bookings: Sequence[Booking]) -> float:
        """Standard deviation of weekly net cashflow, or the fallback"""
        weekly = self.weekly_net_cashflows(bookings)
        if not weekly:
            logger.debug(f"No booking history, using fallback std dev {self.fallback_std_dev}")
            return self.fallback_std_dev

        std_dev = float(np.std(list(weekly.values())))
        if not math.isfinite(std_dev):
            logger.warning(f"Non-finite weekly std dev, using fallback {self.fallback_std_dev}")
            return self.fallback_std_dev

        return std_dev
