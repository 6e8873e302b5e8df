"""
Recurring Pattern Detector - Liquidity Planner

Clusters historical bookings by their description and vendor and infers
which clusters repeat on a regular cadence (payroll, rent, taxes, ...).
Detection is rule based so that every pattern can be traced back to the
bookings that produced it.
"""

import logging
import math
import re
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DetectorSettings, FrequencyBand
from ..models import Booking, Frequency, RecurringPattern
from .account_categorizer import AccountCategorizer, account_range_of

logger = logging.getLogger(__name__)

UNKNOWN_VENDOR = "unknown"

_DIGITS = re.compile(r"[0-9]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_description(text: Optional[str]) -> str:
    """Lowercase, mask digit runs and collapse whitespace so similar texts group."""
    normalized = _DIGITS.sub("#", (text or "").lower())
    return _WHITESPACE.sub(" ", normalized).strip()


class RecurringPatternDetector:
    """
    Detects recurring payment patterns in a booking history.

    Steps:
    - Group bookings by normalized description and vendor
    - Drop groups seen fewer than `min_occurrences` times
    - Annualize the number of occurrences in the trailing window
    - Map the annualized rate to a frequency band; rates outside every
      band are discarded

    Example:
    ```python
    detector = RecurringPatternDetector()

    patterns = detector.detect(bookings, now=date(2024, 11, 10))
    for p in patterns:
        print(f"{p.description}: {p.frequency.value} ({p.confidence:.0%})")
    ```
    """

    def __init__(
        self,
        categorizer: Optional[AccountCategorizer] = None,
        settings: Optional[DetectorSettings] = None
    ):
        self.categorizer = categorizer or AccountCategorizer()
        self.settings = settings or DetectorSettings()

    def detect(self, bookings: Sequence[Booking], now: date) -> List[RecurringPattern]:
        """
        Detect recurring patterns.

        Args:
            bookings: Full booking history (any span)
            now: Reference date; the trailing window ends here

        Returns:
            Patterns sorted by occurrence count, most frequent first
        """
        if not bookings:
            return []

        window_start = now - timedelta(days=self.settings.recent_window_days)
        patterns = []

        for (description, vendor), entries in self._group(bookings).items():
            if len(entries) < self.settings.min_occurrences:
                continue

            recent = sum(1 for e in entries if e.posting_date >= window_start)
            annual_rate = recent * self.settings.periods_per_year

            band = self._classify_rate(annual_rate)
            if band is None:
                continue

            confidence = min(1.0, annual_rate / band.nominal_rate)
            avg_amount = float(np.mean([abs(e.amount) for e in entries]))

            # Mixed-account clusters are attributed to the first booking's account
            account = entries[0].account
            category = self.categorizer.categorize(account)

            patterns.append(RecurringPattern(
                description=description,
                vendor=None if vendor == UNKNOWN_VENDOR else vendor,
                avg_amount=round(avg_amount, 2),
                frequency=Frequency(band.frequency),
                typical_day_of_month=self._typical_day(entries),
                confidence=round(confidence, 2),
                occurrences=len(entries),
                direction=category.direction,
                category=category.name,
                account_range=account_range_of(account)
            ))

        patterns.sort(key=lambda p: p.occurrences, reverse=True)
        logger.debug(f"Detected {len(patterns)} recurring patterns in {len(bookings)} bookings")

        return patterns

    def _group(self, bookings: Sequence[Booking]) -> Dict[Tuple[str, str], List[Booking]]:
        """Group bookings by (normalized description, vendor)"""
        groups: Dict[Tuple[str, str], List[Booking]] = {}
        for booking in bookings:
            key = (normalize_description(booking.text), booking.vendor or UNKNOWN_VENDOR)
            groups.setdefault(key, []).append(booking)
        return groups

    def _classify_rate(self, annual_rate: float) -> Optional[FrequencyBand]:
        """Find the frequency band containing an annualized rate"""
        for band in self.settings.bands:
            if band.contains(annual_rate):
                return band
        return None

    def _typical_day(self, entries: List[Booking]) -> int:
        """Mean day of month, rounded half up"""
        mean_day = np.mean([e.posting_date.day for e in entries])
        return max(1, int(math.floor(mean_day + 0.5)))
