"""
Unit tests for liquidity.patterns.recurring_detector module.
"""

import pytest

from liquidity.config import DetectorSettings, FrequencyBand
from liquidity.models import CashflowDirection, Frequency
from liquidity.patterns.recurring_detector import RecurringPatternDetector, normalize_description

from tests.conftest import make_booking


@pytest.fixture
def detector():
    return RecurringPatternDetector()


class TestNormalizeDescription:
    """Tests for description normalization."""

    def test_lowercases_and_masks_digits(self):
        assert normalize_description("Miete 01/2024") == "miete #/#"

    def test_collapses_whitespace(self):
        assert normalize_description("  MIETE   02/2024 ") == "miete #/#"

    def test_missing_text(self):
        assert normalize_description(None) == ""


class TestDetect:
    """Tests for recurring pattern detection."""

    def test_empty_input(self, detector, now):
        """No bookings, no patterns."""
        assert detector.detect([], now) == []

    def test_monthly_payroll(self, detector, now, payroll_bookings):
        """Two payroll payments with one in the trailing window form a monthly pattern."""
        patterns = detector.detect(payroll_bookings, now)

        assert len(patterns) == 1
        pattern = patterns[0]
        assert pattern.frequency == Frequency.MONTHLY
        assert pattern.category == "Personalkosten"
        assert pattern.direction == CashflowDirection.OUTFLOW
        assert pattern.confidence == pytest.approx(1.0)
        assert pattern.avg_amount == pytest.approx(5000.0)
        assert pattern.typical_day_of_month == 26
        assert pattern.occurrences == 2
        assert pattern.vendor == "Lohnbuchhaltung"
        assert pattern.description == "gehälter #/#"
        assert pattern.account_range == (5100, 5199)

    def test_weekly_pattern(self, detector, now, weekly_supplier_bookings):
        """Four occurrences in 30 days annualize to 48: weekly."""
        patterns = detector.detect(weekly_supplier_bookings, now)

        assert len(patterns) == 1
        assert patterns[0].frequency == Frequency.WEEKLY
        # 48 / 52
        assert patterns[0].confidence == pytest.approx(0.92)
        assert patterns[0].avg_amount == pytest.approx(1250.0)

    def test_biweekly_pattern(self, detector, now):
        """Two occurrences in 30 days annualize to 24: biweekly."""
        bookings = [
            make_booking("2024-10-20", 900.0, 6300, "Reinigung", "CleanCo"),
            make_booking("2024-11-03", 900.0, 6300, "Reinigung", "CleanCo"),
        ]
        patterns = detector.detect(bookings, now)

        assert len(patterns) == 1
        assert patterns[0].frequency == Frequency.BIWEEKLY
        assert patterns[0].confidence == pytest.approx(0.92)

    def test_single_occurrence_never_emitted(self, detector, now):
        """A group seen once is not evidence of recurrence."""
        bookings = [make_booking("2024-11-01", 3000.0, 4360, "Versicherung", "Allianz")]
        assert detector.detect(bookings, now) == []

    def test_group_without_recent_occurrences_discarded(self, detector, now):
        """Old groups annualize to zero and fall outside every band."""
        bookings = [
            make_booking("2024-06-26", 5000.0, 5100, "Gehälter", "Lohnbuchhaltung"),
            make_booking("2024-07-26", 5000.0, 5100, "Gehälter", "Lohnbuchhaltung"),
        ]
        assert detector.detect(bookings, now) == []

    @pytest.fixture
    def three_recent_bookings(self):
        return [
            make_booking(f"2024-10-{day}", 100.0, 6300, "Kaffee", "Bohne")
            for day in (14, 21, 28)
        ]

    def test_rate_36_is_biweekly(self, detector, now, three_recent_bookings):
        """Three occurrences in 30 days annualize to 36, inside the biweekly band."""
        patterns = detector.detect(three_recent_bookings, now)
        assert patterns[0].frequency == Frequency.BIWEEKLY

    def test_rate_outside_every_band_discarded(self, now, three_recent_bookings):
        """A rate of 36 is dropped when only the weekly band is configured."""
        detector = RecurringPatternDetector(settings=DetectorSettings(
            bands=(FrequencyBand("weekly", 40, float("inf"), 52),)
        ))
        assert detector.detect(three_recent_bookings, now) == []

    def test_vendor_separates_groups(self, detector, now):
        """Identical texts from different vendors are different patterns."""
        bookings = [
            make_booking("2024-10-20", 500.0, 6300, "Wartung", "A GmbH"),
            make_booking("2024-11-03", 500.0, 6300, "Wartung", "A GmbH"),
            make_booking("2024-10-20", 700.0, 6300, "Wartung", "B GmbH"),
        ]
        patterns = detector.detect(bookings, now)

        assert [p.vendor for p in patterns] == ["A GmbH"]

    def test_unknown_vendor_reported_as_none(self, detector, now):
        bookings = [
            make_booking("2024-10-20", 500.0, 6300, "Wartung"),
            make_booking("2024-11-03", 500.0, 6300, "Wartung"),
        ]
        patterns = detector.detect(bookings, now)

        assert patterns[0].vendor is None

    def test_sorted_by_occurrences(self, detector, now, payroll_bookings, weekly_supplier_bookings):
        """Patterns with more occurrences come first."""
        patterns = detector.detect(payroll_bookings + weekly_supplier_bookings, now)

        assert [p.occurrences for p in patterns] == [4, 2]
        assert patterns[0].category == "Materialkosten"

    def test_typical_day_rounds_half_up(self, detector, now):
        """Mean day 10.5 rounds to 11."""
        bookings = [
            make_booking("2024-10-10", 250.0, 6300, "Leasing", "Bank"),
            make_booking("2024-11-11", 250.0, 6300, "Leasing", "Bank"),
        ]
        patterns = detector.detect(bookings, now)

        assert patterns[0].typical_day_of_month == 11

    def test_mixed_accounts_use_first_booking(self, detector, now):
        """A cluster spanning several accounts takes the first booking's category."""
        bookings = [
            make_booking("2024-10-20", 400.0, 4210, "Dauerauftrag", "Stadtwerke"),
            make_booking("2024-11-03", 400.0, 6300, "Dauerauftrag", "Stadtwerke"),
        ]
        patterns = detector.detect(bookings, now)

        assert patterns[0].category == "Raumkosten"
        assert patterns[0].account_range == (4200, 4299)

    def test_synthetic_band_table(self, now, payroll_bookings):
        """Substituted bands change the classification without code changes."""
        detector = RecurringPatternDetector(settings=DetectorSettings(
            bands=(FrequencyBand("quarterly", 10, 14, 24),)
        ))
        patterns = detector.detect(payroll_bookings, now)

        assert patterns[0].frequency == Frequency.QUARTERLY
        assert patterns[0].confidence == pytest.approx(0.5)
