"""
Unit tests for liquidity.forecasting.variance module.
"""

import pytest

from liquidity.forecasting import HistoricalVarianceEstimator

from tests.conftest import make_booking


@pytest.fixture
def estimator():
    return HistoricalVarianceEstimator()


class TestEstimate:
    """Tests for weekly net cashflow volatility."""

    def test_empty_history_uses_fallback(self, estimator):
        assert estimator.estimate([]) == 5000.0

    def test_custom_fallback(self):
        assert HistoricalVarianceEstimator(fallback_std_dev=1234.0).estimate([]) == 1234.0

    def test_single_week_has_zero_spread(self, estimator):
        bookings = [
            make_booking("2024-11-04", 1000.0, 8400),
            make_booking("2024-11-06", 300.0, 6300),
        ]
        assert estimator.estimate(bookings) == 0.0

    def test_population_std_dev(self, estimator):
        """Weekly nets of +1000 and -1000 have a population std dev of 1000."""
        bookings = [
            make_booking("2024-10-28", 1000.0, 8400),
            make_booking("2024-11-04", 1000.0, 6300),
        ]
        assert estimator.estimate(bookings) == pytest.approx(1000.0)

    def test_same_week_number_in_different_years(self, estimator):
        """ISO week 45 of 2023 and of 2024 are separate buckets."""
        bookings = [
            make_booking("2023-11-06", 1000.0, 8400),
            make_booking("2024-11-04", 3000.0, 6300),
        ]
        weekly = estimator.weekly_net_cashflows(bookings)

        assert weekly == {(2023, 45): 1000.0, (2024, 45): -3000.0}
        assert estimator.estimate(bookings) == pytest.approx(2000.0)

    def test_refunds_net_against_direction(self, estimator):
        """A negative expense booking counts as inflow."""
        bookings = [make_booking("2024-11-04", -400.0, 5100)]
        assert estimator.weekly_net_cashflows(bookings) == {(2024, 45): 400.0}
