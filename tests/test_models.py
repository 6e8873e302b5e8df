"""
Unit tests for liquidity.models and liquidity.config.
"""

import math
from datetime import date, datetime

import pytest

from liquidity.config import (
    DEFAULT_FREQUENCY_BANDS,
    DEFAULT_THRESHOLD,
    DEFAULT_WEEKS,
    ForecastRequest,
    FrequencyBand,
    InvalidForecastConfig,
)
from liquidity.models import Booking, InvalidBookingError, LiquidityKPIs


class TestBookingFromDict:
    """Tests for parsing booking records."""

    def test_full_record(self):
        booking = Booking.from_dict({
            "posting_date": "2024-10-26",
            "amount": 52000,
            "account": "5100",
            "text": "Gehälter 10/2024",
            "vendor": "Lohnbuchhaltung",
            "account_name": "Löhne und Gehälter",
            "document_no": "LG-10/2024",
        })

        assert booking.posting_date == date(2024, 10, 26)
        assert booking.amount == 52000.0
        assert booking.account == 5100
        assert booking.vendor == "Lohnbuchhaltung"

    def test_timestamp_date(self):
        booking = Booking.from_dict({"posting_date": "2024-10-26T08:30:00Z", "amount": 1.5, "account": 8400})
        assert booking.posting_date == date(2024, 10, 26)

    def test_datetime_date(self):
        booking = Booking.from_dict({"posting_date": datetime(2024, 10, 26, 8), "amount": 1, "account": 8400})
        assert booking.posting_date == date(2024, 10, 26)

    def test_optional_fields_default(self):
        booking = Booking.from_dict({"posting_date": "2024-10-26", "amount": -20.0, "account": 8400})

        assert booking.text == ""
        assert booking.vendor is None

    @pytest.mark.parametrize("record, message", [
        ({"posting_date": "2024-10-26", "amount": "12", "account": 8400}, "Invalid amount"),
        ({"posting_date": "2024-10-26", "amount": True, "account": 8400}, "Invalid amount"),
        ({"posting_date": "2024-10-26", "amount": float("nan"), "account": 8400}, "Invalid amount"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": "Kasse"}, "Invalid account"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": float("inf")}, "Invalid account"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": float("nan")}, "Invalid account"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": 5100.9}, "Invalid account"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": True}, "Invalid account"),
        ({"posting_date": "2024-10-26", "amount": 12, "account": None}, "Invalid account"),
        ({"posting_date": "26.10.2024", "amount": 12, "account": 8400}, "Invalid posting_date"),
        ({"amount": 12, "account": 8400}, "Invalid posting_date"),
    ])
    def test_invalid_records(self, record, message):
        with pytest.raises(InvalidBookingError, match=message):
            Booking.from_dict(record)

    def test_integral_float_account(self):
        booking = Booking.from_dict({"posting_date": "2024-10-26", "amount": 12, "account": 5100.0})
        assert booking.account == 5100

    def test_not_an_object(self):
        with pytest.raises(InvalidBookingError, match="must be an object"):
            Booking.from_dict(["2024-10-26", 12, 8400])

    def test_to_dict(self):
        booking = Booking(date(2024, 10, 26), 12.5, 8400, "Rechnung")
        assert booking.to_dict()["posting_date"] == "2024-10-26"


class TestForecastRequest:
    """Tests for forecast request validation."""

    def test_defaults(self):
        request = ForecastRequest(start_balance=1000, now=date(2024, 11, 10)).validate()

        assert request.threshold == DEFAULT_THRESHOLD == 50000
        assert request.weeks == DEFAULT_WEEKS == 13

    def test_bool_weeks_rejected(self):
        with pytest.raises(InvalidForecastConfig):
            ForecastRequest(start_balance=1000, now=date(2024, 11, 10), weeks=True).validate()

    def test_invalid_config_is_value_error(self):
        with pytest.raises(ValueError):
            ForecastRequest(start_balance=1000, now=date(2024, 11, 10), weeks=0).validate()


class TestFrequencyBands:
    """Tests for the default frequency band table."""

    def test_bands_are_half_open(self):
        band = FrequencyBand("biweekly", 20, 40, 26)

        assert band.contains(20)
        assert band.contains(39.9)
        assert not band.contains(40)

    @pytest.mark.parametrize("rate, frequency", [
        (60, "weekly"),
        (48, "weekly"),
        (24, "biweekly"),
        (12, "monthly"),
        (4, "quarterly"),
    ])
    def test_default_bands(self, rate, frequency):
        matches = [b.frequency for b in DEFAULT_FREQUENCY_BANDS if b.contains(rate)]
        assert matches == [frequency]

    @pytest.mark.parametrize("rate", [0, 2, 6, 15])
    def test_gaps(self, rate):
        assert not [b for b in DEFAULT_FREQUENCY_BANDS if b.contains(rate)]


class TestKPISerialization:
    """Tests for KPI serialization."""

    def test_infinite_runway_serializes_as_none(self):
        kpis = LiquidityKPIs(100.0, 100.0, None, 0.0, math.inf, 0.0, 0.0, 0.0, 0.0)
        assert kpis.to_dict()["runway"] is None
        assert not kpis.has_finite_runway

    def test_finite_runway(self):
        kpis = LiquidityKPIs(100.0, 50.0, 46, 10.0, 5.0, 0.0, 10.0, 0.0, 40.0)
        assert kpis.to_dict()["runway"] == 5.0
