"""
Demo Data Generator for the Liquidity Planner

Generates realistic SMB booking ledgers for demonstrations and testing.
Creates several months of revenue, payroll, rent, material, insurance and
tax bookings on a German-style (SKR) chart of accounts.
"""

import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Any

from .models import Booking

# Risk scenarios for demo ledgers
RISK_SCENARIOS: Dict[str, Dict[str, Any]] = {
    "healthy": {
        "description": "Revenue comfortably covers payroll and fixed costs",
        "weekly_revenue": (38000, 46000),
        "expense_variance": (0.95, 1.05),
        "start_balance": 180000,
    },
    "moderate_risk": {
        "description": "Thin margin, balance drifts towards the warning threshold",
        "weekly_revenue": (27000, 33000),
        "expense_variance": (1.00, 1.10),
        "start_balance": 90000,
    },
    "high_risk": {
        "description": "Costs exceed revenue, cash crunch within the horizon",
        "weekly_revenue": (16000, 22000),
        "expense_variance": (1.10, 1.25),
        "start_balance": 60000,
    },
}

CUSTOMERS = [
    "Apex Consulting Group",
    "Summit Accounting Solutions",
    "Precision Parts GmbH",
    "CloudSync Solutions",
    "Metro Elektro Service",
]

SUPPLIERS = [
    "Stahlhandel Nord",
    "Office Supply Direct",
    "Packmittel Weber",
]

MONTHLY_PAYROLL = 52000.0
MONTHLY_RENT = 8500.0
QUARTERLY_INSURANCE = 4200.0
MONTHLY_TAX_PREPAYMENT = 6800.0


@dataclass
class GeneratedLedger:
    """Generated demo ledger"""
    scenario: str
    description: str
    start_balance: float
    bookings: List[Booking]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scenario": self.scenario,
            "description": self.description,
            "start_balance": self.start_balance,
            "bookings": [b.to_dict() for b in self.bookings]
        }


class DemoLedgerGenerator:
    """
    Generate demo booking ledgers.

    Example:
        generator = DemoLedgerGenerator(seed=42)

        ledger = generator.generate_ledger(
            risk_scenario="moderate_risk",
            end_date=date(2024, 11, 10)
        )
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator with optional random seed for reproducibility"""
        self._random = random.Random(seed)

    def generate_ledger(
        self,
        end_date: date,
        risk_scenario: str = "healthy",
        months_of_history: int = 6
    ) -> GeneratedLedger:
        """
        Generate a booking history ending at `end_date`.

        Args:
            end_date: Last day of the history (usually the forecast date)
            risk_scenario: Risk level (healthy, moderate_risk, high_risk)
            months_of_history: Number of months of bookings to generate

        Returns:
            GeneratedLedger with bookings sorted by posting date
        """
        scenario = RISK_SCENARIOS.get(risk_scenario, RISK_SCENARIOS["healthy"])
        start_date = end_date - timedelta(days=30 * months_of_history)

        bookings: List[Booking] = []
        day = start_date
        while day <= end_date:
            bookings.extend(self._bookings_for_day(day, scenario))
            day += timedelta(days=1)

        bookings.sort(key=lambda b: b.posting_date)

        return GeneratedLedger(
            scenario=risk_scenario if risk_scenario in RISK_SCENARIOS else "healthy",
            description=scenario["description"],
            start_balance=float(scenario["start_balance"]),
            bookings=bookings
        )

    def _bookings_for_day(self, day: date, scenario: Dict[str, Any]) -> List[Booking]:
        """Bookings posted on a single calendar day"""
        entries = []
        rnd = self._random
        expense_factor = rnd.uniform(*scenario["expense_variance"])
        period = f"{day.month:02d}/{day.year}"

        # Customer payments arrive on weekdays
        if day.weekday() < 5:
            weekly_revenue = rnd.uniform(*scenario["weekly_revenue"])
            for _ in range(rnd.randint(1, 2)):
                customer = rnd.choice(CUSTOMERS)
                entries.append(Booking(
                    posting_date=day,
                    amount=round(weekly_revenue / 7.5 * rnd.uniform(0.8, 1.2), 2),
                    account=8400,
                    text=f"Rechnung {rnd.randint(10000, 99999)} {customer}",
                    vendor=None,
                    account_name="Erlöse 19% USt",
                    document_no=f"AR-{day.strftime('%Y%m%d')}-{rnd.randint(100, 999)}"
                ))

        # Material purchases twice a week
        if day.weekday() in (1, 3):
            supplier = rnd.choice(SUPPLIERS)
            entries.append(Booking(
                posting_date=day,
                amount=round(rnd.uniform(2500, 5500) * expense_factor, 2),
                account=3400,
                text=f"Wareneingang {supplier} Lieferschein {rnd.randint(1000, 9999)}",
                vendor=supplier,
                account_name="Wareneingang 19% Vorsteuer",
                document_no=f"ER-{day.strftime('%Y%m%d')}"
            ))

        if day.day == 26:
            entries.append(Booking(
                posting_date=day,
                amount=round(MONTHLY_PAYROLL * expense_factor, 2),
                account=5100,
                text=f"Gehälter {period}",
                vendor="Lohnbuchhaltung",
                account_name="Löhne und Gehälter",
                document_no=f"LG-{period}"
            ))

        if day.day == 1:
            entries.append(Booking(
                posting_date=day,
                amount=MONTHLY_RENT,
                account=4210,
                text=f"Miete Büro {period}",
                vendor="Immobilien Schmidt KG",
                account_name="Miete",
                document_no=f"MI-{period}"
            ))

        if day.day == 10:
            entries.append(Booking(
                posting_date=day,
                amount=round(MONTHLY_TAX_PREPAYMENT * expense_factor, 2),
                account=7600,
                text=f"Umsatzsteuer Vorauszahlung {period}",
                vendor="Finanzamt",
                account_name="Steuern",
                document_no=f"ST-{period}"
            ))

        if day.day == 15 and day.month in (1, 4, 7, 10):
            entries.append(Booking(
                posting_date=day,
                amount=QUARTERLY_INSURANCE,
                account=4360,
                text="Betriebshaftpflicht Quartalsbeitrag",
                vendor="Allianz",
                account_name="Versicherungen",
                document_no=f"VS-{period}"
            ))

        return entries
