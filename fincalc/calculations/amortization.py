"""
Loan Amortization Calculations

Implements the equal monthly installment (EMI) formula and plain
amortization schedules. Interest is charged monthly at annual_rate / 12.
"""

from typing import List, Dict, Optional
from dataclasses import dataclass
from datetime import date
from dateutil.relativedelta import relativedelta

from fincalc.calculations.errors import (
    require_finite,
    require_positive,
    require_int_at_least,
)

# Balances at or below this are treated as fully repaid
BALANCE_EPSILON = 0.01


@dataclass(frozen=True)
class LoanTerms:
    """Principal, annual rate in percent and tenure in months."""

    principal: float
    annual_rate_percent: float
    tenure_months: int

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(
            self, "principal", require_positive("principal", self.principal)
        )
        object.__setattr__(
            self,
            "annual_rate_percent",
            require_positive("annual_rate_percent", self.annual_rate_percent),
        )
        object.__setattr__(
            self,
            "tenure_months",
            require_int_at_least("tenure_months", self.tenure_months, 1),
        )

    @property
    def monthly_rate(self) -> float:
        return monthly_rate(self.annual_rate_percent)


@dataclass
class EMIResult:
    """Installment and lifetime totals for a loan."""

    installment: float
    total_payment: float
    total_interest: float
    interest_ratio: float  # Total interest as a percentage of principal


@dataclass
class AmortizationRow:
    """One period of a loan schedule."""

    period: int
    installment: float  # Regular payment actually made (principal + interest)
    principal: float
    interest: float
    prepayment: float
    outstanding_balance: float
    date: Optional[str] = None


def monthly_rate(annual_rate_percent: float) -> float:
    """Convert an annual percentage rate to a flat monthly decimal rate."""
    return annual_rate_percent / 12 / 100


def calculate_installment(
    principal: float, monthly_rate: float, months: int
) -> float:
    """
    Calculate the equal monthly installment for a balance.

    Args:
        principal: Balance to amortize
        monthly_rate: Monthly interest rate as decimal (e.g., 0.01 for 1%)
        months: Number of remaining installments

    Returns:
        Monthly installment amount

    Raises:
        InvalidInput: If months is not a positive whole number
    """
    require_finite("principal", principal)
    require_finite("monthly_rate", monthly_rate)
    months = require_int_at_least("months", months, 1)

    if monthly_rate == 0:
        return principal / months

    factor = (1 + monthly_rate) ** months
    return principal * monthly_rate * factor / (factor - 1)


def compute_emi(terms: LoanTerms) -> EMIResult:
    """
    Calculate the EMI and lifetime totals for a loan.

    Args:
        terms: Loan principal, annual rate and tenure

    Returns:
        EMIResult with installment, total payment, total interest and
        interest as a percentage of principal
    """
    installment = calculate_installment(
        terms.principal, terms.monthly_rate, terms.tenure_months
    )
    total_payment = installment * terms.tenure_months
    total_interest = total_payment - terms.principal

    return EMIResult(
        installment=installment,
        total_payment=total_payment,
        total_interest=total_interest,
        interest_ratio=total_interest / terms.principal * 100,
    )


def period_date(start_date: Optional[date], period: int) -> Optional[str]:
    """ISO date of a 1-based period counted in months from start_date."""
    if start_date is None:
        return None
    return (start_date + relativedelta(months=period - 1)).isoformat()


def generate_amortization_schedule(
    terms: LoanTerms, start_date: Optional[date] = None
) -> List[AmortizationRow]:
    """
    Generate the full amortization schedule without prepayments.

    Args:
        terms: Loan principal, annual rate and tenure
        start_date: Date of first payment; rows are undated when omitted

    Returns:
        List of amortization rows, one per month
    """
    rate = terms.monthly_rate
    installment = calculate_installment(terms.principal, rate, terms.tenure_months)
    balance = terms.principal
    schedule = []

    for period in range(1, terms.tenure_months + 1):
        interest = balance * rate
        principal_pmt = min(installment - interest, balance)
        balance = max(0.0, balance - principal_pmt)

        schedule.append(
            AmortizationRow(
                period=period,
                installment=principal_pmt + interest,
                principal=principal_pmt,
                interest=interest,
                prepayment=0.0,
                outstanding_balance=balance,
                date=period_date(start_date, period),
            )
        )

        if balance <= BALANCE_EPSILON:
            break

    return schedule


def annualize_schedule(schedule: List[AmortizationRow]) -> List[Dict]:
    """
    Convert a monthly schedule to yearly totals.

    Year N covers periods 12(N-1)+1 .. 12N. The closing balance is the
    outstanding balance after the last period of that year.
    """
    if not schedule:
        return []

    annual_data = []
    numeric_fields = ["installment", "principal", "interest", "prepayment"]

    current_year = None
    year_totals: Dict = {}

    for row in schedule:
        row_year = (row.period - 1) // 12 + 1

        if row_year != current_year:
            if year_totals:
                annual_data.append(year_totals)
            current_year = row_year
            year_totals = {"year": current_year}
            for field in numeric_fields:
                year_totals[field] = 0.0

        for field in numeric_fields:
            year_totals[field] += getattr(row, field)
        year_totals["closing_balance"] = row.outstanding_balance

    # Push final year
    annual_data.append(year_totals)

    return annual_data


def calculate_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over a schedule."""
    return sum(row.interest for row in schedule)

