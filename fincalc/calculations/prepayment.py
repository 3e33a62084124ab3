"""
Loan Prepayment Simulation

Simulates a loan month by month with one-off extra payments. Each
prepayment either keeps the installment and shortens the loan
(reduce tenure) or keeps the remaining tenure and lowers the
installment (reduce installment).
"""

import logging
import math
from enum import Enum
from typing import List, Dict, Iterable, Optional
from datetime import date
from dataclasses import dataclass, field

from fincalc.calculations.errors import (
    InvalidInput,
    require_positive,
    require_int_at_least,
)
from fincalc.calculations.amortization import (
    BALANCE_EPSILON,
    AmortizationRow,
    LoanTerms,
    calculate_installment,
    period_date,
)

logger = logging.getLogger(__name__)

PERIOD_UNITS = ("month", "year")


class PrepaymentStrategy(str, Enum):
    """What a prepayment buys: a shorter loan or a smaller installment."""

    REDUCE_TENURE = "reduce_tenure"
    REDUCE_INSTALLMENT = "reduce_installment"


@dataclass(frozen=True)
class Prepayment:
    """A single extra payment made after the regular installment of a period."""

    period: int  # 1-based month, or year when simulating with period_unit="year"
    amount: float
    strategy: PrepaymentStrategy = PrepaymentStrategy.REDUCE_TENURE

    def __post_init__(self):
        object.__setattr__(
            self, "period", require_int_at_least("period", self.period, 1)
        )
        object.__setattr__(self, "amount", require_positive("amount", self.amount))
        try:
            strategy = PrepaymentStrategy(self.strategy)
        except ValueError:
            raise InvalidInput(
                "strategy",
                "one of " + ", ".join(s.value for s in PrepaymentStrategy),
            ) from None
        object.__setattr__(self, "strategy", strategy)


@dataclass
class PrepaymentResult:
    """Outcome of a prepayment simulation compared with the original loan."""

    original_emi: float
    revised_emi: Optional[float]
    installment_reduction: float
    original_total_interest: float
    total_interest_paid: float
    total_prepaid: float
    total_payment: float
    periods_used: int
    periods_saved: int
    interest_saved: float
    schedule: List[AmortizationRow] = field(default_factory=list)


def _prepayments_by_month(
    terms: LoanTerms, prepayments: Iterable[Prepayment], period_unit: str
) -> Dict[int, Prepayment]:
    """
    Index prepayments by the month they are applied in.

    Yearly prepayments land after the last installment of their year.

    Raises:
        InvalidInput: On an unknown unit, a period beyond the tenure, two
            prepayments in the same period, or prepayments totalling more
            than the principal
    """
    if period_unit not in PERIOD_UNITS:
        raise InvalidInput("period_unit", "one of " + ", ".join(PERIOD_UNITS))

    if period_unit == "year":
        max_period = math.ceil(terms.tenure_months / 12)
    else:
        max_period = terms.tenure_months

    by_month: Dict[int, Prepayment] = {}
    total = 0.0

    for prepayment in prepayments:
        if prepayment.period > max_period:
            raise InvalidInput(
                "prepayments",
                f"period <= {max_period}",
                f"Invalid {period_unit} {prepayment.period}. "
                f"Please enter a {period_unit} between 1 and {max_period}",
            )

        if period_unit == "year":
            month = min(prepayment.period * 12, terms.tenure_months)
        else:
            month = prepayment.period

        if month in by_month:
            raise InvalidInput(
                "prepayments",
                "at most one prepayment per period",
                f"Prepayment already exists for {period_unit} {prepayment.period}",
            )

        by_month[month] = prepayment
        total += prepayment.amount

    # Conservative check on the naive sum, ignoring timing
    if total > terms.principal:
        raise InvalidInput(
            "prepayments",
            "total <= principal",
            "Total prepayments cannot exceed loan amount",
        )

    return by_month


def simulate_prepayments(
    terms: LoanTerms,
    prepayments: Iterable[Prepayment] = (),
    period_unit: str = "month",
    start_date: Optional[date] = None,
) -> PrepaymentResult:
    """
    Simulate a loan schedule with scheduled prepayments.

    Each month interest is charged on the outstanding balance, the regular
    installment repays principal, and then any prepayment for that month
    is applied (clamped to the remaining balance). The loop stops once the
    balance is repaid or the original tenure runs out.

    Args:
        terms: Loan principal, annual rate and tenure
        prepayments: Extra payments, at most one per period
        period_unit: "month" or "year"; the unit of Prepayment.period
        start_date: Date of first payment, used to date schedule rows

    Returns:
        PrepaymentResult with the schedule and savings versus the original loan

    Raises:
        InvalidInput: If the prepayment set is invalid for these terms
    """
    scheduled = _prepayments_by_month(terms, prepayments, period_unit)

    rate = terms.monthly_rate
    tenure = terms.tenure_months
    original_emi = calculate_installment(terms.principal, rate, tenure)
    original_total_interest = original_emi * tenure - terms.principal

    installment = original_emi
    revised_emi = None
    balance = terms.principal
    total_interest = 0.0
    total_regular = 0.0
    total_prepaid = 0.0
    month = 0
    schedule = []

    while balance > BALANCE_EPSILON and month < tenure:
        month += 1

        interest = balance * rate
        principal_pmt = min(installment - interest, balance)
        balance -= principal_pmt
        total_interest += interest
        total_regular += principal_pmt + interest

        applied = 0.0
        prepayment = scheduled.get(month)
        if prepayment is not None and balance > 0:
            applied = min(prepayment.amount, balance)
            balance -= applied
            total_prepaid += applied

            remaining_months = tenure - month
            if (
                prepayment.strategy is PrepaymentStrategy.REDUCE_INSTALLMENT
                and balance > BALANCE_EPSILON
                and remaining_months > 0
            ):
                installment = calculate_installment(balance, rate, remaining_months)
                revised_emi = installment

        schedule.append(
            AmortizationRow(
                period=month,
                installment=principal_pmt + interest,
                principal=principal_pmt,
                interest=interest,
                prepayment=applied,
                outstanding_balance=max(0.0, balance),
                date=period_date(start_date, month),
            )
        )

    logger.debug(
        f"Prepayment simulation: {len(scheduled)} prepayments, "
        f"{month}/{tenure} months used, interest {total_interest:.2f}"
    )

    return PrepaymentResult(
        original_emi=original_emi,
        revised_emi=revised_emi,
        installment_reduction=original_emi - installment,
        original_total_interest=original_total_interest,
        total_interest_paid=total_interest,
        total_prepaid=total_prepaid,
        total_payment=total_regular + total_prepaid,
        periods_used=month,
        periods_saved=tenure - month,
        interest_saved=original_total_interest - total_interest,
        schedule=schedule,
    )
