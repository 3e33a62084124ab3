"""
Loan calculation API endpoints.

EMI, amortization schedules and prepayment simulation.
"""

from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from fincalc.api.common import bad_request, check_horizon
from fincalc.calculations.errors import InvalidInput
from fincalc.calculations.amortization import (
    LoanTerms,
    annualize_schedule,
    calculate_total_interest,
    compute_emi,
    generate_amortization_schedule,
)
from fincalc.calculations.prepayment import (
    Prepayment,
    PrepaymentStrategy,
    simulate_prepayments,
)

router = APIRouter()


class LoanInput(BaseModel):
    """Loan principal, annual rate in percent and tenure in months."""

    principal: float
    annual_rate_percent: float
    tenure_months: int


class ScheduleInput(LoanInput):
    start_date: Optional[date] = None


class PrepaymentInput(BaseModel):
    period: int
    amount: float
    strategy: PrepaymentStrategy = PrepaymentStrategy.REDUCE_TENURE


class PrepaymentPlanInput(LoanInput):
    """Loan terms plus the prepayments to simulate."""

    prepayments: List[PrepaymentInput] = []
    period_unit: str = "month"
    start_date: Optional[date] = None
    include_schedule: bool = True


def _terms(inputs: LoanInput) -> LoanTerms:
    check_horizon("tenure_months", inputs.tenure_months)
    return LoanTerms(
        principal=inputs.principal,
        annual_rate_percent=inputs.annual_rate_percent,
        tenure_months=inputs.tenure_months,
    )


@router.post("/emi")
async def calculate_emi(inputs: LoanInput):
    """Calculate the monthly installment and loan totals."""
    try:
        return asdict(compute_emi(_terms(inputs)))
    except InvalidInput as e:
        raise bad_request(e)


@router.post("/schedule")
async def calculate_schedule(inputs: ScheduleInput):
    """Generate the monthly amortization schedule with yearly totals."""
    try:
        schedule = generate_amortization_schedule(_terms(inputs), inputs.start_date)
    except InvalidInput as e:
        raise bad_request(e)

    return {
        "schedule": [asdict(row) for row in schedule],
        "annual": annualize_schedule(schedule),
        "total_interest": calculate_total_interest(schedule),
        "total_principal": sum(row.principal for row in schedule),
    }


@router.post("/prepayments")
async def calculate_prepayments(inputs: PrepaymentPlanInput):
    """Simulate the loan with prepayments and report the savings."""
    try:
        prepayments = [
            Prepayment(period=p.period, amount=p.amount, strategy=p.strategy)
            for p in inputs.prepayments
        ]
        result = simulate_prepayments(
            _terms(inputs),
            prepayments,
            period_unit=inputs.period_unit,
            start_date=inputs.start_date,
        )
    except InvalidInput as e:
        raise bad_request(e)

    response = asdict(result)
    if inputs.include_schedule:
        response["annual"] = annualize_schedule(result.schedule)
    else:
        response["schedule"] = []
    return response
