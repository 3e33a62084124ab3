"""
Withdrawal and retirement API endpoints.
"""

from dataclasses import asdict

from fastapi import APIRouter
from pydantic import BaseModel

from fincalc.api.common import bad_request, check_horizon
from fincalc.calculations.errors import InvalidInput
from fincalc.calculations.withdrawal import (
    WithdrawalPlan,
    plan_retirement,
    simulate_swp,
)

router = APIRouter()


class SWPInput(BaseModel):
    initial_corpus: float
    monthly_withdrawal: float
    annual_return_percent: float
    years: float


class RetirementInput(BaseModel):
    current_age: float
    retirement_age: float
    monthly_income: float
    expected_return_percent: float
    monthly_return_percent: float
    retirement_years: float


@router.post("/swp")
async def calculate_swp(inputs: SWPInput):
    """Simulate a systematic withdrawal plan."""
    try:
        check_horizon("years", inputs.years * 12)
        plan = WithdrawalPlan(
            initial_corpus=inputs.initial_corpus,
            monthly_withdrawal=inputs.monthly_withdrawal,
            annual_return_percent=inputs.annual_return_percent,
            years=inputs.years,
        )
        result = simulate_swp(plan)
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(result)


@router.post("/retirement")
async def calculate_retirement(inputs: RetirementInput):
    """Build a two-phase retirement plan."""
    try:
        check_horizon("retirement_years", inputs.retirement_years * 12)
        check_horizon(
            "retirement_age", (inputs.retirement_age - inputs.current_age) * 12
        )
        result = plan_retirement(
            current_age=inputs.current_age,
            retirement_age=inputs.retirement_age,
            monthly_income=inputs.monthly_income,
            expected_return_percent=inputs.expected_return_percent,
            monthly_return_percent=inputs.monthly_return_percent,
            retirement_years=inputs.retirement_years,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(result)
