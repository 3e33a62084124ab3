"""
Investment calculation API endpoints.

SIP, lumpsum, combined plans, goal planning and investment comparison.
"""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from fincalc.api.common import bad_request, check_horizon
from fincalc.calculations.errors import InvalidInput
from fincalc.calculations import growth

router = APIRouter()


class SIPInput(BaseModel):
    monthly_contribution: float
    annual_return_percent: float
    years: float
    step_up_percent: float = 0.0


class LumpsumInput(BaseModel):
    principal: float
    annual_return_percent: float
    years: float


class CombinedInput(BaseModel):
    monthly_contribution: float = 0.0
    lumpsum: float = 0.0
    annual_return_percent: float
    years: float


class GoalInput(BaseModel):
    goal_amount: float
    years: float
    annual_return_percent: float
    current_savings: float = 0.0


class OptionInput(BaseModel):
    name: str = ""
    amount: float
    annual_return_percent: float
    mode: str = "lumpsum"


class ComparisonInput(BaseModel):
    years: float
    options: List[OptionInput]


@router.post("/sip")
async def calculate_sip(inputs: SIPInput):
    """Calculate SIP maturity, with optional yearly step-up."""
    try:
        check_horizon("years", inputs.years * 12)
        result = growth.sip_maturity(
            inputs.monthly_contribution,
            inputs.annual_return_percent,
            growth.months_in(inputs.years),
            inputs.step_up_percent,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(result)


@router.post("/lumpsum")
async def calculate_lumpsum(inputs: LumpsumInput):
    """Calculate the maturity of a one-off investment."""
    try:
        check_horizon("years", inputs.years * 12)
        maturity = growth.lumpsum_maturity(
            inputs.principal, inputs.annual_return_percent, inputs.years
        )
    except InvalidInput as e:
        raise bad_request(e)

    return {
        "total_invested": inputs.principal,
        "maturity_value": maturity,
        "gains": maturity - inputs.principal,
        "wealth_multiplier": maturity / inputs.principal if inputs.principal else 0.0,
    }


@router.post("/combined")
async def calculate_combined(inputs: CombinedInput):
    """Calculate a SIP plus lumpsum plan."""
    try:
        check_horizon("years", inputs.years * 12)
        result = growth.combined_maturity(
            inputs.monthly_contribution,
            inputs.lumpsum,
            inputs.annual_return_percent,
            inputs.years,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(result)


@router.post("/goal")
async def calculate_goal(inputs: GoalInput):
    """Calculate the SIP or lumpsum needed to reach a goal."""
    try:
        check_horizon("years", inputs.years * 12)
        result = growth.plan_goal(
            inputs.goal_amount,
            inputs.years,
            inputs.annual_return_percent,
            inputs.current_savings,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(result)


@router.post("/compare")
async def compare_investments(inputs: ComparisonInput):
    """Rank investment options by maturity value."""
    try:
        check_horizon("years", inputs.years * 12)
        rows = growth.compare_investments(
            [
                growth.InvestmentOption(
                    name=option.name,
                    amount=option.amount,
                    annual_return_percent=option.annual_return_percent,
                    mode=option.mode,
                )
                for option in inputs.options
            ],
            inputs.years,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return {"results": [asdict(row) for row in rows]}
