"""
Investment Growth Calculations

SIP (recurring monthly contribution), lumpsum and combined maturity
values, plus the reverse calculations used for goal planning.

Returns are quoted as annual percentages and compounded annually; the
equivalent monthly rate is (1 + annual)^(1/12) - 1, not annual / 12.
SIP contributions are made at the start of each month (annuity-due).
"""

import logging
from typing import List, Iterable
from dataclasses import dataclass

from fincalc.calculations.errors import (
    InvalidInput,
    require_computable,
    require_positive,
    require_non_negative,
    require_int_at_least,
)

logger = logging.getLogger(__name__)

COMPARISON_MODES = ("sip", "lumpsum")


@dataclass
class SIPResult:
    """Maturity of a monthly contribution plan."""

    maturity_value: float
    total_invested: float
    estimated_returns: float
    wealth_multiplier: float


@dataclass
class CombinedResult:
    """SIP and lumpsum components of a combined plan."""

    sip_invested: float
    sip_maturity: float
    lumpsum_invested: float
    lumpsum_maturity: float
    total_invested: float
    total_maturity: float
    total_gains: float


@dataclass
class GoalPlan:
    """What it takes to reach a target amount by a deadline."""

    goal_amount: float
    savings_future_value: float
    achievable: bool  # Current savings alone reach the goal
    surplus: float
    shortfall: float
    required_sip: float
    required_lumpsum: float
    total_sip_investment: float
    capital_gains: float


@dataclass(frozen=True)
class InvestmentOption:
    """One row of an investment comparison."""

    name: str
    amount: float
    annual_return_percent: float
    mode: str = "lumpsum"  # "sip" for a monthly amount, "lumpsum" for a one-off


@dataclass
class ComparisonRow:
    rank: int
    name: str
    mode: str
    amount: float
    annual_return_percent: float
    total_invested: float
    maturity_value: float
    gains: float
    multiplier: float


def compounded_monthly_rate(annual_return_percent: float) -> float:
    """Monthly rate equivalent to an annually compounded percentage return."""
    return (1 + annual_return_percent / 100) ** (1 / 12) - 1


def annuity_due_factor(monthly_rate: float, months: int) -> float:
    """
    Future value of 1 paid at the start of each month for `months` months.

    ((1 + r)^n - 1) / r * (1 + r), which tends to n as r -> 0.
    """
    if monthly_rate == 0:
        return float(months)
    return ((1 + monthly_rate) ** months - 1) / monthly_rate * (1 + monthly_rate)


def months_in(years: float) -> int:
    """Convert a duration in years to a whole number of months."""
    years = require_positive("years", years)
    months = round(years * 12)
    if abs(months - years * 12) > 1e-9:
        raise InvalidInput("years", "a whole number of months")
    return months


def _stepped_sip_value(
    monthly_contribution: float, rate: float, months: int, step_up_percent: float
) -> float:
    maturity = 0.0
    contribution = monthly_contribution
    offset = 0

    while offset < months:
        block = min(12, months - offset)
        months_after_block = months - offset - block

        maturity += (
            contribution
            * annuity_due_factor(rate, block)
            * (1 + rate) ** months_after_block
        )

        contribution *= 1 + step_up_percent / 100
        offset += block

    return maturity


def _stepped_sip_invested(
    monthly_contribution: float, months: int, step_up_percent: float
) -> float:
    invested = 0.0
    contribution = monthly_contribution
    for offset in range(0, months, 12):
        invested += contribution * min(12, months - offset)
        contribution *= 1 + step_up_percent / 100
    return invested


def sip_maturity(
    monthly_contribution: float,
    annual_return_percent: float,
    months: int,
    step_up_percent: float = 0.0,
) -> SIPResult:
    """
    Calculate the maturity value of a monthly SIP.

    Without step-up: FV = C * ((1 + i)^n - 1) / i * (1 + i).

    With step-up the plan is processed year by year: each year's twelve
    contributions are valued at the end of that year with the annuity-due
    factor, then compounded over the months left to the horizon. The
    contribution grows by step_up_percent at every year boundary. A
    trailing partial year contributes only its own months.

    Args:
        monthly_contribution: Amount invested each month
        annual_return_percent: Expected annual return (e.g., 12 for 12%)
        months: Investment horizon in months
        step_up_percent: Yearly increase in the contribution (e.g., 10 for 10%)

    Returns:
        SIPResult with maturity value, amount invested, returns and multiplier
    """
    monthly_contribution = require_positive("monthly_contribution", monthly_contribution)
    annual_return_percent = require_positive("annual_return_percent", annual_return_percent)
    months = require_int_at_least("months", months, 1)
    step_up_percent = require_non_negative("step_up_percent", step_up_percent)

    rate = compounded_monthly_rate(annual_return_percent)

    if step_up_percent == 0:
        maturity = require_computable(
            "maturity_value",
            lambda: monthly_contribution * annuity_due_factor(rate, months),
        )
        invested = monthly_contribution * months
    else:
        maturity = require_computable(
            "maturity_value",
            lambda: _stepped_sip_value(
                monthly_contribution, rate, months, step_up_percent
            ),
        )
        invested = _stepped_sip_invested(monthly_contribution, months, step_up_percent)

    return SIPResult(
        maturity_value=maturity,
        total_invested=invested,
        estimated_returns=maturity - invested,
        wealth_multiplier=maturity / invested,
    )


def lumpsum_maturity(
    principal: float, annual_return_percent: float, years: float
) -> float:
    """
    Calculate the maturity value of a one-off investment.

    A = P * (1 + r)^t. A zero-year horizon returns the principal.
    """
    principal = require_non_negative("principal", principal)
    annual_return_percent = require_positive("annual_return_percent", annual_return_percent)
    years = require_non_negative("years", years)

    if years == 0:
        return principal

    return require_computable(
        "maturity_value", lambda: principal * (1 + annual_return_percent / 100) ** years
    )


def required_sip_for_target(
    target_amount: float, annual_return_percent: float, months: int
) -> float:
    """
    Monthly contribution needed to accumulate target_amount.

    Inverse of the no-step-up SIP formula:
    C = target * i / (((1 + i)^n - 1) * (1 + i)).
    """
    target_amount = require_positive("target_amount", target_amount)
    annual_return_percent = require_positive("annual_return_percent", annual_return_percent)
    months = require_int_at_least("months", months, 1)

    rate = compounded_monthly_rate(annual_return_percent)
    factor = require_computable(
        "annual_return_percent", lambda: annuity_due_factor(rate, months)
    )
    return require_computable("monthly_contribution", lambda: target_amount / factor)


def required_lumpsum_for_target(
    target_amount: float, annual_return_percent: float, years: float
) -> float:
    """One-off investment needed today to reach target_amount."""
    target_amount = require_positive("target_amount", target_amount)
    annual_return_percent = require_positive("annual_return_percent", annual_return_percent)
    years = require_positive("years", years)

    growth = require_computable(
        "annual_return_percent", lambda: (1 + annual_return_percent / 100) ** years
    )
    return require_computable("principal", lambda: target_amount / growth)


def combined_maturity(
    monthly_contribution: float,
    lumpsum: float,
    annual_return_percent: float,
    years: float,
) -> CombinedResult:
    """
    Calculate a plan that combines a monthly SIP with a one-off lumpsum.

    Either amount may be zero, but not both.
    """
    monthly_contribution = require_non_negative("monthly_contribution", monthly_contribution)
    lumpsum = require_non_negative("lumpsum", lumpsum)
    if monthly_contribution == 0 and lumpsum == 0:
        raise InvalidInput(
            "monthly_contribution",
            "> 0 or lumpsum > 0",
            "Enter a monthly contribution, a lumpsum, or both",
        )
    months = months_in(years)

    sip_invested = 0.0
    sip_value = 0.0
    if monthly_contribution > 0:
        sip = sip_maturity(monthly_contribution, annual_return_percent, months)
        sip_invested = sip.total_invested
        sip_value = sip.maturity_value

    lumpsum_value = 0.0
    if lumpsum > 0:
        lumpsum_value = lumpsum_maturity(lumpsum, annual_return_percent, years)

    total_invested = sip_invested + lumpsum
    total_maturity = sip_value + lumpsum_value

    return CombinedResult(
        sip_invested=sip_invested,
        sip_maturity=sip_value,
        lumpsum_invested=lumpsum,
        lumpsum_maturity=lumpsum_value,
        total_invested=total_invested,
        total_maturity=total_maturity,
        total_gains=total_maturity - total_invested,
    )


def plan_goal(
    goal_amount: float,
    years: float,
    annual_return_percent: float,
    current_savings: float = 0.0,
) -> GoalPlan:
    """
    Work out the monthly SIP or lumpsum needed to reach a goal.

    Current savings are grown at the same return first; only the shortfall
    has to be funded.

    Args:
        goal_amount: Amount needed at the end of the horizon
        years: Time to the goal in years
        annual_return_percent: Expected annual return (e.g., 12 for 12%)
        current_savings: Amount already saved towards the goal

    Returns:
        GoalPlan; when savings alone reach the goal, achievable is True and
        the required amounts are zero
    """
    goal_amount = require_positive("goal_amount", goal_amount)
    months = months_in(years)

    savings_fv = lumpsum_maturity(current_savings, annual_return_percent, years)
    shortfall = goal_amount - savings_fv

    if shortfall <= 0:
        return GoalPlan(
            goal_amount=goal_amount,
            savings_future_value=savings_fv,
            achievable=True,
            surplus=-shortfall,
            shortfall=0.0,
            required_sip=0.0,
            required_lumpsum=0.0,
            total_sip_investment=0.0,
            capital_gains=0.0,
        )

    required_sip = required_sip_for_target(shortfall, annual_return_percent, months)
    total_sip_investment = required_sip * months

    return GoalPlan(
        goal_amount=goal_amount,
        savings_future_value=savings_fv,
        achievable=False,
        surplus=0.0,
        shortfall=shortfall,
        required_sip=required_sip,
        required_lumpsum=required_lumpsum_for_target(
            shortfall, annual_return_percent, years
        ),
        total_sip_investment=total_sip_investment,
        capital_gains=shortfall - total_sip_investment,
    )


def compare_investments(
    options: Iterable[InvestmentOption], years: float
) -> List[ComparisonRow]:
    """
    Compare investment options over the same horizon.

    Returns rows ranked by maturity value, highest first.
    """
    options = list(options)
    if not options:
        raise InvalidInput("options", "at least one investment option")
    months = months_in(years)

    rows = []
    for option in options:
        if option.mode not in COMPARISON_MODES:
            raise InvalidInput("mode", "one of " + ", ".join(COMPARISON_MODES))

        if option.mode == "sip":
            sip = sip_maturity(option.amount, option.annual_return_percent, months)
            invested = sip.total_invested
            maturity = sip.maturity_value
        else:
            amount = require_positive("amount", option.amount)
            invested = amount
            maturity = lumpsum_maturity(amount, option.annual_return_percent, years)

        rows.append(
            ComparisonRow(
                rank=0,
                name=option.name.strip() or "Unnamed Investment",
                mode=option.mode,
                amount=option.amount,
                annual_return_percent=option.annual_return_percent,
                total_invested=invested,
                maturity_value=maturity,
                gains=maturity - invested,
                multiplier=maturity / invested,
            )
        )

    rows.sort(key=lambda row: row.maturity_value, reverse=True)
    for rank, row in enumerate(rows, start=1):
        row.rank = rank

    logger.debug(f"Compared {len(rows)} investment options over {years} years")
    return rows
