"""
Withdrawal and Retirement Calculations

Systematic withdrawal plans (SWP) and retirement decumulation.

Unlike the growth calculations, returns here are converted with a flat
monthly division (annual / 12), the same convention as loan interest.
Running out of money is a normal outcome reported on the result, never
an exception.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from fincalc.calculations.errors import (
    InvalidInput,
    require_finite_result,
    require_positive,
    require_non_negative,
    require_int_at_least,
)
from fincalc.calculations.growth import months_in, required_sip_for_target

logger = logging.getLogger(__name__)

# A corpus this far below zero still counts as covering the month
CORPUS_TOLERANCE = 0.01


@dataclass(frozen=True)
class WithdrawalPlan:
    """Corpus, fixed monthly withdrawal, annual return and duration."""

    initial_corpus: float
    monthly_withdrawal: float
    annual_return_percent: float
    years: float

    def __post_init__(self):
        object.__setattr__(
            self, "initial_corpus", require_positive("initial_corpus", self.initial_corpus)
        )
        object.__setattr__(
            self,
            "monthly_withdrawal",
            require_non_negative("monthly_withdrawal", self.monthly_withdrawal),
        )
        object.__setattr__(
            self,
            "annual_return_percent",
            require_non_negative("annual_return_percent", self.annual_return_percent),
        )
        months_in(self.years)

    @property
    def months(self) -> int:
        return months_in(self.years)

    @property
    def monthly_rate(self) -> float:
        return self.annual_return_percent / 12 / 100


@dataclass
class SWPResult:
    total_withdrawn: float
    remaining_balance: float
    months_sustained: int  # Months with a full withdrawal
    is_sustainable: bool
    total_value: float  # Withdrawn plus remaining


@dataclass
class SustainabilityResult:
    sustainable: bool
    months_sustained: int
    ending_corpus: float


@dataclass
class RetirementPlan:
    """Two-phase retirement plan: build the corpus, then draw it down."""

    years_to_retirement: float
    required_corpus: float
    required_sip: float
    total_investment: float
    wealth_multiplier: float
    sustainable: bool
    months_sustained: int
    years_sustained: float
    # Fallback suggestions, only set when the plan is not sustainable
    recommended_sip: Optional[float] = None
    recommended_corpus: Optional[float] = None
    alternative_retirement_age: Optional[float] = None
    reduced_monthly_income: Optional[float] = None


def simulate_swp(plan: WithdrawalPlan) -> SWPResult:
    """
    Simulate a systematic withdrawal plan month by month.

    Each month the balance first earns its return, then the withdrawal is
    taken. When the balance cannot cover a full withdrawal, whatever is
    left is withdrawn and the plan stops as unsustainable.

    Args:
        plan: Corpus, withdrawal, return and duration

    Returns:
        SWPResult with totals and sustainability
    """
    rate = plan.monthly_rate
    withdrawal = plan.monthly_withdrawal
    months = plan.months

    balance = plan.initial_corpus
    total_withdrawn = 0.0
    months_sustained = 0
    is_sustainable = True

    for _ in range(months):
        balance = balance * (1 + rate)

        if balance >= withdrawal:
            balance -= withdrawal
            total_withdrawn += withdrawal
            months_sustained += 1
        else:
            # Partial final withdrawal
            total_withdrawn += balance
            balance = 0.0
            is_sustainable = False
            break

    balance = require_finite_result("annual_return_percent", balance)

    logger.debug(
        f"SWP: {months_sustained}/{months} months sustained, "
        f"remaining {balance:.2f}"
    )

    return SWPResult(
        total_withdrawn=total_withdrawn,
        remaining_balance=balance,
        months_sustained=months_sustained,
        is_sustainable=is_sustainable,
        total_value=total_withdrawn + balance,
    )


def required_retirement_corpus(
    monthly_income: float, monthly_return_rate: float, years: float
) -> float:
    """
    Corpus needed to pay monthly_income for `years` years.

    Present value of an annuity-immediate:
    PV = PMT * (1 - (1 + r)^-n) / r, which tends to PMT * n as r -> 0.

    Args:
        monthly_income: Income drawn at the end of each month
        monthly_return_rate: Monthly return as decimal (e.g., 0.005 for 0.5%)
        years: Length of retirement in years

    Returns:
        Required corpus at the start of retirement
    """
    monthly_income = require_positive("monthly_income", monthly_income)
    monthly_return_rate = require_non_negative("monthly_return_rate", monthly_return_rate)
    months = months_in(years)

    if monthly_return_rate == 0:
        return monthly_income * months

    return (
        monthly_income
        * (1 - (1 + monthly_return_rate) ** -months)
        / monthly_return_rate
    )


def check_corpus_sustainability(
    corpus: float,
    monthly_income: float,
    monthly_return_rate: float,
    months: int,
) -> SustainabilityResult:
    """
    Check whether a corpus can pay monthly_income for `months` months.

    Each month the corpus earns its return and then the income is
    subtracted (grow, then subtract). A month counts as covered while the
    corpus stays non-negative.
    """
    corpus = require_non_negative("corpus", corpus)
    monthly_income = require_non_negative("monthly_income", monthly_income)
    monthly_return_rate = require_non_negative("monthly_return_rate", monthly_return_rate)
    months = require_int_at_least("months", months, 1)

    months_sustained = 0
    for month in range(1, months + 1):
        corpus = corpus * (1 + monthly_return_rate) - monthly_income
        if corpus >= -CORPUS_TOLERANCE:
            months_sustained = month
        else:
            break

    corpus = require_finite_result("monthly_return_rate", corpus)

    return SustainabilityResult(
        sustainable=months_sustained >= months,
        months_sustained=months_sustained,
        ending_corpus=max(0.0, corpus),
    )


def plan_retirement(
    current_age: float,
    retirement_age: float,
    monthly_income: float,
    expected_return_percent: float,
    monthly_return_percent: float,
    retirement_years: float,
) -> RetirementPlan:
    """
    Build a two-phase retirement plan.

    Phase 1 sizes the corpus for the desired income and the monthly SIP
    that builds it by retirement. Phase 2 replays the withdrawals to
    confirm the corpus lasts.

    Args:
        current_age: Age today
        retirement_age: Age at retirement, must exceed current_age
        monthly_income: Desired income in retirement
        expected_return_percent: Annual return while accumulating (e.g., 12)
        monthly_return_percent: Monthly return in retirement (e.g., 0.5)
        retirement_years: Years the income must last

    Returns:
        RetirementPlan; unsustainable plans carry fallback suggestions.
        The corpus is the exact present value of the income, so the replay
        normally passes and the suggestions stay unset.
    """
    current_age = require_positive("current_age", current_age)
    retirement_age = require_positive("retirement_age", retirement_age)
    if retirement_age <= current_age:
        raise InvalidInput(
            "retirement_age",
            "> current_age",
            "Retirement age must be greater than current age",
        )
    monthly_return_percent = require_non_negative(
        "monthly_return_percent", monthly_return_percent
    )

    years_to_retirement = retirement_age - current_age
    accumulation_months = months_in(years_to_retirement)
    retirement_months = months_in(retirement_years)
    monthly_rate = monthly_return_percent / 100

    corpus = required_retirement_corpus(monthly_income, monthly_rate, retirement_years)
    required_sip = required_sip_for_target(
        corpus, expected_return_percent, accumulation_months
    )
    total_investment = required_sip * accumulation_months

    check = check_corpus_sustainability(
        corpus, monthly_income, monthly_rate, retirement_months
    )

    plan = RetirementPlan(
        years_to_retirement=years_to_retirement,
        required_corpus=corpus,
        required_sip=required_sip,
        total_investment=total_investment,
        wealth_multiplier=corpus / total_investment,
        sustainable=check.sustainable,
        months_sustained=check.months_sustained,
        years_sustained=check.months_sustained / 12,
    )

    if not check.sustainable:
        plan.recommended_sip = required_sip * 1.2
        plan.recommended_corpus = corpus * 1.2
        plan.alternative_retirement_age = retirement_age + 2
        plan.reduced_monthly_income = monthly_income * 0.8

    return plan
