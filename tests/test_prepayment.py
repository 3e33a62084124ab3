"""
Tests for loan prepayment simulation.
"""

import pytest
from datetime import date

from fincalc.calculations.errors import InvalidInput
from fincalc.calculations.amortization import LoanTerms, compute_emi
from fincalc.calculations.prepayment import (
    Prepayment,
    PrepaymentStrategy,
    simulate_prepayments,
)


class TestWithoutPrepayments:
    """An empty prepayment list reproduces the plain loan."""

    def test_matches_emi_totals(self, home_loan):
        emi = compute_emi(home_loan)
        result = simulate_prepayments(home_loan, [])
        assert result.total_interest_paid == pytest.approx(emi.total_interest, abs=0.01)
        assert result.original_total_interest == pytest.approx(emi.total_interest)
        assert result.original_emi == pytest.approx(emi.installment)

    def test_uses_full_tenure(self, home_loan):
        result = simulate_prepayments(home_loan)
        assert result.periods_used == 240
        assert result.periods_saved == 0
        assert result.revised_emi is None
        assert result.total_prepaid == 0
        assert abs(result.interest_saved) < 0.01
        assert len(result.schedule) == 240


class TestReduceTenure:
    """Prepayments that keep the installment and shorten the loan."""

    def test_shortens_loan(self, home_loan):
        result = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        assert result.periods_saved > 0
        assert result.periods_used < 240
        assert result.interest_saved > 0
        assert result.revised_emi is None
        assert result.installment_reduction == 0

    def test_prepayment_recorded_in_schedule(self, home_loan):
        result = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        row = result.schedule[11]
        assert row.period == 12
        assert row.prepayment == 200000
        assert result.schedule[10].prepayment == 0
        assert result.total_prepaid == 200000

    def test_installment_unchanged(self, home_loan):
        result = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        assert result.schedule[12].installment == pytest.approx(result.original_emi)

    def test_ends_at_zero_balance(self, home_loan):
        result = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        assert result.schedule[-1].outstanding_balance <= 0.01

    def test_more_prepayment_saves_more(self, home_loan):
        small = simulate_prepayments(home_loan, [Prepayment(12, 50000)])
        large = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        assert large.total_interest_paid < small.total_interest_paid
        assert large.periods_used <= small.periods_used


class TestReduceInstallment:
    """Prepayments that keep the tenure and lower the installment."""

    def test_lowers_installment(self, home_loan):
        result = simulate_prepayments(
            home_loan,
            [Prepayment(12, 200000, PrepaymentStrategy.REDUCE_INSTALLMENT)],
        )
        assert result.revised_emi is not None
        assert result.revised_emi < result.original_emi
        assert result.installment_reduction == pytest.approx(
            result.original_emi - result.revised_emi
        )
        assert result.periods_used == 240
        assert result.interest_saved > 0

    def test_strategy_accepts_string(self, home_loan):
        result = simulate_prepayments(
            home_loan, [Prepayment(12, 200000, "reduce_installment")]
        )
        assert result.revised_emi is not None

    def test_new_installment_amortizes_remaining_balance(self):
        terms = LoanTerms(120000, 12, 24)
        result = simulate_prepayments(
            terms, [Prepayment(12, 20000, PrepaymentStrategy.REDUCE_INSTALLMENT)]
        )
        balance_after = result.schedule[11].outstanding_balance
        expected = compute_emi(LoanTerms(balance_after, 12, 12)).installment
        assert result.revised_emi == pytest.approx(expected)
        assert result.schedule[12].installment == pytest.approx(expected)

    def test_mixed_strategies(self, home_loan):
        result = simulate_prepayments(
            home_loan,
            [
                Prepayment(12, 100000, PrepaymentStrategy.REDUCE_INSTALLMENT),
                Prepayment(24, 100000, PrepaymentStrategy.REDUCE_TENURE),
            ],
        )
        assert result.revised_emi < result.original_emi
        assert result.periods_saved > 0


class TestPrepaymentEdgeCases:
    """Clamping, yearly periods and rejected inputs."""

    def test_prepayment_clamped_to_balance(self):
        terms = LoanTerms(100000, 12, 12)
        result = simulate_prepayments(terms, [Prepayment(6, 100000)])
        assert result.periods_used == 6
        assert result.total_prepaid < 100000
        assert result.schedule[-1].prepayment == result.total_prepaid
        assert result.schedule[-1].outstanding_balance == 0

    def test_yearly_periods(self):
        terms = LoanTerms(500000, 9, 120)
        result = simulate_prepayments(
            terms, [Prepayment(2, 50000)], period_unit="year"
        )
        assert result.schedule[23].prepayment == 50000
        assert sum(row.prepayment for row in result.schedule) == 50000

    def test_schedule_dates(self):
        terms = LoanTerms(100000, 10, 12)
        result = simulate_prepayments(terms, start_date=date(2025, 3, 1))
        assert result.schedule[0].date == "2025-03-01"
        assert result.schedule[-1].date == "2026-02-01"

    def test_total_payment(self, home_loan):
        result = simulate_prepayments(home_loan, [Prepayment(12, 200000)])
        assert result.total_payment == pytest.approx(
            home_loan.principal + result.total_interest_paid, abs=0.02
        )

    def test_duplicate_period_rejected(self, home_loan):
        with pytest.raises(InvalidInput) as exc_info:
            simulate_prepayments(
                home_loan, [Prepayment(12, 10000), Prepayment(12, 5000)]
            )
        assert "already exists" in str(exc_info.value)

    def test_period_beyond_tenure_rejected(self, home_loan):
        with pytest.raises(InvalidInput):
            simulate_prepayments(home_loan, [Prepayment(241, 10000)])

    def test_year_beyond_tenure_rejected(self, home_loan):
        with pytest.raises(InvalidInput):
            simulate_prepayments(home_loan, [Prepayment(21, 10000)], period_unit="year")

    def test_total_over_principal_rejected(self):
        terms = LoanTerms(100000, 10, 60)
        with pytest.raises(InvalidInput) as exc_info:
            simulate_prepayments(terms, [Prepayment(6, 60000), Prepayment(12, 50000)])
        assert exc_info.value.parameter == "prepayments"

    def test_unknown_unit_rejected(self, home_loan):
        with pytest.raises(InvalidInput):
            simulate_prepayments(home_loan, [], period_unit="week")

    @pytest.mark.parametrize(
        "period, amount, strategy",
        [
            (0, 1000, "reduce_tenure"),
            (1, 0, "reduce_tenure"),
            (1, -100, "reduce_tenure"),
            (1, 1000, "skip_payment"),
        ],
    )
    def test_invalid_prepayment(self, period, amount, strategy):
        with pytest.raises(InvalidInput):
            Prepayment(period, amount, strategy)
