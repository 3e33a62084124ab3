"""
Tests for group expense settlement and transaction categorization.
"""

import pytest

from fincalc.calculations.errors import InvalidInput
from fincalc.calculations.settlement import (
    Expense,
    minimal_settlements,
    net_balances,
    split_expenses,
)
from fincalc.calculations.categorization import (
    Transaction,
    analyze_transactions,
    categorize,
    month_key,
)


def apply_settlements(balances, settlements):
    remaining = dict(balances)
    for settlement in settlements:
        remaining[settlement.from_member] += settlement.amount
        remaining[settlement.to_member] -= settlement.amount
    return remaining


class TestNetBalances:
    """Test balance calculation."""

    def test_single_shared_expense(self):
        balances = net_balances([Expense(300, "A", ["A", "B", "C"])])
        assert balances == pytest.approx({"A": 200, "B": -100, "C": -100})

    def test_balances_sum_to_zero(self):
        balances = net_balances(
            [
                Expense(300, "A", ["A", "B", "C"]),
                Expense(100, "B", ["A", "B"]),
                Expense(45.5, "C", ["B", "C"]),
            ]
        )
        assert abs(sum(balances.values())) < 1e-9

    def test_roster_members_without_expenses(self):
        balances = net_balances([Expense(100, "A", ["A", "B"])], members=["A", "B", "D"])
        assert balances["D"] == 0
        assert list(balances) == ["A", "B", "D"]

    def test_unknown_member_rejected(self):
        with pytest.raises(InvalidInput):
            net_balances([Expense(100, "Z", ["A", "B"])], members=["A", "B"])

    def test_empty_split_rejected(self):
        with pytest.raises(InvalidInput):
            net_balances([Expense(100, "A", [])])

    def test_non_positive_amount_rejected(self):
        with pytest.raises(InvalidInput):
            net_balances([Expense(0, "A", ["A", "B"])])

    def test_duplicate_splitters_counted_once(self):
        balances = net_balances([Expense(100, "A", ["A", "B", "B"])])
        assert balances == pytest.approx({"A": 50, "B": -50})


class TestSettlements:
    """Test greedy settlement."""

    def test_three_member_scenario(self):
        settlements = minimal_settlements({"A": 200, "B": -100, "C": -100})
        assert len(settlements) == 2
        assert {(s.from_member, s.to_member) for s in settlements} == {("B", "A"), ("C", "A")}
        assert all(s.amount == pytest.approx(100) for s in settlements)

    def test_largest_pair_matched_first(self):
        settlements = minimal_settlements({"A": 50, "B": 150, "C": -120, "D": -80})
        first = settlements[0]
        assert (first.from_member, first.to_member) == ("C", "B")
        assert first.amount == pytest.approx(120)

    def test_settlements_clear_balances(self):
        balances = net_balances(
            [
                Expense(1200, "A", ["A", "B", "C", "D"]),
                Expense(300, "B", ["B", "C"]),
                Expense(90, "D", ["A", "B", "C", "D"]),
                Expense(55.55, "C", ["A", "D"]),
            ]
        )
        settlements = minimal_settlements(balances)
        remaining = apply_settlements(balances, settlements)
        assert all(abs(amount) < 0.01 for amount in remaining.values())

        owed = sum(amount for amount in balances.values() if amount > 0)
        assert sum(s.amount for s in settlements) <= owed + 1e-9

    def test_balances_within_tolerance_are_settled(self):
        assert minimal_settlements({"A": 0.005, "B": -0.005}) == []

    def test_no_balances(self):
        assert minimal_settlements({}) == []


class TestSplitExpenses:
    """Test the expense split summary."""

    def test_summary(self):
        summary = split_expenses(
            [Expense(300, "A", ["A", "B", "C"]), Expense(60, "B", ["B", "C"])],
            members=["A", "B", "C"],
        )
        assert summary.total_expenses == 360
        assert summary.paid == {"A": 300, "B": 60, "C": 0}
        assert summary.balances["C"] == pytest.approx(-130)
        remaining = apply_settlements(summary.balances, summary.settlements)
        assert all(abs(amount) < 0.01 for amount in remaining.values())

    def test_requires_expenses(self):
        with pytest.raises(InvalidInput):
            split_expenses([])


class TestCategorize:
    """Test keyword categorization."""

    @pytest.mark.parametrize(
        "description, category",
        [
            ("SWIGGY ORDER #123", "Food & Dining"),
            ("UNKNOWN VENDOR XYZ", "Miscellaneous"),
            ("Airtel recharge", "Bills & Utilities"),
            ("Uber trip", "Petrol & Transportation"),
            ("NETFLIX.COM", "Shopping & Entertainment"),
            ("Apollo Pharmacy", "Healthcare"),
            ("", "Miscellaneous"),
        ],
    )
    def test_categories(self, description, category):
        assert categorize(description) == category

    def test_first_category_wins(self):
        """Food keywords are checked before transport keywords."""
        assert categorize("Hotel pickup by Uber") == "Food & Dining"

    def test_case_insensitive(self):
        assert categorize("zOmAtO") == categorize("ZOMATO") == "Food & Dining"


class TestAnalyzeTransactions:
    """Test spending analysis."""

    @pytest.fixture
    def transactions(self):
        return [
            Transaction("2024-01-05", "Swiggy order", 400),
            Transaction("2024-01-20", "Zomato dinner", -600),
            Transaction("2024-02-03", "Uber ride", 250),
            Transaction("2024-02-14", "Amazon purchase", 1750),
            Transaction("", "Apollo pharmacy", 500),
            Transaction("2024-02-15", "Zero amount", 0),
            Transaction("2024-02-16", "   ", 100),
        ]

    def test_totals(self, transactions):
        analysis = analyze_transactions(transactions)
        assert analysis.transaction_count == 5
        assert analysis.total_spending == 3500
        assert analysis.average_transaction == 700

    def test_category_totals(self, transactions):
        analysis = analyze_transactions(transactions)
        assert analysis.category_totals == {
            "Food & Dining": 1000,
            "Petrol & Transportation": 250,
            "Shopping & Entertainment": 1750,
            "Healthcare": 500,
        }
        assert analysis.highest_category == "Shopping & Entertainment"
        assert analysis.highest_category_share == pytest.approx(50)

    def test_monthly_totals(self, transactions):
        analysis = analyze_transactions(transactions)
        assert analysis.monthly_totals == {
            "2024-01": 1000,
            "2024-02": 2000,
            "Unknown": 500,
        }
        assert analysis.months_spanned == 2
        assert analysis.monthly_average == 1750

    def test_highlights(self, transactions):
        analysis = analyze_transactions(transactions)
        assert analysis.largest_transaction.description == "Amazon purchase"
        assert analysis.food_share_high

    def test_no_usable_transactions(self):
        with pytest.raises(InvalidInput):
            analyze_transactions([Transaction("2024-01-01", "Refund", 0)])

    def test_month_key(self):
        assert month_key("2024-03-09") == "2024-03"
        assert month_key("") == "Unknown"
