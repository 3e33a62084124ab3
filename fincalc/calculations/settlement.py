"""
Group Expense Settlement

Net balances for a group of shared expenses and the transfers that
settle them.

The settlement is greedy: the largest creditor is matched against the
largest debtor until one side is cleared. This does not always give the
fewest possible transfers for four or more members.
"""

import logging
from typing import List, Dict, Iterable, Optional, Sequence
from dataclasses import dataclass, field

from fincalc.calculations.errors import InvalidInput, require_positive

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01


@dataclass
class Expense:
    """An amount paid by one member and shared equally among others."""

    amount: float
    paid_by: str
    split_among: Sequence[str]
    description: str = ""


@dataclass
class Settlement:
    """A transfer from a member who owes to a member who is owed."""

    from_member: str
    to_member: str
    amount: float


@dataclass
class SplitSummary:
    total_expenses: float
    paid: Dict[str, float]
    balances: Dict[str, float]
    settlements: List[Settlement] = field(default_factory=list)


def _unique(names: Iterable[str]) -> List[str]:
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


def net_balances(
    expenses: Iterable[Expense], members: Optional[Sequence[str]] = None
) -> Dict[str, float]:
    """
    Calculate each member's net position across a set of expenses.

    The payer is credited the full amount; every member in split_among is
    debited an equal share. Positive balances are owed money, negative
    balances owe money.

    Args:
        expenses: Shared expenses
        members: Group roster; members without expenses appear with a zero
            balance, and expenses naming anyone else are rejected

    Returns:
        Mapping of member to net balance

    Raises:
        InvalidInput: If an expense is malformed or names an unknown member
    """
    roster = _unique(members) if members is not None else None
    balances: Dict[str, float] = {name: 0.0 for name in roster or []}

    for expense in expenses:
        amount = require_positive("amount", expense.amount)
        splitters = _unique(expense.split_among)
        if not splitters:
            raise InvalidInput(
                "split_among",
                "at least one member",
                "Please select at least one person to split the expense among",
            )

        if roster is not None:
            for name in [expense.paid_by] + splitters:
                if name not in roster:
                    raise InvalidInput(
                        "members", "a known group member", f"Unknown member: {name}"
                    )

        share = amount / len(splitters)
        balances[expense.paid_by] = balances.get(expense.paid_by, 0.0) + amount
        for name in splitters:
            balances[name] = balances.get(name, 0.0) - share

    return balances


def minimal_settlements(
    balances: Dict[str, float], tolerance: float = DEFAULT_TOLERANCE
) -> List[Settlement]:
    """
    Settle net balances with greedy creditor/debtor matching.

    Creditors are taken largest first and debtors most negative first. The
    current pair settles the smaller of the two amounts; whichever side
    reaches zero (within tolerance) moves on to the next member.

    Args:
        balances: Net balance per member, summing to about zero
        tolerance: Amounts at or below this are treated as settled

    Returns:
        Transfers in the order they were matched
    """
    creditors = sorted(
        ([name, amount] for name, amount in balances.items() if amount > tolerance),
        key=lambda item: item[1],
        reverse=True,
    )
    debtors = sorted(
        ([name, amount] for name, amount in balances.items() if amount < -tolerance),
        key=lambda item: item[1],
    )

    settlements = []
    creditor_index = 0
    debtor_index = 0

    while creditor_index < len(creditors) and debtor_index < len(debtors):
        creditor = creditors[creditor_index]
        debtor = debtors[debtor_index]

        amount = min(creditor[1], abs(debtor[1]))
        if amount > tolerance:
            settlements.append(
                Settlement(from_member=debtor[0], to_member=creditor[0], amount=amount)
            )

        creditor[1] -= amount
        debtor[1] += amount

        if abs(creditor[1]) < tolerance:
            creditor_index += 1
        if abs(debtor[1]) < tolerance:
            debtor_index += 1

    logger.debug(
        f"Settled {len(creditors)} creditors and {len(debtors)} debtors "
        f"with {len(settlements)} transfers"
    )
    return settlements


def split_expenses(
    expenses: Iterable[Expense],
    members: Optional[Sequence[str]] = None,
    tolerance: float = DEFAULT_TOLERANCE,
) -> SplitSummary:
    """Summarize a group's expenses: totals, who paid what, and settlements."""
    expenses = list(expenses)
    if not expenses:
        raise InvalidInput("expenses", "at least one expense")

    balances = net_balances(expenses, members)

    paid = {name: 0.0 for name in balances}
    for expense in expenses:
        paid[expense.paid_by] += expense.amount

    return SplitSummary(
        total_expenses=sum(expense.amount for expense in expenses),
        paid=paid,
        balances=balances,
        settlements=minimal_settlements(balances, tolerance),
    )
