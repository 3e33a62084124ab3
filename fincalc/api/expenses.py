"""
Shared expense and spending analysis API endpoints.
"""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel

from fincalc.api.common import bad_request
from fincalc.calculations.errors import InvalidInput
from fincalc.calculations.settlement import Expense, split_expenses
from fincalc.calculations.categorization import (
    Transaction,
    analyze_transactions,
    categorize,
)
from fincalc.config import get_settings

router = APIRouter()


class ExpenseInput(BaseModel):
    amount: float
    paid_by: str
    split_among: List[str]
    description: str = ""


class SplitInput(BaseModel):
    members: Optional[List[str]] = None
    expenses: List[ExpenseInput]


class CategorizeInput(BaseModel):
    descriptions: List[str]


class TransactionInput(BaseModel):
    date: str = ""
    description: str
    amount: float


class TransactionsInput(BaseModel):
    transactions: List[TransactionInput]


@router.post("/split")
async def calculate_split(inputs: SplitInput):
    """Calculate balances and settlements for a group's expenses."""
    try:
        summary = split_expenses(
            [
                Expense(
                    amount=expense.amount,
                    paid_by=expense.paid_by,
                    split_among=expense.split_among,
                    description=expense.description,
                )
                for expense in inputs.expenses
            ],
            members=inputs.members,
            tolerance=get_settings().settlement_tolerance,
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(summary)


@router.post("/categorize")
async def categorize_descriptions(inputs: CategorizeInput):
    """Categorize transaction descriptions."""
    return {
        "categories": [
            {"description": description, "category": categorize(description)}
            for description in inputs.descriptions
        ]
    }


@router.post("/transactions")
async def analyze_spending(inputs: TransactionsInput):
    """Categorize transactions and summarize spending."""
    max_transactions = get_settings().max_transactions
    try:
        if len(inputs.transactions) > max_transactions:
            raise InvalidInput("transactions", f"at most {max_transactions} records")
        analysis = analyze_transactions(
            [
                Transaction(date=t.date, description=t.description, amount=t.amount)
                for t in inputs.transactions
            ]
        )
    except InvalidInput as e:
        raise bad_request(e)
    return asdict(analysis)
