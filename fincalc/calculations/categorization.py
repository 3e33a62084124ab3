"""
Transaction Categorization

Assigns card/bank transactions to spending categories by keyword and
summarizes spending by category and month.
"""

import logging
from typing import List, Dict, Iterable, Optional, Tuple
from dataclasses import dataclass, field
from dateutil import parser as date_parser

from fincalc.calculations.errors import InvalidInput, require_finite

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Miscellaneous"
UNKNOWN_MONTH = "Unknown"

# Checked in order; the first category with a matching keyword wins
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (
        "Food & Dining",
        (
            "swiggy", "zomato", "restaurant", "food", "pizza", "burger",
            "cafe", "hotel", "dining", "mcdonald", "kfc", "dominos",
        ),
    ),
    (
        "Bills & Utilities",
        (
            "recharge", "bill", "electricity", "water", "gas", "internet",
            "broadband", "mobile", "phone", "utility", "bsnl", "airtel",
            "jio", "vi ",
        ),
    ),
    (
        "Petrol & Transportation",
        (
            "petrol", "fuel", "gas station", "shell", "hp", "ioc", "uber",
            "ola", "taxi", "auto", "transport", "metro", "bus", "train",
        ),
    ),
    (
        "Shopping & Entertainment",
        (
            "amazon", "flipkart", "shopping", "mall", "store", "retail",
            "movie", "cinema", "theater", "game", "entertainment", "netflix",
            "spotify", "prime",
        ),
    ),
    (
        "Healthcare",
        (
            "hospital", "clinic", "doctor", "pharmacy", "medical", "health",
            "medicine", "apollo", "medplus",
        ),
    ),
)

# Food & Dining above this share of spending is flagged
FOOD_SHARE_THRESHOLD = 25.0


@dataclass
class Transaction:
    date: str
    description: str
    amount: float


@dataclass
class CategorizedTransaction:
    date: str
    description: str
    amount: float
    category: str


@dataclass
class TransactionAnalysis:
    """Spending summary for a set of transactions."""

    transaction_count: int
    total_spending: float
    average_transaction: float
    category_totals: Dict[str, float]
    monthly_totals: Dict[str, float]  # "YYYY-MM" keys, "Unknown" for bad dates
    months_spanned: int
    monthly_average: float
    highest_category: Optional[str]
    highest_category_share: float  # Percent of total spending
    largest_transaction: Optional[CategorizedTransaction]
    food_share_high: bool
    transactions: List[CategorizedTransaction] = field(default_factory=list)


def categorize(description: str) -> str:
    """
    Categorize a transaction by its description.

    Matching is a case-insensitive substring search; categories are tried
    in a fixed order and the first match wins.
    """
    desc = description.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in desc for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def month_key(value: str) -> str:
    """Bucket a date string as "YYYY-MM", or "Unknown" if it cannot be parsed."""
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return UNKNOWN_MONTH
    return f"{parsed.year:04d}-{parsed.month:02d}"


def analyze_transactions(transactions: Iterable[Transaction]) -> TransactionAnalysis:
    """
    Categorize transactions and summarize spending.

    Amounts are taken as absolute values. Transactions with a blank
    description or a zero amount are skipped.

    Args:
        transactions: Parsed (date, description, amount) records

    Returns:
        TransactionAnalysis with category and monthly totals and highlights

    Raises:
        InvalidInput: If no usable transactions remain
    """
    rows = []
    for transaction in transactions:
        description = (transaction.description or "").strip()
        amount = abs(require_finite("amount", transaction.amount))
        if not description or amount == 0:
            continue
        rows.append(
            CategorizedTransaction(
                date=transaction.date,
                description=description,
                amount=amount,
                category=categorize(description),
            )
        )

    if not rows:
        raise InvalidInput(
            "transactions",
            "at least one transaction with a description and non-zero amount",
            "No valid transactions found",
        )

    category_totals: Dict[str, float] = {}
    monthly_totals: Dict[str, float] = {}
    for row in rows:
        category_totals[row.category] = category_totals.get(row.category, 0.0) + row.amount
        month = month_key(row.date)
        monthly_totals[month] = monthly_totals.get(month, 0.0) + row.amount

    total = sum(row.amount for row in rows)
    months_spanned = len([month for month in monthly_totals if month != UNKNOWN_MONTH])
    highest_category = max(category_totals, key=category_totals.get)
    food_share = category_totals.get("Food & Dining", 0.0) / total * 100

    logger.debug(
        f"Analyzed {len(rows)} transactions across {len(category_totals)} categories"
    )

    return TransactionAnalysis(
        transaction_count=len(rows),
        total_spending=total,
        average_transaction=total / len(rows),
        category_totals=category_totals,
        monthly_totals=monthly_totals,
        months_spanned=months_spanned,
        monthly_average=total / max(months_spanned, 1),
        highest_category=highest_category,
        highest_category_share=category_totals[highest_category] / total * 100,
        largest_transaction=max(rows, key=lambda row: row.amount),
        food_share_high=food_share > FOOD_SHARE_THRESHOLD,
        transactions=rows,
    )
