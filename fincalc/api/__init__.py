"""
API routes for the calculators.
"""

from fastapi import APIRouter

from fincalc.api import loans, investments, withdrawals, expenses

router = APIRouter()

# Include sub-routers
router.include_router(loans.router, prefix="/loans", tags=["loans"])
router.include_router(investments.router, prefix="/investments", tags=["investments"])
router.include_router(withdrawals.router, prefix="/withdrawals", tags=["withdrawals"])
router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
