"""
Personal finance calculators: loans, investments, withdrawals and shared expenses.
"""

__version__ = "0.1.0"
