"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from fincalc.main import app
from fincalc.calculations.amortization import LoanTerms


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def home_loan():
    """1,000,000 at 10% over 20 years."""
    return LoanTerms(principal=1_000_000, annual_rate_percent=10, tenure_months=240)
