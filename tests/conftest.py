"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from finmodel.main import app


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def cash_flow_document():
    """A small business with one of every revenue stream, in the UI's camelCase."""
    return {
        "productSales": [
            {
                "unitsSold": 100,
                "pricePerUnit": 10,
                "productionCostPerUnit": 4,
                "seasonality": {"January": 2.0},
            }
        ],
        "serviceIncome": [
            {"serviceType": "Consulting", "rateOrPrice": 5, "expectedVolumePerMonth": 20}
        ],
        "subscriptionRevenue": [
            {"pricingTier": "Basic", "monthlyFee": 10, "subscribers": 100, "churnRate": 0.1}
        ],
        "licensingRoyalties": [
            {"agreementName": "Brand", "royaltyRate": 0.05, "expectedVolume": 1000}
        ],
        "otherRevenue": {
            "affiliateIncome": 10,
            "advertisingRevenue": 20,
            "grantsAndDonations": 30,
        },
        "fixedExpenses": {
            "rent": 500,
            "salaries": 0,
            "insurance": 0,
            "utilities": 0,
            "softwareSubscriptions": 0,
            "custom": [{"name": "Cleaning", "amount": 100, "description": "Weekly"}],
        },
        "variableExpenses": {
            "cogs": 0,
            "marketing": 200,
            "salesCommissions": 0,
            "supplies": 0,
            "custom": [],
        },
        "oneTimeExpenses": {
            "startupCosts": 5000,
            "capitalExpenditures": 0,
            "legalAndLicensing": 0,
            "custom": [],
        },
        "financialObligations": {
            "loanRepayments": 0,
            "interestPayments": 0,
            "taxes": 100,
            "custom": [],
        },
        "growthParameters": {
            "revenueGrowthRate": 0,
            "expenseGrowthRate": 0,
            "accountsReceivableDays": 30,
            "accountsPayableDays": 30,
            "corporateTaxRate": 21,
            "revenueGrowthModel": "exponential",
            "expenseGrowthModel": "exponential",
        },
    }
