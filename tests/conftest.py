"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from valuation.calculations.parameters import ProjectParameters


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def single_year_params():
    """One-year project that does not pay back within its horizon."""
    return ProjectParameters(
        initial_investment=100000,
        project_timeline=1,
        annual_revenues=[150000],
        operating_costs=[50000],
        tax_rate=0.25,
        discount_rate=0.10,
        depreciation_rate=0.20,
        working_capital=0,
        terminal_value=0,
    )


@pytest.fixture
def growth_params():
    """Five-year project with positive NPV at 10%."""
    return ProjectParameters(
        initial_investment=100000,
        project_timeline=5,
        annual_revenues=[60000, 60000, 60000, 60000, 60000],
        operating_costs=[20000, 20000, 20000, 20000, 20000],
        tax_rate=0.25,
        discount_rate=0.10,
        depreciation_rate=0.20,
        working_capital=0,
        terminal_value=0,
    )


@pytest.fixture
def report_params():
    """Three-year project with working capital, used for statement tests."""
    return ProjectParameters(
        initial_investment=100000,
        project_timeline=3,
        annual_revenues=[150000, 160000, 170000],
        operating_costs=[50000, 55000, 60000],
        tax_rate=0.25,
        discount_rate=0.10,
        depreciation_rate=0.20,
        working_capital=10000,
        terminal_value=0,
    )


@pytest.fixture
def params_payload():
    """JSON body for the API endpoints."""
    return {
        "initial_investment": 100000,
        "project_timeline": 5,
        "annual_revenues": [60000, 60000, 60000, 60000, 60000],
        "operating_costs": [20000, 20000, 20000, 20000, 20000],
        "tax_rate": 0.25,
        "discount_rate": 0.10,
        "depreciation_rate": 0.20,
        "working_capital": 0,
        "terminal_growth_rate": 0.02,
        "terminal_value": 0,
    }
