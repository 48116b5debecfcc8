"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from proforma.calculations.assumptions import (
    Assumptions,
    DispositionPriceType,
    FinancingType,
    PropertyType,
)
from proforma.calculations.samples import generate_sample_assumptions


@pytest.fixture
def sample_assumptions():
    """$2M commercial building, $1.4M loan at 6.5%, 10-year hold."""
    return generate_sample_assumptions()


@pytest.fixture
def cash_assumptions():
    """All-cash purchase of a building with flat $200k NOI, sold at an 8% cap."""
    return Assumptions(
        purchase_price=2_000_000,
        year1_noi=200_000,
        noi_growth_rate=0.0,
        financing_type=FinancingType.cash,
        property_type=PropertyType.commercial,
        land_percentage=20,
        improvements_percentage=80,
        ordinary_income_tax_rate=0.35,
        capital_gains_tax_rate=0.20,
        depreciation_recapture_rate=0.25,
        hold_period_years=5,
        disposition_price_type=DispositionPriceType.caprate,
        disposition_cap_rate=0.08,
    )


@pytest.fixture
def legacy_assumptions():
    """Assumptions using only the legacy year-1 NOI and combined tax rate."""
    return Assumptions(
        purchase_price=1_000_000,
        year1_noi=100_000,
        noi_growth_rate=0.03,
        financing_type=FinancingType.ltv,
        loan_amount=600_000,
        interest_rate=0.06,
        loan_term_years=10,
        amortization_years=25,
        property_type=PropertyType.residential,
        land_percentage=25,
        improvements_percentage=75,
        tax_rate=0.30,
        hold_period_years=7,
        exit_cap_rate=0.07,
        selling_costs=0.05,
    )
