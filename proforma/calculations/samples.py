"""
Sample Assumptions

Realistic assumption sets for demos, the sample endpoint and tests.
"""

from typing import Dict, List

from proforma.calculations.assumptions import (
    AmountType,
    Assumptions,
    DispositionPriceType,
    FinancingType,
    PropertyType,
)


def _grown(base: float, growth: float, years: int) -> tuple:
    return tuple(base * (1 + growth) ** i for i in range(years))


def generate_sample_assumptions() -> Assumptions:
    """
    $2M commercial building, 70% LTV, 10-year hold, 7.5% exit cap.

    Rental income starts at $240k and grows 3% a year.
    """
    return Assumptions(
        purchase_price=2_000_000,
        acquisition_costs=4,  # 4% of purchase price
        acquisition_cost_type=AmountType.percentage,
        rental_income=_grown(240_000, 0.03, 10),
        other_income=(0.0,) * 10,
        vacancy_rates=(0.05,) * 10,
        operating_expenses=(40.0,) * 10,  # 40% of EGI
        operating_expense_type=AmountType.percentage,
        year1_noi=180_000,
        noi_growth_rate=0.03,
        financing_type=FinancingType.ltv,
        loan_amount=1_400_000,
        interest_rate=0.065,
        loan_term_years=10,
        amortization_years=30,
        payments_per_year=12,
        loan_costs=2.0,  # 2% of loan
        loan_cost_type=AmountType.percentage,
        target_ltv=70,
        property_type=PropertyType.commercial,
        depreciation_years=39,
        land_percentage=20,
        improvements_percentage=80,
        ordinary_income_tax_rate=0.35,
        capital_gains_tax_rate=0.20,
        depreciation_recapture_rate=0.25,
        hold_period_years=10,
        disposition_price_type=DispositionPriceType.caprate,
        disposition_cap_rate=0.075,
        cost_of_sale_type=AmountType.percentage,
        cost_of_sale_percentage=0.06,
    )


SAMPLE_SCENARIOS: Dict[str, Dict] = {
    "standard": {
        "name": "Standard Office Building",
        "description": "Conservative 65% LTV office investment with stable income growth",
        "update": {
            "rental_income": _grown(240_000, 0.03, 7),
            "vacancy_rates": (0.05,) * 7,
            "operating_expenses": (40.0,) * 7,
            "loan_amount": 1_300_000,
            "target_ltv": 65,
            "loan_term_years": 10,
            "hold_period_years": 7,
        },
    },
    "nnn": {
        "name": "Triple Net Retail",
        "description": "Single-tenant NNN retail with long-term lease and minimal expenses",
        "update": {
            "purchase_price": 3_500_000,
            "acquisition_costs": 2.5,
            "rental_income": _grown(350_000, 0.02, 15),
            "vacancy_rates": (0.0,) * 15,
            "operating_expenses": (5.0,) * 15,
            "loan_amount": 2_450_000,
            "interest_rate": 0.055,
            "loan_term_years": 15,
            "amortization_years": 25,
            "loan_costs": 1.5,
            "target_ltv": 70,
            "land_percentage": 25,
            "improvements_percentage": 75,
            "hold_period_years": 15,
            "disposition_cap_rate": 0.07,
        },
    },
    "stress": {
        "name": "Stress Test Scenario",
        "description": "High interest rates, declining income, and market stress conditions",
        "update": {
            "purchase_price": 1_500_000,
            "acquisition_costs": 6,
            "rental_income": (180_000, 171_000, 162_450, 158_400, 160_000),
            "vacancy_rates": (0.08, 0.15, 0.20, 0.18, 0.15),
            "operating_expenses": (55.0,) * 5,
            "year1_noi": 74_520,
            "noi_growth_rate": -0.02,
            "loan_amount": 1_050_000,
            "interest_rate": 0.095,
            "loan_term_years": 5,
            "amortization_years": 25,
            "loan_costs": 3.5,
            "land_percentage": 15,
            "improvements_percentage": 85,
            "hold_period_years": 5,
            "disposition_cap_rate": 0.095,
        },
    },
    "quickflip": {
        "name": "Quick Flip Strategy",
        "description": "2-year hold with renovation and quick appreciation",
        "update": {
            "purchase_price": 800_000,
            "acquisition_costs": 3,
            "rental_income": (96_000, 132_000),
            "vacancy_rates": (0.20, 0.05),
            "operating_expenses": (60.0, 35.0),
            "loan_amount": 600_000,
            "interest_rate": 0.10,
            "loan_term_years": 3,
            "loan_costs": 4.0,
            "land_percentage": 10,
            "improvements_percentage": 90,
            "hold_period_years": 2,
            "disposition_cap_rate": 0.055,
        },
    },
}


def get_sample_scenario(scenario_id: str) -> Assumptions:
    """Sample assumptions for a named scenario; raises KeyError if unknown."""
    scenario = SAMPLE_SCENARIOS[scenario_id]
    return generate_sample_assumptions().model_copy(update=scenario["update"])


def get_scenario_names() -> List[Dict[str, str]]:
    return [
        {"id": scenario_id, "name": s["name"], "description": s["description"]}
        for scenario_id, s in SAMPLE_SCENARIOS.items()
    ]
