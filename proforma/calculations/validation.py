"""
Assumption Validation

Pre-flight checks that return human-readable problems instead of
raising. An empty list means the assumptions are valid; the caller
decides whether to calculate anyway.
"""

import math
from typing import List

from proforma.calculations.assumptions import (
    MAX_HOLD_PERIOD_YEARS,
    AmountType,
    Assumptions,
    FinancingType,
)

VALID_PAYMENTS_PER_YEAR = (1, 2, 4, 12)
PERCENT_TOLERANCE = 0.01


def _between(value, low: float, high: float) -> bool:
    """True when value is a finite number in [low, high]."""
    return value is not None and math.isfinite(value) and low <= value <= high


def _positive(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _has_detailed_income(assumptions: Assumptions) -> bool:
    return bool(assumptions.rental_income) and _positive(assumptions.rental_income[0])


def _validate_detailed_income(assumptions: Assumptions) -> List[str]:
    """Check the year-by-year arrays, reporting only the first bad year of each kind."""
    errors = []
    hold_period_years = min(max(assumptions.hold_period_years, 0), MAX_HOLD_PERIOD_YEARS)

    for i in range(hold_period_years):
        if i >= len(assumptions.rental_income) or not _positive(
            assumptions.rental_income[i]
        ):
            errors.append(f"Year {i + 1} rental income must be greater than 0")
            break

    for i, rate in enumerate(assumptions.vacancy_rates[:hold_period_years]):
        if not _between(rate, 0, 1):
            errors.append(f"Year {i + 1} vacancy rate must be between 0% and 100%")
            break

    for i, expense in enumerate(assumptions.operating_expenses[:hold_period_years]):
        if assumptions.operating_expense_type == AmountType.percentage:
            if not _between(expense, 0, 100):
                errors.append(
                    f"Year {i + 1} operating expenses must be between 0% and 100%"
                )
                break
        elif not _between(expense, 0, math.inf):
            errors.append(f"Year {i + 1} operating expenses must be positive")
            break

    return errors


def validate_assumptions(assumptions: Assumptions) -> List[str]:
    """
    Validate pro forma assumptions.

    Args:
        assumptions: Assumptions to check

    Returns:
        List of problems, empty when valid
    """
    errors = []

    if not _positive(assumptions.purchase_price):
        errors.append("Purchase price must be greater than 0")

    # Income - detailed arrays or legacy year-1 NOI
    has_detailed_income = _has_detailed_income(assumptions)
    if not has_detailed_income and not _positive(assumptions.year1_noi):
        errors.append("Either detailed income structure or Year 1 NOI must be provided")

    if has_detailed_income:
        errors.extend(_validate_detailed_income(assumptions))

    if assumptions.noi_growth_rate is not None and not _between(
        assumptions.noi_growth_rate, -0.5, 1
    ):
        errors.append("NOI growth rate must be between -50% and 100%")

    # Financing
    financed = assumptions.financing_type != FinancingType.cash

    if not _between(assumptions.loan_amount, 0, math.inf):
        errors.append("Loan amount must be 0 or greater")
    elif (
        _positive(assumptions.purchase_price)
        and assumptions.loan_amount > assumptions.purchase_price
    ):
        errors.append("Loan amount cannot exceed purchase price")

    if not _between(assumptions.interest_rate, 0, 1):
        errors.append("Interest rate must be between 0% and 100%")

    if financed and _positive(assumptions.loan_amount):
        if not _positive(assumptions.loan_term_years):
            errors.append("Loan term must be greater than 0 years")
        if not _positive(assumptions.amortization_years):
            errors.append("Amortization period must be greater than 0 years")
        if assumptions.payments_per_year not in VALID_PAYMENTS_PER_YEAR:
            errors.append("Payments per year must be 1, 2, 4 or 12")

    # Exit
    if not 1 <= assumptions.hold_period_years <= MAX_HOLD_PERIOD_YEARS:
        errors.append(f"Hold period must be between 1 and {MAX_HOLD_PERIOD_YEARS} years")

    if not _between(assumptions.ordinary_income_tax_rate, 0, 1):
        errors.append("Ordinary income tax rate must be between 0% and 100%")
    if not _between(assumptions.capital_gains_tax_rate, 0, 1):
        errors.append("Capital gains tax rate must be between 0% and 100%")
    if not _between(assumptions.depreciation_recapture_rate, 0, 1):
        errors.append("Depreciation recapture rate must be between 0% and 100%")
    if assumptions.tax_rate is not None and not _between(assumptions.tax_rate, 0, 1):
        errors.append("Tax rate must be between 0% and 100%")

    for cap_rate in (assumptions.exit_cap_rate, assumptions.disposition_cap_rate):
        if cap_rate and not _between(cap_rate, 1e-12, 1):
            errors.append("Exit cap rate must be between 0% and 100%")
            break

    # Land / improvements
    land = assumptions.land_percentage
    improvements = assumptions.improvements_percentage
    if not _between(land + improvements, 100 - PERCENT_TOLERANCE, 100 + PERCENT_TOLERANCE):
        errors.append("Land % and Improvements % must add up to 100%")
    if not _between(land, 0, 100):
        errors.append("Land percentage must be between 0% and 100%")
    if not _between(improvements, 0, 100):
        errors.append("Improvements percentage must be between 0% and 100%")

    return errors
