"""
Depreciation Calculations

Straight-line cost recovery of the improvements portion of the purchase
price. No mid-month or half-year convention is applied: every year inside
the recovery period receives an equal share of the basis.
"""

RESIDENTIAL_RECOVERY_YEARS = 27.5
NONRESIDENTIAL_RECOVERY_YEARS = 39.0


def default_recovery_years(property_type: str) -> float:
    """Recovery period used when none is supplied."""
    if property_type == "residential":
        return RESIDENTIAL_RECOVERY_YEARS
    return NONRESIDENTIAL_RECOVERY_YEARS


def calculate_depreciable_basis(
    purchase_price: float, improvements_percentage: float
) -> float:
    """
    Portion of the purchase price attributable to improvements.

    Args:
        purchase_price: Property purchase price
        improvements_percentage: Improvements share of value (0-100)
    """
    return purchase_price * improvements_percentage / 100


def calculate_depreciation(basis: float, recovery_years: float, year: int) -> float:
    """
    Calculate depreciation for a given year.

    Args:
        basis: Depreciable basis
        recovery_years: Recovery period in years
        year: Year of ownership (1-based)

    Returns:
        Depreciation deduction for the year
    """
    if year < 1 or year > recovery_years:
        return 0.0
    return basis / recovery_years
