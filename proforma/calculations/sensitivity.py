"""
Sensitivity Analysis

Re-runs the full pro forma with one assumption shifted at a time and
tabulates how the returns move. Each case is an independent
recalculation of a modified copy of the assumptions; nothing is cached.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from proforma.calculations.amortization import calculate_dscr
from proforma.calculations.assumptions import (
    Assumptions,
    DispositionPriceType,
    FinancingType,
    safe_number,
)
from proforma.calculations.metrics import ProFormaResults, calculate_before_tax_irr
from proforma.calculations.proforma import calculate

logger = logging.getLogger(__name__)

EXIT_CAP_RATE_SHIFTS = (-0.005, 0.005)
RENT_GROWTH_SHIFTS = (-0.01, 0.01)
INTEREST_RATE_SHIFTS = (-0.005, 0.005)


@dataclass(frozen=True)
class SensitivityCase:
    """Returns under one shifted assumption."""

    label: str  # e.g. "-50 bps"
    shift: float
    assumption_value: float
    irr: Optional[float]
    before_tax_irr: Optional[float]
    sale_price: float
    loan_amount: float
    year1_dscr: Optional[float]


@dataclass(frozen=True)
class SensitivityTable:
    """Base case and shifted cases for one assumption."""

    dimension: str
    base: SensitivityCase
    cases: Tuple[SensitivityCase, ...]


@dataclass(frozen=True)
class SensitivityAnalysis:
    exit_cap_rate: Optional[SensitivityTable] = None
    rent_growth: Optional[SensitivityTable] = None
    interest_rate: Optional[SensitivityTable] = None


def format_shift(shift: float) -> str:
    """Label a rate shift in basis points, e.g. -0.005 -> "-50 bps"."""
    bps = int(round(shift * 10_000))
    return f"{bps:+d} bps" if bps else "base"


def rescale_rental_income(
    rental_income: Sequence[float], growth_shift: float
) -> Tuple[float, ...]:
    """
    Approximate a change in annual rent growth.

    Year y income is scaled by (1 + shift)^(y - 1), leaving year 1 as is.
    """
    return tuple(
        income * (1 + growth_shift) ** year for year, income in enumerate(rental_income)
    )


def perturb_assumptions(
    assumptions: Assumptions, dimension: str, shift: float
) -> Assumptions:
    """
    Copy of the assumptions with one dimension shifted.

    Args:
        assumptions: Base assumptions
        dimension: "exit_cap_rate", "rent_growth" or "interest_rate"
        shift: Change as a decimal (0.005 = +50 bps)
    """
    if dimension == "exit_cap_rate":
        update = {
            "disposition_cap_rate": safe_number(assumptions.disposition_cap_rate)
            + shift
        }
    elif dimension == "rent_growth":
        if _uses_detailed_income(assumptions):
            update = {
                "rental_income": rescale_rental_income(
                    assumptions.rental_income, shift
                )
            }
        else:
            update = {
                "noi_growth_rate": safe_number(assumptions.noi_growth_rate) + shift
            }
    elif dimension == "interest_rate":
        update = {"interest_rate": safe_number(assumptions.interest_rate) + shift}
    else:
        raise ValueError(f"Unknown sensitivity dimension: {dimension}")

    return assumptions.model_copy(update=update)


def _uses_detailed_income(assumptions: Assumptions) -> bool:
    return bool(assumptions.rental_income) and safe_number(assumptions.rental_income[0]) > 0


def _dimension_value(assumptions: Assumptions, dimension: str) -> float:
    if dimension == "exit_cap_rate":
        return safe_number(assumptions.disposition_cap_rate)
    if dimension == "interest_rate":
        return safe_number(assumptions.interest_rate)
    if _uses_detailed_income(assumptions):
        return 0.0  # shift relative to the entered rent schedule
    return safe_number(assumptions.noi_growth_rate)


def _shift_in_range(dimension: str, value: float) -> bool:
    """Shifted exit cap rates must stay positive and interest rates non-negative."""
    if dimension == "exit_cap_rate":
        return value > 0
    if dimension == "interest_rate":
        return value >= 0
    return True


def _case(
    label: str, shift: float, value: float, results: ProFormaResults
) -> SensitivityCase:
    year1 = results.annual_cash_flows[0] if results.annual_cash_flows else None
    year1_dscr = None
    if year1 is not None and year1.debt_service > 0:
        year1_dscr = calculate_dscr(year1.noi, year1.debt_service)

    return SensitivityCase(
        label=label,
        shift=shift,
        assumption_value=value,
        irr=results.irr,
        before_tax_irr=calculate_before_tax_irr(results),
        sale_price=results.sale_proceeds.sale_price,
        loan_amount=results.loan_amount,
        year1_dscr=year1_dscr,
    )


def build_sensitivity_table(
    assumptions: Assumptions,
    dimension: str,
    shifts: Sequence[float],
    base_results: Optional[ProFormaResults] = None,
) -> SensitivityTable:
    """
    Recalculate the pro forma once per shift of a single dimension.

    Args:
        assumptions: Base assumptions
        dimension: Assumption to shift
        shifts: Shifts to apply, as decimals
        base_results: Already calculated base case, if available

    Returns:
        SensitivityTable with the base case and one case per shift; shifts
        that would push a cap rate to zero or a rate below zero are left out
    """
    if base_results is None:
        base_results = calculate(assumptions)

    base_value = _dimension_value(assumptions, dimension)
    base = _case("base", 0.0, base_value, base_results)

    cases = []
    for shift in shifts:
        if not _shift_in_range(dimension, base_value + shift):
            logger.debug(f"Skipping {dimension} shift {format_shift(shift)}: out of range")
            continue
        shifted = perturb_assumptions(assumptions, dimension, shift)
        results = calculate(shifted)
        cases.append(_case(format_shift(shift), shift, base_value + shift, results))

    logger.debug(f"Sensitivity on {dimension}: {len(cases)} cases")
    return SensitivityTable(dimension=dimension, base=base, cases=tuple(cases))


def run_sensitivity_analysis(
    assumptions: Assumptions, base_results: Optional[ProFormaResults] = None
) -> SensitivityAnalysis:
    """
    Run the standard sensitivity tables.

    - Exit cap rate +/-50 bps, when the sale price comes from a cap rate
    - Rent growth +/-100 bps, when there is income to grow
    - Interest rate +/-50 bps, when the deal is financed
    """
    if base_results is None:
        base_results = calculate(assumptions)

    exit_cap_rate = None
    if (
        assumptions.disposition_price_type == DispositionPriceType.caprate
        and safe_number(assumptions.disposition_cap_rate) > 0
    ):
        exit_cap_rate = build_sensitivity_table(
            assumptions, "exit_cap_rate", EXIT_CAP_RATE_SHIFTS, base_results
        )

    rent_growth = None
    if _uses_detailed_income(assumptions) or safe_number(assumptions.year1_noi) > 0:
        rent_growth = build_sensitivity_table(
            assumptions, "rent_growth", RENT_GROWTH_SHIFTS, base_results
        )

    interest_rate = None
    if (
        assumptions.financing_type != FinancingType.cash
        and safe_number(assumptions.interest_rate) > 0
    ):
        interest_rate = build_sensitivity_table(
            assumptions, "interest_rate", INTEREST_RATE_SHIFTS, base_results
        )

    return SensitivityAnalysis(
        exit_cap_rate=exit_cap_rate,
        rent_growth=rent_growth,
        interest_rate=interest_rate,
    )
