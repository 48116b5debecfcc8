"""
Input Completion

Tracks which groups of assumptions have been filled in enough to show
meaningful cash flows and sale analysis, and how far along the input
sheet is.
"""

from dataclasses import dataclass
from typing import AbstractSet

from proforma.calculations.assumptions import (
    AmountType,
    Assumptions,
    DispositionPriceType,
    FinancingType,
    PropertyType,
)

SECTION_INPUT_SHEET = "input-sheet"
SECTION_CASHFLOWS = "cashflows"
SECTION_SALE = "sale"

INPUT_SHEET_POINTS = 85


@dataclass(frozen=True)
class CompletionState:
    property_income_complete: bool
    financing_complete: bool
    tax_exit_complete: bool
    cashflows_ready: bool
    sale_analysis_ready: bool
    overall_progress: int  # percent
    input_sheet_progress: int  # percent


def _positive(value) -> bool:
    return bool(value) and value > 0


def has_income(assumptions: Assumptions) -> bool:
    """Detailed year-1 rental income or a legacy year-1 NOI is present."""
    has_detailed_income = bool(assumptions.rental_income) and _positive(
        assumptions.rental_income[0]
    )
    return has_detailed_income or _positive(assumptions.year1_noi)


def is_property_income_complete(assumptions: Assumptions) -> bool:
    """Purchase price, property type, hold period and some income."""
    if not _positive(assumptions.purchase_price):
        return False
    if assumptions.property_type == PropertyType.unspecified:
        return False
    if not _positive(assumptions.hold_period_years):
        return False
    return has_income(assumptions)


def is_financing_complete(assumptions: Assumptions) -> bool:
    """Cash deals are complete; financed deals need sizing and loan terms."""
    if assumptions.financing_type == FinancingType.cash:
        return True

    loan_terms = (
        _positive(assumptions.interest_rate)
        and _positive(assumptions.loan_term_years)
        and _positive(assumptions.amortization_years)
    )

    if assumptions.financing_type == FinancingType.dscr:
        return _positive(assumptions.target_dscr) and loan_terms
    if assumptions.financing_type == FinancingType.ltv:
        return _positive(assumptions.target_ltv) and loan_terms

    # No financing type selected
    return False


def is_tax_exit_complete(assumptions: Assumptions) -> bool:
    """Tax rates, an exit price method and a cost-of-sale method."""
    has_tax_rates = (
        assumptions.ordinary_income_tax_rate >= 0
        and assumptions.capital_gains_tax_rate >= 0
        and assumptions.depreciation_recapture_rate >= 0
    )

    has_exit_strategy = (
        assumptions.disposition_price_type == DispositionPriceType.dollar
        and _positive(assumptions.disposition_price)
    ) or (
        assumptions.disposition_price_type == DispositionPriceType.caprate
        and _positive(assumptions.disposition_cap_rate)
    )

    has_cost_of_sale = (
        assumptions.cost_of_sale_type == AmountType.dollar
        and assumptions.cost_of_sale_amount >= 0
    ) or (
        assumptions.cost_of_sale_type == AmountType.percentage
        and assumptions.cost_of_sale_percentage >= 0
    )

    return has_tax_rates and has_exit_strategy and has_cost_of_sale


def is_cashflows_ready(assumptions: Assumptions) -> bool:
    return is_property_income_complete(assumptions) and is_financing_complete(
        assumptions
    )


def is_sale_analysis_ready(assumptions: Assumptions) -> bool:
    return is_cashflows_ready(assumptions) and is_tax_exit_complete(assumptions)


def calculate_overall_progress(assumptions: Assumptions) -> int:
    """Percent of the three input sections that are complete."""
    completed = sum(
        [
            is_property_income_complete(assumptions),
            is_financing_complete(assumptions),
            is_tax_exit_complete(assumptions),
        ]
    )
    return round(completed / 3 * 100)


def calculate_input_sheet_progress(assumptions: Assumptions) -> int:
    """
    Weighted progress through the input sheet, as a percent.

    Property & income is worth 40 points (15 of them for having income),
    financing 25 and tax & exit 20.
    """
    points = 0

    # Property & income
    if _positive(assumptions.purchase_price):
        points += 10
    if assumptions.property_type != PropertyType.unspecified:
        points += 5
    if _positive(assumptions.hold_period_years):
        points += 5
    if assumptions.land_percentage >= 0 and assumptions.improvements_percentage >= 0:
        points += 5
    if has_income(assumptions):
        points += 15

    # Financing
    if assumptions.financing_type != FinancingType.unspecified:
        points += 5
    if assumptions.financing_type == FinancingType.cash:
        points += 20
    elif assumptions.financing_type != FinancingType.unspecified:
        if _positive(assumptions.interest_rate):
            points += 5
        if _positive(assumptions.loan_term_years):
            points += 5
        if _positive(assumptions.amortization_years):
            points += 5
        if (
            _positive(assumptions.target_dscr)
            or _positive(assumptions.target_ltv)
            or _positive(assumptions.loan_amount)
        ):
            points += 5

    # Tax & exit
    if assumptions.ordinary_income_tax_rate >= 0:
        points += 3
    if assumptions.capital_gains_tax_rate >= 0:
        points += 3
    if assumptions.depreciation_recapture_rate >= 0:
        points += 4
    if assumptions.disposition_price_type != DispositionPriceType.unspecified:
        points += 5
    if assumptions.cost_of_sale_type != AmountType.unspecified:
        points += 5

    return min(100, round(points / INPUT_SHEET_POINTS * 100))


def get_completion_state(assumptions: Assumptions) -> CompletionState:
    return CompletionState(
        property_income_complete=is_property_income_complete(assumptions),
        financing_complete=is_financing_complete(assumptions),
        tax_exit_complete=is_tax_exit_complete(assumptions),
        cashflows_ready=is_cashflows_ready(assumptions),
        sale_analysis_ready=is_sale_analysis_ready(assumptions),
        overall_progress=calculate_overall_progress(assumptions),
        input_sheet_progress=calculate_input_sheet_progress(assumptions),
    )


def get_section_status(
    section_id: str, assumptions: Assumptions, viewed_sections: AbstractSet[str]
) -> str:
    """
    Status of a results section: "locked", "ready", "complete" or "viewed".
    """
    if section_id in viewed_sections:
        return "viewed"

    completion = get_completion_state(assumptions)

    if section_id == SECTION_INPUT_SHEET:
        if completion.input_sheet_progress == 100:
            return "complete"
        if completion.input_sheet_progress > 0:
            return "ready"
        return "locked"

    if section_id == SECTION_CASHFLOWS:
        return "ready" if completion.cashflows_ready else "locked"

    if section_id == SECTION_SALE:
        return "ready" if completion.sale_analysis_ready else "locked"

    return "locked"
