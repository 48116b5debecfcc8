"""
Financing Resolution

Turns the financing assumptions into a concrete loan. A cash purchase
carries no loan. LTV and DSCR modes size the loan from their targets
when no loan amount is given.
"""

import logging
from dataclasses import dataclass

from proforma.calculations.amortization import calculate_max_loan_for_debt_service
from proforma.calculations.assumptions import (
    DEFAULT_AMORTIZATION_YEARS,
    DEFAULT_PAYMENTS_PER_YEAR,
    AmountType,
    Assumptions,
    FinancingType,
    IncomeModel,
    safe_number,
    safe_rate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanTerms:
    """Resolved loan terms."""

    loan_amount: float
    interest_rate: float
    loan_term_years: float
    amortization_years: float
    payments_per_year: int
    total_loan_costs: float


def size_loan_by_ltv(purchase_price: float, target_ltv: float) -> float:
    """
    Size a loan from a loan-to-value target.

    Args:
        purchase_price: Property purchase price
        target_ltv: Loan-to-value target in percent (e.g., 70 for 70%)
    """
    if purchase_price <= 0 or target_ltv <= 0:
        return 0.0
    return purchase_price * target_ltv / 100


def size_loan_by_dscr(
    noi: float,
    target_dscr: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = DEFAULT_PAYMENTS_PER_YEAR,
) -> float:
    """
    Size a loan so that NOI covers debt service at the target DSCR.

    Max annual debt service = NOI / DSCR target, and the loan is the
    present value of that payment stream.
    """
    if noi <= 0 or target_dscr <= 0:
        return 0.0

    max_annual_debt_service = noi / target_dscr
    return calculate_max_loan_for_debt_service(
        max_annual_debt_service, annual_rate, amortization_years, payments_per_year
    )


def resolve_financing(
    assumptions: Assumptions, purchase_price: float, income: IncomeModel
) -> LoanTerms:
    """Resolve the loan used by the projection."""
    payments_per_year = int(safe_number(assumptions.payments_per_year))
    if payments_per_year < 1:
        payments_per_year = DEFAULT_PAYMENTS_PER_YEAR

    amortization_years = safe_number(assumptions.amortization_years)
    if amortization_years <= 0:
        amortization_years = DEFAULT_AMORTIZATION_YEARS

    if assumptions.financing_type == FinancingType.cash:
        return LoanTerms(
            loan_amount=0.0,
            interest_rate=0.0,
            loan_term_years=0.0,
            amortization_years=amortization_years,
            payments_per_year=payments_per_year,
            total_loan_costs=0.0,
        )

    interest_rate = safe_rate(assumptions.interest_rate)
    loan_amount = max(0.0, safe_number(assumptions.loan_amount))

    if loan_amount == 0 and assumptions.financing_type == FinancingType.ltv:
        loan_amount = size_loan_by_ltv(
            purchase_price, safe_number(assumptions.target_ltv)
        )
        logger.debug(f"Sized loan from LTV target: {loan_amount:.2f}")
    elif loan_amount == 0 and assumptions.financing_type == FinancingType.dscr:
        loan_amount = size_loan_by_dscr(
            income.noi_for_year(1) if assumptions.hold_period_years >= 1 else 0.0,
            safe_number(assumptions.target_dscr),
            interest_rate,
            amortization_years,
            payments_per_year,
        )
        logger.debug(f"Sized loan from DSCR target: {loan_amount:.2f}")

    raw_loan_costs = safe_number(assumptions.loan_costs)
    if loan_amount <= 0:
        total_loan_costs = 0.0
    elif assumptions.loan_cost_type == AmountType.percentage:
        total_loan_costs = loan_amount * raw_loan_costs / 100
    else:
        total_loan_costs = raw_loan_costs

    return LoanTerms(
        loan_amount=loan_amount,
        interest_rate=interest_rate,
        loan_term_years=max(0.0, safe_number(assumptions.loan_term_years)),
        amortization_years=amortization_years,
        payments_per_year=payments_per_year,
        total_loan_costs=total_loan_costs,
    )
