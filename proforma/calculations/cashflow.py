"""
Cash Flow Calculations

Generates annual operating cash flow projections for a real estate
investment: NOI, debt service, depreciation, taxes and after-tax cash flow
for each year of the hold period.
"""

from dataclasses import dataclass
from typing import List, Tuple

from proforma.calculations.amortization import (
    calculate_annual_debt_service,
    calculate_annual_interest_expense,
    calculate_remaining_balance,
)
from proforma.calculations.assumptions import ResolvedAssumptions
from proforma.calculations.depreciation import calculate_depreciation


@dataclass(frozen=True)
class AnnualCashflow:
    """One year of the projection."""

    year: int
    noi: float
    debt_service: float
    interest_expense: float
    principal_payment: float
    before_tax_cash_flow: float
    depreciation: float
    loan_cost_amortization: float
    taxable_income: float
    taxes: float  # negative = tax shield
    after_tax_cash_flow: float
    loan_balance: float  # at year end
    cumulative_depreciation: float


@dataclass(frozen=True)
class CashflowProjection:
    """Annual series plus the depreciation taken over the hold period."""

    annual: Tuple[AnnualCashflow, ...]
    cumulative_depreciation: float

    @property
    def final_year(self) -> AnnualCashflow:
        return self.annual[-1]


def calculate_loan_cost_amortization(
    total_loan_costs: float, loan_term_years: float, year: int
) -> float:
    """
    Loan costs deducted in a given year.

    Costs are spread over the loan term, not the amortization period.
    """
    if total_loan_costs == 0 or loan_term_years <= 0 or year > loan_term_years:
        return 0.0
    return total_loan_costs / loan_term_years


def calculate_debt_service_for_year(
    inputs: ResolvedAssumptions, year: int, annual_debt_service: float
) -> float:
    """
    Debt service paid in a given year.

    Only the payments still due are charged, so the year the loan pays off
    may be partial and later years carry nothing.
    """
    payments_per_year = inputs.payments_per_year
    remaining_periods = (
        inputs.amortization_years * payments_per_year - (year - 1) * payments_per_year
    )
    if remaining_periods >= payments_per_year:
        return annual_debt_service
    payments_due = max(0.0, remaining_periods)
    return annual_debt_service / payments_per_year * payments_due


def project_year(
    inputs: ResolvedAssumptions,
    year: int,
    annual_debt_service: float,
    cumulative_depreciation: float,
) -> AnnualCashflow:
    """
    Project a single year.

    Args:
        inputs: Resolved assumptions
        year: Year of ownership (1-based)
        annual_debt_service: Scheduled debt service for a full year
        cumulative_depreciation: Depreciation taken in prior years

    Returns:
        AnnualCashflow for the year
    """
    noi = inputs.income.noi_for_year(year)

    # === DEBT ===
    annual_debt_service = calculate_debt_service_for_year(
        inputs, year, annual_debt_service
    )
    interest_expense = calculate_annual_interest_expense(
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.amortization_years,
        year,
        inputs.payments_per_year,
    )
    principal_payment = annual_debt_service - interest_expense
    before_tax_cash_flow = noi - annual_debt_service

    # === TAX ===
    depreciation = calculate_depreciation(
        inputs.depreciable_basis, inputs.recovery_years, year
    )
    loan_cost_amortization = calculate_loan_cost_amortization(
        inputs.total_loan_costs, inputs.loan_term_years, year
    )
    taxable_income = noi - depreciation - interest_expense - loan_cost_amortization
    taxes = taxable_income * inputs.ordinary_income_tax_rate

    loan_balance = calculate_remaining_balance(
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.amortization_years,
        year * inputs.payments_per_year,
        inputs.payments_per_year,
    )

    return AnnualCashflow(
        year=year,
        noi=noi,
        debt_service=annual_debt_service,
        interest_expense=interest_expense,
        principal_payment=principal_payment,
        before_tax_cash_flow=before_tax_cash_flow,
        depreciation=depreciation,
        loan_cost_amortization=loan_cost_amortization,
        taxable_income=taxable_income,
        taxes=taxes,
        after_tax_cash_flow=before_tax_cash_flow - taxes,
        loan_balance=loan_balance,
        cumulative_depreciation=cumulative_depreciation + depreciation,
    )


def project_cash_flows(inputs: ResolvedAssumptions) -> CashflowProjection:
    """
    Generate annual cash flow projections for years 1..hold period.

    Loan balance and depreciation are derived from the year number, so
    the only value threaded between years is cumulative depreciation.
    """
    annual_debt_service = calculate_annual_debt_service(
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.amortization_years,
        inputs.payments_per_year,
    )

    annual: List[AnnualCashflow] = []
    cumulative_depreciation = 0.0

    for year in range(1, inputs.hold_period_years + 1):
        cash_flow = project_year(
            inputs, year, annual_debt_service, cumulative_depreciation
        )
        cumulative_depreciation = cash_flow.cumulative_depreciation
        annual.append(cash_flow)

    return CashflowProjection(
        annual=tuple(annual), cumulative_depreciation=cumulative_depreciation
    )


def sum_cash_flows(annual: Tuple[AnnualCashflow, ...], field: str) -> float:
    """Sum a specific field across the annual series."""
    return sum(getattr(cf, field) for cf in annual)
