"""
Pro Forma Calculation Engine

Runs the full pipeline for one set of assumptions:

    resolve -> project annual cash flows -> sale -> return metrics

Every call recomputes the whole hold period from the assumptions alone,
so identical assumptions always produce identical results. The pipeline
never raises: invalid input and any error while projecting both return
degenerate results, tagged with a status and a reason.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from proforma.calculations.amortization import calculate_dscr
from proforma.calculations.assumptions import (
    MAX_HOLD_PERIOD_YEARS,
    Assumptions,
    FinancingType,
    resolve_assumptions,
    safe_number,
)
from proforma.calculations.cashflow import AnnualCashflow, project_cash_flows
from proforma.calculations.disposition import SaleProceeds, calculate_sale_proceeds
from proforma.calculations.metrics import (
    ProFormaResults,
    build_results,
    calculate_after_tax_npv,
    calculate_before_tax_equity_multiple,
    calculate_before_tax_irr,
    calculate_before_tax_npv,
    calculate_debt_yield,
    calculate_purchase_cap_rate,
    calculate_total_equity,
)

logger = logging.getLogger(__name__)


class CalculationStatus(str, enum.Enum):
    ok = "ok"
    invalid_input = "invalid_input"
    fault = "fault"


@dataclass(frozen=True)
class ProFormaOutcome:
    """Results plus whether they came from a complete calculation."""

    status: CalculationStatus
    results: ProFormaResults
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == CalculationStatus.ok


def degenerate_results(assumptions: Assumptions) -> ProFormaResults:
    """
    Fully populated zero results for input that cannot be projected.

    Equity is the raw price less the loan, and the property is assumed
    to sell for its purchase price with no gain.
    """
    hold_period_years = int(safe_number(assumptions.hold_period_years))
    hold_period_years = min(max(hold_period_years, 0), MAX_HOLD_PERIOD_YEARS)
    purchase_price = safe_number(assumptions.purchase_price)
    loan_amount = (
        0.0
        if assumptions.financing_type == FinancingType.cash
        else safe_number(assumptions.loan_amount)
    )
    equity = max(0.0, purchase_price - loan_amount)

    annual = tuple(
        AnnualCashflow(
            year=year,
            noi=0.0,
            debt_service=0.0,
            interest_expense=0.0,
            principal_payment=0.0,
            before_tax_cash_flow=0.0,
            depreciation=0.0,
            loan_cost_amortization=0.0,
            taxable_income=0.0,
            taxes=0.0,
            after_tax_cash_flow=0.0,
            loan_balance=0.0,
            cumulative_depreciation=0.0,
        )
        for year in range(1, hold_period_years + 1)
    )

    sale_proceeds = SaleProceeds(
        final_year_noi=0.0,
        exit_cap_rate=0.0,
        sale_price=purchase_price,
        selling_costs=0.0,
        net_sale_proceeds=purchase_price,
        original_basis=purchase_price,
        accumulated_depreciation=0.0,
        adjusted_basis=purchase_price,
        loan_balance=0.0,
        before_tax_sale_proceeds=purchase_price,
        total_gain=0.0,
        depreciation_recapture=0.0,
        capital_gains=0.0,
        capital_gains_tax_rate=0.0,
        depreciation_recapture_rate=0.0,
        capital_gains_tax=0.0,
        depreciation_recapture_tax=0.0,
        taxes_on_sale=0.0,
        after_tax_sale_proceeds=purchase_price,
    )

    return ProFormaResults(
        total_equity_invested=equity,
        annual_cash_flows=annual,
        sale_proceeds=sale_proceeds,
        total_cash_returned=equity,
        net_profit=0.0,
        irr=None,
        equity_multiple=1.0 if equity > 0 else 0.0,
        average_cash_on_cash=0.0,
        total_tax_savings=0.0,
    )


def _input_problem(assumptions: Assumptions) -> Optional[str]:
    if not safe_number(assumptions.purchase_price) > 0:
        return "Purchase price must be greater than 0"
    hold_period_years = safe_number(assumptions.hold_period_years)
    if hold_period_years < 1 or hold_period_years > MAX_HOLD_PERIOD_YEARS:
        return f"Hold period must be between 1 and {MAX_HOLD_PERIOD_YEARS} years"
    return None


def _project(assumptions: Assumptions) -> ProFormaResults:
    inputs = resolve_assumptions(assumptions)
    projection = project_cash_flows(inputs)
    final_year = projection.final_year

    sale_proceeds = calculate_sale_proceeds(
        inputs,
        final_year_noi=final_year.noi,
        final_loan_balance=final_year.loan_balance,
        accumulated_depreciation=projection.cumulative_depreciation,
    )

    total_equity = calculate_total_equity(
        inputs.purchase_price,
        inputs.acquisition_costs,
        inputs.total_loan_costs,
        inputs.loan_amount,
    )

    return build_results(
        total_equity,
        projection.annual,
        sale_proceeds,
        loan_amount=inputs.loan_amount,
        acquisition_costs=inputs.acquisition_costs,
        total_loan_costs=inputs.total_loan_costs,
    )


def run_pro_forma(assumptions: Assumptions) -> ProFormaOutcome:
    """
    Calculate the pro forma and report how the calculation went.

    Args:
        assumptions: Complete input assumptions

    Returns:
        ProFormaOutcome; results are degenerate unless status is ok
    """
    problem = _input_problem(assumptions)
    if problem:
        logger.warning(f"Pro forma not projected: {problem}")
        return ProFormaOutcome(
            status=CalculationStatus.invalid_input,
            results=degenerate_results(assumptions),
            reason=problem,
        )

    try:
        results = _project(assumptions)
    except Exception as e:
        logger.error(f"Pro forma calculation failed: {str(e)}")
        return ProFormaOutcome(
            status=CalculationStatus.fault,
            results=degenerate_results(assumptions),
            reason=f"{type(e).__name__}: {e}",
        )

    logger.debug(
        f"Pro forma calculated: {len(results.annual_cash_flows)} years, irr={results.irr}"
    )
    return ProFormaOutcome(status=CalculationStatus.ok, results=results)


def calculate(assumptions: Assumptions) -> ProFormaResults:
    """Calculate the pro forma. Never raises."""
    return run_pro_forma(assumptions).results


def cash_purchase(assumptions: Assumptions) -> Assumptions:
    """Copy of the assumptions with all financing removed."""
    return assumptions.model_copy(
        update={
            "financing_type": FinancingType.cash,
            "loan_amount": 0.0,
            "interest_rate": 0.0,
            "loan_term_years": 0.0,
            "amortization_years": 0.0,
            "loan_costs": 0.0,
            "target_dscr": None,
            "target_ltv": None,
        }
    )


def calculate_unlevered_irr(assumptions: Assumptions) -> Optional[float]:
    """After-tax IRR of the same deal bought for cash."""
    return calculate(cash_purchase(assumptions)).irr


def calculate_unlevered_before_tax_irr(assumptions: Assumptions) -> Optional[float]:
    """Before-tax IRR of the same deal bought for cash."""
    return calculate_before_tax_irr(calculate(cash_purchase(assumptions)))


@dataclass(frozen=True)
class ReturnSummary:
    """Headline return metrics for display next to the pro forma."""

    irr: Optional[float]
    before_tax_irr: Optional[float]
    unlevered_irr: Optional[float]
    unlevered_before_tax_irr: Optional[float]
    npv: float
    before_tax_npv: float
    discount_rate: float
    equity_multiple: float
    before_tax_equity_multiple: float
    average_cash_on_cash: float
    purchase_cap_rate: float  # percent
    debt_yield: float  # percent
    year1_dscr: Optional[float]  # None when there is no debt service


def summarize_returns(
    assumptions: Assumptions,
    results: ProFormaResults,
    discount_rate: float = 0.10,
) -> ReturnSummary:
    """
    Collect the headline metrics for a calculated pro forma.

    The unlevered figures re-run the whole pipeline as a cash purchase.
    """
    year1_noi = results.annual_cash_flows[0].noi if results.annual_cash_flows else 0.0
    year1_debt_service = (
        results.annual_cash_flows[0].debt_service if results.annual_cash_flows else 0.0
    )

    return ReturnSummary(
        irr=results.irr,
        before_tax_irr=calculate_before_tax_irr(results),
        unlevered_irr=calculate_unlevered_irr(assumptions),
        unlevered_before_tax_irr=calculate_unlevered_before_tax_irr(assumptions),
        npv=calculate_after_tax_npv(results, discount_rate),
        before_tax_npv=calculate_before_tax_npv(results, discount_rate),
        discount_rate=discount_rate,
        equity_multiple=results.equity_multiple,
        before_tax_equity_multiple=calculate_before_tax_equity_multiple(results),
        average_cash_on_cash=results.average_cash_on_cash,
        purchase_cap_rate=calculate_purchase_cap_rate(
            year1_noi, safe_number(assumptions.purchase_price)
        ),
        debt_yield=calculate_debt_yield(year1_noi, results.loan_amount),
        year1_dscr=(
            calculate_dscr(year1_noi, year1_debt_service)
            if year1_debt_service > 0
            else None
        ),
    )
