"""
Return Metrics

Aggregates the annual series and sale proceeds into investment returns:
equity invested, IRR, NPV, equity multiple and cash-on-cash, in after-tax
and before-tax variants, plus the simple ratios shown next to them.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from proforma.calculations.cashflow import AnnualCashflow, sum_cash_flows
from proforma.calculations.disposition import SaleProceeds
from proforma.calculations.irr import calculate_irr, calculate_npv


@dataclass(frozen=True)
class ProFormaResults:
    """Outputs of one pro forma calculation."""

    total_equity_invested: float
    annual_cash_flows: Tuple[AnnualCashflow, ...]
    sale_proceeds: SaleProceeds
    total_cash_returned: float
    net_profit: float
    irr: Optional[float]  # None = undetermined
    equity_multiple: float
    average_cash_on_cash: float
    total_tax_savings: float

    loan_amount: float = 0.0
    acquisition_costs: float = 0.0
    total_loan_costs: float = 0.0


def calculate_total_equity(
    purchase_price: float,
    acquisition_costs: float,
    loan_costs: float,
    loan_amount: float,
) -> float:
    """Cash the investor puts in at closing."""
    return purchase_price + acquisition_costs + loan_costs - loan_amount


def build_cash_flow_vector(
    equity: float, operating_cash_flows: List[float], sale_proceeds: float
) -> List[float]:
    """
    Build [-equity, CF1, ..., CFN + sale proceeds].

    With an empty series only the equity outflow is returned.
    """
    vector = [-equity] + list(operating_cash_flows)
    if operating_cash_flows:
        vector[-1] += sale_proceeds
    return vector


def after_tax_cash_flow_vector(results: ProFormaResults) -> List[float]:
    return build_cash_flow_vector(
        results.total_equity_invested,
        [cf.after_tax_cash_flow for cf in results.annual_cash_flows],
        results.sale_proceeds.after_tax_sale_proceeds,
    )


def before_tax_cash_flow_vector(results: ProFormaResults) -> List[float]:
    return build_cash_flow_vector(
        results.total_equity_invested,
        [cf.before_tax_cash_flow for cf in results.annual_cash_flows],
        results.sale_proceeds.before_tax_sale_proceeds,
    )


def calculate_equity_multiple(total_returned: float, equity: float) -> float:
    """Total cash returned / equity invested (0 when no equity)."""
    if equity == 0:
        return 0.0
    return total_returned / equity


def calculate_average_cash_on_cash(
    operating_cash_flows: List[float], equity: float
) -> float:
    """Mean annual cash flow / equity invested."""
    if equity == 0 or not operating_cash_flows:
        return 0.0
    return (sum(operating_cash_flows) / len(operating_cash_flows)) / equity


def calculate_total_tax_savings(annual: Tuple[AnnualCashflow, ...]) -> float:
    """Sum of the tax shields (negative taxes) realized over the hold."""
    return sum(max(0.0, -cf.taxes) for cf in annual)


def build_results(
    total_equity_invested: float,
    annual: Tuple[AnnualCashflow, ...],
    sale_proceeds: SaleProceeds,
    loan_amount: float = 0.0,
    acquisition_costs: float = 0.0,
    total_loan_costs: float = 0.0,
) -> ProFormaResults:
    """Aggregate the annual series and sale into ProFormaResults."""
    after_tax_flows = [cf.after_tax_cash_flow for cf in annual]
    total_cash_returned = sum(after_tax_flows) + sale_proceeds.after_tax_sale_proceeds

    irr = calculate_irr(
        build_cash_flow_vector(
            total_equity_invested,
            after_tax_flows,
            sale_proceeds.after_tax_sale_proceeds,
        )
    )

    return ProFormaResults(
        total_equity_invested=total_equity_invested,
        annual_cash_flows=annual,
        sale_proceeds=sale_proceeds,
        total_cash_returned=total_cash_returned,
        net_profit=total_cash_returned - total_equity_invested,
        irr=irr,
        equity_multiple=calculate_equity_multiple(
            total_cash_returned, total_equity_invested
        ),
        average_cash_on_cash=calculate_average_cash_on_cash(
            after_tax_flows, total_equity_invested
        ),
        total_tax_savings=calculate_total_tax_savings(annual),
        loan_amount=loan_amount,
        acquisition_costs=acquisition_costs,
        total_loan_costs=total_loan_costs,
    )


def calculate_after_tax_npv(results: ProFormaResults, discount_rate: float) -> float:
    """NPV of the after-tax equity cash flows at a given rate."""
    return calculate_npv(after_tax_cash_flow_vector(results), discount_rate)


def calculate_before_tax_npv(results: ProFormaResults, discount_rate: float) -> float:
    """NPV of the before-tax equity cash flows at a given rate."""
    return calculate_npv(before_tax_cash_flow_vector(results), discount_rate)


def calculate_before_tax_irr(results: ProFormaResults) -> Optional[float]:
    return calculate_irr(before_tax_cash_flow_vector(results))


def calculate_before_tax_equity_multiple(results: ProFormaResults) -> float:
    total_returned = (
        sum_cash_flows(results.annual_cash_flows, "before_tax_cash_flow")
        + results.sale_proceeds.before_tax_sale_proceeds
    )
    return calculate_equity_multiple(total_returned, results.total_equity_invested)


def calculate_debt_yield(year1_noi: float, loan_amount: float) -> float:
    """Year-1 NOI / loan amount, in percent."""
    if loan_amount == 0:
        return 0.0
    return year1_noi / loan_amount * 100


def calculate_purchase_cap_rate(year1_noi: float, purchase_price: float) -> float:
    """Year-1 NOI / purchase price, in percent."""
    if purchase_price == 0:
        return 0.0
    return year1_noi / purchase_price * 100


def calculate_yield_on_cost(stabilized_noi: float, total_project_cost: float) -> float:
    """Stabilized NOI / total project cost, in percent."""
    if total_project_cost == 0:
        return 0.0
    return stabilized_noi / total_project_cost * 100
