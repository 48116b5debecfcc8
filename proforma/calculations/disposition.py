"""
Disposition (Sale) Calculations

Computes the terminal-year sale: price, selling costs, adjusted basis,
the split of the gain between depreciation recapture and capital gains,
and after-tax sale proceeds.
"""

from dataclasses import dataclass
from typing import Tuple

from proforma.calculations.assumptions import (
    AmountType,
    DispositionPriceType,
    ResolvedAssumptions,
)


@dataclass(frozen=True)
class SaleProceeds:
    """Sale of the property at the end of the hold period."""

    # Sale price
    final_year_noi: float
    exit_cap_rate: float  # cap rate used, or implied by a fixed price
    sale_price: float

    # Costs & net proceeds
    selling_costs: float
    net_sale_proceeds: float

    # Basis
    original_basis: float  # purchase price + acquisition costs
    accumulated_depreciation: float
    adjusted_basis: float

    # Loan & equity
    loan_balance: float
    before_tax_sale_proceeds: float

    # Gain
    total_gain: float
    depreciation_recapture: float
    capital_gains: float

    # Taxes
    capital_gains_tax_rate: float
    depreciation_recapture_rate: float
    capital_gains_tax: float
    depreciation_recapture_tax: float
    taxes_on_sale: float

    after_tax_sale_proceeds: float


def estimate_sale_price(noi: float, cap_rate: float) -> float:
    """Direct capitalization: value = NOI / cap rate."""
    return noi / cap_rate


def resolve_sale_price(
    inputs: ResolvedAssumptions, final_year_noi: float
) -> Tuple[float, float]:
    """
    Determine the sale price and the cap rate it represents.

    Returns:
        (sale_price, exit_cap_rate)
    """
    if (
        inputs.disposition_price_type == DispositionPriceType.dollar
        and inputs.disposition_price > 0
    ):
        sale_price = inputs.disposition_price
        implied_cap_rate = final_year_noi / sale_price if final_year_noi > 0 else 0.0
        return sale_price, implied_cap_rate

    if (
        inputs.disposition_price_type == DispositionPriceType.caprate
        and inputs.disposition_cap_rate > 0
    ):
        cap_rate = inputs.disposition_cap_rate
        return estimate_sale_price(final_year_noi, cap_rate), cap_rate

    # Legacy fields
    if inputs.legacy_sale_price > 0:
        sale_price = inputs.legacy_sale_price
    elif inputs.legacy_exit_cap_rate > 0:
        return (
            estimate_sale_price(final_year_noi, inputs.legacy_exit_cap_rate),
            inputs.legacy_exit_cap_rate,
        )
    else:
        sale_price = inputs.purchase_price

    implied_cap_rate = (
        final_year_noi / sale_price if final_year_noi > 0 and sale_price > 0 else 0.0
    )
    return sale_price, implied_cap_rate


def resolve_selling_costs(inputs: ResolvedAssumptions, sale_price: float) -> float:
    """Selling costs as a fixed amount or a fraction of the sale price."""
    if inputs.cost_of_sale_type == AmountType.dollar and inputs.cost_of_sale_amount > 0:
        return inputs.cost_of_sale_amount
    if (
        inputs.cost_of_sale_type == AmountType.percentage
        and inputs.cost_of_sale_percentage > 0
    ):
        return sale_price * inputs.cost_of_sale_percentage
    return sale_price * inputs.legacy_selling_costs


def split_gain(total_gain: float, accumulated_depreciation: float) -> Tuple[float, float]:
    """
    Split a gain into depreciation recapture and capital gains.

    Recapture is the lesser of depreciation taken and the gain; the
    remainder is capital gain. Both are non-negative.

    Returns:
        (depreciation_recapture, capital_gains)
    """
    depreciation_recapture = max(0.0, min(accumulated_depreciation, total_gain))
    capital_gains = max(0.0, total_gain - depreciation_recapture)
    return depreciation_recapture, capital_gains


def calculate_sale_proceeds(
    inputs: ResolvedAssumptions,
    final_year_noi: float,
    final_loan_balance: float,
    accumulated_depreciation: float,
) -> SaleProceeds:
    """
    Calculate sale proceeds at the end of the hold period.

    Args:
        inputs: Resolved assumptions
        final_year_noi: NOI of the last hold-period year
        final_loan_balance: Loan balance at the end of the last year
        accumulated_depreciation: Depreciation taken over the hold period

    Returns:
        SaleProceeds with before- and after-tax proceeds
    """
    sale_price, exit_cap_rate = resolve_sale_price(inputs, final_year_noi)
    selling_costs = resolve_selling_costs(inputs, sale_price)

    net_sale_proceeds = sale_price - selling_costs
    before_tax_sale_proceeds = net_sale_proceeds - final_loan_balance

    original_basis = inputs.purchase_price + inputs.acquisition_costs
    adjusted_basis = original_basis - accumulated_depreciation
    total_gain = max(0.0, sale_price - selling_costs - adjusted_basis)

    depreciation_recapture, capital_gains = split_gain(
        total_gain, accumulated_depreciation
    )

    capital_gains_tax = capital_gains * inputs.capital_gains_tax_rate
    depreciation_recapture_tax = (
        depreciation_recapture * inputs.depreciation_recapture_rate
    )
    taxes_on_sale = capital_gains_tax + depreciation_recapture_tax

    return SaleProceeds(
        final_year_noi=final_year_noi,
        exit_cap_rate=exit_cap_rate,
        sale_price=sale_price,
        selling_costs=selling_costs,
        net_sale_proceeds=net_sale_proceeds,
        original_basis=original_basis,
        accumulated_depreciation=accumulated_depreciation,
        adjusted_basis=adjusted_basis,
        loan_balance=final_loan_balance,
        before_tax_sale_proceeds=before_tax_sale_proceeds,
        total_gain=total_gain,
        depreciation_recapture=depreciation_recapture,
        capital_gains=capital_gains,
        capital_gains_tax_rate=inputs.capital_gains_tax_rate,
        depreciation_recapture_rate=inputs.depreciation_recapture_rate,
        capital_gains_tax=capital_gains_tax,
        depreciation_recapture_tax=depreciation_recapture_tax,
        taxes_on_sale=taxes_on_sale,
        after_tax_sale_proceeds=before_tax_sale_proceeds - taxes_on_sale,
    )
