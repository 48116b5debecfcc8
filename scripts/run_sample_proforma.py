#!/usr/bin/env python3
"""
Print the pro forma for a sample scenario.

Usage:
    python scripts/run_sample_proforma.py [scenario]

Scenarios: standard, nnn, stress, quickflip (default: the base sample).
"""

import sys
import os

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from proforma.calculations.proforma import run_pro_forma, summarize_returns
from proforma.calculations.samples import (
    generate_sample_assumptions,
    get_sample_scenario,
    get_scenario_names,
)
from proforma.calculations.validation import validate_assumptions
from proforma.config import get_settings


def format_rate(rate):
    return "n/a" if rate is None else f"{rate * 100:.2f}%"


def main():
    if len(sys.argv) > 1:
        scenario_id = sys.argv[1]
        try:
            assumptions = get_sample_scenario(scenario_id)
        except KeyError:
            names = ", ".join(s["id"] for s in get_scenario_names())
            print(f"Unknown scenario '{scenario_id}'. Available: {names}")
            sys.exit(1)
    else:
        assumptions = generate_sample_assumptions()

    for problem in validate_assumptions(assumptions):
        print(f"Warning: {problem}")

    outcome = run_pro_forma(assumptions)
    if not outcome.ok:
        print(f"Calculation {outcome.status.value}: {outcome.reason}")

    results = outcome.results
    summary = summarize_returns(
        assumptions, results, discount_rate=get_settings().default_discount_rate
    )

    print(f"Equity invested: ${results.total_equity_invested:,.0f}")
    print(f"Loan amount:     ${results.loan_amount:,.0f}")
    print()
    print(f"{'Year':>4} {'NOI':>12} {'Debt Svc':>12} {'BTCF':>12} {'Taxes':>12} {'ATCF':>12}")
    for cf in results.annual_cash_flows:
        print(
            f"{cf.year:>4} {cf.noi:>12,.0f} {cf.debt_service:>12,.0f} "
            f"{cf.before_tax_cash_flow:>12,.0f} {cf.taxes:>12,.0f} "
            f"{cf.after_tax_cash_flow:>12,.0f}"
        )

    sale = results.sale_proceeds
    print()
    print(f"Sale price:                ${sale.sale_price:,.0f}")
    print(f"Taxes on sale:             ${sale.taxes_on_sale:,.0f}")
    print(f"After-tax sale proceeds:   ${sale.after_tax_sale_proceeds:,.0f}")
    print()
    print(f"IRR (after tax):           {format_rate(summary.irr)}")
    print(f"IRR (before tax):          {format_rate(summary.before_tax_irr)}")
    print(f"Unlevered IRR:             {format_rate(summary.unlevered_irr)}")
    print(f"Equity multiple:           {summary.equity_multiple:.2f}x")
    print(f"NPV @ {summary.discount_rate * 100:.0f}%:                ${summary.npv:,.0f}")


if __name__ == "__main__":
    main()
