"""
Pro Forma Calculation Engine

Core calculation modules for real estate investment analysis: loan math,
depreciation, annual cash flows, sale, return metrics and sensitivity.
All calculations are pure functions of the input assumptions.
"""

from proforma.calculations import (
    amortization,
    assumptions,
    cashflow,
    completion,
    depreciation,
    disposition,
    financing,
    irr,
    metrics,
    proforma,
    samples,
    sensitivity,
    validation,
)

__all__ = [
    "amortization",
    "assumptions",
    "cashflow",
    "completion",
    "depreciation",
    "disposition",
    "financing",
    "irr",
    "metrics",
    "proforma",
    "samples",
    "sensitivity",
    "validation",
]
