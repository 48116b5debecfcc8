"""
IRR and NPV Calculations

Implements IRR using Newton-Raphson method, matching Excel's IRR function
for annual cash flows. When Newton-Raphson fails and the NPV curve changes
sign somewhere on a fixed rate grid, the root is refined by bisection.
Returns None when no rate can be determined.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

MAX_ITERATIONS = 1000
TOLERANCE = 1e-6
DEFAULT_GUESS = 0.1

# Rates probed when looking for a sign change to bisect.
BRACKET_GRID = np.concatenate(
    [np.linspace(-0.99, 1.0, 200), np.linspace(1.0, 10.0, 91)[1:]]
)
BISECTION_WIDTH = 1e-12


def _npv_and_derivative(flows: np.ndarray, rate: float):
    periods = np.arange(len(flows))
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        factors = (1.0 + rate) ** periods
        npv = float(np.sum(flows / factors))
        dnpv = float(np.sum(-periods * flows / (factors * (1.0 + rate))))
    return npv, dnpv


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    The first cash flow is undiscounted (period 0).

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value
    """
    npv, _ = _npv_and_derivative(np.asarray(cash_flows, dtype=float), discount_rate)
    return npv


def _newton_irr(flows: np.ndarray, guess: float) -> Optional[float]:
    rate = guess

    for _ in range(MAX_ITERATIONS):
        if rate <= -1:
            return None

        npv, dnpv = _npv_and_derivative(flows, rate)

        if not (math.isfinite(npv) and math.isfinite(dnpv)):
            return None

        if abs(npv) < TOLERANCE:
            return rate

        if abs(dnpv) < TOLERANCE:
            return None  # Derivative too small

        new_rate = rate - npv / dnpv

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate

        rate = new_rate

    return None


def _bisect_irr(flows: np.ndarray, guess: float) -> Optional[float]:
    values = [_npv_and_derivative(flows, float(rate))[0] for rate in BRACKET_GRID]

    brackets = []
    for i in range(len(BRACKET_GRID) - 1):
        low_npv, high_npv = values[i], values[i + 1]
        if not (math.isfinite(low_npv) and math.isfinite(high_npv)):
            continue
        if low_npv == 0:
            return float(BRACKET_GRID[i])
        if low_npv * high_npv < 0:
            brackets.append((float(BRACKET_GRID[i]), float(BRACKET_GRID[i + 1])))

    if not brackets:
        return None

    # Prefer the root nearest the guess
    low, high = min(brackets, key=lambda b: abs((b[0] + b[1]) / 2 - guess))
    low_npv = _npv_and_derivative(flows, low)[0]

    for _ in range(MAX_ITERATIONS):
        mid = (low + high) / 2
        mid_npv = _npv_and_derivative(flows, mid)[0]

        if abs(mid_npv) < TOLERANCE or (high - low) < BISECTION_WIDTH:
            return mid

        if (low_npv < 0) == (mid_npv < 0):
            low, low_npv = mid, mid_npv
        else:
            high = mid

    return (low + high) / 2


def calculate_irr(
    cash_flows: Sequence[float], guess: float = DEFAULT_GUESS
) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Matches Excel's IRR() function behavior for periodic cash flows.

    Args:
        cash_flows: Array of periodic cash flows, first one at period 0
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        IRR as decimal (e.g., 0.15 for 15%), or None if it cannot be determined
    """
    if len(cash_flows) < 2:
        return None

    flows = np.asarray(cash_flows, dtype=float)

    if not np.all(np.isfinite(flows)):
        return None

    has_positive = bool(np.any(flows > 0))
    has_negative = bool(np.any(flows < 0))

    if not has_positive or not has_negative:
        return None

    rate = _newton_irr(flows, guess)
    if rate is None:
        rate = _bisect_irr(flows, guess)

    return rate


def calculate_multiple(cash_flows: List[float]) -> float:
    """
    Calculate equity multiple.

    Args:
        cash_flows: Array of cash flows (investments are negative)

    Returns:
        Multiple (e.g., 2.0 = 2.0x return)
    """
    total_inflows = sum(cf for cf in cash_flows if cf > 0)
    total_outflows = abs(sum(cf for cf in cash_flows if cf < 0))

    if total_outflows == 0:
        raise ValueError("No investment (outflows) found")

    return total_inflows / total_outflows


def calculate_profit(cash_flows: List[float]) -> float:
    """Calculate profit (total inflows minus total outflows)."""
    return sum(cash_flows)
