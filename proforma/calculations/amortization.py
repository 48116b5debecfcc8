"""
Loan Amortization Calculations

Implements payment, balance and interest/principal math for a fixed-rate
amortizing loan, matching Excel's PMT, IPMT and PPMT functions for any
payment frequency (1, 2, 4 or 12 payments per year).
"""

from typing import List, Dict


def calculate_payment(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """
    Calculate the periodic loan payment.

    Matches Excel's PMT() function.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.065 for 6.5%)
        amortization_years: Amortization period in years
        payments_per_year: Number of payments per year

    Returns:
        Periodic payment amount (positive number)
    """
    if principal == 0:
        return 0.0

    total_payments = amortization_years * payments_per_year

    if annual_rate == 0:
        return principal / total_payments

    periodic_rate = annual_rate / payments_per_year
    growth = (1 + periodic_rate) ** total_payments

    return principal * periodic_rate * growth / (growth - 1)


def calculate_annual_debt_service(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """Calculate total debt service (P+I) paid over one year."""
    payment = calculate_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )
    return payment * payments_per_year


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_made: int,
    payments_per_year: int = 12,
) -> float:
    """
    Calculate remaining loan balance after N payments.

    The balance is the present value of the payments still outstanding.
    A zero-rate loan reduces linearly.
    """
    if principal == 0:
        return 0.0

    total_payments = amortization_years * payments_per_year

    if annual_rate == 0:
        principal_per_payment = principal / total_payments
        return max(0.0, principal - principal_per_payment * payments_made)

    if payments_made >= total_payments:
        return 0.0
    if payments_made == 0:
        return principal

    periodic_rate = annual_rate / payments_per_year
    payment = calculate_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )
    remaining_payments = total_payments - payments_made

    balance = (
        payment * (1 - (1 + periodic_rate) ** -remaining_payments) / periodic_rate
    )

    return max(0.0, balance)


def calculate_interest_for_period(
    balance: float, annual_rate: float, payments_per_year: int = 12
) -> float:
    """Interest accrued on a balance over one payment period."""
    return balance * annual_rate / payments_per_year


def calculate_principal_for_period(total_payment: float, interest: float) -> float:
    """Principal portion of a payment."""
    return total_payment - interest


def calculate_annual_interest_expense(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    year: int,
    payments_per_year: int = 12,
) -> float:
    """
    Calculate interest paid during a given loan year.

    Each period's opening balance is recomputed from the closed-form
    balance formula rather than carried forward, so the result for any
    year does not depend on the years evaluated before it.

    Args:
        principal: Original loan amount
        annual_rate: Annual interest rate as decimal
        amortization_years: Amortization period in years
        year: Loan year (1-based)
        payments_per_year: Number of payments per year

    Returns:
        Total interest for the year
    """
    total_interest = 0.0

    for period in range(1, payments_per_year + 1):
        payments_made = (year - 1) * payments_per_year + period - 1
        balance = calculate_remaining_balance(
            principal, annual_rate, amortization_years, payments_made, payments_per_year
        )
        total_interest += calculate_interest_for_period(
            balance, annual_rate, payments_per_year
        )

    return total_interest


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
    total_periods: int = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        amortization_years: Amortization period in years
        payments_per_year: Number of payments per year
        total_periods: Number of periods to generate (defaults to full amortization)

    Returns:
        List of amortization rows
    """
    schedule = []
    amortization_periods = int(round(amortization_years * payments_per_year))

    if total_periods is None:
        total_periods = amortization_periods

    payment = calculate_payment(
        principal, annual_rate, amortization_years, payments_per_year
    )

    for period in range(1, min(total_periods, amortization_periods) + 1):
        balance = calculate_remaining_balance(
            principal, annual_rate, amortization_years, period - 1, payments_per_year
        )
        interest = calculate_interest_for_period(balance, annual_rate, payments_per_year)
        principal_pmt = calculate_principal_for_period(payment, interest)

        ending_balance = calculate_remaining_balance(
            principal, annual_rate, amortization_years, period, payments_per_year
        )

        schedule.append(
            {
                "period": period,
                "year": (period - 1) // payments_per_year + 1,
                "beginning_balance": round(balance, 2),
                "payment": round(payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(ending_balance, 2),
            }
        )

        # Stop if balance is paid off
        if ending_balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


def calculate_dscr(noi: float, debt_service: float) -> float:
    """
    Calculate Debt Service Coverage Ratio (DSCR).

    Args:
        noi: Net Operating Income for the period
        debt_service: Debt service for the period

    Returns:
        DSCR ratio
    """
    if debt_service == 0:
        return float("inf")
    return noi / debt_service


def calculate_loan_constant(
    principal: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """Calculate loan constant (annual debt service / loan amount)."""
    annual_debt_service = calculate_annual_debt_service(
        principal, annual_rate, amortization_years, payments_per_year
    )
    return annual_debt_service / principal if principal > 0 else 0.0


def calculate_max_loan_for_debt_service(
    annual_debt_service: float,
    annual_rate: float,
    amortization_years: float,
    payments_per_year: int = 12,
) -> float:
    """
    Largest loan a given annual debt service can carry.

    PV = PMT x [(1 - (1 + r)^-n) / r]
    """
    if annual_debt_service <= 0:
        return 0.0

    payment = annual_debt_service / payments_per_year
    total_payments = amortization_years * payments_per_year

    if annual_rate == 0:
        return payment * total_payments

    periodic_rate = annual_rate / payments_per_year
    return payment * (1 - (1 + periodic_rate) ** -total_payments) / periodic_rate
