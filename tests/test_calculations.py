"""
Tests for loan, depreciation and IRR calculations.
"""

import math

import numpy as np
import pytest

from proforma.calculations.amortization import (
    calculate_annual_debt_service,
    calculate_annual_interest_expense,
    calculate_dscr,
    calculate_loan_constant,
    calculate_max_loan_for_debt_service,
    calculate_payment,
    calculate_remaining_balance,
    calculate_total_interest,
    generate_amortization_schedule,
)
from proforma.calculations.depreciation import (
    calculate_depreciable_basis,
    calculate_depreciation,
    default_recovery_years,
)
from proforma.calculations.irr import (
    _bisect_irr,
    calculate_irr,
    calculate_multiple,
    calculate_npv,
    calculate_profit,
)


class TestAmortization:
    """Test loan amortization calculations."""

    def test_calculate_payment(self):
        """Test monthly payment calculation."""
        # $1M loan at 5% for 30 years
        payment = calculate_payment(1_000_000, 0.05, 30)
        assert abs(payment - 5368.22) < 0.01

    def test_fixed_rate_loan_scenario(self):
        """$1.4M at 6.5% over 30 years, monthly."""
        payment = calculate_payment(1_400_000, 0.065, 30, 12)
        assert abs(payment - 8848.95) < 0.01

        annual = calculate_annual_debt_service(1_400_000, 0.065, 30, 12)
        assert annual == pytest.approx(payment * 12)
        assert abs(annual - 106_187.4) < 0.5

    def test_zero_rate_payment(self):
        """Zero-rate loans repay principal evenly."""
        assert calculate_payment(360_000, 0.0, 30) == pytest.approx(1000.0)
        assert calculate_remaining_balance(360_000, 0.0, 30, 120) == pytest.approx(
            240_000
        )

    def test_zero_principal(self):
        assert calculate_payment(0, 0.065, 30) == 0.0
        assert calculate_remaining_balance(0, 0.065, 30, 12) == 0.0

    def test_remaining_balance_endpoints(self):
        assert calculate_remaining_balance(1_000_000, 0.06, 30, 0) == 1_000_000
        assert calculate_remaining_balance(1_000_000, 0.06, 30, 360) == 0.0
        assert calculate_remaining_balance(1_000_000, 0.06, 30, 400) == 0.0

    def test_remaining_balance_decreases(self):
        balances = [
            calculate_remaining_balance(1_000_000, 0.06, 30, n) for n in range(0, 361, 12)
        ]
        assert all(a > b for a, b in zip(balances, balances[1:]))

    def test_amortization_schedule_length(self):
        """Test amortization schedule has correct number of periods."""
        schedule = generate_amortization_schedule(
            principal=100_000, annual_rate=0.06, amortization_years=5
        )
        assert len(schedule) == 60

    def test_amortization_schedule_total_periods(self):
        schedule = generate_amortization_schedule(
            principal=100_000,
            annual_rate=0.06,
            amortization_years=5,
            total_periods=24,
        )
        assert len(schedule) == 24
        assert schedule[-1]["year"] == 2

    def test_amortization_final_balance(self):
        """Test that final balance is approximately zero."""
        schedule = generate_amortization_schedule(
            principal=100_000, annual_rate=0.06, amortization_years=5
        )
        assert abs(schedule[-1]["ending_balance"]) < 1

    def test_principal_payments_repay_loan(self):
        """Principal over the full schedule sums to the original loan."""
        schedule = generate_amortization_schedule(
            principal=1_400_000, annual_rate=0.065, amortization_years=30
        )
        total_principal = sum(row["principal"] for row in schedule)
        assert abs(total_principal - 1_400_000) < 2

        payments = sum(row["payment"] for row in schedule)
        assert abs(payments - total_principal - calculate_total_interest(schedule)) < 2

    def test_quarterly_schedule(self):
        schedule = generate_amortization_schedule(
            principal=500_000,
            annual_rate=0.08,
            amortization_years=10,
            payments_per_year=4,
        )
        assert len(schedule) == 40
        assert schedule[4]["year"] == 2
        assert abs(schedule[-1]["ending_balance"]) < 1

    def test_annual_interest_matches_schedule(self):
        schedule = generate_amortization_schedule(
            principal=1_400_000, annual_rate=0.065, amortization_years=30
        )
        for year in (1, 5, 10):
            from_schedule = sum(row["interest"] for row in schedule if row["year"] == year)
            interest = calculate_annual_interest_expense(1_400_000, 0.065, 30, year)
            assert abs(interest - from_schedule) < 1

    def test_first_year_interest(self):
        """First-year interest is a little under rate x principal."""
        interest = calculate_annual_interest_expense(1_400_000, 0.065, 30, 1)
        assert 89_000 < interest < 91_000

    def test_calculate_dscr(self):
        assert calculate_dscr(125_000, 100_000) == pytest.approx(1.25)
        assert math.isinf(calculate_dscr(125_000, 0))

    def test_loan_constant(self):
        constant = calculate_loan_constant(1_000_000, 0.05, 30)
        assert constant == pytest.approx(5368.22 * 12 / 1_000_000, rel=1e-4)
        assert calculate_loan_constant(0, 0.05, 30) == 0.0

    def test_max_loan_inverts_debt_service(self):
        debt_service = calculate_annual_debt_service(1_000_000, 0.065, 25)
        loan = calculate_max_loan_for_debt_service(debt_service, 0.065, 25)
        assert loan == pytest.approx(1_000_000, rel=1e-9)

        assert calculate_max_loan_for_debt_service(12_000, 0.0, 10) == pytest.approx(
            120_000
        )


class TestDepreciation:
    """Test straight-line depreciation."""

    def test_default_recovery_years(self):
        assert default_recovery_years("residential") == 27.5
        assert default_recovery_years("commercial") == 39.0
        assert default_recovery_years("industrial") == 39.0
        assert default_recovery_years("") == 39.0

    def test_depreciable_basis(self):
        assert calculate_depreciable_basis(2_000_000, 80) == pytest.approx(1_600_000)

    def test_annual_depreciation(self):
        assert calculate_depreciation(1_600_000, 39, 1) == pytest.approx(
            1_600_000 / 39
        )

    def test_outside_recovery_period(self):
        assert calculate_depreciation(1_600_000, 39, 0) == 0.0
        assert calculate_depreciation(1_600_000, 39, 40) == 0.0
        assert calculate_depreciation(1_000_000, 27.5, 28) == 0.0

    def test_full_recovery(self):
        """Depreciation over the whole recovery period equals the basis."""
        total = sum(calculate_depreciation(1_600_000, 39, year) for year in range(1, 60))
        assert total == pytest.approx(1_600_000)


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Test IRR calculation with simple cash flows."""
        # Investment of 100, returns of 110 after 1 year = 10% return
        irr = calculate_irr([-100, 110])
        assert abs(irr - 0.10) < 0.001

    def test_calculate_irr_multi_period(self):
        """Test IRR with multiple periods."""
        # Investment of 100, annual returns of 20, sale of 100 at end
        irr = calculate_irr([-100, 20, 20, 20, 20, 120])
        assert abs(irr - 0.20) < 0.001

    def test_npv_at_irr_is_zero(self):
        cash_flows = [-708_000, 40_000, 42_000, 45_000, 47_000, 1_100_000]
        irr = calculate_irr(cash_flows)
        assert abs(calculate_npv(cash_flows, irr)) < 1e-3 * 708_000

    def test_irr_negative_returns(self):
        """Test IRR with negative return scenario."""
        irr = calculate_irr([-100, 40, 40, 10])
        assert irr < 0

    def test_irr_undetermined(self):
        assert calculate_irr([-100]) is None
        assert calculate_irr([]) is None
        assert calculate_irr([100, 50, 25]) is None
        assert calculate_irr([-100, -50]) is None
        assert calculate_irr([-100, float("nan")]) is None

    def test_bisection_finds_root(self):
        rate = _bisect_irr(np.array([-100.0, 110.0]), 0.1)
        assert rate == pytest.approx(0.10, abs=1e-6)

    def test_calculate_npv(self):
        """Test NPV calculation."""
        assert calculate_npv([-100, 50, 50, 50], 0.10) > 0
        assert calculate_npv([-100, 110], 0.10) == pytest.approx(0.0)
        assert calculate_npv([-100, 50], 0.0) == pytest.approx(-50.0)

    def test_multiple_and_profit(self):
        cash_flows = [-100, 20, 20, 120]
        assert calculate_multiple(cash_flows) == pytest.approx(1.6)
        assert calculate_profit(cash_flows) == pytest.approx(60)

    def test_multiple_requires_investment(self):
        with pytest.raises(ValueError):
            calculate_multiple([10, 20])
