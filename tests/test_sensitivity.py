"""
Tests for sensitivity analysis.
"""

import pytest

from proforma.calculations.assumptions import DispositionPriceType
from proforma.calculations.proforma import calculate
from proforma.calculations.sensitivity import (
    build_sensitivity_table,
    format_shift,
    perturb_assumptions,
    rescale_rental_income,
    run_sensitivity_analysis,
)


class TestHelpers:
    def test_format_shift(self):
        assert format_shift(-0.005) == "-50 bps"
        assert format_shift(0.005) == "+50 bps"
        assert format_shift(0.01) == "+100 bps"
        assert format_shift(0.0) == "base"

    def test_rescale_rental_income(self):
        rescaled = rescale_rental_income((100.0, 100.0, 100.0), 0.01)
        assert rescaled[0] == 100.0
        assert rescaled[1] == pytest.approx(101.0)
        assert rescaled[2] == pytest.approx(102.01)

    def test_perturb_leaves_base_unchanged(self, sample_assumptions):
        shifted = perturb_assumptions(sample_assumptions, "interest_rate", 0.005)
        assert shifted.interest_rate == pytest.approx(0.07)
        assert sample_assumptions.interest_rate == 0.065

    def test_perturb_legacy_growth(self, legacy_assumptions):
        shifted = perturb_assumptions(legacy_assumptions, "rent_growth", -0.01)
        assert shifted.noi_growth_rate == pytest.approx(0.02)

    def test_unknown_dimension(self, sample_assumptions):
        with pytest.raises(ValueError):
            perturb_assumptions(sample_assumptions, "vacancy", 0.01)


class TestSensitivityTables:
    """Shifted cases are full recalculations of modified assumptions."""

    def test_all_tables_present(self, sample_assumptions):
        analysis = run_sensitivity_analysis(sample_assumptions)
        assert analysis.exit_cap_rate is not None
        assert analysis.rent_growth is not None
        assert analysis.interest_rate is not None

    def test_base_case_matches_calculation(self, sample_assumptions):
        results = calculate(sample_assumptions)
        table = build_sensitivity_table(
            sample_assumptions, "exit_cap_rate", (-0.005, 0.005)
        )
        assert table.base.irr == results.irr
        assert table.base.sale_price == results.sale_proceeds.sale_price
        assert table.base.loan_amount == results.loan_amount

    def test_exit_cap_rate(self, sample_assumptions):
        table = run_sensitivity_analysis(sample_assumptions).exit_cap_rate
        low, high = table.cases

        assert [c.label for c in table.cases] == ["-50 bps", "+50 bps"]
        assert low.assumption_value == pytest.approx(0.07)
        assert high.assumption_value == pytest.approx(0.08)
        assert low.sale_price > table.base.sale_price > high.sale_price
        assert low.irr > table.base.irr > high.irr

    def test_rent_growth(self, sample_assumptions):
        table = run_sensitivity_analysis(sample_assumptions).rent_growth
        low, high = table.cases

        assert [c.label for c in table.cases] == ["-100 bps", "+100 bps"]
        assert low.sale_price < table.base.sale_price < high.sale_price
        assert low.irr < table.base.irr < high.irr

    def test_interest_rate(self, sample_assumptions):
        table = run_sensitivity_analysis(sample_assumptions).interest_rate
        low, high = table.cases

        assert low.year1_dscr > table.base.year1_dscr > high.year1_dscr
        assert low.before_tax_irr > table.base.before_tax_irr > high.before_tax_irr
        assert low.loan_amount == high.loan_amount == 1_400_000

    def test_cap_rate_kept_positive(self, sample_assumptions):
        assumptions = sample_assumptions.model_copy(
            update={"disposition_cap_rate": 0.004}
        )
        table = run_sensitivity_analysis(assumptions).exit_cap_rate
        assert [c.label for c in table.cases] == ["+50 bps"]
        assert table.cases[0].assumption_value == pytest.approx(0.009)

    def test_interest_rate_kept_non_negative(self, sample_assumptions):
        assumptions = sample_assumptions.model_copy(update={"interest_rate": 0.003})
        table = run_sensitivity_analysis(assumptions).interest_rate
        assert [c.label for c in table.cases] == ["+50 bps"]

    def test_cash_deal_has_no_interest_table(self, cash_assumptions):
        analysis = run_sensitivity_analysis(cash_assumptions)
        assert analysis.interest_rate is None
        assert analysis.rent_growth is not None

    def test_dollar_exit_has_no_cap_rate_table(self, sample_assumptions):
        assumptions = sample_assumptions.model_copy(
            update={
                "disposition_price_type": DispositionPriceType.dollar,
                "disposition_price": 2_500_000,
            }
        )
        assert run_sensitivity_analysis(assumptions).exit_cap_rate is None
