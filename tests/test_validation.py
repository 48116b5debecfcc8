"""
Tests for assumption validation and input completion.
"""

from proforma.calculations.assumptions import (
    Assumptions,
    DispositionPriceType,
    FinancingType,
    PropertyType,
)
from proforma.calculations.completion import (
    SECTION_CASHFLOWS,
    SECTION_INPUT_SHEET,
    SECTION_SALE,
    get_completion_state,
    get_section_status,
    is_financing_complete,
)
from proforma.calculations.validation import validate_assumptions


class TestValidateAssumptions:
    """Advisory validation messages."""

    def test_sample_is_valid(self, sample_assumptions):
        assert validate_assumptions(sample_assumptions) == []

    def test_legacy_is_valid(self, legacy_assumptions):
        assert validate_assumptions(legacy_assumptions) == []

    def test_purchase_price(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"purchase_price": 0})
        )
        assert "Purchase price must be greater than 0" in errors

    def test_missing_income(self):
        errors = validate_assumptions(
            Assumptions(purchase_price=1_000_000, hold_period_years=5)
        )
        assert "Either detailed income structure or Year 1 NOI must be provided" in errors

    def test_rental_income_gap(self, sample_assumptions):
        rental_income = list(sample_assumptions.rental_income)
        rental_income[2] = 0
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"rental_income": tuple(rental_income)})
        )
        assert errors == ["Year 3 rental income must be greater than 0"]

    def test_vacancy_rate(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"vacancy_rates": (1.5,) * 10})
        )
        assert errors == ["Year 1 vacancy rate must be between 0% and 100%"]

    def test_loan_exceeds_price(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"loan_amount": 2_500_000})
        )
        assert "Loan amount cannot exceed purchase price" in errors

    def test_loan_terms(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(
                update={"loan_term_years": 0, "amortization_years": 0}
            )
        )
        assert "Loan term must be greater than 0 years" in errors
        assert "Amortization period must be greater than 0 years" in errors

    def test_cash_deal_skips_loan_terms(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(
                update={
                    "financing_type": FinancingType.cash,
                    "loan_term_years": 0,
                    "amortization_years": 0,
                }
            )
        )
        assert errors == []

    def test_hold_period(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"hold_period_years": 0})
        )
        assert "Hold period must be between 1 and 50 years" in errors

    def test_tax_rates(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"capital_gains_tax_rate": 1.2})
        )
        assert errors == ["Capital gains tax rate must be between 0% and 100%"]

    def test_land_and_improvements(self, sample_assumptions):
        errors = validate_assumptions(
            sample_assumptions.model_copy(update={"land_percentage": 10})
        )
        assert errors == ["Land % and Improvements % must add up to 100%"]

    def test_growth_rate(self, legacy_assumptions):
        errors = validate_assumptions(
            legacy_assumptions.model_copy(update={"noi_growth_rate": -0.75})
        )
        assert errors == ["NOI growth rate must be between -50% and 100%"]

    def test_non_finite_values(self, sample_assumptions):
        """NaN and infinite inputs produce messages instead of raising."""
        nan = float("nan")
        errors = validate_assumptions(
            sample_assumptions.model_copy(
                update={
                    "purchase_price": nan,
                    "vacancy_rates": (nan,) * 10,
                    "interest_rate": float("inf"),
                    "ordinary_income_tax_rate": 1.5,
                    "land_percentage": nan,
                }
            )
        )
        assert "Purchase price must be greater than 0" in errors
        assert "Year 1 vacancy rate must be between 0% and 100%" in errors
        assert "Interest rate must be between 0% and 100%" in errors
        assert "Ordinary income tax rate must be between 0% and 100%" in errors
        assert "Land % and Improvements % must add up to 100%" in errors
        assert "Land percentage must be between 0% and 100%" in errors

    def test_validation_does_not_block_calculation(self, sample_assumptions):
        from proforma.calculations.proforma import run_pro_forma

        assumptions = sample_assumptions.model_copy(update={"land_percentage": 10})
        assert validate_assumptions(assumptions)
        assert run_pro_forma(assumptions).ok


class TestCompletion:
    """Input completion state."""

    def test_sample_complete(self, sample_assumptions):
        state = get_completion_state(sample_assumptions)
        assert state.property_income_complete
        assert state.financing_complete
        assert state.tax_exit_complete
        assert state.cashflows_ready
        assert state.sale_analysis_ready
        assert state.overall_progress == 100
        assert state.input_sheet_progress == 100

    def test_cash_financing_complete(self):
        assert is_financing_complete(Assumptions(financing_type=FinancingType.cash))
        assert not is_financing_complete(Assumptions())

    def test_missing_exit(self, sample_assumptions):
        assumptions = sample_assumptions.model_copy(
            update={"disposition_price_type": DispositionPriceType.unspecified}
        )
        state = get_completion_state(assumptions)
        assert state.cashflows_ready
        assert not state.tax_exit_complete
        assert not state.sale_analysis_ready
        assert state.overall_progress == 67

    def test_section_status(self, sample_assumptions):
        assert get_section_status(SECTION_INPUT_SHEET, sample_assumptions, set()) == "complete"
        assert get_section_status(SECTION_CASHFLOWS, sample_assumptions, set()) == "ready"
        assert get_section_status(SECTION_SALE, sample_assumptions, {SECTION_SALE}) == "viewed"

    def test_locked_sections(self):
        assumptions = Assumptions(
            purchase_price=1_000_000, property_type=PropertyType.commercial
        )
        assert get_section_status(SECTION_CASHFLOWS, assumptions, set()) == "locked"
        assert get_section_status(SECTION_SALE, assumptions, set()) == "locked"
