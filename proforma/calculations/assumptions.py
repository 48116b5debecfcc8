"""
Pro Forma Assumptions

The input value for a calculation and its resolution into clean numbers.
Assumptions are immutable; perturbed copies are made with
``assumptions.model_copy(update={...})``.
"""

import enum
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from proforma.calculations.depreciation import (
    calculate_depreciable_basis,
    default_recovery_years,
)

DEFAULT_AMORTIZATION_YEARS = 30.0
DEFAULT_PAYMENTS_PER_YEAR = 12
MAX_HOLD_PERIOD_YEARS = 50


class AmountType(str, enum.Enum):
    """Whether an amount is a percentage or a dollar figure."""

    percentage = "percentage"
    dollar = "dollar"
    unspecified = ""


class FinancingType(str, enum.Enum):
    """How the acquisition loan is specified."""

    dscr = "dscr"
    ltv = "ltv"
    cash = "cash"
    unspecified = ""


class PropertyType(str, enum.Enum):
    residential = "residential"
    commercial = "commercial"
    industrial = "industrial"
    unspecified = ""


class DispositionPriceType(str, enum.Enum):
    """Method for determining the sale price."""

    dollar = "dollar"
    caprate = "caprate"
    unspecified = ""


class Assumptions(BaseModel):
    """Complete input for one pro forma calculation."""

    # Acquisition
    purchase_price: float = 0.0
    acquisition_costs: float = 0.0
    acquisition_cost_type: AmountType = AmountType.unspecified

    # Income - year by year, index 0 is year 1
    rental_income: Tuple[float, ...] = ()
    other_income: Tuple[float, ...] = ()
    vacancy_rates: Tuple[float, ...] = ()  # decimals 0-1
    operating_expenses: Tuple[float, ...] = ()
    operating_expense_type: AmountType = AmountType.unspecified  # percentage = % of EGI

    # Legacy income model
    year1_noi: Optional[float] = None
    noi_growth_rate: Optional[float] = None

    # Financing
    financing_type: FinancingType = FinancingType.unspecified
    loan_amount: float = 0.0
    interest_rate: float = 0.0
    loan_term_years: float = 0.0
    amortization_years: float = 0.0
    payments_per_year: int = DEFAULT_PAYMENTS_PER_YEAR
    loan_costs: float = 0.0
    loan_cost_type: AmountType = AmountType.unspecified
    target_dscr: Optional[float] = None
    target_ltv: Optional[float] = None  # percent 0-100

    # Tax & depreciation
    property_type: PropertyType = PropertyType.unspecified
    depreciation_years: float = 0.0
    land_percentage: float = 0.0
    improvements_percentage: float = 0.0
    ordinary_income_tax_rate: float = 0.0
    capital_gains_tax_rate: float = 0.0
    depreciation_recapture_rate: float = 0.0
    tax_rate: Optional[float] = None  # legacy combined rate

    # Exit
    hold_period_years: int = 0
    disposition_price_type: DispositionPriceType = DispositionPriceType.unspecified
    disposition_price: float = 0.0
    disposition_cap_rate: float = 0.0
    cost_of_sale_type: AmountType = AmountType.unspecified
    cost_of_sale_amount: float = 0.0
    cost_of_sale_percentage: float = 0.0  # decimal 0-1

    # Legacy exit fields
    exit_cap_rate: Optional[float] = None
    sale_price: Optional[float] = None
    selling_costs: Optional[float] = None  # decimal 0-1

    class Config:
        frozen = True


def safe_number(value) -> float:
    """Coerce a possibly missing or non-finite value to a finite float."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def safe_rate(value, low: float = 0.0, high: float = 1.0) -> float:
    """Coerce a rate and clamp it to [low, high]."""
    return max(low, min(high, safe_number(value)))


def safe_series(values: Sequence[float], length: int) -> Tuple[float, ...]:
    """Coerce a per-year array, truncating or zero-padding it to length."""
    cleaned = [safe_number(v) for v in list(values)[:length]]
    return tuple(cleaned + [0.0] * (length - len(cleaned)))


@dataclass(frozen=True)
class DetailedIncome:
    """Year-by-year rental income, vacancy and operating expenses."""

    rental_income: Tuple[float, ...]
    other_income: Tuple[float, ...]
    vacancy_rates: Tuple[float, ...]
    operating_expenses: Tuple[float, ...]
    expenses_as_percentage: bool

    def noi_for_year(self, year: int) -> float:
        i = year - 1
        gross_income = self.rental_income[i] + self.other_income[i]
        effective_gross_income = gross_income * (1 - self.vacancy_rates[i])

        if self.expenses_as_percentage:
            operating_expenses = effective_gross_income * self.operating_expenses[i] / 100
        else:
            operating_expenses = self.operating_expenses[i]

        return effective_gross_income - operating_expenses


@dataclass(frozen=True)
class SimpleIncome:
    """Year-1 NOI grown at a flat annual rate."""

    year1_noi: float
    growth_rate: float

    def noi_for_year(self, year: int) -> float:
        return self.year1_noi * (1 + self.growth_rate) ** (year - 1)


IncomeModel = Union[DetailedIncome, SimpleIncome]


def resolve_income_model(assumptions: Assumptions, hold_period_years: int) -> IncomeModel:
    """
    Pick exactly one income model for the whole calculation.

    The detailed arrays are used when year-1 rental income is positive;
    otherwise the legacy year-1 NOI and growth rate are used.
    """
    rental_income = safe_series(assumptions.rental_income, hold_period_years)

    if hold_period_years > 0 and rental_income[0] > 0:
        expenses_as_percentage = (
            assumptions.operating_expense_type == AmountType.percentage
        )
        operating_expenses = safe_series(
            assumptions.operating_expenses, hold_period_years
        )
        if expenses_as_percentage:
            operating_expenses = tuple(
                safe_rate(v, 0.0, 100.0) for v in operating_expenses
            )

        return DetailedIncome(
            rental_income=rental_income,
            other_income=safe_series(assumptions.other_income, hold_period_years),
            vacancy_rates=tuple(
                safe_rate(v)
                for v in safe_series(assumptions.vacancy_rates, hold_period_years)
            ),
            operating_expenses=operating_expenses,
            expenses_as_percentage=expenses_as_percentage,
        )

    return SimpleIncome(
        year1_noi=safe_number(assumptions.year1_noi),
        growth_rate=safe_rate(assumptions.noi_growth_rate, -1.0, 1.0),
    )


@dataclass(frozen=True)
class ResolvedAssumptions:
    """Assumptions after coercion, defaulting and financing resolution."""

    purchase_price: float
    acquisition_costs: float  # dollars
    income: IncomeModel

    financing_type: FinancingType
    loan_amount: float
    interest_rate: float
    loan_term_years: float
    amortization_years: float
    payments_per_year: int
    total_loan_costs: float  # dollars

    depreciable_basis: float
    recovery_years: float
    ordinary_income_tax_rate: float
    capital_gains_tax_rate: float
    depreciation_recapture_rate: float

    hold_period_years: int
    disposition_price_type: DispositionPriceType
    disposition_price: float
    disposition_cap_rate: float
    cost_of_sale_type: AmountType
    cost_of_sale_amount: float
    cost_of_sale_percentage: float

    legacy_exit_cap_rate: float
    legacy_sale_price: float
    legacy_selling_costs: float


def resolve_assumptions(assumptions: Assumptions) -> ResolvedAssumptions:
    """
    Coerce raw assumptions into the numbers the pipeline consumes.

    Non-finite values become 0, rates are clamped to [0, 1], and the
    income model and loan are resolved once for the whole hold period.
    """
    from proforma.calculations.financing import resolve_financing

    purchase_price = safe_number(assumptions.purchase_price)
    hold_period_years = int(safe_number(assumptions.hold_period_years))

    raw_acquisition_costs = safe_number(assumptions.acquisition_costs)
    if assumptions.acquisition_cost_type == AmountType.percentage:
        acquisition_costs = purchase_price * raw_acquisition_costs / 100
    else:
        acquisition_costs = raw_acquisition_costs

    income = resolve_income_model(assumptions, hold_period_years)
    financing = resolve_financing(assumptions, purchase_price, income)

    legacy_tax_rate = safe_rate(assumptions.tax_rate)
    ordinary_income_tax_rate = (
        safe_rate(assumptions.ordinary_income_tax_rate) or legacy_tax_rate
    )
    capital_gains_tax_rate = (
        safe_rate(assumptions.capital_gains_tax_rate) or legacy_tax_rate * 0.6
    )
    depreciation_recapture_rate = safe_rate(
        assumptions.depreciation_recapture_rate
    ) or min(0.25, ordinary_income_tax_rate)

    recovery_years = safe_number(assumptions.depreciation_years)
    if recovery_years <= 0:
        recovery_years = default_recovery_years(assumptions.property_type.value)

    return ResolvedAssumptions(
        purchase_price=purchase_price,
        acquisition_costs=acquisition_costs,
        income=income,
        financing_type=assumptions.financing_type,
        loan_amount=financing.loan_amount,
        interest_rate=financing.interest_rate,
        loan_term_years=financing.loan_term_years,
        amortization_years=financing.amortization_years,
        payments_per_year=financing.payments_per_year,
        total_loan_costs=financing.total_loan_costs,
        depreciable_basis=calculate_depreciable_basis(
            purchase_price, safe_rate(assumptions.improvements_percentage, 0.0, 100.0)
        ),
        recovery_years=recovery_years,
        ordinary_income_tax_rate=ordinary_income_tax_rate,
        capital_gains_tax_rate=capital_gains_tax_rate,
        depreciation_recapture_rate=depreciation_recapture_rate,
        hold_period_years=hold_period_years,
        disposition_price_type=assumptions.disposition_price_type,
        disposition_price=safe_number(assumptions.disposition_price),
        disposition_cap_rate=safe_rate(assumptions.disposition_cap_rate),
        cost_of_sale_type=assumptions.cost_of_sale_type,
        cost_of_sale_amount=safe_number(assumptions.cost_of_sale_amount),
        cost_of_sale_percentage=safe_rate(assumptions.cost_of_sale_percentage),
        legacy_exit_cap_rate=safe_rate(assumptions.exit_cap_rate),
        legacy_sale_price=safe_number(assumptions.sale_price),
        legacy_selling_costs=safe_rate(assumptions.selling_costs),
    )
