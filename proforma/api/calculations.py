"""
Pro forma calculation API endpoints.

These endpoints accept assumptions and return calculated results.
Nothing is stored; every request recalculates from its own input.
"""

import logging
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from proforma.calculations import amortization, irr
from proforma.calculations.assumptions import Assumptions
from proforma.calculations.completion import get_completion_state
from proforma.calculations.proforma import run_pro_forma, summarize_returns
from proforma.calculations.samples import (
    generate_sample_assumptions,
    get_sample_scenario,
    get_scenario_names,
)
from proforma.calculations.sensitivity import run_sensitivity_analysis
from proforma.calculations.validation import validate_assumptions
from proforma.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class ProFormaResponse(BaseModel):
    """Pro forma results with calculation status and advisory problems."""

    status: str
    reason: Optional[str] = None
    violations: List[str]
    results: dict
    returns: dict


@router.post("/proforma", response_model=ProFormaResponse)
async def calculate_proforma(assumptions: Assumptions):
    """Calculate the full pro forma and headline return metrics."""
    violations = validate_assumptions(assumptions)
    outcome = run_pro_forma(assumptions)

    returns = summarize_returns(
        assumptions,
        outcome.results,
        discount_rate=get_settings().default_discount_rate,
    )

    return ProFormaResponse(
        status=outcome.status.value,
        reason=outcome.reason,
        violations=violations,
        results=asdict(outcome.results),
        returns=asdict(returns),
    )


class ValidationResponse(BaseModel):
    """Validation problems and input completion."""

    valid: bool
    violations: List[str]
    completion: dict


@router.post("/validate", response_model=ValidationResponse)
async def validate(assumptions: Assumptions):
    """Check assumptions without calculating."""
    violations = validate_assumptions(assumptions)
    return ValidationResponse(
        valid=not violations,
        violations=violations,
        completion=asdict(get_completion_state(assumptions)),
    )


@router.post("/sensitivity")
async def calculate_sensitivity(assumptions: Assumptions):
    """Recalculate returns with exit cap rate, rent growth and interest rate shifted."""
    return asdict(run_sensitivity_analysis(assumptions))


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    guess: float = irr.DEFAULT_GUESS


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: Optional[float] = None
    multiple: float
    profit: float
    npv: float
    discount_rate: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR for given annual cash flows."""
    discount_rate = get_settings().default_discount_rate

    try:
        multiple = irr.calculate_multiple(inputs.cash_flows)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IRRResponse(
        irr=irr.calculate_irr(inputs.cash_flows, inputs.guess),
        multiple=multiple,
        profit=irr.calculate_profit(inputs.cash_flows),
        npv=irr.calculate_npv(inputs.cash_flows, discount_rate),
        discount_rate=discount_rate,
    )


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float
    annual_rate: float
    amortization_years: float = 30
    payments_per_year: int = 12
    total_periods: Optional[int] = None


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    if inputs.amortization_years <= 0:
        raise HTTPException(status_code=400, detail="Amortization years must be positive")
    if inputs.payments_per_year < 1:
        raise HTTPException(status_code=400, detail="Payments per year must be positive")

    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate,
        amortization_years=inputs.amortization_years,
        payments_per_year=inputs.payments_per_year,
        total_periods=inputs.total_periods,
    )

    return {
        "payment": amortization.calculate_payment(
            inputs.principal,
            inputs.annual_rate,
            inputs.amortization_years,
            inputs.payments_per_year,
        ),
        "annual_debt_service": amortization.calculate_annual_debt_service(
            inputs.principal,
            inputs.annual_rate,
            inputs.amortization_years,
            inputs.payments_per_year,
        ),
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }


@router.get("/sample", response_model=Assumptions)
async def sample_assumptions(scenario: Optional[str] = None):
    """Sample assumptions, optionally for a named scenario."""
    if scenario is None:
        return generate_sample_assumptions()

    try:
        return get_sample_scenario(scenario)
    except KeyError:
        logger.warning(f"Unknown sample scenario requested: {scenario}")
        raise HTTPException(status_code=404, detail=f"Unknown scenario: {scenario}")


@router.get("/scenarios")
async def list_scenarios() -> List[Dict[str, str]]:
    """List the named sample scenarios."""
    return get_scenario_names()
