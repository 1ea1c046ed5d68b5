"""
Financial calculation API endpoints.

These endpoints accept project inputs and return calculated results.
Engine output structures are passed through unchanged.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional

from valuation.config import get_settings
from valuation.calculations import cashflow, irr
from valuation.calculations.metrics import calculate_metrics, get_risk_level
from valuation.calculations.montecarlo import run_monte_carlo
from valuation.calculations.parameters import ProjectParameters

router = APIRouter()
settings = get_settings()


class ProjectParametersInput(BaseModel):
    """Input for a project valuation."""

    # Investment
    initial_investment: float
    project_timeline: int = Field(ge=1, le=settings.max_project_timeline)

    # Operations (one entry per year, missing years count as 0)
    annual_revenues: List[float] = []
    operating_costs: List[float] = []

    # Rates
    tax_rate: float = 0.25
    discount_rate: float = 0.10
    depreciation_rate: float = 0.20

    # Working capital and exit
    working_capital: float = 0.0
    terminal_growth_rate: float = 0.02
    terminal_value: float = 0.0

    def to_parameters(self) -> ProjectParameters:
        """Build validated engine parameters (raises InvalidParameterError)."""
        return ProjectParameters(**self.model_dump())


@router.post("/metrics")
async def calculate_metrics_endpoint(inputs: ProjectParametersInput):
    """Calculate NPV, IRR, payback, ROI and the cash flow series."""
    metrics = calculate_metrics(inputs.to_parameters())

    result = metrics.to_dict()
    result["risk_level"] = get_risk_level(metrics.npv)
    return result


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    discount_rate: float = 0.10


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    converged: bool
    iterations: int
    npv: float
    payback_period: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR, NPV and payback for given cash flows."""
    try:
        irr_result = irr.solve_irr(inputs.cash_flows)
        npv = irr.calculate_npv(inputs.cash_flows, inputs.discount_rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IRRResponse(
        irr=irr_result.rate,
        converged=irr_result.converged,
        iterations=irr_result.iterations,
        npv=npv,
        payback_period=cashflow.calculate_payback_period(inputs.cash_flows),
    )


class MonteCarloInput(BaseModel):
    """Input for a Monte Carlo simulation."""

    parameters: ProjectParametersInput
    iterations: int = Field(
        default=settings.monte_carlo_default_iterations,
        ge=1,
        le=settings.monte_carlo_max_iterations,
    )
    seed: Optional[int] = Field(default=None, ge=0)


@router.post("/monte-carlo")
def run_monte_carlo_endpoint(inputs: MonteCarloInput):
    """Simulate the NPV/IRR distribution of a project (served from the threadpool)."""
    result = run_monte_carlo(
        inputs.parameters.to_parameters(),
        iterations=inputs.iterations,
        seed=inputs.seed,
        max_workers=settings.monte_carlo_max_workers,
    )
    return result.to_dict()
