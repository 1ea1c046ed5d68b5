"""
Scenario analysis API endpoints.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Optional

from valuation.api.calculations import ProjectParametersInput
from valuation.config import get_settings
from valuation.calculations.scenarios import calculate_scenario_analysis, calculate_sensitivity

router = APIRouter()
settings = get_settings()


@router.post("/")
async def calculate_scenarios(inputs: ProjectParametersInput):
    """Best, base and worst case metrics for a project."""
    analysis = calculate_scenario_analysis(inputs.to_parameters())
    return analysis.to_dict()


class SensitivityInput(BaseModel):
    """Input for a sensitivity sweep."""

    parameters: ProjectParametersInput
    swing: Optional[float] = Field(default=None, ge=0, lt=1)


@router.post("/sensitivity")
def calculate_sensitivity_endpoint(inputs: SensitivityInput):
    """NPV at the low and high end of each value driver (served from the threadpool)."""
    swing = inputs.swing if inputs.swing is not None else settings.sensitivity_swing
    rows = calculate_sensitivity(inputs.parameters.to_parameters(), swing)
    return {"swing": swing, "variables": [row.to_dict() for row in rows]}
