"""
Financial report API endpoints.
"""

from fastapi import APIRouter

from valuation.api.calculations import ProjectParametersInput
from valuation.calculations.reports import generate_financial_reports

router = APIRouter()


@router.post("/")
async def generate_reports(inputs: ProjectParametersInput):
    """Income statements, balance sheets and cash flow statements with a summary."""
    reports = generate_financial_reports(inputs.to_parameters())
    return reports.to_dict()
