"""
API routes for the valuation engine.
"""

from fastapi import APIRouter

from valuation.api import scenarios, calculations, reports

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(scenarios.router, prefix="/scenarios", tags=["scenarios"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
