"""
Main FastAPI application entry point.
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from valuation.config import get_settings
from valuation.api import router as api_router
from valuation.calculations.errors import InvalidParameterError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Capital project valuation, scenario and risk analysis",
    version="0.1.0",
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(InvalidParameterError)
async def invalid_parameter_handler(request: Request, exc: InvalidParameterError):
    """Report out-of-domain inputs as a client error."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "field": exc.field},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": "0.1.0"}


def run():
    """Serve the API with uvicorn using the configured host and port."""
    uvicorn.run(
        "valuation.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
