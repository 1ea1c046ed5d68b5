"""
Valuation Calculation Engine

Core calculation modules for capital project appraisal.
Every entry point is a pure function of its inputs.
"""

from valuation.calculations import irr, cashflow, metrics, scenarios, montecarlo, statements, reports
from valuation.calculations.errors import (
    InvalidParameterError,
    NumericInstabilityWarning,
    SimulationCancelledError,
)
from valuation.calculations.parameters import ProjectParameters
from valuation.calculations.metrics import FinancialMetrics, calculate_metrics
from valuation.calculations.scenarios import ScenarioAnalysis, calculate_scenario_analysis
from valuation.calculations.montecarlo import MonteCarloResult, run_monte_carlo
from valuation.calculations.reports import FinancialReports, generate_financial_reports

__all__ = [
    "irr",
    "cashflow",
    "metrics",
    "scenarios",
    "montecarlo",
    "statements",
    "reports",
    "InvalidParameterError",
    "NumericInstabilityWarning",
    "SimulationCancelledError",
    "ProjectParameters",
    "FinancialMetrics",
    "calculate_metrics",
    "ScenarioAnalysis",
    "calculate_scenario_analysis",
    "MonteCarloResult",
    "run_monte_carlo",
    "FinancialReports",
    "generate_financial_reports",
]
