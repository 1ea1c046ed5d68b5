"""
Scenario Analysis

Best/base/worst case projections from fixed revenue and cost shocks, plus a
one-at-a-time NPV sensitivity sweep over the main value drivers.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List

from valuation.calculations.errors import InvalidParameterError
from valuation.calculations.metrics import FinancialMetrics, calculate_metrics
from valuation.calculations.parameters import ProjectParameters

logger = logging.getLogger(__name__)

BEST_CASE_REVENUE_FACTOR = 1.2
BEST_CASE_COST_FACTOR = 0.9
WORST_CASE_REVENUE_FACTOR = 0.8
WORST_CASE_COST_FACTOR = 1.15

DEFAULT_SENSITIVITY_SWING = 0.2


@dataclass(frozen=True)
class ScenarioAnalysis:
    """Metrics for the three fixed scenarios."""

    best_case: FinancialMetrics
    base_case: FinancialMetrics
    worst_case: FinancialMetrics

    def to_dict(self) -> Dict:
        return asdict(self)


def best_case_parameters(params: ProjectParameters) -> ProjectParameters:
    """Revenues up 20%, costs down 10%."""
    return params.scaled(BEST_CASE_REVENUE_FACTOR, BEST_CASE_COST_FACTOR)


def worst_case_parameters(params: ProjectParameters) -> ProjectParameters:
    """Revenues down 20%, costs up 15%."""
    return params.scaled(WORST_CASE_REVENUE_FACTOR, WORST_CASE_COST_FACTOR)


def calculate_scenario_analysis(params: ProjectParameters) -> ScenarioAnalysis:
    """Run the metrics pipeline once per scenario on independent copies."""
    analysis = ScenarioAnalysis(
        best_case=calculate_metrics(best_case_parameters(params)),
        base_case=calculate_metrics(params),
        worst_case=calculate_metrics(worst_case_parameters(params)),
    )
    logger.debug(
        f"Scenario NPVs: best={analysis.best_case.npv:.2f} "
        f"base={analysis.base_case.npv:.2f} worst={analysis.worst_case.npv:.2f}"
    )
    return analysis


@dataclass(frozen=True)
class SensitivityVariable:
    """NPV response to moving one driver between a low and a high value."""

    name: str
    base_value: float
    min_value: float
    max_value: float
    npv_low: float
    npv_high: float
    impact: float

    def to_dict(self) -> Dict:
        return asdict(self)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _scale_revenues(params: ProjectParameters, factor: float) -> ProjectParameters:
    return params.scaled(revenue_factor=factor)


def _scale_costs(params: ProjectParameters, factor: float) -> ProjectParameters:
    return params.scaled(cost_factor=factor)


def _rate_shift(name: str) -> Callable[[ProjectParameters, float], ProjectParameters]:
    def shift(params: ProjectParameters, factor: float) -> ProjectParameters:
        return params.with_changes(**{name: _clamp(getattr(params, name) * factor, 0.0, 1.0)})

    return shift


def _scale_investment(params: ProjectParameters, factor: float) -> ProjectParameters:
    return params.with_changes(initial_investment=params.initial_investment * factor)


# (label, base value getter, parameter transform)
SENSITIVITY_DRIVERS = [
    ("Annual Revenues", lambda p: sum(p.annual_revenues), _scale_revenues),
    ("Operating Costs", lambda p: sum(p.operating_costs), _scale_costs),
    ("Discount Rate", lambda p: p.discount_rate, _rate_shift("discount_rate")),
    ("Initial Investment", lambda p: p.initial_investment, _scale_investment),
    ("Tax Rate", lambda p: p.tax_rate, _rate_shift("tax_rate")),
]


def calculate_sensitivity(
    params: ProjectParameters, swing: float = DEFAULT_SENSITIVITY_SWING
) -> List[SensitivityVariable]:
    """
    Move each driver down and up by a relative swing and record the NPVs.

    Rates are clamped to [0, 1] after scaling. Rows are sorted by impact,
    largest first, for tornado charts.

    Args:
        params: Base case parameters
        swing: Relative change applied in each direction (0.2 = +/-20%)

    Returns:
        List of SensitivityVariable rows
    """
    if swing < 0 or swing >= 1:
        raise InvalidParameterError("Sensitivity swing must be in [0, 1)", field="swing")

    rows = []
    for name, base_getter, transform in SENSITIVITY_DRIVERS:
        low_params = transform(params, 1 - swing)
        high_params = transform(params, 1 + swing)
        npv_low = calculate_metrics(low_params).npv
        npv_high = calculate_metrics(high_params).npv

        rows.append(
            SensitivityVariable(
                name=name,
                base_value=base_getter(params),
                min_value=base_getter(low_params),
                max_value=base_getter(high_params),
                npv_low=npv_low,
                npv_high=npv_high,
                impact=abs(npv_high - npv_low),
            )
        )

    rows.sort(key=lambda row: row.impact, reverse=True)
    return rows
