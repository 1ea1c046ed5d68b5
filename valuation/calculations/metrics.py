"""
Project Metrics

Runs the full valuation pipeline for one parameter set: free cash flows,
NPV, IRR, payback, ROI and EBITDA margin.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from valuation.calculations import cashflow, irr
from valuation.calculations.parameters import ProjectParameters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialMetrics:
    """Valuation metrics for a single parameter set."""

    npv: float
    irr: float
    irr_converged: bool
    payback_period: float
    roi: float
    ebitda_margin: float
    free_cash_flows: List[float]
    cumulative_cash_flows: List[float]
    present_values: List[float]

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_roi(total_gains: float, initial_investment: float) -> float:
    """ROI as a percentage of the initial investment (0 with no investment)."""
    if initial_investment == 0:
        return 0.0
    return (total_gains / initial_investment) * 100


def calculate_ebitda_margin(ebitda: float, revenue: float) -> float:
    """EBITDA as a percentage of revenue (0 with no revenue)."""
    if revenue == 0:
        return 0.0
    return (ebitda / revenue) * 100


def calculate_metrics(
    params: ProjectParameters, discount_rate: Optional[float] = None
) -> FinancialMetrics:
    """
    Calculate every valuation metric for a project.

    ROI and EBITDA margin use the totals of the revenue and cost inputs as
    given, averaged over the project timeline.

    Args:
        params: Validated project parameters
        discount_rate: Optional override of params.discount_rate, used by the
            Monte Carlo engine where the perturbed rate can leave [0, 1]

    Returns:
        FinancialMetrics for the project
    """
    rate = params.discount_rate if discount_rate is None else discount_rate

    free_cash_flows = cashflow.calculate_free_cash_flows(params)
    npv = irr.calculate_npv(free_cash_flows, rate)
    irr_result = irr.solve_irr(free_cash_flows)
    payback_period = cashflow.calculate_payback_period(free_cash_flows)

    total_revenue = sum(params.annual_revenues)
    total_costs = sum(params.operating_costs)
    total_gains = total_revenue - total_costs - params.initial_investment
    roi = calculate_roi(total_gains, params.initial_investment)

    avg_revenue = total_revenue / params.project_timeline
    avg_ebitda = (total_revenue - total_costs) / params.project_timeline
    ebitda_margin = calculate_ebitda_margin(avg_ebitda, avg_revenue)

    logger.debug(
        f"Metrics for {params.project_timeline}-year project: "
        f"npv={npv:.2f} irr={irr_result.rate:.6f} payback={payback_period:.2f}"
    )

    return FinancialMetrics(
        npv=npv,
        irr=irr_result.rate,
        irr_converged=irr_result.converged,
        payback_period=payback_period,
        roi=roi,
        ebitda_margin=ebitda_margin,
        free_cash_flows=free_cash_flows,
        cumulative_cash_flows=cashflow.calculate_cumulative_cash_flows(free_cash_flows),
        present_values=irr.calculate_present_values(free_cash_flows, rate),
    )


def get_risk_level(npv: float) -> str:
    """Classify project risk from NPV: Low above 100,000, Medium above 0, else High."""
    if npv > 100000:
        return "Low"
    if npv > 0:
        return "Medium"
    return "High"
