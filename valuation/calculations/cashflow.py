"""
Cash Flow Calculations

Projects annual free cash flows for a capital project and derives the
running cumulative position and payback period.
"""

from typing import List, Sequence

from valuation.calculations.parameters import ProjectParameters


def calculate_year_free_cash_flow(params: ProjectParameters, year: int) -> float:
    """
    Calculate operating free cash flow for a single project year.

    Depreciation is straight-line on the original investment and identical
    every year. Losses are not taxed and carry no tax shield forward.

    Args:
        params: Project parameters
        year: Project year (1-based)

    Returns:
        NOPAT plus depreciation for the year
    """
    revenue = params.revenue_for(year)
    operating_cost = params.cost_for(year)
    depreciation = params.annual_depreciation

    ebit = revenue - operating_cost - depreciation
    tax = ebit * params.tax_rate if ebit > 0 else 0.0
    nopat = ebit - tax

    return nopat + depreciation


def calculate_free_cash_flows(params: ProjectParameters) -> List[float]:
    """
    Generate the free cash flow series for a project.

    Index 0 is the initial outlay (investment plus working capital). The
    final year also recovers working capital and adds the terminal value.

    Returns:
        List of length project_timeline + 1
    """
    cash_flows = [-(params.initial_investment + params.working_capital)]

    for year in range(1, params.project_timeline + 1):
        cash_flows.append(calculate_year_free_cash_flow(params, year))

    cash_flows[-1] += params.terminal_value + params.working_capital

    return cash_flows


def calculate_cumulative_cash_flows(cash_flows: Sequence[float]) -> List[float]:
    """Running prefix sum of cash flows."""
    cumulative = []
    total = 0.0
    for cf in cash_flows:
        total += cf
        cumulative.append(total)
    return cumulative


def calculate_payback_period(cash_flows: Sequence[float]) -> float:
    """
    Calculate the payback period in years.

    Interpolates linearly inside the year where the cumulative position
    first turns non-negative.

    Args:
        cash_flows: Cash flows with the initial outlay at index 0

    Returns:
        Years to break even, or len(cash_flows) when the project never
        breaks even within the horizon
    """
    cumulative_cash_flow = 0.0

    for i, cf in enumerate(cash_flows):
        previous_cumulative = cumulative_cash_flow
        cumulative_cash_flow += cf
        if cumulative_cash_flow >= 0:
            if i == 0:
                return 0.0
            return i - 1 + abs(previous_cumulative) / cf

    return float(len(cash_flows))

