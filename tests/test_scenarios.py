"""
Tests for scenario and sensitivity analysis.
"""

import pytest

from valuation.calculations.errors import InvalidParameterError
from valuation.calculations.metrics import calculate_metrics
from valuation.calculations.scenarios import (
    best_case_parameters,
    calculate_scenario_analysis,
    calculate_sensitivity,
    worst_case_parameters,
)


class TestScenarioAnalysis:
    """Test best/base/worst case analysis."""

    def test_scenario_ordering(self, growth_params):
        """Better inputs never lower NPV."""
        analysis = calculate_scenario_analysis(growth_params)
        assert analysis.best_case.npv >= analysis.base_case.npv >= analysis.worst_case.npv

    def test_base_case_matches_metrics(self, growth_params):
        """The base case is the unmodified pipeline."""
        analysis = calculate_scenario_analysis(growth_params)
        assert analysis.base_case == calculate_metrics(growth_params)

    def test_perturbation_factors(self, growth_params):
        """Best: +20% revenue / -10% cost. Worst: -20% revenue / +15% cost."""
        best = best_case_parameters(growth_params)
        worst = worst_case_parameters(growth_params)
        assert best.annual_revenues[0] == pytest.approx(72000)
        assert best.operating_costs[0] == pytest.approx(18000)
        assert worst.annual_revenues[0] == pytest.approx(48000)
        assert worst.operating_costs[0] == pytest.approx(23000)

    def test_best_case_cash_flow(self, growth_params):
        """Best case year 1: EBIT = 72k - 18k - 20k = 34k, tax 8.5k, FCF 45.5k."""
        analysis = calculate_scenario_analysis(growth_params)
        assert analysis.best_case.free_cash_flows[1] == pytest.approx(45500)

    def test_inputs_unchanged(self, growth_params):
        """Scenario runs leave the base parameters untouched."""
        revenues = growth_params.annual_revenues
        calculate_scenario_analysis(growth_params)
        assert growth_params.annual_revenues == revenues

    def test_to_dict(self, growth_params):
        """Serialises to nested plain data."""
        data = calculate_scenario_analysis(growth_params).to_dict()
        assert set(data) == {"best_case", "base_case", "worst_case"}
        assert isinstance(data["base_case"]["free_cash_flows"], list)


class TestSensitivity:
    """Test the one-at-a-time sensitivity sweep."""

    def test_all_drivers_reported(self, growth_params):
        """One row per driver, largest impact first."""
        rows = calculate_sensitivity(growth_params)
        assert {row.name for row in rows} == {
            "Annual Revenues",
            "Operating Costs",
            "Discount Rate",
            "Initial Investment",
            "Tax Rate",
        }
        impacts = [row.impact for row in rows]
        assert impacts == sorted(impacts, reverse=True)

    def test_revenue_direction(self, growth_params):
        """More revenue means more NPV."""
        rows = {row.name: row for row in calculate_sensitivity(growth_params, swing=0.1)}
        revenue = rows["Annual Revenues"]
        assert revenue.base_value == pytest.approx(300000)
        assert revenue.min_value == pytest.approx(270000)
        assert revenue.max_value == pytest.approx(330000)
        assert revenue.npv_high > revenue.npv_low

    def test_discount_rate_direction(self, growth_params):
        """A higher discount rate lowers NPV."""
        rows = {row.name: row for row in calculate_sensitivity(growth_params)}
        rate = rows["Discount Rate"]
        assert rate.max_value == pytest.approx(0.12)
        assert rate.npv_high < rate.npv_low

    def test_zero_swing_has_no_impact(self, growth_params):
        """Without a swing every row is the base case."""
        for row in calculate_sensitivity(growth_params, swing=0):
            assert row.impact == pytest.approx(0)

    def test_invalid_swing(self, growth_params):
        """Swings must keep factors positive."""
        with pytest.raises(InvalidParameterError):
            calculate_sensitivity(growth_params, swing=1.5)
