"""
Project Parameters

Immutable, validated inputs shared by every calculation in the engine.
"""

import math
from dataclasses import dataclass, field, replace, asdict
from typing import Dict, Sequence, Tuple

from valuation.calculations.errors import InvalidParameterError

MAX_TERMINAL_GROWTH_RATE = 0.1


def _check_number(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParameterError(f"{name} must be a number", field=name)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite", field=name)


def _check_non_negative(name: str, value: float) -> None:
    _check_number(name, value)
    if value < 0:
        raise InvalidParameterError(f"{name} cannot be negative", field=name)


def _check_range(name: str, value: float, low: float, high: float) -> None:
    _check_number(name, value)
    if value < low or value > high:
        raise InvalidParameterError(
            f"{name} must be between {low} and {high}, got {value}", field=name
        )


def value_at(values: Sequence[float], index: int) -> float:
    """Return values[index], or 0.0 when the index is out of range."""
    if 0 <= index < len(values):
        return values[index]
    return 0.0


@dataclass(frozen=True)
class ProjectParameters:
    """
    Inputs for a single capital project.

    Revenues and costs are per project year, first year first. Sequences
    shorter than the timeline are allowed; missing years read as 0.
    """

    initial_investment: float
    project_timeline: int
    annual_revenues: Tuple[float, ...] = field(default_factory=tuple)
    operating_costs: Tuple[float, ...] = field(default_factory=tuple)
    tax_rate: float = 0.25
    discount_rate: float = 0.10
    depreciation_rate: float = 0.20
    working_capital: float = 0.0
    terminal_growth_rate: float = 0.02
    terminal_value: float = 0.0

    def __post_init__(self):
        # Freeze list inputs so perturbed copies never share state
        object.__setattr__(self, "annual_revenues", tuple(self.annual_revenues))
        object.__setattr__(self, "operating_costs", tuple(self.operating_costs))
        self._validate()

    def _validate(self) -> None:
        _check_non_negative("initial_investment", self.initial_investment)

        timeline = self.project_timeline
        if isinstance(timeline, bool) or not isinstance(timeline, int):
            raise InvalidParameterError(
                "project_timeline must be an integer", field="project_timeline"
            )
        if timeline < 1:
            raise InvalidParameterError(
                "project_timeline must be at least 1 year", field="project_timeline"
            )

        for name in ("tax_rate", "discount_rate", "depreciation_rate"):
            _check_range(name, getattr(self, name), 0.0, 1.0)
        _check_range(
            "terminal_growth_rate",
            self.terminal_growth_rate,
            0.0,
            MAX_TERMINAL_GROWTH_RATE,
        )
        _check_non_negative("working_capital", self.working_capital)
        _check_non_negative("terminal_value", self.terminal_value)

        for i, revenue in enumerate(self.annual_revenues):
            _check_non_negative(f"annual_revenues[{i}]", revenue)
        for i, cost in enumerate(self.operating_costs):
            _check_non_negative(f"operating_costs[{i}]", cost)

    @property
    def annual_depreciation(self) -> float:
        """Straight-line depreciation on the original basis, same every year."""
        return self.initial_investment * self.depreciation_rate

    def revenue_for(self, year: int) -> float:
        """Revenue for a 1-based project year (0 when not provided)."""
        return value_at(self.annual_revenues, year - 1)

    def cost_for(self, year: int) -> float:
        """Operating cost for a 1-based project year (0 when not provided)."""
        return value_at(self.operating_costs, year - 1)

    def with_changes(self, **changes) -> "ProjectParameters":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)

    def scaled(
        self, revenue_factor: float = 1.0, cost_factor: float = 1.0
    ) -> "ProjectParameters":
        """Return a copy with every revenue and cost multiplied by a factor."""
        return self.with_changes(
            annual_revenues=tuple(r * revenue_factor for r in self.annual_revenues),
            operating_costs=tuple(c * cost_factor for c in self.operating_costs),
        )

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["annual_revenues"] = list(self.annual_revenues)
        data["operating_costs"] = list(self.operating_costs)
        return data
