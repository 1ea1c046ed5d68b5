"""
IRR and NPV Calculations

Discounted valuation of annual cash flows and an IRR solver using the
Newton-Raphson method, matching the spreadsheet NPV/IRR convention where
index 0 is undiscounted.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import List, Sequence

from valuation.calculations.errors import InvalidParameterError, NumericInstabilityWarning

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-7
DEFAULT_GUESS = 0.1


@dataclass(frozen=True)
class IRRResult:
    """Outcome of an IRR search."""

    rate: float
    converged: bool
    iterations: int


def _check_rate(discount_rate: float) -> None:
    if discount_rate <= -1:
        raise InvalidParameterError(
            f"Discount rate must be greater than -1, got {discount_rate}",
            field="discount_rate",
        )


def _npv(cash_flows: Sequence[float], rate: float) -> float:
    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf / ((1 + rate) ** period)
    return npv


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Annual discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value

    Raises:
        InvalidParameterError: If discount_rate <= -1
    """
    _check_rate(discount_rate)
    return _npv(cash_flows, discount_rate)


def calculate_present_values(
    cash_flows: Sequence[float], discount_rate: float
) -> List[float]:
    """Discount each cash flow back to period 0."""
    _check_rate(discount_rate)
    return [cf / ((1 + discount_rate) ** period) for period, cf in enumerate(cash_flows)]


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    dnpv = 0.0
    for period, cf in enumerate(cash_flows):
        dnpv -= (period * cf) / ((1 + rate) ** (period + 1))
    return dnpv


def _not_converged(rate: float, iterations: int, reason: str) -> IRRResult:
    logger.debug(f"IRR did not converge after {iterations} iterations: {reason}")
    warnings.warn(
        f"IRR did not converge ({reason}); returning {rate}",
        NumericInstabilityWarning,
        stacklevel=3,
    )
    return IRRResult(rate=rate, converged=False, iterations=iterations)


def solve_irr(cash_flows: Sequence[float], guess: float = DEFAULT_GUESS) -> IRRResult:
    """
    Search for the rate where NPV is zero using Newton-Raphson.

    There is no bracketing fallback. Cash flows with several sign changes can
    land on a non-physical root or stop on the last iterate; the result is
    still returned, flagged with converged=False where the step never settled.

    The search also ends early, unconverged, as soon as an iterate reaches a
    rate at or below -1, where the discount factor is undefined. For some
    divergent cash flow patterns this returns a different best effort than
    iterating on would.

    Non-convergence is logged at DEBUG and reported through
    NumericInstabilityWarning; callers that run many searches summarise it.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        IRRResult with the estimate, a convergence flag and the iteration count

    Raises:
        ValueError: If fewer than 2 cash flows are given
    """
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    rate = guess

    for iteration in range(1, MAX_ITERATIONS + 1):
        if rate <= -1:
            return _not_converged(rate, iteration, "rate left the domain above -1")

        try:
            npv = _npv(cash_flows, rate)
            dnpv = _npv_derivative(cash_flows, rate)
        except (OverflowError, ZeroDivisionError):
            return _not_converged(rate, iteration, "NPV overflowed")

        if abs(dnpv) < TOLERANCE:
            return _not_converged(rate, iteration, "derivative too small")

        new_rate = rate - npv / dnpv

        if abs(new_rate - rate) < TOLERANCE:
            return IRRResult(rate=rate, converged=True, iterations=iteration)

        rate = new_rate

    return _not_converged(rate, MAX_ITERATIONS, "iteration limit reached")


def calculate_irr(cash_flows: Sequence[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR (Internal Rate of Return) for periodic cash flows.

    Always returns a number; use solve_irr() to see whether it converged.
    """
    return solve_irr(cash_flows, guess).rate
