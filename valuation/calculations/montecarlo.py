"""
Monte Carlo Simulation

Runs the metrics pipeline many times with randomly perturbed revenues, costs
and discount rate, and summarises the resulting NPV distribution.

Every iteration owns a generator seeded from (base seed, iteration index),
so a run is reproducible from its seed regardless of how the iterations are
scheduled across threads.
"""

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, asdict
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from valuation.calculations.errors import InvalidParameterError, SimulationCancelledError
from valuation.calculations.metrics import calculate_metrics
from valuation.calculations.parameters import ProjectParameters

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 1000
HISTOGRAM_BUCKETS = 20

REVENUE_VARIATION = (0.8, 1.2)
COST_VARIATION = (0.85, 1.15)
DISCOUNT_RATE_VARIATION = (0.9, 1.1)

PERCENTILES = {"p10": 0.10, "p25": 0.25, "p50": 0.50, "p75": 0.75, "p90": 0.90}


@dataclass(frozen=True)
class HistogramBucket:
    start: float
    end: float
    count: int


@dataclass(frozen=True)
class MonteCarloResult:
    """NPV/IRR samples and summary statistics of a simulation run."""

    npv_distribution: List[float]
    irr_distribution: List[float]
    probability_of_positive_npv: float
    expected_npv: float
    npv_percentiles: Dict[str, float]
    npv_std_dev: float
    confidence_level: str
    npv_histogram: List[HistogramBucket]
    iterations: int
    seed: int

    def to_dict(self) -> Dict:
        return asdict(self)


def generate_seed() -> int:
    """Fresh 32-bit base seed from OS entropy, exact in JSON and JavaScript numbers."""
    return int(np.random.SeedSequence().generate_state(1, np.uint32)[0])


def iteration_rng(seed: int, index: int) -> np.random.Generator:
    """Independent generator for one iteration of a seeded run."""
    return np.random.default_rng([seed, index])


def draw_variations(rng: np.random.Generator) -> Tuple[float, float, float]:
    """Draw (revenue factor, cost factor, discount rate factor) for one iteration."""
    revenue_variation = rng.uniform(*REVENUE_VARIATION)
    cost_variation = rng.uniform(*COST_VARIATION)
    discount_variation = rng.uniform(*DISCOUNT_RATE_VARIATION)
    return float(revenue_variation), float(cost_variation), float(discount_variation)


def simulate_iteration(
    params: ProjectParameters, seed: int, index: int
) -> Tuple[float, float, bool]:
    """
    Run one perturbed projection.

    Variations are drawn once and applied to every year.

    Returns:
        (npv, irr, irr converged) of the perturbed project
    """
    revenue_variation, cost_variation, discount_variation = draw_variations(
        iteration_rng(seed, index)
    )
    simulated = params.scaled(revenue_variation, cost_variation)
    metrics = calculate_metrics(
        simulated, discount_rate=params.discount_rate * discount_variation
    )
    return metrics.npv, metrics.irr, metrics.irr_converged


def calculate_percentiles(samples: List[float]) -> Dict[str, float]:
    """
    Pick percentiles from an ascending copy of the samples.

    Uses the discrete index floor(n * q) with no interpolation.
    """
    ordered = sorted(samples)
    n = len(ordered)
    return {name: ordered[math.floor(n * q)] for name, q in PERCENTILES.items()}


def get_confidence_level(probability: float) -> str:
    """High at 80% chance of positive NPV, Medium at 60%, otherwise Low."""
    if probability >= 0.8:
        return "High"
    if probability >= 0.6:
        return "Medium"
    return "Low"


def build_histogram(
    samples: List[float], buckets: int = HISTOGRAM_BUCKETS
) -> List[HistogramBucket]:
    """Equal-width histogram between the smallest and largest sample."""
    counts, edges = np.histogram(np.asarray(samples, dtype=float), bins=buckets)
    return [
        HistogramBucket(start=float(edges[i]), end=float(edges[i + 1]), count=int(count))
        for i, count in enumerate(counts)
    ]


def run_monte_carlo(
    params: ProjectParameters,
    iterations: int = DEFAULT_ITERATIONS,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> MonteCarloResult:
    """
    Run a Monte Carlo simulation of project NPV and IRR.

    Args:
        params: Base case parameters
        iterations: Number of simulated projects
        seed: Base seed; drawn from OS entropy when omitted (reported in the
            result so the run can be replayed)
        max_workers: Fan iterations out over this many threads when > 1
        should_cancel: Polled between iterations; returning True aborts

    Returns:
        MonteCarloResult with samples in iteration order

    Raises:
        InvalidParameterError: If iterations < 1
        SimulationCancelledError: If should_cancel() returned True
    """
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 1:
        raise InvalidParameterError("iterations must be a positive integer", field="iterations")

    if seed is None:
        seed = generate_seed()
    elif seed < 0:
        raise InvalidParameterError("seed cannot be negative", field="seed")

    completed = 0
    completed_lock = threading.Lock()

    def run_one(index: int) -> Tuple[float, float, bool]:
        nonlocal completed
        if should_cancel is not None and should_cancel():
            with completed_lock:
                raise SimulationCancelledError(completed, iterations)
        sample = simulate_iteration(params, seed, index)
        with completed_lock:
            completed += 1
        return sample

    try:
        if max_workers and max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                samples = list(executor.map(run_one, range(iterations)))
        else:
            samples = [run_one(index) for index in range(iterations)]
    except SimulationCancelledError as e:
        logger.warning(f"Monte Carlo run cancelled: {e}")
        raise

    npv_results = [npv for npv, _, _ in samples]
    irr_results = [irr for _, irr, _ in samples]
    irr_non_converged = sum(1 for _, _, converged in samples if not converged)

    probability_of_positive_npv = sum(1 for npv in npv_results if npv > 0) / iterations
    expected_npv = sum(npv_results) / iterations

    result = MonteCarloResult(
        npv_distribution=npv_results,
        irr_distribution=irr_results,
        probability_of_positive_npv=probability_of_positive_npv,
        expected_npv=expected_npv,
        npv_percentiles=calculate_percentiles(npv_results),
        npv_std_dev=float(np.std(npv_results)),
        confidence_level=get_confidence_level(probability_of_positive_npv),
        npv_histogram=build_histogram(npv_results),
        iterations=iterations,
        seed=seed,
    )

    logger.info(
        f"Monte Carlo: {iterations} iterations (seed={seed}), "
        f"expected NPV={expected_npv:.2f}, P(NPV>0)={probability_of_positive_npv:.3f}, "
        f"IRR not converged in {irr_non_converged}"
    )
    return result
