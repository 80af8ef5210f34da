"""Internal rate of return: Newton-Raphson with a bisection fallback."""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
import numpy_financial as npf

logger = logging.getLogger(__name__)


def npv(rate: float, cashflows: Sequence[float]) -> float:
    """NPV with the first cashflow at t=0."""
    return float(npf.npv(rate, cashflows))


def npv_derivative(rate: float, cashflows: Sequence[float]) -> float:
    """d NPV / d rate."""
    t = np.arange(len(cashflows))
    return float(np.sum(-t * np.asarray(cashflows, dtype=float) / (1 + rate) ** (t + 1)))


def has_sign_change(cashflows: Sequence[float]) -> bool:
    return any(cf > 0 for cf in cashflows) and any(cf < 0 for cf in cashflows)


@dataclass(frozen=True)
class NewtonRaphson:
    """Newton iteration from a fixed guess.

    Gives up (returns None) when the derivative magnitude drops below
    ``min_derivative``, the rate leaves (-1, inf) or the budget runs out.
    """

    guess: float = 0.1
    max_iterations: int = 100
    tolerance: float = 1e-7
    min_derivative: float = 1e-12

    def solve(self, cashflows: Sequence[float]) -> Optional[float]:
        rate = self.guess
        for _ in range(self.max_iterations):
            value = npv(rate, cashflows)
            derivative = npv_derivative(rate, cashflows)
            if abs(derivative) < self.min_derivative:
                return None
            step = value / derivative
            rate -= step
            if rate <= -1 or not math.isfinite(rate):
                return None
            if abs(step) < self.tolerance:
                return rate
        return None


@dataclass(frozen=True)
class Bisection:
    """Bisection over a fixed bracket; None when the bracket holds no sign change."""

    low: float = -0.5
    high: float = 5.0
    max_iterations: int = 200
    tolerance: float = 1e-7

    def solve(self, cashflows: Sequence[float]) -> Optional[float]:
        low, high = self.low, self.high
        f_low = npv(low, cashflows)
        f_high = npv(high, cashflows)
        if f_low == 0:
            return low
        if f_high == 0:
            return high
        if f_low * f_high > 0:
            return None
        for _ in range(self.max_iterations):
            mid = (low + high) / 2
            f_mid = npv(mid, cashflows)
            if f_mid == 0 or (high - low) / 2 < self.tolerance:
                return mid
            if f_low * f_mid < 0:
                high = mid
            else:
                low, f_low = mid, f_mid
        return None


@dataclass(frozen=True)
class FallbackSolver:
    """Try each solver in order; the first answer wins."""

    solvers: Tuple = (NewtonRaphson(), Bisection())

    def solve(self, cashflows: Sequence[float]) -> Optional[float]:
        for solver in self.solvers:
            rate = solver.solve(cashflows)
            if rate is not None:
                return rate
            logger.debug("%s found no IRR, falling back", type(solver).__name__)
        return None


DEFAULT_SOLVER = FallbackSolver()


def solve_irr(cashflows: Sequence[float], solver: FallbackSolver = DEFAULT_SOLVER) -> Optional[float]:
    """Rate at which the NPV of ``cashflows`` is zero.

    Args:
        cashflows: Periodic cashflows, the first at t=0.
        solver: Solver strategy, Newton-Raphson then bisection by default.

    Returns:
        The rate, or None when there is no sign change or no solver
        converges. None must never be shown as 0 %.

    Example:
        >>> round(solve_irr([-100, 10, 10, 110]), 6)
        0.1
    """
    if len(cashflows) < 2 or not has_sign_change(cashflows):
        return None
    rate = solver.solve(cashflows)
    if rate is None:
        logger.warning("IRR did not converge for %d cashflows", len(cashflows))
    return rate
