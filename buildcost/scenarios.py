"""Scenario composer: strategies, sensitivity sweeps and variant comparison.

The cost cascade runs once per project. Strategies and sensitivity cases
only rescale the finished totals and re-run the cashflow and returns
stages.
"""

import logging
from dataclasses import dataclass
from itertools import product
from typing import Dict, List, Optional, Sequence

from .calculations.cascade import CostCascadeResult, compute_cost_groups
from .calculations.cashflow import CashflowSeries, simulate
from .calculations.financing import RateScenario, interest_rate_sensitivity
from .calculations.investment import InvestmentCostBreakdown, aggregate
from .calculations.masses import MassResult, compute_masses
from .calculations.returns import ReturnsResult, solve_returns
from .calculations.revenue import MarketFigures, RevenueProfile, derive_market_figures, resolve_revenue
from .models.lookups import Strategy
from .models.project import BASE_CASE, ProjectInputs, SensitivityCase

logger = logging.getLogger(__name__)

DEFAULT_SWEEP = (-10.0, 0.0, 10.0)


@dataclass(frozen=True)
class ProjectResult:
    """Everything derived from the building once, before any strategy."""

    inputs: ProjectInputs
    masses: MassResult
    cascade: CostCascadeResult
    breakdown: InvestmentCostBreakdown
    market: MarketFigures
    revenue: RevenueProfile


@dataclass(frozen=True)
class StrategyResult:
    """Cashflow and returns of one strategy under one sensitivity case."""

    strategy: Strategy
    case: SensitivityCase
    breakdown: InvestmentCostBreakdown
    revenue: RevenueProfile
    cashflow: CashflowSeries
    returns: ReturnsResult
    rate_sensitivity: List[RateScenario]


@dataclass(frozen=True)
class VariantComparison:
    """Named variants side by side with the best variant per metric."""

    strategy: Strategy
    projects: Dict[str, ProjectResult]
    results: Dict[str, StrategyResult]
    best: Dict[str, str]  # metric -> variant name


def run_project(inputs: ProjectInputs = ProjectInputs()) -> ProjectResult:
    """Masses, cost cascade, investment cost and revenue for one project.

    Args:
        inputs: Project input bundle; out-of-range values are clamped.

    Returns:
        ProjectResult shared by every strategy and sensitivity run.

    Example:
        >>> project = run_project(ProjectInputs())
        >>> project.masses.gross_floor_area
        1875.0
    """
    inputs = inputs.clamped()
    masses = compute_masses(inputs.building, inputs.config)
    cascade = compute_cost_groups(inputs.building, masses, inputs.fees, inputs.config)
    breakdown = aggregate(cascade, masses, inputs.land, inputs.investment, inputs.config)
    if cascade.flags:
        logger.info("%d lookup fallbacks while pricing", len(cascade.flags))
    return ProjectResult(
        inputs=inputs,
        masses=masses,
        cascade=cascade,
        breakdown=breakdown,
        market=derive_market_figures(breakdown, inputs.revenue),
        revenue=resolve_revenue(breakdown, masses, inputs.revenue),
    )


def run_strategy(
    project: ProjectResult,
    strategy: Strategy,
    case: SensitivityCase = BASE_CASE,
) -> StrategyResult:
    """Simulate one strategy with costs and prices scaled by ``case``."""
    inputs = project.inputs
    breakdown = project.breakdown.scaled(case.cost_factor)
    revenue = project.revenue.scaled(case.price_factor)
    series = simulate(breakdown, inputs.timeline, inputs.financing, strategy, revenue, inputs.config)
    returns = solve_returns(
        series,
        breakdown,
        inputs.financing,
        strategy,
        revenue,
        inputs.timeline,
        inputs.exit,
    )
    rates: List[RateScenario] = []
    if strategy == Strategy.HOLD and series.plan.loan_amount > 0:
        rates = interest_rate_sensitivity(series.plan, inputs.financing, revenue.annual_net_rent)
    return StrategyResult(
        strategy=strategy,
        case=case,
        breakdown=breakdown,
        revenue=revenue,
        cashflow=series,
        returns=returns,
        rate_sensitivity=rates,
    )


def run_both(project: ProjectResult, case: SensitivityCase = BASE_CASE) -> Dict[Strategy, StrategyResult]:
    return {strategy: run_strategy(project, strategy, case) for strategy in Strategy}


def sensitivity_grid(
    project: ProjectResult,
    strategy: Strategy,
    cost_pcts: Sequence[float] = DEFAULT_SWEEP,
    price_pcts: Sequence[float] = DEFAULT_SWEEP,
) -> List[StrategyResult]:
    """Every combination of cost and price deltas, cost-major order."""
    return [
        run_strategy(project, strategy, SensitivityCase(cost_pct, price_pct))
        for cost_pct, price_pct in product(cost_pcts, price_pcts)
    ]


def _metric(result: StrategyResult, name: str) -> Optional[float]:
    if name == "cost_per_m2":
        return result.breakdown.total_per_m2
    return getattr(result.returns, name)


# metric -> True when higher is better
COMPARISON_METRICS: Dict[Strategy, Dict[str, bool]] = {
    Strategy.HOLD: {
        "cost_per_m2": False,
        "net_initial_yield": True,
        "levered_irr": True,
        "unlevered_irr": True,
        "peak_capital": True,
    },
    Strategy.SELL: {
        "cost_per_m2": False,
        "margin": True,
        "annualized_irr": True,
        "peak_capital": True,
    },
}


def compare_variants(
    variants: Dict[str, ProjectInputs],
    strategy: Strategy = Strategy.HOLD,
    case: SensitivityCase = BASE_CASE,
) -> VariantComparison:
    """Run each named variant and pick the best one per metric.

    Metrics that are None for a variant (e.g. an IRR without a solution)
    do not compete.

    Args:
        variants: Variant name -> inputs.
        strategy: Strategy to compare under.
        case: Sensitivity case applied to every variant.

    Returns:
        VariantComparison.
    """
    projects = {name: run_project(inputs) for name, inputs in variants.items()}
    results = {name: run_strategy(project, strategy, case) for name, project in projects.items()}

    best: Dict[str, str] = {}
    for metric, higher_is_better in COMPARISON_METRICS[strategy].items():
        candidates = [(name, _metric(result, metric)) for name, result in results.items()]
        candidates = [(name, value) for name, value in candidates if value is not None]
        if not candidates:
            continue
        pick = max if higher_is_better else min
        best[metric] = pick(candidates, key=lambda item: item[1])[0]

    return VariantComparison(strategy=strategy, projects=projects, results=results, best=best)


def _fmt_pct(value: Optional[float]) -> str:
    return f"{value:>14.2%}" if value is not None else f"{'-':>14}"


def format_comparison_table(comparison: VariantComparison) -> str:
    """Format a variant comparison as a text table."""
    names = list(comparison.results)
    header = f"{'Metric':<22}" + "".join(f"{name:>15}" for name in names)
    width = len(header)
    lines = [
        "=" * width,
        f"VARIANT COMPARISON ({comparison.strategy.value})",
        "=" * width,
        header,
        "-" * width,
    ]
    rows = [
        ("Cost/m2", lambda r: f"{r.breakdown.total_per_m2:>13,.0f} €"),
        ("Total cost", lambda r: f"{r.breakdown.total:>13,.0f} €"),
        ("Peak capital", lambda r: f"{r.returns.peak_capital:>13,.0f} €"),
        ("Break-even month", lambda r: f"{r.returns.break_even_month if r.returns.break_even_month is not None else '-':>15}"),
    ]
    if comparison.strategy == Strategy.HOLD:
        rows += [
            ("Net initial yield", lambda r: _fmt_pct(r.returns.net_initial_yield) + " "),
            ("Levered IRR", lambda r: _fmt_pct(r.returns.levered_irr) + " "),
            ("Unlevered IRR", lambda r: _fmt_pct(r.returns.unlevered_irr) + " "),
        ]
    else:
        rows += [
            ("Margin", lambda r: _fmt_pct(r.returns.margin) + " "),
            ("Annualized IRR", lambda r: _fmt_pct(r.returns.annualized_irr) + " "),
        ]
    for label, fmt in rows:
        lines.append(f"{label:<22}" + "".join(fmt(comparison.results[name]) for name in names))
    lines.append("-" * width)
    for metric, name in comparison.best.items():
        lines.append(f"{'Best ' + metric:<22}{name:>15}")
    lines.append("=" * width)
    return "\n".join(lines)
