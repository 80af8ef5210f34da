"""Return metrics for the hold and sell strategies."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models.lookups import Strategy
from ..models.project import ExitAssumptions, FinancingTerms, TimelinePhases
from .cashflow import CashflowSeries
from .financing import FinancingPlan, amortization_schedule, remaining_balance
from .investment import InvestmentCostBreakdown
from .irr import solve_irr
from .revenue import RevenueProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReturnsResult:
    """Strategy-tagged return metrics; None where a metric does not apply."""

    strategy: Strategy
    break_even_month: Optional[int]
    peak_capital: float
    total_profit: Optional[float]

    # Hold
    net_initial_yield: Optional[float] = None
    cash_on_cash: Optional[float] = None
    dscr: Optional[float] = None
    levered_irr: Optional[float] = None
    unlevered_irr: Optional[float] = None
    equity_multiple: Optional[float] = None
    average_cash_yield: Optional[float] = None
    exit_value: Optional[float] = None
    levered_cashflows: Tuple[float, ...] = ()
    unlevered_cashflows: Tuple[float, ...] = ()

    # Sell
    sale_proceeds: Optional[float] = None
    total_cost: Optional[float] = None
    margin: Optional[float] = None
    return_on_equity: Optional[float] = None
    annualized_irr: Optional[float] = None


def annual_debt_service(plan: FinancingPlan, years: int) -> List[float]:
    """Debt service per year from the monthly annuity schedule."""
    rows = amortization_schedule(plan, years * 12)
    service = [0.0] * years
    for row in rows:
        service[(row.month - 1) // 12] += row.payment
    return service


def exit_value(
    total_cost: float,
    years: int,
    exit_assumptions: ExitAssumptions = ExitAssumptions(),
) -> float:
    """Sale value at the end of the hold, net of selling costs."""
    if exit_assumptions.residual_value_share is not None:
        gross = total_cost * exit_assumptions.residual_value_share
    else:
        gross = total_cost * (1 + exit_assumptions.appreciation_rate) ** years
    return gross * (1 - exit_assumptions.selling_cost_rate)


def hold_cashflows(
    breakdown: InvestmentCostBreakdown,
    plan: FinancingPlan,
    revenue: RevenueProfile,
    years: int,
    exit_assumptions: ExitAssumptions = ExitAssumptions(),
    levered_view: bool = True,
) -> Tuple[List[float], List[float], float]:
    """Annual levered and unlevered cashflow vectors for the hold.

    Year 0 is the equity outlay (levered) or the full cost (unlevered).
    Years 1..H carry net rent escalated annually, less debt service when
    levered; the last year adds the exit value, less the remaining loan
    when levered.

    Returns:
        (levered, unlevered, net exit value).
    """
    total = breakdown.total
    net_exit = exit_value(total, years, exit_assumptions)
    rents = [revenue.annual_net_rent * (1 + revenue.rent_escalation) ** (y - 1) for y in range(1, years + 1)]

    unlevered = [-total] + rents
    unlevered[-1] += net_exit

    if levered_view and plan.enabled and plan.loan_amount > 0:
        service = annual_debt_service(plan, years)
        levered = [-(plan.equity + plan.financing_cost)]
        levered += [rent - ds for rent, ds in zip(rents, service)]
        levered[-1] += net_exit - remaining_balance(plan, years * 12)
    else:
        levered = list(unlevered)
    return levered, unlevered, net_exit


def _hold_returns(
    series: CashflowSeries,
    breakdown: InvestmentCostBreakdown,
    revenue: RevenueProfile,
    timeline: TimelinePhases,
    exit_assumptions: ExitAssumptions,
    financed: bool,
) -> ReturnsResult:
    plan = series.plan
    total = breakdown.total
    noi = revenue.annual_net_rent
    years = max(1, timeline.holding_years)

    cash_on_cash = dscr = None
    if financed:
        debt_service = plan.annual_debt_service
        dscr = noi / debt_service if debt_service > 0 else None
        cash_on_cash = (noi - debt_service) / plan.equity if plan.equity > 0 else None

    levered, unlevered, net_exit = hold_cashflows(breakdown, plan, revenue, years, exit_assumptions, financed)
    outlay = -levered[0]
    distributions = levered[1:]
    annual_cash = list(distributions)
    annual_cash[-1] -= net_exit - (remaining_balance(plan, years * 12) if financed else 0.0)

    return ReturnsResult(
        strategy=Strategy.HOLD,
        break_even_month=series.break_even_month,
        peak_capital=series.peak_capital,
        total_profit=sum(levered),
        net_initial_yield=noi / total if total > 0 else None,
        cash_on_cash=cash_on_cash,
        dscr=dscr,
        levered_irr=solve_irr(levered),
        unlevered_irr=solve_irr(unlevered),
        equity_multiple=sum(distributions) / outlay if outlay > 0 else None,
        average_cash_yield=sum(annual_cash) / len(annual_cash) / outlay if outlay > 0 else None,
        exit_value=net_exit,
        levered_cashflows=tuple(levered),
        unlevered_cashflows=tuple(unlevered),
    )


def _sell_returns(
    series: CashflowSeries,
    breakdown: InvestmentCostBreakdown,
    timeline: TimelinePhases,
    financed: bool,
) -> ReturnsResult:
    plan = series.plan
    proceeds = series.total_sale_proceeds
    interest_after_construction = sum(entry.interest for entry in series.entries)
    total_cost = breakdown.total + plan.financing_cost + interest_after_construction
    profit = proceeds - total_cost
    margin = profit / total_cost if total_cost > 0 else None
    return_on_equity = profit / plan.equity if financed and plan.equity > 0 else None

    years = (max(timeline.construction_end, timeline.marketing_end) - timeline.planning_start) / 12
    base = return_on_equity if financed else margin
    annualized = None
    if base is not None and years > 0 and 1 + base > 0:
        annualized = (1 + base) ** (1 / years) - 1

    return ReturnsResult(
        strategy=Strategy.SELL,
        break_even_month=series.break_even_month,
        peak_capital=series.peak_capital,
        total_profit=profit,
        sale_proceeds=proceeds,
        total_cost=total_cost,
        margin=margin,
        return_on_equity=return_on_equity,
        annualized_irr=annualized,
    )


def solve_returns(
    series: CashflowSeries,
    breakdown: InvestmentCostBreakdown,
    financing: FinancingTerms = FinancingTerms(),
    strategy: Optional[Strategy] = None,
    revenue: Optional[RevenueProfile] = None,
    timeline: TimelinePhases = TimelinePhases(),
    exit_assumptions: ExitAssumptions = ExitAssumptions(),
) -> ReturnsResult:
    """Compute the return metrics for a simulated cashflow series.

    Hold IRRs are solved on annual vectors twice, levered and unlevered;
    the sell strategy compounds its single payoff over the project years
    instead of using the IRR solver.

    Args:
        series: Output of ``simulate``; carries the financing plan.
        breakdown: Investment cost used for yields and the exit value.
        financing: Loan terms; disabled financing leaves levered metrics
            equal to the unlevered ones.
        strategy: Defaults to the series' strategy.
        revenue: Stabilized rent; required for hold metrics.
        timeline: Phase months and holding years (clamped).
        exit_assumptions: Hold exit value.

    Returns:
        ReturnsResult.
    """
    strategy = strategy or series.strategy
    timeline = timeline.clamped()
    financed = financing.enabled and series.plan.enabled and series.plan.loan_amount > 0
    if strategy == Strategy.SELL:
        result = _sell_returns(series, breakdown, timeline, financed)
    else:
        result = _hold_returns(
            series,
            breakdown,
            revenue or RevenueProfile(0.0, 0.0, 0.0, 0.0),
            timeline,
            exit_assumptions,
            financed,
        )
    logger.debug(
        "Returns %s: levered IRR %s, unlevered IRR %s, margin %s",
        strategy.value,
        result.levered_irr,
        result.unlevered_irr,
        result.margin,
    )
    return result
