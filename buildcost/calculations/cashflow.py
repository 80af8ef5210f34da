"""Monthly cashflow simulation with equity-first funding and loan repayment."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import DisbursementCurve, Strategy
from ..models.project import FinancingTerms, TimelinePhases
from .financing import FinancingPlan, plan_financing
from .investment import FEES, LAND, InvestmentCostBreakdown
from .revenue import RevenueProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyCashflowEntry:
    """One month of the project from the investor's point of view.

    Loan draws count as inflows so that the cumulative balance is the
    equity position.
    """

    month: int
    # Outflows
    cost: float  # investment cost disbursed
    financing_cost: float  # construction interest and commitment fee
    operating_cost: float
    interest: float
    principal: float
    # Inflows
    loan_draw: float
    rent: float
    sale_proceeds: float
    # Totals
    outflow: float
    inflow: float
    cumulative: float
    loan_balance: float  # end of month
    occupancy: float = 0.0

    @property
    def net(self) -> float:
        return self.inflow - self.outflow

    @property
    def debt_service(self) -> float:
        return self.interest + self.principal


@dataclass(frozen=True)
class CashflowSeries:
    """Ordered monthly entries for months 0..horizon."""

    strategy: Strategy
    entries: Tuple[MonthlyCashflowEntry, ...]
    plan: FinancingPlan
    break_even_month: Optional[int]
    peak_capital: float  # most negative cumulative balance, 0 if never negative

    @property
    def horizon(self) -> int:
        return len(self.entries) - 1

    def get_month(self, month: int) -> MonthlyCashflowEntry:
        """Entry for a month index (0-indexed)."""
        if month < 0 or month >= len(self.entries):
            raise IndexError(f"Month {month} out of range [0, {len(self.entries) - 1}]")
        return self.entries[month]

    @property
    def loan_balances(self) -> List[float]:
        return [entry.loan_balance for entry in self.entries]

    @property
    def cumulative(self) -> List[float]:
        return [entry.cumulative for entry in self.entries]

    @property
    def total_cost(self) -> float:
        return sum(entry.cost for entry in self.entries)

    @property
    def total_sale_proceeds(self) -> float:
        return sum(entry.sale_proceeds for entry in self.entries)


def disbursement_weights(
    n_months: int,
    curve: DisbursementCurve = DisbursementCurve.LINEAR,
    alpha: float = 2.0,
    beta: float = 3.0,
) -> List[float]:
    """Monthly weights summing to 1.0 over a window.

    The Beta curve evaluates the Beta(alpha, beta) density at each month's
    midpoint and normalizes.

    Args:
        n_months: Window length.
        curve: Linear or Beta-shaped.
        alpha: First Beta shape parameter.
        beta: Second Beta shape parameter.

    Returns:
        List of ``n_months`` weights, empty when the window is empty.
    """
    if n_months <= 0:
        return []
    if curve == DisbursementCurve.LINEAR:
        return [1.0 / n_months] * n_months
    x = (np.arange(n_months) + 0.5) / n_months
    density = x ** (alpha - 1) * (1 - x) ** (beta - 1)
    total = density.sum()
    if total <= 0:
        return [1.0 / n_months] * n_months
    return (density / total).tolist()


def _spread(
    amount: float,
    start: int,
    end: int,
    weights: Optional[List[float]] = None,
) -> Dict[int, float]:
    """Distribute ``amount`` over [start, end); an empty window pays at start."""
    months = end - start
    if months <= 0:
        return {start: amount}
    if weights is None:
        weights = [1.0 / months] * months
    return {start + i: amount * w for i, w in enumerate(weights)}


def _add(target: Dict[int, float], source: Dict[int, float]) -> None:
    for month, value in source.items():
        target[month] = target.get(month, 0.0) + value


def _occupancy(month: int, timeline: TimelinePhases) -> float:
    if month >= timeline.marketing_end:
        return 1.0
    if month < timeline.marketing_start:
        return 0.0
    return (month - timeline.marketing_start) / (timeline.marketing_end - timeline.marketing_start)


def simulate(
    breakdown: InvestmentCostBreakdown,
    timeline: TimelinePhases = TimelinePhases(),
    financing: FinancingTerms = FinancingTerms(),
    strategy: Strategy = Strategy.HOLD,
    revenue: Optional[RevenueProfile] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CashflowSeries:
    """Walk the project month by month.

    Land is paid at planning start, the planning share of fees evenly
    over the planning phase and every other cost over the construction
    phase along the configured curve. Costs are funded with equity first,
    then loan draws. Hold: rent ramps in over marketing and the annuity
    runs from construction end. Sell: proceeds follow a symmetric Beta
    curve over marketing, interest is paid on the balance after
    construction and proceeds repay the loan.

    Args:
        breakdown: Investment cost.
        timeline: Phase months.
        financing: Loan terms.
        strategy: Hold or sell.
        revenue: Stabilized rent and sale proceeds; None means no revenue.
        config: Engine constants (fee split, curve shapes).

    Returns:
        CashflowSeries for months 0..horizon.
    """
    timeline = timeline.clamped()
    revenue = revenue or RevenueProfile(0.0, 0.0, 0.0, 0.0)
    plan = plan_financing(breakdown.total, financing, timeline)
    horizon = timeline.horizon(strategy)

    # Cost disbursement
    land = breakdown.amount(LAND)
    planning_fees = breakdown.amount(FEES) * config.planning_fee_share
    construction_pool = breakdown.total - land - planning_fees
    if construction_pool < 0:
        # A subsidy beyond the construction pool reduces planning fees, then land
        planning_fees = max(0.0, planning_fees + construction_pool)
        land = max(0.0, breakdown.total - planning_fees)
        construction_pool = 0.0

    costs: Dict[int, float] = {timeline.planning_start: land}
    _add(costs, _spread(planning_fees, timeline.planning_start, timeline.planning_end))
    construction_weights = disbursement_weights(
        timeline.construction_months,
        timeline.construction_curve,
        config.construction_curve_alpha,
        config.construction_curve_beta,
    )
    _add(
        costs,
        _spread(construction_pool, timeline.construction_start, timeline.construction_end, construction_weights),
    )
    financing_costs = _spread(plan.financing_cost, timeline.construction_start, timeline.construction_end)

    proceeds: Dict[int, float] = {}
    if strategy == Strategy.SELL:
        sale_weights = disbursement_weights(
            timeline.marketing_end - timeline.marketing_start,
            DisbursementCurve.BETA,
            config.sale_curve_alpha,
            config.sale_curve_beta,
        )
        proceeds = _spread(revenue.sale_proceeds, timeline.marketing_start, timeline.marketing_end, sale_weights)

    # Anything scheduled beyond the horizon lands in the last month
    last = max(horizon, max(costs), max(proceeds, default=0))

    entries = []
    equity_left = plan.equity
    loan_left = plan.loan_amount
    balance = 0.0
    cumulative = 0.0
    for month in range(last + 1):
        cost = costs.get(month, 0.0)
        financing_cost = financing_costs.get(month, 0.0)

        # Equity first, then the loan
        to_fund = max(0.0, cost)
        from_equity = min(to_fund, max(0.0, equity_left))
        equity_left -= from_equity
        draw = min(to_fund - from_equity, loan_left)
        loan_left -= draw
        balance += draw

        rent = operating = sale = interest = principal = 0.0
        occupancy = 0.0
        if strategy == Strategy.HOLD:
            occupancy = _occupancy(month, timeline)
            if occupancy > 0:
                years_stabilized = max(0, month - timeline.marketing_end) // 12
                escalation = (1 + revenue.rent_escalation) ** years_stabilized
                rent = revenue.monthly_gross_rent * occupancy * escalation
                operating = revenue.monthly_operating_cost * occupancy * escalation
            if month >= timeline.construction_end and balance > 0:
                interest = balance * plan.monthly_rate
                principal = min(max(0.0, plan.monthly_payment - interest), balance)
        else:
            sale = proceeds.get(month, 0.0)
            if month >= timeline.construction_end and balance > 0:
                interest = balance * plan.monthly_rate
                principal = min(balance, sale)
                if month == last:
                    principal = balance
        balance -= principal

        outflow = cost + financing_cost + operating + interest + principal
        inflow = draw + rent + sale
        cumulative += inflow - outflow
        entries.append(
            MonthlyCashflowEntry(
                month=month,
                cost=cost,
                financing_cost=financing_cost,
                operating_cost=operating,
                interest=interest,
                principal=principal,
                loan_draw=draw,
                rent=rent,
                sale_proceeds=sale,
                outflow=outflow,
                inflow=inflow,
                cumulative=cumulative,
                loan_balance=balance,
                occupancy=occupancy,
            )
        )

    series = CashflowSeries(
        strategy=strategy,
        entries=tuple(entries),
        plan=plan,
        break_even_month=find_break_even(entries, timeline.construction_start),
        peak_capital=min(0.0, min(entry.cumulative for entry in entries)),
    )
    logger.debug(
        "Cashflow %s: %d months, break-even %s, peak capital %.0f",
        strategy.value,
        len(entries),
        series.break_even_month,
        series.peak_capital,
    )
    return series


def find_break_even(entries: List[MonthlyCashflowEntry], construction_start: int) -> Optional[int]:
    """First month after construction start where the balance turns non-negative."""
    for previous, entry in zip(entries, entries[1:]):
        if entry.month > construction_start and entry.cumulative >= 0 and previous.cumulative < 0:
            return entry.month
    return None
