"""Calculation modules for the building cost and returns engine."""

from .masses import compute_masses, MassResult
from .cost_items import CostGroup, CostLineItem, Adjustment
from .cascade import compute_cost_groups, CostCascadeResult
from .fees import compute_fees, FeeResult, DisciplineFee
from .investment import aggregate, resolve_land_cost, InvestmentCostBreakdown, CostComponent
from .revenue import derive_market_figures, resolve_revenue, MarketFigures, RevenueProfile
from .financing import (
    plan_financing,
    amortization_schedule,
    remaining_balance,
    interest_rate_sensitivity,
    FinancingPlan,
    AmortizationRow,
    RateScenario,
)
from .cashflow import simulate, disbursement_weights, CashflowSeries, MonthlyCashflowEntry
from .irr import solve_irr, NewtonRaphson, Bisection, FallbackSolver
from .returns import solve_returns, ReturnsResult

__all__ = [
    # Masses
    "compute_masses",
    "MassResult",
    # Cost cascade
    "CostGroup",
    "CostLineItem",
    "Adjustment",
    "compute_cost_groups",
    "CostCascadeResult",
    "compute_fees",
    "FeeResult",
    "DisciplineFee",
    # Investment
    "aggregate",
    "resolve_land_cost",
    "InvestmentCostBreakdown",
    "CostComponent",
    # Revenue
    "derive_market_figures",
    "resolve_revenue",
    "MarketFigures",
    "RevenueProfile",
    # Financing
    "plan_financing",
    "amortization_schedule",
    "remaining_balance",
    "interest_rate_sensitivity",
    "FinancingPlan",
    "AmortizationRow",
    "RateScenario",
    # Cashflow
    "simulate",
    "disbursement_weights",
    "CashflowSeries",
    "MonthlyCashflowEntry",
    # Returns
    "solve_irr",
    "NewtonRaphson",
    "Bisection",
    "FallbackSolver",
    "solve_returns",
    "ReturnsResult",
]
