"""Rent and sale revenue: market figures and the resolved revenue profile."""

import logging
from dataclasses import dataclass

from ..models.project import RevenueAssumptions
from .investment import InvestmentCostBreakdown
from .masses import MassResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketFigures:
    """Rent and sale price implied by the cost per m2."""

    cost_per_m2: float
    required_rent_per_m2: float  # gross cold rent per month for the target yield
    sale_price_per_m2: float  # annual rent x sales multiplier
    implied_margin: float  # sale price / cost - 1


@dataclass(frozen=True)
class RevenueProfile:
    """Stabilized revenue for the whole building.

    The cashflow simulator ramps rent in during marketing and spreads sale
    proceeds over the marketing window; both are taken from here.
    """

    monthly_gross_rent: float
    operating_cost_ratio: float
    rent_escalation: float
    sale_proceeds: float

    @property
    def monthly_operating_cost(self) -> float:
        return self.monthly_gross_rent * self.operating_cost_ratio

    @property
    def monthly_net_rent(self) -> float:
        return self.monthly_gross_rent - self.monthly_operating_cost

    @property
    def annual_net_rent(self) -> float:
        return self.monthly_net_rent * 12

    def scaled(self, factor: float) -> "RevenueProfile":
        """Price sensitivity: rent and proceeds times ``factor``."""
        return RevenueProfile(
            monthly_gross_rent=self.monthly_gross_rent * factor,
            operating_cost_ratio=self.operating_cost_ratio,
            rent_escalation=self.rent_escalation,
            sale_proceeds=self.sale_proceeds * factor,
        )


def derive_market_figures(
    breakdown: InvestmentCostBreakdown,
    revenue: RevenueAssumptions = RevenueAssumptions(),
) -> MarketFigures:
    """Rent needed for the target yield and the sale price it supports.

    rent = yield x cost / (12 x (1 - operating cost ratio))
    sale = rent x 12 x sales multiplier

    Args:
        breakdown: Investment cost; its per-m2 total is the cost base.
        revenue: Target yield, operating cost ratio and sales multiplier.

    Returns:
        MarketFigures per m2 lettable area.
    """
    cost = breakdown.total_per_m2
    net_share = 1 - revenue.operating_cost_ratio
    rent = revenue.target_yield * cost / (12 * net_share) if net_share > 0 else 0.0
    sale = rent * 12 * revenue.sales_multiplier
    margin = sale / cost - 1 if cost > 0 else 0.0
    return MarketFigures(
        cost_per_m2=cost,
        required_rent_per_m2=rent,
        sale_price_per_m2=sale,
        implied_margin=margin,
    )


def resolve_revenue(
    breakdown: InvestmentCostBreakdown,
    masses: MassResult,
    revenue: RevenueAssumptions = RevenueAssumptions(),
) -> RevenueProfile:
    """Building revenue from explicit prices, falling back to market figures."""
    area = masses.lettable_area
    market = derive_market_figures(breakdown, revenue)
    rent = revenue.rent_per_m2_month if revenue.rent_per_m2_month is not None else market.required_rent_per_m2
    sale = revenue.sale_price_per_m2 if revenue.sale_price_per_m2 is not None else market.sale_price_per_m2
    profile = RevenueProfile(
        monthly_gross_rent=rent * area,
        operating_cost_ratio=revenue.operating_cost_ratio,
        rent_escalation=revenue.rent_escalation,
        sale_proceeds=sale * area,
    )
    logger.debug("Revenue: rent %.2f EUR/m2/month, sale %.0f EUR/m2", rent, sale)
    return profile
