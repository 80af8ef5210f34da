"""Project-level inputs: financing, timeline, land, revenue and sensitivity."""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional

from .building import BuildingParameters
from .config import DEFAULT_CONFIG, EngineConfig
from .fee_tables import DEFAULT_ENABLED_DISCIPLINES, FeeDiscipline
from .lookups import DisbursementCurve, Strategy


@dataclass(frozen=True)
class FinancingTerms:
    """Loan terms. Debt ratio is always ``1 - equity_ratio``."""

    enabled: bool = True
    equity_ratio: float = 0.25
    interest_rate: float = 0.04  # annual
    amortization_rate: float = 0.02  # annual, initial (German annuity)
    commitment_rate: float = 0.0025  # monthly, on the undrawn half of the loan

    @property
    def debt_ratio(self) -> float:
        return 1.0 - self.equity_ratio

    def clamped(self) -> "FinancingTerms":
        return replace(
            self,
            equity_ratio=max(0.0, min(1.0, self.equity_ratio)),
            interest_rate=max(0.0, self.interest_rate),
            amortization_rate=max(0.0, self.amortization_rate),
            commitment_rate=max(0.0, self.commitment_rate),
        )


@dataclass(frozen=True)
class TimelinePhases:
    """Month offsets from project start; end months are exclusive.

    Marketing may overlap construction.
    """

    planning_start: int = 0
    planning_end: int = 6
    construction_start: int = 6
    construction_end: int = 24
    marketing_start: int = 18
    marketing_end: int = 30
    holding_years: int = 10  # hold strategy only
    exit_month: Optional[int] = None  # hold only, default planning_start + holding_years*12
    construction_curve: DisbursementCurve = DisbursementCurve.BETA

    @property
    def construction_months(self) -> int:
        return self.construction_end - self.construction_start

    @property
    def hold_exit_month(self) -> int:
        if self.exit_month is not None:
            return self.exit_month
        return self.planning_start + self.holding_years * 12

    def horizon(self, strategy: Strategy) -> int:
        """Last month index simulated for a strategy."""
        end = max(self.construction_end, self.marketing_end)
        if strategy == Strategy.HOLD:
            return max(end, self.hold_exit_month)
        return end

    def clamped(self) -> "TimelinePhases":
        planning_start = max(0, self.planning_start)
        construction_start = max(0, self.construction_start)
        marketing_start = max(0, self.marketing_start)
        return replace(
            self,
            planning_start=planning_start,
            planning_end=max(planning_start, self.planning_end),
            construction_start=construction_start,
            construction_end=max(construction_start, self.construction_end),
            marketing_start=marketing_start,
            marketing_end=max(marketing_start, self.marketing_end),
            holding_years=max(1, self.holding_years),
        )


@dataclass(frozen=True)
class LandCostInput:
    """Land price in one of three modes.

    Precedence: ``manual_total`` > ``manual_per_m2`` (per m2 lettable area)
    > ``rate_per_m2 * site_area_m2``.
    """

    rate_per_m2: float = 0.0  # standard land value, per m2 site
    site_area_m2: float = 0.0
    manual_total: Optional[float] = None
    manual_per_m2: Optional[float] = None


@dataclass(frozen=True)
class PercentageCost:
    """A cost stated as a share of the construction cost."""

    rate: float
    enabled: bool = True


@dataclass(frozen=True)
class InvestmentSettings:
    """Rates used to roll cost groups up into total investment cost."""

    site_preparation: PercentageCost = field(default_factory=lambda: PercentageCost(0.05))
    external_works: PercentageCost = field(default_factory=lambda: PercentageCost(0.04))
    other_ancillary_per_m2: float = 50.0  # gross, per m2 lettable area
    internal_cost_rate: float = 0.023
    contingency_rate: float = 0.03
    other_costs_per_m2: float = 0.0
    subsidy_per_m2: float = 0.0
    subsidy_total: float = 0.0
    excluded: FrozenSet[str] = frozenset()  # component keys left out of the total


@dataclass(frozen=True)
class FeeSettings:
    """Which planning disciplines are commissioned."""

    enabled: FrozenSet[FeeDiscipline] = DEFAULT_ENABLED_DISCIPLINES
    include_underground: bool = True  # underground costs count as chargeable
    fire_protection_use_factor: float = 1.0  # residential = 1
    landscape_cost_share: float = 0.04  # external works as share of construction net


@dataclass(frozen=True)
class RevenueAssumptions:
    """Rent and sale price; ``None`` derives them from the target yield."""

    rent_per_m2_month: Optional[float] = None
    sale_price_per_m2: Optional[float] = None
    operating_cost_ratio: float = 0.05  # share of gross rent
    rent_escalation: float = 0.0  # annual, after lease-up
    target_yield: float = 0.05
    sales_multiplier: float = 21.0


@dataclass(frozen=True)
class ExitAssumptions:
    """Hold-strategy exit value."""

    appreciation_rate: float = 0.02
    residual_value_share: Optional[float] = None  # of cost, overrides appreciation
    selling_cost_rate: float = 0.05


@dataclass(frozen=True)
class SensitivityCase:
    """Cost and price deltas in percent, e.g. ``cost_pct=10`` for +10 %."""

    cost_pct: float = 0.0
    price_pct: float = 0.0

    @property
    def cost_factor(self) -> float:
        return 1 + self.cost_pct / 100

    @property
    def price_factor(self) -> float:
        return 1 + self.price_pct / 100

    @property
    def label(self) -> str:
        return f"cost {self.cost_pct:+g}% / price {self.price_pct:+g}%"


BASE_CASE = SensitivityCase()


@dataclass(frozen=True)
class ProjectInputs:
    """Complete input for one project run.

    Everything the pipeline reads; the engine config travels along so a
    run never depends on module state.
    """

    # === Building ===
    building: BuildingParameters = field(default_factory=BuildingParameters)

    # === Costs ===
    land: LandCostInput = field(default_factory=LandCostInput)
    investment: InvestmentSettings = field(default_factory=InvestmentSettings)
    fees: FeeSettings = field(default_factory=FeeSettings)

    # === Financing & timing ===
    financing: FinancingTerms = field(default_factory=FinancingTerms)
    timeline: TimelinePhases = field(default_factory=TimelinePhases)

    # === Revenue ===
    revenue: RevenueAssumptions = field(default_factory=RevenueAssumptions)
    exit: ExitAssumptions = field(default_factory=ExitAssumptions)

    config: EngineConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def clamped(self) -> "ProjectInputs":
        return replace(
            self,
            building=self.building.clamped(),
            financing=self.financing.clamped(),
            timeline=self.timeline.clamped(),
        )
