"""Total investment cost aggregation (land, construction, fees, reserves)."""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Tuple

from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.project import InvestmentSettings, LandCostInput
from .cascade import CostCascadeResult
from .masses import MassResult

logger = logging.getLogger(__name__)

# Component keys in report order.
LAND = "land"
SITE_PREPARATION = "site_preparation"
CONSTRUCTION = "construction"
EXTERNAL_WORKS = "external_works"
FEES = "fees"
INTERNAL_COSTS = "internal_costs"
CONTINGENCY = "contingency"
OTHER_COSTS = "other_costs"

COMPONENT_LABELS: Dict[str, str] = {
    LAND: "Land (KG100)",
    SITE_PREPARATION: "Site preparation (KG200)",
    CONSTRUCTION: "Construction (KG300/400)",
    EXTERNAL_WORKS: "External works (KG500)",
    FEES: "Fees and ancillary costs (KG700)",
    INTERNAL_COSTS: "Internal costs",
    CONTINGENCY: "Contingency reserve",
    OTHER_COSTS: "Other costs",
}


@dataclass(frozen=True)
class CostComponent:
    """One named line of the investment cost breakdown (gross EUR)."""

    key: str
    label: str
    amount: float
    per_m2: float  # per m2 lettable area
    included: bool = True


@dataclass(frozen=True)
class InvestmentCostBreakdown:
    """Total investment cost with its components.

    ``total`` is the sum of included components minus the subsidy, where the
    subsidy is clamped so the total never goes negative.
    """

    components: Tuple[CostComponent, ...]
    subsidy_requested: float
    subsidy: float
    total: float
    reference_area: float  # lettable area used for per-m2 figures

    @property
    def total_per_m2(self) -> float:
        return self.total / self.reference_area if self.reference_area > 0 else 0.0

    @property
    def subsidy_per_m2(self) -> float:
        return self.subsidy / self.reference_area if self.reference_area > 0 else 0.0

    def component(self, key: str) -> CostComponent:
        for component in self.components:
            if component.key == key:
                return component
        raise KeyError(key)

    def amount(self, key: str) -> float:
        """Amount of a component as it enters the total (0 when excluded)."""
        component = self.component(key)
        return component.amount if component.included else 0.0

    def with_excluded(self, keys: Iterable[str]) -> "InvestmentCostBreakdown":
        """Toggle components out of the total without re-deriving any amount."""
        excluded = set(keys)
        unknown = excluded - {component.key for component in self.components}
        if unknown:
            raise KeyError(", ".join(sorted(unknown)))
        components = tuple(replace(c, included=c.key not in excluded) for c in self.components)
        return _finish(components, self.subsidy_requested, self.reference_area)

    def scaled(self, factor: float) -> "InvestmentCostBreakdown":
        """Uniformly scale every amount; the total is exactly ``total * factor``."""
        components = tuple(
            replace(c, amount=c.amount * factor, per_m2=c.per_m2 * factor) for c in self.components
        )
        return replace(
            self,
            components=components,
            subsidy_requested=self.subsidy_requested * factor,
            subsidy=self.subsidy * factor,
            total=self.total * factor,
        )


def _finish(
    components: Tuple[CostComponent, ...],
    subsidy_requested: float,
    reference_area: float,
) -> InvestmentCostBreakdown:
    subtotal = sum(c.amount for c in components if c.included)
    subsidy = min(max(0.0, subsidy_requested), max(0.0, subtotal))
    return InvestmentCostBreakdown(
        components=components,
        subsidy_requested=subsidy_requested,
        subsidy=subsidy,
        total=subtotal - subsidy,
        reference_area=reference_area,
    )


def resolve_land_cost(land: LandCostInput, lettable_area: float) -> float:
    """Land cost; the most specific input mode wins."""
    if land.manual_total is not None:
        return land.manual_total
    if land.manual_per_m2 is not None:
        return land.manual_per_m2 * lettable_area
    return land.rate_per_m2 * land.site_area_m2


def aggregate(
    cascade: CostCascadeResult,
    masses: MassResult,
    land: LandCostInput = LandCostInput(),
    settings: InvestmentSettings = InvestmentSettings(),
    config: EngineConfig = DEFAULT_CONFIG,
) -> InvestmentCostBreakdown:
    """Roll the cost groups up into total investment cost (gross).

    Site preparation and external works are shares of the construction
    cost; internal costs are a share of land + site preparation +
    construction + external works + fees; the contingency reserve is a
    share of construction only.

    Args:
        cascade: Priced cost groups and fees.
        masses: Quantities; the lettable area is the per-m2 reference.
        land: Land price input.
        settings: Percentages, per-m2 extras, subsidy and display toggles.
        config: Engine constants.

    Returns:
        InvestmentCostBreakdown.
    """
    area = masses.lettable_area
    construction = cascade.construction_gross

    amounts = {
        LAND: resolve_land_cost(land, area),
        SITE_PREPARATION: (
            settings.site_preparation.rate * construction if settings.site_preparation.enabled else 0.0
        ),
        CONSTRUCTION: construction,
        EXTERNAL_WORKS: (
            settings.external_works.rate * construction if settings.external_works.enabled else 0.0
        ),
        FEES: cascade.fees.total_gross + settings.other_ancillary_per_m2 * area,
    }
    amounts[INTERNAL_COSTS] = settings.internal_cost_rate * sum(amounts.values())
    amounts[CONTINGENCY] = settings.contingency_rate * construction
    amounts[OTHER_COSTS] = settings.other_costs_per_m2 * area

    components = tuple(
        CostComponent(
            key=key,
            label=label,
            amount=amounts[key],
            per_m2=amounts[key] / area if area > 0 else 0.0,
            included=key not in settings.excluded,
        )
        for key, label in COMPONENT_LABELS.items()
    )
    subsidy = settings.subsidy_total + settings.subsidy_per_m2 * area
    breakdown = _finish(components, subsidy, area)
    logger.debug("Total investment cost %.0f EUR (%.0f EUR/m2)", breakdown.total, breakdown.total_per_m2)
    return breakdown
