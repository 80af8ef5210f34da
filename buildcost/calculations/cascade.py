"""Cost cascade: masses -> construction cost groups, underground and fees."""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ..models.building import BuildingParameters
from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import lookup_price_escalation
from ..models.project import FeeSettings
from .basement import compute_basement
from .cost_items import (
    BUILDING_SEQUENCE,
    UNDERGROUND_SEQUENCE,
    CostGroup,
    build_adjustments,
)
from .fees import FeeResult, compute_fees
from .masses import MassResult
from .structure import structure_groups
from .technical import technical_group

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostCascadeResult:
    """Construction cost groups, optional underground group and fees."""

    groups: Tuple[CostGroup, ...]  # KG3xx groups then KG400
    basement: CostGroup | None
    fees: FeeResult
    escalation: float
    flags: Tuple[str, ...]  # lookup fallbacks hit while pricing

    def group(self, code: str) -> CostGroup:
        for group in self.groups:
            if group.code == code:
                return group
        if self.basement is not None and self.basement.code == code:
            return self.basement
        raise KeyError(code)

    @property
    def structure_net(self) -> float:
        return sum(group.net_total for group in self.groups if group.code.startswith("3"))

    @property
    def technical_net(self) -> float:
        return sum(group.net_total for group in self.groups if group.code.startswith("4"))

    @property
    def construction_net(self) -> float:
        total = sum(group.net_total for group in self.groups)
        if self.basement is not None:
            total += self.basement.net_total
        return total

    @property
    def construction_gross(self) -> float:
        total = sum(group.gross_total for group in self.groups)
        if self.basement is not None:
            total += self.basement.gross_total
        return total

    def all_groups(self) -> List[CostGroup]:
        """Every group including underground and fees, in report order."""
        groups = list(self.groups)
        if self.basement is not None:
            groups.append(self.basement)
        groups.append(self.fees.as_cost_group())
        return groups


def compute_cost_groups(
    params: BuildingParameters,
    masses: MassResult,
    fee_settings: FeeSettings = FeeSettings(),
    config: EngineConfig = DEFAULT_CONFIG,
) -> CostCascadeResult:
    """Price the building.

    Every group sums its raw net line items first, then applies regional
    factor, general contractor markup and price escalation in that order.
    The underground group skips the contractor markup. Fees are computed on
    the adjusted net totals.

    Args:
        params: Building description incl. cost factors.
        masses: Output of ``compute_masses`` for the same parameters.
        fee_settings: Enabled planning disciplines.
        config: Engine constants.

    Returns:
        CostCascadeResult; ``flags`` lists every lookup that fell back to
        the nearest band.
    """
    flags: List[str] = []
    factors = params.costs
    escalation = lookup_price_escalation(
        factors.construction_start,
        config.annual_escalation_rate,
        config.price_index_reference,
        flags,
    )

    building_adjustments = build_adjustments(BUILDING_SEQUENCE, factors, escalation)
    groups = structure_groups(params, masses, building_adjustments, config, flags)
    groups.append(technical_group(params, masses, building_adjustments, config, flags))

    basement = compute_basement(
        params,
        masses,
        build_adjustments(UNDERGROUND_SEQUENCE, factors, escalation),
        config,
        flags,
    )

    structure_net = sum(group.net_total for group in groups if group.code.startswith("3"))
    technical_net = sum(group.net_total for group in groups if group.code.startswith("4"))
    if basement is not None and fee_settings.include_underground:
        structure_net += basement.net_total_for("3")
        technical_net += basement.net_total_for("4")

    fees = compute_fees(
        structure_net,
        technical_net,
        fire_protection_area=masses.gross_floor_area + masses.balcony_area,
        settings=fee_settings,
        landscape_net=fee_settings.landscape_cost_share * (structure_net + technical_net),
        config=config,
        flags=flags,
    )

    result = CostCascadeResult(
        groups=tuple(groups),
        basement=basement,
        fees=fees,
        escalation=escalation,
        flags=tuple(flags),
    )
    logger.debug(
        "Cost cascade: construction %.0f EUR gross, fees %.0f EUR gross, %d fallbacks",
        result.construction_gross,
        fees.total_gross,
        len(flags),
    )
    return result
