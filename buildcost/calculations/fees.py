"""Planning fees (honoraria) per discipline from the fee scale tables."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.fee_tables import (
    BUILDING_SERVICES_SPLIT,
    CONSTRUCTION_SURVEY_CAP,
    CONSTRUCTION_SURVEY_SHARE,
    DESIGN_SURVEY_SCALING,
    DESIGN_SURVEY_SCALING_ABOVE,
    FEE_TABLES,
    FIRE_PROTECTION_BASE,
    FIRE_PROTECTION_COEFFICIENT,
    FIRE_PROTECTION_EXPONENT,
    WORK_PHASE_SHARES,
    FeeDiscipline,
    FeeTable,
)
from ..models.project import FeeSettings
from .cost_items import CostGroup, build_group, line_item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisciplineFee:
    """Fee for one planning discipline."""

    discipline: FeeDiscipline
    enabled: bool
    chargeable_cost: float  # net
    full_fee_net: float  # all work phases
    completion_share: float  # sum of commissioned work phases
    fee_net: float
    fee_gross: float


@dataclass(frozen=True)
class FeeResult:
    """Fees for all disciplines; disabled disciplines carry zero fees."""

    disciplines: Tuple[DisciplineFee, ...]
    total_net: float
    total_gross: float
    share_of_construction: float  # total gross / construction gross
    config: EngineConfig = DEFAULT_CONFIG  # tax multiplier of the run

    def for_discipline(self, discipline: FeeDiscipline) -> DisciplineFee:
        for fee in self.disciplines:
            if fee.discipline == discipline:
                return fee
        raise KeyError(discipline)

    def as_cost_group(self) -> CostGroup:
        items = [
            line_item("730", f"Fees {fee.discipline.value}", fee.completion_share, "%", fee.full_fee_net, self.config)
            for fee in self.disciplines
            if fee.enabled
        ]
        return build_group("700", "Fees", items, (), self.config)


def interpolate_fee(table: FeeTable, chargeable_cost: float, flags: Optional[List[str]] = None) -> float:
    """Linear interpolation between the two surrounding table rows.

    Costs below the first or above the last row take that row's fee.
    """
    if not table:
        return 0.0
    first_cost, first_fee = table[0]
    last_cost, last_fee = table[-1]
    if chargeable_cost < first_cost or chargeable_cost > last_cost:
        edge_fee = first_fee if chargeable_cost < first_cost else last_fee
        if chargeable_cost > 0:
            message = f"fee scale: chargeable cost {chargeable_cost:,.0f} outside [{first_cost:,}, {last_cost:,}]"
            logger.warning(message)
            if flags is not None:
                flags.append(message)
        return float(edge_fee)

    for (x0, y0), (x1, y1) in zip(table, table[1:]):
        if x0 <= chargeable_cost <= x1:
            if x1 == x0:
                return float(y0)
            return y0 + (y1 - y0) * (chargeable_cost - x0) / (x1 - x0)
    return float(last_fee)


def architecture_chargeable(structure_net: float, technical_net: float) -> float:
    """Structure plus services up to 25 % of structure, plus half the excess."""
    counted = min(technical_net, 0.25 * structure_net)
    return structure_net + counted + max(0.0, (technical_net - counted) / 2)


def chargeable_costs(
    structure_net: float,
    technical_net: float,
    landscape_net: float,
) -> Dict[FeeDiscipline, float]:
    """Chargeable cost base per discipline (fire protection has none)."""
    architecture = architecture_chargeable(structure_net, technical_net)

    design_survey = architecture * DESIGN_SURVEY_SCALING_ABOVE
    for limit, share in DESIGN_SURVEY_SCALING:
        if architecture <= limit:
            design_survey = architecture * share
            break

    construction_survey = architecture * CONSTRUCTION_SURVEY_SHARE
    if construction_survey > CONSTRUCTION_SURVEY_CAP:
        construction_survey = 0.0

    return {
        FeeDiscipline.ARCHITECTURE: architecture,
        FeeDiscipline.STRUCTURAL: 0.55 * structure_net + 0.10 * technical_net,
        FeeDiscipline.BUILDING_SERVICES: technical_net,
        FeeDiscipline.LANDSCAPE: landscape_net,
        FeeDiscipline.THERMAL: architecture,
        FeeDiscipline.ACOUSTICS: architecture,
        FeeDiscipline.FIRE_PROTECTION: 0.0,
        FeeDiscipline.DESIGN_SURVEY: design_survey,
        FeeDiscipline.CONSTRUCTION_SURVEY: construction_survey,
    }


def fire_protection_fee(floor_area: float, use_factor: float = 1.0) -> float:
    """Flat fire protection concept fee on gross floor area."""
    return FIRE_PROTECTION_BASE + FIRE_PROTECTION_COEFFICIENT * (floor_area * use_factor) ** FIRE_PROTECTION_EXPONENT


def _full_fee(
    discipline: FeeDiscipline,
    chargeable: float,
    fire_protection_area: float,
    settings: FeeSettings,
    flags: Optional[List[str]],
) -> float:
    if discipline == FeeDiscipline.FIRE_PROTECTION:
        return fire_protection_fee(fire_protection_area, settings.fire_protection_use_factor)
    table = FEE_TABLES[discipline]
    if discipline == FeeDiscipline.BUILDING_SERVICES:
        # Each system group is looked up on its own share
        return sum(
            interpolate_fee(table, chargeable * share, flags)
            for share in BUILDING_SERVICES_SPLIT.values()
            if chargeable * share > 0
        )
    return interpolate_fee(table, chargeable, flags)


def compute_fees(
    structure_net: float,
    technical_net: float,
    fire_protection_area: float,
    settings: FeeSettings = FeeSettings(),
    landscape_net: float = 0.0,
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> FeeResult:
    """Compute fees for every discipline.

    Args:
        structure_net: Chargeable KG300 cost (net, after adjustments).
        technical_net: Chargeable KG400 cost (net, after adjustments).
        fire_protection_area: Gross floor area incl. balconies for the
            fire protection flat fee.
        settings: Enabled disciplines.
        landscape_net: External works cost for landscape planning.
        config: Engine constants.
        flags: Optional list that collects fee-scale fallbacks.

    Returns:
        FeeResult with one DisciplineFee per discipline.
    """
    bases = chargeable_costs(structure_net, technical_net, landscape_net)
    fees = []
    for discipline in FeeDiscipline:
        enabled = discipline in settings.enabled
        chargeable = bases[discipline]
        completion = sum(WORK_PHASE_SHARES[discipline])
        full_fee = 0.0
        needs_base = discipline != FeeDiscipline.FIRE_PROTECTION
        if enabled and (chargeable > 0 or not needs_base):
            full_fee = _full_fee(discipline, chargeable, fire_protection_area, settings, flags)
        fee_net = full_fee * completion if enabled else 0.0
        fees.append(
            DisciplineFee(
                discipline=discipline,
                enabled=enabled,
                chargeable_cost=chargeable,
                full_fee_net=full_fee,
                completion_share=completion,
                fee_net=fee_net,
                fee_gross=fee_net * config.tax_multiplier,
            )
        )

    total_net = sum(fee.fee_net for fee in fees)
    total_gross = total_net * config.tax_multiplier
    construction_gross = (structure_net + technical_net) * config.tax_multiplier
    share = total_gross / construction_gross if construction_gross > 0 else 0.0
    return FeeResult(
        disciplines=tuple(fees),
        total_net=total_net,
        total_gross=total_gross,
        share_of_construction=share,
        config=config,
    )
