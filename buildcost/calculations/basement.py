"""Basement and underground garage cost group."""

import logging
import math
from typing import List, Optional, Sequence

from ..models.building import BuildingParameters, GarageLayout
from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import UNDERGROUND_PRICES, UndergroundType, lookup_slab_price
from .cost_items import Adjustment, CostGroup, CostLineItem, build_group, line_item
from .masses import MassResult

logger = logging.getLogger(__name__)

U = UNDERGROUND_PRICES


def _structural_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig,
    flags: Optional[List[str]],
) -> List[CostLineItem]:
    area = masses.gross_floor_area_below
    wall_area = masses.perimeter * U.storey_height
    return [
        line_item("311", "Excavation", area, "m2", U.excavation, config),
        line_item(
            "322",
            "Base slab outside building footprint",
            max(0.0, area - masses.ground_floor_area),
            "m2",
            lookup_slab_price(params.floors, flags),
            config,
        ),
        line_item("331", "Retaining exterior walls", wall_area, "m2", U.exterior_wall, config),
        line_item("341", "Interior walls", wall_area * U.interior_wall_share, "m2", U.interior_wall, config),
        line_item("343", "Columns", area / U.column_grid_m2 * U.column_height, "lfm", U.columns, config),
        line_item("351", "Ceiling over basement", area, "m2", U.ceiling, config),
    ]


def _garage_structural_items(
    params: BuildingParameters,
    masses: MassResult,
    layout: GarageLayout,
    config: EngineConfig,
    flags: Optional[List[str]],
) -> List[CostLineItem]:
    area = masses.gross_floor_area_below
    height = layout.storey_height
    levels = len(layout.extra_levels)
    wall_area = (
        math.sqrt(layout.footprint_area) * U.garage_outline_factor * height * (1 + layout.extra_level_factor)
    )
    wall_share = U.storage_interior_wall_share if layout.storage_compartments else U.garage_interior_wall_share
    return [
        line_item("311", "Excavation", area * height, "m3", U.garage_excavation, config),
        line_item(
            "322",
            "Base slab outside building footprint",
            max(0.0, layout.footprint_area - masses.ground_floor_area),
            "m2",
            lookup_slab_price(params.floors, flags),
            config,
        ),
        line_item(
            "331",
            "Retaining exterior walls",
            wall_area,
            "m2",
            U.exterior_wall + U.extra_level_wall_surcharge * levels,
            config,
        ),
        line_item("341", "Interior walls", wall_area * wall_share, "m2", U.interior_wall, config),
        line_item("343", "Columns", area / U.column_grid_m2 * height, "lfm", U.columns, config),
        line_item("351", "Ceiling over basement", area, "m2", U.ceiling, config),
        line_item("359", "Garage ramp", layout.entrances, "pcs", U.ramp, config),
    ]


def _steel_doors(area: float, layout: Optional[GarageLayout]) -> float:
    if layout is None:
        return round(area / U.area_per_steel_door)
    if layout.storage_compartments:
        return area / U.area_per_steel_door
    return round(area / U.garage_area_per_steel_door)


def underground_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> List[CostLineItem]:
    """Structural and technical items of the below-grade storeys.

    A garage with a layout is priced on its own outline, clear height and
    additional levels; otherwise the building footprint is used. Misc
    works and site setup are percentages of the structural items only.
    """
    area = masses.gross_floor_area_below
    is_garage = params.underground == UndergroundType.GARAGE
    layout = params.garage if is_garage else None

    if layout is not None:
        items = _garage_structural_items(params, masses, layout, config, flags)
        stair_cores = layout.stair_cores
    else:
        items = _structural_items(params, masses, config, flags)
        if is_garage:
            items.append(line_item("359", "Garage ramp", 1, "pcs", U.ramp, config))
        stair_cores = max(1, masses.stair_cores)
    items += [
        line_item("355", "Stairs", stair_cores, "pcs", U.staircase, config),
        line_item("344", "Fire-rated steel doors", _steel_doors(area, layout), "pcs", U.steel_door, config),
    ]

    structural_net = sum(item.line_total_net for item in items)
    items += [
        line_item("399", "Miscellaneous works", U.misc_works_share, "%", structural_net, config),
        line_item("391", "Site setup", U.site_setup_share, "%", structural_net, config),
    ]

    technical_rate = U.technical_garage if is_garage else U.technical_basement
    if layout is not None and layout.extra_levels:
        technical_rate += U.second_level_technical_surcharge
    items.append(line_item("410", "Building services", area, "m2", technical_rate, config))
    if layout and layout.double_parkers:
        items.append(line_item("461", "Double parkers", layout.double_parkers, "pcs", U.double_parker, config))
    if layout and layout.charging_stations:
        items.append(line_item("444", "Charging stations", layout.charging_stations, "pcs", U.charging_station, config))
    return items


def compute_basement(
    params: BuildingParameters,
    masses: MassResult,
    adjustments: Sequence[Adjustment],
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> Optional[CostGroup]:
    """Underground cost group, or None when the building has no basement."""
    if params.underground == UndergroundType.NONE or masses.gross_floor_area_below <= 0:
        return None
    name = "Underground garage" if params.underground == UndergroundType.GARAGE else "Basement"
    group = build_group("UG", name, underground_items(params, masses, config, flags), adjustments, config)
    logger.debug("%s: %.0f m2, %.0f EUR net", name, masses.gross_floor_area_below, group.net_total)
    return group
