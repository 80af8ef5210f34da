"""Mass calculator: floor areas, envelope areas, height class and deductions."""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models.building import BuildingParameters
from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import (
    CIRCULATION,
    ENERGY_STANDARDS,
    STRUCTURAL_SHARE,
    TECHNICAL_ROOM_AREA,
    UNIT_PRICES,
    BuildingClass,
    CirculationType,
    FootprintMode,
    UndergroundType,
    classify_building,
    lookup_interior_wall_band,
)

logger = logging.getLogger(__name__)

# Commercial units have fewer partitions than apartments.
COMMERCIAL_WALL_REDUCTION = 0.3

CORRIDOR_TYPES = (CirculationType.ACCESS_GALLERY, CirculationType.CENTRAL_CORRIDOR)

HIGH_RISE_CIRCULATION = {
    BuildingClass.HIGH_RISE: CIRCULATION.high_rise,
    BuildingClass.VERY_HIGH_RISE: CIRCULATION.very_high_rise,
    BuildingClass.SKYSCRAPER: CIRCULATION.skyscraper,
}


@dataclass(frozen=True)
class MassResult:
    """Derived quantities for one building. All areas in m2, lengths in m."""

    # Footprint and floor areas
    ground_floor_area: float
    perimeter: float
    gross_floor_area: float  # above grade
    gross_floor_area_below: float
    setback_deduction: float
    balcony_area: float  # balconies + access galleries, gross
    lettable_balcony_area: float  # weighted share of balconies
    usable_area: float
    residential_usable_area: float
    commercial_area: float
    lettable_area: float  # usable + weighted balconies

    # Deductions from GFA
    structural_share: float
    structural_area: float
    circulation_area: float
    corridor_area: float
    technical_area: float
    energy_allowance_area: float
    extra_nonresidential_area: float

    # Envelope
    facade_area: float
    interior_wall_area: float
    window_area: float
    ceiling_area: float
    roof_area: float

    # Height and access
    storey_height: float
    building_height: float
    top_floor_level: float
    building_class: BuildingClass
    stair_cores: int  # regular cores
    safety_cores: int

    # Units
    apartments: int
    average_unit_size: float

    @property
    def total_cores(self) -> int:
        return self.stair_cores + self.safety_cores

    @property
    def usable_efficiency(self) -> float:
        """Usable area as share of GFA."""
        if self.gross_floor_area <= 0:
            return 0.0
        return self.usable_area / self.gross_floor_area


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _pick(manual: Optional[float], derived: float) -> float:
    return derived if manual is None else manual


def _setback_shares(params: BuildingParameters) -> List[float]:
    """Remaining footprint share of each set-back floor, top floor first."""
    shares = [params.setback_share_top, params.setback_share_second]
    return shares[: params.setback_floors]


def _regular_cores(params: BuildingParameters, ground_floor_area: float, config: EngineConfig) -> int:
    if params.stair_cores is not None:
        return max(0, params.stair_cores)
    if params.floors <= 1:
        return 0
    cores = math.ceil(ground_floor_area / config.floor_plate_per_core_m2)
    if params.circulation == CirculationType.ACCESS_GALLERY:
        cores = max(cores, math.ceil(params.length_m / (2 * CIRCULATION.gallery_travel_distance)))
    elif params.circulation == CirculationType.CENTRAL_CORRIDOR:
        cores = max(cores, math.ceil(params.length_m / (2 * CIRCULATION.corridor_travel_distance)))
    return max(1, cores)


def _circulation_per_core(
    params: BuildingParameters,
    building_class: BuildingClass,
    cores: int,
    apartments: Optional[int],
) -> float:
    if params.circulation != CirculationType.STAIR_CORE:
        per_core = CIRCULATION.corridor_core
    elif apartments and cores and apartments / (params.floors * cores) >= CIRCULATION.busy_core_units:
        per_core = CIRCULATION.busy_core
    else:
        per_core = CIRCULATION.base
    # High-rise classes raise the minimum for every access type
    return max(per_core, HIGH_RISE_CIRCULATION.get(building_class, 0.0))


def _usable_area(
    params: BuildingParameters,
    gross_floor_area: float,
    deductions: float,
    apartments: Optional[int],
    building_class: BuildingClass,
    cores: int,
    safety_cores: int,
) -> Tuple[float, float]:
    """Usable area and circulation area for a given apartment count."""
    per_core = _circulation_per_core(params, building_class, cores, apartments)
    circulation = (per_core * cores + CIRCULATION.escape_stair * safety_cores) * params.floors
    usable = gross_floor_area - deductions - circulation
    if params.manual_areas.usable_area is not None:
        usable = params.manual_areas.usable_area
    return max(0.0, min(usable, gross_floor_area)), circulation


def compute_masses(
    params: BuildingParameters,
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> MassResult:
    """Derive all building quantities from the building parameters.

    Well-formed input is a precondition (``floors >= 1``, explicit
    ``apartments > 0``); call ``params.clamped()`` first for raw user input.
    Manual area overrides replace the derived value one for one.

    Args:
        params: Building description.
        config: Engine constants (slab allowance, target unit size, ...).
        flags: Optional list that collects lookup fallback messages.

    Returns:
        MassResult with areas, envelope, building class and unit size.

    Example:
        >>> masses = compute_masses(BuildingParameters(length_m=25, width_m=15, floors=5))
        >>> masses.gross_floor_area
        1875.0
    """
    manual = params.manual_areas
    floors = params.floors

    ground = float(_pick(manual.ground_floor_area, params.ground_floor_area))
    perimeter = float(params.perimeter)

    # Set-back top floors lose part of the footprint
    shares = _setback_shares(params)
    setback_deduction = sum(ground * (1 - share) for share in shares)
    gross_floor_area = _pick(manual.gross_floor_area, max(0.0, ground * floors - setback_deduction))

    storey_height = params.clear_height_m + config.slab_allowance_m
    building_height = floors * storey_height
    top_floor_level = building_height - storey_height
    building_class = classify_building(top_floor_level)
    structural_share = STRUCTURAL_SHARE[building_class]
    structural_area = gross_floor_area * structural_share

    cores = _regular_cores(params, ground, config)
    safety_cores = 1 if building_class.is_high_rise and cores > 0 else 0

    has_underground = params.underground != UndergroundType.NONE
    technical_area = 0.0 if has_underground else TECHNICAL_ROOM_AREA[params.heating] * cores

    corridor_area = 0.0
    # Gallery and corridor length only follows from a rectangular footprint
    if params.circulation in CORRIDOR_TYPES and params.footprint_mode == FootprintMode.RECTANGULAR:
        corridor_length = (
            CIRCULATION.corridor_width_factor * params.length_m
            - CIRCULATION.corridor_core_offset * cores
        )
        corridor_area = max(0.0, corridor_length) * floors

    energy_allowance = ENERGY_STANDARDS[params.energy_standard].area_allowance_rate * floors * perimeter
    deductions = (
        structural_area
        + technical_area
        + corridor_area
        + energy_allowance
        + params.extra_nonresidential_m2
    )

    apartments = params.apartments
    if apartments is None:
        provisional, _ = _usable_area(
            params, gross_floor_area, deductions, None, building_class, cores, safety_cores
        )
        apartments = max(1, _round_half_up(provisional / config.target_unit_size_m2))
        logger.debug("Derived %d apartments from %.1f m2 usable area", apartments, provisional)

    usable, circulation = _usable_area(
        params, gross_floor_area, deductions, apartments, building_class, cores, safety_cores
    )
    commercial = params.commercial_area_fitted_m2 + params.commercial_area_shell_m2
    residential_usable = max(0.0, usable - commercial)
    average_unit_size = residential_usable / apartments if apartments > 0 else 0.0

    # Balconies and external access galleries
    balconies = params.balcony_size_m2 * params.balcony_share * apartments
    gallery = 0.0
    if params.circulation == CirculationType.ACCESS_GALLERY:
        gallery = params.length_m * UNIT_PRICES.access_gallery_depth * floors
    balcony_area = _pick(manual.balcony_area, balconies + gallery)
    lettable_balcony = balconies * params.balcony_area_factor

    # Envelope; set-back floors lose facade along half the perimeter
    facade_setback = sum(perimeter / 2 * storey_height * (1 - share) for share in shares)
    facade_area = _pick(manual.facade_area, max(0.0, perimeter * building_height - facade_setback))

    band = lookup_interior_wall_band(average_unit_size, flags)
    commercial_share = commercial / usable if usable > 0 else 0.0
    interior_wall_area = _pick(
        manual.interior_wall_area,
        facade_area * band.wall_factor * (1 - COMMERCIAL_WALL_REDUCTION * commercial_share),
    )
    window_area = _pick(manual.window_area, facade_area * params.window_ratio)
    ceiling_area = _pick(manual.ceiling_area, max(0.0, gross_floor_area - ground))
    roof_area = _pick(manual.roof_area, ground)

    gross_floor_area_below = 0.0
    if has_underground:
        if params.underground == UndergroundType.GARAGE and params.garage is not None:
            gross_floor_area_below = params.garage.floor_area
        else:
            gross_floor_area_below = ground * params.basement_share
    gross_floor_area_below = _pick(manual.gross_floor_area_below, gross_floor_area_below)

    return MassResult(
        ground_floor_area=ground,
        perimeter=perimeter,
        gross_floor_area=gross_floor_area,
        gross_floor_area_below=gross_floor_area_below,
        setback_deduction=setback_deduction,
        balcony_area=balcony_area,
        lettable_balcony_area=lettable_balcony,
        usable_area=usable,
        residential_usable_area=residential_usable,
        commercial_area=commercial,
        lettable_area=usable + lettable_balcony,
        structural_share=structural_share,
        structural_area=structural_area,
        circulation_area=circulation,
        corridor_area=corridor_area,
        technical_area=technical_area,
        energy_allowance_area=energy_allowance,
        extra_nonresidential_area=params.extra_nonresidential_m2,
        facade_area=facade_area,
        interior_wall_area=interior_wall_area,
        window_area=window_area,
        ceiling_area=ceiling_area,
        roof_area=roof_area,
        storey_height=storey_height,
        building_height=building_height,
        top_floor_level=top_floor_level,
        building_class=building_class,
        stair_cores=cores,
        safety_cores=safety_cores,
        apartments=apartments,
        average_unit_size=average_unit_size,
    )
