"""Lookup tables for construction options, unit prices, and price escalation.

Every option axis is a closed Enum; every table is keyed by the Enum member
or by a discrete band value. Lookups that fall outside a table clamp to the
nearest defined band, log a warning and (optionally) record a flag.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Bumped whenever a price table below changes.
TABLE_VERSION = "2025-Q4"


class ConstructionMethod(Enum):
    """Primary load-bearing construction method."""

    MASONRY = "masonry"
    REINFORCED_CONCRETE = "reinforced_concrete"


class FootprintMode(Enum):
    """How the ground floor area is specified."""

    RECTANGULAR = "rectangular"  # length x width
    INDIVIDUAL = "individual"  # direct area and perimeter


class UndergroundType(Enum):
    """Below-grade storey variant."""

    NONE = "none"
    BASEMENT = "basement"
    GARAGE = "garage"


class EnergyStandard(Enum):
    """Energy efficiency tier, GEG being the legal minimum."""

    GEG = "geg"
    EH55 = "eh55"
    EH40 = "eh40"


class CirculationType(Enum):
    """Vertical/horizontal access arrangement."""

    STAIR_CORE = "stair_core"
    ACCESS_GALLERY = "access_gallery"  # external walkway (Laubengang)
    CENTRAL_CORRIDOR = "central_corridor"


class RoofForm(Enum):
    FLAT = "flat"
    GABLE = "gable"
    HIP = "hip"
    MONO_PITCH = "mono_pitch"


class GreenRoof(Enum):
    NONE = "none"
    EXTENSIVE = "extensive"
    EXTENSIVE_RETENTION = "extensive_retention"
    INTENSIVE = "intensive"


class WindowMaterial(Enum):
    PLASTIC = "plastic"
    WOOD = "wood"


class SunProtection(Enum):
    NONE = "none"
    SOLAR_GLAZING = "solar_glazing"
    ELECTRIC_BLINDS = "electric_blinds"
    ELECTRIC_SHUTTERS = "electric_shutters"
    MANUAL_SHUTTERS = "manual_shutters"


class FacadeFinish(Enum):
    """Exterior finish on top of the insulation system."""

    RENDER = "render"
    BRICK_SLIPS = "brick_slips"


class BalconyType(Enum):
    STANDING = "standing"
    SUSPENDED = "suspended"
    LOGGIA = "loggia"


class FloorFinish(Enum):
    VINYL = "vinyl"
    PARQUET = "parquet"


class HeatingSupply(Enum):
    DISTRICT_HEAT = "district_heat"
    AIR_HEAT_PUMP = "air_heat_pump"
    GEOTHERMAL = "geothermal"


class BathroomPlacement(Enum):
    FACADE = "facade"
    INTERIOR = "interior"  # needs mechanical ventilation


class KitchenPackage(Enum):
    NONE = "none"
    BASIC = "basic"
    STANDARD = "standard"
    UPSCALE = "upscale"
    PREMIUM = "premium"


class BuildingClass(Enum):
    """Fire-code building class, driven by the top floor level."""

    CLASS_4 = "class_4"
    CLASS_5 = "class_5"
    HIGH_RISE = "high_rise"
    VERY_HIGH_RISE = "very_high_rise"
    SKYSCRAPER = "skyscraper"

    @property
    def is_high_rise(self) -> bool:
        return self in (
            BuildingClass.HIGH_RISE,
            BuildingClass.VERY_HIGH_RISE,
            BuildingClass.SKYSCRAPER,
        )


class Strategy(str, Enum):
    """Exit strategy."""

    HOLD = "hold"
    SELL = "sell"


class DisbursementCurve(Enum):
    """Monthly weighting of construction-phase costs."""

    LINEAR = "linear"
    BETA = "beta"


# Building class thresholds on top floor level (m), checked high to low.
BUILDING_CLASS_THRESHOLDS: List[tuple] = [
    (100.0, BuildingClass.SKYSCRAPER),
    (60.0, BuildingClass.VERY_HIGH_RISE),
    (22.0, BuildingClass.HIGH_RISE),
    (13.0, BuildingClass.CLASS_5),
]

# Share of GFA taken by walls and columns.
STRUCTURAL_SHARE: Dict[BuildingClass, float] = {
    BuildingClass.CLASS_4: 0.156,
    BuildingClass.CLASS_5: 0.156,
    BuildingClass.HIGH_RISE: 0.17,
    BuildingClass.VERY_HIGH_RISE: 0.18,
    BuildingClass.SKYSCRAPER: 0.19,
}

# Gross surcharge per m2 usable area for taller building classes.
CLASS_SURCHARGE_GROSS: Dict[BuildingClass, float] = {
    BuildingClass.CLASS_4: 0.0,
    BuildingClass.CLASS_5: 60.0,
    BuildingClass.HIGH_RISE: 250.0,
    BuildingClass.VERY_HIGH_RISE: 450.0,
    BuildingClass.SKYSCRAPER: 650.0,
}


@dataclass(frozen=True)
class CirculationSizes:
    """Circulation area per core per floor (m2) and escape-route limits (m)."""

    base: float = 25.0
    busy_core: float = 30.0  # 5+ units per core and floor
    busy_core_units: int = 5
    high_rise: float = 40.0
    very_high_rise: float = 50.0
    skyscraper: float = 60.0
    corridor_core: float = 20.0  # gallery / corridor buildings
    escape_stair: float = 16.0
    gallery_travel_distance: float = 20.0
    corridor_travel_distance: float = 26.0
    corridor_width_factor: float = 1.2
    corridor_core_offset: float = 4.0


CIRCULATION = CirculationSizes()

# Technical room per stair core when there is no basement to host it.
TECHNICAL_ROOM_AREA: Dict[HeatingSupply, float] = {
    HeatingSupply.DISTRICT_HEAT: 32.5,
    HeatingSupply.AIR_HEAT_PUMP: 40.0,
    HeatingSupply.GEOTHERMAL: 40.0,
}


@dataclass(frozen=True)
class ConstructionMethodPrices:
    """Net wall prices (EUR/m2) by construction method."""

    exterior_wall: float
    party_wall: float
    load_bearing_wall: float
    small_works_share: float  # KG390 small parts, share of KG310-380


CONSTRUCTION_METHOD_PRICES: Dict[ConstructionMethod, ConstructionMethodPrices] = {
    ConstructionMethod.MASONRY: ConstructionMethodPrices(
        exterior_wall=110.0,
        party_wall=110.0,
        load_bearing_wall=110.0,
        small_works_share=0.144,
    ),
    ConstructionMethod.REINFORCED_CONCRETE: ConstructionMethodPrices(
        exterior_wall=140.0,
        party_wall=155.0,
        load_bearing_wall=135.0,
        small_works_share=0.16,
    ),
}


@dataclass(frozen=True)
class EnergyStandardParams:
    """Envelope surcharges (net EUR/m2) and thicker-wall area allowance."""

    wall_surcharge: float
    roof_surcharge: float
    window_surcharge: float
    area_allowance_rate: float  # m2 per m of perimeter per floor
    material_surcharge: float = 0.0  # net EUR/m2 usable area


ENERGY_STANDARDS: Dict[EnergyStandard, EnergyStandardParams] = {
    EnergyStandard.GEG: EnergyStandardParams(0.0, 0.0, 0.0, 0.0),
    EnergyStandard.EH55: EnergyStandardParams(8.0, 55.0, 30.0, 0.02),
    EnergyStandard.EH40: EnergyStandardParams(28.0, 75.0, 50.0, 0.09, material_surcharge=50.0),
}

ROOF_FORM_FACTORS: Dict[RoofForm, float] = {
    RoofForm.FLAT: 0.0,
    RoofForm.GABLE: 0.4,
    RoofForm.HIP: 0.5,
    RoofForm.MONO_PITCH: 0.2,
}

GREEN_ROOF_PRICES: Dict[GreenRoof, float] = {
    GreenRoof.NONE: 0.0,
    GreenRoof.EXTENSIVE: 35.0,
    GreenRoof.EXTENSIVE_RETENTION: 112.0,
    GreenRoof.INTENSIVE: 145.0,
}

SUN_PROTECTION_PRICES: Dict[SunProtection, float] = {
    SunProtection.NONE: 0.0,
    SunProtection.SOLAR_GLAZING: 50.0,
    SunProtection.ELECTRIC_BLINDS: 520.0,
    SunProtection.ELECTRIC_SHUTTERS: 300.0,
    SunProtection.MANUAL_SHUTTERS: 170.0,
}

KITCHEN_PRICES_GROSS: Dict[KitchenPackage, float] = {
    KitchenPackage.NONE: 0.0,
    KitchenPackage.BASIC: 4500.0,
    KitchenPackage.STANDARD: 6000.0,
    KitchenPackage.UPSCALE: 8000.0,
    KitchenPackage.PREMIUM: 10000.0,
}

BALCONY_TYPE_SURCHARGE: Dict[BalconyType, float] = {
    BalconyType.STANDING: 0.0,
    BalconyType.SUSPENDED: 0.30,
    BalconyType.LOGGIA: 0.65,
}

BRICK_SLIP_SURCHARGE = 145.0  # net EUR/m2 of clad facade

# Foundation slab net price (EUR/m2) by number of floors it carries.
SLAB_PRICE_BY_FLOORS: Dict[int, float] = {
    1: 100.0,
    2: 130.0,
    3: 176.51,
    4: 241.0,
    5: 299.72,
    6: 310.39,
    7: 383.0,
    8: 457.0,
    9: 535.0,
}

# Discount on KG310-380 for identical repeat buildings, keyed by count (5 = 5+).
SERIES_DISCOUNTS: Dict[int, float] = {1: 0.0, 2: 0.03, 3: 0.05, 4: 0.075, 5: 0.10}


@dataclass(frozen=True)
class InteriorWallBand:
    """Interior partitioning by average unit size band."""

    unit_size_m2: int
    wall_factor: float  # interior wall area per m2 facade
    technical_extra_gross: float  # KG400 EUR/m2 usable, negative for large units


# Smaller units mean more partitions and more installations per m2.
INTERIOR_WALL_BANDS: Dict[int, InteriorWallBand] = {
    size: InteriorWallBand(
        unit_size_m2=size,
        wall_factor=round(3.070 - 0.015 * (size - 12), 3),
        technical_extra_gross=116.0 - 2.0 * (size - 12),
    )
    for size in range(12, 78)
}


@dataclass(frozen=True)
class UnitPrices:
    """Net unit prices (EUR) for the structural line items."""

    # KG310 / KG320
    excavation: float = 70.0
    soil_improvement: float = 25.0
    deep_foundation: float = 220.0
    floor_insulation: float = 10.0
    impact_sound_insulation: float = 8.0
    separation_layer: float = 3.0
    heated_screed: float = 30.0
    floor_covering: float = 35.0
    parquet_surcharge: float = 15.0
    skirting: float = 25.0  # per lfm
    skirting_per_floor_area: float = 396.66 / 285.0  # lfm per m2 flat floor
    tiled_bathrooms: float = 40.0
    bathroom_share: float = 0.1
    common_floor: float = 100.0
    waterproofing: float = 19.0
    blinding_layer: float = 13.0
    perimeter_insulation: float = 48.0
    slab_separation_layer: float = 2.5
    frost_apron: float = 100.0  # per lfm
    # KG330
    window: float = 450.0
    wood_window_surcharge: float = 55.0
    entrance_door: float = 5000.0
    insulation_system: float = 110.0
    interior_plaster: float = 16.0
    interior_paint: float = 13.0
    balcony: float = 7000.0  # 6 m2 reference balcony
    balcony_reference_m2: float = 6.0
    # KG340
    load_bearing_interior_wall: float = 174.0
    load_bearing_share: float = 0.55
    in_unit_bearing_share: float = 0.25  # concrete only
    non_bearing_interior_wall: float = 119.0
    core_unit_door: float = 1500.0
    gallery_unit_door: float = 2200.0
    interior_door: float = 550.0
    interior_doors_per_unit: float = 4.35
    # KG350
    ceiling_slab: float = 117.0
    ceiling_finish: float = 20.0
    staircase: float = 14000.0  # per floor and core
    # KG360
    roof_structure: float = 119.0
    vapour_barrier: float = 15.0
    tapered_insulation: float = 95.0
    roof_membrane: float = 39.0
    roof_lining: float = 20.0
    # KG380
    access_gallery: float = 400.0
    access_gallery_depth: float = 1.5
    # KG390
    site_setup_share: float = 0.08
    art_in_building: float = 10000.0
    art_reference_area: float = 1432.0
    # surcharges (gross EUR/m2 usable)
    one_setback_gross: float = 20.0
    two_setbacks_gross: float = 30.0
    tight_site_gross: float = 25.0


UNIT_PRICES = UnitPrices()


@dataclass(frozen=True)
class TechnicalRates:
    """Technical systems (KG400) rates; *_gross are EUR/m2 usable incl. VAT."""

    base_gross: float = 620.0
    non_district_heat_gross: float = 70.0
    geothermal_multiplier: float = 2.0
    interior_bathroom_gross: float = 60.0
    photovoltaic_gross: float = 630.0  # per m2 roof covered
    sanitary_reference_per_unit: float = 7000.0
    charging_station: float = 5000.0  # net per station
    class_surcharge_share: float = 0.5


TECHNICAL_RATES = TechnicalRates()


@dataclass(frozen=True)
class UndergroundPrices:
    """Net prices for basements and underground garages."""

    excavation: float = 140.0  # per m2 GFA below grade
    garage_excavation: float = 43.0  # per m3 of excavated volume
    exterior_wall: float = 380.0
    interior_wall: float = 110.0
    interior_wall_share: float = 0.5
    columns: float = 130.0  # per lfm
    column_grid_m2: float = 25.0
    column_height: float = 3.0
    ceiling: float = 272.0
    ramp: float = 30000.0
    staircase: float = 14000.0
    steel_door: float = 2000.0
    area_per_steel_door: float = 50.0
    technical_garage: float = 225.0
    technical_basement: float = 90.0
    double_parker: float = 15000.0
    charging_station: float = 5000.0
    storey_height: float = 3.2  # basement
    garage_slab_allowance: float = 0.7  # added to the garage clear height
    garage_outline_factor: float = 4.4  # wall length per sqrt(m2) of a square-ish garage
    extra_level_wall_surcharge: float = 100.0  # per additional level
    second_level_technical_surcharge: float = 120.0
    max_extra_levels: int = 3
    garage_interior_wall_share: float = 0.7
    storage_interior_wall_share: float = 1.2  # with storage compartments
    garage_area_per_steel_door: float = 100.0
    misc_works_share: float = 0.05
    site_setup_share: float = 0.05
    circulation_per_core: float = 25.0
    layout_overhead: float = 1.05


UNDERGROUND_PRICES = UndergroundPrices()


def sanitary_cost_per_unit(units: int) -> float:
    """Net sanitary installation cost per apartment, cheaper in volume."""
    if units <= 9:
        return 9000.0
    if units <= 30:
        return 8500.0
    return 8000.0


def _note_fallback(flags: Optional[List[str]], message: str) -> None:
    logger.warning(message)
    if flags is not None:
        flags.append(message)


def classify_building(top_floor_level: float) -> BuildingClass:
    """Building class from the level of the topmost floor above ground."""
    for threshold, building_class in BUILDING_CLASS_THRESHOLDS:
        if top_floor_level > threshold:
            return building_class
    return BuildingClass.CLASS_4


def lookup_slab_price(floors: int, flags: Optional[List[str]] = None) -> float:
    """Foundation slab price; buildings above 9 floors use the 9-floor band."""
    if floors in SLAB_PRICE_BY_FLOORS:
        return SLAB_PRICE_BY_FLOORS[floors]
    nearest = min(SLAB_PRICE_BY_FLOORS, key=lambda band: abs(band - floors))
    _note_fallback(flags, f"slab price: {floors} floors outside table, using {nearest}-floor band")
    return SLAB_PRICE_BY_FLOORS[nearest]


def lookup_interior_wall_band(
    unit_size_m2: float,
    flags: Optional[List[str]] = None,
) -> InteriorWallBand:
    """Interior wall band for an average unit size (rounded to whole m2)."""
    size = int(round(unit_size_m2))
    if size in INTERIOR_WALL_BANDS:
        return INTERIOR_WALL_BANDS[size]
    lowest, highest = min(INTERIOR_WALL_BANDS), max(INTERIOR_WALL_BANDS)
    nearest = lowest if size < lowest else highest
    _note_fallback(
        flags,
        f"interior wall band: unit size {unit_size_m2:.1f} m2 outside "
        f"[{lowest}, {highest}], using {nearest} m2",
    )
    return INTERIOR_WALL_BANDS[nearest]


def lookup_series_discount(building_count: int) -> float:
    """Repeat-building discount; counts of 5 or more share the top band."""
    if building_count <= 1:
        return 0.0
    return SERIES_DISCOUNTS[min(building_count, max(SERIES_DISCOUNTS))]


@dataclass(frozen=True, order=True)
class Quarter:
    """Calendar quarter, e.g. ``Quarter(2026, 1)`` for Q1 2026."""

    year: int
    quarter: int

    @classmethod
    def parse(cls, text: str) -> "Quarter":
        """Parse ``"Q1 2026"``; raises ValueError on other formats."""
        match = re.fullmatch(r"\s*Q([1-4])\s+(\d{4})\s*", text)
        if not match:
            raise ValueError(f"Invalid quarter: {text!r}")
        return cls(year=int(match.group(2)), quarter=int(match.group(1)))

    @property
    def index(self) -> int:
        return self.year * 4 + (self.quarter - 1)

    def quarters_since(self, other: "Quarter") -> int:
        return self.index - other.index

    def __str__(self) -> str:
        return f"Q{self.quarter} {self.year}"


PRICE_INDEX_REFERENCE = Quarter(2025, 4)
PRICE_INDEX_FIRST = Quarter(2025, 1)
PRICE_INDEX_LAST = Quarter(2035, 4)


def lookup_price_escalation(
    start: Quarter,
    annual_rate: float = 0.015,
    reference: Quarter = PRICE_INDEX_REFERENCE,
    flags: Optional[List[str]] = None,
) -> float:
    """Escalation factor for a construction start quarter.

    Grows linearly by ``annual_rate / 4`` per quarter after the reference
    quarter (and is negative before it). Starts outside the published index
    range are clamped to its first/last quarter.

    Example:
        >>> lookup_price_escalation(Quarter(2026, 1))
        0.00375
    """
    clamped = start
    if start < PRICE_INDEX_FIRST:
        clamped = PRICE_INDEX_FIRST
    elif start > PRICE_INDEX_LAST:
        clamped = PRICE_INDEX_LAST
    if clamped != start:
        _note_fallback(flags, f"price index: {start} outside index range, using {clamped}")
    return clamped.quarters_since(reference) * annual_rate / 4
