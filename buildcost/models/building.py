"""Building parameters: geometry, construction options and cost factors."""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .lookups import (
    BalconyType,
    BathroomPlacement,
    CirculationType,
    ConstructionMethod,
    EnergyStandard,
    FacadeFinish,
    FloorFinish,
    FootprintMode,
    GreenRoof,
    HeatingSupply,
    KitchenPackage,
    Quarter,
    RoofForm,
    SunProtection,
    UndergroundType,
    UNDERGROUND_PRICES,
    WindowMaterial,
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class ManualAreas:
    """Measured areas that replace the derived value when set (m2)."""

    ground_floor_area: Optional[float] = None
    gross_floor_area: Optional[float] = None
    gross_floor_area_below: Optional[float] = None
    balcony_area: Optional[float] = None
    usable_area: Optional[float] = None
    facade_area: Optional[float] = None
    interior_wall_area: Optional[float] = None
    window_area: Optional[float] = None
    ceiling_area: Optional[float] = None
    roof_area: Optional[float] = None


@dataclass(frozen=True)
class GarageLayout:
    """Underground garage sized from its parking spaces rather than the footprint.

    ``extra_levels`` holds the area share of the 2nd, 3rd and 4th level
    relative to the first; ``floor_area`` covers all levels.
    """

    parking_spaces: int = 20
    space_area_m2: float = 25.0  # incl. aisle share
    storage_rooms: int = 0
    storage_area_m2: float = 6.0
    technical_area_m2: float = 30.0
    ancillary_area_m2: float = 20.0
    stair_cores: int = 1
    entrances: int = 1
    double_parkers: int = 0
    charging_stations: int = 0
    clear_height_m: float = 2.5
    extra_levels: Tuple[float, ...] = ()
    storage_compartments: bool = False  # cellar compartments inside the garage

    @property
    def floor_area(self) -> float:
        raw = (
            self.parking_spaces * self.space_area_m2
            + self.storage_rooms * self.storage_area_m2
            + self.technical_area_m2
            + self.ancillary_area_m2
            + self.stair_cores * UNDERGROUND_PRICES.circulation_per_core
        )
        return UNDERGROUND_PRICES.layout_overhead * raw

    @property
    def extra_level_factor(self) -> float:
        return sum(self.extra_levels)

    @property
    def footprint_area(self) -> float:
        """Area of the first underground level."""
        return self.floor_area / (1 + self.extra_level_factor)

    @property
    def storey_height(self) -> float:
        return self.clear_height_m + UNDERGROUND_PRICES.garage_slab_allowance

    def clamped(self) -> "GarageLayout":
        levels = self.extra_levels[: UNDERGROUND_PRICES.max_extra_levels]
        return replace(
            self,
            parking_spaces=max(0, self.parking_spaces),
            storage_rooms=max(0, self.storage_rooms),
            stair_cores=max(0, self.stair_cores),
            entrances=max(0, self.entrances),
            double_parkers=max(0, self.double_parkers),
            charging_stations=max(0, self.charging_stations),
            clear_height_m=max(0.0, self.clear_height_m),
            extra_levels=tuple(_clamp(share, 0.0, 1.0) for share in levels),
        )


@dataclass(frozen=True)
class ExtraCost:
    """User-defined lump sum added to a cost group (gross EUR)."""

    name: str
    amount_gross: float
    technical: bool = False  # False = structure, True = technical systems


@dataclass(frozen=True)
class CostFactors:
    """Commercial factors applied on top of the raw line items."""

    regional_factor: float = 1.0
    contractor_markup: float = 0.0  # general-contractor delegation
    construction_start: Quarter = field(default_factory=lambda: Quarter(2026, 1))
    series_buildings: int = 1  # identical repeat buildings
    volume_discount: float = 0.0
    tight_site: bool = False
    deep_foundation: bool = False
    art_in_building: bool = False
    extra_costs: Tuple[ExtraCost, ...] = ()


@dataclass(frozen=True)
class BuildingParameters:
    """Physical description of the building.

    Preconditions (not enforced): ``floors >= 1`` and an explicit
    ``apartments > 0``. Use :meth:`clamped` to coerce raw user input.
    """

    # === Footprint ===
    footprint_mode: FootprintMode = FootprintMode.RECTANGULAR
    length_m: float = 25.0
    width_m: float = 15.0
    footprint_area_m2: Optional[float] = None  # individual mode
    perimeter_m: Optional[float] = None  # individual mode
    floors: int = 5
    clear_height_m: float = 2.6

    # === Setbacks ===
    setback_floors: int = 0  # 0, 1 or 2 top floors set back
    setback_share_top: float = 0.8  # top floor area as share of footprint
    setback_share_second: float = 0.8  # second-from-top, two setbacks only

    # === Units ===
    apartments: Optional[int] = 20  # None = derive from usable area
    commercial_area_fitted_m2: float = 0.0
    commercial_area_shell_m2: float = 0.0
    extra_nonresidential_m2: float = 0.0

    # === Construction ===
    construction_method: ConstructionMethod = ConstructionMethod.MASONRY
    circulation: CirculationType = CirculationType.STAIR_CORE
    stair_cores: Optional[int] = None  # None = derive
    energy_standard: EnergyStandard = EnergyStandard.GEG
    heating: HeatingSupply = HeatingSupply.DISTRICT_HEAT
    underground: UndergroundType = UndergroundType.NONE
    basement_share: float = 1.0  # of footprint
    garage: Optional[GarageLayout] = None

    # === Envelope ===
    window_ratio: float = 0.20
    window_material: WindowMaterial = WindowMaterial.PLASTIC
    sun_protection: SunProtection = SunProtection.NONE
    sun_protection_share: float = 1.0
    facade_finish: FacadeFinish = FacadeFinish.RENDER
    brick_slip_share: float = 0.0
    roof_form: RoofForm = RoofForm.FLAT
    green_roof: GreenRoof = GreenRoof.NONE
    pv_roof_share: float = 0.0

    # === Balconies ===
    balcony_type: BalconyType = BalconyType.STANDING
    balcony_size_m2: float = 6.0
    balcony_share: float = 1.0  # balconies per apartment
    balcony_area_factor: float = 0.5  # share counted as lettable area

    # === Fit-out ===
    floor_finish: FloorFinish = FloorFinish.VINYL
    bathrooms: BathroomPlacement = BathroomPlacement.FACADE
    kitchens: KitchenPackage = KitchenPackage.NONE
    charging_stations: int = 0

    manual_areas: ManualAreas = field(default_factory=ManualAreas)
    costs: CostFactors = field(default_factory=CostFactors)

    @property
    def ground_floor_area(self) -> float:
        if self.footprint_mode == FootprintMode.INDIVIDUAL and self.footprint_area_m2 is not None:
            return self.footprint_area_m2
        return self.length_m * self.width_m

    @property
    def perimeter(self) -> float:
        if self.footprint_mode == FootprintMode.INDIVIDUAL and self.perimeter_m is not None:
            return self.perimeter_m
        return 2 * (self.length_m + self.width_m)

    def clamped(self) -> "BuildingParameters":
        """Return a copy with out-of-range numbers moved to the nearest valid value."""
        max_setbacks = min(2, self.floors - 1) if self.floors > 1 else 0
        apartments = self.apartments
        if apartments is not None:
            apartments = max(1, apartments)
        return replace(
            self,
            length_m=max(0.0, self.length_m),
            width_m=max(0.0, self.width_m),
            floors=max(1, self.floors),
            clear_height_m=max(0.0, self.clear_height_m),
            setback_floors=int(_clamp(self.setback_floors, 0, max_setbacks)),
            setback_share_top=_clamp(self.setback_share_top, 0.0, 1.0),
            setback_share_second=_clamp(self.setback_share_second, 0.0, 1.0),
            apartments=apartments,
            basement_share=_clamp(self.basement_share, 0.0, 1.0),
            window_ratio=_clamp(self.window_ratio, 0.0, 1.0),
            sun_protection_share=_clamp(self.sun_protection_share, 0.0, 1.0),
            brick_slip_share=_clamp(self.brick_slip_share, 0.0, 1.0),
            pv_roof_share=_clamp(self.pv_roof_share, 0.0, 1.0),
            balcony_size_m2=max(0.0, self.balcony_size_m2),
            balcony_share=max(0.0, self.balcony_share),
            balcony_area_factor=_clamp(self.balcony_area_factor, 0.0, 1.0),
            charging_stations=max(0, self.charging_stations),
            garage=self.garage.clamped() if self.garage is not None else None,
        )
