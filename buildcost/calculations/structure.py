"""Building construction cost groups (DIN276 KG310-390 plus surcharges)."""

from typing import List, Optional, Sequence

from ..models.building import BuildingParameters
from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import (
    BALCONY_TYPE_SURCHARGE,
    BRICK_SLIP_SURCHARGE,
    CLASS_SURCHARGE_GROSS,
    CONSTRUCTION_METHOD_PRICES,
    ENERGY_STANDARDS,
    GREEN_ROOF_PRICES,
    KITCHEN_PRICES_GROSS,
    ROOF_FORM_FACTORS,
    SUN_PROTECTION_PRICES,
    UNIT_PRICES,
    CirculationType,
    ConstructionMethod,
    FacadeFinish,
    FloorFinish,
    GreenRoof,
    KitchenPackage,
    SunProtection,
    WindowMaterial,
    lookup_series_discount,
    lookup_slab_price,
)
from .cost_items import Adjustment, CostGroup, CostLineItem, build_group, line_item
from .masses import MassResult

P = UNIT_PRICES


def _floor_build_up_price(params: BuildingParameters) -> float:
    price = (
        P.floor_insulation
        + P.impact_sound_insulation
        + P.separation_layer
        + P.heated_screed
        + P.floor_covering
    )
    if params.floor_finish == FloorFinish.PARQUET:
        price += P.parquet_surcharge
    return price


def _floor_items(
    code: str,
    label: str,
    area: float,
    structural_share: float,
    efficiency: float,
    build_up_price: float,
    config: EngineConfig,
) -> List[CostLineItem]:
    """Flat floors, skirting, tiled baths and common floors on one slab area."""
    flat_floor = area * efficiency
    common_floor = max(0.0, area - flat_floor - area * structural_share)
    return [
        line_item(code, f"Floor build-up {label}", flat_floor, "m2", build_up_price, config),
        line_item(code, f"Skirting {label}", flat_floor * P.skirting_per_floor_area, "lfm", P.skirting, config),
        line_item(code, f"Tiled bathrooms {label}", flat_floor * P.bathroom_share, "m2", P.tiled_bathrooms, config),
        line_item(code, f"Common area floors {label}", common_floor, "m2", P.common_floor, config),
    ]


def excavation_items(masses: MassResult, config: EngineConfig = DEFAULT_CONFIG) -> List[CostLineItem]:
    return [line_item("311", "Excavation", masses.ground_floor_area, "m2", P.excavation, config)]


def foundation_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> List[CostLineItem]:
    ground = masses.ground_floor_area
    items = [
        line_item("321", "Soil improvement", ground, "m2", P.soil_improvement, config),
        line_item("322", "Foundation slab", ground, "m2", lookup_slab_price(params.floors, flags), config),
    ]
    if params.costs.deep_foundation:
        items.append(line_item("323", "Deep foundation", ground, "m2", P.deep_foundation, config))
    items += _floor_items(
        "324",
        "ground floor",
        ground,
        masses.structural_share,
        masses.usable_efficiency,
        _floor_build_up_price(params),
        config,
    )
    items += [
        line_item("325", "Waterproofing", ground, "m2", P.waterproofing, config),
        line_item("325", "Blinding layer", ground, "m2", P.blinding_layer, config),
        line_item("325", "Perimeter insulation", ground, "m2", P.perimeter_insulation, config),
        line_item("325", "Separation layer", ground, "m2", P.slab_separation_layer, config),
        line_item("326", "Frost apron", masses.perimeter, "lfm", P.frost_apron, config),
    ]
    return items


def exterior_wall_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    method = CONSTRUCTION_METHOD_PRICES[params.construction_method]
    energy = ENERGY_STANDARDS[params.energy_standard]
    opaque = max(0.0, masses.facade_area - masses.window_area)

    window_price = P.window + energy.window_surcharge
    if params.window_material == WindowMaterial.WOOD:
        window_price += P.wood_window_surcharge

    items = [
        line_item("331", "Load-bearing exterior walls", masses.facade_area, "m2", method.exterior_wall, config),
        line_item("334", "Windows", masses.window_area, "m2", window_price, config),
        line_item("334", "Entrance door", 1, "pcs", P.entrance_door, config),
        line_item("335", "External insulation system", opaque, "m2", P.insulation_system + energy.wall_surcharge, config),
    ]
    if params.facade_finish == FacadeFinish.BRICK_SLIPS:
        items.append(
            line_item("335", "Brick slips", opaque * params.brick_slip_share, "m2", BRICK_SLIP_SURCHARGE, config)
        )
    items.append(
        line_item("336", "Interior plaster and paint", opaque, "m2", P.interior_plaster + P.interior_paint, config)
    )

    balconies = masses.apartments * params.balcony_share
    if balconies > 0:
        # Reference price is for 6 m2; larger balconies cost half the pro-rata extra
        balcony_price = P.balcony + P.balcony / P.balcony_reference_m2 * (params.balcony_size_m2 - P.balcony_reference_m2) / 2
        items.append(line_item("337", "Balconies", balconies, "pcs", balcony_price, config))
        type_surcharge = BALCONY_TYPE_SURCHARGE[params.balcony_type]
        if type_surcharge:
            items.append(
                line_item(
                    "337",
                    f"Balcony type surcharge ({params.balcony_type.value})",
                    balconies,
                    "pcs",
                    balcony_price * type_surcharge,
                    config,
                )
            )

    if params.sun_protection != SunProtection.NONE:
        items.append(
            line_item(
                "338",
                "Sun protection",
                masses.window_area * params.sun_protection_share,
                "m2",
                SUN_PROTECTION_PRICES[params.sun_protection],
                config,
            )
        )
    return items


def interior_wall_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    method = CONSTRUCTION_METHOD_PRICES[params.construction_method]
    masonry = CONSTRUCTION_METHOD_PRICES[ConstructionMethod.MASONRY]

    load_bearing = P.load_bearing_share * masses.interior_wall_area
    in_unit = 0.0
    if params.construction_method == ConstructionMethod.REINFORCED_CONCRETE:
        in_unit = P.in_unit_bearing_share * load_bearing
    party_walls = load_bearing - in_unit

    party_price = P.load_bearing_interior_wall + method.party_wall - masonry.party_wall
    in_unit_price = P.load_bearing_interior_wall + method.load_bearing_wall - masonry.load_bearing_wall
    non_bearing = (1 - P.load_bearing_share) * masses.interior_wall_area

    unit_doors = masses.apartments + 1 + (1 if params.extra_nonresidential_m2 > 0 else 0)
    door_price = P.gallery_unit_door if params.circulation == CirculationType.ACCESS_GALLERY else P.core_unit_door

    items = [line_item("341", "Party walls", party_walls, "m2", party_price, config)]
    if in_unit:
        items.append(line_item("341", "Load-bearing walls within units", in_unit, "m2", in_unit_price, config))
    items += [
        line_item("342", "Non-load-bearing walls", non_bearing, "m2", P.non_bearing_interior_wall, config),
        line_item("344", "Apartment entrance doors", unit_doors, "pcs", door_price, config),
        line_item(
            "344",
            "Interior doors",
            masses.apartments * P.interior_doors_per_unit,
            "pcs",
            P.interior_door,
            config,
        ),
    ]
    return items


def ceiling_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    area = masses.ceiling_area
    items = [line_item("351", "Floor slabs", area, "m2", P.ceiling_slab, config)]
    items += _floor_items(
        "353",
        "upper floors",
        area,
        masses.structural_share,
        masses.usable_efficiency,
        _floor_build_up_price(params),
        config,
    )
    flat_floor = area * masses.usable_efficiency
    common_floor = max(0.0, area - flat_floor - area * masses.structural_share)
    items += [
        line_item("354", "Ceiling finishes", flat_floor + common_floor, "m2", P.ceiling_finish, config),
        line_item("355", "Staircases", params.floors * masses.total_cores, "pcs", P.staircase, config),
    ]
    return items


def roof_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    energy = ENERGY_STANDARDS[params.energy_standard]
    layers = P.vapour_barrier + P.tapered_insulation + P.roof_membrane + energy.roof_surcharge
    roof = masses.roof_area

    items = [line_item("361", "Roof structure", roof, "m2", P.roof_structure, config)]
    form_factor = ROOF_FORM_FACTORS[params.roof_form]
    if form_factor:
        base_price = P.roof_structure + layers + P.roof_lining
        items.append(
            line_item("361", f"Roof form surcharge ({params.roof_form.value})", roof, "m2", base_price * form_factor, config)
        )
    items.append(line_item("363", "Roof layers", roof, "m2", layers, config))
    if params.green_roof != GreenRoof.NONE:
        items.append(line_item("363", "Green roof", roof, "m2", GREEN_ROOF_PRICES[params.green_roof], config))
    items.append(line_item("364", "Roof lining", roof, "m2", P.roof_lining, config))
    return items


def fixture_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    items = []
    if params.kitchens != KitchenPackage.NONE:
        kitchen_net = KITCHEN_PRICES_GROSS[params.kitchens] / config.tax_multiplier
        items.append(line_item("381", "Kitchens", masses.apartments, "pcs", kitchen_net, config))
    if params.circulation == CirculationType.ACCESS_GALLERY:
        gallery = params.length_m * P.access_gallery_depth * params.floors
        items.append(line_item("381", "Access gallery", gallery, "m2", P.access_gallery, config))
    return items


def other_measures_items(
    params: BuildingParameters,
    masses: MassResult,
    base_net: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    """Percentages and discounts on the raw KG310-380 total."""
    method = CONSTRUCTION_METHOD_PRICES[params.construction_method]
    factors = params.costs
    items = [
        line_item("391", "Site setup", P.site_setup_share, "%", base_net, config),
        line_item("399", "Small works", method.small_works_share, "%", base_net, config),
    ]
    series = lookup_series_discount(factors.series_buildings)
    if series:
        items.append(line_item("399", "Repeat building discount", -series, "%", base_net, config))
    if factors.volume_discount:
        items.append(line_item("399", "Volume discount", -factors.volume_discount, "%", base_net, config))
    if factors.art_in_building:
        art_price = P.art_in_building / P.art_reference_area
        items.append(line_item("398", "Art in building", masses.lettable_area, "m2", art_price, config))
    return items


def surcharge_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
) -> List[CostLineItem]:
    """Per-m2 surcharges on residential usable area and user extras."""
    tax = config.tax_multiplier
    area = masses.residential_usable_area
    items = []
    if params.setback_floors:
        gross = P.one_setback_gross if params.setback_floors == 1 else P.two_setbacks_gross
        items.append(line_item("3XX", "Setback floors", area, "m2", gross / tax, config))
    if params.costs.tight_site:
        items.append(line_item("3XX", "Tight site", area, "m2", P.tight_site_gross / tax, config))
    class_surcharge = CLASS_SURCHARGE_GROSS[masses.building_class]
    if class_surcharge:
        items.append(
            line_item("3XX", f"Building class ({masses.building_class.value})", area, "m2", class_surcharge / tax, config)
        )
    material = ENERGY_STANDARDS[params.energy_standard].material_surcharge
    if material:
        items.append(line_item("3XX", "Energy standard materials", area, "m2", material, config))
    for extra in params.costs.extra_costs:
        if not extra.technical:
            items.append(line_item("3XX", extra.name, 1, "lump sum", extra.amount_gross / tax, config))
    return items


def structure_groups(
    params: BuildingParameters,
    masses: MassResult,
    adjustments: Sequence[Adjustment],
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> List[CostGroup]:
    """Build the KG300 groups, each with the full adjustment sequence."""
    raw = [
        ("310", "Excavation", excavation_items(masses, config)),
        ("320", "Foundation", foundation_items(params, masses, config, flags)),
        ("330", "Exterior walls", exterior_wall_items(params, masses, config)),
        ("340", "Interior walls", interior_wall_items(params, masses, config)),
        ("350", "Ceilings", ceiling_items(params, masses, config)),
        ("360", "Roof", roof_items(params, masses, config)),
        ("380", "Built-in fixtures", fixture_items(params, masses, config)),
    ]
    base_net = sum(item.line_total_net for _, _, items in raw for item in items)
    raw.append(("390", "Other measures", other_measures_items(params, masses, base_net, config)))
    raw.append(("3XX", "Surcharges", surcharge_items(params, masses, config)))
    return [build_group(code, name, items, adjustments, config) for code, name, items in raw]
