"""Technical systems cost group (DIN276 KG400)."""

from typing import List, Optional, Sequence

from ..models.building import BuildingParameters
from ..models.config import DEFAULT_CONFIG, EngineConfig
from ..models.lookups import (
    CLASS_SURCHARGE_GROSS,
    TECHNICAL_RATES,
    BathroomPlacement,
    HeatingSupply,
    lookup_interior_wall_band,
    sanitary_cost_per_unit,
)
from .cost_items import Adjustment, CostGroup, CostLineItem, build_group, line_item
from .masses import MassResult

R = TECHNICAL_RATES


def technical_items(
    params: BuildingParameters,
    masses: MassResult,
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> List[CostLineItem]:
    """KG400 line items.

    Most rates are gross per m2 lettable area and are converted to net here;
    photovoltaics scale with the covered roof area, charging stations are
    priced per station.
    """
    tax = config.tax_multiplier
    area = masses.lettable_area

    items = [line_item("410", "Building services base rate", area, "m2", R.base_gross / tax, config)]

    if params.heating != HeatingSupply.DISTRICT_HEAT:
        rate = R.non_district_heat_gross
        if params.heating == HeatingSupply.GEOTHERMAL:
            rate *= R.geothermal_multiplier
        items.append(line_item("420", f"Heat generation ({params.heating.value})", area, "m2", rate / tax, config))

    if params.bathrooms == BathroomPlacement.INTERIOR:
        items.append(
            line_item("430", "Interior bathroom ventilation", area, "m2", R.interior_bathroom_gross / tax, config)
        )

    sanitary_delta = sanitary_cost_per_unit(masses.apartments) - R.sanitary_reference_per_unit
    items.append(line_item("410", "Sanitary volume adjustment", masses.apartments, "pcs", sanitary_delta, config))

    if params.pv_roof_share > 0:
        pv_area = masses.roof_area * params.pv_roof_share
        items.append(line_item("440", "Photovoltaics", pv_area, "m2", R.photovoltaic_gross / tax, config))

    if params.charging_stations > 0:
        items.append(
            line_item("440", "E-mobility charging stations", params.charging_stations, "pcs", R.charging_station, config)
        )

    band = lookup_interior_wall_band(masses.average_unit_size, flags)
    if band.technical_extra_gross:
        items.append(
            line_item(
                "4XX",
                f"Unit size installations ({band.unit_size_m2} m2 band)",
                area,
                "m2",
                band.technical_extra_gross / tax,
                config,
            )
        )

    class_surcharge = CLASS_SURCHARGE_GROSS[masses.building_class] * R.class_surcharge_share
    if class_surcharge:
        items.append(
            line_item(
                "4XX",
                f"Building class ({masses.building_class.value})",
                masses.residential_usable_area,
                "m2",
                class_surcharge / tax,
                config,
            )
        )

    for extra in params.costs.extra_costs:
        if extra.technical:
            items.append(line_item("4XX", extra.name, 1, "lump sum", extra.amount_gross / tax, config))
    return items


def technical_group(
    params: BuildingParameters,
    masses: MassResult,
    adjustments: Sequence[Adjustment],
    config: EngineConfig = DEFAULT_CONFIG,
    flags: Optional[List[str]] = None,
) -> CostGroup:
    return build_group("400", "Technical systems", technical_items(params, masses, config, flags), adjustments, config)
