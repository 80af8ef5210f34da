"""Shared test inputs."""

from buildcost.models import (
    BuildingParameters,
    ConstructionMethod,
    FinancingTerms,
    LandCostInput,
    ProjectInputs,
    RevenueAssumptions,
    TimelinePhases,
)


def get_reference_building() -> BuildingParameters:
    """25 m x 15 m masonry building, 5 floors, 20 apartments.

    These parameters should produce:
    - GFA: 1,875 m2 (375 m2 footprint x 5)
    - Usable area: 1,425 m2 (GFA - 15.6 % structure - 125 m2 circulation - 32.5 m2 technical)
    - Facade: 1,180 m2 (80 m perimeter x 14.75 m)
    """
    return BuildingParameters(
        length_m=25.0,
        width_m=15.0,
        floors=5,
        clear_height_m=2.6,
        apartments=20,
        construction_method=ConstructionMethod.MASONRY,
    )


def get_reference_inputs() -> ProjectInputs:
    """Reference building with land, financing and fixed rent/sale prices."""
    return ProjectInputs(
        building=get_reference_building(),
        land=LandCostInput(rate_per_m2=450.0, site_area_m2=900.0),
        financing=FinancingTerms(
            enabled=True,
            equity_ratio=0.25,
            interest_rate=0.04,
            amortization_rate=0.02,
        ),
        timeline=TimelinePhases(
            planning_start=0,
            planning_end=6,
            construction_start=6,
            construction_end=24,
            marketing_start=18,
            marketing_end=30,
            holding_years=10,
        ),
        revenue=RevenueAssumptions(
            rent_per_m2_month=16.0,
            sale_price_per_m2=6_500.0,
        ),
    )


def get_unfinanced_inputs() -> ProjectInputs:
    """Reference inputs with financing disabled and flat rent."""
    inputs = get_reference_inputs()
    return ProjectInputs(
        building=inputs.building,
        land=inputs.land,
        financing=FinancingTerms(enabled=False),
        timeline=inputs.timeline,
        revenue=RevenueAssumptions(rent_per_m2_month=16.0, rent_escalation=0.0),
    )
