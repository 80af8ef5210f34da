#!/usr/bin/env python3
"""Example script: price the default building and run both strategies."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from buildcost.models import (
    BuildingParameters,
    ConstructionMethod,
    EnergyStandard,
    LandCostInput,
    ProjectInputs,
    Strategy,
    UndergroundType,
)
from buildcost.scenarios import (
    compare_variants,
    format_comparison_table,
    run_both,
    run_project,
    sensitivity_grid,
)


def get_example_inputs() -> ProjectInputs:
    """25 x 15 m masonry building, 5 floors, 20 apartments."""
    return ProjectInputs(
        building=BuildingParameters(
            length_m=25.0,
            width_m=15.0,
            floors=5,
            apartments=20,
            construction_method=ConstructionMethod.MASONRY,
        ),
        land=LandCostInput(rate_per_m2=450.0, site_area_m2=900.0),
    )


def _pct(value) -> str:
    return f"{value:.2%}" if value is not None else "-"


def run_single_project(inputs: ProjectInputs) -> None:
    """Print masses, costs and the returns of both strategies."""
    project = run_project(inputs)
    masses = project.masses
    breakdown = project.breakdown

    print("\n" + "=" * 60)
    print("BUILDING COST & RETURNS")
    print("=" * 60 + "\n")
    print(f"Gross floor area:      {masses.gross_floor_area:>12,.1f} m2")
    print(f"Usable area:           {masses.usable_area:>12,.1f} m2")
    print(f"Lettable area:         {masses.lettable_area:>12,.1f} m2")
    print(f"Building class:        {masses.building_class.value:>12}")
    print(f"Apartments:            {masses.apartments:>12d}")
    print()

    for group in project.cascade.all_groups():
        print(f"KG {group.code:<4} {group.name:<28} {group.gross_total:>14,.0f} EUR")
    print()
    for component in breakdown.components:
        print(f"{component.label:<34} {component.amount:>14,.0f} EUR")
    print(f"{'Total investment cost':<34} {breakdown.total:>14,.0f} EUR")
    print(f"{'per m2 lettable':<34} {breakdown.total_per_m2:>14,.0f} EUR")
    if project.cascade.flags:
        print(f"\nLookup fallbacks: {len(project.cascade.flags)}")

    print(f"\nRent for {inputs.revenue.target_yield:.1%} yield: {project.market.required_rent_per_m2:,.2f} EUR/m2/month")
    print(f"Sale price at x{inputs.revenue.sales_multiplier:g}: {project.market.sale_price_per_m2:,.0f} EUR/m2")

    results = run_both(project)
    hold = results[Strategy.HOLD].returns
    sell = results[Strategy.SELL].returns
    print("\n--- Hold ---")
    print(f"Net initial yield: {_pct(hold.net_initial_yield)}")
    print(f"Levered IRR:       {_pct(hold.levered_irr)}")
    print(f"Unlevered IRR:     {_pct(hold.unlevered_irr)}")
    print(f"DSCR:              {hold.dscr:.2f}" if hold.dscr is not None else "DSCR:              -")
    print(f"Break-even month:  {hold.break_even_month if hold.break_even_month is not None else '-'}")
    print(f"Peak capital:      {hold.peak_capital:,.0f} EUR")
    print("\n--- Sell ---")
    print(f"Margin:            {_pct(sell.margin)}")
    print(f"Return on equity:  {_pct(sell.return_on_equity)}")
    print(f"Annualized IRR:    {_pct(sell.annualized_irr)}")
    print(f"Peak capital:      {sell.peak_capital:,.0f} EUR")


def run_sensitivity(inputs: ProjectInputs) -> None:
    """Cost / price sweep for the sell strategy."""
    project = run_project(inputs)
    print("\n" + "=" * 60)
    print("SENSITIVITY (sell)")
    print("=" * 60)
    for result in sensitivity_grid(project, Strategy.SELL):
        print(f"{result.case.label:<32} margin {_pct(result.returns.margin):>8}")


def run_variants(inputs: ProjectInputs) -> None:
    """Compare construction and energy variants under the hold strategy."""
    variants = {
        "masonry": inputs,
        "concrete": replace(
            inputs,
            building=replace(inputs.building, construction_method=ConstructionMethod.REINFORCED_CONCRETE),
        ),
        "eh40+basement": replace(
            inputs,
            building=replace(
                inputs.building,
                energy_standard=EnergyStandard.EH40,
                underground=UndergroundType.BASEMENT,
            ),
        ),
    }
    print()
    print(format_comparison_table(compare_variants(variants, Strategy.HOLD)))


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Building cost and returns estimator")
    parser.add_argument("--sensitivity", action="store_true", help="Run the cost/price sweep")
    parser.add_argument("--variants", action="store_true", help="Compare building variants")
    parser.add_argument("--excel", metavar="PATH", help="Write an Excel report")
    parser.add_argument("--verbose", action="store_true", help="Log lookup fallbacks")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    inputs = get_example_inputs()
    run_single_project(inputs)

    if args.sensitivity:
        run_sensitivity(inputs)
    if args.variants:
        run_variants(inputs)
    if args.excel:
        from buildcost.export import generate_report_excel

        project = run_project(inputs)
        Path(args.excel).write_bytes(generate_report_excel(project, run_both(project)))
        print(f"\nWrote {args.excel}")

    print("\nDone.")


if __name__ == "__main__":
    main()
