"""Tests for the underground cost group."""

from dataclasses import replace

import pytest

from buildcost.calculations.cascade import compute_cost_groups
from buildcost.calculations.masses import compute_masses
from buildcost.models import CostFactors, GarageLayout, UndergroundType


def _price(building):
    return compute_cost_groups(building, compute_masses(building))


@pytest.fixture
def basement_building(building):
    return replace(building, underground=UndergroundType.BASEMENT)


class TestBasement:
    """Full basement under the footprint."""

    def test_group_present(self, basement_building):
        """The underground group is reported separately."""
        cascade = _price(basement_building)
        assert cascade.basement is not None
        assert cascade.group("UG") is cascade.basement
        assert [group.code for group in cascade.groups][-1] == "400"

    def test_no_group_without_basement(self, cascade):
        """Buildings without underground storey have no group."""
        assert cascade.basement is None
        assert "UG" not in [group.code for group in cascade.all_groups()]

    def test_no_contractor_markup(self, basement_building):
        """The underground group only carries regional factor and escalation."""
        marked_up = replace(basement_building, costs=CostFactors(contractor_markup=0.1))
        cascade = _price(marked_up)
        names = [step.name for step in cascade.basement.adjustments]
        assert names == ["regional factor", "price escalation"]
        assert cascade.group("330").adjustment_factor > cascade.basement.adjustment_factor

    def test_no_ramp_for_basement(self, basement_building):
        """Only garages have a ramp."""
        codes = [item.code for item in _price(basement_building).basement.items]
        assert "359" not in codes

    def test_construction_includes_basement(self, basement_building, cascade):
        """Construction totals include the underground group."""
        with_basement = _price(basement_building)
        expected = sum(group.gross_total for group in with_basement.groups) + with_basement.basement.gross_total
        assert with_basement.construction_gross == pytest.approx(expected)
        assert with_basement.construction_gross > cascade.construction_gross

    def test_fees_include_underground(self, basement_building, cascade):
        """Underground costs raise the fee base by default."""
        assert _price(basement_building).fees.total_net > cascade.fees.total_net


class TestGarage:
    """Underground garage sized from its layout."""

    def test_garage_items(self, building):
        """Ramp, double parkers and charging stations."""
        garage = GarageLayout(parking_spaces=30, double_parkers=4, charging_stations=6, entrances=2)
        cascade = _price(replace(building, underground=UndergroundType.GARAGE, garage=garage))
        items = {item.code: item for item in cascade.basement.items}
        assert items["359"].quantity == 2
        assert items["461"].line_total_net == pytest.approx(4 * 15_000.0)
        assert items["444"].line_total_net == pytest.approx(6 * 5_000.0)
        assert cascade.basement.name == "Underground garage"

    def test_percentages_on_structural_items(self, building):
        """Misc works and site setup are shares of the structural items."""
        cascade = _price(replace(building, underground=UndergroundType.BASEMENT))
        items = cascade.basement.items
        structural = sum(item.line_total_net for item in items if item.code not in ("391", "399", "410"))
        misc = next(item for item in items if item.description == "Miscellaneous works")
        assert misc.line_total_net == pytest.approx(0.05 * structural)

    def test_technical_share(self, building):
        """The technical part of the group is found by code prefix."""
        cascade = _price(replace(building, underground=UndergroundType.BASEMENT))
        basement = cascade.basement
        assert basement.net_total_for("4") == pytest.approx(375.0 * 90.0 * basement.adjustment_factor)
        assert basement.net_total_for("3") + basement.net_total_for("4") == pytest.approx(basement.net_total)


def _garage_items(building, **layout):
    garage = GarageLayout(parking_spaces=30, **layout)
    cascade = _price(replace(building, underground=UndergroundType.GARAGE, garage=garage))
    return {item.code: item for item in cascade.basement.items}


class TestGarageGeometry:
    """Clear height, additional levels and storage compartments."""

    def test_excavation_by_volume(self, building):
        """Excavated volume is floor area x (clear height + 0.7 m)."""
        items = _garage_items(building)
        assert items["311"].unit == "m3"
        assert items["311"].quantity == pytest.approx(866.25 * 3.2)
        assert items["311"].line_total_net == pytest.approx(866.25 * 3.2 * 43.0)

    def test_clear_height_drives_quantities(self, building):
        """A higher garage needs more excavation, wall and column length."""
        low = _garage_items(building)
        high = _garage_items(building, clear_height_m=3.0)
        assert high["311"].quantity == pytest.approx(866.25 * 3.7)
        assert high["331"].quantity == pytest.approx(low["331"].quantity * 3.7 / 3.2)
        assert high["343"].quantity == pytest.approx(866.25 / 25.0 * 3.7)

    def test_single_level_walls(self, building):
        """Wall length from a square-ish outline of the floor area."""
        items = _garage_items(building)
        assert items["331"].quantity == pytest.approx(866.25 ** 0.5 * 4.4 * 3.2)
        assert items["331"].unit_price_net == pytest.approx(380.0)
        assert items["410"].unit_price_net == pytest.approx(225.0)

    def test_second_level(self, building):
        """A half-size second level: smaller outline, taller walls, dearer services."""
        items = _garage_items(building, extra_levels=(0.5,))
        footprint = 866.25 / 1.5
        assert items["322"].quantity == pytest.approx(footprint - 375.0)
        assert items["331"].quantity == pytest.approx(footprint ** 0.5 * 4.4 * 3.2 * 1.5)
        assert items["331"].unit_price_net == pytest.approx(480.0)
        assert items["410"].unit_price_net == pytest.approx(345.0)
        assert items["410"].quantity == pytest.approx(866.25)

    def test_wall_price_per_extra_level(self, building):
        """Each extra level adds 100 EUR/m2 to the retaining walls."""
        items = _garage_items(building, extra_levels=(1.0, 0.5, 0.5))
        assert items["331"].unit_price_net == pytest.approx(680.0)
        assert items["410"].unit_price_net == pytest.approx(345.0)

    def test_at_most_three_extra_levels(self):
        """Clamping drops a fifth level and bounds the shares."""
        garage = GarageLayout(extra_levels=(1.0, 1.5, 0.5, 0.5)).clamped()
        assert garage.extra_levels == (1.0, 1.0, 0.5)

    def test_storage_compartments(self, building):
        """Compartments add partitions and a door every 50 m2."""
        plain = _garage_items(building)
        storage = _garage_items(building, storage_compartments=True)
        assert plain["341"].quantity == pytest.approx(plain["331"].quantity * 0.7)
        assert storage["341"].quantity == pytest.approx(storage["331"].quantity * 1.2)
        assert plain["344"].quantity == 9
        assert storage["344"].quantity == pytest.approx(866.25 / 50)
