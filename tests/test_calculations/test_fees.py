"""Tests for planning fees."""

from dataclasses import replace

import pytest

from buildcost.calculations.cascade import compute_cost_groups
from buildcost.calculations.fees import (
    architecture_chargeable,
    compute_fees,
    fire_protection_fee,
    interpolate_fee,
)
from buildcost.models import DEFAULT_CONFIG, FeeDiscipline, FeeSettings
from buildcost.models.fee_tables import WORK_PHASE_SHARES

TABLE = [(100_000, 10_000), (200_000, 18_000), (400_000, 30_000)]


class TestInterpolation:
    """Linear interpolation on the fee scale."""

    def test_on_table_point(self):
        """Exact points return the table fee."""
        assert interpolate_fee(TABLE, 200_000) == pytest.approx(18_000)

    def test_between_points(self):
        """Halfway between two rows."""
        assert interpolate_fee(TABLE, 150_000) == pytest.approx(14_000)
        assert interpolate_fee(TABLE, 300_000) == pytest.approx(24_000)

    def test_below_table_is_clamped_and_flagged(self):
        """Small projects take the first row."""
        flags = []
        assert interpolate_fee(TABLE, 50_000, flags) == pytest.approx(10_000)
        assert len(flags) == 1
        assert flags[0].startswith("fee scale")

    def test_above_table_is_clamped(self):
        """Large projects take the last row."""
        flags = []
        assert interpolate_fee(TABLE, 1_000_000, flags) == pytest.approx(30_000)
        assert len(flags) == 1

    def test_zero_cost_is_not_flagged(self):
        """Nothing to charge is not a fallback."""
        flags = []
        interpolate_fee(TABLE, 0.0, flags)
        assert flags == []

    def test_empty_table(self):
        """No table, no fee."""
        assert interpolate_fee([], 123.0) == 0.0


class TestChargeableCosts:
    """Cost base rules."""

    def test_services_below_quarter_count_fully(self):
        """Services up to 25 % of structure count in full."""
        assert architecture_chargeable(1_000_000, 200_000) == pytest.approx(1_200_000)

    def test_excess_services_count_half(self):
        """Above 25 % only half the excess counts."""
        assert architecture_chargeable(1_000_000, 450_000) == pytest.approx(1_000_000 + 250_000 + 100_000)


class TestComputeFees:
    """Fees per discipline."""

    def test_total_is_sum_of_disciplines(self):
        """Net and gross totals add up."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        assert result.total_net == pytest.approx(sum(fee.fee_net for fee in result.disciplines))
        assert result.total_gross == pytest.approx(result.total_net * 1.19)

    def test_fee_is_completion_share_of_full_fee(self):
        """Commissioned work phases scale the full fee."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        architecture = result.for_discipline(FeeDiscipline.ARCHITECTURE)
        assert architecture.completion_share == pytest.approx(sum(WORK_PHASE_SHARES[FeeDiscipline.ARCHITECTURE]))
        assert architecture.fee_net == pytest.approx(architecture.full_fee_net * architecture.completion_share)
        assert architecture.fee_net > 0

    def test_disabled_disciplines_are_zero(self):
        """Landscape is not commissioned by default."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        landscape = result.for_discipline(FeeDiscipline.LANDSCAPE)
        assert not landscape.enabled
        assert landscape.fee_net == 0.0

    def test_only_enabled_disciplines(self):
        """A reduced commission lowers the total."""
        full = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        reduced = compute_fees(
            3_000_000,
            800_000,
            fire_protection_area=2_000.0,
            settings=FeeSettings(enabled=frozenset({FeeDiscipline.ARCHITECTURE})),
        )
        assert reduced.total_net == pytest.approx(reduced.for_discipline(FeeDiscipline.ARCHITECTURE).fee_net)
        assert reduced.total_net < full.total_net

    def test_fire_protection_flat_fee(self):
        """Fire protection uses the floor area formula."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        fire = result.for_discipline(FeeDiscipline.FIRE_PROTECTION)
        assert fire.full_fee_net == pytest.approx(fire_protection_fee(2_000.0))
        assert fire_protection_fee(2_000.0) == pytest.approx(2300.0 + 130.0 * 2_000.0 ** 0.61)

    def test_fees_grow_with_cost(self):
        """The fee scale is increasing."""
        small = compute_fees(2_000_000, 500_000, fire_protection_area=2_000.0)
        large = compute_fees(4_000_000, 1_000_000, fire_protection_area=2_000.0)
        assert large.total_net > small.total_net

    def test_share_of_construction(self):
        """Share relates gross fees to gross construction."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        assert result.share_of_construction == pytest.approx(result.total_gross / (3_800_000 * 1.19))

    def test_unknown_discipline_lookup(self):
        """Lookup of a discipline that is not present raises KeyError."""
        result = compute_fees(3_000_000, 800_000, fire_protection_area=2_000.0)
        with pytest.raises(KeyError):
            result.for_discipline("architecture")


class TestFeesInCascade:
    """Fees as part of the cost cascade."""

    def test_fee_group(self, cascade):
        """Fees report as group 700 with gross = net x VAT."""
        group = cascade.fees.as_cost_group()
        assert group.code == "700"
        assert group.net_total == pytest.approx(cascade.fees.total_net)
        assert group.gross_total == pytest.approx(cascade.fees.total_gross)

    def test_realistic_fee_share(self, cascade):
        """Fees are a plausible share of construction."""
        assert 0.08 < cascade.fees.share_of_construction < 0.35

    def test_fee_group_uses_run_tax(self, building, masses):
        """A non-default VAT rate reaches the fee group and every other group."""
        config = replace(DEFAULT_CONFIG, tax_multiplier=1.07)
        cascade = compute_cost_groups(building, masses, FeeSettings(), config)
        fee_group = cascade.all_groups()[-1]
        assert fee_group.code == "700"
        assert fee_group.gross_total == pytest.approx(cascade.fees.total_gross)
        for group in cascade.all_groups():
            assert group.gross_total == pytest.approx(group.net_total * 1.07)
