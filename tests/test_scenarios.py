"""Tests for the scenario composer."""

from dataclasses import replace

import pytest

from buildcost.models import ConstructionMethod, ProjectInputs, SensitivityCase, Strategy
from buildcost.scenarios import (
    compare_variants,
    format_comparison_table,
    run_both,
    run_project,
    run_strategy,
    sensitivity_grid,
)


class TestRunProject:
    """Project stage shared by every strategy."""

    def test_reference_project(self, project):
        """Masses and costs flow through."""
        assert project.masses.gross_floor_area == pytest.approx(1875.0)
        assert project.breakdown.total > project.cascade.construction_gross
        assert project.revenue.monthly_gross_rent == pytest.approx(16.0 * 1485.0)

    def test_inputs_are_clamped(self, reference_inputs):
        """Out-of-range inputs are coerced before pricing."""
        bad = replace(reference_inputs, building=replace(reference_inputs.building, window_ratio=1.7))
        assert run_project(bad).inputs.building.window_ratio == 1.0

    def test_default_inputs(self):
        """Defaults describe a complete project."""
        project = run_project(ProjectInputs())
        assert project.breakdown.total > 0
        assert project.revenue.monthly_gross_rent > 0


class TestStrategies:
    """Hold and sell from one project."""

    def test_run_both(self, project):
        """One result per strategy."""
        results = run_both(project)
        assert set(results) == {Strategy.HOLD, Strategy.SELL}
        assert results[Strategy.HOLD].returns.strategy == Strategy.HOLD
        assert results[Strategy.SELL].returns.strategy == Strategy.SELL

    def test_base_case_uses_project_totals(self, project):
        """No scaling in the base case."""
        result = run_strategy(project, Strategy.SELL)
        assert result.breakdown.total == project.breakdown.total
        assert result.revenue == project.revenue


class TestSensitivity:
    """Cost and price deltas rescale finished totals."""

    def test_grid_order(self, project):
        """Cost-major order over the default sweep."""
        grid = sensitivity_grid(project, Strategy.SELL)
        assert len(grid) == 9
        cases = [(r.case.cost_pct, r.case.price_pct) for r in grid]
        assert cases[:3] == [(-10.0, -10.0), (-10.0, 0.0), (-10.0, 10.0)]

    def test_cost_scaling_is_exact(self, project):
        """+10 % cost is exactly 1.1 times the total."""
        result = run_strategy(project, Strategy.HOLD, SensitivityCase(cost_pct=10))
        assert result.breakdown.total == project.breakdown.total * 1.1
        assert result.cashflow.total_cost == pytest.approx(project.breakdown.total * 1.1)

    def test_price_scaling(self, project):
        """-10 % price scales rent and proceeds."""
        result = run_strategy(project, Strategy.SELL, SensitivityCase(price_pct=-10))
        assert result.cashflow.total_sale_proceeds == pytest.approx(project.revenue.sale_proceeds * 0.9)

    def test_unfinanced_sell_profit_is_linear(self, unfinanced_project):
        """Profit moves by exactly the scaled cost and proceeds."""
        base = run_strategy(unfinanced_project, Strategy.SELL).returns.total_profit
        shifted = run_strategy(unfinanced_project, Strategy.SELL, SensitivityCase(cost_pct=10, price_pct=10)).returns
        total = unfinanced_project.breakdown.total
        proceeds = unfinanced_project.revenue.sale_proceeds
        assert shifted.total_profit == pytest.approx(base + 0.1 * proceeds - 0.1 * total)

    def test_higher_cost_lowers_margin(self, project):
        """Margin falls as cost rises."""
        margins = [
            run_strategy(project, Strategy.SELL, SensitivityCase(cost_pct=pct)).returns.margin
            for pct in (-10, 0, 10)
        ]
        assert margins == sorted(margins, reverse=True)

    def test_case_label(self):
        """Readable label for reports."""
        assert SensitivityCase(10, -5).label == "cost +10% / price -5%"


class TestCompareVariants:
    """Named variants side by side."""

    @pytest.fixture
    def comparison(self, reference_inputs):
        concrete = replace(
            reference_inputs,
            building=replace(reference_inputs.building, construction_method=ConstructionMethod.REINFORCED_CONCRETE),
        )
        return compare_variants({"masonry": reference_inputs, "concrete": concrete}, Strategy.SELL)

    def test_all_variants_run(self, comparison):
        """One project and result per variant."""
        assert set(comparison.results) == {"masonry", "concrete"}
        assert set(comparison.projects) == {"masonry", "concrete"}

    def test_best_per_metric(self, comparison):
        """The cheaper variant wins on cost and margin."""
        assert comparison.best["cost_per_m2"] == "masonry"
        assert comparison.best["margin"] == "masonry"

    def test_table(self, comparison):
        """The text table names every variant and metric."""
        table = format_comparison_table(comparison)
        assert "masonry" in table
        assert "concrete" in table
        assert "Margin" in table
        assert "Best cost_per_m2" in table
