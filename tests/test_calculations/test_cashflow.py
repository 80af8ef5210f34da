"""Tests for the monthly cashflow simulator."""

from dataclasses import replace

import pytest

from buildcost.calculations.cashflow import disbursement_weights, find_break_even, simulate
from buildcost.calculations.financing import plan_financing
from buildcost.calculations.investment import FEES, LAND, aggregate
from buildcost.models import DisbursementCurve, FinancingTerms, Strategy


def _simulate(project, strategy, **overrides):
    inputs = project.inputs
    timeline = overrides.pop("timeline", inputs.timeline)
    financing = overrides.pop("financing", inputs.financing)
    revenue = overrides.pop("revenue", project.revenue)
    return simulate(project.breakdown, timeline, financing, strategy, revenue, inputs.config)


@pytest.fixture
def hold(project):
    return _simulate(project, Strategy.HOLD)


@pytest.fixture
def sell(project):
    return _simulate(project, Strategy.SELL)


class TestDisbursementWeights:
    """Spreading a cost over a window."""

    @pytest.mark.parametrize("curve", [DisbursementCurve.LINEAR, DisbursementCurve.BETA])
    @pytest.mark.parametrize("months", [1, 6, 18, 37])
    def test_weights_sum_to_one(self, curve, months):
        """Every curve distributes the full amount."""
        weights = disbursement_weights(months, curve)
        assert len(weights) == months
        assert sum(weights) == pytest.approx(1.0)
        assert all(w >= 0 for w in weights)

    def test_linear_is_flat(self):
        """Equal monthly shares."""
        assert disbursement_weights(4) == [0.25] * 4

    def test_beta_peaks_early(self):
        """Beta(2, 3) front-loads the spend."""
        weights = disbursement_weights(18, DisbursementCurve.BETA, 2.0, 3.0)
        assert weights.index(max(weights)) < 9
        assert weights[0] < max(weights)

    def test_symmetric_beta(self):
        """Beta(2, 2) is symmetric."""
        weights = disbursement_weights(12, DisbursementCurve.BETA, 2.0, 2.0)
        assert weights == pytest.approx(weights[::-1])

    def test_empty_window(self):
        """No months, no weights."""
        assert disbursement_weights(0) == []


class TestCostDisbursement:
    """Investment cost is paid out exactly once."""

    def test_costs_sum_to_total(self, hold, sell, project):
        """Cost outflows add up to the total investment."""
        assert hold.total_cost == pytest.approx(project.breakdown.total)
        assert sell.total_cost == pytest.approx(project.breakdown.total)

    def test_land_at_planning_start(self, hold, project):
        """Land is paid in the first month together with planning fees."""
        planning_month = project.breakdown.amount(FEES) * 0.6 / 6
        assert hold.get_month(0).cost == pytest.approx(project.breakdown.amount(LAND) + planning_month)

    def test_nothing_paid_after_construction(self, hold):
        """All costs fall before construction end."""
        assert all(entry.cost == 0 for entry in hold.entries[24:])

    def test_financing_costs_over_construction(self, hold):
        """Construction interest and commitment fee spread evenly."""
        paid = [entry.financing_cost for entry in hold.entries]
        assert sum(paid) == pytest.approx(hold.plan.financing_cost)
        assert all(value == 0 for value in paid[:6] + paid[24:])
        assert paid[6] == pytest.approx(paid[23])

    def test_empty_construction_window(self, project):
        """Zero-length construction pays the pool at its start month."""
        timeline = replace(project.inputs.timeline, construction_start=6, construction_end=6)
        series = _simulate(project, Strategy.SELL, timeline=timeline)
        assert series.total_cost == pytest.approx(project.breakdown.total)
        assert series.get_month(6).cost > series.get_month(5).cost


class TestFunding:
    """Equity first, then loan draws."""

    def test_draws_equal_loan(self, hold):
        """The full loan is drawn."""
        assert sum(entry.loan_draw for entry in hold.entries) == pytest.approx(hold.plan.loan_amount)

    def test_equity_before_loan(self, hold):
        """No draw before the equity is used up."""
        funded = 0.0
        for entry in hold.entries:
            if entry.loan_draw > 0:
                assert funded + entry.cost >= hold.plan.equity - 1e-6
            funded += entry.cost

    def test_unfinanced_never_draws(self, unfinanced_project):
        """Without a loan there is nothing to draw or repay."""
        series = _simulate(unfinanced_project, Strategy.HOLD)
        assert all(entry.loan_draw == 0 and entry.debt_service == 0 for entry in series.entries)
        assert series.get_month(5).cumulative < 0

    def test_balance_tracks_draws_and_principal(self, hold):
        """Loan balance is draws minus principal."""
        balance = 0.0
        for entry in hold.entries:
            balance += entry.loan_draw - entry.principal
            assert entry.loan_balance == pytest.approx(balance)
            assert entry.loan_balance >= -1e-6


class TestHold:
    """Rent ramp-up and annuity."""

    def test_horizon(self, hold):
        """Months 0 to the end of the holding period."""
        assert hold.horizon == 120
        assert hold.get_month(120).month == 120

    def test_occupancy_ramp(self, hold):
        """Linear ramp over marketing."""
        assert hold.get_month(17).occupancy == 0.0
        assert hold.get_month(24).occupancy == pytest.approx(0.5)
        assert hold.get_month(30).occupancy == 1.0

    def test_stabilized_rent(self, hold, project):
        """Full rent after marketing, escalated per full year."""
        rent = project.revenue.monthly_gross_rent
        assert hold.get_month(30).rent == pytest.approx(rent)
        assert hold.get_month(41).rent == pytest.approx(rent)
        assert hold.get_month(42).rent == pytest.approx(rent * (1 + project.revenue.rent_escalation))

    def test_no_debt_service_during_construction(self, hold):
        """Interest during construction is in the financing cost."""
        assert all(entry.debt_service == 0 for entry in hold.entries[:24])

    def test_annuity_after_construction(self, hold):
        """Interest plus principal equals the monthly payment."""
        entry = hold.get_month(30)
        assert entry.debt_service == pytest.approx(hold.plan.monthly_payment)
        assert entry.interest == pytest.approx(hold.get_month(29).loan_balance * hold.plan.monthly_rate)

    def test_operating_cost_share(self, hold, project):
        """Operating costs are a share of gross rent."""
        entry = hold.get_month(50)
        assert entry.operating_cost == pytest.approx(entry.rent * project.revenue.operating_cost_ratio)

    def test_no_sale_proceeds(self, hold):
        """Hold never sells within the monthly series."""
        assert hold.total_sale_proceeds == 0.0


class TestSell:
    """Sale proceeds and loan payoff."""

    def test_horizon(self, sell):
        """Ends with marketing."""
        assert sell.horizon == 30

    def test_proceeds_over_marketing(self, sell, project):
        """All proceeds arrive during marketing."""
        assert sell.total_sale_proceeds == pytest.approx(project.revenue.sale_proceeds)
        assert all(entry.sale_proceeds == 0 for entry in sell.entries[:18])

    def test_loan_repaid(self, sell):
        """The loan is gone by the last month."""
        assert sell.loan_balances[-1] == pytest.approx(0.0, abs=1e-6)
        assert sum(entry.principal for entry in sell.entries) == pytest.approx(sell.plan.loan_amount)

    def test_no_rent(self, sell):
        """Units are sold, not let."""
        assert all(entry.rent == 0 for entry in sell.entries)

    def test_final_balance_is_profit(self, sell, project):
        """Loan in and out cancel; what remains is proceeds minus all costs."""
        interest = sum(entry.interest for entry in sell.entries)
        expected = project.revenue.sale_proceeds - project.breakdown.total - sell.plan.financing_cost - interest
        assert sell.cumulative[-1] == pytest.approx(expected)


class TestSeriesInvariants:
    """Cumulative balance, break-even and lookup."""

    @pytest.mark.parametrize("strategy", [Strategy.HOLD, Strategy.SELL])
    def test_cumulative_is_running_sum(self, project, strategy):
        """Each cumulative value is the sum of nets so far."""
        series = _simulate(project, strategy)
        running = 0.0
        for entry in series.entries:
            running += entry.net
            assert entry.cumulative == pytest.approx(running)

    @pytest.mark.parametrize("strategy", [Strategy.HOLD, Strategy.SELL])
    def test_break_even_consistent(self, project, strategy):
        """Break-even is the first recovery after a negative balance."""
        series = _simulate(project, strategy)
        month = series.break_even_month
        if month is not None:
            assert series.get_month(month).cumulative >= 0
            assert series.get_month(month - 1).cumulative < 0
            assert month > project.inputs.timeline.construction_start

    def test_peak_capital(self, hold):
        """Most negative cumulative balance."""
        assert hold.peak_capital == pytest.approx(min(hold.cumulative))
        assert hold.peak_capital < 0

    def test_month_out_of_range(self, hold):
        """Lookups outside the series raise IndexError."""
        with pytest.raises(IndexError):
            hold.get_month(121)
        with pytest.raises(IndexError):
            hold.get_month(-1)

    def test_deterministic(self, project):
        """Identical inputs give identical series."""
        assert _simulate(project, Strategy.HOLD) == _simulate(project, Strategy.HOLD)

    def test_no_revenue(self, project):
        """Without revenue the balance never recovers."""
        series = simulate(project.breakdown, project.inputs.timeline, FinancingTerms(enabled=False), Strategy.HOLD)
        assert series.break_even_month is None
        assert series.cumulative[-1] == pytest.approx(-project.breakdown.total)

    def test_find_break_even_requires_prior_deficit(self, hold):
        """A balance that starts at zero is not a break-even."""
        assert find_break_even(list(hold.entries[:1]), 0) is None

    def test_plan_matches_financing(self, hold, project):
        """The series carries the plan for its total."""
        expected = plan_financing(project.breakdown.total, project.inputs.financing, project.inputs.timeline)
        assert hold.plan == expected


def _subsidized(project, remaining_total):
    inputs = project.inputs
    settings = replace(
        inputs.investment,
        subsidy_total=project.breakdown.total - remaining_total,
        subsidy_per_m2=0.0,
    )
    return aggregate(project.cascade, project.masses, inputs.land, settings)


class TestLargeSubsidy:
    """A subsidy above the construction share never produces negative costs."""

    def test_subsidy_beyond_construction_pool(self, project):
        """Land is paid in full, planning fees carry the rest."""
        land = project.breakdown.amount(LAND)
        breakdown = _subsidized(project, land + 50_000.0)
        series = simulate(breakdown, project.inputs.timeline, project.inputs.financing, Strategy.SELL)
        assert all(entry.cost >= 0 for entry in series.entries)
        assert series.total_cost == pytest.approx(land + 50_000.0)
        assert series.get_month(0).cost == pytest.approx(land + 50_000.0 / 6)
        assert all(entry.cost == 0 for entry in series.entries[6:])

    def test_subsidy_beyond_planning_fees(self, project):
        """Below the land price only a reduced land payment remains."""
        breakdown = _subsidized(project, 100_000.0)
        series = simulate(breakdown, project.inputs.timeline, project.inputs.financing, Strategy.HOLD)
        assert series.get_month(0).cost == pytest.approx(100_000.0)
        assert series.total_cost == pytest.approx(100_000.0)
        assert all(entry.cost >= 0 for entry in series.entries)
