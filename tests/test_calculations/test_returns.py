"""Tests for hold and sell return metrics."""

import pytest

from buildcost.calculations.financing import remaining_balance
from buildcost.calculations.irr import npv
from buildcost.calculations.returns import annual_debt_service, exit_value, hold_cashflows
from buildcost.models import ExitAssumptions, Strategy
from buildcost.scenarios import run_strategy


class TestExitValue:
    """Hold exit value."""

    def test_appreciation(self):
        """Cost compounded at the appreciation rate, less selling costs."""
        value = exit_value(1_000_000, 10, ExitAssumptions(appreciation_rate=0.02, selling_cost_rate=0.05))
        assert value == pytest.approx(1_000_000 * 1.02 ** 10 * 0.95)

    def test_residual_share_overrides(self):
        """A residual share replaces appreciation."""
        value = exit_value(1_000_000, 10, ExitAssumptions(residual_value_share=1.3, selling_cost_rate=0.0))
        assert value == pytest.approx(1_300_000)


class TestHoldCashflows:
    """Annual vectors for the hold IRRs."""

    def test_unlevered_vector(self, project):
        """Full cost at year 0, net rent after, exit value in the last year."""
        plan = run_strategy(project, Strategy.HOLD).cashflow.plan
        levered, unlevered, net_exit = hold_cashflows(project.breakdown, plan, project.revenue, 10)
        assert len(unlevered) == 11
        assert unlevered[0] == pytest.approx(-project.breakdown.total)
        assert unlevered[1] == pytest.approx(project.revenue.annual_net_rent)
        assert unlevered[-1] == pytest.approx(project.revenue.annual_net_rent + net_exit)

    def test_levered_vector(self, project):
        """Equity and financing cost at year 0, debt service after, loan repaid at exit."""
        plan = run_strategy(project, Strategy.HOLD).cashflow.plan
        levered, unlevered, net_exit = hold_cashflows(project.breakdown, plan, project.revenue, 10)
        service = annual_debt_service(plan, 10)
        assert levered[0] == pytest.approx(-(plan.equity + plan.financing_cost))
        assert levered[1] == pytest.approx(unlevered[1] - service[0])
        assert levered[-1] == pytest.approx(
            project.revenue.annual_net_rent - service[-1] + net_exit - remaining_balance(plan, 120)
        )

    def test_annual_debt_service(self, project):
        """Twelve annuity payments per year while the loan runs."""
        plan = run_strategy(project, Strategy.HOLD).cashflow.plan
        service = annual_debt_service(plan, 3)
        assert service == pytest.approx([plan.annual_debt_service] * 3)


class TestFinancedHold:
    """Hold returns with a loan."""

    @pytest.fixture
    def returns(self, project):
        return run_strategy(project, Strategy.HOLD).returns

    def test_strategy_tag(self, returns):
        """Sell-only metrics stay empty."""
        assert returns.strategy == Strategy.HOLD
        assert returns.margin is None
        assert returns.annualized_irr is None

    def test_net_initial_yield(self, returns, project):
        """Stabilized net rent over total cost."""
        assert returns.net_initial_yield == pytest.approx(project.revenue.annual_net_rent / project.breakdown.total)

    def test_dscr_and_cash_on_cash(self, returns, project):
        """Debt coverage and cash yield on equity."""
        plan = run_strategy(project, Strategy.HOLD).cashflow.plan
        noi = project.revenue.annual_net_rent
        assert returns.dscr == pytest.approx(noi / plan.annual_debt_service)
        assert returns.cash_on_cash == pytest.approx((noi - plan.annual_debt_service) / plan.equity)

    def test_irrs_zero_npv(self, returns):
        """Both IRRs solve their own vectors."""
        for rate, flows in (
            (returns.levered_irr, returns.levered_cashflows),
            (returns.unlevered_irr, returns.unlevered_cashflows),
        ):
            assert rate is not None
            assert npv(rate, flows) == pytest.approx(0.0, abs=1e-5 * abs(flows[0]))

    def test_profit_and_multiple(self, returns):
        """Profit is the sum of levered flows; multiple is distributions over outlay."""
        flows = returns.levered_cashflows
        assert returns.total_profit == pytest.approx(sum(flows))
        assert returns.equity_multiple == pytest.approx(sum(flows[1:]) / -flows[0])

    def test_rate_sensitivity(self, project):
        """Four rate scenarios for a financed hold."""
        result = run_strategy(project, Strategy.HOLD)
        assert len(result.rate_sensitivity) == 4
        assert result.rate_sensitivity[1].dscr == pytest.approx(result.returns.dscr)


class TestUnfinancedHold:
    """Without financing levered equals unlevered."""

    def test_levered_equals_unlevered(self, unfinanced_project):
        """Same vector, same IRR."""
        returns = run_strategy(unfinanced_project, Strategy.HOLD).returns
        assert returns.levered_cashflows == returns.unlevered_cashflows
        assert returns.levered_irr == pytest.approx(returns.unlevered_irr)

    def test_debt_metrics_absent(self, unfinanced_project):
        """No DSCR or cash-on-cash without debt."""
        result = run_strategy(unfinanced_project, Strategy.HOLD)
        assert result.returns.dscr is None
        assert result.returns.cash_on_cash is None
        assert result.rate_sensitivity == []


class TestSell:
    """Develop-and-sell returns."""

    def test_unfinanced_margin(self, unfinanced_project):
        """Margin on total cost, annualized over the project years."""
        result = run_strategy(unfinanced_project, Strategy.SELL)
        returns = result.returns
        total = unfinanced_project.breakdown.total
        proceeds = unfinanced_project.revenue.sale_proceeds
        assert returns.total_cost == pytest.approx(total)
        assert returns.margin == pytest.approx((proceeds - total) / total)
        assert returns.return_on_equity is None
        assert returns.annualized_irr == pytest.approx((1 + returns.margin) ** (12 / 30) - 1)

    def test_financed_return_on_equity(self, project):
        """Financing costs and interest raise cost; profit is measured on equity."""
        result = run_strategy(project, Strategy.SELL)
        returns = result.returns
        plan = result.cashflow.plan
        assert returns.total_cost > project.breakdown.total + plan.financing_cost
        assert returns.return_on_equity == pytest.approx(returns.total_profit / plan.equity)
        assert returns.annualized_irr == pytest.approx((1 + returns.return_on_equity) ** (12 / 30) - 1)

    def test_profit_matches_cashflow(self, project):
        """Total profit equals the final cumulative balance."""
        result = run_strategy(project, Strategy.SELL)
        assert result.returns.total_profit == pytest.approx(result.cashflow.cumulative[-1])

    def test_hold_metrics_absent(self, project):
        """Hold-only metrics stay empty."""
        returns = run_strategy(project, Strategy.SELL).returns
        assert returns.levered_irr is None
        assert returns.levered_cashflows == ()
        assert run_strategy(project, Strategy.SELL).rate_sensitivity == []
