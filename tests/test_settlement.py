"""Tests for round figures and period settlement."""

import pytest
from budget_game.categories import CategoryId
from budget_game.settlement import period_income, round_figures, settle_period
from budget_game.state import Allocation, GameState, RoundState, Stage


def _state(**kw) -> GameState:
    base = dict(
        stage=Stage.SUMMARY,
        monthly_salary=3750.0,
        biweekly_income=1875.0,
        housing_cost=1200.0,
        utility_cost=200.0,
        tax_rate=25.0,
    )
    base.update(kw)
    return GameState(**base)


class TestRoundFigures:
    def test_round_1_discretionary(self):
        f = round_figures(_state(stage=Stage.BUDGET_ALLOCATION))
        assert f.fixed_costs == pytest.approx(700)
        assert f.period_income == pytest.approx(1875)
        assert f.discretionary_income == pytest.approx(1175)
        assert f.remaining_to_allocate == pytest.approx(1175)
        assert f.fixed_cost_shortfall == 0

    def test_round_1_ignores_balance(self):
        assert period_income(_state(current_balance=400)) == 1875

    def test_carry_over_after_round_1(self):
        assert period_income(_state(iteration=2, current_balance=400)) == 2275

    def test_cost_of_debt_reduces_discretionary(self):
        f = round_figures(_state(iteration=3, cost_of_debt=10))
        assert f.discretionary_income == pytest.approx(1165)

    def test_fixed_cost_shortfall(self):
        f = round_figures(_state(biweekly_income=500))
        assert f.discretionary_income == pytest.approx(-200)
        assert f.fixed_cost_shortfall == pytest.approx(200)

    def test_remaining_after_allocation(self):
        f = round_figures(_state(allocated_amount=1175))
        assert f.remaining_to_allocate == pytest.approx(0)


class TestSettlePeriod:
    def test_positive_balance_carries_over(self):
        # 1875 - 700 - 1000 = 175, round 1 event is home repair (-120)
        s = _state(
            allocations={CategoryId.GROCERIES: Allocation(1000, "🛒")},
            allocated_amount=1000,
        )
        r = settle_period(s)
        assert r.event.adjustment == -120
        assert r.state.current_balance == pytest.approx(55)
        assert r.state.debt == 0
        assert r.state.savings == 0

    def test_advances_and_clears_round(self):
        s = _state(
            current_category_index=9,
            allocations={CategoryId.GROCERIES: Allocation(100, "🛒")},
            allocated_amount=100,
        )
        r = settle_period(s)
        assert r.state.iteration == 2
        assert r.state.current_category_index == 0
        assert r.state.allocations == {}
        assert r.state.allocated_amount == 0
        assert r.state.stage == Stage.BUDGET_ALLOCATION

    def test_shortfall_drains_savings_then_debt(self):
        # 1000 - 1150 - 50 (utility spike for index 1) = -200
        s = _state(
            biweekly_income=1000,
            housing_cost=0,
            utility_cost=0,
            savings=150,
            allocations={CategoryId.GROCERIES: Allocation(1150, "🛒")},
            allocated_amount=1150,
        )
        r = settle_period(s)
        assert r.balance_before_cover == pytest.approx(-200)
        assert r.state.savings == 0
        assert r.state.debt == pytest.approx(50)
        assert r.state.current_balance == 0
        assert r.savings_used == pytest.approx(150)
        assert r.debt_added == pytest.approx(50)

    def test_shortfall_covered_by_savings(self):
        s = _state(
            biweekly_income=1000, housing_cost=0, utility_cost=0, savings=500,
            allocations={CategoryId.GROCERIES: Allocation(1150, "🛒")},
            allocated_amount=1150,
        )
        r = settle_period(s)
        assert r.state.savings == pytest.approx(300)
        assert r.state.debt == 0
        assert r.state.current_balance == 0

    def test_monthly_interest_on_even_round(self):
        s = _state(iteration=2, debt=1000)
        r = settle_period(s)
        assert r.interest_charged == pytest.approx(12.5)
        assert r.state.debt == pytest.approx(1012.5)
        assert r.state.cost_of_debt == pytest.approx(5.84, abs=0.01)

    def test_no_interest_on_odd_round(self):
        s = _state(iteration=3, debt=1000)
        r = settle_period(s)
        assert r.interest_charged == 0
        assert r.state.debt == 1000
        assert r.state.cost_of_debt == pytest.approx(1000 * 0.15 / 26)

    def test_repayment_not_applied_twice(self):
        # Debt was already reduced from 600 to 500 when the category was allocated
        s = _state(
            debt=500,
            allocations={CategoryId.DEBT_REPAYMENT: Allocation(100, "💳")},
            allocated_amount=100,
        )
        r = settle_period(s)
        assert r.debt_repayment == 100
        assert r.state.debt == 500

    def test_reserve_funded_allocations_not_charged_twice(self):
        # 300 of the 1300 was drawn as debt during allocation
        s = _state(
            biweekly_income=1000, housing_cost=0, utility_cost=0, debt=300,
            allocations={
                CategoryId.GROCERIES: Allocation(1000, "🛒"),
                CategoryId.DINING_OUT: Allocation(300, "🍽️"),
            },
            allocated_amount=1300,
        )
        r = settle_period(s, RoundState(debt_used=300))
        # only the utility spike (-50) is left to finance
        assert r.state.debt == pytest.approx(350)
        assert r.state.current_balance == 0

    def test_history_appended(self):
        s = _state(allocations={CategoryId.GROCERIES: Allocation(100, "🛒")}, allocated_amount=100)
        r = settle_period(s)
        assert len(r.state.iteration_history) == 1
        rec = r.state.iteration_history[0]
        assert rec.iteration == 1
        assert rec.allocations[CategoryId.GROCERIES].amount == 100
        assert rec.random_event == r.event
        assert rec.balance == r.state.current_balance

    def test_last_round_ends_game(self):
        r = settle_period(_state(iteration=12))
        assert r.state.iteration == 13
        assert r.state.stage == Stage.GAME_OVER

    def test_input_state_unchanged(self):
        s = _state(iteration=2, debt=1000)
        settle_period(s)
        assert s.debt == 1000
        assert s.iteration == 2
