"""Game state store and non-interactive plan runner."""

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from budget_game.advisor import AdviceRequest, LocationCostEstimate
from budget_game.allocation import (
    AllocationMode,
    allocation_capacity,
    apply_allocation,
    resolve_allocation_mode,
)
from budget_game.categories import CATEGORIES, CATEGORY_COUNT, Category, CategoryId, category_at
from budget_game.params import DEFAULT_PARAMS, GameParams, net_monthly_salary
from budget_game.settlement import RoundFigures, SettlementResult, round_figures, settle_period
from budget_game.state import GameState, RoundState, Stage

logger = logging.getLogger(__name__)

MAX_TAX_RATE = 100.0


def validate_salary(gross_monthly: float) -> None:
    """Raises ValueError unless the salary is a positive amount."""
    if not gross_monthly > 0:
        raise ValueError(f"Gross monthly salary must be positive (got {gross_monthly})")


def validate_location(location: str) -> None:
    if not location or not location.strip():
        raise ValueError("Location must not be empty")


def validate_costs(housing_cost: float, utility_cost: float, tax_rate: float) -> None:
    if housing_cost < 0:
        raise ValueError(f"Housing cost must not be negative (got {housing_cost})")
    if utility_cost < 0:
        raise ValueError(f"Utility cost must not be negative (got {utility_cost})")
    if tax_rate < 0 or tax_rate > MAX_TAX_RATE:
        raise ValueError(f"Tax rate must be between 0 and {MAX_TAX_RATE:.0f}% (got {tax_rate})")


@dataclass(frozen=True)
class AllocationPrompt:
    """What the shell shows for the category about to be allocated."""

    category: Category
    mode: AllocationMode
    capacity: float
    figures: RoundFigures


class BudgetGame:
    """Owns the single ``GameState`` and the round-local ``RoundState``.

    Every method validates first and replaces both records only on success.
    """

    def __init__(self, params: GameParams = DEFAULT_PARAMS):
        self.params = params
        self.state = GameState()
        self.round = RoundState()
        self.advice: str = ""

    def _require_stage(self, *stages: Stage) -> None:
        if self.state.stage not in stages:
            expected = ", ".join(s.value for s in stages)
            raise RuntimeError(f"Not allowed in stage {self.state.stage.value} (expected {expected})")

    def reset(self) -> None:
        self.state = GameState()
        self.round = RoundState()
        self.advice = ""

    # Setup stages

    def submit_salary(self, gross_monthly: float) -> None:
        self._require_stage(Stage.SALARY)
        validate_salary(gross_monthly)
        self.state = dataclasses.replace(
            self.state, gross_monthly_salary=float(gross_monthly), stage=Stage.LOCATION,
        )

    def submit_location(self, location: str, estimate: LocationCostEstimate) -> None:
        """Store the location with its cost estimate; costs stay editable."""
        self._require_stage(Stage.LOCATION)
        validate_location(location)
        validate_costs(estimate.housing_cost, estimate.utility_cost, estimate.tax_rate)
        self.state = dataclasses.replace(
            self.state,
            location=location.strip(),
            housing_cost=estimate.housing_cost,
            utility_cost=estimate.utility_cost,
            tax_rate=estimate.tax_rate,
        )

    def edit_costs(
        self,
        housing_cost: float | None = None,
        utility_cost: float | None = None,
        tax_rate: float | None = None,
    ) -> None:
        self._require_stage(Stage.LOCATION)
        housing = self.state.housing_cost if housing_cost is None else housing_cost
        utility = self.state.utility_cost if utility_cost is None else utility_cost
        tax = self.state.tax_rate if tax_rate is None else tax_rate
        validate_costs(housing, utility, tax)
        self.state = dataclasses.replace(
            self.state, housing_cost=housing, utility_cost=utility, tax_rate=tax,
        )

    def start_budget(self) -> None:
        """Lock in the costs and open round 1."""
        self._require_stage(Stage.LOCATION)
        validate_location(self.state.location)
        monthly = net_monthly_salary(self.state.gross_monthly_salary, self.state.tax_rate)
        self.state = dataclasses.replace(
            self.state,
            monthly_salary=monthly,
            biweekly_income=monthly / 2,
            current_balance=0.0,
            stage=Stage.BUDGET_ALLOCATION,
        )
        self.round = RoundState()
        logger.debug("budget started: net monthly %.2f, bi-weekly %.2f", monthly, monthly / 2)

    # Allocation phase

    def round_figures(self) -> RoundFigures:
        return round_figures(self.state)

    def current_prompt(self) -> AllocationPrompt:
        self._require_stage(Stage.BUDGET_ALLOCATION)
        figures = round_figures(self.state)
        mode = resolve_allocation_mode(
            self.state, figures.remaining_to_allocate,
            self.round.debt_used, self.round.savings_exhausted, self.params,
        )
        capacity = allocation_capacity(
            self.state, mode, figures.remaining_to_allocate, self.round, self.params,
        )
        return AllocationPrompt(
            category=category_at(self.state.current_category_index),
            mode=mode,
            capacity=capacity,
            figures=figures,
        )

    def allocate(self, amount: float) -> tuple[AllocationMode, float]:
        """Allocate to the current category, clamped to what its mode allows.

        Returns the funding mode and the amount actually recorded.
        """
        prompt = self.current_prompt()
        clamped = min(max(0.0, amount), prompt.capacity)
        state, round_state = apply_allocation(
            self.state, self.round, prompt.mode, clamped, prompt.category,
        )
        next_index = state.current_category_index + 1
        stage = Stage.SUMMARY if next_index >= CATEGORY_COUNT else Stage.BUDGET_ALLOCATION
        self.state = dataclasses.replace(state, current_category_index=next_index, stage=stage)
        self.round = round_state
        return prompt.mode, clamped

    # Summary and settlement

    def preview_settlement(self) -> SettlementResult:
        self._require_stage(Stage.SUMMARY)
        return settle_period(self.state, self.round, self.params)

    def next_period(self) -> SettlementResult:
        self._require_stage(Stage.SUMMARY)
        result = settle_period(self.state, self.round, self.params)
        self.state = result.state
        self.round = RoundState()
        self.advice = ""
        return result

    # Advice

    def advice_request(self, is_game_over: bool | None = None) -> AdviceRequest:
        """Payload for the advice collaborator.

        At game over the allocations of the last settled round are reported.
        """
        if is_game_over is None:
            is_game_over = self.state.stage == Stage.GAME_OVER
        allocations = self.state.allocations
        iteration = self.state.iteration
        if is_game_over and self.state.iteration_history:
            last = self.state.iteration_history[-1]
            allocations = last.allocations
            iteration = last.iteration
        return AdviceRequest(
            location=self.state.location,
            monthly_salary=self.state.monthly_salary,
            allocations=dict(allocations),
            iteration=iteration,
            is_game_over=is_game_over,
        )

    def merge_advice(self, text: str) -> None:
        self._require_stage(Stage.SUMMARY, Stage.GAME_OVER)
        self.advice = text


def plan_amount(plan: Mapping[CategoryId, float], category: Category, biweekly_income: float) -> float:
    """Requested amount for a category: its plan fraction of bi-weekly income."""
    return max(0.0, plan.get(category.id, 0.0)) * biweekly_income


def simulate_budget(
    gross_salary: float,
    location: str,
    costs: LocationCostEstimate,
    plan: Mapping[CategoryId, float],
    params: GameParams = DEFAULT_PARAMS,
) -> dict:
    """Play every round with a fixed spending plan and summarize the outcome."""
    game = BudgetGame(params)
    game.submit_salary(gross_salary)
    game.submit_location(location, costs)
    game.start_budget()

    reserve_rounds = 0
    total_interest = 0.0
    total_events = 0.0
    while game.state.stage != Stage.GAME_OVER:
        for category in CATEGORIES:
            game.allocate(plan_amount(plan, category, game.state.biweekly_income))
        if game.round.debt_used > 0 or game.round.savings_drawn > 0:
            reserve_rounds += 1
        result = game.next_period()
        total_interest += result.interest_charged
        total_events += result.event.adjustment

    final = game.state
    return {
        "location": final.location,
        "monthly_salary": final.monthly_salary,
        "biweekly_income": final.biweekly_income,
        "final_balance": final.current_balance,
        "final_savings": final.savings,
        "final_debt": final.debt,
        "net_worth": final.current_balance + final.savings - final.debt,
        "total_interest": total_interest,
        "total_event_impact": total_events,
        "reserve_rounds": reserve_rounds,
        "history": list(final.iteration_history),
    }
