"""Round figures and end-of-round settlement."""

import dataclasses
import logging
from dataclasses import dataclass

from budget_game.categories import CategoryId
from budget_game.events import RandomEvent, generate_random_event
from budget_game.params import (
    DEFAULT_PARAMS,
    GameParams,
    biweekly_fixed_costs,
    cost_of_debt,
    monthly_interest,
)
from budget_game.state import GameState, IterationRecord, RoundState, Stage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundFigures:
    """Money available to the round in progress."""

    fixed_costs: float
    period_income: float
    discretionary_income: float
    remaining_to_allocate: float

    @property
    def fixed_cost_shortfall(self) -> float:
        """Amount by which fixed costs and debt interest exceed period income."""
        return max(0.0, -self.discretionary_income)


@dataclass(frozen=True)
class SettlementResult:
    state: GameState
    event: RandomEvent
    balance_before_cover: float  # after the event, before savings/debt absorb a shortfall
    savings_used: float
    debt_added: float
    interest_charged: float
    debt_repayment: float  # already applied at allocation time; reported only


def period_income(state: GameState) -> float:
    """First round starts from income alone; later rounds add the carry-over balance."""
    if state.iteration == 1:
        return state.biweekly_income
    return state.current_balance + state.biweekly_income


def round_figures(state: GameState) -> RoundFigures:
    fixed = biweekly_fixed_costs(state.housing_cost, state.utility_cost)
    income = period_income(state)
    discretionary = income - fixed - state.cost_of_debt
    return RoundFigures(
        fixed_costs=fixed,
        period_income=income,
        discretionary_income=discretionary,
        remaining_to_allocate=discretionary - state.allocated_amount,
    )


def _cover_shortfall(balance: float, savings: float, debt: float) -> tuple[float, float, float, float, float]:
    """Absorb a negative balance: savings first, then debt. Balance ends at zero."""
    if balance >= 0:
        return balance, savings, debt, 0.0, 0.0
    shortfall = -balance
    if savings >= shortfall:
        return 0.0, savings - shortfall, debt, shortfall, 0.0
    remaining = shortfall - savings
    return 0.0, 0.0, debt + remaining, savings, remaining


def settle_period(
    state: GameState,
    round_state: RoundState | None = None,
    params: GameParams = DEFAULT_PARAMS,
) -> SettlementResult:
    """Close the round: apply the event, cover any shortfall, accrue interest, advance.

    Allocations already funded from savings or debt during the round (tracked
    in ``round_state``) are not charged against the balance a second time, so
    every shortfall is financed exactly once.
    """
    if round_state is None:
        round_state = RoundState()

    figures = round_figures(state)
    reserve_draws = round_state.savings_drawn + round_state.debt_used
    balance = figures.period_income - figures.fixed_costs - state.allocated_amount + reserve_draws

    event = generate_random_event(state.biweekly_income, state.iteration)
    balance += event.adjustment
    balance_before_cover = balance

    # Repayment was taken off debt when the category was allocated
    debt_repayment = state.allocation_amount(CategoryId.DEBT_REPAYMENT)

    balance, savings, debt, savings_used, debt_added = _cover_shortfall(
        balance, max(0.0, state.savings), max(0.0, state.debt),
    )

    interest = 0.0
    if state.iteration % 2 == 0 and debt > 0:
        interest = monthly_interest(debt, params)
        debt += interest

    next_iteration = state.iteration + 1
    stage = Stage.GAME_OVER if next_iteration > params.total_iterations else Stage.BUDGET_ALLOCATION

    record = IterationRecord(
        iteration=state.iteration,
        balance=balance,
        allocations=dict(state.allocations),
        debt=debt,
        savings=savings,
        random_event=event,
        interest_charged=interest,
        reserve_draws=reserve_draws,
    )
    new_state = dataclasses.replace(
        state,
        current_balance=balance,
        savings=savings,
        debt=debt,
        cost_of_debt=cost_of_debt(debt, params),
        iteration=next_iteration,
        current_category_index=0,
        allocations={},
        allocated_amount=0.0,
        stage=stage,
        iteration_history=state.iteration_history + (record,),
    )
    logger.debug(
        "settled round %d: balance=%.2f savings=%.2f debt=%.2f event=%+.0f interest=%.2f",
        state.iteration, balance, savings, debt, event.adjustment, interest,
    )
    return SettlementResult(
        state=new_state,
        event=event,
        balance_before_cover=balance_before_cover,
        savings_used=savings_used,
        debt_added=debt_added,
        interest_charged=interest,
        debt_repayment=debt_repayment,
    )
