"""Allocation mode resolution and the three allocation appliers."""

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum

from budget_game.categories import Category, CategoryId
from budget_game.params import DEFAULT_PARAMS, GameParams
from budget_game.state import Allocation, GameState, RoundState

logger = logging.getLogger(__name__)


class AllocationMode(str, Enum):
    NORMAL = "normal"    # funded from this round's income
    SAVINGS = "savings"  # funded from the emergency buffer
    DEBT = "debt"        # funded by new revolving debt
    NONE = "none"        # nothing left; the category receives zero


@dataclass(frozen=True)
class AllocationResult:
    """Outcome of one applier call.

    ``state`` carries the recorded allocation; ``savings`` and ``debt`` are
    the reserve balances the store merges into it.
    """

    state: GameState
    savings: float
    debt: float
    savings_exhausted: bool = False


def available_debt_allocation(
    state: GameState, debt_used: float = 0.0, params: GameParams = DEFAULT_PARAMS,
) -> float:
    """Discretionary debt still drawable this round."""
    return max(0.0, params.debt_cap_per_round(state.monthly_salary) - debt_used)


def resolve_allocation_mode(
    state: GameState,
    remaining_to_allocate: float,
    debt_used: float = 0.0,
    savings_exhausted: bool = False,
    params: GameParams = DEFAULT_PARAMS,
) -> AllocationMode:
    """Decide how the next category is funded. First match wins."""
    if remaining_to_allocate > 0:
        mode = AllocationMode.NORMAL
    elif state.savings > 0 and not savings_exhausted:
        mode = AllocationMode.SAVINGS
    elif available_debt_allocation(state, debt_used, params) > 0:
        mode = AllocationMode.DEBT
    else:
        mode = AllocationMode.NONE
    logger.debug(
        "mode=%s remaining=%.2f savings=%.2f exhausted=%s debt_used=%.2f",
        mode.value, remaining_to_allocate, state.savings, savings_exhausted, debt_used,
    )
    return mode


def allocation_capacity(
    state: GameState,
    mode: AllocationMode,
    remaining_to_allocate: float,
    round_state: RoundState,
    params: GameParams = DEFAULT_PARAMS,
) -> float:
    """Largest amount the given mode may allocate to the current category."""
    if mode == AllocationMode.NORMAL:
        return max(0.0, remaining_to_allocate)
    if mode == AllocationMode.SAVINGS:
        return max(0.0, state.savings)
    if mode == AllocationMode.DEBT:
        return available_debt_allocation(state, round_state.debt_used, params)
    return 0.0


def _record(state: GameState, amount: float, category_id: CategoryId, glyph: str) -> GameState:
    return dataclasses.replace(
        state,
        allocations={**state.allocations, category_id: Allocation(amount, glyph)},
        allocated_amount=state.allocated_amount + amount,
    )


def apply_normal_allocation(
    state: GameState, amount: float, category_id: CategoryId, glyph: str,
) -> AllocationResult:
    """Allocate from current income.

    Savings allocations grow the buffer. Debt repayment pays down debt and
    credits any excess (or the whole amount when there is no debt) to savings.
    """
    amount = max(0.0, amount)
    new_state = _record(state, amount, category_id, glyph)
    savings = state.savings
    debt = state.debt

    if category_id == CategoryId.SAVINGS:
        savings += amount
    elif category_id == CategoryId.DEBT_REPAYMENT and amount > 0:
        if debt > 0:
            if amount >= debt:
                savings += amount - debt
                debt = 0.0
            else:
                debt -= amount
        else:
            savings += amount

    return AllocationResult(new_state, savings, debt)


def apply_savings_allocation(
    state: GameState, amount: float, category_id: CategoryId, glyph: str,
) -> AllocationResult:
    """Allocate from savings. Anything beyond the buffer becomes debt."""
    amount = max(0.0, amount)
    new_state = _record(state, amount, category_id, glyph)
    savings = state.savings - amount
    debt = state.debt

    if amount > state.savings:
        debt += amount - state.savings
        savings = 0.0

    return AllocationResult(new_state, savings, debt, savings_exhausted=savings <= 0)


def apply_debt_allocation(
    state: GameState, amount: float, category_id: CategoryId, glyph: str,
) -> AllocationResult:
    """Allocate on credit. The caller tracks the round's debt draw."""
    amount = max(0.0, amount)
    new_state = _record(state, amount, category_id, glyph)
    return AllocationResult(new_state, state.savings, state.debt + amount)


_APPLIERS = {
    AllocationMode.NORMAL: apply_normal_allocation,
    AllocationMode.SAVINGS: apply_savings_allocation,
    AllocationMode.DEBT: apply_debt_allocation,
    # Nothing left to fund: record the zero allocation without touching reserves
    AllocationMode.NONE: apply_normal_allocation,
}


def apply_allocation(
    state: GameState,
    round_state: RoundState,
    mode: AllocationMode,
    amount: float,
    category: Category,
) -> tuple[GameState, RoundState]:
    """Dispatch one allocation and merge reserves and round bookkeeping.

    ``amount`` must already be clamped to the mode's capacity.
    """
    if mode == AllocationMode.NONE:
        amount = 0.0
    amount = max(0.0, amount)
    result = _APPLIERS[mode](state, amount, category.id, category.glyph)
    new_state = dataclasses.replace(result.state, savings=result.savings, debt=result.debt)

    debt_used = round_state.debt_used
    savings_drawn = round_state.savings_drawn
    exhausted = round_state.savings_exhausted
    if mode == AllocationMode.DEBT:
        debt_used += amount
    elif mode == AllocationMode.SAVINGS:
        savings_drawn += amount
        exhausted = exhausted or result.savings_exhausted
    if state.savings > 0 and new_state.savings <= 0:
        exhausted = True

    new_round = RoundState(
        debt_used=debt_used, savings_exhausted=exhausted, savings_drawn=savings_drawn,
    )
    return new_state, new_round
