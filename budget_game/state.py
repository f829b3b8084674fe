"""Game state records.

``GameState`` is replaced, never mutated: every transition builds a new record
with ``dataclasses.replace``. ``RoundState`` carries the ephemeral bookkeeping
of the round in progress and is reset at every settlement.
"""

from dataclasses import dataclass, field
from enum import Enum

from budget_game.categories import CategoryId
from budget_game.events import RandomEvent
from budget_game.params import DEFAULT_TAX_RATE


class Stage(str, Enum):
    SALARY = "salary"
    LOCATION = "location"
    BUDGET_ALLOCATION = "budget_allocation"
    SUMMARY = "summary"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Allocation:
    amount: float
    glyph: str


@dataclass(frozen=True)
class IterationRecord:
    """Per-round audit entry appended at settlement."""

    iteration: int
    balance: float
    allocations: dict[CategoryId, Allocation]
    debt: float
    savings: float
    random_event: RandomEvent | None = None
    interest_charged: float = 0.0
    reserve_draws: float = 0.0  # savings + debt used to fund allocations this round


@dataclass(frozen=True)
class GameState:

    stage: Stage = Stage.SALARY

    # Income
    gross_monthly_salary: float = 0.0
    monthly_salary: float = 0.0  # net of tax
    biweekly_income: float = 0.0

    # Location (estimated, editable until the budget starts)
    location: str = ""
    housing_cost: float = 0.0  # monthly
    utility_cost: float = 0.0  # monthly
    tax_rate: float = DEFAULT_TAX_RATE  # percent

    # Round progress
    current_balance: float = 0.0
    iteration: int = 1
    current_category_index: int = 0
    allocations: dict[CategoryId, Allocation] = field(default_factory=dict)
    allocated_amount: float = 0.0

    # Reserves
    debt: float = 0.0
    savings: float = 0.0
    cost_of_debt: float = 0.0  # bi-weekly interest, fixed at round start

    iteration_history: tuple[IterationRecord, ...] = ()

    def allocation_amount(self, category_id: CategoryId) -> float:
        alloc = self.allocations.get(category_id)
        return alloc.amount if alloc is not None else 0.0


@dataclass(frozen=True)
class RoundState:
    """Round-local bookkeeping owned by the store, reset every round."""

    debt_used: float = 0.0  # discretionary debt drawn this round (capped)
    savings_exhausted: bool = False  # sticky until the round resets
    savings_drawn: float = 0.0  # allocations funded from savings this round
