"""Six-month bi-weekly personal budget game."""

from budget_game.categories import (
    CATEGORIES,
    CATEGORY_COUNT,
    Category,
    CategoryId,
    category_at,
    get_category,
)
from budget_game.params import GameParams, DEFAULT_PARAMS
from budget_game.events import RandomEvent, generate_random_event
from budget_game.state import Allocation, GameState, IterationRecord, RoundState, Stage
from budget_game.allocation import (
    AllocationMode,
    AllocationResult,
    resolve_allocation_mode,
    available_debt_allocation,
    apply_normal_allocation,
    apply_savings_allocation,
    apply_debt_allocation,
    apply_allocation,
)
from budget_game.settlement import RoundFigures, SettlementResult, round_figures, settle_period
from budget_game.simulation import (
    BudgetGame,
    simulate_budget,
    validate_salary,
    validate_location,
    validate_costs,
)
from budget_game.advisor import LocationCostEstimate, fetch_location_costs, fetch_expert_advice

__all__ = [
    "CATEGORIES",
    "CATEGORY_COUNT",
    "Category",
    "CategoryId",
    "category_at",
    "get_category",
    "GameParams",
    "DEFAULT_PARAMS",
    "RandomEvent",
    "generate_random_event",
    "Allocation",
    "GameState",
    "IterationRecord",
    "RoundState",
    "Stage",
    "AllocationMode",
    "AllocationResult",
    "resolve_allocation_mode",
    "available_debt_allocation",
    "apply_normal_allocation",
    "apply_savings_allocation",
    "apply_debt_allocation",
    "apply_allocation",
    "RoundFigures",
    "SettlementResult",
    "round_figures",
    "settle_period",
    "BudgetGame",
    "simulate_budget",
    "validate_salary",
    "validate_location",
    "validate_costs",
    "LocationCostEstimate",
    "fetch_location_costs",
    "fetch_expert_advice",
]
