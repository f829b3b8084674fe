"""Preset spending plans and multi-plan comparison."""

from collections.abc import Mapping

from budget_game.advisor import FALLBACK_ESTIMATE, LocationCostEstimate
from budget_game.categories import CategoryId
from budget_game.params import DEFAULT_PARAMS, GameParams
from budget_game.simulation import simulate_budget

C = CategoryId

# Fractions of bi-weekly net income per category
PLANS: dict[str, dict[CategoryId, float]] = {
    "frugal": {
        C.TRANSPORTATION: 0.05,
        C.GROCERIES: 0.10,
        C.DINING_OUT: 0.02,
        C.HEALTHCARE: 0.05,
        C.ENTERTAINMENT: 0.02,
        C.INTERNET_PHONE: 0.03,
        C.MISCELLANEOUS: 0.03,
        C.SAVINGS: 0.15,
        C.DEBT_REPAYMENT: 0.05,
    },
    "balanced": {
        C.TRANSPORTATION: 0.07,
        C.GROCERIES: 0.12,
        C.DINING_OUT: 0.05,
        C.HEALTHCARE: 0.06,
        C.ENTERTAINMENT: 0.05,
        C.INTERNET_PHONE: 0.04,
        C.MISCELLANEOUS: 0.05,
        C.SAVINGS: 0.10,
        C.DEBT_REPAYMENT: 0.08,
    },
    # Overspends on typical costs so savings and debt get drawn
    "spender": {
        C.TRANSPORTATION: 0.08,
        C.GROCERIES: 0.13,
        C.DINING_OUT: 0.15,
        C.HEALTHCARE: 0.06,
        C.ENTERTAINMENT: 0.15,
        C.INTERNET_PHONE: 0.05,
        C.MISCELLANEOUS: 0.13,
        C.SAVINGS: 0.05,
        C.DEBT_REPAYMENT: 0.05,
    },
}

PLAN_ORDER = ["frugal", "balanced", "spender"]


def build_plan(base: str, overrides: Mapping[str, float] | None = None) -> dict[CategoryId, float]:
    """Copy a preset plan, replacing fractions by category id string."""
    if base not in PLANS:
        raise ValueError(f"Unknown plan {base!r} (choose from {', '.join(PLAN_ORDER)})")
    plan = dict(PLANS[base])
    for key, fraction in (overrides or {}).items():
        try:
            cid = CategoryId(key)
        except ValueError:
            raise ValueError(f"Unknown category {key!r} in allocations") from None
        if fraction < 0:
            raise ValueError(f"Allocation fraction for {key} must not be negative")
        plan[cid] = float(fraction)
    return plan


def run_plans(
    gross_salary: float,
    location: str,
    costs: LocationCostEstimate = FALLBACK_ESTIMATE,
    plans: Mapping[str, Mapping[CategoryId, float]] | None = None,
    params: GameParams = DEFAULT_PARAMS,
) -> dict[str, dict]:
    """Run every plan with the same salary and costs, keyed by plan name."""
    if plans is None:
        plans = {name: PLANS[name] for name in PLAN_ORDER}
    return {
        name: simulate_budget(gross_salary, location, costs, plan, params)
        for name, plan in plans.items()
    }
