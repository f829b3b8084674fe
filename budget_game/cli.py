"""CLI entry point: play the six-month budget game from a plan or interactively."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

from budget_game.advisor import (
    FALLBACK_ADVICE,
    FALLBACK_ESTIMATE,
    LocationCostEstimate,
    fetch_expert_advice,
    fetch_location_costs,
)
from budget_game.allocation import AllocationMode
from budget_game.categories import CategoryId
from budget_game.config import build_params, parse_args
from budget_game.scenarios import PLAN_ORDER, build_plan, run_plans
from budget_game.simulation import BudgetGame, plan_amount
from budget_game.settlement import SettlementResult
from budget_game.state import Stage

logger = logging.getLogger(__name__)


def _add_cli_args(parser: argparse.ArgumentParser):
    parser.add_argument("--interactive", action="store_true", help="Enter each category amount at the prompt")
    parser.add_argument("--compare", action="store_true", help="Compare all plan presets instead of playing one")
    parser.add_argument("--charts", type=Path, default=None, help="Write allocation and trajectory charts to this directory")


def resolve_costs(r: dict) -> LocationCostEstimate:
    """Explicit costs win; missing ones come from the estimator (or its fallback offline)."""
    explicit = {k: r[k] for k in ("housing_cost", "utility_cost", "tax_rate") if r[k] is not None}
    if len(explicit) == 3:
        return LocationCostEstimate(**{k: float(v) for k, v in explicit.items()})
    if r["offline"]:
        estimate = FALLBACK_ESTIMATE
    else:
        estimate = asyncio.run(fetch_location_costs(r["location"]))
    if estimate.is_fallback:
        print("Note: cost estimate unavailable, using default values.", file=sys.stderr)
    logger.debug("estimate for %s: %s", r["location"], estimate)
    return LocationCostEstimate(
        housing_cost=float(explicit.get("housing_cost", estimate.housing_cost)),
        utility_cost=float(explicit.get("utility_cost", estimate.utility_cost)),
        tax_rate=float(explicit.get("tax_rate", estimate.tax_rate)),
        is_fallback=estimate.is_fallback,
    )


def _print_header(game: BudgetGame, plan_name: str | None):
    s = game.state
    print("=" * 80)
    print(f"Six-month budget game: {s.location}")
    print(f"  Gross salary: ${s.gross_monthly_salary:,.2f}/month, tax {s.tax_rate:.1f}%")
    print(f"  Net salary: ${s.monthly_salary:,.2f}/month, ${s.biweekly_income:,.2f} per round")
    print(f"  Housing: ${s.housing_cost:,.2f}/month, utilities: ${s.utility_cost:,.2f}/month")
    cap = game.params.debt_cap_per_round(s.monthly_salary)
    print(f"  Debt cap per round: ${cap:,.2f} at {game.params.annual_interest_rate * 100:.0f}% APR")
    if plan_name:
        print(f"  Plan: {plan_name}")
    print("=" * 80)


def _print_round_header():
    print(
        f"{'Round':<6} {'Income':>10} {'Fixed':>9} {'Spent':>10} {'Event':>7} "
        f"{'Balance':>10} {'Savings':>10} {'Debt':>10} {'Interest':>9}"
    )
    print("-" * 90)


def _print_round_row(income: float, fixed: float, result: SettlementResult):
    rec = result.state.iteration_history[-1]
    spent = sum(a.amount for a in rec.allocations.values())
    print(
        f"{rec.iteration:<6} {income:>10,.2f} {fixed:>9,.2f} {spent:>10,.2f} "
        f"{result.event.adjustment:>+7,.0f} {rec.balance:>10,.2f} {rec.savings:>10,.2f} "
        f"{rec.debt:>10,.2f} {result.interest_charged:>9,.2f}"
    )


def _print_final(game: BudgetGame):
    s = game.state
    print("\n" + "=" * 80)
    print("Final results")
    print("=" * 80)
    print(f"  Location: {s.location}")
    print(f"  Starting salary: ${s.gross_monthly_salary:,.2f}/month")
    print(f"  Final balance: ${s.current_balance:,.2f}")
    if s.savings > 0:
        print(f"  Final savings: ${s.savings:,.2f}")
    if s.debt > 0:
        print(f"  Final debt: ${s.debt:,.2f}")
    else:
        print("  You managed to avoid debt!")


def _prompt_amount(game: BudgetGame, read: Callable[[str], str]) -> float:
    prompt = game.current_prompt()
    c = prompt.category
    if prompt.mode == AllocationMode.NONE:
        print(f"{c.glyph} {c.label}: all funds allocated, set to $0.")
        return 0.0
    while True:
        raw = read(f"{c.glyph} {c.label} [{prompt.mode.value}, up to ${prompt.capacity:,.2f}]: ").strip()
        if not raw:
            return 0.0
        try:
            return float(raw.replace(",", "").lstrip("$"))
        except ValueError:
            print(f"Not a number: {raw!r}")


def play(
    game: BudgetGame,
    plan: Mapping[CategoryId, float] | None,
    read: Callable[[str], str] | None = None,
    offline: bool = True,
) -> None:
    """Play all remaining rounds. ``plan=None`` reads every amount with ``read``."""
    _print_round_header()
    while game.state.stage == Stage.BUDGET_ALLOCATION:
        figures = game.round_figures()
        if figures.fixed_cost_shortfall > 0:
            print(f"Fixed costs exceed income by ${figures.fixed_cost_shortfall:,.2f} this round.")
        while game.state.stage == Stage.BUDGET_ALLOCATION:
            if plan is None:
                amount = _prompt_amount(game, read or input)
            else:
                category = game.current_prompt().category
                amount = plan_amount(plan, category, game.state.biweekly_income)
            game.allocate(amount)
        if plan is None and not offline:
            advice = asyncio.run(fetch_expert_advice(game.advice_request(is_game_over=False)))
            game.merge_advice(advice.text)
            print(f"\nExpert advice:\n{game.advice}\n")
        result = game.next_period()
        print(f"  {result.event.message}")
        _print_round_row(figures.period_income, figures.fixed_costs, result)


def _print_comparison(results: dict[str, dict]):
    print(f"\n{'Plan':<10} {'Balance':>11} {'Savings':>11} {'Debt':>11} {'Net worth':>11} {'Interest':>9} {'Reserve rounds':>15}")
    print("-" * 84)
    for name, res in results.items():
        print(
            f"{name:<10} {res['final_balance']:>11,.2f} {res['final_savings']:>11,.2f} "
            f"{res['final_debt']:>11,.2f} {res['net_worth']:>11,.2f} "
            f"{res['total_interest']:>9,.2f} {res['reserve_rounds']:>15}"
        )


def main(argv: list[str] | None = None) -> int:
    """Execute one game (or a plan comparison)."""
    r, args = parse_args("Six-month bi-weekly budget game", _add_cli_args, argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        params = build_params(r)
        costs = resolve_costs(r)
        if args.compare:
            plans = {name: build_plan(name, r["allocations"]) for name in PLAN_ORDER}
            results = run_plans(r["salary"], r["location"], costs, plans, params)
            _print_comparison(results)
            return 0

        game = BudgetGame(params)
        game.submit_salary(r["salary"])
        game.submit_location(r["location"], costs)
        game.start_budget()
        plan = None if args.interactive else build_plan(r["plan"], r["allocations"])
    except ValueError as e:
        print(f"\n{e}\n", file=sys.stderr)
        return 1

    _print_header(game, None if args.interactive else r["plan"])
    play(game, plan, offline=r["offline"])
    _print_final(game)

    if r["offline"]:
        advice_text = FALLBACK_ADVICE
    else:
        advice_text = asyncio.run(fetch_expert_advice(game.advice_request(is_game_over=True))).text
    game.merge_advice(advice_text)
    print(f"\nFinal expert analysis:\n{game.advice}")

    if args.charts is not None:
        from budget_game.charts import plot_round_allocation, plot_trajectory

        s = game.state
        paths = [
            plot_trajectory(s.iteration_history, args.charts),
            plot_round_allocation(s.iteration_history[-1].allocations, s.housing_cost, s.utility_cost, args.charts, name="final"),
        ]
        for p in paths:
            print(f"Chart written: {p}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
