"""Chart generation for budget game results."""

from collections.abc import Mapping, Sequence
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.colors as mcolors
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from budget_game.categories import CATEGORIES, CategoryId
from budget_game.state import Allocation, IterationRecord

FIXED_COST_COLORS = {
    "Housing": "#8B5CF6",
    "Utilities": "#06B6D4",
}

SERIES_COLORS = {
    "balance": "#1f77b4",
    "savings": "#2ca02c",
    "debt": "#d62728",
}

COLOR_EXPENSE = "#c0392b"
COLOR_INCOME = "#27ae60"


def _category_color(index: int) -> str:
    # Golden-angle hue spacing
    hue = (index * 137.5) % 360 / 360
    r, g, b = mcolors.hsv_to_rgb((hue, 0.55, 0.9))
    return mcolors.to_hex((r, g, b))


def _format_dollar_axis(ax: plt.Axes):
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(lambda x, _: f"${x:,.0f}"))


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def allocation_slices(
    allocations: Mapping[CategoryId, Allocation],
    housing_cost: float,
    utility_cost: float,
) -> list[tuple[str, float, str]]:
    """Pie slices for one round: bi-weekly fixed costs plus every non-zero allocation.

    Returns [(label, amount, color), ...] in registry order.
    """
    slices = [
        ("Housing", housing_cost / 2, FIXED_COST_COLORS["Housing"]),
        ("Utilities", utility_cost / 2, FIXED_COST_COLORS["Utilities"]),
    ]
    index = 0
    for category in CATEGORIES:
        alloc = allocations.get(category.id)
        if alloc is None or alloc.amount <= 0:
            continue
        slices.append((category.label, alloc.amount, _category_color(index)))
        index += 1
    return [s for s in slices if s[1] > 0]


def plot_round_allocation(
    allocations: Mapping[CategoryId, Allocation],
    housing_cost: float,
    utility_cost: float,
    output_path: Path,
    name: str = "",
    title: str = "Budget Allocation",
) -> Path:
    """Generate a pie chart of one round's spending.

    Args:
        allocations: category allocations of the round.
        housing_cost, utility_cost: monthly fixed costs (halved for the round).
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "r3" → "allocation-r3.png").

    Returns:
        Path to the generated PNG file.
    """
    slices = allocation_slices(allocations, housing_cost, utility_cost)
    if not slices:
        raise ValueError("Nothing to chart: all amounts are zero")

    fig, ax = plt.subplots(figsize=(10, 7))
    labels = [s[0] for s in slices]
    values = [s[1] for s in slices]
    colors = [s[2] for s in slices]
    wedges, _, _ = ax.pie(
        values, colors=colors, startangle=90, counterclock=False,
        autopct=lambda pct: f"{pct:.1f}%" if pct >= 3 else "",
        wedgeprops=dict(edgecolor="white", linewidth=1),
    )
    total = sum(values)
    ax.legend(
        wedges,
        [f"{label} ${value:,.0f}" for label, value in zip(labels, values)],
        loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize=9,
    )
    ax.set_title(f"{title} (total ${total:,.0f})")
    ax.axis("equal")
    return _save(fig, output_path, "allocation", name)


def plot_trajectory(
    history: Sequence[IterationRecord],
    output_path: Path,
    name: str = "",
) -> Path:
    """Generate a line chart of balance, savings and debt after each round.

    Random events are annotated at their round.
    """
    if not history:
        raise ValueError("No rounds settled yet")

    rounds = [rec.iteration for rec in history]
    fig, ax = plt.subplots(figsize=(14, 8))
    for key, label in (("balance", "Carry-over balance"), ("savings", "Savings"), ("debt", "Debt")):
        values = [getattr(rec, key) for rec in history]
        ax.plot(rounds, values, label=label, color=SERIES_COLORS[key], linewidth=2, marker="o")

    y_lo, y_hi = ax.get_ylim()
    for i, rec in enumerate(history):
        event = rec.random_event
        if event is None or event.adjustment == 0:
            continue
        color = COLOR_EXPENSE if event.is_shock else COLOR_INCOME
        y_pos = y_lo + (y_hi - y_lo) * (0.05 + 0.07 * (i % 4))
        ax.annotate(
            f"{event.adjustment:+,.0f}",
            xy=(rec.iteration, y_pos),
            fontsize=10, color=color, ha="center", va="bottom",
            bbox=dict(boxstyle="round,pad=0.4", fc="white", ec=color, alpha=0.9, linewidth=0.8),
            zorder=10,
        )

    ax.set_xticks(rounds)
    ax.set_xlabel("Round (bi-weekly)")
    ax.set_ylabel("Amount")
    ax.set_title("Six-month budget trajectory")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_dollar_axis(ax)
    return _save(fig, output_path, "trajectory", name)
