"""TOML config loader with CLI > config > default resolution."""

import argparse
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path

from budget_game.params import DEFAULT_PARAMS, GameParams
from budget_game.scenarios import PLAN_ORDER

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULTS = {
    "salary": 5000.0,
    "location": "Austin, TX",
    "housing_cost": None,  # None → ask the location estimator
    "utility_cost": None,
    "tax_rate": None,
    "plan": "balanced",
    "debt_cap_ratio": DEFAULT_PARAMS.debt_cap_ratio,
    "offline": False,
}


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"Failed to read config file: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    # Normalize [allocations] table → {category_id: fraction}
    if "allocations" in raw:
        v = raw["allocations"]
        if not isinstance(v, dict):
            print(f"Config 'allocations' must be a table: {path}", file=sys.stderr)
            raise SystemExit(1)
        try:
            raw["allocations"] = {str(k): float(x) for k, x in v.items()}
        except (TypeError, ValueError):
            print(f"Config 'allocations' values must be numbers: {path}", file=sys.stderr)
            raise SystemExit(1)
    return raw


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared game flags."""
    d = DEFAULTS
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="Config file path (default: config.toml)")
    parser.add_argument("--salary", type=float, default=None, help=f"Gross monthly salary (default: {d['salary']:.0f})")
    parser.add_argument("--location", type=str, default=None, help=f"City or region (default: {d['location']})")
    parser.add_argument("--housing-cost", type=float, default=None, help="Monthly housing cost (default: estimated for the location)")
    parser.add_argument("--utility-cost", type=float, default=None, help="Monthly utility cost (default: estimated for the location)")
    parser.add_argument("--tax-rate", type=float, default=None, help="Income tax rate in percent (default: estimated for the location)")
    parser.add_argument("--plan", type=str, default=None, choices=PLAN_ORDER, help=f"Spending plan preset (default: {d['plan']})")
    parser.add_argument("--debt-cap-ratio", type=float, default=None, help=f"Per-round discretionary debt cap as a fraction of net monthly salary (default: {d['debt_cap_ratio']})")
    parser.add_argument("--offline", action="store_true", default=None, help="Skip the estimate/advice API and use fallback values")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve(args: argparse.Namespace, config: dict) -> dict:
    """Resolve values with priority: CLI flag > config.toml > hardcoded default."""
    resolved = {}
    for key, default in DEFAULTS.items():
        cli_val = getattr(args, key, None)
        resolved[key] = cli_val if cli_val is not None else config.get(key, default)
    resolved["allocations"] = dict(config.get("allocations", {}))
    return resolved


def build_params(r: dict) -> GameParams:
    """Build GameParams from resolved config dict."""
    ratio = float(r["debt_cap_ratio"])
    if ratio < 0:
        raise ValueError(f"debt_cap_ratio must not be negative (got {ratio})")
    return GameParams(debt_cap_ratio=ratio)


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
    argv: list[str] | None = None,
) -> tuple[dict, argparse.Namespace]:
    """Parse CLI args, load config, resolve values.

    Returns (resolved_dict, namespace). The namespace carries any extra
    flags added via add_args_fn.
    """
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args(argv)
    config = load_config(args.config)
    return resolve(args, config), args
