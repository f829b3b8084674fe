"""Tests for the console shell (offline only)."""

from budget_game.advisor import LocationCostEstimate
from budget_game.categories import CategoryId
from budget_game.cli import main, play, resolve_costs
from budget_game.simulation import BudgetGame
from budget_game.state import Stage


def _argv(tmp_path, *extra: str) -> list[str]:
    return ["--config", str(tmp_path / "absent.toml"), "--offline", *extra]


class TestResolveCosts:
    def _r(self, **kw) -> dict:
        r = {"location": "Austin, TX", "housing_cost": None, "utility_cost": None, "tax_rate": None, "offline": True}
        r.update(kw)
        return r

    def test_all_explicit(self):
        est = resolve_costs(self._r(housing_cost=900, utility_cost=100, tax_rate=20))
        assert (est.housing_cost, est.utility_cost, est.tax_rate) == (900, 100, 20)
        assert not est.is_fallback

    def test_offline_fallback_with_partial_override(self, capsys):
        est = resolve_costs(self._r(housing_cost=900))
        assert (est.housing_cost, est.utility_cost, est.tax_rate) == (900, 200, 25)
        assert est.is_fallback
        assert "using default values" in capsys.readouterr().err


class TestMain:
    def test_plan_run(self, tmp_path, capsys):
        assert main(_argv(tmp_path, "--salary", "5000", "--plan", "frugal")) == 0
        out = capsys.readouterr().out
        assert "Net salary: $3,750.00/month" in out
        assert "Final results" in out
        assert "You managed to avoid debt!" in out
        assert "Unable to get expert advice" in out

    def test_compare(self, tmp_path, capsys):
        assert main(_argv(tmp_path, "--compare")) == 0
        out = capsys.readouterr().out
        for name in ("frugal", "balanced", "spender"):
            assert name in out

    def test_invalid_salary(self, tmp_path, capsys):
        assert main(_argv(tmp_path, "--salary", "0")) == 1
        assert "must be positive" in capsys.readouterr().err

    def test_charts(self, tmp_path):
        out_dir = tmp_path / "charts"
        assert main(_argv(tmp_path, "--charts", str(out_dir))) == 0
        assert (out_dir / "trajectory.png").exists()
        assert (out_dir / "allocation-final.png").exists()


class TestInteractivePlay:
    def test_reads_every_category(self, capsys):
        game = BudgetGame()
        game.submit_salary(5000)
        game.submit_location("Austin, TX", LocationCostEstimate(1200, 200, 25))
        game.start_budget()
        answers = iter(["abc", "100"] + ["50"] * 200)
        play(game, None, read=lambda prompt: next(answers), offline=True)
        assert game.state.stage == Stage.GAME_OVER
        first = game.state.iteration_history[0]
        assert first.allocations[CategoryId.TRANSPORTATION].amount == 100
        assert "Not a number" in capsys.readouterr().out
