"""Tests for config loading and CLI > config > default resolution."""

import argparse

import pytest
from budget_game.config import DEFAULTS, build_params, create_parser, load_config, resolve


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        assert load_config(tmp_path / "absent.toml") == {}

    def test_reads_values_and_allocations(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'salary = 4200\nlocation = "Denver, CO"\nplan = "frugal"\n\n'
            "[allocations]\ngroceries = 0.2\ndining_out = 0\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg["salary"] == 4200
        assert cfg["location"] == "Denver, CO"
        assert cfg["allocations"] == {"groceries": 0.2, "dining_out": 0.0}

    def test_malformed_file_exits(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text("salary = = 1", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            load_config(path)
        assert exc.value.code == 1
        assert "Failed to read config file" in capsys.readouterr().err

    def test_non_numeric_allocation_exits(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text('[allocations]\ngroceries = "lots"\n', encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            load_config(path)
        assert exc.value.code == 1
        assert "must be numbers" in capsys.readouterr().err


class TestResolve:
    def _args(self, *argv: str) -> argparse.Namespace:
        return create_parser("test").parse_args(list(argv))

    def test_defaults(self):
        r = resolve(self._args(), {})
        for key, default in DEFAULTS.items():
            assert r[key] == default
        assert r["allocations"] == {}

    def test_config_overrides_default(self):
        r = resolve(self._args(), {"salary": 4200, "tax_rate": 20})
        assert r["salary"] == 4200
        assert r["tax_rate"] == 20

    def test_cli_overrides_config(self):
        r = resolve(self._args("--salary", "6000", "--offline"), {"salary": 4200, "offline": False})
        assert r["salary"] == 6000
        assert r["offline"] is True

    def test_build_params(self):
        params = build_params({"debt_cap_ratio": 0.5})
        assert params.debt_cap_ratio == 0.5

    def test_negative_debt_cap(self):
        with pytest.raises(ValueError, match="debt_cap_ratio"):
            build_params({"debt_cap_ratio": -0.1})
