"""Game parameters and money helpers."""

from dataclasses import dataclass

# Fallbacks used when the location estimate is unavailable
DEFAULT_HOUSING_COST = 1200.0
DEFAULT_UTILITY_COST = 200.0
DEFAULT_TAX_RATE = 25.0


@dataclass(frozen=True)
class GameParams:

    total_iterations: int = 12         # bi-weekly rounds (6 months)
    annual_interest_rate: float = 0.15  # APR on revolving debt
    periods_per_year: int = 26          # bi-weekly periods, for the per-round interest display
    months_per_year: int = 12
    # Maximum discretionary debt draw per round, as a fraction of monthly net salary
    # (1/4 per round = 1/2 per month)
    debt_cap_ratio: float = 0.25

    def debt_cap_per_round(self, monthly_salary: float) -> float:
        return max(0.0, monthly_salary * self.debt_cap_ratio)


DEFAULT_PARAMS = GameParams()


def net_monthly_salary(gross_monthly: float, tax_rate: float) -> float:
    """Net monthly salary after a flat tax rate given in percent."""
    return gross_monthly * (1 - tax_rate / 100)


def biweekly_fixed_costs(housing_cost: float, utility_cost: float) -> float:
    """Housing and utilities are quoted monthly; one round carries half of each."""
    return housing_cost / 2 + utility_cost / 2


def cost_of_debt(debt: float, params: GameParams = DEFAULT_PARAMS) -> float:
    """Bi-weekly interest charge on outstanding debt."""
    return debt * params.annual_interest_rate / params.periods_per_year


def monthly_interest(debt: float, params: GameParams = DEFAULT_PARAMS) -> float:
    return debt * params.annual_interest_rate / params.months_per_year
