"""Spending category registry."""

from dataclasses import dataclass
from enum import Enum


class CategoryId(str, Enum):
    TRANSPORTATION = "transportation"
    GROCERIES = "groceries"
    DINING_OUT = "dining_out"
    HEALTHCARE = "healthcare"
    ENTERTAINMENT = "entertainment"
    INTERNET_PHONE = "internet_phone"
    MISCELLANEOUS = "miscellaneous"
    SAVINGS = "savings"
    DEBT_REPAYMENT = "debt_repayment"


@dataclass(frozen=True)
class Category:
    id: CategoryId
    label: str
    glyph: str


# Allocation order within a round
CATEGORIES: tuple[Category, ...] = (
    Category(CategoryId.TRANSPORTATION, "Transportation (Public Transit, Gas, Car Maintenance)", "🚗"),
    Category(CategoryId.GROCERIES, "Groceries", "🛒"),
    Category(CategoryId.DINING_OUT, "Dining Out", "🍽️"),
    Category(CategoryId.HEALTHCARE, "Healthcare (Insurance, Medical Expenses)", "🏥"),
    Category(CategoryId.ENTERTAINMENT, "Entertainment (Leisure, Subscriptions, Events)", "🎮"),
    Category(CategoryId.INTERNET_PHONE, "Internet and Phone Bills", "📱"),
    Category(CategoryId.MISCELLANEOUS, "Miscellaneous (Clothing, Personal Care, Household Items)", "🛍️"),
    Category(CategoryId.SAVINGS, "Savings & Emergency Fund", "💰"),
    Category(CategoryId.DEBT_REPAYMENT, "Debt Repayment", "💳"),
)

CATEGORY_COUNT = len(CATEGORIES)

_BY_ID: dict[CategoryId, Category] = {c.id: c for c in CATEGORIES}


def get_category(category_id: CategoryId | str) -> Category:
    """Look up a category by id (enum member or its string value)."""
    return _BY_ID[CategoryId(category_id)]


def category_at(index: int) -> Category:
    """Return the category allocated at position ``index`` of a round."""
    if index < 0 or index >= CATEGORY_COUNT:
        raise IndexError(f"category index {index} out of range (0-{CATEGORY_COUNT - 1})")
    return CATEGORIES[index]
