"""Tests for the spending category registry."""

import pytest
from budget_game.categories import CATEGORIES, CATEGORY_COUNT, CategoryId, category_at, get_category


class TestRegistry:
    def test_order(self):
        assert CATEGORY_COUNT == 9
        assert CATEGORIES[0].id == CategoryId.TRANSPORTATION
        assert CATEGORIES[-2].id == CategoryId.SAVINGS
        assert CATEGORIES[-1].id == CategoryId.DEBT_REPAYMENT

    def test_ids_unique(self):
        assert len({c.id for c in CATEGORIES}) == CATEGORY_COUNT

    def test_lookup_by_string(self):
        assert get_category("groceries") is get_category(CategoryId.GROCERIES)
        assert get_category("dining_out").glyph == "🍽️"

    def test_unknown_id(self):
        with pytest.raises(ValueError):
            get_category("rent")

    def test_category_at_bounds(self):
        assert category_at(8).label == "Debt Repayment"
        with pytest.raises(IndexError):
            category_at(9)
        with pytest.raises(IndexError):
            category_at(-1)
