"""Tests for the category classifier."""

import pytest

from finboard.domain.categories import (
    TAG_THEMES,
    CategoryKey,
    _hash_name,
    format_category_name,
    get_tag_theme_for_category,
)


class TestFormatCategoryName:
    """Tests for display formatting of raw category codes."""

    def test_snake_case(self):
        """Test underscore-separated codes are title-cased."""
        assert format_category_name("fast_food") == "Fast Food"
        assert format_category_name("FOOD_AND_DRINK") == "Food And Drink"

    def test_single_word(self):
        """Test a single upper-case word."""
        assert format_category_name("TRANSPORT") == "Transport"

    def test_missing_is_other(self):
        """Test None and empty input map to Other."""
        assert format_category_name(None) == "Other"
        assert format_category_name("") == "Other"


class TestTagTheme:
    """Tests for deterministic category colors."""

    def test_known_hash_values(self):
        """Test the rolling hash against known 32-bit string hashes."""
        assert _hash_name("a") == 97
        assert _hash_name("ab") == 97 * 31 + 98
        assert _hash_name("hello") == 99162322

    def test_hash_wraps_to_signed_32_bit(self):
        """Test a string whose hash is exactly the minimum 32-bit integer."""
        assert _hash_name("polygenelubricants") == 2147483648

    def test_theme_selection(self):
        """Test palette index is the hash modulo palette size."""
        assert get_tag_theme_for_category("a").key == "fuchsia"
        assert get_tag_theme_for_category("b").key == "teal"
        assert get_tag_theme_for_category("ab").key == "rose"

    def test_case_insensitive(self):
        """Test that casing does not change the theme."""
        assert get_tag_theme_for_category("Groceries") == get_tag_theme_for_category("GROCERIES")

    def test_missing_name_uses_uncategorized(self):
        """Test that None is themed like 'Uncategorized'."""
        assert get_tag_theme_for_category(None) == get_tag_theme_for_category("uncategorized")

    def test_theme_fields(self):
        """Test that every theme carries ring class and hex."""
        theme = get_tag_theme_for_category("Travel")
        assert theme in TAG_THEMES
        assert theme.ring == f"ring-{theme.key}-400"
        assert theme.ring_hex.startswith("#")


class TestCategoryKey:
    """Tests for dual raw/display category matching."""

    @pytest.mark.parametrize("other", [
        "FOOD_AND_DRINK",
        "food_and_drink",
        "Food And Drink",
        "food and drink",
    ])
    def test_matches_raw_and_display_forms(self, other):
        """Test that raw codes and display names are the same category."""
        assert CategoryKey("FOOD_AND_DRINK").matches(other)
        assert CategoryKey("FOOD_AND_DRINK") == other

    def test_different_categories_do_not_match(self):
        """Test that unrelated categories differ."""
        assert not CategoryKey("TRANSPORTATION").matches("FOOD_AND_DRINK")
        assert CategoryKey("TRANSPORTATION") != CategoryKey("travel")

    def test_missing_category_matches_other(self):
        """Test that a missing primary matches the OTHER code."""
        assert CategoryKey(None).matches("OTHER")
