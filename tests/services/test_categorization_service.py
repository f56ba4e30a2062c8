"""Tests for the keyword category rule engine."""

import pytest

from finfamily_sync.services.categorization_service import (
    CATEGORY_NAMES,
    DEFAULT_CATEGORY_RULES,
    CategoryRule,
    CategoryRuleEngine,
    categorize,
)


class TestDefaultRules:
    """Tests for the default rule table."""

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("שופרסל דיל רמת גן", 1),
            ("SuperMarket", 1),
            ("סונול ירושלים", 2),
            ("פארקינג מרכז", 3),
            ("Cafe Landwer", 4),
            ("ארנונה עיריית תל אביב", 5),
            ("CELLCOM", 6),
            ("הפניקס חברה לביטוח", 7),
            ("מכבי שירותי בריאות", 8),
            ("NETFLIX.COM", 9),
            ("משכורת ינואר", 10),
        ],
    )
    def test_single_rule_match(self, description: str, expected: int) -> None:
        """Test a description with one rule's keyword gets that rule's category."""
        assert categorize(description) == expected

    def test_match_is_case_insensitive(self) -> None:
        """Test matching lower-cases the description first."""
        assert categorize("SPOTIFY P0A1B2") == 9
        assert categorize("spotify p0a1b2") == 9

    def test_earlier_rule_wins(self) -> None:
        """Test a description matching two rules gets the earlier rule's id."""
        # "גז" is both a fuel keyword (rule 2) and a utilities keyword (rule 5)
        assert categorize("חברת גז") == 2
        # "cafe" (rule 4) and "parking" (rule 3)
        assert categorize("Parking near Cafe") == 3

    def test_no_match_returns_none(self) -> None:
        """Test an unknown merchant stays uncategorized."""
        assert categorize("XYZ LTD 0042") is None

    @pytest.mark.parametrize("description", ["", None])
    def test_empty_description_returns_none(self, description: str | None) -> None:
        """Test empty or missing description returns None."""
        assert categorize(description) is None

    def test_every_rule_category_has_a_name(self) -> None:
        """Test the seeded category names cover every rule."""
        for rule in DEFAULT_CATEGORY_RULES:
            assert rule.category_id in CATEGORY_NAMES

    def test_keywords_are_lower_case(self) -> None:
        """Test keywords can match a lower-cased description."""
        for rule in DEFAULT_CATEGORY_RULES:
            for keyword in rule.keywords:
                assert keyword == keyword.lower()


class TestCategoryRuleEngine:
    """Tests for CategoryRuleEngine with custom rules."""

    def test_custom_rules_in_order(self) -> None:
        """Test first-match-wins with custom rules."""
        engine = CategoryRuleEngine(
            [
                CategoryRule(("coffee",), 100),
                CategoryRule(("coffee", "bean"), 200),
            ]
        )

        assert engine.categorize("Coffee Bean") == 100
        assert engine.categorize("Bean bag") == 200

    def test_empty_description_does_not_evaluate_rules(self) -> None:
        """Test empty input short-circuits before any rule is consulted."""

        class ExplodingRule(CategoryRule):
            def matches(self, normalized_description: str) -> bool:
                raise AssertionError("rule evaluated")

        engine = CategoryRuleEngine([ExplodingRule(("x",), 1)])

        assert engine.categorize("") is None
        assert engine.categorize(None) is None

    def test_no_rules(self) -> None:
        """Test an engine with no rules categorizes nothing."""
        assert CategoryRuleEngine([]).categorize("שופרסל") is None

    def test_deterministic(self) -> None:
        """Test the same description always gets the same category."""
        engine = CategoryRuleEngine()
        results = {engine.categorize("רמי לוי שיווק השקמה") for _ in range(5)}

        assert results == {1}
