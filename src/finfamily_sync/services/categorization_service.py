"""Keyword-based category assignment for synced transactions."""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryRule:
    """A set of description keywords that map to one category."""

    keywords: tuple[str, ...]
    category_id: int

    def matches(self, normalized_description: str) -> bool:
        """Return True if any keyword is a substring of the description."""
        return any(keyword in normalized_description for keyword in self.keywords)


CATEGORY_NAMES: dict[int, str] = {
    1: "Groceries",
    2: "Fuel",
    3: "Parking",
    4: "Restaurants & Cafes",
    5: "Utilities & Home",
    6: "Communications",
    7: "Insurance",
    8: "Health",
    9: "Entertainment & Subscriptions",
    10: "Salary & Income",
}

# Order matters: the first matching rule wins.
DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        (
            "סופר",
            "מרקט",
            "רמי לוי",
            "שופרסל",
            "יינות ביתן",
            "מחסני השוק",
            "victory",
            "market",
        ),
        1,
    ),
    CategoryRule(("דלק", "פז", "סונול", "דור אלון", "תן", "גז"), 2),
    CategoryRule(("חניה", "פארקינג", "parking"), 3),
    CategoryRule(("מסעדה", "קפה", "cafe", "pizza", "פיצה", "סושי", "מאפה"), 4),
    CategoryRule(("חשמל", "מים", "גז", "ועד בית", "ארנונה"), 5),
    CategoryRule(
        ("בזק", "hot", "cellcom", "partner", "פרטנר", "סלקום", "רכב"),
        6,
    ),
    CategoryRule(("ביטוח", "insurance", "מגדל", "הפניקס", "כלל", "מנורה"), 7),
    CategoryRule(("רופא", "קופת חולים", "מכבי", "כללית", "בית חולים", "תרופ"), 8),
    CategoryRule(("סינמה", "קולנוע", "אמזון", "netflix", "spotify", "apple"), 9),
    CategoryRule(("משכורת", "שכר", "salary", "הכנסה"), 10),
)


class CategoryRuleEngine:
    """Assigns a category id to a transaction description.

    Rules are evaluated in the order given and the first rule with a keyword
    contained in the lower-cased description wins, even when a later rule
    would also match. No match means the transaction stays uncategorized
    until the user classifies it.
    """

    def __init__(self, rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES) -> None:
        """Initialize the engine with an ordered rule list.

        Args:
            rules: Rules in priority order. Keywords must be lower-case.
        """
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[CategoryRule, ...]:
        return self._rules

    def categorize(self, description: str | None) -> int | None:
        """Return the category id for a description.

        Args:
            description: Raw transaction description.

        Returns:
            The category id of the first matching rule, or None.
        """
        if not description:
            return None

        normalized = description.lower()
        for rule in self._rules:
            if rule.matches(normalized):
                return rule.category_id
        return None


_default_engine = CategoryRuleEngine()


def categorize(description: str | None) -> int | None:
    """Categorize a description using the default rule table."""
    return _default_engine.categorize(description)
