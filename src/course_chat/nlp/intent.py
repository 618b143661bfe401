from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from course_chat.nlp.keyword_index import KeywordIndex


class Intent(str, Enum):
    PRICE_ASCENDING = "price_ascending"
    PRICE_DESCENDING = "price_descending"
    DATE_ASCENDING = "date_ascending"
    DATE_DESCENDING = "date_descending"
    CATEGORY_MATCH = "category_match"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class IntentRule:
    intent: Intent
    keywords: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class IntentPrediction:
    intent: Intent
    term: str | None = None


# Evaluated top to bottom; the first hit wins, and all of these outrank a
# keyword index match.
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        Intent.PRICE_ASCENDING,
        ("cheap", "inexpensive", "affordable", "low cost", "barato", "económico"),
    ),
    IntentRule(Intent.PRICE_DESCENDING, ("expensive", "pricey", "costly", "caro")),
    IntentRule(Intent.DATE_DESCENDING, ("new", "recent", "latest", "nuevo", "reciente")),
    IntentRule(Intent.DATE_ASCENDING, ("old", "antiguo", "viejo")),
)


class IntentClassifier:
    """
    Keyword intent classifier for course questions.

    Price and date vocabularies are checked first, in ``INTENT_RULES`` order,
    then the keyword index is scanned for a topic term.
    """

    def __init__(self, index: KeywordIndex, rules: tuple[IntentRule, ...] = INTENT_RULES) -> None:
        self.index = index
        self.rules = rules

    def predict(self, question: str) -> IntentPrediction:
        text = question.casefold()

        for rule in self.rules:
            if rule.matches(text):
                return IntentPrediction(intent=rule.intent)

        term = self.index.first_match(text)
        if term is not None:
            return IntentPrediction(intent=Intent.CATEGORY_MATCH, term=term)
        return IntentPrediction(intent=Intent.UNCLASSIFIED)
