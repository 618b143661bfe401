from __future__ import annotations

import logging
from typing import Protocol

from course_chat.data_models import Course, RouteResult
from course_chat.db.catalog import CourseCatalog
from course_chat.nlp.intent import Intent, IntentClassifier, IntentPrediction

logger = logging.getLogger(__name__)

NO_CATEGORY_RESULTS = "No courses found in this category."
NO_MATCHING_COURSES = "No courses found matching your search."


class QuestionInterpreter(Protocol):
    def interpret(self, question: str) -> str: ...


class QueryRouter:
    """Turns a question into a catalog query and runs it."""

    def __init__(
        self,
        *,
        catalog: CourseCatalog,
        classifier: IntentClassifier,
        interpreter: QuestionInterpreter | None = None,
        price_page_size: int = 10,
    ) -> None:
        self.catalog = catalog
        self.classifier = classifier
        self.interpreter = interpreter
        self.price_page_size = price_page_size

    def route(self, question: str, *, page: int = 1) -> RouteResult:
        prediction = self.classifier.predict(question)
        logger.info("Question %r classified as %s (term=%r)", question, prediction.intent.value, prediction.term)
        return self.execute(prediction, question, page=page)

    def execute(self, prediction: IntentPrediction, question: str, *, page: int = 1) -> RouteResult:
        intent = prediction.intent

        if intent in (Intent.PRICE_ASCENDING, Intent.PRICE_DESCENDING):
            courses = self.catalog.sorted_by_price(
                descending=intent is Intent.PRICE_DESCENDING,
                page=page,
                page_size=self.price_page_size,
            )
            return RouteResult(intent=intent.value, courses=courses)

        if intent in (Intent.DATE_ASCENDING, Intent.DATE_DESCENDING):
            courses = self.catalog.sorted_by_date(descending=intent is Intent.DATE_DESCENDING)
            return RouteResult(intent=intent.value, courses=courses)

        if intent is Intent.CATEGORY_MATCH and prediction.term:
            return self._category_result(prediction.term, intent)

        return self._fallback(question)

    def _fallback(self, question: str) -> RouteResult:
        if self.interpreter is None:
            return RouteResult(intent=Intent.UNCLASSIFIED.value, message=NO_MATCHING_COURSES)

        interpreted = self.interpreter.interpret(question)
        term = self.classifier.index.first_match(interpreted)
        logger.info("AI interpretation of %r mapped to term %r", question, term)
        if term is None:
            return RouteResult(intent=Intent.UNCLASSIFIED.value, message=NO_MATCHING_COURSES)
        return self._category_result(term, Intent.UNCLASSIFIED)

    def _category_result(self, term: str, intent: Intent) -> RouteResult:
        courses: list[Course] = self.catalog.find_matching(term)
        if not courses:
            return RouteResult(intent=intent.value, term=term, message=NO_CATEGORY_RESULTS)
        return RouteResult(intent=intent.value, term=term, courses=courses)
