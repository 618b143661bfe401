from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from typing import Iterable

from course_chat.data_models import Course

logger = logging.getLogger(__name__)

DOMAIN_KEYWORDS: tuple[str, ...] = (
    "course",
    "curso",
    "development",
    "desarrollo",
    "web",
    "programming",
    "programación",
    "mobile",
    "móviles",
    "python",
    "javascript",
    "frontend",
    "backend",
)

_TOKEN_STRIP = string.punctuation + "¿¡«»“”‘’"


@dataclass(frozen=True)
class KeywordIndex:
    """Frozen, ordered set of case-folded topic terms.

    Built once before the web app serves requests; handlers only read it.
    """

    entries: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and term.casefold() in self.entries

    def first_match(self, text: str) -> str | None:
        lowered = text.casefold()
        for entry in self.entries:
            if entry in lowered:
                return entry
        return None


class KeywordIndexBuilder:
    def __init__(self, keywords: Iterable[str] = DOMAIN_KEYWORDS) -> None:
        self.keywords = tuple(keyword.casefold() for keyword in keywords)
        self._entries: list[str] = []
        self._seen: set[str] = set()

    def add(self, term: str) -> bool:
        normalized = term.strip().casefold()
        if not normalized or normalized in self._seen:
            return False
        self._seen.add(normalized)
        self._entries.append(normalized)
        return True

    def add_course(self, course: Course) -> None:
        self.add(course.category)
        for text in (course.title, course.description):
            for token in self._matching_tokens(text):
                self.add(token)

    def freeze(self) -> KeywordIndex:
        return KeywordIndex(entries=tuple(self._entries))

    def _matching_tokens(self, text: str) -> list[str]:
        tokens: list[str] = []
        for raw_token in text.split():
            token = raw_token.strip(_TOKEN_STRIP).casefold()
            if token and any(keyword in token for keyword in self.keywords):
                tokens.append(token)
        return tokens


def build_keyword_index(courses: Iterable[Course], keywords: Iterable[str] = DOMAIN_KEYWORDS) -> KeywordIndex:
    builder = KeywordIndexBuilder(keywords)
    total = 0
    for course in courses:
        builder.add_course(course)
        total += 1
    index = builder.freeze()
    logger.info("Keyword index built from %d courses: %d entries", total, len(index))
    return index
