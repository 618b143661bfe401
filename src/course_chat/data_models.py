from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from course_chat.errors import CourseDecodeError

TEXT_FIELDS = ("category", "title", "description")


@dataclass(frozen=True)
class Course:
    category: str
    title: str
    description: str
    price: float
    created_at: datetime

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Course":
        """Decode a raw catalog record, raising CourseDecodeError on a schema mismatch.

        Accepts ``createdAt`` or ``created_at`` for the timestamp, either as a
        ``datetime`` or an ISO-8601 string.
        """
        values: dict[str, Any] = {}
        for name in TEXT_FIELDS:
            value = record.get(name)
            if not isinstance(value, str):
                raise CourseDecodeError(f"field '{name}' must be a string, got {type(value).__name__}")
            values[name] = value

        price = record.get("price")
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise CourseDecodeError(f"field 'price' must be a number, got {type(price).__name__}")

        raw_created = record.get("createdAt", record.get("created_at"))
        values["price"] = float(price)
        values["created_at"] = _parse_timestamp(raw_created)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "createdAt": self.created_at.isoformat(),
        }


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise CourseDecodeError(f"field 'createdAt' is not an ISO-8601 timestamp: {value!r}") from exc
    raise CourseDecodeError(f"field 'createdAt' must be a timestamp, got {type(value).__name__}")


@dataclass
class RouteResult:
    intent: str
    courses: list[Course] = field(default_factory=list)
    message: str | None = None
    term: str | None = None

    def to_payload(self) -> list[dict[str, Any]] | dict[str, str]:
        if self.message is not None:
            return {"response": self.message}
        return [course.to_dict() for course in self.courses]
