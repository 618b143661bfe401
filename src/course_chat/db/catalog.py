from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from course_chat.data_models import Course
from course_chat.errors import CourseDecodeError, DataSourceError

logger = logging.getLogger(__name__)

COURSE_COLUMNS = "category, title, description, price, created_at"


class CourseCatalog:
    """SQLite-backed course catalog.

    Records are stored loosely typed, the way an external document store would
    hand them over; every read decodes rows into ``Course`` and skips the ones
    that do not fit the schema.
    """

    def __init__(self, db_path: Path | str, timeout_seconds: float = 5.0) -> None:
        self.db_path = Path(db_path)
        self.timeout_seconds = timeout_seconds

    def init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS courses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    category TEXT,
                    title TEXT,
                    description TEXT,
                    price REAL,
                    created_at TEXT
                )
                """
            )
            conn.commit()

    def insert_courses(self, rows: Iterable[dict[str, Any]]) -> int:
        params = [
            (
                row.get("category"),
                row.get("title"),
                row.get("description"),
                row.get("price"),
                _timestamp_text(row.get("createdAt", row.get("created_at"))),
            )
            for row in rows
        ]
        if not params:
            return 0

        with self._connect() as conn:
            conn.executemany(
                f"INSERT INTO courses ({COURSE_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                params,
            )
            conn.commit()
        return len(params)

    def count(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS total FROM courses").fetchone()
        return int(row["total"])

    def all_courses(self) -> list[Course]:
        return self._query(f"SELECT {COURSE_COLUMNS} FROM courses ORDER BY id ASC")

    def find_matching(self, term: str) -> list[Course]:
        """Courses whose category, title or description contains ``term``, ignoring case."""
        courses = self._query(
            f"""
            SELECT {COURSE_COLUMNS}
            FROM courses
            WHERE contains_ci(category, :term)
               OR contains_ci(title, :term)
               OR contains_ci(description, :term)
            ORDER BY id ASC
            """,
            {"term": term},
        )
        logger.info("Courses found for term %r: %d", term, len(courses))
        return courses

    def sorted_by_price(self, *, descending: bool, page: int = 1, page_size: int = 10) -> list[Course]:
        """One page of courses by price; malformed rows are dropped before paging."""
        direction = "DESC" if descending else "ASC"
        offset = (max(page, 1) - 1) * page_size
        courses = self._query(
            f"""
            SELECT {COURSE_COLUMNS}
            FROM courses
            ORDER BY price {direction}, id ASC
            """
        )
        page_courses = courses[offset : offset + page_size]
        logger.info("Courses by price (%s, page %d): %d", direction, page, len(page_courses))
        return page_courses

    def sorted_by_date(self, *, descending: bool) -> list[Course]:
        # Stored timestamps may carry different UTC offsets, so order on the decoded values.
        courses = sorted(self.all_courses(), key=_utc_sort_key, reverse=descending)
        logger.info("Courses by date (%s): %d", "DESC" if descending else "ASC", len(courses))
        return courses

    def _query(self, sql: str, params: Any = ()) -> list[Course]:
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return decode_courses(dict(row) for row in rows)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        except (OSError, sqlite3.Error) as exc:
            raise DataSourceError(f"Error connecting to course catalog: {exc}") from exc

        conn.row_factory = sqlite3.Row
        conn.create_function("contains_ci", 2, _contains_ci, deterministic=True)
        try:
            yield conn
        except sqlite3.Error as exc:
            raise DataSourceError(f"Error retrieving courses: {exc}") from exc
        finally:
            conn.close()


def decode_courses(records: Iterable[dict[str, Any]]) -> list[Course]:
    courses: list[Course] = []
    for record in records:
        try:
            courses.append(Course.from_record(record))
        except CourseDecodeError as exc:
            logger.warning("Skipping malformed course record %r: %s", record.get("title"), exc)
    return courses


def _contains_ci(haystack: Any, needle: Any) -> int:
    if not isinstance(haystack, str) or not isinstance(needle, str):
        return 0
    return int(needle.casefold() in haystack.casefold())


def _timestamp_text(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _utc_sort_key(course: Course) -> datetime:
    created_at = course.created_at
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(timezone.utc)
