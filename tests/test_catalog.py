from __future__ import annotations

import logging

import pytest

from course_chat.db.catalog import CourseCatalog
from course_chat.errors import DataSourceError


def test_find_matching_is_case_insensitive_across_fields(catalog) -> None:
    courses = catalog.find_matching("PYTHON")

    assert [course.title for course in courses] == ["Python APIs with FastAPI"]


def test_find_matching_searches_description(catalog) -> None:
    courses = catalog.find_matching("regression")

    assert [course.category for course in courses] == ["Data Science"]


def test_find_matching_treats_term_as_literal_text(catalog) -> None:
    assert catalog.find_matching("c++ (advanced") == []
    assert catalog.find_matching("%") == []
    assert catalog.find_matching(".*") == []


def test_sorted_by_price_both_directions(catalog) -> None:
    assert [c.price for c in catalog.sorted_by_price(descending=False)] == [10, 30, 50]
    assert [c.price for c in catalog.sorted_by_price(descending=True)] == [50, 30, 10]


def test_sorted_by_price_pages(catalog) -> None:
    assert [c.price for c in catalog.sorted_by_price(descending=True, page=1, page_size=2)] == [50, 30]
    assert [c.price for c in catalog.sorted_by_price(descending=True, page=2, page_size=2)] == [10]
    assert catalog.sorted_by_price(descending=True, page=3, page_size=2) == []


def test_sorted_by_date_both_directions(catalog) -> None:
    newest_first = [c.title for c in catalog.sorted_by_date(descending=True)]

    assert newest_first == ["Statistics Bootcamp", "Python APIs with FastAPI", "Modern JavaScript"]
    assert [c.title for c in catalog.sorted_by_date(descending=False)] == newest_first[::-1]


def test_malformed_records_are_skipped_with_warning(catalog, caplog) -> None:
    catalog.insert_courses(
        [
            {"category": None, "title": "No category", "description": "", "price": 5, "createdAt": "2024-01-01"},
            {"category": "Web", "title": "Free web", "description": "", "price": "free", "createdAt": "2024-01-01"},
        ]
    )

    with caplog.at_level(logging.WARNING, logger="course_chat.db.catalog"):
        courses = catalog.all_courses()

    assert catalog.count() == 5
    assert len(courses) == 3
    assert "Skipping malformed course record" in caplog.text


def test_missing_table_raises_data_source_error(tmp_path) -> None:
    empty = CourseCatalog(tmp_path / "empty.db")

    with pytest.raises(DataSourceError) as exc_info:
        empty.all_courses()
    assert "no such table" in exc_info.value.message


def test_sorted_by_date_compares_instants_across_offsets(tmp_path) -> None:
    catalog = CourseCatalog(tmp_path / "offsets.db")
    catalog.init_schema()
    catalog.insert_courses(
        [
            {"category": "Web", "title": "earlier", "description": "", "price": 1, "createdAt": "2024-01-01T10:00:00+05:00"},
            {"category": "Web", "title": "later", "description": "", "price": 2, "createdAt": "2024-01-01T06:00:00Z"},
            {"category": "Web", "title": "naive", "description": "", "price": 3, "createdAt": "2024-01-01T05:30:00"},
        ]
    )

    assert [c.title for c in catalog.sorted_by_date(descending=True)] == ["later", "naive", "earlier"]
    assert [c.title for c in catalog.sorted_by_date(descending=False)] == ["earlier", "naive", "later"]


def test_price_pages_skip_malformed_rows_before_slicing(tmp_path) -> None:
    catalog = CourseCatalog(tmp_path / "paged.db")
    catalog.init_schema()
    catalog.insert_courses(
        [
            {"category": "Web", "title": "broken", "description": None, "price": 1, "createdAt": "2024-01-01"},
            {"category": "Web", "title": "t0", "description": "", "price": 2, "createdAt": "2024-01-01"},
            {"category": "Web", "title": "t1", "description": "", "price": 3, "createdAt": "2024-01-01"},
            {"category": "Web", "title": "t2", "description": "", "price": 4, "createdAt": "2024-01-01"},
        ]
    )

    assert [c.title for c in catalog.sorted_by_price(descending=False, page=1, page_size=2)] == ["t0", "t1"]
    assert [c.title for c in catalog.sorted_by_price(descending=False, page=2, page_size=2)] == ["t2"]
