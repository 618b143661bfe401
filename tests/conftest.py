from __future__ import annotations

import pytest

from course_chat.db.catalog import CourseCatalog

SAMPLE_COURSES = [
    {
        "category": "Backend",
        "title": "Python APIs with FastAPI",
        "description": "Build backend services in Python.",
        "price": 50,
        "createdAt": "2024-03-01T10:00:00",
    },
    {
        "category": "Frontend",
        "title": "Modern JavaScript",
        "description": "Frontend development for the web.",
        "price": 10,
        "createdAt": "2023-01-15T09:30:00",
    },
    {
        "category": "Data Science",
        "title": "Statistics Bootcamp",
        "description": "Probability, regression and inference.",
        "price": 30,
        "createdAt": "2024-07-20T12:00:00",
    },
]


@pytest.fixture
def sample_courses() -> list[dict]:
    return [dict(row) for row in SAMPLE_COURSES]


@pytest.fixture
def catalog(tmp_path) -> CourseCatalog:
    catalog = CourseCatalog(tmp_path / "courses.db")
    catalog.init_schema()
    catalog.insert_courses(SAMPLE_COURSES)
    return catalog
