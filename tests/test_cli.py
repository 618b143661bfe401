from __future__ import annotations

import json

import pytest

from course_chat.app import cli
from course_chat.config import Settings
from course_chat.db.catalog import CourseCatalog


def test_seed_loads_records_wrapper(tmp_path, monkeypatch, sample_courses) -> None:
    db_path = tmp_path / "seeded.db"
    monkeypatch.setattr(cli, "SETTINGS", Settings(catalog_db_path=str(db_path)))
    source = tmp_path / "courses.json"
    source.write_text(json.dumps({"records": sample_courses}), encoding="utf-8")

    assert cli.seed(source) == 3
    assert CourseCatalog(db_path).count() == 3


def test_seed_rejects_non_list_payload(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli, "SETTINGS", Settings(catalog_db_path=str(tmp_path / "seeded.db")))
    source = tmp_path / "bad.json"
    source.write_text('{"bad": "shape"}', encoding="utf-8")

    with pytest.raises(ValueError):
        cli.seed(source)


def test_ask_prints_intent_and_payload(catalog, monkeypatch, capsys) -> None:
    monkeypatch.setattr(
        cli,
        "SETTINGS",
        Settings(catalog_db_path=str(catalog.db_path), ai_fallback_enabled=False, cache_enabled=False),
    )

    cli.ask("cheap courses", page=1)

    output = capsys.readouterr().out
    assert output.startswith("Intent: price_ascending | Term: -")
    assert "Modern JavaScript" in output
