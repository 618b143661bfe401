from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


def read_records(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of objects, or an object wrapping one under ``records``."""
    parsed = read_json(path)
    if isinstance(parsed, dict) and isinstance(parsed.get("records"), list):
        parsed = parsed["records"]
    if not isinstance(parsed, list):
        raise ValueError(f"{path} must hold a JSON array of objects or {{'records': [...]}}")
    return [row for row in parsed if isinstance(row, dict)]
