from __future__ import annotations

import sys
from pathlib import Path

from course_chat.app.cli import seed
from course_chat.config import SETTINGS
from course_chat.utils.logging import configure_logging


if __name__ == "__main__":
    configure_logging()
    source = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data/courses.json")
    inserted = seed(source)
    print(f"Inserted {inserted} courses into {SETTINGS.catalog_db_path}")
