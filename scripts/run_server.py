from __future__ import annotations

from course_chat.app.cli import serve
from course_chat.config import SETTINGS


if __name__ == "__main__":
    serve(SETTINGS.host, SETTINGS.port)
