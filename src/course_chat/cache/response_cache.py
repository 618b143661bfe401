from __future__ import annotations

import json
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from course_chat.config import Settings

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "chat:"
DEFAULT_TTL_SECONDS = 60 * 10


def cache_key(question: str) -> str:
    return CACHE_NAMESPACE + question.strip().lower()


class InMemoryResponseCache:
    """Process-local TTL cache. Entries are dropped lazily once expired."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            self._cleanup()
            entry = self._entries.get(key)
        if entry is None:
            return None
        return json.loads(entry[1])

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        expires_at = self._clock() + self.ttl_seconds
        with self._lock:
            self._entries[key] = (expires_at, payload)

    def _cleanup(self) -> None:
        now = self._clock()
        expired = [key for key, (exp, _) in self._entries.items() if exp <= now]
        for key in expired:
            self._entries.pop(key, None)


class SqliteResponseCache:
    """TTL cache persisted in a SQLite file, shared by every worker on the host."""

    def __init__(
        self,
        db_path: Path | str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.db_path = Path(db_path)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS response_cache (
                    cache_key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    expires_at REAL NOT NULL
                )
                """
            )

    def get(self, key: str) -> Any | None:
        now = self._clock()
        with self._connect() as conn:
            conn.execute("DELETE FROM response_cache WHERE expires_at <= ?", (now,))
            row = conn.execute(
                "SELECT payload FROM response_cache WHERE cache_key = ? AND expires_at > ?",
                (key, now),
            ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        expires_at = self._clock() + self.ttl_seconds
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO response_cache (cache_key, payload, expires_at)
                VALUES (?, ?, ?)
                ON CONFLICT(cache_key) DO UPDATE SET
                    payload = excluded.payload,
                    expires_at = excluded.expires_at
                """,
                (key, payload, expires_at),
            )

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                yield conn
        finally:
            conn.close()


def build_response_cache(settings: Settings) -> InMemoryResponseCache | SqliteResponseCache | None:
    if not settings.cache_enabled:
        return None
    if settings.cache_url in {"", "memory"}:
        return InMemoryResponseCache(ttl_seconds=settings.cache_ttl_seconds)
    logger.info("Using SQLite response cache at %s", settings.cache_url)
    return SqliteResponseCache(settings.cache_url, ttl_seconds=settings.cache_ttl_seconds)
