from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from course_chat.errors import StartupConfigError


PROJECT_ROOT = Path(__file__).resolve().parents[2]

_TRUTHY = {"1", "true", "yes", "on"}


def _load_dotenv_file(path: Path) -> None:
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'\"")
        if key and key not in os.environ:
            os.environ[key] = value


_load_dotenv_file(PROJECT_ROOT / ".env")


def _env(name: str, default: str | None = None):
    return field(default_factory=lambda: os.getenv(name, default))


def _env_int(name: str, default: int):
    return field(default_factory=lambda: int(os.getenv(name, str(default))))


def _env_float(name: str, default: float):
    return field(default_factory=lambda: float(os.getenv(name, str(default))))


def _env_bool(name: str, default: bool):
    return field(
        default_factory=lambda: os.getenv(name, str(default)).strip().lower() in _TRUTHY
    )


@dataclass(frozen=True)
class Settings:
    service_name: str = "Course Chat Service"

    catalog_db_path: str | None = _env("CATALOG_DB_PATH")
    catalog_timeout_seconds: float = _env_float("CATALOG_TIMEOUT_SECONDS", 5.0)
    price_page_size: int = _env_int("PRICE_PAGE_SIZE", 10)

    openai_api_key: str | None = _env("OPENAI_API_KEY")
    openai_model: str = _env("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_base_url: str = _env("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_timeout_seconds: float = _env_float("OPENAI_TIMEOUT_SECONDS", 30.0)
    ai_fallback_enabled: bool = _env_bool("AI_FALLBACK_ENABLED", True)

    cache_enabled: bool = _env_bool("CACHE_ENABLED", True)
    cache_url: str = _env("CACHE_URL", "memory")
    cache_ttl_seconds: int = _env_int("CACHE_TTL_SECONDS", 600)

    log_level: str = _env("LOG_LEVEL", "INFO")
    host: str = _env("HOST", "0.0.0.0")
    port: int = _env_int("PORT", 8081)

    def require_catalog_path(self) -> Path:
        if not self.catalog_db_path:
            raise StartupConfigError("CATALOG_DB_PATH is not set; the course catalog is unreachable.")
        return Path(self.catalog_db_path)


SETTINGS = Settings()
