from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse

from course_chat.cache.response_cache import (
    InMemoryResponseCache,
    SqliteResponseCache,
    build_response_cache,
    cache_key,
)
from course_chat.config import SETTINGS, Settings
from course_chat.db.catalog import CourseCatalog
from course_chat.errors import DataSourceError, QuestionValidationError, StartupConfigError
from course_chat.llm.chat_completion import ChatCompletionClient
from course_chat.nlp.intent import IntentClassifier
from course_chat.nlp.keyword_index import KeywordIndex, build_keyword_index
from course_chat.routing.query_router import QueryRouter
from course_chat.utils.logging import configure_logging
from course_chat.web.exception_handlers import setup_exception_handlers

logger = logging.getLogger(__name__)


@dataclass
class RuntimeState:
    router: QueryRouter | None = None
    cache: InMemoryResponseCache | SqliteResponseCache | None = None
    index: KeywordIndex = field(default_factory=KeywordIndex)


STATE = RuntimeState()


def build_runtime(settings: Settings) -> RuntimeState:
    catalog = CourseCatalog(settings.require_catalog_path(), timeout_seconds=settings.catalog_timeout_seconds)
    try:
        catalog.init_schema()
        courses = catalog.all_courses()
    except DataSourceError as exc:
        raise StartupConfigError(f"Course catalog unavailable at startup: {exc.message}") from exc

    index = build_keyword_index(courses)
    interpreter = ChatCompletionClient.from_settings(settings) if settings.ai_fallback_enabled else None
    router = QueryRouter(
        catalog=catalog,
        classifier=IntentClassifier(index),
        interpreter=interpreter,
        price_page_size=settings.price_page_size,
    )
    return RuntimeState(router=router, cache=build_response_cache(settings), index=index)


def install_runtime(runtime: RuntimeState) -> None:
    STATE.router = runtime.router
    STATE.cache = runtime.cache
    STATE.index = runtime.index


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the keyword index before the first request is accepted."""
    configure_logging()
    install_runtime(build_runtime(SETTINGS))
    logger.info("%s ready with %d index entries", SETTINGS.service_name, len(STATE.index))
    yield


app = FastAPI(title=SETTINGS.service_name, version="1.0.0", lifespan=lifespan)
setup_exception_handlers(app)


@app.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return f"{SETTINGS.service_name} is running!"


@app.get("/chat")
def chat(
    question: Optional[str] = None,
    page: int = Query(default=1, ge=1),
) -> Any:
    if question is None or not question.strip():
        raise QuestionValidationError("Missing question parameter")

    router = STATE.router
    if router is None:
        raise DataSourceError("Course catalog is not initialised")

    key = _response_cache_key(question, page)
    if STATE.cache is not None:
        cached = STATE.cache.get(key)
        if cached is not None:
            logger.info("Cache hit for %s", key)
            return cached

    result = router.route(question, page=page)
    payload = result.to_payload()

    if STATE.cache is not None:
        STATE.cache.set(key, payload)
    return payload


def _response_cache_key(question: str, page: int) -> str:
    key = cache_key(question)
    if page > 1:
        key = f"{key}#page={page}"
    return key
