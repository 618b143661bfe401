from __future__ import annotations

import argparse
import json
from pathlib import Path

from course_chat.config import SETTINGS
from course_chat.utils.logging import configure_logging


def seed(path: Path) -> int:
    from course_chat.db.catalog import CourseCatalog
    from course_chat.utils.io import read_records

    catalog = CourseCatalog(SETTINGS.require_catalog_path(), timeout_seconds=SETTINGS.catalog_timeout_seconds)
    catalog.init_schema()
    return catalog.insert_courses(read_records(path))


def show_index() -> None:
    from course_chat.web.server import build_runtime

    runtime = build_runtime(SETTINGS)
    for entry in runtime.index:
        print(entry)


def ask(question: str, page: int) -> None:
    from course_chat.web.server import build_runtime

    runtime = build_runtime(SETTINGS)
    router = runtime.router
    prediction = router.classifier.predict(question)
    print(f"Intent: {prediction.intent.value} | Term: {prediction.term or '-'}")
    result = router.execute(prediction, question, page=page)
    print(json.dumps(result.to_payload(), indent=2, ensure_ascii=False))


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("course_chat.web.server:app", host=host, port=port)


def main() -> None:
    parser = argparse.ArgumentParser(description="Course Chat Service")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Load courses from a JSON file into the catalog")
    seed_parser.add_argument("path")

    subparsers.add_parser("build-index", help="Print the keyword index built from the catalog")

    ask_parser = subparsers.add_parser("ask", help="Classify and answer one question")
    ask_parser.add_argument("question")
    ask_parser.add_argument("--page", type=int, default=1)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", default=SETTINGS.host)
    serve_parser.add_argument("--port", type=int, default=SETTINGS.port)

    args = parser.parse_args()
    configure_logging()

    if args.command == "seed":
        inserted = seed(Path(args.path))
        print(f"Inserted {inserted} courses into {SETTINGS.catalog_db_path}")
    elif args.command == "build-index":
        show_index()
    elif args.command == "ask":
        ask(args.question, args.page)
    elif args.command == "serve":
        serve(args.host, args.port)


if __name__ == "__main__":
    main()
