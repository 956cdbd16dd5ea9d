"""CLI tool for docpress: publish .docx drafts from the command line.

Usage:
    python -m docpress.cli process
    python -m docpress.cli process --docs-dir ./doc --sent-dir ./sent
    python -m docpress.cli extract ./doc/draft.docx
    python -m docpress.cli extract ./doc/draft.docx --format markdown
    python -m docpress.cli init-db
    python -m docpress.cli serve --port 8000
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn

from docpress.config import Settings, get_settings
from docpress.errors import DocpressError, PersistenceError
from docpress.logging_config import configure_logging
from docpress.services.failures import report_failure
from docpress.services.normalizer import to_markdown
from docpress.services.pipeline import extract_file
from docpress.services.publisher import publish_directory
from docpress.services.repository import PostRepository

logger = logging.getLogger("docpress.cli")


def _cmd_process(args: argparse.Namespace, settings: Settings) -> int:
    """Publish every draft in the inbound directory."""
    docs_dir = Path(args.docs_dir or settings.DOCS_DIRECTORY)
    sent_dir = Path(args.sent_dir or settings.SENT_DIRECTORY)
    repository = PostRepository.from_settings(settings)

    logger.info("Starting document processor for %s", docs_dir)
    try:
        repository.check_connection()
    except PersistenceError as exc:
        report_failure("N/A", exc.message)
        return 1

    try:
        summary = publish_directory(
            docs_dir,
            sent_dir,
            repository,
            settings.INTERNAL_LINK_RULES,
            site_base_url=settings.SITE_BASE_URL,
            cta_class=settings.CTA_CLASS,
        )
    except FileNotFoundError as exc:
        report_failure("N/A", str(exc))
        return 1
    except OSError as exc:
        report_failure("N/A", f"A critical error occurred: {exc}")
        return 1

    return 0 if summary.failed == 0 else 2


def _cmd_extract(args: argparse.Namespace, settings: Settings) -> int:
    """Extract one draft and print it without storing anything."""
    path = Path(args.file)
    try:
        result = extract_file(
            path,
            settings.INTERNAL_LINK_RULES,
            site_base_url=settings.SITE_BASE_URL,
            cta_class=settings.CTA_CLASS,
        )
    except DocpressError as exc:
        report_failure(path.name, exc.message)
        return 1

    if args.format == "markdown":
        sys.stdout.write(to_markdown(result))
    else:
        print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))
    return 0


def _cmd_init_db(args: argparse.Namespace, settings: Settings) -> int:
    """Create the blogs table."""
    try:
        PostRepository.from_settings(settings).ensure_schema()
    except PersistenceError as exc:
        report_failure("N/A", exc.message)
        return 1
    logger.info("Schema ready.")
    return 0


def _cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    """Run the HTTP API."""
    # log_config=None keeps the handlers installed by configure_logging
    uvicorn.run("docpress.main:app", host=args.host, port=args.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docpress",
        description="Turn .docx drafts into published blog posts.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_process = sub.add_parser("process", help="Publish every draft in the inbound directory")
    p_process.add_argument("--docs-dir", help="Inbound directory (default: DOCS_DIRECTORY)")
    p_process.add_argument("--sent-dir", help="Where published drafts go (default: SENT_DIRECTORY)")
    p_process.set_defaults(handler=_cmd_process)

    p_extract = sub.add_parser("extract", help="Extract one draft and print the result")
    p_extract.add_argument("file", help="Path to a .docx draft")
    p_extract.add_argument("--format", choices=["json", "markdown"], default="json")
    p_extract.set_defaults(handler=_cmd_extract)

    p_init = sub.add_parser("init-db", help="Create the blogs table if missing")
    p_init.set_defaults(handler=_cmd_init_db)

    p_serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(
        settings.ERROR_LOG_FILE, "DEBUG" if args.verbose else settings.LOG_LEVEL
    )
    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
