"""CLI for indexing text files and querying them by term."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson
from pydantic import ValidationError

from tfidf_engine.config import Settings
from tfidf_engine.observability.logging import configure_logging
from tfidf_engine.observability.tracing import init_tracing
from tfidf_engine.search.analyzers import get_analyzer
from tfidf_engine.search.index_store import IndexStore
from tfidf_engine.search.models import DocumentId
from tfidf_engine.search.ranking import RelevanceRanker


logger = logging.getLogger(__name__)

MODES = ("lookup", "relevance", "scores")


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfidf-engine",
        description="Index text files and rank them by tf-idf for a term",
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        metavar="FILE",
        help="Text files to index; each file's path is its document id",
    )
    parser.add_argument(
        "--term",
        required=True,
        help="Term to look up",
    )
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="relevance",
        help="lookup: matching ids; relevance: ranked ids; scores: ranked ids with tf-idf (default: relevance)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of results (lookup mode truncates the sorted id list)",
    )
    parser.add_argument(
        "--encoding",
        help="File encoding (defaults to TFIDF_INPUT_ENCODING)",
    )
    return parser


def index_files(store: IndexStore, paths: Sequence[Path], *, encoding: str) -> None:
    for path in paths:
        with path.open(encoding=encoding) as handle:
            store.add_document(DocumentId(str(path)), handle)
    logger.info("Indexed %d documents", len(store), extra={"documents": len(store)})


def run_query(store: IndexStore, term: str, *, mode: str, limit: int | None) -> dict[str, object]:
    payload: dict[str, object] = {"term": term, "mode": mode, "documents": len(store)}
    if mode == "lookup":
        matches = sorted(store.index_lookup(term))
        if limit is not None:
            matches = matches[:limit]
        payload["results"] = [str(doc_id) for doc_id in matches]
        return payload

    ranked = RelevanceRanker(store).ranked(term, limit=limit)
    if mode == "scores":
        payload["results"] = [entry.to_dict() for entry in ranked]
    else:
        payload["results"] = [str(entry.doc_id) for entry in ranked]
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as exc:
        sys.stderr.write(f"Invalid configuration: {exc}\n")
        return 1

    configure_logging(settings.log_level, settings.log_json)
    if settings.tracing_enabled:
        init_tracing(settings.service_name)

    if args.limit is not None and args.limit < 0:
        parser.error("--limit must be >= 0")

    try:
        store = IndexStore(get_analyzer(settings.default_analyzer))
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    try:
        index_files(store, args.files, encoding=args.encoding or settings.input_encoding)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read document: %s", exc, extra={"path": getattr(exc, "filename", None)})
        return 1

    payload = run_query(store, args.term, mode=args.mode, limit=args.limit)
    sys.stdout.write(orjson.dumps(payload).decode("utf-8") + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
