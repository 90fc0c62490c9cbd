"""
Compliance Standards RAG — Main Entry Point

Ingest the scraped standards (whole directory or one file):
    python -m compliance_rag ingest
    python -m compliance_rag ingest iso-standards.json

Ask a question from the command line:
    python -m compliance_rag ask "Which standards apply to an implantable cardiac device?"

Run as an API server:
    python -m compliance_rag serve
    # or: uvicorn compliance_rag.api:app --port 3000
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from compliance_rag.config import get_settings
from compliance_rag.errors import ComplianceRAGError, PartialIngestionError
from compliance_rag.models.schemas import IngestionReport, QueryResult
from compliance_rag.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def run_ingest(file_arg: str = "") -> IngestionReport:
    """Run a full-replace ingestion and return the report."""
    from compliance_rag.factory import build_ingestion_service

    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info("=" * 60)
    logger.info("  STANDARDS INGESTION")
    logger.info(f"  Source: {file_arg or settings.standards_dir} | Collection: {settings.collection_name}")
    logger.info("=" * 60)

    report = build_ingestion_service(settings).ingest(file_arg)
    _print_report(report)
    return report


def _print_report(report: IngestionReport) -> None:
    logger.info("-" * 60)
    logger.info(f"  Files read:      {report.files_read} ({report.files_skipped} skipped)")
    logger.info(f"  Records loaded:  {report.loaded_count} ({report.records_skipped} malformed)")
    logger.info(f"  Unique:          {report.unique_count}")
    logger.info(f"  Batches written: {report.batches_written}")
    logger.info(f"  Embedding model: {report.embedding_model}")
    logger.info(f"  Corpus hash:     {report.corpus_hash[:16]}...")
    logger.info("-" * 60)


def run_ask(question: str) -> QueryResult:
    """Answer one question against the current corpus."""
    from compliance_rag.factory import build_answer_service

    settings = get_settings()
    setup_logging(settings.log_level)
    return asyncio.run(build_answer_service(settings).answer(question))


def serve(host: str | None = None, port: int | None = None) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    host = host or settings.host
    port = port or settings.port
    logger.info(f"RAG API running on http://{host}:{port}")
    uvicorn.run("compliance_rag.api:app", host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compliance-rag",
        description="Answer compliance questions from a corpus of regulatory standards",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_ingest = sub.add_parser("ingest", help="Load standards into the vector store (full replace)")
    p_ingest.add_argument(
        "file",
        nargs="?",
        default="",
        help="Single file to ingest (absolute, or a name in STANDARDS_DIR); default: whole directory",
    )

    p_ask = sub.add_parser("ask", help="Ask a question against the ingested corpus")
    p_ask.add_argument("question")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
        return 0

    try:
        if args.command == "ingest":
            run_ingest(args.file)
        else:
            result = run_ask(args.question)
            print(json.dumps(result.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    except PartialIngestionError as e:
        logger.error(f"{e} — re-run ingestion to rebuild the corpus")
        return 2
    except (ComplianceRAGError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
