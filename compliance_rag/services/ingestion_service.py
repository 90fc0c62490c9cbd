"""
Ingestion Service — loads scraped standard files into the vector store.

Steps:
  1. Resolve the input to one file or every data file in the standards dir
  2. Parse each file as a JSON array of StandardRecord (bad files skipped)
  3. Deduplicate by id, then normalize into IndexedDocuments
  4. Drop the previous collection (full replace)
  5. Write documents in fixed-size batches, sequentially

Only one ingestion may run against a collection at a time; nothing here
enforces that.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from compliance_rag.config import Settings, get_settings
from compliance_rag.errors import MalformedInputError, PartialIngestionError
from compliance_rag.models.schemas import IndexedDocument, IngestionReport, StandardRecord
from compliance_rag.services.deduplicator import deduplicate
from compliance_rag.services.normalizer import to_indexed_document
from compliance_rag.utils.hashing import corpus_fingerprint
from compliance_rag.utils.retry import call_with_retry
from compliance_rag.vector_store.standards_store import StandardsStore

logger = logging.getLogger(__name__)


class IngestionService:
    """Full-replace ingestion of the standards corpus."""

    def __init__(self, store: StandardsStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    # ── 1. Resolve input files ───────────────────────────

    def resolve_files(self, file_arg: str = "") -> list[Path]:
        """
        Explicit file → just that file (absolute, or relative to the
        standards dir).  No argument → every data file in the standards dir
        except scraper "not found" placeholders, sorted by name.
        """
        base_dir = Path(self.settings.standards_dir).resolve()

        if file_arg:
            path = Path(file_arg)
            resolved = path if path.is_absolute() else base_dir / path
            if not resolved.is_file():
                raise FileNotFoundError(f"Standards file not found: {resolved}")
            return [resolved]

        if not base_dir.is_dir():
            raise FileNotFoundError(f"Standards directory not found: {base_dir}")

        suffix = self.settings.data_file_suffix
        marker = self.settings.not_found_marker
        files = sorted(
            p for p in base_dir.iterdir()
            if p.is_file() and p.name.endswith(suffix) and marker not in p.name
        )
        logger.debug(f"Resolved {len(files)} data file(s) in {base_dir}")
        return files

    # ── 2. Parse ─────────────────────────────────────────

    @staticmethod
    def read_file(path: Path) -> list[Any]:
        """Return the raw JSON array in *path* or raise MalformedInputError."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedInputError(f"Invalid JSON: {e}", source=path.name) from e

        if not isinstance(data, list):
            raise MalformedInputError(
                f"Top-level value is {type(data).__name__}, expected an array",
                source=path.name,
            )
        return data

    @staticmethod
    def parse_record(raw: Any, source: str = "") -> StandardRecord:
        """Validate one raw entry; missing id / standardNumber / title is malformed."""
        if not isinstance(raw, dict):
            raise MalformedInputError(f"Record is {type(raw).__name__}, expected an object", source=source)
        try:
            return StandardRecord.model_validate(raw)
        except ValidationError as e:
            record_id = raw.get("id") or "<no id>"
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise MalformedInputError(f"Record {record_id} invalid ({fields})", source=source) from e

    def load_records(self, files: list[Path], report: IngestionReport) -> list[StandardRecord]:
        """Concatenate valid records from all files, in file order."""
        records: list[StandardRecord] = []
        for path in files:
            try:
                raw_records = self.read_file(path)
            except MalformedInputError as e:
                logger.warning(f"Skipping file {e.source}: {e}")
                report.files_skipped += 1
                continue

            report.files_read += 1
            report.loaded_count += len(raw_records)
            for raw in raw_records:
                try:
                    records.append(self.parse_record(raw, source=path.name))
                except MalformedInputError as e:
                    logger.warning(f"Skipping record in {e.source}: {e}")
                    report.records_skipped += 1
        return records

    # ── 3. Build documents ───────────────────────────────

    @staticmethod
    def build_documents(records: list[StandardRecord]) -> list[IndexedDocument]:
        unique = deduplicate(records)
        return [to_indexed_document(r) for r in unique.values()]

    # ── 4–5. Replace collection, write batches ───────────

    def write_documents(self, documents: list[IndexedDocument], report: IngestionReport) -> None:
        collection = self.store.reset_collection()

        batch_size = max(1, self.settings.ingest_batch_size)
        total = len(documents)
        committed = 0

        for start in range(0, total, batch_size):
            batch = documents[start : start + batch_size]
            ids = [d.id for d in batch]
            texts = [d.text for d in batch]
            metadatas = [d.attributes for d in batch]
            try:
                committed += call_with_retry(
                    lambda: self.store.add_batch(collection, ids, texts, metadatas),
                    max_retries=self.settings.provider_max_retries,
                    base_delay=self.settings.provider_base_delay,
                    max_delay=self.settings.provider_max_delay,
                    label=f"Batch {report.batches_written + 1}",
                )
            except Exception as e:
                self._handle_partial_failure(committed, total, report, e)

            report.batches_written += 1
            report.documents_written = committed
            logger.info(f"Ingested {committed}/{total}")

    def _handle_partial_failure(
        self, committed: int, total: int, report: IngestionReport, error: Exception
    ) -> None:
        logger.error(
            f"Batch {report.batches_written + 1} failed: {error} — "
            f"{committed}/{total} document(s) committed"
        )
        if self.settings.ingest_rollback_on_failure:
            self.store.delete_collection()
            logger.warning("Rolled back partial corpus; collection is now absent")
            committed = 0
        else:
            logger.warning("Partial corpus left in place; re-run ingestion to replace it")
        raise PartialIngestionError(
            committed=committed,
            pending=total - committed,
            batches_written=report.batches_written,
            reason=str(error),
        ) from error

    # ── Entry point ──────────────────────────────────────

    def ingest(self, file_arg: str = "") -> IngestionReport:
        """Run a full-replace ingestion and return the report."""
        report = IngestionReport(
            collection_name=self.store.collection_name,
            embedding_model=self.store.embedding_identity,
        )

        files = self.resolve_files(file_arg)
        records = self.load_records(files, report)
        documents = self.build_documents(records)
        report.unique_count = len(documents)
        report.corpus_hash = corpus_fingerprint(documents)

        logger.info(
            f"Loaded {report.loaded_count} standards from {len(files)} file(s) "
            f"({report.unique_count} unique after dedup, "
            f"{report.records_skipped} malformed, {report.files_skipped} file(s) skipped)"
        )

        self.write_documents(documents, report)
        logger.info("Ingestion complete")
        return report
