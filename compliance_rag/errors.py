"""
Error taxonomy.

Per-item ingestion problems (MalformedInputError) are absorbed and counted
by the ingestion service.  Everything else propagates to its caller; the
HTTP layer turns it into a generic 500.
"""

from __future__ import annotations


class ComplianceRAGError(Exception):
    """Base class for all pipeline errors."""


class MalformedInputError(ComplianceRAGError):
    """A data file or record does not have the expected shape."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


# ── Query side ───────────────────────────────────────────


class RetrievalError(ComplianceRAGError):
    """The vector index could not serve a query."""


class CollectionNotFoundError(RetrievalError):
    """The corpus collection does not exist (ingestion never ran)."""

    def __init__(self, collection_name: str):
        super().__init__(
            f"Collection '{collection_name}' not found — run ingestion first"
        )
        self.collection_name = collection_name


class ConfigurationMismatchError(RetrievalError):
    """The corpus was embedded with a different model than the one configured."""

    def __init__(self, stored: str, configured: str):
        super().__init__(
            f"Corpus was built with embedding model '{stored}' "
            f"but '{configured}' is configured"
        )
        self.stored = stored
        self.configured = configured


class GenerationError(ComplianceRAGError):
    """The answer model could not produce a completion."""


class AnswerGenerationError(GenerationError):
    """The chat completion call for a single question failed."""


# ── Ingestion side ───────────────────────────────────────


class PartialIngestionError(ComplianceRAGError):
    """A batch write failed mid-run; the index may hold a partial corpus."""

    def __init__(self, committed: int, pending: int, batches_written: int, reason: str = ""):
        message = (
            f"Ingestion aborted after {batches_written} batch(es): "
            f"{committed} document(s) committed, {pending} pending"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.committed = committed
        self.pending = pending
        self.batches_written = batches_written
