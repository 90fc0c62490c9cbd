"""Models — corpus records, indexed documents, query results."""

from compliance_rag.models.schemas import (
    StandardRecord,
    IndexedDocument,
    IngestionReport,
    SourceReference,
    QueryResult,
    RetrievedDocument,
)

__all__ = [
    "StandardRecord",
    "IndexedDocument",
    "IngestionReport",
    "SourceReference",
    "QueryResult",
    "RetrievedDocument",
]
