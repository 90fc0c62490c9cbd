"""
Data schemas for the standards corpus and the answer pipeline.

Input records arrive from an external scraper as camelCase JSON, so every
model accepts both the wire alias and the Python field name.
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Ingestion input ──────────────────────────────────────


class StandardRecord(BaseModel):
    """One regulatory standard as produced by the scraper."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    standard_number: str = Field(alias="standardNumber")
    title: str
    scope: Optional[str] = None
    source: Optional[str] = None
    sdo_name: Optional[str] = Field(default=None, alias="sdoName")
    ics_classifications: Optional[list[str]] = Field(default=None, alias="icsClassifications")
    ics_codes: Optional[list[str]] = Field(default=None, alias="icsCodes")
    category: Optional[str] = None
    subcategory: Optional[str] = None
    regulation_reference: Optional[str] = Field(default=None, alias="regulationReference")

    @field_validator("id", "standard_number", "title")
    @classmethod
    def _required_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    # Optional fields never reject a record: scalars become text, anything
    # else is dropped.
    @field_validator(
        "scope", "source", "sdo_name", "category", "subcategory", "regulation_reference",
        mode="before",
    )
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        return None

    @field_validator("ics_classifications", "ics_codes", mode="before")
    @classmethod
    def _coerce_codes(cls, value: Any) -> Optional[list[str]]:
        if isinstance(value, (str, int, float)):
            return [str(value)]
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value if isinstance(v, (str, int, float)) and str(v)]
        return None

    @property
    def has_scope(self) -> bool:
        return bool(self.scope)


# ── Indexed corpus ───────────────────────────────────────


class IndexedDocument(BaseModel):
    """The unit stored in the vector index: one per unique standard id."""
    id: str
    text: str
    attributes: dict[str, str]


class IngestionReport(BaseModel):
    """Summary of one ingestion run."""

    model_config = ConfigDict(populate_by_name=True)

    loaded_count: int = Field(default=0, alias="loadedCount")
    unique_count: int = Field(default=0, alias="uniqueCount")
    batches_written: int = Field(default=0, alias="batchesWritten")
    documents_written: int = Field(default=0, alias="documentsWritten")
    files_read: int = Field(default=0, alias="filesRead")
    files_skipped: int = Field(default=0, alias="filesSkipped")
    records_skipped: int = Field(default=0, alias="recordsSkipped")
    collection_name: str = Field(default="", alias="collectionName")
    embedding_model: str = Field(default="", alias="embeddingModel")
    corpus_hash: str = Field(default="", alias="corpusHash")


# ── Query output ─────────────────────────────────────────


class SourceReference(BaseModel):
    """A retrieved standard, in index rank order."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    standard_number: str = Field(alias="standardNumber")
    title: str = ""
    relevance: float  # 1 - distance; higher is better, not clamped to [0, 1]


class QueryResult(BaseModel):
    answer: str = ""
    sources: list[SourceReference] = []


class RetrievedDocument(BaseModel):
    """Raw nearest-neighbour hit as returned by the vector store."""
    id: str
    document: str = ""
    attributes: dict[str, str] = {}
    distance: Optional[float] = None
