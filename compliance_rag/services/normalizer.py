"""
Document Normalizer — turns a StandardRecord into the text that gets
embedded and the small attribute map stored next to it.

Field order in the text body is fixed so that embeddings are reproducible
across ingestion runs.
"""

from __future__ import annotations

from typing import Any, Sequence

from compliance_rag.models.schemas import IndexedDocument, StandardRecord

# Ordered candidate fields, first non-empty wins.
SOURCE_FIELDS: tuple[str, ...] = ("sdo_name", "source")
CLASSIFICATION_FIELDS: tuple[str, ...] = ("ics_classifications", "ics_codes")

UNKNOWN_SOURCE = "unknown"


def first_non_empty(record: StandardRecord, fields: Sequence[str], default: Any = None) -> Any:
    """Return the first truthy attribute of *record* among *fields*."""
    for name in fields:
        value = getattr(record, name, None)
        if value:
            return value
    return default


def build_text(record: StandardRecord) -> str:
    codes = first_non_empty(record, CLASSIFICATION_FIELDS, default=[])
    parts = [
        record.standard_number,
        record.title,
        record.scope or "",
        ", ".join(codes),
        record.category or "",
        record.subcategory or "",
        f"EU Regulation {record.regulation_reference}" if record.regulation_reference else "",
    ]
    return "\n".join(p for p in parts if p)


def build_attributes(record: StandardRecord) -> dict[str, str]:
    return {
        "standardNumber": record.standard_number,
        "title": record.title,
        "source": first_non_empty(record, SOURCE_FIELDS, default=UNKNOWN_SOURCE),
        "hasScope": "true" if record.has_scope else "false",
    }


def normalize(record: StandardRecord) -> tuple[str, dict[str, str]]:
    """Return ``(text, attributes)`` for one record."""
    return build_text(record), build_attributes(record)


def to_indexed_document(record: StandardRecord) -> IndexedDocument:
    text, attributes = normalize(record)
    return IndexedDocument(id=record.id, text=text, attributes=attributes)
