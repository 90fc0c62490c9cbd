"""
Hashing utilities for corpus reproducibility checks.
"""

from __future__ import annotations

import hashlib
import json
from typing import Iterable

from compliance_rag.models.schemas import IndexedDocument


def sha256_hash(content: str | bytes) -> str:
    """Return the SHA-256 hex digest of the given content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def corpus_fingerprint(documents: Iterable[IndexedDocument]) -> str:
    """
    Order-independent fingerprint of a corpus snapshot.
    Two ingestion runs that write the same ids, texts and attributes
    produce the same digest.
    """
    rows = sorted(
        json.dumps([d.id, d.text, d.attributes], sort_keys=True, ensure_ascii=False)
        for d in documents
    )
    return sha256_hash("\n".join(rows))
