"""
Corpus Deduplicator — merges records from every loaded file into one
mapping keyed by standard id.

The first record seen for an id is kept, except that a later record with
scope text replaces a kept record without one.
"""

from __future__ import annotations

import logging
from typing import Iterable

from compliance_rag.models.schemas import StandardRecord

logger = logging.getLogger(__name__)


def deduplicate(records: Iterable[StandardRecord]) -> dict[str, StandardRecord]:
    """
    Resolve duplicate ids in input order.

    A replaced record keeps the slot of the id's first appearance, so the
    output order is stable for a given input order.
    """
    seen: dict[str, StandardRecord] = {}
    replaced = 0
    for record in records:
        existing = seen.get(record.id)
        if existing is None:
            seen[record.id] = record
        elif not existing.has_scope and record.has_scope:
            seen[record.id] = record
            replaced += 1

    if replaced:
        logger.debug(f"Dedup: {replaced} record(s) replaced by a later entry with scope text")
    return seen
