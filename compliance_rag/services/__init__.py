"""Services — normalization, deduplication, ingestion, answering."""

from compliance_rag.services.normalizer import normalize
from compliance_rag.services.deduplicator import deduplicate
from compliance_rag.services.ingestion_service import IngestionService
from compliance_rag.services.answer_service import AnswerService

__all__ = ["normalize", "deduplicate", "IngestionService", "AnswerService"]
