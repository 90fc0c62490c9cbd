"""
Wiring — build the store and services from settings.

Clients are created here once and handed to the services, which never
construct their own.  Tests skip this module and pass fakes directly.
"""

from __future__ import annotations

from compliance_rag.config import Settings, get_settings
from compliance_rag.services.answer_service import AnswerService
from compliance_rag.services.ingestion_service import IngestionService
from compliance_rag.services.llm_service import build_llm
from compliance_rag.vector_store.embeddings import build_chroma_client, build_embedding_function
from compliance_rag.vector_store.standards_store import StandardsStore


def build_store(settings: Settings | None = None) -> StandardsStore:
    settings = settings or get_settings()
    return StandardsStore(
        client=build_chroma_client(settings),
        embedding_function=build_embedding_function(settings),
        collection_name=settings.collection_name,
        embedding_identity=settings.embedding_identity,
    )


def build_ingestion_service(settings: Settings | None = None) -> IngestionService:
    settings = settings or get_settings()
    return IngestionService(build_store(settings), settings)


def build_answer_service(settings: Settings | None = None) -> AnswerService:
    settings = settings or get_settings()
    return AnswerService(build_store(settings), build_llm(settings), settings)
