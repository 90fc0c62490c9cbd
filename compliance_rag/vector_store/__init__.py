"""Vector store — Chroma collection wrapper and client factories."""

from compliance_rag.vector_store.standards_store import StandardsStore
from compliance_rag.vector_store.embeddings import build_chroma_client, build_embedding_function

__all__ = ["StandardsStore", "build_chroma_client", "build_embedding_function"]
