"""
Factories for the Chroma client and the embedding function.

Both are built once from settings and passed into StandardsStore, so tests
can hand in fakes instead.
"""

from __future__ import annotations

import logging

from compliance_rag.config import Settings

logger = logging.getLogger(__name__)


def build_embedding_function(settings: Settings):
    """Return a Chroma embedding function for the configured provider."""
    from chromadb.utils import embedding_functions

    provider = settings.embedding_provider.lower()
    if provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is not set in environment / .env file")
        ef = embedding_functions.OpenAIEmbeddingFunction(
            api_key=settings.openai_api_key,
            model_name=settings.embedding_model,
        )
    elif provider == "sentence_transformers":
        ef = embedding_functions.SentenceTransformerEmbeddingFunction(
            model_name=settings.embedding_model,
        )
    else:
        raise ValueError(f"Unknown embedding provider: {settings.embedding_provider!r}")

    logger.info(f"Initialized embedding function: {settings.embedding_identity}")
    return ef


def build_chroma_client(settings: Settings):
    """HTTP client when CHROMA_HOST is set, otherwise a local persistent store."""
    import chromadb

    if settings.chroma_host:
        logger.info(f"Connecting to Chroma at {settings.chroma_host}:{settings.chroma_port}")
        return chromadb.HttpClient(host=settings.chroma_host, port=settings.chroma_port)

    logger.info(f"Using local Chroma store at {settings.chroma_persist_dir}")
    return chromadb.PersistentClient(path=settings.chroma_persist_dir)
