"""
Standards Store — the ChromaDB collection holding the standards corpus.

One named collection per corpus.  Ingestion drops and recreates it (full
replace); queries open it read-only.  The embedding model identity is kept
in the collection metadata so a query-time model mismatch fails fast
instead of silently degrading relevance.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from chromadb.errors import NotFoundError

from compliance_rag.errors import CollectionNotFoundError, ConfigurationMismatchError
from compliance_rag.models.schemas import RetrievedDocument

logger = logging.getLogger(__name__)

EMBEDDING_MODEL_KEY = "embedding_model"
DISTANCE_SPACE = "cosine"


class StandardsStore:
    """Thin wrapper over a Chroma client scoped to one collection."""

    def __init__(
        self,
        client: Any,
        embedding_function: Any,
        collection_name: str = "standards",
        embedding_identity: str = "",
    ):
        self.client = client
        self.embedding_function = embedding_function
        self.collection_name = collection_name
        self.embedding_identity = embedding_identity

    # ── Write side (ingestion) ───────────────────────────

    def delete_collection(self) -> bool:
        """Drop the collection.  Returns False when there was nothing to drop."""
        try:
            self.client.delete_collection(name=self.collection_name)
        except (NotFoundError, ValueError):
            logger.debug(f"No prior collection '{self.collection_name}' to delete")
            return False
        logger.info(f"Deleted collection '{self.collection_name}'")
        return True

    def reset_collection(self) -> Any:
        """Delete any prior snapshot and create an empty collection."""
        self.delete_collection()
        collection = self.client.get_or_create_collection(
            name=self.collection_name,
            embedding_function=self.embedding_function,
            metadata={
                "hnsw:space": DISTANCE_SPACE,
                EMBEDDING_MODEL_KEY: self.embedding_identity,
            },
        )
        logger.info(
            f"Created collection '{self.collection_name}' "
            f"(embedding model: {self.embedding_identity or 'unspecified'})"
        )
        return collection

    @staticmethod
    def add_batch(
        collection: Any,
        ids: Sequence[str],
        documents: Sequence[str],
        metadatas: Sequence[dict[str, str]],
    ) -> int:
        """Append one batch; the three sequences must be position-aligned."""
        if not (len(ids) == len(documents) == len(metadatas)):
            raise ValueError(
                f"Misaligned batch: {len(ids)} ids, {len(documents)} documents, "
                f"{len(metadatas)} metadatas"
            )
        collection.add(ids=list(ids), documents=list(documents), metadatas=list(metadatas))
        return len(ids)

    # ── Read side (queries) ──────────────────────────────

    def open_collection(self) -> Any:
        """Open the existing collection or raise CollectionNotFoundError."""
        try:
            collection = self.client.get_collection(
                name=self.collection_name,
                embedding_function=self.embedding_function,
            )
        except (NotFoundError, ValueError) as e:
            raise CollectionNotFoundError(self.collection_name) from e

        self._check_embedding_identity(collection)
        return collection

    def _check_embedding_identity(self, collection: Any) -> None:
        stored = (getattr(collection, "metadata", None) or {}).get(EMBEDDING_MODEL_KEY)
        if not stored:
            logger.warning(
                f"Collection '{self.collection_name}' has no stored embedding model; "
                f"assuming it matches '{self.embedding_identity}'"
            )
            return
        if self.embedding_identity and stored != self.embedding_identity:
            raise ConfigurationMismatchError(stored=stored, configured=self.embedding_identity)

    def embed_query(self, text: str) -> list[float]:
        """Embed a question with the same function used for the corpus."""
        vectors = self.embedding_function([text])
        return [float(x) for x in vectors[0]]

    @staticmethod
    def query(collection: Any, query_embedding: Sequence[float], top_k: int = 5) -> list[RetrievedDocument]:
        """Nearest neighbours in index rank order (ascending distance)."""
        results = collection.query(
            query_embeddings=[list(query_embedding)],
            n_results=top_k,
            include=["documents", "metadatas", "distances"],
        )

        ids = _first_row(results, "ids")
        docs = _first_row(results, "documents")
        metas = _first_row(results, "metadatas")
        distances = _first_row(results, "distances")

        hits = []
        for i, doc_id in enumerate(ids[:top_k]):
            meta = metas[i] if i < len(metas) and metas[i] else {}
            hits.append(RetrievedDocument(
                id=doc_id,
                document=(docs[i] if i < len(docs) else "") or "",
                attributes={k: str(v) for k, v in meta.items()},
                distance=distances[i] if i < len(distances) else None,
            ))
        return hits


def _first_row(results: Any, key: str) -> list[Any]:
    """Chroma returns one row per query text; we always send exactly one."""
    rows = results.get(key) or []
    return list(rows[0] or []) if rows else []
