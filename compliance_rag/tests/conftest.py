"""
Shared fixtures: in-memory stand-ins for the Chroma client, the embedding
function and the chat model, so no test touches the network.
"""

import json
import math
import re
from types import SimpleNamespace

import pytest
from chromadb.errors import NotFoundError

from compliance_rag.config import Settings
from compliance_rag.vector_store.standards_store import StandardsStore


# ── Embedding function ───────────────────────────────────

class FakeEmbeddingFunction:
    """Bag-of-words over a hashed vocabulary; deterministic and offline."""

    dim = 64

    def __call__(self, input):
        return [self._embed(text) for text in input]

    def _embed(self, text):
        vec = [0.0] * self.dim
        for token in re.findall(r"[a-z0-9]+", text.lower()):
            vec[sum(ord(c) for c in token) % self.dim] += 1.0
        return vec


def _cosine_distance(a, b):
    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(y * y for y in b))
    if not na or not nb:
        return 1.0
    return 1.0 - dot / (na * nb)


# ── Chroma client ────────────────────────────────────────

class FakeCollection:
    def __init__(self, name, embedding_function, metadata=None):
        self.name = name
        self.metadata = metadata
        self._ef = embedding_function
        self.rows = {}  # id → (document, metadata, embedding)
        self.add_calls = []
        self.fail_on_add = None  # 1-based add call number that raises

    def add(self, ids, documents, metadatas):
        self.add_calls.append({"ids": ids, "documents": documents, "metadatas": metadatas})
        if self.fail_on_add == len(self.add_calls):
            raise RuntimeError("embedding provider unavailable")
        for doc_id, doc, meta, emb in zip(ids, documents, metadatas, self._ef(documents)):
            self.rows[doc_id] = (doc, meta, emb)

    def count(self):
        return len(self.rows)

    def query(self, query_embeddings, n_results=10, include=None):
        q = query_embeddings[0]
        ranked = sorted(
            ((_cosine_distance(q, emb), doc_id, doc, meta) for doc_id, (doc, meta, emb) in self.rows.items()),
            key=lambda r: (r[0], r[1]),
        )[:n_results]
        return {
            "ids": [[r[1] for r in ranked]],
            "documents": [[r[2] for r in ranked]],
            "metadatas": [[r[3] for r in ranked]],
            "distances": [[r[0] for r in ranked]],
        }


class FakeChromaClient:
    def __init__(self):
        self.collections = {}
        self.deleted = []

    def delete_collection(self, name):
        if name not in self.collections:
            raise NotFoundError(f"Collection {name} does not exist.")
        del self.collections[name]
        self.deleted.append(name)

    def get_or_create_collection(self, name, embedding_function=None, metadata=None):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name, embedding_function, metadata)
        return self.collections[name]

    def get_collection(self, name, embedding_function=None):
        if name not in self.collections:
            raise NotFoundError(f"Collection {name} does not exist.")
        return self.collections[name]


# ── Chat model ───────────────────────────────────────────

class FakeLLM:
    """Answers by citing every standard number listed in the evidence block."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return SimpleNamespace(content=self.content)
        numbers = re.findall(r"^\[\d+\] (.+)$", messages[0].content, re.MULTILINE)
        if not numbers:
            return SimpleNamespace(content="No relevant standard was found in the provided context.")
        return SimpleNamespace(content="Applicable standards: " + "; ".join(numbers))


# ── Fixtures ─────────────────────────────────────────────

@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        standards_dir=str(tmp_path),
        collection_name="standards",
        embedding_provider="test",
        embedding_model="fake-bow",
        top_k=5,
        ingest_batch_size=100,
    )


@pytest.fixture
def chroma_client():
    return FakeChromaClient()


@pytest.fixture
def store(chroma_client, settings):
    return StandardsStore(
        client=chroma_client,
        embedding_function=FakeEmbeddingFunction(),
        collection_name=settings.collection_name,
        embedding_identity=settings.embedding_identity,
    )


@pytest.fixture
def write_json(tmp_path):
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


ISO_14708 = {
    "id": "ISO-14708-1-2014",
    "standardNumber": "ISO 14708-1:2014",
    "title": "Implants for surgery — Active implantable medical devices — Part 1",
    "scope": "This document specifies requirements for active implantable medical devices...",
}


def make_record(i, **overrides):
    record = {
        "id": f"STD-{i:04d}",
        "standardNumber": f"EN {10000 + i}",
        "title": f"Standard number {i}",
    }
    record.update(overrides)
    return record


@pytest.fixture
def iso_record():
    return dict(ISO_14708)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def llm_factory():
    return FakeLLM


@pytest.fixture
def ingestion_service(store, settings):
    from compliance_rag.services.ingestion_service import IngestionService
    return IngestionService(store, settings)


@pytest.fixture
def answer_service_factory(store, settings):
    from compliance_rag.services.answer_service import AnswerService

    def _build(llm=None):
        return AnswerService(store, llm or FakeLLM(), settings)
    return _build
