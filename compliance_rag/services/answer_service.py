"""
Answer Service — retrieval-augmented answers to compliance questions.

Per question:
  1. embed the question (same embedding function as the corpus)
  2. fetch the top-K nearest standards
  3. ask the chat model to answer from that evidence only

The three calls depend on each other and are awaited in sequence.  The
service holds no per-request state, so concurrent questions are safe.
"""

from __future__ import annotations

import asyncio
import logging
import time

from langchain_core.messages import HumanMessage, SystemMessage

from compliance_rag.config import Settings, get_settings
from compliance_rag.errors import AnswerGenerationError, RetrievalError
from compliance_rag.models.schemas import QueryResult, RetrievedDocument, SourceReference
from compliance_rag.utils.retry import acall_with_retry
from compliance_rag.vector_store.standards_store import StandardsStore

logger = logging.getLogger(__name__)

EVIDENCE_SEPARATOR = "\n\n---\n\n"

SYSTEM_PROMPT_TEMPLATE = """You are a regulatory compliance assistant for medical device manufacturers.
Given the user's question about their device, identify which standards apply and why.
Use ONLY the provided standards context. Cite standards by number.
If the context doesn't contain relevant standards, say so.

<standards>
{evidence}
</standards>"""


def build_evidence_block(hits: list[RetrievedDocument]) -> str:
    """Render hits as ``[rank] number\\ntext`` entries, rank starting at 1."""
    return EVIDENCE_SEPARATOR.join(
        f"[{rank}] {hit.attributes.get('standardNumber') or hit.id}\n{hit.document}"
        for rank, hit in enumerate(hits, start=1)
    )


def build_system_prompt(evidence: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(evidence=evidence)


def to_source(hit: RetrievedDocument) -> SourceReference:
    return SourceReference(
        id=hit.id,
        standard_number=hit.attributes.get("standardNumber") or hit.id,
        title=hit.attributes.get("title") or "",
        relevance=1 - (hit.distance or 0),
    )


class AnswerService:
    """Question → QueryResult over the current corpus snapshot."""

    def __init__(self, store: StandardsStore, llm, settings: Settings | None = None):
        self.store = store
        self.llm = llm
        self.settings = settings or get_settings()

    async def retrieve(self, question: str) -> list[RetrievedDocument]:
        """Steps 1–2: embed the question and fetch the top-K hits."""
        collection = await asyncio.to_thread(self.store.open_collection)
        try:
            embedding = await asyncio.to_thread(self.store.embed_query, question)
            hits = await asyncio.to_thread(
                self.store.query, collection, embedding, self.settings.top_k
            )
        except RetrievalError:
            raise
        except Exception as e:
            raise RetrievalError(f"Vector search failed: {e}") from e

        logger.debug(f"Retrieved {len(hits)} standard(s): {[h.id for h in hits]}")
        return hits

    async def generate(self, question: str, evidence: str) -> str:
        """Step 3: one chat completion grounded in *evidence*."""
        messages = [
            SystemMessage(content=build_system_prompt(evidence)),
            HumanMessage(content=question),
        ]
        t0 = time.perf_counter()
        try:
            response = await acall_with_retry(
                lambda: self.llm.ainvoke(messages),
                max_retries=self.settings.provider_max_retries,
                base_delay=self.settings.provider_base_delay,
                max_delay=self.settings.provider_max_delay,
                label="Answer generation",
            )
        except Exception as e:
            raise AnswerGenerationError(f"Answer model call failed: {e}") from e

        content = getattr(response, "content", None) or ""
        if not isinstance(content, str):
            content = str(content)
        logger.info(
            f"[LLM] Response received in {time.perf_counter() - t0:.2f}s | "
            f"{len(content)} chars"
        )
        if not content.strip():
            logger.warning("[LLM] Empty completion; returning empty answer")
        return content

    async def answer(self, question: str) -> QueryResult:
        """Answer *question* from the top-K retrieved standards."""
        logger.info(f"Question: {question[:120]!r}")
        hits = await self.retrieve(question)
        answer = await self.generate(question, build_evidence_block(hits))
        return QueryResult(answer=answer, sources=[to_source(h) for h in hits])
