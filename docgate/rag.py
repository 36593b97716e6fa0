"""Core RAG engine: query embedding, retrieval, confidence gating and grounded generation."""

import logging
import time
from typing import Dict, Optional

from docgate.config import Settings
from docgate.confidence import ConfidenceGate
from docgate.embeddings import Embedder, make_embedder
from docgate.extract import Fetcher
from docgate.generator import AnswerGenerator
from docgate.ingest import Ingestor
from docgate.logging_config import QueryMetrics, log_latency
from docgate.prompts import SYSTEM_PROMPT, build_sources, build_user_message, format_context, refusal
from docgate.retriever import top_k
from docgate.store import VectorStore

logger = logging.getLogger(__name__)

EMPTY_INDEX_ERROR = "No index found. Use admin panel to add resources."


class QueryValidationError(ValueError):
    """The request itself cannot be answered: blank question or nothing indexed yet."""


class RAGEngine:
    def __init__(
        self,
        settings: Settings,
        *,
        store: Optional[VectorStore] = None,
        embedder: Optional[Embedder] = None,
        generator: Optional[AnswerGenerator] = None,
        fetcher: Optional[Fetcher] = None,
    ):
        self.settings = settings
        settings.ensure_dirs()

        if store is None:
            store = VectorStore(settings.index_path, model=settings.embedding_model).load()
        self.store = store
        self.embedder = embedder or make_embedder(settings)
        self.generator = generator or AnswerGenerator(settings.gemini_api_key, model=settings.chat_model)
        self.fetcher = fetcher or Fetcher()
        self.gate = ConfidenceGate(settings.min_top_sim, settings.min_avg_top3)
        self.ingestor = Ingestor(self.store, self.embedder, self.fetcher, settings)
        self.metrics = QueryMetrics()

        logger.info(f"RAGEngine initialized | items={len(self.store)}")

    def health(self) -> Dict:
        return {
            "ok": True,
            "items": len(self.store),
            "minTopSim": self.gate.min_top_sim,
            "minAvgTop3": self.gate.min_avg_top3,
            "queries": self.metrics.get_stats(),
        }

    @log_latency("rag.ask_async")
    async def ask_async(self, question: str, k: Optional[int] = None) -> Dict:
        if not isinstance(question, str) or not question.strip():
            raise QueryValidationError("message is required")

        records = self.store.snapshot()
        if not records:
            raise QueryValidationError(EMPTY_INDEX_ERROR)

        start = time.perf_counter()
        outcome = "failed"
        try:
            logger.info(f"Query received | question_length={len(question)}")
            query_embedding = await self.embedder.embed_one_async(question)
            index_dim = len(records[0].embedding)
            if len(query_embedding) != index_dim:
                raise RuntimeError(
                    f"Query embedding has {len(query_embedding)} dimensions but the index has {index_dim}; "
                    "rebuild the index after changing the embedding model"
                )

            hits = top_k(query_embedding, records, k or self.settings.top_k)
            decision = self.gate.evaluate([hit.score for hit in hits])
            logger.info(
                f"Retrieval complete | chunks={len(hits)} | top_sim={decision.top_sim:.3f} "
                f"| avg_top3={decision.avg_top3:.3f} | passed={decision.passed}"
            )

            if not decision.passed:
                outcome = "refused"
                return refusal()

            user_message = build_user_message(question, format_context(hits))
            answer = await self.generator.complete_async(SYSTEM_PROMPT, user_message)
            outcome = "answered"
            return {"answer": answer, "sources": build_sources(hits)}
        finally:
            self.metrics.record(outcome, (time.perf_counter() - start) * 1000)
