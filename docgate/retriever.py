"""Exact nearest-neighbour retrieval by cosine similarity over the whole store."""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from docgate.store import IndexRecord

EPSILON = 1e-9


@dataclass
class ScoredRecord:
    record: IndexRecord
    score: float

    @property
    def source(self) -> str:
        return self.record.source

    @property
    def type(self) -> str:
        return self.record.type

    @property
    def text(self) -> str:
        return self.record.text


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b) + EPSILON))


def top_k(query_embedding: Sequence[float], records: List[IndexRecord], k: int) -> List[ScoredRecord]:
    if k <= 0 or not records:
        return []

    query = np.asarray(query_embedding, dtype=np.float64)
    matrix = np.asarray([r.embedding for r in records], dtype=np.float64)
    scores = matrix @ query / (np.linalg.norm(matrix, axis=1) * np.linalg.norm(query) + EPSILON)

    # stable sort keeps insertion order among equal scores
    order = np.argsort(-scores, kind="stable")[:k]
    return [ScoredRecord(record=records[i], score=float(scores[i])) for i in order]
