"""
Retrieval confidence gate.

Decides whether the retrieved context is close enough to the question to
answer at all, using the rank-1 similarity and the mean of the top three.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class GateDecision:
    passed: bool
    top_sim: float
    avg_top3: float


class ConfidenceGate:
    def __init__(self, min_top_sim: float = 0.78, min_avg_top3: float = 0.72):
        self.min_top_sim = min_top_sim
        self.min_avg_top3 = min_avg_top3

    def evaluate(self, scores: List[float]) -> GateDecision:
        if not scores:
            return GateDecision(passed=False, top_sim=0.0, avg_top3=0.0)

        top_sim = scores[0]
        top3 = scores[:3]
        avg_top3 = sum(top3) / len(top3)

        passed = top_sim >= self.min_top_sim and avg_top3 >= self.min_avg_top3
        return GateDecision(passed=passed, top_sim=top_sim, avg_top3=avg_top3)
