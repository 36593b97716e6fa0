"""Prompt text and context formatting for grounded answer generation."""

from typing import Dict, List

from docgate.retriever import ScoredRecord

REFUSAL_ANSWER = "I have not been trained on this topic and cannot answer it."

SYSTEM_PROMPT = "\n".join(
    [
        "You are a question-answering assistant that answers **only** from the provided context.",
        "Strict rules:",
        f'1) If the answer is not in the context or you are not sure, say exactly: "{REFUSAL_ANSWER}"',
        "2) Do not use general knowledge or guesses. Never invent new information.",
        "3) If the context is sufficient, answer briefly and precisely and, where possible, "
        "cite the sources at the end by number, e.g. [[1]], [[2]].",
    ]
)


def source_label(hit: ScoredRecord) -> str:
    return hit.source if hit.type == "url" else f"file: {hit.source}"


def format_context(hits: List[ScoredRecord]) -> str:
    return "\n\n---\n\n".join(
        f"[[{i}]] ({source_label(hit)})\n{hit.text}" for i, hit in enumerate(hits, start=1)
    )


def build_user_message(question: str, context: str) -> str:
    return "\n".join(["User question:", question, "", "Context:", context])


def build_sources(hits: List[ScoredRecord]) -> List[Dict]:
    return [
        {"id": i, "source": hit.source, "score": round(hit.score, 3)}
        for i, hit in enumerate(hits, start=1)
    ]


def refusal() -> Dict:
    return {"answer": REFUSAL_ANSWER, "sources": []}
