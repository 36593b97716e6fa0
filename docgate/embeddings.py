"""Embedding clients: Gemini embedding API by default, local SentenceTransformer as an alternative."""

import asyncio
import logging
from typing import List

import numpy as np
from google import genai

from docgate.config import Settings

logger = logging.getLogger(__name__)

Vector = List[float]


class Embedder:
    """One vector per input text, in input order."""

    batch_size: int = 64

    def embed_batch(self, texts: List[str]) -> List[Vector]:
        raise NotImplementedError

    def embed(self, texts: List[str]) -> List[Vector]:
        vectors: List[Vector] = []
        for i in range(0, len(texts), self.batch_size):
            batch = texts[i : i + self.batch_size]
            vectors.extend(self.embed_batch(batch))
            logger.info(f"Embedded batch | done={i + len(batch)} | total={len(texts)}")
        return vectors

    def embed_one(self, text: str) -> Vector:
        return self.embed([text])[0]

    async def embed_async(self, texts: List[str]) -> List[Vector]:
        return await asyncio.to_thread(self.embed, texts)

    async def embed_one_async(self, text: str) -> Vector:
        return await asyncio.to_thread(self.embed_one, text)


class GeminiEmbedder(Embedder):
    def __init__(self, api_key: str, model_name: str = "gemini-embedding-001", batch_size: int = 64):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY not found in environment")
        self.client = genai.Client(api_key=api_key)
        self.model_name = model_name
        self.batch_size = batch_size

    def embed_batch(self, texts: List[str]) -> List[Vector]:
        response = self.client.models.embed_content(model=self.model_name, contents=texts)
        vectors = [list(e.values) for e in response.embeddings]
        if len(vectors) != len(texts):
            raise RuntimeError(f"Embedding service returned {len(vectors)} vectors for {len(texts)} texts")
        return vectors


class SentenceTransformerEmbedder(Embedder):
    def __init__(self, model_name: str = "all-mpnet-base-v2", batch_size: int = 16):
        from sentence_transformers import SentenceTransformer

        self.model = SentenceTransformer(model_name)
        self.model_name = model_name
        self.batch_size = batch_size

    def embed_batch(self, texts: List[str]) -> List[Vector]:
        embeddings = self.model.encode(
            texts,
            batch_size=self.batch_size,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        embeddings = embeddings / np.linalg.norm(embeddings, axis=1, keepdims=True)
        return embeddings.tolist()


def make_embedder(settings: Settings) -> Embedder:
    backend = settings.embedding_backend
    if backend == "gemini":
        return GeminiEmbedder(
            api_key=settings.gemini_api_key,
            model_name=settings.embedding_model,
            batch_size=settings.embed_batch_size,
        )
    if backend == "sentence_transformers":
        model_name = settings.embedding_model
        if model_name == Settings.embedding_model:
            model_name = "all-mpnet-base-v2"
        return SentenceTransformerEmbedder(
            model_name=model_name,
            batch_size=settings.embed_batch_size,
        )
    raise ValueError(f"Unknown EMBEDDING_BACKEND: {backend!r}")
