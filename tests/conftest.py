"""
Pytest configuration and shared fakes for the docgate test suite.

The fakes implement the narrow capability interfaces the engine depends on
(embed, complete, fetch_text) so nothing here touches the network.
"""
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from docgate.config import Settings
from docgate.embeddings import Embedder
from docgate.extract import FetchError
from docgate.main import create_app
from docgate.rag import RAGEngine
from docgate.store import IndexRecord

ADMIN_TOKEN = "test-admin-token"


class FakeEmbedder(Embedder):
    """Looks vectors up by exact text; unknown texts map to the default vector."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None, batch_size: int = 2):
        self.vectors = dict(vectors or {})
        self.default = default or [0.0, 0.0, 1.0]
        self.batch_size = batch_size
        self.calls: List[List[str]] = []

    def embed_batch(self, texts):
        self.calls.append(list(texts))
        return [list(self.vectors.get(t, self.default)) for t in texts]


class FakeGenerator:
    def __init__(self, answer: str = "Grounded answer [[1]]"):
        self.answer = answer
        self.calls = []

    def complete(self, system: str, user: str) -> str:
        self.calls.append((system, user))
        return self.answer

    async def complete_async(self, system: str, user: str) -> str:
        return self.complete(system, user)


class FakeFetcher:
    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages = dict(pages or {})
        self.calls: List[str] = []

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(f"Fetch failed 404 for {url}")
        return self.pages[url]


def make_record(i: int, source: str = "doc.txt", embedding=None, source_type: str = "file") -> IndexRecord:
    return IndexRecord(
        id=f"{source_type}:{source}::{i}",
        source=source,
        type=source_type,
        text=f"chunk {i} of {source}",
        embedding=embedding or [1.0, float(i), 0.0],
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        admin_token=ADMIN_TOKEN,
        chunk_size=10,
        chunk_overlap=2,
        data_dir=tmp_path / "data",
        ingest_dir=tmp_path / "ingest",
        public_dir=tmp_path / "public",
    )


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def engine(settings, embedder, generator, fetcher):
    return RAGEngine(settings, embedder=embedder, generator=generator, fetcher=fetcher)


@pytest.fixture
def client(settings, engine):
    return TestClient(create_app(settings, rag=engine))


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
