"""Shared pytest fixtures."""

import hashlib
import uuid

import pytest

from config.settings import RAGConfig
from src.embedding.provider import EmbeddingProvider

DIMENSION = 768


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic embedding provider: hashes words into a fixed-size vector."""

    def __init__(self, expected_dimension: int = DIMENSION, output_dimension: int | None = None):
        super().__init__(expected_dimension=expected_dimension)
        self.output_dimension = output_dimension or expected_dimension
        self.calls: list[str] = []

    def _encode(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.01] * self.output_dimension
        for word in text.lower().split():
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % self.output_dimension
            vector[bucket] += 1.0
        return vector


@pytest.fixture
def rag_config():
    return RAGConfig(chunk_size=200, chunk_overlap=40, min_content_length=50)


@pytest.fixture
def fake_embedder():
    return FakeEmbeddingProvider()


@pytest.fixture
def memory_store():
    """An in-memory Chroma store with a collection unique to the test."""
    from src.vectorstore.chroma_store import ChromaStore

    return ChromaStore(path=":memory:", collection_name=f"test_{uuid.uuid4().hex[:12]}")


@pytest.fixture
def make_embedder():
    """Factory for fake embedders with custom expected/output dimensions."""
    return FakeEmbeddingProvider
