"""Chunk and indexed-vector data models."""

import hashlib
from dataclasses import dataclass, field


def make_vector_id(source_url: str, chunk_index: int) -> str:
    """Build the deterministic vector ID for a chunk of a source.

    The same (source_url, chunk_index) always maps to the same ID, so
    re-ingesting a page overwrites its vectors instead of duplicating them.
    """
    digest = hashlib.sha1(source_url.encode("utf-8")).hexdigest()[:16]
    return f"{digest}-{chunk_index:04d}"


@dataclass
class Chunk:
    """A bounded span of page text prepared for embedding."""

    source_url: str
    chunk_index: int
    text: str

    def __post_init__(self):
        if not self.text:
            raise ValueError("text must not be empty")
        if self.chunk_index < 0:
            raise ValueError("chunk_index must be >= 0")

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def vector_id(self) -> str:
        return make_vector_id(self.source_url, self.chunk_index)


@dataclass
class IndexedVector:
    """A vector ready to be written to the index, keyed by a stable ID."""

    id: str
    values: list[float]
    metadata: dict = field(default_factory=dict)
    document: str | None = None

    @property
    def dimension(self) -> int:
        return len(self.values)


def to_indexed_vector(chunk: Chunk, values: list[float], text_limit: int = 500) -> IndexedVector:
    """Attach an embedding to a chunk, with the excerpt truncated to the metadata limit."""
    return IndexedVector(
        id=chunk.vector_id,
        values=list(values),
        metadata={
            "url": chunk.source_url,
            "text": chunk.text[:text_limit],
            "chunk_index": chunk.chunk_index,
        },
        document=chunk.text,
    )
