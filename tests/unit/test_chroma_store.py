"""Unit tests for the Chroma vector index adapter."""

from unittest.mock import MagicMock

import pytest

from src.errors import DimensionMismatchError, IndexBackendError
from src.models.chunk import Chunk, IndexedVector, to_indexed_vector
from src.vectorstore.chroma_store import ChromaStore


def _vector(embedder, url, index, text):
    chunk = Chunk(source_url=url, chunk_index=index, text=text)
    return to_indexed_vector(chunk, embedder.embed(text))


class TestUpsert:
    def test_upsert_adds_vectors(self, memory_store, fake_embedder):
        memory_store.upsert([
            _vector(fake_embedder, "https://example.dev/", 0, "I build web applications"),
            _vector(fake_embedder, "https://example.dev/", 1, "I write Python and Go"),
        ])
        assert memory_store.count == 2

    def test_upsert_same_id_overwrites(self, memory_store, fake_embedder):
        memory_store.upsert([_vector(fake_embedder, "https://example.dev/about", 0, "old about text")])
        memory_store.upsert([_vector(fake_embedder, "https://example.dev/about", 0, "new about text")])

        assert memory_store.count == 1
        chunks = memory_store.get_source_chunks("https://example.dev/about")
        assert [c["text"] for c in chunks] == ["new about text"]

    def test_empty_upsert_is_noop(self, memory_store):
        memory_store.upsert([])
        assert memory_store.count == 0

    def test_wrong_dimension_fails_before_backend_call(self, memory_store):
        memory_store._collection = MagicMock()
        bad = IndexedVector(id="bad", values=[0.1] * 384, metadata={"text": "x"})

        with pytest.raises(DimensionMismatchError) as exc_info:
            memory_store.upsert([bad])

        assert exc_info.value.expected == 768
        assert exc_info.value.actual == 384
        memory_store._collection.upsert.assert_not_called()

    def test_one_bad_vector_rejects_whole_batch(self, memory_store, fake_embedder):
        good = _vector(fake_embedder, "https://example.dev/", 0, "fine")
        bad = IndexedVector(id="bad", values=[0.1] * 767, metadata={"text": "x"})

        with pytest.raises(DimensionMismatchError):
            memory_store.upsert([good, bad])
        assert memory_store.count == 0

    def test_metadata_text_truncated_to_limit(self, memory_store, fake_embedder):
        long_text = "portfolio " * 100
        vector = IndexedVector(
            id="long",
            values=fake_embedder.embed(long_text),
            metadata={"url": "https://example.dev/", "text": long_text, "chunk_index": 0},
        )
        memory_store.upsert([vector])

        stored = memory_store.get_source_chunks("https://example.dev/")[0]
        assert len(stored["metadata"]["text"]) == memory_store.metadata_text_limit
        assert stored["text"] == long_text

    def test_full_chunk_text_kept_as_document(self, memory_store, fake_embedder):
        long_text = "climbing " * 100
        memory_store.upsert([_vector(fake_embedder, "https://example.dev/about", 0, long_text.strip())])

        stored = memory_store.get_source_chunks("https://example.dev/about")[0]
        assert stored["text"] == long_text.strip()
        assert len(stored["metadata"]["text"]) == 500

    def test_backend_failure_raises_index_backend_error(self, memory_store, fake_embedder):
        memory_store._collection = MagicMock()
        memory_store._collection.upsert.side_effect = RuntimeError("connection reset")

        with pytest.raises(IndexBackendError, match="connection reset"):
            memory_store.upsert([_vector(fake_embedder, "https://example.dev/", 0, "text")])


class TestQuery:
    def test_returns_most_similar_first(self, memory_store, fake_embedder):
        memory_store.upsert([
            _vector(fake_embedder, "https://example.dev/projects", 0, "weather dashboard built with react"),
            _vector(fake_embedder, "https://example.dev/about", 0, "i enjoy hiking and climbing"),
            _vector(fake_embedder, "https://example.dev/projects", 1, "budget tracker command line tool"),
        ])

        result = memory_store.query(fake_embedder.embed("weather dashboard react"), top_k=3)

        assert len(result) == 3
        assert result.matches[0].text == "weather dashboard built with react"
        scores = [m.score for m in result]
        assert scores == sorted(scores, reverse=True)
        assert result.matches[0].metadata["url"] == "https://example.dev/projects"
        assert result.matches[0].metadata["chunk_index"] == 0

    def test_respects_top_k(self, memory_store, fake_embedder):
        memory_store.upsert([
            _vector(fake_embedder, "https://example.dev/", i, f"chunk number {i}") for i in range(5)
        ])
        result = memory_store.query(fake_embedder.embed("chunk"), top_k=2)
        assert len(result) == 2

    def test_query_vector_dimension_checked(self, memory_store):
        with pytest.raises(DimensionMismatchError):
            memory_store.query([0.1] * 10, top_k=3)

    def test_backend_failure_raises_index_backend_error(self, memory_store, fake_embedder):
        memory_store._collection = MagicMock()
        memory_store._collection.query.side_effect = RuntimeError("timeout")

        with pytest.raises(IndexBackendError):
            memory_store.query(fake_embedder.embed("x"), top_k=3)


class TestDeleteAll:
    def test_clears_every_vector(self, memory_store, fake_embedder):
        memory_store.upsert([
            _vector(fake_embedder, "https://example.dev/", i, f"text {i}") for i in range(3)
        ])
        memory_store.delete_all()
        assert memory_store.count == 0

    def test_store_usable_after_clear(self, memory_store, fake_embedder):
        memory_store.delete_all()
        memory_store.upsert([_vector(fake_embedder, "https://example.dev/", 0, "fresh")])
        assert memory_store.count == 1

    def test_backend_failure_raises_index_backend_error(self, memory_store):
        memory_store._collection = MagicMock()
        memory_store._collection.get.side_effect = RuntimeError("unavailable")

        with pytest.raises(IndexBackendError):
            memory_store.delete_all()

    def test_other_handles_see_writes_after_clear(self, tmp_path, fake_embedder):
        writer = ChromaStore(path=str(tmp_path), collection_name="shared")
        reader = ChromaStore(path=str(tmp_path), collection_name="shared")
        writer.upsert([_vector(fake_embedder, "https://example.dev/", 0, "old home page")])

        writer.delete_all()
        writer.upsert([_vector(fake_embedder, "https://example.dev/projects", 0, "weather dashboard")])

        result = reader.query(fake_embedder.embed("weather dashboard"), top_k=3)
        assert [m.text for m in result] == ["weather dashboard"]
        assert reader.count == 1
