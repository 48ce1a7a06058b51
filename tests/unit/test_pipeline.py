"""Unit tests for the ingestion pipeline orchestration."""

from unittest.mock import MagicMock

import pytest

from src.errors import EmbeddingServiceError, IndexBackendError, SourceFetchError
from src.ingestion.pipeline import IngestionPipeline
from src.ingestion.scraper import FetchedPage
from src.models.enums import SourceStatus
from src.models.query import RetrievalResult
from src.vectorstore.base import VectorIndex

PAGE_TEXTS = {
    "/": "Welcome to my portfolio. " * 20,
    "/about": "I am a developer who enjoys building data pipelines and chat assistants. " * 8,
    "/projects": "Weather dashboard, budget tracker and a portfolio chat widget. " * 12,
    "/contact": "Reach me by email or on GitHub for freelance and full-time roles. " * 4,
}


def _fetcher(texts=PAGE_TEXTS, failing=()):
    fetcher = MagicMock()

    def fetch(path):
        if path in failing:
            raise SourceFetchError(path, "503 Service Unavailable")
        return FetchedPage(path=path, url=f"https://example.dev{path}", raw_html="", text=texts[path])

    fetcher.fetch.side_effect = fetch
    return fetcher


@pytest.fixture
def pipeline_factory(rag_config, fake_embedder, memory_store):
    def build(fetcher, embedder=None, store=None):
        return IngestionPipeline(
            fetcher=fetcher,
            embedder=embedder or fake_embedder,
            store=store or memory_store,
            config=rag_config,
            source_paths=list(PAGE_TEXTS),
        )
    return build


class TestIngestionPipeline:
    def test_indexes_every_configured_source(self, pipeline_factory, memory_store):
        report = pipeline_factory(_fetcher()).run()

        assert len(report.succeeded) == 4
        assert report.failed == []
        assert report.total_chunks == memory_store.count
        assert report.total_chunks >= 4
        assert report.completed_at is not None

    def test_partial_failure_continues_run(self, pipeline_factory):
        report = pipeline_factory(_fetcher(failing={"/about"})).run()

        assert len(report.outcomes) == 4
        assert len(report.succeeded) == 3
        assert len(report.failed) == 1
        failure = report.failed[0]
        assert failure.path == "/about"
        assert "503" in failure.message
        assert report.total_chunks == sum(o.chunk_count for o in report.succeeded)

    def test_sources_processed_in_order(self, pipeline_factory):
        fetcher = _fetcher()
        report = pipeline_factory(fetcher).run()

        assert [o.path for o in report.outcomes] == list(PAGE_TEXTS)
        assert [c.args[0] for c in fetcher.fetch.call_args_list] == list(PAGE_TEXTS)

    def test_short_content_is_skipped_not_failed(self, pipeline_factory, fake_embedder):
        texts = dict(PAGE_TEXTS, **{"/contact": "Email me."})
        report = pipeline_factory(_fetcher(texts=texts)).run()

        skipped = report.skipped
        assert [o.path for o in skipped] == ["/contact"]
        assert skipped[0].chunk_count == 0
        assert report.failed == []
        assert "Email me." not in fake_embedder.calls

    def test_clears_index_once_before_ingesting(self, pipeline_factory):
        store = MagicMock()
        pipeline_factory(_fetcher(), store=store).run()

        store.delete_all.assert_called_once()
        assert store.method_calls[0][0] == "delete_all"
        assert store.upsert.call_count == 4

    def test_removes_stale_content_from_previous_run(self, pipeline_factory, memory_store):
        pipeline_factory(_fetcher()).run(["/", "/about", "/projects", "/contact"])
        report = pipeline_factory(_fetcher()).run(["/"])

        assert memory_store.count == report.total_chunks
        assert memory_store.get_source_chunks("https://example.dev/about") == []

    def test_rerun_does_not_duplicate(self, pipeline_factory, memory_store):
        first = pipeline_factory(_fetcher()).run()
        second = pipeline_factory(_fetcher()).run()

        assert first.total_chunks == second.total_chunks
        assert memory_store.count == second.total_chunks

    def test_one_upsert_per_source_with_all_chunks(self, pipeline_factory):
        store = MagicMock()
        pipeline_factory(_fetcher(), store=store).run(["/projects"])

        store.upsert.assert_called_once()
        vectors = store.upsert.call_args.args[0]
        assert [v.metadata["chunk_index"] for v in vectors] == list(range(len(vectors)))
        assert all(v.metadata["url"] == "https://example.dev/projects" for v in vectors)
        assert len({v.id for v in vectors}) == len(vectors)

    def test_embedding_failure_fails_only_that_source(self, pipeline_factory, fake_embedder):
        original = fake_embedder._encode

        def flaky(text):
            if "Weather dashboard" in text:
                raise RuntimeError("model overloaded")
            return original(text)

        fake_embedder._encode = flaky
        report = pipeline_factory(_fetcher()).run()

        assert [o.path for o in report.failed] == ["/projects"]
        assert "model overloaded" in report.failed[0].message
        assert len(report.succeeded) == 3

    def test_dimension_mismatch_fails_source_without_writing(self, pipeline_factory, make_embedder, memory_store):
        # Embedder configured for 384 dimensions against a 768-dimension index
        embedder = make_embedder(expected_dimension=384)
        report = pipeline_factory(_fetcher(), embedder=embedder).run(["/"])

        assert report.failed[0].status == SourceStatus.FAILED
        assert "dimension" in report.failed[0].message.lower()
        assert memory_store.count == 0

    def test_index_failure_fails_only_that_source(self, pipeline_factory):
        store = MagicMock()
        store.upsert.side_effect = [None, IndexBackendError("write rejected"), None, None]
        report = pipeline_factory(_fetcher(), store=store).run()

        assert [o.path for o in report.failed] == ["/about"]
        assert len(report.succeeded) == 3

    def test_clear_failure_aborts_run(self, pipeline_factory):
        store = MagicMock()
        store.delete_all.side_effect = IndexBackendError("unreachable")
        fetcher = _fetcher()

        with pytest.raises(IndexBackendError):
            pipeline_factory(fetcher, store=store).run()
        fetcher.fetch.assert_not_called()

    def test_explicit_paths_override_configured_list(self, pipeline_factory):
        report = pipeline_factory(_fetcher()).run(["/about"])
        assert [o.path for o in report.outcomes] == ["/about"]

    def test_embedding_error_type_is_reported(self, pipeline_factory, fake_embedder):
        fake_embedder._encode = MagicMock(side_effect=EmbeddingServiceError("bad response"))
        report = pipeline_factory(_fetcher()).run(["/"])
        assert report.failed[0].message == "bad response"

    def test_unexpected_backend_exception_fails_each_source(self, pipeline_factory):
        class BrokenIndex(VectorIndex):
            def _upsert(self, vectors):
                raise RuntimeError("backend 500")

            def _query(self, vector, top_k):
                return RetrievalResult()

            def _delete_all(self):
                pass

            @property
            def count(self):
                return 0

        report = pipeline_factory(_fetcher(), store=BrokenIndex()).run(["/", "/about"])

        assert [o.status for o in report.outcomes] == [SourceStatus.FAILED, SourceStatus.FAILED]
        assert report.failed[0].message == "backend 500"
        assert report.completed_at is not None

    def test_unexpected_fetcher_exception_fails_only_that_source(self, pipeline_factory):
        fetcher = _fetcher()
        fetch = fetcher.fetch.side_effect

        def fetch_or_break(path):
            if path == "/about":
                raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
            return fetch(path)

        fetcher.fetch.side_effect = fetch_or_break
        report = pipeline_factory(fetcher).run()

        assert [o.path for o in report.failed] == ["/about"]
        assert len(report.succeeded) == 3
