"""Ingestion pipeline orchestrator.

Wires together: scraper → cleaner → chunker → embedding → chroma_store.
Every run is a full refresh: the index is cleared once, then each
configured source path is fetched, chunked, embedded and upserted.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from config.settings import RAGConfig, Settings, get_settings
from src.embedding.provider import EmbeddingProvider
from src.ingestion.chunker import chunk_text
from src.ingestion.scraper import PageFetcher
from src.models.chunk import Chunk, IndexedVector, to_indexed_vector
from src.models.enums import SourceStatus
from src.models.report import IngestionReport, SourceOutcome
from src.vectorstore.base import VectorIndex

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Scrape, chunk, embed and index a fixed list of site pages."""

    def __init__(
        self,
        fetcher: PageFetcher,
        embedder: EmbeddingProvider,
        store: VectorIndex,
        config: RAGConfig,
        source_paths: list[str] | None = None,
    ):
        self.fetcher = fetcher
        self.embedder = embedder
        self.store = store
        self.config = config
        self.source_paths = list(source_paths or [])

    def run(self, paths: list[str] | None = None) -> IngestionReport:
        """Run a full-refresh ingestion over paths (default: the configured list).

        Steps:
        1. Clear the index once for the whole run
        2. For each path, sequentially: fetch, clean, chunk, embed, upsert
        3. Record each source's outcome; a failing source never aborts the run

        Raises IndexBackendError only if the initial clear fails.
        """
        paths = list(paths) if paths is not None else self.source_paths
        report = IngestionReport()

        self.store.delete_all()
        logger.info("Cleared index, ingesting %d sources", len(paths))

        for path in paths:
            outcome = self._ingest_source(path)
            report.record(outcome)

        report.finish()
        logger.info(
            "Ingestion complete: %d chunks, %d succeeded, %d skipped, %d failed",
            report.total_chunks, len(report.succeeded), len(report.skipped), len(report.failed),
        )
        return report

    def _ingest_source(self, path: str) -> SourceOutcome:
        try:
            page = self.fetcher.fetch(path)

            if len(page.text) < self.config.min_content_length:
                logger.info(
                    "Skipping %s: %d chars of content (minimum %d)",
                    path, len(page.text), self.config.min_content_length,
                )
                return SourceOutcome(
                    path=path,
                    status=SourceStatus.SKIPPED,
                    message=f"Content too short ({len(page.text)} chars)",
                )

            chunks = chunk_text(page.text, page.url, self.config)
            vectors = self._embed_chunks(chunks)
            self.store.upsert(vectors)
        except Exception as e:
            logger.error("Error ingesting %s: %s", path, e)
            return SourceOutcome(path=path, status=SourceStatus.FAILED, message=str(e))

        logger.info("Ingested %s: %d chunks", path, len(vectors))
        return SourceOutcome(path=path, status=SourceStatus.SUCCESS, chunk_count=len(vectors))

    def _embed_chunks(self, chunks: list[Chunk]) -> list[IndexedVector]:
        """Embed all chunks of one source concurrently and wait for every result.

        Raises the first EmbeddingServiceError in chunk order.
        """
        if not chunks:
            return []
        workers = min(self.config.embedding_workers, len(chunks))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.embedder.embed, chunk.text) for chunk in chunks]
            embeddings = [future.result() for future in futures]

        return [
            to_indexed_vector(chunk, values, self.config.metadata_text_limit)
            for chunk, values in zip(chunks, embeddings)
        ]


def build_ingestion_pipeline(
    settings: Settings | None = None,
    store: VectorIndex | None = None,
) -> IngestionPipeline:
    """Construct a pipeline with the collaborators configured in settings.

    Pass store to share one index handle with other services.
    """
    from src.embedding.config import get_embedding_provider
    from src.vectorstore.chroma_store import build_chroma_store

    settings = settings or get_settings()
    config = settings.rag_config()
    if store is None:
        store = build_chroma_store(settings, config)
    return IngestionPipeline(
        fetcher=PageFetcher(settings.portfolio_site_url, timeout=settings.portfolio_fetch_timeout),
        embedder=get_embedding_provider(settings),
        store=store,
        config=config,
        source_paths=settings.portfolio_source_paths,
    )


def run_ingestion_pipeline(
    paths: list[str] | None = None,
    settings: Settings | None = None,
) -> IngestionReport:
    """Run the full ingestion pipeline with the default collaborators."""
    return build_ingestion_pipeline(settings).run(paths)
