"""Retrieval service: query text in, context block out."""

import logging

from config.settings import RAGConfig, Settings, get_settings
from src.embedding.provider import EmbeddingProvider
from src.models.query import RetrievalResult
from src.vectorstore.base import VectorIndex

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n"


class RetrievalService:
    """Embeds a query and fetches the most similar stored chunks."""

    def __init__(self, embedder: EmbeddingProvider, store: VectorIndex, config: RAGConfig):
        self.embedder = embedder
        self.store = store
        self.config = config

    def search(self, query: str, top_k: int | None = None) -> RetrievalResult:
        """Return the top_k matches for query, most similar first.

        Raises EmbeddingServiceError, DimensionMismatchError or IndexBackendError.
        """
        if top_k is None:
            top_k = self.config.top_k
        query_embedding = self.embedder.embed_query(query)
        return self.store.query(query_embedding, top_k=top_k)

    def retrieve(self, query: str, top_k: int | None = None) -> str:
        """Build the context block for query.

        Matched chunk texts are joined with a blank line. Any embedding or
        index failure is logged and yields an empty string, so the caller can
        fall back to generating without context.
        """
        if not query or not query.strip():
            return ""
        try:
            result = self.search(query, top_k=top_k)
        except Exception as e:
            logger.warning("Context retrieval failed: %s", e, exc_info=True)
            return ""
        return CONTEXT_SEPARATOR.join(result.texts())


def build_retrieval_service(
    settings: Settings | None = None,
    store: VectorIndex | None = None,
) -> RetrievalService:
    """Construct a retrieval service with the collaborators configured in settings."""
    from src.embedding.config import get_embedding_provider
    from src.vectorstore.chroma_store import build_chroma_store

    settings = settings or get_settings()
    config = settings.rag_config()
    if store is None:
        store = build_chroma_store(settings, config)
    return RetrievalService(get_embedding_provider(settings), store, config)
