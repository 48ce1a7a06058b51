"""Exception types raised by the ingestion and retrieval components."""


class PortfolioRAGError(Exception):
    """Base class for all portfolio RAG errors."""


class ConfigurationError(PortfolioRAGError):
    """Invalid configuration, detected before any work starts."""


class EmbeddingServiceError(PortfolioRAGError):
    """The embedding backend failed or returned a vector of the wrong dimension."""


class DimensionMismatchError(PortfolioRAGError):
    """A vector's dimension does not match the index dimension."""

    def __init__(self, expected: int, actual: int, vector_id: str | None = None):
        self.expected = expected
        self.actual = actual
        self.vector_id = vector_id
        where = f" for vector {vector_id}" if vector_id else ""
        super().__init__(
            f"Vector dimension mismatch{where} (expected {expected}, got {actual})"
        )


class IndexBackendError(PortfolioRAGError):
    """An upsert, query or clear call to the vector index backend failed."""


class SourceFetchError(PortfolioRAGError):
    """A source page failed to load."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to fetch {path}: {message}")
