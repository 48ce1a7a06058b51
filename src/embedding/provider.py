"""Abstract embedding provider interface."""

from abc import ABC, abstractmethod

from src.errors import EmbeddingServiceError


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap a specific embedding backend and only implement
    _encode(). embed() adds the dimension check and error translation, so
    every caller sees EmbeddingServiceError regardless of the backend.
    """

    def __init__(self, expected_dimension: int = 768):
        self.expected_dimension = expected_dimension

    @abstractmethod
    def _encode(self, text: str) -> list[float]:
        """Call the backend for a single text."""
        ...

    def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a text.

        Raises:
            EmbeddingServiceError: If the backend call fails or returns a vector
                whose dimension differs from expected_dimension.
        """
        try:
            vector = [float(v) for v in self._encode(text)]
        except EmbeddingServiceError:
            raise
        except Exception as e:
            raise EmbeddingServiceError(f"Embedding backend call failed: {e}") from e

        if len(vector) != self.expected_dimension:
            raise EmbeddingServiceError(
                f"Embedding dimension mismatch (expected {self.expected_dimension}, got {len(vector)})"
            )
        return vector

    def embed_query(self, text: str) -> list[float]:
        """Generate the embedding for a retrieval query.

        Some models embed queries differently from documents; override this
        to add model-specific query handling. Default delegates to embed().
        """
        return self.embed(text)

    @property
    def dimension(self) -> int:
        return self.expected_dimension
