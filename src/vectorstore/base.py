"""Abstract base class for vector index backends.

Subclasses implement the _upsert/_query/_delete_all hooks against a
concrete backend. The public methods check vector dimensions locally, so a
malformed vector never reaches the backend.
"""

from abc import ABC, abstractmethod

from src.errors import DimensionMismatchError
from src.models.chunk import IndexedVector
from src.models.query import RetrievalResult


class VectorIndex(ABC):
    """Backend-agnostic vector index with upsert-by-ID, top-K query and full clear."""

    def __init__(self, dimension: int = 768, metadata_text_limit: int = 500):
        self.dimension = dimension
        self.metadata_text_limit = metadata_text_limit

    def upsert(self, vectors: list[IndexedVector]) -> None:
        """Write or overwrite vectors by ID.

        Raises:
            DimensionMismatchError: If any vector's dimension differs from the
                index dimension. Nothing is written in that case.
            IndexBackendError: If the backend call fails.
        """
        if not vectors:
            return
        for vector in vectors:
            if vector.dimension != self.dimension:
                raise DimensionMismatchError(self.dimension, vector.dimension, vector.id)
        self._upsert(vectors)

    def query(self, vector: list[float], top_k: int = 5) -> RetrievalResult:
        """Return the top_k nearest stored chunks, most similar first."""
        if len(vector) != self.dimension:
            raise DimensionMismatchError(self.dimension, len(vector))
        if top_k <= 0:
            return RetrievalResult()
        return self._query(vector, top_k)

    def delete_all(self) -> None:
        """Remove every vector from the index."""
        self._delete_all()

    # -- backend hooks --------------------------------------------------------

    @abstractmethod
    def _upsert(self, vectors: list[IndexedVector]) -> None:
        ...

    @abstractmethod
    def _query(self, vector: list[float], top_k: int) -> RetrievalResult:
        ...

    @abstractmethod
    def _delete_all(self) -> None:
        ...

    @property
    @abstractmethod
    def count(self) -> int:
        """Return the number of vectors in the index."""
        ...
