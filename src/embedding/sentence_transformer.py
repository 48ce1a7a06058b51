"""Sentence Transformer embedding provider implementation."""

import os

from sentence_transformers import SentenceTransformer

from src.embedding.provider import EmbeddingProvider

DEFAULT_MODEL = "sentence-transformers/all-mpnet-base-v2"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embedding provider wrapping a local sentence-transformers model.

    Default model: all-mpnet-base-v2 (768 dimensions).
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, expected_dimension: int = 768):
        super().__init__(expected_dimension=expected_dimension)
        old_verbosity = os.environ.get("TRANSFORMERS_VERBOSITY")
        os.environ["TRANSFORMERS_VERBOSITY"] = "error"
        try:
            try:
                self._model = SentenceTransformer(model_name, local_files_only=True)
            except OSError:
                self._model = SentenceTransformer(model_name)
        finally:
            if old_verbosity is None:
                os.environ.pop("TRANSFORMERS_VERBOSITY", None)
            else:
                os.environ["TRANSFORMERS_VERBOSITY"] = old_verbosity
        self.model_name = model_name

    def _encode(self, text: str) -> list[float]:
        embedding = self._model.encode(text, show_progress_bar=False)
        return embedding.tolist()
