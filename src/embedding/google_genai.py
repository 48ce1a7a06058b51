"""Google Generative AI embedding provider implementation."""

from langchain_google_genai import GoogleGenerativeAIEmbeddings

from src.embedding.provider import EmbeddingProvider

DEFAULT_MODEL = "models/embedding-001"


class GoogleGenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider backed by the hosted Gemini embedding model (768 dimensions)."""

    def __init__(self, model_name: str = DEFAULT_MODEL, api_key: str = "", expected_dimension: int = 768):
        super().__init__(expected_dimension=expected_dimension)
        kwargs = {"model": model_name}
        if api_key:
            kwargs["google_api_key"] = api_key
        self._client = GoogleGenerativeAIEmbeddings(**kwargs)
        self.model_name = model_name

    def _encode(self, text: str) -> list[float]:
        return self._client.embed_query(text)
