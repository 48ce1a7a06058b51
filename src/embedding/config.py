"""Embedding provider selection from settings."""

from config.settings import Settings, get_settings
from src.embedding.provider import EmbeddingProvider
from src.errors import ConfigurationError


def get_embedding_provider(settings: Settings | None = None) -> EmbeddingProvider:
    """Create the configured embedding provider.

    Default: local sentence-transformers model. "google" uses the hosted
    Gemini embedding model via langchain-google-genai.
    """
    settings = settings or get_settings()
    provider = settings.portfolio_embedding_provider.lower()

    if provider == "sentence-transformers":
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider

        return SentenceTransformerEmbeddingProvider(
            model_name=settings.portfolio_embedding_model,
            expected_dimension=settings.portfolio_embedding_dimension,
        )
    elif provider == "google":
        from src.embedding.google_genai import GoogleGenAIEmbeddingProvider

        model = settings.portfolio_embedding_model
        if model.startswith("sentence-transformers/"):
            model = "models/embedding-001"
        return GoogleGenAIEmbeddingProvider(
            model_name=model,
            api_key=settings.google_api_key,
            expected_dimension=settings.portfolio_embedding_dimension,
        )
    else:
        raise ConfigurationError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'sentence-transformers', 'google'"
        )
