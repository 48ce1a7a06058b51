"""Application configuration management."""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic_settings import BaseSettings

from src.errors import ConfigurationError

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]


@dataclass(frozen=True)
class RAGConfig:
    """Explicit configuration for the chunk, embed, index and retrieve components."""

    chunk_size: int = 1000
    chunk_overlap: int = 200
    separators: list[str] = field(default_factory=lambda: list(DEFAULT_SEPARATORS))
    top_k: int = 5
    min_content_length: int = 50
    embedding_dimension: int = 768
    metadata_text_limit: int = 500
    embedding_workers: int = 8

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be > 0, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise ConfigurationError(f"chunk_overlap must be >= 0, got {self.chunk_overlap}")
        if self.chunk_size <= self.chunk_overlap:
            raise ConfigurationError(
                f"chunk_size ({self.chunk_size}) must be greater than "
                f"chunk_overlap ({self.chunk_overlap})"
            )
        if not self.separators:
            raise ConfigurationError("separators must not be empty")
        if self.top_k <= 0:
            raise ConfigurationError(f"top_k must be > 0, got {self.top_k}")
        if self.min_content_length < 0:
            raise ConfigurationError("min_content_length must be >= 0")
        if self.embedding_dimension <= 0:
            raise ConfigurationError("embedding_dimension must be > 0")
        if self.metadata_text_limit <= 0:
            raise ConfigurationError("metadata_text_limit must be > 0")
        if self.embedding_workers <= 0:
            raise ConfigurationError("embedding_workers must be > 0")


class Settings(BaseSettings):
    """Portfolio RAG settings loaded from environment variables."""

    # API keys
    google_api_key: str = ""
    anthropic_api_key: str = ""

    # Site
    portfolio_site_url: str = "http://localhost:3000"
    portfolio_source_paths: list[str] = ["/", "/about", "/projects"]
    portfolio_fetch_timeout: float = 30.0

    # Chunking
    portfolio_chunk_size: int = 1000
    portfolio_chunk_overlap: int = 200
    portfolio_separators: list[str] = list(DEFAULT_SEPARATORS)
    portfolio_min_content_length: int = 50

    # Embedding
    portfolio_embedding_provider: str = "sentence-transformers"
    portfolio_embedding_model: str = "sentence-transformers/all-mpnet-base-v2"
    portfolio_embedding_dimension: int = 768
    portfolio_embedding_workers: int = 8

    # Vector index
    portfolio_chroma_path: str = "./data/chroma"
    portfolio_chroma_host: str = ""
    portfolio_chroma_port: int = 8000
    portfolio_chroma_collection: str = "portfolio_chunks"
    portfolio_metadata_text_limit: int = 500

    # Retrieval
    portfolio_top_k: int = 5

    # LLM
    portfolio_llm_provider: str = "google"
    portfolio_llm_model: str = "gemini-2.0-flash"
    portfolio_llm_temperature: float = 0.7
    portfolio_llm_max_tokens: int = 1000

    @property
    def chroma_path(self) -> Path:
        return Path(self.portfolio_chroma_path)

    def rag_config(self) -> RAGConfig:
        """Build the explicit component configuration from these settings.

        Raises ConfigurationError on invalid chunking or retrieval values.
        """
        return RAGConfig(
            chunk_size=self.portfolio_chunk_size,
            chunk_overlap=self.portfolio_chunk_overlap,
            separators=list(self.portfolio_separators),
            top_k=self.portfolio_top_k,
            min_content_length=self.portfolio_min_content_length,
            embedding_dimension=self.portfolio_embedding_dimension,
            metadata_text_limit=self.portfolio_metadata_text_limit,
            embedding_workers=self.portfolio_embedding_workers,
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
