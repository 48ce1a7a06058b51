"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings, get_settings
from src.errors import ConfigurationError


def get_llm(settings: Settings | None = None) -> BaseChatModel:
    """Create and return the configured chat model.

    Uses LangChain's BaseChatModel abstraction for LLM-agnostic access.
    Default: Google Gemini via langchain-google-genai.
    """
    settings = settings or get_settings()
    provider = settings.portfolio_llm_provider.lower()

    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs = {}
        if settings.google_api_key:
            kwargs["google_api_key"] = settings.google_api_key
        return ChatGoogleGenerativeAI(
            model=settings.portfolio_llm_model,
            temperature=settings.portfolio_llm_temperature,
            max_output_tokens=settings.portfolio_llm_max_tokens,
            **kwargs,
        )
    elif provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.portfolio_llm_model,
            temperature=settings.portfolio_llm_temperature,
            max_tokens=settings.portfolio_llm_max_tokens,
            api_key=settings.anthropic_api_key,
        )
    else:
        raise ConfigurationError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'google', 'anthropic'"
        )
