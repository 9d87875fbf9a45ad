"""
Provider registry and model resolution helpers.
"""

from typing import Optional, Type

from base.base_llm import BaseLLMProvider
from config.config import DEFAULT_MODELS, Providers
from config.settings import Settings
from providers.llm_providers import AnthropicProvider, GeminiProvider, OpenAIProvider
from schemas.llm_types import ConfigurationError


PROVIDERS = {
    Providers.OPENAI: OpenAIProvider,
    Providers.ANTHROPIC: AnthropicProvider,
    Providers.GEMINI: GeminiProvider,
}


def normalize_provider(provider: str) -> str:
    """
    Canonicalize a provider identifier.

    Raises:
        ConfigurationError: If the provider is empty or not supported.
    """
    name = (provider or "").strip().lower()
    if name not in PROVIDERS:
        raise ConfigurationError(
            f"Invalid provider {provider!r}; expected one of {', '.join(sorted(PROVIDERS))}"
        )
    return name


def get_provider(provider: str) -> Type[BaseLLMProvider]:
    """Retrieves the LLM provider class registered for an identifier."""
    return PROVIDERS[normalize_provider(provider)]


def resolve_model(provider: str, settings: Settings, model_name: Optional[str] = None) -> str:
    """
    Pick the model for a provider.

    Order: explicit model, then DEFAULT_MODEL when the provider is the configured
    default provider, then the provider's built-in default.
    """
    provider = normalize_provider(provider)
    if model_name:
        return model_name
    if settings.default_model and provider == settings.default_llm_provider:
        return settings.default_model
    return DEFAULT_MODELS[provider]
