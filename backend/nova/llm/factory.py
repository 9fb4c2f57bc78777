"""
LLM Provider Factory - Creates the provider a completion request is routed to.
"""

from typing import Optional

from ..config import settings
from .base import LLMProvider
from .openai_compatible import OpenAICompatibleProvider

# provider name -> (default model, settings attribute holding the base url)
SUPPORTED_PROVIDERS = {
    "openrouter": ("meta-llama/llama-3.3-8b-instruct:free", "openrouter_base_url"),
    "gemini": ("gemini-2.0-flash", "gemini_base_url"),
}


def _api_key_for(provider: str) -> Optional[str]:
    return getattr(settings, f"{provider}_api_key", None)


def create_llm_provider(
    provider: str = "openrouter",
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> Optional[LLMProvider]:
    """
    Create an LLM provider instance based on configuration.

    Args:
        provider: Provider name ("openrouter" or "gemini")
        api_key: API key; read from settings when not given
        model: Model name (uses provider default if not specified)
        base_url: Custom base URL (uses the configured one if not specified)
        **kwargs: Additional provider parameters (timeout, default_temperature, ...)

    Returns:
        LLMProvider instance, or None if no api key is configured

    Raises:
        ValueError: Unknown provider name
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    api_key = api_key or _api_key_for(provider)
    if not api_key:
        return None

    default_model, base_url_setting = SUPPORTED_PROVIDERS[provider]
    params = {
        "api_key": api_key,
        "model": model or default_model,
        "base_url": base_url or getattr(settings, base_url_setting),
        "name": provider,
        "timeout": settings.completion_timeout,
        "default_temperature": settings.completion_temperature,
        "default_max_tokens": settings.completion_max_tokens,
    }
    params.update(kwargs)
    return OpenAICompatibleProvider(**params)
