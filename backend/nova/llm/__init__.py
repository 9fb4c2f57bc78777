"""LLM module - unified interface for the completion providers."""

from .base import LLMProvider, LLMMessage, LLMResponse
from .openai_compatible import OpenAICompatibleProvider
from .catalog import MODEL_CATALOG, DEFAULT_MODEL, FALLBACK_PROVIDER, provider_for_model
from .factory import create_llm_provider, SUPPORTED_PROVIDERS

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'LLMResponse',
    'OpenAICompatibleProvider',
    'MODEL_CATALOG',
    'DEFAULT_MODEL',
    'FALLBACK_PROVIDER',
    'provider_for_model',
    'create_llm_provider',
    'SUPPORTED_PROVIDERS',
]
