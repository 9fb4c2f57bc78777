"""
Model catalogue - the selectable models and the provider each routes to.
"""

from typing import Dict, List

from ..models import ModelInfo

DEFAULT_MODEL = "gemini-2.0-flash"

# Models without an entry are sent through OpenRouter
FALLBACK_PROVIDER = "openrouter"

MODEL_CATALOG: List[ModelInfo] = [
    ModelInfo(
        id="meta-llama/llama-3.3-8b-instruct:free",
        name="Llama 3.3 8B Instruct",
        description="Meta's latest 8B instruction model",
        provider="openrouter",
    ),
    ModelInfo(
        id="gemini-2.0-flash",
        name="Gemini 2.0 Flash",
        description="Google's fastest Gemini model",
        provider="gemini",
    ),
]

MODEL_TO_PROVIDER: Dict[str, str] = {m.id: m.provider for m in MODEL_CATALOG}


def provider_for_model(model_id: str) -> str:
    """Provider name used to route completions for ``model_id``."""
    return MODEL_TO_PROVIDER.get(model_id, FALLBACK_PROVIDER)
