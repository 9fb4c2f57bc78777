"""
Completion API endpoints - Proxy a single message to the selected model.
"""

import logging
import httpx
from fastapi import APIRouter, HTTPException, status

from ..models import CompletionRequest, CompletionResponse, ModelList
from ..llm import LLMMessage, MODEL_CATALOG, create_llm_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["completion"])


@router.post("/chat/completion", response_model=CompletionResponse)
async def complete(request: CompletionRequest):
    """
    Get a reply for one message from the requested provider and model.

    Returns:
        ``{"reply": "..."}``
    """
    try:
        provider = create_llm_provider(provider=request.provider, model=request.model)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if provider is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Provider {request.provider} is not configured"
        )

    try:
        response = await provider.chat_completion([LLMMessage.text("user", request.message)])
    except (httpx.HTTPError, KeyError, IndexError, ValueError):
        # Already logged by the provider
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Completion provider request failed"
        )

    return CompletionResponse(reply=response.content)


@router.get("/models", response_model=ModelList)
async def list_models():
    """List the selectable models and their providers."""
    return ModelList(models=MODEL_CATALOG)
