"""
Completion Models - Request/response bodies of the completion proxy and
the model catalogue.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class CompletionRequest(BaseModel):
    """A single-turn completion request."""
    message: str = Field(..., min_length=1)
    provider: str = "openrouter"
    model: Optional[str] = None  # provider default when not set


class CompletionResponse(BaseModel):
    """Assistant reply text."""
    reply: str


class ModelInfo(BaseModel):
    """A selectable language model."""
    id: str
    name: str
    description: str = ""
    provider: str


class ModelList(BaseModel):
    """Response of the model catalogue endpoint."""
    models: List[ModelInfo]
