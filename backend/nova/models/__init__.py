"""Models module."""

from .session import (
    ChatMessage, SessionPayload, ChatSession, SessionList,
    SessionEnvelope, SessionIdResponse, DeleteResponse,
)
from .completion import CompletionRequest, CompletionResponse, ModelInfo, ModelList

__all__ = [
    'ChatMessage', 'SessionPayload', 'ChatSession', 'SessionList',
    'SessionEnvelope', 'SessionIdResponse', 'DeleteResponse',
    'CompletionRequest', 'CompletionResponse', 'ModelInfo', 'ModelList',
]
